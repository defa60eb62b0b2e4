"""
Beacon Chain Data Structures

Containers shared by every supported fork (Capella onwards). Fork-specific
layouts of the block body, execution payload and state are built on top of
these in the per-fork modules.
"""

from ..constants import (
    BYTES_PER_LOGS_BLOOM,
    DEPOSIT_CONTRACT_TREE_DEPTH,
    MAX_VALIDATORS_PER_COMMITTEE,
    SLOTS_PER_HISTORICAL_ROOT,
    SYNC_COMMITTEE_SIZE,
)
from ..types import (
    Bitlist,
    Bitvector,
    ByteVector,
    Bytes4,
    Bytes20,
    Bytes32,
    Bytes48,
    Bytes96,
    Container,
    List,
    Vector,
    boolean,
    uint64,
)

Fork = Container("Fork", [
    ("previous_version", Bytes4),
    ("current_version", Bytes4),
    ("epoch", uint64),
])

Checkpoint = Container("Checkpoint", [
    ("epoch", uint64),
    ("root", Bytes32),
])

BeaconBlockHeader = Container("BeaconBlockHeader", [
    ("slot", uint64),
    ("proposer_index", uint64),
    ("parent_root", Bytes32),
    ("state_root", Bytes32),
    ("body_root", Bytes32),
])

SignedBeaconBlockHeader = Container("SignedBeaconBlockHeader", [
    ("message", BeaconBlockHeader),
    ("signature", Bytes96),
])

Eth1Data = Container("Eth1Data", [
    ("deposit_root", Bytes32),
    ("deposit_count", uint64),
    ("block_hash", Bytes32),
])

Validator = Container("Validator", [
    ("pubkey", Bytes48),
    ("withdrawal_credentials", Bytes32),
    ("effective_balance", uint64),
    ("slashed", boolean),
    ("activation_eligibility_epoch", uint64),
    ("activation_epoch", uint64),
    ("exit_epoch", uint64),
    ("withdrawable_epoch", uint64),
])

AttestationData = Container("AttestationData", [
    ("slot", uint64),
    ("index", uint64),
    ("beacon_block_root", Bytes32),
    ("source", Checkpoint),
    ("target", Checkpoint),
])

IndexedAttestation = Container("IndexedAttestation", [
    ("attesting_indices", List(uint64, MAX_VALIDATORS_PER_COMMITTEE)),
    ("data", AttestationData),
    ("signature", Bytes96),
])

Attestation = Container("Attestation", [
    ("aggregation_bits", Bitlist(MAX_VALIDATORS_PER_COMMITTEE)),
    ("data", AttestationData),
    ("signature", Bytes96),
])

ProposerSlashing = Container("ProposerSlashing", [
    ("signed_header_1", SignedBeaconBlockHeader),
    ("signed_header_2", SignedBeaconBlockHeader),
])

AttesterSlashing = Container("AttesterSlashing", [
    ("attestation_1", IndexedAttestation),
    ("attestation_2", IndexedAttestation),
])

DepositData = Container("DepositData", [
    ("pubkey", Bytes48),
    ("withdrawal_credentials", Bytes32),
    ("amount", uint64),
    ("signature", Bytes96),
])

Deposit = Container("Deposit", [
    ("proof", Vector(Bytes32, DEPOSIT_CONTRACT_TREE_DEPTH + 1)),
    ("data", DepositData),
])

VoluntaryExit = Container("VoluntaryExit", [
    ("epoch", uint64),
    ("validator_index", uint64),
])

SignedVoluntaryExit = Container("SignedVoluntaryExit", [
    ("message", VoluntaryExit),
    ("signature", Bytes96),
])

SyncAggregate = Container("SyncAggregate", [
    ("sync_committee_bits", Bitvector(SYNC_COMMITTEE_SIZE)),
    ("sync_committee_signature", Bytes96),
])

SyncCommittee = Container("SyncCommittee", [
    ("pubkeys", Vector(Bytes48, SYNC_COMMITTEE_SIZE)),
    ("aggregate_pubkey", Bytes48),
])

Withdrawal = Container("Withdrawal", [
    ("index", uint64),
    ("validator_index", uint64),
    ("address", Bytes20),
    ("amount", uint64),
])

BLSToExecutionChange = Container("BLSToExecutionChange", [
    ("validator_index", uint64),
    ("from_bls_pubkey", Bytes48),
    ("to_execution_address", Bytes20),
])

SignedBLSToExecutionChange = Container("SignedBLSToExecutionChange", [
    ("message", BLSToExecutionChange),
    ("signature", Bytes96),
])

HistoricalSummary = Container("HistoricalSummary", [
    ("block_summary_root", Bytes32),
    ("state_summary_root", Bytes32),
])

# block_roots of a state at a period boundary; its root is the
# block_summary_root of the matching HistoricalSummary
HistoricalBlockRoots = Vector(Bytes32, SLOTS_PER_HISTORICAL_ROOT)

LogsBloom = ByteVector(BYTES_PER_LOGS_BLOOM)
