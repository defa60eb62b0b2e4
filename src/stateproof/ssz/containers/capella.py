"""
Capella fork layouts.

Capella introduced withdrawals in the execution payload and replaced the
historical_roots accumulator with historical_summaries.
"""

from ..constants import (
    EPOCHS_PER_ETH1_VOTING_PERIOD,
    EPOCHS_PER_HISTORICAL_VECTOR,
    EPOCHS_PER_SLASHINGS_VECTOR,
    HISTORICAL_ROOTS_LIMIT,
    JUSTIFICATION_BITS_LENGTH,
    MAX_ATTESTATIONS,
    MAX_ATTESTER_SLASHINGS,
    MAX_BLS_TO_EXECUTION_CHANGES,
    MAX_BYTES_PER_TRANSACTION,
    MAX_DEPOSITS,
    MAX_EXTRA_DATA_BYTES,
    MAX_PROPOSER_SLASHINGS,
    MAX_TRANSACTIONS_PER_PAYLOAD,
    MAX_VOLUNTARY_EXITS,
    MAX_WITHDRAWALS_PER_PAYLOAD,
    SLOTS_PER_EPOCH,
    SLOTS_PER_HISTORICAL_ROOT,
    VALIDATOR_REGISTRY_LIMIT,
)
from ..types import (
    Bitvector,
    ByteList,
    Bytes20,
    Bytes32,
    Bytes96,
    Container,
    List,
    UINT256,
    Vector,
    uint8,
    uint64,
)
from .beacon import (
    Attestation,
    AttesterSlashing,
    BeaconBlockHeader,
    Checkpoint,
    Deposit,
    Eth1Data,
    Fork,
    HistoricalSummary,
    LogsBloom,
    ProposerSlashing,
    SignedBLSToExecutionChange,
    SignedVoluntaryExit,
    SyncAggregate,
    SyncCommittee,
    Validator,
    Withdrawal,
)

_PAYLOAD_PREFIX = [
    ("parent_hash", Bytes32),
    ("fee_recipient", Bytes20),
    ("state_root", Bytes32),
    ("receipts_root", Bytes32),
    ("logs_bloom", LogsBloom),
    ("prev_randao", Bytes32),
    ("block_number", uint64),
    ("gas_limit", uint64),
    ("gas_used", uint64),
    ("timestamp", uint64),
    ("extra_data", ByteList(MAX_EXTRA_DATA_BYTES)),
    ("base_fee_per_gas", UINT256),
    ("block_hash", Bytes32),
]

ExecutionPayload = Container("ExecutionPayload", _PAYLOAD_PREFIX + [
    ("transactions", List(ByteList(MAX_BYTES_PER_TRANSACTION), MAX_TRANSACTIONS_PER_PAYLOAD)),
    ("withdrawals", List(Withdrawal, MAX_WITHDRAWALS_PER_PAYLOAD)),
])

ExecutionPayloadHeader = Container("ExecutionPayloadHeader", _PAYLOAD_PREFIX + [
    ("transactions_root", Bytes32),
    ("withdrawals_root", Bytes32),
])

BeaconBlockBody = Container("BeaconBlockBody", [
    ("randao_reveal", Bytes96),
    ("eth1_data", Eth1Data),
    ("graffiti", Bytes32),
    ("proposer_slashings", List(ProposerSlashing, MAX_PROPOSER_SLASHINGS)),
    ("attester_slashings", List(AttesterSlashing, MAX_ATTESTER_SLASHINGS)),
    ("attestations", List(Attestation, MAX_ATTESTATIONS)),
    ("deposits", List(Deposit, MAX_DEPOSITS)),
    ("voluntary_exits", List(SignedVoluntaryExit, MAX_VOLUNTARY_EXITS)),
    ("sync_aggregate", SyncAggregate),
    ("execution_payload", ExecutionPayload),
    ("bls_to_execution_changes", List(SignedBLSToExecutionChange, MAX_BLS_TO_EXECUTION_CHANGES)),
])


def beacon_block(body: Container) -> Container:
    """BeaconBlock wrapping a fork's body layout."""
    return Container("BeaconBlock", [
        ("slot", uint64),
        ("proposer_index", uint64),
        ("parent_root", Bytes32),
        ("state_root", Bytes32),
        ("body", body),
    ])


def signed_beacon_block(block: Container) -> Container:
    return Container("SignedBeaconBlock", [
        ("message", block),
        ("signature", Bytes96),
    ])


BeaconBlock = beacon_block(BeaconBlockBody)
SignedBeaconBlock = signed_beacon_block(BeaconBlock)

BeaconState = Container("BeaconState", [
    # Versioning
    ("genesis_time", uint64),
    ("genesis_validators_root", Bytes32),
    ("slot", uint64),
    ("fork", Fork),
    # History
    ("latest_block_header", BeaconBlockHeader),
    ("block_roots", Vector(Bytes32, SLOTS_PER_HISTORICAL_ROOT)),
    ("state_roots", Vector(Bytes32, SLOTS_PER_HISTORICAL_ROOT)),
    ("historical_roots", List(Bytes32, HISTORICAL_ROOTS_LIMIT)),
    # Eth1
    ("eth1_data", Eth1Data),
    ("eth1_data_votes", List(Eth1Data, EPOCHS_PER_ETH1_VOTING_PERIOD * SLOTS_PER_EPOCH)),
    ("eth1_deposit_index", uint64),
    # Registry
    ("validators", List(Validator, VALIDATOR_REGISTRY_LIMIT)),
    ("balances", List(uint64, VALIDATOR_REGISTRY_LIMIT)),
    # Randomness
    ("randao_mixes", Vector(Bytes32, EPOCHS_PER_HISTORICAL_VECTOR)),
    # Slashings
    ("slashings", Vector(uint64, EPOCHS_PER_SLASHINGS_VECTOR)),
    # Participation
    ("previous_epoch_participation", List(uint8, VALIDATOR_REGISTRY_LIMIT)),
    ("current_epoch_participation", List(uint8, VALIDATOR_REGISTRY_LIMIT)),
    # Finality
    ("justification_bits", Bitvector(JUSTIFICATION_BITS_LENGTH)),
    ("previous_justified_checkpoint", Checkpoint),
    ("current_justified_checkpoint", Checkpoint),
    ("finalized_checkpoint", Checkpoint),
    # Inactivity
    ("inactivity_scores", List(uint64, VALIDATOR_REGISTRY_LIMIT)),
    # Sync
    ("current_sync_committee", SyncCommittee),
    ("next_sync_committee", SyncCommittee),
    # Execution
    ("latest_execution_payload_header", ExecutionPayloadHeader),
    # Withdrawals
    ("next_withdrawal_index", uint64),
    ("next_withdrawal_validator_index", uint64),
    # Deep history valid from Capella onwards
    ("historical_summaries", List(HistoricalSummary, HISTORICAL_ROOTS_LIMIT)),
])
