"""
Electra fork layouts.

Electra moves the committee index out of AttestationData into
``committee_bits``, adds execution-layer triggered requests to the block
body and nine balance-churn / pending-queue fields to the state. The state
grows past 32 fields, so every state gindex gains one bit of depth.
"""

from ..constants import (
    MAX_ATTESTATIONS_ELECTRA,
    MAX_ATTESTER_SLASHINGS_ELECTRA,
    MAX_COMMITTEES_PER_SLOT,
    MAX_CONSOLIDATION_REQUESTS_PER_PAYLOAD,
    MAX_DEPOSIT_REQUESTS_PER_PAYLOAD,
    MAX_VALIDATORS_PER_COMMITTEE,
    MAX_WITHDRAWAL_REQUESTS_PER_PAYLOAD,
    PENDING_CONSOLIDATIONS_LIMIT,
    PENDING_DEPOSITS_LIMIT,
    PENDING_PARTIAL_WITHDRAWALS_LIMIT,
)
from ..types import Bitlist, Bitvector, Bytes20, Bytes32, Bytes48, Bytes96, Container, List, uint64
from . import capella, deneb
from .beacon import AttestationData

# Unchanged since Deneb
ExecutionPayload = deneb.ExecutionPayload
ExecutionPayloadHeader = deneb.ExecutionPayloadHeader

_MAX_ATTESTING = MAX_VALIDATORS_PER_COMMITTEE * MAX_COMMITTEES_PER_SLOT

IndexedAttestation = Container("IndexedAttestation", [
    ("attesting_indices", List(uint64, _MAX_ATTESTING)),
    ("data", AttestationData),
    ("signature", Bytes96),
])

AttesterSlashing = Container("AttesterSlashing", [
    ("attestation_1", IndexedAttestation),
    ("attestation_2", IndexedAttestation),
])

Attestation = Container("Attestation", [
    ("aggregation_bits", Bitlist(_MAX_ATTESTING)),
    ("data", AttestationData),
    ("signature", Bytes96),
    ("committee_bits", Bitvector(MAX_COMMITTEES_PER_SLOT)),
])

DepositRequest = Container("DepositRequest", [
    ("pubkey", Bytes48),
    ("withdrawal_credentials", Bytes32),
    ("amount", uint64),
    ("signature", Bytes96),
    ("index", uint64),
])

WithdrawalRequest = Container("WithdrawalRequest", [
    ("source_address", Bytes20),
    ("validator_pubkey", Bytes48),
    ("amount", uint64),
])

ConsolidationRequest = Container("ConsolidationRequest", [
    ("source_address", Bytes20),
    ("source_pubkey", Bytes48),
    ("target_pubkey", Bytes48),
])

ExecutionRequests = Container("ExecutionRequests", [
    ("deposits", List(DepositRequest, MAX_DEPOSIT_REQUESTS_PER_PAYLOAD)),
    ("withdrawals", List(WithdrawalRequest, MAX_WITHDRAWAL_REQUESTS_PER_PAYLOAD)),
    ("consolidations", List(ConsolidationRequest, MAX_CONSOLIDATION_REQUESTS_PER_PAYLOAD)),
])

PendingDeposit = Container("PendingDeposit", [
    ("pubkey", Bytes48),
    ("withdrawal_credentials", Bytes32),
    ("amount", uint64),
    ("signature", Bytes96),
    ("slot", uint64),
])

PendingPartialWithdrawal = Container("PendingPartialWithdrawal", [
    ("validator_index", uint64),
    ("amount", uint64),
    ("withdrawable_epoch", uint64),
])

PendingConsolidation = Container("PendingConsolidation", [
    ("source_index", uint64),
    ("target_index", uint64),
])

BeaconBlockBody = deneb.BeaconBlockBody.replace(
    "BeaconBlockBody",
    attester_slashings=List(AttesterSlashing, MAX_ATTESTER_SLASHINGS_ELECTRA),
    attestations=List(Attestation, MAX_ATTESTATIONS_ELECTRA),
).extend("BeaconBlockBody", [
    ("execution_requests", ExecutionRequests),
])

BeaconBlock = capella.beacon_block(BeaconBlockBody)
SignedBeaconBlock = capella.signed_beacon_block(BeaconBlock)

BeaconState = deneb.BeaconState.extend("BeaconState", [
    ("deposit_requests_start_index", uint64),
    ("deposit_balance_to_consume", uint64),
    ("exit_balance_to_consume", uint64),
    ("earliest_exit_epoch", uint64),
    ("consolidation_balance_to_consume", uint64),
    ("earliest_consolidation_epoch", uint64),
    ("pending_deposits", List(PendingDeposit, PENDING_DEPOSITS_LIMIT)),
    ("pending_partial_withdrawals", List(PendingPartialWithdrawal, PENDING_PARTIAL_WITHDRAWALS_LIMIT)),
    ("pending_consolidations", List(PendingConsolidation, PENDING_CONSOLIDATIONS_LIMIT)),
])
