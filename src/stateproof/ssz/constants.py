"""
SSZ Constants and Limits

This module contains the constants and list/vector limits used by the SSZ
container definitions for the Ethereum beacon chain (mainnet preset).

References:
- Ethereum Consensus Specification: https://github.com/ethereum/consensus-specs
- SSZ Specification: https://github.com/ethereum/consensus-specs/blob/dev/ssz/simple-serialize.md
"""

from hashlib import sha256

# ====================
# Chunking
# ====================

BYTES_PER_CHUNK = 32
BITS_PER_CHUNK = BYTES_PER_CHUNK * 8

# ====================
# Time
# ====================

SLOTS_PER_EPOCH = 32

# Number of slots held in the block_roots / state_roots ring buffers
SLOTS_PER_HISTORICAL_ROOT = 8192

EPOCHS_PER_HISTORICAL_VECTOR = 65536
EPOCHS_PER_SLASHINGS_VECTOR = 8192
EPOCHS_PER_ETH1_VOTING_PERIOD = 64
MIN_SEED_LOOKAHEAD = 1

# Sentinel for "not yet set" epochs (exit_epoch, withdrawable_epoch, ...)
FAR_FUTURE_EPOCH = 2**64 - 1

# ====================
# State list limits
# ====================

HISTORICAL_ROOTS_LIMIT = 2**24
VALIDATOR_REGISTRY_LIMIT = 2**40
PENDING_DEPOSITS_LIMIT = 2**27
PENDING_PARTIAL_WITHDRAWALS_LIMIT = 2**27
PENDING_CONSOLIDATIONS_LIMIT = 2**18

SYNC_COMMITTEE_SIZE = 512
JUSTIFICATION_BITS_LENGTH = 4

# ====================
# Block body limits
# ====================

MAX_PROPOSER_SLASHINGS = 16
MAX_ATTESTER_SLASHINGS = 2
MAX_ATTESTATIONS = 128
MAX_DEPOSITS = 16
MAX_VOLUNTARY_EXITS = 16
MAX_BLS_TO_EXECUTION_CHANGES = 16
MAX_BLOB_COMMITMENTS_PER_BLOCK = 4096
MAX_VALIDATORS_PER_COMMITTEE = 2048
MAX_COMMITTEES_PER_SLOT = 64
DEPOSIT_CONTRACT_TREE_DEPTH = 32

# Electra
MAX_ATTESTER_SLASHINGS_ELECTRA = 1
MAX_ATTESTATIONS_ELECTRA = 8
MAX_DEPOSIT_REQUESTS_PER_PAYLOAD = 8192
MAX_WITHDRAWAL_REQUESTS_PER_PAYLOAD = 16
MAX_CONSOLIDATION_REQUESTS_PER_PAYLOAD = 2

# ====================
# Execution layer
# ====================

BYTES_PER_LOGS_BLOOM = 256
MAX_EXTRA_DATA_BYTES = 32
MAX_BYTES_PER_TRANSACTION = 2**30
MAX_TRANSACTIONS_PER_PAYLOAD = 2**20
MAX_WITHDRAWALS_PER_PAYLOAD = 16

# ====================
# Cryptographic Constants
# ====================

# Precomputed zero node hashes for Merkle tree padding.
# Each level i contains: SHA256(ZERO_HASHES[i-1] || ZERO_HASHES[i-1])
ZERO_HASHES = [b"\0" * 32]
for _ in range(64):
    ZERO_HASHES.append(sha256(ZERO_HASHES[-1] + ZERO_HASHES[-1]).digest())
