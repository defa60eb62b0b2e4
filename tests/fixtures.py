"""
Shared builders for the test suites.

States and blocks are built from the fork layouts' default values with just
the fields a test cares about filled in, so roots are real SSZ roots while
the fixtures stay small.
"""

import os
import sys

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from stateproof.api.data_source import DataSource
from stateproof.exceptions import NotFound
from stateproof.schema import ForkSchema, get_network
from stateproof.ssz.constants import FAR_FUTURE_EPOCH
from stateproof.ssz.containers import HistoricalBlockRoots
from stateproof.ssz.types import TreeValue


def make_validator(index, withdrawable_epoch=FAR_FUTURE_EPOCH):
    return {
        "pubkey": bytes([index % 256 + 1]) * 48,
        "withdrawal_credentials": b"\x01" + b"\x00" * 11 + bytes([index % 256]) * 20,
        "effective_balance": 32_000_000_000,
        "slashed": False,
        "activation_eligibility_epoch": 0,
        "activation_epoch": 0,
        "exit_epoch": FAR_FUTURE_EPOCH,
        "withdrawable_epoch": withdrawable_epoch,
    }


def make_withdrawal(index, validator_index=None, amount=1_000_000):
    validator_index = index if validator_index is None else validator_index
    return {
        "index": index,
        "validator_index": validator_index,
        "address": bytes([validator_index % 256]) * 20,
        "amount": amount,
    }


def make_state(fork: ForkSchema, slot, validators=(), historical_summaries=(), block_roots=None):
    value = fork.beacon_state.default()
    value["slot"] = slot
    value["genesis_time"] = 1606824023
    value["latest_block_header"]["slot"] = slot
    value["latest_block_header"]["proposer_index"] = 7
    value["latest_block_header"]["parent_root"] = b"\x11" * 32
    value["latest_block_header"]["body_root"] = b"\x22" * 32
    value["validators"] = list(validators)
    value["balances"] = [v["effective_balance"] for v in value["validators"]]
    value["historical_summaries"] = list(historical_summaries)
    if block_roots is not None:
        value["block_roots"] = list(block_roots)
    return TreeValue(fork.beacon_state, value, fork.name)


def make_block(fork: ForkSchema, slot, withdrawals=()):
    value = fork.beacon_block.default()
    value["slot"] = slot
    value["proposer_index"] = 3
    value["parent_root"] = b"\x33" * 32
    value["state_root"] = b"\x44" * 32
    value["body"]["graffiti"] = b"stateproof".ljust(32, b"\x00")
    value["body"]["execution_payload"]["block_number"] = slot
    value["body"]["execution_payload"]["withdrawals"] = list(withdrawals)
    return TreeValue(fork.beacon_block, value, fork.name)


class FakeDataSource(DataSource):
    """In-memory data source keyed by slot."""

    def __init__(self, states=(), blocks=()):
        self.states = {tree.value["slot"]: tree for tree in states}
        self.blocks = {tree.value["slot"]: tree for tree in blocks}
        self.requests = []

    def get_state(self, identifier):
        self.requests.append(("state", identifier))
        return self._lookup(self.states, identifier, "state")

    def get_block(self, identifier):
        self.requests.append(("block", identifier))
        return self._lookup(self.blocks, identifier, "block")

    @staticmethod
    def _lookup(trees, identifier, what):
        if identifier == "head":
            return trees[max(trees)]
        if identifier not in trees:
            raise NotFound(f"No {what} at {identifier}")
        return trees[identifier]


def recent_withdrawal_source(network_name="hoodi", proof_slot=100_000, withdrawal_slot=99_000,
                             withdrawal_count=4, block_root_override=None):
    """
    Proof state whose block_roots commits to a block carrying withdrawals.

    Returns:
        (source, block) tuple
    """
    network = get_network(network_name)
    block = make_block(network.fork_at_slot(withdrawal_slot), withdrawal_slot,
                       [make_withdrawal(i) for i in range(withdrawal_count)])

    fork = network.fork_at_slot(proof_slot)
    state = make_state(fork, proof_slot, validators=[make_validator(i) for i in range(4)])
    roots = list(state.value["block_roots"])
    roots[withdrawal_slot % network.ring_buffer_window] = block_root_override or block.hash_tree_root()
    state.value["block_roots"] = roots
    return FakeDataSource(states=[state], blocks=[block]), block


def historical_withdrawal_source(network_name="mainnet", proof_slot=10_000_000, withdrawal_slot=9_000_000,
                                 withdrawal_count=3, block_root_override=None):
    """
    Proof state, period boundary state and withdrawal block wired together
    through historical_summaries.

    Returns:
        (source, block, boundary_state) tuple
    """
    network = get_network(network_name)
    window = network.ring_buffer_window

    block = make_block(network.fork_at_slot(withdrawal_slot), withdrawal_slot,
                       [make_withdrawal(i, amount=(i + 1) * 1000) for i in range(withdrawal_count)])

    boundary_slot = (withdrawal_slot // window + 1) * window
    roots = [bytes([i % 251 + 1]) * 32 for i in range(window)]
    roots[withdrawal_slot % window] = block_root_override or block.hash_tree_root()
    boundary = make_state(network.fork_at_slot(boundary_slot), boundary_slot, block_roots=roots)

    entry = withdrawal_slot // window - network.historical_origin_offset
    summaries = [
        {"block_summary_root": bytes([i % 256]) * 32, "state_summary_root": bytes([(i + 1) % 256]) * 32}
        for i in range(entry + 2)
    ]
    summaries[entry] = {
        "block_summary_root": HistoricalBlockRoots.hash_tree_root(roots),
        "state_summary_root": b"\x55" * 32,
    }
    state = make_state(network.fork_at_slot(proof_slot), proof_slot,
                       validators=[make_validator(i) for i in range(2)], historical_summaries=summaries)
    return FakeDataSource(states=[state, boundary], blocks=[block]), block, boundary
