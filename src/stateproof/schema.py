"""
Schema Catalog

Versioned container layouts per fork and the per-network constants that
decide which fork is active at a slot and where the historical summaries
accumulator starts. Both tables are immutable and shared by every proof
invocation.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .exceptions import UnknownNetwork, UnsupportedFork
from .ssz.constants import SLOTS_PER_EPOCH, SLOTS_PER_HISTORICAL_ROOT
from .ssz.containers import BeaconBlockHeader, HistoricalBlockRoots, HistoricalSummary, Validator
from .ssz.containers import capella, deneb, electra, fulu
from .ssz.types import Container, SSZType, TreeValue


@dataclass(frozen=True)
class ForkSchema:
    """Container layouts of one fork."""
    name: str
    beacon_state: Container
    beacon_block: Container
    beacon_block_body: Container
    execution_payload: Container
    signed_beacon_block: Container
    beacon_block_header: Container = BeaconBlockHeader
    validator: Container = Validator
    historical_summary: Container = HistoricalSummary
    historical_block_roots: SSZType = HistoricalBlockRoots


def _fork(name, module) -> ForkSchema:
    return ForkSchema(
        name=name,
        beacon_state=module.BeaconState,
        beacon_block=module.BeaconBlock,
        beacon_block_body=module.BeaconBlockBody,
        execution_payload=module.ExecutionPayload,
        signed_beacon_block=module.SignedBeaconBlock,
    )


# Ordered oldest to newest
FORKS: Dict[str, ForkSchema] = {
    "capella": _fork("capella", capella),
    "deneb": _fork("deneb", deneb),
    "electra": _fork("electra", electra),
    "fulu": _fork("fulu", fulu),
}


def get_fork(version: str) -> ForkSchema:
    """
    Look up a fork by the version tag a beacon node reports.

    Raises:
        UnsupportedFork: If the fork has no layout in the catalog
    """
    try:
        return FORKS[version.lower()]
    except (AttributeError, KeyError):
        raise UnsupportedFork(f"Unsupported fork version: {version!r}")


def fork_of(tree: TreeValue) -> Optional[ForkSchema]:
    """Fork a snapshot was decoded under, or None for an untagged tree."""
    if tree.fork is None:
        return None
    return get_fork(tree.fork)


@dataclass(frozen=True)
class NetworkConfig:
    """
    Per-network constants.

    Attributes:
        name: Network name
        ring_buffer_window: Slots held by the block_roots ring buffer
        historical_origin_offset: Accumulator period of the first
            historical_summaries entry (the Capella fork period)
        fork_schedule: (fork name, activation epoch) pairs, oldest first
    """
    name: str
    ring_buffer_window: int
    historical_origin_offset: int
    fork_schedule: Tuple[Tuple[str, int], ...]

    def fork_at_epoch(self, epoch: int) -> ForkSchema:
        active = None
        for fork_name, activation_epoch in self.fork_schedule:
            if epoch >= activation_epoch:
                active = fork_name
        if active is None:
            raise UnsupportedFork(f"No supported fork is active on {self.name} at epoch {epoch}")
        return get_fork(active)

    def fork_at_slot(self, slot: int) -> ForkSchema:
        """Fork active at ``slot``."""
        return self.fork_at_epoch(slot // SLOTS_PER_EPOCH)


NETWORKS: Dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(
        name="mainnet",
        ring_buffer_window=SLOTS_PER_HISTORICAL_ROOT,
        # CAPELLA_FORK_EPOCH * SLOTS_PER_EPOCH // SLOTS_PER_HISTORICAL_ROOT
        historical_origin_offset=758,
        fork_schedule=(
            ("capella", 194048),
            ("deneb", 269568),
            ("electra", 364032),
            ("fulu", 411392),
        ),
    ),
    "hoodi": NetworkConfig(
        name="hoodi",
        ring_buffer_window=SLOTS_PER_HISTORICAL_ROOT,
        historical_origin_offset=0,
        fork_schedule=(
            ("capella", 0),
            ("deneb", 0),
            ("electra", 2048),
            ("fulu", 50688),
        ),
    ),
}


def get_network(name: str) -> NetworkConfig:
    """
    Look up a network configuration by name.

    Raises:
        UnknownNetwork: If the network is not in the catalog
    """
    try:
        return NETWORKS[name.lower()]
    except (AttributeError, KeyError):
        raise UnknownNetwork(
            f"Unknown network {name!r}; expected one of: {', '.join(NETWORKS)}"
        )
