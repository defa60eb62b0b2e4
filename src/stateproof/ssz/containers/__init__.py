"""
SSZ Containers Package

Beacon chain container layouts, one module per fork. Every fork module
exposes the same names (``BeaconState``, ``BeaconBlock``,
``BeaconBlockBody``, ``ExecutionPayload``, ``ExecutionPayloadHeader``,
``SignedBeaconBlock``) so the schema catalog can treat them uniformly.
"""

from . import capella, deneb, electra, fulu
from .beacon import (
    BeaconBlockHeader,
    Checkpoint,
    Eth1Data,
    Fork,
    HistoricalBlockRoots,
    HistoricalSummary,
    SyncCommittee,
    Validator,
    Withdrawal,
)

__all__ = [
    # Fork modules
    'capella',
    'deneb',
    'electra',
    'fulu',

    # Fork-independent containers
    'BeaconBlockHeader',
    'Checkpoint',
    'Eth1Data',
    'Fork',
    'HistoricalBlockRoots',
    'HistoricalSummary',
    'SyncCommittee',
    'Validator',
    'Withdrawal',
]
