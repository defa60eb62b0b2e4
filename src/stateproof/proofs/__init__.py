"""
Proof composition engine.

- resolver: proof types, parameters and hop lists
- composer: runs hops through the Merkle primitive into one proof
- consistency: cross-checks externally sourced roots
- artifact: the immutable proof result and its serialized form
"""

from .artifact import ProofArtifact
from .composer import ProofComposer
from .consistency import ConsistencyValidator, RootMismatch
from .resolver import Hop, PathResolver, ProofParams, ProofType, WithdrawalRoute, hop_index

__all__ = [
    'ProofArtifact',
    'ProofComposer',
    'ConsistencyValidator',
    'RootMismatch',
    'Hop',
    'PathResolver',
    'ProofParams',
    'ProofType',
    'WithdrawalRoute',
    'hop_index',
]
