"""
Merkle tree construction and proof helpers for SSZ values.

The ``SSZMerkleTree`` primitive lives in ``stateproof.ssz.merkle.tree``; it
is not re-exported here because it depends on the type descriptors, which
themselves build on the chunk-level functions below.
"""

from .core import (
    hash_pair,
    next_power_of_two,
    tree_depth,
    pack_bytes,
    build_layers,
    layer_node,
    merkleize,
    mix_in_length,
    length_chunk,
)
from .proof import compute_root_from_proof, verify_merkle_proof

__all__ = [
    'hash_pair',
    'next_power_of_two',
    'tree_depth',
    'pack_bytes',
    'build_layers',
    'layer_node',
    'merkleize',
    'mix_in_length',
    'length_chunk',
    'compute_root_from_proof',
    'verify_merkle_proof',
]
