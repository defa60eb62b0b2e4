"""
SSZ (Simple Serialize) Library for Beacon Chain Proofs

This package provides the SSZ machinery the proof composer runs on:

- gindex: Generalized index algebra (concatenation, field selection)
- types: Type descriptors and JSON decoding of beacon API values
- merkle: Merkleization, single-leaf proofs and the Merkle primitive
- containers: Per-fork beacon chain container layouts
- constants: Preset constants and precomputed zero hashes

Example:
    >>> from stateproof.ssz import containers, SSZMerkleTree, TreeValue
    >>> header = containers.BeaconBlockHeader
    >>> header.get_path_info(["state_root"])[0]
    11
"""

from .constants import FAR_FUTURE_EPOCH, SLOTS_PER_EPOCH, SLOTS_PER_HISTORICAL_ROOT, ZERO_HASHES
from .gindex import (
    concat_gindices,
    concat_gindices_list,
    gindex_depth,
    gindex_subtree_index,
    gindex_to_bits,
    select_field,
)
from .types import (
    Bitlist,
    Bitvector,
    Boolean,
    ByteList,
    ByteVector,
    Container,
    List,
    SSZType,
    TreeValue,
    Uint,
    Vector,
)
from .merkle import compute_root_from_proof, verify_merkle_proof
from .merkle.tree import MerklePrimitive, SSZMerkleTree
from . import containers

__all__ = [
    # Constants
    'FAR_FUTURE_EPOCH',
    'SLOTS_PER_EPOCH',
    'SLOTS_PER_HISTORICAL_ROOT',
    'ZERO_HASHES',

    # Generalized indices
    'concat_gindices',
    'concat_gindices_list',
    'gindex_depth',
    'gindex_subtree_index',
    'gindex_to_bits',
    'select_field',

    # Types
    'Bitlist',
    'Bitvector',
    'Boolean',
    'ByteList',
    'ByteVector',
    'Container',
    'List',
    'SSZType',
    'TreeValue',
    'Uint',
    'Vector',

    # Merkle
    'compute_root_from_proof',
    'verify_merkle_proof',
    'MerklePrimitive',
    'SSZMerkleTree',

    'containers',
]
