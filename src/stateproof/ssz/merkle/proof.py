"""
Merkle Proof Generation and Verification

A single-leaf proof is the list of sibling nodes met while walking from the
leaf up to the root, ordered leaf to root. The leaf position is given by a
generalized index: at each level the lowest remaining bit tells whether the
current node is a right (1) or left (0) child.
"""

from typing import Sequence

from .core import hash_pair
from ..gindex import gindex_depth


def compute_root_from_proof(leaf: bytes, witnesses: Sequence[bytes], gindex: int) -> bytes:
    """
    Fold a leaf and its witnesses back up to the root.

    Raises:
        ValueError: If the number of witnesses differs from the gindex depth
    """
    if len(witnesses) != gindex_depth(gindex):
        raise ValueError(
            f"Proof for gindex {gindex} needs {gindex_depth(gindex)} witnesses, got {len(witnesses)}"
        )

    node = leaf
    for sibling in witnesses:
        if gindex & 1:
            node = hash_pair(sibling, node)
        else:
            node = hash_pair(node, sibling)
        gindex >>= 1
    return node


def verify_merkle_proof(leaf: bytes, witnesses: Sequence[bytes], gindex: int, root: bytes) -> bool:
    """
    Verify a single-leaf Merkle proof against an expected root.

    Examples:
        >>> verify_merkle_proof(ZERO_HASHES[0], [ZERO_HASHES[0]], 2, ZERO_HASHES[1])
        True
    """
    try:
        return compute_root_from_proof(leaf, witnesses, gindex) == root
    except ValueError:
        return False
