"""
Generalized Index Algebra

A generalized index (gindex) addresses a node of a binary Merkle tree: the
root is 1 and every step down appends a bit, 0 for the left child and 1 for
the right child. Its bit length is therefore the node depth plus one, the
leading 1 acting as the root sentinel.

When trees are nested (a container field whose value is itself the root of
another tree) the index of an inner node relative to the outer root is the
concatenation of the per-tree indices, outer first.

References:
- https://github.com/ethereum/consensus-specs/blob/dev/ssz/merkle-proofs.md
"""

from typing import Iterable

from ..exceptions import InvalidOffset, SchemaError


def _check(gindex: int) -> None:
    if not isinstance(gindex, int) or isinstance(gindex, bool) or gindex < 1:
        raise SchemaError(f"Invalid generalized index: {gindex!r}")


def gindex_depth(gindex: int) -> int:
    """Number of edges between the root and the node at ``gindex``."""
    _check(gindex)
    return gindex.bit_length() - 1


def gindex_subtree_index(gindex: int) -> int:
    """Position of the node among the nodes of its depth (sentinel stripped)."""
    return gindex ^ (1 << gindex_depth(gindex))


def gindex_to_bits(gindex: int) -> str:
    """Render a gindex the way verifier contracts document it, e.g. ``0b1011``."""
    _check(gindex)
    return f"0b{gindex:b}"


def concat_gindices(outer: int, inner: int) -> int:
    """
    Address ``inner`` (relative to a subtree) from the root above ``outer``.

    The outer index is shifted left by the inner depth and the inner index,
    with its sentinel bit stripped, is OR-ed in:

        concat(outer, inner) = (outer << depth(inner)) | (inner & ~highbit(inner))

    Examples:
        >>> concat_gindices(11, 66)   # header.state_root -> state.slot
        706
        >>> concat_gindices(5, 1)
        5
    """
    depth = gindex_depth(inner)
    _check(outer)
    return (outer << depth) | (inner ^ (1 << depth))


def concat_gindices_list(gindices: Iterable[int]) -> int:
    """
    Fold a chain of per-tree indices, ordered outer to inner, into one index.

    The operation is associative, so the fold direction does not matter as
    long as the chain order is kept.
    """
    combined = 1
    for gindex in gindices:
        combined = concat_gindices(combined, gindex)
    return combined


def select_field(arity: int, offset: int) -> int:
    """
    Relative gindex of field ``offset`` in a fixed-arity record.

    The record's leaves are padded to the next power of two, so the field
    sits ``ceil(log2(arity))`` levels down. Concatenating the result under a
    record's own gindex shifts that index left by the address width and ORs
    in the binary offset, without a schema lookup.

    Args:
        arity: Number of fields (or addressable subtrees) in the record
        offset: 0-based position of the target

    Raises:
        InvalidOffset: If the offset is not addressable in the record

    Examples:
        >>> select_field(8, 7)   # Validator.withdrawable_epoch
        15
        >>> select_field(4, 0)   # Validator pubkey/withdrawal_credentials branch
        4
    """
    if arity < 1:
        raise InvalidOffset(f"Record arity must be positive, got {arity}")
    if offset < 0 or offset >= arity:
        raise InvalidOffset(f"Field offset {offset} not addressable in a record of {arity} fields")
    depth = (arity - 1).bit_length()
    return (1 << depth) | offset
