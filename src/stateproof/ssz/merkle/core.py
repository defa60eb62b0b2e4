"""
Core Merkle Tree Functions for SSZ

This module implements chunk-level merkleization. SSZ values are turned into
32-byte chunks and hashed as a binary tree padded with zero leaves up to a
fixed, power-of-two capacity. Capacities are huge for some lists (2^40
validators), so padding is never materialized: only the "real" part of each
level is hashed and the missing right-hand siblings are taken from the
precomputed ZERO_HASHES.

SSZ Merkleization Rules:
- Basic types are packed into chunks
- Vectors are merkleized up to their fixed chunk capacity
- Lists are merkleized up to their limit and mixed with their length
- Containers have their field roots merkleized

References:
- SSZ Specification: https://github.com/ethereum/consensus-specs/blob/dev/ssz/simple-serialize.md
"""

from hashlib import sha256
from typing import List, Sequence

from ..constants import BYTES_PER_CHUNK, ZERO_HASHES


def hash_pair(left: bytes, right: bytes) -> bytes:
    """SHA256 of the concatenation of two 32-byte nodes."""
    return sha256(left + right).digest()


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def tree_depth(limit: int) -> int:
    """
    Depth of the tree holding ``limit`` leaves once padded to a power of two.

    Examples:
        >>> tree_depth(8)
        3
        >>> tree_depth(5)
        3
        >>> tree_depth(1)
        0
    """
    return (next_power_of_two(limit)).bit_length() - 1


def pack_bytes(data: bytes) -> List[bytes]:
    """
    Split serialized bytes into 32-byte chunks, right-padding the last one.

    Examples:
        >>> pack_bytes(b'\\x01' * 40)  # two chunks, second one zero padded
    """
    if len(data) % BYTES_PER_CHUNK:
        data += b"\x00" * (BYTES_PER_CHUNK - len(data) % BYTES_PER_CHUNK)
    return [data[i : i + BYTES_PER_CHUNK] for i in range(0, len(data), BYTES_PER_CHUNK)]


def build_layers(chunks: Sequence[bytes], depth: int) -> List[List[bytes]]:
    """
    Build the real nodes of every level of a fixed-depth tree.

    ``layers[0]`` are the chunks, ``layers[depth]`` holds the root. Level k
    only stores the ceil(n / 2^k) nodes that have real descendants; any
    node beyond them equals ZERO_HASHES[k].

    Args:
        chunks: 32-byte leaf chunks (the first len(chunks) leaves)
        depth: Depth of the padded tree (capacity = 2^depth)

    Returns:
        List of depth + 1 levels, from leaves to root

    Raises:
        ValueError: If there are more chunks than the tree can hold
    """
    if len(chunks) > (1 << depth):
        raise ValueError(f"Too many leaves: {len(chunks)} > {1 << depth}")

    layers = [list(chunks)]
    current = layers[0]
    for level in range(depth):
        parents = []
        for i in range(0, len(current), 2):
            left = current[i]
            right = current[i + 1] if i + 1 < len(current) else ZERO_HASHES[level]
            parents.append(hash_pair(left, right))
        layers.append(parents)
        current = parents
    return layers


def layer_node(layers: List[List[bytes]], level: int, index: int) -> bytes:
    """Node ``index`` of ``level``, falling back to the zero subtree root."""
    layer = layers[level]
    return layer[index] if index < len(layer) else ZERO_HASHES[level]


def merkleize(chunks: Sequence[bytes], limit: int) -> bytes:
    """
    Merkle root of ``chunks`` in a tree of exactly next_pow2(limit) leaves.

    Args:
        chunks: List of 32-byte chunks (actual data)
        limit: Chunk capacity of the type

    Returns:
        32-byte merkle root

    Examples:
        >>> merkleize([], 1024) == ZERO_HASHES[10]
        True
    """
    depth = tree_depth(limit)
    if not chunks:
        return ZERO_HASHES[depth]
    return layer_node(build_layers(chunks, depth), depth, 0)


def mix_in_length(root: bytes, length: int) -> bytes:
    """Mix a list length into its data root (SSZ list requirement)."""
    return hash_pair(root, length_chunk(length))


def length_chunk(length: int) -> bytes:
    """The right-hand leaf of a list root: its length as uint256 little-endian."""
    return length.to_bytes(BYTES_PER_CHUNK, "little")
