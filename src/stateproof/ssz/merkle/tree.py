"""
SSZ Merkle Tree Primitive

``MerklePrimitive`` is the interface the proof composer talks to: roots,
single-leaf proofs, node lookup and path-to-gindex translation over
materialized SSZ values. ``SSZMerkleTree`` is the default implementation,
built on the fixed-capacity layering in ``core`` so that a proof into a
2^40-limit validator list only hashes the real validators.

Subtree roots are memoized for the lifetime of one instance. Instances are
meant to live for a single proof invocation, over values that are not
mutated while the instance is alive.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, Tuple

from .core import build_layers, layer_node, length_chunk, merkleize
from ..gindex import gindex_depth
from ..types import PathElement, SSZType, TreeValue
from ...exceptions import SchemaError

logger = logging.getLogger(__name__)


class MerklePrimitive(ABC):
    """Merkle operations the proof composer relies on."""

    @abstractmethod
    def hash_tree_root(self, tree: TreeValue) -> bytes:
        """Root of a materialized tree."""

    @abstractmethod
    def prove_single(self, tree: TreeValue, gindex: int) -> List[bytes]:
        """Sibling witnesses of the node at ``gindex``, ordered leaf to root."""

    @abstractmethod
    def get_node(self, tree: TreeValue, gindex: int) -> bytes:
        """Node at ``gindex`` inside the tree."""

    @abstractmethod
    def path_to_index(self, kind: SSZType, path: Sequence[PathElement]) -> int:
        """Relative gindex of ``path`` inside a tree of type ``kind``."""


class SSZMerkleTree(MerklePrimitive):
    """
    Merkle primitive over SSZ type descriptors.

    Example:
        >>> tree = SSZMerkleTree()
        >>> header = TreeValue(BeaconBlockHeader, BeaconBlockHeader.default())
        >>> witnesses = tree.prove_single(header, 11)
        >>> len(witnesses)
        3
    """

    def __init__(self):
        self._roots: Dict[Tuple[int, int], Tuple[Any, bytes]] = {}

    def hash_tree_root(self, tree: TreeValue) -> bytes:
        return self.root(tree.kind, tree.value)

    def root(self, kind: SSZType, value: Any) -> bytes:
        """Memoized hash tree root of ``value`` under ``kind``."""
        if kind.is_basic:
            return kind.hash_tree_root(value)
        key = (id(kind), id(value))
        cached = self._roots.get(key)
        if cached is not None:
            return cached[1]
        root = kind.hash_tree_root(value, root_of=self.root)
        # Holding the value keeps its id from being reused while memoized
        self._roots[key] = (value, root)
        return root

    def prove(self, tree: TreeValue, gindex: int) -> Tuple[bytes, List[bytes]]:
        """
        Node at ``gindex`` together with its witnesses (leaf to root).

        Raises:
            SchemaError: If the gindex descends into a packed chunk or a
                padding node that has no value behind it
            IndexOutOfRange: If it addresses an element past a list's length
        """
        bits = bin(gindex)[3:] if gindex_depth(gindex) else ""
        node, witnesses = self._descend(tree.kind, tree.value, bits)
        logger.debug(f"Proved gindex {gindex} in {tree.kind.name} with {len(witnesses)} witnesses")
        return node, witnesses

    def prove_single(self, tree: TreeValue, gindex: int) -> List[bytes]:
        return self.prove(tree, gindex)[1]

    def get_node(self, tree: TreeValue, gindex: int) -> bytes:
        return self.prove(tree, gindex)[0]

    def path_to_index(self, kind: SSZType, path: Sequence[PathElement]) -> int:
        return kind.get_path_info(path)[0]

    def _data_root(self, kind: SSZType, value: Any) -> bytes:
        return merkleize(kind.chunks(value, self.root), kind.limit_chunks())

    def _descend(self, kind: SSZType, value: Any, bits: str) -> Tuple[bytes, List[bytes]]:
        if not bits:
            return self.root(kind, value), []

        if not kind.has_length_mixin:
            return self._descend_data(kind, value, bits)

        length = length_chunk(kind.length(value))
        if bits[0] == "1":
            if len(bits) > 1:
                raise SchemaError(f"The length node of {kind.name} has no children")
            return length, [self._data_root(kind, value)]
        node, witnesses = self._descend_data(kind, value, bits[1:])
        return node, witnesses + [length]

    def _descend_data(self, kind: SSZType, value: Any, bits: str) -> Tuple[bytes, List[bytes]]:
        depth = kind.tree_depth()
        if not bits:
            return self._data_root(kind, value), []

        take = min(depth, len(bits))
        index = int(bits[:take], 2) if take else 0
        level = depth - take
        layers = build_layers(kind.chunks(value, self.root), depth)

        siblings = []
        position = index
        for lvl in range(level, depth):
            siblings.append(layer_node(layers, lvl, position ^ 1))
            position //= 2

        if take == len(bits):
            return layer_node(layers, level, index), siblings

        child_kind, child_value = kind.child(value, index)
        node, inner = self._descend(child_kind, child_value, bits[take:])
        return node, inner + siblings
