"""
Consistency Validator

Hops whose source tree was fetched on its own (a block by slot number, the
block roots of a historical boundary state) are not derived from the proof
state, so nothing guarantees they hang below the previous hop. This module
recomputes their roots and compares them with the node the previous hop
points at. A mismatch leaves the proof well-formed but cryptographically
invalid; it is reported, never raised.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..ssz.merkle.tree import MerklePrimitive
from ..ssz.types import TreeValue
from ..ssz.utils import bytes_to_hex
from .resolver import Hop, hop_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootMismatch:
    """An external source whose root differs from the node committing to it."""
    hop: str
    expected: bytes
    actual: bytes

    def to_dict(self) -> Dict[str, str]:
        return {
            "hop": self.hop,
            "expected": bytes_to_hex(self.expected),
            "actual": bytes_to_hex(self.actual),
        }


class ConsistencyValidator:
    """Cross-checks externally sourced hops against the hop above them."""

    def __init__(self, primitive: MerklePrimitive):
        self.primitive = primitive

    def check(self, hops: Sequence[Hop], trees: Dict[str, TreeValue]) -> List[RootMismatch]:
        """
        Compare every external hop's source root with its committed node.

        Returns:
            One RootMismatch per disagreeing hop, in hop order
        """
        mismatches = []
        for previous, hop in zip(hops, hops[1:]):
            if not hop.external:
                continue
            expected = self.primitive.get_node(trees[previous.source], hop_index(self.primitive, previous))
            actual = self.primitive.hash_tree_root(trees[hop.source])
            if expected == actual:
                logger.debug(f"{hop.describe()} root matches {bytes_to_hex(actual)}")
                continue

            mismatch = RootMismatch(hop=hop.describe(), expected=expected, actual=actual)
            logger.warning(
                f"Root mismatch for {mismatch.hop}: committed {bytes_to_hex(expected)}, "
                f"recomputed {bytes_to_hex(actual)}; the proof will not verify"
            )
            mismatches.append(mismatch)
        return mismatches
