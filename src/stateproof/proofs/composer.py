"""
Proof Composer

Runs the Merkle primitive once per hop and folds the per-hop results into
one proof. Indices and witnesses are folded in opposite directions:

    combined index     = concat(g[0], g[1], ..., g[n-1])          outer first
    combined witnesses = w[n-1] + w[n-2] + ... + w[0]             inner first

A verifier walks from the leaf up, so the witnesses nearest the leaf (the
innermost hop's) must come first, while the index is read root to leaf.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import SchemaError
from ..ssz.gindex import concat_gindices_list
from ..ssz.merkle.tree import MerklePrimitive, SSZMerkleTree
from ..ssz.types import TreeValue
from .artifact import ProofArtifact
from .resolver import Hop, hop_index

logger = logging.getLogger(__name__)


class ProofComposer:
    """
    Assembles a single proof from an ordered hop list.

    Example:
        >>> composer = ProofComposer()
        >>> artifact = composer.compose(hops, trees, proof_type="slot")
        >>> artifact.to_dict()["gindex"]
    """

    def __init__(self, primitive: Optional[MerklePrimitive] = None):
        self.primitive = primitive or SSZMerkleTree()

    def compose(
        self,
        hops: Sequence[Hop],
        trees: Dict[str, TreeValue],
        proof_type: str = "",
        slot: Optional[int] = None,
        leaf_values: Optional[Dict[str, Any]] = None,
    ) -> ProofArtifact:
        """
        Compose the proof for ``hops`` (ordered outer to inner).

        Raises:
            SchemaError: If the hop list is empty, a source tree is missing or
                a tree does not have the type its hop expects
            IndexOutOfRange: If a hop addresses past a list's length
        """
        if not hops:
            raise SchemaError("Cannot compose a proof from an empty hop list")

        indices: List[int] = []
        per_hop: List[List[bytes]] = []
        roots: List[bytes] = []
        for hop in hops:
            tree = self._source(hop, trees)
            gindex = hop_index(self.primitive, hop)
            witnesses = self.primitive.prove_single(tree, gindex)
            logger.debug(f"{hop.describe()}: gindex {gindex}, {len(witnesses)} witnesses")
            indices.append(gindex)
            per_hop.append(witnesses)
            roots.append(self.primitive.hash_tree_root(tree))

        combined_index = concat_gindices_list(indices)
        combined_witnesses = tuple(w for witnesses in reversed(per_hop) for w in witnesses)
        leaf = self.primitive.get_node(trees[hops[-1].source], indices[-1])

        logger.info(
            f"Composed {proof_type or 'proof'} over {len(hops)} hops: "
            f"gindex {combined_index}, {len(combined_witnesses)} witnesses"
        )
        return ProofArtifact(
            proof_type=proof_type,
            slot=slot,
            combined_index=combined_index,
            witnesses=combined_witnesses,
            leaf=leaf,
            root=roots[0],
            leaf_values=dict(leaf_values or {}),
            roots_used=tuple(roots),
        )

    @staticmethod
    def _source(hop: Hop, trees: Dict[str, TreeValue]) -> TreeValue:
        try:
            tree = trees[hop.source]
        except KeyError:
            raise SchemaError(f"No materialized tree named {hop.source!r} for {hop.describe()}")
        if tree.kind is not hop.container:
            raise SchemaError(
                f"{hop.describe()} expects a {hop.container.name}, got {tree.kind.name}"
            )
        return tree
