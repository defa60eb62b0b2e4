"""
State Proofs - Main proof generation module

``produce_proof`` is the single entry point used by the CLI and the REST
API: it fetches the snapshots a proof type needs, materializes the trees,
resolves the hop list, composes the proof and cross-checks externally
fetched roots.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional, Union

from .api.data_source import DataSource
from .proofs.artifact import ProofArtifact
from .proofs.composer import ProofComposer
from .proofs.consistency import ConsistencyValidator
from .proofs.resolver import (
    BLOCK,
    BOUNDARY_STATE,
    HEADER,
    HISTORICAL_BLOCK_ROOTS,
    HISTORICAL_SUMMARY,
    STATE,
    PathResolver,
    ProofParams,
    ProofType,
)
from .schema import ForkSchema, fork_of, get_network
from .ssz.merkle.tree import MerklePrimitive, SSZMerkleTree
from .ssz.types import TreeValue

logger = logging.getLogger(__name__)


def build_block_header(fork: ForkSchema, state: TreeValue, state_root: bytes) -> TreeValue:
    """
    Header of the block that produced ``state``.

    The state's latest_block_header has a zeroed state_root until the next
    slot fills it in; putting the computed state root back gives the header
    whose root is the block root.
    """
    header = dict(state.value["latest_block_header"])
    header["state_root"] = state_root
    return TreeValue(fork.beacon_block_header, header)


def produce_proof(
    proof_type: Union[str, ProofType],
    params: ProofParams,
    source: DataSource,
    primitive: Optional[MerklePrimitive] = None,
) -> ProofArtifact:
    """
    Produce a single inclusion proof rooted in a block header.

    Args:
        proof_type: One of ``ProofType``
        params: Proof parameters (slot, indices, network)
        source: Where states and blocks come from
        primitive: Merkle primitive; a fresh SSZMerkleTree by default

    Returns:
        The composed ProofArtifact, with root mismatches as warnings

    Raises:
        ProofError: For invalid parameters or unreachable slots
        RetrievalError: If a snapshot cannot be fetched
    """
    resolver = PathResolver()
    proof_type = resolver.check_params(proof_type, params)
    network = get_network(params.network)
    primitive = primitive or SSZMerkleTree()

    state = source.get_state(params.slot)
    proof_slot = state.value["slot"]
    fork = fork_of(state) or network.fork_at_slot(proof_slot)
    logger.info(f"Generating {proof_type.value} proof at slot {proof_slot} ({fork.name}, {network.name})")

    state_root = primitive.hash_tree_root(state)
    trees: Dict[str, TreeValue] = {
        HEADER: build_block_header(fork, state, state_root),
        STATE: state,
    }

    sources = resolver.required_sources(proof_type, params, network, proof_slot)
    if BLOCK in sources:
        trees[BLOCK] = source.get_block(sources[BLOCK])
    if BOUNDARY_STATE in sources:
        boundary = source.get_state(sources[BOUNDARY_STATE])
        trees[HISTORICAL_BLOCK_ROOTS] = TreeValue(fork.historical_block_roots, boundary.value["block_roots"])

    hops = resolver.resolve(proof_type, params, fork, network, trees)
    if any(hop.source == HISTORICAL_SUMMARY for hop in hops):
        entry = resolver.historical_entry_index(params.withdrawal_slot, network)
        trees[HISTORICAL_SUMMARY] = TreeValue(
            fork.historical_summary, state.value["historical_summaries"][entry]
        )

    leaf_values = resolver.collect_leaf_values(proof_type, params, network, trees)
    artifact = ProofComposer(primitive).compose(
        hops, trees, proof_type=proof_type.value, slot=proof_slot, leaf_values=leaf_values
    )

    warnings = ConsistencyValidator(primitive).check(hops, trees)
    if warnings:
        artifact = replace(artifact, warnings=tuple(warnings))
    return artifact
