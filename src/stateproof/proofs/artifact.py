"""
Proof Artifact

The immutable result of one proof composition, and its serialized form:
the stable contract verifier contracts and auditors consume.
"""

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..ssz.gindex import gindex_to_bits
from ..ssz.utils import bytes_to_hex
from .consistency import RootMismatch


@dataclass(frozen=True)
class ProofArtifact:
    """
    A composed inclusion proof.

    Attributes:
        proof_type: Proof type tag the artifact was produced for
        slot: Slot of the state the proof is anchored in
        combined_index: Generalized index of the leaf below ``root``
        witnesses: Sibling nodes, ordered leaf to root
        leaf: The 32-byte node being attested
        root: Root the proof resolves to (the block header root)
        leaf_values: Attested values in structured form
        roots_used: Root of every hop's source tree, in hop order
        warnings: Root mismatches found by the consistency check
    """
    proof_type: str
    slot: Optional[int]
    combined_index: int
    witnesses: Tuple[bytes, ...]
    leaf: bytes
    root: bytes
    leaf_values: Mapping[str, Any] = field(default_factory=dict)
    roots_used: Tuple[bytes, ...] = ()
    warnings: Tuple[RootMismatch, ...] = ()

    def __post_init__(self):
        # Read-only view over a private copy of the caller's values
        object.__setattr__(self, "leaf_values", MappingProxyType(copy.deepcopy(dict(self.leaf_values))))

    @property
    def gindex_bits(self) -> str:
        return gindex_to_bits(self.combined_index)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible types."""
        return {
            "proof_type": self.proof_type,
            "slot": self.slot,
            "gindex": self.gindex_bits,
            "gindex_decimal": self.combined_index,
            "witnesses": [bytes_to_hex(w) for w in self.witnesses],
            "leaf": bytes_to_hex(self.leaf),
            "root": bytes_to_hex(self.root),
            "leaf_values": copy.deepcopy(dict(self.leaf_values)),
            "roots_used": [bytes_to_hex(r) for r in self.roots_used],
            "warnings": [w.to_dict() for w in self.warnings],
        }
