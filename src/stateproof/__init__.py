"""
State Proofs - beacon state inclusion proof generation.

Produces single, independently verifiable Merkle proofs that a slot number,
a validator record, a validator's withdrawable epoch or a withdrawal is
committed under a beacon block root.
"""

__version__ = "1.0.0"

from .exceptions import NotFound, ProofError, RetrievalError

__all__ = [
    '__version__',
    'NotFound',
    'ProofError',
    'RetrievalError',
]
