"""
Error types raised while resolving, composing and retrieving proofs.

Every composition error is terminal for the request that raised it: no
partial proof is ever returned. Root mismatches found by the consistency
check are not errors; see ``stateproof.proofs.consistency.RootMismatch``.
"""


class ProofError(Exception):
    """Base class for proof resolution and composition failures."""
    pass


class UnknownProofType(ProofError):
    """Raised for a proof type tag that has no route."""
    pass


class IndexOutOfRange(ProofError):
    """Raised when an integer index exceeds a container's arity or length."""
    pass


class UnsupportedSlotRange(ProofError):
    """Raised when a slot cannot be proven through the requested route."""
    pass


class InvalidOffset(ProofError):
    """Raised when a field offset is not addressable in a fixed-arity record."""
    pass


class UnknownNetwork(ProofError):
    """Raised for a network name missing from the network catalog."""
    pass


class UnsupportedFork(ProofError):
    """Raised when no fork schema covers a slot or version tag."""
    pass


class SchemaError(ProofError):
    """Raised for a path or value that does not fit its SSZ schema."""
    pass


class MissingParameter(ProofError):
    """Raised when a proof type is requested without one of its parameters."""
    pass


class RetrievalError(Exception):
    """Raised when a state or block snapshot cannot be retrieved."""
    pass


class NotFound(RetrievalError):
    """Raised when the data source has no snapshot for an identifier."""
    pass
