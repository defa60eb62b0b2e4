"""
API Models

This module defines Pydantic models for API request and response validation.
The proof response mirrors ``ProofArtifact.to_dict()``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service status
        beacon_api: Beacon API connectivity status
        version: Service version
        timestamp: Response timestamp
    """
    status: str = Field(..., description="Service status")
    beacon_api: bool = Field(..., description="Beacon API connectivity")
    version: str = Field(default="1.0.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(), description="Response timestamp"
    )


class ProofRequest(BaseModel):
    """
    Parameters of a proof request.

    Attributes:
        slot: "head" or a slot number
        validator_index: Validator index (validator proof types)
        withdrawal_slot: Slot of the block containing the withdrawal
        withdrawal_number: Index into that block's withdrawals list
        network: "mainnet" or "hoodi"
    """
    slot: str = Field(default="head", description="Slot identifier")
    validator_index: Optional[int] = Field(default=None, ge=0, description="Validator index")
    withdrawal_slot: Optional[int] = Field(default=None, ge=0, description="Slot containing the withdrawal")
    withdrawal_number: Optional[int] = Field(default=None, ge=0, description="Index into the withdrawals list")
    network: str = Field(default="mainnet", description="Network name")

    @field_validator('slot')
    @classmethod
    def validate_slot(cls, v):
        """Validate slot parameter."""
        if v != "head" and not v.isdigit():
            raise ValueError("Slot must be 'head' or a valid number")
        return v

    def slot_identifier(self) -> Union[int, str]:
        return int(self.slot) if self.slot.isdigit() else self.slot


class RootMismatchModel(BaseModel):
    """A recomputed root that differs from the node committing to it."""
    hop: str = Field(..., description="Hop whose source root was checked")
    expected: str = Field(..., description="Node committed by the previous hop")
    actual: str = Field(..., description="Recomputed root of the fetched source")


class ProofResponse(BaseModel):
    """
    Response model for a composed proof.

    Attributes:
        proof_type: Proof type tag
        slot: Slot of the proof state
        gindex: Combined generalized index as a 0b bit string
        gindex_decimal: Combined generalized index as an integer
        witnesses: Sibling hashes, leaf to root, 0x hex
        leaf: Attested node
        root: Block header root the proof resolves to
        leaf_values: Attested values
        roots_used: Root of every hop's source tree
        warnings: Root mismatches found while cross-checking fetched data
        network: Network the proof was produced for
    """
    proof_type: str = Field(..., description="Proof type")
    slot: Optional[int] = Field(default=None, description="Slot of the proof state")
    gindex: str = Field(..., description="Generalized index (binary)")
    gindex_decimal: int = Field(..., description="Generalized index (decimal)")
    witnesses: List[str] = Field(..., description="Witnesses ordered leaf to root")
    leaf: str = Field(..., description="Leaf node")
    root: str = Field(..., description="Block header root")
    leaf_values: Dict[str, Any] = Field(default_factory=dict, description="Attested values")
    roots_used: List[str] = Field(default_factory=list, description="Roots of each hop's tree")
    warnings: List[RootMismatchModel] = Field(default_factory=list, description="Root mismatches")
    network: Optional[str] = Field(default=None, description="Network name")
