"""
API Models Package

Pydantic models for the proof API's requests, responses and errors.

Usage:
    from stateproof.models import ProofRequest, ProofResponse

    request = ProofRequest(slot="head", validator_index=42)
"""

from .api_models import (
    ErrorResponse,
    HealthResponse,
    ProofRequest,
    ProofResponse,
    RootMismatchModel,
)

__all__ = [
    'ErrorResponse',
    'HealthResponse',
    'ProofRequest',
    'ProofResponse',
    'RootMismatchModel',
]
