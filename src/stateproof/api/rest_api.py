"""
REST API for State Proofs

This module provides a FastAPI-based REST API for generating beacon state
inclusion proofs with full OpenAPI documentation.
"""

import logging
import traceback
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..exceptions import NotFound, ProofError, RetrievalError
from ..models.api_models import ErrorResponse, HealthResponse, ProofRequest, ProofResponse
from ..proofs.resolver import ProofParams, ProofType
from .proof_service import ProofService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="State Proofs API",
    description="""
    Generate beacon state inclusion proofs.

    Each proof attests one value (the slot, a validator record, a validator's
    pubkey and withdrawal credentials, its withdrawable epoch, or a
    withdrawal) against a beacon block root, as a single generalized index
    plus an ordered list of witnesses.

    ## Proof types
    - **slot**: the state's slot
    - **validator**: a validator record
    - **validator_pubkey**: pubkey / withdrawal_credentials branch of a validator
    - **withdrawable_epoch**: a validator's withdrawable epoch
    - **withdrawal**: a withdrawal, routed through recent or historical block roots
    - **historical_withdrawal**: a withdrawal, always through historical summaries
    """,
    version=__version__,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    }
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global proof service instance
proof_service = None


def get_proof_service() -> ProofService:
    """Dependency to get the proof service instance."""
    global proof_service
    if proof_service is None:
        proof_service = ProofService()
    return proof_service


def _error(status_code: int, exc: Exception, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=str(exc),
            code=code,
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.exception_handler(ProofError)
async def proof_error_handler(request, exc: ProofError):
    """Handle invalid proof requests."""
    logger.error(f"Proof error: {exc}")
    return _error(400, exc, "PROOF_ERROR")


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return _error(400, exc, "VALIDATION_ERROR")


@app.exception_handler(NotFound)
async def not_found_handler(request, exc: NotFound):
    """Handle snapshots the beacon node does not have."""
    logger.error(f"Not found: {exc}")
    return _error(404, exc, "NOT_FOUND")


@app.exception_handler(RetrievalError)
async def retrieval_error_handler(request, exc: RetrievalError):
    """Handle beacon API errors."""
    logger.error(f"Beacon API error: {exc}")
    return _error(502, exc, "BEACON_API_ERROR")


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
def root():
    """API root endpoint with basic information."""
    return {
        "name": "State Proofs API",
        "version": __version__,
        "proof_types": [t.value for t in ProofType],
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
def health_check(service: ProofService = Depends(get_proof_service)):
    """
    Health check endpoint.

    Checks the status of the API and beacon chain connectivity.
    """
    beacon_status = service.health()
    return HealthResponse(
        status="healthy" if beacon_status else "degraded",
        beacon_api=beacon_status,
        version=__version__
    )


@app.get("/proofs/{proof_type}", response_model=ProofResponse)
def generate_proof(
    proof_type: str,
    slot: str = "head",
    validator_index: Optional[int] = None,
    withdrawal_slot: Optional[int] = None,
    withdrawal_number: Optional[int] = None,
    network: Optional[str] = None,
    service: ProofService = Depends(get_proof_service)
):
    """
    Generate a proof of the given type.

    **Parameters by proof type:**
    - `slot`: none besides `slot`
    - `validator`, `validator_pubkey`, `withdrawable_epoch`: `validator_index`
    - `withdrawal`, `historical_withdrawal`: `withdrawal_slot`, `withdrawal_number`

    The proof resolves to the root of the block header at `slot`. `network`
    defaults to the server's configured network (STATEPROOF_NETWORK).
    """
    request = ProofRequest(
        slot=slot,
        validator_index=validator_index,
        withdrawal_slot=withdrawal_slot,
        withdrawal_number=withdrawal_number,
        network=network or service.settings.network,
    )
    params = ProofParams(
        slot=request.slot_identifier(),
        validator_index=request.validator_index,
        withdrawal_slot=request.withdrawal_slot,
        withdrawal_number=request.withdrawal_number,
        network=request.network,
    )
    return ProofResponse(**service.generate(ProofType.parse(proof_type), params))


def run_server(host: str = "127.0.0.1", port: int = 8000, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        dev: Enable development mode with auto-reload
    """
    logger.info(f"Starting State Proofs API server on {host}:{port}")
    uvicorn.run(
        "stateproof.api.rest_api:app" if dev else app,
        host=host,
        port=port,
        reload=dev,
        log_level="info"
    )


if __name__ == "__main__":
    run_server(dev=True)
