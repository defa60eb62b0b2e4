"""
Proof Service Module

Service layer shared by the CLI and the REST API: builds the data source
from settings and turns proof requests into serialized proofs.
"""

import logging
from typing import Any, Dict, Optional, Union

from ..config import Settings
from ..exceptions import ProofError, RetrievalError
from ..main import produce_proof
from ..proofs.resolver import ProofParams, ProofType
from ..schema import get_network
from .beacon_client import BeaconAPIClient
from .cache import CachedDataSource, SnapshotCache
from .data_source import DataSource

logger = logging.getLogger(__name__)


class ProofServiceError(Exception):
    """Custom exception for proof service operations."""
    pass


class ProofService:
    """Service for generating state proofs."""

    def __init__(self, source: Optional[DataSource] = None, settings: Optional[Settings] = None):
        """
        Initialize the proof service.

        Args:
            source: Data source to use. If None, a BeaconAPIClient (behind the
                snapshot cache when configured) is created on first use.
            settings: Runtime settings, from the environment by default
        """
        self.settings = settings or Settings.from_env()
        self.source = source

    def get_source(self) -> DataSource:
        if self.source is None:
            client = BeaconAPIClient(
                self.settings.beacon_api,
                timeout=self.settings.timeout,
                network=get_network(self.settings.network),
            )
            self.source = client
            if self.settings.cache_dir:
                logger.info(f"Caching snapshots under {self.settings.cache_dir}")
                self.source = CachedDataSource(client, SnapshotCache(self.settings.cache_dir))
        return self.source

    def generate(self, proof_type: Union[str, ProofType], params: ProofParams) -> Dict[str, Any]:
        """
        Generate a proof and return its serialized form.

        Raises:
            ProofError: For invalid requests (re-raised unchanged)
            RetrievalError: If a snapshot cannot be fetched (re-raised unchanged)
            ProofServiceError: For any other failure
        """
        try:
            artifact = produce_proof(proof_type, params, self.get_source())
            result = artifact.to_dict()
            result["network"] = params.network
            return result
        except (ProofError, RetrievalError):
            raise
        except ValueError as e:
            logger.error(f"Validation error generating {proof_type} proof: {e}")
            raise ProofServiceError(f"Validation error: {e}")
        except Exception as e:
            logger.error(f"Error generating {proof_type} proof: {e}")
            raise ProofServiceError(f"Failed to generate {proof_type} proof: {e}")

    def health(self) -> bool:
        """True if the configured beacon node answers."""
        try:
            source = self.get_source()
        except ValueError as e:
            logger.warning(f"Health check skipped: {e}")
            return False
        client = source.source if isinstance(source, CachedDataSource) else source
        check = getattr(client, "health_check", None)
        return bool(check()) if check is not None else True
