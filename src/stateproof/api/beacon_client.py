"""
Beacon API Client

This module provides a client for the standard beacon node REST API. It
fetches full beacon states and blocks as JSON and decodes them into SSZ
tree values using the fork layout named by the response's ``version``.
"""

import logging
import os
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv

from ..exceptions import NotFound, RetrievalError, SchemaError
from ..schema import ForkSchema, NetworkConfig, get_fork
from ..ssz.types import TreeValue
from .data_source import DataSource, Identifier

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300


class BeaconAPIClient(DataSource):
    """
    Beacon node REST client.

    Full states are large (hundreds of MB of JSON on mainnet), hence the
    generous default timeout.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 network: Optional[NetworkConfig] = None):
        """
        Initialize the beacon API client.

        Args:
            base_url: Base URL for the beacon API. If None, uses BEACON_CHAIN_API.
            timeout: Request timeout in seconds
            network: Used to pick a fork when a response carries no version tag

        Raises:
            ValueError: If no endpoint is configured
        """
        self.base_url = (base_url or os.getenv("BEACON_CHAIN_API") or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Beacon API endpoint not set: pass --rpc or set BEACON_CHAIN_API")

        self.timeout = timeout or DEFAULT_TIMEOUT
        self.network = network

        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/json'
        })

        logger.info(f"Initialized BeaconAPIClient with base_url: {self.base_url}")

    def get_state(self, identifier: Identifier) -> TreeValue:
        logger.info(f"Fetching full beacon state {identifier}, this may take a while...")
        document = self._get(f"/eth/v2/debug/beacon/states/{identifier}", f"state {identifier}")
        data = document["data"]
        fork = self._fork(document, data.get("slot"))
        tree = self._decode(fork, fork.beacon_state, data, f"state {identifier}")
        logger.info(f"Fetched {fork.name} beacon state at slot {tree.value['slot']}")
        return tree

    def get_block(self, identifier: Identifier) -> TreeValue:
        logger.info(f"Fetching beacon block {identifier}")
        document = self._get(f"/eth/v2/beacon/blocks/{identifier}", f"block {identifier}")
        message = document["data"].get("message")
        if message is None:
            raise RetrievalError(f"Invalid block response for {identifier}: missing 'message'")
        fork = self._fork(document, message.get("slot"))
        tree = self._decode(fork, fork.beacon_block, message, f"block {identifier}")
        logger.info(f"Fetched {fork.name} beacon block at slot {tree.value['slot']}")
        return tree

    def health_check(self) -> bool:
        """
        Check if the beacon API is accessible.

        Returns:
            True if API is accessible, False otherwise
        """
        try:
            response = self.session.get(f"{self.base_url}/eth/v1/beacon/headers/head", timeout=10)
            return response.status_code == 200
        except requests.RequestException as e:
            logger.debug(f"Health check failed: {e}")
            return False

    def _get(self, path: str, what: str) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                raise NotFound(f"Beacon node has no {what}")
            response.raise_for_status()
            document = response.json()
        except requests.ConnectionError as e:
            raise RetrievalError(
                f"Failed to connect to beacon API at {self.base_url}. "
                f"Check that the beacon node is running and the URL is correct. "
                f"Original error: {e}"
            )
        except requests.Timeout as e:
            raise RetrievalError(
                f"Timeout fetching {what} from {self.base_url} after {self.timeout}s. "
                f"Original error: {e}"
            )
        except requests.RequestException as e:
            raise RetrievalError(f"Request for {what} failed: {e}")
        except ValueError as e:
            raise RetrievalError(f"Beacon API returned invalid JSON for {what}: {e}")

        if not isinstance(document, dict) or not isinstance(document.get("data"), dict):
            raise RetrievalError(f"Invalid response format for {what}: missing 'data' field")
        return document

    def _fork(self, document: Dict[str, Any], slot: Any) -> ForkSchema:
        version = document.get("version")
        if version:
            return get_fork(version)
        if self.network is None or slot is None:
            raise RetrievalError("Response carries no fork version and no network is configured")
        return self.network.fork_at_slot(int(slot))

    @staticmethod
    def _decode(fork: ForkSchema, kind, data: Dict[str, Any], what: str) -> TreeValue:
        try:
            return TreeValue(kind, kind.from_json(data), fork.name)
        except SchemaError as e:
            raise RetrievalError(f"Could not decode {what}: {e}")
