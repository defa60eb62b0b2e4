"""
Beacon API Integration Package

Data retrieval for proof generation:

- DataSource: interface for state and block snapshots
- BeaconAPIClient: HTTP client for the beacon node REST API
- SnapshotCache / CachedDataSource: JSON snapshot cache
- ProofService: service layer used by the CLI and REST API

Usage:
    from stateproof.api import BeaconAPIClient

    client = BeaconAPIClient("http://localhost:5052")
    state = client.get_state("head")
"""

from .data_source import DataSource
from .beacon_client import BeaconAPIClient
from .cache import CachedDataSource, SnapshotCache

__all__ = [
    'DataSource',
    'BeaconAPIClient',
    'CachedDataSource',
    'SnapshotCache',
]
