"""
Runtime configuration.

Values come from the environment (a ``.env`` file is loaded first) and can
be overridden by CLI flags or explicit arguments.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_NETWORK = "mainnet"
DEFAULT_CACHE_DIR = "./cache"
DEFAULT_TIMEOUT = 300.0


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        beacon_api: Beacon node REST endpoint (BEACON_CHAIN_API)
        network: Network name (STATEPROOF_NETWORK)
        cache_dir: Snapshot cache directory, None disables caching
            (STATEPROOF_CACHE_DIR, empty string disables)
        timeout: Beacon API request timeout in seconds (STATEPROOF_TIMEOUT)
    """
    beacon_api: Optional[str] = None
    network: str = DEFAULT_NETWORK
    cache_dir: Optional[str] = DEFAULT_CACHE_DIR
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        cache_dir = os.getenv("STATEPROOF_CACHE_DIR", DEFAULT_CACHE_DIR)
        timeout = os.getenv("STATEPROOF_TIMEOUT")
        try:
            timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"STATEPROOF_TIMEOUT must be a number of seconds, got {timeout!r}")
        return cls(
            beacon_api=os.getenv("BEACON_CHAIN_API") or None,
            network=os.getenv("STATEPROOF_NETWORK", DEFAULT_NETWORK),
            cache_dir=cache_dir or None,
            timeout=timeout,
        )

    def override(self, **values) -> "Settings":
        """Copy with the given non-None values replaced."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})
