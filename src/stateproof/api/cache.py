"""
Snapshot Cache

Stores decoded snapshots as beacon-API-style JSON under
``<cache_dir>/state/<slot>.json`` and ``<cache_dir>/block/<slot>.json``,
tagged with their fork version so they decode without a network lookup.
Only numeric identifiers are read from the cache; ``head`` always goes to
the network.
"""

import json
import logging
import os
from typing import Optional

from ..schema import fork_of, get_fork
from ..ssz.types import TreeValue
from .data_source import DataSource, Identifier

logger = logging.getLogger(__name__)

STATE = "state"
BLOCK = "block"


class SnapshotCache:
    """JSON file cache of decoded snapshots."""

    def __init__(self, cache_dir: str):
        self.cache_dir = cache_dir

    def _path(self, category: str, slot: int) -> str:
        return os.path.join(self.cache_dir, category, f"{slot}.json")

    def load(self, category: str, identifier: Identifier) -> Optional[TreeValue]:
        """
        Cached snapshot for a numeric identifier, or None.

        Unreadable entries count as misses.
        """
        if not isinstance(identifier, int):
            return None
        path = self._path(category, identifier)
        if not os.path.isfile(path):
            return None
        try:
            with open(path, "r") as f:
                document = json.load(f)
            fork = get_fork(document["version"])
            kind = fork.beacon_state if category == STATE else fork.beacon_block
            value = kind.from_json(document["data"])
        except Exception as e:
            logger.debug(f"Ignoring unreadable cache entry {path}: {e}")
            return None
        logger.info(f"Loaded {category} {identifier} from cache")
        return TreeValue(kind, value, fork.name)

    def store(self, category: str, tree: TreeValue) -> None:
        """Write a snapshot, keyed by the slot it carries."""
        fork = fork_of(tree)
        if fork is None:
            logger.warning(f"Not caching {category}: {tree.kind.name} carries no fork version")
            return
        path = self._path(category, tree.value["slot"])
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "w") as f:
                json.dump({"version": fork.name, "data": tree.kind.to_json(tree.value)}, f)
        except OSError as e:
            logger.warning(f"Could not write cache entry {path}: {e}")


class CachedDataSource(DataSource):
    """Read-through cache in front of another data source."""

    def __init__(self, source: DataSource, cache: SnapshotCache):
        self.source = source
        self.cache = cache

    def get_state(self, identifier: Identifier) -> TreeValue:
        return self._get(STATE, identifier, self.source.get_state)

    def get_block(self, identifier: Identifier) -> TreeValue:
        return self._get(BLOCK, identifier, self.source.get_block)

    def _get(self, category, identifier, fetch) -> TreeValue:
        tree = self.cache.load(category, identifier)
        if tree is not None:
            return tree
        tree = fetch(identifier)
        self.cache.store(category, tree)
        return tree
