"""
Data Source Interface

Where state and block snapshots come from. Identifiers are slot numbers or
the ``"head"`` sentinel; results are decoded ``TreeValue``s whose ``kind``
is the layout of the fork the snapshot belongs to.
"""

from abc import ABC, abstractmethod
from typing import Union

from ..ssz.types import TreeValue

Identifier = Union[int, str]


class DataSource(ABC):
    """Provider of beacon state and block snapshots."""

    @abstractmethod
    def get_state(self, identifier: Identifier) -> TreeValue:
        """
        Fetch the beacon state at ``identifier``.

        Raises:
            NotFound: If there is no state for the identifier
            RetrievalError: If the snapshot cannot be retrieved or decoded
        """

    @abstractmethod
    def get_block(self, identifier: Identifier) -> TreeValue:
        """
        Fetch the beacon block (unsigned message) at ``identifier``.

        Raises:
            NotFound: If there is no block for the identifier (e.g. a missed slot)
            RetrievalError: If the snapshot cannot be retrieved or decoded
        """
