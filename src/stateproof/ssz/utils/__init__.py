"""
SSZ Utility Functions

Hex string handling and naming conventions shared by the SSZ schemas,
the beacon API client and the output formatters.
"""

from .hex_helpers import (
    normalize_hex,
    camel_to_snake,
    hex_to_bytes,
    bytes_to_hex,
)

__all__ = [
    'normalize_hex',
    'camel_to_snake',
    'hex_to_bytes',
    'bytes_to_hex',
]
