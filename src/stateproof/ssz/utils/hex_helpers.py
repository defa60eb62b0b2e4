"""
Hex and field-name helpers for beacon API JSON.

Beacon nodes render byte strings as 0x-prefixed lowercase hex and, depending
on the client, field names in snake_case or camelCase. The SSZ layouts use
snake_case throughout.
"""

import re
from typing import Optional

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def normalize_hex(hex_str: str, expected_bytes: Optional[int] = None) -> str:
    """
    Canonical 0x-prefixed, lowercase, even-length form of a hex string.

    Args:
        hex_str: Hex digits, with or without the 0x prefix
        expected_bytes: Required decoded length, if any

    Raises:
        ValueError: For non-hex characters or a length other than
            ``expected_bytes``

    Examples:
        >>> normalize_hex("0x123")
        '0x0123'
        >>> normalize_hex("ABCD")
        '0xabcd'
    """
    if not isinstance(hex_str, str):
        raise ValueError(f"Not a hex string: {hex_str!r}")
    digits = hex_str[2:] if hex_str[:2] in ("0x", "0X") else hex_str
    if not _HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"Not a hex string: {hex_str!r}")

    digits = digits.lower().rjust(len(digits) + len(digits) % 2, "0")
    if expected_bytes is not None and len(digits) != 2 * expected_bytes:
        raise ValueError(f"Expected {expected_bytes} bytes, got {len(digits) // 2}")
    return "0x" + digits


def camel_to_snake(name: str) -> str:
    """
    ``withdrawalCredentials`` -> ``withdrawal_credentials``; snake_case
    names pass through unchanged.
    """
    name = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()


def hex_to_bytes(hex_str: str, expected_bytes: Optional[int] = None) -> bytes:
    """Decode a hex string, optionally enforcing its byte length."""
    return bytes.fromhex(normalize_hex(hex_str, expected_bytes)[2:])


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """Encode bytes as lowercase hex, 0x-prefixed unless ``prefix`` is False."""
    encoded = bytes(data).hex()
    return "0x" + encoded if prefix else encoded
