"""
SSZ Basic Serialization Functions

This module implements the SSZ (Simple Serialize) encoding of the basic
types used by the beacon chain containers: unsigned integers, booleans and
bitfields. Composite types only ever need these to produce their packed
leaf chunks.

References:
- SSZ Specification: https://github.com/ethereum/consensus-specs/blob/dev/ssz/simple-serialize.md
"""

from typing import List, Sequence


def serialize_uint(value: int, byte_length: int) -> bytes:
    """
    Serialize an unsigned integer of ``byte_length`` bytes to SSZ format.

    SSZ Rule: Integers are serialized as little-endian byte arrays
    of their respective byte length.

    Args:
        value: Integer value (0 <= value < 2^(8*byte_length))
        byte_length: Width of the integer in bytes (1, 2, 4, 8, 16 or 32)

    Returns:
        Little-endian representation

    Raises:
        ValueError: If value is negative
        OverflowError: If value does not fit the width

    Examples:
        >>> serialize_uint(1, 8)
        b'\\x01\\x00\\x00\\x00\\x00\\x00\\x00\\x00'
        >>> serialize_uint(1234567890, 8)
        b'\\xd2\\x02\\x96\\x49\\x00\\x00\\x00\\x00'
    """
    if value < 0:
        raise ValueError(f"uint{byte_length * 8} values must be non-negative")
    if value >= 2 ** (byte_length * 8):
        raise OverflowError(f"Value too large for uint{byte_length * 8}")

    return value.to_bytes(byte_length, "little")


def serialize_bool(value: bool) -> bytes:
    """
    Serialize a boolean value to SSZ format.

    SSZ Rule: Booleans are serialized as a single byte,
    0x00 for False, 0x01 for True.
    """
    return b"\x01" if value else b"\x00"


def pack_bits(bits: Sequence[bool]) -> bytes:
    """
    Pack a sequence of booleans into bytes, least significant bit first.

    This is the bitfield layout shared by Bitvector and Bitlist (without
    the Bitlist length delimiter).
    """
    out = bytearray((len(bits) + 7) // 8)
    for i, bit in enumerate(bits):
        if bit:
            out[i // 8] |= 1 << (i % 8)
    return bytes(out)


def unpack_bits(data: bytes, length: int) -> List[bool]:
    """Inverse of ``pack_bits`` for a known bit length."""
    if length > len(data) * 8:
        raise ValueError(f"Bitfield of {len(data)} bytes cannot hold {length} bits")
    return [bool((data[i // 8] >> (i % 8)) & 1) for i in range(length)]


def serialize_bitlist(bits: Sequence[bool]) -> bytes:
    """Serialize a Bitlist, appending the length delimiter bit."""
    return pack_bits(list(bits) + [True])


def deserialize_bitlist(data: bytes) -> List[bool]:
    """
    Deserialize a Bitlist by locating the highest set (delimiter) bit.

    Raises:
        ValueError: If the data is empty or the last byte has no delimiter
    """
    if not data or data[-1] == 0:
        raise ValueError("Bitlist is missing its length delimiter bit")
    length = (len(data) - 1) * 8 + data[-1].bit_length() - 1
    return unpack_bits(data, length)
