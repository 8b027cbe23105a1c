"""
CRC-32 checksum (reflected, polynomial 0xEDB88320).

This is the ZIP/PNG variant: initial register 0xFFFFFFFF, final value
XORed with 0xFFFFFFFF. Archive readers validate every entry against it,
so the result must match zlib.crc32() bit for bit.

The 256-entry lookup table is built once at import time and never
mutated afterwards, so concurrent callers only ever read it.
"""

from typing import Tuple

CRC32_POLYNOMIAL = 0xEDB88320
_MASK = 0xFFFFFFFF


def _build_table() -> Tuple[int, ...]:
    """Precompute the byte-wise CRC table."""
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            if c & 1:
                c = CRC32_POLYNOMIAL ^ (c >> 1)
            else:
                c >>= 1
        table.append(c)
    return tuple(table)


_CRC_TABLE: Tuple[int, ...] = _build_table()


def crc32(data: bytes) -> int:
    """
    Compute the CRC-32 of a byte buffer.

    Args:
        data: Any bytes-like object (bytes, bytearray, memoryview)

    Returns:
        Unsigned 32-bit checksum. crc32(b"") == 0.
    """
    crc = _MASK
    table = _CRC_TABLE
    for byte in bytes(data):
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK
