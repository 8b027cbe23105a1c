"""
Tests for the CRC-32 checksum engine.
"""

import os
import zlib

import pytest

from slidepack.crc import CRC32_POLYNOMIAL, _CRC_TABLE, crc32


class TestCrc32:
    """Known vectors and agreement with zlib."""

    def test_empty_input(self):
        assert crc32(b"") == 0x00000000

    def test_check_value(self):
        assert crc32(b"123456789") == 0xCBF43926

    @pytest.mark.parametrize("data", [
        b"a",
        b"The quick brown fox jumps over the lazy dog",
        bytes(range(256)),
        b"\x00" * 1000,
        b"\xff" * 33,
    ])
    def test_matches_zlib(self, data):
        assert crc32(data) == zlib.crc32(data) & 0xFFFFFFFF

    def test_random_buffers_match_zlib(self):
        for size in (1, 7, 64, 4096):
            data = os.urandom(size)
            assert crc32(data) == zlib.crc32(data) & 0xFFFFFFFF

    def test_accepts_bytearray_and_memoryview(self):
        data = b"slidepack"
        assert crc32(bytearray(data)) == crc32(data)
        assert crc32(memoryview(data)) == crc32(data)

    def test_result_is_unsigned_32_bit(self):
        value = crc32(b"\xff\xff\xff\xff")
        assert 0 <= value <= 0xFFFFFFFF


class TestTable:

    def test_table_size(self):
        assert len(_CRC_TABLE) == 256

    def test_table_entries(self):
        assert _CRC_TABLE[0] == 0
        assert _CRC_TABLE[1] == 0x77073096
        assert _CRC_TABLE[128] == CRC32_POLYNOMIAL

    def test_table_is_immutable(self):
        with pytest.raises(TypeError):
            _CRC_TABLE[0] = 1
