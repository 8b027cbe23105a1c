"""
Tests for the store-only ZIP writer and the verifying reader.

Archives are cross-checked against the standard library zipfile reader.
"""

import io
import struct
import zipfile
import zlib

import pytest

from slidepack.archive import (
    CENTRAL_HEADER_SIZE,
    END_OF_CENTRAL_DIR_SIZE,
    LOCAL_HEADER_SIZE,
    MAX_UINT16,
    ArchiveEntry,
    ArchiveError,
    read_archive,
    zip_store,
)


@pytest.fixture
def entries():
    return [
        ArchiveEntry("[Content_Types].xml", b"<Types/>"),
        ArchiveEntry("_rels/.rels", b"<Relationships/>"),
        ArchiveEntry("ppt/media/empty.png", b""),
        ArchiveEntry("ppt/media/blob.bin", bytes(range(256)) * 4),
    ]


class TestZipStore:
    """Structure of the written archive."""

    def test_zipfile_reads_entries_in_order(self, entries):
        data = zip_store(entries)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == [e.name for e in entries]
            assert zf.testzip() is None
            for e in entries:
                assert zf.read(e.name) == e.data

    def test_entries_are_stored_uncompressed(self, entries):
        data = zip_store(entries)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            for info, e in zip(zf.infolist(), entries):
                assert info.compress_type == zipfile.ZIP_STORED
                assert info.compress_size == info.file_size == len(e.data)

    def test_central_offsets_point_at_local_headers(self, entries):
        data = zip_store(entries)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            for info in zf.infolist():
                assert data[info.header_offset:info.header_offset + 4] == b"PK\x03\x04"

    def test_end_of_central_directory(self, entries):
        data = zip_store(entries)
        eocd = data[-END_OF_CENTRAL_DIR_SIZE:]
        sig, disk, cd_disk, on_disk, total, cd_size, cd_offset, comment = struct.unpack("<IHHHHIIH", eocd)

        local_size = sum(LOCAL_HEADER_SIZE + len(e.name.encode()) + len(e.data) for e in entries)
        central_size = sum(CENTRAL_HEADER_SIZE + len(e.name.encode()) for e in entries)

        assert sig == 0x06054B50
        assert (disk, cd_disk, comment) == (0, 0, 0)
        assert on_disk == total == len(entries)
        assert cd_offset == local_size
        assert cd_size == central_size
        assert data[cd_offset:cd_offset + 4] == b"PK\x01\x02"
        assert len(data) == local_size + central_size + END_OF_CENTRAL_DIR_SIZE

    def test_local_header_fields(self, entries):
        data = zip_store(entries)
        fields = struct.unpack_from("<IHHHHHIIIHH", data, 0)
        name = entries[0].name.encode()
        assert fields == (
            0x04034B50, 20, 0, 0, 0, 0,
            zlib.crc32(entries[0].data) & 0xFFFFFFFF,
            len(entries[0].data), len(entries[0].data),
            len(name), 0,
        )
        assert data[LOCAL_HEADER_SIZE:LOCAL_HEADER_SIZE + len(name)] == name

    def test_deterministic(self, entries):
        assert zip_store(entries) == zip_store(list(entries))

    def test_order_matters(self, entries):
        assert zip_store(entries) != zip_store(list(reversed(entries)))

    def test_empty_archive(self):
        data = zip_store([])
        assert len(data) == END_OF_CENTRAL_DIR_SIZE
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert zf.namelist() == []

    def test_accepts_generator(self, entries):
        assert zip_store(e for e in entries) == zip_store(entries)

    def test_utf8_names(self):
        data = zip_store([ArchiveEntry("ppt/média/ü.txt", b"x")])
        records = read_archive(data)
        assert records[0].name == "ppt/média/ü.txt"


class TestZipStoreLimits:

    @pytest.mark.parametrize("name", ["", "/abs/path.xml", "ppt\\slides\\slide1.xml"])
    def test_invalid_names(self, name):
        with pytest.raises(ArchiveError):
            zip_store([ArchiveEntry(name, b"x")])

    def test_name_too_long(self):
        with pytest.raises(ArchiveError, match="too long"):
            zip_store([ArchiveEntry("a" * (MAX_UINT16 + 1), b"")])

    def test_too_many_entries(self):
        many = [ArchiveEntry(f"f{i}", b"") for i in range(MAX_UINT16 + 1)]
        with pytest.raises(ArchiveError, match="Too many"):
            zip_store(many)


class TestReadArchive:
    """The verifying reader on good and damaged input."""

    def test_round_trip(self, entries):
        records = read_archive(zip_store(entries))
        assert [r.name for r in records] == [e.name for e in entries]
        assert [r.data for r in records] == [e.data for e in entries]
        assert [r.size for r in records] == [len(e.data) for e in entries]

    def test_offsets_and_crc(self, entries):
        data = zip_store(entries)
        for r in read_archive(data):
            assert data[r.offset:r.offset + 4] == b"PK\x03\x04"
            assert r.crc == zlib.crc32(r.data) & 0xFFFFFFFF

    def test_reads_stdlib_stored_archive(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_STORED) as zf:
            zf.writestr("a.txt", b"alpha")
            zf.writestr("b/c.txt", b"gamma")
        records = read_archive(buf.getvalue())
        assert [(r.name, r.data) for r in records] == [("a.txt", b"alpha"), ("b/c.txt", b"gamma")]

    def test_not_an_archive(self):
        with pytest.raises(ArchiveError, match="not found"):
            read_archive(b"definitely not a zip file")

    def test_truncated(self, entries):
        data = zip_store(entries)
        with pytest.raises(ArchiveError):
            read_archive(data[:-1])

    def test_corrupted_payload(self, entries):
        data = bytearray(zip_store(entries))
        payload_start = LOCAL_HEADER_SIZE + len(entries[0].name.encode())
        data[payload_start] ^= 0xFF
        with pytest.raises(ArchiveError, match="CRC mismatch"):
            read_archive(bytes(data))

    def test_bad_local_signature(self, entries):
        data = bytearray(zip_store(entries))
        data[0:4] = b"XXXX"
        with pytest.raises(ArchiveError, match="local header signature"):
            read_archive(bytes(data))

    def test_compressed_entries_rejected(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("a.txt", b"a" * 100)
        with pytest.raises(ArchiveError):
            read_archive(buf.getvalue())


class TestReadArchiveNames:

    def _archive(self):
        return bytearray(zip_store([ArchiveEntry("ab", b"x")]))

    def test_non_utf8_central_name(self):
        data = self._archive()
        name_at = LOCAL_HEADER_SIZE + 2 + 1 + CENTRAL_HEADER_SIZE
        assert data[name_at:name_at + 2] == b"ab"
        data[name_at:name_at + 2] = b"\xff\xfe"
        with pytest.raises(ArchiveError, match="not UTF-8"):
            read_archive(bytes(data))

    def test_non_utf8_local_name(self):
        data = self._archive()
        assert data[LOCAL_HEADER_SIZE:LOCAL_HEADER_SIZE + 2] == b"ab"
        data[LOCAL_HEADER_SIZE:LOCAL_HEADER_SIZE + 2] = b"\xff\xfe"
        with pytest.raises(ArchiveError, match=f"not UTF-8 at {LOCAL_HEADER_SIZE}"):
            read_archive(bytes(data))
