"""
Store-only ZIP archive writer and reader.

Writes the subset of the ZIP format an Open Packaging Convention package
needs: method 0 (stored, no compression), no timestamps, no extra fields,
no comments, no ZIP64. Identical entry lists always produce identical
bytes.

Layout of an archive produced by zip_store():

    [local header + name + data] * N
    [central directory header + name] * N
    end-of-central-directory record

All integers are little-endian. Every offset recorded in the central
directory is the byte position of the matching local header.

read_archive() parses such an archive back and verifies signatures,
offsets, sizes and CRCs. It is a checker for our own output, not a
general-purpose ZIP reader (no compression, no ZIP64, no data descriptors).
"""

from dataclasses import dataclass
from typing import Iterable, List
import logging
import struct

from slidepack.crc import crc32

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when entries exceed ZIP format limits or an archive is malformed."""
    pass


# ---------------------------------------------------------------------------
# Format constants
# ---------------------------------------------------------------------------

LOCAL_HEADER_SIGNATURE = 0x04034B50
CENTRAL_HEADER_SIGNATURE = 0x02014B50
END_OF_CENTRAL_DIR_SIGNATURE = 0x06054B50

ZIP_VERSION = 20            # 2.0: minimum for stored entries with directories
METHOD_STORED = 0

MAX_UINT16 = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF

# signature, version needed, flags, method, mod time, mod date,
# crc, compressed size, uncompressed size, name length, extra length
_LOCAL_HEADER = struct.Struct("<IHHHHHIIIHH")

# signature, version made by, version needed, flags, method, mod time,
# mod date, crc, compressed size, uncompressed size, name length,
# extra length, comment length, disk start, internal attrs,
# external attrs, local header offset
_CENTRAL_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")

# signature, this disk, central dir disk, entries on disk, total entries,
# central dir size, central dir offset, comment length
_END_OF_CENTRAL_DIR = struct.Struct("<IHHHHIIH")

LOCAL_HEADER_SIZE = _LOCAL_HEADER.size              # 30
CENTRAL_HEADER_SIZE = _CENTRAL_HEADER.size          # 46
END_OF_CENTRAL_DIR_SIZE = _END_OF_CENTRAL_DIR.size  # 22


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ArchiveEntry:
    """One file to store: archive-relative name (forward slashes) and raw bytes."""
    name: str
    data: bytes


@dataclass(frozen=True)
class ArchiveRecord:
    """An entry recovered by read_archive()."""
    name: str
    offset: int                 # byte offset of the local header
    crc: int
    size: int
    data: bytes


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

def _encode_name(name: str) -> bytes:
    if not name:
        raise ArchiveError("Archive entry name must not be empty")
    if "\\" in name or name.startswith("/"):
        raise ArchiveError(f"Archive entry name must be relative with forward slashes: {name!r}")
    name_bytes = name.encode("utf-8")
    if len(name_bytes) > MAX_UINT16:
        raise ArchiveError(f"Archive entry name too long ({len(name_bytes)} bytes): {name[:40]!r}...")
    return name_bytes


def zip_store(entries: Iterable[ArchiveEntry]) -> bytes:
    """
    Assemble entries into a ZIP archive using the store method.

    Args:
        entries: Ordered entries; archive order follows iteration order

    Returns:
        The complete archive as bytes

    Raises:
        ArchiveError: If a name is invalid, or a size, offset or entry
            count does not fit the 16/32-bit ZIP fields
    """
    entries = list(entries)
    if len(entries) > MAX_UINT16:
        raise ArchiveError(f"Too many archive entries: {len(entries)} (max {MAX_UINT16})")

    out = bytearray()
    central = bytearray()

    for entry in entries:
        name_bytes = _encode_name(entry.name)
        data = bytes(entry.data)
        size = len(data)
        if size > MAX_UINT32:
            raise ArchiveError(f"Archive entry too large: {entry.name} ({size} bytes)")

        offset = len(out)
        if offset > MAX_UINT32:
            raise ArchiveError(f"Archive offset overflow at entry {entry.name}")

        checksum = crc32(data)

        out += _LOCAL_HEADER.pack(
            LOCAL_HEADER_SIGNATURE,
            ZIP_VERSION,
            0,                  # flags
            METHOD_STORED,
            0, 0,               # mod time, mod date
            checksum,
            size, size,
            len(name_bytes),
            0,                  # extra length
        )
        out += name_bytes
        out += data

        central += _CENTRAL_HEADER.pack(
            CENTRAL_HEADER_SIGNATURE,
            ZIP_VERSION,        # version made by
            ZIP_VERSION,        # version needed
            0,
            METHOD_STORED,
            0, 0,
            checksum,
            size, size,
            len(name_bytes),
            0, 0,               # extra length, comment length
            0, 0,               # disk start, internal attrs
            0,                  # external attrs
            offset,
        )
        central += name_bytes

        logger.debug(f"Stored {entry.name} at offset {offset} ({size} bytes, crc={checksum:08x})")

    central_start = len(out)
    central_size = len(central)
    if central_start + central_size > MAX_UINT32:
        raise ArchiveError(f"Archive too large: {central_start + central_size} bytes")

    out += central
    out += _END_OF_CENTRAL_DIR.pack(
        END_OF_CENTRAL_DIR_SIGNATURE,
        0, 0,
        len(entries), len(entries),
        central_size,
        central_start,
        0,                      # comment length
    )
    return bytes(out)


# ---------------------------------------------------------------------------
# Reader / checker
# ---------------------------------------------------------------------------

def _find_end_of_central_dir(data: bytes) -> int:
    """Locate the EOCD record, scanning back over a possible archive comment."""
    signature = struct.pack("<I", END_OF_CENTRAL_DIR_SIGNATURE)
    tail = len(data) - END_OF_CENTRAL_DIR_SIZE
    if tail >= 0 and data[tail:tail + 4] == signature:
        return tail
    lowest = max(0, len(data) - END_OF_CENTRAL_DIR_SIZE - MAX_UINT16)
    pos = data.rfind(signature, lowest)
    if pos < 0 or pos + END_OF_CENTRAL_DIR_SIZE > len(data):
        raise ArchiveError("End-of-central-directory record not found")
    return pos


def _decode_name(raw: bytes, pos: int) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise ArchiveError(f"Entry name is not UTF-8 at {pos}") from None


def read_archive(data: bytes) -> List[ArchiveRecord]:
    """
    Parse and verify a store-only archive.

    Checks that the central directory lies where the EOCD says, that every
    recorded offset points at a local header with the same name, sizes and
    CRC, and that each payload hashes to the recorded CRC.

    Args:
        data: Archive bytes

    Returns:
        Entries in central directory order

    Raises:
        ArchiveError: On any structural inconsistency
    """
    data = bytes(data)
    eocd_pos = _find_end_of_central_dir(data)
    (
        _sig, disk, cd_disk, entries_on_disk, total_entries,
        cd_size, cd_offset, _comment_len,
    ) = _END_OF_CENTRAL_DIR.unpack_from(data, eocd_pos)

    if disk != 0 or cd_disk != 0:
        raise ArchiveError("Multi-disk archives are not supported")
    if entries_on_disk != total_entries:
        raise ArchiveError(
            f"Entry count mismatch: {entries_on_disk} on disk vs {total_entries} total"
        )
    if cd_offset + cd_size != eocd_pos:
        raise ArchiveError(
            f"Central directory [{cd_offset}, {cd_offset + cd_size}) does not end at EOCD ({eocd_pos})"
        )

    records: List[ArchiveRecord] = []
    pos = cd_offset
    for index in range(total_entries):
        if pos + CENTRAL_HEADER_SIZE > eocd_pos:
            raise ArchiveError(f"Central directory truncated at entry {index}")
        (
            sig, _made_by, _needed, flags, method, _time, _date,
            checksum, comp_size, size, name_len, extra_len, comment_len,
            _disk_start, _int_attrs, _ext_attrs, offset,
        ) = _CENTRAL_HEADER.unpack_from(data, pos)
        if sig != CENTRAL_HEADER_SIGNATURE:
            raise ArchiveError(f"Bad central header signature at {pos}: {sig:#010x}")
        if method != METHOD_STORED or comp_size != size:
            raise ArchiveError(f"Entry {index} is compressed (method {method})")
        if flags & 0x08:
            raise ArchiveError(f"Entry {index} uses a data descriptor")

        name_start = pos + CENTRAL_HEADER_SIZE
        name = _decode_name(data[name_start:name_start + name_len], name_start)
        pos = name_start + name_len + extra_len + comment_len

        if offset + LOCAL_HEADER_SIZE > cd_offset:
            raise ArchiveError(f"Local header offset out of range for {name}: {offset}")
        (
            lsig, _lneeded, _lflags, lmethod, _ltime, _ldate,
            lchecksum, lcomp_size, lsize, lname_len, lextra_len,
        ) = _LOCAL_HEADER.unpack_from(data, offset)
        if lsig != LOCAL_HEADER_SIGNATURE:
            raise ArchiveError(f"Bad local header signature for {name} at {offset}: {lsig:#010x}")

        lname_start = offset + LOCAL_HEADER_SIZE
        lname = _decode_name(data[lname_start:lname_start + lname_len], lname_start)
        if lname != name:
            raise ArchiveError(f"Local/central name mismatch: {lname!r} != {name!r}")
        if (lmethod, lchecksum, lcomp_size, lsize) != (method, checksum, comp_size, size):
            raise ArchiveError(f"Local/central header mismatch for {name}")

        payload_start = lname_start + lname_len + lextra_len
        payload = data[payload_start:payload_start + size]
        if len(payload) != size:
            raise ArchiveError(f"Payload truncated for {name}")
        if crc32(payload) != checksum:
            raise ArchiveError(f"CRC mismatch for {name}")

        records.append(ArchiveRecord(
            name=name, offset=offset, crc=checksum, size=size, data=payload,
        ))

    if pos != eocd_pos:
        raise ArchiveError(f"Central directory size mismatch: parsed up to {pos}, EOCD at {eocd_pos}")

    return records
