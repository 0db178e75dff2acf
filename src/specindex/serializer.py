"""Binary index encoding.

Layout (all integers big-endian):

    magic           4 bytes   b"SPIX"
    schema_version  u8        1
    tuple_count     u32
    tuples          tuple_count x (name, version, platform)

Each field is a u32 byte length followed by that many UTF-8 bytes. The
version field holds the raw version string. Tuples are written in the
order given, so identical indices always encode to identical bytes.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from specindex.errors import IndexCorrupt, IndexNotFound, IOWriteFailure
from specindex.models import IndexTuple, SpecsIndex
from specindex.version import parse_version

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from specindex.config import IndexKind

MAGIC = b"SPIX"
SCHEMA_VERSION = 1
SUPPORTED_SCHEMA_VERSIONS = frozenset({SCHEMA_VERSION})

_HEADER = struct.Struct(">4sBI")
_LENGTH = struct.Struct(">I")


def _encode_field(value: str) -> bytes:
    data = value.encode("utf-8")
    return _LENGTH.pack(len(data)) + data


def encode(index: Iterable[IndexTuple]) -> bytes:
    """Encode tuples in the given order."""
    body = bytearray()
    count = 0
    for t in index:
        body += _encode_field(t.name)
        body += _encode_field(t.version.raw)
        body += _encode_field(t.platform)
        count += 1
    return _HEADER.pack(MAGIC, SCHEMA_VERSION, count) + bytes(body)


class _Reader:
    """Cursor over encoded bytes that raises ValueError on truncation."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            msg = f"truncated at offset {self._offset}: need {size} bytes, have {self.remaining}"
            raise ValueError(msg)
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def field(self) -> str:
        (length,) = _LENGTH.unpack(self.take(_LENGTH.size))
        return self.take(length).decode("utf-8")


def decode(data: bytes) -> SpecsIndex:
    """Decode an encoded index.

    Raises:
        IndexCorrupt: On bad magic, unknown schema version, truncation,
            trailing bytes, invalid UTF-8 or an invalid version string.
    """
    reader = _Reader(data)
    try:
        magic, schema_version, count = _HEADER.unpack(reader.take(_HEADER.size))
    except ValueError as e:
        raise IndexCorrupt("Index header is truncated", cause=e) from e

    if magic != MAGIC:
        raise IndexCorrupt(f"Bad index magic: {magic!r}")
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise IndexCorrupt(f"Unknown index schema version: {schema_version}")

    index: SpecsIndex = []
    try:
        for _ in range(count):
            name = reader.field()
            version = parse_version(reader.field())
            platform = reader.field()
            index.append(IndexTuple(name, version, platform))
    except ValueError as e:
        # UnicodeDecodeError is a ValueError too
        raise IndexCorrupt(f"Failed to decode tuple {len(index)} of {count}", cause=e) from e

    if reader.remaining:
        raise IndexCorrupt(f"{reader.remaining} trailing bytes after {count} tuples")
    return index


def write_index(index: Iterable[IndexTuple], path: Path, kind: IndexKind | None = None) -> int:
    """Encode and write an index.

    Returns:
        Number of bytes written.

    Raises:
        IOWriteFailure: If the file cannot be written.
    """
    data = encode(index)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.write(data)
    except OSError as e:
        raise IOWriteFailure("Failed to write index", kind=kind, path=path, cause=e) from e
    return len(data)


def read_index(path: Path, kind: IndexKind | None = None) -> SpecsIndex:
    """Read and decode an index file.

    Raises:
        IndexNotFound: If the file doesn't exist.
        IndexCorrupt: If the file cannot be read or decoded.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise IndexNotFound("Persisted index not found", kind=kind, path=path, cause=e) from e
    except OSError as e:
        raise IndexCorrupt("Failed to read index", kind=kind, path=path, cause=e) from e

    try:
        return decode(data)
    except IndexCorrupt as e:
        e.kind = kind
        e.path = path
        raise
