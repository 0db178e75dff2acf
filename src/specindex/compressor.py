"""gzip compression of index artifacts.

The gzip header is written with mtime 0 and no file name, so identical
input bytes compress to identical output for a given zlib build.
"""

from __future__ import annotations

import gzip
import zlib
from typing import TYPE_CHECKING

from specindex.errors import CompressionFailure, IOWriteFailure

if TYPE_CHECKING:
    from pathlib import Path

    from specindex.config import IndexKind


def compress(data: bytes, level: int = 9) -> bytes:
    """Compress bytes to a gzip stream.

    Raises:
        CompressionFailure: If zlib rejects the input or level.
    """
    try:
        return gzip.compress(data, compresslevel=level, mtime=0)
    except (zlib.error, ValueError) as e:
        raise CompressionFailure("Failed to compress artifact", cause=e) from e


def decompress(data: bytes) -> bytes:
    """Decompress a gzip stream.

    Raises:
        CompressionFailure: If the stream is not valid gzip.
    """
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise CompressionFailure("Failed to decompress artifact", cause=e) from e


def compress_file(src: Path, dest: Path, kind: IndexKind | None = None, level: int = 9) -> int:
    """Write the compressed sibling of ``src`` to ``dest``.

    Returns:
        Number of compressed bytes written.

    Raises:
        IOWriteFailure: If ``src`` cannot be read or ``dest`` cannot be written.
        CompressionFailure: If compression fails.
    """
    try:
        data = src.read_bytes()
    except OSError as e:
        raise IOWriteFailure("Failed to read artifact for compression", kind=kind, path=src, cause=e) from e

    try:
        compressed = compress(data, level=level)
    except CompressionFailure as e:
        e.kind = kind
        e.path = src
        raise

    try:
        with dest.open("wb") as f:
            f.write(compressed)
    except OSError as e:
        raise IOWriteFailure("Failed to write compressed artifact", kind=kind, path=dest, cause=e) from e
    return len(compressed)
