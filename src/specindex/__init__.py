"""Package registry index compaction and publishing.

Maintains the full, latest and prerelease spec indices:
- Merge persisted tuples with a fresh snapshot, dedupe, derive views
- Versioned binary encoding with gzip siblings
- Per-file atomic publish with one shared batch timestamp
"""

from specindex.compactor import (
    build_index,
    compact_latest,
    filter_prerelease,
    load_persisted,
    merge,
)
from specindex.compressor import compress, compress_file, decompress
from specindex.config import DEFAULT_PLATFORM, IndexerConfig, IndexFile, IndexKind
from specindex.errors import (
    CompressionFailure,
    IndexCorrupt,
    IndexNotFound,
    IOMoveFailure,
    IOWriteFailure,
    SpecIndexError,
)
from specindex.extractor import extract_tuples, normalize_platform
from specindex.indexer import CycleReport, IndexUpdater, KindResult, bootstrap, dump_report_json
from specindex.models import IndexTuple, SpecsIndex, canonical_key
from specindex.publisher import AtomicPublisher, PublishArtifact, PublishResult, plan_publish
from specindex.serializer import SCHEMA_VERSION, decode, encode, read_index, write_index
from specindex.spec import PackageSpec, SpecRecord, load_snapshot
from specindex.version import Version, parse_version

__all__ = [
    "DEFAULT_PLATFORM",
    "SCHEMA_VERSION",
    "AtomicPublisher",
    "CompressionFailure",
    "CycleReport",
    "IOMoveFailure",
    "IOWriteFailure",
    "IndexCorrupt",
    "IndexFile",
    "IndexKind",
    "IndexNotFound",
    "IndexTuple",
    "IndexUpdater",
    "IndexerConfig",
    "KindResult",
    "PackageSpec",
    "PublishArtifact",
    "PublishResult",
    "SpecIndexError",
    "SpecRecord",
    "SpecsIndex",
    "Version",
    "bootstrap",
    "build_index",
    "canonical_key",
    "compact_latest",
    "compress",
    "compress_file",
    "decode",
    "decompress",
    "dump_report_json",
    "encode",
    "extract_tuples",
    "filter_prerelease",
    "load_persisted",
    "load_snapshot",
    "merge",
    "normalize_platform",
    "parse_version",
    "plan_publish",
    "read_index",
    "write_index",
]
