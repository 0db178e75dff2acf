#!/usr/bin/env python3
"""Run one spec index update cycle.

Usage:
    python scripts/update_index.py --snapshot specs.jsonl --staging /srv/tmp --live /srv/public
    python scripts/update_index.py --bootstrap --staging /srv/tmp --live /srv/public

Without --staging/--live the SPECINDEX_STAGING_DIR and SPECINDEX_LIVE_DIR
environment variables are used.

Exit codes:
    0 - every index kind was built and published
    1 - at least one kind failed (see report), or bad arguments
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main() -> int:
    """Run an update cycle."""
    parser = argparse.ArgumentParser(description="Update full/latest/prerelease spec indices")
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="JSONL snapshot of published specs (name, version, platform)",
    )
    parser.add_argument(
        "--staging",
        type=Path,
        default=None,
        help="Staging directory (default: $SPECINDEX_STAGING_DIR)",
    )
    parser.add_argument(
        "--live",
        type=Path,
        default=None,
        help="Live directory (default: $SPECINDEX_LIVE_DIR)",
    )
    parser.add_argument(
        "--bootstrap",
        action="store_true",
        help="Publish empty indices for kinds missing from the live directory, then exit",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write the cycle report as JSON to this path",
    )
    parser.add_argument(
        "--metrics-out",
        type=Path,
        default=None,
        help="Write Prometheus metrics in textfile-collector format to this path",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON logs instead of human-readable lines",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    # Import after arg parsing to fail fast on bad args
    from prometheus_client import write_to_textfile

    from specindex.config import IndexerConfig
    from specindex.errors import SpecIndexError
    from specindex.indexer import IndexUpdater, bootstrap, dump_report_json
    from specindex.logging_config import get_logger, setup_logging
    from specindex.metrics import IndexMetrics
    from specindex.spec import load_snapshot

    setup_logging(level=args.log_level.upper(), json_format=args.json_logs)
    logger = get_logger("update_index")

    try:
        if args.staging and args.live:
            config = IndexerConfig(staging_dir=args.staging, live_dir=args.live)
        else:
            config = IndexerConfig.from_env()
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.bootstrap:
        try:
            result = bootstrap(config)
        except SpecIndexError as e:
            print(f"ERROR: bootstrap failed: {e}", file=sys.stderr)
            return 1
        if result is None:
            print("All indices already exist, nothing to bootstrap")
        else:
            print(f"Bootstrapped {len(result.published)} files")
        return 0

    if args.snapshot is None:
        print("ERROR: --snapshot is required unless --bootstrap is given", file=sys.stderr)
        return 1

    try:
        specs = load_snapshot(args.snapshot)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot load snapshot: {e}", file=sys.stderr)
        return 1
    logger.info("Snapshot loaded", extra={"specs": len(specs), "path": args.snapshot})

    metrics = IndexMetrics()
    report = IndexUpdater(config, metrics=metrics).run(specs)

    if args.report:
        args.report.write_bytes(dump_report_json(report))
    if args.metrics_out:
        write_to_textfile(str(args.metrics_out), metrics.registry)

    print("\n=== INDEX UPDATE ===")
    print(f"  Specs: {report.specs}")
    for result in report.kinds:
        status = "ok" if result.ok else f"FAILED ({result.error})"
        print(f"  {result.kind.value:<10} tuples={result.tuples} {status}")
    print(f"  Published: {len(report.published)} files")
    if report.publish_error is not None:
        print(f"  Publish FAILED: {report.publish_error}")

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
