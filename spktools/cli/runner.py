#!/usr/bin/env python3
"""
spktools command line.

Usage:
    # Outcome tallies, reversals and king heatmap
    spktools count data/selfplay -r

    # Drop unreadable records from every file in place
    spktools fix data/selfplay -r

    # Reproducibly reorder records of clean files
    spktools shuffle data/selfplay/*.spk --seed 7

The record decoder and rules engine are plugged in by import path with
--codec / --rules, a YAML --config file, or SPKTOOLS_CODEC / SPKTOOLS_RULES.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from spktools import __version__
from spktools.cli.output import CountSummary, MaintenanceSummary, Reporter
from spktools.codec import RecordDecoder, load_decoder
from spktools.config import ToolConfig, load_config
from spktools.discovery import collect_files
from spktools.errors import ConfigurationError, RecordFileError, SpkToolsError
from spktools.rewrite import repair
from spktools.rules import RulesEngine, load_rules
from spktools.shuffle import shuffle
from spktools.stats import aggregate

logger = logging.getLogger(__name__)

__all__ = ["build_parser", "main", "run"]


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("paths", nargs="+", type=Path, help="Record files or directories")
    common.add_argument(
        "-r", "--recursive",
        action="store_true",
        default=None,
        help="Descend into subdirectories",
    )
    common.add_argument("--config", type=Path, default=None, help="YAML config file")
    common.add_argument("--codec", default=None, help="Record decoder as package.module:attr")
    common.add_argument("--rules", default=None, help="Rules engine as package.module:attr")
    common.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    common.add_argument(
        "--summary-json",
        type=Path,
        default=None,
        help="Also write the batch summary to this JSON file",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(
        prog="spktools",
        description="Scan, repair, shuffle and summarise self-play record files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    count = subparsers.add_parser("count", parents=[common], help="Summarise games and positions")
    count.add_argument("-q", "--quick", action="store_true", help="Skip game replay and the king heatmap")
    count.add_argument(
        "-e", "--eval-limit",
        type=int,
        default=None,
        help="Positions with |score| above this are not counted (default: 25001)",
    )

    subparsers.add_parser("fix", parents=[common], help="Remove broken records in place")

    shuffle_parser = subparsers.add_parser("shuffle", parents=[common], help="Shuffle records in place")
    shuffle_parser.add_argument("-s", "--seed", type=int, default=None, help="Shuffle seed (default: 42)")

    return parser


def _resolve_codec(config: ToolConfig, codec: RecordDecoder | None) -> RecordDecoder:
    if codec is not None:
        return codec
    if not config.codec:
        raise ConfigurationError("No record codec configured; pass --codec or set SPKTOOLS_CODEC")
    return load_decoder(config.codec)


def _resolve_rules(config: ToolConfig, rules: RulesEngine | None) -> RulesEngine:
    if rules is not None:
        return rules
    if not config.rules:
        raise ConfigurationError(
            "No rules engine configured; pass --rules, set SPKTOOLS_RULES or use --quick"
        )
    return load_rules(config.rules)


def _write_summary_json(path: Path, summary: dict[str, Any]) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2, sort_keys=True)
    except OSError as e:
        raise RecordFileError(f"Cannot write summary: {e}", path=str(path)) from e


def _run_count(args, config, files, codec, rules, reporter) -> dict[str, Any]:
    summary = CountSummary()
    for path in files:
        result = aggregate(path, codec, rules, args.quick, config.eval_limit, summary.heatmap)
        logger.debug(f"{path}: {result.games} games, {result.positions} positions")
        summary.add(result)
    reporter.count_summary(summary, show_heatmap=not args.quick)
    return summary.to_dict(include_heatmap=not args.quick)


def _run_maintenance(args, config, files, codec, reporter) -> dict[str, Any]:
    summary = MaintenanceSummary()
    for path in files:
        if args.command == "fix":
            result = repair(path, codec)
            reporter.repair_status(result)
        else:
            result = shuffle(path, codec, config.seed)
            reporter.shuffle_status(result)
        summary.add(result)
    reporter.maintenance_summary(summary)
    return summary.to_dict()


def main(
    argv: list[str] | None = None,
    codec: RecordDecoder | None = None,
    rules: RulesEngine | None = None,
) -> int:
    """Run one batch. ``codec`` / ``rules`` bypass import-path resolution."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(
            args.config,
            recursive=args.recursive,
            codec=args.codec,
            rules=args.rules,
            eval_limit=getattr(args, "eval_limit", None),
            seed=getattr(args, "seed", None),
            color=False if args.no_color else None,
        )
        codec = _resolve_codec(config, codec)
        if args.command == "count" and not args.quick:
            rules = _resolve_rules(config, rules)

        files = collect_files(args.paths, config.recursive, config.extension)
        reporter = Reporter(use_colors=config.color)
        reporter.checking(len(files))

        if args.command == "count":
            summary = _run_count(args, config, files, codec, rules, reporter)
        else:
            summary = _run_maintenance(args, config, files, codec, reporter)

        if args.summary_json:
            summary["command"] = args.command
            _write_summary_json(args.summary_json, summary)
    except SpkToolsError as e:
        logger.error(str(e))
        return 1

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
