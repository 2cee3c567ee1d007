#!/usr/bin/env python3
"""Pipe standard input into a rolling log file.

Meant to sit at the end of a pipeline, the way ``rotatelogs`` is used::

    my-service 2>&1 | logroll /var/log/my-service.log --roll daily
    my-service | logroll --config logroll.yaml

Several ``logroll`` processes may write the same file; exactly one of them
archives each generation.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, Optional, Sequence

from logroll.config.rotation_config import (
    RotationConfig,
    RotationConfigError,
    load_rotation_config,
    open_rolling_log,
)
from logroll.policies.date_rolling import ROLL_PERIODS


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="logroll",
        description="Copy standard input into a log file that rolls safely across processes.",
    )
    parser.add_argument("path", nargs="?", type=Path, help="Log file to append to.")
    parser.add_argument("--config", type=Path, help="YAML rotation config (path, roll, max_size, buffer_size, encoding).")
    policy = parser.add_mutually_exclusive_group()
    policy.add_argument("--roll", choices=ROLL_PERIODS, help="Roll on a calendar boundary.")
    policy.add_argument("--max-size", help="Roll once the file exceeds this size (e.g. 512K, 10M, 1G).")
    parser.add_argument("--buffer-size", type=int, help="Lines to buffer before flushing (default: 0, flush every line).")
    parser.add_argument("--encoding", help="File encoding (default: LOGROLL_ENCODING or utf-8).")
    parser.add_argument("--verbose", action="store_true", help="Log rotation decisions to stderr.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RotationConfig:
    """Merge a YAML config (if any) with command-line overrides."""
    if args.config:
        data = load_rotation_config(args.config).to_dict()
    else:
        data = {}

    if args.path:
        data["path"] = str(args.path)
    if args.roll:
        data["roll"] = args.roll
        data.pop("max_size", None)
    if args.max_size:
        data["max_size"] = args.max_size
        data.pop("roll", None)
    if args.buffer_size is not None:
        data["buffer_size"] = args.buffer_size
    if args.encoding:
        data["encoding"] = args.encoding

    if not data.get("path"):
        raise RotationConfigError("A log path is required (positional argument or 'path' in --config)")
    return RotationConfig.from_dict(data)


def run(config: RotationConfig, source: IO[str]) -> int:
    """Copy ``source`` line by line into the rolling log; return the line count."""
    count = 0
    with open_rolling_log(config) as writer:
        for line in source:
            writer.write(line.rstrip("\r\n"))
            count += 1
    return count


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        config = build_config(args)
    except RotationConfigError as exc:
        print(f"logroll: {exc}", file=sys.stderr)
        return 2

    try:
        run(config, sys.stdin)
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
