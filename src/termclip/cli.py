"""
Command line front end for termclip.

    echo hello | termclip
    termclip "some text"
    termclip --osc52 --verbose < notes.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from termclip.config import ClipboardConfig
from termclip.core.clipboard import set_text
from termclip.core.exceptions import CopyError
from termclip.core.native import NativeClipboard
from termclip.core.osc52 import build_sequence
from termclip.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termclip",
        description="Copy text to the system clipboard, or to the terminal via OSC52.",
    )
    parser.add_argument(
        "text",
        nargs="*",
        help="Text to copy (default: read standard input)",
    )
    parser.add_argument(
        "--osc52",
        action="store_true",
        help="Skip the native clipboard and use OSC52 directly",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the OSC52 sequence that would be sent instead of copying",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Report whether a native clipboard is available and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def _read_text(args: argparse.Namespace) -> str:
    if args.text:
        return " ".join(args.text)
    return sys.stdin.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.check:
        native = NativeClipboard.open()
        if native is None:
            print("native clipboard: unavailable (OSC52 fallback will be used)")
            return 1
        print("native clipboard: available")
        return 0

    text = _read_text(args)

    if args.dry_run:
        print(repr(build_sequence(text)))
        return 0

    config = ClipboardConfig.from_env()
    if args.osc52:
        config = replace(config, use_native=False)

    try:
        method = set_text(text, config=config)
    except CopyError as e:
        print(f"termclip: {e}", file=sys.stderr)
        return 1

    logger.info("copied via %s", method)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
