"""
Command-line entry point.

    repolens src/app.ts src/util.py --pretty

Reads each file, runs analyze_file() and prints one JSON document.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .analysis import analyze_file

logger = logging.getLogger(__name__)


def _safe_decode(data: bytes) -> str:
    """Decode UTF-8, replacing invalid bytes instead of failing."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("utf-8", errors="replace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repolens",
        description="Extract functions, variables, calls, imports, complexity and security findings from source files.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Source files to analyze")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    exit_code = 0
    results = []
    for path in args.files:
        try:
            content = _safe_decode(path.read_bytes())
        except OSError as e:
            print(f"repolens: cannot read {path}: {e}", file=sys.stderr)
            exit_code = 1
            continue
        logger.info(f"Analyzing {path}")
        results.append(analyze_file(content, str(path)).to_dict())

    json.dump({"files": results}, sys.stdout, indent=2 if args.pretty else None)
    sys.stdout.write("\n")
    return exit_code
