"""Command line entry point for rendering a capture file."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .utils.config import default_output_path
from .utils.errors import BlueprintError, InvalidCaptureFile, make_error
from .utils.logging import configure_root
from .validators import load_records
from .writer import write_blueprint

logger = logging.getLogger("blueprint.cli")


def build_parser() -> argparse.ArgumentParser:
    """Create the ``blueprint-writer`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="blueprint-writer",
        description="Render captured test traffic as an API Blueprint document",
    )
    parser.add_argument("capture", type=str, help="Capture file written by the recorder")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output path without the .md suffix, default: $BLUEPRINT_OUTPUT",
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Document title, default: $BLUEPRINT_TITLE or 'API Documentation'",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def run(args: argparse.Namespace) -> int:
    output = args.output or default_output_path()
    if output is None:
        logger.error("No output path given; pass --output or set BLUEPRINT_OUTPUT")
        return 2
    try:
        records = load_records(args.capture)
        written = write_blueprint(records, output, title=args.title)
    except BlueprintError as exc:
        error = make_error(exc.code, str(exc))
        logger.error("[%s] %s", error["code"], error["message"])
        if isinstance(exc, InvalidCaptureFile):
            for detail in exc.errors:
                logger.error("  %s", detail)
        for hint in error["recovery"]:
            logger.info("hint: %s", hint)
        return 1
    except OSError as exc:
        logger.error("Cannot read or write %s: %s", exc.filename, exc.strerror)
        return 1
    logger.info("Wrote %d records to %s", len(records), written)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_root(logging.DEBUG if args.debug else logging.INFO)
    return run(args)


__all__ = ["build_parser", "main", "run"]


if __name__ == "__main__":
    sys.exit(main())
