"""CLI entry point: ``eli5docs generate`` and ``eli5docs scan``."""

from __future__ import annotations

# Phase 1: Singleton logging, before any transitive litellm imports
from eli5docs.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

from pydantic import ValidationError  # noqa: E402

from eli5docs import __version__  # noqa: E402
from eli5docs.config import Settings  # noqa: E402
from eli5docs.constants import (  # noqa: E402
    DEFAULT_OUTPUT_FILE,
    ExportFormat,
    StageProgress,
)
from eli5docs.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
    set_level,
)
from eli5docs.pipeline.events import StageEvent  # noqa: E402
from eli5docs.resilience.errors import InvalidSourceError  # noqa: E402

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"eli5docs {__version__}")
        return

    if args.command == "generate":
        _run_generate(args)
    elif args.command == "scan":
        _run_scan(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="eli5docs",
        description=(
            "Generate plain-language documentation for code elements "
            "marked with @ExplainLikeImFive."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    generate = sub.add_parser(
        "generate",
        help="Scan a source tree and write the explanation document",
    )
    generate.add_argument(
        "source_dir",
        type=str,
        help="Directory containing Java sources",
    )
    generate.add_argument(
        "output_file",
        type=str,
        nargs="?",
        default=DEFAULT_OUTPUT_FILE,
        help=f"Output file (default: {DEFAULT_OUTPUT_FILE})",
    )
    generate.add_argument(
        "--format",
        "-f",
        choices=[str(f) for f in ExportFormat],
        default=None,
        help="Export format (default: from settings, else markdown)",
    )
    generate.add_argument(
        "--no-body",
        action="store_true",
        help="Do not extract method bodies",
    )
    generate.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    scan = sub.add_parser(
        "scan",
        help="List marked elements without generating explanations",
    )
    scan.add_argument(
        "source_dir",
        type=str,
        help="Directory containing Java sources",
    )
    scan.add_argument(
        "--no-body",
        action="store_true",
        help="Do not extract method bodies",
    )

    return parser


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        print(f"Error: invalid configuration\n{exc}", file=sys.stderr)
        sys.exit(1)


def _run_generate(args: argparse.Namespace) -> None:
    """Execute the generate command."""
    from eli5docs.pipeline.service import run_pipeline, validate_source_dir

    try:
        source_dir = validate_source_dir(Path(args.source_dir).resolve())
    except InvalidSourceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    settings = _load_settings()
    set_level("DEBUG" if args.verbose else settings.log_level)
    fmt = args.format or settings.output_format
    output_path = Path(args.output_file)

    def on_progress(event: StageEvent) -> None:
        if args.verbose and event.status == StageProgress.RUNNING:
            print(f"  {event.message or event.label}...")

    print(f"Scanning: {source_dir}")

    result = asyncio.run(
        run_pipeline(
            source_dir,
            output_path,
            settings,
            fmt=fmt,
            include_bodies=not args.no_body,
            on_progress=on_progress,
        )
    )

    if args.verbose:
        for stage in result.stages:
            status = "ok" if stage.ok else "FAILED"
            print(
                f"  [{status}] {stage.name} "
                f"({stage.duration_ms:.0f}ms)"
            )
            if stage.error:
                print(f"    Error: {stage.error}")

    failed = [s for s in result.stages if not s.ok]
    if failed:
        for stage in failed:
            print(
                f"Error: {stage.name} failed: {stage.error}",
                file=sys.stderr,
            )
        sys.exit(1)

    if not result.elements:
        print("No @ExplainLikeImFive elements found; nothing written.")
        return

    print(
        f"\nDone! {len(result.results)} elements explained "
        f"via {result.backend_name} ({result.tier} tier, "
        f"{result.fallback_count} placeholders)"
    )
    print(f"Output: {result.output_path} ({result.duration_ms:.0f}ms)")


def _run_scan(args: argparse.Namespace) -> None:
    """Execute the scan command."""
    from eli5docs.pipeline.service import validate_source_dir
    from eli5docs.scanner import scan_directory

    try:
        source_dir = validate_source_dir(Path(args.source_dir).resolve())
    except InvalidSourceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    settings = _load_settings()
    set_level(settings.log_level)
    elements = scan_directory(
        source_dir,
        include_bodies=not args.no_body,
        skip_directories=settings.skip_directories,
    )
    for element in elements:
        location = f"{element.source_file}:{element.source_line}"
        print(f"{element.kind}\t{element.name}\t{location}")
        print(f"    {element.signature}")
        if element.custom_prompt:
            print(f"    prompt: {element.custom_prompt}")
    print(f"\n{len(elements)} marked elements")


if __name__ == "__main__":
    main()
