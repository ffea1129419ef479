"""CLI entrypoints for sectorgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import GenerationConfig, describe_config, load_config
from .errors import SectorGenError
from .logging import configure_logging
from .models import GenerationResult
from .orchestrator import Orchestrator
from .watch import watch_and_regenerate


def _add_debug_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Enable verbose debug output.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "--debug",
        **kwargs,
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        help="Path to the sectorgen.yml config file (or the directory containing it).",
    )
    parser.add_argument(
        "-p",
        "--project",
        default=None,
        help="Project directory relative paths resolve against (defaults to the config file's directory).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records (with timestamps) to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sectorgen",
        description="Generate a typed router contract from sector-based procedure routers.",
    )
    _add_debug_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the router, schemas and types once.",
    )
    _add_debug_option(generate_parser, suppress_default=True)
    _add_source_options(generate_parser)
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be generated without writing files.",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Regenerate whenever a file under the sectors directory changes.",
    )
    _add_debug_option(watch_parser, suppress_default=True)
    _add_source_options(watch_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for sectorgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    debug = bool(args.debug)

    configure_logging(
        verbose=debug, log_file=Path(args.log_file) if args.log_file else None
    )

    print(f"Working directory: {Path.cwd()}")
    try:
        config = load_config(Path(args.config), Path(args.project) if args.project else None)
    except SectorGenError as exc:
        parser.exit(1, f"Fatal error: {exc}\n")

    for line in describe_config(config, debug=debug):
        print(line)
    print("")

    if args.command == "generate":
        parser.exit(_run_generate(parser, config, dry_run=bool(getattr(args, "dry_run", False))))
    elif args.command == "watch":
        parser.exit(_run_watch(config))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(
    parser: argparse.ArgumentParser, config: GenerationConfig, *, dry_run: bool
) -> int:
    if dry_run:
        print("Dry run mode - no files will be written")
    try:
        result = Orchestrator(config).generate(dry_run=dry_run)
    except SectorGenError as exc:
        parser.exit(1, f"Fatal error: {exc}\n")
    return _report(result)


def _run_watch(config: GenerationConfig) -> int:
    print("Starting watch mode...")
    print("Press Ctrl+C to stop watching")
    try:
        watch_and_regenerate(Orchestrator(config), _report, _report_failure)
    except KeyboardInterrupt:
        print("Stopped watching")
    return 0


def _report(result: GenerationResult) -> int:
    if result.errors:
        print("Generation completed with errors:", file=sys.stderr)
        for error in result.errors:
            print(f"  - {error}", file=sys.stderr)
        return 1
    if result.dry_run:
        print(f"Dry run completed. Would generate {len(result.generated_files)} files:")
        for path in result.generated_files:
            print(f"  - {_relativize(path)}")
        return 0
    print(f"Generation completed successfully! Generated {len(result.generated_files)} files.")
    return 0


def _report_failure(exc: Exception) -> None:
    print(f"Regeneration failed: {exc}", file=sys.stderr)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
