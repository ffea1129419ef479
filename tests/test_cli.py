"""CLI parser behaviour tests."""

from __future__ import annotations

import pytest

from sectorgen import cli
from sectorgen.cli import _build_parser, main
from tests._fixtures.sector_builder import SectorTreeBuilder


def test_cli_accepts_debug_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--debug", "generate", "-c", "sectorgen.yml"])
    assert args.debug is True
    assert args.command == "generate"


def test_cli_accepts_debug_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["watch", "--config", "sectorgen.yml", "--debug"])
    assert args.debug is True
    assert args.command == "watch"


def test_cli_accepts_dry_run_and_project() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "-c", "cfg.yml", "-p", "app", "--dry-run"])
    assert args.dry_run is True
    assert args.config == "cfg.yml"
    assert args.project == "app"


def test_cli_requires_config() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate"])


def test_main_generate_succeeds(sample_tree: SectorTreeBuilder, capsys) -> None:
    config_file = sample_tree.root / "sectorgen.yml"

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-c", str(config_file)])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Configuration:" in out
    assert "Generation completed successfully! Generated 5 files." in out
    assert (sample_tree.output_dir / "router.ts").is_file()


def test_main_dry_run_lists_files(sample_tree: SectorTreeBuilder, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-c", str(sample_tree.root), "--dry-run"])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Dry run mode - no files will be written" in out
    assert "Dry run completed. Would generate 5 files:" in out
    assert "router.ts" in out
    assert not sample_tree.output_dir.exists()


def test_main_reports_stage_errors(sector_tree: SectorTreeBuilder, capsys) -> None:
    sector_tree.add_sector(
        "user",
        router="export const r = t.router({ getUser: t.procedure.input(MissingSchema).query(() => ({})) });\n",
        schemas="export const Other = 1;\n",
    )
    config_file = sector_tree.write_config()

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-c", str(config_file)])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "Generation completed with errors:" in err
    assert "  - Sector 'user' references MissingSchema" in err


def test_main_exits_on_missing_config(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-c", str(tmp_path / "missing.yml")])

    assert excinfo.value.code == 1
    assert "Fatal error: Config file not found" in capsys.readouterr().err


def test_main_exits_when_no_sectors_found(sector_tree: SectorTreeBuilder, capsys) -> None:
    config_file = sector_tree.write_config()

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-c", str(config_file)])

    assert excinfo.value.code == 1
    assert "Fatal error: Failed to discover sectors" in capsys.readouterr().err


def test_main_watch_stops_cleanly_on_interrupt(
    sample_tree: SectorTreeBuilder, monkeypatch, capsys
) -> None:
    def interrupted(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "watch_and_regenerate", interrupted)

    with pytest.raises(SystemExit) as excinfo:
        main(["watch", "-c", str(sample_tree.root)])

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Starting watch mode..." in out
    assert "Stopped watching" in out


def test_main_writes_log_file(sample_tree: SectorTreeBuilder, tmp_path) -> None:
    log_file = tmp_path / "run.log"

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-c", str(sample_tree.root), "--log-file", str(log_file)])

    assert excinfo.value.code == 0
    logged = log_file.read_text(encoding="utf-8")
    assert "INFO sectorgen.discovery: Discovered 2 sectors" in logged
