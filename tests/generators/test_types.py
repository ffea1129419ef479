from __future__ import annotations

from pathlib import Path
from typing import Sequence

from sectorgen.config import GenerationConfig
from sectorgen.generators.types import TypeGenerator
from sectorgen.models import EndpointInfo, SectorInfo
from tests._fixtures.sector_builder import SectorTreeBuilder
from tests._fixtures.type_tool import FakeTypeTool

SECTORS = [
    SectorInfo("project", [EndpointInfo("getProject", "query", "GetProjectSchema")]),
    SectorInfo("user", [EndpointInfo("getUser", "query", "GetUserSchema")]),
]


def _config(tree: SectorTreeBuilder) -> GenerationConfig:
    settings = {"enabled": True, "command": ["npx", "zod2ts"]}
    config = tree.config({"zod2ts": settings})
    schemas = config.output_path / "schemas"
    schemas.mkdir(parents=True, exist_ok=True)
    for sector in SECTORS:
        (schemas / f"{sector.name}-schemas.ts").write_text("export {};\n", encoding="utf-8")
    return config


def test_generate_is_noop_when_disabled(sector_tree: SectorTreeBuilder) -> None:
    tool = FakeTypeTool()

    result = TypeGenerator(sector_tree.config(), runner=tool).generate(SECTORS)

    assert result.files == []
    assert result.errors == []
    assert tool.calls == []


def test_generate_skips_tool_in_dry_run(sector_tree: SectorTreeBuilder) -> None:
    tool = FakeTypeTool()

    result = TypeGenerator(_config(sector_tree), runner=tool).generate(SECTORS, dry_run=True)

    assert result.files == []
    assert tool.calls == []


def test_generate_invokes_tool_per_sector(sector_tree: SectorTreeBuilder) -> None:
    config = _config(sector_tree)
    tool = FakeTypeTool()

    result = TypeGenerator(config, runner=tool).generate(SECTORS)

    assert result.errors == []
    assert tool.calls[0] == [
        "npx",
        "zod2ts",
        "--zod-path",
        str(config.output_path / "schemas" / "project-schemas.ts"),
        "--output-dir",
        str(config.types_path / "project"),
    ]
    assert tool.cwds == [config.root, config.root]
    assert result.written == [
        config.types_path / "project" / "project-types.ts",
        config.types_path / "user" / "user-types.ts",
    ]


def test_generate_writes_sector_and_root_barrels(sector_tree: SectorTreeBuilder) -> None:
    config = _config(sector_tree)

    result = TypeGenerator(config, runner=FakeTypeTool()).generate(SECTORS)

    files = {rendered.path: rendered.content for rendered in result.files}
    user_index = files[config.types_path / "user" / "index.ts"]
    assert "// This file re-exports all TypeScript types for user sector" in user_index
    assert "export * from './user-types.js';" in user_index
    root_index = files[config.types_path / "index.ts"]
    assert root_index.endswith(
        "export * from './project/index.js';\nexport * from './user/index.js';\n"
    )


def test_generate_skips_sectors_without_schema_module(sector_tree: SectorTreeBuilder) -> None:
    config = _config(sector_tree)
    (config.output_path / "schemas" / "project-schemas.ts").unlink()
    tool = FakeTypeTool()

    result = TypeGenerator(config, runner=tool).generate(SECTORS)

    assert len(tool.calls) == 1
    assert "project" not in _types_index(result, config)


def test_generate_records_tool_failure_and_continues(sector_tree: SectorTreeBuilder) -> None:
    config = _config(sector_tree)
    tool = FakeTypeTool(fail_for=["project"])

    result = TypeGenerator(config, runner=tool).generate(SECTORS)

    assert result.errors == [
        "Type generation failed for sector 'project': cannot parse project-schemas.ts"
    ]
    assert len(tool.calls) == 2
    assert result.written == [config.types_path / "user" / "user-types.ts"]
    project_index = next(
        rendered for rendered in result.files if rendered.path == config.types_path / "project" / "index.ts"
    )
    assert "export *" not in project_index.content


def test_generate_records_missing_tool(sector_tree: SectorTreeBuilder) -> None:
    config = _config(sector_tree)

    def missing_tool(args: Sequence[str], *, cwd: Path) -> None:
        raise FileNotFoundError(2, "No such file or directory", args[0])

    result = TypeGenerator(config, runner=missing_tool).generate(SECTORS)

    assert len(result.errors) == 2
    assert all("failed to start npx" in error for error in result.errors)


def _types_index(result, config: GenerationConfig) -> str:
    for rendered in result.files:
        if rendered.path == config.types_path / "index.ts":
            return rendered.content
    raise AssertionError("types index was not rendered")
