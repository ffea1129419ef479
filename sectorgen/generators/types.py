"""Boundary to the external validator-to-type tool (zod2ts)."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..config import GenerationConfig
from ..models import RenderedFile, SectorInfo, StageResult
from .base import Generator, render_barrel
from .naming import schema_module

Runner = Callable[..., None]


class TypeGenerator(Generator):
    """Runs the type tool once per sector and writes the type barrels.

    The tool is invoked as ``<command> --zod-path <schema> --output-dir <dir>``
    and is expected to write ``.ts`` declarations into ``<dir>``.
    """

    label = "TypeScript types"
    logger_name = "generators.types"

    def __init__(self, config: GenerationConfig, runner: Runner | None = None) -> None:
        super().__init__(config)
        self._runner = runner or self._default_runner

    def generate(self, sectors: Sequence[SectorInfo], *, dry_run: bool = False) -> StageResult:
        result = StageResult()
        if not self.config.zod2ts.enabled:
            return result
        if dry_run:
            self.logger.info("Skipping type generation in dry-run mode")
            return result

        types_dir = self.config.types_path
        schemas_dir = self.config.output_path / "schemas"
        generated_sectors: List[str] = []
        for sector in sectors:
            schema_file = schemas_dir / f"{schema_module(sector.name)}.ts"
            if not schema_file.exists():
                self.logger.debug("No schema module for sector %s; skipping types", sector.name)
                continue

            sector_dir = types_dir / sector.name
            sector_dir.mkdir(parents=True, exist_ok=True)
            produced: List[Path] = []
            try:
                self._run_tool(schema_file, sector_dir)
                produced = _list_declarations(sector_dir)
            except subprocess.CalledProcessError as exc:
                detail = (exc.stderr or "").strip() or f"process exited with code {exc.returncode}"
                result.errors.append(
                    f"Type generation failed for sector '{sector.name}': {detail}"
                )
            except OSError as exc:
                result.errors.append(
                    f"Type generation failed for sector '{sector.name}': "
                    f"failed to start {self.config.zod2ts.command[0]}: {exc}"
                )

            result.written.extend(produced)
            result.files.append(self._sector_index(sector.name, sector_dir, produced))
            generated_sectors.append(sector.name)

        result.files.append(
            RenderedFile(
                path=types_dir / "index.ts",
                content=render_barrel(
                    "This file re-exports all TypeScript types from sectors",
                    [f"./{name}/index.js" for name in generated_sectors],
                ),
            )
        )
        for error in result.errors:
            self.logger.error(error)
        return result

    def _run_tool(self, schema_file: Path, output_dir: Path) -> None:
        args = [
            *self.config.zod2ts.command,
            "--zod-path",
            str(schema_file),
            "--output-dir",
            str(output_dir),
        ]
        self.logger.debug("Running %s", " ".join(args))
        self._runner(args, cwd=self.config.root)

    def _sector_index(self, sector: str, sector_dir: Path, produced: Iterable[Path]) -> RenderedFile:
        stems = sorted(
            path.stem
            for path in produced
            if path.parent == sector_dir and path.stem != "index"
        )
        return RenderedFile(
            path=sector_dir / "index.ts",
            content=render_barrel(
                f"This file re-exports all TypeScript types for {sector} sector",
                [f"./{stem}.js" for stem in stems],
            ),
        )

    @staticmethod
    def _default_runner(args: Sequence[str], *, cwd: Path) -> None:
        subprocess.run(
            list(args),
            cwd=str(cwd),
            env=os.environ.copy(),
            check=True,
            text=True,
            capture_output=True,
        )


def _list_declarations(directory: Path) -> List[Path]:
    return sorted(
        path for path in directory.rglob("*.ts") if path.is_file() and path.name != "index.ts"
    )


__all__ = ["TypeGenerator"]
