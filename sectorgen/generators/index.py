"""Emits the package entry module."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from ..models import RenderedFile, SectorInfo, StageResult
from .base import Generator, render_barrel


class IndexGenerator(Generator):
    """Ties router, schemas and (optionally) types together in ``index.ts``."""

    label = "Index"
    logger_name = "generators.index"

    def generate(self, sectors: Sequence[SectorInfo], *, dry_run: bool = False) -> StageResult:
        targets = ["./router.js", "./schemas/index.js"]
        if self.config.zod2ts.enabled:
            targets.append(f"{self._types_prefix()}/index.js")
        content = render_barrel(
            f"Main exports for {self.config.generation.package_name}", targets
        )
        path = self.config.output_path / "index.ts"
        return StageResult(files=[RenderedFile(path=path, content=content)])

    def _types_prefix(self) -> str:
        relative = Path(os.path.relpath(self.config.types_path, self.config.output_path))
        prefix = relative.as_posix()
        return prefix if prefix.startswith("..") else f"./{prefix}"


__all__ = ["IndexGenerator"]
