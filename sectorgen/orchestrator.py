"""Pipeline orchestration for a generation run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import GenerationConfig
from .generators import Generator, default_generators
from .logging import get_logger
from .models import GenerationResult, RenderedFile, SectorInfo, StageResult
from .parsers.sectors import SectorScanner


class Orchestrator:
    """Runs discovery followed by the schema, router, type and index stages.

    Discovery failures propagate. Every later stage is isolated: an exception
    becomes an entry in ``GenerationResult.errors`` and the next stage runs
    regardless, so partial output is still produced for diagnosis.
    """

    def __init__(
        self,
        config: GenerationConfig,
        scanner: SectorScanner | None = None,
        generators: Optional[Iterable[Generator]] = None,
    ) -> None:
        self.config = config
        self.scanner = scanner or SectorScanner(config)
        self.generators: List[Generator] = (
            list(generators) if generators is not None else default_generators(config)
        )
        self.logger = get_logger("orchestrator")

    def generate(self, *, dry_run: bool = False) -> GenerationResult:
        """Run the full pipeline once and return the generation report."""
        self.logger.info("Starting generation for %s", self.config.root)
        sectors, discovery_errors = self.scanner.discover()

        result = GenerationResult(sectors=sectors, errors=list(discovery_errors), dry_run=dry_run)
        for generator in self.generators:
            stage = self._run_stage(generator, sectors, dry_run=dry_run)
            result.generated_files.extend(stage.written)
            result.errors.extend(stage.errors)

        if result.errors:
            self.logger.warning(
                "Generation finished with %d error(s); %d files produced",
                len(result.errors),
                len(result.generated_files),
            )
        else:
            self.logger.info("Generation finished; %d files produced", len(result.generated_files))
        return result

    def _run_stage(
        self, generator: Generator, sectors: Sequence[SectorInfo], *, dry_run: bool
    ) -> StageResult:
        self.logger.debug("Running %s stage", generator.label.lower())
        outcome = StageResult()
        try:
            stage = generator.generate(sectors, dry_run=dry_run)
            outcome.written.extend(stage.written)
            outcome.errors.extend(stage.errors)
            self._write_files(stage.files, outcome.written, dry_run=dry_run)
        except Exception as exc:
            message = f"{generator.label} generation failed: {exc}"
            self._log_exception(message)
            outcome.errors.append(message)
        return outcome

    def _write_files(
        self, files: Iterable[RenderedFile], written: List[Path], *, dry_run: bool
    ) -> None:
        for rendered in files:
            if dry_run:
                self.logger.info("Would write %s", self._display(rendered.path))
            else:
                rendered.path.parent.mkdir(parents=True, exist_ok=True)
                rendered.path.write_text(rendered.content, encoding="utf-8")
                self.logger.debug("Wrote %s", self._display(rendered.path))
            written.append(rendered.path)

    def _display(self, path: Path) -> str:
        try:
            return path.relative_to(self.config.root).as_posix()
        except ValueError:
            return str(path)

    def _log_exception(self, message: str) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s", message)
        else:
            self.logger.error("%s", message)


__all__ = ["Orchestrator"]
