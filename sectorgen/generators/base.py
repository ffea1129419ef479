"""Base classes for code-emission backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import GenerationConfig
from ..logging import get_logger
from ..models import SectorInfo, StageResult

TEMPLATES_DIR = Path(__file__).with_name("templates")
GENERATED_HEADER = "// Auto-generated - do not edit"

_ENV: Environment | None = None


def template_env() -> Environment:
    """Return the shared Jinja environment for emitted modules."""
    global _ENV
    if _ENV is None:
        _ENV = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        _ENV.globals["header"] = GENERATED_HEADER
    return _ENV


def render_template(name: str, **context: Any) -> str:
    return template_env().get_template(name).render(**context)


def render_barrel(comment: str, targets: Sequence[str]) -> str:
    """Render a module that only re-exports ``targets``."""
    return render_template("barrel.ts.j2", comment=comment, targets=list(targets))


class Generator(ABC):
    """Contract for a generation stage that turns the sector model into files."""

    #: Label used in stage-scoped error messages ("<label> generation failed: ...").
    label = "Code"
    logger_name = "generators"

    def __init__(self, config: GenerationConfig) -> None:
        self.config = config
        self.logger = get_logger(self.logger_name)

    @abstractmethod
    def generate(self, sectors: Sequence[SectorInfo], *, dry_run: bool = False) -> StageResult:
        """Produce rendered files (and any stage-scoped errors) for ``sectors``."""
