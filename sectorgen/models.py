"""Core data models shared across sectorgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

QUERY = "query"
MUTATION = "mutation"
OPERATION_KINDS = (QUERY, MUTATION)


@dataclass(frozen=True)
class EndpointInfo:
    """One procedure declared in a sector router."""

    name: str
    kind: str
    input_schema: Optional[str] = None


@dataclass
class SectorInfo:
    """A feature module and the endpoints recovered from its router file."""

    name: str
    endpoints: List[EndpointInfo] = field(default_factory=list)

    def endpoint_names(self) -> List[str]:
        return [endpoint.name for endpoint in self.endpoints]

    def input_schemas(self) -> List[str]:
        """Return validator references in declaration order, without repeats."""
        seen: List[str] = []
        for endpoint in self.endpoints:
            if endpoint.input_schema and endpoint.input_schema not in seen:
                seen.append(endpoint.input_schema)
        return seen


@dataclass(frozen=True)
class RenderedFile:
    """Generated module content waiting to be written."""

    path: Path
    content: str


@dataclass
class StageResult:
    """Output of a single generation stage."""

    files: List[RenderedFile] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def extend(self, other: "StageResult") -> None:
        self.files.extend(other.files)
        self.written.extend(other.written)
        self.errors.extend(other.errors)


@dataclass
class GenerationResult:
    """Report returned to the caller once a pipeline run finishes."""

    sectors: List[SectorInfo] = field(default_factory=list)
    generated_files: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors
