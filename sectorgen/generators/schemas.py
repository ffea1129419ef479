"""Copies sector validator modules into the generated package."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Set

from ..config import substitute_sector
from ..models import RenderedFile, SectorInfo, StageResult
from .base import Generator, render_barrel
from .naming import schema_module

_EXPORT_DECLARATION = re.compile(
    r"\bexport\s+(?:declare\s+)?(?:async\s+)?"
    r"(?:function\*?|class|type|interface|enum)\s+([A-Za-z_$][\w$]*)"
)
_VARIABLE_EXPORT = re.compile(r"\bexport\s+(?:declare\s+)?(?:const|let|var)\s+")
_DECLARATOR_NAME = re.compile(r"\s*([A-Za-z_$][\w$]*)")
_EXPORT_LIST = re.compile(r"\bexport\s*(?:type\s*)?\{([^}]*)\}")
_NAMESPACE_EXPORT = re.compile(r"\bexport\s*\*\s*as\s+([A-Za-z_$][\w$]*)")
_COMMONJS_EXPORT = re.compile(r"\bexports\.([A-Za-z_$][\w$]*)\s*=")
# Re-exports whose names live in another module.
_OPAQUE_EXPORT = re.compile(r"\bexport\s*\*\s*from\b|__exportStar\(|\bmodule\.exports\s*=")
_STATEMENT_START = re.compile(
    r"\s*(?:export|import|const|let|var|function|class|type|interface|enum|declare)\b"
)

_OPENERS = "([{"
_CLOSERS = ")]}"
_QUOTES = "'\"`"


def exported_symbols(source: str) -> Optional[Set[str]]:
    """Return the names a JS/TS module exports, or None when they cannot be listed.

    Wildcard re-exports (``export * from``) and destructured variable exports
    make the set open-ended, so callers must not treat a missing name as an
    error in that case.
    """
    if _OPAQUE_EXPORT.search(source):
        return None

    names = set(_EXPORT_DECLARATION.findall(source))
    names.update(_NAMESPACE_EXPORT.findall(source))
    names.update(_COMMONJS_EXPORT.findall(source))
    for match in _VARIABLE_EXPORT.finditer(source):
        declared = _declared_names(source, match.end())
        if declared is None:
            return None
        names.update(declared)
    for block in _EXPORT_LIST.findall(source):
        for item in block.split(","):
            item = item.strip()
            if not item:
                continue
            alias = re.split(r"\s+as\s+", item)
            names.add(alias[-1].strip())
    return names


def _declared_names(source: str, start: int) -> Optional[List[str]]:
    """Names bound by the declarator list starting at ``start``.

    ``export const A = x, B = y`` yields ``["A", "B"]``. Returns None for
    destructuring patterns.
    """
    names: List[str] = []
    position: Optional[int] = start
    while position is not None:
        match = _DECLARATOR_NAME.match(source, position)
        if match is None:
            return None
        names.append(match.group(1))
        position = _next_declarator(source, match.end())
    return names


def _next_declarator(source: str, index: int) -> Optional[int]:
    """Index just past the next top-level comma of a declaration, or None at its end."""
    depth = 0
    length = len(source)
    while index < length:
        char = source[index]
        if char in _QUOTES:
            index = _skip_string(source, index)
            continue
        if source.startswith("//", index):
            newline = source.find("\n", index)
            index = length if newline == -1 else newline
            continue
        if source.startswith("/*", index):
            close = source.find("*/", index + 2)
            index = length if close == -1 else close + 2
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            if depth == 0:
                return None
            depth -= 1
        elif depth == 0:
            if char == ",":
                return index + 1
            if char == ";":
                return None
            if char == "\n" and _STATEMENT_START.match(source, index):
                return None
        index += 1
    return None


def _skip_string(source: str, index: int) -> int:
    quote = source[index]
    index += 1
    while index < len(source):
        char = source[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        index += 1
    return index


class SchemaGenerator(Generator):
    """Re-exports each sector's input validators from a central ``schemas/`` directory."""

    label = "Schema"
    logger_name = "generators.schemas"

    @property
    def schemas_dir(self) -> Path:
        return self.config.output_path / "schemas"

    def compiled_root(self) -> Optional[Path]:
        """Return the compiled sectors tree when one is configured and present."""
        dist = self.config.dist_path
        if dist is not None and dist.is_dir():
            return dist
        return None

    def generate(self, sectors: Sequence[SectorInfo], *, dry_run: bool = False) -> StageResult:
        result = StageResult()
        compiled = self.compiled_root()
        extension = ".js" if compiled is not None else ".ts"
        if compiled is not None:
            self.logger.debug("Copying compiled schemas from %s", compiled)

        copied: List[str] = []
        for sector in sectors:
            source = self._source_file(sector.name, compiled)
            target = self.schemas_dir / f"{schema_module(sector.name)}{extension}"
            try:
                content = source.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                message = f"Schema copy failed for sector '{sector.name}' ({source}): {exc}"
                self.logger.error(message)
                result.errors.append(message)
                continue

            result.files.append(RenderedFile(path=target, content=content))
            copied.append(sector.name)
            if compiled is not None:
                source_map = self._source_map(source, target)
                if source_map is not None:
                    result.files.append(source_map)
            result.errors.extend(self._check_linkage(sector, content, source))

        targets = [f"./{schema_module(name)}.js" for name in copied]
        result.files.append(
            RenderedFile(
                path=self.schemas_dir / f"index{extension}",
                content=render_barrel("This file re-exports all schemas from sectors", targets),
            )
        )
        self.logger.info("Prepared %d schema modules", len(copied))
        return result

    def _source_file(self, sector: str, compiled: Optional[Path]) -> Path:
        relative = substitute_sector(self.config.source.schema_pattern, sector)
        if compiled is None:
            return self.config.sectors_path / relative
        if relative.endswith(".ts"):
            relative = relative[: -len(".ts")] + ".js"
        return compiled / relative

    def _source_map(self, source: Path, target: Path) -> Optional[RenderedFile]:
        map_file = source.with_name(source.name + ".map")
        try:
            content = map_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
        return RenderedFile(path=target.with_name(target.name + ".map"), content=content)

    def _check_linkage(self, sector: SectorInfo, content: str, source: Path) -> List[str]:
        exported = exported_symbols(content)
        if exported is None:
            self.logger.debug(
                "Skipping export check for sector %s: %s re-exports from other modules",
                sector.name,
                source.name,
            )
            return []
        missing = [name for name in sector.input_schemas() if name not in exported]
        return [
            f"Sector '{sector.name}' references {name} but {source.name} does not export it"
            for name in missing
        ]


__all__ = ["SchemaGenerator", "exported_symbols"]
