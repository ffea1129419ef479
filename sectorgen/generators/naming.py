"""Identifier and file-name helpers shared by the emission backends."""

from __future__ import annotations

import re

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_SEPARATORS = re.compile(r"[^A-Za-z0-9_$]+")


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def schema_module(sector: str) -> str:
    """File stem of a sector's copied schema module, e.g. ``user-schemas``."""
    return f"{sector}-schemas"


def schema_namespace(sector: str) -> str:
    """Import namespace bound to a sector's schema module.

    ``user`` becomes ``userSchemas``; names that are not identifiers are
    camel-cased (``user-profile`` -> ``userProfileSchemas``).
    """
    if is_identifier(sector):
        return f"{sector}Schemas"
    parts = [part for part in _SEPARATORS.split(sector) if part]
    if not parts:
        raise ValueError(f"Cannot derive an identifier from sector name {sector!r}")
    head, *tail = parts
    stem = head + "".join(part[:1].upper() + part[1:] for part in tail)
    if stem[0].isdigit():
        stem = f"_{stem}"
    return f"{stem}Schemas"


def property_key(name: str) -> str:
    """Render ``name`` as an object-literal key, quoting it when required."""
    if is_identifier(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


__all__ = ["is_identifier", "property_key", "schema_module", "schema_namespace"]
