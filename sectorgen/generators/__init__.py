"""Code-emission backends for the generated contract package."""

from __future__ import annotations

from typing import List

from ..config import GenerationConfig
from .base import Generator
from .index import IndexGenerator
from .router import RouterGenerator
from .schemas import SchemaGenerator
from .types import TypeGenerator


def default_generators(config: GenerationConfig) -> List[Generator]:
    """Return the backends in pipeline order: schemas, router, types, index."""
    return [
        SchemaGenerator(config),
        RouterGenerator(config),
        TypeGenerator(config),
        IndexGenerator(config),
    ]


__all__ = [
    "Generator",
    "IndexGenerator",
    "RouterGenerator",
    "SchemaGenerator",
    "TypeGenerator",
    "default_generators",
]
