"""Emits the merged router module and its contract type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..models import QUERY, EndpointInfo, RenderedFile, SectorInfo, StageResult
from .base import Generator, render_template
from .naming import property_key, schema_module, schema_namespace


@dataclass(frozen=True)
class _SectorView:
    key: str
    namespace: str
    module: str
    definitions: List[str]


def endpoint_definition(endpoint: EndpointInfo, namespace: str) -> str:
    """Render one stub procedure, e.g. ``getUser: t.procedure.input(ns.X).query(() => ({}))``."""
    key = property_key(endpoint.name)
    if endpoint.input_schema:
        schema_ref = f"{namespace}.{endpoint.input_schema}"
        return f"{key}: t.procedure.input({schema_ref}).{endpoint.kind}(() => ({{}}))"
    stub = "[]" if endpoint.kind == QUERY else "({})"
    return f"{key}: t.procedure.{endpoint.kind}(() => {stub})"


class RouterGenerator(Generator):
    """Builds ``router.ts`` with one nested router per sector."""

    label = "Router"
    logger_name = "generators.router"

    def generate(self, sectors: Sequence[SectorInfo], *, dry_run: bool = False) -> StageResult:
        views = self._sector_views(sectors)
        content = render_template(
            "router.ts.j2",
            sectors=views,
            sectors_dir=self.config.source.sectors_dir,
            router_name=self.config.generation.router_name,
        )
        path = self.config.output_path / "router.ts"
        self.logger.info(
            "Prepared router %s with %d sectors", self.config.generation.router_name, len(views)
        )
        return StageResult(files=[RenderedFile(path=path, content=content)])

    def _sector_views(self, sectors: Sequence[SectorInfo]) -> List[_SectorView]:
        owners: Dict[str, str] = {}
        views: List[_SectorView] = []
        for sector in sectors:
            namespace = schema_namespace(sector.name)
            if namespace in owners:
                raise ValueError(
                    f"Sectors '{owners[namespace]}' and '{sector.name}' both map to "
                    f"the schema namespace {namespace}"
                )
            owners[namespace] = sector.name
            views.append(
                _SectorView(
                    key=property_key(sector.name),
                    namespace=namespace,
                    module=schema_module(sector.name),
                    definitions=[
                        endpoint_definition(endpoint, namespace) for endpoint in sector.endpoints
                    ],
                )
            )
        return views


__all__ = ["RouterGenerator", "endpoint_definition"]
