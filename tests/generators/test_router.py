from __future__ import annotations

import pytest

from sectorgen.generators.naming import property_key, schema_module, schema_namespace
from sectorgen.generators.router import RouterGenerator, endpoint_definition
from sectorgen.models import EndpointInfo, SectorInfo
from sectorgen.parsers.sectors import SectorScanner
from tests._fixtures.sector_builder import SectorTreeBuilder

EXPECTED_ROUTER = """\
// Auto-generated - do not edit
// This file is generated from the sector routers under src/sectors
import { initTRPC } from '@trpc/server';
import * as projectSchemas from './schemas/project-schemas.js';
import * as userSchemas from './schemas/user-schemas.js';

const t = initTRPC.create();

export const staticAppRouter = t.router({
  project: t.router({
    getProject: t.procedure.input(projectSchemas.GetProjectSchema).query(() => ({})),
    listProjects: t.procedure.query(() => []),
  }),
  user: t.router({
    getUser: t.procedure.input(userSchemas.GetUserSchema).query(() => ({})),
    createUser: t.procedure.input(userSchemas.CreateUserSchema).mutation(() => ({})),
  }),
});

export type AppRouter = typeof staticAppRouter;
"""


def test_generate_renders_router_module(sample_tree: SectorTreeBuilder) -> None:
    config = sample_tree.config()
    sectors, _ = SectorScanner(config).discover()

    result = RouterGenerator(config).generate(sectors)

    assert result.errors == []
    assert len(result.files) == 1
    router = result.files[0]
    assert router.path == config.output_path / "router.ts"
    assert router.content == EXPECTED_ROUTER


def test_generate_uses_configured_router_name(sample_tree: SectorTreeBuilder) -> None:
    config = sample_tree.config({"generation": {"routerName": "ApiContract"}})
    sectors, _ = SectorScanner(config).discover()

    content = RouterGenerator(config).generate(sectors).files[0].content

    assert "export const staticApiContract = t.router({" in content
    assert "export type ApiContract = typeof staticApiContract;" in content


def test_generate_is_deterministic(sample_tree: SectorTreeBuilder) -> None:
    config = sample_tree.config()
    sectors, _ = SectorScanner(config).discover()
    generator = RouterGenerator(config)

    first = generator.generate(sectors).files[0].content
    second = generator.generate(sectors).files[0].content

    assert first == second


def test_generate_rejects_colliding_namespaces(sample_tree: SectorTreeBuilder) -> None:
    config = sample_tree.config()
    sectors = [
        SectorInfo("user-profile", [EndpointInfo("get", "query")]),
        SectorInfo("userProfile", [EndpointInfo("get", "query")]),
    ]

    with pytest.raises(ValueError, match="userProfileSchemas"):
        RouterGenerator(config).generate(sectors)


def test_generate_quotes_non_identifier_sector_keys(sample_tree: SectorTreeBuilder) -> None:
    config = sample_tree.config()
    sectors = [SectorInfo("user-profile", [EndpointInfo("getProfile", "query", "GetProfileSchema")])]

    content = RouterGenerator(config).generate(sectors).files[0].content

    assert "import * as userProfileSchemas from './schemas/user-profile-schemas.js';" in content
    assert "  'user-profile': t.router({" in content
    assert "userProfileSchemas.GetProfileSchema" in content


@pytest.mark.parametrize(
    ("endpoint", "expected"),
    [
        (
            EndpointInfo("getUser", "query", "GetUserSchema"),
            "getUser: t.procedure.input(userSchemas.GetUserSchema).query(() => ({}))",
        ),
        (
            EndpointInfo("createUser", "mutation", "CreateUserSchema"),
            "createUser: t.procedure.input(userSchemas.CreateUserSchema).mutation(() => ({}))",
        ),
        (EndpointInfo("listUsers", "query"), "listUsers: t.procedure.query(() => [])"),
        (EndpointInfo("resetAll", "mutation"), "resetAll: t.procedure.mutation(() => ({}))"),
    ],
)
def test_endpoint_definition(endpoint: EndpointInfo, expected: str) -> None:
    assert endpoint_definition(endpoint, "userSchemas") == expected


def test_schema_namespace_and_module() -> None:
    assert schema_namespace("user") == "userSchemas"
    assert schema_namespace("user-profile") == "userProfileSchemas"
    assert schema_namespace("2fa") == "_2faSchemas"
    assert schema_module("user") == "user-schemas"


def test_schema_namespace_rejects_unusable_names() -> None:
    with pytest.raises(ValueError):
        schema_namespace("---")


def test_property_key_quotes_when_needed() -> None:
    assert property_key("getUser") == "getUser"
    assert property_key("get-user") == "'get-user'"
    assert property_key("it's") == "'it\\'s'"
