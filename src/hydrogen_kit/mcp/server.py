"""FastMCP server exposing hydrogen-kit tools.

Every tool answers with a result envelope: ``{"ok": true, "data", "confidence", "warnings"?}``
or ``{"ok": false, "error": {"code", "message"}, "confidence", "warnings"?}``.
The configured root is injected into every call; callers cannot override it.
"""

# ruff: noqa: N803

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastmcp import FastMCP
from graphql import GraphQLObjectType

from hydrogen_kit.config import AppConfig
from hydrogen_kit.core.outline import parse_file_outline
from hydrogen_kit.core.placement import validate_placement
from hydrogen_kit.core.routes import parse_routes
from hydrogen_kit.core.sandbox import SandboxEscapeError, resolve_in_root
from hydrogen_kit.core.schema import (
    SchemaRegistry,
    describe_field,
    lookup_field,
    lookup_type,
    search_types,
)
from hydrogen_kit.models import FieldLookup, SearchLookup, TypeLookup, failure, success

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-hydrogen-kit"

_ONE_QUERY_MESSAGE = "Must provide exactly one of: typeName, fieldRef, or search"


def _escape_failure(error: SandboxEscapeError) -> dict[str, Any]:
    logger.warning("Rejected path outside sandbox: %s", error)
    return failure("PATH_ESCAPE", str(error)).to_wire()


def list_routes(config: AppConfig, routesFile: str | None = None) -> dict[str, Any]:
    try:
        result = parse_routes(config.root_dir, routesFile or config.default_routes_file)
    except SandboxEscapeError as error:
        return _escape_failure(error)

    if not result.routes and result.confidence == "low":
        return failure(
            "NO_ROUTES_FOUND", "No routes found in the routes file", result.confidence, result.warnings
        ).to_wire()
    return success({"routes": [r.to_wire() for r in result.routes]}, result.confidence, result.warnings).to_wire()


def outline_file(config: AppConfig, filePath: str) -> dict[str, Any]:
    try:
        result = parse_file_outline(config.root_dir, filePath)
    except SandboxEscapeError as error:
        return _escape_failure(error)

    if result.confidence == "low" and result.warnings:
        return failure("PARSE_FAILED", result.warnings[0].message, result.confidence, result.warnings).to_wire()
    return success(result.outline.to_wire(), result.confidence, result.warnings).to_wire()


def lookup_schema(
    config: AppConfig,
    registry: SchemaRegistry,
    schemaPath: str | None = None,
    typeName: str | None = None,
    fieldRef: str | None = None,
    search: str | None = None,
) -> dict[str, Any]:
    schema_file: Path | None = config.schema_path
    if schemaPath:
        try:
            schema_file = resolve_in_root(config.root_dir, schemaPath)
        except SandboxEscapeError as error:
            return _escape_failure(error)
    if schema_file is None:
        return failure(
            "MISSING_SCHEMA_PATH",
            "schemaPath is required. Provide it in the tool call or configure MCP_SCHEMA_PATH.",
        ).to_wire()

    provided = sum(1 for value in (typeName, fieldRef, search) if value)
    if provided == 0:
        return failure("MISSING_QUERY", _ONE_QUERY_MESSAGE).to_wire()
    if provided > 1:
        return failure(
            "SCHEMA_LOOKUP_AMBIGUOUS_INPUT",
            "Must provide exactly one of: typeName, fieldRef, or search. Multiple provided.",
        ).to_wire()

    loaded = registry.load(schema_file)
    schema, confidence, warnings = loaded.schema, loaded.confidence, loaded.warnings

    if search:
        return success(SearchLookup(matches=search_types(schema, search)).to_wire(), confidence, warnings).to_wire()

    if fieldRef:
        parent_type, _, field_name = fieldRef.partition(".")
        if not parent_type or not field_name or "." in field_name:
            return failure("INVALID_FIELD_REF", 'fieldRef must be in format "TypeName.fieldName"').to_wire()
        field = lookup_field(schema, parent_type, field_name)
        if field is None:
            return failure("FIELD_NOT_FOUND", f"Field {fieldRef} not found in schema", "medium", warnings).to_wire()
        info = describe_field(field_name, field)
        payload = FieldLookup(parent_type=parent_type, name=field_name, return_type=info.return_type, args=info.args)
        return success(payload.to_wire(), confidence, warnings).to_wire()

    if typeName:
        named_type = lookup_type(schema, typeName)
        if named_type is None:
            return failure("TYPE_NOT_FOUND", f"Type {typeName} not found in schema", "medium", warnings).to_wire()
        if not isinstance(named_type, GraphQLObjectType):
            return failure("NOT_OBJECT_TYPE", f"Type {typeName} is not an object type", "medium", warnings).to_wire()
        fields = [describe_field(name, f) for name, f in named_type.fields.items()]
        return success(TypeLookup(name=typeName, fields=fields).to_wire(), confidence, warnings).to_wire()

    return failure("MISSING_QUERY", _ONE_QUERY_MESSAGE, "low", warnings).to_wire()


def check_placement(
    config: AppConfig,
    consumerFilePath: str,
    queryFilePath: str,
    sharedAllowlist: list[str] | None = None,
) -> dict[str, Any]:
    allowlist = sharedAllowlist if sharedAllowlist is not None else config.default_shared_allowlist
    verdict = validate_placement(consumerFilePath, queryFilePath, allowlist)
    data = verdict.model_dump(by_alias=True, exclude_none=True, exclude={"confidence"})
    return success(data, verdict.confidence).to_wire()


def create_mcp_server(config: AppConfig, registry: SchemaRegistry | None = None) -> FastMCP:
    """Create a FastMCP server bound to ``config`` and a schema registry."""

    mcp = FastMCP(
        SERVER_NAME,
        instructions="Answer structural questions about a Hydrogen storefront codebase: routes, file outlines, "
        "Storefront API schema, and GraphQL query placement.",
    )
    schemas = registry or SchemaRegistry()

    @mcp.tool(name="codebase.routes.list")
    async def routes_list(routesFile: str = config.default_routes_file) -> dict[str, Any]:
        """List all routes defined in the Hydrogen codebase route manifest."""
        return list_routes(config, routesFile)

    @mcp.tool(name="codebase.file.outline")
    async def file_outline(filePath: str) -> dict[str, Any]:
        """Get an outline of a TypeScript/TSX file (imports, exports, symbols) without returning file bodies."""
        return outline_file(config, filePath)

    @mcp.tool(name="storefront.schema.lookup")
    async def schema_lookup(
        schemaPath: str | None = None,
        typeName: str | None = None,
        fieldRef: str | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        """Lookup Storefront API GraphQL schema types, fields ("Type.field"), or search type names.

        Supports SDL (.graphql) and introspection JSON (.json) formats.
        """
        return lookup_schema(config, schemas, schemaPath, typeName, fieldRef, search)

    @mcp.tool(name="architecture.graphql.validatePlacement")
    async def validate_query_placement(
        consumerFilePath: str,
        queryFilePath: str,
        sharedAllowlist: list[str] | None = None,
    ) -> dict[str, Any]:
        """Validate whether a GraphQL query file is placed correctly given the consumer file path."""
        return check_placement(config, consumerFilePath, queryFilePath, sharedAllowlist)

    return mcp
