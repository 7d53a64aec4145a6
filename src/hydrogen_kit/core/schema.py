"""GraphQL schema loading, caching and lookups.

Schemas come from SDL (``.graphql``/``.gql``) or introspection JSON
(``.json``, either ``{"__schema": ...}`` or ``{"data": {"__schema": ...}}``).
A ``SchemaRegistry`` caches the last schema built for each path and reuses it
while the file's modification time and size are unchanged.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from graphql import (
    GraphQLError,
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLSchema,
    build_client_schema,
    build_schema,
)

from hydrogen_kit.models import ArgumentInfo, Confidence, FieldInfo, ToolWarning

logger = logging.getLogger(__name__)

SDL_EXTENSIONS = frozenset({".graphql", ".gql"})
PLACEHOLDER_SDL = "type Query { _: String }"

_PARSE_ERRORS = (GraphQLError, TypeError, ValueError, KeyError)


@dataclass(frozen=True)
class SchemaCacheEntry:
    schema: GraphQLSchema
    path: str
    mtime_ns: int
    size: int


@dataclass
class SchemaLoadResult:
    schema: GraphQLSchema
    confidence: Confidence
    warnings: list[ToolWarning] | None = None
    from_cache: bool = False


def load_schema_from_sdl(path: Path) -> GraphQLSchema:
    return build_schema(path.read_text(encoding="utf-8"))


def load_schema_from_introspection(path: Path) -> GraphQLSchema:
    parsed: Any = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(parsed, dict) and parsed.get("data"):
        parsed = parsed["data"]
    if not isinstance(parsed, dict) or "__schema" not in parsed:
        raise ValueError("Introspection JSON must contain a '__schema' object")
    return build_client_schema(parsed)


def build_placeholder_schema() -> GraphQLSchema:
    return build_schema(PLACEHOLDER_SDL)


class SchemaRegistry:
    """Loads schemas and caches them by ``(path, mtime, size)``.

    Calls are expected to arrive one at a time; the cache is not locked.
    """

    def __init__(self) -> None:
        self._cache: dict[str, SchemaCacheEntry] = {}

    def cached(self, schema_path: str | Path) -> SchemaCacheEntry | None:
        return self._cache.get(str(Path(schema_path).resolve()))

    def load(self, schema_path: str | Path) -> SchemaLoadResult:
        try:
            resolved = Path(schema_path).resolve()
            stats = resolved.stat()
            key = str(resolved)

            entry = self._cache.get(key)
            if entry is not None and entry.mtime_ns == stats.st_mtime_ns and entry.size == stats.st_size:
                logger.debug("Schema cache hit for %s", key)
                return SchemaLoadResult(schema=entry.schema, confidence="high", from_cache=True)

            logger.info("Loading GraphQL schema from %s", key)
            schema = self._build(resolved)
            self._cache[key] = SchemaCacheEntry(schema=schema, path=key, mtime_ns=stats.st_mtime_ns, size=stats.st_size)
            return SchemaLoadResult(schema=schema, confidence="high")
        except Exception as error:
            logger.warning("Failed to load schema %s: %s", schema_path, error)
            return SchemaLoadResult(
                schema=build_placeholder_schema(),
                confidence="low",
                warnings=[
                    ToolWarning(
                        code="SCHEMA_LOAD_ERROR",
                        message=(
                            f"Failed to load schema: {error}. "
                            "Supported formats: .graphql/.gql (SDL) or .json (introspection)."
                        ),
                    )
                ],
            )

    @staticmethod
    def _build(path: Path) -> GraphQLSchema:
        ext = path.suffix.lower()
        if ext in SDL_EXTENSIONS:
            return load_schema_from_sdl(path)
        if ext == ".json":
            try:
                return load_schema_from_introspection(path)
            except _PARSE_ERRORS as introspection_error:
                # Some .json files hold SDL; surface the introspection error if that fails too.
                try:
                    return load_schema_from_sdl(path)
                except _PARSE_ERRORS:
                    raise introspection_error from None
        try:
            return load_schema_from_sdl(path)
        except _PARSE_ERRORS:
            logger.debug("SDL parse of %s failed; trying introspection JSON", path)
            return load_schema_from_introspection(path)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def lookup_type(schema: GraphQLSchema, type_name: str) -> GraphQLNamedType | None:
    return schema.get_type(type_name)


def lookup_field(schema: GraphQLSchema, type_name: str, field_name: str) -> GraphQLField | None:
    """Return an output field (one that carries arguments); input-object fields are not found."""
    named_type = schema.get_type(type_name)
    if not isinstance(named_type, GraphQLObjectType | GraphQLInterfaceType):
        return None
    field = named_type.fields.get(field_name)
    return field if isinstance(field, GraphQLField) else None


def search_types(schema: GraphQLSchema, search_term: str) -> list[str]:
    needle = search_term.lower()
    return sorted(name for name in schema.type_map if not name.startswith("__") and needle in name.lower())


def describe_field(name: str, field: GraphQLField) -> FieldInfo:
    return FieldInfo(
        name=name,
        return_type=str(field.type),
        args=[ArgumentInfo(name=arg_name, type=str(arg.type)) for arg_name, arg in field.args.items()],
    )
