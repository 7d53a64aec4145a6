"""Route manifest parsing.

Routes are declared as ``route(pattern, file)`` calls. A tree-sitter query
finds them first; when that yields nothing or the manifest does not parse, a
regular expression over the raw text takes over and the result is marked low
confidence.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import QueryCursor

from hydrogen_kit.core.fs import read_text_file
from hydrogen_kit.core.languages import find_syntax_error, load_query, parse_source, string_value
from hydrogen_kit.core.path import normalize_path
from hydrogen_kit.models import Confidence, RouteEntry, RouteKind, RoutesParseResult, ToolWarning

logger = logging.getLogger(__name__)

# Fewer AST matches than this is treated as a possibly truncated manifest.
PARTIAL_PARSE_THRESHOLD = 3

_MODULE_RE = re.compile(r"/modules/([^/]+)/")
# Whitespace or block comments between call tokens.
_GAP = r"(?:\s|/\*.*?\*/)*"
_ROUTE_CALL_RE = re.compile(
    rf"""\broute{_GAP}\({_GAP}['"`]([^'"`]+)['"`]{_GAP},{_GAP}['"`]([^'"`]+)['"`]{_GAP}[,)]""",
    re.DOTALL,
)

_REGEX_CAVEAT = "Regex may match commented-out code, template strings, or unrelated functions named 'route'."


def extract_module_name(file_path: str) -> str | None:
    match = _MODULE_RE.search(normalize_path(file_path))
    return match.group(1) if match else None


def determine_kind(file_path: str) -> RouteKind:
    normalized = normalize_path(file_path)
    if "/platform/routing/" in normalized or normalized.endswith(".route.ts"):
        return "resource"
    if "/layout/" in normalized:
        return "layout"
    return "route"


def make_route(pattern: str, file: str) -> RouteEntry:
    return RouteEntry(pattern=pattern, file=file, kind=determine_kind(file), module_guess=extract_module_name(file))


# ---------------------------------------------------------------------------
# Parse tiers
# ---------------------------------------------------------------------------


@dataclass
class TierOutcome:
    """Routes found by one parse tier, or the reason that tier could not run."""

    routes: list[RouteEntry] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def parse_routes_ast(source: str, file_name: str | Path) -> TierOutcome:
    tree = parse_source(source, file_name)
    error = find_syntax_error(tree)
    if error is not None:
        return TierOutcome(error=error)

    cursor = QueryCursor(load_query("routes", file_name))
    calls: list[tuple[int, RouteEntry]] = []
    for _, captures in cursor.matches(tree.root_node):
        args = [arg for arg in captures["route.args"][0].named_children if arg.type != "comment"]
        if len(args) < 2 or args[0].type != "string" or args[1].type != "string":
            continue
        pattern, file = string_value(args[0]), string_value(args[1])
        if pattern and file:
            calls.append((captures["route.call"][0].start_byte, make_route(pattern, file)))
    calls.sort(key=lambda item: item[0])
    return TierOutcome(routes=[route for _, route in calls])


def parse_routes_regex(source: str) -> TierOutcome:
    return TierOutcome(routes=[make_route(m.group(1), m.group(2)) for m in _ROUTE_CALL_RE.finditer(source)])


def parse_with_fallback(
    primary: Callable[[], TierOutcome],
    fallback: Callable[[], TierOutcome],
) -> tuple[list[RouteEntry], Confidence, list[ToolWarning]]:
    """Run ``primary``; consult ``fallback`` only when it failed or came back empty."""
    outcome = primary()

    if outcome.failed:
        logger.info("AST route parse failed (%s); falling back to regex", outcome.error)
        warning = ToolWarning(
            code="ROUTES_PARSE_FALLBACK_REGEX",
            message=f"AST parsing failed: {outcome.error}. Falling back to regex. {_REGEX_CAVEAT}",
        )
        return fallback().routes, "low", [warning]

    if not outcome.routes:
        logger.info("AST route parse found no routes; falling back to regex")
        warning = ToolWarning(
            code="ROUTES_PARSE_FALLBACK_REGEX",
            message=f"AST parsing found no routes, falling back to regex. {_REGEX_CAVEAT}",
        )
        return fallback().routes, "low", [warning]

    if len(outcome.routes) < PARTIAL_PARSE_THRESHOLD:
        warning = ToolWarning(
            code="PARTIAL_PARSE",
            message=f"AST parsing found {len(outcome.routes)} route(s), fewer than expected",
        )
        return outcome.routes, "medium", [warning]

    return outcome.routes, "high", []


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def parse_routes(root_dir: str | Path, routes_file: str) -> RoutesParseResult:
    """Extract route entries from the manifest at ``routes_file`` inside ``root_dir``.

    Sandbox escapes propagate as ``SandboxEscapeError``; an unreadable
    manifest yields no routes with a ``FILE_READ_ERROR`` warning.
    """
    try:
        source = read_text_file(root_dir, routes_file)
    except (OSError, UnicodeDecodeError) as error:
        logger.warning("Failed to read routes file %s: %s", routes_file, error)
        return RoutesParseResult(
            routes=[],
            confidence="low",
            warnings=[ToolWarning(code="FILE_READ_ERROR", message=f"Failed to read routes file: {error}")],
        )

    routes, confidence, warnings = parse_with_fallback(
        lambda: parse_routes_ast(source, routes_file),
        lambda: parse_routes_regex(source),
    )
    logger.debug("Parsed %d route(s) from %s (confidence: %s)", len(routes), routes_file, confidence)
    return RoutesParseResult(routes=routes, confidence=confidence, warnings=warnings or None)
