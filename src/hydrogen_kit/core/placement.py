"""Ownership inference and GraphQL query placement rules.

Pure functions over path strings; nothing here touches the filesystem.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from hydrogen_kit.core.path import normalize_path
from hydrogen_kit.models import Evidence, OwnerInfo, PlacementVerdict, SuggestedFix, Violation

logger = logging.getLogger(__name__)

DEFAULT_SHARED_ALLOWLIST = ("app/shared",)

_MODULE_SEGMENT_RE = re.compile(r"/modules/([^/]+)/")


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


def _basename(path: str) -> str:
    return _normalize(path).split("/")[-1]


def infer_owner(file_path: str) -> OwnerInfo:
    normalized = _normalize(file_path)
    module_match = _MODULE_SEGMENT_RE.search(normalized)
    if module_match:
        return OwnerInfo(kind="module", name=module_match.group(1))
    if "/platform/" in normalized:
        return OwnerInfo(kind="platform")
    if "/layout/" in normalized:
        return OwnerInfo(kind="layout")
    return OwnerInfo(kind="unknown")


def _modules_dir(consumer_path: str) -> str:
    """Return the consumer's path up to and including its ``modules`` directory."""
    normalized = _normalize(consumer_path)
    module_match = _MODULE_SEGMENT_RE.search(normalized)
    if module_match is None:
        return "app/modules"
    return normalize_path(normalized[: module_match.start()] + "/modules")


def _in_allowlist(query_path: str, shared_allowlist: Sequence[str]) -> bool:
    normalized = _normalize(query_path)
    return any(allowed and _normalize(allowed) in normalized for allowed in shared_allowlist)


def validate_placement(
    consumer_file_path: str,
    query_file_path: str,
    shared_allowlist: Sequence[str] = DEFAULT_SHARED_ALLOWLIST,
) -> PlacementVerdict:
    """Classify where ``query_file_path`` lives relative to the file that consumes it.

    Rules are checked in order and the first match decides:

    1. same module                         -> pass
    2. different modules                   -> fail, move into the consumer module
    3. module consumer, allowlisted query  -> warn, keep
    4. platform/layout consumer, module query -> fail, move beside the consumer
    5. consumer owner unknown              -> warn
    6. anything else                       -> pass
    """
    consumer = infer_owner(consumer_file_path)
    query = infer_owner(query_file_path)
    basename = _basename(query_file_path)

    if consumer.kind == "module" and query.kind == "module":
        if consumer.name == query.name:
            return PlacementVerdict(status="pass", owner=consumer, confidence="high")

        return PlacementVerdict(
            status="fail",
            owner=consumer,
            violations=[
                Violation(
                    code="CROSS_MODULE_QUERY",
                    message=f'Module "{consumer.name}" cannot import query from module "{query.name}"',
                    evidence=[Evidence(file=consumer_file_path), Evidence(file=query_file_path)],
                )
            ],
            suggested_fixes=[
                SuggestedFix(
                    action="move",
                    to_path=f"{_modules_dir(consumer_file_path)}/{consumer.name}/graphql/{basename}",
                    rationale="Move query into the consuming module's graphql directory to maintain module boundaries",
                )
            ],
            confidence="high",
        )

    if consumer.kind == "module" and _in_allowlist(query_file_path, shared_allowlist):
        return PlacementVerdict(
            status="warn",
            owner=consumer,
            violations=[
                Violation(
                    code="SHARED_QUERY_WARNING",
                    message=(
                        f'Module "{consumer.name}" is using a shared query. '
                        "Consider moving it into the module if it's module-specific."
                    ),
                    evidence=[Evidence(file=query_file_path)],
                )
            ],
            suggested_fixes=[
                SuggestedFix(
                    action="keep",
                    rationale="Shared queries are acceptable but may indicate a need for module-specific queries",
                )
            ],
            confidence="medium",
        )

    if consumer.kind in ("platform", "layout") and query.kind == "module":
        return PlacementVerdict(
            status="fail",
            owner=consumer,
            violations=[
                Violation(
                    code="PLATFORM_MODULE_QUERY",
                    message=f"{consumer.kind} code cannot import queries from modules",
                    evidence=[Evidence(file=consumer_file_path), Evidence(file=query_file_path)],
                )
            ],
            suggested_fixes=[
                SuggestedFix(
                    action="move",
                    to_path=f"app/{consumer.kind}/graphql/{basename}",
                    rationale=(
                        f"Move query to the {consumer.kind} directory or extract to platform if truly shared"
                    ),
                )
            ],
            confidence="high",
        )

    if consumer.kind == "unknown":
        return PlacementVerdict(
            status="warn",
            owner=consumer,
            violations=[
                Violation(
                    code="UNKNOWN_OWNER",
                    message="Could not determine owner of consumer file",
                    evidence=[Evidence(file=consumer_file_path)],
                )
            ],
            confidence="low",
        )

    # TODO: decide whether non-module consumers of allowlisted or unowned queries should warn instead of pass.
    logger.debug(
        "No placement rule matched (consumer: %s, query: %s); defaulting to pass", consumer.kind, query.kind
    )
    return PlacementVerdict(status="pass", owner=consumer, confidence="high")
