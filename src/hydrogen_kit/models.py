from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Confidence = Literal["high", "medium", "low"]
RouteKind = Literal["route", "resource", "layout"]
OwnerKind = Literal["module", "platform", "layout", "unknown"]
PlacementStatus = Literal["pass", "warn", "fail"]
FixAction = Literal["move", "keep", "extract", "unknown"]

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for models that travel to a caller; serializes with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Result envelope
# ---------------------------------------------------------------------------


class ToolWarning(WireModel):
    code: str
    message: str = Field(min_length=1)


class ToolError(WireModel):
    code: str
    message: str = Field(min_length=1)
    details: Any | None = None


class ToolSuccess(WireModel, Generic[T]):
    ok: Literal[True] = True
    data: T
    confidence: Confidence
    warnings: list[ToolWarning] | None = None


class ToolFailure(WireModel):
    ok: Literal[False] = False
    error: ToolError
    confidence: Confidence
    warnings: list[ToolWarning] | None = None


def success(data: Any, confidence: Confidence, warnings: list[ToolWarning] | None = None) -> ToolSuccess[Any]:
    return ToolSuccess[Any](data=data, confidence=confidence, warnings=warnings or None)


def failure(
    code: str,
    message: str,
    confidence: Confidence = "low",
    warnings: list[ToolWarning] | None = None,
) -> ToolFailure:
    return ToolFailure(error=ToolError(code=code, message=message), confidence=confidence, warnings=warnings or None)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


class RouteEntry(WireModel):
    pattern: str
    file: str
    kind: RouteKind
    module_guess: str | None = None


class RoutesParseResult(WireModel):
    routes: list[RouteEntry]
    confidence: Confidence
    warnings: list[ToolWarning] | None = None


# ---------------------------------------------------------------------------
# File outline
# ---------------------------------------------------------------------------


class OutlineExports(WireModel):
    default: str | None = None
    named: list[str] = Field(default_factory=list)


class OutlineSymbols(WireModel):
    functions: list[str] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    classes: list[str] = Field(default_factory=list)
    consts: list[str] = Field(default_factory=list)


class FileOutline(WireModel):
    imports: list[str] = Field(default_factory=list)
    exports: OutlineExports = Field(default_factory=OutlineExports)
    symbols: OutlineSymbols = Field(default_factory=OutlineSymbols)


class OutlineResult(WireModel):
    outline: FileOutline
    confidence: Confidence
    warnings: list[ToolWarning] | None = None


# ---------------------------------------------------------------------------
# Schema lookup payloads
# ---------------------------------------------------------------------------


class ArgumentInfo(WireModel):
    name: str
    type: str


class FieldInfo(WireModel):
    name: str
    return_type: str
    args: list[ArgumentInfo] = Field(default_factory=list)


class TypeLookup(WireModel):
    kind: Literal["type"] = "type"
    name: str
    fields: list[FieldInfo]


class FieldLookup(WireModel):
    kind: Literal["field"] = "field"
    parent_type: str
    name: str
    return_type: str
    args: list[ArgumentInfo] = Field(default_factory=list)


class SearchLookup(WireModel):
    kind: Literal["search"] = "search"
    matches: list[str]


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


class OwnerInfo(WireModel):
    kind: OwnerKind
    name: str | None = None


class Evidence(WireModel):
    file: str


class Violation(WireModel):
    code: str
    message: str
    evidence: list[Evidence] | None = None


class SuggestedFix(WireModel):
    action: FixAction
    to_path: str | None = None
    rationale: str


class PlacementVerdict(WireModel):
    status: PlacementStatus
    owner: OwnerInfo
    violations: list[Violation] = Field(default_factory=list)
    suggested_fixes: list[SuggestedFix] = Field(default_factory=list)
    confidence: Confidence = "high"
