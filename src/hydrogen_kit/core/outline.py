"""File outline extraction for TypeScript/TSX sources.

One walk over the tree-sitter syntax tree collects import specifiers, the
default export, named exports, and the names of top-level functions, classes,
types and variables. Nested code is searched for imports and default export
assignments only.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tree_sitter import Node

from hydrogen_kit.core.fs import read_text_file
from hydrogen_kit.core.languages import find_syntax_error, node_text, parse_source, string_value
from hydrogen_kit.models import Confidence, FileOutline, OutlineResult, ToolWarning

logger = logging.getLogger(__name__)

_FUNCTION_DECLARATIONS = frozenset(
    {"function_declaration", "generator_function_declaration", "function_signature"},
)
_FUNCTION_EXPRESSIONS = frozenset({"function_expression", "function", "generator_function"})
_CLASS_DECLARATIONS = frozenset({"class_declaration", "abstract_class_declaration"})
_TYPE_DECLARATIONS = frozenset({"type_alias_declaration", "interface_declaration"})
_VARIABLE_DECLARATIONS = frozenset({"lexical_declaration", "variable_declaration"})


def _append_unique(items: list[str], name: str) -> None:
    if name not in items:
        items.append(name)


def _declared_name(node: Node) -> str | None:
    name = node.child_by_field_name("name")
    return node_text(name) if name is not None else None


def _variable_names(node: Node) -> list[str]:
    names: list[str] = []
    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue
        name = declarator.child_by_field_name("name")
        # Destructuring patterns bind no single name.
        if name is not None and name.type == "identifier":
            names.append(node_text(name))
    return names


def _has_token(node: Node, token: str) -> bool:
    return any(child.type == token for child in node.children)


def _export_assignment(node: Node) -> Node | None:
    """Return the assigned expression of ``export = <expr>;``."""
    if not _has_token(node, "="):
        return None
    return next((child for child in node.named_children if child.type != "comment"), None)


class _OutlineBuilder:
    def __init__(self) -> None:
        self.outline = FileOutline()

    # -- symbols ------------------------------------------------------------

    def add_declaration(self, node: Node, *, exported: bool = False, default: bool = False) -> None:
        """Bucket a top-level declaration and record it as exported when marked so."""
        symbols = self.outline.symbols
        match node.type:
            case "ambient_declaration":
                # `declare function f(): void;`, `declare class C {}`, `declare const c: T;`
                for child in node.named_children:
                    self.add_declaration(child, exported=exported, default=default)
                return
            case kind if kind in _FUNCTION_DECLARATIONS or kind in _FUNCTION_EXPRESSIONS:
                names = [n for n in [_declared_name(node)] if n]
                bucket = symbols.functions
            case kind if kind in _CLASS_DECLARATIONS or kind == "class":
                names = [n for n in [_declared_name(node)] if n]
                bucket = symbols.classes
            case kind if kind in _TYPE_DECLARATIONS:
                names = [n for n in [_declared_name(node)] if n]
                bucket = symbols.types
            case kind if kind in _VARIABLE_DECLARATIONS:
                names = _variable_names(node)
                bucket = symbols.consts
            case _:
                return

        for name in names:
            _append_unique(bucket, name)
            if default:
                self.outline.exports.default = name
            if exported:
                _append_unique(self.outline.exports.named, name)

    # -- exports ------------------------------------------------------------

    def add_export(self, node: Node, *, top_level: bool) -> None:
        default = _has_token(node, "default")
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value") if default else _export_assignment(node)

        if value is not None:
            if value.type == "identifier":
                self.outline.exports.default = node_text(value)
            elif top_level:
                # `export default function Name() {}` may surface as an expression.
                self.add_declaration(value, exported=True, default=True)
            return

        if not top_level:
            return

        if declaration is not None:
            self.add_declaration(declaration, exported=True, default=default)
            return

        for child in node.named_children:
            if child.type == "export_clause":
                self._add_export_clause(child)

    def _add_export_clause(self, clause: Node) -> None:
        for specifier in clause.named_children:
            if specifier.type != "export_specifier":
                continue
            exported = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
            if exported is None:
                continue
            name = string_value(exported) if exported.type == "string" else node_text(exported)
            _append_unique(self.outline.exports.named, name)

    # -- walk ---------------------------------------------------------------

    def visit(self, root: Node) -> FileOutline:
        stack: list[tuple[Node, bool]] = [(child, True) for child in reversed(root.named_children)]
        while stack:
            node, top_level = stack.pop()
            match node.type:
                case "import_statement":
                    source = node.child_by_field_name("source")
                    if source is not None and source.type == "string":
                        self.outline.imports.append(string_value(source))
                case "export_statement":
                    self.add_export(node, top_level=top_level)
                case _ if top_level:
                    self.add_declaration(node)
            stack.extend((child, False) for child in reversed(node.named_children))
        return self.outline


def extract_outline(source: str, file_name: str | Path) -> tuple[FileOutline, str | None]:
    """Outline ``source``; also return a description of the first syntax error, if any."""
    tree = parse_source(source, file_name)
    outline = _OutlineBuilder().visit(tree.root_node)
    return outline, find_syntax_error(tree)


def parse_file_outline(root_dir: str | Path, file_path: str) -> OutlineResult:
    """Outline the file at ``file_path`` inside ``root_dir``.

    Read failures produce an empty outline at low confidence with a
    ``PARSE_ERROR`` warning. A file with syntax errors is still outlined from
    the recovered tree, at medium confidence.
    """
    try:
        source = read_text_file(root_dir, file_path)
    except (OSError, UnicodeDecodeError) as error:
        logger.warning("Failed to read %s for outline: %s", file_path, error)
        return OutlineResult(
            outline=FileOutline(),
            confidence="low",
            warnings=[ToolWarning(code="PARSE_ERROR", message=f"Failed to parse file: {error}")],
        )

    outline, syntax_error = extract_outline(source, file_path)
    confidence: Confidence = "high"
    warnings: list[ToolWarning] = []
    if syntax_error is not None:
        logger.info("Outline of %s built from a recovered tree: %s", file_path, syntax_error)
        confidence = "medium"
        warnings.append(
            ToolWarning(code="PARSE_RECOVERED", message=f"File has a {syntax_error}; outline may be incomplete")
        )
    return OutlineResult(outline=outline, confidence=confidence, warnings=warnings or None)
