from pathlib import Path
from typing import cast

from tree_sitter import Language, Node, Parser, Query, Tree
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

_EXTENSION_LANGUAGE_MAP = {
    ".cjs": "tsx",
    ".cts": "typescript",
    ".js": "tsx",
    ".jsx": "tsx",
    ".mjs": "tsx",
    ".mts": "typescript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

# JSX-capable grammar also reads plain JavaScript, so it is the safe default.
_DEFAULT_LANGUAGE = "tsx"

_QUERIES_DIR = Path(__file__).parent / "queries"


def detect_script_language(file_path: str | Path) -> str:
    return _EXTENSION_LANGUAGE_MAP.get(Path(file_path).suffix.lower(), _DEFAULT_LANGUAGE)


def get_script_parser(file_path: str | Path) -> Parser:
    return get_parser(cast(SupportedLanguage, detect_script_language(file_path)))


def get_script_language(file_path: str | Path) -> Language:
    return get_language(cast(SupportedLanguage, detect_script_language(file_path)))


def parse_source(source: str, file_path: str | Path) -> Tree:
    return get_script_parser(file_path).parse(source.encode("utf-8"))


def load_query(name: str, file_path: str | Path) -> Query:
    query_path = _QUERIES_DIR / f"{name}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    return Query(get_script_language(file_path), query_path.read_text(encoding="utf-8"))


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def string_value(node: Node) -> str:
    """Return the contents of a string literal node without its quotes."""
    text = node_text(node)
    return text[1:-1] if len(text) >= 2 else ""


def find_syntax_error(tree: Tree) -> str | None:
    """Describe the first ERROR or MISSING node of ``tree``, or None when it parsed cleanly."""
    root = tree.root_node
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point
            label = f"missing '{node.type}'" if node.is_missing else "unexpected token"
            return f"syntax error ({label}) at line {row + 1}, column {column + 1}"
        stack.extend(reversed([child for child in node.children if child.has_error or child.is_missing]))
    return "syntax error"
