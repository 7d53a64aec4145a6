from pathlib import Path

from hydrogen_kit.core.sandbox import resolve_in_root


def read_text_file(root_dir: str | Path, file_path: str | Path) -> str:
    """Read a UTF-8 text file that must live inside ``root_dir``."""
    resolved = resolve_in_root(root_dir, file_path)
    return resolved.read_text(encoding="utf-8")
