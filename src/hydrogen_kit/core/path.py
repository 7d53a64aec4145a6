import posixpath


def normalize_path(path: str) -> str:
    """Convert separators to ``/`` and collapse ``.``/``..`` segments without touching the filesystem."""
    return posixpath.normpath(path.replace("\\", "/"))


def has_parent_ref(path: str) -> bool:
    """Return True if the normalized path still climbs out through a ``..`` segment."""
    return ".." in normalize_path(path).split("/")
