"""Resolve caller-supplied paths inside a trusted root directory.

Every path handed back is absolute and symlink-resolved where the file exists,
and always lies inside the canonical root. Escapes through ``..`` segments,
absolute paths, or symlinks planted in the root raise ``SandboxEscapeError``.
"""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path

from hydrogen_kit.core.path import has_parent_ref

logger = logging.getLogger(__name__)


class SandboxConfigError(ValueError):
    """The configured root itself is unusable."""


class SandboxEscapeError(ValueError):
    """A target path resolves outside the sandbox root."""


def _is_within(path: Path, root: Path) -> bool:
    prefix = str(root) if str(root).endswith(os.sep) else str(root) + os.sep
    return path == root or str(path).startswith(prefix)


def _realpath(path: Path, strict: bool = False) -> Path:
    """Resolve ``path``, reporting a symlink loop as ``OSError(ELOOP)`` on every Python version."""
    try:
        return path.resolve(strict=strict)
    except RuntimeError as error:
        # pathlib before 3.13 raises RuntimeError for loops.
        raise OSError(errno.ELOOP, f"Symlink loop: {error}", str(path)) from error


def canonical_root(root_dir: str | Path) -> Path:
    if not os.path.isabs(root_dir):
        raise SandboxConfigError(f"Root directory must be absolute, got: {root_dir}")
    try:
        return Path(root_dir).resolve(strict=True)
    except FileNotFoundError:
        raise SandboxConfigError(f"Root directory does not exist: {root_dir}") from None


def resolve_in_root(root_dir: str | Path, target_path: str | Path) -> Path:
    """Resolve ``target_path`` against ``root_dir`` and refuse anything outside it.

    Relative targets are joined to the canonical root; absolute targets are
    taken as-is. A lexical ``..`` escape is rejected before any filesystem
    call. Existing targets are fully resolved; a missing target is returned as
    its resolved parent plus basename so a symlinked parent cannot smuggle it
    out of the root.
    """
    root_real = canonical_root(root_dir)
    candidate = Path(os.path.normpath(os.path.join(root_real, target_path)))

    try:
        relative = os.path.relpath(candidate, root_real)
    except ValueError:
        raise SandboxEscapeError(f"Path escapes root directory: {target_path} (different drive)") from None
    if has_parent_ref(relative):
        raise SandboxEscapeError(f"Path escapes root directory: {target_path} (resolved to {candidate})")

    try:
        target_real = _realpath(candidate, strict=True)
    except FileNotFoundError:
        return _resolve_missing(root_real, candidate, target_path)

    if not _is_within(target_real, root_real):
        raise SandboxEscapeError(
            f"Path escapes root directory via symlink: {target_path} (resolved to {target_real}, root: {root_real})"
        )
    return target_real


def _resolve_missing(root_real: Path, candidate: Path, target_path: str | Path) -> Path:
    try:
        parent_real = _realpath(candidate.parent, strict=True)
    except (FileNotFoundError, NotADirectoryError):
        _check_nearest_ancestor(root_real, candidate, target_path)
        logger.debug("Parent of %s does not exist; returning unresolved candidate", candidate)
        return candidate

    if not _is_within(parent_real, root_real):
        raise SandboxEscapeError(
            f"Path escapes root directory via symlink in parent: {target_path} (parent: {parent_real})"
        )
    return parent_real / candidate.name


def _check_nearest_ancestor(root_real: Path, candidate: Path, target_path: str | Path) -> None:
    for ancestor in candidate.parents:
        if not ancestor.exists():
            continue
        ancestor_real = _realpath(ancestor)
        if not _is_within(ancestor_real, root_real):
            raise SandboxEscapeError(
                f"Path escapes root directory via symlink in ancestor: {target_path} (ancestor: {ancestor_real})"
            )
        return
