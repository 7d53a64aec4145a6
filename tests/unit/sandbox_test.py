"""Unit tests for sandboxed path resolution."""

import errno
import os
from pathlib import Path

import pytest

from hydrogen_kit.core.fs import read_text_file
from hydrogen_kit.core.sandbox import SandboxConfigError, SandboxEscapeError, resolve_in_root


class TestRootValidation:
    def test_rejects_relative_root(self) -> None:
        with pytest.raises(SandboxConfigError, match="must be absolute"):
            resolve_in_root("relative/root", "file.ts")

    def test_rejects_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(SandboxConfigError, match="does not exist"):
            resolve_in_root(str(tmp_path / "missing"), "file.ts")

    def test_symlinked_root_is_canonicalized(self, tmp_path: Path, sandbox: Path) -> None:
        (sandbox / "a.ts").write_text("x", encoding="utf-8")
        link = tmp_path / "root-link"
        link.symlink_to(sandbox, target_is_directory=True)

        assert resolve_in_root(str(link), "a.ts") == sandbox / "a.ts"


class TestContainedPaths:
    def test_resolves_existing_relative_file(self, sandbox: Path) -> None:
        (sandbox / "app").mkdir()
        (sandbox / "app" / "routes.ts").write_text("", encoding="utf-8")

        assert resolve_in_root(sandbox, "app/routes.ts") == sandbox / "app" / "routes.ts"

    def test_root_itself_is_allowed(self, sandbox: Path) -> None:
        assert resolve_in_root(sandbox, ".") == sandbox

    def test_absolute_target_inside_root(self, sandbox: Path) -> None:
        target = sandbox / "x.ts"
        target.write_text("", encoding="utf-8")

        assert resolve_in_root(sandbox, str(target)) == target

    def test_inner_parent_segments_that_stay_inside(self, sandbox: Path) -> None:
        (sandbox / "app").mkdir()
        (sandbox / "root.ts").write_text("", encoding="utf-8")

        assert resolve_in_root(sandbox, "app/../root.ts") == sandbox / "root.ts"

    def test_missing_file_returns_resolved_parent_and_basename(self, sandbox: Path) -> None:
        (sandbox / "app").mkdir()

        assert resolve_in_root(sandbox, "app/new.ts") == sandbox / "app" / "new.ts"

    def test_missing_parent_chain_returns_candidate(self, sandbox: Path) -> None:
        assert resolve_in_root(sandbox, "a/b/c/new.ts") == sandbox / "a" / "b" / "c" / "new.ts"

    def test_symlink_pointing_inside_root(self, sandbox: Path) -> None:
        real = sandbox / "real.ts"
        real.write_text("", encoding="utf-8")
        (sandbox / "alias.ts").symlink_to(real)

        assert resolve_in_root(sandbox, "alias.ts") == real


class TestEscapes:
    @pytest.mark.parametrize(
        "target",
        ["../outside.ts", "../../etc/passwd", "app/../../outside.ts", "..", "a/b/../../../x"],
    )
    def test_parent_segments_escaping_root(self, sandbox: Path, target: str) -> None:
        with pytest.raises(SandboxEscapeError, match="escapes root"):
            resolve_in_root(sandbox, target)

    def test_parent_escape_to_existing_file(self, tmp_path: Path, sandbox: Path) -> None:
        (tmp_path / "secret.txt").write_text("s", encoding="utf-8")

        with pytest.raises(SandboxEscapeError):
            resolve_in_root(sandbox, "../secret.txt")

    def test_absolute_target_outside_root(self, tmp_path: Path, sandbox: Path) -> None:
        with pytest.raises(SandboxEscapeError):
            resolve_in_root(sandbox, str(tmp_path / "elsewhere.ts"))

    def test_sibling_with_shared_prefix(self, tmp_path: Path, sandbox: Path) -> None:
        sibling = tmp_path / "root-other"
        sibling.mkdir()
        (sibling / "x.ts").write_text("", encoding="utf-8")

        with pytest.raises(SandboxEscapeError):
            resolve_in_root(sandbox, str(sibling / "x.ts"))

    def test_file_symlink_escaping_root(self, tmp_path: Path, sandbox: Path) -> None:
        outside = tmp_path / "outside.ts"
        outside.write_text("", encoding="utf-8")
        (sandbox / "link.ts").symlink_to(outside)

        with pytest.raises(SandboxEscapeError, match="via symlink"):
            resolve_in_root(sandbox, "link.ts")

    def test_symlinked_parent_of_missing_file(self, tmp_path: Path, sandbox: Path) -> None:
        outside = tmp_path / "outside-dir"
        outside.mkdir()
        (sandbox / "linked").symlink_to(outside, target_is_directory=True)

        with pytest.raises(SandboxEscapeError, match="parent"):
            resolve_in_root(sandbox, "linked/new.ts")

    def test_symlinked_ancestor_of_missing_chain(self, tmp_path: Path, sandbox: Path) -> None:
        outside = tmp_path / "outside-dir"
        outside.mkdir()
        (sandbox / "linked").symlink_to(outside, target_is_directory=True)

        with pytest.raises(SandboxEscapeError, match="ancestor"):
            resolve_in_root(sandbox, "linked/deeper/new.ts")


class TestSymlinkLoops:
    def test_self_referencing_file_is_os_error(self, sandbox: Path) -> None:
        (sandbox / "loop.ts").symlink_to(sandbox / "loop.ts")

        with pytest.raises(OSError) as excinfo:
            resolve_in_root(sandbox, "loop.ts")
        assert excinfo.value.errno == errno.ELOOP

    def test_looping_parent_directories(self, sandbox: Path) -> None:
        (sandbox / "a").symlink_to(sandbox / "b", target_is_directory=True)
        (sandbox / "b").symlink_to(sandbox / "a", target_is_directory=True)

        with pytest.raises(OSError) as excinfo:
            resolve_in_root(sandbox, "a/new.ts")
        assert excinfo.value.errno == errno.ELOOP

    def test_loop_is_unreadable(self, sandbox: Path) -> None:
        (sandbox / "loop.ts").symlink_to(sandbox / "loop.ts")

        with pytest.raises(OSError):
            read_text_file(sandbox, "loop.ts")


class TestReadTextFile:
    def test_reads_file_inside_root(self, sandbox: Path) -> None:
        (sandbox / "a.ts").write_text("export const a = 1;\n", encoding="utf-8")

        assert read_text_file(sandbox, "a.ts") == "export const a = 1;\n"

    def test_missing_file_raises_os_error(self, sandbox: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_text_file(sandbox, "missing.ts")

    def test_escape_is_not_read(self, tmp_path: Path, sandbox: Path) -> None:
        (tmp_path / "secret.txt").write_text("s", encoding="utf-8")

        with pytest.raises(SandboxEscapeError):
            read_text_file(sandbox, os.path.join("..", "secret.txt"))
