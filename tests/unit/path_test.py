"""Unit tests for lexical path normalization."""

import pytest

from hydrogen_kit.core.path import has_parent_ref, normalize_path


class TestNormalizePath:
    def test_converts_backslashes(self) -> None:
        assert normalize_path("app\\modules\\products\\x.ts") == "app/modules/products/x.ts"

    def test_collapses_dot_segments(self) -> None:
        assert normalize_path("app/./modules/../platform/x.ts") == "app/platform/x.ts"

    def test_keeps_leading_parent_segments(self) -> None:
        assert normalize_path("../../etc/passwd") == "../../etc/passwd"

    def test_absolute_path_cannot_climb_above_root(self) -> None:
        assert normalize_path("/../etc") == "/etc"


class TestHasParentRef:
    @pytest.mark.parametrize(
        "path",
        ["..", "../secret", "a/../../b", "..\\windows\\system32", "a/b/../../../c"],
    )
    def test_detects_escaping_paths(self, path: str) -> None:
        assert has_parent_ref(path) is True

    @pytest.mark.parametrize(
        "path",
        ["app/routes.ts", "a/../b", "./app", "app/..hidden/file", "file..ts"],
    )
    def test_accepts_contained_paths(self, path: str) -> None:
        assert has_parent_ref(path) is False
