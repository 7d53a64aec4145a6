"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from hydrogen_kit.config import AppConfig
from hydrogen_kit.core.schema import SchemaRegistry

_TESTS_ROOT = Path(__file__).parent
_FIXTURES = _TESTS_ROOT / "fixtures"


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


_SUITE_MARKERS = {"unit": pytest.mark.unit, "integration": pytest.mark.integration}


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark each test with the suite directory it lives in; anything outside one counts as unit."""
    for item in items:
        suite = item.path.relative_to(_TESTS_ROOT).parts[0]
        item.add_marker(_SUITE_MARKERS.get(suite, pytest.mark.unit))


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_root() -> Path:
    """Return the sample Hydrogen repository used as a sandbox root."""
    return (_FIXTURES / "repo-explicit").resolve()


@pytest.fixture
def schema_path() -> Path:
    """Return the Storefront SDL fixture."""
    return (_FIXTURES / "schema" / "storefront.schema.graphql").resolve()


@pytest.fixture
def app_config(fixtures_root: Path, schema_path: Path) -> AppConfig:
    return AppConfig(root_dir=fixtures_root, schema_path=schema_path)


@pytest.fixture
def registry() -> SchemaRegistry:
    return SchemaRegistry()


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    """Return an empty, canonical sandbox root inside a temporary directory."""
    root = tmp_path / "root"
    root.mkdir()
    return root.resolve()
