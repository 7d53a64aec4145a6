"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hydrogen_kit.config import DEFAULT_ROUTES_FILE, AppConfig, load_config


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MCP_ROOT_DIR", raising=False)
    monkeypatch.delenv("MCP_SCHEMA_PATH", raising=False)


def test_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.root_dir == tmp_path.resolve()
    assert config.schema_path is None
    assert config.default_routes_file == DEFAULT_ROUTES_FILE
    assert config.default_shared_allowlist == ["app/shared"]


def test_reads_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("MCP_SCHEMA_PATH", str(tmp_path / "schema.graphql"))

    config = load_config()

    assert config.root_dir == tmp_path.resolve()
    assert config.schema_path == (tmp_path / "schema.graphql").resolve()


def test_explicit_values_override_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    other = tmp_path / "other"
    other.mkdir()
    monkeypatch.setenv("MCP_ROOT_DIR", str(tmp_path))

    config = load_config(root_dir=str(other), schema_path=str(other / "s.json"))

    assert config.root_dir == other.resolve()
    assert config.schema_path == (other / "s.json").resolve()


def test_config_is_frozen(tmp_path: Path) -> None:
    config = AppConfig(root_dir=tmp_path)

    with pytest.raises(ValidationError):
        config.root_dir = Path("/")  # type: ignore[misc]
