import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ROUTES_FILE = "app/routes.ts"


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    root_dir: Path
    schema_path: Path | None = None
    default_routes_file: str = DEFAULT_ROUTES_FILE
    default_shared_allowlist: list[str] = Field(default_factory=lambda: ["app/shared"])


def load_config(root_dir: str | None = None, schema_path: str | None = None) -> AppConfig:
    """Build the configuration from explicit values, falling back to the environment."""
    root = root_dir or os.getenv("MCP_ROOT_DIR") or os.getcwd()
    schema = schema_path or os.getenv("MCP_SCHEMA_PATH")
    return AppConfig(
        root_dir=Path(root).resolve(),
        schema_path=Path(schema).resolve() if schema else None,
    )
