"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_paperwork.config.models import ReleasePaperworkConfig
from release_paperwork.exceptions import ConfigNotFoundError, ConfigValidationError

TOOL_SECTION = "release-paperwork"


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If it isn't valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-paperwork]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_SECTION, {})


def load_config(project_path: Path | None = None) -> ReleasePaperworkConfig:
    """Load configuration for a project.

    Only a pyproject.toml located in the project directory itself is
    considered, so a parent project's settings never leak into a nested
    one. Without it, defaults are used.

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    project_path = (project_path or Path.cwd()).resolve()
    pyproject_path = project_path / "pyproject.toml"
    data: dict[str, Any] = {}
    if pyproject_path.is_file():
        data = extract_tool_config(load_pyproject_toml(pyproject_path))

    try:
        return ReleasePaperworkConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_SECTION}] configuration:\n{e}") from e
