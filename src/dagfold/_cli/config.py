"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

_PATH_KEYS = ("input", "operations", "output")


class ConfigError(Exception):
    """Error in dagfold configuration."""


@dataclass(slots=True, frozen=True)
class DagfoldConfig:
    """Configuration loaded from the ``[tool.dagfold]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    input: Path | None = None
    operations: Path | None = None
    output: Path | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_path(key: str, value: object, project_root: Path) -> Path:
    if not isinstance(value, str) or not value:
        msg = f"Invalid [tool.dagfold].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def load_config(pyproject_path: Path) -> DagfoldConfig:
    """Load and validate [tool.dagfold] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DagfoldConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("dagfold", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.dagfold] configuration: expected a table"
        raise ConfigError(msg)

    unknown = sorted(set(section) - set(_PATH_KEYS))
    if unknown:
        msg = f"Unknown [tool.dagfold] key(s): {', '.join(unknown)}"
        raise ConfigError(msg)

    paths = {key: _parse_path(key, section[key], project_root) for key in _PATH_KEYS if key in section}
    return DagfoldConfig(project_root=project_root, **paths)


def get_config() -> DagfoldConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        DagfoldConfig (may be empty if no pyproject.toml or no [tool.dagfold] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DagfoldConfig()
    return load_config(pyproject_path)
