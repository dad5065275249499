"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in dagsort configuration."""


@dataclass(slots=True, frozen=True)
class DagsortConfig:
    """Configuration loaded from the ``[tool.dagsort]`` table of pyproject.toml.

    Relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    root: str | None = None
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


def load_config(pyproject_path: Path) -> DagsortConfig:
    """Load and validate [tool.dagsort] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DagsortConfig

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

    section = data.get("tool", {}).get("dagsort", {})
    if not section:
        return DagsortConfig(project_root=project_root)

    graph_path: Path | None = None
    if "graph" in section:
        graph_value = section["graph"]
        if not isinstance(graph_value, str):
            msg = "Invalid [tool.dagsort].graph: expected string path"
            raise ConfigError(msg)
        graph_path = Path(graph_value)
        if not graph_path.is_absolute():
            graph_path = project_root / graph_path

    root: str | None = None
    if "root" in section:
        root = section["root"]
        if not isinstance(root, str):
            msg = "Invalid [tool.dagsort].root: expected string node name"
            raise ConfigError(msg)

    return DagsortConfig(graph=graph_path, root=root, project_root=project_root)


def get_config() -> DagsortConfig:
    """Get config from pyproject.toml in current directory or parents."""
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DagsortConfig()
    return load_config(pyproject_path)
