"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import cast


class ConfigError(Exception):
    """Error in entitytrace configuration."""


class OutputFormat(StrEnum):
    """How the `tree` command prints a graph snapshot."""

    ASCII = "ascii"
    RICH = "rich"
    JSON = "json"


@dataclass(slots=True, frozen=True)
class ScriptSource:
    """Script path with optional variable name."""

    script: Path
    name: str | None = None


@dataclass(slots=True, frozen=True)
class ModuleSource:
    """Module path with variable name (e.g., 'examples.payroll:total_pay')."""

    module_path: str


EntitySource = ScriptSource | ModuleSource


@dataclass(slots=True, frozen=True)
class EntityTraceConfig:
    """Configuration loaded from the [tool.entitytrace] table of pyproject.toml.

    Relative script paths are resolved from the project root (directory containing pyproject.toml).
    """

    entity: EntitySource | None = None
    format: OutputFormat = OutputFormat.ASCII
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    current = (start_dir if start_dir is not None else Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def parse_entity_source(value: object, project_root: Path) -> EntitySource:
    """Parse an entity source given as `"module:variable"` or `{ script = ..., name = ... }`.

    Args:
        value: The raw value from TOML (string or table)
        project_root: Project root directory for resolving relative script paths

    Returns:
        Parsed EntitySource

    Raises:
        ConfigError: If the value format is invalid

    """
    if isinstance(value, str):
        if ":" not in value:
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:variable_name'"
            raise ConfigError(msg)
        return ModuleSource(module_path=value)

    if isinstance(value, dict):
        table = cast("dict[str, object]", value)
        script_value = table.get("script")
        if not isinstance(script_value, str):
            msg = "Invalid [tool.entitytrace].entity.script: expected string path"
            raise ConfigError(msg)
        script_path = Path(script_value)
        if not script_path.is_absolute():
            script_path = project_root / script_path

        name = table.get("name")
        if name is not None and not isinstance(name, str):
            msg = "Invalid [tool.entitytrace].entity.name: expected string"
            raise ConfigError(msg)

        return ScriptSource(script=script_path, name=name)

    msg = "Invalid [tool.entitytrace].entity configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)


def _parse_format(value: object) -> OutputFormat:
    if not isinstance(value, str):
        msg = "Invalid [tool.entitytrace].format: expected string"
        raise ConfigError(msg)
    try:
        return OutputFormat(value)
    except ValueError as e:
        choices = ", ".join(f"'{fmt}'" for fmt in OutputFormat)
        msg = f"Invalid [tool.entitytrace].format '{value}'. Expected one of {choices}"
        raise ConfigError(msg) from e


def load_config(pyproject_path: Path) -> EntityTraceConfig:
    """Load and validate [tool.entitytrace] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed EntityTraceConfig

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

    section = data.get("tool", {}).get("entitytrace", {})
    if not section:
        return EntityTraceConfig(project_root=project_root)

    entity_source: EntitySource | None = None
    if "entity" in section:
        entity_source = parse_entity_source(section["entity"], project_root)

    output_format = OutputFormat.ASCII
    if "format" in section:
        output_format = _parse_format(section["format"])

    return EntityTraceConfig(entity=entity_source, format=output_format, project_root=project_root)


def get_config() -> EntityTraceConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        EntityTraceConfig (may be empty if no pyproject.toml or no [tool.entitytrace] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return EntityTraceConfig()
    return load_config(pyproject_path)
