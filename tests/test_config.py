"""Tests for the configuration module."""

from pathlib import Path

import pytest

from entitytrace._cli.config import (
    ConfigError,
    EntityTraceConfig,
    ModuleSource,
    OutputFormat,
    ScriptSource,
    find_pyproject_toml,
    load_config,
)


def write_pyproject(directory: Path, content: str) -> Path:
    pyproject = directory / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in the start directory."""
        pyproject = write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        assert find_pyproject_toml(tmp_path) == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in a parent directory."""
        pyproject = write_pyproject(tmp_path, "[project]\nname = 'test'\n")
        subdir = tmp_path / "src" / "pkg"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        assert find_pyproject_toml(tmp_path) is None


class TestLoadConfigEntity:
    """Tests for the entity source setting."""

    def test_module_path_string(self, tmp_path: Path) -> None:
        """Should parse a module path string."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace]
entity = "examples.state_demo:total"
""",
        )

        config = load_config(pyproject)

        assert config.entity == ModuleSource(module_path="examples.state_demo:total")
        assert config.project_root == tmp_path

    def test_module_path_without_colon_raises(self, tmp_path: Path) -> None:
        """Should raise ConfigError for a module path without a colon."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace]
entity = "examples.state_demo"
""",
        )

        with pytest.raises(ConfigError, match="Invalid module path"):
            load_config(pyproject)

    def test_script_table_is_resolved_from_project_root(self, tmp_path: Path) -> None:
        """Should resolve a relative script path against the project root."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace]
entity = { script = "models/pricing.py" }
""",
        )

        config = load_config(pyproject)

        assert isinstance(config.entity, ScriptSource)
        assert config.entity.script == tmp_path / "models/pricing.py"
        assert config.entity.name is None

    def test_script_table_with_name(self, tmp_path: Path) -> None:
        """Should parse a script table with an explicit variable name."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace.entity]
script = "models/pricing.py"
name = "final_price"
""",
        )

        config = load_config(pyproject)

        assert config.entity == ScriptSource(script=tmp_path / "models/pricing.py", name="final_price")

    def test_absolute_script_path_is_kept(self, tmp_path: Path) -> None:
        """Should keep an absolute script path as given."""
        script = tmp_path / "elsewhere" / "model.py"
        pyproject = write_pyproject(
            tmp_path,
            f"""
[tool.entitytrace]
entity = {{ script = "{script.as_posix()}" }}
""",
        )

        config = load_config(pyproject)

        assert isinstance(config.entity, ScriptSource)
        assert config.entity.script == script

    def test_script_table_without_script_raises(self, tmp_path: Path) -> None:
        """Should raise ConfigError when the script key is missing."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace]
entity = { name = "total" }
""",
        )

        with pytest.raises(ConfigError, match="expected string path"):
            load_config(pyproject)

    def test_non_string_name_raises(self, tmp_path: Path) -> None:
        """Should raise ConfigError when the name is not a string."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace]
entity = { script = "model.py", name = 3 }
""",
        )

        with pytest.raises(ConfigError, match=r"entity\.name: expected string"):
            load_config(pyproject)

    def test_invalid_entity_type_raises(self, tmp_path: Path) -> None:
        """Should raise ConfigError when entity is neither a string nor a table."""
        pyproject = write_pyproject(
            tmp_path,
            """
[tool.entitytrace]
entity = 123
""",
        )

        with pytest.raises(ConfigError, match=r"Invalid.*entity configuration"):
            load_config(pyproject)


class TestLoadConfigFormat:
    """Tests for the output format setting."""

    @pytest.mark.parametrize("value", ["ascii", "rich", "json"])
    def test_valid_formats(self, tmp_path: Path, value: str) -> None:
        """Should accept every output format."""
        pyproject = write_pyproject(tmp_path, f'[tool.entitytrace]\nformat = "{value}"\n')

        assert load_config(pyproject).format == OutputFormat(value)

    def test_unknown_format_raises(self, tmp_path: Path) -> None:
        """Should raise ConfigError for an unknown format."""
        pyproject = write_pyproject(tmp_path, '[tool.entitytrace]\nformat = "yaml"\n')

        with pytest.raises(ConfigError, match="Invalid \\[tool.entitytrace\\].format 'yaml'"):
            load_config(pyproject)

    def test_non_string_format_raises(self, tmp_path: Path) -> None:
        """Should raise ConfigError when the format is not a string."""
        pyproject = write_pyproject(tmp_path, "[tool.entitytrace]\nformat = 1\n")

        with pytest.raises(ConfigError, match="expected string"):
            load_config(pyproject)


class TestLoadConfigEmptySection:
    """Tests for empty or missing configuration."""

    def test_no_tool_section(self, tmp_path: Path) -> None:
        """Should return defaults when [tool.entitytrace] is missing."""
        pyproject = write_pyproject(tmp_path, '[project]\nname = "test"\n')

        config = load_config(pyproject)

        assert config.entity is None
        assert config.format is OutputFormat.ASCII
        assert config.project_root == tmp_path

    def test_empty_tool_section(self, tmp_path: Path) -> None:
        """Should return defaults when [tool.entitytrace] is empty."""
        pyproject = write_pyproject(tmp_path, "[tool.entitytrace]\n")

        config = load_config(pyproject)

        assert config.entity is None
        assert config.format is OutputFormat.ASCII


class TestLoadConfigErrors:
    """Tests for configuration error handling."""

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError for invalid TOML."""
        pyproject = write_pyproject(tmp_path, "invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)


class TestEntityTraceConfigDataclass:
    """Tests for EntityTraceConfig dataclass."""

    def test_default_values(self) -> None:
        """Should have correct default values."""
        config = EntityTraceConfig()

        assert config.entity is None
        assert config.format is OutputFormat.ASCII
        assert config.project_root is None

    def test_frozen(self) -> None:
        """Should be immutable."""
        config = EntityTraceConfig()

        with pytest.raises(AttributeError):
            config.entity = ModuleSource("pkg:total")  # type: ignore[misc]
