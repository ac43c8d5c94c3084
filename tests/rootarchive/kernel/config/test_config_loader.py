"""Tests for the rootarchive configuration loader."""

from pathlib import Path

import pytest

from rootarchive.kernel.config.loader import ConfigLoader, _parse_bool_env, load_config
from rootarchive.kernel.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove rootarchive environment variables for the test."""
    for name in (
        "ROOTARCHIVE_CONFIG_PATH",
        "ROOTARCHIVE_LOG_LEVEL",
        "ROOTARCHIVE_LOG_FORMAT",
        "ROOTARCHIVE_LOG_FILE",
        "ROOTARCHIVE_LOG_COLOR",
        "ROOTARCHIVE_LOG_TIMESTAMP",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestYamlConfig:
    """kind: Config manifests."""

    def test_loads_spec_sections(self, tmp_path, clean_env):
        config_file = tmp_path / "rootarchive.yaml"
        config_file.write_text(
            """
kind: Config
metadata:
  name: test
spec:
  profile_id: 3
  allow_remote: false
  max_name_attempts: 50
  paths:
    owners_root: /people
    default_owner_alias: /me
  storage:
    base_dir: /tmp/ra
  logging:
    level: debug
    format: json
"""
        )
        config = ConfigLoader().load_config_file(config_file)

        assert config.topology.profile_id == 3
        assert config.topology.allow_remote is False
        assert config.topology.max_name_attempts == 50
        assert config.topology.paths.owners_root == "/people"
        assert config.topology.paths.default_owner_alias == "/me"
        assert config.topology.paths.library_root == "/library"
        assert config.storage.base_dir == Path("/tmp/ra")
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"

    def test_wrong_kind_rejected(self, tmp_path, clean_env):
        config_file = tmp_path / "pipeline.yaml"
        config_file.write_text("kind: Pipeline\nspec: {}\n")
        with pytest.raises(ConfigurationError, match="kind: Config"):
            ConfigLoader().load_config_file(config_file)

    def test_invalid_paths_rejected(self, tmp_path, clean_env):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("kind: Config\nspec:\n  paths:\n    owners_root: owners\n")
        with pytest.raises(ConfigurationError, match="must be absolute"):
            ConfigLoader().load_config_file(config_file)

    def test_env_var_substitution(self, tmp_path, clean_env):
        clean_env.setenv("RA_HOME", str(tmp_path / "home"))
        config_file = tmp_path / "rootarchive.yaml"
        config_file.write_text("kind: Config\nspec:\n  storage:\n    base_dir: ${RA_HOME}\n")
        config = ConfigLoader().load_config_file(config_file)
        assert config.storage.base_dir == tmp_path / "home"

    def test_unset_env_var_left_verbatim(self, tmp_path, clean_env):
        config_file = tmp_path / "rootarchive.yaml"
        config_file.write_text(
            "kind: Config\nspec:\n  storage:\n    base_dir: /x/${RA_UNSET_VAR}\n"
        )
        config = ConfigLoader().load_config_file(config_file)
        assert config.storage.base_dir == Path("/x/${RA_UNSET_VAR}")


class TestTomlConfig:
    """pyproject.toml and flat TOML files."""

    def test_tool_section(self, tmp_path, clean_env):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            '[tool.rootarchive]\nprofile_id = 7\n\n[tool.rootarchive.paths]\nlibrary_root = "/books"\n'
        )
        config = ConfigLoader().load_config_file(pyproject)
        assert config.topology.profile_id == 7
        assert config.topology.paths.library_root == "/books"

    def test_flat_toml(self, tmp_path, clean_env):
        config_file = tmp_path / "rootarchive.toml"
        config_file.write_text('allow_remote = false\n\n[logging]\nformat = "console"\n')
        config = ConfigLoader().load_config_file(config_file)
        assert config.topology.allow_remote is False
        assert config.logging.format == "console"

    def test_discovers_pyproject_in_parent(self, tmp_path, clean_env):
        (tmp_path / "pyproject.toml").write_text("[tool.rootarchive]\nprofile_id = 5\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        clean_env.chdir(nested)
        assert ConfigLoader().load_config_file().topology.profile_id == 5

    def test_env_path_wins_over_discovery(self, tmp_path, clean_env):
        (tmp_path / "pyproject.toml").write_text("[tool.rootarchive]\nprofile_id = 5\n")
        other = tmp_path / "other.yaml"
        other.write_text("kind: Config\nspec:\n  profile_id: 9\n")
        clean_env.chdir(tmp_path)
        clean_env.setenv("ROOTARCHIVE_CONFIG_PATH", str(other))
        assert ConfigLoader().load_config_file().topology.profile_id == 9


class TestLoggingOverrides:
    """ROOTARCHIVE_LOG_* variables override file values."""

    def test_env_overrides(self, tmp_path, clean_env):
        clean_env.setenv("ROOTARCHIVE_LOG_LEVEL", "warning")
        clean_env.setenv("ROOTARCHIVE_LOG_FORMAT", "RICH")
        clean_env.setenv("ROOTARCHIVE_LOG_COLOR", "off")
        clean_env.setenv("ROOTARCHIVE_LOG_TIMESTAMP", "no")
        config_file = tmp_path / "rootarchive.yaml"
        config_file.write_text("kind: Config\nspec:\n  logging:\n    level: DEBUG\n")

        logging_config = ConfigLoader().load_config_file(config_file).logging
        assert logging_config.level == "WARNING"
        assert logging_config.format == "rich"
        assert logging_config.use_color is False
        assert logging_config.include_timestamp is False

    def test_invalid_bool_is_ignored(self, tmp_path, clean_env):
        clean_env.setenv("ROOTARCHIVE_LOG_COLOR", "maybe")
        config_file = tmp_path / "rootarchive.yaml"
        config_file.write_text("kind: Config\nspec: {}\n")
        assert ConfigLoader().load_config_file(config_file).logging.use_color is True


class TestLoadConfig:
    """Test load_config fallbacks."""

    def test_defaults_when_nothing_found(self, tmp_path, clean_env):
        clean_env.chdir(tmp_path)
        config = load_config()
        assert config.topology.paths.owners_root == "/owners"

    def test_explicit_missing_path_raises(self, tmp_path, clean_env):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("1", True), (" YES ", True), ("off", False), ("disabled", False)],
)
def test_parse_bool_env(value, expected):
    assert _parse_bool_env(value) is expected


def test_parse_bool_env_rejects_garbage():
    with pytest.raises(ValueError, match="Invalid boolean value"):
        _parse_bool_env("perhaps")
