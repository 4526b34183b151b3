"""Tests for InsightsConfig and TOML loading.

This module verifies:
- Built-in defaults
- Field validation
- Config file lookup order: explicit path, LDGRAPH_CONFIG, ldgraph.toml in cwd
- Unreadable files are skipped with a warning
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from ldgraph.config import CONFIG_ENV_VAR, InsightsConfig, load_insights_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run each test from an empty directory with no config env var."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestInsightsConfig:
    """Tests for the settings model."""

    def test_defaults(self) -> None:
        """Test the built-in defaults."""
        config = InsightsConfig()
        assert config.vocabularies == ("https://schema.org/", "http://schema.org/")
        assert config.max_inheritance_depth == 2
        assert config.organization_types[0] == "Organization"
        assert "variesBy" in config.non_inheritable_properties

    def test_keys(self) -> None:
        """Test candidate keys follow the configured vocabularies."""
        config = InsightsConfig(vocabularies=("https://ex.org/v#",))
        assert config.keys("name") == ("https://ex.org/v#name", "name")

    def test_rejects_negative_depth(self) -> None:
        """Test that depth must not be negative."""
        with pytest.raises(ValidationError):
            InsightsConfig(max_inheritance_depth=-1)

    def test_rejects_empty_vocabularies(self) -> None:
        """Test that at least one vocabulary is required."""
        with pytest.raises(ValidationError):
            InsightsConfig(vocabularies=())

    def test_is_frozen(self) -> None:
        """Test that settings cannot be changed after construction."""
        config = InsightsConfig()
        with pytest.raises(ValidationError):
            config.max_inheritance_depth = 5  # type: ignore[misc]


class TestLoadInsightsConfig:
    """Tests for load_insights_config."""

    def test_no_file_gives_defaults(self) -> None:
        """Test that defaults are used when no config file exists."""
        assert load_insights_config() == InsightsConfig()

    def test_explicit_path(self, tmp_path: Path) -> None:
        """Test that values from an explicit path override defaults."""
        path = tmp_path / "custom.toml"
        path.write_text('[insights]\nmax_inheritance_depth = 4\norganization_types = ["OnlineStore"]\n')

        config = load_insights_config(path)
        assert config.max_inheritance_depth == 4
        assert config.organization_types == ("OnlineStore",)
        assert config.vocabularies == InsightsConfig().vocabularies

    def test_env_var(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that LDGRAPH_CONFIG points at the config file."""
        path = tmp_path / "env.toml"
        path.write_text("[insights]\nmax_inheritance_depth = 1\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_insights_config().max_inheritance_depth == 1

    def test_cwd_file(self, isolated_config: Path) -> None:
        """Test that ldgraph.toml in the working directory is picked up."""
        (isolated_config / "ldgraph.toml").write_text("[insights]\nmax_inheritance_depth = 3\n")
        assert load_insights_config().max_inheritance_depth == 3

    def test_explicit_path_wins_over_cwd(self, isolated_config: Path) -> None:
        """Test lookup order."""
        (isolated_config / "ldgraph.toml").write_text("[insights]\nmax_inheritance_depth = 3\n")
        explicit = isolated_config / "explicit.toml"
        explicit.write_text("[insights]\nmax_inheritance_depth = 5\n")

        assert load_insights_config(explicit).max_inheritance_depth == 5

    def test_missing_section_gives_defaults(self, tmp_path: Path) -> None:
        """Test that a file without [insights] yields defaults."""
        path = tmp_path / "other.toml"
        path.write_text("[server]\nport = 8000\n")
        assert load_insights_config(path) == InsightsConfig()

    def test_malformed_file_is_skipped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a broken file logs a warning and falls through to the next candidate."""
        broken = tmp_path / "broken.toml"
        broken.write_text("[insights\nmax_inheritance_depth = ")
        (tmp_path / "ldgraph.toml").write_text("[insights]\nmax_inheritance_depth = 3\n")

        with caplog.at_level(logging.WARNING, logger="ldgraph.config"):
            config = load_insights_config(broken)

        assert config.max_inheritance_depth == 3
        assert "Ignoring unreadable config" in caplog.text

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """Test that present but invalid values are rejected."""
        path = tmp_path / "bad.toml"
        path.write_text("[insights]\nmax_inheritance_depth = 99\n")
        with pytest.raises(ValidationError):
            load_insights_config(path)
