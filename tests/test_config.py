"""Tests for configuration loading."""

import pytest

from git_analytics.config import DEFAULT_CONFIG, EngineConfig, load_config
from git_analytics.exceptions import ConfigFileError, InvalidConfigError


class TestEngineConfig:
    """Test EngineConfig defaults and validation."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.half_life_days == 30.0
        assert DEFAULT_CONFIG.pairwise_cap == 50
        assert DEFAULT_CONFIG.min_cochanges == 2
        assert DEFAULT_CONFIG.coupling_limit is None
        assert DEFAULT_CONFIG.reader_prefetch == 0
        assert DEFAULT_CONFIG.index_cache_enabled is False
        assert DEFAULT_CONFIG.default_excludes == []

    @pytest.mark.parametrize(
        "field, value",
        [
            ("half_life_days", 0),
            ("pairwise_cap", 1),
            ("min_cochanges", 0),
            ("coupling_limit", 0),
            ("git_timeout_seconds", 0),
            ("reader_prefetch", -1),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(InvalidConfigError) as exc_info:
            EngineConfig(**{field: value})
        assert exc_info.value.key == field

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.pairwise_cap = 10


class TestLoadConfig:
    """Test load_config merging."""

    def test_no_sources_gives_defaults(self, isolated_home):
        assert load_config() == EngineConfig()

    def test_overrides(self, isolated_home):
        config = load_config(half_life_days=14, pairwise_cap=None)
        assert config.half_life_days == 14.0
        assert isinstance(config.half_life_days, float)
        assert config.pairwise_cap == 50

    def test_unknown_key(self, isolated_home):
        with pytest.raises(InvalidConfigError):
            load_config(colour="blue")

    def test_project_file(self, isolated_home):
        (isolated_home / "git-analytics.toml").write_text("pairwise_cap = 20\n")
        assert load_config().pairwise_cap == 20

    def test_global_then_project_precedence(self, isolated_home):
        (isolated_home / ".git-analytics.toml").write_text("pairwise_cap = 20\nmin_cochanges = 3\n")
        project = isolated_home / "work"
        project.mkdir()
        (project / "git-analytics.toml").write_text("pairwise_cap = 30\n")

        config = load_config(config_file=project / "git-analytics.toml")
        assert config.pairwise_cap == 30
        assert config.min_cochanges == 3

    def test_section_table(self, isolated_home):
        path = isolated_home / "custom.toml"
        path.write_text('[git-analytics]\ndefault_excludes = ["vendor/*", "*.lock"]\n')
        assert load_config(config_file=path).default_excludes == ["vendor/*", "*.lock"]

    def test_missing_explicit_file(self, isolated_home):
        with pytest.raises(ConfigFileError):
            load_config(config_file=isolated_home / "nope.toml")

    def test_broken_toml(self, isolated_home):
        path = isolated_home / "broken.toml"
        path.write_text("pairwise_cap = = 3\n")
        with pytest.raises(ConfigFileError):
            load_config(config_file=path)

    def test_env_vars(self, isolated_home, monkeypatch):
        monkeypatch.setenv("GIT_ANALYTICS_PAIRWISE_CAP", "12")
        monkeypatch.setenv("GIT_ANALYTICS_INDEX_CACHE_ENABLED", "yes")
        monkeypatch.setenv("GIT_ANALYTICS_DEFAULT_EXCLUDES", "dist, *.min.js")
        monkeypatch.setenv("GIT_ANALYTICS_COUPLING_LIMIT", "none")
        config = load_config()
        assert config.pairwise_cap == 12
        assert config.index_cache_enabled is True
        assert config.default_excludes == ["dist", "*.min.js"]
        assert config.coupling_limit is None

    def test_env_beats_file_and_override_beats_env(self, isolated_home, monkeypatch):
        (isolated_home / "git-analytics.toml").write_text("min_cochanges = 5\n")
        monkeypatch.setenv("GIT_ANALYTICS_MIN_COCHANGES", "4")
        assert load_config().min_cochanges == 4
        assert load_config(min_cochanges=3).min_cochanges == 3

    def test_bad_env_value(self, isolated_home, monkeypatch):
        monkeypatch.setenv("GIT_ANALYTICS_READER_PREFETCH", "lots")
        with pytest.raises(InvalidConfigError):
            load_config()
