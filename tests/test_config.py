# ABOUTME: Tests for environment-driven application configuration
# ABOUTME: Checks defaults, GRAPHWEAVE_ overrides and the cached global instance

import pytest
from pydantic import ValidationError

from graphweave.config import Config, get_config, reload_config


@pytest.fixture
def clean_env(monkeypatch):
    """Clear graphweave variables and reset the cached config afterwards."""
    for name in ("LOG_MODE", "LOG_LEVEL", "LOG_FILE", "MIN_SENTENCE_LENGTH", "MAX_PAIRS_PER_SENTENCE"):
        monkeypatch.delenv(f"GRAPHWEAVE_{name}", raising=False)
    yield monkeypatch
    monkeypatch.undo()
    reload_config()


class TestConfig:
    """Test configuration loading."""

    def test_defaults(self, clean_env):
        """Test default values when nothing is set."""
        config = Config(_env_file=None)

        assert config.log_mode == "interactive"
        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.min_sentence_length == 20
        assert config.snippet_length == 200
        assert config.max_pairs_per_sentence == 10
        assert config.max_top_global_entities == 20

    def test_environment_overrides(self, clean_env):
        """Test that prefixed environment variables override defaults."""
        clean_env.setenv("GRAPHWEAVE_LOG_LEVEL", "DEBUG")
        clean_env.setenv("GRAPHWEAVE_MAX_PAIRS_PER_SENTENCE", "3")

        config = Config(_env_file=None)

        assert config.log_level == "DEBUG"
        assert config.max_pairs_per_sentence == 3

    def test_invalid_log_level_rejected(self, clean_env):
        """Test that unknown log levels fail validation."""
        clean_env.setenv("GRAPHWEAVE_LOG_LEVEL", "CHATTY")

        with pytest.raises(ValidationError):
            Config(_env_file=None)


class TestGlobalConfig:
    """Test the cached global instance."""

    def test_get_config_is_cached(self, clean_env):
        assert get_config() is get_config()

    def test_reload_picks_up_changes(self, clean_env):
        clean_env.setenv("GRAPHWEAVE_MIN_SENTENCE_LENGTH", "5")

        config = reload_config()

        assert config.min_sentence_length == 5
        assert get_config() is config
