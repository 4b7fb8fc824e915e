"""
Tests for git_setup.core.config — MatchConfig, DetectionConfig, GitSetupConfig.
"""

from pathlib import Path

import pytest

from git_setup.core.config import DetectionConfig, GitSetupConfig, MatchConfig
from git_setup.exceptions import ConfigError


# =============================================================================
# Engine configs
# =============================================================================

class TestMatchConfig:
    """Defaults and validation for the fuzzy matcher config."""

    def test_defaults(self):
        cfg = MatchConfig()
        assert cfg.min_score == 0.4
        assert cfg.best_match_threshold == 0.8
        assert cfg.max_results == 10
        assert cfg.match_name is True
        assert not (cfg.match_email or cfg.match_user_name or cfg.match_vault_name
                    or cfg.match_ssh_key_title)
        assert cfg.validate() is True

    @pytest.mark.parametrize("kwargs", [
        {"min_score": -0.1},
        {"min_score": 1.5},
        {"best_match_threshold": 2.0},
        {"max_results": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            MatchConfig(**kwargs).validate()


class TestDetectionConfig:
    """Defaults and validation for the detector config."""

    def test_defaults(self):
        cfg = DetectionConfig()
        assert cfg.min_confidence == 0.6
        assert cfg.check_remote_url and cfg.check_directory and cfg.check_include_if
        assert cfg.check_hostname and cfg.check_git_config
        assert cfg.enable_cache is False

    def test_invalid_threshold(self):
        with pytest.raises(ConfigError, match="min_confidence"):
            DetectionConfig(min_confidence=1.01).validate()

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            DetectionConfig(min_confidence=-1).validate()


# =============================================================================
# GitSetupConfig
# =============================================================================

class TestGitSetupConfig:
    """Top-level config construction and environment loading."""

    def test_defaults(self, clean_env):
        cfg = GitSetupConfig.from_env()
        assert cfg.profiles_path is None
        assert cfg.primary_algorithm == "fuzzy"
        assert cfg.fallback_algorithms == ("substring", "levenshtein")
        assert cfg.git_executable == "git"
        assert cfg.log_level == "INFO"
        assert cfg.validate() is True

    def test_from_env(self, clean_env, tmp_path):
        clean_env.setenv("GIT_SETUP_CONFIG", str(tmp_path / "p.yaml"))
        clean_env.setenv("GIT_SETUP_MIN_CONFIDENCE", "0.7")
        clean_env.setenv("GIT_SETUP_MIN_SCORE", "0.2")
        clean_env.setenv("GIT_SETUP_BEST_MATCH_THRESHOLD", "0.95")
        clean_env.setenv("GIT_SETUP_MAX_RESULTS", "3")
        clean_env.setenv("GIT_SETUP_ENABLE_CACHE", "yes")
        clean_env.setenv("GIT_SETUP_GIT", "/usr/local/bin/git")
        clean_env.setenv("GIT_SETUP_LOG_LEVEL", "debug")

        cfg = GitSetupConfig.from_env()

        assert cfg.profiles_path == tmp_path / "p.yaml"
        assert cfg.detection.min_confidence == 0.7
        assert cfg.detection.enable_cache is True
        assert cfg.matching.min_score == 0.2
        assert cfg.matching.best_match_threshold == 0.95
        assert cfg.matching.max_results == 3
        assert cfg.git_executable == "/usr/local/bin/git"
        assert cfg.log_level == "DEBUG"

    def test_malformed_number(self, clean_env):
        clean_env.setenv("GIT_SETUP_MIN_SCORE", "high")
        with pytest.raises(ConfigError, match="GIT_SETUP_MIN_SCORE"):
            GitSetupConfig.from_env()

    def test_malformed_integer(self, clean_env):
        clean_env.setenv("GIT_SETUP_MAX_RESULTS", "2.5")
        with pytest.raises(ConfigError, match="GIT_SETUP_MAX_RESULTS"):
            GitSetupConfig.from_env()

    def test_unknown_algorithm(self):
        with pytest.raises(ConfigError, match="soundex"):
            GitSetupConfig(primary_algorithm="soundex").validate()

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError, match="git_timeout"):
            GitSetupConfig(git_timeout=0).validate()

    def test_nested_validation(self):
        cfg = GitSetupConfig(matching=MatchConfig(max_results=0))
        with pytest.raises(ConfigError):
            cfg.validate()

    def test_profiles_path_fallback(self, tmp_path):
        assert GitSetupConfig().get_profiles_path(tmp_path) == tmp_path / "config.toml"
        explicit = GitSetupConfig(profiles_path=Path("/etc/p.toml"))
        assert explicit.get_profiles_path(tmp_path) == Path("/etc/p.toml")
