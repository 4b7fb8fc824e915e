"""
git-setup Configuration Module

Instance-based configuration for the profile resolution engine.  Each
config object is self-contained and can be passed through the call stack,
which keeps tests and embedded use free of global state.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from git_setup.core.algorithms import get_algorithm
from git_setup.exceptions import ConfigError


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigError(f"{name} must be within [0.0, 1.0], got {value}.")


# =============================================================================
# Engine Configuration
# =============================================================================

@dataclass
class MatchConfig:
    """Thresholds and field switches for :class:`ProfileFuzzyMatcher`."""

    min_score: float = 0.4
    """Profiles whose weighted score is below this are dropped."""
    best_match_threshold: float = 0.8
    """``find_best_match`` only returns a result at or above this score."""
    max_results: int = 10

    # ── Fields to score ───────────────────────────────────────────
    match_name: bool = True
    match_email: bool = False
    match_user_name: bool = False
    match_vault_name: bool = False
    match_ssh_key_title: bool = False

    def validate(self) -> bool:
        """Raise :class:`~git_setup.exceptions.ConfigError` on bad values."""
        _check_unit_interval("min_score", self.min_score)
        _check_unit_interval("best_match_threshold", self.best_match_threshold)
        if self.max_results < 1:
            raise ConfigError(f"max_results must be at least 1, got {self.max_results}.")
        return True


@dataclass
class DetectionConfig:
    """Active rules and threshold for :class:`AutoDetector`."""

    min_confidence: float = 0.6

    # ── Rules ─────────────────────────────────────────────────────
    check_remote_url: bool = True
    check_directory: bool = True
    check_include_if: bool = True
    check_hostname: bool = True
    check_git_config: bool = True

    # ── Caching ───────────────────────────────────────────────────
    enable_cache: bool = False
    """Memoise ``detect_in`` results per path for the detector's lifetime."""

    def validate(self) -> bool:
        _check_unit_interval("min_confidence", self.min_confidence)
        return True


# =============================================================================
# Application Configuration
# =============================================================================

_TRUTHY = ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'.") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{raw}'.") from None


@dataclass
class GitSetupConfig:
    """
    Top-level configuration for git-setup.

    Create from environment variables::

        config = GitSetupConfig.from_env()

    Or with explicit values::

        config = GitSetupConfig(profiles_path=Path("~/profiles.toml").expanduser())
    """

    # ── Profiles ──────────────────────────────────────────────────
    profiles_path: Optional[Path] = None
    """Profile file (.toml / .yaml).  ``None`` → platform config dir / config.toml."""

    # ── Engines ───────────────────────────────────────────────────
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    matching: MatchConfig = field(default_factory=MatchConfig)
    primary_algorithm: str = "fuzzy"
    fallback_algorithms: Tuple[str, ...] = ("substring", "levenshtein")

    # ── Git ───────────────────────────────────────────────────────
    git_executable: str = "git"
    git_timeout: float = 5.0

    # ── Logging ───────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ── Factory ───────────────────────────────────────────────────

    @classmethod
    def from_env(cls) -> "GitSetupConfig":
        """Build a config snapshot from current environment variables.

        Reads ``GIT_SETUP_CONFIG``, ``GIT_SETUP_MIN_CONFIDENCE``,
        ``GIT_SETUP_MIN_SCORE``, ``GIT_SETUP_BEST_MATCH_THRESHOLD``,
        ``GIT_SETUP_MAX_RESULTS``, ``GIT_SETUP_ENABLE_CACHE``,
        ``GIT_SETUP_GIT`` and ``GIT_SETUP_LOG_LEVEL``.
        """
        profiles_raw = os.getenv("GIT_SETUP_CONFIG")
        detection = DetectionConfig(
            min_confidence=_env_float("GIT_SETUP_MIN_CONFIDENCE", 0.6),
            enable_cache=os.getenv("GIT_SETUP_ENABLE_CACHE", "").lower() in _TRUTHY,
        )
        matching = MatchConfig(
            min_score=_env_float("GIT_SETUP_MIN_SCORE", 0.4),
            best_match_threshold=_env_float("GIT_SETUP_BEST_MATCH_THRESHOLD", 0.8),
            max_results=_env_int("GIT_SETUP_MAX_RESULTS", 10),
        )
        return cls(
            profiles_path=Path(profiles_raw).expanduser() if profiles_raw else None,
            detection=detection,
            matching=matching,
            git_executable=os.getenv("GIT_SETUP_GIT", "git"),
            log_level=os.getenv("GIT_SETUP_LOG_LEVEL", "INFO").upper(),
        )

    # ── Validation & Accessors ────────────────────────────────────

    def validate(self) -> bool:
        """Validate nested configs and algorithm names."""
        self.detection.validate()
        self.matching.validate()
        for name in (self.primary_algorithm, *self.fallback_algorithms):
            get_algorithm(name)
        if self.git_timeout <= 0:
            raise ConfigError(f"git_timeout must be positive, got {self.git_timeout}.")
        return True

    def get_profiles_path(self, config_dir: Path) -> Path:
        """Profile file to read, falling back to *config_dir*/config.toml."""
        if self.profiles_path is not None:
            return self.profiles_path
        return config_dir / "config.toml"
