"""
git-setup — pick the right git identity for the repository you are in.

The ``git_setup`` package resolves which of several named git profiles
(identity, signing key, vault entry) applies, either automatically from the
repository context (remotes, directory, hostname, current git config) or
from a fuzzy free-text query.

Quick start (programmatic API)::

    from git_setup import GitSetup

    client = GitSetup()                      # reads env vars
    result = client.detect("./myproject")    # weighted rule-based detection
    match = client.best_profile("wrk")       # fuzzy lookup by name

Quick start (CLI)::

    git-setup detect
    git-setup match wrk --best

Configuration override::

    from git_setup import GitSetup, GitSetupConfig

    config = GitSetupConfig(profiles_path=Path("~/profiles.toml").expanduser())
    client = GitSetup(config=config)
"""

__version__ = "0.1.0"

# Primary public API: the GitSetup facade
from git_setup.client import GitSetup

# Configuration
from git_setup.core.config import DetectionConfig, GitSetupConfig, MatchConfig

# Core data types that callers interact with
from git_setup.core.models import (
    DetectionResult,
    MatchResult,
    Profile,
    RepositoryContext,
)

# Exception hierarchy
from git_setup.exceptions import (
    ConfigError,
    ContextError,
    GitError,
    GitSetupError,
    ProfileNotFoundError,
    ProfileStoreError,
)


def health(config: GitSetupConfig | None = None) -> dict:
    """
    Return a small status dict for scripts or status checks (no git / file access).

    When *config* is None, uses :meth:`GitSetupConfig.from_env()` for the snapshot.
    """
    cfg = config or GitSetupConfig.from_env()
    return {
        "version": __version__,
        "profiles_path": str(cfg.profiles_path) if cfg.profiles_path else None,
        "primary_algorithm": cfg.primary_algorithm,
        "min_confidence": cfg.detection.min_confidence,
        "cache_enabled": cfg.detection.enable_cache,
    }


__all__ = [
    "__version__",
    # Facade
    "GitSetup",
    # Config
    "GitSetupConfig",
    "DetectionConfig",
    "MatchConfig",
    # Data types
    "Profile",
    "RepositoryContext",
    "DetectionResult",
    "MatchResult",
    # Exceptions
    "GitSetupError",
    "ConfigError",
    "ProfileStoreError",
    "ProfileNotFoundError",
    "ContextError",
    "GitError",
    # Status
    "health",
]
