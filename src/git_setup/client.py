"""
git-setup Client Facade

Single entry point for programmatic use of git-setup.  Wraps profile
loading, auto detection and fuzzy matching behind an instance-based API
with optional async support.

Usage::

    from git_setup import GitSetup

    # From environment variables (GIT_SETUP_CONFIG, ...)
    client = GitSetup()

    # With explicit configuration
    from git_setup.core.config import GitSetupConfig
    client = GitSetup(config=GitSetupConfig(profiles_path=Path("profiles.toml")))

    # Which profile fits this repository?
    result = client.detect("./myproject")
    if result:
        print(f"{result.profile.name}: {result.reason}")

    # Which profile did the user mean?
    match = client.best_profile("wrk")

    # Async variants (for async services)
    result = await client.adetect("./myproject")
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

from git_setup.core.algorithms import get_algorithm
from git_setup.core.config import GitSetupConfig
from git_setup.core.context import ContextExtractor
from git_setup.core.detector import AutoDetector
from git_setup.core.git import GitConfigReader, SystemGit
from git_setup.core.matcher import ProfileFuzzyMatcher
from git_setup.core.models import DetectionResult, MatchResult, Profile, RepositoryContext
from git_setup.core.platform import PlatformPaths, SystemPlatform
from git_setup.core.store import FileProfileStore, ProfileStore

logger = logging.getLogger(__name__)


class GitSetup:
    """
    High-level git-setup client.

    Each instance carries its own :class:`GitSetupConfig` and collaborators
    and never touches global state, which keeps it safe for embedding and
    testing.

    Args:
        config: Explicit configuration object.  When *None*, a config is
            built from environment variables and keyword overrides.
        store: Profile source.  Defaults to a :class:`FileProfileStore` on
            :meth:`GitSetupConfig.get_profiles_path`.
        git: Git config reader.  Defaults to :class:`SystemGit` using the
            configured executable and timeout.
        platform: Home-directory / hostname provider.
        **kwargs: Forwarded to :class:`GitSetupConfig` when *config* is
            ``None`` (e.g. ``profiles_path=Path("p.toml")``).
    """

    def __init__(
        self,
        config: GitSetupConfig | None = None,
        *,
        store: ProfileStore | None = None,
        git: GitConfigReader | None = None,
        platform: PlatformPaths | None = None,
        **kwargs,
    ):
        if config is not None:
            self._config = config
        elif kwargs:
            # Build a config from env, then overlay keyword overrides
            base = GitSetupConfig.from_env()
            merged = {
                f.name: kwargs.get(f.name, getattr(base, f.name))
                for f in base.__dataclass_fields__.values()
            }
            self._config = GitSetupConfig(**merged)
        else:
            self._config = GitSetupConfig.from_env()

        self._config.validate()

        self._platform = platform or SystemPlatform()
        self._git = git or SystemGit(
            executable=self._config.git_executable,
            timeout=self._config.git_timeout,
        )
        self._store = store
        self._detector: Optional[AutoDetector] = None
        self._matcher: Optional[ProfileFuzzyMatcher] = None

    # ── Configuration ─────────────────────────────────────────────

    @property
    def config(self) -> GitSetupConfig:
        """The active configuration for this client."""
        return self._config

    @property
    def store(self) -> ProfileStore:
        if self._store is None:
            path = self._config.get_profiles_path(self._platform.config_dir())
            logger.debug(f"Using profile file {path}")
            self._store = FileProfileStore(path, platform=self._platform)
        return self._store

    @property
    def detector(self) -> AutoDetector:
        if self._detector is None:
            self._detector = AutoDetector(
                self.store,
                git=self._git,
                platform=self._platform,
                config=self._config.detection,
            )
        return self._detector

    @property
    def matcher(self) -> ProfileFuzzyMatcher:
        if self._matcher is None:
            self._matcher = ProfileFuzzyMatcher(
                config=self._config.matching,
                primary=get_algorithm(self._config.primary_algorithm),
                fallbacks=[get_algorithm(n) for n in self._config.fallback_algorithms],
            )
        return self._matcher

    # ── Profiles ──────────────────────────────────────────────────

    def profiles(self) -> List[Profile]:
        """
        All configured profiles.

        Raises:
            ProfileStoreError: If the profile file is unreadable or invalid.
        """
        return self.store.list()

    # ── Detection ─────────────────────────────────────────────────

    def detect(self, path: str | Path | None = None) -> Optional[DetectionResult]:
        """
        Best profile for *path* (default: the current directory).

        Returns:
            The top :class:`DetectionResult`, or ``None`` when no profile
            reaches ``detection.min_confidence``.

        Raises:
            ProfileStoreError: If the profile file is unreadable or invalid.
            ContextError: If the repository context cannot be built.
        """
        if path is None:
            return self.detector.detect()
        return self.detector.detect_in(path)

    def detect_all(self, path: str | Path | None = None) -> List[DetectionResult]:
        """Every profile above the detection threshold, best first."""
        return self.detector.detect_all(path)

    def context(self, path: str | Path | None = None) -> RepositoryContext:
        """The signals detection would score for *path*."""
        extractor = ContextExtractor(git=self._git, platform=self._platform)
        if path is None:
            return extractor.extract()
        return extractor.extract_in(path)

    # ── Matching ──────────────────────────────────────────────────

    def find_profiles(self, query: str) -> List[MatchResult]:
        """Profiles ranked against a free-text *query*."""
        return self.matcher.find_matches(query, self.profiles())

    def best_profile(self, query: str) -> Optional[MatchResult]:
        """Top match for *query* if it clears ``matching.best_match_threshold``."""
        return self.matcher.find_best_match(query, self.profiles())

    # ── Async variants ────────────────────────────────────────────
    # These use asyncio.to_thread() to run the sync operations (which
    # shell out to git) off the event loop. They raise the same
    # exceptions as the sync methods.

    async def adetect(self, path: str | Path | None = None) -> Optional[DetectionResult]:
        """Async variant of :meth:`detect`."""
        return await asyncio.to_thread(self.detect, path)

    async def adetect_all(self, path: str | Path | None = None) -> List[DetectionResult]:
        """Async variant of :meth:`detect_all`."""
        return await asyncio.to_thread(self.detect_all, path)

    async def afind_profiles(self, query: str) -> List[MatchResult]:
        """Async variant of :meth:`find_profiles`."""
        return await asyncio.to_thread(self.find_profiles, query)

    async def abest_profile(self, query: str) -> Optional[MatchResult]:
        """Async variant of :meth:`best_profile`."""
        return await asyncio.to_thread(self.best_profile, query)

    # ── Health ────────────────────────────────────────────────────

    def health(self) -> Dict[str, object]:
        """
        Small status dict for scripts and status checks.

        Does not read the profile file or call git.
        """
        from git_setup import __version__

        return {
            "version": __version__,
            "profiles_path": str(self._config.profiles_path) if self._config.profiles_path else None,
            "primary_algorithm": self._config.primary_algorithm,
            "min_confidence": self._config.detection.min_confidence,
            "cache_enabled": self._config.detection.enable_cache,
        }
