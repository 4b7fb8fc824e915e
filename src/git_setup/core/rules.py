"""
git-setup Detection Rules

Each rule scores one class of signal (remote URL, directory, include-if
directory, hostname, current git identity) for a profile against a
:class:`RepositoryContext`.

A rule returns a confidence in ``[0, 1]`` or ``None`` to abstain.  Abstaining
is not the same as scoring zero: the detector leaves abstaining rules out
of the weighted average entirely.
"""

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Pattern

from git_setup.core.config import DetectionConfig
from git_setup.core.models import Profile, RepositoryContext, RulePriority


# =============================================================================
# Glob helpers
# =============================================================================

@lru_cache(maxsize=512)
def glob_to_regex(pattern: str) -> Pattern[str]:
    """
    Compile a wildcard glob into an anchored regex.

    ``*`` matches any run of characters (including ``/``) and ``?`` any single
    character.  Every other character is matched literally, so ``.`` in a
    hostname or URL pattern is a dot, not "any character".
    """
    regex = re.escape(pattern)
    regex = regex.replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(f"^{regex}$", re.DOTALL)


def glob_match(pattern: str, text: str) -> bool:
    return glob_to_regex(pattern).match(text) is not None


def _path_matches(pattern: str, path: Path) -> bool:
    """True if *pattern* matches any component of *path* or the whole path."""
    if any(glob_match(pattern, part) for part in path.parts):
        return True
    return glob_match(pattern, str(path))


# =============================================================================
# Rule Interface
# =============================================================================

class DetectionRule(ABC):
    """Scores a profile against a repository context for one signal class."""

    name: str = ""
    priority: RulePriority = RulePriority.LOW

    @abstractmethod
    def matches(self, profile: Profile, context: RepositoryContext) -> Optional[float]:
        """Confidence in ``[0, 1]``, or ``None`` to abstain."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# =============================================================================
# Rules
# =============================================================================

class RemoteUrlRule(DetectionRule):
    """Profile ``repos`` patterns against remote fetch / push URLs."""

    name = "remote_url"
    priority = RulePriority.HIGH

    @staticmethod
    def score_url_match(pattern: str, url: str) -> float:
        if pattern == url:
            return 1.0
        if glob_match(pattern, url):
            return 0.95
        if pattern in url:
            return 0.7
        return 0.0

    def matches(self, profile: Profile, context: RepositoryContext) -> Optional[float]:
        if not profile.repos:
            return None

        best = 0.0
        for remote in context.remotes:
            for url in remote.urls():
                for pattern in profile.repos:
                    best = max(best, self.score_url_match(pattern, url))
        return best if best > 0.0 else None


class DirectoryPathRule(DetectionRule):
    """Profile ``match_patterns`` against the working directory and its parents."""

    name = "directory_path"
    priority = RulePriority.MEDIUM

    def matches(self, profile: Profile, context: RepositoryContext) -> Optional[float]:
        if not profile.match_patterns:
            return None

        for pattern in profile.match_patterns:
            if _path_matches(pattern, context.working_dir):
                return 0.8
            for depth, parent in enumerate(context.parent_dirs):
                if _path_matches(pattern, parent):
                    return max(0.4, 0.7 - 0.1 * depth)
        return None


class IncludeIfDirRule(DetectionRule):
    """Working directory inside one of the profile's ``include_if_dirs``.

    Paths are compared as stored; ``~`` is expanded by the profile store.
    """

    name = "include_if_dir"
    priority = RulePriority.HIGH

    def matches(self, profile: Profile, context: RepositoryContext) -> Optional[float]:
        if not profile.include_if_dirs:
            return None

        for include_dir in profile.include_if_dirs:
            include_path = Path(include_dir)
            if context.working_dir.is_relative_to(include_path):
                return 0.9
            if include_path in context.parent_dirs:
                return 0.85
        return None


class HostnameRule(DetectionRule):
    """Profile ``host_patterns`` against the machine's hostname."""

    name = "hostname"
    priority = RulePriority.MEDIUM

    def matches(self, profile: Profile, context: RepositoryContext) -> Optional[float]:
        for pattern in profile.host_patterns:
            if pattern == context.hostname:
                return 0.9
            if glob_match(pattern, context.hostname):
                return 0.7
        return None


class GitConfigRule(DetectionRule):
    """The repository's current ``user.email`` / ``user.name`` equal the profile's."""

    name = "git_config"
    priority = RulePriority.LOW

    def matches(self, profile: Profile, context: RepositoryContext) -> Optional[float]:
        score = 0.0
        if context.current_email is not None and context.current_email == profile.git_user_email:
            score += 0.6
        if (
            context.current_name is not None
            and profile.git_user_name is not None
            and context.current_name == profile.git_user_name
        ):
            score += 0.5
        return min(score, 1.0) if score > 0.0 else None


# =============================================================================
# Rule Set
# =============================================================================

RULE_DESCRIPTIONS: Dict[str, str] = {
    RemoteUrlRule.name: "repository URL matches",
    DirectoryPathRule.name: "directory pattern matches",
    IncludeIfDirRule.name: "in configured directory",
    HostnameRule.name: "hostname matches",
    GitConfigRule.name: "git config matches",
}


def build_rules(config: DetectionConfig | None = None) -> List[DetectionRule]:
    """Instantiate the rules enabled in *config*, in evaluation order."""
    cfg = config or DetectionConfig()
    rules: List[DetectionRule] = []
    if cfg.check_remote_url:
        rules.append(RemoteUrlRule())
    if cfg.check_directory:
        rules.append(DirectoryPathRule())
    if cfg.check_include_if:
        rules.append(IncludeIfDirRule())
    if cfg.check_hostname:
        rules.append(HostnameRule())
    if cfg.check_git_config:
        rules.append(GitConfigRule())
    return rules
