"""
git-setup Core — models, matching algorithms, detection rules and engines.

Re-exports the primary classes for convenience::

    from git_setup.core import AutoDetector, ProfileFuzzyMatcher, Profile
"""

from git_setup.core.algorithms import (
    FuzzyAlgorithm,
    LevenshteinMatcher,
    MatchingAlgorithm,
    SubstringMatcher,
    get_algorithm,
)
from git_setup.core.config import DetectionConfig, GitSetupConfig, MatchConfig
from git_setup.core.context import ContextExtractor
from git_setup.core.detector import AutoDetector
from git_setup.core.matcher import ProfileFuzzyMatcher
from git_setup.core.models import (
    DetectionResult,
    FieldMatch,
    MatchedField,
    MatchedRule,
    MatchResult,
    Profile,
    RemoteInfo,
    RepositoryContext,
    RulePriority,
)
from git_setup.core.rules import (
    DetectionRule,
    DirectoryPathRule,
    GitConfigRule,
    HostnameRule,
    IncludeIfDirRule,
    RemoteUrlRule,
    build_rules,
)
from git_setup.core.store import FileProfileStore, InMemoryProfileStore, ProfileStore

__all__ = [
    "FuzzyAlgorithm",
    "LevenshteinMatcher",
    "MatchingAlgorithm",
    "SubstringMatcher",
    "get_algorithm",
    "DetectionConfig",
    "GitSetupConfig",
    "MatchConfig",
    "ContextExtractor",
    "AutoDetector",
    "ProfileFuzzyMatcher",
    "DetectionResult",
    "FieldMatch",
    "MatchedField",
    "MatchedRule",
    "MatchResult",
    "Profile",
    "RemoteInfo",
    "RepositoryContext",
    "RulePriority",
    "DetectionRule",
    "DirectoryPathRule",
    "GitConfigRule",
    "HostnameRule",
    "IncludeIfDirRule",
    "RemoteUrlRule",
    "build_rules",
    "FileProfileStore",
    "InMemoryProfileStore",
    "ProfileStore",
]
