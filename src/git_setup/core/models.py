"""
git-setup Data Models

Plain records shared by the detection and matching engines.  Inputs
(:class:`Profile`, :class:`RepositoryContext`) are frozen snapshots so that
scorers can be called from several threads without synchronisation.
"""

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple


# =============================================================================
# Inputs
# =============================================================================

_LIST_FIELDS = ("repos", "match_patterns", "include_if_dirs", "host_patterns")


@dataclass(frozen=True)
class Profile:
    """A named git identity / signing configuration.

    Only the attributes used for resolution are scored; ``key_type``,
    ``signing_key`` and ``scope`` are carried along for callers.
    """
    name: str
    git_user_email: str
    git_user_name: Optional[str] = None
    repos: Tuple[str, ...] = ()
    """Remote URL patterns (exact, glob or substring)."""
    match_patterns: Tuple[str, ...] = ()
    """Directory globs tested against the working directory and its parents."""
    include_if_dirs: Tuple[str, ...] = ()
    host_patterns: Tuple[str, ...] = ()
    vault_name: Optional[str] = None
    ssh_key_title: Optional[str] = None
    key_type: str = "ssh"
    signing_key: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        """Build a profile from a mapping (e.g. one table of a profile file).

        Unknown keys are ignored and list fields are coerced to tuples.
        """
        known = cls.__dataclass_fields__
        kwargs = {k: v for k, v in data.items() if k in known}
        for name in _LIST_FIELDS:
            value = kwargs.get(name)
            if value is None:
                kwargs[name] = ()
            elif isinstance(value, str):
                kwargs[name] = (value,)
            else:
                kwargs[name] = tuple(str(v) for v in value)
        return cls(**kwargs)

    def to_dict(self) -> dict:
        data = asdict(self)
        for name in _LIST_FIELDS:
            data[name] = list(data[name])
        return data


@dataclass(frozen=True)
class RemoteInfo:
    """One configured git remote."""
    name: str
    url: str
    push_url: Optional[str] = None

    def urls(self) -> Tuple[str, ...]:
        """Fetch URL followed by the push URL when one is configured."""
        if self.push_url:
            return (self.url, self.push_url)
        return (self.url,)


@dataclass(frozen=True)
class RepositoryContext:
    """Immutable snapshot of the signals available for one resolution call."""
    working_dir: Path
    hostname: str = "unknown"
    repo_root: Optional[Path] = None
    remotes: Tuple[RemoteInfo, ...] = ()
    current_email: Optional[str] = None
    current_name: Optional[str] = None
    parent_dirs: Tuple[Path, ...] = ()
    """Nearest first; never contains the home directory or the filesystem root."""

    def to_dict(self) -> dict:
        return {
            "working_dir": str(self.working_dir),
            "repo_root": str(self.repo_root) if self.repo_root else None,
            "remotes": [asdict(r) for r in self.remotes],
            "current_email": self.current_email,
            "current_name": self.current_name,
            "hostname": self.hostname,
            "parent_dirs": [str(p) for p in self.parent_dirs],
        }


# =============================================================================
# Detection
# =============================================================================

class RulePriority(Enum):
    """Weight class of a detection rule."""
    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> float:
        return PRIORITY_WEIGHTS[self]


PRIORITY_WEIGHTS: Dict[RulePriority, float] = {
    RulePriority.EXACT: 1.0,
    RulePriority.HIGH: 0.75,
    RulePriority.MEDIUM: 0.5,
    RulePriority.LOW: 0.25,
}


@dataclass
class MatchedRule:
    """A single rule's contribution to a detection result."""
    rule_name: str
    priority: RulePriority
    confidence: float

    def to_dict(self) -> dict:
        return {
            "rule_name": self.rule_name,
            "priority": self.priority.value,
            "confidence": self.confidence,
        }


@dataclass
class DetectionResult:
    """A profile scored against a repository context.

    Sorting a list of results orders it by confidence (highest first), then
    by profile name.
    """
    profile: Profile
    confidence: float
    matched_rules: List[MatchedRule] = field(default_factory=list)
    reason: str = ""
    reasons: List[str] = field(default_factory=list)

    def __lt__(self, other: "DetectionResult") -> bool:
        return (-self.confidence, self.profile.name) < (-other.confidence, other.profile.name)

    def copy(self) -> "DetectionResult":
        """Copy whose rule and reason lists are independent of this result."""
        return replace(
            self,
            matched_rules=[replace(m) for m in self.matched_rules],
            reasons=list(self.reasons),
        )

    def to_dict(self) -> dict:
        return {
            "profile": self.profile.to_dict(),
            "confidence": self.confidence,
            "matched_rules": [m.to_dict() for m in self.matched_rules],
            "reason": self.reason,
            "reasons": list(self.reasons),
        }


# =============================================================================
# Fuzzy matching
# =============================================================================

class MatchedField(Enum):
    """Profile attributes the fuzzy matcher can score a query against."""
    NAME = "name"
    EMAIL = "email"
    USER_NAME = "user_name"
    VAULT_NAME = "vault_name"
    SSH_KEY_TITLE = "ssh_key_title"

    @property
    def weight(self) -> float:
        return FIELD_WEIGHTS[self]

    @property
    def display_name(self) -> str:
        return _FIELD_DISPLAY_NAMES[self]


# Relative importance of each field in the weighted average.
FIELD_WEIGHTS: Dict[MatchedField, float] = {
    MatchedField.NAME: 1.0,
    MatchedField.EMAIL: 0.6,
    MatchedField.USER_NAME: 0.5,
    MatchedField.VAULT_NAME: 0.4,
    MatchedField.SSH_KEY_TITLE: 0.3,
}

_FIELD_DISPLAY_NAMES: Dict[MatchedField, str] = {
    MatchedField.NAME: "name",
    MatchedField.EMAIL: "email",
    MatchedField.USER_NAME: "user name",
    MatchedField.VAULT_NAME: "vault name",
    MatchedField.SSH_KEY_TITLE: "SSH key title",
}


@dataclass
class FieldMatch:
    """Score of one profile field against the query."""
    field: MatchedField
    score: float
    matched_text: Optional[str] = None
    """The query itself when it occurs verbatim (case-insensitively) in the field."""

    def weighted_score(self) -> float:
        return self.score * self.field.weight

    def to_dict(self) -> dict:
        return {
            "field": self.field.value,
            "score": self.score,
            "matched_text": self.matched_text,
        }


@dataclass
class MatchResult:
    """A profile ranked against a free-text query.

    Sorting a list of results orders it by score (highest first), then by
    profile name.
    """
    profile: Profile
    score: float
    algorithm: str
    field_matches: List[FieldMatch] = field(default_factory=list)

    def __lt__(self, other: "MatchResult") -> bool:
        return (-self.score, self.profile.name) < (-other.score, other.profile.name)

    def primary_field(self) -> Optional[FieldMatch]:
        """The best-scoring field, or ``None`` when there are no field matches."""
        if not self.field_matches:
            return None
        return max(self.field_matches, key=lambda fm: fm.score)

    def is_high_confidence(self) -> bool:
        return self.score >= 0.8

    def is_exact(self) -> bool:
        return self.score >= 0.99

    def to_dict(self) -> dict:
        return {
            "profile": self.profile.to_dict(),
            "score": self.score,
            "algorithm": self.algorithm,
            "field_matches": [fm.to_dict() for fm in self.field_matches],
        }
