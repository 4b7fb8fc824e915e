"""
git-setup Auto Detector

Chooses the profile that best fits the current repository / machine.

Every active :class:`DetectionRule` scores each profile; rules that abstain
are ignored and the rest are combined into a weighted mean using their
priority weights (HIGH 0.75, MEDIUM 0.5, LOW 0.25, EXACT 1.0)::

    confidence = sum(score * weight) / sum(weight)

Profiles with no matching rule, or with a confidence below
``DetectionConfig.min_confidence``, are left out of the ranking.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from git_setup.core.config import DetectionConfig
from git_setup.core.context import ContextExtractor
from git_setup.core.git import GitConfigReader
from git_setup.core.models import (
    DetectionResult,
    MatchedRule,
    Profile,
    RepositoryContext,
)
from git_setup.core.platform import PlatformPaths
from git_setup.core.rules import RULE_DESCRIPTIONS, DetectionRule, build_rules
from git_setup.core.store import ProfileStore
from git_setup.exceptions import ContextError

logger = logging.getLogger(__name__)


class AutoDetector:
    """
    Rule-based profile detector.

    Args:
        store: Source of candidate profiles.
        git: Git config reader used to build contexts.
        platform: Home-directory / hostname provider used to build contexts.
        config: Active rules, threshold and cache switch.
        rules: Explicit rule list; overrides the rules selected by *config*.
    """

    def __init__(
        self,
        store: ProfileStore,
        git: GitConfigReader | None = None,
        platform: PlatformPaths | None = None,
        config: DetectionConfig | None = None,
        rules: Sequence[DetectionRule] | None = None,
    ):
        self.store = store
        self.config = config or DetectionConfig()
        self.extractor = ContextExtractor(git=git, platform=platform)
        self.rules: List[DetectionRule] = list(rules) if rules is not None else build_rules(self.config)
        self._cache: Dict[str, Optional[DetectionResult]] = {}
        self._cache_lock = threading.Lock()

    # ── Public API ────────────────────────────────────────────────

    def detect(self) -> Optional[DetectionResult]:
        """Best profile for the process's current working directory."""
        return self.detect_in(self._cwd())

    def detect_in(self, path: str | Path) -> Optional[DetectionResult]:
        """Best profile for *path*, or ``None`` when nothing clears the threshold.

        Raises:
            ProfileStoreError: The profile store could not be listed.
            ContextError: The context could not be built.
        """
        key = str(Path(path).absolute())
        if self.config.enable_cache:
            with self._cache_lock:
                if key in self._cache:
                    logger.debug(f"Detection cache hit for {key}")
                    cached = self._cache[key]
                    return cached.copy() if cached is not None else None

        results = self.rank(self.extractor.extract_in(path))
        best = results[0] if results else None

        if self.config.enable_cache:
            # Callers own the returned result; the cache keeps its own copy
            with self._cache_lock:
                self._cache[key] = best.copy() if best is not None else None
        return best

    def detect_all(self, path: str | Path | None = None) -> List[DetectionResult]:
        """Every profile that clears the threshold for *path* (default: cwd), best first."""
        target = path if path is not None else self._cwd()
        return self.rank(self.extractor.extract_in(target))

    def detect_context(self, context: RepositoryContext) -> Optional[DetectionResult]:
        """Best profile for an already-built context."""
        results = self.rank(context)
        return results[0] if results else None

    def rank(self, context: RepositoryContext) -> List[DetectionResult]:
        """Score every stored profile against *context*, best first."""
        return self.rank_profiles(self.store.list(), context)

    def rank_profiles(
        self, profiles: Iterable[Profile], context: RepositoryContext
    ) -> List[DetectionResult]:
        results = [
            result
            for result in (self.score_profile(p, context) for p in profiles)
            if result is not None
        ]
        results.sort()
        return results

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    # ── Scoring ───────────────────────────────────────────────────

    def score_profile(
        self, profile: Profile, context: RepositoryContext
    ) -> Optional[DetectionResult]:
        """Weighted confidence of *profile*, or ``None`` if it is excluded."""
        matched: List[MatchedRule] = []
        numerator = 0.0
        denominator = 0.0

        for rule in self.rules:
            score = rule.matches(profile, context)
            if score is None:
                continue
            weight = rule.priority.weight
            numerator += score * weight
            denominator += weight
            matched.append(MatchedRule(rule.name, rule.priority, score))

        if not matched:
            return None

        confidence = numerator / denominator
        logger.debug(
            f"Profile '{profile.name}': confidence {confidence:.3f} from "
            f"{', '.join(m.rule_name for m in matched)}"
        )
        if confidence < self.config.min_confidence:
            return None

        reason = self.build_reason(matched, profile)
        return DetectionResult(
            profile=profile,
            confidence=confidence,
            matched_rules=matched,
            reason=reason,
            reasons=[reason],
        )

    @staticmethod
    def build_reason(matched_rules: Sequence[MatchedRule], profile: Profile) -> str:
        """Human summary naming the two strongest rules (by priority, then confidence)."""
        ranked = sorted(
            matched_rules,
            key=lambda m: (m.priority.weight, m.confidence),
            reverse=True,
        )
        parts = [
            RULE_DESCRIPTIONS[m.rule_name]
            for m in ranked[:2]
            if m.rule_name in RULE_DESCRIPTIONS
        ]
        prefix = f"Profile '{profile.name}' detected"
        if not parts:
            return prefix
        return f"{prefix}: {', '.join(parts)}"

    @staticmethod
    def _cwd() -> Path:
        try:
            return Path.cwd()
        except OSError as exc:
            raise ContextError(f"Cannot determine current directory: {exc}") from exc
