"""
git-setup Profile Fuzzy Matcher

Ranks profiles against a free-text query (e.g. ``git-setup match wrk``).
Each enabled profile field is scored with a primary algorithm and a list of
fallbacks; the best of those scores is kept per field, and the fields are
combined into a weighted average using :data:`FIELD_WEIGHTS`.
"""

import dataclasses
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from git_setup.core.algorithms import (
    FuzzyAlgorithm,
    LevenshteinMatcher,
    MatchingAlgorithm,
    SubstringMatcher,
)
from git_setup.core.config import MatchConfig
from git_setup.core.models import FieldMatch, MatchedField, MatchResult, Profile

logger = logging.getLogger(__name__)


class ProfileFuzzyMatcher:
    """
    Weighted multi-field fuzzy matcher over a list of profiles.

    The matcher holds no mutable state: the builder helpers
    (:meth:`with_primary_algorithm`, :meth:`with_fallback_algorithm`,
    :meth:`with_updated_config`) return new matchers.

    Args:
        config: Thresholds and field switches.  Defaults to
            :class:`MatchConfig` (name only, ``min_score=0.4``).
        primary: Algorithm reported in :attr:`MatchResult.algorithm`.
            Defaults to :class:`FuzzyAlgorithm`.
        fallbacks: Additional algorithms whose scores compete with the
            primary's.  Defaults to substring, then Levenshtein.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        primary: MatchingAlgorithm | None = None,
        fallbacks: Sequence[MatchingAlgorithm] | None = None,
    ):
        self._config = config or MatchConfig()
        self._primary = primary or FuzzyAlgorithm()
        if fallbacks is None:
            fallbacks = (SubstringMatcher(), LevenshteinMatcher())
        self._fallbacks: Tuple[MatchingAlgorithm, ...] = tuple(fallbacks)

    # ── Accessors ─────────────────────────────────────────────────

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def primary_algorithm(self) -> MatchingAlgorithm:
        return self._primary

    @property
    def fallback_algorithms(self) -> Tuple[MatchingAlgorithm, ...]:
        return self._fallbacks

    # ── Builders ──────────────────────────────────────────────────

    def with_primary_algorithm(self, algorithm: MatchingAlgorithm) -> "ProfileFuzzyMatcher":
        return ProfileFuzzyMatcher(self._config, algorithm, self._fallbacks)

    def with_fallback_algorithm(self, algorithm: MatchingAlgorithm) -> "ProfileFuzzyMatcher":
        return ProfileFuzzyMatcher(self._config, self._primary, self._fallbacks + (algorithm,))

    def with_updated_config(self, **changes) -> "ProfileFuzzyMatcher":
        """Return a matcher whose config has *changes* applied (e.g. ``match_email=True``)."""
        config = dataclasses.replace(self._config, **changes)
        return ProfileFuzzyMatcher(config, self._primary, self._fallbacks)

    # ── Public API ────────────────────────────────────────────────

    def find_matches(self, query: str, profiles: Iterable[Profile]) -> List[MatchResult]:
        """
        Rank *profiles* against *query*.

        Returns:
            At most ``config.max_results`` results with
            ``score >= config.min_score``, best first (ties by profile name).
            An empty query yields an empty list.
        """
        if not query:
            return []

        results = [
            result
            for result in (self.score_profile(query, p) for p in profiles)
            if result is not None
        ]
        results.sort()
        logger.debug(f"Query '{query}': {len(results)} profile(s) above min_score")
        return results[: self._config.max_results]

    def find_best_match(self, query: str, profiles: Iterable[Profile]) -> Optional[MatchResult]:
        """Top match, only if it clears ``config.best_match_threshold``."""
        matches = self.find_matches(query, profiles)
        if not matches:
            return None
        best = matches[0]
        if best.score >= self._config.best_match_threshold:
            return best
        logger.debug(
            f"Best match '{best.profile.name}' ({best.score:.3f}) below threshold "
            f"{self._config.best_match_threshold}"
        )
        return None

    # ── Scoring ───────────────────────────────────────────────────

    def score_profile(self, query: str, profile: Profile) -> Optional[MatchResult]:
        """Weighted score over the enabled fields, or ``None`` if excluded."""
        field_matches: List[FieldMatch] = []
        for matched_field, value in self._enabled_fields(profile):
            if not value:
                continue
            field_match = self.score_field(query, value, matched_field)
            if field_match is not None:
                field_matches.append(field_match)

        if not field_matches:
            return None

        weighted = calculate_weighted_score(field_matches)
        if weighted < self._config.min_score:
            return None

        return MatchResult(
            profile=profile,
            score=weighted,
            algorithm=self._primary.name,
            field_matches=field_matches,
        )

    def score_field(self, query: str, value: str, field: MatchedField) -> Optional[FieldMatch]:
        """Best score of all algorithms for one field; ``None`` when it is 0."""
        best_score = self._primary.score(query, value)
        for algorithm in self._fallbacks:
            best_score = max(best_score, algorithm.score(query, value))

        if best_score <= 0.0:
            return None

        matched_text = query if query.lower() in value.lower() else None
        return FieldMatch(field=field, score=best_score, matched_text=matched_text)

    def _enabled_fields(self, profile: Profile):
        cfg = self._config
        if cfg.match_name:
            yield MatchedField.NAME, profile.name
        if cfg.match_email:
            yield MatchedField.EMAIL, profile.git_user_email
        if cfg.match_user_name:
            yield MatchedField.USER_NAME, profile.git_user_name
        if cfg.match_vault_name:
            yield MatchedField.VAULT_NAME, profile.vault_name
        if cfg.match_ssh_key_title:
            yield MatchedField.SSH_KEY_TITLE, profile.ssh_key_title


def calculate_weighted_score(field_matches: Sequence[FieldMatch]) -> float:
    """Weighted mean of field scores using each field's weight."""
    total_weight = sum(fm.field.weight for fm in field_matches)
    if total_weight <= 0.0:
        return 0.0
    return sum(fm.weighted_score() for fm in field_matches) / total_weight
