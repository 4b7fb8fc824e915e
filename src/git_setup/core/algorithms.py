"""
git-setup Matching Algorithms

String-similarity strategies used by the profile fuzzy matcher.  Every
algorithm is case-insensitive, works on code points and returns a score in
``[0.0, 1.0]``:

- ``levenshtein`` — normalised edit distance
- ``substring``   — contiguous containment, weighted by position and coverage
- ``fuzzy``       — greedy in-order character matching with skips and bonuses
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from git_setup.exceptions import ConfigError


class MatchingAlgorithm(ABC):
    """Scores a query string against one target string."""

    name: str = ""

    def score(self, query: str, target: str) -> float:
        """Return the similarity of *query* to *target* in ``[0, 1]``."""
        if not query and not target:
            return 1.0
        if not query or not target:
            return 0.0

        query_lower = query.lower()
        target_lower = target.lower()
        if query_lower == target_lower:
            return 1.0
        return self._score(query_lower, target_lower)

    @abstractmethod
    def _score(self, query: str, target: str) -> float:
        """Score two non-empty, lowercased, non-identical strings."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LevenshteinMatcher(MatchingAlgorithm):
    """Similarity = 1 - distance / longest length."""

    name = "levenshtein"

    def _score(self, query: str, target: str) -> float:
        max_len = max(len(query), len(target))
        return (max_len - levenshtein_distance(query, target)) / max_len


class SubstringMatcher(MatchingAlgorithm):
    """Rewards early, long contiguous hits; falls back to in-order characters."""

    name = "substring"

    def _score(self, query: str, target: str) -> float:
        position = target.find(query)
        if position < 0:
            return character_sequence_score(query, target) * 0.7

        target_len = len(target)
        position_score = 1.0 - position / target_len
        length_ratio = len(query) / target_len
        return min(1.0, position_score * 0.6 + length_ratio * 0.4)


class FuzzyAlgorithm(MatchingAlgorithm):
    """Skip-matching in the style of editor "go to file" pickers."""

    name = "fuzzy"

    def _score(self, query: str, target: str) -> float:
        if query in target:
            return SubstringMatcher()._score(query, target)

        score = fuzzy_match_score(query, target)
        # Very short queries match almost anything
        if len(query) <= 2:
            return score * 0.8
        return score


# =============================================================================
# Scoring primitives
# =============================================================================

def levenshtein_distance(s1: str, s2: str) -> int:
    """Unit-cost edit distance (insert / delete / substitute)."""
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def character_sequence_score(query: str, target: str) -> float:
    """Fraction of *query* characters found in *target* in order (greedy)."""
    if not query:
        return 1.0

    matched = 0
    target_idx = 0
    for ch in query:
        while target_idx < len(target):
            target_idx += 1
            if target[target_idx - 1] == ch:
                matched += 1
                break
    return matched / len(query)


def fuzzy_match_score(query: str, target: str) -> float:
    """
    Greedy subsequence score with boundary, adjacency and position bonuses.

    Each matched character earns 1.0, plus 0.3 at a word boundary, plus a
    consecutive-run bonus that grows by 0.2 per adjacent match, plus up to
    0.1 for matching early in *target*.  Each unmatched character costs
    ``1 + query_idx / len(query)``.  The sum is normalised by the query
    length, halved when the query is longer than the target, and clamped.
    """
    if not query:
        return 1.0

    query_len = len(query)
    target_len = len(target)
    score = 0.0
    target_idx = 0
    consecutive_bonus = 0.0
    last_match_idx: Optional[int] = None

    for query_idx, ch in enumerate(query):
        found = False
        while target_idx < target_len:
            if target[target_idx] == ch:
                char_score = 1.0
                if target_idx == 0 or not target[target_idx - 1].isalnum():
                    char_score += 0.3

                if last_match_idx is not None:
                    if target_idx == last_match_idx + 1:
                        consecutive_bonus += 0.2
                        char_score += consecutive_bonus
                    else:
                        consecutive_bonus = 0.0

                char_score += 0.1 * (1.0 - target_idx / target_len)

                score += char_score
                last_match_idx = target_idx
                target_idx += 1
                found = True
                break
            target_idx += 1

        if not found:
            score -= 1.0 + query_idx / query_len

    base_score = score / query_len
    if query_len > target_len:
        base_score *= 0.5
    return max(0.0, min(1.0, base_score))


# =============================================================================
# Registry
# =============================================================================

ALGORITHMS: Dict[str, Type[MatchingAlgorithm]] = {
    cls.name: cls for cls in (FuzzyAlgorithm, SubstringMatcher, LevenshteinMatcher)
}


def get_algorithm(name: str) -> MatchingAlgorithm:
    """Instantiate a matching algorithm by its registry name."""
    try:
        return ALGORITHMS[name.lower()]()
    except KeyError:
        raise ConfigError(
            f"Unknown matching algorithm '{name}'. "
            f"Supported: {', '.join(ALGORITHMS)}."
        ) from None


def available_algorithms() -> List[str]:
    return list(ALGORITHMS)
