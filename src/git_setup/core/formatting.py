"""
git-setup Result Formatting

Console and JSON rendering of detection and match results for the CLI.
"""

import json
import shutil
from typing import List, Sequence

from git_setup.core.models import DetectionResult, MatchResult, Profile


class ResultFormatter:
    """Format engine results for different output modes."""

    # ── Helpers ───────────────────────────────────────────────────

    @staticmethod
    def _width() -> int:
        return min(shutil.get_terminal_size().columns, 78)

    @staticmethod
    def _identity(profile: Profile) -> str:
        if profile.git_user_name:
            return f"{profile.git_user_name} <{profile.git_user_email}>"
        return f"<{profile.git_user_email}>"

    @staticmethod
    def _header(title: str, count: int) -> List[str]:
        thin = "─" * ResultFormatter._width()
        noun = "result" if count == 1 else "results"
        return [f"\n{thin}", f"  GIT-SETUP {title} — {count} {noun}", thin]

    # ── Console (human-friendly) ──────────────────────────────────

    @staticmethod
    def format_detection_console(results: Sequence[DetectionResult]) -> str:
        """Ranked detection results with confidence and contributing rules."""
        if not results:
            return "\n  No profile detected.\n"

        width = ResultFormatter._width()
        out = ResultFormatter._header("detect", len(results))
        for idx, r in enumerate(results, start=1):
            out.append("")
            out.append(f"  #{idx}  {r.profile.name}")
            out.append(f"  {'─' * (width - 2)}")
            out.append(f"    Identity   : {ResultFormatter._identity(r.profile)}")
            out.append(f"    Confidence : {r.confidence:.2f}")
            out.append(f"    Reason     : {r.reason}")
            if r.matched_rules:
                rules = " ".join(
                    f"{m.rule_name}({m.confidence:.2f})" for m in r.matched_rules
                )
                out.append(f"    Rules      : {rules}")
        out.append(f"\n{'─' * width}")
        return "\n".join(out)

    @staticmethod
    def format_matches_console(results: Sequence[MatchResult]) -> str:
        """Ranked fuzzy matches with the best-scoring field of each."""
        if not results:
            return "\n  No matching profiles.\n"

        width = ResultFormatter._width()
        out = ResultFormatter._header("match", len(results))
        for idx, r in enumerate(results, start=1):
            out.append("")
            out.append(f"  #{idx}  {r.profile.name}")
            out.append(f"  {'─' * (width - 2)}")
            out.append(f"    Identity : {ResultFormatter._identity(r.profile)}")
            out.append(f"    Score    : {r.score:.2f} ({r.algorithm})")
            primary = r.primary_field()
            if primary is not None:
                out.append(
                    f"    Field    : {primary.field.display_name} ({primary.score:.2f})"
                )
        out.append(f"\n{'─' * width}")
        return "\n".join(out)

    @staticmethod
    def format_profiles_console(profiles: Sequence[Profile]) -> str:
        if not profiles:
            return "\n  No profiles configured.\n"
        pad = max(len(p.name) for p in profiles)
        return "\n".join(
            f"  {p.name:<{pad}}  {ResultFormatter._identity(p)}" for p in profiles
        )

    # ── JSON ──────────────────────────────────────────────────────

    @staticmethod
    def format_json(results: Sequence[DetectionResult | MatchResult | Profile]) -> str:
        """Any list of results or profiles as a JSON array."""
        return json.dumps([r.to_dict() for r in results], indent=2, allow_nan=False)
