"""
git-setup Profile Store

Read-only sources of :class:`Profile` records.

Profile files are TOML (``*.toml``) or YAML (``*.yaml`` / ``*.yml``) with a
top-level ``profiles`` list::

    [[profiles]]
    name = "work"
    git_user_email = "me@company.com"
    repos = ["git@github.com:company/*"]
    match_patterns = ["*/work/*"]
"""

import logging
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Mapping

import yaml

from git_setup.core.models import Profile
from git_setup.core.platform import PlatformPaths, SystemPlatform
from git_setup.exceptions import ProfileNotFoundError, ProfileStoreError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")

# Scalar profile keys that must hold text when present
TEXT_FIELDS = (
    "name",
    "git_user_email",
    "git_user_name",
    "vault_name",
    "ssh_key_title",
    "key_type",
    "signing_key",
    "scope",
)


class ProfileStore(ABC):
    """Source of candidate profiles for detection and matching."""

    @abstractmethod
    def list(self) -> List[Profile]:
        """All profiles.  Raises :class:`ProfileStoreError` when unreadable."""

    def get(self, name: str) -> Profile:
        for profile in self.list():
            if profile.name == name:
                return profile
        raise ProfileNotFoundError(name)

    def exists(self, name: str) -> bool:
        return any(p.name == name for p in self.list())


class InMemoryProfileStore(ProfileStore):
    """Fixed list of profiles, mainly for tests and embedding."""

    def __init__(self, profiles: Iterable[Profile] = ()):
        self._profiles = list(profiles)

    def list(self) -> List[Profile]:
        return list(self._profiles)


class FileProfileStore(ProfileStore):
    """
    Profiles read from a TOML or YAML file on every :meth:`list` call.

    A missing file is an empty store.  ``~`` in ``include_if_dirs``,
    ``match_patterns`` and ``signing_key`` is expanded with the platform's
    home directory.

    Args:
        path: Profile file.
        platform: Used for ``~`` expansion.  Defaults to :class:`SystemPlatform`.
    """

    def __init__(self, path: str | Path, platform: PlatformPaths | None = None):
        self.path = Path(path)
        self.platform = platform or SystemPlatform()

    def list(self) -> List[Profile]:
        if not self.path.exists():
            logger.debug(f"Profile file {self.path} does not exist")
            return []

        document = self._load()
        raw_profiles = document.get("profiles") or []
        if not isinstance(raw_profiles, list):
            raise ProfileStoreError(f"{self.path}: 'profiles' must be a list")

        profiles = [self._build(entry, index) for index, entry in enumerate(raw_profiles)]
        validate_profiles(profiles)
        logger.debug(f"Loaded {len(profiles)} profile(s) from {self.path}")
        return profiles

    # ── Parsing ───────────────────────────────────────────────────

    def _load(self) -> Mapping[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ProfileStoreError(f"Cannot read {self.path}: {exc}") from exc

        try:
            if self.path.suffix.lower() in YAML_SUFFIXES:
                document = yaml.safe_load(text) or {}
            else:
                document = tomllib.loads(text)
        except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
            logger.warning(f"Could not parse profile file {self.path}: {exc}")
            raise ProfileStoreError(f"Malformed profile file {self.path}: {exc}") from exc

        if not isinstance(document, dict):
            raise ProfileStoreError(f"{self.path}: expected a mapping at the top level")
        return document

    def _build(self, entry: Any, index: int) -> Profile:
        if not isinstance(entry, dict):
            raise ProfileStoreError(f"{self.path}: profile #{index + 1} is not a table")
        for key in TEXT_FIELDS:
            value = entry.get(key)
            if value is not None and not isinstance(value, str):
                raise ProfileStoreError(
                    f"{self.path}: profile #{index + 1}: '{key}' must be a string, "
                    f"got {type(value).__name__}"
                )
        try:
            profile = Profile.from_dict(entry)
        except TypeError as exc:
            # Missing required keys (name / git_user_email)
            raise ProfileStoreError(f"{self.path}: profile #{index + 1}: {exc}") from exc

        expand = self.platform.expand_path
        return Profile.from_dict({
            **profile.to_dict(),
            "include_if_dirs": [expand(d) for d in profile.include_if_dirs],
            "match_patterns": [expand(p) for p in profile.match_patterns],
            "signing_key": expand(profile.signing_key) if profile.signing_key else None,
        })

    def __repr__(self) -> str:
        return f"FileProfileStore({str(self.path)!r})"


def validate_profiles(profiles: Iterable[Profile]) -> None:
    """Reject non-text fields, empty names, emails without ``@`` and duplicate names."""
    seen = set()
    for profile in profiles:
        for key in TEXT_FIELDS:
            value = getattr(profile, key)
            if value is not None and not isinstance(value, str):
                raise ProfileStoreError(
                    f"Profile field '{key}' must be a string, got {type(value).__name__}"
                )
        if not profile.name:
            raise ProfileStoreError("Profile name cannot be empty")
        if "@" not in (profile.git_user_email or ""):
            raise ProfileStoreError(
                f"Invalid email for profile '{profile.name}': {profile.git_user_email}"
            )
        if profile.name in seen:
            raise ProfileStoreError(f"Duplicate profile name: {profile.name}")
        seen.add(profile.name)
