"""
Shared fixtures for the git-setup test suite.
"""

import sys
import warnings
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Filter deprecation warnings from pytest-asyncio; we cannot fix the library.
warnings.filterwarnings(
    "ignore",
    category=DeprecationWarning,
    module="pytest_asyncio",
)

# Ensure the src/ directory is on the import path so that
# git_setup.core.* can be imported without installing the package.
SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(SRC_ROOT))

from git_setup.core.git import GitConfigReader  # noqa: E402
from git_setup.core.models import Profile, RemoteInfo, RepositoryContext  # noqa: E402
from git_setup.core.platform import PlatformPaths  # noqa: E402
from git_setup.exceptions import GitError  # noqa: E402


# =============================================================================
# Fake collaborators
# =============================================================================

class FakeGit(GitConfigReader):
    """In-memory git config; records the directory each call ran in."""

    def __init__(self, config: Optional[Dict[str, str]] = None, fail: bool = False):
        self.config = dict(config or {})
        self.fail = fail
        self.calls: List[tuple] = []

    def get_config(self, key, scope=None, cwd=None):
        self.calls.append(("get_config", key, scope, cwd))
        if self.fail:
            raise GitError("git is broken")
        return self.config.get(key)

    def get_all_config(self, scope=None, cwd=None):
        self.calls.append(("get_all_config", None, scope, cwd))
        if self.fail:
            raise GitError("git is broken")
        return dict(self.config)


class FakePlatform(PlatformPaths):
    """Fixed home directory and hostname."""

    def __init__(self, home: Path = Path("/home/user"), host: Optional[str] = "dev-box",
                 home_error: bool = False):
        self.home = home
        self.host = host
        self.home_error = home_error

    def home_dir(self) -> Path:
        if self.home_error:
            raise OSError("no home")
        return self.home

    def hostname(self) -> str:
        if self.host is None:
            raise OSError("lookup failed")
        return self.host


# =============================================================================
# Fixtures: profiles and contexts
# =============================================================================

@pytest.fixture
def work_profile() -> Profile:
    return Profile(
        name="work",
        git_user_email="me@company.com",
        git_user_name="Work User",
        repos=("git@github.com:company/*",),
        match_patterns=("*/work/*",),
        vault_name="Company Vault",
        ssh_key_title="Work laptop key",
    )


@pytest.fixture
def personal_profile() -> Profile:
    return Profile(
        name="personal",
        git_user_email="me@personal.dev",
        git_user_name="Personal User",
        repos=("github.com:me/",),
        include_if_dirs=("/home/user/personal",),
    )


@pytest.fixture
def oss_profile() -> Profile:
    return Profile(
        name="opensource",
        git_user_email="oss@example.org",
        host_patterns=("build-*",),
    )


@pytest.fixture
def profiles(work_profile, personal_profile, oss_profile) -> List[Profile]:
    return [work_profile, personal_profile, oss_profile]


@pytest.fixture
def make_context():
    """Factory for contexts rooted under /home/user with sensible defaults."""

    def _make(working_dir: str = "/home/user/projects/api", **overrides) -> RepositoryContext:
        path = Path(working_dir)
        parents = []
        current = path
        while current != Path("/home/user") and current.parent != current:
            parents.append(current)
            current = current.parent
        values = {
            "working_dir": path,
            "hostname": "dev-box",
            "parent_dirs": tuple(parents),
        }
        values.update(overrides)
        return RepositoryContext(**values)

    return _make


@pytest.fixture
def origin():
    def _remote(url: str, push_url: Optional[str] = None, name: str = "origin") -> RemoteInfo:
        return RemoteInfo(name=name, url=url, push_url=push_url)

    return _remote


@pytest.fixture
def fake_platform(tmp_path) -> FakePlatform:
    return FakePlatform(home=tmp_path)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every GIT_SETUP_* variable so from_env() sees defaults."""
    for name in (
        "GIT_SETUP_CONFIG",
        "GIT_SETUP_MIN_CONFIDENCE",
        "GIT_SETUP_MIN_SCORE",
        "GIT_SETUP_BEST_MATCH_THRESHOLD",
        "GIT_SETUP_MAX_RESULTS",
        "GIT_SETUP_ENABLE_CACHE",
        "GIT_SETUP_GIT",
        "GIT_SETUP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
