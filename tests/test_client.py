"""
Tests for the git-setup client API (git_setup.client.GitSetup).

Covers the public facade: profiles(), detect(), detect_all(), context(),
find_profiles(), best_profile(), async variants, config construction and
error propagation from the profile store.
"""

from pathlib import Path

import pytest

from conftest import FakeGit, FakePlatform
from git_setup import GitSetup, GitSetupConfig, ProfileStoreError, health
from git_setup.core.config import MatchConfig
from git_setup.core.store import FileProfileStore, InMemoryProfileStore
from git_setup.exceptions import ConfigError


# =============================================================================
# Fixtures: client with fake collaborators
# =============================================================================


@pytest.fixture
def config():
    """GitSetupConfig with defaults (no profile file)."""
    return GitSetupConfig()


@pytest.fixture
def client(config, profiles, tmp_path):
    """GitSetup client over in-memory profiles and fake git / platform."""
    return GitSetup(
        config=config,
        store=InMemoryProfileStore(profiles),
        git=FakeGit(),
        platform=FakePlatform(home=tmp_path),
    )


# =============================================================================
# Construction
# =============================================================================


class TestGitSetupConstruction:
    """Client construction from config and from env."""

    def test_construct_with_explicit_config(self, config):
        client = GitSetup(config=config)
        assert client.config is config

    def test_construct_from_kwargs_overrides_env(self, clean_env, tmp_path):
        clean_env.setenv("GIT_SETUP_GIT", "/opt/git")
        client = GitSetup(profiles_path=tmp_path / "p.toml", primary_algorithm="levenshtein")
        assert client.config.profiles_path == tmp_path / "p.toml"
        assert client.config.primary_algorithm == "levenshtein"
        assert client.config.git_executable == "/opt/git"

    def test_invalid_config_is_rejected(self):
        with pytest.raises(ConfigError):
            GitSetup(config=GitSetupConfig(matching=MatchConfig(min_score=3.0)))

    def test_default_store_reads_configured_file(self, tmp_path):
        path = tmp_path / "profiles.toml"
        path.write_text('[[profiles]]\nname = "solo"\ngit_user_email = "s@x.dev"\n', encoding="utf-8")
        client = GitSetup(
            config=GitSetupConfig(profiles_path=path),
            git=FakeGit(),
            platform=FakePlatform(home=tmp_path),
        )
        assert isinstance(client.store, FileProfileStore)
        assert [p.name for p in client.profiles()] == ["solo"]

    def test_default_store_falls_back_to_config_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        client = GitSetup(config=GitSetupConfig(), git=FakeGit(), platform=FakePlatform(home=tmp_path))
        assert client.store.path == tmp_path / "xdg" / "git" / "setup" / "config.toml"
        assert client.profiles() == []

    def test_engines_are_reused(self, client):
        assert client.detector is client.detector
        assert client.matcher is client.matcher

    def test_matcher_uses_configured_algorithms(self, profiles, tmp_path):
        client = GitSetup(
            config=GitSetupConfig(primary_algorithm="levenshtein", fallback_algorithms=()),
            store=InMemoryProfileStore(profiles),
            git=FakeGit(),
            platform=FakePlatform(home=tmp_path),
        )
        assert client.matcher.primary_algorithm.name == "levenshtein"
        assert client.matcher.fallback_algorithms == ()


# =============================================================================
# Detection
# =============================================================================


class TestDetection:
    """detect / detect_all / context through the client."""

    def test_detect_path(self, client, tmp_path):
        result = client.detect(tmp_path / "work" / "api")
        assert result.profile.name == "work"

    def test_detect_nothing(self, client, tmp_path):
        assert client.detect(tmp_path / "misc") is None
        assert client.detect_all(tmp_path / "misc") == []

    def test_detect_defaults_to_cwd(self, client, tmp_path, monkeypatch):
        workdir = tmp_path / "work" / "cli"
        workdir.mkdir(parents=True)
        monkeypatch.chdir(workdir)
        assert client.detect().profile.name == "work"

    def test_context(self, client, tmp_path):
        context = client.context(tmp_path / "a" / "b")
        assert context.working_dir == tmp_path / "a" / "b"
        assert context.hostname == "dev-box"
        assert context.parent_dirs == (tmp_path / "a" / "b", tmp_path / "a")

    def test_store_errors_propagate(self, tmp_path):
        broken = tmp_path / "broken.toml"
        broken.write_text("not = [valid", encoding="utf-8")
        client = GitSetup(
            config=GitSetupConfig(profiles_path=broken),
            git=FakeGit(),
            platform=FakePlatform(home=tmp_path),
        )
        with pytest.raises(ProfileStoreError):
            client.detect(tmp_path)


# =============================================================================
# Matching
# =============================================================================


class TestMatching:
    """find_profiles / best_profile through the client."""

    def test_best_profile(self, client):
        assert client.best_profile("personal").profile.name == "personal"
        assert client.best_profile("xyzzyx") is None

    def test_find_profiles_ranked(self, client):
        results = client.find_profiles("o")
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)


# =============================================================================
# Async variants
# =============================================================================


class TestAsyncApi:
    """Async methods mirror the sync ones."""

    @pytest.mark.asyncio
    async def test_adetect_matches_detect(self, client, tmp_path):
        path = tmp_path / "work" / "api"
        sync_result = client.detect(path)
        async_result = await client.adetect(path)
        assert async_result.profile == sync_result.profile
        assert async_result.confidence == sync_result.confidence

    @pytest.mark.asyncio
    async def test_adetect_all(self, client, tmp_path):
        results = await client.adetect_all(tmp_path / "work" / "api")
        assert [r.profile.name for r in results] == ["work"]

    @pytest.mark.asyncio
    async def test_afind_profiles_and_abest_profile(self, client):
        matches = await client.afind_profiles("work")
        assert matches[0].profile.name == "work"
        best = await client.abest_profile("wrk")
        assert best.profile.name == "work"

    @pytest.mark.asyncio
    async def test_async_errors_propagate(self, tmp_path):
        broken = tmp_path / "broken.yaml"
        broken.write_text("profiles: [", encoding="utf-8")
        client = GitSetup(
            config=GitSetupConfig(profiles_path=broken),
            git=FakeGit(),
            platform=FakePlatform(home=tmp_path),
        )
        with pytest.raises(ProfileStoreError):
            await client.afind_profiles("x")


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """Status dicts from the client and the package."""

    def test_client_health(self, client):
        status = client.health()
        assert status["version"]
        assert status["primary_algorithm"] == "fuzzy"
        assert status["cache_enabled"] is False
        assert status["profiles_path"] is None

    def test_package_health(self):
        status = health(GitSetupConfig(profiles_path=Path("/tmp/p.toml")))
        assert status["profiles_path"] == str(Path("/tmp/p.toml"))
        assert status["min_confidence"] == 0.6
