"""
git-setup Repository Context

Gathers the signals the detection rules score against (repository root,
remotes, current git identity, hostname, parent directories) into an
immutable :class:`RepositoryContext`.

Missing signals are never errors: an unreadable git config yields no
remotes and no identity, and a failed hostname lookup yields ``"unknown"``.
Only filesystem / home-directory failures raise :class:`ContextError`.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from git_setup.core.git import GitConfigReader, GitConfigScope, SystemGit
from git_setup.core.models import RemoteInfo, RepositoryContext
from git_setup.core.platform import PlatformPaths, SystemPlatform
from git_setup.exceptions import ContextError, GitError

logger = logging.getLogger(__name__)


class ContextExtractor:
    """
    Builds :class:`RepositoryContext` snapshots.

    Args:
        git: Git config reader.  Defaults to :class:`SystemGit`.
        platform: Home-directory / hostname provider.  Defaults to
            :class:`SystemPlatform`.
    """

    def __init__(
        self,
        git: GitConfigReader | None = None,
        platform: PlatformPaths | None = None,
    ):
        self.git = git or SystemGit()
        self.platform = platform or SystemPlatform()

    def extract(self) -> RepositoryContext:
        """Context for the process's current working directory."""
        try:
            cwd = Path.cwd()
        except OSError as exc:
            raise ContextError(f"Cannot determine current directory: {exc}") from exc
        return self.extract_in(cwd)

    def extract_in(self, path: str | Path) -> RepositoryContext:
        """Context for *path* (which need not exist)."""
        working_dir = Path(path).absolute()
        repo_root = self.find_repo_root(working_dir)

        remotes: Tuple[RemoteInfo, ...] = ()
        current_email: Optional[str] = None
        current_name: Optional[str] = None
        if repo_root is not None:
            remotes = tuple(self.get_remotes(repo_root))
            current_email = self._read_config("user.email", repo_root)
            current_name = self._read_config("user.name", repo_root)

        context = RepositoryContext(
            working_dir=working_dir,
            repo_root=repo_root,
            remotes=remotes,
            current_email=current_email,
            current_name=current_name,
            hostname=self._hostname(),
            parent_dirs=tuple(self.build_parent_dirs(working_dir)),
        )
        logger.debug(
            f"Context for {working_dir}: repo_root={repo_root}, "
            f"{len(remotes)} remote(s), hostname={context.hostname}"
        )
        return context

    # ── Signals ───────────────────────────────────────────────────

    def find_repo_root(self, start: Path) -> Optional[Path]:
        """Nearest directory at or above *start* that contains ``.git``."""
        current = start
        while True:
            try:
                if (current / ".git").exists():
                    return current
            except OSError as exc:
                raise ContextError(f"Cannot inspect {current}: {exc}") from exc

            parent = current.parent
            if parent == current:
                return None
            current = parent

    def get_remotes(self, repo_root: Path | None = None) -> List[RemoteInfo]:
        """Remotes from the local git config, sorted by remote name."""
        try:
            config = self.git.get_all_config(GitConfigScope.LOCAL, cwd=repo_root)
        except GitError as exc:
            logger.debug(f"No remotes: {exc}")
            return []
        return parse_remotes(config)

    def build_parent_dirs(self, start: Path) -> List[Path]:
        """*start* and its ancestors, nearest first, stopping before home or root."""
        try:
            home = self.platform.home_dir()
        except OSError as exc:
            raise ContextError(str(exc)) from exc

        dirs: List[Path] = []
        current = start
        while current != home and current.parent != current:
            dirs.append(current)
            current = current.parent
        return dirs

    def _read_config(self, key: str, repo_root: Path) -> Optional[str]:
        try:
            return self.git.get_config(key, GitConfigScope.LOCAL, cwd=repo_root)
        except GitError as exc:
            logger.debug(f"Could not read {key}: {exc}")
            return None

    def _hostname(self) -> str:
        try:
            return self.platform.hostname() or "unknown"
        except OSError as exc:
            logger.debug(f"Hostname lookup failed: {exc}")
            return "unknown"


def parse_remotes(config: Dict[str, str]) -> List[RemoteInfo]:
    """Group ``remote.<name>.url`` / ``remote.<name>.pushurl`` keys by remote."""
    remotes: List[RemoteInfo] = []
    for key, url in config.items():
        if not (key.startswith("remote.") and key.endswith(".url")):
            continue
        name = key[len("remote."):-len(".url")]
        if not name:
            continue
        remotes.append(RemoteInfo(
            name=name,
            url=url,
            push_url=config.get(f"remote.{name}.pushurl"),
        ))
    remotes.sort(key=lambda r: r.name)
    return remotes
