"""
git-setup Git Config Reader

Read-only access to ``git config``.  The resolution engine only reads
configuration; nothing here writes to it.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from git_setup.exceptions import GitError

logger = logging.getLogger(__name__)


class GitConfigScope(Enum):
    """Which git configuration file to read."""
    LOCAL = "local"
    GLOBAL = "global"
    SYSTEM = "system"

    def to_git_arg(self) -> str:
        return f"--{self.value}"


class GitConfigReader(ABC):
    """Source of git configuration values.

    Both methods may raise :class:`~git_setup.exceptions.GitError`; callers
    in the resolution engine treat that as "no data".
    """

    @abstractmethod
    def get_config(
        self,
        key: str,
        scope: GitConfigScope | None = None,
        cwd: Path | None = None,
    ) -> Optional[str]:
        """Value of *key*, or ``None`` when it is unset."""

    @abstractmethod
    def get_all_config(
        self,
        scope: GitConfigScope | None = None,
        cwd: Path | None = None,
    ) -> Dict[str, str]:
        """Flat ``key -> value`` dump of the configuration."""


class SystemGit(GitConfigReader):
    """
    :class:`GitConfigReader` backed by the ``git`` executable.

    Args:
        executable: Name or path of the git binary.
        timeout: Seconds before a git call is abandoned (raises ``GitError``).
    """

    def __init__(self, executable: str = "git", timeout: float = 5.0):
        self.executable = executable
        self.timeout = timeout

    def get_config(
        self,
        key: str,
        scope: GitConfigScope | None = None,
        cwd: Path | None = None,
    ) -> Optional[str]:
        args = ["config"]
        if scope is not None:
            args.append(scope.to_git_arg())
        args += ["--get", key]

        result = self._run(args, cwd)
        if result.returncode == 0:
            value = result.stdout.strip()
            return value or None
        # Exit code 1 means "key not set"
        if result.returncode == 1 or not result.stderr.strip():
            return None
        raise GitError(f"Failed to get config '{key}': {result.stderr.strip()}")

    def get_all_config(
        self,
        scope: GitConfigScope | None = None,
        cwd: Path | None = None,
    ) -> Dict[str, str]:
        args = ["config", "--list"]
        if scope is not None:
            args.append(scope.to_git_arg())

        result = self._run(args, cwd)
        if result.returncode != 0:
            raise GitError(f"Failed to list git config: {result.stderr.strip()}")
        return parse_config_list(result.stdout)

    def is_git_available(self) -> bool:
        try:
            return self._run(["--version"], None).returncode == 0
        except GitError:
            return False

    def _run(self, args: List[str], cwd: Path | None) -> subprocess.CompletedProcess:
        command = [self.executable, *args]
        logger.debug(f"Running {' '.join(command)} (cwd={cwd})")
        try:
            return subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise GitError(f"git executable '{self.executable}' not found") from None
        except subprocess.TimeoutExpired:
            raise GitError(
                f"'{' '.join(command)}' timed out after {self.timeout}s"
            ) from None
        except OSError as exc:
            raise GitError(f"'{' '.join(command)}' failed: {exc}") from exc


def parse_config_list(output: str) -> Dict[str, str]:
    """Parse ``git config --list`` output (``key=value`` per line).

    Lines without ``=`` (boolean shorthand keys) are skipped; later entries
    for the same key win.
    """
    config: Dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            config[key] = value
    return config
