"""
git-setup Platform Provider

Home directory, hostname and config-directory lookups, behind a small
interface so the context builder can be tested with fixed values.
"""

import os
import socket
import sys
from abc import ABC, abstractmethod
from pathlib import Path


class PlatformPaths(ABC):
    """Host-level facts used when building a repository context."""

    @abstractmethod
    def home_dir(self) -> Path:
        """The user's home directory.  Raises ``OSError`` if undeterminable."""

    @abstractmethod
    def hostname(self) -> str:
        """The machine's hostname.  Raises ``OSError`` on lookup failure."""

    def config_dir(self) -> Path:
        """Directory holding git-setup's own configuration."""
        if sys.platform == "win32":
            appdata = os.getenv("APPDATA")
            base = Path(appdata) if appdata else self.home_dir() / "AppData" / "Roaming"
            return base / "git-setup"
        xdg = os.getenv("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else self.home_dir() / ".config"
        return base / "git" / "setup"

    def expand_path(self, path: str) -> str:
        """Replace a leading ``~`` with the home directory."""
        if path == "~" or path.startswith("~/") or path.startswith("~\\"):
            return str(self.home_dir()) + path[1:]
        return path


class SystemPlatform(PlatformPaths):
    """The real machine."""

    def home_dir(self) -> Path:
        try:
            return Path.home()
        except RuntimeError as exc:
            raise OSError(f"Home directory could not be determined: {exc}") from exc

    def hostname(self) -> str:
        return socket.gethostname()

    def __repr__(self) -> str:
        return "SystemPlatform()"
