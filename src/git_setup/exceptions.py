"""
git-setup Exception Hierarchy

Structured exceptions for the profile resolution engine.  Each exception
type maps to a specific failure mode so that callers can tell "the engine
failed" apart from "the engine ran but found nothing" (which is reported as
``None`` or an empty list, never as an exception).

Usage::

    from git_setup.exceptions import GitSetupError, ProfileStoreError

    try:
        result = client.detect()
    except ProfileStoreError:
        print("Profile file could not be read.")
    except GitSetupError as exc:
        print(f"git-setup error: {exc}")
"""


class GitSetupError(Exception):
    """Base exception for all git-setup errors."""


class ConfigError(GitSetupError, ValueError):
    """Configuration is invalid (e.g. a threshold outside ``[0, 1]``).

    Inherits from ``ValueError`` so that callers validating user input can
    catch it alongside ordinary value errors.
    """


class ProfileStoreError(GitSetupError):
    """The profile store could not be read or holds invalid profiles."""


class ProfileNotFoundError(ProfileStoreError, KeyError):
    """A profile requested by name does not exist in the store."""

    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' not found")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise wrap the message in quotes
        return self.args[0]


class ContextError(GitSetupError):
    """Filesystem or platform failure while building a repository context."""


class GitError(GitSetupError):
    """The git executable failed or is unavailable.

    The context builder treats this as "no data"; it only reaches callers
    that use :class:`~git_setup.core.git.SystemGit` directly.
    """
