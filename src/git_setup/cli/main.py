"""
git-setup CLI

Command-line interface for profile detection and lookup.

Usage::

    git-setup detect                 # Best profile for the current directory
    git-setup detect ~/work/api --all
    git-setup match wrk --best       # Profile the user most likely meant
    git-setup profiles               # List configured profiles
"""

import logging
from pathlib import Path

import click

from git_setup.client import GitSetup
from git_setup.core.config import GitSetupConfig
from git_setup.core.formatting import ResultFormatter
from git_setup.exceptions import GitSetupError

# --field choices mapped to MatchConfig switches
FIELD_SWITCHES = {
    "name": "match_name",
    "email": "match_email",
    "user-name": "match_user_name",
    "vault": "match_vault_name",
    "ssh-key": "match_ssh_key_title",
}


# ---------------------------------------------------------------------------
# Logging helpers
# ---------------------------------------------------------------------------

def _configure_logging(config: GitSetupConfig, verbose: bool) -> None:
    """Set up logging for the CLI session."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(level=level, format=config.log_format)


def _fail(exc: GitSetupError) -> None:
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(2)


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="git-setup")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Profile file (default: $GIT_SETUP_CONFIG or ~/.config/git/setup/config.toml).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool):
    """git-setup: pick the right git identity for where you are."""
    try:
        config = GitSetupConfig.from_env()
    except GitSetupError as exc:
        _fail(exc)
    if config_path is not None:
        config.profiles_path = config_path
    _configure_logging(config, verbose)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _client(ctx: click.Context) -> GitSetup:
    try:
        return GitSetup(config=ctx.obj["config"])
    except GitSetupError as exc:
        _fail(exc)


# ---------------------------------------------------------------------------
# git-setup detect
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("path", default=".", type=click.Path(file_okay=False, path_type=Path))
@click.option("--all", "show_all", is_flag=True, help="Show every profile above the threshold.")
@click.option("-f", "--format", "fmt",
              type=click.Choice(["console", "json"]),
              default="console", help="Output format.")
@click.pass_context
def detect(ctx: click.Context, path: Path, show_all: bool, fmt: str):
    """Detect the profile that fits PATH (default: current directory).

    Exits with status 1 when no profile is detected.
    """
    client = _client(ctx)
    try:
        if show_all:
            results = client.detect_all(path)
        else:
            best = client.detect(path)
            results = [best] if best is not None else []
    except GitSetupError as exc:
        _fail(exc)

    if fmt == "json":
        click.echo(ResultFormatter.format_json(results))
    else:
        click.echo(ResultFormatter.format_detection_console(results))

    if not results:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# git-setup match
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("query")
@click.option("--best", is_flag=True,
              help="Only show the top match, and only if it clears the best-match threshold.")
@click.option("-n", "--max-results", type=click.IntRange(min=1), default=None,
              help="Maximum number of results.")
@click.option("--field", "fields", multiple=True,
              type=click.Choice(list(FIELD_SWITCHES)),
              help="Profile field to match against (repeatable, default: name).")
@click.option("-f", "--format", "fmt",
              type=click.Choice(["console", "json"]),
              default="console", help="Output format.")
@click.pass_context
def match(ctx: click.Context, query: str, best: bool, max_results: int | None,
          fields: tuple, fmt: str):
    """Rank profiles against QUERY.

    Exits with status 1 when nothing matches.
    """
    config: GitSetupConfig = ctx.obj["config"]
    if max_results is not None:
        config.matching.max_results = max_results
    if fields:
        for option, switch in FIELD_SWITCHES.items():
            setattr(config.matching, switch, option in fields)

    client = _client(ctx)
    try:
        if best:
            top = client.best_profile(query)
            results = [top] if top is not None else []
        else:
            results = client.find_profiles(query)
    except GitSetupError as exc:
        _fail(exc)

    if fmt == "json":
        click.echo(ResultFormatter.format_json(results))
    else:
        click.echo(ResultFormatter.format_matches_console(results))

    if not results:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# git-setup profiles
# ---------------------------------------------------------------------------

@cli.command()
@click.option("-f", "--format", "fmt",
              type=click.Choice(["console", "json"]),
              default="console", help="Output format.")
@click.pass_context
def profiles(ctx: click.Context, fmt: str):
    """List configured profiles."""
    client = _client(ctx)
    try:
        items = client.profiles()
    except GitSetupError as exc:
        _fail(exc)

    if fmt == "json":
        click.echo(ResultFormatter.format_json(items))
    else:
        click.echo(ResultFormatter.format_profiles_console(items))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
