"""CLI commands for protovend."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

import click
from rich.console import Console
from rich.logging import RichHandler

from protovend import __version__
from protovend.config import ProtovendSettings
from protovend.errors import InvalidUrlError, ProtovendError
from protovend.models.git_url import GitUrl
from protovend.project import DEFAULT_BRANCH, Protovend

console = Console()
logger = logging.getLogger("protovend")


class GitUrlType(click.ParamType):
    """Click parameter accepting git remote urls."""

    name = "git_url"

    def convert(
        self, value: str, param: click.Parameter | None, ctx: click.Context | None
    ) -> GitUrl:
        if isinstance(value, GitUrl):
            return value
        try:
            return GitUrl.parse(value)
        except InvalidUrlError as e:
            self.fail(str(e), param, ctx)


GIT_URL = GitUrlType()


def setup_logging(level: int) -> None:
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)


def run(ctx: click.Context, command: Callable[..., object], *args: object) -> None:
    """Run a Protovend method, turning any reported failure into exit code 1."""
    project: Protovend = ctx.obj["project"]
    try:
        command(project, *args)
    except (ProtovendError, OSError) as e:
        logger.error(f"Exiting early: {e}")
        sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Print debug logs.")
@click.option("--warning", is_flag=True, help="Print only warnings and errors.")
@click.option("--project-dir", default=None, help="Project directory (default: cwd)")
@click.option("--cache-dir", default=None, help="Repository cache directory")
@click.version_option(__version__, prog_name="protovend")
@click.pass_context
def main(
    ctx: click.Context,
    debug: bool,
    warning: bool,
    project_dir: str | None,
    cache_dir: str | None,
) -> None:
    """protovend - vendor .proto files from git repositories."""
    if debug and warning:
        raise click.UsageError("--debug and --warning cannot be used together")
    if debug:
        setup_logging(logging.DEBUG)
    elif warning:
        setup_logging(logging.WARNING)
    else:
        setup_logging(logging.INFO)
    ctx.ensure_object(dict)
    settings = ProtovendSettings.from_env(project_dir=project_dir, cache_dir=cache_dir)
    ctx.obj.setdefault("project", Protovend(settings))


@main.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialise the current directory with protovend metadata files."""
    run(ctx, Protovend.init)


@main.command()
@click.argument("url", type=GIT_URL)
@click.option("--branch", "-b", default=DEFAULT_BRANCH, show_default=True, help="Branch to track")
@click.pass_context
def add(ctx: click.Context, url: GitUrl, branch: str) -> None:
    """Add a git repository to the project's metadata file."""
    run(ctx, Protovend.add, url, branch)


@main.command()
@click.argument("url", type=GIT_URL, required=False)
@click.pass_context
def update(ctx: click.Context, url: GitUrl | None) -> None:
    """Update one or all repositories to their latest commit and reinstall."""
    run(ctx, Protovend.update, url)


@main.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Install the proto files pinned in the lock file."""
    run(ctx, Protovend.install)


@main.command()
@click.pass_context
def cleanup(ctx: click.Context) -> None:
    """Delete all locally cached repositories."""
    run(ctx, Protovend.cleanup)


@main.command()
@click.pass_context
def lint(ctx: click.Context) -> None:
    """Check that this repository's proto layout is valid for protovend."""
    run(ctx, Protovend.lint)


if __name__ == "__main__":
    main()
