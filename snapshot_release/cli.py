"""CLI entry point for snapshot-release."""

from __future__ import annotations

import os
import subprocess
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from .build import BuildProvider
from .config import PACKAGE_MANAGERS, ReleaseConfig, load_build_dir, load_config
from .errors import NotAGitRepository, ReleaseError
from .git import Git
from .pipeline import clean, run_release, start_hotfix, verify_release
from .project import Project
from .publish import NodePublisher

package_manager_option = click.option(
    "--package-manager",
    type=click.Choice(PACKAGE_MANAGERS),
    default=None,
    help="Package manager to use (default: SNAPSHOT_RELEASE_PACKAGE_MANAGER).",
)


@contextmanager
def _errors(ctx: click.Context) -> Iterator[None]:
    """Render workflow failures as a one-line error and exit status 1."""
    try:
        yield
    except (ReleaseError, subprocess.CalledProcessError, OSError) as exc:
        if ctx.obj["verbose"]:
            click.echo(traceback.format_exc(), err=True)
        message = str(exc)
        if isinstance(exc, subprocess.CalledProcessError) and exc.stderr:
            message += f"\n{exc.stderr.strip()}"
        raise click.ClickException(message) from exc


def _project(root: Path, build_dir: str = "build") -> tuple[Project, Git]:
    """Load the project at root, which must be inside a git checkout."""
    git = Git(root)
    if not git.is_git_repository():
        raise NotAGitRepository(root)
    return Project.for_cwd(git, root, build_dir=build_dir), git


def _load(
    ctx: click.Context, package_manager: str | None
) -> tuple[Project, Git, ReleaseConfig]:
    root: Path = ctx.obj["root"]
    config = load_config(root, os.environ, package_manager=package_manager)
    project, git = _project(root, config.build_dir)
    return project, git, config


@click.group()
@click.version_option(package_name="snapshot-release")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Show detailed error messages with stack traces.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Snapshot/release version management for package.json projects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj.setdefault("root", Path.cwd())


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Print the current version."""
    with _errors(ctx):
        project, _ = _project(ctx.obj["root"])
        click.echo(project.version)


@cli.command("release-version")
@click.pass_context
def release_version(ctx: click.Context) -> None:
    """Print the version the next release will have."""
    with _errors(ctx):
        project, _ = _project(ctx.obj["root"])
        click.echo(project.next_release_version())


@cli.command("verify-release")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def verify_release_cmd(ctx: click.Context, as_json: bool) -> None:
    """Check whether the project can be released; exit 1 if not."""
    with _errors(ctx):
        project, _ = _project(ctx.obj["root"])
        report = verify_release(project)
        if as_json:
            click.echo(report.to_json())
        elif not report.is_releasable():
            click.echo(str(report))
        if not report.is_releasable():
            ctx.exit(1)


@cli.command("start-hotfix")
@click.argument("tag")
@package_manager_option
@click.pass_context
def start_hotfix_cmd(ctx: click.Context, tag: str, package_manager: str | None) -> None:
    """Start a hotfix branch for release line TAG (e.g. 2.1)."""
    with _errors(ctx):
        project, git, config = _load(ctx, package_manager)
        start_hotfix(project, git, BuildProvider(project, config), tag)


@cli.command()
@package_manager_option
@click.pass_context
def release(ctx: click.Context, package_manager: str | None) -> None:
    """Release the current snapshot version (usually called from CI)."""
    with _errors(ctx):
        project, git, config = _load(ctx, package_manager)
        run_release(
            project,
            git,
            BuildProvider(project, config),
            NodePublisher(project, config),
        )


@cli.command()
@package_manager_option
@click.pass_context
def publish(ctx: click.Context, package_manager: str | None) -> None:
    """Publish the current version without releasing it."""
    with _errors(ctx):
        project, _, config = _load(ctx, package_manager)
        NodePublisher(project, config).publish()


@cli.command("clean")
@click.pass_context
def clean_cmd(ctx: click.Context) -> None:
    """Delete the build directory."""
    with _errors(ctx):
        root = ctx.obj["root"]
        project, _ = _project(root, load_build_dir(root))
        clean(project)
