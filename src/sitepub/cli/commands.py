"""CLI command implementations"""

import logging
import sys
from typing import Annotated, Optional

import typer

from sitepub.config import Settings, load_config
from sitepub.core.content import check_tree
from sitepub.core.errors import BuildError, CleanError, LockError
from sitepub.core.lock import publish_lock
from sitepub.core.models import CycleReport, StepStatus
from sitepub.core.publisher import Publisher


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def configure_logging(level: str) -> None:
    """Send package logs to stderr at level, replacing handlers from any earlier call."""
    logger = logging.getLogger("sitepub")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)


def _echo_report(report: CycleReport) -> None:
    """Print per-step status, forward diagnostics to stderr, and summarize pushes."""
    for step in report.steps:
        line = f"  {step.step}: {step.status.value}"
        if step.detail and step.status != StepStatus.failed:
            line += f" ({step.detail})"
        typer.echo(line)

    failed = report.failed_step
    if failed is not None:
        if isinstance(failed.error, BuildError) and failed.error.diagnostics:
            typer.echo(failed.error.diagnostics.rstrip(), err=True)
        typer.echo(f"Error: {failed.step} failed: {failed.detail}", err=True)
        return

    if report.no_changes:
        typer.echo("Nothing to publish: no changes since the last revision.")
        return

    for p in report.pushes:
        if p.ok:
            typer.echo(f"  pushed: {p.remote}")
        else:
            typer.echo(f"  rejected: {p.remote}", err=True)
            if p.error.diagnostics:
                typer.echo(p.error.diagnostics.rstrip(), err=True)
    if report.rejected:
        typer.echo(
            f"Publish partially failed - {len(report.rejected)} of {len(report.pushes)} remote(s) rejected",
            err=True,
        )
    elif report.revision is not None:
        typer.echo(f"Published revision {report.revision.sha[:12]}: {report.revision.message}")


def publish_cmd(
    message: Annotated[Optional[str], typer.Option("--message", "-m", help="Commit message (default: RELEASE <timestamp>)")] = None,
    remote: Annotated[Optional[list[str]], typer.Option("--remote", "-r", help="Push target 'remote/branch' or 'prefix:remote/branch'; repeatable")] = None,
    push: Annotated[Optional[bool], typer.Option("--push/--no-push", help="Push after committing")] = None,
    out: Annotated[Optional[str], typer.Option("--output-dir", help="Generated site directory")] = None,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Source document directory")] = None,
    generator: Annotated[Optional[str], typer.Option("--generator", help="Generator command line")] = None,
    ):
    """Run the full cycle: clean -> build -> snapshot -> publish."""
    settings = _settings(overrides={
        "output_dir": out, "content_dir": content, "generator_cmd": generator,
        "remotes": remote or None, "push": push,
    })
    try:
        with publish_lock(settings.lock_path):
            report = Publisher(settings).run_cycle(message=message)
    except LockError as e:
        _fail(str(e))

    _echo_report(report)
    if report.exit_code:
        raise typer.Exit(report.exit_code)


def clean_cmd(
    out: Annotated[Optional[str], typer.Option("--output-dir", help="Generated site directory")] = None,
    ):
    """Remove everything inside the output directory."""
    settings = _settings(overrides={"output_dir": out})
    try:
        with publish_lock(settings.lock_path):
            removed = Publisher(settings).clean()
    except (LockError, CleanError) as e:
        _fail(str(e))
    typer.echo(f"Cleaned {removed} entr{'y' if removed == 1 else 'ies'} from {settings.output_path}/")


def build_cmd(
    out: Annotated[Optional[str], typer.Option("--output-dir", help="Generated site directory")] = None,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Source document directory")] = None,
    generator: Annotated[Optional[str], typer.Option("--generator", help="Generator command line")] = None,
    ):
    """Clean and rebuild the site without committing."""
    settings = _settings(overrides={"output_dir": out, "content_dir": content, "generator_cmd": generator})
    publisher = Publisher(settings)
    try:
        with publish_lock(settings.lock_path):
            publisher.clean()
            digest = publisher.build()
    except BuildError as e:
        if e.diagnostics:
            typer.echo(e.diagnostics.rstrip(), err=True)
        _fail("Build failed", e)
    except (LockError, CleanError) as e:
        _fail(str(e))
    typer.echo(f"Built {settings.output_path}/ (digest {digest[:12]})")


def check_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Source document directory")] = None,
    ):
    """Check document front matter and bodies before building.

    Only title is required by default. Set required_metadata (for example
    title,date,tags) to require more keys.
    """
    settings = _settings(overrides={"content_dir": content})
    problems = check_tree(settings.content_path, settings.required_metadata)
    for path, problem in problems:
        typer.echo(f"  {path}: {problem}")
    if problems:
        typer.echo(f"{len(problems)} problem(s) found in {settings.content_path}/", err=True)
        raise typer.Exit(1)
    typer.echo(f"No problems found in {settings.content_path}/")
