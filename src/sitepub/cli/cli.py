"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from sitepub.cli.commands import (
    _settings,
    build_cmd,
    check_cmd,
    clean_cmd,
    configure_logging,
    publish_cmd,
)


app = typer.Typer(name="sitepub", add_completion=False, help="Static site build and publish pipeline")

app.command(name="publish")(publish_cmd)
app.command(name="clean")(clean_cmd)
app.command(name="build")(build_cmd)
app.command(name="check")(check_cmd)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    """Configure logging; with no command, run publish."""
    configure_logging("DEBUG" if verbose else _settings().log_level)
    if ctx.invoked_subcommand is None:
        publish_cmd()
