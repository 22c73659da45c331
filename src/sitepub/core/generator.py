"""External site-generator invocation"""

import logging
import shlex
import subprocess
from pathlib import Path

from sitepub.core.errors import BuildError


logger = logging.getLogger(__name__)


def generator_argv(cmd: str, content_dir: Path, output_dir: Path) -> list[str]:
    """Split the configured command line and substitute {content} and {output} per argument."""
    try:
        parts = shlex.split(cmd)
    except ValueError as e:
        raise BuildError(f"Invalid generator command {cmd!r}: {e}") from e
    if not parts:
        raise BuildError("Generator command is empty")
    return [
        a.replace("{content}", str(content_dir)).replace("{output}", str(output_dir))
        for a in parts
    ]


def run_generator(argv: list[str], cwd: Path) -> str:
    """Run the generator in cwd and return its output. Raises BuildError on any failure."""
    logger.info("Running generator: %s", shlex.join(argv))
    try:
        proc = subprocess.run(
            argv, cwd=str(cwd), capture_output=True, text=True, check=False,
        )
    except FileNotFoundError as e:
        raise BuildError(f"Generator not found: {argv[0]}", diagnostics=str(e)) from e
    except OSError as e:
        raise BuildError(f"Generator could not start: {argv[0]}", diagnostics=str(e)) from e

    output = proc.stdout + proc.stderr
    if proc.returncode != 0:
        raise BuildError(
            f"Generator exited with status {proc.returncode}",
            diagnostics=output,
            returncode=proc.returncode,
        )
    logger.debug("Generator output:\n%s", output)
    return output
