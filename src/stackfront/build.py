"""Run the frontend build command."""

import logging
import subprocess

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """The build command exited non-zero or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, message: str | None = None):
        self.command = command
        self.returncode = returncode
        super().__init__(
            message or f"Build command {' '.join(command)!r} exited with code {returncode}"
        )


def run_build(command: list[str], cwd: str) -> None:
    """Run command in cwd, logging each output line as it arrives."""
    if not command:
        raise BuildError(command, None, "Build command is empty")

    logger.info("Running %s in %s", " ".join(command), cwd)
    try:
        proc = subprocess.Popen(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise BuildError(command, None, f"Could not start build command {command[0]!r}: {e}") from e

    with proc:
        for line in proc.stdout:
            logger.info(line.rstrip())

    if proc.returncode != 0:
        raise BuildError(command, proc.returncode)
