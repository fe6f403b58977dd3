"""CommandRunner - Runs git and the backport script as opaque commands."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from collections.abc import Mapping
from pathlib import Path

from mirrorbot.logging import format_command, sanitize_for_log, truncate_output
from mirrorbot.runner.models import NOT_FOUND_RETURNCODE, TIMEOUT_RETURNCODE, CommandResult

logger = logging.getLogger("mirrorbot.runner")


class CommandRunner:
    """Executes external commands and reports success or failure.

    A failing command never raises: the caller inspects ``CommandResult.ok``.
    The number of commands running at the same time, across all event tasks,
    is bounded by ``max_concurrent``. There are no retries.
    """

    def __init__(
        self,
        max_concurrent: int = 2,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the Command Runner.

        Args:
            max_concurrent: Maximum number of commands running at once.
            timeout: Seconds before a command is killed (None = no limit).
            env: Extra environment variables for every command.
        """
        self.max_concurrent = max_concurrent
        self.timeout = timeout
        self.env = dict(env or {})
        self._slots = threading.BoundedSemaphore(max_concurrent)

    def run(self, *args: str, cwd: str | Path | None = None) -> CommandResult:
        """Run a command and wait for it to finish.

        Args:
            *args: Command and arguments.
            cwd: Working directory for the command.

        Returns:
            CommandResult with exit status and combined output.
        """
        command = format_command(args)
        env = {**os.environ, **self.env} if self.env else None

        with self._slots:
            logger.debug("Running: %s (cwd=%s)", command, cwd)
            try:
                completed = subprocess.run(
                    list(args),
                    cwd=cwd,
                    env=env,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except FileNotFoundError as e:
                logger.error("Command \"%s\" could not be started: %s", command, e)
                return CommandResult(args=args, returncode=NOT_FOUND_RETURNCODE, output=str(e))
            except subprocess.TimeoutExpired as e:
                logger.error("Command \"%s\" timed out after %ss", command, self.timeout)
                output = e.output if isinstance(e.output, str) else ""
                return CommandResult(args=args, returncode=TIMEOUT_RETURNCODE, output=output)

        result = CommandResult(
            args=args,
            returncode=completed.returncode,
            output=completed.stdout or "",
        )
        if result.returncode < 0:
            logger.warning("Command \"%s\" was killed by signal %d", command, -result.returncode)
        else:
            logger.info("Command \"%s\" exited with status %d", command, result.returncode)
        if not result.ok and result.output:
            logger.debug("Output:\n%s", sanitize_for_log(truncate_output(result.output)))
        return result
