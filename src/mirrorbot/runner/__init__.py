"""Command Runner - Executes external commands and reports their exit status."""

from mirrorbot.runner.models import CommandResult
from mirrorbot.runner.runner import CommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
]
