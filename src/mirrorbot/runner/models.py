"""Data models for the Command Runner."""

from dataclasses import dataclass

# Conventional shell exit status for "command not found".
NOT_FOUND_RETURNCODE = 127
TIMEOUT_RETURNCODE = 124  # same as coreutils timeout(1)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command.

    Attributes:
        args: The command line that was run.
        returncode: Exit status. Negative values are the number of the signal
            that killed the command.
        output: Combined stdout and stderr.
    """

    args: tuple[str, ...]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0
