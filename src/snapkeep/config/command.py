"""
External commands that can be configured as hooks.

A command is given either as a single shell-syntax string::

    run-before = "notify-send 'backup starting'"

or in structured form, as a list or as a command/args table::

    run-before = ["notify-send", "backup starting"]
    run-after = { command = "notify-send", args = ["backup done"] }

All forms validate to the same ``CommandInput``.
"""
import logging
import shlex
import subprocess
from typing import Any, List

from pydantic import ConfigDict, Field, RootModel, model_validator

from .exceptions import CommandParseError

logger = logging.getLogger(__name__)


def split_command(command: str) -> List[str]:
    """
    Split a command string into words using POSIX shell rules.

    Raises:
        CommandParseError: If quoting or escaping is malformed
    """
    try:
        return shlex.split(command)
    except ValueError as e:
        raise CommandParseError(command, str(e)) from e


class CommandInput(RootModel[List[str]]):
    """
    A command to call, as the executable followed by its arguments.

    An empty command is "not set": running it does nothing.
    """

    model_config = ConfigDict(frozen=True)

    root: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        # Structured forms first, shell syntax as fallback
        if isinstance(value, dict) and "command" in value:
            unknown = set(value) - {"command", "args"}
            if unknown:
                raise ValueError(f"unknown command key(s): {', '.join(sorted(unknown))}")
            args = value.get("args", [])
            if not isinstance(args, list):
                raise ValueError("command args must be a list of strings")
            return [value["command"], *args]
        if isinstance(value, str):
            return split_command(value)
        return value

    @classmethod
    def from_str(cls, command: str) -> "CommandInput":
        """Parse a command from shell syntax."""
        return cls(split_command(command))

    def is_set(self) -> bool:
        return bool(self.root)

    def command(self) -> str:
        if not self.is_set():
            raise ValueError("command is not set")
        return self.root[0]

    def args(self) -> List[str]:
        return list(self.root[1:])

    def run(self, label: str) -> None:
        """
        Run the command and wait for it to finish.

        A command that is not set is skipped. A non-zero exit status is
        only logged as a warning.

        Args:
            label: Describes which hook is running, used in log messages

        Raises:
            OSError: If the process cannot be started at all
        """
        if not self.is_set():
            logger.debug(f"not calling command {label} - not set")
            return

        logger.debug(f"calling command {label}: {shlex.join(self.root)}")
        completed = subprocess.run([self.command(), *self.args()], check=False)
        if completed.returncode != 0:
            logger.warning(
                f"running command {label} was not successful. "
                f"exit status: {completed.returncode}"
            )

    def __str__(self) -> str:
        return shlex.join(self.root)
