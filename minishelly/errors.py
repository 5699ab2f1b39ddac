"""Error reporting and the shell's last exit status."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

PREFIX = "minishell: "
SYNTAX_ERROR = "syntax error"


class ShellSyntaxError(Exception):
    """Raised when a command line cannot be parsed."""

    status = 2


@dataclass
class ExitStatus:
    """The exit status of the last command, as seen by ``$?``."""

    code: int = 0

    def set(self, code: int) -> None:
        """Record ``code`` as the latest exit status."""
        self.code = code

    def __int__(self) -> int:
        return self.code

    def __str__(self) -> str:
        return str(self.code)


def format_error(cmd: str, arg: str | None, msg: str) -> str:
    """Build ``minishell: cmd[: arg]: msg`` exactly as it is written out."""
    parts = [cmd]
    if arg is not None:
        parts.append(arg)
    parts.append(msg)
    return PREFIX + ": ".join(parts)


def status_for_message(cmd: str, msg: str) -> int:
    """Return 2 for syntax errors and 1 for anything else."""
    if cmd.startswith(SYNTAX_ERROR) or msg.startswith(SYNTAX_ERROR):
        return 2
    return 1


def not_perror(
    status: ExitStatus,
    cmd: str,
    arg: str | None,
    msg: str,
    stream: TextIO | None = None,
) -> None:
    """Write a formatted error to stderr and update the exit status."""
    out = stream if stream is not None else sys.stderr
    out.write(format_error(cmd, arg, msg))
    out.flush()
    status.set(status_for_message(cmd, msg))


def _current_error_text() -> str:
    exc = sys.exc_info()[1]
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    if exc is not None:
        return str(exc)
    return "Unknown error"


def cmd_error(
    status: ExitStatus,
    cmd: str,
    arg: str | None,
    stream: TextIO | None = None,
) -> None:
    """Report the exception being handled, perror style, and set status 1."""
    out = stream if stream is not None else sys.stderr
    out.write(format_error(cmd, arg, _current_error_text()) + "\n")
    out.flush()
    status.set(1)


def error(
    status: ExitStatus,
    cmd: str,
    message: str,
    stream: TextIO | None = None,
) -> None:
    """Write ``minishell: cmd: message`` to stdout and set status 1."""
    status.set(1)
    out = stream if stream is not None else sys.stdout
    out.write(f"{PREFIX}{cmd}: {message}\n")
    out.flush()