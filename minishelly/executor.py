"""Running the commands of a line as a pipeline of processes."""

from __future__ import annotations

import copy
import errno
import io
import os
import signal
import subprocess
import sys
import tempfile
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import IO, TextIO, Union

from minishelly.env import split_entry
from minishelly.errors import cmd_error, error
from minishelly.paths import resolve_command
from minishelly.redirects import RedirectKind, is_redirect
from minishelly.state import ShellState, Tokens

BUILTINS = frozenset({"exit", "pwd", "cd", "echo", "env", "export", "unset"})
NO_CMD = "command not found"

Builtin = Callable[[ShellState, list, TextIO], object]
_Result = Union["subprocess.Popen[bytes]", int]


def _child_signals() -> None:
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)


_PREEXEC = _child_signals if os.name == "posix" else None


@dataclass
class Command:
    """One command of a pipeline with its redirections."""

    argv: list[str] = field(default_factory=list)
    input_file: str | None = None
    output_file: str | None = None
    append: bool = False
    heredoc: bool = False

    @property
    def name(self) -> str | None:
        """The command word, or None for an empty command."""
        return self.argv[0] if self.argv else None


def is_builtin(name: str) -> bool:
    """True if ``name`` is one of the shell's own commands."""
    return name in BUILTINS


def split_commands(args: Sequence[str]) -> list[list[str]]:
    """Split the words of a line at every pipe word."""
    segments: list[list[str]] = [[]]
    for word in args:
        if word.startswith("|"):
            segments.append([])
        else:
            segments[-1].append(word)
    return segments


def build_command(segment: Sequence[str]) -> Command:
    """Separate a command's words from its redirections and their targets."""
    command = Command()
    words = iter(segment)
    for word in words:
        kind = is_redirect(word)
        if kind is RedirectKind.NONE:
            command.argv.append(word)
            continue
        target = next(words, None)
        if kind is RedirectKind.INPUT:
            command.input_file = target
        elif kind is RedirectKind.HEREDOC:
            command.heredoc = True
        else:
            command.output_file = target
            command.append = word.startswith(">>")
    return command


def _close(*handles: IO[bytes] | None) -> None:
    seen: set[int] = set()
    for handle in handles:
        if handle is not None and id(handle) not in seen:
            seen.add(id(handle))
            handle.close()


def _empty() -> IO[bytes]:
    return open(os.devnull, "rb")


def _buffered(data: bytes) -> IO[bytes]:
    handle = tempfile.TemporaryFile()
    handle.write(data)
    handle.seek(0)
    return handle


def _open_input(command: Command, tokens: Tokens, upstream: IO[bytes] | None) -> IO[bytes] | None:
    if command.input_file is not None:
        return open(command.input_file, "rb")
    if command.heredoc:
        source = os.devnull if tokens.ignore_heredoc else tokens.here_file
        if source is not None:
            try:
                return open(source, "rb")
            except OSError:
                pass
    return upstream


def _open_output(command: Command) -> IO[bytes] | None:
    if command.output_file is None:
        return None
    return open(command.output_file, "ab" if command.append else "wb")


def _run_builtin(
    state: ShellState,
    builtins: Mapping[str, Builtin],
    argv: list[str],
) -> tuple[int, str]:
    # Builtins in a pipeline work on a copy, as a forked child would.
    child = copy.deepcopy(state)
    out = io.StringIO()
    handler = builtins.get(argv[0])
    try:
        if handler is not None:
            handler(child, list(argv), out)
        code = child.status.code
    except SystemExit as exc:
        if exc.code is None:
            code = 0
        elif isinstance(exc.code, int):
            code = exc.code
        else:
            code = 1
    return code, out.getvalue()


def _run_stage(
    state: ShellState,
    builtins: Mapping[str, Builtin],
    command: Command,
    program: str | None,
    upstream: IO[bytes] | None,
    last: bool,
    env: dict[str, str],
    results: list[_Result],
) -> IO[bytes] | None:
    try:
        stdin = _open_input(command, state.tokens, upstream)
    except OSError:
        _close(upstream)
        results.append(1)
        return _empty()
    try:
        stdout = _open_output(command)
    except OSError:
        error(state.status, "redirect", "Failed to open input file A")
        _close(stdin, upstream)
        results.append(1)
        return _empty()
    try:
        if program is None:
            code, text = _run_builtin(state, builtins, command.argv)
            results.append(code)
            if stdout is not None:
                stdout.write(text.encode())
                return None if last else _empty()
            if not last:
                return _buffered(text.encode())
            sys.stdout.write(text)
            sys.stdout.flush()
            return None
        target = stdout if stdout is not None else (None if last else subprocess.PIPE)
        try:
            proc = subprocess.Popen(
                [program, *command.argv[1:]],
                stdin=stdin,
                stdout=target,
                env=env,
                preexec_fn=_PREEXEC,
            )
        except OSError:
            cmd_error(state.status, command.argv[0], None)
            results.append(1)
            return None if last else _empty()
        results.append(proc)
        if target is subprocess.PIPE:
            return proc.stdout
        return None if last else _empty()
    finally:
        _close(stdin, stdout, upstream)


def _exit_status(returncode: int) -> int:
    if returncode >= 0:
        return returncode
    if -returncode == signal.SIGINT:
        return 130
    return 128 - returncode


def _finish(state: ShellState, results: list[_Result]) -> None:
    code = 0
    interrupted = False
    for item in results:
        if isinstance(item, int):
            code = item
            continue
        while True:
            try:
                returncode = item.wait()
                break
            except KeyboardInterrupt:
                interrupted = True
        code = _exit_status(returncode)
    tokens = state.tokens
    if tokens.here_file is not None:
        try:
            os.unlink(tokens.here_file)
        except OSError:
            pass
        tokens.here_file = None
    state.status.set(130 if interrupted else code)


def run_pipeline(state: ShellState, builtins: Mapping[str, Builtin]) -> None:
    """Run every command of the current line, connected by pipes.

    The exit status of the last command becomes the shell's status.
    Raises FileNotFoundError naming the first command that cannot be
    found; the commands before it have run by then.
    """
    tokens = state.tokens
    commands = [build_command(segment) for segment in split_commands(tokens.args)]
    env = dict(split_entry(entry) for entry in state.env.to_envp())
    path_value = state.env.lookup_prefix("PATH")
    results: list[_Result] = []
    upstream: IO[bytes] | None = None
    missing: str | None = None
    for position, command in enumerate(commands):
        last = position == len(commands) - 1
        name = command.name
        if name is None:
            _close(upstream)
            upstream = _empty()
            continue
        program = None
        if not is_builtin(name):
            program = resolve_command(name, path_value, state.status)
            if program is None:
                missing = name
                break
        upstream = _run_stage(state, builtins, command, program, upstream, last, env, results)
    _close(upstream)
    _finish(state, results)
    if missing is not None:
        raise FileNotFoundError(errno.ENOENT, NO_CMD, missing)