"""Reading command lines, parsing them and running them."""

from __future__ import annotations

import signal
import sys
from collections.abc import Callable, Mapping

from minishelly.env import Environment
from minishelly.errors import ShellSyntaxError, not_perror
from minishelly.executor import Builtin, is_builtin, run_pipeline
from minishelly.expansion import expand_args
from minishelly.lexer import count_pipes, count_words, split_line
from minishelly.quotes import check_open_quotes, mark_special_echo
from minishelly.redirects import RedirectKind, collect_redirects, is_redirect, parse_redirections
from minishelly.state import ShellState, Tokens

try:
    import readline as _readline
except ImportError:
    _readline = None

NO_CMD = "command not found\n"

Reader = Callable[[str], "str | None"]

_NO_BUILTINS: Mapping[str, Builtin] = {}


def _report_syntax(state: ShellState, exc: ShellSyntaxError) -> None:
    not_perror(state.status, "syntax error", None, f"{exc}\n")


def parse_line(state: ShellState, line: str, reader: Reader) -> Tokens:
    """Split, check and expand a command line into ``state.tokens``.

    Redirection files are created and here-documents read through
    ``reader``. Raises ShellSyntaxError, already reported, for a line
    that cannot be run.
    """
    tokens = Tokens()
    state.tokens = tokens
    tokens.array_count = count_words(line)
    try:
        args = split_line(line)
        check_open_quotes(args)
    except ShellSyntaxError as exc:
        _report_syntax(state, exc)
        raise
    collect_redirects(tokens, args, state.status)
    # Input redirections must also let the redirection pass run.
    tokens.in_a_count = sum(
        1
        for arg in args
        if is_redirect(arg) in (RedirectKind.INPUT, RedirectKind.HEREDOC)
    )
    args = mark_special_echo(args)
    args = expand_args(args, state.env, state.status)
    try:
        tokens.pipe_count = count_pipes(args)
    except ShellSyntaxError as exc:
        _report_syntax(state, exc)
        raise
    tokens.args = args
    parse_redirections(tokens, args, state.status, reader)
    return tokens


def _not_found(state: ShellState, name: str) -> None:
    not_perror(state.status, name, None, NO_CMD)
    state.status.set(127)


def handle_line(state: ShellState, builtins: Mapping[str, Builtin]) -> None:
    """Run the parsed line held in ``state.tokens``.

    A lone builtin without pipes or redirections runs in the shell
    itself; anything else runs as a pipeline.
    """
    tokens = state.tokens
    if not tokens.args:
        return
    name = tokens.args[0]
    if tokens.pipe_count == 0 and tokens.redirect_count == 0 and is_builtin(name):
        state.status.set(0)
        handler = builtins.get(name)
        if handler is not None:
            handler(state, list(tokens.args), sys.stdout)
        return
    if len(state.env) == 0:
        _not_found(state, name)
        return
    try:
        run_pipeline(state, builtins)
    except FileNotFoundError as exc:
        _not_found(state, exc.filename)


def install_signals() -> dict[int, object]:
    """Interrupt with KeyboardInterrupt and ignore quit; return the old handlers."""
    previous: dict[int, object] = {
        signal.SIGINT: signal.signal(signal.SIGINT, signal.default_int_handler)
    }
    if hasattr(signal, "SIGQUIT"):
        previous[signal.SIGQUIT] = signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    return previous


def _remember(line: str) -> None:
    if _readline is not None and line:
        _readline.add_history(line)


def repl(state: ShellState, reader: Reader) -> None:
    """Read and run lines until ``reader`` returns None, then print ``exit``."""
    while True:
        try:
            line = reader(state.prompt)
        except KeyboardInterrupt:
            sys.stdout.write("\n")
            sys.stdout.flush()
            continue
        if line is None:
            break
        _remember(line)
        try:
            parse_line(state, line, reader)
        except ShellSyntaxError:
            pass
        else:
            handle_line(state, _NO_BUILTINS)
        finally:
            state.reset_line()
    sys.stdout.write("exit\n")
    sys.stdout.flush()


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def main(argv: list[str] | None = None) -> int:
    """Start an interactive shell on the process environment."""
    state = ShellState(env=Environment.from_environ())
    install_signals()
    clear = getattr(_readline, "clear_history", None)
    if clear is not None:
        clear()
    repl(state, _read_line)
    return 0