"""Redirection words: checking them, opening their files, here-documents."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from enum import IntEnum

from minishelly.errors import ExitStatus, ShellSyntaxError, not_perror
from minishelly.state import Tokens

HEREDOC_FILE = "temp_heredoc_file_that_none_know_about"
HEREDOC_PROMPT = "hereboy> "
NO_FILE = "no such file or directory\n"
_FILE_MODE = 0o644


class RedirectKind(IntEnum):
    """What a word redirects, if anything."""

    NONE = 0
    INPUT = 1
    HEREDOC = 2
    OUTPUT = 3


def is_char_redir(char: str) -> bool:
    """True for ``<`` and ``>``."""
    return char in ("<", ">")


def is_redirect(arg: str) -> RedirectKind:
    """Classify a word by the redirection it starts with."""
    if arg.startswith(">"):
        return RedirectKind.OUTPUT
    if arg.startswith("<<"):
        return RedirectKind.HEREDOC
    if arg.startswith("<"):
        return RedirectKind.INPUT
    return RedirectKind.NONE


def _syntax_error(status: ExitStatus, cmd: str, msg: str) -> ShellSyntaxError:
    not_perror(status, cmd, None, msg)
    return ShellSyntaxError(msg.strip())


def collect_redirects(tokens: Tokens, args: Sequence[str], status: ExitStatus) -> None:
    """Check the redirection words of a line and count them into ``tokens``.

    Each problem is reported on stderr and raised as ShellSyntaxError.
    """
    out_count = 0
    in_count = 0
    for index, arg in enumerate(args):
        first = arg[:1]
        if first and is_char_redir(first):
            following = args[index + 1] if index + 1 < len(args) else None
            if following is None:
                raise _syntax_error(status, "redirect", "syntax error\n")
            if not following or following[0] == "|" or is_char_redir(following[0]):
                raise _syntax_error(status, "redirect", "syntax error\n")
        if first in (">", "<"):
            if len(arg) > 2:
                raise _syntax_error(status, "syntax error", "too many redirects\n")
            if first == ">":
                out_count += 1
            else:
                in_count += 1
    if out_count > 0:
        tokens.out_a_count += 1
    tokens.redirect_count = out_count + in_count


def input_helper(
    tokens: Tokens,
    args: Sequence[str],
    index: int,
    status: ExitStatus,
) -> bool:
    """Record the input of the redirection at ``index``; False if it cannot be read."""
    target = args[index + 1]
    if args[index] == "<<":
        tokens.here_file = target
        return True
    try:
        with open(target, "rb"):
            pass
    except OSError:
        tokens.input_file = None
        not_perror(status, target, None, NO_FILE)
        return False
    tokens.input_file = target
    tokens.redirect_in = True
    return True


def _touch(path: str, flags: int) -> bool:
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | flags, _FILE_MODE)
    except OSError:
        return False
    os.close(fd)
    return True


def output_helper(tokens: Tokens, args: Sequence[str], index: int, slot: int) -> bool:
    """Create or truncate the output file of the redirection at ``index``.

    The file name is stored in ``tokens.output_files[slot]``. Returns False
    if the file cannot be opened.
    """
    target = args[index + 1]
    if len(tokens.output_files) <= slot:
        tokens.output_files.extend([None] * (slot + 1 - len(tokens.output_files)))
    tokens.output_files[slot] = target
    if args[index] == ">>":
        tokens.redirect_append = True
        return _touch(target, os.O_APPEND)
    if not _touch(target, os.O_TRUNC):
        return False
    tokens.redirect_out = True
    return True


def write_heredoc(path: str, eof: str, lines: Iterable[str | None]) -> int:
    """Write ``lines`` to ``path`` until ``eof`` or a None line; return how many."""
    written = 0
    with open(path, "w", encoding="utf-8") as handle:
        os.chmod(path, _FILE_MODE)
        for line in lines:
            if line is None or line == eof:
                break
            handle.write(line + "\n")
            written += 1
    return written


def _prompted(reader: Callable[[str], str | None]) -> Iterator[str | None]:
    while True:
        yield reader(HEREDOC_PROMPT)


def _heredoc(tokens: Tokens, eof: str, status: ExitStatus, reader: Callable[[str], str | None]) -> None:
    tokens.here_file = HEREDOC_FILE
    try:
        write_heredoc(HEREDOC_FILE, eof, _prompted(reader))
    except KeyboardInterrupt:
        status.set(130)
        tokens.ignore_heredoc = True
    except OSError:
        return


def parse_redirections(
    tokens: Tokens,
    args: Sequence[str],
    status: ExitStatus,
    reader: Callable[[str], str | None],
) -> None:
    """Open the files of every redirection and read here-documents.

    ``reader`` is called with a prompt for each here-document line and
    returns None at end of input. Each pipe after an output redirection
    moves on to the next output slot.
    """
    if tokens.out_a_count == 0 and tokens.in_a_count == 0:
        return
    tokens.redirect_out = False
    slot = 0
    for index, arg in enumerate(args):
        if tokens.redirect_out and arg.startswith("|"):
            slot += 1
            tokens.redirect_out = False
        has_next = index + 1 < len(args)
        if arg == "<<":
            if has_next:
                _heredoc(tokens, args[index + 1], status, reader)
        elif has_next and is_redirect(arg) is RedirectKind.INPUT:
            input_helper(tokens, args, index, status)
        elif has_next and arg.startswith(">"):
            output_helper(tokens, args, index, slot)
    if tokens.out_a_count > 0:
        tokens.redirect_out = True


def has_heredoc(args: Sequence[str]) -> bool:
    """True if a word starting with ``<<`` is followed by another word."""
    return any(arg.startswith("<<") for arg in args[:-1])