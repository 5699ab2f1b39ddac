"""Splitting a command line into words, and counting its pipes."""

from __future__ import annotations

from minishelly.errors import ShellSyntaxError

QUOTES = "'\""
REDIRECT_CHARS = "<>"
PIPE = "|"
SEPARATOR = " "


def _skip_quoted(line: str, start: int) -> int:
    """Index of the quote that closes the one at ``start``, or the end."""
    quote = line[start]
    end = line.find(quote, start + 1)
    return len(line) if end == -1 else end


def count_words(line: str) -> int:
    """Upper bound on the number of words ``split_line`` may produce.

    Every character outside quotes, redirections and pipes counts as a
    word of its own, so the number is generous rather than exact.
    """
    if len(line) == 1:
        return 1
    words = 0
    i = 0
    size = len(line)
    while i < size:
        char = line[i]
        if char == SEPARATOR:
            i += 1
        elif char in QUOTES:
            # Stops on the closing quote, which is then taken as an opening one.
            i = _skip_quoted(line, i)
            words += 1
        elif char in REDIRECT_CHARS:
            i += 1
            while i < size and line[i] in REDIRECT_CHARS:
                i += 1
            words += 1
        elif char == PIPE:
            while i < size and line[i] == PIPE:
                i += 1
            words += 1
        else:
            words += 1
            i += 1
    return words


def word_end(line: str, start: int) -> int:
    """Index just past the word that begins at ``start``.

    Quoted text stays inside the word; a run of redirection characters or
    of pipes is a word of its own and also ends the word before it.
    """
    i = start
    size = len(line)
    while i < size and line[i] != SEPARATOR:
        char = line[i]
        if char in QUOTES:
            i = _skip_quoted(line, i)
        elif char in REDIRECT_CHARS:
            i += 1
            while i < size and line[i] != SEPARATOR and line[i] in REDIRECT_CHARS:
                i += 1
            return i
        elif char == PIPE:
            while i < size and line[i] == PIPE:
                i += 1
            return i
        if i < size and line[i] != SEPARATOR:
            i += 1
        if i < size and (line[i] == PIPE or line[i] in REDIRECT_CHARS):
            return i
    return i


def split_line(line: str) -> list[str]:
    """Split a command line into words, keeping quotes in place.

    Raises ShellSyntaxError if the line begins with a pipe.
    """
    if line.startswith(PIPE):
        raise ShellSyntaxError("unexpected token")
    if not line:
        return []
    limit = count_words(line)
    words: list[str] = []
    i = 0
    size = len(line)
    while i < size and len(words) < limit:
        while i < size and line[i] == SEPARATOR:
            i += 1
        if i >= size:
            break
        end = word_end(line, i)
        words.append(line[i:end])
        i = end
    return words


def count_pipes(args: list[str]) -> int:
    """Number of pipe words in ``args``.

    Raises ShellSyntaxError for ``||`` and for pipe words whose third
    character is a pipe.
    """
    count = 0
    for arg in args:
        if not arg.startswith(PIPE):
            continue
        if len(arg) == 2 and arg[1] == PIPE:
            raise ShellSyntaxError("unexpected token")
        if len(arg) > 2 and arg[2] == PIPE:
            raise ShellSyntaxError("unexpected token")
        count += 1
    return count