"""Expansion of ``$NAME`` and ``$?`` in command words, and quote removal."""

from __future__ import annotations

from collections.abc import Sequence

from minishelly.env import Environment
from minishelly.errors import ExitStatus
from minishelly.quotes import QUOTES, clean_quotes
from minishelly.textutils import check_next, dollar_count

_NUL = "\0"
_KEY_STOPPERS = " \"'$"


def _at(text: str, index: int) -> str:
    return text[index] if 0 <= index < len(text) else _NUL


def _is_quote(char: str) -> bool:
    return char != _NUL and char in QUOTES


def find_key_len(text: str, start: int) -> int:
    """Length of the variable name after the ``$`` at ``start``."""
    end = start + 1
    while end < len(text) and text[end] not in _KEY_STOPPERS:
        end += 1
    return end - start - 1


def splice(text: str, value: str, start: int, end: int) -> str:
    """Replace ``text[start:end]`` with ``value``."""
    return text[:start] + value + text[end:]


def replace_expansion(arg: str, start: int, env: Environment) -> str:
    """Replace the ``$NAME`` at ``start`` with its value, or drop it."""
    key_len = find_key_len(arg, start)
    key = arg[start + 1 : start + 1 + key_len]
    end = start + key_len + 1
    try:
        value = env.find(key)
    except KeyError:
        value = None
    return splice(arg, value if value is not None else "", start, end)


def replace_exitcode(arg: str, start: int, status: ExitStatus | int) -> str:
    """Replace the ``$?`` at ``start`` with the last exit status."""
    return splice(arg, str(int(status)), start, start + 2)


def look_if_expans(
    arg: str,
    env: Environment,
    status: ExitStatus | int,
    stop: bool = False,
) -> str:
    """Expand variables in ``arg`` from left to right.

    With ``stop`` set the word is returned untouched once a ``$`` is seen.
    Expansion also ends when a quote follows the expanded position.
    """
    i = 0
    while i < len(arg):
        if arg[i] == "$":
            if stop:
                return arg
            if _at(arg, i + 1) == "?":
                arg = replace_exitcode(arg, i, status)
            else:
                arg = replace_expansion(arg, i, env)
            if i >= len(arg) or _is_quote(_at(arg, i + 1)):
                return arg
        i += 1
    return arg


def count_exp_parts(text: str) -> int:
    """Number of slots needed for the parts of a word with several ``$``.

    An empty quoted pair counts twice.
    """
    if not text:
        return 1
    count = 0
    i = 0
    size = len(text)
    while i < size:
        char = text[i]
        if char in QUOTES:
            i += 1
            if i < size and text[i] == char:
                count += 1
            while i < size and text[i] != char:
                i += 1
            i += 1
            count += 1
        else:
            if char == "$":
                i += 1
            while i < size and text[i] not in QUOTES and text[i] != "$":
                i += 1
            count += 1
    return count


def _part_len(text: str, start: int) -> int:
    char = text[start]
    if char in QUOTES:
        end = text.find(char, start + 1)
        return (len(text) if end == -1 else end) - start + 1
    pos = start
    if char == "$" and _at(text, pos + 1) != _NUL:
        pos += 1
    if text[pos] == "$" and _at(text, pos + 1) == _NUL:
        return pos - start + 1
    while pos < len(text) and text[pos] not in QUOTES and text[pos] != "$":
        pos += 1
    return pos - start


def split_expansions(text: str) -> list[str]:
    """Split a word into quoted runs and ``$``-led runs."""
    parts: list[str] = []
    i = 0
    while i < len(text):
        length = _part_len(text, i)
        parts.append(text[i : i + length])
        i += length
    return parts


def simple_quote_check(text: str, start: int = 0) -> int:
    """Quick verdict on whether a word may be expanded.

    Returns -1 when it must not be, 0 when it surely can be, and 1 when
    the quotes around it decide.
    """
    counter = 0
    for x in range(start, len(text)):
        if text[x] == "$":
            if _at(text, x + 1) == " ":
                return -1
            counter += 1
    for i in range(start, len(text)):
        if text[i] != "$":
            continue
        following = _at(text, i + 1)
        if _is_quote(following) or (counter < 2 and following == "$"):
            return -1
        if counter < 2 and i == 0:
            return 0
    return 1


def _skip_quoted(text: str, inside: bool, x: int, quote: str) -> tuple[bool, int]:
    last = len(text) - 1
    x += 1
    while _at(text, x) != _NUL and _at(text, x) != quote:
        x += 1
        if _at(text, x) == quote:
            inside = not inside
        if x == last:
            break
    return inside, x


def confirm_expansion(text: str, length: int | None = None) -> bool:
    """True unless the ``$`` in ``text`` sits inside single quotes."""
    if length is None:
        length = len(text)
    verdict = simple_quote_check(text, 0)
    if verdict == -1:
        return False
    if verdict == 0:
        return True
    single = False
    double = False
    x = 0
    while x < len(text) and x < length:
        if text[x] == "'":
            single, x = _skip_quoted(text, single, x, "'")
        elif text[x] == '"':
            double, x = _skip_quoted(text, double, x, '"')
        x += 1
    return not single


def _expand_word(
    word: str,
    following: str | None,
    env: Environment,
    status: ExitStatus | int,
) -> str:
    length = len(word)
    if not confirm_expansion(word, length):
        return clean_quotes(word, length)
    stop = check_next(following, length)
    if any(quote in word for quote in QUOTES):
        word = clean_quotes(word, length - 1)
    return look_if_expans(word, env, status, stop)


def _next(items: Sequence[str], index: int) -> str | None:
    return items[index + 1] if index + 1 < len(items) else None


def expand_args(
    args: Sequence[str],
    env: Environment,
    status: ExitStatus | int,
) -> list[str]:
    """Expand variables and remove quotes in every word of a command line."""
    result = list(args)
    for index, word in enumerate(args):
        dollars = dollar_count(word)
        if dollars > 1:
            parts = split_expansions(word)
            result[index] = "".join(
                _expand_word(part, _next(parts, n), env, status)
                for n, part in enumerate(parts)
            )
        elif dollars == 1:
            result[index] = _expand_word(word, _next(args, index), env, status)
        elif any(quote in word for quote in QUOTES):
            result[index] = clean_quotes(word, 0)
    return result


def expand_heredoc_line(
    line: str | None,
    env: Environment,
    status: ExitStatus | int,
) -> str | None:
    """Expand variables in a here-document line and end it with a newline."""
    if line is None:
        return None
    if "$" in line:
        return look_if_expans(line, env, status) + "\n"
    return line + "\n"