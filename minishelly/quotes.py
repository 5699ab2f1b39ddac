"""Checking, removing and marking quotes in command words."""

from __future__ import annotations

from minishelly.errors import ShellSyntaxError

QUOTES = "'\""
ECHO_MARK = "\x06"
_REDIRECT_CHARS = "<>"
_NUL = "\0"


def _count_quoted(arg: str, start: int, count: int) -> tuple[int, int]:
    """Walk from the quote at ``start`` to its match, counting both quotes."""
    quote = arg[start]
    size = len(arg)
    x = start + 1
    count += 1
    if x < size and arg[x] == quote:
        count += 1
    while x < size and arg[x] != quote:
        x += 1
        if x < size and arg[x] == quote:
            count += 1
    return x, count


def check_open_quotes(args: list[str]) -> tuple[int, int]:
    """Count paired single and double quotes over all words.

    Raises ShellSyntaxError as soon as a word leaves a quote open. A word
    that is a lone quote character is not counted.
    """
    single = 0
    double = 0
    for arg in args:
        x = 0
        size = len(arg)
        while x < size:
            char = arg[x]
            if char == "'" and size > 1:
                x, single = _count_quoted(arg, x, single)
            elif char == '"' and size > 1:
                x, double = _count_quoted(arg, x, double)
            x += 1
        if single % 2 or double % 2:
            raise ShellSyntaxError("open quotes")
    return single, double


def clean_quotes(string: str, length: int = 0) -> str:
    """Remove quote characters from the first ``length`` characters.

    A zero ``length`` means the whole string. A ``$`` directly before a
    quote is dropped along with it.
    """

    def at(index: int) -> str:
        return string[index] if index < len(string) else _NUL

    if length == 0:
        length = len(string)
    out: list[str] = []
    x = 0
    while x <= length:
        if at(x) in QUOTES and at(x) != _NUL:
            quote = at(x)
            x += 1
            while at(x) != _NUL and at(x) != quote:
                out.append(at(x))
                x += 1
        if at(x) == "$" and at(x + 1) in QUOTES and at(x + 1) != _NUL:
            x += 1
        if at(x) not in QUOTES or at(x) == _NUL:
            out.append(at(x))
        x += 1
        if x == length:
            break
    return "".join(out).partition(_NUL)[0]


def mark_special_echo(args: list[str]) -> list[str]:
    """Prefix quoted words that start with a pipe or redirection character.

    The mark keeps such words from being read as operators later on.
    """
    marked = list(args)
    skip = 0  # carried over from the last quoted word that was not marked
    for index, word in enumerate(marked):
        if not word or word[0] not in QUOTES:
            continue
        while skip < len(word) and word[skip] in QUOTES:
            skip += 1
        following = word[skip] if skip < len(word) else ""
        if following and (following == "|" or following in _REDIRECT_CHARS):
            marked[index] = ECHO_MARK + word
            skip = 0
    return marked