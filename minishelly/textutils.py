"""Small string helpers shared by the parser."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import zip_longest

_NUL = "\0"


def dollar_count(string: str) -> int:
    """Number of ``$`` characters in ``string``."""
    return string.count("$")


def check_next(following: str | None, length: int) -> bool:
    """True when a one-character word is the last one.

    A lone ``$`` at the end of a command line is left as it is.
    """
    return following is None and length == 1


def compare_str(first: str, second: str) -> bool:
    """True if ``first`` sorts after ``second`` at their first difference.

    The end of a string counts as a character lower than any other.
    """
    for a, b in zip_longest(first, second, fillvalue=_NUL):
        if a != b:
            return a > b
    return False


def strtrim_front(text: str | None, char: str) -> str | None:
    """Text before the last occurrence of ``char``.

    Returns the whole text if ``char`` does not occur, and None when
    there is no text or no character to look for.
    """
    if text is None or not char:
        return None
    index = text.rfind(char)
    if index == -1:
        return text
    return text[:index]


def format_array(array: Sequence[str], name: str) -> str:
    """Render each element as ``name[i] = |value|`` on its own line."""
    return "".join(f"{name}[{index}] = |{value}|\n" for index, value in enumerate(array))