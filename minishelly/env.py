"""The shell's ordered list of environment variables."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass


@dataclass
class _Entry:
    key: str
    value: str | None


def split_entry(entry: str) -> tuple[str, str]:
    """Split ``KEY=VALUE`` at the first ``=``."""
    key, sep, value = entry.partition("=")
    if not sep:
        raise ValueError(f"environment entry has no '=': {entry!r}")
    return key, value


class Environment:
    """Variables kept in insertion order; duplicate keys are allowed."""

    def __init__(self, entries: Iterable[tuple[str, str | None]] = ()) -> None:
        self._entries = [_Entry(key, value) for key, value in entries]

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        cwd: str | None = None,
    ) -> Environment:
        """Build from a process environment, or a minimal one when it is empty."""
        source = os.environ if environ is None else environ
        if not source:
            return cls(
                [
                    ("PWD", cwd if cwd is not None else os.getcwd()),
                    ("SHLVL", "1"),
                    ("_", "/usr/bin/env"),
                ]
            )
        return cls(source.items())

    def __iter__(self) -> Iterator[tuple[str, str | None]]:
        return ((e.key, e.value) for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            self.find(key)
        except KeyError:
            return False
        return True

    def insert(self, key: str, value: str | None) -> None:
        """Append a variable at the end of the list."""
        self._entries.append(_Entry(key, value))

    def replace(self, key: str, value: str | None) -> bool:
        """Replace a variable's value; return False if nothing was replaced.

        The search starts at the first exact match of ``key`` (or the last
        entry if there is none) and replaces the first entry from there on
        whose name begins with ``key``.
        """
        if not self._entries:
            return False
        start = next(
            (n for n, e in enumerate(self._entries) if e.key == key),
            len(self._entries) - 1,
        )
        for entry in self._entries[start:]:
            if entry.key.startswith(key):
                entry.value = value
                return True
        return False

    def lookup_prefix(self, key: str) -> str | None:
        """Value of the first variable whose name begins with ``key``."""
        for entry in self._entries:
            if entry.key.startswith(key):
                return entry.value
        return None

    def find(self, key: str) -> str | None:
        """Value of the variable named exactly ``key``.

        Raises KeyError if there is none, or if ``key`` is PATH and the
        PATH lookup yields no value.
        """
        for entry in self._entries:
            if entry.key == key:
                if key == "PATH" and self.lookup_prefix("PATH") is None:
                    raise KeyError(key)
                return entry.value
        raise KeyError(key)

    def to_envp(self) -> list[str]:
        """The variables as ``KEY=VALUE`` strings, in order."""
        return [f"{e.key}={e.value or ''}" for e in self._entries]