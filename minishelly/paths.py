"""Finding the program a command word names."""

from __future__ import annotations

import os

from minishelly.errors import ExitStatus, error

PATH_SEPARATOR = ":"


def check_file(path: str) -> bool:
    """True if ``path`` may be executed by the current user."""
    return bool(path) and os.access(path, os.X_OK)


def check_dir(path: str) -> bool:
    """True if ``path`` is a directory that can be entered and listed."""
    if not path or not os.access(path, os.X_OK):
        return False
    try:
        with os.scandir(path):
            return True
    except OSError:
        return False


def parent_dir(path: str) -> str:
    """Everything before the last ``/`` of ``path``; empty if it has none past the start."""
    return path[: max(path.rfind("/"), 0)]


def handle_absolute_path(path: str, status: ExitStatus) -> bool:
    """Check that the directory holding ``path`` exists, reporting it if not."""
    directory = parent_dir(path)
    if not check_dir(directory):
        error(status, "check dir", directory)
        return False
    return True


def resolve_command(
    name: str,
    path_value: str | None,
    status: ExitStatus,
) -> str | None:
    """The file to execute for command ``name``, or None if there is none.

    Words that start with ``.`` or ``/`` are taken as paths and must be
    executable. Any other word is looked up in the directories of
    ``path_value`` in order.
    """
    if not name:
        return None
    if name.startswith("."):
        if len(name) < 2:
            return None
        return name if check_file(name) else None
    if name.startswith("/"):
        handle_absolute_path(name, status)
        return name if check_file(name) else None
    if path_value is None:
        return None
    for directory in filter(None, path_value.split(PATH_SEPARATOR)):
        if not check_dir(directory):
            continue
        try:
            entries = os.listdir(directory)
        except OSError:
            continue
        if name in entries:
            return f"{directory}/{name}"
    return None