import io

import pytest

from minishelly.errors import (
    ExitStatus,
    ShellSyntaxError,
    cmd_error,
    error,
    format_error,
    not_perror,
    status_for_message,
)


def test_exit_status_set_and_int():
    status = ExitStatus()
    assert status.code == 0
    status.set(127)
    assert int(status) == 127
    assert str(status) == "127"


def test_format_error_with_and_without_arg():
    assert format_error("cd", "dir", "msg\n") == "minishell: cd: dir: msg\n"
    assert format_error("cd", None, "msg\n") == "minishell: cd: msg\n"


@pytest.mark.parametrize(
    "cmd,msg,expected",
    [
        ("syntax error", "unexpected token\n", 2),
        ("redirect", "syntax error\n", 2),
        ("parsing", "malloc fail\n", 1),
    ],
)
def test_status_for_message(cmd, msg, expected):
    assert status_for_message(cmd, msg) == expected


def test_not_perror_writes_and_sets_status():
    status = ExitStatus()
    out = io.StringIO()
    not_perror(status, "syntax error", None, "open quotes\n", out)
    assert out.getvalue() == "minishell: syntax error: open quotes\n"
    assert status.code == 2


def test_not_perror_plain_error_sets_one():
    status = ExitStatus(5)
    out = io.StringIO()
    not_perror(status, "infile", "f", "no such file or directory\n", out)
    assert out.getvalue() == "minishell: infile: f: no such file or directory\n"
    assert status.code == 1


def test_cmd_error_uses_handled_oserror():
    status = ExitStatus()
    out = io.StringIO()
    try:
        raise FileNotFoundError(2, "No such file or directory")
    except OSError:
        cmd_error(status, "cd", "nowhere", out)
    assert out.getvalue() == "minishell: cd: nowhere: No such file or directory\n"
    assert status.code == 1


def test_error_writes_to_stream():
    status = ExitStatus()
    out = io.StringIO()
    error(status, "fork", "first child failed", out)
    assert out.getvalue() == "minishell: fork: first child failed\n"
    assert status.code == 1


def test_shell_syntax_error_status():
    exc = ShellSyntaxError("unexpected token")
    assert exc.status == 2
    assert str(exc) == "unexpected token"
    assert isinstance(exc, Exception)