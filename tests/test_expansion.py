import pytest

from minishelly.env import Environment
from minishelly.errors import ExitStatus
from minishelly.expansion import (
    confirm_expansion,
    count_exp_parts,
    expand_args,
    expand_heredoc_line,
    find_key_len,
    look_if_expans,
    replace_exitcode,
    replace_expansion,
    simple_quote_check,
    splice,
    split_expansions,
)

HOME = "/home/bob"
USER = "bob"
VALUE = "val"


@pytest.fixture
def env():
    return Environment([("HOME", HOME), ("USER", USER), ("A", VALUE), ("V", "v")])


@pytest.fixture
def status():
    return ExitStatus(0)


@pytest.mark.parametrize("key, tail", [("HOME", " rest"), ("A", "'b'"), ("X", '"y"'), ("Q", "$R")])
def test_find_key_len_stops_at_separators(key, tail):
    assert find_key_len("$" + key + tail, 0) == len(key)


def test_find_key_len_at_end_of_text():
    assert find_key_len("ab$", 2) == 0


@pytest.mark.parametrize("start, end", [(0, 0), (1, 3), (0, 5), (4, 5)])
def test_splice_round_trip(start, end):
    text = "hello"
    assert splice(text, text[start:end], start, end) == text


def test_splice_removal_shortens_text():
    text = "abcdef"
    assert len(splice(text, "", 1, 4)) == len(text) - 3


def test_replace_expansion_known_variable(env):
    assert replace_expansion("$USER rest", 0, env) == USER + " rest"


def test_replace_expansion_unknown_variable_is_dropped(env):
    assert replace_expansion("a$NOPE b", 1, env) == "a" + " b"


def test_replace_expansion_path_without_value_is_dropped():
    env = Environment([("PATH", None)])
    assert replace_expansion("$PATH", 0, env) == ""


def test_replace_exitcode_uses_status():
    status = ExitStatus(42)
    assert replace_exitcode("x$?y", 1, status) == "x" + str(status.code) + "y"


def test_look_if_expans_expands_all_variables(env, status):
    assert look_if_expans("$HOME $USER", env, status) == HOME + " " + USER


def test_look_if_expans_stop_keeps_word(env, status):
    assert look_if_expans("$HOME", env, status, True) == "$HOME"


def test_look_if_expans_stops_before_quote(env, status):
    assert look_if_expans("$V'$B'", env, status) == "v" + "'$B'"


def test_look_if_expans_exit_status(env):
    status = ExitStatus(7)
    assert look_if_expans("$?", env, status) == str(status.code)


def test_look_if_expans_without_dollar_is_identity(env, status):
    assert look_if_expans("plain text", env, status) == "plain text"


def test_count_exp_parts_empty():
    assert count_exp_parts("") == 1


def test_count_exp_parts_empty_quotes_count_twice():
    assert count_exp_parts("''") == 2


@pytest.mark.parametrize("text", ["a$b'c'$d", "$A$B", "x\"$Y\"z", "$A'lit'"])
def test_count_exp_parts_matches_split(text):
    assert count_exp_parts(text) == len(split_expansions(text))


@pytest.mark.parametrize("text", ["a$b'c'$d", "$$", "\"$A\"$B", "a$", "$A'$B'c", ""])
def test_split_expansions_round_trip(text):
    assert "".join(split_expansions(text)) == text


def test_split_expansions_parts():
    assert split_expansions("a$b'c'") == ["a", "$b", "'c'"]


def test_split_expansions_trailing_dollar_pair_stays_together():
    assert split_expansions("$$") == ["$$"]


def test_simple_quote_check_space_after_dollar():
    assert simple_quote_check("$ x", 0) == -1


def test_simple_quote_check_leading_single_dollar():
    assert simple_quote_check("$A", 0) == 0


def test_simple_quote_check_dollar_before_quote():
    assert simple_quote_check("$'a'", 0) == -1


def test_simple_quote_check_undecided():
    assert simple_quote_check("x$A", 0) == 1


def test_confirm_expansion_single_quotes_block():
    assert confirm_expansion("'$A'", 4) is False


def test_confirm_expansion_double_quotes_allow():
    assert confirm_expansion('"$A"', 4) is True


def test_confirm_expansion_bare_variable():
    assert confirm_expansion("$A") is True


def test_expand_args_simple(env, status):
    assert expand_args(["echo", "$A"], env, status) == ["echo", VALUE]


def test_expand_args_single_quotes_keep_literal(env, status):
    assert expand_args(["echo", "'$A'"], env, status) == ["echo", "$A"]


def test_expand_args_double_quotes_expand(env, status):
    assert expand_args(['"$A"'], env, status) == [VALUE]


def test_expand_args_several_dollars(env, status):
    assert expand_args(["$A$A"], env, status) == [VALUE * 2]


def test_expand_args_trailing_lone_dollar(env, status):
    assert expand_args(["echo", "$"], env, status) == ["echo", "$"]


def test_expand_args_removes_quotes_without_dollar(env, status):
    assert expand_args(["x'y'"], env, status) == ["xy"]


def test_expand_args_exit_status(env):
    status = ExitStatus(3)
    assert expand_args(["$?"], env, status) == [str(status.code)]


def test_expand_args_does_not_mutate_input(env, status):
    args = ["echo", "$HOME"]
    expand_args(args, env, status)
    assert args == ["echo", "$HOME"]


def test_expand_args_keeps_word_count(env, status):
    args = ["ls", "$HOME", "'q'", "$A$USER", "|", "wc"]
    assert len(expand_args(args, env, status)) == len(args)


def test_expand_heredoc_line_with_variable(env, status):
    assert expand_heredoc_line("hi $A", env, status) == "hi " + VALUE + "\n"


def test_expand_heredoc_line_plain(env, status):
    assert expand_heredoc_line("no vars", env, status) == "no vars" + "\n"


def test_expand_heredoc_line_none(env, status):
    assert expand_heredoc_line(None, env, status) is None