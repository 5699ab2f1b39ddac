import pytest

from minishelly.env import Environment, split_entry


def test_split_entry_first_equals():
    assert split_entry("A=b=c") == ("A", "b=c")
    assert split_entry("EMPTY=") == ("EMPTY", "")


def test_split_entry_without_equals_raises():
    with pytest.raises(ValueError):
        split_entry("NOEQUALS")


def test_from_environ_empty_uses_defaults(tmp_path):
    env = Environment.from_environ({}, str(tmp_path))
    assert list(env) == [
        ("PWD", str(tmp_path)),
        ("SHLVL", "1"),
        ("_", "/usr/bin/env"),
    ]


def test_from_environ_keeps_order():
    source = {"HOME": "/h", "PATH": "/bin", "USER": "u"}
    env = Environment.from_environ(source)
    assert list(env) == list(source.items())
    assert len(env) == 3


def test_insert_appends_and_allows_duplicates():
    env = Environment()
    env.insert("A", "1")
    env.insert("A", "2")
    assert list(env) == [("A", "1"), ("A", "2")]


def test_lookup_prefix_returns_first_prefix_match():
    env = Environment([("HOMEDIR", "x"), ("HOME", "y")])
    assert env.lookup_prefix("HOME") == "x"
    assert env.lookup_prefix("ZZZ") is None


def test_find_exact_and_missing():
    env = Environment([("HOMEDIR", "x"), ("HOME", "y")])
    assert env.find("HOME") == "y"
    with pytest.raises(KeyError):
        env.find("HOM")
    assert "HOME" in env
    assert "HOM" not in env


def test_find_path_without_value_raises():
    env = Environment([("PATH", None)])
    with pytest.raises(KeyError):
        env.find("PATH")


def test_replace_existing_key():
    env = Environment([("A", "1"), ("B", "2")])
    assert env.replace("B", "3") is True
    assert env.find("B") == "3"
    assert env.find("A") == "1"


def test_replace_missing_key_returns_false():
    env = Environment([("A", "1"), ("B", "2")])
    assert env.replace("Q", "3") is False
    assert list(env) == [("A", "1"), ("B", "2")]


def test_replace_on_empty_environment():
    assert Environment().replace("A", "1") is False


def test_to_envp_round_trips_through_split_entry():
    pairs = [("A", "1"), ("B", "x=y"), ("C", "")]
    env = Environment(pairs)
    assert [split_entry(line) for line in env.to_envp()] == pairs