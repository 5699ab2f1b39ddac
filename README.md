# minishelly

A small interactive POSIX-style shell. It reads a line, splits it into
words, expands variables, creates redirection files, reads
here-documents and runs the commands as a pipeline of processes.

## What it understands

- Words separated by spaces, with `'single'` and `"double"` quoting.
  A line with an unbalanced quote is rejected as a syntax error.
- `$NAME` expansion from the shell's environment and `$?` for the status
  of the last command. Nothing is expanded inside single quotes.
- Pipelines joined with `|`. A line that starts with `|`, or that holds
  `||`, is a syntax error.
- Redirections: `< file`, `> file`, `>> file` and here-documents
  `<< EOF`. A redirection with nothing after it, or followed by a pipe
  or another redirection, is a syntax error. Here-document lines are
  read at the `hereboy> ` prompt and written unchanged to a temporary
  file in the current directory, which is removed once the pipeline has
  run.
- Commands are looked up in the directories of `PATH`, or run directly
  when given as a path such as `./tool` or `/bin/ls`.

Errors are printed to standard error in the form

    minishell: <command>: <message>

and set the exit status: 2 for syntax errors, 127 for a command that
cannot be found, 1 for other failures. A command killed by Ctrl-C gives
status 130.

## Running it

Install the package and start the shell:

    pip install .
    minishelly

The prompt is `minishell$ ` (coloured). Ctrl-C at the prompt starts a
fresh line, Ctrl-\ is ignored, and Ctrl-D (end of input) leaves the
shell after printing `exit`. Lines are added to the `readline` history
where that module is available.

## Builtins

The words `cd`, `echo`, `env`, `exit`, `export`, `pwd` and `unset` are
recognised as builtins and never looked up on `PATH`, but the package
does not implement them: the `minishelly` command runs them as no-ops
that succeed. To give them behaviour, pass your own handlers to
`minishelly.shell.handle_line` or `minishelly.executor.run_pipeline`.
A handler is called as `handler(state, argv, stream)` and writes its
output to `stream`. A lone builtin with no pipes or redirections runs
against the shell's own state; inside a pipeline it runs on a copy, and
a `SystemExit` it raises becomes its exit status.

## Using it from Python

```python
from minishelly.env import Environment
from minishelly.expansion import expand_args
from minishelly.lexer import split_line

env = Environment.from_environ({"HOME": "/home/user"}, "/home/user")
words = split_line("echo $HOME | wc -c")
# ['echo', '$HOME', '|', 'wc', '-c']
expand_args(words, env, 0)
# ['echo', '/home/user', '|', 'wc', '-c']
```

Running a whole line with a builtin of your own:

```python
import sys

from minishelly.env import Environment
from minishelly.shell import handle_line, parse_line
from minishelly.state import ShellState


def echo(state, argv, stream):
    stream.write(" ".join(argv[1:]) + "\n")


state = ShellState(env=Environment.from_environ())
parse_line(state, "echo hello", lambda prompt: None)
handle_line(state, {"echo": echo})
print(state.status.code)
```

The modules:

- `minishelly.lexer` – `split_line`, `count_words`, `word_end`, `count_pipes`.
- `minishelly.quotes` – `check_open_quotes`, `clean_quotes`, `mark_special_echo`.
- `minishelly.expansion` – `expand_args`, `look_if_expans`,
  `split_expansions`, `confirm_expansion`, `expand_heredoc_line` and the
  helpers they use.
- `minishelly.env` – `Environment`, an ordered list of variables, and
  `split_entry`.
- `minishelly.redirects` – `RedirectKind`, `is_redirect`,
  `collect_redirects`, `parse_redirections`, `write_heredoc`, `has_heredoc`.
- `minishelly.paths` – `resolve_command`, `check_file`, `check_dir`.
- `minishelly.executor` – `Command`, `split_commands`, `build_command`,
  `run_pipeline`, `is_builtin`.
- `minishelly.shell` – `parse_line`, `handle_line`, `repl`,
  `install_signals` and `main`, the function behind the `minishelly`
  command.
- `minishelly.errors` – `ShellSyntaxError`, `ExitStatus` and the error
  reporting functions.
- `minishelly.state` – `Tokens` and `ShellState`.

## Tests

    pip install .[test]
    pytest