"""Mutable state held by the shell between and during command lines."""

from __future__ import annotations

from dataclasses import dataclass, field

from minishelly.env import Environment
from minishelly.errors import ExitStatus

PROMPT = "\x1b[95mminishell\033[0;37m$ "


@dataclass
class Tokens:
    """The words of one command line and what parsing found in them."""

    args: list[str] = field(default_factory=list)
    quote: int = 0
    here_file: str | None = None
    array_count: int = 0
    pipe_count: int = 0
    redirect_count: int = 0
    dollar_count: int = 0
    out_a_count: int = 0
    in_a_count: int = 0
    input_file: str | None = None
    output_files: list[str | None] = field(default_factory=list)
    action: bool = False
    redirect_in: bool = False
    redirect_out: bool = False
    redirect_append: bool = False
    ignore_heredoc: bool = False


@dataclass
class ShellState:
    """Everything the shell keeps across command lines."""

    env: Environment = field(default_factory=Environment)
    status: ExitStatus = field(default_factory=ExitStatus)
    tokens: Tokens = field(default_factory=Tokens)
    prompt: str = PROMPT
    path: str | None = None

    def reset_line(self) -> None:
        """Drop the words and files of the line just handled."""
        self.tokens.args = []
        self.tokens.input_file = None
        self.tokens.output_files = []