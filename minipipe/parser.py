"""Turn a cleaned command line into a tree of commands."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator
from typing import Optional

from minipipe.heredoc import HeredocError, PathLike, heredoc_names, write_heredoc
from minipipe.nodes import MAXARGS, Command, ExecCmd, NodeType, PipeCmd, RedirCmd
from minipipe.syntax import is_quote, is_redir, is_token, skip_quotes, skip_token, strip_quotes

_SPACE = " \t\n\v\f\r"

READ_MODE = os.O_RDONLY
TRUNCATE_MODE = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
APPEND_MODE = os.O_WRONLY | os.O_CREAT | os.O_APPEND


class TooManyArgumentsError(ValueError):
    """Raised when a command has more than MAXARGS arguments."""


def _is_space(c: str) -> bool:
    return c != "" and c in _SPACE


def peek(line: str, start: int, end: int, token: NodeType) -> Optional[int]:
    """Index of the first pipe or redirection in ``line[start:end]``.

    ``token`` selects what to look for: NodeType.PIPE or NodeType.REDIR.
    Characters inside quotes are ignored. Returns None if there is none.
    """
    end = min(end, len(line))
    i = start
    while i < end:
        if is_quote(line[i]):
            i = skip_quotes(line, i)
        c = line[i] if i < len(line) else ""
        if token == NodeType.REDIR and is_redir(c):
            return i
        if token == NodeType.PIPE and c == "|":
            return i
        i += 1
    return None


def get_token_end(line: str, start: int) -> int:
    """Index just past the word that starts at ``start``; quotes are kept whole."""
    return skip_token(line, start) + 1


def get_redir_path(redir: str) -> str:
    """The file name that follows the operator at the start of ``redir``."""
    i = 0
    while i < len(redir) and is_redir(redir[i]):
        i += 1
    name_start = i
    while i < len(redir) and not _is_space(redir[i]):
        if is_quote(redir[i]):
            i = skip_quotes(redir, i)
        i += 1
    return strip_quotes(redir[name_start:i])


def infile_or_outfile(char: str) -> int:
    """0 for an input redirection, 1 for an output one, -1 otherwise."""
    if char == "<":
        return 0
    if char == ">":
        return 1
    return -1


class Parser:
    """Builds command trees, reading here-documents as they are met."""

    def __init__(
        self,
        read_line: Optional[Callable[[str], Optional[str]]] = None,
        heredoc_paths: Optional[Iterable[PathLike]] = None,
    ) -> None:
        self.read_line = read_line if read_line is not None else input
        self.heredoc_paths = (
            list(heredoc_paths) if heredoc_paths is not None else heredoc_names()
        )
        self._heredocs: Iterator[PathLike] = iter(self.heredoc_paths)

    def parse(self, cline: str) -> Command:
        """Parse a cleaned line into pipes, redirections and commands."""
        self._heredocs = iter(self.heredoc_paths)
        end = len(cline)
        segments: list[tuple[int, int]] = []
        start = 0
        while (bar := peek(cline, start, end, NodeType.PIPE)) is not None:
            segments.append((start, bar))
            start = bar + 1
        segments.append((start, end))
        commands = [self._parse_exec(cline, s, e) for s, e in segments]
        tree = commands[-1]
        for cmd in reversed(commands[:-1]):
            tree = PipeCmd(cmd, tree)
        return tree

    def _parse_exec(self, line: str, start: int, end: int) -> Command:
        if peek(line, start, end, NodeType.REDIR) is None:
            return self._parse_argv(line, start, end)
        redirs: list[RedirCmd] = []
        i = start
        while i < end:
            c = line[i]
            if is_quote(c):
                i = skip_quotes(line, i) + 1
                continue
            if is_redir(c):
                token_end = get_token_end(line, i)
                redirs.append(self._make_redir(line[i:token_end]))
                i = token_end
                continue
            i += 1
        command: Command = self._parse_argv(line, start, end)
        for redir in reversed(redirs):
            redir.cmd = command
            command = redir
        return command

    def _make_redir(self, word: str) -> RedirCmd:
        if word.startswith("<<"):
            delimiter = strip_quotes(word[2:])
            try:
                path = next(self._heredocs)
            except StopIteration:
                raise HeredocError("too many here-documents") from None
            write_heredoc(delimiter, path, self.read_line)
            return RedirCmd(None, os.fspath(path), mode=READ_MODE, fd=0)
        fd = infile_or_outfile(word[0])
        append = word.startswith(">>")
        if fd == 0:
            mode = READ_MODE
        elif append:
            mode = APPEND_MODE
        else:
            mode = TRUNCATE_MODE
        return RedirCmd(None, get_redir_path(word), mode=mode, fd=fd, append=append)

    @staticmethod
    def _parse_argv(line: str, start: int, end: int) -> ExecCmd:
        argv: list[str] = []
        i = start
        end = min(end, len(line))
        while i < end:
            c = line[i]
            if _is_space(c):
                i += 1
                continue
            stop = get_token_end(line, i)
            if not is_token(c):
                if len(argv) == MAXARGS:
                    raise TooManyArgumentsError("argv: too many arguments")
                argv.append(strip_quotes(line[i:stop]))
            i = stop
        return ExecCmd(argv)