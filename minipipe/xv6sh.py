"""A small shell with pipes, lists, background jobs, blocks and redirections.

Lines are parsed into a tree of nodes by a recursive-descent parser and the
tree is run with each simple command started as a child process.
"""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from dataclasses import dataclass, field
from typing import Optional, Union

MAXARGS = 10
WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
PROMPT = "$ "
LINE_SIZE = 100

READ_MODE = os.O_RDONLY
WRITE_MODE = os.O_WRONLY | os.O_CREAT


class ShellPanic(Exception):
    """Raised when a line cannot be parsed or a command tree cannot be run."""

    def __init__(self, message: str, leftovers: Optional[str] = None) -> None:
        super().__init__(message)
        self.leftovers = leftovers


@dataclass
class ExecNode:
    """A program and its arguments."""

    argv: list[str] = field(default_factory=list)


@dataclass
class RedirNode:
    """Runs ``cmd`` with descriptor ``fd`` replaced by ``file`` opened with ``mode``."""

    cmd: "Node"
    file: str
    mode: int
    fd: int


@dataclass
class PipeNode:
    """Output of ``left`` feeds input of ``right``."""

    left: "Node"
    right: "Node"


@dataclass
class ListNode:
    """Runs ``left`` to completion, then ``right``."""

    left: "Node"
    right: "Node"


@dataclass
class BackNode:
    """Starts ``cmd`` without waiting for it."""

    cmd: "Node"


Node = Union[ExecNode, RedirNode, PipeNode, ListNode, BackNode]


class Tokenizer:
    """Splits a line into words and operator symbols."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def rest(self) -> str:
        return self.text[self.pos:]

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self, tokens: str) -> bool:
        """Skip whitespace; True if the next character is one of ``tokens``."""
        self._skip_whitespace()
        return self.pos < len(self.text) and self.text[self.pos] in tokens

    def get_token(self) -> tuple[str, str]:
        """Consume the next token and return its kind and text.

        The kind is the symbol itself, ``+`` for ``>>``, ``a`` for a word
        and the empty string at the end of the line.
        """
        self._skip_whitespace()
        start = self.pos
        text = self.text
        if self.pos >= len(text):
            return "", ""
        c = text[self.pos]
        if c in "|();&<":
            kind = c
            self.pos += 1
        elif c == ">":
            kind = ">"
            self.pos += 1
            if self.pos < len(text) and text[self.pos] == ">":
                kind = "+"
                self.pos += 1
        else:
            kind = "a"
            while (
                self.pos < len(text)
                and text[self.pos] not in WHITESPACE
                and text[self.pos] not in SYMBOLS
            ):
                self.pos += 1
        word = text[start:self.pos]
        self._skip_whitespace()
        return kind, word


def parse_command(text: str) -> Node:
    """Parse a whole line; raise ShellPanic on any syntax error."""
    tokens = Tokenizer(text)
    cmd = _parse_line(tokens)
    tokens.peek("")
    if not tokens.at_end:
        raise ShellPanic("syntax", leftovers=tokens.rest)
    return cmd


def _parse_line(tokens: Tokenizer) -> Node:
    cmd = _parse_pipe(tokens)
    while tokens.peek("&"):
        tokens.get_token()
        cmd = BackNode(cmd)
    if tokens.peek(";"):
        tokens.get_token()
        cmd = ListNode(cmd, _parse_line(tokens))
    return cmd


def _parse_pipe(tokens: Tokenizer) -> Node:
    cmd = _parse_exec(tokens)
    if tokens.peek("|"):
        tokens.get_token()
        cmd = PipeNode(cmd, _parse_pipe(tokens))
    return cmd


def _parse_redirs(cmd: Node, tokens: Tokenizer) -> Node:
    while tokens.peek("<>"):
        kind, _ = tokens.get_token()
        word_kind, word = tokens.get_token()
        if word_kind != "a":
            raise ShellPanic("missing file for redirection")
        if kind == "<":
            cmd = RedirNode(cmd, word, READ_MODE, 0)
        else:
            cmd = RedirNode(cmd, word, WRITE_MODE, 1)
    return cmd


def _parse_block(tokens: Tokenizer) -> Node:
    if not tokens.peek("("):
        raise ShellPanic("parseblock")
    tokens.get_token()
    cmd = _parse_line(tokens)
    if not tokens.peek(")"):
        raise ShellPanic("syntax - missing )")
    tokens.get_token()
    return _parse_redirs(cmd, tokens)


def _parse_exec(tokens: Tokenizer) -> Node:
    if tokens.peek("("):
        return _parse_block(tokens)
    exec_node = ExecNode()
    ret = _parse_redirs(exec_node, tokens)
    while not tokens.peek("|)&;"):
        kind, word = tokens.get_token()
        if kind == "":
            break
        if kind != "a":
            raise ShellPanic("syntax")
        exec_node.argv.append(word)
        if len(exec_node.argv) >= MAXARGS:
            raise ShellPanic("too many args")
        ret = _parse_redirs(ret, tokens)
    return ret


def run_command(cmd: Optional[Node]) -> int:
    """Run a command tree with the current standard streams; return its status."""
    return _run(cmd, None, None)


def _run(cmd: Optional[Node], stdin: Optional[int], stdout: Optional[int]) -> int:
    if cmd is None:
        return 0
    if isinstance(cmd, ExecNode):
        return _run_exec(cmd, stdin, stdout)
    if isinstance(cmd, RedirNode):
        return _run_redir(cmd, stdin, stdout)
    if isinstance(cmd, ListNode):
        _run(cmd.left, stdin, stdout)
        return _run(cmd.right, stdin, stdout)
    if isinstance(cmd, PipeNode):
        return _run_pipe(cmd, stdin, stdout)
    if isinstance(cmd, BackNode):
        _run_background(cmd, stdin, stdout)
        return 0
    raise ShellPanic("runcmd")


def _run_exec(cmd: ExecNode, stdin: Optional[int], stdout: Optional[int]) -> int:
    if not cmd.argv:
        return 0
    try:
        process = subprocess.Popen(cmd.argv, stdin=stdin, stdout=stdout)
    except OSError:
        print(f"exec {cmd.argv[0]} failed", file=sys.stderr)
        return 1
    return process.wait()


def _run_redir(cmd: RedirNode, stdin: Optional[int], stdout: Optional[int]) -> int:
    try:
        fd = os.open(cmd.file, cmd.mode, 0o666)
    except OSError:
        print(f"open {cmd.file} failed", file=sys.stderr)
        return 1
    try:
        if cmd.fd == 0:
            return _run(cmd.cmd, fd, stdout)
        return _run(cmd.cmd, stdin, fd)
    finally:
        os.close(fd)


def _run_pipe(cmd: PipeNode, stdin: Optional[int], stdout: Optional[int]) -> int:
    read_end, write_end = os.pipe()

    def run_left() -> None:
        try:
            _run(cmd.left, stdin, write_end)
        finally:
            os.close(write_end)

    writer = threading.Thread(target=run_left)
    writer.start()
    try:
        status = _run(cmd.right, read_end, stdout)
    finally:
        os.close(read_end)
    writer.join()
    return status


def _run_background(cmd: BackNode, stdin: Optional[int], stdout: Optional[int]) -> None:
    # The job keeps its own copies of the descriptors, which the caller may close.
    own_in = os.dup(stdin) if stdin is not None else None
    own_out = os.dup(stdout) if stdout is not None else None

    def job() -> None:
        try:
            _run(cmd.cmd, own_in, own_out)
        finally:
            for fd in (own_in, own_out):
                if fd is not None:
                    os.close(fd)

    threading.Thread(target=job, daemon=True).start()


def main(argv: Optional[list[str]] = None) -> int:
    """Read commands from standard input and run them until end of input."""
    while True:
        sys.stderr.write(PROMPT)
        sys.stderr.flush()
        line = sys.stdin.readline(LINE_SIZE - 1)
        if not line:
            break
        if line.startswith("cd "):
            target = line[3:].removesuffix("\n")
            try:
                os.chdir(target)
            except OSError:
                print(f"cannot cd {target}", file=sys.stderr)
            continue
        try:
            run_command(parse_command(line))
        except ShellPanic as exc:
            if exc.leftovers is not None:
                print(f"leftovers: {exc.leftovers}", file=sys.stderr)
            print(exc, file=sys.stderr)
    return 0