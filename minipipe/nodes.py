"""Command tree nodes and a printable walk over them."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Union

MAXARGS = 20


class NodeType(enum.IntEnum):
    EXEC = 1
    REDIR = 2
    PIPE = 3


@dataclass
class ExecCmd:
    """A simple command with its arguments."""

    argv: list[str] = field(default_factory=list)

    @property
    def type(self) -> NodeType:
        return NodeType.EXEC


@dataclass
class RedirCmd:
    """A redirection wrapping another command."""

    cmd: Optional["Command"]
    file: str
    mode: int = -1
    fd: int = -1
    append: bool = False

    @property
    def type(self) -> NodeType:
        return NodeType.REDIR


@dataclass
class PipeCmd:
    """Two commands joined by a pipe."""

    left: Optional["Command"]
    right: Optional["Command"]

    @property
    def type(self) -> NodeType:
        return NodeType.PIPE


Command = Union[ExecCmd, RedirCmd, PipeCmd]


def walk(cmd: Optional[Command]) -> Iterator[str]:
    """Yield lines describing the tree rooted at ``cmd``."""
    if cmd is None:
        return
    if isinstance(cmd, ExecCmd):
        yield f"EXEC node {int(cmd.type)}. "
        yield from cmd.argv
        yield ""
    elif isinstance(cmd, RedirCmd):
        yield f"REDIR cmd: {cmd.fd}"
        yield f"File name:{cmd.file}. "
        yield from walk(cmd.cmd)
    elif isinstance(cmd, PipeCmd):
        yield f"PIPE node {int(cmd.type)}. "
        yield ""
        yield from walk(cmd.left)
        yield from walk(cmd.right)