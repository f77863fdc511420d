"""Temporary files that hold here-document input."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from typing import Optional, Union

from minipipe.nodes import MAXARGS

PROMPT = "heredoc: "

PathLike = Union[str, "os.PathLike[str]"]


class HeredocError(Exception):
    """Raised when a here-document cannot be read, written or removed."""


def heredoc_names(count: int = MAXARGS) -> list[str]:
    """Names of the here-document files, one per possible redirection."""
    return [f"heredoc{n}" for n in range(count)]


def unlink_heredocs(names: Iterable[PathLike]) -> list[PathLike]:
    """Remove the here-document files that exist; return those removed.

    Missing files are skipped. Files that exist but cannot be removed are
    reported together in a HeredocError once all others have been tried.
    """
    removed: list[PathLike] = []
    failed: list[str] = []
    for name in names:
        try:
            os.unlink(name)
        except FileNotFoundError:
            continue
        except OSError:
            failed.append(os.fspath(name))
            continue
        removed.append(name)
    if failed:
        raise HeredocError("; ".join(f"{name}: permission" for name in failed))
    return removed


def write_heredoc(
    delimiter: str,
    path: PathLike,
    read_line: Callable[[str], Optional[str]],
) -> PathLike:
    """Append lines from ``read_line`` to ``path`` until ``delimiter`` is read.

    ``read_line`` is called with the prompt and returns a line, or None at
    end of input. Running out of input before the delimiter is an error.
    """
    try:
        with open(path, "a", encoding="utf-8") as out:
            while True:
                try:
                    line = read_line(PROMPT)
                except EOFError:
                    line = None
                if line is None:
                    raise HeredocError(f"end of input before delimiter {delimiter!r}")
                if line == delimiter:
                    break
                out.write(line + "\n")
                out.flush()
    except OSError as exc:
        raise HeredocError(f"{os.fspath(path)}: {exc.strerror or exc}") from exc
    return path