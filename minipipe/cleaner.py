"""Normalise a raw command line before it is parsed.

Whitespace runs are collapsed, pipes get spaces on both sides, redirection
operators are glued to their file names, variables are expanded and quotes
that protect nothing are dropped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from minipipe.syntax import is_quote, is_redir, is_token

_SPACE = " \t\n\v\f\r"


def _is_space(c: str) -> bool:
    return c != "" and c in _SPACE


def _at(line: str, i: int) -> str:
    return line[i] if 0 <= i < len(line) else ""


def expand_variable(line: str, i: int, env: Mapping[str, str]) -> tuple[str, int]:
    """Expand the variable whose ``$`` sits at ``line[i]``.

    Returns the replacement text and the number of characters consumed.
    A ``$`` with no name after it is consumed and yields nothing; an unknown
    name yields nothing as well.
    """
    end = i + 1
    while end < len(line):
        c = line[end]
        if _is_space(c) or is_quote(c) or is_token(c) or c == "$":
            break
        end += 1
    if end == i + 1:
        return "", 1
    name = line[i + 1:end]
    return env.get(name, ""), end - i


def _expands_here(line: str, i: int) -> bool:
    return _at(line, i - 1) != "\\" and _at(line, i + 1) != " "


def _copy_spaces(line: str, i: int, out: list[str]) -> int:
    if _is_space(_at(line, i)):
        out.append(line[i])
        i += 1
        while _is_space(_at(line, i)):
            i += 1
    return i


def _copy_quotes(line: str, i: int, env: Mapping[str, str], out: list[str]) -> int:
    quote = line[i]
    out.append(quote)
    i += 1
    while i < len(line) and line[i] != quote:
        if line[i] == "$" and quote == '"' and _expands_here(line, i):
            text, used = expand_variable(line, i, env)
            out.extend(text)
            i += used
        else:
            out.append(line[i])
            i += 1
    if i < len(line):
        out.append(line[i])
        i += 1
    return _copy_spaces(line, i, out)


def _copy_pipe(line: str, i: int, out: list[str]) -> int:
    if i > 0 and out and not _is_space(out[-1]):
        out.append(" ")
    out.append(line[i])
    i += 1
    if not _is_space(_at(line, i)):
        out.append(" ")
    return _copy_spaces(line, i, out)


def _copy_redirect(line: str, i: int, out: list[str]) -> int:
    if i > 0 and out and out[-1] != " ":
        out.append(" ")
    while is_redir(_at(line, i)):
        out.append(line[i])
        i += 1
    while _is_space(_at(line, i)):
        i += 1
    return i


def clean_line(line: str, env: Mapping[str, str]) -> str:
    """Return the normalised form of ``line`` with variables from ``env``."""
    out: list[str] = []
    i = 0
    while i < len(line):
        c = line[i]
        if is_quote(c):
            i = _copy_quotes(line, i, env, out)
        elif c == "|":
            i = _copy_pipe(line, i, out)
        elif is_redir(c):
            i = _copy_redirect(line, i, out)
        elif _is_space(c):
            i = _copy_spaces(line, i, out)
        elif c == "$" and _expands_here(line, i):
            text, used = expand_variable(line, i, env)
            out.extend(text)
            i += used
        else:
            out.append(c)
            i += 1
    return remove_useless_quotes("".join(out))


def remove_two(text: str, first: Optional[int], second: Optional[int]) -> str:
    """Return ``text`` without the characters at ``first`` and ``second``.

    Either index may be None, in which case only the other is removed.
    """
    for index in sorted((k for k in (first, second) if k is not None), reverse=True):
        text = text[:index] + text[index + 1:]
    return text


def remove_useless_quotes(line: str) -> str:
    """Drop quote pairs that enclose no whitespace and no pipe or redirection."""
    i = 0
    while i < len(line):
        if is_quote(line[i]):
            quote = line[i]
            first = i
            removable = True
            i += 1
            while i < len(line) and line[i] != quote:
                if _is_space(line[i]) or is_token(line[i]):
                    removable = False
                i += 1
            if i >= len(line):
                break
            if removable:
                line = remove_two(line, first, i)
                i -= 2
        i += 1
    return line