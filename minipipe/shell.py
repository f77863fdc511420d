"""Interactive loop: read, check, clean and parse command lines."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Mapping, MutableMapping
from typing import Optional, TextIO

from minipipe.cleaner import clean_line
from minipipe.heredoc import HeredocError, unlink_heredocs
from minipipe.nodes import Command, walk
from minipipe.parser import Parser, TooManyArgumentsError
from minipipe.syntax import ShellSyntaxError, check_line_quotes, check_redirects, valid_line

PROMPT = "minishell: "
ERROR_PREFIX = "minishell: "
NO_ARGUMENTS = "This program does not accept arguments"

ReadLine = Callable[[str], Optional[str]]

_SPACE = " \t\n\v\f\r"


def _atoi(text: Optional[str]) -> int:
    """Leading integer of ``text``, 0 when there is none."""
    if not text:
        return 0
    text = text.lstrip(_SPACE)
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for c in text:
        if not c.isdigit():
            break
        digits += c
    return sign * int(digits) if digits else 0


def change_shlvl(env: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``env`` with SHLVL raised by one."""
    updated = dict(env)
    updated["SHLVL"] = str(_atoi(env.get("SHLVL")) + 1)
    return updated


def process_line(
    line: str,
    env: Mapping[str, str],
    read_line: Optional[ReadLine] = None,
) -> Optional[Command]:
    """Check, clean and parse one line; None for a blank line.

    Raises ShellSyntaxError for bad quotes or operators, TooManyArgumentsError
    for an overlong command and HeredocError when a here-document fails.
    """
    if not valid_line(line):
        return None
    check_line_quotes(line)
    check_redirects(line)
    cleaned = clean_line(line, env)
    return Parser(read_line).parse(cleaned)


def _read(read_line: ReadLine, prompt: str) -> Optional[str]:
    try:
        return read_line(prompt)
    except EOFError:
        return None


def shell_loop(
    read_line: ReadLine,
    env: MutableMapping[str, str],
    output: TextIO,
) -> list[Command]:
    """Read lines until end of input, writing each parsed tree to ``output``.

    Errors in a line are reported to ``output`` and the loop goes on.
    Returns the trees parsed, in order.
    """
    parsed: list[Command] = []
    cleanup = Parser(read_line).heredoc_paths
    while (line := _read(read_line, PROMPT)) is not None:
        try:
            tree = process_line(line, env, read_line)
        except (ShellSyntaxError, TooManyArgumentsError, HeredocError) as exc:
            output.write(f"{ERROR_PREFIX}{exc}\n")
            continue
        finally:
            try:
                unlink_heredocs(cleanup)
            except HeredocError as exc:
                output.write(f"{ERROR_PREFIX}{exc}\n")
        if tree is None:
            continue
        parsed.append(tree)
        for text in walk(tree):
            output.write(text + "\n")
    return parsed


def _console_read(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def main(argv: Optional[list[str]] = None) -> int:
    """Run the shell on standard input; print the environment on exit."""
    args = sys.argv if argv is None else argv
    if len(args) > 1:
        sys.stderr.write(NO_ARGUMENTS + "\n")
    env = dict(os.environ)
    shell_loop(_console_read, env, sys.stdout)
    for key, value in env.items():
        print(f"{key}={value}")
    return 0