"""Run a chain of commands between an input file and an output file.

The first command reads ``infile``, each command feeds the next through a
pipe, and the last one writes to ``outfile``, which is created or truncated.
Commands are split on single spaces and looked up along PATH.
"""

from __future__ import annotations

import errno
import os
import subprocess
import sys
from collections.abc import Iterable, Mapping
from typing import IO, Optional, Union

USAGE = "Implementation: ./pipex infile 'cmd1' 'cmd2' outfile"
NO_SUCH_FILE = "No such file of directory: "
MAX_PATH = 1024

_Stream = Union[int, IO[bytes]]


class PipexError(Exception):
    """Raised when a file cannot be opened or a command cannot be started."""


def find_path_env(name: str, env: Mapping[str, str]) -> Optional[str]:
    """Value of the first variable whose name matches ``name``.

    Only the first four characters of the names are compared.
    """
    for key, value in env.items():
        if key[:4] == name[:4]:
            return value
    return None


def find_path(cmd: str, env: Mapping[str, str]) -> str:
    """Full path of the program named by the first word of ``cmd``.

    Each PATH directory is tried in order; the first executable found wins.
    Without PATH, or when nothing is found, ``cmd`` is returned unchanged.
    """
    path = find_path_env("PATH", env)
    if path is None:
        return cmd
    words = [word for word in cmd.split(" ") if word]
    if not words:
        return cmd
    for directory in (part for part in path.split(":") if part):
        candidate = f"{directory}/{words[0]}"[:MAX_PATH]
        if os.access(candidate, os.F_OK | os.X_OK):
            return candidate
    return cmd


def first_word(cmd: Optional[str], sep: str = " ") -> Optional[str]:
    """The first word of ``cmd`` between separators, or "" if there is none."""
    if cmd is None:
        return None
    stripped = cmd.lstrip(sep)
    end = stripped.find(sep)
    return stripped if end == -1 else stripped[:end]


def is_spaces_only(text: str) -> bool:
    """True for a non-empty string with no letters in it."""
    if not text:
        return False
    return not any(c.isascii() and c.isalpha() for c in text)


def _describe(text: str, strerror: str) -> str:
    if is_spaces_only(text):
        return NO_SUCH_FILE
    return f"{strerror}: {first_word(text, ' ')}"


def _strerror(exc: OSError) -> str:
    if exc.strerror:
        return exc.strerror
    if exc.errno:
        return os.strerror(exc.errno)
    return str(exc)


def _spawn(
    cmd: str,
    env: Mapping[str, str],
    stdin: _Stream,
    stdout: _Stream,
) -> subprocess.Popen:
    path = find_path(cmd, env)
    argv = [word for word in cmd.split(" ") if word]
    if not argv:
        raise PipexError(_describe(cmd, os.strerror(errno.ENOENT)))
    # The path is used as given, never searched for again.
    executable = path if "/" in path else os.path.join(os.curdir, path)
    try:
        return subprocess.Popen(
            argv,
            executable=executable,
            stdin=stdin,
            stdout=stdout,
            env=dict(env),
        )
    except OSError as exc:
        raise PipexError(_describe(cmd, _strerror(exc))) from exc


def run_pipeline(
    infile: str,
    commands: Iterable[str],
    outfile: str,
    env: Mapping[str, str],
) -> int:
    """Run ``commands`` from ``infile`` to ``outfile``; return the last exit code."""
    commands = list(commands)
    if not commands:
        raise PipexError("no commands given")
    try:
        source = open(infile, "rb")
    except OSError as exc:
        raise PipexError(_describe(infile, _strerror(exc))) from exc
    try:
        fd = os.open(outfile, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o777)
    except OSError as exc:
        source.close()
        raise PipexError(_describe(outfile, _strerror(exc))) from exc
    target = os.fdopen(fd, "wb")

    processes: list[subprocess.Popen] = []
    with source, target:
        stdin: IO[bytes] = source
        try:
            for index, cmd in enumerate(commands):
                last = index == len(commands) - 1
                process = _spawn(cmd, env, stdin, target if last else subprocess.PIPE)
                if stdin is not source:
                    stdin.close()
                processes.append(process)
                if not last:
                    stdin = process.stdout
        except PipexError:
            if stdin is not source:
                stdin.close()
            for process in processes:
                process.kill()
                process.wait()
            raise
        codes = [process.wait() for process in processes]
    return codes[-1]


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line entry: ``pipex infile cmd1 cmd2 ... outfile``."""
    args = sys.argv if argv is None else argv
    if len(args) < 5:
        sys.stderr.write(USAGE)
        return 1
    try:
        run_pipeline(args[1], args[2:-1], args[-1], dict(os.environ))
    except PipexError as exc:
        sys.stderr.write(f"pipex: {exc}\n")
        return 1
    return 0