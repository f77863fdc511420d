"""Character classes, quote handling and syntax checks for command lines."""

from __future__ import annotations

UNEXPECTED = "syntax error near unexpected token "
UNCLOSED = "unclosed quotes"

_SPACE = " \t\n\v\f\r"
_TOKENS = ("|", "<", ">")
_REDIRS = ("<", ">")
_QUOTES = ("'", '"')


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be accepted."""

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token

    @classmethod
    def unexpected(cls, token: str) -> "ShellSyntaxError":
        return cls(UNEXPECTED + token, token)


def _at(line: str, i: int) -> str:
    return line[i] if 0 <= i < len(line) else ""


def _is_space(c: str) -> bool:
    return c != "" and c in _SPACE


def is_token(c: str) -> bool:
    """True for a pipe or redirection character."""
    return c in _TOKENS


def is_redir(c: str) -> bool:
    """True for a redirection character."""
    return c in _REDIRS


def is_quote(c: str) -> bool:
    """True for a single or double quote."""
    return c in _QUOTES


def valid_line(line: str) -> bool:
    """True if the line holds anything besides whitespace."""
    return any(not _is_space(c) for c in line)


def check_quotes(line: str, i: int) -> int:
    """Index of the quote closing the one at ``i``; ``i`` if it is no quote.

    Raises ShellSyntaxError if the quote is never closed.
    """
    if not is_quote(_at(line, i)):
        return i
    close = line.find(line[i], i + 1)
    if close == -1:
        raise ShellSyntaxError(UNCLOSED)
    return close


def check_line_quotes(line: str) -> list[tuple[int, int]]:
    """Check every quote in the line is closed; return the quoted spans."""
    spans: list[tuple[int, int]] = []
    i = 0
    while i < len(line):
        if is_quote(line[i]):
            end = check_quotes(line, i)
            spans.append((i, end))
            i = end
        i += 1
    return spans


def skip_quotes(line: str, i: int) -> int:
    """Index of the closing quote, or the end of the line if unclosed."""
    if not is_quote(_at(line, i)):
        return i
    close = line.find(line[i], i + 1)
    return len(line) if close == -1 else close


def skip_token(line: str, i: int) -> int:
    """Index of the last character of the word starting at ``i``."""
    while i < len(line) and not _is_space(line[i]):
        if is_quote(line[i]):
            i = skip_quotes(line, i)
        i += 1
    return i - 1


def strip_quotes(text: str) -> str:
    """Remove every pair of matching quotes, keeping what they enclose."""
    i = 0
    while i < len(text):
        if is_quote(text[i]):
            first = i
            close = skip_quotes(text, i)
            if close < len(text):
                text = text[:first] + text[first + 1:close] + text[close + 1:]
                i = close - 2
            else:
                i = close
        i += 1
    return text


def _scan_words(line: str, i: int) -> tuple[int, bool]:
    i += 1
    has_word = False
    while i < len(line) and not is_token(line[i]):
        if not _is_space(line[i]):
            has_word = True
        i += 1
    return i, has_word


def _check_pipe(line: str, i: int) -> None:
    i, has_word = _scan_words(line, i)
    if not has_word and _at(line, i) == "|":
        raise ShellSyntaxError.unexpected("|")
    if not has_word and i >= len(line):
        raise ShellSyntaxError.unexpected("newline")


def _redir_error_token(line: str, i: int) -> str:
    j = 0
    while j < 2 and is_token(_at(line, i + j)):
        j += 1
    if is_token(_at(line, i)) != is_token(_at(line, i + 1)):
        j = 1
    return line[i:i + j]


def _check_redir(line: str, i: int) -> None:
    i, has_word = _scan_words(line, i)
    if not has_word and is_token(_at(line, i)):
        raise ShellSyntaxError.unexpected(_redir_error_token(line, i))
    if not has_word and i >= len(line):
        raise ShellSyntaxError.unexpected("newline")


def check_redirects(line: str) -> list[str]:
    """Check pipes and redirections; return the operators in order.

    Raises ShellSyntaxError naming the unexpected token.
    """
    operators: list[str] = []
    if line.lstrip(_SPACE).startswith("|"):
        raise ShellSyntaxError.unexpected("|")
    i = 0
    while i < len(line):
        if is_quote(line[i]):
            i = skip_quotes(line, i) + 1
        c = _at(line, i)
        if c == "|":
            _check_pipe(line, i)
            operators.append(c)
        elif is_token(c):
            if _at(line, i + 1) == c:
                i += 1
                operators.append(c * 2)
            else:
                operators.append(c)
            _check_redir(line, i)
        if c:
            i += 1
    return operators