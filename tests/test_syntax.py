import pytest

from minipipe.syntax import (
    UNEXPECTED,
    ShellSyntaxError,
    check_line_quotes,
    check_quotes,
    check_redirects,
    is_quote,
    is_redir,
    is_token,
    skip_quotes,
    skip_token,
    strip_quotes,
    valid_line,
)


@pytest.mark.parametrize("c", ["|", "<", ">"])
def test_is_token_accepts_operators(c):
    assert is_token(c)


@pytest.mark.parametrize("c", ["a", " ", "'", "", "&"])
def test_is_token_rejects_others(c):
    assert not is_token(c)


def test_is_redir():
    assert is_redir("<") and is_redir(">")
    assert not is_redir("|")


def test_is_quote():
    assert is_quote("'") and is_quote('"')
    assert not is_quote("`")


def test_valid_line():
    assert valid_line("  ls ")
    assert not valid_line(" \t  ")
    assert not valid_line("")


def test_check_quotes_finds_matching_quote():
    line = "echo 'a \"b' c"
    end = check_quotes(line, 5)
    assert end > 5
    assert line[end] == line[5]
    assert line[6:end] == 'a "b'


def test_check_quotes_non_quote_returns_index():
    assert check_quotes("abc", 1) == 1


def test_check_quotes_unclosed_raises():
    with pytest.raises(ShellSyntaxError):
        check_quotes("echo 'abc", 5)


def test_check_line_quotes_spans():
    line = "a 'b' \"c\""
    spans = check_line_quotes(line)
    assert len(spans) == 2
    for start, end in spans:
        assert line[start] == line[end]
        assert is_quote(line[start])


def test_check_line_quotes_unclosed_raises():
    with pytest.raises(ShellSyntaxError):
        check_line_quotes("echo \"open 'x'")


def test_skip_quotes_unclosed_goes_to_end():
    line = "'abc"
    assert skip_quotes(line, 0) == len(line)


def test_skip_quotes_matching():
    line = "x\"yz\"w"
    end = skip_quotes(line, 1)
    assert line[end] == '"'
    assert line[2:end] == "yz"


def test_skip_token_plain_word():
    line = "abc def"
    end = skip_token(line, 0)
    assert line[:end + 1] == "abc"
    assert line[end + 1] == " "


def test_skip_token_keeps_quoted_spaces():
    line = 'echo "a b"c x'
    end = skip_token(line, 5)
    assert line[5:end + 1] == '"a b"c'


def test_skip_token_at_end_of_line():
    line = "word"
    assert skip_token(line, 0) == len(line) - 1


@pytest.mark.parametrize(
    "text, expected",
    [
        ('"hello"', "hello"),
        ("a'b c'd", "ab cd"),
        ("'abc", "'abc"),
        ('"it\'s"', "it's"),
        ("plain", "plain"),
    ],
)
def test_strip_quotes(text, expected):
    assert strip_quotes(text) == expected


def test_check_redirects_accepts_valid():
    assert check_redirects("cat < in | wc >> out") == ["<", "|", ">>"]


def test_check_redirects_ignores_quoted_pipe():
    assert check_redirects("echo '|'") == []


@pytest.mark.parametrize(
    "line, token",
    [
        ("| ls", "|"),
        ("   | ls", "|"),
        ("ls |", "newline"),
        ("ls | | wc", "|"),
        ("cat <", "newline"),
        ("cat > | wc", "|"),
        ("<<<<", "<<"),
        ("><", "<"),
    ],
)
def test_check_redirects_errors(line, token):
    with pytest.raises(ShellSyntaxError) as info:
        check_redirects(line)
    assert info.value.token == token
    assert str(info.value) == UNEXPECTED + token