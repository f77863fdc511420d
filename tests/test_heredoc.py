import os

import pytest

from minipipe.heredoc import (
    PROMPT,
    HeredocError,
    heredoc_names,
    unlink_heredocs,
    write_heredoc,
)


def _reader(lines, prompts=None):
    feed = iter(lines)

    def read_line(prompt):
        if prompts is not None:
            prompts.append(prompt)
        return next(feed, None)

    return read_line


def test_heredoc_names_prefix_and_order():
    assert heredoc_names(3) == ["heredoc0", "heredoc1", "heredoc2"]


def test_heredoc_names_default_count():
    names = heredoc_names()
    assert len(names) == 20
    assert len(set(names)) == len(names)


def test_write_heredoc_until_delimiter(tmp_path):
    path = tmp_path / "heredoc0"
    prompts = []
    result = write_heredoc("EOF", path, _reader(["one", "two", "EOF", "after"], prompts))
    assert result == path
    assert path.read_text(encoding="utf-8") == "one\ntwo\n"
    assert prompts == [PROMPT] * 3
    assert PROMPT == "heredoc: "


def test_write_heredoc_needs_exact_match(tmp_path):
    path = tmp_path / "heredoc1"
    write_heredoc("EOF", path, _reader(["EOFX", "EO", "EOF"]))
    assert path.read_text(encoding="utf-8") == "EOFX\nEO\n"


def test_write_heredoc_appends(tmp_path):
    path = tmp_path / "heredoc2"
    path.write_text("old\n", encoding="utf-8")
    write_heredoc("end", path, _reader(["new", "end"]))
    assert path.read_text(encoding="utf-8") == "old\nnew\n"


def test_write_heredoc_end_of_input(tmp_path):
    path = tmp_path / "heredoc3"
    with pytest.raises(HeredocError):
        write_heredoc("EOF", path, _reader(["line"]))
    assert path.read_text(encoding="utf-8") == "line\n"


def test_write_heredoc_eoferror(tmp_path):
    def read_line(prompt):
        raise EOFError

    with pytest.raises(HeredocError):
        write_heredoc("EOF", tmp_path / "heredoc4", read_line)


def test_write_heredoc_bad_path(tmp_path):
    with pytest.raises(HeredocError):
        write_heredoc("EOF", tmp_path / "missing" / "heredoc0", _reader(["EOF"]))


def test_unlink_heredocs_removes_existing(tmp_path):
    names = [tmp_path / name for name in heredoc_names(4)]
    names[0].write_text("a", encoding="utf-8")
    names[2].write_text("b", encoding="utf-8")
    removed = unlink_heredocs(names)
    assert removed == [names[0], names[2]]
    assert not any(os.path.exists(n) for n in names)


def test_unlink_heredocs_nothing_there(tmp_path):
    names = [tmp_path / name for name in heredoc_names(2)]
    assert unlink_heredocs(names) == []


def test_unlink_heredocs_directory_fails(tmp_path):
    target = tmp_path / "heredoc0"
    target.mkdir()
    with pytest.raises(HeredocError):
        unlink_heredocs([target])
    assert target.is_dir()