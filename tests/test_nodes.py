from minipipe.nodes import ExecCmd, NodeType, PipeCmd, RedirCmd, walk


def test_node_types_match_constants():
    assert ExecCmd().type == NodeType.EXEC == 1
    assert RedirCmd(None, "f").type == NodeType.REDIR == 2
    assert PipeCmd(None, None).type == NodeType.PIPE == 3


def test_walk_none_is_empty():
    assert list(walk(None)) == []


def test_walk_exec_lists_arguments():
    lines = list(walk(ExecCmd(["ls", "-l"])))
    assert lines[0] == "EXEC node 1. "
    assert lines[1:3] == ["ls", "-l"]
    assert lines[-1] == ""


def test_walk_redir_then_child():
    child = ExecCmd(["cat"])
    redir = RedirCmd(child, "out.txt", fd=1)
    lines = list(walk(redir))
    assert lines[:2] == ["REDIR cmd: 1", "File name:out.txt. "]
    assert lines[2:] == list(walk(child))


def test_walk_pipe_visits_left_then_right():
    left = ExecCmd(["grep", "x"])
    right = RedirCmd(ExecCmd(["sort"]), "o", fd=1)
    lines = list(walk(PipeCmd(left, right)))
    assert lines[:2] == ["PIPE node 3. ", ""]
    assert lines[2:] == list(walk(left)) + list(walk(right))


def test_walk_nested_pipes():
    inner = PipeCmd(ExecCmd(["b"]), ExecCmd(["c"]))
    outer = PipeCmd(ExecCmd(["a"]), inner)
    lines = list(walk(outer))
    assert lines.count("PIPE node 3. ") == 2
    assert [line for line in lines if line in ("a", "b", "c")] == ["a", "b", "c"]