# minipipe

Three small command-line tools around shell command lines:

- **minipipe**: an interactive line reader that checks, cleans and parses
  command lines into a tree of pipes, redirections and commands, and prints
  that tree.
- **minipipe-pipex**: runs `infile "cmd1" "cmd2" ... outfile`, passing the
  contents of `infile` through each command in turn and writing the result
  to `outfile`.
- **minipipe-xv6sh**: a tiny shell in the style of the classic teaching
  shell, with `|`, `<`, `>`, `>>`, `;`, `&` and parenthesised blocks. It
  does run commands.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## minipipe

```
minipipe
```

The prompt is `minishell: `. Each line goes through these steps:

1. Blank lines are skipped.
2. Every quote must be closed, otherwise `unclosed quotes` is reported.
3. Pipes and redirections are checked; a line such as `| ls`, `ls | | wc`
   or `cat <` is reported as `syntax error near unexpected token ...`.
4. The line is cleaned: runs of whitespace collapse to one, pipes get a
   space on each side, redirection operators are joined to their file name,
   `$NAME` is expanded from the environment (outside single quotes; unknown
   names expand to nothing) and quotes that enclose no whitespace, pipe or
   redirection are dropped.
5. The clean line is parsed. A command may have at most 20 arguments.
   `<` and `>` redirect to a file, `>>` appends, and `<< DELIM` reads a
   heredoc: you are prompted with `heredoc: ` until a line equal to
   `DELIM` is entered. Heredoc text is kept in files named `heredoc0`,
   `heredoc1`, ... in the current directory, which are removed again after
   every line.
6. The resulting tree is printed, one node per block of lines.

Errors are printed with a `minishell: ` prefix and the prompt returns. At
end of input (Ctrl-D) the environment is printed as `NAME=value` lines.
Command-line arguments are not accepted; a warning is printed if any are
given.

### What it does not do

`minipipe` parses and displays command lines; it does not execute them.
There are no built-in commands such as `cd`, `echo` or `exit`, no exit
status, and no signal handling beyond what the Python interpreter provides.
`minipipe.shell.change_shlvl` returns a copy of an environment with `SHLVL`
raised by one, but the shell does not start itself again.

## minipipe-pipex

```
minipipe-pipex input.txt "grep foo" "sort" output.txt
```

At least two commands are required; otherwise a usage line is printed and
the exit status is 1. Each command is split on spaces and its program is
looked up in the directories of `PATH`. The output file is created (mode
0777 before the umask) or truncated. If a file cannot be opened or a
program cannot be started, `pipex: ` and the reason are printed and the
exit status is 1.

## minipipe-xv6sh

```
minipipe-xv6sh
```

Reads commands after a `$ ` prompt (on standard error) until end of input,
at most 99 characters per read. Each simple command runs as a child
process. Supported:

- `a | b` pipes, `a ; b` runs in sequence, `a &` runs in the background,
  `( ... )` groups commands.
- `< file` reads from a file; `> file` and `>> file` both open the file for
  writing, creating it if needed, without truncating or appending.
- `cd dir` at the start of a line changes the shell's own directory.

A command may have at most 9 arguments. Syntax errors are reported and the
next line is read.

## Using it from Python

```python
from minipipe.shell import process_line
from minipipe.nodes import walk

tree = process_line('echo "$HOME" | wc -c > out.txt', {"HOME": "/home/user"}, input)
for line in walk(tree):
    print(line)
```

`process_line` returns `None` for a blank line and raises
`ShellSyntaxError`, `TooManyArgumentsError` or `HeredocError` on errors.

Other modules:

- `minipipe.syntax`: `valid_line`, `check_line_quotes`, `check_redirects`,
  `skip_quotes`, `skip_token`, `strip_quotes` and `ShellSyntaxError`.
- `minipipe.cleaner`: `clean_line`, `expand_variable`,
  `remove_useless_quotes`, `remove_two`.
- `minipipe.parser`: `Parser` (with `parse`), `peek`, `get_token_end`,
  `get_redir_path`, `infile_or_outfile`, `TooManyArgumentsError`.
- `minipipe.nodes`: `ExecCmd`, `RedirCmd`, `PipeCmd`, `NodeType`, `walk`.
- `minipipe.heredoc`: `heredoc_names`, `write_heredoc`, `unlink_heredocs`,
  `HeredocError`.
- `minipipe.pipex`: `run_pipeline`, `find_path`, `find_path_env`,
  `first_word`, `is_spaces_only`, `PipexError`.
- `minipipe.xv6sh`: `parse_command`, `run_command`, `Tokenizer`, the node
  classes `ExecNode`, `RedirNode`, `PipeNode`, `ListNode`, `BackNode`, and
  `ShellPanic`.