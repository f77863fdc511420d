[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "minipipe"
version = "0.1.0"
description = "A command-line parser shell with quote-aware cleaning, pipes, redirections and heredocs, plus a pipex runner and an xv6-style shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "pipeline", "parser", "redirection", "heredoc", "pipex"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minipipe = "minipipe.shell:main"
minipipe-pipex = "minipipe.pipex:main"
minipipe-xv6sh = "minipipe.xv6sh:main"

[tool.setuptools.packages.find]
include = ["minipipe*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
