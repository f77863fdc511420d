"""Command-line parsing with pipes, redirections and heredocs, a pipex runner and an xv6-style shell."""

__version__ = "0.1.0"

__all__ = ["__version__"]