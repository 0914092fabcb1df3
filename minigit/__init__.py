"""A small version control system with commits, branches, merges and diffs."""

__version__ = "0.1.0"

__all__ = ["cli", "graph", "storage", "utils", "vcs"]