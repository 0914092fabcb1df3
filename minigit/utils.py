"""Small text helpers: trimming, error output and line diffs."""

from __future__ import annotations

import sys
from itertools import zip_longest

_WHITESPACE = " \t\n\r"
_RED = "\033[1;31m"
_GREEN = "\033[1;32m"
_RESET = "\033[0m"


def trim(text: str) -> str:
    """Strip spaces, tabs, carriage returns and newlines from both ends."""
    return text.strip(_WHITESPACE)


def display_error(message: str) -> None:
    """Write ``message`` followed by a newline to standard error."""
    print(message, file=sys.stderr, flush=True)


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return parts


def format_diff(content1: str, content2: str, label1: str, label2: str) -> str:
    """Return a line-by-line colored diff of two texts."""
    out = [f" Diff between {label1} and {label2}:\n\n"]
    pairs = zip_longest(_lines(content1), _lines(content2), fillvalue="")
    for number, (left, right) in enumerate(pairs, start=1):
        if left != right:
            out.append(f"{_RED}- {number}    {left}{_RESET}\n")
            out.append(f"{_GREEN}+ {number}    {right}{_RESET}\n")
    return "".join(out)


def show_diff(content1: str, content2: str, label1: str, label2: str) -> None:
    """Print the diff produced by :func:`format_diff` to standard output."""
    sys.stdout.write(format_diff(content1, content2, label1, label2))