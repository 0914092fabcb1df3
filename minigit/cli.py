"""Interactive command prompt for a repository."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence
from typing import TextIO

from minigit.utils import display_error
from minigit.vcs import MiniGitError, Repository

_QUOTE = '"'
_ESCAPE = "\\"

HELP_TEXT = """Available commands:
  init                   Initialize a new MiniGit repo
  add <file>             Stage a file
  commit -m "<msg>"      Commit staged files with message
  log                    Show commit history
  branch <name>          Create a new branch
  checkout <name|hash>   Switch to branch or commit
  merge <branch>         Merge another branch
  diff <c1> <c2>         Show diff between two commits
  cls/clear              Clear the screen
  help                   Show this message
  exit                   Quit MiniGit
"""


def tokenize(line: str) -> list[str]:
    """Split a command line into words, honouring double-quoted strings.

    A word that starts with a double quote runs to the matching closing quote;
    a backslash inside it takes the next character literally. A quoted word
    left unterminated is dropped. Other words end at whitespace.
    """
    tokens: list[str] = []
    chars = iter(line)
    pending = next(chars, None)
    while pending is not None:
        if pending.isspace():
            pending = next(chars, None)
            continue
        if pending == _QUOTE:
            word: list[str] = []
            closed = False
            for char in chars:
                if char == _ESCAPE:
                    escaped = next(chars, None)
                    if escaped is None:
                        break
                    word.append(escaped)
                elif char == _QUOTE:
                    closed = True
                    break
                else:
                    word.append(char)
            if not closed:
                break
            tokens.append("".join(word))
            pending = next(chars, None)
            continue
        word = [pending]
        pending = next(chars, None)
        while pending is not None and not pending.isspace():
            word.append(pending)
            pending = next(chars, None)
        tokens.append("".join(word))
    return tokens


def show_help(out: TextIO | None = None) -> None:
    """Write the list of available commands."""
    out = out if out is not None else sys.stdout
    out.write(HELP_TEXT + "\n")
    out.flush()


def _clear_screen(out: TextIO) -> None:
    try:
        subprocess.run(["clear"], check=False)
    except OSError:
        out.write("\033[H\033[2J")


def execute_command(
    repository: Repository, tokens: Sequence[str], out: TextIO | None = None
) -> None:
    """Run one parsed command against ``repository``.

    Usage hints go to ``out``; failures of the command are reported on
    standard error rather than raised.
    """
    out = out if out is not None else sys.stdout
    if not tokens:
        return
    cmd, *args = tokens

    def usage(text: str) -> None:
        print(f"Usage: {text}", file=out)

    try:
        if cmd == "help":
            show_help(out)
        elif cmd in ("cls", "clear"):
            _clear_screen(out)
        elif cmd == "init":
            repository.init()
        elif cmd == "add":
            if len(args) != 1:
                usage("add <filename>")
            else:
                repository.add(args[0])
        elif cmd == "commit":
            if len(args) >= 2 and args[0] == "-m":
                repository.commit(" ".join(args[1:]))
            else:
                usage('commit -m "message"')
        elif cmd == "log":
            repository.log()
        elif cmd == "branch":
            if len(args) != 1:
                usage("branch <name>")
            else:
                repository.branch(args[0])
        elif cmd == "checkout":
            if len(args) != 1:
                usage("checkout <branch|hash>")
            else:
                repository.checkout(args[0])
        elif cmd == "merge":
            if len(args) != 1:
                usage("merge <branch>")
            else:
                repository.merge(args[0])
        elif cmd == "diff":
            if len(args) != 2:
                usage("diff <commit1> <commit2>")
            else:
                repository.diff(args[0], args[1])
        else:
            print(" Unknown or malformed command. Type 'help'.", file=out)
    except (MiniGitError, OSError) as exc:
        display_error(f" Error: {exc}")


def run(
    repository: Repository | None = None,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
) -> None:
    """Read commands from ``stdin`` until ``exit`` or end of input."""
    stdin = stdin if stdin is not None else sys.stdin
    out = out if out is not None else sys.stdout
    if repository is None:
        repository = Repository(".", out)

    out.write(" ----- Welcome to MiniGit! Type 'help' for commands. -----\n\n")
    while True:
        out.write("minigit> ")
        out.flush()
        line = stdin.readline()
        if not line:
            break
        tokens = tokenize(line.rstrip("\r\n"))
        if not tokens:
            continue
        if tokens[0].lower() == "exit":
            out.write("Exiting MiniGit... \n")
            break
        execute_command(repository, tokens, out)
    out.flush()


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive prompt in the current directory."""
    run(Repository(".", sys.stdout), sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())