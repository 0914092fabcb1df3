# minigit

A small version control system with an interactive shell. It keeps its data in
a `.minigit` directory inside the current working directory and supports
staging files, committing, branching, checking out branches or commits,
three-way merging and line-by-line diffs between commits.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

Start the interactive shell from the directory you want to track:

```
minigit
```

The same shell can be started with `python -m minigit.cli`. You are greeted
with a `minigit>` prompt. Available commands:

```
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
```

Words on the command line may be wrapped in double quotes, with a backslash
taking the next character literally, so `commit -m "first version"` records
the message `first version`. Without quotes, the words after `-m` are joined
with single spaces. The shell ends on `exit` (in any letter case) or at the
end of input. A command that fails prints ` Error: <reason>` on standard
error and the shell carries on; wrong argument counts print a usage line.

### Example session

```
minigit> init
Initialized empty MiniGit repository.
minigit> add notes.txt
Staged file: notes.txt (1a2b3c4)
minigit> commit -m "first version"
Committed as 5d6e7f8: first version
minigit> branch feature
Created branch 'feature' at 5d6e7f8
minigit> checkout feature
Switched to branch 'feature'
minigit> log
minigit> exit
Exiting MiniGit... 
```

(The hashes shown are examples; they depend on the contents and the time.)

### Repository layout

- `.minigit/objects/<xx>/<rest>` – file contents (blobs), named by a
  16-character hexadecimal hash (the first 16 digits of SHA-1).
- `.minigit/commits/<hash>` – commit metadata: `timestamp:`, `message:`,
  an optional `parent:` line and one `file: <name> <blob hash>` line per file.
- `.minigit/refs/heads/<branch>` – the commit each branch points to.
- `.minigit/HEAD` – `ref: refs/heads/<branch>`, or a bare commit hash when
  HEAD is detached.
- `.minigit/index` – staged files, one `<name>:<blob hash>` per line.

A commit holds exactly the files staged since the previous commit; the index
is emptied after each commit.

### Checkout

`checkout <branch>` points HEAD at the branch, writes the files of the
branch's commit into the working directory and removes files that were in
the previous commit but are not in the new one. If no branch of that name
exists, the argument is taken as a commit hash and HEAD is detached there
without changing the working directory.

### Merging

`merge <branch>` finds the closest common ancestor of the current commit and
the branch tip. If the branch is already contained in the current history
nothing happens; if the current commit is the ancestor, the working directory
is fast-forwarded with a checkout of the branch. Otherwise a three-way merge
is performed per file: when both sides changed a file differently, the file
is written with `<<<<<<< HEAD`, `=======` and `>>>>>>>` conflict markers. The
merged files are written to the working directory and a merge commit is then
attempted from whatever is currently staged.

### Diffs

`diff <c1> <c2>` compares the files of two commits and, for each file whose
content differs, prints the differing lines by line number: the first
commit's line in red after `-`, the second's in green after `+`.

## Using it from Python

```python
import sys
from minigit.vcs import MiniGitError, Repository

repo = Repository(".", sys.stdout)
try:
    repo.init()
except MiniGitError as exc:
    print(exc)
repo.add("notes.txt")
repo.commit("first version")
repo.log()
```

`Repository` methods (`init`, `add`, `commit`, `log`, `branch`, `checkout`,
`merge`, `diff`) write their progress to the given stream and raise
`MiniGitError` when an operation cannot be carried out.

Lower-level pieces:

- `minigit.storage.Storage` – on-disk objects, commits, references and the
  index, relative to a root directory.
- `minigit.graph.CommitGraph` – commit ancestry and common-ancestor search;
  `minigit.graph.compute_hash` – the content hash.
- `minigit.utils` – `trim`, `display_error`, `format_diff` and `show_diff`.
- `minigit.cli` – `tokenize`, `show_help`, `execute_command`, `run` and
  `main`.

## Limitations

- The commit ancestry used to find common ancestors is kept only in memory
  for the lifetime of one `Repository` (one shell session). Commits made in
  earlier sessions are not known to it, so merging them finds no common
  ancestor and every file that differs between the two sides is treated as a
  conflict.
- There are no `status`, `rm` or `reset` commands, and no remote
  repositories.
- File names are stored space-separated in commit metadata, so names
  containing spaces are not supported.
- Checkout does not restore files whose content is empty.