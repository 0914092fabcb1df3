"""Repository operations: staging, committing, history, branches and merges."""

from __future__ import annotations

import os
import sys
import time
from typing import TextIO

from minigit.graph import CommitGraph, compute_hash
from minigit.storage import HEAD_FILE, MINIGIT_DIR, Storage
from minigit.utils import format_diff, trim

_BRANCH_PREFIX = "refs/heads/"
_FILE_PREFIX = "file: "


class MiniGitError(Exception):
    """Raised when a repository operation cannot be carried out."""


def _commit_files(commit_data: str) -> dict[str, str]:
    """Map each filename listed in a commit's metadata to its blob hash."""
    files: dict[str, str] = {}
    for line in commit_data.split("\n"):
        if not line.startswith(_FILE_PREFIX):
            continue
        pos = line.find(" ", len(_FILE_PREFIX))
        if pos != -1:
            files[line[len(_FILE_PREFIX):pos]] = line[pos + 1:]
    return files


class Repository:
    """A repository in a working directory, reporting progress to ``out``.

    The commit graph used for merges only knows commits made through this
    object during its lifetime.
    """

    def __init__(self, root: str | os.PathLike[str] = ".", out: TextIO | None = None) -> None:
        self.storage = Storage(root)
        self.graph = CommitGraph()
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def _files_of(self, commit_hash: str) -> dict[str, str]:
        if not commit_hash:
            return {}
        return _commit_files(self.storage.read_commit(commit_hash))

    def init(self) -> None:
        """Create an empty repository."""
        if self.storage.exists(MINIGIT_DIR):
            raise MiniGitError("MiniGit repo already exists.")
        try:
            self.storage.init_dir()
        except OSError as exc:
            raise MiniGitError(f"Failed to create {MINIGIT_DIR} .") from exc
        self._say("Initialized empty MiniGit repository.")

    def add(self, filename: str) -> None:
        """Store a file's content as a blob and stage it."""
        if not self.storage.exists(filename):
            raise MiniGitError("File does not exist.")
        content = self.storage.read_file(filename)
        blob_hash = self.storage.write_blob(content)

        staged = self.storage.read_index()
        if any(name == filename for name, _ in staged):
            staged = [(name, blob_hash if name == filename else h) for name, h in staged]
        else:
            staged.append((filename, blob_hash))
        self.storage.update_index(staged)

        self._say(f"Staged file: {filename} ({blob_hash[:7]})")

    def commit(self, message: str) -> None:
        """Record the staged files as a new commit on the current branch."""
        staged = self.storage.read_index()
        if not staged:
            self._say("Nothing to commit.")
            return

        lines = [f"timestamp: {time.ctime()}", f"message: {message}"]
        parent = self.storage.resolve_head()
        if parent:
            lines.append(f"parent: {parent}")
        lines.extend(f"file: {name} {blob_hash}" for name, blob_hash in staged)
        data = "".join(f"{line}\n" for line in lines)

        commit_hash = compute_hash(data)
        self.graph.add_commit(commit_hash, [parent] if parent else [])
        self.storage.write_commit(commit_hash, data)

        if not self.storage.exists(HEAD_FILE):
            raise MiniGitError("HEAD file is missing. Cannot update HEAD.")

        head = self.storage.read_file(HEAD_FILE)
        if head.startswith("ref:"):
            branch_name = trim(head[5:][len(_BRANCH_PREFIX):])
            self.storage.write_reference(branch_name, commit_hash)
        else:
            self.storage.write_file(HEAD_FILE, commit_hash)

        self.storage.update_index([])
        self._say(f"Committed as {commit_hash[:7]}: {message}")

    def log(self) -> None:
        """Print the history from HEAD back to the first commit."""
        current = self.storage.resolve_head()
        if not current:
            self._say("No commits yet.")
            return

        head = self.storage.read_file(HEAD_FILE)
        if head.startswith("ref:"):
            branch = trim(head[5:]).removeprefix(_BRANCH_PREFIX)
            self._say(f"On branch: {branch}\n")

        while current:
            data = self.storage.read_commit(current)
            if not data:
                raise MiniGitError(f"Commit data is missing or corrupted for commit: {current}")
            self._say(f"Commit {current}")
            next_parent = ""
            for line in data.split("\n"):
                if line.startswith(("message:", "timestamp:")):
                    self._say(f"   {line}")
                if line.startswith("parent:"):
                    next_parent = line[8:]
            current = next_parent

    def branch(self, branch_name: str) -> None:
        """Create a branch pointing at the current HEAD commit."""
        head_commit = self.storage.resolve_head()
        if not head_commit:
            raise MiniGitError("No commit to branch from.")
        self.storage.write_reference(branch_name, head_commit)
        self._say(f"Created branch '{branch_name}' at {head_commit[:7]}")

    def checkout(self, target: str) -> None:
        """Switch to a branch, or detach HEAD at a commit hash."""
        old_files = set(self._files_of(self.storage.resolve_head()))

        commit_hash = self.storage.read_reference(target)
        if commit_hash:
            self.storage.write_file(HEAD_FILE, f"ref: {_BRANCH_PREFIX}{target}")
            self._say(f"Switched to branch '{target}'")

            new_files = self._files_of(commit_hash)
            for filename, blob_hash in new_files.items():
                content = self.storage.read_blob(blob_hash)
                if content:
                    self.storage.write_file(filename, content)

            for filename in sorted(old_files - new_files.keys()):
                if self.storage.exists(filename):
                    (self.storage.root / filename).unlink()
                    self._say(f"Removed file: {filename}")
            return

        if not self.storage.read_commit(target):
            raise MiniGitError("Invalid branch or commit.")
        self.storage.write_file(HEAD_FILE, target)
        self._say(f"Checked out commit {target[:7]} (detached HEAD)")

    def merge(self, branch_name: str) -> None:
        """Merge another branch into the working directory and commit it."""
        head_commit = self.storage.resolve_head()
        other_commit = self.storage.read_reference(branch_name)
        if not other_commit:
            raise MiniGitError("Branch not found.")

        lca = self.graph.find_lca(head_commit, other_commit) or ""
        self._say(f"Merging branch '{branch_name}'")
        self._say(f"LCA: {lca[:7] if lca else 'none'}")

        if lca == other_commit:
            self._say(f"Branch '{branch_name}' is already merged.")
            return
        if lca == head_commit:
            self._say(f"Fast-forwarding to branch '{branch_name}'.")
            self.checkout(branch_name)
            self._say(f"Working directory updated to match branch '{branch_name}'.")
            return

        base_files = self._files_of(lca)
        head_files = self._files_of(head_commit)
        other_files = self._files_of(other_commit)

        merged: dict[str, str] = {}
        conflicts: list[str] = []
        for filename in sorted(head_files.keys() | other_files.keys()):
            base_hash = base_files.get(filename, "")
            head_hash = head_files.get(filename, "")
            other_hash = other_files.get(filename, "")

            if head_hash == other_hash:
                merged[filename] = head_hash
            elif base_hash and head_hash == base_hash and other_hash:
                merged[filename] = other_hash
            elif base_hash and other_hash == base_hash and head_hash:
                merged[filename] = head_hash
            else:
                conflicts.append(filename)
                head_content = self.storage.read_blob(head_hash) if head_hash else ""
                other_content = self.storage.read_blob(other_hash) if other_hash else ""
                merged[filename] = (
                    f"<<<<<<< HEAD\n{head_content}=======\n{other_content}>>>>>>>\n"
                )

        if conflicts:
            self._say("Merge completed with conflicts in the following files:")
            for filename in conflicts:
                self._say(f" - {filename}")
            self._say("Resolve conflicts and commit the result.")
        else:
            self._say("Merge completed successfully.")

        for filename, value in merged.items():
            if filename in conflicts:
                content = value
            else:
                content = self.storage.read_blob(value) or value
            if self.storage.exists(filename):
                self._say(f"Overwriting file: {filename}")
            self.storage.write_file(filename, content)

        self._say("Merged changes into the working directory.")
        self.commit(f"Merge branch '{branch_name}' into current branch")

    def diff(self, hash1: str, hash2: str) -> None:
        """Print line differences for every file that differs between two commits."""
        data1 = self.storage.read_commit(hash1)
        data2 = self.storage.read_commit(hash2)
        if not data1:
            raise MiniGitError(f"Commit {hash1} not found or empty.")
        if not data2:
            raise MiniGitError(f"Commit {hash2} not found or empty.")

        files1 = _commit_files(data1)
        files2 = _commit_files(data2)
        for filename in sorted(files1.keys() | files2.keys()):
            blob1 = files1.get(filename, "")
            blob2 = files2.get(filename, "")
            content1 = self.storage.read_blob(blob1) if blob1 else ""
            content2 = self.storage.read_blob(blob2) if blob2 else ""
            if content1 != content2:
                self._say(f"\nDiff for file: {filename}")
                self.out.write(
                    format_diff(
                        content1, content2, f"{hash1}:{filename}", f"{hash2}:{filename}"
                    )
                )