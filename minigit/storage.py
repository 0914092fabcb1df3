"""On-disk layout of a repository: objects, commits, references and index."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from minigit.graph import compute_hash
from minigit.utils import display_error, trim

MINIGIT_DIR = ".minigit"
OBJECTS_DIR = f"{MINIGIT_DIR}/objects"
COMMITS_DIR = f"{MINIGIT_DIR}/commits"
REFS_HEADS_DIR = f"{MINIGIT_DIR}/refs/heads"
HEAD_FILE = f"{MINIGIT_DIR}/HEAD"
INDEX_FILE = f"{MINIGIT_DIR}/index"

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class Storage:
    """File access for a repository rooted at a working directory.

    Relative paths are resolved against ``root``. File contents are handled as
    text decoded with surrogate escapes, so arbitrary bytes survive a round trip.
    """

    def __init__(self, root: str | os.PathLike[str] = ".") -> None:
        self.root = Path(root)

    def _path(self, path: str | os.PathLike[str]) -> Path:
        return self.root / path

    def init_dir(self) -> None:
        """Create the repository structure with an empty ``main`` branch."""
        self._path(MINIGIT_DIR).mkdir(exist_ok=True)
        self._path(OBJECTS_DIR).mkdir(exist_ok=True)
        self._path(COMMITS_DIR).mkdir(parents=True, exist_ok=True)
        self._path(REFS_HEADS_DIR).mkdir(parents=True, exist_ok=True)
        self.write_reference("main", "")
        self.write_file(HEAD_FILE, "ref: refs/heads/main\n")
        self.write_file(INDEX_FILE, "")

    def create_dir(self, path: str | os.PathLike[str]) -> bool:
        """Create ``path`` with its parents; return whether anything was created."""
        target = self._path(path)
        if target.is_dir():
            return False
        target.mkdir(parents=True)
        return True

    def read_file(self, path: str | os.PathLike[str]) -> str:
        """Return the whole content of a file; raises ``OSError`` if unreadable."""
        with open(self._path(path), encoding=_ENCODING, errors=_ERRORS, newline="") as handle:
            return handle.read()

    def write_file(self, path: str | os.PathLike[str], content: str) -> None:
        """Write ``content`` to a file, replacing what was there."""
        with open(
            self._path(path), "w", encoding=_ENCODING, errors=_ERRORS, newline=""
        ) as handle:
            handle.write(content)

    def copy_file(self, src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
        """Copy a file, overwriting the destination."""
        shutil.copyfile(self._path(src), self._path(dest))

    def exists(self, path: str | os.PathLike[str]) -> bool:
        """Tell whether a file or directory exists at ``path``."""
        return self._path(path).exists()

    def _read_or_empty(self, path: str) -> str:
        try:
            return self.read_file(path)
        except OSError:
            display_error(f"Cannot open file {path}")
            return ""

    @staticmethod
    def _blob_path(blob_hash: str) -> str:
        return f"{OBJECTS_DIR}/{blob_hash[:2]}/{blob_hash[2:]}"

    def write_blob(self, content: str) -> str:
        """Store ``content`` as a blob and return its hash."""
        blob_hash = compute_hash(content)
        path = self._blob_path(blob_hash)
        if not self.exists(path):
            self.create_dir(f"{OBJECTS_DIR}/{blob_hash[:2]}")
        self.write_file(path, content)
        return blob_hash

    def read_blob(self, blob_hash: str) -> str:
        """Return a blob's content, or an empty string if it cannot be read."""
        return self._read_or_empty(self._blob_path(blob_hash))

    def write_commit(self, commit_hash: str, data: str) -> None:
        """Store the metadata text of a commit."""
        self.write_file(f"{COMMITS_DIR}/{commit_hash}", data)

    def read_commit(self, commit_hash: str) -> str:
        """Return a commit's metadata, or an empty string if it cannot be read."""
        return self._read_or_empty(f"{COMMITS_DIR}/{commit_hash}")

    def write_reference(self, ref_name: str, commit_hash: str) -> None:
        """Point a branch, or ``HEAD`` itself, at ``commit_hash``."""
        if ref_name == "HEAD":
            self.write_file(HEAD_FILE, commit_hash)
        else:
            self.write_file(f"{REFS_HEADS_DIR}/{ref_name}", commit_hash)

    def read_reference(self, ref_name: str) -> str:
        """Return the commit a branch or ``HEAD`` points to; empty if unknown."""
        if ref_name == "HEAD":
            head = self._read_or_empty(HEAD_FILE)
            if head.startswith("ref: "):
                return self._read_or_empty(f"{MINIGIT_DIR}/{trim(head[5:])}")
            return head
        return self._read_or_empty(f"{REFS_HEADS_DIR}/{ref_name}")

    def resolve_head(self) -> str:
        """Return the commit ``HEAD`` currently resolves to; empty if none."""
        head = self._read_or_empty(HEAD_FILE)
        if head.startswith("ref:"):
            return self._read_or_empty(f"{MINIGIT_DIR}/{trim(head[5:])}")
        return head

    def update_index(self, entries: Iterable[tuple[str, str]]) -> None:
        """Replace the staging area with ``(filename, hash)`` entries."""
        self.write_file(INDEX_FILE, "".join(f"{name}:{h}\n" for name, h in entries))

    def read_index(self) -> list[tuple[str, str]]:
        """Return the staged ``(filename, hash)`` entries in order."""
        if not self.exists(INDEX_FILE):
            return []
        try:
            content = self.read_file(INDEX_FILE)
        except OSError:
            display_error("Error reading index file.")
            return []
        entries = []
        for line in content.split("\n"):
            name, sep, blob_hash = line.partition(":")
            if sep:
                entries.append((name, blob_hash))
        return entries