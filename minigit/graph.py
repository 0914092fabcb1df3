"""Content hashing and the commit ancestry graph."""

from __future__ import annotations

import hashlib
from collections import deque
from collections.abc import Iterable

HASH_LENGTH = 16


def compute_hash(content: str | bytes) -> str:
    """Return a 16-character hexadecimal digest of ``content``."""
    if isinstance(content, str):
        content = content.encode("utf-8", errors="surrogateescape")
    return hashlib.sha1(content).hexdigest()[:HASH_LENGTH]


class CommitGraph:
    """Directed acyclic graph mapping each commit to its parent commits."""

    def __init__(self) -> None:
        self._parents: dict[str, list[str]] = {}

    def add_commit(self, commit_hash: str, parent_hashes: Iterable[str]) -> None:
        """Record ``commit_hash`` with the given parents, replacing any earlier entry."""
        self._parents[commit_hash] = list(parent_hashes)

    def parents(self, commit_hash: str) -> list[str]:
        """Return the parents of ``commit_hash``; unknown commits have none."""
        return list(self._parents.get(commit_hash, ()))

    def find_lca(self, commit_a: str, commit_b: str) -> str | None:
        """Find a lowest common ancestor of two commits by alternating BFS.

        Returns ``None`` if either commit is empty or no common ancestor exists.
        """
        if not commit_a or not commit_b:
            return None

        visited_a: set[str] = set()
        visited_b: set[str] = set()
        queue_a = deque([commit_a])
        queue_b = deque([commit_b])

        while queue_a or queue_b:
            if queue_a:
                current = queue_a.popleft()
                if current in visited_b:
                    return current
                visited_a.add(current)
                queue_a.extend(p for p in self.parents(current) if p not in visited_a)

            if queue_b:
                current = queue_b.popleft()
                if current in visited_a:
                    return current
                visited_b.add(current)
                queue_b.extend(p for p in self.parents(current) if p not in visited_b)

        return None

    def dump(self) -> str:
        """Return a textual listing of the graph, one commit per line."""
        lines = ["\nCommit DAG:\n"]
        for child, parents in self._parents.items():
            lines.append(f"{child} : " + "".join(f"{p} " for p in parents) + "\n")
        lines.append("\n")
        return "".join(lines)