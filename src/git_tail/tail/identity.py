"""Correlating commits across a hash-changing rewrite."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ..git.commit import Commit, IdentityKey


@dataclass
class IdentityEntry:
    original: str
    rewritten: Optional[str] = None


class CommitIdentityMap:
    """Maps commit identity keys to their hash before and after rewriting.

    Pass 1 records original hashes before anything is rewritten; pass 2
    fills in the rewritten hash for keys already recorded. Keys seen in
    only one pass never produce an alias.
    """

    def __init__(self) -> None:
        self._entries: dict[IdentityKey, IdentityEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: IdentityKey) -> Optional[IdentityEntry]:
        return self._entries.get(key)

    def record_original(self, commits: Iterable[Commit]) -> None:
        """Pass 1. The first hash recorded for a key wins."""
        for commit in commits:
            if commit.hash is None:
                continue
            self._entries.setdefault(commit.identity_key, IdentityEntry(commit.hash))

    def record_rewritten(self, commits: Iterable[Commit]) -> None:
        """Pass 2. Unknown keys are ignored."""
        for commit in commits:
            entry = self._entries.get(commit.identity_key)
            if entry is not None and commit.hash is not None:
                entry.rewritten = commit.hash

    def merge(self, other: "CommitIdentityMap") -> None:
        """Fold another map in; entries already present are kept."""
        for key, entry in other._entries.items():
            self._entries.setdefault(key, IdentityEntry(entry.original, entry.rewritten))

    def aliases(self) -> Iterator[tuple[str, str]]:
        """(original, rewritten) for every entry matched in both passes.

        Entries whose hash did not change are skipped.
        """
        for entry in self._entries.values():
            if entry.rewritten is not None and entry.rewritten != entry.original:
                yield entry.original, entry.rewritten
