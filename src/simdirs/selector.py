from __future__ import annotations

from simdirs.models import DirectoryEntry, KeepStrategy


def choose(
    first: DirectoryEntry,
    second: DirectoryEntry,
    strategy: KeepStrategy,
) -> DirectoryEntry:
    """Return the entry to keep out of a similar pair.

    ``first`` is the entry that sorts earlier. Ties always keep ``first``.
    Only read-only filesystem queries are made, and only for the strategies
    that need them.
    """
    if strategy is KeepStrategy.NEWEST:
        return second if second.newest_mtime > first.newest_mtime else first
    if strategy is KeepStrategy.LARGEST:
        return second if second.size > first.size else first
    return first
