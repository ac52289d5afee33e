"""Levenshtein distance and the integer similarity percentage built on it.

``similarity`` uses integer division on purpose: a 1-character edit on a
3-character name scores ``100 - 100 // 3 == 67``, and threshold boundaries
depend on that truncation.
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str, accelerated: bool = True) -> int:
    """Similarity percentage in [0, 100] relative to the longer name.

    With ``accelerated`` the distance comes from rapidfuzz, which computes the
    same exact unit-cost Levenshtein distance as :func:`distance`.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 100
    edits = Levenshtein.distance(a, b) if accelerated else distance(a, b)
    return 100 - (edits * 100 // longest)

