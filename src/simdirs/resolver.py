from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence

from simdirs.models import (
    ComparisonResult,
    DirectoryEntry,
    Match,
    ResolutionPlan,
    RunConfig,
)
from simdirs.selector import choose
from simdirs.similarity import similarity

CompareObserver = Callable[[ComparisonResult], None]


def compare(
    first: DirectoryEntry,
    second: DirectoryEntry,
    threshold: int,
) -> ComparisonResult:
    score = similarity(first.name, second.name)
    return ComparisonResult(
        first=first,
        second=second,
        similarity=score,
        matched=score >= threshold,
    )


def resolve(
    entries: Sequence[DirectoryEntry],
    config: RunConfig,
    on_compare: Optional[CompareObserver] = None,
) -> ResolutionPlan:
    """Partition ``entries`` into directories to keep and to delete.

    Pairs are visited in sorted order (i < j). A directory marked for deletion
    is skipped in every later pair, in either position. Grouping is greedy
    by first encounter rather than a transitive closure: with A~B, B~C and
    A!~C under the ``first`` strategy, B is deleted in favour of A and is then
    never compared with C, so C survives although it resembles B. Nothing on
    disk is touched here.
    """
    ordered = sorted(entries, key=lambda e: e.path)
    keep: set[str] = set()
    delete: set[str] = set()
    matches: list[Match] = []

    for i, first in enumerate(ordered):
        if first.path in delete:
            continue
        for second in ordered[i + 1 :]:
            if second.path in delete:
                continue
            result = compare(first, second, config.threshold)
            if on_compare is not None:
                on_compare(result)
            if not result.matched:
                continue

            winner = choose(first, second, config.strategy)
            loser = second if winner is first else first
            delete.add(loser.path)
            keep.discard(loser.path)
            keep.add(winner.path)
            matches.append(
                Match(keep=winner.path, delete=loser.path, similarity=result.similarity)
            )
            if loser is first:
                break

    return ResolutionPlan(
        root=str(config.root),
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        threshold=config.threshold,
        strategy=config.strategy.value,
        analyzed=len(ordered),
        matches=tuple(matches),
        keep=tuple(sorted(keep)),
        delete=tuple(sorted(delete)),
    )


def write_plan(path: Path, plan: ResolutionPlan) -> None:
    path.write_text(json.dumps(asdict(plan), indent=2, sort_keys=True) + "\n")
