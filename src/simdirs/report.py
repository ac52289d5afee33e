from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from simdirs.models import ComparisonResult, DeletionReport, ResolutionPlan, RunConfig

logger = logging.getLogger(__name__)

RULE = "=" * 41


def printable(text: str) -> str:
    """Escape undecodable filename bytes so the text can always be printed."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def render_header(config: RunConfig, count: int) -> str:
    if config.dry_run:
        mode = "Mode: DRY RUN (no directories will be deleted)"
    else:
        mode = "Mode: LIVE (directories will be deleted)"
    lines = [
        f"Found {count} directories to analyze",
        f"Similarity threshold: {config.threshold}%",
        f"Keep strategy: {config.strategy.value}",
        mode,
        "",
    ]
    return "\n".join(lines)


def render_plan(plan: ResolutionPlan) -> str:
    lines: list[str] = []
    for match in plan.matches:
        lines.extend(
            [
                f"Found similar directories ({match.similarity}% similar):",
                f"  KEEP:   {printable(match.keep)}",
                f"  DELETE: {printable(match.delete)}",
                "",
            ]
        )
    return "\n".join(lines)


def render_summary(
    plan: ResolutionPlan,
    dry_run: bool,
    report: Optional[DeletionReport] = None,
) -> str:
    lines = [
        RULE,
        f"Summary: Found {len(plan.delete)} duplicate director(ies) to delete",
        RULE,
        f"Directories analyzed: {plan.analyzed}",
        f"Directories kept: {plan.survivors}",
        f"Directories to delete: {len(plan.delete)}",
        f"Mode: {'dry run' if dry_run else 'live'}",
    ]
    if dry_run:
        lines.extend(
            [
                "",
                "DRY RUN: No directories were deleted.",
                "Run without --dry-run to perform actual deletion.",
            ]
        )
    elif report is not None:
        lines.append("")
        lines.append(f"Done! Deleted {len(report.deleted)} duplicate director(ies).")
        if report.failures:
            lines.append(f"Failed to delete {len(report.failures)} director(ies):")
            for failure in report.failures:
                lines.append(f"  - {printable(str(failure))}")
    return "\n".join(lines)


class ProgressReporter:
    """Observer for :func:`simdirs.resolver.resolve`.

    Keeps a running ``Compared k/n pairs`` counter on ``stream`` when it is a
    terminal. ``total`` is the upper bound n*(n-1)/2; pairs involving already
    deleted directories are skipped, so the counter may finish below it.
    """

    def __init__(self, count: int, stream: Optional[TextIO] = None) -> None:
        self.total = count * (count - 1) // 2
        self.done = 0
        self.stream = stream if stream is not None else sys.stderr
        self._live = bool(getattr(self.stream, "isatty", lambda: False)())

    def __call__(self, result: ComparisonResult) -> None:
        self.done += 1
        logger.debug(
            "%s <-> %s: %d%%%s",
            result.first.name,
            result.second.name,
            result.similarity,
            " (match)" if result.matched else "",
        )
        if self._live:
            self.stream.write(f"\rCompared {self.done}/{self.total} pairs")
            self.stream.flush()

    def finish(self) -> None:
        if self._live and self.done:
            self.stream.write("\n")
            self.stream.flush()
