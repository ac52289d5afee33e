from __future__ import annotations

import argparse
import logging
import re
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import NoReturn

from simdirs import __version__
from simdirs.errors import ArgumentError, DeletionFailure, NotFoundError
from simdirs.models import DeletionReport, KeepStrategy, ResolutionPlan, RunConfig
from simdirs.report import printable

logger = logging.getLogger(__name__)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise ArgumentError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="simdirs",
        allow_abbrev=False,
        description=(
            "Find subdirectories with near-duplicate names and delete all but one "
            "of each similar pair. Use --dry-run to preview the plan first."
        ),
    )
    parser.add_argument("scan_directory", help="Directory whose children are compared")
    parser.add_argument(
        "similarity_percentage",
        help="Minimum name similarity (0-100) for two directories to match",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview changes without deleting anything",
    )
    parser.add_argument(
        "--keep",
        default=KeepStrategy.FIRST.value,
        metavar="{first,newest,largest}",
        help=(
            "Which directory of a similar pair survives: first alphabetically "
            "(default), newest file inside, or most disk usage"
        ),
    )
    parser.add_argument("--report", default=None, help="Also write the plan as JSON here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _parse_threshold(value: str) -> int:
    digits = value.lstrip("0") or "0"
    if not re.fullmatch(r"[0-9]+", value) or len(digits) > 3 or int(digits) > 100:
        raise ArgumentError("Similarity percentage must be a number between 0 and 100")
    return int(digits)


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
        if not args.scan_directory.strip():
            raise ArgumentError("Directory path must not be empty")
        report_path = Path(args.report).absolute() if args.report else None
        if report_path is not None and not report_path.parent.is_dir():
            raise ArgumentError(f"Report directory '{report_path.parent}' does not exist")
        config = RunConfig(
            root=Path(args.scan_directory).absolute(),
            threshold=_parse_threshold(args.similarity_percentage),
            strategy=KeepStrategy.parse(args.keep),
            dry_run=args.dry_run,
        )
    except ArgumentError as exc:
        parser.print_usage()
        raise SystemExit(f"Error: {exc}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    from simdirs.report import (
        ProgressReporter,
        render_header,
        render_plan,
        render_summary,
    )
    from simdirs.resolver import resolve, write_plan
    from simdirs.scanner import list_directories

    try:
        entries = list_directories(config.root)
    except NotFoundError as exc:
        raise SystemExit(f"Error: {exc}")

    if not entries:
        print(f"No subdirectories found in '{printable(str(config.root))}'")
        return 0

    print(render_header(config, len(entries)))
    progress = ProgressReporter(len(entries))
    plan = resolve(entries, config, on_compare=progress)
    progress.finish()

    if report_path is not None:
        try:
            write_plan(report_path, plan)
        except OSError as exc:
            raise SystemExit(
                f"Error: cannot write report {report_path}: {exc.strerror or exc}"
            )

    if not plan.delete:
        print("No similar duplicate directories found.")
        return 0

    print(render_plan(plan))
    if config.dry_run:
        print(render_summary(plan, dry_run=True))
        return 0

    print("Deleting duplicate directories...")
    report = apply_plan(plan)
    print(render_summary(plan, dry_run=False, report=report))
    return 0 if report.ok else 1


def apply_plan(plan: ResolutionPlan) -> DeletionReport:
    """Delete every directory in ``plan.delete``; one failure never stops the rest."""
    report = DeletionReport()
    for path in plan.delete:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            failure = DeletionFailure(path, exc)
            logger.error("Failed to delete %s", printable(str(failure)))
            report.failures.append(failure)
            continue
        report.deleted.append(path)
        print(f"Deleted: {printable(path)}")
    return report


if __name__ == "__main__":
    raise SystemExit(main())
