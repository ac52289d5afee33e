from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path

from simdirs.errors import ArgumentError, DeletionFailure


class KeepStrategy(str, Enum):
    FIRST = "first"  # alphabetically first
    NEWEST = "newest"  # newest file inside
    LARGEST = "largest"  # most bytes on disk

    @classmethod
    def parse(cls, value: str) -> KeepStrategy:
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ArgumentError(
                f"Invalid keep strategy '{value}'. Use: {choices}"
            ) from None


@dataclass(frozen=True)
class DirectoryEntry:
    path: str
    name: str

    @classmethod
    def from_path(cls, path: Path) -> DirectoryEntry:
        return cls(path=path.as_posix(), name=path.name)

    @cached_property
    def newest_mtime(self) -> float:
        from simdirs.scanner import newest_mtime

        return newest_mtime(Path(self.path))

    @cached_property
    def size(self) -> int:
        from simdirs.scanner import disk_usage

        return disk_usage(Path(self.path))


@dataclass(frozen=True)
class RunConfig:
    root: Path
    threshold: int
    strategy: KeepStrategy = KeepStrategy.FIRST
    dry_run: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int):
            raise ArgumentError(
                "Similarity percentage must be a number between 0 and 100"
            )
        if not 0 <= self.threshold <= 100:
            raise ArgumentError(
                "Similarity percentage must be a number between 0 and 100"
            )
        if not isinstance(self.strategy, KeepStrategy):
            raise ArgumentError(f"Invalid keep strategy '{self.strategy}'")


@dataclass(frozen=True)
class ComparisonResult:
    first: DirectoryEntry
    second: DirectoryEntry
    similarity: int
    matched: bool


@dataclass(frozen=True)
class Match:
    keep: str
    delete: str
    similarity: int


@dataclass(frozen=True)
class ResolutionPlan:
    root: str
    generated_at: str
    threshold: int
    strategy: str
    analyzed: int
    matches: tuple[Match, ...]
    keep: tuple[str, ...]  # sorted, disjoint from delete
    delete: tuple[str, ...]

    @property
    def survivors(self) -> int:
        return self.analyzed - len(self.delete)


@dataclass
class DeletionReport:
    deleted: list[str] = field(default_factory=list)
    failures: list[DeletionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
