from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from simdirs.errors import ArgumentError
from simdirs.models import ComparisonResult, DirectoryEntry, KeepStrategy, RunConfig
from simdirs.resolver import compare, resolve, write_plan


def _entries(*names: str) -> list[DirectoryEntry]:
    return [DirectoryEntry(path=f"/scan/{name}", name=name) for name in names]


def _config(threshold: int, strategy: KeepStrategy = KeepStrategy.FIRST) -> RunConfig:
    return RunConfig(root=Path("/scan"), threshold=threshold, strategy=strategy, dry_run=True)


def _mkdir_with_file(root: Path, name: str, mtime: float) -> DirectoryEntry:
    path = root / name
    path.mkdir()
    data = path / "data.txt"
    data.write_text(name)
    os.utime(data, (mtime, mtime))
    return DirectoryEntry.from_path(path)


def test_similar_pair_deletes_later_name() -> None:
    plan = resolve(
        _entries("project_alpha", "project_alpha2", "project_beta"),
        _config(80),
    )

    assert plan.delete == ("/scan/project_alpha2",)
    assert plan.keep == ("/scan/project_alpha",)
    assert plan.matches[0].similarity == 93
    assert plan.survivors == 2


def test_backup_suffix_scores_below_eighty() -> None:
    plan = resolve(_entries("project_alpha", "project_alpha_backup", "project_beta"), _config(80))

    assert plan.delete == ()


def test_backup_suffix_at_its_own_score() -> None:
    plan = resolve(_entries("project_alpha", "project_alpha_backup", "project_beta"), _config(65))

    assert plan.delete == ("/scan/project_alpha_backup", "/scan/project_beta")
    assert plan.keep == ("/scan/project_alpha",)


def test_threshold_boundary() -> None:
    assert resolve(_entries("a", "ab"), _config(60)).delete == ()

    plan = resolve(_entries("a", "ab"), _config(50))
    assert plan.delete == ("/scan/ab",)
    assert plan.keep == ("/scan/a",)


def test_threshold_zero_collapses_to_first() -> None:
    plan = resolve(_entries("delta", "alpha", "charlie", "bravo"), _config(0))

    assert plan.keep == ("/scan/alpha",)
    assert len(plan.delete) == 3
    assert plan.survivors == 1


def test_threshold_hundred_requires_identical_names() -> None:
    entries = _entries("data", "data1", "Data")
    entries.append(DirectoryEntry(path="/scan2/data", name="data"))

    plan = resolve(entries, _config(100))

    assert plan.delete == ("/scan2/data",)


def test_grouping_is_not_transitive() -> None:
    # abcd~abce and abce~abee, but abcd vs abee is only 50%.
    plan = resolve(_entries("abcd", "abce", "abee"), _config(75))

    assert plan.delete == ("/scan/abce",)
    assert "/scan/abee" not in plan.keep
    assert plan.survivors == 2


def test_empty_input_produces_empty_plan() -> None:
    plan = resolve([], _config(50))

    assert plan.analyzed == 0
    assert plan.matches == ()


def test_input_order_does_not_matter() -> None:
    forward = resolve(_entries("a", "ab", "abc"), _config(50))
    backward = resolve(list(reversed(_entries("a", "ab", "abc"))), _config(50))

    assert forward.delete == backward.delete
    assert forward.keep == backward.keep


def test_observer_sees_every_comparison() -> None:
    seen: list[ComparisonResult] = []

    resolve(_entries("x", "yy", "zzz"), _config(100), on_compare=seen.append)

    assert [(r.first.name, r.second.name) for r in seen] == [
        ("x", "yy"),
        ("x", "zzz"),
        ("yy", "zzz"),
    ]
    assert not any(r.matched for r in seen)


def test_deleted_directory_leaves_scan_immediately(tmp_path: Path) -> None:
    _mkdir_with_file(tmp_path, "aa", 100)
    _mkdir_with_file(tmp_path, "ab", 300)
    _mkdir_with_file(tmp_path, "ac", 200)
    entries = [DirectoryEntry.from_path(tmp_path / n) for n in ("aa", "ab", "ac")]
    seen: list[ComparisonResult] = []

    plan = resolve(
        entries,
        RunConfig(root=tmp_path, threshold=50, strategy=KeepStrategy.NEWEST),
        on_compare=seen.append,
    )

    assert [(r.first.name, r.second.name) for r in seen] == [("aa", "ab"), ("ab", "ac")]
    assert plan.keep == (str(tmp_path / "ab"),)
    assert plan.delete == (str(tmp_path / "aa"), str(tmp_path / "ac"))


def test_keep_and_delete_stay_disjoint(tmp_path: Path) -> None:
    _mkdir_with_file(tmp_path, "aa", 100)
    _mkdir_with_file(tmp_path, "ab", 200)
    _mkdir_with_file(tmp_path, "ac", 300)
    entries = [DirectoryEntry.from_path(tmp_path / n) for n in ("aa", "ab", "ac")]

    plan = resolve(entries, RunConfig(root=tmp_path, threshold=50, strategy=KeepStrategy.NEWEST))

    assert plan.keep == (str(tmp_path / "ac"),)
    assert plan.delete == (str(tmp_path / "aa"), str(tmp_path / "ab"))
    assert not set(plan.keep) & set(plan.delete)


def test_compare_reports_score() -> None:
    a, ab = _entries("a", "ab")

    result = compare(a, ab, 50)

    assert result.similarity == 50
    assert result.matched


@pytest.mark.parametrize("threshold", [-1, 101, True, 50.0])
def test_config_rejects_bad_threshold(threshold: object) -> None:
    with pytest.raises(ArgumentError):
        RunConfig(root=Path("/scan"), threshold=threshold)  # type: ignore[arg-type]


def test_strategy_parse() -> None:
    assert KeepStrategy.parse("largest") is KeepStrategy.LARGEST
    with pytest.raises(ArgumentError, match="Invalid keep strategy"):
        KeepStrategy.parse("oldest")


def test_write_plan_is_json(tmp_path: Path) -> None:
    plan = resolve(_entries("a", "ab"), _config(50))
    out = tmp_path / "plan.json"

    write_plan(out, plan)

    data = json.loads(out.read_text())
    assert data["delete"] == ["/scan/ab"]
    assert data["strategy"] == "first"
    assert data["matches"] == [{"keep": "/scan/a", "delete": "/scan/ab", "similarity": 50}]
