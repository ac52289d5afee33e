from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterator

from simdirs.errors import NotFoundError, QueryFailure
from simdirs.models import DirectoryEntry

logger = logging.getLogger(__name__)


def list_directories(root: Path) -> list[DirectoryEntry]:
    """Return the immediate child directories of ``root`` sorted by path.

    Only depth 1 is listed. Symlinks to directories are not followed and are
    not returned, so a planned deletion can never reach outside ``root``.
    """
    root = Path(root).absolute()
    if not root.is_dir():
        raise NotFoundError(f"Directory '{root}' does not exist")

    entries: list[DirectoryEntry] = []
    try:
        with os.scandir(root) as it:
            for item in it:
                if item.is_dir(follow_symlinks=False):
                    entries.append(DirectoryEntry.from_path(root / item.name))
    except OSError as exc:
        raise NotFoundError(
            f"Cannot read directory '{root}': {exc.strerror or exc}"
        ) from exc
    entries.sort(key=lambda e: e.path)
    return entries


def newest_mtime(path: Path) -> float:
    """Latest mtime of any regular file below ``path``, or 0.0 if none."""
    try:
        return _newest_mtime(path)
    except QueryFailure as exc:
        logger.debug("mtime lookup failed, using 0: %s", exc)
        return 0.0


def disk_usage(path: Path) -> int:
    """Apparent size in bytes of ``path`` and everything under it, like ``du -sb``."""
    try:
        return _disk_usage(path)
    except QueryFailure as exc:
        logger.debug("size lookup failed, using 0: %s", exc)
        return 0


def _newest_mtime(path: Path) -> float:
    newest = 0.0
    for dirpath, _dirnames, filenames in _walk(path):
        for name in filenames:
            try:
                info = os.lstat(os.path.join(dirpath, name))
            except OSError as exc:
                logger.debug("skipping %s: %s", name, exc)
                continue
            if stat.S_ISREG(info.st_mode) and info.st_mtime > newest:
                newest = info.st_mtime
    return newest


def _disk_usage(path: Path) -> int:
    try:
        root_info = os.lstat(path)
    except OSError as exc:
        raise QueryFailure(str(path), exc) from exc

    seen: set[tuple[int, int]] = {(root_info.st_dev, root_info.st_ino)}
    total = root_info.st_size
    for dirpath, dirnames, filenames in _walk(path):
        for name in dirnames + filenames:
            try:
                info = os.lstat(os.path.join(dirpath, name))
            except OSError as exc:
                logger.debug("skipping %s: %s", name, exc)
                continue
            key = (info.st_dev, info.st_ino)
            if key in seen:
                continue
            seen.add(key)
            total += info.st_size
    return total


def _walk(path: Path) -> Iterator[tuple[str, list[str], list[str]]]:
    failures: list[OSError] = []
    walker = os.walk(path, onerror=failures.append, followlinks=False)
    first = next(walker, None)
    if first is None:
        # os.walk reports a failure on the top directory through onerror only.
        cause = failures[0] if failures else FileNotFoundError(str(path))
        raise QueryFailure(str(path), cause)
    yield first
    for step in walker:
        yield step
    for exc in failures:
        logger.debug("unreadable directory skipped: %s", exc)
