"""Iterative directory walk feeding the index builder."""

from __future__ import annotations

from collections.abc import Iterator
import logging
import os
from pathlib import Path


logger = logging.getLogger(__name__)


def _identity(stat_result: os.stat_result) -> tuple[int, int]:
    return (stat_result.st_dev, stat_result.st_ino)


def walk_files(root: str | Path, *, log: logging.Logger | None = None) -> Iterator[Path]:
    """Yield every regular file reachable from ``root``.

    Directories are tracked by device and inode, so a symlink pointing back up
    the tree is entered at most once. Opening ``root`` itself must succeed;
    later directory and entry errors are logged and skipped.
    """
    log = log or logger
    root_path = Path(root)
    visited = {_identity(root_path.stat())}
    pending: list[Path] = [root_path]
    is_root = True

    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as iterator:
                entries = list(iterator)
        except OSError as exc:
            if is_root:
                raise
            log.error("Cannot read %s: %s", directory, exc)
            continue
        is_root = False

        for entry in entries:
            path = Path(entry.path)
            try:
                if entry.is_dir():
                    identity = _identity(entry.stat())
                elif entry.is_file():
                    identity = None
                else:
                    continue
            except OSError as exc:
                log.error("Cannot get file type for %s: %s", path, exc)
                continue

            if identity is None:
                yield path
            elif identity in visited:
                log.debug("Already visited %s", path)
            else:
                visited.add(identity)
                pending.append(path)
