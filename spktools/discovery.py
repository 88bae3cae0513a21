"""Input path expansion."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from spktools.errors import RecordFileError

logger = logging.getLogger(__name__)

__all__ = ["collect_files", "list_dir_files"]


def list_dir_files(directory: Path, recursive: bool) -> list[Path]:
    result: list[Path] = []
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise RecordFileError(f"Cannot list directory: {e}", path=str(directory)) from e

    for entry in entries:
        if entry.is_file():
            result.append(entry)
        elif entry.is_dir() and recursive:
            result.extend(list_dir_files(entry, recursive))
    return result


def collect_files(paths: Iterable[Path], recursive: bool, extension: str = ".spk") -> list[Path]:
    """Expand files and directories into record files with ``extension``.

    Paths that are neither a file nor a directory are warned about and
    skipped.
    """
    files: list[Path] = []
    for path in paths:
        path = Path(path)
        if path.is_file():
            files.append(path)
        elif path.is_dir():
            files.extend(list_dir_files(path, recursive))
        else:
            logger.warning(f"Invalid path: {path}")

    return [p for p in files if p.suffix == extension]
