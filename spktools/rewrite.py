"""Repair engine: drop corrupt spans and rewrite the file in place.

The rewrite truncates and refills the same handle. There is no temp-file
swap, so a crash mid-write can leave a half-written file; run repairs
against backed-up or disposable data.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from spktools.codec import RecordDecoder
from spktools.errors import RecordFileError
from spktools.models import RepairResult
from spktools.scanner import read_handle, scan

logger = logging.getLogger(__name__)

__all__ = ["open_for_rewrite", "repair", "write_buffer"]


@contextlib.contextmanager
def open_for_rewrite(path: Path) -> Iterator[BinaryIO]:
    """Open an existing record file read-write for one in-place pass."""
    try:
        handle = open(path, "r+b")
    except OSError as e:
        raise RecordFileError(f"Cannot open record file for rewrite: {e}", path=str(path)) from e
    with handle:
        yield handle


def write_buffer(handle: BinaryIO, buffer: bytes, path: Path) -> int:
    """Replace the whole content of ``handle`` with ``buffer``.

    Returns the resulting file size.
    """
    try:
        handle.seek(0)
        handle.truncate(0)
        handle.write(buffer)
        handle.flush()
        return os.fstat(handle.fileno()).st_size
    except OSError as e:
        raise RecordFileError(f"Cannot rewrite record file: {e}", path=str(path)) from e


def repair(path: Path, codec: RecordDecoder) -> RepairResult:
    path = Path(path)
    with open_for_rewrite(path) as handle:
        data = read_handle(handle, path)
        ledger = scan(data, codec, path)
        records = ledger.record_count

        if ledger.corrupt_count == 0:
            return RepairResult(path=path, records=records, corrupt=0)

        new_size = write_buffer(handle, ledger.valid_bytes(), path)

    trimmed = len(data) - new_size
    logger.info(
        f"Rewrote {path}: kept {records} records, dropped {ledger.corrupt_count} corrupt spans ({trimmed} bytes)"
    )
    return RepairResult(
        path=path,
        records=records,
        corrupt=ledger.corrupt_count,
        trimmed_bytes=trimmed,
        rewritten=True,
    )
