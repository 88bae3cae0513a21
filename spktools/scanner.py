"""Record scanner.

Walks a record file from offset 0 to end-of-file, asking the decoder for one
record at a time, and classifies every byte into valid or corrupt spans.

Forward progress is enforced here rather than trusted to the decoder: an
attempt that leaves the cursor where it started (or moves it backwards)
turns the whole remainder of the file into a single corrupt span.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO

from spktools.codec import RecordDecoder
from spktools.errors import RecordFileError
from spktools.models import FileLedger, GameRecord, RecordSpan

logger = logging.getLogger(__name__)

__all__ = ["read_handle", "scan", "scan_file"]


def scan(data: bytes, codec: RecordDecoder, path: Path | None = None) -> FileLedger:
    """Classify ``data`` into contiguous record spans.

    ``path`` only labels I/O errors raised by the decoder.
    """
    ledger = FileLedger(data=data)
    stream = io.BytesIO(data)
    end = len(data)
    offset = 0

    while offset < end:
        stream.seek(offset)
        record: GameRecord | None
        try:
            record = codec.decode(stream)
        except OSError as e:
            raise RecordFileError(f"Cannot read record file: {e}", path=str(path) if path else None) from e
        except Exception as e:
            record = None
            logger.debug(f"Decode failed at offset {offset}: {e}")

        consumed = min(stream.tell(), end) - offset
        if consumed <= 0:
            # No progress: give up on the rest of the file.
            logger.debug(f"Decoder made no progress at offset {offset}; {end - offset} trailing bytes are corrupt")
            consumed = end - offset
            record = None

        ledger.spans.append(RecordSpan(offset=offset, length=consumed, record=record))
        if record is None:
            ledger.corrupt_count += 1
        offset += consumed

    return ledger


def read_handle(handle: BinaryIO, path: Path) -> bytes:
    try:
        handle.seek(0)
        return handle.read()
    except OSError as e:
        raise RecordFileError(f"Cannot read record file: {e}", path=str(path)) from e


def scan_file(path: Path, codec: RecordDecoder) -> FileLedger:
    """Read a whole file and scan it. The file is never modified."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise RecordFileError(f"Cannot read record file: {e}", path=str(path)) from e
    return scan(data, codec, path)
