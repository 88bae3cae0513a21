"""Permutation engine: reorder whole records without touching their bytes."""

from __future__ import annotations

import logging
import random
from pathlib import Path

from spktools.codec import RecordDecoder
from spktools.models import ShuffleResult
from spktools.rewrite import open_for_rewrite, write_buffer
from spktools.scanner import read_handle, scan

logger = logging.getLogger(__name__)

__all__ = ["permute_blocks", "shuffle"]


def permute_blocks(blocks: list[bytes], seed: int) -> list[bytes]:
    """Seeded Fisher-Yates permutation; same seed, same order."""
    permuted = list(blocks)
    random.Random(seed).shuffle(permuted)
    return permuted


def shuffle(path: Path, codec: RecordDecoder, seed: int) -> ShuffleResult:
    """Shuffle the records of a clean file in place.

    Files with corrupt spans are left byte-for-byte untouched; fix them first.
    """
    path = Path(path)
    with open_for_rewrite(path) as handle:
        data = read_handle(handle, path)
        ledger = scan(data, codec, path)
        records = ledger.record_count

        if ledger.corrupt_count:
            logger.warning(f"Not shuffling {path}: {ledger.corrupt_count} broken records")
            return ShuffleResult(path=path, records=records, corrupt=ledger.corrupt_count)

        buffer = b"".join(permute_blocks(ledger.blocks(), seed))
        write_buffer(handle, buffer, path)

    logger.info(f"Shuffled {records} records in {path} (seed={seed})")
    return ShuffleResult(path=path, records=records, corrupt=0, shuffled=True)
