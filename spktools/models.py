"""
Data types for record-log scanning.

A record file is nothing but concatenated record encodings. The scanner turns
one file into a FileLedger: an ordered list of RecordSpans, each either a
decoded record or a corrupt byte range.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class Outcome(str, Enum):
    """Game result from the first player's (sente / black) point of view"""
    SENTE_WIN = "sente_win"
    SENTE_LOSS = "sente_loss"
    DRAW = "draw"


@dataclass(frozen=True)
class GameRecord:
    """One decoded game.

    The tools only look at these three fields. ``startpos`` and the moves are
    opaque values owned by the rules engine; each entry of ``moves`` is a
    ``(move, score)`` pair where score is the engine evaluation from sente's
    perspective.
    """
    startpos: Any
    moves: tuple[tuple[Any, int], ...]
    outcome: Outcome


@dataclass(frozen=True)
class RecordSpan:
    """A contiguous byte range of a record file.

    ``record`` is the decoded game for a valid span and None for a corrupt one.
    """
    offset: int
    length: int
    record: GameRecord | None = None

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def is_valid(self) -> bool:
        return self.record is not None


@dataclass
class FileLedger:
    """Scan result for one file: its bytes and the spans covering them."""
    data: bytes
    spans: list[RecordSpan] = field(default_factory=list)
    corrupt_count: int = 0

    @property
    def valid_spans(self) -> list[RecordSpan]:
        return [span for span in self.spans if span.is_valid]

    @property
    def records(self) -> list[GameRecord]:
        return [span.record for span in self.spans if span.record is not None]

    @property
    def record_count(self) -> int:
        return len(self.valid_spans)

    def raw(self, span: RecordSpan) -> bytes:
        """Exact source bytes of a span."""
        return self.data[span.offset:span.end]

    def blocks(self) -> list[bytes]:
        """Raw bytes of every valid span, in file order."""
        return [self.raw(span) for span in self.valid_spans]

    def valid_bytes(self) -> bytes:
        """Concatenation of all valid spans; the repaired file content."""
        return b"".join(self.blocks())


@dataclass(frozen=True)
class RepairResult:
    path: Path
    records: int
    corrupt: int
    trimmed_bytes: int = 0
    rewritten: bool = False


@dataclass(frozen=True)
class ShuffleResult:
    path: Path
    records: int
    corrupt: int
    shuffled: bool = False


@dataclass(frozen=True)
class CountResult:
    path: Path
    positions: int = 0
    black_wins: int = 0
    white_wins: int = 0
    draws: int = 0
    reversals: int = 0
    corrupt: int = 0

    @property
    def games(self) -> int:
        return self.black_wins + self.white_wins + self.draws
