"""
Shared pytest fixtures for spktools tests.

The real record format and rules library are external, so the tests run
against a small synthetic pair:

- FrameDecoder reads a length-framed record:
    b"G" | outcome u8 | side-to-move u8 | sente king u8 | gote king u8 |
    move count u8 | count * (from u8, to u8, score i16le)
- KingTracker is a rules engine that only follows the two kings.
"""

from collections import namedtuple
from pathlib import Path
import struct
import sys
from typing import Callable

import pytest

# Ensure the project root is on sys.path so `import spktools` works when
# running pytest without installing the package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from spktools.errors import RecordDecodeError
from spktools.models import GameRecord, Outcome
from spktools.rules import BaseRulesEngine, Color


# =============================================================================
# SYNTHETIC CODEC AND RULES
# =============================================================================

MAGIC = b"G"
HEADER = struct.Struct("<cBBBBB")
MOVE = struct.Struct("<BBh")

OUTCOME_CODES = {Outcome.SENTE_WIN: 0, Outcome.SENTE_LOSS: 1, Outcome.DRAW: 2}
CODE_OUTCOMES = {v: k for k, v in OUTCOME_CODES.items()}

KingPosition = namedtuple("KingPosition", ["stm", "sente_king", "gote_king"])


class FrameDecoder:
    def decode(self, stream):
        header = stream.read(HEADER.size)
        if len(header) < HEADER.size:
            raise RecordDecodeError("truncated header")
        magic, outcome, stm, sente_king, gote_king, count = HEADER.unpack(header)
        if magic != MAGIC:
            raise RecordDecodeError("bad magic")
        if outcome not in CODE_OUTCOMES or stm > 1:
            raise RecordDecodeError("bad header")

        body = stream.read(MOVE.size * count)
        if len(body) < MOVE.size * count:
            raise RecordDecodeError("truncated moves")

        moves = tuple(((frm, to), score) for frm, to, score in MOVE.iter_unpack(body))
        startpos = KingPosition(Color.GOTE if stm else Color.SENTE, sente_king, gote_king)
        return GameRecord(startpos=startpos, moves=moves, outcome=CODE_OUTCOMES[outcome])


class StallingDecoder(FrameDecoder):
    """Fails without consuming anything; rewinds the cursor on every error."""

    def decode(self, stream):
        start = stream.tell()
        try:
            return super().decode(stream)
        except RecordDecodeError:
            stream.seek(start)
            raise


class KingTracker(BaseRulesEngine):
    def side_to_move(self, position):
        return position.stm

    def king_square(self, position, color):
        return position.sente_king if color is Color.SENTE else position.gote_king

    def apply_move(self, position, move):
        frm, to = move
        sente_king, gote_king = position.sente_king, position.gote_king
        if position.stm is Color.SENTE and frm == sente_king:
            sente_king = to
        elif position.stm is Color.GOTE and frm == gote_king:
            gote_king = to
        return KingPosition(position.stm.flip(), sente_king, gote_king)


def encode_game(
    moves=(),
    outcome: Outcome = Outcome.SENTE_WIN,
    stm: Color = Color.SENTE,
    sente_king: int = 4,
    gote_king: int = 76,
) -> bytes:
    header = HEADER.pack(
        MAGIC,
        OUTCOME_CODES[outcome],
        1 if stm is Color.GOTE else 0,
        sente_king,
        gote_king,
        len(moves),
    )
    return header + b"".join(MOVE.pack(frm, to, score) for (frm, to), score in moves)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def codec() -> FrameDecoder:
    return FrameDecoder()


@pytest.fixture
def stalling_codec() -> StallingDecoder:
    return StallingDecoder()


@pytest.fixture
def rules() -> KingTracker:
    return KingTracker()


@pytest.fixture
def game_factory() -> Callable[..., bytes]:
    """Factory for encoded games with customizable defaults."""
    return encode_game


@pytest.fixture
def record_factory() -> Callable[..., GameRecord]:
    """Factory for decoded GameRecords (no encoding round trip)."""

    def _create_record(
        scores=(),
        outcome: Outcome = Outcome.SENTE_WIN,
        moves=None,
        startpos=None,
    ) -> GameRecord:
        if moves is None:
            moves = tuple(((0, 0), score) for score in scores)
        if startpos is None:
            startpos = KingPosition(Color.SENTE, 4, 76)
        return GameRecord(startpos=startpos, moves=tuple(moves), outcome=outcome)

    return _create_record


@pytest.fixture
def sample_games(game_factory) -> list[bytes]:
    """Five distinct games covering every outcome."""
    return [
        game_factory(moves=[((4, 13), 30), ((76, 67), -20)], outcome=Outcome.SENTE_WIN),
        game_factory(moves=[((4, 5), 100)], outcome=Outcome.SENTE_LOSS),
        game_factory(moves=[], outcome=Outcome.DRAW),
        game_factory(moves=[((1, 2), 0), ((3, 4), 0), ((5, 6), 0)], outcome=Outcome.SENTE_WIN),
        game_factory(moves=[((4, 3), -500)], outcome=Outcome.SENTE_LOSS, sente_king=3),
    ]


@pytest.fixture
def write_file(tmp_path) -> Callable[..., Path]:
    """Write bytes to a record file under tmp_path and return its path."""

    def _write(data: bytes, name: str = "games.spk") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _write
