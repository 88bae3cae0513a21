"""Statistics over decoded game records.

Per file: outcome tallies, trainable position counts, evaluation reversals
and (unless quick) king-square observations fed into a batch-wide heatmap.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from spktools.codec import RecordDecoder
from spktools.errors import ConfigurationError, RecordDecodeError
from spktools.heatmap import KingHeatmap
from spktools.models import CountResult, GameRecord, Outcome
from spktools.rules import RulesEngine, to_color
from spktools.scanner import scan_file

logger = logging.getLogger(__name__)

__all__ = [
    "aggregate",
    "count_positions",
    "is_reversal",
    "observe_game",
    "outcome_of",
    "replay_king_squares",
]


def outcome_of(record: GameRecord) -> Outcome:
    """Coerce a decoder's outcome (an Outcome or its string value)."""
    try:
        return Outcome(record.outcome)
    except ValueError as e:
        raise RecordDecodeError(f"Unknown game outcome {record.outcome!r}") from e


def count_positions(record: GameRecord, eval_limit: int) -> int:
    """Start position plus every move whose |score| is within eval_limit."""
    return 1 + sum(1 for _, score in record.moves if abs(score) <= eval_limit)


def is_reversal(record: GameRecord, eval_limit: int) -> bool:
    """True when the winner was at some point evaluated as decisively lost.

    Scores are from sente's perspective, so a sente win is a reversal if any
    score reached -eval_limit, and a sente loss if any score reached
    +eval_limit. Draws never are.
    """
    outcome = outcome_of(record)
    if outcome is Outcome.SENTE_WIN:
        return any(score <= -eval_limit for _, score in record.moves)
    if outcome is Outcome.SENTE_LOSS:
        return any(score >= eval_limit for _, score in record.moves)
    return False


def replay_king_squares(record: GameRecord, rules: RulesEngine) -> Iterator[int]:
    """Yield the side-to-move's canonical king square for every position.

    One square for the start position and one after each move, in recorded
    order.
    """
    pos = record.startpos
    stm = to_color(rules.side_to_move(pos))
    yield rules.relative_square(stm, rules.king_square(pos, stm))

    for move, _ in record.moves:
        pos = rules.apply_move(pos, move)
        stm = to_color(rules.side_to_move(pos))
        yield rules.relative_square(stm, rules.king_square(pos, stm))


def observe_game(record: GameRecord, rules: RulesEngine, heatmap: KingHeatmap) -> int:
    observed = 0
    for square in replay_king_squares(record, rules):
        heatmap.observe(square)
        observed += 1
    return observed


def aggregate(
    path: Path,
    codec: RecordDecoder,
    rules: RulesEngine | None,
    quick: bool,
    eval_limit: int,
    heatmap: KingHeatmap,
) -> CountResult:
    """Tally every valid record of one file. The file is not modified."""
    if not quick and rules is None:
        raise ConfigurationError("King heatmap needs a rules engine; configure one or use quick mode")

    path = Path(path)
    ledger = scan_file(path, codec)
    if ledger.corrupt_count:
        logger.warning(f"{path}: {ledger.corrupt_count} broken records skipped; run fix first")

    positions = black_wins = white_wins = draws = reversals = 0

    for record in ledger.records:
        outcome = outcome_of(record)
        if outcome is Outcome.SENTE_WIN:
            black_wins += 1
        elif outcome is Outcome.SENTE_LOSS:
            white_wins += 1
        else:
            draws += 1

        positions += count_positions(record, eval_limit)

        if is_reversal(record, eval_limit):
            reversals += 1

        if not quick:
            observe_game(record, rules, heatmap)

    return CountResult(
        path=path,
        positions=positions,
        black_wins=black_wins,
        white_wins=white_wins,
        draws=draws,
        reversals=reversals,
        corrupt=ledger.corrupt_count,
    )
