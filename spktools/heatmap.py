"""King-square heatmap and its board-shaped text rendering."""

from __future__ import annotations

import numpy as np

from spktools.errors import InvalidSquareError
from spktools.rules import BOARD_FILES, BOARD_RANKS, NUM_SQUARES

__all__ = ["KingHeatmap", "ratio_tier", "render"]

CELL_WIDTH = 11

# ANSI colors
COLORS = {
    "red": "\033[91m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "blue": "\033[94m",
    "end": "\033[0m",
}


class KingHeatmap:
    """Occupancy counts per canonical square, shared across a whole batch."""

    def __init__(self) -> None:
        self.bins = np.zeros(NUM_SQUARES, dtype=np.int64)

    def observe(self, square: int) -> None:
        if not 0 <= square < NUM_SQUARES:
            raise InvalidSquareError("Square index out of range", square=square)
        self.bins[square] += 1

    def count(self, square: int) -> int:
        return int(self.bins[square])

    def total(self) -> int:
        return int(self.bins.sum())

    def to_list(self) -> list[int]:
        return [int(v) for v in self.bins]


def ratio_tier(ratio: float) -> str:
    """Emphasis colour for a percentage."""
    if ratio > 10.0:
        return "red"
    if ratio > 5.0:
        return "yellow"
    return "blue"


def _cell(text: str, color: str | None = None) -> str:
    padded = text.center(CELL_WIDTH)
    if color:
        padded = f"{COLORS[color]}{padded}{COLORS['end']}"
    return f"| {padded} "


def render(total_positions: int, heatmap: KingHeatmap, use_colors: bool = False) -> str:
    """Render the heatmap as a 9x9 grid, highest rank first.

    Each board row is drawn as a count line followed by a percentage line.
    """
    border = "-" * ((CELL_WIDTH + 3) * BOARD_FILES + 1)
    space = "|" + (" " * (CELL_WIDTH + 2) + "|") * BOARD_FILES
    lines = [border, space]

    for row in range(BOARD_RANKS):
        squares = [(BOARD_RANKS - 1 - row) * BOARD_FILES + f for f in range(BOARD_FILES)]

        counts = "".join(_cell(str(heatmap.count(sq))) for sq in squares)
        lines.append(counts + "|")

        cells = []
        for sq in squares:
            ratio = heatmap.count(sq) / total_positions * 100.0 if total_positions else 0.0
            cells.append(_cell(f"{ratio:.2f}%", ratio_tier(ratio) if use_colors else None))
        lines.append("".join(cells) + "|")

        lines.append(space)
        lines.append(border)
        if row != BOARD_RANKS - 1:
            lines.append(space)

    return "\n".join(lines)
