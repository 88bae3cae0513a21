"""Rules engine seam for replaying recorded games.

Only king tracking is needed: the side to move, where a given side's king
stands, and the position after a move. Squares are indexed 0..80 on the 9x9
board; the adapter for a concrete rules library maps its own square type
onto that range.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from spktools.errors import ComponentLoadError, InvalidColorError, InvalidSquareError

__all__ = [
    "BOARD_FILES",
    "BOARD_RANKS",
    "NUM_SQUARES",
    "BaseRulesEngine",
    "Color",
    "RulesEngine",
    "load_rules",
    "relative_square",
    "to_color",
]

BOARD_FILES = 9
BOARD_RANKS = 9
NUM_SQUARES = BOARD_FILES * BOARD_RANKS


class Color(str, Enum):
    """Side enumeration; sente moves first"""
    SENTE = "sente"
    GOTE = "gote"

    def flip(self) -> "Color":
        return Color.GOTE if self is Color.SENTE else Color.SENTE


def to_color(value: Any) -> Color:
    """Coerce an adapter's side value (a Color or its string value)."""
    try:
        return Color(value)
    except ValueError as e:
        raise InvalidColorError(f"Unknown side {value!r}") from e


def relative_square(color: Color, square: int) -> int:
    """Map a square into sente's frame of reference.

    Gote squares are rotated 180 degrees about the board centre so both
    sides' king paths land in the same bins.
    """
    if not 0 <= square < NUM_SQUARES:
        raise InvalidSquareError("Square index out of range", square=square)
    if to_color(color) is Color.SENTE:
        return square
    return NUM_SQUARES - 1 - square


@runtime_checkable
class RulesEngine(Protocol):
    def side_to_move(self, position: Any) -> Color:
        ...

    def king_square(self, position: Any, color: Color) -> int:
        ...

    def apply_move(self, position: Any, move: Any) -> Any:
        ...

    def relative_square(self, color: Color, square: int) -> int:
        ...


class BaseRulesEngine(ABC):
    """Adapter base class supplying the canonical square transform."""

    @abstractmethod
    def side_to_move(self, position: Any) -> Color:
        ...

    @abstractmethod
    def king_square(self, position: Any, color: Color) -> int:
        ...

    @abstractmethod
    def apply_move(self, position: Any, move: Any) -> Any:
        ...

    def relative_square(self, color: Color, square: int) -> int:
        return relative_square(color, square)


def load_rules(target: str) -> RulesEngine:
    from spktools.codec import load_component

    rules = load_component(target)
    if not isinstance(rules, RulesEngine):
        raise ComponentLoadError(f"{target} is not a rules engine", target=target)
    return rules
