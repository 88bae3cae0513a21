"""Operator-facing report lines and batch summaries."""

from __future__ import annotations

import sys
from dataclasses import asdict, dataclass, field
from typing import Any

from spktools.heatmap import COLORS as ANSI_COLORS, KingHeatmap, render
from spktools.models import CountResult, RepairResult, ShuffleResult

__all__ = ["CountSummary", "MaintenanceSummary", "Reporter", "percent"]

SUMMARY_TITLE = "               Summary               "
SUMMARY_RULE = "-" * 37


def percent(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole else 0.0


@dataclass
class CountSummary:
    files: int = 0
    positions: int = 0
    black_wins: int = 0
    white_wins: int = 0
    draws: int = 0
    reversals: int = 0
    corrupt: int = 0
    heatmap: KingHeatmap = field(default_factory=KingHeatmap)

    @property
    def games(self) -> int:
        return self.black_wins + self.white_wins + self.draws

    def add(self, result: CountResult) -> None:
        self.files += 1
        self.positions += result.positions
        self.black_wins += result.black_wins
        self.white_wins += result.white_wins
        self.draws += result.draws
        self.reversals += result.reversals
        self.corrupt += result.corrupt

    def to_dict(self, include_heatmap: bool = True) -> dict[str, Any]:
        data = {k: v for k, v in asdict(self).items() if k != "heatmap"}
        data["games"] = self.games
        if include_heatmap:
            data["king_squares"] = self.heatmap.to_list()
        return data


@dataclass
class MaintenanceSummary:
    files: int = 0
    records: int = 0
    corrupt: int = 0
    trimmed_bytes: int = 0
    fixed_files: int = 0
    shuffled_files: int = 0

    def add(self, result: RepairResult | ShuffleResult) -> None:
        self.files += 1
        self.records += result.records
        self.corrupt += result.corrupt
        if isinstance(result, RepairResult):
            self.trimmed_bytes += result.trimmed_bytes
            if result.rewritten:
                self.fixed_files += 1
        elif result.shuffled:
            self.shuffled_files += 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Reporter:
    """Prints per-file status lines and batch summaries to stdout."""

    COLORS = ANSI_COLORS

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors and sys.stdout.isatty()

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['end']}"

    def checking(self, count: int) -> None:
        print(f"Checking {count} files...")

    def repair_status(self, result: RepairResult) -> None:
        if not result.rewritten:
            print(f"{self._color('  OK  ', 'green')}: {result.path}, {result.records} records")
            return
        print(
            f"{self._color('Fixed ', 'yellow')}: {result.path}, {result.records} records, "
            f"{result.corrupt} broken records, {result.trimmed_bytes} bytes trimmed"
        )

    def shuffle_status(self, result: ShuffleResult) -> None:
        if result.shuffled:
            print(f"{self._color('Shuffled', 'green')}: {result.path}, {result.records} records")
            return
        print(
            f"{self._color('Skipped ', 'red')}: {result.path}, "
            f"shuffling refused because of {result.corrupt} broken records"
        )

    def _header(self) -> None:
        print(SUMMARY_TITLE)
        print(SUMMARY_RULE)

    def count_summary(self, summary: CountSummary, show_heatmap: bool) -> None:
        games = summary.games
        self._header()
        print(f"Total positions: {summary.positions}")
        print(f"Total games    : {games}")
        for label, value in (
            ("Black wins     ", summary.black_wins),
            ("White wins     ", summary.white_wins),
            ("Draws          ", summary.draws),
            ("Reverses       ", summary.reversals),
        ):
            print(f"{label}: {value:<8} ({percent(value, games):.2f}%)")
        if summary.corrupt:
            print(self._color(f"Broken records : {summary.corrupt} (not counted)", "red"))

        if show_heatmap:
            print("King squares:")
            print(render(summary.positions, summary.heatmap, use_colors=self.use_colors))

    def maintenance_summary(self, summary: MaintenanceSummary) -> None:
        self._header()
        print(f"Total records: {summary.records}")
        print(f"Total broken records: {summary.corrupt}")
        print(f"Total trimmed bytes: {summary.trimmed_bytes}")
        print(f"Fixed files: {summary.fixed_files}")
