from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, NamedTuple

logger = logging.getLogger(__name__)


class ScoreResult(NamedTuple):
    delta: int
    multiplier: float
    prior_move_difficult: bool


@dataclass
class ScoringRules:
    """Guideline-style line clear, T-spin and drop scoring.

    Every base value is multiplied by the level. Difficult moves (T-spin
    clears and Tetrises) also take the back-to-back multiplier when the
    previous scored move was difficult.
    """

    plain: Dict[int, int] = field(default_factory=lambda: {0: 0, 1: 100, 2: 300, 3: 500})
    t_spin: Dict[int, int] = field(default_factory=lambda: {0: 400, 1: 800, 2: 1200, 3: 1600})
    mini_t_spin: Dict[int, int] = field(default_factory=lambda: {0: 100, 1: 200, 2: 400})
    tetris: int = 800
    back_to_back: float = 1.5
    soft_drop_per_row: int = 1
    hard_drop_per_row: int = 2

    def score(
        self,
        lines: int,
        is_t_piece: bool,
        t_spin: bool,
        mini_t_spin: bool,
        level: int,
        prior_move_difficult: bool,
        current_multiplier: float = 1.0,
    ) -> ScoreResult:
        """Points for one lock.

        `current_multiplier` is the stored back-to-back multiplier; 0-line spins
        hand it back unchanged.
        """
        if not 0 <= lines <= 4:
            raise ValueError(f"a single lock clears 0..4 lines, got {lines}")
        multiplier = self.back_to_back if prior_move_difficult else 1.0

        if lines == 0:
            if is_t_piece and mini_t_spin:
                return ScoreResult(self.mini_t_spin[0] * level, current_multiplier, prior_move_difficult)
            if is_t_piece and t_spin:
                return ScoreResult(self.t_spin[0] * level, current_multiplier, prior_move_difficult)
            return ScoreResult(0, 1.0, False)

        if lines == 4:
            return ScoreResult(int(self.tetris * level * multiplier), multiplier, True)

        if is_t_piece:
            if mini_t_spin and lines in self.mini_t_spin:
                return ScoreResult(int(self.mini_t_spin[lines] * level * multiplier), multiplier, True)
            if t_spin and lines in self.t_spin:
                return ScoreResult(int(self.t_spin[lines] * level * multiplier), multiplier, True)

        return ScoreResult(self.plain[lines] * level, 1.0, False)


def gravity_period(level: int) -> float:
    """Seconds per row: (0.8 - (level - 1) * 0.007) ** (level - 1)."""
    base = max(0.8 - (level - 1) * 0.007, 0.0)
    return base ** (level - 1)


@dataclass
class ScoreState:
    score: int = 0
    level: int = 1
    lines_this_level: int = 0
    total_lines: int = 0
    prior_move_difficult: bool = False
    multiplier: float = 1.0
    lines_per_level: int = 10

    def apply(self, result: ScoreResult) -> None:
        self.score += result.delta
        self.multiplier = result.multiplier
        self.prior_move_difficult = result.prior_move_difficult

    def add_points(self, points: int) -> None:
        self.score += points

    def add_lines(self, lines: int) -> bool:
        """Count cleared lines; returns True when the level went up."""
        self.total_lines += lines
        self.lines_this_level += lines
        levelled = False
        while self.lines_this_level >= self.lines_per_level:
            self.lines_this_level -= self.lines_per_level
            self.level += 1
            levelled = True
        if levelled:
            logger.info("level up: %d (%d lines total)", self.level, self.total_lines)
        return levelled

    @property
    def gravity(self) -> float:
        return gravity_period(self.level)
