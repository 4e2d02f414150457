"""Messages crossing the engine boundary.

Commands flow in from an input collaborator and are buffered until the next
tick; events flow out to whatever presents the game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .pieces import Cell, PieceKind


# ---------- Commands ----------
@dataclass(frozen=True)
class MoveHorizontal:
    direction: int = 0


@dataclass(frozen=True)
class SetSoftDrop:
    active: bool


@dataclass(frozen=True)
class RotateClockwise:
    pass


@dataclass(frozen=True)
class RotateCounterClockwise:
    pass


@dataclass(frozen=True)
class HardDrop:
    pass


Command = Union[MoveHorizontal, SetSoftDrop, RotateClockwise, RotateCounterClockwise, HardDrop]


# ---------- Events ----------
@dataclass(frozen=True)
class PieceSpawned:
    kind: PieceKind
    cells: Tuple[Cell, ...]


@dataclass(frozen=True)
class PieceMoved:
    cells: Tuple[Cell, ...]


@dataclass(frozen=True)
class PieceLocked:
    kind: PieceKind
    cells: Tuple[Cell, ...]
    t_spin: bool = False
    mini_t_spin: bool = False


@dataclass(frozen=True)
class RowsCleared:
    rows: Tuple[int, ...]


@dataclass(frozen=True)
class ScoreChanged:
    score: int
    level: int


@dataclass(frozen=True)
class NextQueueChanged:
    kinds: Tuple[PieceKind, ...]


@dataclass(frozen=True)
class GameOver:
    pass


Event = Union[PieceSpawned, PieceMoved, PieceLocked, RowsCleared, ScoreChanged, NextQueueChanged, GameOver]
