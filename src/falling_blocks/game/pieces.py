from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, NamedTuple, Tuple

import numpy as np


class Cell(NamedTuple):
    col: int
    row: int


class PieceKind(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7

    @property
    def is_t(self) -> bool:
        return self is PieceKind.T

    @property
    def is_i(self) -> bool:
        return self is PieceKind.I


class RotationState(IntEnum):
    ZERO = 0
    RIGHT = 1
    TWO = 2
    LEFT = 3

    def step(self, direction: int) -> "RotationState":
        return RotationState((self + direction) % 4)


# Block 0 first; it is the rotation anchor and the T-spin pivot.
TEMPLATES: Dict[PieceKind, Tuple[Tuple[int, int], ...]] = {
    PieceKind.J: ((0, 0), (-1, 0), (-1, 1), (1, 0)),
    PieceKind.S: ((0, 0), (-1, 0), (0, 1), (1, 1)),
    PieceKind.Z: ((0, 0), (1, 0), (0, 1), (-1, 1)),
    PieceKind.O: ((0, 0), (0, 1), (1, 1), (1, 0)),
    PieceKind.I: ((0, 0), (-1, 0), (1, 0), (2, 0)),
    PieceKind.L: ((0, 0), (-1, 0), (1, 0), (1, 1)),
    PieceKind.T: ((0, 0), (-1, 0), (0, 1), (1, 0)),
}

# Offset from block 0 to the rotation centre (half steps for I and O).
PIVOT_OFFSETS: Dict[PieceKind, Tuple[float, float]] = {
    PieceKind.I: (0.5, -0.5),
    PieceKind.O: (0.5, 0.5),
}

KickKey = Tuple[bool, int, int]  # (is_i, from_state, to_state)
KickTable = Tuple[Tuple[int, int], ...]

# SRS tests 2-5 (test 1 is the unkicked rotation), Y axis pointing up.
JLSTZ_KICKS: Dict[Tuple[int, int], KickTable] = {
    (0, 1): ((-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (1, 0): ((1, 0), (1, -1), (0, 2), (1, 2)),
    (1, 2): ((1, 0), (1, -1), (0, 2), (1, 2)),
    (2, 1): ((-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (2, 3): ((1, 0), (1, 1), (0, -2), (1, -2)),
    (3, 2): ((-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (3, 0): ((-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (0, 3): ((1, 0), (1, 1), (0, -2), (1, -2)),
}
I_KICKS: Dict[Tuple[int, int], KickTable] = {
    (0, 1): ((-2, 0), (1, 0), (-2, -1), (1, 2)),
    (1, 0): ((2, 0), (-1, 0), (2, 1), (-1, -2)),
    (1, 2): ((-1, 0), (2, 0), (-1, 2), (2, -1)),
    (2, 1): ((1, 0), (-2, 0), (1, -2), (-2, 1)),
    (2, 3): ((2, 0), (-1, 0), (2, 1), (-1, -2)),
    (3, 2): ((-2, 0), (1, 0), (-2, -1), (1, 2)),
    (3, 0): ((1, 0), (-2, 0), (1, -2), (-2, 1)),
    (0, 3): ((-1, 0), (2, 0), (-1, 2), (2, -1)),
}


def default_kick_tables() -> Dict[KickKey, KickTable]:
    tables: Dict[KickKey, KickTable] = {}
    for (src, dst), offsets in JLSTZ_KICKS.items():
        tables[(False, src, dst)] = offsets
    for (src, dst), offsets in I_KICKS.items():
        tables[(True, src, dst)] = offsets
    return tables


@dataclass(frozen=True)
class Piece:
    """The active tetromino.

    `cells` always equals the kind's template rotated to `rotation` and placed
    around `pivot`; every transform returns a new Piece so derived values can
    never go stale.
    """

    kind: PieceKind
    cells: Tuple[Cell, ...]
    pivot: Tuple[float, float]
    rotation: RotationState = RotationState.ZERO

    @classmethod
    def spawn(cls, kind: PieceKind, col: int, row: int) -> "Piece":
        cells = tuple(Cell(col + dx, row + dy) for dx, dy in TEMPLATES[kind])
        off_x, off_y = PIVOT_OFFSETS.get(kind, (0.0, 0.0))
        return cls(kind, cells, (col + off_x, row + off_y), RotationState.ZERO)

    def translated(self, dx: int, dy: int) -> "Piece":
        cells = tuple(Cell(c.col + dx, c.row + dy) for c in self.cells)
        return replace(self, cells=cells, pivot=(self.pivot[0] + dx, self.pivot[1] + dy))

    def as_array(self) -> np.ndarray:
        return np.array(self.cells, dtype=np.int64)

    @property
    def pivot_block(self) -> Cell:
        return self.cells[0]

    # np.argmin/argmax return the first index on ties.
    def leftmost_index(self) -> int:
        return int(np.argmin(self.as_array()[:, 0]))

    def rightmost_index(self) -> int:
        return int(np.argmax(self.as_array()[:, 0]))

    def lowest_index(self) -> int:
        return int(np.argmin(self.as_array()[:, 1]))
