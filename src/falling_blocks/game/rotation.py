from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from .grid import Board
from .pieces import Cell, KickKey, KickTable, Piece, PieceKind, default_kick_tables

logger = logging.getLogger(__name__)

# Row-vector rotation matrices for a Y-up grid.
_CLOCKWISE = np.array([[0, -1], [1, 0]], dtype=np.float64)
_COUNTER_CLOCKWISE = np.array([[0, 1], [-1, 0]], dtype=np.float64)

# Pivot diagonals in ring order: up-left, up-right, down-right, down-left.
_DIAGONALS: Tuple[Tuple[int, int], ...] = ((-1, 1), (1, 1), (1, -1), (-1, -1))


@dataclass
class SpinState:
    recently_rotated: bool = False
    used_large_kick: bool = False
    t_spin: bool = False
    mini_t_spin: bool = False

    def clear_spin(self) -> None:
        self.t_spin = False
        self.mini_t_spin = False
        self.used_large_kick = False

    def reset(self) -> None:
        self.clear_spin()
        self.recently_rotated = False


@dataclass
class RotationResult:
    piece: Piece
    kick_index: Optional[int] = None  # None when the unkicked rotation fit
    used_large_kick: bool = False


def rotate_cells(piece: Piece, direction: int) -> Tuple[Cell, ...]:
    """Rotate every block about the pivot by 90 degrees and snap to the grid."""
    matrix = _CLOCKWISE if direction > 0 else _COUNTER_CLOCKWISE
    pivot = np.array(piece.pivot, dtype=np.float64)
    offsets = piece.as_array().astype(np.float64) - pivot
    rotated = np.rint(offsets @ matrix + pivot).astype(np.int64)
    return tuple(Cell(int(x), int(y)) for x, y in rotated)


class RotationResolver:
    """SRS rotation: try the plain rotation, then each kick offset in table order."""

    def __init__(self, board: Board, kick_tables: Optional[Dict[KickKey, KickTable]] = None) -> None:
        self.board = board
        self.kick_tables = kick_tables if kick_tables is not None else default_kick_tables()

    def table_for(self, piece: Piece, direction: int) -> KickTable:
        src = int(piece.rotation)
        dst = int(piece.rotation.step(direction))
        return self.kick_tables[(piece.kind.is_i, src, dst)]

    def rotate(self, piece: Piece, direction: int) -> Optional[RotationResult]:
        if direction not in (1, -1):
            raise ValueError(f"rotation direction must be +1 or -1, got {direction}")
        cells = rotate_cells(piece, direction)
        pivot = piece.pivot
        new_state = piece.rotation.step(direction)
        if self.board.can_place(cells):
            return RotationResult(Piece(piece.kind, cells, pivot, new_state))

        table = self.table_for(piece, direction)
        for index, (dx, dy) in enumerate(table):
            kicked = tuple(Cell(c.col + dx, c.row + dy) for c in cells)
            if self.board.can_place(kicked):
                kicked_pivot = (pivot[0] + dx, pivot[1] + dy)
                return RotationResult(
                    Piece(piece.kind, kicked, kicked_pivot, new_state),
                    kick_index=index,
                    used_large_kick=index == len(table) - 1,
                )
        logger.debug("rotation of %s from %s blocked, no kick fits", piece.kind.name, piece.rotation.name)
        return None


def detect_t_spin(board: Board, piece: Piece, used_large_kick: bool) -> Tuple[bool, bool]:
    """Classify a just-rotated T piece; returns (t_spin, mini_t_spin)."""
    if piece.kind is not PieceKind.T:
        return False, False
    centre = piece.pivot_block
    filled = [board.is_occupied(centre.col + dx, centre.row + dy) for dx, dy in _DIAGONALS]
    state = int(piece.rotation)
    front = (filled[state], filled[(state + 1) % 4])
    back = (filled[(state + 2) % 4], filled[(state + 3) % 4])

    if all(front) and any(back):
        return True, False
    if all(back) and any(front):
        if used_large_kick:
            return True, False
        return False, True
    return False, False
