from __future__ import annotations

from typing import Dict, Iterable, List

import numpy as np

from .pieces import Cell, PieceKind


class Board:
    """Locked cells of the playfield, keyed by Cell.

    Rows grow upward from `ground_level`. There is no ceiling: cells above the
    visible field are legal so pieces can spawn there.
    """

    def __init__(self, width: int, height: int, ground_level: int = 0) -> None:
        self.width = int(width)
        self.height = int(height)
        self.ground_level = int(ground_level)
        self.occupied: Dict[Cell, PieceKind] = {}

    @property
    def left_boundary(self) -> int:
        return 0

    @property
    def right_boundary(self) -> int:
        return self.width - 1

    def clear(self) -> None:
        self.occupied.clear()

    def __len__(self) -> int:
        return len(self.occupied)

    def __contains__(self, cell: object) -> bool:
        return cell in self.occupied

    def is_occupied(self, col: int, row: int) -> bool:
        return Cell(col, row) in self.occupied

    def in_bounds(self, cell: Cell) -> bool:
        return self.left_boundary <= cell.col <= self.right_boundary and cell.row >= self.ground_level

    def can_place(self, cells: Iterable[Cell]) -> bool:
        for cell in cells:
            if not self.in_bounds(cell) or cell in self.occupied:
                return False
        return True

    def add(self, cells: Iterable[Cell], kind: PieceKind) -> None:
        for cell in cells:
            self.occupied[Cell(*cell)] = kind

    def cells_in_row(self, row: int) -> List[Cell]:
        return [c for c in self.occupied if c.row == row]

    def row_count(self, row: int) -> int:
        return sum(1 for c in self.occupied if c.row == row)

    def remove_row(self, row: int) -> List[Cell]:
        removed = self.cells_in_row(row)
        for cell in removed:
            del self.occupied[cell]
        return removed

    def shift_down_above(self, row: int) -> int:
        """Move every cell strictly above `row` down by one; returns how many moved."""
        above = [(c, k) for c, k in self.occupied.items() if c.row > row]
        for cell, _ in above:
            del self.occupied[cell]
        for cell, kind in above:
            self.occupied[Cell(cell.col, cell.row - 1)] = kind
        return len(above)

    def landing_distance(self, cells: Iterable[Cell]) -> int:
        """Rows the given cells can fall before they would collide."""
        cells = list(cells)
        distance = 0
        while self.can_place(Cell(c.col, c.row - distance - 1) for c in cells):
            distance += 1
        return distance

    def to_array(self) -> np.ndarray:
        """Visible field as int8, top row first; 0 is empty, else the PieceKind value."""
        grid = np.zeros((self.height, self.width), dtype=np.int8)
        for cell, kind in self.occupied.items():
            y = self.height - 1 - (cell.row - self.ground_level)
            if 0 <= y < self.height:
                grid[y, cell.col] = int(kind)
        return grid
