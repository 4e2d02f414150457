from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .grid import Board
from .pieces import Piece


@dataclass
class ClearResult:
    lines_cleared: int = 0
    rows: List[int] = field(default_factory=list)


class LineClearEngine:
    """Locks pieces into a Board and removes the rows they complete."""

    def __init__(self, board: Board) -> None:
        self.board = board

    def lock_and_clear(self, piece: Piece) -> ClearResult:
        self.board.add(piece.cells, piece.kind)
        result = ClearResult()
        # Top-down so clearing a row never renumbers a lower touched row.
        for row in sorted({c.row for c in piece.cells}, reverse=True):
            if self.board.row_count(row) >= self.board.width:
                self.board.remove_row(row)
                self.board.shift_down_above(row)
                result.rows.append(row)
        result.rows.sort()
        result.lines_cleared = len(result.rows)
        return result
