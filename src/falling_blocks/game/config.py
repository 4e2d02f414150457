from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import ConfigError
from .pieces import TEMPLATES, Cell, KickKey, KickTable, PieceKind, default_kick_tables


@dataclass
class GameConfig:
    """Constants supplied at construction; never re-read at runtime.

    Times are in seconds. `overflow_height` defaults to the top of the
    playfield (`ground_level + height`); a piece that locks with any cell at or
    above it ends the game.
    """

    width: int = 10
    height: int = 20
    ground_level: int = 0
    spawn_column: int = 4
    spawn_row: Optional[int] = None
    overflow_height: Optional[int] = None
    grid_unit: float = 1.0
    lock_delay: float = 0.5
    move_interval: float = 0.1
    soft_drop_period: float = 0.01
    preview_size: int = 3
    lines_per_level: int = 10
    piece_kinds: Tuple[PieceKind, ...] = tuple(PieceKind)
    random_seed: Optional[int] = None
    kick_tables: Dict[KickKey, KickTable] = field(default_factory=default_kick_tables)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"board must be non-empty, got {self.width}x{self.height}")
        if self.spawn_row is None:
            self.spawn_row = self.ground_level + self.height
        if self.overflow_height is None:
            self.overflow_height = self.ground_level + self.height
        if not 0 <= self.spawn_column < self.width:
            raise ConfigError(f"spawn column {self.spawn_column} outside 0..{self.width - 1}")
        if self.spawn_row < self.ground_level:
            raise ConfigError("spawn row is below ground level")
        if self.overflow_height <= self.ground_level:
            raise ConfigError("overflow height must be above ground level")
        if self.grid_unit <= 0:
            raise ConfigError("grid unit must be positive")
        for name in ("lock_delay", "move_interval", "soft_drop_period"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.preview_size < 1:
            raise ConfigError("preview must hold at least one piece")
        if self.lines_per_level < 1:
            raise ConfigError("lines_per_level must be positive")
        if not self.piece_kinds:
            raise ConfigError("piece pool is empty")
        if len(set(self.piece_kinds)) != len(self.piece_kinds):
            raise ConfigError("piece pool holds duplicate kinds")
        self.piece_kinds = tuple(PieceKind(k) for k in self.piece_kinds)
        for kind in self.piece_kinds:
            cols = [self.spawn_column + dx for dx, _ in TEMPLATES[kind]]
            if min(cols) < 0 or max(cols) >= self.width:
                raise ConfigError(f"{kind.name} does not fit the board at spawn column {self.spawn_column}")
        self._check_kick_tables()

    def _check_kick_tables(self) -> None:
        for is_i in (False, True):
            for src in range(4):
                for direction in (1, -1):
                    key = (is_i, src, (src + direction) % 4)
                    table = self.kick_tables.get(key)
                    if not table:
                        raise ConfigError(f"missing or empty kick table for {key}")
                    for offset in table:
                        if len(offset) != 2:
                            raise ConfigError(f"kick offset {offset!r} in {key} is not a 2-vector")

    @property
    def spawn_cell(self) -> Cell:
        return Cell(self.spawn_column, int(self.spawn_row))

    def to_world(self, cell: Cell) -> Tuple[float, float]:
        """Presentation-space position of a cell's origin."""
        return (cell.col * self.grid_unit, cell.row * self.grid_unit)
