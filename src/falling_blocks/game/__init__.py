"""Game module for falling_blocks.

Exports the core engine and supporting classes:
- Board: locked cells, bounds and collision checks
- Piece / PieceKind: tetromino templates and the active piece value
- NextQueue: bag randomizer with a 3-piece preview
- RotationResolver: SRS rotation with kick tables and T-spin detection
- LineClearEngine: locking, row clearing and compaction
- ScoringRules / ScoreState: score, level and back-to-back state
- GameLoop: tick-driven state machine consuming commands and emitting events
"""

from .config import GameConfig
from .core import GameLoop, GamePhase
from .errors import ConfigError
from .events import (
    GameOver,
    HardDrop,
    MoveHorizontal,
    NextQueueChanged,
    PieceLocked,
    PieceMoved,
    PieceSpawned,
    RotateClockwise,
    RotateCounterClockwise,
    RowsCleared,
    ScoreChanged,
    SetSoftDrop,
)
from .grid import Board
from .lines import ClearResult, LineClearEngine
from .pieces import Cell, Piece, PieceKind, RotationState
from .randomizer import NextQueue
from .rotation import RotationResolver, SpinState, detect_t_spin
from .rules import ScoreResult, ScoreState, ScoringRules, gravity_period

__all__ = [
    "Board",
    "Cell",
    "ClearResult",
    "ConfigError",
    "GameConfig",
    "GameLoop",
    "GameOver",
    "GamePhase",
    "HardDrop",
    "LineClearEngine",
    "MoveHorizontal",
    "NextQueue",
    "NextQueueChanged",
    "Piece",
    "PieceKind",
    "PieceLocked",
    "PieceMoved",
    "PieceSpawned",
    "RotateClockwise",
    "RotateCounterClockwise",
    "RotationResolver",
    "RotationState",
    "RowsCleared",
    "ScoreChanged",
    "ScoreResult",
    "ScoreState",
    "ScoringRules",
    "SetSoftDrop",
    "SpinState",
    "detect_t_spin",
    "gravity_period",
]
