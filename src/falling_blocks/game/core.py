from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .config import GameConfig
from .events import (
    Command,
    Event,
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
from .pieces import Cell, Piece, PieceKind
from .randomizer import NextQueue
from .rotation import RotationResolver, SpinState, detect_t_spin
from .rules import ScoreState, ScoringRules

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCK_PENDING = "lock_pending"
    LOCKED = "locked"
    CLEARING = "clearing"
    GAME_OVER = "game_over"


class GameLoop:
    """Tick-driven falling-block game.

    Commands submitted between ticks are buffered: the horizontal axis and the
    soft-drop switch keep their latest value, rotations and hard drops are
    pulses consumed once. `tick(dt)` applies them, advances gravity and lock
    delay, and returns the events produced.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height, self.config.ground_level)
        self.rotator = RotationResolver(self.board, self.config.kick_tables)
        self.clearer = LineClearEngine(self.board)
        self.queue = NextQueue(self.config.piece_kinds, self.config.preview_size, self.rng)
        self.score_state = ScoreState(lines_per_level=self.config.lines_per_level)
        self.spin = SpinState()
        self.piece: Optional[Piece] = None
        self.phase = GamePhase.SPAWNING
        self.soft_drop = False
        self.drop_timer = 0.0
        self.lock_timer = 0.0
        self.input_timer = self.config.move_interval
        self.last_clear = ClearResult()

        self._events: List[Event] = []
        self._published: Tuple[int, int] = (0, 1)
        self._horizontal = 0
        self._soft_drop_request: Optional[bool] = None
        self._rotations: List[int] = []
        self._hard_drop = False
        self.reset()

    # ---------- lifecycle ----------
    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.board.clear()
        self.queue.reset()
        self.score_state = ScoreState(lines_per_level=self.config.lines_per_level)
        self.spin.reset()
        self.piece = None
        self.soft_drop = False
        self.drop_timer = 0.0
        self.lock_timer = 0.0
        self.input_timer = self.config.move_interval
        self.last_clear = ClearResult()
        self._events.clear()
        self._clear_input()
        self._published = (self.score_state.score, self.score_state.level)
        self._emit(ScoreChanged(self.score_state.score, self.score_state.level))
        logger.info("new game on a %dx%d board", self.config.width, self.config.height)
        self._spawn()

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    # ---------- inbound ----------
    def submit(self, command: Command) -> None:
        if self.game_over:
            return
        if isinstance(command, MoveHorizontal):
            self._horizontal = max(-1, min(1, int(command.direction)))
        elif isinstance(command, SetSoftDrop):
            self._soft_drop_request = bool(command.active)
        elif isinstance(command, RotateClockwise):
            self._rotations.append(1)
        elif isinstance(command, RotateCounterClockwise):
            self._rotations.append(-1)
        elif isinstance(command, HardDrop):
            self._hard_drop = True
        else:
            raise TypeError(f"unknown command {command!r}")

    def tick(self, dt: float) -> List[Event]:
        if self.game_over:
            self._clear_input()
            return self.drain_events()
        self.drop_timer += dt
        self.input_timer += dt
        self._consume_input()
        if self.phase in (GamePhase.FALLING, GamePhase.LOCK_PENDING):
            self._advance(dt)
        self._publish_score()
        return self.drain_events()

    # ---------- outbound ----------
    def drain_events(self) -> List[Event]:
        events, self._events = self._events, []
        return events

    def _emit(self, event: Event) -> None:
        self._events.append(event)

    def _publish_score(self) -> None:
        current = (self.score_state.score, self.score_state.level)
        if current != self._published:
            self._published = current
            self._emit(ScoreChanged(*current))

    # ---------- queries ----------
    @property
    def next_kinds(self) -> Tuple[PieceKind, ...]:
        return self.queue.peek()

    @property
    def gravity_period(self) -> float:
        if self.soft_drop:
            return self.config.soft_drop_period
        return self.score_state.gravity

    def ghost_cells(self) -> Tuple[Cell, ...]:
        if self.piece is None:
            return ()
        distance = self.board.landing_distance(self.piece.cells)
        return self.piece.translated(0, -distance).cells

    def snapshot(self) -> np.ndarray:
        # Active piece overlaid as a negative kind value
        state = self.board.to_array()
        if self.piece is not None and not self.game_over:
            for col, row in self.piece.cells:
                y = self.board.height - 1 - (row - self.board.ground_level)
                if 0 <= y < self.board.height and 0 <= col < self.board.width:
                    state[y, col] = -int(self.piece.kind)
        return state

    # ---------- tick internals ----------
    def _clear_input(self) -> None:
        self._horizontal = 0
        self._soft_drop_request = None
        self._rotations.clear()
        self._hard_drop = False

    def _consume_input(self) -> None:
        if self._soft_drop_request is not None:
            self.soft_drop = self._soft_drop_request
            self._soft_drop_request = None

        active = self.phase in (GamePhase.FALLING, GamePhase.LOCK_PENDING)
        if active and self._horizontal and self.input_timer >= self.config.move_interval:
            self.input_timer = 0.0
            self._try_translate(self._horizontal, 0)

        rotations, self._rotations = self._rotations, []
        for direction in rotations:
            self._rotate(direction)

        if self._hard_drop:
            self._hard_drop = False
            self._hard_drop_and_lock()

    def _advance(self, dt: float) -> None:
        if self.piece is None:
            return
        if self.phase is GamePhase.FALLING:
            if self.drop_timer <= self.gravity_period:
                return
            self.drop_timer = 0.0
            if self._try_translate(0, -1):
                if self.soft_drop:
                    self.score_state.add_points(self.rules.soft_drop_per_row)
            elif self.soft_drop:
                self._lock()
            else:
                self.phase = GamePhase.LOCK_PENDING
                self.lock_timer = 0.0
            return

        # LOCK_PENDING
        if self.board.can_place(self.piece.translated(0, -1).cells):
            self.phase = GamePhase.FALLING
            return
        if self.soft_drop:
            self._lock()
            return
        self.lock_timer += dt
        if self.lock_timer >= self.config.lock_delay:
            self._lock()

    def _try_translate(self, dx: int, dy: int) -> bool:
        if self.piece is None:
            return False
        candidate = self.piece.translated(dx, dy)
        if not self.board.can_place(candidate.cells):
            return False
        self.piece = candidate
        self.spin.reset()
        if dy < 0:
            self.lock_timer = 0.0
        self._emit(PieceMoved(candidate.cells))
        return True

    def _rotate(self, direction: int) -> None:
        if self.piece is None or self.phase not in (GamePhase.FALLING, GamePhase.LOCK_PENDING):
            return
        self.spin.clear_spin()
        result = self.rotator.rotate(self.piece, direction)
        if result is None:
            return
        self.piece = result.piece
        self.spin.used_large_kick = result.used_large_kick
        if self.piece.kind.is_t:
            self.spin.t_spin, self.spin.mini_t_spin = detect_t_spin(
                self.board, self.piece, result.used_large_kick
            )
        self.spin.recently_rotated = True
        self._emit(PieceMoved(self.piece.cells))

    def _hard_drop_and_lock(self) -> None:
        if self.piece is None or self.phase not in (GamePhase.FALLING, GamePhase.LOCK_PENDING):
            return
        distance = self.board.landing_distance(self.piece.cells)
        if distance:
            self.piece = self.piece.translated(0, -distance)
            self.spin.reset()
            self._emit(PieceMoved(self.piece.cells))
            self.score_state.add_points(self.rules.hard_drop_per_row * distance)
        self._lock()

    def _lock(self) -> None:
        if self.piece is None:
            return
        piece = self.piece
        self.phase = GamePhase.LOCKED
        if any(c.row >= self.config.overflow_height for c in piece.cells):
            logger.info("lock out: %s locked above row %d", piece.kind.name, self.config.overflow_height)
            self._finish()
            return

        # Spin flags only count when the last successful action was a rotation
        spun = self.spin.recently_rotated and piece.kind.is_t
        t_spin = spun and self.spin.t_spin
        mini_t_spin = spun and self.spin.mini_t_spin

        result = self.clearer.lock_and_clear(piece)
        self.last_clear = result
        self._emit(PieceLocked(piece.kind, piece.cells, t_spin, mini_t_spin))
        if result.lines_cleared:
            self.phase = GamePhase.CLEARING
            self._emit(RowsCleared(tuple(result.rows)))

        scored = self.rules.score(
            result.lines_cleared,
            piece.kind.is_t,
            t_spin,
            mini_t_spin,
            self.score_state.level,
            self.score_state.prior_move_difficult,
            self.score_state.multiplier,
        )
        self.score_state.apply(scored)
        self.score_state.add_lines(result.lines_cleared)
        self.soft_drop = False
        self._publish_score()
        self._spawn()

    def _spawn(self) -> None:
        self.phase = GamePhase.SPAWNING
        kind = self.queue.draw()
        piece = Piece.spawn(kind, *self.config.spawn_cell)
        self.piece = piece
        self.spin.reset()
        self.drop_timer = 0.0
        self.lock_timer = 0.0
        self._emit(NextQueueChanged(self.queue.peek()))
        if any(cell in self.board for cell in piece.cells):
            logger.info("block out: %s cannot spawn at %s", kind.name, self.config.spawn_cell)
            self._finish()
            return
        self.phase = GamePhase.FALLING
        self._emit(PieceSpawned(kind, piece.cells))
        logger.debug("spawned %s, next %s", kind.name, [k.name for k in self.queue.peek()])

    def _finish(self) -> None:
        self.phase = GamePhase.GAME_OVER
        self._clear_input()
        self._publish_score()
        self._emit(GameOver())
        logger.info("game over: score %d, level %d", self.score_state.score, self.score_state.level)
