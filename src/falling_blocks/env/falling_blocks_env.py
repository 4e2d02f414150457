from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import (
    GameConfig,
    GameLoop,
    HardDrop,
    MoveHorizontal,
    PieceKind,
    RotateClockwise,
    RotateCounterClockwise,
    RowsCleared,
    SetSoftDrop,
)
from falling_blocks.game.events import Command


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6

    def commands(self) -> List[Command]:
        """Commands for one step; held inputs are always restated so they release."""
        direction = -1 if self is Action.LEFT else 1 if self is Action.RIGHT else 0
        result: List[Command] = [MoveHorizontal(direction), SetSoftDrop(self is Action.SOFT_DROP)]
        if self is Action.ROTATE_CW:
            result.append(RotateClockwise())
        elif self is Action.ROTATE_CCW:
            result.append(RotateCounterClockwise())
        elif self is Action.HARD_DROP:
            result.append(HardDrop())
        return result


class FallingBlocksEnv(gym.Env):
    """Agent-facing wrapper around GameLoop.

    Each step holds the chosen input for `frames_per_step` ticks of
    `frame_time` seconds. The horizontal axis and soft drop are held inputs, so
    any other action releases them.
    """

    metadata = {"render_modes": [], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        frame_time: float = 1.0 / 60.0,
        frames_per_step: int = 6,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = GameLoop(config)
        self.frame_time = float(frame_time)
        self.frames_per_step = int(frames_per_step)
        self.max_episode_steps = int(max_episode_steps)

        cfg = self.game.config
        n_kinds = len(PieceKind)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_kinds, high=n_kinds, shape=(cfg.height, cfg.width), dtype=np.int8),
                "next": spaces.Box(low=1, high=n_kinds, shape=(cfg.preview_size,), dtype=np.int8),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.snapshot(),
            "next": np.array([int(k) for k in self.game.next_kinds], dtype=np.int8),
        }

    def _get_info(self) -> Dict[str, Any]:
        state = self.game.score_state
        return {
            "score": state.score,
            "level": state.level,
            "lines": state.total_lines,
            "steps": self._steps,
        }

    def _submit(self, action: Action) -> None:
        for command in action.commands():
            self.game.submit(command)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self.game.drain_events()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score_state.score
        self._submit(Action(int(action)))

        rows_cleared: List[int] = []
        for _ in range(self.frames_per_step):
            for event in self.game.tick(self.frame_time):
                if isinstance(event, RowsCleared):
                    rows_cleared.extend(event.rows)
            if self.game.game_over:
                break

        self._steps += 1
        terminated = self.game.game_over
        truncated = self._steps >= self.max_episode_steps
        reward = float(self.game.score_state.score - score_before)

        info = self._get_info()
        info["rows_cleared"] = rows_cleared
        return self._get_obs(), reward, terminated, truncated, info
