from __future__ import annotations

import gymnasium as gym
import numpy as np

import falling_blocks.env  # noqa: F401
from falling_blocks.env import Action, FallingBlocksEnv
from falling_blocks.game import HardDrop, MoveHorizontal, RotateClockwise, SetSoftDrop


def test_reset_observation_shapes() -> None:
    env = FallingBlocksEnv()
    obs, info = env.reset(seed=0)
    assert obs["board"].shape == (20, 10)
    assert obs["next"].shape == (3,)
    assert obs["board"].dtype == np.int8
    assert info["score"] == 0 and info["level"] == 1
    assert env.observation_space.contains(obs)


def test_random_steps_stay_in_the_observation_space() -> None:
    env = FallingBlocksEnv()
    env.reset(seed=3)
    env.action_space.seed(3)
    for _ in range(200):
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        assert env.observation_space.contains(obs)
        assert reward >= 0
        if terminated or truncated:
            env.reset()


def test_hard_drop_action_rewards_drop_points() -> None:
    env = FallingBlocksEnv()
    env.reset(seed=1)
    _, reward, terminated, _, info = env.step(Action.HARD_DROP)
    assert reward >= 2 * 18
    assert not terminated
    assert info["rows_cleared"] == []


def test_registered_id() -> None:
    env = gym.make("FallingBlocks-v0", max_episode_steps=5)
    env.reset(seed=0)
    truncated = False
    for _ in range(5):
        _, _, terminated, truncated, _ = env.step(Action.NONE)
    assert truncated
    env.close()


def test_actions_restate_held_inputs() -> None:
    assert Action.LEFT.commands() == [MoveHorizontal(-1), SetSoftDrop(False)]
    assert Action.SOFT_DROP.commands() == [MoveHorizontal(0), SetSoftDrop(True)]
    assert Action.ROTATE_CW.commands() == [MoveHorizontal(0), SetSoftDrop(False), RotateClockwise()]
    assert Action.HARD_DROP.commands()[-1] == HardDrop()
    assert Action.NONE.commands() == [MoveHorizontal(0), SetSoftDrop(False)]
