"""Gymnasium environments for falling_blocks."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .falling_blocks_env import Action, FallingBlocksEnv

register(
    id="FallingBlocks-v0",
    entry_point="falling_blocks.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["Action", "FallingBlocksEnv"]
