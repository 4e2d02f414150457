from __future__ import annotations

import argparse
import logging
from typing import Optional

import gymnasium as gym

import falling_blocks.env  # noqa: F401  (registers FallingBlocks-v0)

logger = logging.getLogger(__name__)


def run_random(episodes: int = 1, max_steps: int = 2000, seed: Optional[int] = None) -> float:
    env = gym.make("FallingBlocks-v0", max_episode_steps=max_steps)
    total_reward = 0.0
    try:
        for episode in range(episodes):
            obs, info = env.reset(seed=None if seed is None else seed + episode)
            while True:
                obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
                total_reward += float(reward)
                if terminated or truncated:
                    break
            logger.info(
                "episode %d: score %d, level %d, lines %d", episode, info["score"], info["level"], info["lines"]
            )
    finally:
        env.close()
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play FallingBlocks-v0 with uniformly random actions")
    p.add_argument("--episodes", type=int, default=1)
    p.add_argument("--max_steps", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    total = run_random(args.episodes, args.max_steps, args.seed)
    print(f"Random agent total reward: {total:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
