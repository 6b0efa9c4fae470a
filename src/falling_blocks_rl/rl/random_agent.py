from __future__ import annotations

import argparse
import logging

import gymnasium as gym

# Ensure envs are registered
import falling_blocks_rl.env  # noqa: F401
from falling_blocks_rl.env.wrappers import ResampleInvalidActionWrapper


def run_random(steps: int = 500, seed: int | None = None) -> float:
    env = ResampleInvalidActionWrapper(gym.make("FallingBlocks-10x20-v0"))
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    games = 1
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            print(f"Game {games}: score={info['score']} lines={info['lines_cleared']} level={info['level']}")
            games += 1
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f} over {games} game(s)")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper())
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
