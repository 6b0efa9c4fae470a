from __future__ import annotations

import argparse
import logging
from typing import Dict

import pygame

from falling_blocks_rl.game import Action, GameConfig, TetrisEngine
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_SPACE: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_p: Action.TOGGLE_PAUSE,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play falling blocks with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run(seed: int | None = None, cell_size: int = 28, fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        engine = TetrisEngine(GameConfig(random_seed=seed))
        renderer = Renderer(cell_size=cell_size)

        screen = pygame.display.set_mode(renderer.window_size(engine.get_state()))
        pygame.display.set_caption("Falling Blocks - Human Play")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        engine.new_game()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            engine.apply_action(action)

            # Gravity: the engine only ticks while active
            engine.update(clock.tick(fps))
            renderer.draw(screen, engine.get_state())
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(seed=args.seed, cell_size=args.cell_size, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
