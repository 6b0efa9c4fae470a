from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks_rl.game import Action, GameConfig, GameState, ScoringRules, TetrisEngine
from falling_blocks_rl.game.grid import PIECE_OVERLAY


# Pause is a presentation concern and is not exposed to agents.
ENV_ACTIONS: Tuple[Action, ...] = (
    Action.MOVE_LEFT,
    Action.MOVE_RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.NONE,
)


class FallingBlocksEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 rules: Optional[ScoringRules] = None,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.engine = TetrisEngine(config, rules)
        self.render_mode = render_mode
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        cfg = self.engine.config
        # Observation: landed cells (1) with the falling piece overlaid (2)
        self.observation_space = spaces.Box(
            low=0, high=PIECE_OVERLAY, shape=(cfg.height, cfg.width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(ENV_ACTIONS))
        self._steps = 0

    @property
    def state(self) -> GameState:
        return self.engine.get_state()

    def _get_obs(self) -> np.ndarray:
        return self.state.render_grid().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        state = self.state
        return {
            "score": state.score,
            "lines_cleared": state.lines_cleared,
            "level": state.level,
            "holes": state.grid.count_holes(),
            "max_height": state.grid.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            # Derive from the env's np_random so seeding gymnasium is enough
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.engine.new_game(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        engine_action = ENV_ACTIONS[int(action)]
        score_before = self.state.score

        self.engine.apply_action(engine_action)
        # Gravity: one tick per step unless the agent already dropped
        if engine_action != Action.SOFT_DROP:
            self.engine.tick()
        self._steps += 1

        state = self.state
        terminated = bool(state.game_over)
        reward = float(state.score - score_before) + self.step_penalty
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["engine_score_delta"] = float(state.score - score_before)
        return self._get_obs(), reward, terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._get_obs()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            palette = {0: (30, 30, 36), 1: (150, 150, 160), PIECE_OVERLAY: (60, 120, 240)}
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = palette[int(grid[y, x])]
            return img
        return None

    def close(self) -> None:
        pass
