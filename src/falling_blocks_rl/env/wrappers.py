from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks_rl.game import Action, TetrisEngine
from falling_blocks_rl.game import core

from .falling_blocks_env import ENV_ACTIONS


def compute_action_mask(engine: TetrisEngine) -> np.ndarray:
    """Boolean mask over ``ENV_ACTIONS``: True where the action would change the state.

    Soft drop and no-op are always allowed while the game is running.
    """
    state = engine.get_state()
    mask = np.zeros((len(ENV_ACTIONS),), dtype=np.bool_)
    if not state.active:
        return mask
    for idx, action in enumerate(ENV_ACTIONS):
        if action == Action.MOVE_LEFT:
            mask[idx] = core.move(state, -1) is not state
        elif action == Action.MOVE_RIGHT:
            mask[idx] = core.move(state, 1) is not state
        elif action == Action.ROTATE:
            mask[idx] = core.rotate(state) is not state
        else:
            mask[idx] = True
    return mask


class ActionMaskWrapper(gym.Wrapper):
    """Exposes ``get_action_mask()`` for maskable policies."""

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.env.unwrapped.engine)


class ResampleInvalidActionWrapper(ActionMaskWrapper):
    """If a sampled action is masked out, resample uniformly among the allowed ones.

    Useful when training without action masking.
    """

    def step(self, action):  # type: ignore[override]
        if isinstance(self.action_space, spaces.Discrete):
            mask = self.get_action_mask()
            if 0 <= int(action) < mask.shape[0] and not bool(mask[int(action)]):
                valid_idxs = np.flatnonzero(mask)
                if valid_idxs.size > 0:
                    action = int(self.np_random.choice(valid_idxs))
        return self.env.step(action)
