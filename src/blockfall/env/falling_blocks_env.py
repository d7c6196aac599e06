from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, GameConfig, GameState
from blockfall.game.core import LOCKED_CELL


class FallingBlocksEnv(gym.Env):
    """One action per step, each followed by a single gravity step.

    Observation is ``GameState.get_state()``: 0 empty, ``LOCKED_CELL`` for
    locked cells and ``-kind`` for the falling piece. Reward is the score
    gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000, gravity_every: int = 1) -> None:
        super().__init__()
        self.game = GameState(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.gravity_every = max(1, int(gravity_every))

        h, w = self.game.grid.height, self.game.grid.width
        self.observation_space = spaces.Box(low=-7, high=LOCKED_CELL, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines": self.game.lines,
            "level": self.game.level,
            "stack_height": self.game.grid.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self.game.get_state(), self._get_info()

    def step(self, action):
        score_before = self.game.score
        self.game.apply(Action(int(action)))
        self._steps += 1
        if self._steps % self.gravity_every == 0:
            # Gravity is stepped directly so episodes do not depend on wall time
            self.game.request_move(0, 1)

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        return self.game.get_state(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                if v == 0:
                    color = (30, 30, 36)
                elif v == LOCKED_CELL:
                    color = (225, 225, 232)
                else:
                    color = (70, 200, 120)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
