from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, FallingBlocksGame, GameConfig, GameState, TetrominoType, color_of

# Actions an agent may take; pause and reset stay with the environment
AGENT_ACTIONS = (
    Action.LEFT,
    Action.RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.NONE,
)

MAX_LEVEL = 99


class FallingBlocksEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = FallingBlocksGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.board.height, self.game.board.width
        n_kinds = len(TetrominoType)

        # Board with the falling piece overlaid as negative kind values
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_kinds, high=n_kinds, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(n_kinds + 1),
                "level": spaces.Discrete(MAX_LEVEL + 1),
            }
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))
        self._steps = 0

    def _settle(self) -> None:
        # Agents do not wait for the clear animation
        if self.game.state is GameState.CLEARING:
            self.game.finish_clearing()

    def _get_obs(self) -> Dict[str, Any]:
        next_kind = self.game.next_kind
        return {
            "board": self.game.get_state().astype(np.int8),
            "next_piece": int(next_kind.kind) if next_kind is not None else 0,
            "level": min(self.game.level, MAX_LEVEL),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "level": self.game.level,
            "lines_cleared_total": self.game.lines_cleared_total,
            "speed_ms": self.game.speed,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        self.game.step(AGENT_ACTIONS[int(action)])
        self._settle()
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_of(int(state[y, x]))
        return img

    def close(self) -> None:
        pass
