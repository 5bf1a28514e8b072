"""
neuroflap: Sensors

Maps raw world state to the three inputs the network sees:

  1. bird height        over the playable height
  2. next gap position  over the range a gap can be placed in
  3. next pipe x        over the visible width

Values outside [0, 1] pass through unclamped.
"""

import numpy as np

from .config import Config


def normalize(agent_y: float, gap_y: float, obstacle_x: float, config: Config) -> np.ndarray:
    gap_range = config.game_height - 2 * config.pipe_gap_buffer - config.pipe_gap
    return np.array([
        (agent_y - config.bird_r) / config.game_height,
        (gap_y - config.pipe_gap_buffer) / gap_range,
        obstacle_x / config.scene_width,
    ])
