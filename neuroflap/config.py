"""
neuroflap: Configuration

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

Every tunable of the game and the genetic algorithm lives here. The module
constants are the stock values; Config bundles them with the random source
so that a whole run can be reproduced from one seed.

GEOMETRY:
  Scene 600 x 800, of which the bottom 120 px is the stats panel.
  The bird sits at x=100 with radius 20. Pipes are 60 wide with a 200 px gap.

GENETIC ALGORITHM:
  50 birds, top 4% eligible to breed, 3% of weights mutated by up to 0.03.
  A breeder must beat MIN_FITNESS: the ticks needed for a pipe to travel
  from the right edge of the scene to the bird.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional


# ─── Scene ───────────────────────────────────────────────

SCENE_WIDTH = 600.0
SCENE_HEIGHT = 800.0
CONTROL_PANE_HEIGHT = 120.0
GAME_HEIGHT = SCENE_HEIGHT - CONTROL_PANE_HEIGHT

# ─── Physics ─────────────────────────────────────────────

GRAVITY = 1000.0
REBOUND_VELOCITY = -400.0
DURATION = 0.016
SCROLL_SPEED = -3.0

BIRD_X = 100.0
BIRD_START_Y = 300.0
BIRD_R = 20.0

# ─── Pipes ───────────────────────────────────────────────

PIPE_WIDTH = 60.0
PIPE_GAP = 200.0
PIPE_X_SPACE = 250.0
# Minimum distance between a gap and the edge of the game area
PIPE_GAP_BUFFER = 100.0
# Maximum distance a new gap may sit from the previous one
NEXT_GAP_RANGE = 200.0

# ─── Network ─────────────────────────────────────────────

WEIGHTS_MAX = 1.0
WEIGHTS_MIN = -1.0
INPUT_NODES = 3
HIDDEN_NODES = 6
OUTPUT_NODES = 1

# ─── Evolution ───────────────────────────────────────────

POPULATION_SIZE = 50
JUMP_FREQUENCY = 0.5
SELECTION_RATE = 0.04
MUTATION_RATE = 0.03
MUTATION_CHANGE = 0.03
MAX_FITNESS = 10000

# Speed multipliers the driver accepts (1x, 2x, 5x, Max)
SPEED_RATES = (1, 2, 5, 25)


@dataclass
class Config:
    """
    One run's worth of settings plus its random source.

    Pass `seed` for a reproducible run, or hand in an existing
    numpy Generator as `rng`. All weight draws, mutations and gap
    placements go through `rng`.
    """

    scene_width: float = SCENE_WIDTH
    scene_height: float = SCENE_HEIGHT
    control_pane_height: float = CONTROL_PANE_HEIGHT

    gravity: float = GRAVITY
    rebound_velocity: float = REBOUND_VELOCITY
    duration: float = DURATION
    scroll_speed: float = SCROLL_SPEED

    bird_x: float = BIRD_X
    bird_start_y: float = BIRD_START_Y
    bird_r: float = BIRD_R

    pipe_width: float = PIPE_WIDTH
    pipe_gap: float = PIPE_GAP
    pipe_x_space: float = PIPE_X_SPACE
    pipe_gap_buffer: float = PIPE_GAP_BUFFER
    next_gap_range: float = NEXT_GAP_RANGE

    weights_min: float = WEIGHTS_MIN
    weights_max: float = WEIGHTS_MAX
    input_nodes: int = INPUT_NODES
    hidden_nodes: int = HIDDEN_NODES
    output_nodes: int = OUTPUT_NODES

    population_size: int = POPULATION_SIZE
    jump_frequency: float = JUMP_FREQUENCY
    selection_rate: float = SELECTION_RATE
    mutation_rate: float = MUTATION_RATE
    mutation_change: float = MUTATION_CHANGE
    max_fitness: int = MAX_FITNESS
    # None = derived from the scene geometry (see __post_init__)
    min_fitness: Optional[int] = None

    seed: Optional[int] = None
    rng: Optional[np.random.Generator] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)

        if self.min_fitness is None:
            self.min_fitness = self.derived_min_fitness

        if self.population_size < 1:
            raise ValueError(f"population_size must be positive, got {self.population_size}")
        if self.weights_min > self.weights_max:
            raise ValueError("weights_min must not exceed weights_max")
        if not 0.0 <= self.selection_rate <= 1.0:
            raise ValueError(f"selection_rate must be in [0, 1], got {self.selection_rate}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if self.mutation_change < 0:
            raise ValueError("mutation_change must be non-negative")
        if self.scroll_speed >= 0:
            raise ValueError("scroll_speed must be negative (pipes move left)")
        if min(self.input_nodes, self.hidden_nodes, self.output_nodes) < 1:
            raise ValueError("every network layer needs at least one node")

    # ─── Derived ─────────────────────────────────────────

    @property
    def game_height(self) -> float:
        return self.scene_height - self.control_pane_height

    @property
    def derived_min_fitness(self) -> int:
        """Ticks for a pipe to scroll from the right edge to the bird's front."""
        return int((self.scene_width - self.bird_x - self.bird_r) / -self.scroll_speed)

    @property
    def floor_y(self) -> float:
        """Lowest centre position a bird may reach before it counts as fallen."""
        return self.game_height + self.bird_r

    @property
    def gap_y_max(self) -> float:
        return self.game_height - self.pipe_gap_buffer - self.pipe_gap

    @property
    def elite_count(self) -> int:
        return int(self.population_size * self.selection_rate)

    def to_dict(self) -> dict:
        return {
            'population_size': self.population_size,
            'selection_rate': self.selection_rate,
            'mutation_rate': self.mutation_rate,
            'mutation_change': self.mutation_change,
            'min_fitness': self.min_fitness,
            'max_fitness': self.max_fitness,
            'jump_frequency': self.jump_frequency,
            'layers': [self.input_nodes, self.hidden_nodes, self.output_nodes],
            'seed': self.seed,
        }
