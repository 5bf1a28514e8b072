"""
neuroflap: Agent

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

One bird: vertical position and velocity, life state, fitness, and an
optional NeuralController. With a controller the bird flaps on its own;
without one (manual play) the caller decides when to jump.

PHYSICS (per tick, semi-implicit Euler):
  vy += gravity * dt
  y  += vy * dt^2
  The bird cannot rise above the top edge: y clamps to BIRD_R, vy resets.

LIFECYCLE:
  Born alive with fitness 0 at BIRD_START_Y. Every evaluated tick adds one
  to fitness, including the tick it dies on. Death is permanent; the
  population replaces dead birds at the next generation.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from .config import Config
from .network import NeuralController


@dataclass
class Agent:
    id: str
    generation: int = 1
    parent_id: Optional[str] = None
    controller: Optional[NeuralController] = None
    config: Config = field(default_factory=Config, repr=False)

    # ─── State ───────────────────────────────────────────
    y: float = None
    vy: float = 0.0
    alive: bool = True
    fitness: int = 0
    score: int = 0   # pipes passed

    def __post_init__(self):
        if self.y is None:
            self.y = self.config.bird_start_y

    @property
    def is_manual(self) -> bool:
        return self.controller is None

    # ─── Physics ─────────────────────────────────────────

    def tick(self, gravity: float = None, dt: float = None):
        """Advance one tick of falling."""
        if not self.alive:
            return
        gravity = self.config.gravity if gravity is None else gravity
        dt = self.config.duration if dt is None else dt

        self.vy = self.vy + gravity * dt
        new_y = self.y + self.vy * dt * dt

        if new_y <= self.config.bird_r:
            self.vy = 0.0
            new_y = self.config.bird_r
        self.y = new_y

    def apply_jump(self, impulse: float = None):
        if not self.alive:
            return
        self.vy = self.config.rebound_velocity if impulse is None else impulse

    # ─── Decision Making ─────────────────────────────────

    def decide_jump(self, inputs: np.ndarray) -> bool:
        """Ask the controller whether to flap. Manual birds never flap by themselves."""
        if self.controller is None:
            return False
        return self.controller.decide(inputs) >= self.config.jump_frequency

    # ─── Life & Death ────────────────────────────────────

    def evaluate_death(self, collided: bool, out_of_bounds: bool) -> bool:
        """
        Count this tick, then die if anything says so.
        Returns the alive flag after evaluation.
        """
        if not self.alive:
            return False
        self.fitness += 1
        if collided or out_of_bounds or self.y > self.config.floor_y:
            self.alive = False
        return self.alive

    def kill(self):
        self.alive = False

    def record_pass(self):
        if self.alive:
            self.score += 1

    def reset(self):
        """Back to the start line. The controller is kept."""
        self.y = self.config.bird_start_y
        self.vy = 0.0
        self.fitness = 0
        self.score = 0
        self.alive = True

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'generation': self.generation,
            'parent_id': self.parent_id,
            'y': round(self.y, 2),
            'vy': round(self.vy, 2),
            'alive': self.alive,
            'fitness': self.fitness,
            'score': self.score,
            'manual': self.is_manual,
        }
