"""
neuroflap: Obstacle Course

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

The scrolling world the birds fly through. Pipes enter on the right,
scroll left at SCROLL_SPEED per tick, and leave on the left. Each pipe is
two rectangles with a PIPE_GAP opening between them; `gap_y` is the top
edge of that opening.

Gap placement is a random walk: a new gap lands within NEXT_GAP_RANGE of
the previous one, never closer than PIPE_GAP_BUFFER to the top or bottom.

The population never touches pipes directly. It asks a WorldView two
questions per bird per tick: what is ahead (before moving) and did I hit
something (after moving).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import NamedTuple

from .config import Config


class Observation(NamedTuple):
    obstacle_x: float   # left edge of the nearest pipe ahead
    gap_y: float        # top edge of its gap


class Contact(NamedTuple):
    collided: bool
    below_floor: bool
    passed: bool = False


class WorldView(ABC):
    """What the population needs from the world, per bird, per tick."""

    @abstractmethod
    def observe(self, agent) -> Observation:
        ...

    @abstractmethod
    def contact(self, agent) -> Contact:
        ...


@dataclass
class Pipe:
    x: float
    gap_y: float

    def rects(self, config: Config) -> list[tuple[float, float, float, float]]:
        """(x, y, width, height) of the top and bottom halves."""
        bottom_y = self.gap_y + config.pipe_gap
        return [
            (self.x, 0.0, config.pipe_width, self.gap_y),
            (self.x, bottom_y, config.pipe_width, config.game_height - bottom_y),
        ]

    def hits(self, cx: float, cy: float, r: float, config: Config) -> bool:
        return any(_circle_meets_rect(cx, cy, r, rect) for rect in self.rects(config))

    def to_dict(self) -> dict:
        return {'x': round(self.x, 2), 'gap_y': round(self.gap_y, 2)}


def _circle_meets_rect(cx: float, cy: float, r: float, rect) -> bool:
    x, y, w, h = rect
    if w <= 0 or h <= 0:
        return False
    nearest_x = min(max(cx, x), x + w)
    nearest_y = min(max(cy, y), y + h)
    dx = cx - nearest_x
    dy = cy - nearest_y
    return dx * dx + dy * dy <= r * r


class Course(WorldView):
    """
    The pipe sequence plus the collision rules. Randomness comes from
    config.rng, so a seeded Config replays the same course.
    """

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.pipes: list[Pipe] = []
        self.reset()

    def reset(self):
        """Clear the course and place the first pipe at the right edge."""
        cfg = self.config
        self.pipes = [self._make_pipe(cfg.scene_width, cfg.rng.random() * cfg.game_height)]

    def _make_pipe(self, x: float, prev_gap_y: float) -> Pipe:
        cfg = self.config
        prev_gap_y = min(prev_gap_y, cfg.gap_y_max)
        low = max(cfg.pipe_gap_buffer, prev_gap_y - cfg.next_gap_range)
        high = min(prev_gap_y + cfg.next_gap_range, cfg.gap_y_max)
        return Pipe(x=x, gap_y=float(cfg.rng.uniform(low, high)))

    # ─── Scrolling ───────────────────────────────────────

    def scroll(self):
        for pipe in self.pipes:
            pipe.x += self.config.scroll_speed
        self._generate()
        self._remove()

    def _generate(self):
        """Spawn the next pipe once the rightmost one is on screen."""
        last = self.pipes[-1]
        if last.x < self.config.scene_width:
            x = last.x + self.config.pipe_width + self.config.pipe_x_space
            self.pipes.append(self._make_pipe(x, last.gap_y))

    def _remove(self):
        if self.pipes[0].x < -self.config.pipe_width:
            self.pipes.pop(0)

    # ─── Queries ─────────────────────────────────────────

    def nearest_pipe(self) -> Pipe:
        """Leftmost pipe the bird has not fully cleared yet."""
        cfg = self.config
        for pipe in self.pipes:
            if pipe.x >= cfg.bird_x - cfg.pipe_width - cfg.bird_r:
                return pipe
        return self.pipes[0]

    def hits(self, y: float) -> bool:
        cfg = self.config
        return self.nearest_pipe().hits(cfg.bird_x, y, cfg.bird_r, cfg)

    def passes(self) -> bool:
        """True on the one tick the nearest pipe's trailing edge crosses the bird."""
        cfg = self.config
        trailing = self.nearest_pipe().x + cfg.pipe_width
        return trailing + cfg.scroll_speed < cfg.bird_x <= trailing

    def below_floor(self, y: float) -> bool:
        return y > self.config.floor_y

    # ─── WorldView ───────────────────────────────────────

    def observe(self, agent) -> Observation:
        pipe = self.nearest_pipe()
        return Observation(obstacle_x=pipe.x, gap_y=pipe.gap_y)

    def contact(self, agent) -> Contact:
        return Contact(collided=self.hits(agent.y), below_floor=self.below_floor(agent.y),
                       passed=self.passes())

    def to_dict(self) -> dict:
        return {'pipes': [p.to_dict() for p in self.pipes]}
