"""
neuroflap: Game Driver

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

Ties a Course to either a Population (smart mode) or a single manually
flown bird, one logical tick at a time. Whoever owns the clock calls
tick(); `speed` only tells that clock how fast to call. Fitness counts
ticks, never seconds, so speed has no effect on training.
"""

from .agent import Agent
from .config import Config, SPEED_RATES
from .population import Population
from .world import Course


class Game:

    def __init__(self, smart: bool = True, config: Config = None):
        self.config = config or Config()
        self.smart = smart
        self.course = Course(self.config)
        self.speed = 1
        self.ticks = 0

        self.population = Population(self.config) if smart else None
        self.bird = None if smart else Agent(id="PLAYER", config=self.config)
        self.high_score = 0
        self.games_played = 0
        self.events: list[dict] = []

    @property
    def mode(self) -> str:
        return 'smart' if self.smart else 'manual'

    @property
    def tick_interval(self) -> float:
        """Seconds between ticks at the current speed."""
        return self.config.duration / self.speed

    def set_speed(self, rate: int):
        if rate not in SPEED_RATES:
            raise ValueError(f"speed must be one of {SPEED_RATES}, got {rate}")
        self.speed = rate

    # ─── Ticking ─────────────────────────────────────────

    def tick(self) -> bool:
        """Advance one tick. Returns True if a generation or game ended."""
        self.ticks += 1
        if self.smart:
            return self._tick_smart()
        return self._tick_manual()

    def _tick_smart(self) -> bool:
        ended = self.population.step(self.course)
        self.course.scroll()
        if ended:
            self.population.end_generation()
            self.course.reset()
        return ended

    def _tick_manual(self) -> bool:
        bird = self.bird
        bird.tick()
        self.course.scroll()

        touched = self.course.contact(bird)
        if touched.passed:
            bird.record_pass()
            self.high_score = max(self.high_score, bird.score)
        if bird.evaluate_death(touched.collided, touched.below_floor):
            return False

        self.games_played += 1
        self.events.append({
            'type': 'game_over', 'score': bird.score, 'high_score': self.high_score,
            'fitness': bird.fitness, 'game': self.games_played,
        })
        self.course.reset()
        bird.reset()
        return True

    def run(self, ticks: int) -> int:
        """Run up to `ticks` ticks; returns how many generations/games ended."""
        return sum(1 for _ in range(ticks) if self.tick())

    def jump(self):
        """Manual flap. The population decides for itself."""
        if self.smart:
            raise RuntimeError("manual jump is only available in manual mode")
        self.bird.apply_jump()

    # ─── Query ───────────────────────────────────────────

    def stats(self) -> dict:
        if self.smart:
            return self.population.stats()
        return {'score': self.bird.score, 'high_score': self.high_score,
                'games_played': self.games_played}

    def get_state(self) -> dict:
        state = {
            'mode': self.mode,
            'ticks': self.ticks,
            'speed': self.speed,
            'course': self.course.to_dict(),
        }
        if self.smart:
            state.update(self.population.get_state())
        else:
            state['agents'] = [self.bird.to_dict()]
            state['stats'] = self.stats()
        return state

    def pop_events(self) -> list[dict]:
        events = self.events
        self.events = []
        if self.smart:
            events.extend(self.population.pop_events())
        return events
