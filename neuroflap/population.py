"""
neuroflap: Population

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

A fixed-size flock of neural birds, flown in lockstep, one generation at a
time.

GENERATION CYCLE:
  RUNNING  step(world) once per tick. Every live bird senses, decides,
           jumps, falls, and is checked for death, in a fixed order.
  ENDED    the last bird died. end_generation() ranks the flock, picks
           elites, and breeds the next generation.

SELECTION:
  Rank by fitness (stable: equal fitness keeps flock order). The top
  floor(N * SELECTION_RATE) birds are candidates; only those strictly above
  MIN_FITNESS become elites. MIN_FITNESS is the time a pipe needs to reach
  the bird, so an elite has at least met its first obstacle.

REPRODUCTION:
  Bird i of the next generation is a mutated clone of elite i mod |elites|.
  Round-robin keeps N exact and uses every elite. With no elites the flock
  restarts from random founders.

EARLY STOP:
  A bird that reaches MAX_FITNESS is killed so a generation always ends.
"""

from typing import Optional

from .agent import Agent
from .config import Config
from .network import NeuralController
from .sensors import normalize
from .world import WorldView

RUNNING = 'running'
ENDED = 'ended'


class Population:
    """Owns the flock, runs generations, keeps the stats."""

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.next_id = 0
        self.generation = 1
        self.tick_count = 0

        self.num_alive = self.config.population_size
        self.current_fitness = 0
        self.last_avg_fitness = 0
        self.last_best_fitness = 0
        self.best_fitness_ever = 0
        self.state = RUNNING

        self.events: list[dict] = []
        self.history: list[dict] = []

        self.agents: list[Agent] = [self._spawn() for _ in range(self.config.population_size)]

    def _new_id(self) -> str:
        self.next_id += 1
        return f"B{self.next_id:05d}"

    def _spawn(self, parent: Optional[Agent] = None) -> Agent:
        """A founder, or an offspring of `parent`."""
        if parent is None:
            controller = NeuralController.founder(self.config)
            parent_id = None
        else:
            controller = NeuralController.offspring(parent.controller, self.config)
            parent_id = parent.id
        return Agent(
            id=self._new_id(),
            generation=self.generation,
            parent_id=parent_id,
            controller=controller,
            config=self.config,
        )

    @property
    def size(self) -> int:
        return len(self.agents)

    @property
    def ended(self) -> bool:
        return self.state == ENDED

    # ─── Core Loop ───────────────────────────────────────

    def step(self, world: WorldView) -> bool:
        """
        Run one tick for every live bird. Returns True when the tick
        finished off the generation.
        """
        if self.state != RUNNING:
            raise RuntimeError(
                f"generation {self.generation} has ended; call end_generation() first"
            )

        self.tick_count += 1
        cfg = self.config
        num_alive = 0

        for agent in self.agents:
            if not agent.alive:
                continue

            seen = world.observe(agent)
            inputs = normalize(agent.y, seen.gap_y, seen.obstacle_x, cfg)
            if agent.decide_jump(inputs):
                agent.apply_jump()
            agent.tick()

            touched = world.contact(agent)
            if touched.passed:
                agent.record_pass()
            if not agent.evaluate_death(touched.collided, touched.below_floor):
                self.events.append({
                    'type': 'death', 'agent': agent.id, 'tick': self.tick_count,
                    'generation': self.generation, 'fitness': agent.fitness,
                    'cause': 'collision' if touched.collided else 'fall',
                })
                continue

            # Last live bird in flock order wins; not a max or a mean.
            self.current_fitness = agent.fitness
            if agent.fitness >= cfg.max_fitness:
                agent.kill()
                self.events.append({
                    'type': 'max_fitness', 'agent': agent.id, 'tick': self.tick_count,
                    'generation': self.generation, 'fitness': agent.fitness,
                })
                continue
            num_alive += 1

        self.num_alive = num_alive
        if num_alive == 0:
            self.state = ENDED
        return self.ended

    # ─── Selection & Reproduction ────────────────────────

    def rank(self) -> list[Agent]:
        """Flock sorted by fitness, best first; ties keep flock order."""
        return sorted(self.agents, key=lambda a: a.fitness, reverse=True)

    def select_elites(self, ranked: list[Agent]) -> list[Agent]:
        candidates = ranked[:self.config.elite_count]
        return [a for a in candidates if a.fitness > self.config.min_fitness]

    def end_generation(self) -> list[Agent]:
        """
        Close the finished generation and breed the next one.
        Returns the elites that were used (empty on a restart).
        """
        if self.state != ENDED:
            raise RuntimeError(
                f"generation {self.generation} still has {self.num_alive} birds alive"
            )

        ranked = self.rank()
        self.agents = ranked

        self.last_best_fitness = ranked[0].fitness
        previous_best = self.best_fitness_ever
        self.best_fitness_ever = max(self.best_fitness_ever, self.last_best_fitness)

        total = sum(a.fitness for a in ranked)
        self.last_avg_fitness = total // len(ranked)

        elites = self.select_elites(ranked)

        self.history.append({
            'generation': self.generation,
            'ticks': self.tick_count,
            'best_fitness': self.last_best_fitness,
            'avg_fitness': self.last_avg_fitness,
            'best_fitness_ever': self.best_fitness_ever,
            'elites': len(elites),
            'best_score': max(a.score for a in ranked),
        })
        self.events.append({
            'type': 'generation_end', 'generation': self.generation,
            'best_fitness': self.last_best_fitness, 'avg_fitness': self.last_avg_fitness,
            'elites': [a.id for a in elites],
        })
        if self.best_fitness_ever > previous_best:
            self.events.append({
                'type': 'new_record', 'generation': self.generation,
                'agent': ranked[0].id, 'fitness': self.best_fitness_ever,
                'previous': previous_best,
            })

        self.generation += 1
        if elites:
            self.agents = [self._spawn(elites[i % len(elites)]) for i in range(self.config.population_size)]
        else:
            self.agents = [self._spawn() for _ in range(self.config.population_size)]
            self.events.append({
                'type': 'restart', 'generation': self.generation,
                'reason': f"no bird beat min fitness {self.config.min_fitness}",
            })

        self.tick_count = 0
        self.num_alive = len(self.agents)
        self.current_fitness = 0
        self.state = RUNNING
        return elites

    # ─── Query ───────────────────────────────────────────

    def get_alive(self) -> list[Agent]:
        return [a for a in self.agents if a.alive]

    def stats(self) -> dict:
        return {
            'generation': self.generation,
            'alive': self.num_alive,
            'current_fitness': self.current_fitness,
            'last_avg_fitness': self.last_avg_fitness,
            'last_best_fitness': self.last_best_fitness,
            'best_fitness_ever': self.best_fitness_ever,
        }

    def get_leaderboard(self, limit: int = 10) -> list[dict]:
        ranked = self.rank()
        return [{**a.to_dict(), 'rank': i + 1} for i, a in enumerate(ranked[:limit])]

    def get_state(self) -> dict:
        """Everything a renderer needs for the current tick."""
        return {
            'generation': self.generation,
            'tick': self.tick_count,
            'state': self.state,
            'agents': [{'id': a.id, 'y': round(a.y, 2), 'alive': a.alive} for a in self.agents],
            'stats': self.stats(),
        }

    def pop_events(self) -> list[dict]:
        events = self.events
        self.events = []
        return events
