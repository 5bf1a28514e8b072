#!/usr/bin/env python3
"""
neuroflap: CLI Runner

Headless training. Flies generations as fast as the CPU allows and
prints one line per generation.

Usage:
    python -m neuroflap.run --generations 30 --seed 7
    python -m neuroflap.run --json > history.json
"""

import argparse
import json

from .config import Config, POPULATION_SIZE, MAX_FITNESS
from .game import Game
from .narrator import Narrator


def train(generations: int, config: Config, max_ticks: int = None,
          quiet: bool = False, narrator: Narrator = None) -> Game:
    """Run until `generations` generations have ended (or max_ticks ticks)."""
    game = Game(smart=True, config=config)
    narrator = narrator or Narrator()
    narrator.track_agents([a.to_dict() for a in game.population.agents])
    finished = 0
    while finished < generations:
        if max_ticks is not None and game.ticks >= max_ticks:
            break
        if not game.tick():
            continue
        finished += 1
        events = game.pop_events()
        narrator.track_agents([a.to_dict() for a in game.population.agents])
        if quiet:
            continue
        row = game.population.history[-1]
        print(f"Gen {row['generation']:4d}: best {row['best_fitness']:6d}  "
              f"avg {row['avg_fitness']:6d}  elites {row['elites']:2d}  "
              f"record {row['best_fitness_ever']:6d}")
        narration = narrator.narrate(events, game.stats())
        if narration and narration['severity'] == 'critical':
            print(f"        {narration['icon']} {narration['text']}")
    return game


def main(argv=None):
    parser = argparse.ArgumentParser(description="neuroflap headless training")
    parser.add_argument("--generations", type=int, default=20, help="Generations to fly")
    parser.add_argument("--population", type=int, default=POPULATION_SIZE, help="Birds per generation")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-fitness", type=int, default=MAX_FITNESS, help="Tick ceiling per bird")
    parser.add_argument("--max-ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--json", action="store_true", help="Output JSON history")
    parser.add_argument("--quiet", action="store_true", help="Less output")

    args = parser.parse_args(argv)

    config = Config(population_size=args.population, seed=args.seed,
                    max_fitness=args.max_fitness)

    quiet = args.quiet or args.json
    if not quiet:
        print("🐦 neuroflap\n")
        print(f"Config: {args.population} birds, {args.generations} generations, "
              f"seed {args.seed}\n")

    narrator = Narrator()
    game = train(args.generations, config, args.max_ticks, quiet, narrator)
    stats = game.stats()

    if args.json:
        print(json.dumps({
            'config': config.to_dict(),
            'stats': stats,
            'history': game.population.history,
        }, indent=2))
        return

    summary = narrator.get_summary(stats)
    print(f"\n{summary['text']}")


if __name__ == "__main__":
    main()
