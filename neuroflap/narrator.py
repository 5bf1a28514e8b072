"""
neuroflap: Narrator

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

Turns the population's event log into short commentary for the dashboard
and the CLI. Nothing here feeds back into evolution.

Lineages get memorable names: a founder gets a name from the pool, and
its offspring inherit it with a generation suffix ("Nova III").
"""

from typing import Optional
import random

FIRST_NAMES = [
    'Atlas', 'Nova', 'Cipher', 'Echo', 'Forge', 'Pulse', 'Drift', 'Flux',
    'Helix', 'Iris', 'Jade', 'Koda', 'Lux', 'Moss', 'Nyx', 'Onyx',
    'Prism', 'Quill', 'Rune', 'Sage', 'Thorn', 'Umbra', 'Vex', 'Wren',
    'Xenon', 'Yara', 'Zephyr', 'Blaze', 'Crest', 'Dusk', 'Ember', 'Fable',
]

ROMAN = ['I', 'II', 'III', 'IV', 'V', 'VI', 'VII', 'VIII', 'IX', 'X']


class Narrator:
    """Generates commentary from population events."""

    def __init__(self, rng: random.Random = None):
        self.major_events = []
        self.lineages: dict[str, tuple[str, int]] = {}   # agent id → (founder id, depth)
        self.names: dict[str, str] = {}                  # founder id → name
        self._rng = rng or random.Random()
        self._name_pool = list(FIRST_NAMES)
        self._rng.shuffle(self._name_pool)
        self._name_idx = 0

    def track_agents(self, agents: list[dict]):
        """Register lineage for agents given as to_dict() payloads."""
        for entry in agents:
            aid = entry['id']
            if aid in self.lineages:
                continue
            parent = self.lineages.get(entry.get('parent_id'))
            if parent:
                self.lineages[aid] = (parent[0], parent[1] + 1)
            else:
                self.lineages[aid] = (aid, 0)

    def _next_name(self) -> str:
        # Once the pool is used up, names come round again with a number.
        base = self._name_pool[self._name_idx % len(self._name_pool)]
        lap = self._name_idx // len(self._name_pool)
        self._name_idx += 1
        return base if lap == 0 else f"{base}-{lap + 1}"

    def get_name(self, agent_id: str) -> str:
        """Founders are named the first time anyone asks about their line."""
        if agent_id not in self.lineages:
            self.lineages[agent_id] = (agent_id, 0)
        founder, depth = self.lineages[agent_id]
        if founder not in self.names:
            self.names[founder] = self._next_name()
        name = self.names[founder]
        if depth == 0:
            return name
        suffix = ROMAN[depth] if depth < len(ROMAN) else str(depth + 1)
        return f"{name} {suffix}"

    def narrate(self, events: list[dict], stats: dict) -> Optional[dict]:
        """
        Pick the most interesting event of the batch.
        Returns {title, text, severity, icon} or None.
        """
        best = None
        for event in events:
            narration = self._narrate_event(event, stats)
            if not narration:
                continue
            self.major_events.append(narration)
            if narration['severity'] == 'critical':
                return narration
            if best is None:
                best = narration
        return best

    def _narrate_event(self, event: dict, stats: dict) -> Optional[dict]:
        etype = event.get('type', '')

        if etype == 'new_record':
            who = self.get_name(event['agent'])
            return {
                'title': 'New Record',
                'text': f"{who} survived {event['fitness']} ticks in generation "
                       f"{event['generation']}, beating the old best of {event['previous']}.",
                'severity': 'critical',
                'icon': '🏆'
            }

        if etype == 'max_fitness':
            who = self.get_name(event['agent'])
            return {
                'title': 'Solved',
                'text': f"{who} hit the {event['fitness']}-tick ceiling. "
                       f"Generation {event['generation']} is cut short.",
                'severity': 'critical',
                'icon': '🚀'
            }

        if etype == 'restart':
            return {
                'title': 'Back to Random',
                'text': f"Nobody made it far enough to breed. Generation "
                       f"{event['generation']} starts from fresh random weights.",
                'severity': 'high',
                'icon': '🎲'
            }

        if etype == 'generation_end':
            elites = event.get('elites', [])
            names = ', '.join(self.get_name(aid) for aid in elites[:3]) or 'nobody'
            return {
                'title': f"Generation {event['generation']} Over",
                'text': f"Best {event['best_fitness']}, average {event['avg_fitness']}. "
                       f"Breeding from {names}.",
                'severity': 'info',
                'icon': '🐣'
            }

        if etype == 'game_over':
            return {
                'title': 'Game Over',
                'text': f"Score {event['score']}. High score {event['high_score']}.",
                'severity': 'medium',
                'icon': '💀'
            }

        return None

    def get_summary(self, stats: dict) -> dict:
        return {
            'title': 'Training Complete',
            'text': f"{stats.get('generation', 1) - 1} generations flown. "
                   f"Best fitness ever: {stats.get('best_fitness_ever', 0)}. "
                   f"Last generation average: {stats.get('last_avg_fitness', 0)}. "
                   f"{len(self.major_events)} notable events.",
            'severity': 'info',
            'icon': '🏁',
            'major_events': self.major_events[-10:]
        }
