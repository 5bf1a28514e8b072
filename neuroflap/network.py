"""
neuroflap: Neural Controller

Copyright (c) 2026 SolisHQ (github.com/solishq). All rights reserved.
Licensed under MIT.

NEURAL ARCHITECTURE:
  Input (3 sensors) → Hidden (6 neurons, sigmoid) → Output (1, sigmoid)

  No biases. The output is read as "how much do I want to flap";
  the agent jumps when it reaches the jump threshold.

GENOME:
  The two weight matrices are the whole genome. They are fixed at birth:
  founders draw every weight uniformly from [WEIGHTS_MIN, WEIGHTS_MAX],
  offspring copy an elite's matrices and re-roll a few entries within
  ±MUTATION_CHANGE of the parent value. There is no crossover.

Weight matrices are owned, read-only numpy arrays. Two controllers never
share storage.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from .config import Config


def sigmoid(z: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-z))


def _freeze(weights) -> np.ndarray:
    """Deep copy into a read-only float matrix."""
    frozen = np.array(weights, dtype=float, copy=True)
    if frozen.ndim != 2:
        raise ValueError(f"weight matrix must be 2-D, got shape {frozen.shape}")
    frozen.flags.writeable = False
    return frozen


def random_weights(rows: int, cols: int, config: Config) -> np.ndarray:
    return config.rng.uniform(config.weights_min, config.weights_max, (rows, cols))


def mutate_weights(weights: np.ndarray, config: Config) -> np.ndarray:
    """
    Return a mutated copy of `weights`; the input is left untouched.

    Each entry is picked with probability mutation_rate and replaced by a
    uniform draw from [w - change, w + change] clipped to the weight range.
    Entries that are not picked are carried over exactly.
    """
    picked = config.rng.random(weights.shape) < config.mutation_rate
    low = np.maximum(config.weights_min, weights - config.mutation_change)
    high = np.minimum(config.weights_max, weights + config.mutation_change)
    redrawn = config.rng.uniform(low, high)
    return np.where(picked, redrawn, weights)


@dataclass(frozen=True, eq=False)
class NeuralController:
    hidden_weights: np.ndarray   # HIDDEN x INPUT
    output_weights: np.ndarray   # OUTPUT x HIDDEN

    def __post_init__(self):
        hidden = _freeze(self.hidden_weights)
        output = _freeze(self.output_weights)
        if output.shape[1] != hidden.shape[0]:
            raise ValueError(
                f"output weights {output.shape} do not match hidden layer {hidden.shape}"
            )
        object.__setattr__(self, 'hidden_weights', hidden)
        object.__setattr__(self, 'output_weights', output)

    # ─── Construction ────────────────────────────────────

    @classmethod
    def founder(cls, config: Config) -> "NeuralController":
        """Fresh random weights, no parent."""
        return cls(
            random_weights(config.hidden_nodes, config.input_nodes, config),
            random_weights(config.output_nodes, config.hidden_nodes, config),
        )

    @classmethod
    def offspring(cls, parent: "NeuralController", config: Config) -> "NeuralController":
        """Clone the parent's matrices, then mutate the clone once."""
        return cls(
            mutate_weights(parent.hidden_weights, config),
            mutate_weights(parent.output_weights, config),
        )

    # ─── Forward Pass ────────────────────────────────────

    @property
    def input_size(self) -> int:
        return self.hidden_weights.shape[1]

    def forward(self, inputs) -> np.ndarray:
        x = np.asarray(inputs, dtype=float)
        if x.shape != (self.input_size,):
            raise ValueError(f"expected {self.input_size} inputs, got shape {x.shape}")
        hidden = sigmoid(self.hidden_weights @ x)
        return sigmoid(self.output_weights @ hidden)

    def decide(self, inputs) -> float:
        """First output neuron for the given sensor vector, in [0, 1]."""
        return float(self.forward(inputs)[0])

    def same_weights(self, other: Optional["NeuralController"]) -> bool:
        if other is None:
            return False
        return (np.array_equal(self.hidden_weights, other.hidden_weights)
                and np.array_equal(self.output_weights, other.output_weights))

    def to_dict(self) -> dict:
        return {
            'hidden_weights': self.hidden_weights.round(4).tolist(),
            'output_weights': self.output_weights.round(4).tolist(),
        }
