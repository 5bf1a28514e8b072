# neuroflap: neuroevolution for a side-scrolling flapper
# Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

from .config import Config
from .network import NeuralController
from .sensors import normalize
from .agent import Agent
from .population import Population
from .world import Course, Pipe, Observation, Contact, WorldView
from .game import Game
from .narrator import Narrator

__author__ = "SolisHQ"
__version__ = "1.0.0"
