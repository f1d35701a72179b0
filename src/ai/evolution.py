"""
Evolution Manager
=================

Mutation-only generational evolution (no crossover, no backprop).

Generation lifecycle:
    SPAWNING → RUNNING    population and opening pipe pair created
    RUNNING  → ENDED      the tick on which the last bird dies
    ENDED    → SPAWNING   immediately, inside the same tick

Fitness:
    fitness = age / (sum of ages of every bird that died this generation)

    Fitness is a share of the generation's total survival time. It sums to 1
    within a generation and is NOT comparable across generations; use the
    recorded ages (GenerationStats) for cross-generation progress.

Selection:
    The longest-lived bird of the previous generation is the only possible
    parent (ties go to the lowest population index). It is only used once it
    has survived SURVIVAL_THRESHOLD ticks (one full screen traverse). Each new
    bird inherits with probability SELECTION_PROB; an inheriting bird gets the
    parent's parameters unchanged with probability PARENT_REUSE_PROB, otherwise
    a mutated copy.
"""

from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

import sys
sys.path.append('../..')
from config import Config
from src.ai.agent import Agent
from src.ai.network import ControllerParams
from src.utils.random_source import RandomSource, NumpyRandomSource
from src.utils.logger import get_logger

_logger = get_logger(__name__)


class GenerationPhase(Enum):
    """Generation state machine."""
    SPAWNING = auto()
    RUNNING = auto()
    ENDED = auto()


@dataclass
class GenerationStats:
    """Summary of one finished generation."""
    generation: int
    population: int
    ticks: int
    best_age: int
    mean_age: float
    total_age: int
    parent_age: Optional[int]
    out_of_band_inputs: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def make_perturbation(rng: RandomSource, scale: float = 1.0) -> Callable[[], float]:
    """Perturbation drawing uniform offsets in [0, scale)."""
    def perturb() -> float:
        return rng.random() * scale
    return perturb


class EvolutionManager:
    """
    Owns the generational policy: fitness, selection, mutation and regeneration.

    Example:
        >>> manager = EvolutionManager(config, rng)
        >>> population = manager.generate_population([])
        >>> len(population) == config.POPULATION_SIZE
        True
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rng: Optional[RandomSource] = None,
        perturbation: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the manager.

        Args:
            config: Configuration object
            rng: Random source for selection rolls (shared with new agents)
            perturbation: Offset generator used when mutating (default: uniform [0, PERTURBATION_SCALE))
        """
        self.config = config or Config()
        self.rng: RandomSource = rng if rng is not None else NumpyRandomSource()
        self.perturbation = perturbation or make_perturbation(self.rng, self.config.PERTURBATION_SCALE)

        self.phase = GenerationPhase.SPAWNING
        self.generation = 0

        # Age of the parent chosen for the current generation (None = all random)
        self.parent_age: Optional[int] = None

    # -------------------------------------------------------------------------
    # Fitness
    # -------------------------------------------------------------------------

    @staticmethod
    def assign_fitness(dead_agents: Sequence[Agent]) -> int:
        """
        Set each agent's fitness to its share of the generation's total age.

        Returns:
            The total age (0 leaves every fitness at 0.0)
        """
        total_age = sum(agent.age for agent in dead_agents)
        for agent in dead_agents:
            agent.fitness = agent.age / total_age if total_age > 0 else 0.0
        return total_age

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_parent(self, dead_agents: Sequence[Agent]) -> Optional[Agent]:
        """Oldest dead agent, or None if there is none or it is below the survival threshold."""
        if not dead_agents:
            return None

        best = max(dead_agents, key=lambda agent: (agent.age, -agent.index))
        if best.age < self.config.survival_threshold:
            return None
        return best

    def inherit(self, parent: Optional[Agent]) -> Optional[ControllerParams]:
        """
        Produce the genome a new agent should copy from `parent`.

        The parent's parameters are returned unchanged with probability
        PARENT_REUSE_PROB, otherwise a mutated copy is returned.
        """
        if parent is None:
            return None

        if self.rng.random() < self.config.PARENT_REUSE_PROB:
            return parent.genome()

        child = parent.brain.copy()
        child.mutate(self.perturbation, self.config.MUTATION_RATE)
        return child.snapshot()

    def pick_one(self, dead_agents: Sequence[Agent]) -> Optional[ControllerParams]:
        """Select a parent from `dead_agents` and return the genome to inherit (or None)."""
        return self.inherit(self.select_parent(dead_agents))

    # -------------------------------------------------------------------------
    # Regeneration
    # -------------------------------------------------------------------------

    def generate_population(self, dead_agents: Sequence[Agent]) -> List[Agent]:
        """
        Build exactly POPULATION_SIZE new agents.

        Each agent attempts inheritance with probability SELECTION_PROB and
        gets a fresh random controller otherwise (or when no parent qualifies).
        """
        parent = self.select_parent(dead_agents)
        self.parent_age = parent.age if parent is not None else None

        agents = []
        for index in range(self.config.POPULATION_SIZE):
            genome = None
            if self.rng.random() < self.config.SELECTION_PROB:
                genome = self.inherit(parent)
            agents.append(Agent(self.config, self.rng, genome=genome, index=index))
        return agents

    def start(self) -> List[Agent]:
        """Create the first generation."""
        self.phase = GenerationPhase.SPAWNING
        self.generation = 0
        agents = self.generate_population([])
        self.phase = GenerationPhase.RUNNING
        _logger.info(f"Generation 0 spawned ({len(agents)} birds)")
        return agents

    def end_generation(
        self,
        dead_agents: Sequence[Agent],
        ticks: int,
        out_of_band_inputs: int = 0,
    ) -> GenerationStats:
        """
        Close the running generation: assign fitness and record its stats.

        The caller is expected to call `regenerate` right after, within the same tick.
        """
        self.phase = GenerationPhase.ENDED

        total_age = self.assign_fitness(dead_agents)
        ages = [agent.age for agent in dead_agents]

        return GenerationStats(
            generation=self.generation,
            population=len(dead_agents),
            ticks=ticks,
            best_age=max(ages) if ages else 0,
            mean_age=float(np.mean(ages)) if ages else 0.0,
            total_age=total_age,
            parent_age=self.parent_age,
            out_of_band_inputs=out_of_band_inputs,
        )

    def regenerate(self, dead_agents: Sequence[Agent]) -> List[Agent]:
        """Spawn the next generation from the one that just ended."""
        self.phase = GenerationPhase.SPAWNING
        agents = self.generate_population(dead_agents)
        self.generation += 1
        self.phase = GenerationPhase.RUNNING
        return agents
