"""
Flappy Simulation
=================

The fixed-timestep world: pipes, a population of birds and the generational loop.

One tick, in strict order:
    1. Advance the tick counter; spawn a pipe pair if due
    2. Move pipes left, dropping the ones that left the screen
    3. For every live bird: sense → decide → act → integrate
    4. Collision / boundary checks on post-movement positions
    5. Move newly dead birds to the generation's dead set
    6. If no bird is alive: assign fitness and regenerate (same tick)
    7. Publish a read-only snapshot to the render sink

There is no I/O or blocking inside a tick; pacing belongs to TickScheduler.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import sys
sys.path.append('../..')
from config import Config
from src.ai.agent import Agent
from src.ai.evolution import EvolutionManager, GenerationStats
from src.game.collision import is_colliding
from src.game.pipes import PipeField
from src.game.snapshot import BirdView, FrameSnapshot, PipeView, RenderSink
from src.utils.random_source import RandomSource, NumpyRandomSource
from src.utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class SimulationState:
    """All mutable state of a running simulation."""
    pipes: PipeField
    tick: int = 0
    generation: int = 0
    alive: List[Agent] = field(default_factory=list)
    dead: List[Agent] = field(default_factory=list)
    out_of_band_inputs: int = 0
    best_age_ever: int = 0


class SimulationClock:
    """
    Steps the simulation one tick at a time.

    Attributes:
        state (SimulationState): Current pipes, population and counters
        evolution (EvolutionManager): Generational policy
        sink (Optional[RenderSink]): Receives a snapshot after every tick

    Example:
        >>> sim = SimulationClock(config, rng)
        >>> sim.start()
        >>> for _ in range(1000):
        ...     sim.tick()
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rng: Optional[RandomSource] = None,
        evolution: Optional[EvolutionManager] = None,
        sink: Optional[RenderSink] = None,
    ):
        """
        Initialize the simulation.

        Args:
            config: Configuration object
            rng: Random source for every stochastic draw (seeded from config.SEED if None)
            evolution: Override the generational policy
            sink: Render sink receiving per-tick snapshots
        """
        self.config = config or Config()
        self.rng: RandomSource = rng if rng is not None else NumpyRandomSource(self.config.SEED)
        self.evolution = evolution or EvolutionManager(self.config, self.rng)
        self.sink = sink

        self.state = SimulationState(pipes=PipeField(self.config, self.rng))
        self.started = False

        # Called with the finished generation's stats, before the next tick
        self._generation_listeners: List[Callable[[GenerationStats], None]] = []

    def add_generation_listener(self, listener: Callable[[GenerationStats], None]) -> None:
        self._generation_listeners.append(listener)

    def start(self) -> None:
        """Spawn the first generation and its opening pipe pair."""
        state = self.state
        state.tick = 0
        state.generation = 0
        state.dead = []
        state.out_of_band_inputs = 0
        state.pipes.reset()
        state.alive = self.evolution.start()
        self.started = True
        self._publish()

    def tick(self) -> Optional[GenerationStats]:
        """
        Advance the simulation by one tick.

        Returns:
            Stats of the generation that ended on this tick, or None
        """
        if not self.started:
            self.start()

        state = self.state
        state.tick += 1

        state.pipes.maybe_spawn(state.tick)
        state.pipes.advance()

        # Every bird shares the same x, so one sensing pass serves all
        if state.alive:
            sense = state.pipes.sense(state.alive[0].x)
            for agent in state.alive:
                before = agent.out_of_band_inputs
                agent.update(sense)
                state.out_of_band_inputs += agent.out_of_band_inputs - before

        for agent in state.alive:
            if is_colliding(agent, state.pipes, self.config):
                agent.die()

        cap = self.config.MAX_TICKS_PER_GENERATION
        if cap and state.tick >= cap:
            for agent in state.alive:
                agent.die()

        survivors = []
        for agent in state.alive:
            if agent.alive:
                survivors.append(agent)
            else:
                state.dead.append(agent)
        state.alive = survivors

        _logger.debug(f"tick={state.tick} alive={len(state.alive)}")

        stats = None
        if not state.alive:
            stats = self._end_generation()

        self._publish()
        return stats

    def _end_generation(self) -> GenerationStats:
        """Score the finished generation and replace it synchronously."""
        state = self.state
        stats = self.evolution.end_generation(state.dead, state.tick, state.out_of_band_inputs)
        state.best_age_ever = max(state.best_age_ever, stats.best_age)

        # Dead set is the sole lineage source for the new generation, then released
        state.alive = self.evolution.regenerate(state.dead)
        state.dead = []
        state.pipes.reset()
        state.tick = 0
        state.out_of_band_inputs = 0
        state.generation = self.evolution.generation

        for listener in self._generation_listeners:
            listener(stats)
        return stats

    def run_generation(self) -> GenerationStats:
        """Tick until the current generation ends."""
        while True:
            stats = self.tick()
            if stats is not None:
                return stats

    def snapshot(self) -> FrameSnapshot:
        """Immutable view of the current frame."""
        state = self.state
        return FrameSnapshot(
            tick=state.tick,
            generation=state.generation,
            alive=len(state.alive),
            population=self.config.POPULATION_SIZE,
            best_age=state.best_age_ever,
            pipes=tuple(PipeView(p.x, p.y, p.width, p.height) for p in state.pipes),
            birds=tuple(BirdView(a.x, a.y, a.radius) for a in state.alive),
        )

    def _publish(self) -> None:
        if self.sink is not None:
            self.sink.consume(self.snapshot())
