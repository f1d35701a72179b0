"""
Evolution Loop
==============

Runs generations without a display and tracks their statistics:
    1. Tick the simulation as fast as possible
    2. Collect a GenerationStats record each time a generation ends
    3. Report progress periodically through the logger

This module ties together the simulation and the metrics history.
"""

import time
from typing import List, Optional

import numpy as np

import sys
sys.path.append('../..')
from config import Config
from src.ai.evolution import GenerationStats
from src.game.flappy import SimulationClock
from src.utils.logger import get_logger, log_generation_metrics

_logger = get_logger(__name__)


class EvolutionMetrics:
    """
    Tracks and stores generation metrics over time.

    Metrics tracked:
        - Best age per generation
        - Mean age per generation
        - Generation length in ticks
        - Parent age (lineage strength)
        - Out-of-band input counts

    Fitness is deliberately not tracked: it is renormalized every generation.
    """

    def __init__(self, history_length: int = 1000):
        """
        Initialize metrics tracker.

        Args:
            history_length: Maximum history to store
        """
        self.history_length = history_length
        self.history: List[GenerationStats] = []
        self.best_age_ever = 0
        self.generations_seen = 0

    def add(self, stats: GenerationStats) -> None:
        """Add generation statistics."""
        self.history.append(stats)
        self.generations_seen += 1
        self.best_age_ever = max(self.best_age_ever, stats.best_age)

        # Trim to history length
        if len(self.history) > self.history_length:
            self.history = self.history[-self.history_length:]

    def get_recent_average(self, metric: str, n: int = 10) -> float:
        """Get average of the last n values for a GenerationStats field."""
        values = [getattr(s, metric) for s in self.history[-n:] if getattr(s, metric) is not None]
        if not values:
            return 0.0
        return float(np.mean(values))

    @property
    def last(self) -> Optional[GenerationStats]:
        return self.history[-1] if self.history else None


class Trainer:
    """
    Headless evolution loop.

    Example:
        >>> sim = SimulationClock(config)
        >>> trainer = Trainer(sim, config)
        >>> trainer.run(max_generations=50)
    """

    def __init__(self, sim: SimulationClock, config: Optional[Config] = None):
        self.sim = sim
        self.config = config or sim.config
        self.metrics = EvolutionMetrics()
        self.total_ticks = 0
        self.sim.add_generation_listener(self._on_generation_end)

    def _on_generation_end(self, stats: GenerationStats) -> None:
        self.metrics.add(stats)
        if stats.generation % max(1, self.config.LOG_EVERY) == 0:
            log_generation_metrics(
                generation=stats.generation,
                population=stats.population,
                best_age=stats.best_age,
                mean_age=stats.mean_age,
                parent_age=stats.parent_age,
                out_of_band=stats.out_of_band_inputs,
                ticks=stats.ticks,
            )

    def run(self, max_generations: Optional[int] = None) -> EvolutionMetrics:
        """
        Run generations until `max_generations` have finished (0 = unlimited).

        Args:
            max_generations: Override config.MAX_GENERATIONS

        Returns:
            The collected metrics
        """
        limit = self.config.MAX_GENERATIONS if max_generations is None else max_generations
        if not self.sim.started:
            self.sim.start()

        start_time = time.time()
        last_report_time = start_time
        ticks_since_report = 0
        finished = 0

        while limit == 0 or finished < limit:
            stats = self.sim.tick()
            self.total_ticks += 1
            ticks_since_report += 1
            if stats is not None:
                finished += 1

            current_time = time.time()
            elapsed = current_time - last_report_time
            if elapsed >= self.config.REPORT_INTERVAL_SECONDS:
                _logger.info(
                    f"Generation {self.sim.state.generation} | "
                    f"Alive: {len(self.sim.state.alive)} | "
                    f"Best ever: {self.metrics.best_age_ever} | "
                    f"{ticks_since_report / elapsed:,.0f} ticks/s"
                )
                last_report_time = current_time
                ticks_since_report = 0

        total_time = time.time() - start_time
        _logger.info(
            f"Finished {finished} generations in {total_time:.1f}s "
            f"({self.total_ticks:,} ticks, best age {self.metrics.best_age_ever})"
        )
        return self.metrics
