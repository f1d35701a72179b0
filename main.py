#!/usr/bin/env python3
"""
Flappy Neuroevolution - Main Entry Point
========================================

Runs a population of neural-network birds through scrolling pipes and evolves
them generation after generation.

Usage:
    # Watch evolution live (default)
    python main.py

    # Evolve without a window (fastest)
    python main.py --headless --generations 100

    # Reproducible run with a smaller population
    python main.py --seed 42 --population 50

    # Gravity-only field (no pipes)
    python main.py --no-obstacles

Press:
    - ESC or Q: Quit
    - P: Pause/Resume
    - +/-: Adjust tick rate
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import argparse
import os
import sys
from typing import List, Optional

import pygame

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config, ConfigError
from src.ai.evolution import GenerationStats
from src.ai.trainer import Trainer, EvolutionMetrics
from src.game.flappy import SimulationClock
from src.game.scheduler import TickScheduler
from src.game.snapshot import LatestFrameSink
from src.utils.logger import LogLevel, get_log_path, get_logger, setup_logging
from src.utils.random_source import NumpyRandomSource
from src.visualizer.hud import EvolutionHUD
from src.visualizer.renderer import FrameRenderer

_logger = get_logger('main')


class GameApp:
    """
    Windowed runner: the scheduler ticks the simulation on its own thread,
    the main thread draws the newest snapshot and handles input.
    """

    # Speed presets (ticks per second) stepped through with +/-
    SPEED_PRESETS = [120, 200, 300, 500, 750, 1000]

    def __init__(self, config: Config):
        self.config = config

        pygame.init()
        pygame.display.set_caption("Flappy Neuroevolution")
        self.screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()

        self.sink = LatestFrameSink()
        self.sim = SimulationClock(config, NumpyRandomSource(config.SEED), sink=self.sink)
        self.metrics = EvolutionMetrics()
        self.sim.add_generation_listener(self._on_generation_end)

        self.scheduler = TickScheduler(
            self.sim.tick,
            rate=config.TICK_RATE,
            min_rate=config.MIN_TICK_RATE,
            max_rate=config.MAX_TICK_RATE,
        )

        self.renderer = FrameRenderer(config)
        self.hud = EvolutionHUD(config)

        self.running = True
        self.paused = False

    def _on_generation_end(self, stats: GenerationStats) -> None:
        # Runs on the scheduler thread
        self.metrics.add(stats)
        _logger.info(
            f"Generation {stats.generation} ended | best={stats.best_age} "
            f"| mean={stats.mean_age:.1f} | parent={stats.parent_age}"
        )
        max_generations = self.config.MAX_GENERATIONS
        if max_generations and self.metrics.generations_seen >= max_generations:
            self.running = False

    def _toggle_pause(self) -> None:
        """Pause cancels the repeating task; resume re-arms it."""
        self.paused = not self.paused
        if self.paused:
            self.scheduler.stop()
        else:
            self.scheduler.start()
        _logger.info("Paused" if self.paused else "Resumed")

    def _speed_up(self) -> None:
        """Increase tick rate to next preset."""
        for preset in self.SPEED_PRESETS:
            if preset > self.scheduler.rate + 0.01:
                self.scheduler.set_rate(preset)
                return
        self.scheduler.set_rate(self.SPEED_PRESETS[-1])

    def _speed_down(self) -> None:
        """Decrease tick rate to previous preset."""
        for preset in reversed(self.SPEED_PRESETS):
            if preset < self.scheduler.rate - 0.01:
                self.scheduler.set_rate(preset)
                return
        self.scheduler.set_rate(self.SPEED_PRESETS[0])

    def _handle_events(self) -> None:
        """Handle pygame events and keyboard input."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self.running = False
                elif event.key == pygame.K_p:
                    self._toggle_pause()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self._speed_up()
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self._speed_down()

    def _render_frame(self) -> None:
        snapshot = self.sink.latest
        if snapshot is None:
            return
        last = self.metrics.last
        self.renderer.render(self.screen, snapshot)
        self.hud.render(
            self.screen,
            snapshot,
            tick_rate=self.scheduler.rate,
            paused=self.paused,
            last_best_age=last.best_age if last else None,
        )
        pygame.display.flip()

    def run(self) -> None:
        """Start ticking and draw until the window is closed."""
        self.sim.start()
        self.scheduler.start()
        try:
            while self.running:
                self._handle_events()
                self.scheduler.raise_if_failed()
                self._render_frame()
                self.clock.tick(self.config.RENDER_FPS)
        finally:
            self.scheduler.stop()
            pygame.quit()


def run_headless(config: Config) -> EvolutionMetrics:
    """Evolve as fast as possible without a window."""
    if config.MAX_TICKS_PER_GENERATION == 0 and config.MAX_GENERATIONS == 0:
        _logger.warning("Unlimited generations with no tick cap; stop with Ctrl+C")

    sim = SimulationClock(config, NumpyRandomSource(config.SEED))
    trainer = Trainer(sim, config)
    return trainer.run()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Flappy Neuroevolution - evolve neural-network birds through pipes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
========
    python main.py                                Watch evolution live
    python main.py --headless --generations 100   Fast evolution, no window
    python main.py --seed 42 --population 50      Reproducible smaller run
        """
    )

    parser.add_argument(
        '--headless', action='store_true',
        help='Run without a window (no rendering, no pacing)'
    )
    parser.add_argument(
        '--generations', type=int, default=None,
        help='Number of generations to run (default: unlimited)'
    )
    parser.add_argument(
        '--population', type=int, default=None,
        help='Birds per generation'
    )
    parser.add_argument(
        '--tick-rate', type=float, default=None,
        help='Initial ticks per second for the visual runner'
    )
    parser.add_argument(
        '--max-ticks', type=int, default=None,
        help='Cap on generation length in ticks (default: unlimited)'
    )
    parser.add_argument(
        '--no-obstacles', action='store_true',
        help='Gravity-only field without pipes'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducibility'
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=[level.name for level in LogLevel],
        help='Logging verbosity'
    )
    parser.add_argument(
        '--log-file', action='store_true',
        help='Also write logs to LOG_DIR'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Apply CLI overrides to a default Config (validated on construction)."""
    overrides = {}
    if args.generations is not None:
        overrides['MAX_GENERATIONS'] = args.generations
    if args.population is not None:
        overrides['POPULATION_SIZE'] = args.population
    if args.tick_rate is not None:
        overrides['TICK_RATE'] = args.tick_rate
    if args.max_ticks is not None:
        overrides['MAX_TICKS_PER_GENERATION'] = args.max_ticks
    if args.no_obstacles:
        overrides['OBSTACLES_ENABLED'] = False
    if args.seed is not None:
        overrides['SEED'] = args.seed
    if args.log_level is not None:
        overrides['LOG_LEVEL'] = args.log_level
    if args.log_file:
        overrides['LOG_TO_FILE'] = True
    return Config(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(
        log_dir=config.LOG_DIR,
        level=LogLevel[config.LOG_LEVEL],
        file_output=config.LOG_TO_FILE,
    )
    log_path = get_log_path()
    if log_path is not None:
        _logger.info(f"Logging to {log_path}")

    try:
        if args.headless:
            run_headless(config)
        else:
            GameApp(config).run()
    except KeyboardInterrupt:
        _logger.info("Interrupted by user")

    return 0


if __name__ == "__main__":
    sys.exit(main())
