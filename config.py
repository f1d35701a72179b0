"""
Configuration file for Flappy Neuroevolution
============================================

All simulation constants, evolution parameters and runner options are centralized here.
Modify these values to experiment with different evolutionary setups.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.POPULATION_SIZE)
"""

from dataclasses import dataclass
from typing import Optional


class ConfigError(ValueError):
    """Raised when a configuration would produce undefined simulation geometry."""


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Playfield - Screen geometry
    2. Obstacles - Pipe generation and motion
    3. Bird - Physics of a single agent
    4. Controller - Neural network topology and decision rule
    5. Evolution - Selection and mutation policy
    6. Clock - Tick rate and speed control
    7. System - Logging and run control
    """

    # =========================================================================
    # PLAYFIELD
    # =========================================================================

    SCREEN_WIDTH: int = 800
    SCREEN_HEIGHT: int = 500

    # =========================================================================
    # OBSTACLES
    # =========================================================================

    PIPE_WIDTH: int = 20
    MIN_PIPE_HEIGHT: int = 40

    # Vertical gap left open between the two pipes of a pair
    PIPE_GAP: int = 150

    # Horizontal distance moved per tick (right to left)
    PIPE_SPEED: float = 1.0

    # Ticks between pair spawns (4 seconds at the 120 Hz base rate)
    SPAWN_PERIOD: int = 480

    # Set to False for a gravity-only field (useful for testing boundaries)
    OBSTACLES_ENABLED: bool = True

    # =========================================================================
    # BIRD
    # =========================================================================

    GRAVITY: float = 0.1
    MAX_VELOCITY: float = 4.0
    JUMP_VELOCITY: float = -3.0  # Negative = upward
    BIRD_X: int = 150
    BIRD_START_Y: float = 200.0
    BIRD_RADIUS: int = 10

    # =========================================================================
    # COLLISION
    # =========================================================================

    # Forgiveness shaved off each side of a pipe's hitbox (0 = exact AABB + radius)
    COLLISION_MARGIN: float = 0.0

    # Distance from floor/ceiling at which a bird counts as out of bounds
    BOUNDARY_MARGIN: float = 0.0

    # =========================================================================
    # NEURAL CONTROLLER
    # =========================================================================

    # Fixed topology: [y offset to gap, distance to pipe, velocity] -> jump signal
    INPUT_SIZE: int = 3
    HIDDEN_SIZE: int = 2
    OUTPUT_SIZE: int = 1

    # Output below this value triggers a jump
    DECISION_THRESHOLD: float = 0.5

    # Fresh controllers draw every parameter uniformly from [-range, range]
    WEIGHT_INIT_RANGE: float = 1.0

    # Normalized inputs outside [-band, band] are counted as anomalies
    INPUT_BAND: float = 1.0

    # =========================================================================
    # EVOLUTION
    # =========================================================================

    # Number of birds per generation
    # Each bird costs one forward pass per tick, so this bounds the achievable tick rate
    POPULATION_SIZE: int = 200

    # Per-parameter chance of being perturbed during mutation
    MUTATION_RATE: float = 0.2

    # Perturbations are uniform in [0, PERTURBATION_SCALE)
    PERTURBATION_SCALE: float = 1.0

    # Chance a selected parent's controller is reused without mutation
    PARENT_REUSE_PROB: float = 0.7

    # Chance a new bird inherits from the previous generation at all
    SELECTION_PROB: float = 0.9

    # Minimum age (ticks) of the best bird for it to become a parent
    # None = one full traverse of the playfield
    SURVIVAL_THRESHOLD: Optional[int] = None

    # =========================================================================
    # CLOCK / SPEED CONTROL
    # =========================================================================

    # Simulation ticks per second
    TICK_RATE: float = 120.0

    # Speed slider bounds (ticks per second)
    MIN_TICK_RATE: float = 120.0
    MAX_TICK_RATE: float = 1000.0

    # Display refresh rate for the visual runner (independent of tick rate)
    RENDER_FPS: int = 60

    # =========================================================================
    # RUN CONTROL
    # =========================================================================

    # Total generations to run (0 = unlimited, run until manually stopped)
    MAX_GENERATIONS: int = 0

    # Hard cap on generation length (0 = unlimited)
    # When reached, the remaining birds are killed so the generation ends
    MAX_TICKS_PER_GENERATION: int = 0

    # Print stats every N generations
    LOG_EVERY: int = 1

    # Report interval for headless mode (seconds between progress reports)
    REPORT_INTERVAL_SECONDS: float = 5.0

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    LOG_DIR: str = 'logs'

    # One of 'DEBUG', 'INFO', 'WARNING', 'ERROR'
    LOG_LEVEL: str = 'INFO'

    # Write log files in addition to console output
    LOG_TO_FILE: bool = False

    # Random seed for reproducibility (None for random)
    SEED: Optional[int] = None

    @property
    def survival_threshold(self) -> int:
        """Effective parent age threshold (defaults to the playfield width in ticks)."""
        if self.SURVIVAL_THRESHOLD is None:
            return self.SCREEN_WIDTH
        return self.SURVIVAL_THRESHOLD

    def __post_init__(self):
        """Reject configurations that would produce undefined geometry."""
        _require(self.SCREEN_WIDTH > 0, "SCREEN_WIDTH must be positive")
        _require(self.SCREEN_HEIGHT > 0, "SCREEN_HEIGHT must be positive")
        _require(self.POPULATION_SIZE > 0, "POPULATION_SIZE must be positive")
        _require(self.PIPE_WIDTH > 0, "PIPE_WIDTH must be positive")
        _require(self.MIN_PIPE_HEIGHT >= 0, "MIN_PIPE_HEIGHT must be non-negative")
        _require(0 < self.PIPE_GAP < self.SCREEN_HEIGHT,
                 "PIPE_GAP must be positive and smaller than SCREEN_HEIGHT")
        _require(self.PIPE_GAP + 2 * self.MIN_PIPE_HEIGHT <= self.SCREEN_HEIGHT,
                 "PIPE_GAP plus two minimum pipe heights must fit in SCREEN_HEIGHT")
        _require(self.PIPE_SPEED > 0, "PIPE_SPEED must be positive")
        _require(self.SPAWN_PERIOD > 0, "SPAWN_PERIOD must be positive")
        _require(self.MAX_VELOCITY > 0, "MAX_VELOCITY must be positive")
        _require(self.BIRD_RADIUS >= 0, "BIRD_RADIUS must be non-negative")
        _require(0 <= self.BIRD_X <= self.SCREEN_WIDTH, "BIRD_X must lie inside the playfield")
        # A margin past the thinnest pipe's half-extent turns the hitbox inside out
        max_margin = self.BIRD_RADIUS + min(self.PIPE_WIDTH, self.MIN_PIPE_HEIGHT) / 2
        _require(0 <= self.COLLISION_MARGIN < max_margin,
                 f"COLLISION_MARGIN must be in [0, {max_margin}), got {self.COLLISION_MARGIN}")
        _require(0 <= self.BOUNDARY_MARGIN < self.SCREEN_HEIGHT / 2,
                 "BOUNDARY_MARGIN must be in [0, SCREEN_HEIGHT / 2)")
        _require(self.HIDDEN_SIZE > 0, "HIDDEN_SIZE must be positive")
        for name in ('MUTATION_RATE', 'PARENT_REUSE_PROB', 'SELECTION_PROB', 'DECISION_THRESHOLD'):
            value = getattr(self, name)
            _require(0.0 <= value <= 1.0, f"{name} must be in [0, 1]")
        _require(self.INPUT_BAND > 0, "INPUT_BAND must be positive")
        _require(0 < self.MIN_TICK_RATE <= self.MAX_TICK_RATE,
                 "Tick rate bounds must satisfy 0 < MIN_TICK_RATE <= MAX_TICK_RATE")
        _require(self.MIN_TICK_RATE <= self.TICK_RATE <= self.MAX_TICK_RATE,
                 f"TICK_RATE must be in [{self.MIN_TICK_RATE}, {self.MAX_TICK_RATE}], got {self.TICK_RATE}")
        _require(self.survival_threshold >= 0, "SURVIVAL_THRESHOLD must be non-negative")
        _require(self.MAX_GENERATIONS >= 0, "MAX_GENERATIONS must be non-negative")
        _require(self.MAX_TICKS_PER_GENERATION >= 0, "MAX_TICKS_PER_GENERATION must be non-negative")
        _require(self.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR'),
                 f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, got {self.LOG_LEVEL}")


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("Flappy Neuroevolution - Configuration Summary")
    print("=" * 60)
    print(f"\nPlayfield: {cfg.SCREEN_WIDTH}x{cfg.SCREEN_HEIGHT}")
    print(f"Pipes: width={cfg.PIPE_WIDTH}, gap={cfg.PIPE_GAP}, every {cfg.SPAWN_PERIOD} ticks")
    print(f"\nController: {cfg.INPUT_SIZE} -> {cfg.HIDDEN_SIZE} -> {cfg.OUTPUT_SIZE}")
    print(f"\nEvolution:")
    print(f"   Population:       {cfg.POPULATION_SIZE}")
    print(f"   Mutation rate:    {cfg.MUTATION_RATE}")
    print(f"   Parent reuse:     {cfg.PARENT_REUSE_PROB}")
    print(f"   Selection prob:   {cfg.SELECTION_PROB}")
    print(f"   Survival ticks:   {cfg.survival_threshold}")
    print(f"\nTick rate: {cfg.TICK_RATE} ({cfg.MIN_TICK_RATE}-{cfg.MAX_TICK_RATE})")
    print("=" * 60)
