"""
Bird Agent
==========

One simulated bird: fixed horizontal position, vertical physics and a
NeuralController that decides when to flap.

Each tick (while alive):
    1. Gravity is applied and velocity clamped to MAX_VELOCITY
    2. Position is integrated from velocity
    3. Age is incremented
    4. The controller looks at the sensed data and may trigger a jump

Death is decided outside the agent (see src/game/collision.py); the agent
only exposes its `alive` flag.
"""

from dataclasses import dataclass
from typing import List, Optional

import sys
sys.path.append('../..')
from config import Config
from src.ai.network import NeuralController, ControllerParams
from src.utils.random_source import RandomSource, NumpyRandomSource
from src.utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class SenseData:
    """What a bird perceives about the next pipe pair ahead of it."""
    distance: float  # Horizontal distance from the bird to the pair
    center: float    # Vertical center of the pair's gap


class Agent:
    """
    A bird controlled by a small neural network.

    Attributes:
        x (float): Horizontal position (constant for the agent's lifetime)
        y (float): Vertical position (0 = ceiling)
        velocity (float): Vertical velocity (negative = upward)
        age (int): Ticks survived
        fitness (Optional[float]): Share of the generation's total age, set after it ends
        alive (bool): Cleared exactly once on death
        brain (NeuralController): Owned controller, never shared with another agent

    Example:
        >>> agent = Agent(config, rng)
        >>> agent.update(SenseData(distance=300, center=250))
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rng: Optional[RandomSource] = None,
        genome: Optional[ControllerParams] = None,
        index: int = 0,
    ):
        """
        Initialize the agent.

        Args:
            config: Configuration object
            rng: Random source shared with the controller
            genome: Parent parameters to copy; a fresh random controller is built if None
            index: Position in the generation's population (used for tie-breaking)
        """
        self.config = config or Config()
        self.rng: RandomSource = rng if rng is not None else NumpyRandomSource()
        self.index = index

        self.x = float(self.config.BIRD_X)
        self.y = float(self.config.BIRD_START_Y)
        self.velocity = 0.0
        self.radius = self.config.BIRD_RADIUS
        self.age = 0
        self.fitness: Optional[float] = None
        self.alive = True

        # Count of sensed inputs that fell outside the expected band
        self.out_of_band_inputs = 0

        if genome is not None:
            self.brain = NeuralController.from_params(genome, self.config, self.rng)
        else:
            self.brain = NeuralController(self.config, self.rng)

        # Pre-computed normalization constants
        self._inv_width = 1.0 / self.config.SCREEN_WIDTH
        self._inv_height = 1.0 / self.config.SCREEN_HEIGHT
        self._inv_max_velocity = 1.0 / self.config.MAX_VELOCITY

    def update(self, sense: SenseData) -> None:
        """Advance one tick of physics, then let the controller decide."""
        if not self.alive:
            return

        self.velocity += self.config.GRAVITY
        if self.velocity > self.config.MAX_VELOCITY:
            self.velocity = self.config.MAX_VELOCITY
        elif self.velocity < -self.config.MAX_VELOCITY:
            self.velocity = -self.config.MAX_VELOCITY

        self.y += self.velocity

        self.age += 1

        self.decide(sense)

    def normalize(self, sense: SenseData) -> List[float]:
        """Map sensed data into the controller's expected input range."""
        return [
            (self.y - sense.center) * self._inv_height,
            sense.distance * self._inv_width,
            self.velocity * self._inv_max_velocity,
        ]

    def decide(self, sense: SenseData) -> bool:
        """
        Consult the controller and jump if its output is below the threshold.

        Returns:
            True if a jump was requested
        """
        inputs = self.normalize(sense)

        band = self.config.INPUT_BAND
        if any(value < -band or value > band for value in inputs):
            self.out_of_band_inputs += 1
            _logger.debug(f"Input out of band for bird {self.index}: {inputs}")

        output = self.brain.predict(inputs)

        if output < self.config.DECISION_THRESHOLD:
            self.jump()
            return True
        return False

    def jump(self) -> None:
        """Apply the jump impulse unless already moving upward."""
        if self.velocity < 0:
            return

        self.velocity = self.config.JUMP_VELOCITY

    def die(self) -> None:
        """Mark the agent dead. Later calls have no effect."""
        self.alive = False

    def genome(self) -> ControllerParams:
        """Immutable snapshot of this agent's controller parameters."""
        return self.brain.snapshot()

    def __repr__(self) -> str:
        state = 'alive' if self.alive else 'dead'
        return f"Agent(index={self.index}, y={self.y:.1f}, v={self.velocity:.2f}, age={self.age}, {state})"
