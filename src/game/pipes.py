"""
Pipes
=====

Procedurally generated obstacle pairs that scroll from right to left.

A pair is a top pipe (hanging from the ceiling) and a bottom pipe (standing
on the floor) whose heights always sum to SCREEN_HEIGHT - PIPE_GAP, leaving
exactly one gap of the configured size somewhere in the vertical span.
"""

from typing import List, Optional, Tuple

import sys
sys.path.append('../..')
from config import Config
from src.ai.agent import SenseData
from src.utils.random_source import RandomSource, NumpyRandomSource


class Pipe:
    """A single pipe rectangle."""

    def __init__(self, x: float, y: float, width: float, height: float):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.is_dead = False

    @property
    def right(self) -> float:
        """Trailing (right) edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def move(self, speed: float) -> None:
        """Scroll left and flag the pipe once it has fully left the screen."""
        self.x -= speed

        if self.x + self.width < 0:
            self.is_dead = True

    def __repr__(self) -> str:
        return f"Pipe(x={self.x:.1f}, y={self.y:.1f}, w={self.width}, h={self.height:.1f})"


class PipeField:
    """
    Ordered collection of live pipes.

    Pipes are appended in spawn order and all move at the same speed, so the
    list is always sorted left to right. Pairs are stored as consecutive
    (top, bottom) entries.

    Example:
        >>> field = PipeField(config, rng)
        >>> field.reset()
        >>> len(field)
        2
    """

    def __init__(self, config: Optional[Config] = None, rng: Optional[RandomSource] = None):
        self.config = config or Config()
        self.rng: RandomSource = rng if rng is not None else NumpyRandomSource()
        self.pipes: List[Pipe] = []
        self.pairs_spawned = 0

    def __len__(self) -> int:
        return len(self.pipes)

    def __iter__(self):
        return iter(self.pipes)

    def reset(self) -> None:
        """Clear the field and place the opening pair."""
        self.pipes = []
        self.pairs_spawned = 0
        if self.config.OBSTACLES_ENABLED:
            self.spawn_pair()

    def spawn_pair(self) -> Tuple[Pipe, Pipe]:
        """
        Generate a complementary pipe pair at the right edge.

        The top height is drawn uniformly from
        [MIN_PIPE_HEIGHT, SCREEN_HEIGHT - PIPE_GAP - MIN_PIPE_HEIGHT), which keeps
        both pipes at or above the minimum height.
        """
        cfg = self.config
        low = cfg.MIN_PIPE_HEIGHT
        high = cfg.SCREEN_HEIGHT - cfg.PIPE_GAP - cfg.MIN_PIPE_HEIGHT
        top_height = self.rng.uniform(low, high) if high > low else float(low)
        bottom_height = cfg.SCREEN_HEIGHT - top_height - cfg.PIPE_GAP

        x = float(cfg.SCREEN_WIDTH)
        top = Pipe(x, 0.0, cfg.PIPE_WIDTH, top_height)
        bottom = Pipe(x, cfg.SCREEN_HEIGHT - bottom_height, cfg.PIPE_WIDTH, bottom_height)

        self.pipes.append(top)
        self.pipes.append(bottom)
        self.pairs_spawned += 1
        return top, bottom

    def maybe_spawn(self, tick: int) -> bool:
        """Spawn a pair if `tick` falls on the spawn period."""
        if not self.config.OBSTACLES_ENABLED:
            return False
        if tick % self.config.SPAWN_PERIOD == 0:
            self.spawn_pair()
            return True
        return False

    def advance(self) -> int:
        """
        Move every pipe one step left and drop the ones that left the screen.

        Returns:
            Number of pipes removed
        """
        for pipe in self.pipes:
            pipe.move(self.config.PIPE_SPEED)

        before = len(self.pipes)
        self.pipes = [pipe for pipe in self.pipes if not pipe.is_dead]
        return before - len(self.pipes)

    def ahead_of(self, x: float) -> List[Pipe]:
        """Pipes whose left edge is still to the right of `x`."""
        return [pipe for pipe in self.pipes if pipe.x > x]

    def sense(self, x: float) -> SenseData:
        """
        Describe the next pair ahead of horizontal position `x`.

        With nothing ahead (empty field) the bird sees a gap centered in the
        playfield a full screen away.
        """
        remaining = self.ahead_of(x)
        if len(remaining) < 2:
            return SenseData(
                distance=float(self.config.SCREEN_WIDTH),
                center=self.config.SCREEN_HEIGHT / 2,
            )

        top, bottom = remaining[0], remaining[1]
        return SenseData(
            distance=top.x - x,
            center=(top.height + bottom.y) / 2,
        )
