"""
Frame Snapshots
===============

Read-only per-tick views of the simulation for render sinks.

The simulation never hands out its live pipes or agents; a sink only ever
sees frozen copies, so drawing (possibly on another thread) cannot disturb
the next tick.
"""

import threading
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple


@dataclass(frozen=True)
class PipeView:
    """Rectangle of one pipe."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class BirdView:
    """Circle of one live bird."""
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything a renderer needs to draw one tick."""
    tick: int
    generation: int
    alive: int
    population: int
    best_age: int
    pipes: Tuple[PipeView, ...]
    birds: Tuple[BirdView, ...]


class RenderSink(Protocol):
    """Consumer of one snapshot per tick."""

    def consume(self, snapshot: FrameSnapshot) -> None:
        ...


class LatestFrameSink:
    """
    Thread-safe sink that keeps only the most recent snapshot.

    The scheduler thread publishes every tick; the display loop reads
    whatever is newest at its own frame rate.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest: Optional[FrameSnapshot] = None
        self.frames_received = 0

    def consume(self, snapshot: FrameSnapshot) -> None:
        with self._lock:
            self._latest = snapshot
            self.frames_received += 1

    @property
    def latest(self) -> Optional[FrameSnapshot]:
        with self._lock:
            return self._latest
