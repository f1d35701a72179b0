"""
Collision Detection
===================

Stateless checks deciding whether a bird has died this tick.

A bird collides with a pipe when its center lies strictly inside the pipe's
rectangle grown by the bird's radius on every side (and shrunk by the
configured forgiveness margin). This is a conservative circle-vs-AABB
approximation: corners count as hits slightly before a true circle test would.
"""

from typing import Iterable

import sys
sys.path.append('../..')
from config import Config
from src.ai.agent import Agent
from src.game.pipes import Pipe


def hits_pipe(x: float, y: float, radius: float, pipe: Pipe, margin: float = 0.0) -> bool:
    """True if a circle at (x, y) touches the margin-adjusted pipe rectangle."""
    left = pipe.x - radius + margin
    top = pipe.y - radius + margin
    right = pipe.right + radius - margin
    bottom = pipe.bottom + radius - margin

    return left < x < right and top < y < bottom


def out_of_bounds(y: float, height: float, margin: float = 0.0) -> bool:
    """True if a vertical position has left the playfield (floor or ceiling)."""
    return y > height - margin or y < margin


def is_colliding(agent: Agent, pipes: Iterable[Pipe], config: Config) -> bool:
    """
    Decide whether an agent is dead: out of bounds or touching any pipe.

    Only the boolean outcome matters, so the first hit short-circuits.
    """
    if out_of_bounds(agent.y, config.SCREEN_HEIGHT, config.BOUNDARY_MARGIN):
        return True

    for pipe in pipes:
        # Pipes fully behind the bird can no longer be hit
        if pipe.right + agent.radius - config.COLLISION_MARGIN <= agent.x:
            continue
        if hits_pipe(agent.x, agent.y, agent.radius, pipe, config.COLLISION_MARGIN):
            return True

    return False
