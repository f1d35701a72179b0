"""
Game Module
===========

The flappy world and the machinery that steps it.

Classes:
    Pipe, PipeField   - Obstacle pairs and their spawning/scrolling
    SimulationClock   - One-tick orchestration and generation turnover
    TickScheduler     - Cancellable repeating task pacing the ticks
    FrameSnapshot     - Read-only per-tick view for renderers
"""

from .pipes import Pipe, PipeField
from .collision import hits_pipe, out_of_bounds, is_colliding
from .snapshot import FrameSnapshot, PipeView, BirdView, RenderSink, LatestFrameSink
from .flappy import SimulationClock, SimulationState
from .scheduler import TickScheduler

__all__ = [
    'Pipe',
    'PipeField',
    'hits_pipe',
    'out_of_bounds',
    'is_colliding',
    'FrameSnapshot',
    'PipeView',
    'BirdView',
    'RenderSink',
    'LatestFrameSink',
    'SimulationClock',
    'SimulationState',
    'TickScheduler',
]
