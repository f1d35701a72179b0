"""
Visualizer Module
=================

Pygame drawing of the simulation.

Classes:
    FrameRenderer - Draws pipes and birds from a FrameSnapshot
    EvolutionHUD  - On-screen generation statistics overlay
"""

from .renderer import FrameRenderer
from .hud import EvolutionHUD

__all__ = ['FrameRenderer', 'EvolutionHUD']
