"""
Flappy Neuroevolution - Source Package
======================================

A population of birds, each flown by a tiny neural network, learns to get
through scrolling pipes by mutation-only evolution.

Modules:
    ai/         - Neural controller, bird agent, evolution policy and headless loop
    game/       - Pipes, collision, the tick-driven simulation and its scheduler
    visualizer/ - Pygame renderer and HUD
    utils/      - Logging and random sources
"""

__version__ = "1.0.0"
