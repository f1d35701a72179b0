"""
AI Module
=========

Neuroevolution components for the flappy simulation.

Classes:
    NeuralController - Fixed 3-2-1 feedforward network (inference, copy, mutation)
    Agent            - A bird with physics state and its own controller
    EvolutionManager - Fitness, selection, mutation and regeneration
"""

from .network import NeuralController, ControllerParams
from .agent import Agent, SenseData
from .evolution import EvolutionManager, GenerationPhase, GenerationStats

__all__ = [
    'NeuralController',
    'ControllerParams',
    'Agent',
    'SenseData',
    'EvolutionManager',
    'GenerationPhase',
    'GenerationStats',
]
