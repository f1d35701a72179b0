"""Utility modules for the flappy neuroevolution project."""

from .logger import get_logger, setup_logging, LogLevel
from .random_source import RandomSource, NumpyRandomSource

__all__ = ['get_logger', 'setup_logging', 'LogLevel', 'RandomSource', 'NumpyRandomSource']
