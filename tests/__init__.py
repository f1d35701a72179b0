"""
Tests for Flappy Neuroevolution
===============================

Run all tests:
    pytest tests/

Skip the timing-based tests:
    pytest tests/ -m "not slow"
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")
