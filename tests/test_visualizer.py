"""
Tests for the visualizer module.

Tests cover:
- FrameRenderer drawing pipes and birds from a snapshot
- EvolutionHUD rendering in every state
"""

import pytest
import os
import sys

# Set SDL_VIDEODRIVER before importing pygame to avoid display errors in CI
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')

import pygame
pygame.init()

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from src.game.snapshot import BirdView, FrameSnapshot, PipeView
from src.visualizer.hud import EvolutionHUD
from src.visualizer.renderer import FrameRenderer


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def surface(config):
    return pygame.Surface((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))


@pytest.fixture
def snapshot():
    return FrameSnapshot(
        tick=120,
        generation=3,
        alive=150,
        population=200,
        best_age=1450,
        pipes=(PipeView(400.0, 0.0, 20, 120.0), PipeView(400.0, 270.0, 20, 230.0)),
        birds=(BirdView(150.0, 200.0, 10), BirdView(150.0, 260.0, 10)),
    )


class TestFrameRenderer:
    """Tests for FrameRenderer."""

    def test_draws_pipes(self, config, surface, snapshot):
        renderer = FrameRenderer(config)
        renderer.render(surface, snapshot)

        assert surface.get_at((410, 60))[:3] == renderer.pipe_color
        assert surface.get_at((410, 400))[:3] == renderer.pipe_color

    def test_gap_is_background(self, config, surface, snapshot):
        renderer = FrameRenderer(config)
        renderer.render(surface, snapshot)

        assert surface.get_at((410, 200))[:3] == renderer.background_color

    def test_draws_birds(self, config, surface, snapshot):
        renderer = FrameRenderer(config)
        renderer.render(surface, snapshot)

        assert surface.get_at((150, 200))[:3] == renderer.bird_color
        assert surface.get_at((150, 260))[:3] == renderer.bird_color

    def test_empty_frame(self, config, surface):
        renderer = FrameRenderer(config)
        empty = FrameSnapshot(0, 0, 0, 200, 0, (), ())
        renderer.render(surface, empty)

        assert surface.get_at((150, 200))[:3] == renderer.background_color


class TestEvolutionHUD:
    """Tests for EvolutionHUD."""

    def test_render_running(self, config, surface, snapshot):
        hud = EvolutionHUD(config)
        hud.render(surface, snapshot, tick_rate=120.0)

    def test_render_paused_with_history(self, config, surface, snapshot):
        hud = EvolutionHUD(config)
        hud.render(surface, snapshot, tick_rate=1000.0, paused=True, last_best_age=900)

    def test_render_extinct_population(self, config, surface):
        hud = EvolutionHUD(config)
        frame = FrameSnapshot(0, 0, 0, 0, 0, (), ())
        hud.render(surface, frame, tick_rate=120.0)

    def test_hud_draws_something(self, config, surface, snapshot):
        surface.fill((0, 0, 0))
        before = pygame.image.tostring(surface, 'RGB')

        EvolutionHUD(config).render(surface, snapshot, tick_rate=120.0)

        assert pygame.image.tostring(surface, 'RGB') != before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
