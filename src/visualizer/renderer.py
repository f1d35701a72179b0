"""
Frame Renderer
==============

Draws a FrameSnapshot: pipes as rectangles, live birds as circles.
"""

import pygame

import sys
sys.path.append('../..')
from config import Config
from src.game.snapshot import FrameSnapshot


class FrameRenderer:
    """Plain pygame drawing of one simulation frame."""

    def __init__(self, config: Config):
        self.config = config

        self.background_color = (15, 15, 35)
        self.pipe_color = (46, 204, 113)
        self.bird_color = (231, 76, 60)

    def render(self, surface: pygame.Surface, snapshot: FrameSnapshot) -> None:
        """Draw pipes and birds onto `surface`."""
        surface.fill(self.background_color)

        for pipe in snapshot.pipes:
            rect = pygame.Rect(int(pipe.x), int(pipe.y), int(pipe.width), int(round(pipe.height)))
            pygame.draw.rect(surface, self.pipe_color, rect)

        for bird in snapshot.birds:
            pygame.draw.circle(surface, self.bird_color, (int(bird.x), int(bird.y)), int(bird.radius))
