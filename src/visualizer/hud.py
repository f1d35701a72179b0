"""
Evolution HUD (Heads-Up Display)
================================

On-screen overlay showing generation progress while the population flies.
"""

import pygame
from typing import Optional

import sys
sys.path.append('../..')
from config import Config
from src.game.snapshot import FrameSnapshot


class EvolutionHUD:
    """
    On-screen evolution statistics overlay.

    Displays:
    - Generation counter
    - Alive birds out of the population, with a survival bar
    - Current and best age
    - Tick rate (top-right)
    - Paused banner
    """

    def __init__(self, config: Config):
        """
        Initialize the HUD.

        Args:
            config: Configuration object
        """
        self.config = config

        # Fonts
        self._font_small = pygame.font.Font(None, 20)
        self._font_medium = pygame.font.Font(None, 24)
        self._font_large = pygame.font.Font(None, 72)

        # Colors
        self.text_color = (220, 220, 220)
        self.text_dim = (150, 150, 150)
        self.accent_color = (52, 152, 219)  # Blue
        self.good_color = (46, 204, 113)  # Green
        self.warn_color = (241, 196, 15)  # Yellow
        self.bg_color = (0, 0, 0, 180)

    def render(
        self,
        surface: pygame.Surface,
        snapshot: FrameSnapshot,
        tick_rate: float,
        paused: bool = False,
        last_best_age: Optional[int] = None,
    ) -> None:
        """
        Render all HUD elements onto the surface.

        Args:
            surface: Pygame surface to render onto
            snapshot: Frame being displayed
            tick_rate: Current scheduler rate (ticks per second)
            paused: Whether the scheduler is paused
            last_best_age: Best age of the previous generation (if any)
        """
        self._render_panel(surface, 10, 10, f"Generation: {snapshot.generation:,}", self._font_medium)
        self._render_panel(surface, 10, 40, f"Age: {snapshot.tick:,}  |  Best: {snapshot.best_age:,}", self._font_small)
        if last_best_age is not None:
            self._render_panel(surface, 10, 64, f"Last generation best: {last_best_age:,}", self._font_small)
        self._render_alive_bar(surface, snapshot.alive, snapshot.population)
        self._render_speed_indicator(surface, tick_rate)

        if paused:
            self._render_paused(surface)

    def _render_panel(self, surface: pygame.Surface, x: int, y: int, text: str, font: pygame.font.Font) -> None:
        """Render a line of text on a translucent rounded background."""
        text_surface = font.render(text, True, self.text_color)

        bg_rect = text_surface.get_rect(topleft=(x, y))
        bg_rect.inflate_ip(16, 8)
        bg_surface = pygame.Surface((bg_rect.width, bg_rect.height), pygame.SRCALPHA)
        pygame.draw.rect(bg_surface, self.bg_color, bg_surface.get_rect(), border_radius=5)
        surface.blit(bg_surface, bg_rect.topleft)

        surface.blit(text_surface, (x, y))

    def _render_alive_bar(self, surface: pygame.Surface, alive: int, population: int) -> None:
        """Render the share of the population still alive."""
        bar_x = 18
        bar_y = 106
        bar_width = 150
        bar_height = 12

        bg_surface = pygame.Surface((170, 40), pygame.SRCALPHA)
        pygame.draw.rect(bg_surface, self.bg_color, bg_surface.get_rect(), border_radius=5)
        surface.blit(bg_surface, (10, 88))

        label_surface = self._font_small.render(f"Alive: {alive:,} / {population:,}", True, self.text_dim)
        surface.blit(label_surface, (bar_x, bar_y - 14))

        pygame.draw.rect(surface, (40, 40, 40), (bar_x, bar_y, bar_width, bar_height), border_radius=3)

        share = alive / population if population > 0 else 0.0
        fill_width = int(bar_width * share)
        if fill_width > 0:
            fill_color = self.good_color if share > 0.5 else self.warn_color
            pygame.draw.rect(surface, fill_color, (bar_x, bar_y, fill_width, bar_height), border_radius=3)

    def _render_speed_indicator(self, surface: pygame.Surface, tick_rate: float) -> None:
        """Render tick rate in top-right."""
        text = f"Speed: {tick_rate:.0f} ticks/s"
        color = self.warn_color if tick_rate > self.config.MIN_TICK_RATE else self.text_color
        text_surface = self._font_medium.render(text, True, color)

        screen_width = surface.get_width()
        bg_rect = text_surface.get_rect(topright=(screen_width - 10, 10))
        bg_rect.inflate_ip(16, 8)

        bg_surface = pygame.Surface((bg_rect.width, bg_rect.height), pygame.SRCALPHA)
        pygame.draw.rect(bg_surface, self.bg_color, bg_surface.get_rect(), border_radius=5)
        surface.blit(bg_surface, bg_rect.topleft)

        surface.blit(text_surface, (bg_rect.left + 8, 14))

    def _render_paused(self, surface: pygame.Surface) -> None:
        text_surface = self._font_large.render("PAUSED", True, self.accent_color)
        rect = text_surface.get_rect(center=(surface.get_width() // 2, surface.get_height() // 2))
        surface.blit(text_surface, rect)
