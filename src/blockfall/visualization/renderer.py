from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
import pygame

from blockfall.game import GameState
from blockfall.game.core import LOCKED_CELL


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (0, 240, 240),  # I
        2: (240, 240, 0),  # O
        3: (160, 0, 240),  # T
        4: (0, 240, 0),    # S
        5: (240, 0, 0),    # Z
        6: (0, 0, 240),    # J
        7: (240, 160, 0),  # L
        LOCKED_CELL: (225, 225, 232),
    }
    return palette.get(abs(v), (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 24, margin: int = 20, panel_width: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, game: GameState) -> Tuple[int, int]:
        w = game.grid.width * self.cell_size + self.margin * 3 + self.panel_width
        h = game.grid.height * self.cell_size + self.margin * 2
        return w, h

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
            self._big_font = pygame.font.SysFont(None, 42)
        return self._font, self._big_font

    def _grid_surface(self, state: np.ndarray, ghost: List[Tuple[int, int]]) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        for x, y in ghost:
            if 0 <= y < h and 0 <= x < w and state[y, x] == 0:
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                pygame.draw.rect(surf, (110, 110, 130), rect, 2)
        return surf

    def _speed_fraction(self, game: GameState) -> float:
        rules = game.rules
        span = rules.base_interval_ms - rules.min_interval_ms
        if span <= 0:
            return 1.0
        return 1.0 - min(1.0, (game.gravity_interval_ms - rules.min_interval_ms) / span)

    def _draw_panel(self, screen: pygame.Surface, game: GameState) -> None:
        font, _ = self._fonts()
        x0 = self.margin * 2 + game.grid.width * self.cell_size
        y0 = self.margin
        info_lines = [
            f"Score: {game.score}",
            f"Lines: {game.lines}",
            f"Level: {game.level}",
            f"Sound: {'off' if game.muted else 'on'}",
            "",
            "Move: arrows / WASD",
            "Rotate: Up/W, Z/Q",
            "Drop: Space",
            "Pause: P  Mute: M",
            "New game: Enter / R",
        ]
        for i, txt in enumerate(info_lines):
            img = font.render(txt, True, (230, 230, 230))
            screen.blit(img, (x0, y0 + i * 22))
        bar_y = y0 + len(info_lines) * 22 + 10
        bar = pygame.Rect(x0, bar_y, self.panel_width - self.margin, 10)
        pygame.draw.rect(screen, (60, 60, 70), bar)
        fill = bar.copy()
        fill.width = int(bar.width * self._speed_fraction(game))
        pygame.draw.rect(screen, (240, 160, 0), fill)

    def _draw_overlay(self, screen: pygame.Surface, game: GameState) -> None:
        if game.game_over:
            message = "GAME OVER"
        elif game.paused:
            message = "PAUSED"
        else:
            return
        _, big_font = self._fonts()
        board_w = game.grid.width * self.cell_size
        board_h = game.grid.height * self.cell_size
        img = big_font.render(message, True, (255, 100, 100))
        rect = img.get_rect(center=(self.margin + board_w // 2, self.margin + board_h // 2))
        screen.blit(img, rect)

    def draw(self, screen: pygame.Surface, game: GameState) -> None:
        grid_surf = self._grid_surface(game.get_state(), game.current_ghost_cells())
        screen.fill((10, 10, 14))
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_panel(screen, game)
        self._draw_overlay(screen, game)
        pygame.display.flip()
