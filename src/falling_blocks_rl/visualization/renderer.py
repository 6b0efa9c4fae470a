from __future__ import annotations

from typing import Tuple

import pygame

from falling_blocks_rl.game import GameState
from falling_blocks_rl.game.grid import FILLED, PIECE_OVERLAY


BACKGROUND = (10, 10, 14)
EMPTY_COLOR = (30, 30, 36)
LANDED_COLOR = (150, 150, 160)
TEXT_COLOR = (230, 230, 230)


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 160) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font = None

    def window_size(self, state: GameState) -> Tuple[int, int]:
        width = state.grid.width * self.cell_size + self.margin * 3 + self.panel_width
        height = state.grid.height * self.cell_size + self.margin * 2
        return width, height

    def _font_obj(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _grid_surface(self, state: GameState) -> pygame.Surface:
        cells = state.render_grid()
        h, w = cells.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(BACKGROUND)
        piece_color = _hex_to_rgb(state.current_piece.color) if state.current_piece is not None else LANDED_COLOR
        for y in range(h):
            for x in range(w):
                v = int(cells[y, x])
                if v == PIECE_OVERLAY:
                    color = piece_color
                elif v == FILLED:
                    color = LANDED_COLOR
                else:
                    color = EMPTY_COLOR
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                pygame.draw.rect(surf, color, rect)
        return surf

    def _draw_panel(self, screen: pygame.Surface, state: GameState) -> None:
        font = self._font_obj()
        x0 = self.margin * 2 + state.grid.width * self.cell_size
        lines = [
            f"Score  {state.score}",
            f"Lines  {state.lines_cleared}",
            f"Level  {state.level}",
            "",
            "<- ->  move",
            "Down   drop",
            "Up     rotate",
            "P      pause",
            "R      new game",
        ]
        for i, text in enumerate(lines):
            screen.blit(font.render(text, True, TEXT_COLOR), (x0, self.margin + i * 26))

    def _draw_banner(self, screen: pygame.Surface, text: str, color: Tuple[int, int, int]) -> None:
        label = self._font_obj().render(text, True, color)
        rect = label.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        screen.blit(label, rect)

    def draw(self, screen: pygame.Surface, state: GameState) -> None:
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(state), (self.margin, self.margin))
        self._draw_panel(screen, state)
        if state.game_over:
            self._draw_banner(screen, "Game Over - R to restart", (240, 80, 80))
        elif state.paused:
            self._draw_banner(screen, "Paused", (240, 200, 60))
        pygame.display.flip()
