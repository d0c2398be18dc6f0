from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import GameSnapshot, color_of

BACKGROUND = (10, 10, 14)
GRID_BACKGROUND = (30, 30, 36)
CLEARING_COLOR = (255, 255, 255)
TEXT_COLOR = (230, 230, 230)
PREVIEW_SIZE = 4


def overlay_piece(snapshot: GameSnapshot) -> np.ndarray:
    """Board values with the active piece written on top, as the player sees it."""
    state = snapshot.board.copy()
    piece = snapshot.active_piece
    if piece is None:
        return state
    h, w = state.shape
    for x, y in piece.cells():
        if 0 <= y < h and 0 <= x < w:
            state[y, x] = piece.value
    return state


def preview_offset(shape: np.ndarray, size: int = PREVIEW_SIZE) -> Tuple[int, int]:
    """Offset that centers ``shape`` inside a ``size x size`` preview box."""
    rows, cols = shape.shape
    return (size - cols) // 2, (size - rows) // 2


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        side_panel = (PREVIEW_SIZE + 2) * self.cell_size
        return width * self.cell_size + side_panel + self.margin * 3, height * self.cell_size + self.margin * 2

    def _font_obj(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _cell_rect(self, x0: int, y0: int, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            x0 + x * self.cell_size,
            y0 + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, snapshot: GameSnapshot, ghost: Optional[Tuple[int, int]]) -> pygame.Surface:
        state = overlay_piece(snapshot)
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(GRID_BACKGROUND)
        for y in range(h):
            clearing = y in snapshot.clearing_rows
            for x in range(w):
                color = CLEARING_COLOR if clearing else color_of(int(state[y, x]))
                pygame.draw.rect(surf, color, self._cell_rect(0, 0, x, y))
        piece = snapshot.active_piece
        if piece is not None and ghost is not None:
            gx, gy = ghost
            for x, y in piece.cells_at(gx, gy):
                if 0 <= y < h and 0 <= x < w and state[y, x] == 0:
                    pygame.draw.rect(surf, piece.kind.rgb, self._cell_rect(0, 0, x, y), 1)
        return surf

    def _draw_side_panel(self, screen: pygame.Surface, snapshot: GameSnapshot, x0: int) -> None:
        font = self._font_obj()
        y0 = self.margin
        screen.blit(font.render("Next", True, TEXT_COLOR), (x0, y0))
        y0 += self.cell_size
        nxt = snapshot.next_piece
        if nxt is not None:
            ox, oy = preview_offset(nxt.shape)
            for py in range(nxt.shape.shape[0]):
                for px in range(nxt.shape.shape[1]):
                    if nxt.shape[py, px]:
                        pygame.draw.rect(screen, nxt.rgb, self._cell_rect(x0, y0, px + ox, py + oy))
        y0 += (PREVIEW_SIZE + 1) * self.cell_size
        for label in (f"Score {snapshot.score}", f"Level {snapshot.level}", f"Lines {snapshot.lines_cleared_total}"):
            screen.blit(font.render(label, True, TEXT_COLOR), (x0, y0))
            y0 += self.cell_size

    def _draw_banner(self, screen: pygame.Surface, text: str) -> None:
        surf = self._font_obj().render(text, True, TEXT_COLOR)
        rect = surf.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        screen.blit(surf, rect)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot, ghost: Optional[Tuple[int, int]] = None) -> None:
        grid_surf = self._grid_surface(snapshot, ghost)
        screen.fill(BACKGROUND)
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_side_panel(screen, snapshot, self.margin * 2 + grid_surf.get_width())
        if snapshot.game_over:
            self._draw_banner(screen, "Game Over - Press R to restart, ESC to quit")
        elif snapshot.paused:
            self._draw_banner(screen, "Paused - Press P to resume")
        pygame.display.flip()
