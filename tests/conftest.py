from __future__ import annotations

import numpy as np
import pytest

from falling_blocks.game import (
    PIECE_KINDS,
    ActivePiece,
    Board,
    FallingBlocksGame,
    GameConfig,
    TetrominoType,
    rotate_clockwise,
)


def make_piece(kind: TetrominoType, x: int, y: int, rotations: int = 0) -> ActivePiece:
    piece_kind = PIECE_KINDS[kind]
    shape = piece_kind.shape
    for _ in range(rotations):
        shape = rotate_clockwise(shape)
    return ActivePiece(kind=piece_kind, shape=shape, x=x, y=y)


def almost_full_bottom_row(width: int = 10, height: int = 20, gap: int = 3) -> Board:
    cells = np.zeros((height, width), dtype=np.int8)
    cells[height - 1, :] = int(TetrominoType.Z)
    cells[height - 1, gap] = 0
    return Board.from_array(cells)


@pytest.fixture
def game() -> FallingBlocksGame:
    return FallingBlocksGame(GameConfig(random_seed=1234))


@pytest.fixture
def clearing_game(game: FallingBlocksGame) -> FallingBlocksGame:
    """Game with a vertical I hovering over the single gap of a nearly full bottom row."""
    game.board = almost_full_bottom_row()
    game.current_piece = make_piece(TetrominoType.I, x=3, y=0, rotations=1)
    return game
