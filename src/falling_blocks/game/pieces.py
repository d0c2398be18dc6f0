from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray
RGB = Tuple[int, int, int]

EMPTY_COLOR: RGB = (26, 26, 26)


def _hex_to_rgb(value: str) -> RGB:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


@dataclass(frozen=True)
class PieceKind:
    """Canonical shape and display color of one tetromino."""

    kind: TetrominoType
    shape: Shape = field(compare=False)
    color: str

    @property
    def rgb(self) -> RGB:
        return _hex_to_rgb(self.color)

    @property
    def value(self) -> int:
        # Value written into the board when this kind locks
        return int(self.kind)


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


PIECE_KINDS: Dict[TetrominoType, PieceKind] = {
    TetrominoType.I: PieceKind(TetrominoType.I, _shape([[1, 1, 1, 1]]), "#00f0f0"),
    TetrominoType.O: PieceKind(TetrominoType.O, _shape([[1, 1], [1, 1]]), "#f0f000"),
    TetrominoType.T: PieceKind(TetrominoType.T, _shape([[0, 1, 0], [1, 1, 1]]), "#a000f0"),
    TetrominoType.S: PieceKind(TetrominoType.S, _shape([[0, 1, 1], [1, 1, 0]]), "#00f000"),
    TetrominoType.Z: PieceKind(TetrominoType.Z, _shape([[1, 1, 0], [0, 1, 1]]), "#f00000"),
    TetrominoType.J: PieceKind(TetrominoType.J, _shape([[1, 0, 0], [1, 1, 1]]), "#0000f0"),
    TetrominoType.L: PieceKind(TetrominoType.L, _shape([[0, 0, 1], [1, 1, 1]]), "#f0a000"),
}


def all_kinds() -> List[PieceKind]:
    return list(PIECE_KINDS.values())


def random_kind(rng: random.Random) -> PieceKind:
    """Uniform draw over the seven kinds. Repeats are allowed."""
    return PIECE_KINDS[rng.choice(list(TetrominoType))]


def color_of(value: int) -> RGB:
    """Map a board cell value (or a negated overlay value) to its RGB color."""
    if value == 0:
        return EMPTY_COLOR
    return PIECE_KINDS[TetrominoType(abs(int(value)))].rgb


@dataclass(eq=False)
class ActivePiece:
    kind: PieceKind
    shape: Shape
    x: int
    y: int

    @property
    def color(self) -> str:
        return self.kind.color

    @property
    def value(self) -> int:
        return self.kind.value

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape, self.x + dx, self.y + dy)

    def with_shape(self, shape: Shape, dx: int = 0, dy: int = 0) -> "ActivePiece":
        return ActivePiece(self.kind, shape, self.x + dx, self.y + dy)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self, offset: Tuple[int, int] = (0, 0)) -> List[Tuple[int, int]]:
        return self.cells_at(self.x + offset[0], self.y + offset[1])
