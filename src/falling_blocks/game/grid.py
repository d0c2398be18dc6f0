from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .pieces import ActivePiece


Offset = Tuple[int, int]


@dataclass
class ClearResult:
    board: "Board"
    cleared_count: int
    cleared_rows: List[int]


class Board:
    """Fixed-size grid of locked cells.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are the ``TetrominoType`` of the piece that locked there and
    double as the cell's color identifier. Row 0 is the top of the board.
    """

    def __init__(self, width: int, height: int, cells: Optional[np.ndarray] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        if cells is None:
            self.grid = np.zeros((self.height, self.width), dtype=np.int8)
        else:
            if cells.shape != (self.height, self.width):
                raise ValueError(f"cells shape {cells.shape} does not match {(self.height, self.width)}")
            self.grid = cells.astype(np.int8, copy=True)

    @classmethod
    def from_array(cls, cells: np.ndarray) -> "Board":
        h, w = cells.shape
        return cls(w, h, cells)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_empty(self, x: int, y: int) -> bool:
        return self.grid[y, x] == 0

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != 0, axis=1))[0]]

    def copy(self) -> "Board":
        return Board(self.width, self.height, self.grid)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))


def collides(piece: ActivePiece, board: Board, offset: Offset = (0, 0)) -> bool:
    """True if ``piece`` moved by ``offset`` overlaps a wall, the floor or a locked cell.

    Cells above the top row (y < 0) never collide, which lets tall pieces
    spawn partially off-grid.
    """
    for x, y in piece.cells(offset):
        if x < 0 or x >= board.width or y >= board.height:
            return True
        if y >= 0 and board.grid[y, x] != 0:
            return True
    return False


def drop_distance(piece: ActivePiece, board: Board) -> int:
    d = 0
    while not collides(piece, board, (0, d + 1)):
        d += 1
    return d


def merge(piece: ActivePiece, board: Board) -> Board:
    """Return a copy of ``board`` with ``piece`` written into it.

    Cells outside the board are skipped.
    """
    merged = board.copy()
    for x, y in piece.cells():
        if merged.is_inside(x, y):
            merged.grid[y, x] = piece.value
    return merged


def clear_full_rows(board: Board) -> ClearResult:
    full_rows = board.full_rows()
    if not full_rows:
        return ClearResult(board=board, cleared_count=0, cleared_rows=[])
    num = len(full_rows)
    # Remove full rows and add empty rows at the top
    kept = np.delete(board.grid, full_rows, axis=0)
    new_rows = np.zeros((num, board.width), dtype=np.int8)
    cleared = Board(board.width, board.height, np.vstack((new_rows, kept)))
    return ClearResult(board=cleared, cleared_count=num, cleared_rows=full_rows)
