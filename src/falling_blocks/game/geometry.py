from __future__ import annotations

from typing import Tuple

import numpy as np

from .pieces import Shape


def rotate_clockwise(matrix: Shape) -> Shape:
    """Rotate a piece matrix 90 degrees clockwise.

    Equivalent to transposing and then reversing each row, so an ``r x c``
    matrix becomes ``c x r``.
    """
    arr = np.asarray(matrix)
    if arr.ndim != 2:
        raise ValueError(f"expected a 2D matrix, got shape {arr.shape}")
    return np.ascontiguousarray(np.rot90(arr, 1, axes=(1, 0)))


def spawn_position(matrix: Shape, board_width: int) -> Tuple[int, int]:
    """Top-row anchor that centers ``matrix`` horizontally."""
    cols = np.asarray(matrix).shape[1]
    return board_width // 2 - cols // 2, 0
