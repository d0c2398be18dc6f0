"""Game module for Falling Blocks.

Exports the rule engine and supporting classes:
- Board: Grid representation, collision and line clearing
- ActivePiece / PieceKind: Tetromino catalog and the falling piece
- TetrominoType: Enum of available piece types
- ScoringRules: Score, level and fall speed configuration
- FallingBlocksGame: State machine driving spawn, move, rotate, lock and clear
- GameClock: Gravity and line-clear timing driver
"""

from .grid import Board, ClearResult, clear_full_rows, collides, drop_distance, merge
from .geometry import rotate_clockwise, spawn_position
from .pieces import PIECE_KINDS, ActivePiece, PieceKind, TetrominoType, all_kinds, color_of, random_kind
from .rules import ScoringRules
from .core import Action, Direction, FallingBlocksGame, GameConfig, GameSnapshot, GameState
from .timing import GameClock

__all__ = [
    "Board",
    "ClearResult",
    "clear_full_rows",
    "collides",
    "drop_distance",
    "merge",
    "rotate_clockwise",
    "spawn_position",
    "PIECE_KINDS",
    "ActivePiece",
    "PieceKind",
    "TetrominoType",
    "all_kinds",
    "color_of",
    "random_kind",
    "ScoringRules",
    "Action",
    "Direction",
    "FallingBlocksGame",
    "GameConfig",
    "GameSnapshot",
    "GameState",
    "GameClock",
]
