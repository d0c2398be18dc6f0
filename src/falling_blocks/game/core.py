from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

import numpy as np

from .geometry import rotate_clockwise, spawn_position
from .grid import Board, ClearResult, clear_full_rows, collides, drop_distance, merge
from .pieces import ActivePiece, PieceKind, random_kind
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5
    PAUSE = 6
    RESET = 7


class Direction(Enum):
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    DOWN = (0, 1)

    @property
    def offset(self) -> Tuple[int, int]:
        return self.value


class GameState(Enum):
    ACTIVE = "active"
    CLEARING = "clearing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


# Tried in order after a rotation that collides in place
WALL_KICKS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (2, 0), (-2, 0))


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    clear_delay_ms: int = 300


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Everything a renderer or driver needs after a command."""

    board: np.ndarray
    active_piece: Optional[ActivePiece]
    next_piece: Optional[PieceKind]
    score: int
    level: int
    speed_ms: int
    state: GameState
    clearing_rows: Tuple[int, ...]
    lines_cleared_total: int

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.state is GameState.PAUSED


class FallingBlocksGame:
    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height)
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.state = GameState.ACTIVE
        self.current_piece: Optional[ActivePiece] = None
        self.next_kind: Optional[PieceKind] = None
        self.clearing_rows: List[int] = []
        self._pending_clear: Optional[ClearResult] = None
        self.spawn_count = 0
        self.reset()

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.state is GameState.PAUSED

    @property
    def speed(self) -> int:
        return self.rules.speed_for_level(self.level)

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        if seed is not None:
            self.rng.seed(seed)
        self.board = Board(self.config.width, self.config.height)
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.state = GameState.ACTIVE
        self.clearing_rows = []
        self._pending_clear = None
        self.current_piece = None
        self.next_kind = random_kind(self.rng)
        self._spawn_piece()
        return self.snapshot()

    def _spawn_piece(self) -> None:
        kind = self.next_kind or random_kind(self.rng)
        x, y = spawn_position(kind.shape, self.board.width)
        piece = ActivePiece(kind=kind, shape=kind.shape, x=x, y=y)
        self.next_kind = random_kind(self.rng)
        # Immediate collision check: if overlaps, game over
        if collides(piece, self.board):
            self.current_piece = None
            self.state = GameState.GAME_OVER
            logger.info("game over: score=%d level=%d lines=%d", self.score, self.level, self.lines_cleared_total)
            return
        self.current_piece = piece
        self.state = GameState.ACTIVE
        self.spawn_count += 1
        logger.debug("spawned %s at (%d, %d)", kind.kind.name, x, y)

    def _controllable_piece(self) -> Optional[ActivePiece]:
        if self.state is not GameState.ACTIVE:
            return None
        return self.current_piece

    def move(self, direction: Direction) -> GameSnapshot:
        piece = self._controllable_piece()
        if piece is None:
            return self.snapshot()
        dx, dy = direction.offset
        if not collides(piece, self.board, (dx, dy)):
            self.current_piece = piece.moved(dx, dy)
        elif direction is Direction.DOWN:
            self._lock_piece(piece)
        return self.snapshot()

    def move_left(self) -> GameSnapshot:
        return self.move(Direction.LEFT)

    def move_right(self) -> GameSnapshot:
        return self.move(Direction.RIGHT)

    def soft_drop(self) -> GameSnapshot:
        return self.move(Direction.DOWN)

    def rotate(self) -> GameSnapshot:
        piece = self._controllable_piece()
        if piece is None:
            return self.snapshot()
        rotated = piece.with_shape(rotate_clockwise(piece.shape))
        if not collides(rotated, self.board):
            self.current_piece = rotated
            return self.snapshot()
        for dx, dy in WALL_KICKS:
            if not collides(rotated, self.board, (dx, dy)):
                self.current_piece = rotated.moved(dx, dy)
                break
        return self.snapshot()

    def hard_drop(self) -> GameSnapshot:
        piece = self._controllable_piece()
        if piece is None:
            return self.snapshot()
        self._lock_piece(piece.moved(0, drop_distance(piece, self.board)))
        return self.snapshot()

    def toggle_pause(self) -> GameSnapshot:
        if self.state is GameState.ACTIVE:
            self.state = GameState.PAUSED
        elif self.state is GameState.PAUSED:
            self.state = GameState.ACTIVE
        return self.snapshot()

    def _lock_piece(self, piece: ActivePiece) -> None:
        merged = merge(piece, self.board)
        result = clear_full_rows(merged)
        self.current_piece = None
        self.board = merged
        if result.cleared_count == 0:
            self._spawn_piece()
            return
        logger.debug("rows %s full", result.cleared_rows)
        self.clearing_rows = list(result.cleared_rows)
        self._pending_clear = result
        self.state = GameState.CLEARING
        if self.config.clear_delay_ms <= 0:
            self.finish_clearing()

    def finish_clearing(self) -> GameSnapshot:
        """Commit a pending line clear: board, score and level in one step, then spawn."""
        if self.state is not GameState.CLEARING or self._pending_clear is None:
            return self.snapshot()
        result = self._pending_clear
        self._pending_clear = None
        self.score += self.rules.score_for_lines(result.cleared_count)
        level = self.rules.level_for_score(self.score)
        if level != self.level:
            logger.info("level up: %d -> %d", self.level, level)
        self.level = level
        self.lines_cleared_total += result.cleared_count
        self.board = result.board
        self.clearing_rows = []
        self._spawn_piece()
        return self.snapshot()

    def ghost_position(self) -> Optional[Tuple[int, int]]:
        if self.current_piece is None:
            return None
        d = drop_distance(self.current_piece, self.board)
        return self.current_piece.x, self.current_piece.y + d

    def step(self, action: Action) -> GameSnapshot:
        action = Action(action)
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.HARD_DROP:
            return self.hard_drop()
        if action == Action.PAUSE:
            return self.toggle_pause()
        if action == Action.RESET:
            return self.reset()
        return self.snapshot()

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=self.board.clone_state(),
            active_piece=self.current_piece,
            next_piece=self.next_kind,
            score=self.score,
            level=self.level,
            speed_ms=self.speed,
            state=self.state,
            clearing_rows=tuple(self.clearing_rows),
            lines_cleared_total=self.lines_cleared_total,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.board.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if self.board.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.value
        return state
