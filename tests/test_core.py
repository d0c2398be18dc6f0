from __future__ import annotations

import numpy as np
import pytest

from falling_blocks.game import (
    PIECE_KINDS,
    Action,
    Board,
    FallingBlocksGame,
    GameConfig,
    GameState,
    ScoringRules,
    TetrominoType,
)

from conftest import make_piece


def test_new_game_starts_active(game):
    assert game.state is GameState.ACTIVE
    assert game.score == 0
    assert game.level == 1
    assert game.speed == 1000
    assert game.current_piece is not None
    assert game.next_kind is not None
    assert not game.board.grid.any()


def test_o_piece_spawns_centered(game):
    game.next_kind = PIECE_KINDS[TetrominoType.O]
    game._spawn_piece()
    assert game.current_piece.kind.kind is TetrominoType.O
    assert (game.current_piece.x, game.current_piece.y) == (4, 0)
    assert game.next_kind is not None


def test_same_seed_same_pieces():
    a = FallingBlocksGame(GameConfig(random_seed=5))
    b = FallingBlocksGame(GameConfig(random_seed=99))
    b.reset(seed=5)
    kinds_a, kinds_b = [], []
    for g, out in ((a, kinds_a), (b, kinds_b)):
        for _ in range(5):
            out.append(g.current_piece.kind.kind)
            g.hard_drop()
    assert kinds_a == kinds_b


def test_move_left_right_and_down(game):
    game.current_piece = make_piece(TetrominoType.T, x=4, y=0)
    game.move_left()
    assert game.current_piece.x == 3
    game.move_right()
    game.move_right()
    assert game.current_piece.x == 5
    game.soft_drop()
    assert game.current_piece.y == 1


def test_blocked_sideways_move_does_not_lock(game):
    game.current_piece = make_piece(TetrominoType.O, x=0, y=0)
    snap = game.move_left()
    assert snap.active_piece.x == 0
    assert not snap.board.any()
    assert game.state is GameState.ACTIVE


def test_soft_drop_locks_on_floor(game):
    game.current_piece = make_piece(TetrominoType.O, x=0, y=18)
    game.soft_drop()
    np.testing.assert_array_equal(game.board.grid[18:, 0:2], np.full((2, 2), int(TetrominoType.O)))
    assert game.state is GameState.ACTIVE
    assert game.current_piece is not None
    assert (game.current_piece.y) == 0


def test_hard_drop_lands_at_maximal_depth(game):
    game.board.grid[19, 4] = int(TetrominoType.L)
    game.current_piece = make_piece(TetrominoType.O, x=4, y=0)
    game.hard_drop()
    assert game.board.grid[17, 4] == int(TetrominoType.O)
    assert game.board.grid[18, 5] == int(TetrominoType.O)
    assert game.board.grid[19, 5] == 0
    assert game.score == 0


def test_line_clear_goes_through_clearing_state(clearing_game):
    game = clearing_game
    snap = game.hard_drop()
    assert snap.state is GameState.CLEARING
    assert snap.clearing_rows == (19,)
    assert snap.active_piece is None
    assert game.score == 0
    # The merged board is shown while the row flashes
    assert game.board.grid[19].all()

    snap = game.finish_clearing()
    assert snap.state is GameState.ACTIVE
    assert snap.score == 100
    assert snap.lines_cleared_total == 1
    assert snap.clearing_rows == ()
    assert game.board.grid.shape == (20, 10)
    assert not game.board.grid[0].any()
    np.testing.assert_array_equal(game.board.grid[17:, 3], [1, 1, 1])
    assert np.count_nonzero(game.board.grid) == 3
    assert game.current_piece is not None


def test_soft_drop_lock_also_clears(clearing_game):
    game = clearing_game
    for _ in range(16):
        game.soft_drop()
    assert game.current_piece.y == 16
    game.soft_drop()
    assert game.state is GameState.CLEARING


@pytest.mark.parametrize(
    "command", ["move_left", "move_right", "soft_drop", "rotate", "hard_drop", "toggle_pause"]
)
def test_clearing_ignores_commands(clearing_game, command):
    game = clearing_game
    game.hard_drop()
    before = game.board.clone_state()
    getattr(game, command)()
    assert game.state is GameState.CLEARING
    assert game.current_piece is None
    np.testing.assert_array_equal(game.board.grid, before)


def test_score_and_level_commit_together(clearing_game):
    game = clearing_game
    game.score = 480
    game.hard_drop()
    game.finish_clearing()
    assert game.score == 580
    assert game.level == 2
    assert game.speed == 950


def test_finish_clearing_without_pending_clear_is_noop(game):
    piece = game.current_piece
    snap = game.finish_clearing()
    assert snap.state is GameState.ACTIVE
    assert game.current_piece is piece


def test_zero_clear_delay_commits_immediately(clearing_game):
    game = clearing_game
    game.config.clear_delay_ms = 0
    snap = game.hard_drop()
    assert snap.state is GameState.ACTIVE
    assert snap.score == 100


def test_rotate_in_place(game):
    game.current_piece = make_piece(TetrominoType.T, x=4, y=5)
    game.rotate()
    np.testing.assert_array_equal(game.current_piece.shape, [[1, 0], [1, 1], [1, 0]])
    assert (game.current_piece.x, game.current_piece.y) == (4, 5)


def test_rotate_at_left_wall_kicks_right(game):
    game.current_piece = make_piece(TetrominoType.T, x=0, y=5)
    # Blocks the in-place rotation, which would need column 0 two rows down
    game.board.grid[7, 0] = int(TetrominoType.Z)
    game.rotate()
    assert game.current_piece.x == 1
    assert game.current_piece.y == 5
    assert game.current_piece.shape.shape == (3, 2)


def test_rotate_at_right_wall_kicks_left(game):
    game.current_piece = make_piece(TetrominoType.T, x=8, y=5, rotations=1)
    game.rotate()
    assert game.current_piece.x == 7
    np.testing.assert_array_equal(game.current_piece.shape, [[1, 1, 1], [0, 1, 0]])


def test_rotate_kicks_two_columns_left(game):
    game.current_piece = make_piece(TetrominoType.I, x=8, y=5, rotations=1)
    game.rotate()
    assert game.current_piece.shape.shape == (1, 4)
    assert (game.current_piece.x, game.current_piece.y) == (6, 5)


def test_rotate_prefers_right_kick_over_left(game):
    game.current_piece = make_piece(TetrominoType.T, x=4, y=5)
    # Both x=5 and x=3 would fit; the right kick is tried first
    game.board.grid[7, 4] = int(TetrominoType.Z)
    game.rotate()
    assert game.current_piece.x == 5
    np.testing.assert_array_equal(game.current_piece.shape, [[1, 0], [1, 1], [1, 0]])


def test_rotate_rejected_when_no_kick_fits(game):
    cells = np.full((20, 10), int(TetrominoType.S), dtype=np.int8)
    cells[:, 4] = 0
    cells[:8, :] = 0
    game.board = Board.from_array(cells)
    game.current_piece = make_piece(TetrominoType.I, x=4, y=12, rotations=1)
    game.rotate()
    assert game.current_piece.shape.shape == (4, 1)
    assert (game.current_piece.x, game.current_piece.y) == (4, 12)


def test_spawn_collision_is_game_over(game):
    game.board.grid[0, 4:6] = int(TetrominoType.S)
    game.board.grid[1, 4:7] = int(TetrominoType.S)
    game.current_piece = make_piece(TetrominoType.O, x=0, y=0)
    snap = game.hard_drop()
    assert snap.game_over
    assert snap.active_piece is None
    # Board keeps the last merged piece
    assert game.board.grid[19, 0] == int(TetrominoType.O)

    before = game.board.clone_state()
    for command in ("move_left", "move_right", "soft_drop", "rotate", "hard_drop", "toggle_pause"):
        getattr(game, command)()
    assert game.state is GameState.GAME_OVER
    np.testing.assert_array_equal(game.board.grid, before)


def test_reset_from_game_over(game):
    game.board.grid[0:2, :9] = 1
    game._spawn_piece()
    assert game.game_over
    snap = game.reset()
    assert snap.state is GameState.ACTIVE
    assert snap.score == 0
    assert snap.level == 1
    assert not snap.board.any()
    assert snap.active_piece is not None


def test_reset_discards_pending_clear(clearing_game):
    game = clearing_game
    game.hard_drop()
    game.reset()
    assert game.state is GameState.ACTIVE
    assert game.clearing_rows == []
    game.finish_clearing()
    assert game.score == 0


def test_pause_toggles_and_blocks_moves(game):
    x = game.current_piece.x
    assert game.toggle_pause().paused
    game.move_left()
    game.hard_drop()
    assert game.current_piece.x == x
    assert not game.board.grid.any()
    assert game.toggle_pause().state is GameState.ACTIVE


def test_step_dispatches_actions(game):
    x = game.current_piece.x
    game.step(Action.LEFT)
    assert game.current_piece.x == x - 1
    assert game.step(Action.PAUSE).paused
    assert game.step(Action.NONE).paused
    assert game.step(Action.RESET).state is GameState.ACTIVE
    with pytest.raises(ValueError):
        game.step(99)


def test_ghost_position_and_overlay(game):
    game.current_piece = make_piece(TetrominoType.O, x=4, y=0)
    assert game.ghost_position() == (4, 18)
    state = game.get_state()
    assert state[0, 4] == -int(TetrominoType.O)
    assert not game.board.grid.any()


def test_speed_floor():
    rules = ScoringRules()
    assert rules.speed_for_level(1) == 1000
    assert rules.speed_for_level(10) == 550
    assert rules.speed_for_level(19) == 100
    assert rules.speed_for_level(40) == 100
    assert rules.level_for_score(0) == 1
    assert rules.level_for_score(499) == 1
    assert rules.level_for_score(500) == 2
