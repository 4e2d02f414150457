from __future__ import annotations

import pytest

from falling_blocks.game import (
    Cell,
    GameConfig,
    GameLoop,
    GameOver,
    GamePhase,
    HardDrop,
    MoveHorizontal,
    NextQueueChanged,
    PieceKind,
    PieceLocked,
    PieceMoved,
    PieceSpawned,
    RotateClockwise,
    RowsCleared,
    ScoreChanged,
    SetSoftDrop,
)


def make_game(*kinds: PieceKind, **kwargs) -> GameLoop:
    game = GameLoop(GameConfig(piece_kinds=kinds or tuple(PieceKind), random_seed=0, **kwargs))
    game.drain_events()
    return game


def lowest_row(game: GameLoop) -> int:
    return min(c.row for c in game.piece.cells)


def test_new_game_announces_score_queue_and_piece() -> None:
    game = GameLoop(GameConfig(random_seed=1))
    events = game.drain_events()
    assert [type(e) for e in events] == [ScoreChanged, NextQueueChanged, PieceSpawned]
    assert events[0] == ScoreChanged(0, 1)
    assert len(events[1].kinds) == 3
    assert events[2].cells == game.piece.cells
    assert game.phase is GamePhase.FALLING


def test_gravity_moves_one_row_after_the_period() -> None:
    game = make_game(PieceKind.O)
    assert lowest_row(game) == 20
    assert game.tick(1.0) == []
    events = game.tick(0.01)
    assert [type(e) for e in events] == [PieceMoved]
    assert lowest_row(game) == 19


def test_horizontal_moves_are_rate_limited() -> None:
    game = make_game(PieceKind.O)
    game.submit(MoveHorizontal(-1))
    game.tick(0)
    assert game.piece.pivot_block.col == 3
    game.tick(0.06)
    assert game.piece.pivot_block.col == 3
    game.tick(0.06)
    assert game.piece.pivot_block.col == 2

    game.submit(MoveHorizontal(0))
    game.tick(0.2)
    assert game.piece.pivot_block.col == 2


def test_move_into_wall_is_ignored() -> None:
    game = make_game(PieceKind.O)
    game.submit(MoveHorizontal(1))
    for _ in range(10):
        game.tick(0.1)
    assert max(c.col for c in game.piece.cells) == 9


def test_hard_drop_scores_two_per_row() -> None:
    game = make_game(PieceKind.I)
    game.submit(HardDrop())
    events = game.tick(0)
    assert ScoreChanged(40, 1) in events
    assert isinstance(events[0], PieceMoved)
    locked = [e for e in events if isinstance(e, PieceLocked)]
    assert len(locked) == 1 and {c.row for c in locked[0].cells} == {0}
    assert game.score_state.score == 40
    assert game.phase is GamePhase.FALLING


def test_completed_row_is_cleared_and_scored() -> None:
    game = make_game(PieceKind.I, spawn_column=7)
    game.board.add([Cell(c, 0) for c in range(6)], PieceKind.O)
    game.submit(HardDrop())
    events = game.tick(0)

    cleared = [e for e in events if isinstance(e, RowsCleared)]
    assert cleared == [RowsCleared((0,))]
    assert game.score_state.score == 40 + 100
    assert game.score_state.lines_this_level == 1
    assert len(game.board) == 0
    assert game.last_clear.rows == [0]


@pytest.mark.parametrize("full, expected", [(False, 200), (True, 800)])
def test_t_spin_single(full: bool, expected: int) -> None:
    game = make_game(PieceKind.T, spawn_row=1)
    # Row 0 has a single hole under the T; (3,2) hangs over its left side
    blocks = [Cell(3, 2), Cell(3, 0), Cell(5, 0)] + [Cell(c, 0) for c in (0, 1, 2, 6, 7, 8, 9)]
    if full:
        blocks.append(Cell(5, 2))
    game.board.add(blocks, PieceKind.O)

    game.submit(RotateClockwise())
    game.tick(0)
    assert game.spin.recently_rotated
    assert (game.spin.t_spin, game.spin.mini_t_spin) == (full, not full)

    game.submit(HardDrop())
    events = game.tick(0)
    locked = next(e for e in events if isinstance(e, PieceLocked))
    assert (locked.t_spin, locked.mini_t_spin) == (full, not full)
    assert [e for e in events if isinstance(e, RowsCleared)] == [RowsCleared((0,))]
    assert game.score_state.score == expected
    assert game.score_state.prior_move_difficult


def test_translation_clears_spin_flags() -> None:
    game = make_game(PieceKind.T)
    game.spin.t_spin = True
    game.spin.recently_rotated = True
    game.submit(MoveHorizontal(1))
    game.tick(0)
    assert not game.spin.t_spin
    assert not game.spin.recently_rotated


def test_lock_delay_then_block_out() -> None:
    game = make_game(PieceKind.O, spawn_row=0)
    game.tick(1.01)
    assert game.phase is GamePhase.LOCK_PENDING
    assert game.tick(0.3) == []
    assert game.phase is GamePhase.LOCK_PENDING

    events = game.tick(0.3)
    assert [type(e) for e in events] == [PieceLocked, NextQueueChanged, GameOver]
    assert game.game_over
    assert len(game.board) == 4


def test_soft_drop_scores_and_locks_on_landing() -> None:
    game = make_game(PieceKind.O)
    game.submit(SetSoftDrop(True))
    for _ in range(25):
        game.tick(0.02)
    assert game.score_state.score == 20
    assert len(game.board) == 4
    assert not game.soft_drop
    assert lowest_row(game) == 20
    assert game.gravity_period == pytest.approx(1.0)


def test_commands_ignored_after_game_over_until_reset() -> None:
    game = make_game(PieceKind.O, spawn_row=0)
    game.submit(HardDrop())
    game.tick(0)
    assert game.game_over

    game.submit(MoveHorizontal(1))
    game.submit(HardDrop())
    assert game.tick(0.5) == []
    assert game.game_over

    game.reset()
    events = game.drain_events()
    assert events[0] == ScoreChanged(0, 1)
    assert game.phase is GamePhase.FALLING
    assert len(game.board) == 0


def test_lock_out_above_overflow_height() -> None:
    game = make_game(PieceKind.O, spawn_row=1, overflow_height=1)
    game.board.add([Cell(4, 0), Cell(5, 0)], PieceKind.I)
    game.submit(HardDrop())
    events = game.tick(0)
    assert events == [GameOver()]
    assert game.game_over
    assert len(game.board) == 2


def test_unknown_command_raises() -> None:
    game = make_game()
    with pytest.raises(TypeError):
        game.submit("left")


def test_ghost_lands_on_the_floor() -> None:
    game = make_game(PieceKind.O)
    assert sorted(game.ghost_cells()) == [Cell(4, 0), Cell(4, 1), Cell(5, 0), Cell(5, 1)]


def test_snapshot_overlays_the_active_piece() -> None:
    game = make_game(PieceKind.O, spawn_row=18)
    state = game.snapshot()
    assert state.shape == (20, 10)
    assert (state[0:2, 4:6] == -int(PieceKind.O)).all()
    assert int((state != 0).sum()) == 4


def test_reset_with_seed_repeats_the_sequence() -> None:
    game = make_game()
    game.reset(seed=5)
    first = (game.piece.kind, game.next_kinds)
    game.reset(seed=5)
    assert (game.piece.kind, game.next_kinds) == first


def test_piece_moved_off_a_ledge_falls_again() -> None:
    game = make_game(PieceKind.O, spawn_row=1)
    game.board.add([Cell(3, 0), Cell(4, 0)], PieceKind.I)
    game.tick(1.01)
    assert game.phase is GamePhase.LOCK_PENDING

    game.submit(MoveHorizontal(1))
    events = game.tick(0)
    assert [type(e) for e in events] == [PieceMoved]
    assert game.phase is GamePhase.FALLING

    game.submit(MoveHorizontal(0))
    game.tick(1.01)
    assert lowest_row(game) == 0
    assert len(game.board) == 2


def test_blocked_rotation_changes_nothing() -> None:
    game = make_game(PieceKind.L, spawn_row=5)
    piece = game.piece
    game.board.add(
        [Cell(c, r) for c in range(10) for r in range(30) if Cell(c, r) not in piece.cells],
        PieceKind.Z,
    )
    game.spin.t_spin = True
    game.spin.used_large_kick = True

    game.submit(RotateClockwise())
    assert game.tick(0) == []
    assert game.piece == piece
    assert game.piece.rotation is piece.rotation
    assert not game.spin.t_spin
    assert not game.spin.used_large_kick


def test_spin_flags_need_a_preceding_rotation() -> None:
    game = make_game(PieceKind.T, spawn_row=0)
    game.spin.t_spin = True
    game.submit(HardDrop())
    events = game.tick(0)
    locked = next(e for e in events if isinstance(e, PieceLocked))
    assert not locked.t_spin
    assert game.score_state.score == 0
    assert not game.score_state.prior_move_difficult
