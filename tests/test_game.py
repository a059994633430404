import pytest

from balance_board import PlacementReport
from balance_config import ConfigError, GameConfig
from balance_game import (BALANCE_OUT_OF_RANGE, STACK_TOO_HIGH, TIME_LIMIT_EXCEEDED,
                          BalanceRule, Game, State, ZoneRule)
from balance_piece import SHAPES, Kind, Piece

from conftest import ScriptedRandom, fill_row

FIVE = ((1,1,1),(1,1,0))


def land(game, shape, kind, x):
    """Put a piece resting on the floor and let the next drop place it."""
    game.piece = Piece(shape, kind, x, game.config.board_height - len(shape) * game.config.cell_size)
    game.tick(game.config.normal_drop_ms)


def test_new_game_is_idle(single_inflow):
    game = Game(rng=single_inflow)
    assert game.state is State.IDLE
    assert game.piece is None
    game.tick(1000)
    assert game.elapsed_ms == 0
    assert not game.move(1)
    assert not game.rotate()


def test_single_cell_falls_one_row_per_interval(single_inflow):
    game = Game(rng=single_inflow)
    game.start()
    p = game.piece
    assert (p.shape, p.x, p.y) == (SHAPES[0], 0, 0)
    for step in range(1, 20):
        game.tick(200)
        game.tick(200)
        assert p.y == (step - 1) * 30
        game.tick(100)
        assert p.y == step * 30
    assert game.board.is_landed(p)
    assert game.board.is_empty()
    game.tick(500)
    assert game.board.grid[19][0] is Kind.INFLOW
    assert game.blocks_placed == 1
    assert game.piece is not p and game.piece.y == 0


def test_balance_changes_and_ends_out_of_band(single_inflow):
    game = Game(GameConfig.balance_variant(), rng=single_inflow)
    game.start()
    land(game, FIVE, Kind.OUTFLOW, 0)
    assert game.balance == 40
    assert game.state is State.RUNNING
    land(game, FIVE, Kind.OUTFLOW, 5)
    assert game.balance == 30
    assert game.state is State.ENDED
    assert game.cause == BALANCE_OUT_OF_RANGE


def test_balance_inflow_clamps_at_100(single_inflow):
    game = Game(GameConfig.balance_variant(balance_band=(0, 100), start_balance=95), rng=single_inflow)
    game.start()
    land(game, FIVE, Kind.INFLOW, 0)
    assert game.balance == 100
    assert game.running


def test_balance_outflow_clamps_at_0():
    rule = BalanceRule(GameConfig.balance_variant(balance_band=(0, 100), start_balance=5))
    assert rule.after_place(None, PlacementReport(Kind.OUTFLOW, 5)) is None
    assert rule.balance == 0


def test_balance_variant_keeps_solid_rows(single_inflow):
    game = Game(GameConfig.balance_variant(balance_band=(0, 100)), rng=single_inflow)
    game.start()
    fill_row(game.board, 19, skip=(0,))
    land(game, SHAPES[0], Kind.INFLOW, 0)
    assert game.board.is_solid(19)
    assert game.rows_cleared == 0


def test_spawn_collision_ends_game(single_inflow):
    game = Game(GameConfig.balance_variant(balance_band=(0, 100)), rng=single_inflow)
    game.start()
    fill_row(game.board, 0)
    land(game, SHAPES[0], Kind.INFLOW, 4)
    assert game.state is State.ENDED
    assert game.cause == STACK_TOO_HIGH


def test_ticks_and_input_ignored_after_end(single_inflow):
    game = Game(rng=single_inflow)
    game.start()
    game.end(STACK_TOO_HIGH)
    elapsed, y = game.elapsed_ms, game.piece.y
    game.tick(5000)
    assert game.elapsed_ms == elapsed and game.piece.y == y
    assert not game.move(1)
    assert not game.rotate()
    game.end(TIME_LIMIT_EXCEEDED)
    assert game.cause == STACK_TOO_HIGH


def test_restart_resets_session(single_inflow):
    game = Game(rng=single_inflow)
    game.start()
    land(game, FIVE, Kind.INFLOW, 0)
    game.end(STACK_TOO_HIGH)
    game.start()
    assert game.running and game.cause is None
    assert game.board.is_empty()
    assert game.balance == 50 and game.blocks_placed == 0 and game.elapsed_ms == 0


def test_reset_returns_to_idle(single_inflow):
    game = Game(rng=single_inflow)
    game.start()
    for _ in range(25):
        game.tick(500)
    assert game.blocks_placed == 1
    game.set_soft_drop(True)
    game.reset()
    assert game.state is State.IDLE and game.piece is None
    snap = game.snapshot()
    assert snap.elapsed_ms == 0 and snap.blocks_placed == 0 and snap.rows_cleared == 0
    assert snap.balance == 50 and snap.cause is None
    assert game.drop_timer == 0 and not game.soft_drop
    assert game.board.is_empty()


@pytest.mark.parametrize("grace, expected", [(0, 1), (1000, 0)])
def test_grace_period_gates_overdraft_count(grace, expected, single_inflow):
    game = Game(GameConfig.zone_variant(grace_period_blocks=grace), rng=single_inflow)
    game.start()
    land(game, SHAPES[0], Kind.OUTFLOW, 4)
    snap = game.snapshot()
    assert snap.overdraft_touches == expected
    assert snap.excess_touches == 0


def test_piece_above_excess_line_is_counted(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    game.board.grid[3][6] = Kind.INFLOW
    game.piece = Piece(SHAPES[0], Kind.INFLOW, 6, 60)
    game.tick(500)
    assert game.snapshot().excess_touches == 1


def test_move_and_rotate_forward_to_piece():
    game = Game(rng=ScriptedRandom(picks=(5, 3), coins=(0.7,)))
    game.start()
    assert game.piece.kind is Kind.OUTFLOW
    assert game.move(-1) and game.piece.x == 2
    assert game.rotate() and game.piece.rotation == 1


def test_soft_drop_only_in_zone_variant(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    game.set_soft_drop(True)
    game.tick(50)
    assert game.piece.y == 30
    game.set_soft_drop(False)
    game.tick(50)
    assert game.piece.y == 30

    game = Game(GameConfig.balance_variant(), rng=single_inflow)
    game.start()
    game.set_soft_drop(True)
    game.tick(50)
    assert game.piece.y == 0


def test_zone_variant_clears_rows(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    fill_row(game.board, 19, skip=(0,))
    game.board.grid[18][5] = Kind.OUTFLOW
    land(game, SHAPES[0], Kind.INFLOW, 0)
    assert game.rows_cleared == 1
    assert game.board.filled_cells() == [(19, 5)]


def test_no_warning_without_solid_layer(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    game.piece = None
    fill_row(game.board, 19, skip=(3,))
    for _ in range(50):
        game.tick(1000)
    assert game.rule.deadline is None
    assert not game.snapshot().has_safe_layer
    assert game.running


def test_warning_arms_and_clears_when_back_in_band(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    game.piece = None
    fill_row(game.board, 11)
    game.tick(10)
    assert game.rule.has_safe_layer
    assert game.rule.deadline is None  # top at y=330 is inside the band

    game.board.grid[5][0] = Kind.INFLOW
    game.tick(10)
    assert game.rule.deadline == 20020
    game.tick(19000)
    assert game.running

    game.board.grid[5][0] = None
    game.tick(10)
    assert game.rule.deadline is None
    game.tick(30000)
    assert game.running


def test_warning_expires_into_time_limit(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    game.piece = None
    fill_row(game.board, 11)
    game.board.grid[5][0] = Kind.OUTFLOW
    game.tick(100)
    assert game.snapshot().warning_remaining_ms == 20000
    game.tick(19999)
    assert game.running
    game.tick(1)
    assert game.state is State.ENDED
    assert game.cause == TIME_LIMIT_EXCEEDED


def test_solid_layer_seen_at_placement_survives_clear(zone_config, single_inflow):
    game = Game(zone_config, rng=single_inflow)
    game.start()
    fill_row(game.board, 5, skip=(0,))
    game.board.grid[6][0] = Kind.OUTFLOW
    game.piece = Piece(SHAPES[0], Kind.INFLOW, 0, 150)
    game.tick(500)
    assert game.rows_cleared == 1
    assert not game.board.has_solid_row_above()
    snap = game.snapshot()
    assert snap.has_safe_layer
    assert snap.deadline == 20500


def test_snapshot_exposes_state(single_inflow):
    game = Game(rng=single_inflow)
    game.start()
    snap = game.snapshot()
    assert snap.state is State.RUNNING
    assert snap.piece.cells == ((0, 0),)
    assert snap.piece.kind is Kind.INFLOW
    assert snap.balance == 50
    assert snap.deadline is None and snap.warning_remaining_ms is None
    assert len(snap.grid) == 20 and len(snap.grid[0]) == 10


def test_rule_selected_by_config():
    assert isinstance(Game(GameConfig.balance_variant(), seed=1).rule, BalanceRule)
    assert isinstance(Game(GameConfig.zone_variant(), seed=1).rule, ZoneRule)
    assert Game(GameConfig.zone_variant(), seed=1).balance is None


def test_game_rejects_board_narrower_than_shapes():
    with pytest.raises(ConfigError):
        Game(GameConfig(board_cols=2), seed=1)
