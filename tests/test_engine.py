import numpy as np
import pytest

from falling_blocks_rl.game import (
    SHAPES,
    Action,
    GameConfig,
    GameGrid,
    GameState,
    Phase,
    Piece,
    TetrisEngine,
    TetrominoType,
)
from falling_blocks_rl.game import core

from conftest import ScriptedRandom, grid_with_rows


def _piece(kind, x, y):
    definition = SHAPES[kind]
    return Piece(kind, definition.shape, definition.color, x, y)


def _engine(*kinds):
    return TetrisEngine(GameConfig(), rng=ScriptedRandom(*(kinds or (TetrominoType.O,))))


def test_new_game_state():
    engine = _engine()
    state = engine.new_game()
    assert state.phase is Phase.ACTIVE
    assert (state.score, state.lines_cleared, state.level) == (0, 0, 1)
    assert state.grid.filled_count() == 0
    assert (state.current_piece.x, state.current_piece.y) == (4, 0)
    assert engine.period_ms == 1000


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(width=2)


def test_move_left_stops_at_wall():
    engine = _engine()
    for expected_x in (3, 2, 1, 0):
        assert engine.apply_action(Action.MOVE_LEFT).current_piece.x == expected_x
    before = engine.get_state()
    after = engine.apply_action(Action.MOVE_LEFT)
    assert after is before
    assert after.current_piece.x == 0


def test_move_right_stops_at_wall():
    engine = _engine()
    for _ in range(10):
        engine.apply_action(Action.MOVE_RIGHT)
    assert engine.get_state().current_piece.x == 8


def test_move_blocked_by_filled_cell():
    grid = GameGrid.from_array(grid_with_rows(20, 10, {1: [3]}))
    state = GameState(grid=grid, current_piece=_piece(TetrominoType.O, 4, 0))
    assert core.move(state, -1) is state
    assert core.move(state, 1).current_piece.x == 5


def test_rotation_commits_when_valid():
    engine = _engine(TetrominoType.T)
    state = engine.apply_action(Action.ROTATE)
    assert np.array_equal(state.current_piece.shape, [[0, 1, 0], [0, 1, 1], [0, 1, 0]])
    assert (state.current_piece.x, state.current_piece.y) == (4, 0)


def test_rotation_into_filled_cell_is_rejected():
    grid = GameGrid.from_array(grid_with_rows(20, 10, {3: [5]}))
    state = GameState(grid=grid, current_piece=_piece(TetrominoType.I, 3, 0))
    assert core.rotate(state) is state


def test_rotation_has_no_wall_kick():
    vertical = _piece(TetrominoType.I, 0, 0).rotated().moved(-2, 0)
    state = GameState(grid=GameGrid(10, 20), current_piece=vertical)
    assert sorted(x for x, _ in vertical.cells()) == [0, 0, 0, 0]
    rotated = core.rotate(state)
    assert rotated is state
    assert rotated.current_piece.x == -2


def test_ticks_until_landing_then_spawn():
    engine = _engine()
    positions = [engine.get_state().current_piece.y]
    for _ in range(40):
        state = engine.tick()
        if state.current_piece.y < positions[-1]:
            break
        positions.append(state.current_piece.y)
    assert positions == list(range(0, 19))
    state = engine.get_state()
    assert state.grid.filled_count() == 4
    assert all(state.grid.is_filled(x, y) for x in (4, 5) for y in (18, 19))
    assert (state.current_piece.x, state.current_piece.y) == (4, 0)


def test_landing_clears_lines_and_scores(o_factory, rules):
    rows = {18: [0, 1, 2, 3, 6, 7, 8, 9], 19: [0, 1, 2, 3, 6, 7, 8, 9], 17: [0]}
    grid = GameGrid.from_array(grid_with_rows(20, 10, rows))
    state = GameState(grid=grid, current_piece=_piece(TetrominoType.O, 4, 17))

    state = core.soft_drop(state, o_factory, rules)
    assert state.current_piece.y == 18
    state = core.soft_drop(state, o_factory, rules)

    assert (state.score, state.lines_cleared, state.level) == (200, 2, 1)
    assert state.grid.filled_count() == 1
    assert state.grid.is_filled(0, 19)
    assert not state.grid.grid[:19].any()
    assert state.current_piece.y == 0


def test_score_uses_level_before_clear(o_factory, rules):
    rows = {19: [0, 1, 2, 3, 6, 7, 8, 9]}
    grid = GameGrid.from_array(grid_with_rows(20, 10, rows))
    state = GameState(grid=grid, current_piece=_piece(TetrominoType.O, 4, 18),
                      score=1000, lines_cleared=29, level=3)

    state = core.soft_drop(state, o_factory, rules)

    assert state.score == 1000 + 1 * 100 * 3
    assert state.lines_cleared == 30
    assert state.level == 4


def test_level_up_speeds_up_clock():
    engine = _engine()
    rows = {19: [0, 1, 2, 3, 6, 7, 8, 9]}
    engine.state = GameState(
        grid=GameGrid.from_array(grid_with_rows(20, 10, rows)),
        current_piece=_piece(TetrominoType.O, 4, 18),
        lines_cleared=9,
    )
    state = engine.tick()
    assert state.level == 2
    assert engine.period_ms == 900


def test_spawn_failure_ends_the_game():
    engine = _engine()
    engine.state = GameState(
        grid=GameGrid.from_array(grid_with_rows(20, 10, {1: [3, 4, 5, 6]})),
        current_piece=_piece(TetrominoType.O, 0, 18),
    )
    state = engine.tick()
    assert state.game_over
    assert state.phase is Phase.GAME_OVER
    assert state.current_piece is None
    assert state.grid.is_filled(0, 19)
    assert not engine.clock.running

    for action in (Action.MOVE_LEFT, Action.ROTATE, Action.SOFT_DROP, Action.TOGGLE_PAUSE):
        assert engine.apply_action(action) is state
    assert engine.tick() is state

    fresh = engine.new_game()
    assert fresh.active and fresh.grid.filled_count() == 0
    assert engine.clock.running


def test_pause_suspends_descent():
    engine = _engine()
    engine.tick()
    paused = engine.apply_action(Action.TOGGLE_PAUSE)
    assert paused.phase is Phase.PAUSED
    assert not engine.clock.running

    assert engine.tick() is paused
    assert engine.update(5000) is paused
    for action in (Action.MOVE_LEFT, Action.MOVE_RIGHT, Action.ROTATE, Action.SOFT_DROP):
        assert engine.apply_action(action) is paused

    resumed = engine.apply_action(Action.TOGGLE_PAUSE)
    assert resumed.active
    assert engine.period_ms == 1000
    assert resumed.current_piece.y == 1


def test_update_runs_due_ticks():
    engine = _engine()
    assert engine.update(999).current_piece.y == 0
    assert engine.update(1).current_piece.y == 1
    assert engine.update(3000).current_piece.y == 4


def test_unknown_action_is_ignored():
    engine = _engine()
    state = engine.get_state()
    assert engine.apply_action(42) is state
    assert engine.apply_action(Action.NONE) is state


def test_reset_from_pause():
    engine = _engine()
    engine.apply_action(Action.TOGGLE_PAUSE)
    state = engine.reset()
    assert state.active and not state.paused
    assert engine.clock.running


def test_render_grid_overlays_current_piece():
    engine = _engine()
    cells = engine.get_state().render_grid()
    assert (cells == 2).sum() == 4
    assert cells[0, 4] == 2 and cells[1, 5] == 2


def test_seeded_games_repeat():
    a = TetrisEngine(GameConfig(random_seed=11))
    b = TetrisEngine(GameConfig(random_seed=11))
    for _ in range(60):
        sa, sb = a.tick(), b.tick()
        assert np.array_equal(sa.render_grid(), sb.render_grid())
        assert sa.score == sb.score
