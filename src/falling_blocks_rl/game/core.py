from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .clock import GameClock, descent_period_ms
from .grid import GameGrid
from .pieces import PieceFactory
from .rules import ScoringRules
from .state import GameState


logger = logging.getLogger(__name__)


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    TOGGLE_PAUSE = 4
    NONE = 5


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"grid must be at least 4x4, got {self.width}x{self.height}")


# Pure transitions. Each takes a snapshot and returns the next one; a rejected
# action returns the same object.


def new_game(config: GameConfig, factory: PieceFactory) -> GameState:
    grid = GameGrid(config.width, config.height)
    return GameState(grid=grid, current_piece=factory.create_piece())


def move(state: GameState, dx: int) -> GameState:
    piece = state.current_piece
    if not state.active or piece is None:
        return state
    if not state.grid.is_valid_position(piece.shape, piece.x + dx, piece.y):
        return state
    return state.evolve(current_piece=piece.moved(dx, 0))


def rotate(state: GameState) -> GameState:
    piece = state.current_piece
    if not state.active or piece is None:
        return state
    candidate = piece.rotated()
    if not state.grid.is_valid_position(candidate.shape, candidate.x, candidate.y):
        return state
    return state.evolve(current_piece=candidate)


def toggle_pause(state: GameState) -> GameState:
    if state.game_over:
        return state
    return state.evolve(paused=not state.paused)


def land(state: GameState, factory: PieceFactory, rules: ScoringRules) -> GameState:
    """Merge the current piece, clear lines, score them and spawn the next piece."""
    piece = state.current_piece
    assert piece is not None
    grid, count = state.grid.merge(piece).clear_lines()
    score = state.score + rules.score_for_lines(count, state.level)
    lines = state.lines_cleared + count
    level = rules.level_for_lines(lines)
    logger.debug("Landed %s at (%d, %d)", piece.kind.name, piece.x, piece.y)
    if count:
        logger.info("Cleared %d line(s) at level %d, score %d", count, state.level, score)
    if level != state.level:
        logger.info("Level up: %d -> %d", state.level, level)

    next_piece = factory.create_piece()
    if not grid.is_valid_position(next_piece.shape, next_piece.x, next_piece.y):
        logger.info("Game over: no room to spawn %s (score %d, lines %d)", next_piece.kind.name, score, lines)
        return state.evolve(
            grid=grid, current_piece=None, score=score, lines_cleared=lines, level=level, game_over=True
        )
    return state.evolve(grid=grid, current_piece=next_piece, score=score, lines_cleared=lines, level=level)


def soft_drop(state: GameState, factory: PieceFactory, rules: ScoringRules) -> GameState:
    piece = state.current_piece
    if not state.active or piece is None:
        return state
    if state.grid.is_valid_position(piece.shape, piece.x, piece.y + 1):
        return state.evolve(current_piece=piece.moved(0, 1))
    return land(state, factory, rules)


def apply_action(state: GameState, action: Action, factory: PieceFactory, rules: ScoringRules) -> GameState:
    if action == Action.MOVE_LEFT:
        return move(state, -1)
    if action == Action.MOVE_RIGHT:
        return move(state, 1)
    if action == Action.ROTATE:
        return rotate(state)
    if action == Action.SOFT_DROP:
        return soft_drop(state, factory, rules)
    if action == Action.TOGGLE_PAUSE:
        return toggle_pause(state)
    return state


class TetrisEngine:
    """Owns the live game state and the descent clock.

    Every public call runs to completion and returns the resulting snapshot.
    The caller drives time through ``update``; the clock runs only while the
    game is active and its period follows the current level.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng=None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        if rng is None:
            rng = random.Random(self.config.random_seed)
        self.factory = PieceFactory(self.config.width, rng=rng, spawn_y=self.config.spawn_y)
        self.clock = GameClock()
        self.state = new_game(self.config, self.factory)
        self._sync_clock()

    def _commit(self, state: GameState) -> GameState:
        self.state = state
        self._sync_clock()
        return state

    def _sync_clock(self) -> None:
        if self.state.active:
            self.clock.start(descent_period_ms(self.state.level))
        else:
            self.clock.stop()

    def new_game(self, seed: Optional[int] = None) -> GameState:
        if seed is not None:
            self.factory.seed(seed)
        self.clock.stop()
        logger.debug("Starting new game")
        return self._commit(new_game(self.config, self.factory))

    reset = new_game

    def tick(self) -> GameState:
        return self._commit(soft_drop(self.state, self.factory, self.rules))

    def apply_action(self, action) -> GameState:
        try:
            action = Action(action)
        except ValueError:
            logger.warning("Ignoring unknown action %r", action)
            return self.state
        return self._commit(apply_action(self.state, action, self.factory, self.rules))

    def update(self, elapsed_ms: float) -> GameState:
        """Advance the clock by ``elapsed_ms`` and run every descent tick that fell due."""
        for _ in range(self.clock.advance(elapsed_ms)):
            if not self.state.active:
                break
            self.tick()
        return self.state

    def get_state(self) -> GameState:
        return self.state

    @property
    def period_ms(self) -> Optional[int]:
        return self.clock.period_ms
