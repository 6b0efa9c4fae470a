from __future__ import annotations

import itertools

import numpy as np
import pytest

from falling_blocks_rl.game import GameConfig, PieceFactory, ScoringRules, TetrominoType


class ScriptedRandom:
    """Stands in for random.Random: hands out a fixed cycle of piece kinds."""

    def __init__(self, *kinds: TetrominoType) -> None:
        self._kinds = itertools.cycle(kinds)

    def choice(self, seq):
        kind = next(self._kinds)
        assert kind in seq
        return kind


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def rules() -> ScoringRules:
    return ScoringRules()


@pytest.fixture
def o_factory(config) -> PieceFactory:
    return PieceFactory(config.width, rng=ScriptedRandom(TetrominoType.O))


def grid_with_rows(height: int, width: int, rows: dict) -> np.ndarray:
    """Build a raw cell array where ``rows`` maps row index to filled column indices."""
    cells = np.zeros((height, width), dtype=np.int8)
    for y, cols in rows.items():
        for x in cols:
            cells[y, x] = 1
    return cells
