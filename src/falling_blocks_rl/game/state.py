from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import numpy as np

from .grid import GameGrid
from .pieces import Piece


class Phase(Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of one game session."""

    grid: GameGrid
    current_piece: Optional[Piece] = None
    score: int = 0
    lines_cleared: int = 0
    level: int = 1
    game_over: bool = False
    paused: bool = False

    @property
    def phase(self) -> Phase:
        if self.game_over:
            return Phase.GAME_OVER
        if self.paused:
            return Phase.PAUSED
        return Phase.ACTIVE

    @property
    def active(self) -> bool:
        return self.phase is Phase.ACTIVE

    def evolve(self, **changes) -> "GameState":
        return replace(self, **changes)

    def render_grid(self) -> np.ndarray:
        return self.grid.overlay(self.current_piece)
