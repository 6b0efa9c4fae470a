"""Game module for Falling Blocks RL.

Exports the core game engine and supporting classes:
- GameGrid: Grid occupancy, collision checks, merging and line clearing
- Piece, PieceFactory: Tetromino pieces, spawning and rotation
- TetrominoType, SHAPES: The seven shape definitions
- ScoringRules: Line-clear scoring and level progression
- GameClock: Level-paced descent timer driven by the caller
- GameState: Immutable per-trigger snapshot
- TetrisEngine: Owner of the live state and clock
"""

from .grid import GameGrid
from .pieces import Piece, PieceFactory, ShapeDefinition, SHAPES, TetrominoType, rotate
from .rules import ScoringRules
from .clock import GameClock, descent_period_ms
from .state import GameState, Phase
from .core import Action, GameConfig, TetrisEngine

__all__ = [
    "GameGrid",
    "Piece",
    "PieceFactory",
    "ShapeDefinition",
    "SHAPES",
    "TetrominoType",
    "rotate",
    "ScoringRules",
    "GameClock",
    "descent_period_ms",
    "GameState",
    "Phase",
    "Action",
    "GameConfig",
    "TetrisEngine",
]
