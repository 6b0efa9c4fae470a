from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, Optional, Sequence

import numpy as np


logger = logging.getLogger(__name__)


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _frozen(rows) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


def rotate(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise.

    An R x C shape becomes C x R with ``out[c][R-1-r] = in[r][c]``.
    """
    rotated = np.ascontiguousarray(np.rot90(shape, 1, axes=(1, 0)))
    rotated.setflags(write=False)
    return rotated


@dataclass(frozen=True, eq=False)
class ShapeDefinition:
    kind: TetrominoType
    shape: Shape
    color: str

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])


SHAPES: Dict[TetrominoType, ShapeDefinition] = {
    TetrominoType.I: ShapeDefinition(
        TetrominoType.I,
        _frozen([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
        "#00f0f0",
    ),
    TetrominoType.O: ShapeDefinition(TetrominoType.O, _frozen([[1, 1], [1, 1]]), "#f0f000"),
    TetrominoType.T: ShapeDefinition(TetrominoType.T, _frozen([[0, 1, 0], [1, 1, 1], [0, 0, 0]]), "#a000f0"),
    TetrominoType.S: ShapeDefinition(TetrominoType.S, _frozen([[0, 1, 1], [1, 1, 0], [0, 0, 0]]), "#00f000"),
    TetrominoType.Z: ShapeDefinition(TetrominoType.Z, _frozen([[1, 1, 0], [0, 1, 1], [0, 0, 0]]), "#f00000"),
    TetrominoType.J: ShapeDefinition(TetrominoType.J, _frozen([[1, 0, 0], [1, 1, 1], [0, 0, 0]]), "#0000f0"),
    TetrominoType.L: ShapeDefinition(TetrominoType.L, _frozen([[0, 0, 1], [1, 1, 1], [0, 0, 0]]), "#f0a000"),
}


@dataclass(frozen=True, eq=False)
class Piece:
    """A falling tetromino: current orientation plus top-left grid offset."""

    kind: TetrominoType
    shape: Shape
    color: str
    x: int = 0
    y: int = 0

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "Piece":
        return replace(self, shape=rotate(self.shape))

    def cells(self):
        """Yield (x, y) grid coordinates of every set cell, including rows above the grid."""
        ys, xs = np.nonzero(self.shape)
        for dy, dx in zip(ys.tolist(), xs.tolist()):
            yield self.x + dx, self.y + dy


class PieceFactory:
    """Spawns pieces centred at the top of a grid of the given width.

    ``rng`` only needs a ``choice(seq)`` method, so tests can pass a scripted
    source instead of ``random.Random``.
    """

    def __init__(self, width: int, rng=None, spawn_y: int = 0) -> None:
        self.width = int(width)
        self.spawn_y = int(spawn_y)
        self.rng = rng if rng is not None else random.Random()

    def seed(self, seed: Optional[int]) -> None:
        self.rng = random.Random(seed)

    def spawn_x(self, definition: ShapeDefinition) -> int:
        return self.width // 2 - definition.width // 2

    def create_piece(self, kinds: Sequence[TetrominoType] = tuple(TetrominoType)) -> Piece:
        kind = TetrominoType(self.rng.choice(list(kinds)))
        definition = SHAPES[kind]
        piece = Piece(
            kind=kind,
            shape=definition.shape,
            color=definition.color,
            x=self.spawn_x(definition),
            y=self.spawn_y,
        )
        logger.debug("Created %s piece at (%d, %d)", kind.name, piece.x, piece.y)
        return piece
