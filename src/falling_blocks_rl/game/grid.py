from __future__ import annotations

from typing import Tuple

import numpy as np

from .pieces import Piece, Shape


EMPTY = 0
FILLED = 1
PIECE_OVERLAY = 2


class GameGrid:
    """Fixed-size occupancy map for the playfield.

    The grid uses 0 for empty cells and 1 for cells of landed pieces. Row 0 is
    the top. Operations that change occupancy return a new ``GameGrid`` and
    leave the receiver untouched, so a grid can be shared between snapshots.
    """

    def __init__(self, width: int, height: int, cells: np.ndarray | None = None) -> None:
        self.width = int(width)
        self.height = int(height)
        if cells is None:
            cells = np.zeros((self.height, self.width), dtype=np.int8)
        else:
            cells = np.array(cells, dtype=np.int8)
            if cells.shape != (self.height, self.width):
                raise ValueError(f"cells shape {cells.shape} does not match {(self.height, self.width)}")
            cells = (cells != EMPTY).astype(np.int8)
        cells.setflags(write=False)
        self.grid = cells

    @classmethod
    def from_array(cls, cells: np.ndarray) -> "GameGrid":
        h, w = np.shape(cells)
        return cls(w, h, cells)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        return bool(self.grid[y, x] != EMPTY)

    def is_valid_position(self, shape: Shape, x: int, y: int) -> bool:
        """Check a shape placed with its top-left corner at (x, y).

        Rows above the grid are allowed; columns outside it and rows below it
        are not, nor is overlap with a filled cell.
        """
        ys, xs = np.nonzero(shape)
        for dy, dx in zip(ys.tolist(), xs.tolist()):
            gx = x + dx
            gy = y + dy
            if gx < 0 or gx >= self.width or gy >= self.height:
                return False
            if gy >= 0 and self.grid[gy, gx] != EMPTY:
                return False
        return True

    def merge(self, piece: Piece) -> "GameGrid":
        # Cells above row 0 are dropped; spawn failure reports the overflow.
        cells = self.grid.copy()
        for x, y in piece.cells():
            if y >= 0:
                cells[y, x] = FILLED
        return GameGrid(self.width, self.height, cells)

    def clear_lines(self) -> Tuple["GameGrid", int]:
        full = np.all(self.grid != EMPTY, axis=1)
        num = int(np.count_nonzero(full))
        if num == 0:
            return self, 0
        kept = self.grid[~full]
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        return GameGrid(self.width, self.height, np.vstack((new_rows, kept))), num

    def overlay(self, piece: Piece | None) -> np.ndarray:
        """Copy of the cells with the falling piece drawn as ``PIECE_OVERLAY``."""
        state = self.grid.copy()
        if piece is not None:
            for x, y in piece.cells():
                if self.is_inside(x, y):
                    state[y, x] = PIECE_OVERLAY
        return state

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != EMPTY, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != EMPTY:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    def __repr__(self) -> str:
        return f"GameGrid(width={self.width}, height={self.height}, filled={self.filled_count()})"
