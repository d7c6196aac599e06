from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from .errors import InvalidConfiguration
from .pieces import Piece


@dataclass
class ClearResult:
    count: int
    rows: List[int] = field(default_factory=list)


class GameGrid:
    """Occupancy grid of locked cells.

    Row 0 is the top of the board. Cells above the board (y < 0) are never
    occupied, which lets a freshly spawned piece poke out of the top.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise InvalidConfiguration(
                f"Board dimensions must be positive, got {width}x{height}"
            )
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.bool_)

    def reset(self) -> None:
        self.grid.fill(False)

    def is_occupied(self, x: int, y: int) -> bool:
        if y < 0:
            return False
        return bool(self.grid[y, x])

    def set_occupied(self, x: int, y: int, occupied: bool = True) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.grid[y, x] = occupied

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y]))

    def can_place(self, piece: Piece, dx: int = 0, dy: int = 0, rotation_delta: int = 0) -> bool:
        for x, y in piece.cells(dx, dy, rotation_delta):
            if x < 0 or x >= self.width or y >= self.height:
                return False
            if self.is_occupied(x, y):
                return False
        return True

    def drop_distance(self, piece: Piece) -> int:
        dy = 0
        while self.can_place(piece, 0, dy + 1, 0):
            dy += 1
        return dy

    def merge(self, piece: Piece) -> None:
        cells = piece.cells()
        above = [(x, y) for x, y in cells if y < 0]
        if above:
            # Callers end the game (lock out) instead of merging such a piece
            raise ValueError(f"Cannot merge {piece.kind.name} with cells above the board: {above}")
        for x, y in cells:
            self.grid[y, x] = True

    def clear_full_lines(self) -> ClearResult:
        full_rows = [y for y in range(self.height) if self.is_row_full(y)]
        if not full_rows:
            return ClearResult(count=0, rows=[])
        num = len(full_rows)
        # Remove full rows and add empty rows at the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.bool_)
        self.grid = np.vstack((new_rows, kept))
        return ClearResult(count=num, rows=full_rows)

    def occupancy(self) -> np.ndarray:
        view = self.grid.view()
        view.setflags(write=False)
        return view

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])
