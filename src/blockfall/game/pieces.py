from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np

from .errors import InvalidConfiguration


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Mask = np.ndarray
Coordinate = Tuple[int, int]

MASK_SIZE = 4


BASE_LAYOUTS = {
    TetrominoType.I: ("0000", "1111", "0000", "0000"),
    TetrominoType.O: ("0000", "0110", "0110", "0000"),
    TetrominoType.T: ("0000", "0100", "1110", "0000"),
    TetrominoType.S: ("0000", "0110", "1100", "0000"),
    TetrominoType.Z: ("0000", "1100", "0110", "0000"),
    TetrominoType.J: ("0000", "1000", "1110", "0000"),
    TetrominoType.L: ("0000", "0010", "1110", "0000"),
}


def layout_to_mask(layout: Tuple[str, ...]) -> Mask:
    return np.array([[ch == "1" for ch in row] for row in layout], dtype=np.bool_)


def rotate_cw(mask: Mask) -> Mask:
    # rotated[col, 3 - row] = mask[row, col]
    return np.rot90(mask, 1, axes=(1, 0))


def _build_rotations(layout: Tuple[str, ...]) -> Tuple[Mask, ...]:
    masks = [layout_to_mask(layout)]
    for _ in range(3):
        masks.append(rotate_cw(masks[-1]))
    frozen = []
    for m in masks:
        m = np.ascontiguousarray(m)
        m.setflags(write=False)
        frozen.append(m)
    return tuple(frozen)


ROTATIONS: Dict[TetrominoType, Tuple[Mask, ...]] = {
    kind: _build_rotations(layout) for kind, layout in BASE_LAYOUTS.items()
}


def shape_kind(kind) -> TetrominoType:
    try:
        return TetrominoType(kind)
    except ValueError:
        pass
    if isinstance(kind, str) and kind.upper() in TetrominoType.__members__:
        return TetrominoType[kind.upper()]
    raise InvalidConfiguration(f"Unknown tetromino type: {kind!r}")


def random_kind(rng: random.Random) -> TetrominoType:
    """Uniform pick among the seven kinds; no bag, every draw independent."""
    return rng.choice(list(TetrominoType))


@dataclass
class Piece:
    """Active tetromino: kind, rotation index and top-left of its 4x4 box.

    Position and rotation are only changed by the game after the board has
    validated the transform with ``GameGrid.can_place``.
    """

    kind: TetrominoType
    rotation: int = 0  # 0..3
    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        self.kind = shape_kind(self.kind)
        self.rotation = int(self.rotation) % 4

    def mask(self, rotation_delta: int = 0) -> Mask:
        return ROTATIONS[self.kind][(self.rotation + rotation_delta) % 4]

    def cells(self, dx: int = 0, dy: int = 0, rotation_delta: int = 0) -> List[Coordinate]:
        m = self.mask(rotation_delta)
        origin_x = self.x + dx
        origin_y = self.y + dy
        cells: List[Coordinate] = []
        for row in range(MASK_SIZE):
            for col in range(MASK_SIZE):
                if m[row, col]:
                    cells.append((origin_x + col, origin_y + row))
        return cells

    def translate(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy

    def rotate(self, delta: int) -> None:
        self.rotation = (self.rotation + delta) % 4
