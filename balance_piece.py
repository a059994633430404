
"""Piece model, shape catalog, rotation"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

Shape = Tuple[Tuple[int, ...], ...]

# Smaller than tetrominoes so they fit the narrow well
SHAPES: Tuple[Shape, ...] = (
    ((1,),),
    ((1,0),(1,1)),
    ((0,1),(1,1)),
    ((1,1),(1,0)),
    ((1,1),(0,1)),
    ((1,1,1),(0,1,0)),
    ((1,1),(1,1)),
)


class Kind(str, Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"


def rotate_cw(m: Shape) -> Shape: return tuple(tuple(r) for r in zip(*m[::-1]))

def cell_count(m: Shape) -> int: return sum(v for row in m for v in row)


@dataclass
class Piece:
    shape: Shape
    kind: Kind
    x: int
    y: int = 0          # pixels from the top of the well
    rotation: int = 0
    cell: int = 30

    @property
    def row(self) -> int:
        return self.y // self.cell

    def rotated_shape(self, rotation: Optional[int] = None) -> Shape:
        s = self.shape
        for _ in range((self.rotation if rotation is None else rotation) % 4):
            s = rotate_cw(s)
        return s

    def cells(self, rotation: Optional[int] = None, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        """(row, col) pairs covered by the shape, rows taken as floor(y / cell)."""
        out = []
        for r, line in enumerate(self.rotated_shape(rotation)):
            for c, v in enumerate(line):
                if v:
                    out.append(((self.y + dy + r * self.cell) // self.cell, self.x + dx + c))
        return out

    def collides(self, board, dx: int = 0, dy: int = 0, rotation: Optional[int] = None) -> bool:
        """True if the candidate position leaves the well or overlaps a stacked cell.

        ``dx`` is in columns, ``dy`` in pixels.
        """
        s = self.rotated_shape(rotation)
        nx, ny = self.x + dx, self.y + dy
        if nx < 0 or nx + len(s[0]) > board.cols:
            return True
        if ny + len(s) * self.cell > board.rows * board.cell:
            return True
        for r, c in self.cells(rotation, dx, dy):
            if 0 <= r < board.rows and board.cell_at(r, c) is not None:
                return True
        return False

    def move(self, board, dx: int) -> bool:
        if self.collides(board, dx, 0):
            return False
        self.x += dx
        return True

    def rotate(self, board) -> bool:
        nr = (self.rotation + 1) % 4
        if self.collides(board, 0, 0, nr):
            return False
        self.rotation = nr
        return True

    def drop(self) -> None:
        self.y += self.cell

    @staticmethod
    def spawn(rng, cols: int, cell: int) -> "Piece":
        """Random shape and kind at row 0 in a random column where the shape fits."""
        shape = SHAPES[rng.randrange(len(SHAPES))]
        kind = Kind.INFLOW if rng.random() < 0.5 else Kind.OUTFLOW
        x = rng.randrange(cols - len(shape[0]) + 1)
        return Piece(shape, kind, x, 0, 0, cell)
