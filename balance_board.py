
"""Board: stacked cells, placement, solid-row clearing, zone queries"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from balance_config import GameConfig
from balance_piece import Kind, Piece

logger = logging.getLogger(__name__)

Grid = List[List[Optional[Kind]]]


@dataclass
class PlacementReport:
    kind: Kind
    cell_count: int
    cells: List[Tuple[int, int]] = field(default_factory=list)
    touched_above_excess_line: bool = False
    touched_below_overdraft_line: bool = False

    @property
    def balance_delta(self) -> int:
        # 2% per cell, so a 5-cell block moves the balance by 10
        d = self.cell_count * 2
        return d if self.kind is Kind.INFLOW else -d


class Board:
    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.cols = self.config.board_cols
        self.rows = self.config.board_rows
        self.cell = self.config.cell_size
        self.grid: Grid = [[None] * self.cols for _ in range(self.rows)]

    @property
    def overdraft_y(self) -> float:
        return self.config.overdraft_y

    @property
    def excess_y(self) -> float:
        return self.config.excess_y

    @property
    def overdraft_row(self) -> int:
        return self.config.overdraft_row

    def inside(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def cell_at(self, r: int, c: int) -> Optional[Kind]:
        return self.grid[r][c] if self.inside(r, c) else None

    def is_solid(self, r: int) -> bool:
        return all(v is not None for v in self.grid[r])

    def is_empty(self) -> bool:
        return not any(v is not None for row in self.grid for v in row)

    def filled_cells(self) -> List[Tuple[int, int]]:
        return [(r, c) for r, row in enumerate(self.grid) for c, v in enumerate(row) if v is not None]

    def filled_row_count(self) -> int:
        return sum(1 for row in self.grid if any(v is not None for v in row))

    def snapshot(self) -> Tuple[Tuple[Optional[Kind], ...], ...]:
        return tuple(tuple(row) for row in self.grid)

    def is_landed(self, piece: Piece) -> bool:
        return piece.collides(self, 0, self.cell)

    def place(self, piece: Piece, blocks_placed: int = 0) -> PlacementReport:
        """Copy the piece into the grid and report which zone lines it touched.

        ``blocks_placed`` is the count before this piece; cells below the
        overdraft line only count once it reaches the grace period.
        """
        report = PlacementReport(piece.kind, 0)
        for r, c in piece.cells():
            report.cell_count += 1
            if not self.inside(r, c):
                continue
            self.grid[r][c] = piece.kind
            report.cells.append((r, c))
            y = r * self.cell
            if y < self.excess_y:
                report.touched_above_excess_line = True
            if y > self.overdraft_y and blocks_placed >= self.config.grace_period_blocks:
                report.touched_below_overdraft_line = True
        logger.debug("placed %s x%d at %s", piece.kind.value, report.cell_count, report.cells)
        return report

    def clear_solid_rows(self) -> int:
        """Remove solid rows; the rows above each one sink by a single row."""
        solid = [r for r in range(self.rows) if self.is_solid(r)]
        for i, r in enumerate(solid):
            for y in range(r, 0, -1):
                self.grid[y] = self.grid[y - 1]
            self.grid[0] = [None] * self.cols
            for j in range(i + 1, len(solid)):
                if solid[j] < r:
                    solid[j] += 1
        if solid:
            logger.debug("cleared rows %s", solid)
        return len(solid)

    def has_solid_row_above(self, overdraft_row: Optional[int] = None) -> bool:
        limit = self.overdraft_row if overdraft_row is None else overdraft_row
        return any(self.is_solid(r) for r in range(min(limit, self.rows)))

    def top_occupied_row_pixel_y(self) -> Optional[int]:
        for r, row in enumerate(self.grid):
            if any(v is not None for v in row):
                return r * self.cell
        return None
