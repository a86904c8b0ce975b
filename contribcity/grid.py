import logging
import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from contribcity.errors import InvalidDimensions

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
INT64_MAX = int(np.iinfo(np.int64).max)

Position = Tuple[int, int]


class Direction(IntEnum):
    """Cardinal directions; the value doubles as a clockwise quarter-turn count."""
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]

    @property
    def opposite(self) -> "Direction":
        return Direction((self + 2) % 4)

    def rotated(self, quarter_turns: int) -> "Direction":
        return Direction((self + quarter_turns) % 4)

    @classmethod
    def from_name(cls, name: str) -> "Direction":
        return cls[name.upper()]


# (row delta, column delta); north is the previous weekday row
_OFFSETS = {
    Direction.NORTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.SOUTH: (1, 0),
    Direction.WEST: (0, -1),
}


class CellKind(Enum):
    UNCLASSIFIED = "unclassified"
    EMPTY = "empty"
    ROAD = "road"
    BUILDING = "building"
    CONSUMED = "consumed"


class Footprint(Enum):
    SQUARE = "square"
    LSHAPE = "lshape"


class Junction(Enum):
    DEAD_END = "dead_end"
    STRAIGHT = "straight"
    TURN = "turn"
    THREE_WAY = "three_way"
    FOUR_WAY = "four_way"


class GridStage(IntEnum):
    INITIALIZED = 0
    ROADS_PLANNED = 1
    PLANNED = 2


@dataclass
class Cell:
    row: int
    col: int
    count: int
    kind: CellKind = CellKind.UNCLASSIFIED
    height: Optional[int] = None
    footprint: Optional[Footprint] = None
    junction: Optional[Junction] = None
    orientation: int = 0
    mirrored: bool = False
    merged_with: Optional[Position] = None
    consumed_by: Optional[Position] = None

    @property
    def pos(self) -> Position:
        return (self.row, self.col)


class Grid:
    """Working buffer for one layout request: raw counts plus per-cell state."""

    def __init__(self, counts: np.ndarray):
        self.counts = counts
        self.rows, self.cols = counts.shape
        self.cells: List[List[Cell]] = [
            [Cell(i, j, int(counts[i, j])) for j in range(self.cols)]
            for i in range(self.rows)
        ]
        self.stage = GridStage.INITIALIZED

    @classmethod
    def initialize(cls, counts) -> "Grid":
        matrix = _to_matrix(counts)
        if matrix.shape[0] != DAYS_PER_WEEK:
            logger.warning("Activity grid has %d rows, expected %d weekdays",
                           matrix.shape[0], DAYS_PER_WEEK)
        logger.debug("Initialized %dx%d grid", *matrix.shape)
        return cls(matrix)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def neighbor(self, cell: Cell, direction: Direction) -> Optional[Cell]:
        dr, dc = direction.offset
        r, c = cell.row + dr, cell.col + dc
        if not self.in_bounds(r, c):
            return None
        return self.cells[r][c]

    def neighbors(self, cell: Cell) -> Iterator[Tuple[Direction, Cell]]:
        for direction in Direction:
            n = self.neighbor(cell, direction)
            if n is not None:
                yield direction, n

    def __iter__(self) -> Iterator[Cell]:
        """Row-major walk over every cell."""
        for row in self.cells:
            yield from row

    def kind_mask(self, kind: CellKind) -> np.ndarray:
        mask = np.zeros(self.shape, dtype=bool)
        for cell in self:
            if cell.kind == kind:
                mask[cell.row, cell.col] = True
        return mask


def _to_matrix(counts) -> np.ndarray:
    if isinstance(counts, np.ndarray):
        if counts.ndim != 2:
            raise InvalidDimensions(f"Expected a 2D matrix, got {counts.ndim} dimensions")
        rows = counts.tolist()
    else:
        try:
            rows = [list(r) for r in counts]
        except TypeError:
            raise InvalidDimensions("Activity matrix must be a sequence of rows") from None

    if not rows:
        raise InvalidDimensions("Activity matrix has no rows")

    width = len(rows[0])
    for i, r in enumerate(rows):
        if len(r) != width:
            raise InvalidDimensions(
                f"Row {i} has {len(r)} columns, expected {width}")
    if width < 1:
        raise InvalidDimensions("Activity matrix needs at least one week column")

    for r in rows:
        for v in r:
            if isinstance(v, bool) or not isinstance(v, numbers.Integral):
                raise InvalidDimensions(f"Non-integer activity count: {v!r}")

    # Counts only matter up to the height cap; keep huge ones inside int64
    matrix = np.array([[_clamp(v) for v in r] for r in rows], dtype=np.int64)
    matrix.setflags(write=False)
    return matrix


def _clamp(v) -> int:
    v = int(v)
    if v < 0:
        return -1
    return min(v, INT64_MAX)
