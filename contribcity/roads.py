import logging
from typing import Dict, Optional, Tuple

import numpy as np
from scipy.ndimage import label

from contribcity.config import LayoutConfig
from contribcity.errors import PipelineOrderError
from contribcity.grid import CellKind, Direction, Grid, GridStage, Junction

logger = logging.getLogger(__name__)

# Connections of each road asset at rotation 0, as a bit per Direction
REFERENCE_MASKS: Dict[Junction, int] = {
    Junction.DEAD_END: 1 << Direction.NORTH,
    Junction.STRAIGHT: (1 << Direction.NORTH) | (1 << Direction.SOUTH),
    Junction.TURN: (1 << Direction.NORTH) | (1 << Direction.EAST),
    Junction.THREE_WAY: (1 << Direction.NORTH) | (1 << Direction.EAST) | (1 << Direction.WEST),
    Junction.FOUR_WAY: 0b1111,
}


def rotate_mask(mask: int, quarter_turns: int) -> int:
    """Rotate a 4-bit connection mask clockwise."""
    quarter_turns %= 4
    return ((mask << quarter_turns) | (mask >> (4 - quarter_turns))) & 0b1111


def junction_for_mask(mask: int) -> Tuple[Junction, int]:
    """Junction shape and rotation for the set of road neighbors in `mask`."""
    mask &= 0b1111
    n = bin(mask).count("1")
    if n <= 1:
        junction = Junction.DEAD_END
    elif n == 2:
        # Opposite pairs are N+S (0b0101) and E+W (0b1010)
        junction = Junction.STRAIGHT if mask in (0b0101, 0b1010) else Junction.TURN
    elif n == 3:
        junction = Junction.THREE_WAY
    else:
        junction = Junction.FOUR_WAY

    if n == 0:
        return junction, 0
    reference = REFERENCE_MASKS[junction]
    for turns in range(4):
        if rotate_mask(reference, turns) == mask:
            return junction, turns
    raise AssertionError(f"no rotation matches mask {mask:04b}")


# Precomputed for all 16 neighbor combinations
JUNCTION_TABLE = {mask: junction_for_mask(mask) for mask in range(16)}


def neighbor_mask(road: np.ndarray, row: int, col: int) -> int:
    rows, cols = road.shape
    mask = 0
    for d in Direction:
        dr, dc = d.offset
        r, c = row + dr, col + dc
        if 0 <= r < rows and 0 <= c < cols and road[r, c]:
            mask |= 1 << d
    return mask


class RoadPlanner:
    """Carves the road skeleton and classifies every junction."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def plan(self, grid: Grid) -> Grid:
        if grid.stage != GridStage.INITIALIZED:
            raise PipelineOrderError(
                f"RoadPlanner needs a freshly initialized grid, stage is {grid.stage.name}")

        counts = grid.counts
        empty = counts < 0
        candidates = (counts >= 0) & (counts <= self.config.road_threshold)

        # Single-cell components have no junction asset; they become buildings
        labels, n_labels = label(candidates)
        sizes = np.bincount(labels.ravel(), minlength=n_labels + 1)
        isolated = candidates & (sizes[labels] == 1)
        road = candidates & ~isolated

        for cell in grid:
            if empty[cell.row, cell.col]:
                cell.kind = CellKind.EMPTY
            elif road[cell.row, cell.col]:
                cell.kind = CellKind.ROAD
                mask = neighbor_mask(road, cell.row, cell.col)
                cell.junction, cell.orientation = JUNCTION_TABLE[mask]

        logger.debug("Roads planned: %d road cells, %d stubs handed to buildings, %d empty",
                     int(road.sum()), int(isolated.sum()), int(empty.sum()))
        grid.stage = GridStage.ROADS_PLANNED
        return grid
