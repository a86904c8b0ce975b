import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from contribcity.config import LayoutConfig
from contribcity.errors import PipelineOrderError
from contribcity.grid import Cell, CellKind, Direction, Footprint, Grid, GridStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedGrid:
    """A grid that went through every planning stage; the only input export accepts."""
    grid: Grid
    merges: int = 0


def building_height(count: int, max_height: int) -> int:
    return max(0, min(count, max_height))


def position_rng(seed: int, row: int, col: int) -> np.random.Generator:
    """Random stream tied to a cell position, so layouts are reproducible."""
    return np.random.default_rng([seed, row, col])


class BuildingPlanner:
    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self.merge_order = [Direction.from_name(d) for d in self.config.merge_directions]

    def plan(self, grid: Grid) -> PlannedGrid:
        if grid.stage != GridStage.ROADS_PLANNED:
            raise PipelineOrderError(
                f"BuildingPlanner must run after RoadPlanner, stage is {grid.stage.name}")

        # 1. Everything left over is a building; road stubs stay flat
        for cell in grid:
            if cell.kind == CellKind.UNCLASSIFIED:
                cell.kind = CellKind.BUILDING
                if cell.count <= self.config.road_threshold:
                    cell.height = 0
                else:
                    cell.height = building_height(cell.count, self.config.max_height)
                cell.footprint = Footprint.SQUARE

        # 2. Footprints, orientation and mirroring in row-major order
        merges = 0
        for cell in grid:
            if cell.kind != CellKind.BUILDING:
                continue
            rng = position_rng(self.config.seed, cell.row, cell.col)
            cell.mirrored = bool(rng.random() < self.config.mirror_chance)

            partner_dir = self._find_partner(grid, cell)
            if partner_dir is not None:
                self._merge(grid, cell, partner_dir)
                merges += 1
            else:
                cell.orientation = self._facing(grid, cell, rng)

        logger.debug("Buildings planned: %d L-shaped merges", merges)
        grid.stage = GridStage.PLANNED
        return PlannedGrid(grid, merges)

    def is_merge_eligible(self, cell: Cell, other: Optional[Cell]) -> bool:
        if other is None or other.kind != CellKind.BUILDING:
            return False
        if other.footprint != Footprint.SQUARE:
            return False
        lo = self.config.min_merge_height
        if cell.height < lo or other.height < lo:
            return False
        return abs(cell.height - other.height) <= self.config.merge_height_tolerance

    def _find_partner(self, grid: Grid, cell: Cell) -> Optional[Direction]:
        for d in self.merge_order:
            if self.is_merge_eligible(cell, grid.neighbor(cell, d)):
                return d
        return None

    def _merge(self, grid: Grid, cell: Cell, direction: Direction):
        other = grid.neighbor(cell, direction)
        cell.footprint = Footprint.LSHAPE
        cell.orientation = int(direction)
        cell.merged_with = other.pos

        other.kind = CellKind.CONSUMED
        other.consumed_by = cell.pos
        other.footprint = None
        other.mirrored = False

    def _facing(self, grid: Grid, cell: Cell, rng: np.random.Generator) -> int:
        """Face the first adjacent road, or a random side when there is none."""
        for d, n in grid.neighbors(cell):
            if n.kind == CellKind.ROAD:
                return int(d)
        return int(rng.integers(0, 4))
