import json
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from contribcity.buildings import BuildingPlanner, PlannedGrid
from contribcity.config import LayoutConfig
from contribcity.errors import PipelineOrderError
from contribcity.grid import Cell, CellKind, Footprint, Grid, Junction, Position
from contribcity.roads import RoadPlanner

logger = logging.getLogger(__name__)


# --- TILE DESCRIPTORS ---
@dataclass(frozen=True)
class EmptyTile:
    tile = "empty"

    def to_dict(self) -> Dict[str, Any]:
        return {"tile": self.tile}


@dataclass(frozen=True)
class RoadTile:
    junction: Junction
    orientation: int
    tile = "road"

    def to_dict(self) -> Dict[str, Any]:
        return {"tile": self.tile, "junction": self.junction.value,
                "orientation": self.orientation}


@dataclass(frozen=True)
class BuildingTile:
    height: int
    footprint: Footprint
    orientation: int
    mirrored: bool
    tile = "building"

    def to_dict(self) -> Dict[str, Any]:
        return {"tile": self.tile, "height": self.height,
                "footprint": self.footprint.value,
                "orientation": self.orientation, "mirrored": self.mirrored}


@dataclass(frozen=True)
class ConsumedTile:
    """Secondary half of an L-shaped building; renderers skip it."""
    primary: Position
    tile = "consumed"

    def to_dict(self) -> Dict[str, Any]:
        return {"tile": self.tile, "primary": list(self.primary)}


TileDescriptor = Union[EmptyTile, RoadTile, BuildingTile, ConsumedTile]

EMPTY = EmptyTile()


class LayoutAssembler:
    def export(self, planned: PlannedGrid) -> List[List[TileDescriptor]]:
        if not isinstance(planned, PlannedGrid):
            raise PipelineOrderError(
                "export needs the PlannedGrid returned by BuildingPlanner.plan")
        grid = planned.grid
        return [[self._describe(cell) for cell in row] for row in grid.cells]

    @staticmethod
    def _describe(cell: Cell) -> TileDescriptor:
        if cell.kind == CellKind.EMPTY:
            return EMPTY
        if cell.kind == CellKind.ROAD:
            return RoadTile(cell.junction, cell.orientation)
        if cell.kind == CellKind.BUILDING:
            return BuildingTile(cell.height, cell.footprint, cell.orientation, cell.mirrored)
        if cell.kind == CellKind.CONSUMED:
            return ConsumedTile(cell.consumed_by)
        raise PipelineOrderError(f"Cell {cell.pos} was never classified")


# --- RESULT ---
class CityLayout:
    def __init__(self, tiles: List[List[TileDescriptor]]):
        self.tiles = tiles

    @property
    def shape(self) -> Tuple[int, int]:
        return (len(self.tiles), len(self.tiles[0]) if self.tiles else 0)

    def __getitem__(self, pos: Position) -> TileDescriptor:
        r, c = pos
        return self.tiles[r][c]

    def __iter__(self):
        return iter(self.tiles)

    @property
    def counts(self) -> Dict[str, int]:
        tally = Counter(t.tile for row in self.tiles for t in row)
        return {k: tally.get(k, 0) for k in ("empty", "road", "building", "consumed")}

    def to_dict(self) -> Dict[str, Any]:
        rows, cols = self.shape
        return {
            "rows": rows,
            "columns": cols,
            "tiles": [[t.to_dict() for t in row] for row in self.tiles],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def save_json(self, path: str):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=4)
        logger.info("Layout exported to %s", path)


def generate_layout(counts, config: Optional[LayoutConfig] = None) -> CityLayout:
    """Run the whole pipeline on a weekday x week activity matrix."""
    config = config or LayoutConfig()
    grid = Grid.initialize(counts)
    grid = RoadPlanner(config).plan(grid)
    planned = BuildingPlanner(config).plan(grid)
    layout = CityLayout(LayoutAssembler().export(planned))
    logger.info("Generated %dx%d layout: %s", *layout.shape, layout.counts)
    return layout
