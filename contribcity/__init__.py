from contribcity.buildings import BuildingPlanner, PlannedGrid
from contribcity.config import LayoutConfig, LayoutStyle
from contribcity.errors import (
    CalendarFormatError,
    ConfigError,
    ContribCityError,
    InvalidDimensions,
    PipelineOrderError,
)
from contribcity.grid import Cell, CellKind, Direction, Footprint, Grid, Junction
from contribcity.layout import (
    BuildingTile,
    CityLayout,
    ConsumedTile,
    EmptyTile,
    LayoutAssembler,
    RoadTile,
    generate_layout,
)
from contribcity.roads import RoadPlanner

__version__ = "0.1.0"
