from contribcity.buildings import BuildingPlanner
from contribcity.grid import Grid
from contribcity.roads import RoadPlanner

X = -1


def blank(cols: int) -> list:
    return [[X] * cols for _ in range(7)]


def plan(counts, config=None):
    """Run both planners and return the planned wrapper."""
    grid = RoadPlanner(config).plan(Grid.initialize(counts))
    return BuildingPlanner(config).plan(grid)
