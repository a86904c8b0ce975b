from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Tuple

from contribcity.errors import ConfigError

# Hard ceiling on stacked floors, whatever the preset says
HEIGHT_CAP = 35

MERGE_DIRECTIONS = ("north", "east", "south", "west")


class LayoutStyle(Enum):
    DEFAULT = "default"
    DOWNTOWN = "downtown"
    SUBURB = "suburb"


@dataclass
class LayoutConfig:
    seed: int = 42
    style: LayoutStyle = LayoutStyle.DEFAULT

    # Roads: counts in [0, road_threshold] become road candidates
    road_threshold: int = 0

    # Buildings
    max_height: int = HEIGHT_CAP
    merge_directions: Tuple[str, ...] = ("east", "south")
    merge_height_tolerance: int = 2
    min_merge_height: int = 1
    mirror_chance: float = 0.5

    # Applied on top of the style preset
    overrides: Dict[str, Any] = None

    def __post_init__(self):
        """Auto-configure policy settings from the style preset"""
        if isinstance(self.style, str):
            self.style = LayoutStyle(self.style)

        presets = {
            LayoutStyle.DOWNTOWN: {
                'road_threshold': 0, 'max_height': 35,
                'merge_height_tolerance': 5, 'min_merge_height': 4,
                'merge_directions': ("east", "south"),
            },
            LayoutStyle.SUBURB: {
                'road_threshold': 1, 'max_height': 12,
                'merge_height_tolerance': 1, 'min_merge_height': 1,
                'merge_directions': ("south", "east"),
            },
        }

        if self.style in presets:
            for key, value in presets[self.style].items():
                setattr(self, key, value)

        if self.overrides:
            for key, value in self.overrides.items():
                if not hasattr(self, key) or key in ('overrides', 'style'):
                    raise ConfigError(f"Unknown layout setting: {key}")
                setattr(self, key, value)

        self.merge_directions = tuple(d.lower() for d in self.merge_directions)
        self.validate()

    def validate(self):
        for d in self.merge_directions:
            if d not in MERGE_DIRECTIONS:
                raise ConfigError(f"Unknown merge direction: {d!r}")
        if len(set(self.merge_directions)) != len(self.merge_directions):
            raise ConfigError("Merge directions must not repeat")
        if not 0 < self.max_height <= HEIGHT_CAP:
            raise ConfigError(f"max_height must be in 1..{HEIGHT_CAP}, got {self.max_height}")
        if self.merge_height_tolerance < 0:
            raise ConfigError("merge_height_tolerance must be non-negative")
        if self.min_merge_height < 0:
            raise ConfigError("min_merge_height must be non-negative")
        if self.road_threshold < 0:
            raise ConfigError("road_threshold must be non-negative")
        if not 0.0 <= self.mirror_chance <= 1.0:
            raise ConfigError(f"mirror_chance must be in [0, 1], got {self.mirror_chance}")
        if self.seed < 0:
            raise ConfigError("seed must be non-negative")
