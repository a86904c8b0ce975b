import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.colors import LightSource, to_rgb

from contribcity.grid import Direction
from contribcity.layout import CityLayout
from contribcity.roads import REFERENCE_MASKS, rotate_mask

GRASS_COLOR = "#8fbf6a"
ROAD_COLOR = "#5b5b5b"
EMPTY_COLOR = "#dcd3bd"   # Parchment for days outside the calendar
ROOF_CMAP = plt.cm.YlOrBr

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class LayoutVisualizer:
    """Top-down preview of a symbolic layout, for eyeballing the planner."""

    def __init__(self, layout: CityLayout, max_height: int = 35):
        self.layout = layout
        self.max_height = max_height
        self.fig = None
        self.ax = None

    def height_map(self) -> np.ndarray:
        rows, cols = self.layout.shape
        h = np.zeros((rows, cols))
        for i, row in enumerate(self.layout):
            for j, t in enumerate(row):
                if t.tile == "building":
                    h[i, j] = t.height
                elif t.tile == "consumed":
                    pr, pc = t.primary
                    h[i, j] = self.layout[pr, pc].height
        return h

    def draw(self, shade=True):
        rows, cols = self.layout.shape
        self.fig, self.ax = plt.subplots(figsize=(max(6, cols * 0.3), 4))
        ax = self.ax

        base = np.zeros((rows, cols, 3))
        base[:] = to_rgb(GRASS_COLOR)
        for i, row in enumerate(self.layout):
            for j, t in enumerate(row):
                if t.tile == "empty":
                    base[i, j] = to_rgb(EMPTY_COLOR)
                elif t.tile == "road":
                    base[i, j] = to_rgb(ROAD_COLOR)

        h = self.height_map()
        if shade and h.max() > 0:
            ls = LightSource(azdeg=315, altdeg=45)
            base = ls.shade_rgb(base, h / self.max_height, blend_mode='soft')
        ax.imshow(base, extent=[-0.5, cols - 0.5, rows - 0.5, -0.5])

        # Road connections as strokes from the tile centre
        for i, row in enumerate(self.layout):
            for j, t in enumerate(row):
                if t.tile == "road":
                    mask = rotate_mask(REFERENCE_MASKS[t.junction], t.orientation)
                    for d in Direction:
                        if mask & (1 << d):
                            dr, dc = d.offset
                            ax.plot([j, j + dc * 0.5], [i, i + dr * 0.5],
                                    color='white', linewidth=1.2, zorder=3)
                elif t.tile == "building":
                    color = ROOF_CMAP(min(1.0, t.height / self.max_height))
                    ax.add_patch(patches.Rectangle((j - 0.35, i - 0.35), 0.7, 0.7,
                                                   facecolor=color, edgecolor='#1a1a1a',
                                                   linewidth=0.6, zorder=4))
                elif t.tile == "consumed":
                    pr, pc = t.primary
                    ax.plot([pc, j], [pr, i], color='#1a1a1a', linewidth=3, zorder=5)

        legend_elements = [
            patches.Patch(facecolor=EMPTY_COLOR, edgecolor='black', label='No day'),
            patches.Patch(facecolor=ROAD_COLOR, edgecolor='black', label='Road'),
            patches.Patch(facecolor=ROOF_CMAP(0.6), edgecolor='black', label='Building'),
        ]
        ax.legend(handles=legend_elements, loc='upper left',
                  bbox_to_anchor=(1.02, 1), fontsize=8)

        ax.set_yticks(range(rows))
        ax.set_yticklabels(WEEKDAYS[:rows] if rows <= 7 else range(rows))
        ax.set_xlabel('Week')
        ax.set_title('Contribution City Layout', fontsize=12, fontweight='bold')
        ax.set_aspect('equal')
        plt.tight_layout()
        return self.fig

    def show(self):
        self.draw()
        plt.show()

    def save(self, path: str):
        fig = self.draw()
        fig.savefig(path, dpi=150)
        plt.close(fig)
