"""
Sonar visibility (fog of war).

Each cell carries two flags: ``visible`` (inside the sonar circle right
now) and ``discovered`` (has ever been inside it). Discovered flags are
monotonic for the whole session.
"""

from typing import Tuple

import numpy as np

from .constants import SONAR_RADIUS

UNKNOWN = "unknown"
SEEN = "seen"
VISIBLE = "visible"


def sonar_offsets(radius: int) -> np.ndarray:
    """
    Offsets (d_row, d_col) within Euclidean distance <= radius.

    Integer arithmetic on squared distances keeps the boundary exact
    (an offset at distance exactly ``radius`` is included).

    Returns:
        (K, 2) int array of offsets
    """
    span = np.arange(-radius, radius + 1)
    d_row, d_col = np.meshgrid(span, span, indexing='ij')
    mask = d_row * d_row + d_col * d_col <= radius * radius
    return np.stack([d_row[mask], d_col[mask]], axis=1)


class VisibilityGrid:
    """
    Discovered/visible flags parallel to the world grid.

    Attributes:
        rows: Grid rows
        cols: Grid columns
        radius: Sonar radius in tiles
        discovered: (rows, cols) bool array, never reset
        visible: (rows, cols) bool array, recomputed on every reset
    """

    def __init__(self, rows: int, cols: int, radius: int = SONAR_RADIUS):
        self.rows = rows
        self.cols = cols
        self.radius = radius
        self.discovered = np.zeros((rows, cols), dtype=bool)
        self.visible = np.zeros((rows, cols), dtype=bool)
        self._offsets = sonar_offsets(radius)

    def reset(self, center: Tuple[int, int]):
        """
        Recompute visibility around ``center``.

        Clears every visible flag, then marks in-grid cells within the
        sonar radius as visible and discovered. Out-of-grid offsets are
        skipped, not clamped.
        """
        self.visible[:, :] = False

        rows = self._offsets[:, 0] + center[0]
        cols = self._offsets[:, 1] + center[1]
        inside = (rows >= 0) & (rows < self.rows) & (cols >= 0) & (cols < self.cols)
        rows, cols = rows[inside], cols[inside]

        self.visible[rows, cols] = True
        self.discovered[rows, cols] = True

    def is_visible(self, row: int, col: int) -> bool:
        return bool(self.visible[row, col])

    def is_discovered(self, row: int, col: int) -> bool:
        return bool(self.discovered[row, col])

    def status(self, row: int, col: int) -> str:
        """One of "unknown", "seen" (discovered, not visible) or "visible" """
        if self.visible[row, col]:
            return VISIBLE
        if self.discovered[row, col]:
            return SEEN
        return UNKNOWN

    def discovered_count(self) -> int:
        return int(self.discovered.sum())
