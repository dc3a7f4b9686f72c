"""
World grid: the spatial container for assembled cells.

The grid is sized once from metadata and treated as read-only after
assembly. Accessors return None for out-of-bounds or unassembled
positions instead of raising.
"""

from collections import Counter
from typing import Dict, Iterator, List, Optional

import numpy as np

from .data_types import Cell, WorldStats
from .constants import (
    HIGH_THREAT_LEVEL,
    PREDATOR_MIN_THREAT,
    DANGER_SPEED_STEPS,
    DANGER_STABILITY_POINTS,
    DANGER_DEPTH_STEPS,
)


class WorldGrid:
    """
    Fixed-size 2D grid of cells indexed as ``cells[row][col]``.

    Attributes:
        rows: Number of grid rows
        cols: Number of grid columns
        cells: Row-major nested list; None marks an unassembled position
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self._rows = rows
        self._cols = cols
        self.cells: List[List[Optional[Cell]]] = [[None] * cols for _ in range(rows)]

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at (row, col), or None if out of bounds / missing"""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def place_cell(self, cell: Cell) -> bool:
        """
        Store a cell at its own (row, col).

        Returns:
            False (and stores nothing) when the position is out of bounds
        """
        if not self.in_bounds(cell.row, cell.col):
            return False
        self.cells[cell.row][cell.col] = cell
        return True

    def iter_cells(self) -> Iterator[Cell]:
        """Yield assembled cells in row-major order"""
        for row in self.cells:
            for cell in row:
                if cell is not None:
                    yield cell

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_cells())


# ============================================================================
# Derived Metrics
# ============================================================================

def danger_score(cell: Optional[Cell]) -> int:
    """
    Heuristic danger rating for colouring and HUD display.

    Sums: 2x worst hazard severity, current speed/stability penalties,
    depth penalties, and the worst threat level when it is >= 2.
    """
    if cell is None:
        return 0
    score = 0

    if cell.hazards:
        score += cell.max_severity * 2

    current = cell.current
    score += sum(1 for step in DANGER_SPEED_STEPS if current.speed_mps > step)
    score += DANGER_STABILITY_POINTS.get(current.stability, 0)

    if cell.depth_m is not None:
        score += sum(1 for step in DANGER_DEPTH_STEPS if cell.depth_m > step)

    threat = cell.max_threat
    if threat >= PREDATOR_MIN_THREAT:
        score += threat

    return score


def has_predator(cell: Optional[Cell]) -> bool:
    """True when the cell hosts a high-threat life form"""
    if cell is None:
        return False
    return any(life.threat_level >= HIGH_THREAT_LEVEL for life in cell.life)


def summarize_cell(cell: Cell) -> Dict[str, object]:
    """Short summary for HUD / debugging"""
    return {
        'biome': cell.biome,
        'depth_m': cell.depth_m,
        'temperature_c': cell.temperature_c,
        'pressure_atm': cell.pressure_atm,
        'light_intensity': cell.light_intensity,
        'terrain_roughness': cell.terrain_roughness,
        'has_coral': cell.coral is not None,
        'hazard_count': len(cell.hazards),
        'resource_count': len(cell.resources),
        'life_count': len(cell.life),
        'poi_count': len(cell.poi),
        'danger_score': danger_score(cell),
    }


def _finite_range(values: List[Optional[float]]):
    arr = np.array([v for v in values if v is not None], dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None, None
    return float(arr.min()), float(arr.max())


def compute_world_stats(world: WorldGrid) -> WorldStats:
    """
    Aggregate statistics over all assembled cells.

    Computed once after assembly; the world does not change during a
    session, so the result is never updated in place.
    """
    cells = list(world.iter_cells())

    depth_min, depth_max = _finite_range([c.depth_m for c in cells])
    temp_min, temp_max = _finite_range([c.temperature_c for c in cells])

    biomes = Counter(c.biome or "unknown" for c in cells)
    hazards_by_type = Counter(
        hazard.type or "unknown" for c in cells for hazard in c.hazards
    )

    return WorldStats(
        depth_min=depth_min,
        depth_max=depth_max,
        temperature_min=temp_min,
        temperature_max=temp_max,
        biomes=dict(biomes),
        hazards_by_type=dict(hazards_by_type),
        predator_cells=sum(1 for c in cells if has_predator(c)),
        total_cells=len(cells),
        missing_cells=world.rows * world.cols - len(cells),
    )
