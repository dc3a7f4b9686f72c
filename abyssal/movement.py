"""
Movement resolution with current drift.

Currents in the cell being departed nudge the submarine by one tile on
the axis the player is not driving. Row increases going down (south),
col increases going right (east):

    u_mps > +threshold -> col + 1      u_mps < -threshold -> col - 1
    v_mps > +threshold -> row + 1      v_mps < -threshold -> row - 1
"""

from typing import Dict, Optional, Tuple

from .data_types import Cell
from .constants import CURRENT_THRESHOLD_MPS

Position = Tuple[int, int]

DIRECTIONS: Dict[str, Tuple[int, int]] = {
    'up': (-1, 0),
    'down': (1, 0),
    'left': (0, -1),
    'right': (0, 1),
}


def current_offset(cell: Optional[Cell], threshold: float = CURRENT_THRESHOLD_MPS) -> Tuple[int, int]:
    """
    Tile offset (d_row, d_col) a cell's current would apply.

    Args:
        cell: Departed cell (None means no current)
        threshold: Minimum component magnitude (m/s) that deflects

    Returns:
        Offsets in {-1, 0, 1} per axis
    """
    if cell is None:
        return 0, 0

    u = cell.current.u_mps
    v = cell.current.v_mps

    d_row = 0
    d_col = 0

    if v > threshold:
        d_row = 1
    elif v < -threshold:
        d_row = -1

    if u > threshold:
        d_col = 1
    elif u < -threshold:
        d_col = -1

    return d_row, d_col


def clamp(value: int, upper: int) -> int:
    """Clamp to [0, upper)"""
    return max(0, min(value, upper - 1))


def resolve_move(
    position: Position,
    direction: Tuple[int, int],
    cell: Optional[Cell],
    rows: int,
    cols: int,
    threshold: float = CURRENT_THRESHOLD_MPS
) -> Position:
    """
    Compute the next position from input and the departed cell's current.

    A vertical input may gain a column nudge, a horizontal input a row
    nudge. Diagonal or zero input ignores the current. The result is
    clamped per axis to the grid.

    Args:
        position: Current (row, col)
        direction: Input (d_row, d_col)
        cell: Cell being departed
        rows: Grid rows
        cols: Grid columns
        threshold: Current deflection threshold (m/s)

    Returns:
        New (row, col), always in bounds
    """
    d_row_input, d_col_input = direction
    d_row, d_col = d_row_input, d_col_input

    extra_row, extra_col = current_offset(cell, threshold)

    if d_row_input != 0 and d_col_input == 0:
        d_col += extra_col
    elif d_col_input != 0 and d_row_input == 0:
        d_row += extra_row

    return clamp(position[0] + d_row, rows), clamp(position[1] + d_col, cols)
