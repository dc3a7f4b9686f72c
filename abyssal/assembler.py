"""
World assembly from tabular records.

Builds the grid from the base cell records, then enriches each cell with
hazard, POI, resource, life, coral and current overlays keyed by
(row, col). Records are coerced into typed dataclasses here; rows that
point outside the grid or at a missing base cell are dropped silently.
"""

import math
from typing import Any, Dict, Iterable, Optional, Tuple

from .data_types import (
    Cell, HazardRecord, PointOfInterest, ResourceRecord, LifeRecord,
    CoralRecord, CurrentVector, GridMetadata
)
from .world import WorldGrid
from .constants import (
    HAZARD_SEVERITY_DEFAULT,
    CURRENT_STABILITY_DEFAULT,
    FLOW_DIRECTION_DEFAULT,
)

Record = Dict[str, Any]


# ============================================================================
# Field Coercion
# ============================================================================

def _as_float(value: Any) -> Optional[float]:
    """Finite numeric value as float, else None"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_int(value: Any, default: int, minimum: int) -> int:
    number = _as_float(value)
    if number is None or not number.is_integer():
        return default
    number = int(number)
    return number if number >= minimum else default


def _grid_key(record: Record) -> Optional[Tuple[int, int]]:
    """(row, col) for integral coordinates, None otherwise"""
    row = _as_float(record.get('row'))
    col = _as_float(record.get('col'))
    if row is None or col is None or not row.is_integer() or not col.is_integer():
        return None
    return int(row), int(col)


def _target_cell(world: WorldGrid, record: Record) -> Optional[Cell]:
    key = _grid_key(record)
    if key is None:
        return None
    return world.get_cell(*key)


# ============================================================================
# Base Cells
# ============================================================================

def apply_cells(world: WorldGrid, records: Iterable[Record]) -> int:
    """
    Instantiate cells from base records.

    Returns:
        Number of cells placed (out-of-bounds records are skipped)
    """
    placed = 0
    for c in records:
        key = _grid_key(c)
        if key is None or not world.in_bounds(*key):
            continue

        biome = c.get('biome')
        world.place_cell(Cell(
            row=key[0],
            col=key[1],
            x_km=_as_float(c.get('x_km')),
            y_km=_as_float(c.get('y_km')),
            lat=_as_float(c.get('lat')),
            lon=_as_float(c.get('lon')),
            depth_m=_as_float(c.get('depth_m')),
            pressure_atm=_as_float(c.get('pressure_atm')),
            temperature_c=_as_float(c.get('temperature_c')),
            light_intensity=_as_float(c.get('light_intensity')),
            terrain_roughness=_as_float(c.get('terrain_roughness')),
            biome=_as_text(biome) if biome not in (None, "") else None,
        ))
        placed += 1
    return placed


# ============================================================================
# Overlays
# ============================================================================

def apply_hazards(world: WorldGrid, records: Iterable[Record]):
    """Append hazard records to their cells"""
    for h in records:
        cell = _target_cell(world, h)
        if cell is None:
            continue

        cell.hazards.append(HazardRecord(
            type=_as_text(h.get('type')),
            severity=_as_int(h.get('severity'), HAZARD_SEVERITY_DEFAULT, minimum=1),
            notes=_as_text(h.get('notes')),
        ))


def apply_poi(world: WorldGrid, records: Iterable[Record]):
    """Append points of interest to their cells"""
    for p in records:
        cell = _target_cell(world, p)
        if cell is None:
            continue

        cell.poi.append(PointOfInterest(
            id=p.get('id'),
            category=_as_text(p.get('category')),
            label=_as_text(p.get('label')),
            description=_as_text(p.get('description')),
            research_value=_as_float(p.get('research_value')),
        ))


def apply_resources(world: WorldGrid, records: Iterable[Record]):
    """Append resource deposits to their cells"""
    for r in records:
        cell = _target_cell(world, r)
        if cell is None:
            continue

        cell.resources.append(ResourceRecord(
            type=_as_text(r.get('type')),
            family=_as_text(r.get('family')),
            abundance=_as_float(r.get('abundance')),
            purity=_as_float(r.get('purity')),
            extraction_difficulty=_as_float(r.get('extraction_difficulty')),
            environmental_impact=_as_float(r.get('environmental_impact')),
            economic_value=_as_float(r.get('economic_value')),
            description=_as_text(r.get('description')),
        ))


def apply_life(world: WorldGrid, records: Iterable[Record]):
    """Append life records to their cells"""
    for l in records:
        cell = _target_cell(world, l)
        if cell is None:
            continue

        cell.life.append(LifeRecord(
            species=_as_text(l.get('species')),
            avg_depth_m=_as_float(l.get('avg_depth_m')),
            density=_as_float(l.get('density')),
            threat_level=_as_int(l.get('threat_level'), 0, minimum=0),
            behavior=_as_text(l.get('behavior')),
            trophic_level=_as_float(l.get('trophic_level')),
            prey_species=_as_text(l.get('prey_species')),
        ))


def apply_corals(world: WorldGrid, records: Iterable[Record]):
    """Assign coral snapshots (one per cell, last record wins)"""
    for c in records:
        cell = _target_cell(world, c)
        if cell is None:
            continue

        bleaching = c.get('bleaching_risk')
        cell.coral = CoralRecord(
            coral_cover_pct=_as_float(c.get('coral_cover_pct')),
            health_index=_as_float(c.get('health_index')),
            bleaching_risk=bleaching if bleaching != "" else None,
            biodiversity_index=_as_float(c.get('biodiversity_index')),
        )


def apply_currents(world: WorldGrid, records: Iterable[Record]):
    """Overwrite each cell's current vector (last record wins)"""
    for c in records:
        cell = _target_cell(world, c)
        if cell is None:
            continue

        cell.current = CurrentVector(
            u_mps=_as_float(c.get('u_mps')) or 0.0,
            v_mps=_as_float(c.get('v_mps')) or 0.0,
            speed_mps=_as_float(c.get('speed_mps')) or 0.0,
            stability=_as_text(c.get('stability')) or CURRENT_STABILITY_DEFAULT,
            flow_direction=_as_text(c.get('flow_direction')) or FLOW_DIRECTION_DEFAULT,
        )


# ============================================================================
# Entry Point
# ============================================================================

def assemble_world(
    metadata: GridMetadata,
    cells: Iterable[Record],
    hazards: Iterable[Record] = (),
    poi: Iterable[Record] = (),
    resources: Iterable[Record] = (),
    life: Iterable[Record] = (),
    corals: Iterable[Record] = (),
    currents: Iterable[Record] = (),
) -> WorldGrid:
    """
    Build and enrich the world grid.

    Overlays touch disjoint fields so their order is irrelevant, except
    currents which are applied last and replace the vector wholesale.

    Args:
        metadata: Grid sizing (rows, cols are authoritative)
        cells: Base per-cell records
        hazards, poi, resources, life, corals, currents: Overlay records

    Returns:
        Assembled WorldGrid
    """
    world = WorldGrid(metadata.rows, metadata.cols)
    apply_cells(world, cells)
    apply_hazards(world, hazards)
    apply_poi(world, poi)
    apply_resources(world, resources)
    apply_life(world, life)
    apply_corals(world, corals)
    apply_currents(world, currents)
    return world


def assemble_from_sources(metadata: GridMetadata, sources: Dict[str, Iterable[Record]]) -> WorldGrid:
    """Assemble from a loader sources dict (see loader.load_world_sources)"""
    return assemble_world(
        metadata,
        cells=sources.get('cells', ()),
        hazards=sources.get('hazards', ()),
        poi=sources.get('poi', ()),
        resources=sources.get('resources', ()),
        life=sources.get('life', ()),
        corals=sources.get('corals', ()),
        currents=sources.get('currents', ()),
    )
