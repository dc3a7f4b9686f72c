"""
Data types for the world model, missions, and session configuration.

Cell and overlay records are populated by assembler.py from tabular
sources; Mission and SessionConfig by loader.py from YAML files.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from .constants import (
    CURRENT_STABILITY_DEFAULT,
    FLOW_DIRECTION_DEFAULT,
    SONAR_RADIUS,
    CURRENT_THRESHOLD_MPS,
    HEALTH_MAX,
    HUNGER_MAX,
    COMPLETION_DISPLAY_SECONDS,
    FACT_CHANCE_DEFAULT,
)


# ============================================================================
# Cell Overlay Records
# ============================================================================

@dataclass
class HazardRecord:
    """Typed environmental danger attached to a cell"""
    type: str
    severity: int  # positive
    notes: str = ""


@dataclass
class PointOfInterest:
    """Notable, mission-relevant location marker"""
    id: Any
    category: str = ""
    label: str = ""
    description: str = ""
    research_value: Optional[float] = None


@dataclass
class ResourceRecord:
    """Extractable resource deposit"""
    type: str
    family: str = ""
    abundance: Optional[float] = None
    purity: Optional[float] = None
    extraction_difficulty: Optional[float] = None
    environmental_impact: Optional[float] = None
    economic_value: Optional[float] = None
    description: str = ""


@dataclass
class LifeRecord:
    """Species population observed in a cell"""
    species: str
    avg_depth_m: Optional[float] = None
    density: Optional[float] = None
    threat_level: int = 0  # >= 2 damages the hull, >= 3 is a predator
    behavior: str = ""
    trophic_level: Optional[float] = None
    prey_species: str = ""


@dataclass
class CoralRecord:
    """Coral health snapshot (at most one per cell)"""
    coral_cover_pct: Optional[float] = None
    health_index: Optional[float] = None
    bleaching_risk: Any = None
    biodiversity_index: Optional[float] = None


@dataclass
class CurrentVector:
    """Flow vector; u is eastward, v is southward in grid terms (row+)"""
    u_mps: float = 0.0
    v_mps: float = 0.0
    speed_mps: float = 0.0
    stability: str = CURRENT_STABILITY_DEFAULT
    flow_direction: str = FLOW_DIRECTION_DEFAULT


# ============================================================================
# Cell
# ============================================================================

@dataclass
class Cell:
    """
    One grid position's full environmental and entity data.

    Physical fields are None when the source value was missing or
    non-numeric. Collections start empty and are filled by overlays.
    """
    row: int
    col: int
    x_km: Optional[float] = None
    y_km: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    depth_m: Optional[float] = None
    pressure_atm: Optional[float] = None
    temperature_c: Optional[float] = None
    light_intensity: Optional[float] = None
    terrain_roughness: Optional[float] = None
    biome: Optional[str] = None

    hazards: List[HazardRecord] = field(default_factory=list)
    poi: List[PointOfInterest] = field(default_factory=list)
    resources: List[ResourceRecord] = field(default_factory=list)
    life: List[LifeRecord] = field(default_factory=list)
    coral: Optional[CoralRecord] = None
    current: CurrentVector = field(default_factory=CurrentVector)

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def max_threat(self) -> int:
        """Highest threat level among life records (0 if none)"""
        return max((life.threat_level for life in self.life), default=0)

    @property
    def max_severity(self) -> int:
        """Highest hazard severity (0 if no hazards)"""
        return max((hazard.severity for hazard in self.hazards), default=0)


# ============================================================================
# Grid Metadata and Aggregates
# ============================================================================

@dataclass
class GridMetadata:
    """Authoritative grid sizing plus any extra metadata fields"""
    rows: int
    cols: int
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WorldStats:
    """Read-only aggregate over all assembled cells"""
    depth_min: Optional[float]
    depth_max: Optional[float]
    temperature_min: Optional[float]
    temperature_max: Optional[float]
    biomes: Dict[str, int]
    hazards_by_type: Dict[str, int]
    predator_cells: int
    total_cells: int
    missing_cells: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'depth': {'min': self.depth_min, 'max': self.depth_max},
            'temperature': {'min': self.temperature_min, 'max': self.temperature_max},
            'biomes': dict(self.biomes),
            'hazards_by_type': dict(self.hazards_by_type),
            'predator_cells': self.predator_cells,
            'total_cells': self.total_cells,
            'missing_cells': self.missing_cells,
        }


# ============================================================================
# Player
# ============================================================================

@dataclass
class PlayerState:
    """Submarine position and condition"""
    row: int = 0
    col: int = 0
    health: int = HEALTH_MAX
    hunger: int = HUNGER_MAX

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)


# ============================================================================
# Missions
# ============================================================================

class MissionType(Enum):
    """Success predicate families"""
    REACH_POI = "reach_poi"
    MULTI_POI = "multi_poi"
    REACH_DEPTH = "reach_depth"
    REACH_PRESSURE = "reach_pressure"
    VISIT_HAZARDS = "visit_hazards"


class MissionState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class MissionNarration:
    """Assistant lines spoken over a mission's lifecycle"""
    intro: str = ""
    success: str = ""
    failure: str = ""
    hint: str = ""


@dataclass
class Mission:
    """Scripted objective definition"""
    id: int
    title: str
    description: str
    type: MissionType
    target_count: Optional[int] = None
    target_depth: Optional[float] = None
    target_pressure: Optional[float] = None
    time_limit: int = 0  # seconds, 0 = untimed
    narration: MissionNarration = field(default_factory=MissionNarration)


@dataclass
class MissionRun:
    """Ephemeral instance of a selected mission"""
    mission: Mission
    visited_pois: Set[Tuple[int, int]] = field(default_factory=set)
    visited_hazards: Set[Tuple[int, int]] = field(default_factory=set)
    time_remaining: float = 0.0
    elapsed: float = 0.0
    state: MissionState = MissionState.ACTIVE


# ============================================================================
# Session Configuration
# ============================================================================

@dataclass
class SessionConfig:
    """Per-session tunables (loaded from world/session.yaml)"""
    seed: int = 42
    sonar_radius: int = SONAR_RADIUS
    current_threshold: float = CURRENT_THRESHOLD_MPS
    start_health: int = HEALTH_MAX
    start_hunger: int = HUNGER_MAX
    start_row: Optional[int] = None  # None = grid centre
    start_col: Optional[int] = None
    completion_display_seconds: float = COMPLETION_DISPLAY_SECONDS
    fact_chance: float = FACT_CHANCE_DEFAULT
