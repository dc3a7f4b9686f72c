"""
Central configuration constants for the abyssal exploration engine.

Defines default values, thresholds, and tuning parameters used across
multiple modules. Per-session overrides live in world/session.yaml.
"""

# ============================================================================
# Data Pack Layout
# ============================================================================

METADATA_FILE = "world/metadata.json"
SESSION_FILE = "world/session.yaml"
MISSIONS_FILE = "missions/missions.yaml"
FACTS_FILE = "knowledge/facts.yaml"

# Tabular sources, keyed by the overlay they feed
CSV_SOURCES = {
    'cells': "world/cells.csv",
    'hazards': "world/hazards.csv",
    'poi': "world/poi.csv",
    'resources': "world/resources.csv",
    'life': "world/life.csv",
    'corals': "world/corals.csv",
    'currents': "world/currents.csv",
}


# ============================================================================
# Sonar / Fog of War
# ============================================================================

SONAR_RADIUS = 5  # tiles, Euclidean


# ============================================================================
# Currents
# ============================================================================

# Only currents stronger than this (m/s, per component) nudge the sub
CURRENT_THRESHOLD_MPS = 0.5

CURRENT_STABILITY_DEFAULT = "unknown"
FLOW_DIRECTION_DEFAULT = "none"


# ============================================================================
# Hull Damage
# ============================================================================

HEALTH_MAX = 100
HUNGER_MAX = 100
LOW_HEALTH_THRESHOLD = 30

# Predators: threat 2 -> 4 damage, threat >= 3 -> 7 damage
PREDATOR_MIN_THREAT = 2
PREDATOR_DAMAGE_MODERATE = 4
PREDATOR_DAMAGE_SEVERE = 7
HIGH_THREAT_LEVEL = 3  # flagged as a predator on the map

# Hazards: base + per_severity * max severity, once per move
HAZARD_BASE_DAMAGE = 2
HAZARD_DAMAGE_PER_SEVERITY = 2
HAZARD_SEVERITY_DEFAULT = 1


# ============================================================================
# Missions
# ============================================================================

MISSION_TICK_SECONDS = 1.0
COMPLETION_DISPLAY_SECONDS = 3.0

MULTI_POI_TARGET_DEFAULT = 3
VISIT_HAZARDS_TARGET_DEFAULT = 3
REACH_DEPTH_TARGET_DEFAULT = 6000.0
REACH_PRESSURE_TARGET_DEFAULT = 500.0


# ============================================================================
# Narration (display durations in seconds)
# ============================================================================

SAY_DURATION_DEFAULT = 3.0
MISSION_LINE_DURATION = 5.0
WARNING_DURATION = 4.0
HINT_DURATION = 4.0
FACT_DURATION = 6.0
GAME_OVER_DURATION = 5.0

# Utterances kept for history and for undrained readers
NARRATION_HISTORY_LIMIT = 200

# Chance per move of narrating a biome fact
FACT_CHANCE_DEFAULT = 0.15
FACT_FALLBACK_TOPIC = "general"


# ============================================================================
# Danger Score
# ============================================================================

DANGER_SPEED_STEPS = (0.5, 1.0)  # +1 per step exceeded
DANGER_STABILITY_POINTS = {'low': 2, 'medium': 1}
DANGER_DEPTH_STEPS = (4000.0, 6000.0)  # +1 per step exceeded
