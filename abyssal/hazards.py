"""
Hazard and predator damage resolution.

Both evaluators inspect the destination cell after every move and mutate
only the player's health. They report whether the hull reached zero;
the session decides what termination means and guarantees it happens
once.
"""

from dataclasses import dataclass
from typing import Optional

from .data_types import Cell, PlayerState
from .narrator import Narrator
from .constants import (
    LOW_HEALTH_THRESHOLD,
    PREDATOR_MIN_THREAT,
    PREDATOR_DAMAGE_MODERATE,
    PREDATOR_DAMAGE_SEVERE,
    HIGH_THREAT_LEVEL,
    HAZARD_BASE_DAMAGE,
    HAZARD_DAMAGE_PER_SEVERITY,
    WARNING_DURATION,
)

PREDATOR_CAUSE = "predator attack"
HAZARD_CAUSE = "hazard exposure"


@dataclass
class DamageReport:
    """Outcome of one evaluator for one move"""
    cause: str
    damage: int
    health_after: int

    @property
    def lethal(self) -> bool:
        return self.health_after <= 0


def predator_damage(cell: Optional[Cell]) -> int:
    """Damage for the worst threat in the cell: 2 -> 4, >= 3 -> 7, else 0"""
    if cell is None:
        return 0
    threat = cell.max_threat
    if threat < PREDATOR_MIN_THREAT:
        return 0
    if threat >= HIGH_THREAT_LEVEL:
        return PREDATOR_DAMAGE_SEVERE
    return PREDATOR_DAMAGE_MODERATE


def hazard_damage(cell: Optional[Cell]) -> int:
    """Combined hazard damage: base + per_severity * max severity (0 if none)"""
    if cell is None or not cell.hazards:
        return 0
    return HAZARD_BASE_DAMAGE + HAZARD_DAMAGE_PER_SEVERITY * cell.max_severity


def apply_damage(player: PlayerState, damage: int) -> int:
    """Subtract damage, flooring health at zero; returns new health"""
    player.health = max(0, player.health - damage)
    return player.health


def resolve_predators(cell: Optional[Cell], player: PlayerState,
                      narrator: Narrator) -> Optional[DamageReport]:
    """
    Apply predator damage for the destination cell.

    Returns:
        DamageReport, or None when no threat >= 2 is present
    """
    damage = predator_damage(cell)
    if damage == 0:
        return None

    health = apply_damage(player, damage)
    narrator.predator_warning()

    if 0 < health < LOW_HEALTH_THRESHOLD:
        narrator.say("Warning: Predator activity detected. Hull integrity below 30%.",
                     WARNING_DURATION)

    return DamageReport(cause=PREDATOR_CAUSE, damage=damage, health_after=health)


def resolve_hazards(cell: Optional[Cell], player: PlayerState,
                    narrator: Narrator) -> Optional[DamageReport]:
    """
    Warn about every hazard in the cell and apply one combined hit.

    Returns:
        DamageReport, or None when the cell has no hazards
    """
    if cell is None or not cell.hazards:
        return None

    for hazard in cell.hazards:
        narrator.hazard_warning(hazard.type or "Hazard")

    damage = hazard_damage(cell)
    health = apply_damage(player, damage)

    if 0 < health < LOW_HEALTH_THRESHOLD:
        narrator.say("Warning: Hull integrity below 30%. Exit hazard zone immediately.",
                     WARNING_DURATION)

    return DamageReport(cause=HAZARD_CAUSE, damage=damage, health_after=health)
