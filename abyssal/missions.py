"""
Mission state machine.

    INACTIVE -> ACTIVE -> SUCCEEDED | FAILED -> (display delay) -> INACTIVE

Progress is evaluated against the destination cell after every move; the
countdown ticks once per second on the session scheduler. Both feed the
same completion transition, which is idempotent. Countdown ticks carry
the run they were scheduled for and ignore themselves once that run is
no longer the active one.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .data_types import Cell, Mission, MissionRun, MissionState, MissionType
from .narrator import Narrator
from .scheduler import Scheduler, ScheduledTask
from .constants import (
    MISSION_TICK_SECONDS,
    COMPLETION_DISPLAY_SECONDS,
    MULTI_POI_TARGET_DEFAULT,
    VISIT_HAZARDS_TARGET_DEFAULT,
    REACH_DEPTH_TARGET_DEFAULT,
    REACH_PRESSURE_TARGET_DEFAULT,
)

STARTED = "started"
SUCCEEDED = "succeeded"
FAILED = "failed"
ABANDONED = "abandoned"
CLEARED = "cleared"


@dataclass
class MissionEvent:
    """Lifecycle notification for mission-status displays"""
    kind: str
    mission: Mission
    narration: str = ""


class MissionRunner:
    """
    Owns the active MissionRun and its timers.

    Attributes:
        missions: Mission catalogue keyed by id (definition order kept)
        run: Active or just-finished run, None when inactive
    """

    def __init__(
        self,
        missions: List[Mission],
        scheduler: Scheduler,
        narrator: Narrator,
        display_seconds: float = COMPLETION_DISPLAY_SECONDS,
        log: Callable[[str], None] = print
    ):
        self.missions: Dict[int, Mission] = {m.id: m for m in missions}
        self.run: Optional[MissionRun] = None
        self._scheduler = scheduler
        self._narrator = narrator
        self._display_seconds = display_seconds
        self._log = log
        self._timer: Optional[ScheduledTask] = None
        self._display_task: Optional[ScheduledTask] = None
        self._listeners: List[Callable[[MissionEvent], None]] = []

    @property
    def state(self) -> MissionState:
        if self.run is None:
            return MissionState.INACTIVE
        return self.run.state

    @property
    def active(self) -> bool:
        return self.state is MissionState.ACTIVE

    def add_listener(self, listener: Callable[[MissionEvent], None]):
        self._listeners.append(listener)

    def _emit(self, kind: str, mission: Mission, narration: str = ""):
        event = MissionEvent(kind=kind, mission=mission, narration=narration)
        for listener in self._listeners:
            listener(event)

    def _cancel_tasks(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._display_task is not None:
            self._display_task.cancel()
            self._display_task = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def select(self, mission_id: int) -> Optional[MissionRun]:
        """
        Start a mission by id.

        An active run is cancelled and replaced; a finished run still on
        display is cleared first.

        Returns:
            The new MissionRun, or None if the id is unknown
        """
        mission = self.missions.get(mission_id)
        if mission is None:
            self._log(f"[WARN] Mission {mission_id} not found, ignoring selection")
            return None

        if self.run is not None:
            if self.active:
                self._log(f"[WARN] Replacing active mission: {self.run.mission.title}")
                self.abandon()
            else:
                self._clear(self.run)

        run = MissionRun(mission=mission, time_remaining=float(mission.time_limit))
        self.run = run
        self._narrator.mission_start(mission)

        if mission.time_limit > 0:
            self._timer = self._scheduler.call_every(
                MISSION_TICK_SECONDS, lambda: self._tick(run), name=f"mission-{mission.id}"
            )

        self._emit(STARTED, mission, mission.narration.intro)
        self._log(f"Mission started: {mission.title}")
        return run

    def _tick(self, run: MissionRun):
        if run is not self.run or run.state is not MissionState.ACTIVE:
            return

        run.time_remaining -= MISSION_TICK_SECONDS
        run.elapsed += MISSION_TICK_SECONDS
        if run.time_remaining <= 0:
            self.complete(False)

    def complete(self, success: bool) -> bool:
        """
        Finish the active run.

        Returns:
            False when there was no active run (no-op)
        """
        run = self.run
        if run is None or run.state is not MissionState.ACTIVE:
            return False

        self._cancel_tasks()
        mission = run.mission

        if success:
            run.state = MissionState.SUCCEEDED
            self._narrator.mission_success(mission)
            self._emit(SUCCEEDED, mission, mission.narration.success)
        else:
            run.state = MissionState.FAILED
            self._narrator.mission_failure(mission)
            self._emit(FAILED, mission, mission.narration.failure)

        self._log(f"Mission {'success' if success else 'failed'}: {mission.title}")

        self._display_task = self._scheduler.call_later(
            self._display_seconds, lambda: self._clear(run), name="mission-display"
        )
        return True

    def _clear(self, run: MissionRun):
        if run is not self.run:
            return
        self._cancel_tasks()
        self.run = None
        self._emit(CLEARED, run.mission)

    def abandon(self):
        """Discard the current run without narration"""
        run = self.run
        if run is None:
            return
        self._cancel_tasks()
        self.run = None
        if run.state is MissionState.ACTIVE:
            self._emit(ABANDONED, run.mission)
            self._log(f"Mission abandoned: {run.mission.title}")

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def check_progress(self, cell: Optional[Cell], position: Tuple[int, int]) -> bool:
        """
        Evaluate the active mission against the destination cell.

        Args:
            cell: Cell the sub just arrived in (None for a missing cell)
            position: (row, col) of that cell

        Returns:
            True if this check completed the mission
        """
        run = self.run
        if run is None or run.state is not MissionState.ACTIVE or cell is None:
            return False

        mission = run.mission
        mission_type = mission.type

        if mission_type is MissionType.REACH_POI:
            if cell.poi:
                return self.complete(True)

        elif mission_type is MissionType.MULTI_POI:
            required = mission.target_count or MULTI_POI_TARGET_DEFAULT
            if cell.poi and position not in run.visited_pois:
                run.visited_pois.add(position)
                self._log(f"Visited POIs: {len(run.visited_pois)}/{required}")
                if len(run.visited_pois) >= required:
                    return self.complete(True)

        elif mission_type is MissionType.REACH_DEPTH:
            target = mission.target_depth or REACH_DEPTH_TARGET_DEFAULT
            if cell.depth_m is not None and cell.depth_m >= target:
                return self.complete(True)

        elif mission_type is MissionType.REACH_PRESSURE:
            target = mission.target_pressure or REACH_PRESSURE_TARGET_DEFAULT
            if cell.pressure_atm is not None and cell.pressure_atm >= target:
                return self.complete(True)

        elif mission_type is MissionType.VISIT_HAZARDS:
            required = mission.target_count or VISIT_HAZARDS_TARGET_DEFAULT
            if cell.hazards and position not in run.visited_hazards:
                run.visited_hazards.add(position)
                self._log(f"Visited hazards: {len(run.visited_hazards)}/{required}")
                if len(run.visited_hazards) >= required:
                    return self.complete(True)

        return False

    def hint(self):
        """Narrate the current mission's hint"""
        if self.run is None:
            self._narrator.say("No mission active.")
            return

        hint = self.run.mission.narration.hint
        if hint:
            self._narrator.hint(hint)
        else:
            self._narrator.say("No hint available for this mission.")
