"""
Exploration session controller.

Owns the mutable session state (player, visibility, mission runner,
narrator, clock) and services player input. The world grid is built once
and only read afterwards.

A move is atomic: movement, sonar, hazard and predator damage, the biome
fact roll and mission progress all run synchronously before control
returns. Timed behaviour only happens inside ``advance``.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .data_types import Cell, Mission, PlayerState, SessionConfig, WorldStats
from .world import WorldGrid, compute_world_stats, summarize_cell
from .loader import load_all_data
from .assembler import assemble_from_sources
from .visibility import VisibilityGrid
from .movement import DIRECTIONS, resolve_move
from .hazards import DamageReport, resolve_hazards, resolve_predators
from .missions import MissionEvent, MissionRunner
from .narrator import Narrator
from .scheduler import Scheduler
from .rng import FactPicker, make_generator
from .render import TileView, build_tile_views
from .constants import GAME_OVER_DURATION


class ExplorationSession:
    """
    Single-player exploration session over an assembled world.

    Attributes:
        world: Assembled grid (read-only after construction)
        stats: Aggregates computed once at start
        player: Mutable player state
        visibility: Sonar flags
        scheduler: Virtual clock for all timers
        narrator: Assistant message queue
        missions: Mission state machine
        game_over: True once the hull has reached zero
        game_over_cause: Human-readable cause, set with game_over
    """

    def __init__(
        self,
        world: WorldGrid,
        missions: List[Mission],
        config: Optional[SessionConfig] = None,
        facts: Optional[Dict[str, List[str]]] = None,
        log: Callable[[str], None] = print
    ):
        """
        Args:
            world: Assembled world grid
            missions: Mission catalogue
            config: Session tunables (defaults if None)
            facts: Biome facts for narration (topic -> lines)
            log: Sink for progress lines
        """
        self.config = config or SessionConfig()
        self.world = world
        self._log = log

        self.stats: WorldStats = compute_world_stats(world)

        self.scheduler = Scheduler()
        self.narrator = Narrator(self.scheduler)
        self.missions = MissionRunner(
            missions,
            self.scheduler,
            self.narrator,
            display_seconds=self.config.completion_display_seconds,
            log=log,
        )
        self.facts = FactPicker(
            facts or {},
            self.config.fact_chance,
            make_generator(self.config.seed, "facts"),
        )

        start_row = self.config.start_row if self.config.start_row is not None else world.rows // 2
        start_col = self.config.start_col if self.config.start_col is not None else world.cols // 2
        if not world.in_bounds(start_row, start_col):
            raise ValueError(f"Start position ({start_row}, {start_col}) is outside the grid")

        self.player = PlayerState(
            row=start_row,
            col=start_col,
            health=self.config.start_health,
            hunger=self.config.start_hunger,
        )

        self.game_over = False
        self.game_over_cause: Optional[str] = None
        self._game_over_listeners: List[Callable[[str], None]] = []
        self.moves = 0

        # First sonar ping
        self.visibility = VisibilityGrid(world.rows, world.cols, self.config.sonar_radius)
        self.visibility.reset(self.player.position)

        log(f"[OK] Session initialized: {world.rows}x{world.cols} grid, "
            f"{self.stats.total_cells} cells, {len(self.missions.missions)} missions, "
            f"start=({start_row}, {start_col})")

    @classmethod
    def from_data_root(
        cls,
        data_root: Path,
        schema_dir: Optional[Path] = None,
        log: Callable[[str], None] = print
    ) -> 'ExplorationSession':
        """
        Load a data pack and start a session.

        Raises:
            DataLoadError: If any source is missing or invalid
        """
        log("Loading abyssal world...")
        data = load_all_data(data_root, schema_dir)
        world = assemble_from_sources(data['metadata'], data['sources'])
        log(f"  World assembled: {len(world)} of {world.rows * world.cols} cells")
        return cls(world, data['missions'], config=data['config'], facts=data['facts'], log=log)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_cell(self) -> Optional[Cell]:
        return self.world.get_cell(*self.player.position)

    def hud(self) -> Dict[str, Any]:
        """Values for the HUD (formatting is the display's job)"""
        cell = self.current_cell
        run = self.missions.run
        return {
            'row': self.player.row,
            'col': self.player.col,
            'health': self.player.health,
            'hunger': self.player.hunger,
            'depth_m': cell.depth_m if cell else None,
            'pressure_atm': cell.pressure_atm if cell else None,
            'temperature_c': cell.temperature_c if cell else None,
            'cell': summarize_cell(cell) if cell else None,
            'mission': run.mission.title if run else None,
            'mission_state': self.missions.state.value,
            'time_remaining': run.time_remaining if run and run.mission.time_limit else None,
            'game_over': self.game_over,
        }

    def tiles(self) -> List[List[TileView]]:
        return build_tile_views(self.world, self.visibility, self.player)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on_mission_event(self, listener: Callable[[MissionEvent], None]):
        self.missions.add_listener(listener)

    def on_game_over(self, listener: Callable[[str], None]):
        self._game_over_listeners.append(listener)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def move_direction(self, name: str) -> bool:
        """Move by direction name: up, down, left or right"""
        try:
            d_row, d_col = DIRECTIONS[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name!r}") from None
        return self.move(d_row, d_col)

    def move(self, d_row: int, d_col: int) -> bool:
        """
        Apply one player move and all of its consequences.

        Returns:
            False when the move was refused (game over)
        """
        if self.game_over:
            return False

        departed = self.current_cell
        new_row, new_col = resolve_move(
            self.player.position,
            (d_row, d_col),
            departed,
            self.world.rows,
            self.world.cols,
            self.config.current_threshold,
        )
        self.player.row = new_row
        self.player.col = new_col
        self.moves += 1

        self.visibility.reset(self.player.position)
        cell = self.world.get_cell(new_row, new_col)

        for report in (
            resolve_hazards(cell, self.player, self.narrator),
            resolve_predators(cell, self.player, self.narrator),
        ):
            self._check_lethal(report)

        if cell is not None:
            fact = self.facts.roll(cell.biome)
            if fact:
                self.narrator.fact(fact)

        self.missions.check_progress(cell, (new_row, new_col))
        return True

    def _check_lethal(self, report: Optional[DamageReport]):
        if report is not None and report.lethal:
            self.trigger_game_over(report.cause)

    def trigger_game_over(self, source: str = "unknown") -> bool:
        """
        Enter the terminal state; repeated triggers are no-ops.

        Returns:
            True only for the trigger that ended the game
        """
        if self.game_over:
            return False

        self.game_over = True
        self.game_over_cause = f"Hull integrity reached 0%. Mission failed ({source})."
        self.missions.abandon()
        self.narrator.say("Hull integrity critical. Mission terminated.", GAME_OVER_DURATION)

        for listener in self._game_over_listeners:
            listener(self.game_over_cause)

        self._log(f"GAME OVER triggered by: {source}")
        return True

    def select_mission(self, mission_id: int):
        """Start a mission by id (ignored after game over)"""
        if self.game_over:
            return None
        return self.missions.select(mission_id)

    def request_hint(self):
        self.missions.hint()

    def advance(self, seconds: float) -> int:
        """Advance the session clock, firing timers that come due"""
        return self.scheduler.advance(seconds)
