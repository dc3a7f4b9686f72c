"""
Test exploration sessions end to end: move pipeline, game over and
missions driven by player input, on small in-memory worlds and on the
sample data pack.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from abyssal.assembler import assemble_world
from abyssal.data_types import (
    GridMetadata, Mission, MissionNarration, MissionState, MissionType, SessionConfig
)
from abyssal.missions import FAILED
from abyssal.session import ExplorationSession

DATA_ROOT = Path(__file__).parent.parent.parent / "data"
GAME_OVER_LINE = "Hull integrity critical. Mission terminated."


def small_world(hazards=(), life=(), poi=(), currents=()):
    cells = [
        {'row': r, 'col': c, 'depth_m': 1000 + 500 * r, 'pressure_atm': 101 + 50 * r,
         'biome': 'Plain', 'temperature_c': 3.0}
        for r in range(10) for c in range(10)
    ]
    return assemble_world(GridMetadata(rows=10, cols=10), cells, hazards=hazards,
                          life=life, poi=poi, currents=currents)


def danger_world():
    return small_world(
        hazards=[{'row': 4, 'col': 5, 'type': 'Hydrothermal plume', 'severity': 3}],
        life=[{'row': 4, 'col': 5, 'species': 'Giant squid', 'threat_level': 3}],
    )


def timed_mission():
    return Mission(id=1, title="Deep Dive", description="", type=MissionType.REACH_DEPTH,
                   target_depth=9000.0, time_limit=30,
                   narration=MissionNarration(intro="Dive.", failure="Too slow."))


def make_session(world, missions=(), log=None, **config):
    config.setdefault('fact_chance', 0.0)
    lines = [] if log is None else log
    return ExplorationSession(world, list(missions), config=SessionConfig(**config),
                              log=lines.append)


def test_session_starts_at_grid_centre():
    lines = []
    session = make_session(small_world(), log=lines)

    assert session.player.position == (5, 5)
    assert session.visibility.is_visible(5, 5)
    assert session.visibility.is_visible(0, 5)
    assert not session.visibility.is_visible(0, 0)
    assert lines[0].startswith("[OK] Session initialized: 10x10 grid")


def test_start_position_must_be_in_bounds():
    with pytest.raises(ValueError):
        make_session(small_world(), start_row=10, start_col=0)


def test_unknown_direction():
    session = make_session(small_world())
    with pytest.raises(ValueError):
        session.move_direction("sideways")


def test_move_updates_position_and_sonar():
    session = make_session(small_world())
    assert session.move_direction("left")
    assert session.player.position == (5, 4)
    assert session.moves == 1
    assert session.visibility.is_visible(5, 0)
    assert session.visibility.is_visible(5, 9)
    # Seen from the start position only
    assert session.visibility.is_discovered(1, 8)
    assert not session.visibility.is_visible(1, 8)


def test_current_drifts_the_sub():
    world = small_world(currents=[{'row': 5, 'col': 5, 'u_mps': 0.9, 'v_mps': 0.0}])
    session = make_session(world)
    session.move_direction("up")
    assert session.player.position == (4, 6)


def test_hazard_and_predator_both_hit():
    session = make_session(danger_world())
    session.move_direction("up")

    assert session.player.health == 100 - 8 - 7
    assert session.player.hunger == 100
    assert session.narrator.lines() == [
        "Warning: Hydrothermal plume detected. Proceed with caution.",
        "Predator movement detected nearby.",
    ]
    assert not session.game_over


def test_game_over_fires_once():
    causes = []
    session = make_session(danger_world(), start_health=5)
    session.on_game_over(causes.append)

    assert session.move_direction("up")

    assert session.game_over
    assert session.player.health == 0
    assert causes == ["Hull integrity reached 0%. Mission failed (hazard exposure)."]
    assert session.game_over_cause == causes[0]
    assert session.narrator.lines().count(GAME_OVER_LINE) == 1

    # Terminal: further input is refused
    assert not session.move_direction("down")
    assert session.player.position == (4, 5)
    assert session.moves == 1
    assert not session.trigger_game_over("again")
    assert len(causes) == 1


def test_game_over_abandons_mission():
    events = []
    session = make_session(danger_world(), missions=[timed_mission()], start_health=5)
    session.on_mission_event(lambda e: events.append(e.kind))
    session.select_mission(1)

    session.move_direction("up")
    session.advance(60.0)

    assert session.missions.state is MissionState.INACTIVE
    assert FAILED not in events
    assert "Too slow." not in session.narrator.lines()
    assert session.select_mission(1) is None


def test_mission_completes_from_moves():
    mission = Mission(id=7, title="Beacon", description="", type=MissionType.REACH_POI,
                      narration=MissionNarration(success="Found it."))
    world = small_world(poi=[{'row': 5, 'col': 7, 'id': 'P-1'}])
    session = make_session(world, missions=[mission])
    session.select_mission(7)

    session.move_direction("right")
    assert session.missions.active
    session.move_direction("right")
    assert session.missions.state is MissionState.SUCCEEDED
    assert session.hud()['mission_state'] == 'succeeded'

    session.advance(3.0)
    assert session.missions.state is MissionState.INACTIVE


def test_mission_timer_runs_on_session_clock():
    session = make_session(small_world(), missions=[timed_mission()])
    session.select_mission(1)
    session.advance(10.0)
    assert session.hud()['time_remaining'] == 20.0

    session.advance(20.0)
    assert session.missions.state is MissionState.FAILED
    assert "Too slow." in session.narrator.lines()


def test_facts_follow_the_roll():
    facts = {'plain': ["Abyssal plains cover much of the ocean floor."], 'general': ["Deep."]}

    chatty = ExplorationSession(small_world(), [], config=SessionConfig(fact_chance=1.0),
                                facts=facts, log=lambda line: None)
    chatty.move_direction("down")
    assert chatty.narrator.lines() == ["Abyssal plains cover much of the ocean floor."]

    quiet = ExplorationSession(small_world(), [], config=SessionConfig(fact_chance=0.0),
                               facts=facts, log=lambda line: None)
    quiet.move_direction("down")
    assert quiet.narrator.lines() == []


def test_hud_and_tiles():
    session = make_session(small_world())
    hud = session.hud()
    assert hud['row'] == 5 and hud['col'] == 5
    assert hud['depth_m'] == 3500.0
    assert hud['cell']['biome'] == 'Plain'
    assert hud['mission'] is None
    assert hud['time_remaining'] is None

    tiles = session.tiles()
    assert len(tiles) == 10 and len(tiles[0]) == 10
    assert tiles[5][5].player
    assert tiles[0][0].fog == 'unknown'


# ============================================================================
# Sample data pack
# ============================================================================

def load_sample_session():
    lines = []
    session = ExplorationSession.from_data_root(DATA_ROOT, DATA_ROOT / "schemas", log=lines.append)
    return session, lines


def test_sample_pack_session():
    session, lines = load_sample_session()

    print(f"[OK] Sample session: start={session.player.position}")
    assert session.player.position == (6, 6)
    assert "  World assembled: 143 of 144 cells" in lines

    stats = session.stats
    assert stats.total_cells == 143
    assert stats.missing_cells == 1
    assert stats.depth_min == 1000.0
    assert stats.depth_max == 7050.0
    assert stats.predator_cells == 1
    assert stats.hazards_by_type == {
        'Unstable sediment': 1,
        'Methane seep': 1,
        'Hydrothermal plume': 1,
        'Crushing pressure': 1,
        'Cable debris': 1,
    }
    assert stats.biomes['Hydrothermal'] == 12
    assert session.world.get_cell(0, 11) is None


def test_sample_pack_current_drift():
    session, _ = load_sample_session()
    # Start cell carries an eastward current above threshold
    session.move_direction("up")
    assert session.player.position == (5, 7)


def test_sample_pack_hazard_zone():
    session, _ = load_sample_session()
    session.move_direction("right")
    session.move_direction("right")

    assert session.player.position == (6, 8)
    assert session.player.health == 92
    lines = session.narrator.lines()
    assert "Warning: Methane seep detected. Proceed with caution." in lines
    assert "Warning: Hydrothermal plume detected. Proceed with caution." in lines


def test_sample_pack_survey_mission():
    session, lines = load_sample_session()
    session.select_mission(2)

    for step in ["up", "left", "up", "left", "left", "down", "down"]:
        session.move_direction(step)

    print(f"[OK] Survey route ended at {session.player.position}")
    assert session.player.position == (6, 3)
    assert session.missions.state is MissionState.SUCCEEDED
    assert "Visited POIs: 3/3" in lines
    assert session.player.health == 100
