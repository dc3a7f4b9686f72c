"""
World assembly: base cells plus overlays keyed by (row, col).
"""

from abyssal.assembler import assemble_world
from abyssal.data_types import GridMetadata, CurrentVector
from abyssal.hazards import hazard_damage, predator_damage
from abyssal.records import parse_records


def base_cells(rows, cols, skip=()):
    return [
        {'row': r, 'col': c, 'depth_m': 1000 + 100 * r, 'pressure_atm': 101 + 10 * r,
         'biome': 'Plain', 'temperature_c': 4.0}
        for r in range(rows) for c in range(cols)
        if (r, c) not in skip
    ]


def test_cells_placed_by_coordinates():
    world = assemble_world(GridMetadata(rows=3, cols=4), base_cells(3, 4))
    assert len(world) == 12
    cell = world.get_cell(2, 3)
    assert cell.position == (2, 3)
    assert cell.depth_m == 1200.0
    assert cell.biome == 'Plain'


def test_out_of_bounds_and_missing_positions():
    cells = base_cells(3, 3, skip={(1, 1)}) + [{'row': 7, 'col': 0, 'depth_m': 1}]
    world = assemble_world(GridMetadata(rows=3, cols=3), cells)

    assert len(world) == 8
    assert world.get_cell(1, 1) is None
    assert world.get_cell(7, 0) is None
    assert world.get_cell(-1, 0) is None


def test_overlays_append_in_record_order():
    hazards = [
        {'row': 0, 'col': 0, 'type': 'Methane seep', 'severity': 1},
        {'row': 0, 'col': 0, 'type': 'Hydrothermal plume', 'severity': 3},
    ]
    life = [
        {'row': 1, 'col': 1, 'species': 'Giant squid', 'threat_level': 3},
        {'row': 1, 'col': 1, 'species': 'Lanternfish', 'threat_level': 0},
    ]
    poi = [{'row': 2, 'col': 0, 'id': 'P-1', 'label': 'Beacon'}]
    resources = [{'row': 2, 'col': 2, 'type': 'Manganese nodules', 'abundance': 0.4}]

    world = assemble_world(GridMetadata(rows=3, cols=3), base_cells(3, 3),
                           hazards=hazards, poi=poi, resources=resources, life=life)

    assert [h.type for h in world.get_cell(0, 0).hazards] == ['Methane seep', 'Hydrothermal plume']
    assert world.get_cell(0, 0).max_severity == 3
    assert [l.species for l in world.get_cell(1, 1).life] == ['Giant squid', 'Lanternfish']
    assert world.get_cell(1, 1).max_threat == 3
    assert world.get_cell(2, 0).poi[0].label == 'Beacon'
    assert world.get_cell(2, 2).resources[0].abundance == 0.4
    assert world.get_cell(0, 1).hazards == []


def test_overlay_rows_for_missing_cells_are_dropped():
    hazards = [
        {'row': 1, 'col': 1, 'type': 'Rockfall', 'severity': 2},
        {'row': 9, 'col': 9, 'type': 'Phantom', 'severity': 5},
        {'row': 'x', 'col': 0, 'type': 'Garbage', 'severity': 1},
        {'row': 0.5, 'col': 0, 'type': 'Fraction', 'severity': 1},
    ]
    world = assemble_world(GridMetadata(rows=3, cols=3), base_cells(3, 3, skip={(1, 1)}),
                           hazards=hazards)
    assert sum(len(c.hazards) for c in world.iter_cells()) == 0


def test_hazard_and_threat_defaults():
    hazards = [
        {'row': 0, 'col': 0, 'type': 'Unknown vent', 'severity': ''},
        {'row': 0, 'col': 1, 'type': 'Odd reading', 'severity': 0},
        {'row': 0, 'col': 3, 'type': 'Half vent', 'severity': 1.5},
    ]
    life = [
        {'row': 0, 'col': 2, 'species': 'Jelly', 'threat_level': ''},
        {'row': 0, 'col': 3, 'species': 'Viperfish', 'threat_level': 2.9},
    ]
    world = assemble_world(GridMetadata(rows=1, cols=4), base_cells(1, 4),
                           hazards=hazards, life=life)

    assert world.get_cell(0, 0).hazards[0].severity == 1
    assert world.get_cell(0, 1).hazards[0].severity == 1
    assert world.get_cell(0, 2).life[0].threat_level == 0

    # Fractional ratings are invalid, not rounded into another tier
    cell = world.get_cell(0, 3)
    assert cell.hazards[0].severity == 1
    assert cell.life[0].threat_level == 0
    assert predator_damage(cell) == 0
    assert hazard_damage(cell) == 4


def test_currents_default_and_replace():
    currents = [
        {'row': 0, 'col': 0, 'u_mps': 0.3, 'v_mps': 0.1, 'speed_mps': 0.32,
         'stability': 'high', 'flow_direction': 'E'},
        {'row': 0, 'col': 0, 'u_mps': -0.9, 'v_mps': '', 'speed_mps': '',
         'stability': '', 'flow_direction': ''},
    ]
    world = assemble_world(GridMetadata(rows=1, cols=2), base_cells(1, 2), currents=currents)

    assert world.get_cell(0, 1).current == CurrentVector()
    replaced = world.get_cell(0, 0).current
    assert replaced.u_mps == -0.9
    assert replaced.v_mps == 0.0
    assert replaced.speed_mps == 0.0
    assert replaced.stability == 'unknown'
    assert replaced.flow_direction == 'none'


def test_last_coral_record_wins():
    corals = [
        {'row': 0, 'col': 0, 'coral_cover_pct': 10, 'health_index': 0.5},
        {'row': 0, 'col': 0, 'coral_cover_pct': 35, 'health_index': 0.8},
    ]
    world = assemble_world(GridMetadata(rows=1, cols=1), base_cells(1, 1), corals=corals)
    assert world.get_cell(0, 0).coral.coral_cover_pct == 35.0


def test_non_numeric_measurements_become_none():
    cells = parse_records("row,col,depth_m,temperature_c,biome\n0,0,deep,NaN,\n")
    world = assemble_world(GridMetadata(rows=1, cols=1), cells)
    cell = world.get_cell(0, 0)
    assert cell.depth_m is None
    assert cell.temperature_c is None
    assert cell.biome is None
