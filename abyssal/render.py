"""
Per-tile render attributes for an external renderer.

Consumes world + visibility + player state and produces plain data;
no drawing happens here. Undiscovered tiles expose nothing but their fog
state, and POI / predator markers are only shown while a tile is inside
the sonar circle.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .data_types import PlayerState
from .visibility import VisibilityGrid, UNKNOWN, VISIBLE
from .world import WorldGrid, has_predator

# Substring of the lower-case biome name -> render class, first match wins
BIOME_CLASSES = [
    ('plain', 'plain'),
    ('slope', 'slope'),
    ('seamount', 'seamount'),
    ('ridge', 'seamount'),
    ('trench', 'trench'),
    ('hydro', 'hydrothermal'),
]


def biome_class(biome: Optional[str]) -> Optional[str]:
    """Map a biome name onto a render class (None if unrecognised)"""
    if not biome:
        return None
    name = biome.lower()
    for needle, klass in BIOME_CLASSES:
        if needle in name:
            return klass
    return None


@dataclass
class TileView:
    """Render attributes of one grid position"""
    row: int
    col: int
    fog: str  # "unknown", "seen" or "visible"
    biome_class: Optional[str] = None
    hazard: bool = False
    poi: bool = False
    predator: bool = False
    player: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'row': self.row,
            'col': self.col,
            'fog': self.fog,
            'biome_class': self.biome_class,
            'hazard': self.hazard,
            'poi': self.poi,
            'predator': self.predator,
            'player': self.player,
        }


def tile_view(world: WorldGrid, visibility: VisibilityGrid,
              player: PlayerState, row: int, col: int) -> TileView:
    fog = visibility.status(row, col)
    if fog == UNKNOWN:
        return TileView(row=row, col=col, fog=fog)

    view = TileView(row=row, col=col, fog=fog, player=(row, col) == player.position)
    cell = world.get_cell(row, col)
    if cell is None:
        return view

    show_icons = fog == VISIBLE
    view.biome_class = biome_class(cell.biome)
    view.hazard = bool(cell.hazards)
    view.poi = show_icons and bool(cell.poi)
    view.predator = show_icons and has_predator(cell)
    return view


def build_tile_views(world: WorldGrid, visibility: VisibilityGrid,
                     player: PlayerState) -> List[List[TileView]]:
    """Render attributes for every tile, row-major"""
    return [
        [tile_view(world, visibility, player, r, c) for c in range(world.cols)]
        for r in range(world.rows)
    ]
