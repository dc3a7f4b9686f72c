"""
Headless walkthrough of the sample data pack.

Loads the world, selects a mission, drives a scripted route and prints
HUD lines plus narration as the session clock advances.

Usage:
    python scripts/run_headless.py [--mission 3] [--route down,down,right]
"""

import argparse
from pathlib import Path

from abyssal.session import ExplorationSession

DEFAULT_ROUTE = "down,down,down,down,right,right,right,down"


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--data-root', type=Path,
                        default=Path(__file__).parent.parent / "data")
    parser.add_argument('--mission', type=int, default=3)
    parser.add_argument('--route', default=DEFAULT_ROUTE,
                        help="comma-separated directions (up/down/left/right)")
    parser.add_argument('--step-seconds', type=float, default=2.0,
                        help="clock advance between moves")
    args = parser.parse_args()

    session = ExplorationSession.from_data_root(
        args.data_root, schema_dir=args.data_root / "schemas"
    )
    session.on_mission_event(lambda e: print(f"  [mission] {e.kind}: {e.mission.title}"))
    session.on_game_over(lambda cause: print(f"  [game over] {cause}"))

    session.select_mission(args.mission)

    for step in args.route.split(','):
        if not session.move_direction(step.strip()):
            print("Move refused: session is over")
            break
        session.advance(args.step_seconds)

        hud = session.hud()
        print(f"{step:>5} -> ({hud['row']:2d}, {hud['col']:2d}) "
              f"depth={hud['depth_m']} m pressure={hud['pressure_atm']} atm "
              f"hull={hud['health']}% mission={hud['mission_state']}")

        for line in session.narrator.drain():
            print(f"  [assistant] {line}")

    discovered = session.visibility.discovered_count()
    print(f"\nDiscovered {discovered} of {session.world.rows * session.world.cols} tiles "
          f"in {session.moves} moves")


if __name__ == '__main__':
    main()
