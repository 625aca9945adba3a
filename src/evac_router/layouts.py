from typing import Optional

from .geometry import BuildingGeometry


def _box(x0: float, y0: float, x1: float, y1: float):
    return [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]


# Build the layout

def build_office_building(geometry: Optional[BuildingGeometry] = None, floor: int = 0,
                          prefix: str = "") -> BuildingGeometry:
    """
    Build the standard one-floor office layout:
    - Central corridor divided into 3 segments (H0-H2), 6m x 2m each
    - 3 offices on the top side and 3 on the bottom side of the corridor
    - Lobby at the left end of the corridor, entrance behind it with a
      door to the outside
    - Stair and up-escalator side by side at the right end of the corridor;
      on the ground floor the entrance and the stair have doors leading
      out of the modelled space

    Offices are inset by 0.5m so neighbouring offices do not share a wall
    and only open onto their corridor segment.

    Returns:
        The building geometry (regions declared in the order listed above)
    """
    g = geometry if geometry is not None else BuildingGeometry()
    p = prefix

    # Central corridor (3 segments)
    for i in range(3):
        g.add_region(f"{p}H{i}", _box(6 * i, 4, 6 * i + 6, 6), category="corridor", floor=floor)

    # Offices - top and bottom rows
    for i in range(3):
        g.add_region(f"{p}RT{i}", _box(6 * i + 0.5, 6, 6 * i + 5.5, 10), category="floor", floor=floor)
    for i in range(3):
        g.add_region(f"{p}RB{i}", _box(6 * i + 0.5, 0, 6 * i + 5.5, 4), category="floor", floor=floor)

    # Lobby and entrance at the left end
    g.add_region(f"{p}LOBBY", _box(-6, 2, 0, 8), category="lobby", floor=floor)
    g.add_region(f"{p}ENTRANCE", _box(-9, 3, -6, 7), category="entrance", floor=floor)
    if floor == 0:
        g.add_outside_door(f"{p}ENTRANCE", (-9.0, 5.0))

    # Stair and escalator at the right end
    g.add_region(f"{p}STAIR", _box(18, 5.1, 21, 6), category="stair", floor=floor)
    g.add_region(f"{p}ESCALATOR", _box(18, 4, 21, 4.9), category="escalator_up", floor=floor)
    if floor == 0:
        g.add_outside_door(f"{p}STAIR", (21.0, 5.55))

    return g


def build_two_floor_office() -> BuildingGeometry:
    """
    Two stacked offices (floor 0 ids unprefixed, floor 1 ids prefixed 'F1_').

    The stairs of both floors are linked by a portal, so people on the upper
    floor reach the ground-floor entrance through the stair.
    """
    g = build_office_building()
    build_office_building(g, floor=1, prefix="F1_")
    g.add_portal("STAIR", "F1_STAIR", point=(19.5, 5.55))
    return g
