from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon
from shapely.strtree import STRtree

from .config import REGION_CATEGORIES
from .entities import Point

# (source rid, destination rid or None, crossing point)
RawConnection = Tuple[str, Optional[str], Point]

# Shared boundaries shorter than this are corner contacts, not doors
MIN_SHARED_BOUNDARY = 1e-6


class BuildingGeometry:
    """
    Read-only spatial index over the walkable regions of a building.

    Regions are shapely polygons tagged with a category and a floor. Two
    regions on the same floor are connected when their polygons share a
    boundary segment; portals connect regions explicitly (stairs between
    floors), and outside doors lead out of the modelled space.
    """

    def __init__(self) -> None:
        self._polygons: Dict[str, Polygon] = {}
        self._categories: Dict[str, str] = {}
        self._floors: Dict[str, int] = {}
        self._portals: Dict[str, List[Tuple[str, Point]]] = {}
        self._outside_doors: Dict[str, List[Point]] = {}
        self._tree: Optional[STRtree] = None
        self._tree_ids: List[str] = []

    # construct building

    def add_region(self, rid: str, coords: Sequence[Point],
                   category: str = "floor", floor: int = 0) -> None:
        """
        Add a walkable region.

        Args:
            rid: Region ID (unique string identifier)
            coords: Polygon outline as a sequence of (x, y) points
            category: One of REGION_CATEGORIES
            floor: Floor number
        """
        if rid in self._polygons:
            raise ValueError(f"Region {rid} already exists")
        if category not in REGION_CATEGORIES:
            raise ValueError(f"Invalid region category: {category}. Must be one of {list(REGION_CATEGORIES.keys())}")

        polygon = Polygon(coords)
        if not polygon.is_valid or polygon.area <= 0.0:
            raise ValueError(f"Region {rid} has an invalid or empty outline")

        for other_id, other in self._polygons.items():
            if self._floors[other_id] == floor and polygon.intersection(other).area > MIN_SHARED_BOUNDARY:
                raise ValueError(f"Region {rid} overlaps region {other_id}")

        self._polygons[rid] = polygon
        self._categories[rid] = category
        self._floors[rid] = floor
        self._tree = None

    def add_portal(self, a: str, b: str, point: Optional[Point] = None) -> None:
        """Connect two regions that do not share a boundary (e.g. stair landings on different floors)."""
        for rid in (a, b):
            if rid not in self._polygons:
                raise ValueError(f"Region {rid} does not exist")
        if point is None:
            point = self.centroid(b)
        self._portals.setdefault(a, []).append((b, point))
        self._portals.setdefault(b, []).append((a, point))

    def add_outside_door(self, rid: str, point: Point) -> None:
        """Declare a door from region rid to the outside of the modelled space."""
        if rid not in self._polygons:
            raise ValueError(f"Region {rid} does not exist")
        self._outside_doors.setdefault(rid, []).append(point)

    # queries

    def region_ids(self) -> List[str]:
        return list(self._polygons.keys())

    def point_in_region(self, point: Point, floor: Optional[int] = None) -> Optional[str]:
        """
        Return the id of the region covering point, or None.

        Points on a shared boundary belong to the region declared first.
        When floor is given only regions on that floor are considered.
        """
        if not self._polygons:
            return None
        tree = self._index()
        hits = sorted(int(i) for i in tree.query(ShapelyPoint(point), predicate="covered_by"))
        for idx in hits:
            rid = self._tree_ids[idx]
            if floor is None or self._floors[rid] == floor:
                return rid
        return None

    def region_connections(self, rid: str) -> List[RawConnection]:
        """
        Connections leaving region rid, in a stable order.

        Boundary neighbours come first (in declaration order), then portals,
        then doors to the outside.
        """
        polygon = self._polygon(rid)
        tree = self._index()
        connections: List[RawConnection] = []

        for idx in sorted(int(i) for i in tree.query(polygon)):
            other_id = self._tree_ids[idx]
            if other_id == rid or self._floors[other_id] != self._floors[rid]:
                continue
            shared = polygon.boundary.intersection(self._polygons[other_id].boundary)
            if shared.length <= MIN_SHARED_BOUNDARY:
                continue
            crossing = shared.centroid
            connections.append((rid, other_id, (crossing.x, crossing.y)))

        for other_id, point in self._portals.get(rid, []):
            connections.append((rid, other_id, point))

        for point in self._outside_doors.get(rid, []):
            connections.append((rid, None, point))

        return connections

    def region_category(self, rid: str) -> str:
        self._polygon(rid)
        return self._categories[rid]

    def floor(self, rid: str) -> int:
        self._polygon(rid)
        return self._floors[rid]

    def centroid(self, rid: str) -> Point:
        c = self._polygon(rid).centroid
        return (c.x, c.y)

    def area(self, rid: str) -> float:
        return float(self._polygon(rid).area)

    def outline(self, rid: str) -> List[Point]:
        return [(x, y) for x, y in self._polygon(rid).exterior.coords]

    def __len__(self) -> int:
        return len(self._polygons)

    def __iter__(self) -> Iterable[str]:
        return iter(self._polygons)

    # helpers

    def _polygon(self, rid: str) -> Polygon:
        if rid not in self._polygons:
            raise KeyError(f"Region {rid} does not exist")
        return self._polygons[rid]

    def _index(self) -> STRtree:
        if self._tree is None:
            self._tree_ids = list(self._polygons.keys())
            self._tree = STRtree([self._polygons[rid] for rid in self._tree_ids])
        return self._tree
