from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Set, Tuple

Point = Tuple[float, float]

# DATA CLASSES

@dataclass(frozen=True)
class Region:
    """
    One walkable sub-area of the building (a graph vertex).

    Attributes:
        index: Position in the graph's region arena
        rid: Region id from the building geometry
        category: Region category ('corridor', 'stair', 'lobby', ...)
        centroid: Polygon centroid, used as the region's target point
        area: Square meters
        floor: Floor number (for multi-story buildings)
    """
    index: int
    rid: str
    category: str
    centroid: Point
    area: float = 0.0
    floor: int = 0


@dataclass(frozen=True)
class Connection:
    """
    Directed connection between two regions (a graph edge).

    A connection whose destination is None leads outside the modelled space.
    """
    index: int                        # Position in the graph's connection arena
    source: int                       # Source region index
    destination: Optional[int]        # Destination region index, None for a dead link
    base_cost: float                  # Geometric traversal cost in meters
    crossing: Point                   # Midpoint of the shared boundary (the door)

    @property
    def is_dead(self) -> bool:
        return self.destination is None


@dataclass
class Pedestrian:
    """
    Agent state read by the sensors.

    Attributes:
        pid: Unique pedestrian ID
        position: Current (x, y) position
        floor: Floor the agent stands on (None = resolve on any floor)
        region: Index of the region the router last resolved for this agent
        hazard_flags: Hazards the agent is currently exposed to (e.g. 'smoke')
        last_destinations: Regions recently left, most recent last
        spawn_time: Simulation time at which the agent entered
    """
    pid: int
    position: Point
    floor: Optional[int] = None
    region: Optional[int] = None
    hazard_flags: Set[str] = field(default_factory=set)
    last_destinations: Deque[int] = field(default_factory=deque)
    spawn_time: float = 0.0

    @property
    def in_smoke(self) -> bool:
        return "smoke" in self.hazard_flags
