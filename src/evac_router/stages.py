from typing import List, Optional, Sequence

import numpy as np
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

from .entities import Pedestrian, Point


class Waypoint:
    """Reached once the agent is within distance of position."""

    def __init__(self, position: Point, distance: float):
        if distance < 0:
            raise ValueError(f"Waypoint distance must be >= 0, got {distance}")
        self.position = position
        self.distance = distance

    def is_completed(self, agent: Pedestrian) -> bool:
        dx = agent.position[0] - self.position[0]
        dy = agent.position[1] - self.position[1]
        return float(np.hypot(dx, dy)) <= self.distance

    def target(self) -> Point:
        return self.position


class Exit:
    """
    Reached once the agent stands inside the exit area.

    Agents that reach the exit are appended to to_remove so the simulation
    can take them out at the end of the step.
    """

    def __init__(self, area: Sequence[Point], to_remove: Optional[List[int]] = None):
        self.area = Polygon(area)
        if not self.area.is_valid or self.area.area <= 0.0:
            raise ValueError("Exit area must be a valid, non-empty polygon")
        self.to_remove: List[int] = to_remove if to_remove is not None else []

    def is_completed(self, agent: Pedestrian) -> bool:
        reached = self.area.covers(ShapelyPoint(agent.position))
        if reached:
            self.to_remove.append(agent.pid)
        return reached

    def target(self) -> Point:
        c = self.area.centroid
        return (c.x, c.y)
