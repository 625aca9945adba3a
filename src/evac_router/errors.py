class RouterError(Exception):
    """Base class for faults raised by the routing core."""


class RegionNotFound(RouterError):
    """A position lies outside every known region."""

    def __init__(self, point):
        self.point = point
        super().__init__(f"No region contains point {point}")


class InvalidFactor(RouterError):
    """A sensor tried to write a non-positive or non-finite cost factor."""

    def __init__(self, sensor_name: str, factor: float):
        self.sensor_name = sensor_name
        self.factor = factor
        super().__init__(f"Sensor {sensor_name} wrote invalid factor {factor}")


class GraphBuildError(RouterError):
    """The building geometry could not be turned into a navigation graph."""


class UnknownAgent(RouterError):
    """No cognitive map is registered for this agent id."""


class NoPathKnown(Exception):
    """
    The target cannot be reached with the agent's current knowledge.

    Raised while an agent is still exploring; callers fall back to the
    frontier. Not a RouterError.
    """

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"No known path from region {source} to {target}")
