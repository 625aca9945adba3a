"""
Sensors that keep a pedestrian's cognitive map up to date.

Every sensor has a unique name and writes cost factors tagged with that
name into the agent's ledger. A sensor only ever overwrites its own
entries, and running it twice on the same state writes the same values,
so the order of sensors in a pipeline never changes the result.

Sensors look at the connections leaving the region the agent stands in:
the agent perceives every door of that region, whether or not its
cognitive map already holds them.
"""
import math
from typing import Dict, Iterable, List, Optional, Tuple

from .cognitive_map import CognitiveMap
from .config import make_config
from .entities import Pedestrian, Region
from .errors import InvalidFactor, RouterError
from .hazards import HazardField

SensorFailure = Tuple[str, Exception]


class Sensor:
    """Base class: subclasses implement observe()."""

    name = "Sensor"

    def __init__(self, config: Optional[Dict] = None):
        self.config = make_config(config)

    def observe(self, agent: Pedestrian, cognitive_map: CognitiveMap,
                time: float) -> Dict[int, float]:
        """
        Compute this sensor's factors without touching the ledger.

        Returns:
            Mapping connection index -> factor
        """
        raise NotImplementedError

    def execute(self, agent: Pedestrian, cognitive_map: CognitiveMap, time: float) -> int:
        """
        Observe, then commit the factors to the agent's ledger.

        Nothing is written if observe() raises or returns an invalid factor.

        Returns:
            Number of factors written
        """
        factors = self.observe(agent, cognitive_map, time)
        for factor in factors.values():
            if not math.isfinite(factor) or factor <= 0.0:
                raise InvalidFactor(self.name, factor)

        ledger = cognitive_map.underlying()
        for cid, factor in factors.items():
            ledger.set_factor(cid, self.name, factor)
        return len(factors)

    def current_region(self, agent: Pedestrian, cognitive_map: CognitiveMap) -> Region:
        return cognitive_map.graph.region_for(agent.position, floor=agent.floor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class RoomCategorySensor(Sensor):
    """
    Bias connections by the category of the region they lead into.

    A connection into a region of the same category, or out of the modelled
    space, gets 1.0. Otherwise the factor comes from category_factors
    (entrance 0.1, lobby 0.2, corridor/stair/floor 0.3, escalators,
    disused and unknown areas 5.0). Smaller factors are routed preferentially.
    """

    name = "RoomToFloorSensor"

    def observe(self, agent, cognitive_map, time):
        graph = cognitive_map.graph
        table = self.config["category_factors"]
        source = self.current_region(agent, cognitive_map)

        factors: Dict[int, float] = {}
        for conn in graph.outgoing_edges(source):
            if conn.destination is None:
                factors[conn.index] = 1.0
                continue
            dest = graph.region(conn.destination)
            if dest.category == source.category:
                factors[conn.index] = 1.0
            else:
                factors[conn.index] = table[dest.category]
        return factors


class SmokeSensor(Sensor):
    """Penalize connections into smoky regions: factor = 1 + scale * density."""

    name = "SmokeSensor"

    def __init__(self, hazards: HazardField, config: Optional[Dict] = None):
        super().__init__(config)
        self.hazards = hazards

    def observe(self, agent, cognitive_map, time):
        scale = self.config["smoke_factor_scale"]
        source = self.current_region(agent, cognitive_map)

        factors: Dict[int, float] = {}
        for conn in cognitive_map.graph.outgoing_edges(source):
            density = 0.0
            if conn.destination is not None:
                density = self.hazards.smoke_density(conn.destination)
            factors[conn.index] = 1.0 + scale * density
        return factors


class BlockedConnectionSensor(Sensor):
    """Give blocked doors of the current region a prohibitive (finite) factor."""

    name = "BlockedConnectionSensor"

    def __init__(self, hazards: HazardField, config: Optional[Dict] = None):
        super().__init__(config)
        self.hazards = hazards

    def observe(self, agent, cognitive_map, time):
        blocked_factor = self.config["blocked_factor"]
        source = self.current_region(agent, cognitive_map)
        return {
            conn.index: blocked_factor if self.hazards.is_blocked(conn) else 1.0
            for conn in cognitive_map.graph.outgoing_edges(source)
        }


class LastDestinationsSensor(Sensor):
    """Discourage turning back into regions the agent has just left."""

    name = "LastDestinationsSensor"

    def observe(self, agent, cognitive_map, time):
        penalty = self.config["last_destinations_factor"]
        memory = self.config["last_destinations_memory"]
        recent = set(list(agent.last_destinations)[-memory:]) if memory > 0 else set()
        source = self.current_region(agent, cognitive_map)

        factors: Dict[int, float] = {}
        for conn in cognitive_map.graph.outgoing_edges(source):
            factors[conn.index] = penalty if conn.destination in recent else 1.0
        return factors


class DiscoverDoorsSensor(Sensor):
    """Add the agent's current region and its doors to a partial cognitive map."""

    name = "DiscoverDoorsSensor"

    def observe(self, agent, cognitive_map, time):
        return {}

    def execute(self, agent, cognitive_map, time):
        cognitive_map.discover(self.current_region(agent, cognitive_map))
        return 0


class SensorPipeline:
    """
    Ordered set of uniquely named sensors run against one agent at a time.

    A sensor that fails with a RouterError contributes nothing for that
    agent and step; the remaining sensors still run and the failure is
    reported to the caller. InvalidFactor is a programming error and
    propagates.
    """

    def __init__(self, sensors: Optional[Iterable[Sensor]] = None, verbose: bool = False):
        self._sensors: List[Sensor] = []
        self.verbose = verbose
        for sensor in sensors or []:
            self.add(sensor)

    def add(self, sensor: Sensor) -> None:
        if sensor.name in self.names:
            raise ValueError(f"Sensor name {sensor.name} is already registered")
        self._sensors.append(sensor)

    def remove(self, name: str) -> Sensor:
        for i, sensor in enumerate(self._sensors):
            if sensor.name == name:
                return self._sensors.pop(i)
        raise KeyError(f"No sensor named {name}")

    def disable(self, name: str, cognitive_maps: Iterable[CognitiveMap]) -> Sensor:
        """Remove a sensor and clear its entries from the given maps."""
        sensor = self.remove(name)
        for cmap in cognitive_maps:
            cmap.underlying().clear_sensor(name)
        return sensor

    @property
    def names(self) -> List[str]:
        return [s.name for s in self._sensors]

    def run(self, agent: Pedestrian, cognitive_map: CognitiveMap,
            time: float) -> List[SensorFailure]:
        """
        Execute every sensor against the same agent/map/time snapshot.

        Returns:
            (sensor name, error) for each sensor that failed
        """
        failures: List[SensorFailure] = []
        for sensor in self._sensors:
            try:
                sensor.execute(agent, cognitive_map, time)
            except InvalidFactor:
                raise
            except RouterError as e:
                failures.append((sensor.name, e))
                if self.verbose:
                    print(f"[T={time}] Sensor {sensor.name} skipped for agent {agent.pid}: {e}")
        return failures

    def __iter__(self):
        return iter(self._sensors)

    def __len__(self) -> int:
        return len(self._sensors)


def default_pipeline(hazards: Optional[HazardField] = None,
                     config: Optional[Dict] = None) -> SensorPipeline:
    """
    Standard sensor set: discovery, room category, last destinations and,
    when a hazard field is given, smoke and blocked doors.
    """
    cfg = make_config(config)
    sensors: List[Sensor] = [
        DiscoverDoorsSensor(cfg),
        RoomCategorySensor(cfg),
        LastDestinationsSensor(cfg),
    ]
    if hazards is not None:
        sensors.append(SmokeSensor(hazards, cfg))
        sensors.append(BlockedConnectionSensor(hazards, cfg))
    return SensorPipeline(sensors, verbose=cfg["verbose"])
