import math
from typing import Dict, Iterator, Optional, Tuple, Union

from .entities import Connection
from .errors import InvalidFactor

EdgeRef = Union[Connection, int]


class EdgeCostLedger:
    """
    Per-agent cost factors on top of the graph's base costs.

    The ledger is a sparse overlay: connection index -> {sensor name: factor}.
    A connection without entries weighs its base cost. The effective weight
    is base_cost * prod(factors), clamped into
    [min_weight, max_weight] so it stays strictly positive and finite.
    """

    def __init__(self, connections, min_weight: float = 1e-6, max_weight: float = 1e12):
        self._connections = connections
        self.min_weight = min_weight
        self.max_weight = max_weight
        self._entries: Dict[int, Dict[str, float]] = {}

    def set_factor(self, edge: EdgeRef, sensor_name: str, factor: float) -> None:
        """
        Record a sensor's factor on a connection, replacing its previous one.

        Raises:
            InvalidFactor: factor is not a finite number > 0
        """
        factor = float(factor)
        if not math.isfinite(factor) or factor <= 0.0:
            raise InvalidFactor(sensor_name, factor)
        self._entries.setdefault(self._cid(edge), {})[sensor_name] = factor

    def factor(self, edge: EdgeRef, sensor_name: str) -> Optional[float]:
        return self._entries.get(self._cid(edge), {}).get(sensor_name)

    def factors(self, edge: EdgeRef) -> Dict[str, float]:
        return dict(self._entries.get(self._cid(edge), {}))

    def effective_weight(self, edge: EdgeRef) -> float:
        cid = self._cid(edge)
        weight = self._connections[cid].base_cost
        for factor in self._entries.get(cid, {}).values():
            weight *= factor
        if not math.isfinite(weight) or weight > self.max_weight:
            return self.max_weight
        return max(weight, self.min_weight)

    def clear_sensor(self, sensor_name: str) -> int:
        """
        Drop every entry written by one sensor.

        Returns:
            Number of entries removed
        """
        removed = 0
        for cid in list(self._entries):
            factors = self._entries[cid]
            if factors.pop(sensor_name, None) is not None:
                removed += 1
            if not factors:
                del self._entries[cid]
        return removed

    def entries(self) -> Iterator[Tuple[int, str, float]]:
        for cid, factors in self._entries.items():
            for sensor_name, factor in factors.items():
                yield cid, sensor_name, factor

    def __len__(self) -> int:
        return sum(len(f) for f in self._entries.values())

    def _cid(self, edge: EdgeRef) -> int:
        cid = edge.index if isinstance(edge, Connection) else int(edge)
        if not 0 <= cid < len(self._connections):
            raise KeyError(f"Connection {cid} does not exist")
        return cid
