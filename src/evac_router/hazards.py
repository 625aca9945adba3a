from typing import Dict, Optional, Set

import numpy as np

from .config import make_config
from .entities import Connection, Region
from .graph import NavigationGraph

# smoke set up


class HazardField:
    """
    Ground-truth hazard state of the building.

    Holds a smoke density in [0, 1] per region and the set of blocked
    connections. Sensors read it; only the simulation writes it.
    """

    def __init__(self, graph: NavigationGraph, config: Optional[Dict] = None,
                 seed: Optional[int] = None):
        self.graph = graph
        self.config = make_config(config)
        self.smoke: Dict[int, float] = {}
        self.blocked: Set[int] = set()
        self.spread_counter = 0
        self._rng = np.random.RandomState(seed)

    def seed(self, seed: Optional[int] = None) -> None:
        """Set random seed for deterministic spreading."""
        if seed is not None:
            self._rng = np.random.RandomState(seed)

    def reset(self) -> None:
        self.smoke.clear()
        self.blocked.clear()
        self.spread_counter = 0

    def ignite(self, region, density: Optional[float] = None) -> None:
        """
        Start smoke in a region.

        Args:
            region: Region or region index
            density: Initial smoke density (defaults to smoke_density_base)
        """
        idx = self._region_index(region)
        if density is None:
            density = self.config["smoke_density_base"]
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"Smoke density must be within [0, 1], got {density}")
        # take max to avoid reducing existing density
        self.smoke[idx] = max(self.smoke.get(idx, 0.0), density)

    def spread_smoke(self) -> int:
        """
        Spread smoke to neighbouring regions.

        Logic:
        1. Smoke only spreads every smoke_spread_delay calls
        2. Density grows in every smoky region, capped at 1.0
        3. Smoke crosses each unblocked connection with smoke_spread_prob

        Returns:
            Updated counter (0 if a spread cycle happened, otherwise incremented)
        """
        self.spread_counter += 1
        if self.spread_counter < self.config["smoke_spread_delay"]:
            return self.spread_counter
        self.spread_counter = 0

        base = self.config["smoke_density_base"]
        growth = self.config["smoke_density_growth"]
        prob = self.config["smoke_spread_prob"]

        # Iterate over a snapshot so newly reached regions wait for the next cycle
        sources = sorted(self.smoke)
        for idx in sources:
            self.smoke[idx] = min(1.0, self.smoke[idx] + growth)
            for conn in self.graph.outgoing_edges(idx):
                if conn.destination is None or conn.index in self.blocked:
                    continue
                if self._rng.random_sample() < prob:
                    current = self.smoke.get(conn.destination, 0.0)
                    self.smoke[conn.destination] = min(1.0, max(current, base))

        return self.spread_counter

    def smoke_density(self, region) -> float:
        return self.smoke.get(self._region_index(region), 0.0)

    def is_smoky(self, region) -> bool:
        return self.smoke_density(region) > 0.0

    def block(self, connection) -> None:
        self.blocked.add(self._connection_index(connection))

    def unblock(self, connection) -> None:
        self.blocked.discard(self._connection_index(connection))

    def is_blocked(self, connection) -> bool:
        return self._connection_index(connection) in self.blocked

    def _region_index(self, region) -> int:
        idx = region.index if isinstance(region, Region) else int(region)
        if not 0 <= idx < len(self.graph):
            raise ValueError(f"Region {idx} does not exist")
        return idx

    def _connection_index(self, connection) -> int:
        cid = connection.index if isinstance(connection, Connection) else int(connection)
        if not 0 <= cid < len(self.graph.connections):
            raise ValueError(f"Connection {cid} does not exist")
        return cid
