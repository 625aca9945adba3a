from typing import Dict, List, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np

from .config import make_config
from .entities import Connection, Point, Region
from .errors import GraphBuildError, RegionNotFound
from .geometry import BuildingGeometry

RegionRef = Union[Region, int]


def _distance(a: Point, b: Point) -> float:
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))


class NavigationGraph:
    """
    Static topology of a building: regions are vertices, connections are
    directed edges.

    Regions and connections live in flat arenas and refer to each other by
    index. The networkx DiGraph holds the region-to-region topology and is
    frozen after construction; dead links (destination None) exist only in
    the connection arena.
    """

    def __init__(self, geometry: BuildingGeometry,
                 regions: Sequence[Region], connections: Sequence[Connection]):
        self.geometry = geometry
        self._regions: Tuple[Region, ...] = tuple(regions)
        self._connections: Tuple[Connection, ...] = tuple(connections)
        self._by_rid: Dict[str, Region] = {r.rid: r for r in self._regions}

        self._by_source: Dict[int, List[int]] = {r.index: [] for r in self._regions}
        G = nx.DiGraph()
        for region in self._regions:
            G.add_node(region.index, rid=region.rid, category=region.category)
        for conn in self._connections:
            self._by_source[conn.source].append(conn.index)
            if conn.destination is not None:
                G.add_edge(conn.source, conn.destination, cid=conn.index)
        self.G = nx.freeze(G)

        self._out_cache: Dict[int, Tuple[Connection, ...]] = {}

    @classmethod
    def build_from(cls, geometry: BuildingGeometry,
                   config: Optional[Dict] = None) -> "NavigationGraph":
        """
        Build the navigation graph of a building.

        One Region per geometry region (in declaration order) and one
        Connection per boundary, portal or outside door reported by the
        geometry. A second boundary between the same two regions is merged
        into the first.

        Raises:
            GraphBuildError: empty building or a connection to an unknown region
        """
        cfg = make_config(config)
        min_base_cost = cfg["min_base_cost"]

        rids = geometry.region_ids()
        if not rids:
            raise GraphBuildError("Building geometry has no regions")

        regions: List[Region] = []
        for i, rid in enumerate(rids):
            regions.append(Region(
                index=i,
                rid=rid,
                category=geometry.region_category(rid),
                centroid=geometry.centroid(rid),
                area=geometry.area(rid),
                floor=geometry.floor(rid),
            ))
        index_by_rid = {r.rid: r.index for r in regions}

        connections: List[Connection] = []
        seen = set()
        for region in regions:
            for _src, dest_rid, crossing in geometry.region_connections(region.rid):
                if dest_rid is None:
                    destination = None
                    cost = _distance(region.centroid, crossing)
                else:
                    if dest_rid not in index_by_rid:
                        raise GraphBuildError(f"Region {region.rid} connects to unknown region {dest_rid}")
                    destination = index_by_rid[dest_rid]
                    if (region.index, destination) in seen:
                        continue
                    seen.add((region.index, destination))
                    cost = (_distance(region.centroid, crossing)
                            + _distance(crossing, regions[destination].centroid))

                connections.append(Connection(
                    index=len(connections),
                    source=region.index,
                    destination=destination,
                    base_cost=max(cost, min_base_cost),
                    crossing=crossing,
                ))

        return cls(geometry, regions, connections)

    # lookups

    def region_for(self, point: Point, floor: Optional[int] = None) -> Region:
        """
        Region containing point.

        Raises:
            RegionNotFound: point lies outside all regions
        """
        rid = self.geometry.point_in_region(point, floor=floor)
        if rid is None or rid not in self._by_rid:
            raise RegionNotFound(point)
        return self._by_rid[rid]

    def outgoing_edges(self, region: RegionRef) -> Tuple[Connection, ...]:
        """Connections leaving a region, in declaration order."""
        idx = self.index_of(region)
        edges = self._out_cache.get(idx)
        if edges is None:
            edges = tuple(self._connections[cid] for cid in self._by_source[idx])
            self._out_cache[idx] = edges
        return edges

    def connection_between(self, a: RegionRef, b: RegionRef) -> Optional[Connection]:
        ia, ib = self.index_of(a), self.index_of(b)
        if not self.G.has_edge(ia, ib):
            return None
        return self._connections[self.G.edges[ia, ib]["cid"]]

    def region(self, index: int) -> Region:
        return self._regions[index]

    def region_by_id(self, rid: str) -> Region:
        if rid not in self._by_rid:
            raise KeyError(f"Region {rid} does not exist")
        return self._by_rid[rid]

    def connection(self, index: int) -> Connection:
        return self._connections[index]

    @property
    def regions(self) -> Tuple[Region, ...]:
        return self._regions

    @property
    def connections(self) -> Tuple[Connection, ...]:
        return self._connections

    def __len__(self) -> int:
        return len(self._regions)

    def index_of(self, region: RegionRef) -> int:
        idx = region.index if isinstance(region, Region) else int(region)
        if not 0 <= idx < len(self._regions):
            raise KeyError(f"Region index {idx} does not exist")
        return idx
