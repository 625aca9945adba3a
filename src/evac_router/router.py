from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Tuple, Union

from .cognitive_map import CognitiveMap
from .config import make_config
from .entities import Pedestrian, Point, Region
from .errors import NoPathKnown, RegionNotFound, UnknownAgent
from .graph import NavigationGraph
from .graphutils import next_hop as _next_hop
from .graphutils import weighted_distances
from .hazards import HazardField
from .sensors import SensorFailure, SensorPipeline, default_pipeline

Hop = Union[Region, Point]


class HazardRouter:
    """
    Per-pedestrian routing over a shared navigation graph.

    The router owns one CognitiveMap per registered pedestrian. Each
    simulation step the orchestrator calls:

      1. update_position() for agents that moved (discovers new regions)
      2. step() to run the sensor pipeline over every agent
      3. next_hop() per agent to get the region (or point) to walk to

    The graph and hazard field are shared and never written here; each
    cognitive map is only touched on behalf of its own agent.
    """

    def __init__(self, graph: NavigationGraph,
                 pipeline: Optional[SensorPipeline] = None,
                 hazards: Optional[HazardField] = None,
                 config: Optional[Dict] = None):
        self.config = make_config(config)
        self.graph = graph
        self.hazards = hazards
        self.pipeline = pipeline if pipeline is not None else default_pipeline(hazards, self.config)
        self.verbose = self.config["verbose"]

        self.agents: Dict[int, Pedestrian] = {}
        self.maps: Dict[int, CognitiveMap] = {}

    # registration

    def add_agent(self, agent: Pedestrian, full_knowledge: Optional[bool] = None) -> CognitiveMap:
        """
        Register a pedestrian and create its cognitive map.

        Raises:
            ValueError: pid already registered
            RegionNotFound: the spawn position is outside the building
        """
        if agent.pid in self.agents:
            raise ValueError(f"Agent {agent.pid} is already registered")
        if full_knowledge is None:
            full_knowledge = self.config["full_knowledge"]

        region = self.graph.region_for(agent.position, floor=agent.floor)
        cmap = CognitiveMap(self.graph, full_knowledge=full_knowledge, config=self.config)
        cmap.discover(region)

        agent.region = region.index
        agent.last_destinations = deque(
            agent.last_destinations, maxlen=max(1, self.config["last_destinations_memory"])
        )
        self._update_hazard_flags(agent, region)

        self.agents[agent.pid] = agent
        self.maps[agent.pid] = cmap
        return cmap

    def remove_agent(self, pid: int) -> Pedestrian:
        """Drop an agent together with its cognitive map."""
        if pid not in self.agents:
            raise UnknownAgent(f"Agent {pid} is not registered")
        del self.maps[pid]
        return self.agents.pop(pid)

    def cognitive_map(self, pid: int) -> CognitiveMap:
        if pid not in self.maps:
            raise UnknownAgent(f"Agent {pid} is not registered")
        return self.maps[pid]

    def update_position(self, pid: int, position: Point, floor: Optional[int] = None) -> Region:
        """
        Move an agent and keep its cognitive map current.

        On a region change the region just left is remembered as a last
        destination and the new region is discovered.

        Raises:
            RegionNotFound: position is outside the building (agent state unchanged)
        """
        agent = self._agent(pid)
        region = self.graph.region_for(position, floor=agent.floor if floor is None else floor)

        agent.position = position
        if floor is not None:
            agent.floor = floor
        if agent.region != region.index:
            if agent.region is not None:
                agent.last_destinations.append(agent.region)
            agent.region = region.index
            self.maps[pid].discover(region)
        self._update_hazard_flags(agent, region)
        return region

    # per-step work

    def step(self, time: float) -> Dict[int, List[SensorFailure]]:
        """
        Run the sensor pipeline over every registered agent.

        Returns:
            pid -> failed sensors, only for agents with failures
        """
        failures: Dict[int, List[SensorFailure]] = {}
        for pid, agent in self.agents.items():
            errors = self.pipeline.run(agent, self.maps[pid], time)
            if errors:
                failures[pid] = errors
        return failures

    def next_hop(self, pid: int, target, time: Optional[float] = None) -> Hop:
        """
        Next region (or final point) for one agent.

        Args:
            pid: Agent id
            target: Region, region index, region id, or a stage with target()
            time: Current simulation time (used for log messages)

        Raises:
            NoPathKnown: the agent should fall back to exploring its frontier
            RegionNotFound: the agent or the target is outside the building
        """
        agent = self._agent(pid)
        goal = self._resolve_target(target, agent.floor)
        try:
            return _next_hop(agent, self.maps[pid], goal)
        except RegionNotFound as e:
            if self.verbose:
                print(f"[T={time}] Agent {pid} could not be located: {e}")
            raise

    def next_hops(self, targets: Dict[int, object], time: Optional[float] = None
                  ) -> Tuple[Dict[int, Hop], Dict[int, Exception]]:
        """
        next_hop() for several agents.

        Returns:
            hops: pid -> next region or point
            failed: pid -> NoPathKnown or RegionNotFound for the agents skipped
        """
        hops: Dict[int, Hop] = {}
        failed: Dict[int, Exception] = {}
        for pid, target in targets.items():
            try:
                hops[pid] = self.next_hop(pid, target, time)
            except (NoPathKnown, RegionNotFound) as e:
                failed[pid] = e
        return hops, failed

    def frontier(self, pid: int) -> List[Region]:
        """
        Frontier regions of an agent's map, cheapest to reach first.

        Used by callers as the exploration fallback after NoPathKnown.
        """
        agent = self._agent(pid)
        cmap = self.maps[pid]
        regions = cmap.frontier()
        if not regions or agent.region is None:
            return regions
        dist, _ = weighted_distances(cmap, agent.region)
        inf = float("inf")
        return sorted(regions, key=lambda r: (dist.get(r.index, inf), r.index))

    # helpers

    def _agent(self, pid: int) -> Pedestrian:
        if pid not in self.agents:
            raise UnknownAgent(f"Agent {pid} is not registered")
        return self.agents[pid]

    def _resolve_target(self, target, floor: Optional[int] = None) -> Region:
        if isinstance(target, Region):
            return target
        if isinstance(target, str):
            return self.graph.region_by_id(target)
        if hasattr(target, "target"):
            return self.graph.region_for(target.target(), floor=floor)
        return self.graph.region(self.graph.index_of(target))

    def _update_hazard_flags(self, agent: Pedestrian, region: Region) -> None:
        if self.hazards is None:
            return
        if self.hazards.is_smoky(region):
            agent.hazard_flags.add("smoke")
        else:
            agent.hazard_flags.discard("smoke")
