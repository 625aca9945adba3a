from __future__ import annotations

import heapq
import itertools
from typing import Dict, List, Optional, Tuple, Union

from .cognitive_map import CognitiveMap
from .entities import Pedestrian, Point, Region
from .errors import NoPathKnown
from .graph import RegionRef


def weighted_distances(cognitive_map: CognitiveMap, start: RegionRef,
                       goal: Optional[RegionRef] = None
                       ) -> Tuple[Dict[int, float], Dict[int, Optional[int]]]:
    """
    Dijkstra over the connections an agent knows, using its effective weights.

    Ties are broken by the order in which connections were declared, so the
    result only depends on the map's contents.

    Args:
        cognitive_map: The agent's cognitive map
        start: Start region
        goal: Optional region at which the search may stop early

    Returns:
        dist: region index -> least effective cost from start
        prev: region index -> predecessor on that least-cost path
    """
    graph = cognitive_map.graph
    src = graph.index_of(start)
    dst = graph.index_of(goal) if goal is not None else None

    dist: Dict[int, float] = {src: 0.0}
    prev: Dict[int, Optional[int]] = {src: None}
    done = set()
    order = itertools.count()
    pq = [(0.0, next(order), src)]

    while pq:
        d, _, u = heapq.heappop(pq)
        if u in done:
            continue
        done.add(u)
        if u == dst:
            break

        for conn in cognitive_map.edges_from(u):
            v = conn.destination
            if v is None or v in done:
                continue
            nd = d + cognitive_map.effective_weight(conn)
            if v not in dist or nd < dist[v]:
                dist[v] = nd
                prev[v] = u
                heapq.heappush(pq, (nd, next(order), v))

    return dist, prev


def least_cost_path(cognitive_map: CognitiveMap, start: RegionRef,
                    goal: RegionRef) -> List[int]:
    """
    Region indices from start to goal (inclusive) along the cheapest known path.

    Raises:
        NoPathKnown: goal is not in the agent's map or cannot be reached
    """
    graph = cognitive_map.graph
    src = graph.index_of(start)
    dst = graph.index_of(goal)
    if src == dst:
        return [src]
    if not cognitive_map.knows(dst):
        raise NoPathKnown(src, dst)

    dist, prev = weighted_distances(cognitive_map, src, dst)
    if dst not in dist:
        raise NoPathKnown(src, dst)

    # Backtrack from goal to start
    path = [dst]
    while prev[path[-1]] is not None:
        path.append(prev[path[-1]])
    path.reverse()
    return path


def next_hop(agent: Pedestrian, cognitive_map: CognitiveMap,
             target: RegionRef) -> Union[Region, Point]:
    """
    Where the agent should head next to get closer to target.

    Returns:
        - the target's centroid if the agent already stands in the target region
        - otherwise the second region on the least-cost known path

    Raises:
        RegionNotFound: the agent's position is outside the building
        NoPathKnown: target is unknown or unreachable with current knowledge
    """
    graph = cognitive_map.graph
    source = graph.region_for(agent.position, floor=agent.floor)
    goal = graph.region(graph.index_of(target))
    if source.index == goal.index:
        return goal.centroid

    path = least_cost_path(cognitive_map, source, goal)
    return graph.region(path[1])


def path_cost(cognitive_map: CognitiveMap, path: List[int]) -> float:
    """Sum of effective weights along a region path."""
    graph = cognitive_map.graph
    total = 0.0
    for u, v in zip(path, path[1:]):
        conn = graph.connection_between(u, v)
        if conn is None:
            raise ValueError(f"Regions {u} and {v} are not connected")
        total += cognitive_map.effective_weight(conn)
    return total
