#!/usr/bin/env python3
"""
Route query test.

Validates least-cost paths over a cognitive map, next-hop resolution and
the NoPathKnown condition.
"""
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from evac_router import (
    BuildingGeometry,
    CognitiveMap,
    NavigationGraph,
    NoPathKnown,
    Pedestrian,
    RegionNotFound,
    RouterError,
    build_office_building,
    default_pipeline,
    least_cost_path,
    next_hop,
)
from evac_router.graphutils import path_cost, weighted_distances


def _office():
    geometry = build_office_building()
    geometry.add_region("ISLAND", [(40, 40), (42, 40), (42, 42), (40, 42)], category="floor")
    return NavigationGraph.build_from(geometry)


def _rids(graph, path):
    return [graph.region(i).rid for i in path]


def test_least_cost_path_through_the_corridor():
    graph = _office()
    cmap = CognitiveMap(graph)

    path = least_cost_path(cmap, graph.region_by_id("RT2"), graph.region_by_id("ENTRANCE"))

    assert _rids(graph, path) == ["RT2", "H2", "H1", "H0", "LOBBY", "ENTRANCE"]
    dist, _ = weighted_distances(cmap, graph.region_by_id("RT2"))
    assert path_cost(cmap, path) == pytest.approx(dist[path[-1]])


def test_next_hop_is_first_region_on_path():
    graph = _office()
    cmap = CognitiveMap(graph)
    agent = Pedestrian(pid=0, position=(15.0, 8.0))

    hop = next_hop(agent, cmap, graph.region_by_id("ENTRANCE"))
    assert hop.rid == "H2"


def test_next_hop_inside_target_returns_point():
    graph = _office()
    cmap = CognitiveMap(graph)
    agent = Pedestrian(pid=0, position=(-8.0, 4.0))
    entrance = graph.region_by_id("ENTRANCE")

    assert next_hop(agent, cmap, entrance) == entrance.centroid


def test_next_hop_is_deterministic():
    graph = _office()
    cmap = CognitiveMap(graph)
    pipeline = default_pipeline()
    agent = Pedestrian(pid=0, position=(9.0, 5.0))
    pipeline.run(agent, cmap, 0.0)
    target = graph.region_by_id("STAIR")

    hops = {next_hop(agent, cmap, target) for _ in range(10)}
    assert len(hops) == 1


def test_route_follows_cost_changes_between_steps():
    g = BuildingGeometry()
    g.add_region("R1", [(0, 0), (2, 0), (2, 4), (0, 4)], category="corridor")
    g.add_region("R2", [(2, 2), (4, 2), (4, 4), (2, 4)], category="corridor")
    g.add_region("R3", [(2, 0), (4, 0), (4, 2), (2, 2)], category="corridor")
    g.add_region("R4", [(4, 0), (6, 0), (6, 4), (4, 4)], category="corridor")
    graph = NavigationGraph.build_from(g)
    cmap = CognitiveMap(graph)
    agent = Pedestrian(pid=0, position=(1.0, 2.0))
    r1, r2, r4 = (graph.region_by_id(rid) for rid in ("R1", "R2", "R4"))

    assert next_hop(agent, cmap, r4).rid == "R2"

    door = graph.connection_between(r1, r2)
    cmap.underlying().set_factor(door, "SmokeSensor", 3.0)
    assert next_hop(agent, cmap, r4).rid == "R3"

    cmap.underlying().clear_sensor("SmokeSensor")
    assert next_hop(agent, cmap, r4).rid == "R2"


def test_equal_cost_tie_prefers_first_declared_connection():
    """Two mirror-image routes of identical cost: the door declared first wins."""
    def fork(first, second):
        g = BuildingGeometry()
        g.add_region("R1", [(0, 0), (2, 0), (2, 4), (0, 4)], category="corridor")
        g.add_region(first[0], first[1], category="corridor")
        g.add_region(second[0], second[1], category="corridor")
        g.add_region("R4", [(4, 0), (6, 0), (6, 4), (4, 4)], category="corridor")
        return NavigationGraph.build_from(g)

    upper = ("UP", [(2, 2), (4, 2), (4, 4), (2, 4)])
    lower = ("DOWN", [(2, 0), (4, 0), (4, 2), (2, 2)])
    agent = Pedestrian(pid=0, position=(1.0, 2.0))

    for first, second in [(upper, lower), (lower, upper)]:
        graph = fork(first, second)
        cmap = CognitiveMap(graph)
        via = graph.region_by_id(first[0])
        r1, r4 = graph.region_by_id("R1"), graph.region_by_id("R4")
        assert path_cost(cmap, [r1.index, via.index, r4.index]) == path_cost(
            cmap, [r1.index, graph.region_by_id(second[0]).index, r4.index])
        assert next_hop(agent, cmap, r4).rid == first[0]


def test_unknown_target_raises_no_path_known():
    graph = _office()
    cmap = CognitiveMap(graph, full_knowledge=False)
    agent = Pedestrian(pid=0, position=(3.0, 5.0))
    cmap.discover(graph.region_by_id("H0"))

    with pytest.raises(NoPathKnown) as exc:
        next_hop(agent, cmap, graph.region_by_id("ENTRANCE"))
    assert exc.value.target == graph.region_by_id("ENTRANCE").index
    assert not isinstance(exc.value, RouterError)

    # Frontier regions are visible but not known yet
    with pytest.raises(NoPathKnown):
        next_hop(agent, cmap, graph.region_by_id("LOBBY"))


def test_discovered_target_becomes_reachable():
    graph = _office()
    cmap = CognitiveMap(graph, full_knowledge=False)
    agent = Pedestrian(pid=0, position=(3.0, 5.0))
    for rid in ["H0", "LOBBY", "ENTRANCE"]:
        cmap.discover(graph.region_by_id(rid))

    assert next_hop(agent, cmap, graph.region_by_id("ENTRANCE")).rid == "LOBBY"


def test_disconnected_target_raises_no_path_known():
    graph = _office()
    cmap = CognitiveMap(graph)
    agent = Pedestrian(pid=0, position=(3.0, 5.0))

    with pytest.raises(NoPathKnown):
        next_hop(agent, cmap, graph.region_by_id("ISLAND"))


def test_agent_outside_building():
    graph = _office()
    cmap = CognitiveMap(graph)

    with pytest.raises(RegionNotFound):
        next_hop(Pedestrian(pid=0, position=(-50.0, 0.0)), cmap, graph.region_by_id("H0"))
