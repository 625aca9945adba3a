#!/usr/bin/env python3
"""
Navigation graph construction test.

Validates that the office layout turns into the expected regions and
connections, that positions map onto regions, and that the graph cannot
be edited after construction.
"""
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import math

import networkx as nx
import pytest

from evac_router import (
    BuildingGeometry,
    GraphBuildError,
    NavigationGraph,
    RegionNotFound,
    build_office_building,
    build_two_floor_office,
)


def _rids(graph, indices):
    return [graph.region(i).rid if i is not None else None for i in indices]


def test_office_regions_and_connections():
    graph = NavigationGraph.build_from(build_office_building())

    assert len(graph) == 13
    assert [r.rid for r in graph.regions[:3]] == ["H0", "H1", "H2"]
    assert graph.region_by_id("LOBBY").category == "lobby"

    h0_out = graph.outgoing_edges(graph.region_by_id("H0"))
    assert _rids(graph, [c.destination for c in h0_out]) == ["H1", "RT0", "RB0", "LOBBY"]

    # Offices only open onto their own corridor segment
    rt1_out = graph.outgoing_edges(graph.region_by_id("RT1"))
    assert _rids(graph, [c.destination for c in rt1_out]) == ["H1"]

    # Every boundary is traversable both ways
    for conn in graph.connections:
        if conn.destination is not None:
            assert graph.connection_between(conn.destination, conn.source) is not None


def test_outside_doors_are_dead_links():
    graph = NavigationGraph.build_from(build_office_building())
    entrance = graph.region_by_id("ENTRANCE")

    dead = [c for c in graph.outgoing_edges(entrance) if c.is_dead]
    assert len(dead) == 1
    assert dead[0].crossing == (-9.0, 5.0)
    # Dead links are not part of the region topology
    assert graph.G.number_of_edges() == sum(1 for c in graph.connections if not c.is_dead)


def test_base_costs_follow_geometry():
    graph = NavigationGraph.build_from(build_office_building())
    conn = graph.connection_between(graph.region_by_id("H0"), graph.region_by_id("H1"))

    # (3,5) -> door (6,5) -> (9,5)
    assert conn.crossing == pytest.approx((6.0, 5.0))
    assert conn.base_cost == pytest.approx(6.0)
    assert all(c.base_cost > 0 and math.isfinite(c.base_cost) for c in graph.connections)


def test_region_for_point():
    graph = NavigationGraph.build_from(build_office_building())

    assert graph.region_for((3.0, 5.0)).rid == "H0"
    assert graph.region_for((15.0, 8.0)).rid == "RT2"
    # On the H0/H1 boundary: the region declared first wins
    assert graph.region_for((6.0, 5.0)).rid == "H0"


def test_region_for_point_outside_building():
    graph = NavigationGraph.build_from(build_office_building())

    with pytest.raises(RegionNotFound) as exc:
        graph.region_for((100.0, 100.0))
    assert exc.value.point == (100.0, 100.0)

    # Gap between two offices
    with pytest.raises(RegionNotFound):
        graph.region_for((6.0, 8.0))


def test_outgoing_edges_are_cached():
    graph = NavigationGraph.build_from(build_office_building())
    h1 = graph.region_by_id("H1")

    assert graph.outgoing_edges(h1) is graph.outgoing_edges(h1.index)


def test_graph_is_read_only():
    graph = NavigationGraph.build_from(build_office_building())

    with pytest.raises(nx.NetworkXError):
        graph.G.add_edge(0, 5)
    with pytest.raises(AttributeError):
        graph.regions[0].category = "lobby"


def test_empty_building_fails_to_build():
    with pytest.raises(GraphBuildError):
        NavigationGraph.build_from(BuildingGeometry())


def test_geometry_rejects_bad_regions():
    g = BuildingGeometry()
    g.add_region("A", [(0, 0), (2, 0), (2, 2), (0, 2)], category="corridor")

    with pytest.raises(ValueError):
        g.add_region("A", [(5, 5), (6, 5), (6, 6)])
    with pytest.raises(ValueError):
        g.add_region("B", [(1, 1), (3, 1), (3, 3), (1, 3)])
    with pytest.raises(ValueError):
        g.add_region("C", [(4, 0), (5, 0), (5, 1), (4, 1)], category="kitchen")
    with pytest.raises(ValueError):
        g.add_outside_door("missing", (0.0, 0.0))


def test_two_floors_meet_at_the_stair():
    graph = NavigationGraph.build_from(build_two_floor_office())

    stair = graph.region_by_id("STAIR")
    upper_stair = graph.region_by_id("F1_STAIR")
    assert upper_stair.floor == 1
    assert graph.connection_between(stair, upper_stair) is not None

    # Same (x, y) resolves per floor
    assert graph.region_for((3.0, 5.0), floor=0).rid == "H0"
    assert graph.region_for((3.0, 5.0), floor=1).rid == "F1_H0"

    # Regions stacked on different floors are not adjacent
    assert graph.connection_between(graph.region_by_id("H0"), graph.region_by_id("F1_H0")) is None
