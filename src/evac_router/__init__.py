"""
Hazard-Aware Evacuation Routing Package
=======================================

Routing core for pedestrian evacuation simulations. This package models:

1. Building topology (walkable regions and the doors between them)
2. Per-pedestrian cognitive maps with full or partial knowledge
3. Sensors that revise edge costs from live hazards and room categories
4. Least-cost next-hop queries over each pedestrian's own map

Usage:
    from evac_router import (
        NavigationGraph, HazardField, HazardRouter, Pedestrian,
        build_office_building,
    )

    graph = NavigationGraph.build_from(build_office_building())
    hazards = HazardField(graph, seed=42)
    router = HazardRouter(graph, hazards=hazards)

    router.add_agent(Pedestrian(pid=0, position=(15.0, 8.0)))
    for t in range(100):
        router.step(t)
        hop = router.next_hop(0, "ENTRANCE", t)
"""

# Spatial graph and its geometry collaborator
from .geometry import BuildingGeometry
from .graph import NavigationGraph

# Per-agent knowledge and costs
from .ledger import EdgeCostLedger
from .cognitive_map import CognitiveMap

# Sensors
from .hazards import HazardField
from .sensors import (
    Sensor,
    SensorPipeline,
    RoomCategorySensor,
    SmokeSensor,
    BlockedConnectionSensor,
    LastDestinationsSensor,
    DiscoverDoorsSensor,
    default_pipeline,
)

# Route query and facade
from .graphutils import least_cost_path, next_hop
from .router import HazardRouter

# Pre-built layouts for testing and demos
from .layouts import build_office_building, build_two_floor_office

# Configuration constants
from .config import DEFAULT_CONFIG, REGION_CATEGORIES, CATEGORY_FACTORS, load_config

# Entity data classes and errors
from .entities import Region, Connection, Pedestrian
from .errors import RouterError, RegionNotFound, InvalidFactor, NoPathKnown, GraphBuildError, UnknownAgent
from .stages import Waypoint, Exit

# Version info
__version__ = "1.0.0"

# Public API
__all__ = [
    "BuildingGeometry",
    "NavigationGraph",
    "EdgeCostLedger",
    "CognitiveMap",
    "HazardField",
    "Sensor",
    "SensorPipeline",
    "RoomCategorySensor",
    "SmokeSensor",
    "BlockedConnectionSensor",
    "LastDestinationsSensor",
    "DiscoverDoorsSensor",
    "default_pipeline",
    "least_cost_path",
    "next_hop",
    "HazardRouter",
    "build_office_building",
    "build_two_floor_office",
    "DEFAULT_CONFIG",
    "REGION_CATEGORIES",
    "CATEGORY_FACTORS",
    "load_config",
    "Region",
    "Connection",
    "Pedestrian",
    "RouterError",
    "RegionNotFound",
    "InvalidFactor",
    "NoPathKnown",
    "GraphBuildError",
    "UnknownAgent",
    "Waypoint",
    "Exit",
]
