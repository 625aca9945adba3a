"""Bounded demo run of the hazard-aware router on the standard office.

Usage:
    python3 src/scripts/smoke_test.py [path/to/config.yaml]

Agent 0 knows the whole building, agent 1 only the office it starts in.
Smoke starts in RT1 and spreads; both agents walk region by region towards
the entrance, agent 1 exploring its frontier until it has seen the entrance.
"""
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from evac_router import (
    Exit,
    HazardField,
    HazardRouter,
    NavigationGraph,
    NoPathKnown,
    Pedestrian,
    Region,
    build_office_building,
    load_config,
)
from evac_router.config import make_config

MAX_TEST_STEPS = 60


def pick_hop(router, pid, t):
    """Next hop towards the entrance, or the cheapest frontier region."""
    try:
        return router.next_hop(pid, "ENTRANCE", t)
    except NoPathKnown:
        frontier = router.frontier(pid)
        return frontier[0] if frontier else None


if __name__ == "__main__":
    print("Hazard-aware routing demo")
    print("=" * 60)

    config = load_config(sys.argv[1]) if len(sys.argv) > 1 else make_config({"verbose": True})

    geometry = build_office_building()
    graph = NavigationGraph.build_from(geometry, config)
    hazards = HazardField(graph, config, seed=42)
    hazards.ignite(graph.region_by_id("RT1"))
    router = HazardRouter(graph, hazards=hazards, config=config)

    router.add_agent(Pedestrian(pid=0, position=graph.region_by_id("RT2").centroid), full_knowledge=True)
    router.add_agent(Pedestrian(pid=1, position=graph.region_by_id("RB0").centroid), full_knowledge=False)

    exit_stage = Exit(geometry.outline("ENTRANCE"))

    for t in range(MAX_TEST_STEPS):
        hazards.spread_smoke()
        router.step(t)

        for pid in list(router.agents):
            hop = pick_hop(router, pid, t)
            if hop is None:
                continue
            target = hop.centroid if isinstance(hop, Region) else hop
            region = router.update_position(pid, target)
            agent = router.agents[pid]
            print(f"[T={t:02d}] Agent {pid} -> {region.rid} "
                  f"(known={len(router.cognitive_map(pid).known_regions())}, "
                  f"smoke={'yes' if agent.in_smoke else 'no'})")

            if exit_stage.is_completed(agent):
                router.remove_agent(pid)
                print(f"[T={t:02d}] Agent {pid} reached the entrance")

        if not router.agents:
            print("All agents out. Stop early.")
            break

    print("\nSmoke densities:")
    for idx, density in sorted(hazards.smoke.items()):
        print(f"  - {graph.region(idx).rid}: {density:.2f}")
