"""Draw the office layout with one agent's effective edge weights and save a PNG.

Usage:
    python3 src/scripts/visualize_routes.py

Dependencies:
    pip install shapely networkx matplotlib

Regions are filled by category. Each connection is drawn from the source
centroid to the door, labelled with the effective weight in the agent's
cognitive map; the agent's least-cost path to the entrance is highlighted.
Images are written to `src/scripts/outputs/`.
"""
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.patches as patches

from evac_router import (
    HazardField,
    HazardRouter,
    NavigationGraph,
    Pedestrian,
    build_office_building,
    least_cost_path,
)

CATEGORY_COLOR_MAP = {
    'floor': '#87CEFA',           # light sky blue
    'corridor': '#D3D3D3',        # light gray
    'stair': '#DEB887',           # burlywood
    'lobby': '#FFF68F',           # light yellow
    'entrance': '#7CFC00',        # lawn green
    'escalator_up': '#FFA500',    # orange
    'escalator_down': '#FFA500',
    'dead_area': '#808080',
    'unknown': '#FFFFFF',
}

OUTPUT_DIR = os.path.join(os.path.dirname(__file__), 'outputs')


def ensure_out_dir():
    os.makedirs(OUTPUT_DIR, exist_ok=True)


def draw(geometry, graph, cmap, hazards, path, out_path):
    fig, ax = plt.subplots(figsize=(12, 5))

    for region in graph.regions:
        color = CATEGORY_COLOR_MAP.get(region.category, '#FFFFFF')
        ax.add_patch(patches.Polygon(geometry.outline(region.rid), closed=True,
                                     facecolor=color, edgecolor='black', linewidth=1.0))
        density = hazards.smoke_density(region)
        if density > 0:
            ax.add_patch(patches.Polygon(geometry.outline(region.rid), closed=True,
                                         facecolor='black', alpha=0.4 * density))
        cx, cy = region.centroid
        ax.text(cx, cy, region.rid, ha='center', va='center', fontsize=7)

    path_edges = set(zip(path, path[1:]))
    for conn in graph.connections:
        sx, sy = graph.region(conn.source).centroid
        dx, dy = conn.crossing
        on_path = (conn.source, conn.destination) in path_edges
        ax.annotate('', xy=(dx, dy), xytext=(sx, sy),
                    arrowprops=dict(arrowstyle='->', color='red' if on_path else '#555555',
                                    lw=2.0 if on_path else 0.6))
        ax.text((sx + dx) / 2, (sy + dy) / 2, f"{cmap.effective_weight(conn):.1f}",
                fontsize=6, color='red' if on_path else '#333333')

    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.set_title('Effective weights for agent 0 (red: least-cost path to ENTRANCE)')
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


if __name__ == "__main__":
    ensure_out_dir()

    geometry = build_office_building()
    graph = NavigationGraph.build_from(geometry)
    hazards = HazardField(graph, seed=0)
    hazards.ignite(graph.region_by_id("H1"), density=0.8)

    router = HazardRouter(graph, hazards=hazards)
    start = graph.region_by_id("RT2")
    router.add_agent(Pedestrian(pid=0, position=start.centroid))

    # Walk agent 0 through the corridor so its sensors see every corridor door
    for t, rid in enumerate(["RT2", "H2", "H1", "H0", "H1", "H2", "RT2"]):
        router.update_position(0, graph.region_by_id(rid).centroid)
        router.step(t)

    cmap = router.cognitive_map(0)
    path = least_cost_path(cmap, start, graph.region_by_id("ENTRANCE"))
    out_path = os.path.join(OUTPUT_DIR, 'office_routes.png')
    draw(geometry, graph, cmap, hazards, path, out_path)
    print(f"Saved {out_path}")
    print("Path: " + " -> ".join(graph.region(i).rid for i in path))
