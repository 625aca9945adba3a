from typing import Dict, List, Optional, Tuple

from .config import make_config
from .entities import Connection, Region
from .graph import NavigationGraph, RegionRef
from .ledger import EdgeCostLedger


class CognitiveMap:
    """
    One agent's subjective view of the navigation graph.

    With full knowledge the view is the whole graph. With partial knowledge
    the agent only knows regions it has discovered; discovering a region
    reveals the connections leaving it, and the unexplored regions behind
    those connections form the frontier.

    Each map owns its own EdgeCostLedger, so two agents can disagree about
    the cost of the same physical connection. Sensors write through
    underlying(), never into the graph.
    """

    def __init__(self, graph: NavigationGraph, full_knowledge: bool = True,
                 config: Optional[Dict] = None):
        cfg = make_config(config)
        self.graph = graph
        self.full_knowledge = full_knowledge
        self._ledger = EdgeCostLedger(
            graph.connections,
            min_weight=cfg["min_effective_weight"],
            max_weight=cfg["max_effective_weight"],
        )
        # insertion-ordered set of discovered region indices
        self._known: Dict[int, None] = {}

    def discover(self, region: RegionRef) -> bool:
        """
        Add a region and its outgoing connections to the known subgraph.

        Returns:
            True if the region was new to this map
        """
        idx = self._index(region)
        if self.full_knowledge or idx in self._known:
            return False
        self._known[idx] = None
        return True

    def knows(self, region: RegionRef) -> bool:
        return self.full_knowledge or self._index(region) in self._known

    def edges_from(self, region: RegionRef) -> Tuple[Connection, ...]:
        """Connections leaving region that this agent is aware of."""
        if not self.knows(region):
            return ()
        return self.graph.outgoing_edges(region)

    def known_regions(self) -> List[Region]:
        if self.full_knowledge:
            return list(self.graph.regions)
        return [self.graph.region(idx) for idx in self._known]

    def frontier(self) -> List[Region]:
        """Regions seen through a known connection but not yet discovered."""
        if self.full_knowledge:
            return []
        seen: Dict[int, None] = {}
        for idx in self._known:
            for conn in self.graph.outgoing_edges(idx):
                dest = conn.destination
                if dest is not None and dest not in self._known:
                    seen.setdefault(dest, None)
        return [self.graph.region(idx) for idx in seen]

    def underlying(self) -> EdgeCostLedger:
        return self._ledger

    def effective_weight(self, edge) -> float:
        return self._ledger.effective_weight(edge)

    def _index(self, region: RegionRef) -> int:
        return self.graph.index_of(region)
