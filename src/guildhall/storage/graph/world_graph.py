"""
WorldGraph: NetworkX-based map of a world's locations.

Locations are nodes; each is linked to its nearest neighbours by edges
weighted with map distance. Discovery spreads along those edges: the next
location a guild can find is always adjacent to one it already knows.
"""

import math

import networkx as nx

from guildhall.models import World, WorldLocation


def _distance(a: WorldLocation, b: WorldLocation) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class WorldGraph:
    """
    Undirected, distance-weighted graph over a world's locations.

    Built from a World snapshot and never written back; the snapshot stays
    the source of truth for which locations are discovered.
    """

    DEFAULT_NEIGHBOURS = 3

    def __init__(self):
        """Initialize empty world graph."""
        self._graph: nx.Graph = nx.Graph()

    @classmethod
    def from_world(cls, world: World, neighbours: int = DEFAULT_NEIGHBOURS) -> "WorldGraph":
        """Connect every location to its `neighbours` nearest locations."""
        graph = cls()
        for location in world.locations:
            graph.add_location(location)

        for location in world.locations:
            others = sorted(
                (other for other in world.locations if other.id != location.id),
                key=lambda other: (_distance(location, other), other.id),
            )
            for other in others[:neighbours]:
                graph.connect(location.id, other.id, _distance(location, other))

        graph._join_components({location.id: location for location in world.locations})
        return graph

    def _join_components(self, locations: dict[str, WorldLocation]) -> None:
        """Bridge isolated clusters to the rest of the map with their shortest edge."""
        while self._graph.number_of_nodes() and not nx.is_connected(self._graph):
            components = sorted(nx.connected_components(self._graph), key=min)
            main, rest = components[0], set().union(*components[1:])
            a, b = min(
                ((a, b) for a in main for b in rest),
                key=lambda pair: (_distance(locations[pair[0]], locations[pair[1]]), pair),
            )
            self.connect(a, b, _distance(locations[a], locations[b]))

    @property
    def graph(self) -> nx.Graph:
        """Access underlying NetworkX graph."""
        return self._graph

    # =========================================================================
    # NODE / EDGE OPERATIONS
    # =========================================================================

    def add_location(self, location: WorldLocation) -> None:
        self._graph.add_node(
            location.id,
            name=location.name,
            biome=location.biome.value,
            difficulty=location.difficulty,
            discovered=location.is_discovered,
        )

    def connect(self, location_a: str, location_b: str, distance: float) -> None:
        self._graph.add_edge(location_a, location_b, weight=distance)

    def has_location(self, location_id: str) -> bool:
        return location_id in self._graph

    def neighbours(self, location_id: str) -> list[str]:
        if location_id not in self._graph:
            return []
        return sorted(self._graph.neighbors(location_id))

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    def discovered(self) -> list[str]:
        return [node for node, data in self._graph.nodes(data=True) if data.get("discovered")]

    def frontier(self) -> list[str]:
        """
        Undiscovered locations adjacent to a discovered one, closest first.

        Ties are broken by location id so the order is stable.
        """
        best: dict[str, float] = {}
        for known in self.discovered():
            for neighbour in self._graph.neighbors(known):
                if self._graph.nodes[neighbour].get("discovered"):
                    continue
                weight = self._graph[known][neighbour]["weight"]
                best[neighbour] = min(weight, best.get(neighbour, math.inf))
        return sorted(best, key=lambda node: (best[node], node))

    def next_discovery(self) -> str | None:
        frontier = self.frontier()
        return frontier[0] if frontier else None

    # =========================================================================
    # SERIALIZATION / STATISTICS
    # =========================================================================

    def export_to_json(self) -> dict:
        """Export graph to JSON-serializable dict (for the map renderer)."""
        return nx.node_link_data(self._graph)

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def __repr__(self) -> str:
        return f"WorldGraph(nodes={self.node_count}, edges={self.edge_count})"
