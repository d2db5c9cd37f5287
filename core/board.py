"""Transport graph for the pursuit game engine.

The board is a static attributed multigraph:
- Nodes are stations identified by positive integers
- Edges are routes, each carrying a single Transport kind
- Two stations may be joined by several routes of different kinds

The topology never changes during a game. The underlying networkx graph is
frozen on construction, so the engine only ever sees a read-only board.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import networkx as nx

from .constants import Transport


# Type alias for clarity
NodeId = int


@dataclass(frozen=True)
class Edge:
    """A route leaving ``source`` towards ``destination``."""

    source: NodeId
    destination: NodeId
    transport: Transport


class BoardGraph:
    """Read-only transport graph.

    Attributes are exposed through query methods only; the wrapped
    networkx graph is frozen and raises ``NetworkXError`` on mutation.
    """

    def __init__(self, graph: Optional[nx.MultiGraph] = None):
        """Initialize the board.

        Args:
            graph: A networkx multigraph whose edges carry a ``transport``
                attribute. The graph is copied and frozen.
        """
        frozen = nx.MultiGraph(graph) if graph is not None else nx.MultiGraph()
        self._graph = nx.freeze(frozen)
        self._edges_from: dict[NodeId, tuple[Edge, ...]] = {}
        for node_id in self._graph.nodes:
            self._edges_from[node_id] = tuple(
                Edge(node_id, neighbour, data["transport"])
                for _, neighbour, data in self._graph.edges(node_id, data=True)
            )

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[NodeId, NodeId, Transport]],
        nodes: Iterable[NodeId] = (),
        positions: Optional[dict[NodeId, tuple[float, float]]] = None,
    ) -> BoardGraph:
        """Build a board from ``(a, b, transport)`` triples.

        Args:
            edges: Undirected routes.
            nodes: Extra nodes to include even if isolated.
            positions: Optional ``(x, y)`` coordinates for visualization.
        """
        graph = nx.MultiGraph()
        graph.add_nodes_from(nodes)
        for node_a, node_b, transport in edges:
            graph.add_edge(node_a, node_b, transport=Transport(transport))
        for node_id, position in (positions or {}).items():
            if node_id in graph:
                graph.nodes[node_id]["position"] = tuple(position)
        return cls(graph)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_empty(self) -> bool:
        """Check if the board has no stations."""
        return self._graph.number_of_nodes() == 0

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._edges_from

    def nodes(self) -> list[NodeId]:
        """Return all node ids in ascending order."""
        return sorted(self._edges_from)

    def num_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def num_edges(self) -> int:
        return self._graph.number_of_edges()

    def get_edges_from(self, node_id: NodeId) -> tuple[Edge, ...]:
        """Return every route leaving a node.

        Raises:
            KeyError: If the node is not on the board.
        """
        if node_id not in self._edges_from:
            raise KeyError(f"Node {node_id} is not on the board")
        return self._edges_from[node_id]

    def get_position(self, node_id: NodeId) -> Optional[tuple[float, float]]:
        """Return the drawing position of a node, if one was loaded."""
        return self._graph.nodes[node_id].get("position")

    def transports_between(self, node_a: NodeId, node_b: NodeId) -> set[Transport]:
        """Return the transport kinds joining two nodes."""
        if not self._graph.has_edge(node_a, node_b):
            return set()
        return {data["transport"] for data in self._graph[node_a][node_b].values()}

    def is_connected(self) -> bool:
        return not self.is_empty() and nx.is_connected(self._graph)

    def to_networkx(self) -> nx.MultiGraph:
        """Return the underlying frozen networkx graph."""
        return self._graph

    def __len__(self) -> int:
        return self.num_nodes()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._edges_from

    def __repr__(self) -> str:
        return f"BoardGraph(nodes={self.num_nodes()}, edges={self.num_edges()})"
