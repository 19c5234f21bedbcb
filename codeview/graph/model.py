"""
Graph Model for CodeView

This module holds the in-memory data model of one visualization session:
the node set and link set, indexed on a NetworkX multigraph.

Design Decisions:
    - Uses NetworkX MultiDiGraph so duplicate links stay distinct
    - Stores Node objects as node attributes and Link objects as edge attributes
    - Node and link lists keep document order; the layout and renderer
      iterate them directly
    - Built once per load and never partially replaced

Graph Properties:
    - Directed: edges point from source to target
    - May have cycles and self-loops
    - Every link endpoint is a node in the graph (dangling links are
      dropped by the loader before they reach the model)
"""

from collections import Counter
from typing import Iterator, Optional

import networkx as nx

from codeview.models import Link, LinkType, Node, NodeType


class GraphModel:
    """
    The node and link sets of a loaded code graph.

    Wraps a NetworkX MultiDiGraph to provide:
    - Lookup of nodes by id, type, file, and name
    - Incoming and outgoing links of a node
    - Neighborhood queries for exploration

    Usage:
        model = GraphModel()
        model.add_node(Node(...))
        model.add_link(Link(...))
        for link in model.outgoing("mod::main"):
            print(link.target)
    """

    def __init__(self) -> None:
        """Initialize an empty graph model."""
        self._graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self._nodes: dict[str, Node] = {}
        self._links: list[Link] = []

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Access the underlying NetworkX graph."""
        return self._graph

    @property
    def nodes(self) -> list[Node]:
        """All nodes in load order."""
        return list(self._nodes.values())

    @property
    def links(self) -> list[Link]:
        """All links in load order, duplicates included."""
        return list(self._links)

    @property
    def nodes_by_id(self) -> dict[str, Node]:
        """Mapping from node id to node (a copy)."""
        return dict(self._nodes)

    @property
    def node_count(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    @property
    def link_count(self) -> int:
        """Return the number of links in the graph."""
        return len(self._links)

    def add_node(self, node: Node) -> None:
        """
        Add a node to the graph.

        If a node with the same id exists, it is replaced (last write wins)
        while keeping the links already attached to that id.

        Args:
            node: The Node to add
        """
        self._nodes[node.id] = node
        self._graph.add_node(node.id, node=node, type=node.type.value)

    def add_link(self, link: Link) -> None:
        """
        Add a link to the graph.

        Both endpoints must already be present.

        Args:
            link: The Link to add

        Raises:
            KeyError: If either endpoint is not a node of this graph
        """
        for endpoint in (link.source, link.target):
            if endpoint not in self._nodes:
                raise KeyError(endpoint)
        self._links.append(link)
        self._graph.add_edge(link.source, link.target, link=link, type=link.type.value)

    def get_node(self, node_id: str) -> Optional[Node]:
        """
        Retrieve a node by its id.

        Args:
            node_id: The unique identifier of the node

        Returns:
            The Node if found, None otherwise
        """
        return self._nodes.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def nodes_by_type(self, node_type: NodeType) -> list[Node]:
        """Get all nodes of the given type."""
        return [node for node in self._nodes.values() if node.type == node_type]

    def nodes_in_file(self, file_path: str) -> list[Node]:
        """Get all nodes defined in a specific file."""
        return [node for node in self._nodes.values() if node.file_path == file_path]

    def nodes_by_name(self, name: str) -> list[Node]:
        """Get all nodes with the given display name."""
        return [node for node in self._nodes.values() if node.name == name]

    def outgoing(self, node_id: str) -> Iterator[Link]:
        """
        Get the links whose source is the given node.

        Yields:
            Each outgoing Link, duplicates included
        """
        if node_id in self._graph:
            for _, _, link in self._graph.out_edges(node_id, data="link"):
                yield link

    def incoming(self, node_id: str) -> Iterator[Link]:
        """
        Get the links whose target is the given node.

        Yields:
            Each incoming Link, duplicates included
        """
        if node_id in self._graph:
            for _, _, link in self._graph.in_edges(node_id, data="link"):
                yield link

    def callers(self, node_id: str) -> list[Node]:
        """Get the nodes that call the given node through a Calls link."""
        return [
            self._nodes[link.source]
            for link in self.incoming(node_id)
            if link.type == LinkType.CALLS
        ]

    def callees(self, node_id: str) -> list[Node]:
        """Get the nodes called by the given node through a Calls link."""
        return [
            self._nodes[link.target]
            for link in self.outgoing(node_id)
            if link.type == LinkType.CALLS
        ]

    def related(self, node_id: str, depth: int = 1) -> list[Node]:
        """
        Get all nodes within a number of hops of the given node.

        Link direction is ignored. The node itself is included.

        Args:
            node_id: Center of the neighborhood
            depth: Maximum number of hops

        Returns:
            Nodes ordered by hop distance, then load order
        """
        if node_id not in self._graph:
            return []
        distances = nx.single_source_shortest_path_length(
            self._graph.to_undirected(as_view=True), node_id, cutoff=depth
        )
        order = {nid: index for index, nid in enumerate(self._nodes)}
        ranked = sorted(distances, key=lambda nid: (distances[nid], order[nid]))
        return [self._nodes[nid] for nid in ranked]

    def type_counts(self) -> Counter:
        """Count nodes per NodeType."""
        return Counter(node.type for node in self._nodes.values())

    def link_type_counts(self) -> Counter:
        """Count links per LinkType."""
        return Counter(link.type for link in self._links)
