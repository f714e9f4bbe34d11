"""Topology model for the mesh dashboard.

This module defines the Topology class: a fixed circular layout of mesh nodes
over a fully connected display graph.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import networkx as nx
import numpy as np

Point = Tuple[float, float]

RADIUS_FRACTION = 0.35


@dataclass(frozen=True)
class Topology:
    """Circular layout of N nodes on a canvas.

    Attributes:
        width: Canvas width in logical units.
        height: Canvas height in logical units.
        node_count: Number of mesh nodes.
        graph: Complete NetworkX graph over the node indices.
    """

    width: float = 400
    height: float = 400
    node_count: int = 8
    graph: nx.Graph = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.node_count < 1:
            raise ValueError(f"node_count must be positive, got {self.node_count}")
        object.__setattr__(self, "graph", nx.complete_graph(self.node_count))

    @property
    def center(self) -> Point:
        return (self.width / 2, self.height / 2)

    @property
    def radius(self) -> float:
        return min(self.width, self.height) * RADIUS_FRACTION

    def angle(self, node: int) -> float:
        """Angle of a node on the circle, in radians."""
        self._check(node)
        return 2 * np.pi * node / self.node_count

    def position(self, node: int) -> Point:
        """Get the canvas position of a node.

        Args:
            node: Node index in [0, node_count).

        Returns:
            (x, y) coordinates.

        Raises:
            ValueError: If the node index is out of range.
        """
        theta = self.angle(node)
        cx, cy = self.center
        return (
            float(cx + np.cos(theta) * self.radius),
            float(cy + np.sin(theta) * self.radius),
        )

    def positions(self) -> List[Point]:
        return [self.position(i) for i in range(self.node_count)]

    def all_edges(self) -> List[Tuple[int, int]]:
        """Every unordered node pair, as (lower, higher) index tuples."""
        return sorted((min(u, v), max(u, v)) for u, v in self.graph.edges())

    def resized(self, width: float, height: float) -> "Topology":
        """Get the same mesh laid out on a canvas of a different size."""
        return Topology(width, height, self.node_count)

    def _check(self, node: int) -> None:
        if not 0 <= node < self.node_count:
            raise ValueError(
                f"Node {node} does not exist (mesh has {self.node_count} nodes)"
            )
