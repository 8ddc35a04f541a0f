import logging
import math
from collections.abc import Sequence
from typing import Protocol

import networkx as nx
import numpy as np

from contribgraph.schemas.graph import ForceParameters
from contribgraph.schemas.graph import GraphLink
from contribgraph.schemas.graph import GraphNode


logger = logging.getLogger(__name__)

GRAPH_WIDTH = 900
GRAPH_HEIGHT = 500

# d3's default many-body strength; charges are expressed relative to it.
REFERENCE_CHARGE = 30.0


def default_nodes() -> list[GraphNode]:
    return [
        GraphNode(id="You", group=1),
        GraphNode(id="D3", group=2),
        GraphNode(id="jsdom", group=2),
        GraphNode(id="sharp", group=2),
        GraphNode(id="PNG", group=3),
        GraphNode(id="SVG", group=3),
    ]


def default_links() -> list[GraphLink]:
    return [
        GraphLink(source="You", target="D3", value=2),
        GraphLink(source="D3", target="SVG", value=3),
        GraphLink(source="jsdom", target="SVG", value=2),
        GraphLink(source="SVG", target="sharp", value=2),
        GraphLink(source="sharp", target="PNG", value=3),
        GraphLink(source="You", target="jsdom", value=1),
    ]


class LayoutEngine(Protocol):
    def settle(
        self,
        nodes: Sequence[GraphNode],
        links: Sequence[GraphLink],
        params: ForceParameters,
    ) -> list[GraphNode]: ...


class SpringLayoutEngine:
    """Force-directed placement backed by `networkx.spring_layout`.

    Link distances become edge weights (shorter links pull harder), the
    charge strength sets the optimal node spacing, and the normalised
    layout is scaled to the longest link distance around the centre.
    A final pass pushes apart any nodes closer than twice the collision
    radius.
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed

    def settle(
        self,
        nodes: Sequence[GraphNode],
        links: Sequence[GraphLink],
        params: ForceParameters,
    ) -> list[GraphNode]:
        if not nodes:
            return []

        node_ids = {node.id for node in nodes}
        graph = nx.Graph()
        graph.add_nodes_from(node.id for node in nodes)

        distances = [params.link_distance(link) for link in links]
        shortest = min(distances, default=1.0)
        for link, distance in zip(links, distances):
            if link.source not in node_ids or link.target not in node_ids:
                raise ValueError(f"link {link.source}->{link.target} has unknown node")
            graph.add_edge(
                link.source,
                link.target,
                weight=params.link_strength * shortest / max(distance, 1.0),
            )

        k = math.sqrt(abs(params.charge_strength) / REFERENCE_CHARGE / len(nodes))
        scale = max(distances, default=params.collision_radius * 2)
        positions = nx.spring_layout(
            graph,
            k=k,
            weight="weight",
            iterations=params.iterations,
            seed=self.seed,
            scale=scale,
            center=params.center,
        )

        points = np.array([positions[node.id] for node in nodes], dtype=float)
        points = resolve_collisions(points, params.collision_radius, params.iterations)
        logger.debug(
            "Settled %d nodes after %d iterations", len(nodes), params.iterations
        )

        return [
            node.model_copy(update={"x": float(x), "y": float(y)})
            for node, (x, y) in zip(nodes, points)
        ]


def resolve_collisions(
    points: np.ndarray, radius: float, max_passes: int = 300
) -> np.ndarray:
    """Push overlapping circles apart until all centres are 2*radius apart."""

    points = points.copy()
    min_separation = 2 * radius
    for _ in range(max_passes):
        moved = False
        for i in range(len(points)):
            for j in range(i + 1, len(points)):
                delta = points[j] - points[i]
                distance = float(np.hypot(*delta))
                if distance >= min_separation:
                    continue
                if distance == 0.0:
                    direction = np.array([1.0, 0.0])
                else:
                    direction = delta / distance
                push = (min_separation - distance) / 2 + 1e-6
                points[i] -= direction * push
                points[j] += direction * push
                moved = True
        if not moved:
            break
    return points


def layout_graph(
    engine: LayoutEngine | None = None,
    width: int = GRAPH_WIDTH,
    height: int = GRAPH_HEIGHT,
) -> tuple[list[GraphNode], list[GraphLink]]:
    """Settle the fixed diagram inside a `width` x `height` canvas."""

    engine = engine or SpringLayoutEngine()
    params = ForceParameters(center=(width / 2, height / 2))
    links = default_links()
    nodes = engine.settle(default_nodes(), links, params)
    return nodes, links
