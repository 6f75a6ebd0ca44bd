#!/usr/bin/env python3
"""
Waypoint Graph Construction
Builds immutable adjacency graphs from waypoint positions and a visibility test
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Mapping, Sequence, Tuple, Any

import numpy as np
import networkx as nx

logger = logging.getLogger(__name__)

Position = Tuple[float, float, float]
BlockedTest = Callable[[np.ndarray, np.ndarray], bool]


@dataclass
class Waypoint:
    """Waypoint identifier with its 3D position"""
    id: int
    position: Position


def _to_position(value: Sequence[float]) -> Position:
    """Normalize a 2D or 3D coordinate to a float triple"""
    coords = [float(v) for v in value]
    if len(coords) == 2:
        coords.append(0.0)
    if len(coords) != 3:
        raise ValueError(f"Waypoint position must have 2 or 3 coordinates, got {len(coords)}")
    return tuple(coords)


def build_graph(waypoints: Iterable[Waypoint], is_blocked: BlockedTest) -> nx.Graph:
    """Connect every pair of waypoints whose straight segment is not blocked

    Args:
        waypoints: Waypoints to connect
        is_blocked: Predicate ``is_blocked(p1, p2)`` on two position arrays

    Returns:
        Frozen undirected graph; nodes carry a 'position' attribute and
        edges a 'length' attribute
    """
    waypoints = list(waypoints)
    graph = nx.Graph()

    for waypoint in waypoints:
        if waypoint.id in graph:
            raise ValueError(f"Duplicate waypoint id {waypoint.id}")
        graph.add_node(waypoint.id, position=_to_position(waypoint.position))

    blocked_links = 0
    for i, a in enumerate(waypoints):
        pa = np.asarray(graph.nodes[a.id]['position'])
        for b in waypoints[i + 1:]:
            pb = np.asarray(graph.nodes[b.id]['position'])
            if is_blocked(pa, pb):
                blocked_links += 1
                continue
            graph.add_edge(a.id, b.id, length=float(np.linalg.norm(pa - pb)))

    logger.info("Built waypoint graph: %d waypoints, %d links, %d blocked pairs",
                graph.number_of_nodes(), graph.number_of_edges(), blocked_links)
    return nx.freeze(graph)


def graph_from_adjacency(positions: Mapping[int, Sequence[float]],
                         adjacency: Mapping[int, Iterable[int]]) -> nx.Graph:
    """Build a frozen graph from explicit positions and a neighbor mapping

    The mapping may list a link from one side only; self-links are dropped.

    Args:
        positions: Waypoint id -> (x, y[, z])
        adjacency: Waypoint id -> neighbor ids

    Returns:
        Frozen undirected graph with 'position' node attributes
    """
    graph = nx.Graph()
    for node, position in positions.items():
        graph.add_node(node, position=_to_position(position))

    for node, neighbors in adjacency.items():
        if node not in graph:
            raise ValueError(f"Adjacency lists unknown waypoint {node}")
        for neighbor in neighbors:
            if neighbor not in graph:
                raise ValueError(f"Waypoint {node} links to unknown waypoint {neighbor}")
            if neighbor == node:
                logger.debug("Dropping self-link on waypoint %s", node)
                continue
            length = float(np.linalg.norm(np.subtract(graph.nodes[node]['position'],
                                                      graph.nodes[neighbor]['position'])))
            graph.add_edge(node, neighbor, length=length)

    return nx.freeze(graph)


def get_graph_stats(graph: nx.Graph) -> Dict[str, Any]:
    """Get basic waypoint graph statistics"""
    if graph is None or graph.number_of_nodes() == 0:
        return {}

    degrees = [d for _, d in graph.degree()]
    return {
        'waypoints': graph.number_of_nodes(),
        'links': graph.number_of_edges(),
        'components': nx.number_connected_components(graph),
        'isolated_waypoints': sum(1 for d in degrees if d == 0),
        'mean_degree': float(np.mean(degrees)),
        'max_degree': int(max(degrees)),
    }


def connected(graph: nx.Graph, node_a: int, node_b: int) -> bool:
    """Whether two waypoints lie in the same connected component"""
    if node_a not in graph or node_b not in graph:
        return False
    return nx.has_path(graph, node_a, node_b)
