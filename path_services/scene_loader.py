#!/usr/bin/env python3
"""
Scene Loader
Reads waypoint scenes (waypoints, obstacles, endpoints) from JSON files
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any

import networkx as nx

from .obstacles import line_of_sight_blocker, obstacle_from_dict
from .waypoint_graph import Waypoint, build_graph, graph_from_adjacency, get_graph_stats

logger = logging.getLogger(__name__)


class SceneLoadError(ValueError):
    """Raised when a scene file is missing fields or malformed"""


@dataclass
class Scene:
    """A loaded waypoint scene ready for path search"""
    name: str
    graph: nx.Graph
    start_node: int
    goal_node: int
    waypoints: List[Waypoint] = field(default_factory=list)
    obstacles: List[Any] = field(default_factory=list)
    ga_config: Dict[str, Any] = field(default_factory=dict)


def _parse_waypoints(raw) -> List[Waypoint]:
    """Accept a list of {"id", "position"} objects or an id -> position mapping"""
    if isinstance(raw, dict):
        items = [(key, value) for key, value in raw.items()]
    elif isinstance(raw, list):
        items = []
        for entry in raw:
            if not isinstance(entry, dict) or 'id' not in entry or 'position' not in entry:
                raise SceneLoadError(f"Waypoint entry needs 'id' and 'position': {entry!r}")
            items.append((entry['id'], entry['position']))
    else:
        raise SceneLoadError("'waypoints' must be a list or an object")

    waypoints = []
    for key, position in items:
        try:
            waypoints.append(Waypoint(int(key), tuple(float(v) for v in position)))
        except (TypeError, ValueError) as e:
            raise SceneLoadError(f"Invalid waypoint {key!r}: {e}") from e
    return waypoints


def scene_from_dict(data: Dict[str, Any], name: str = "scene") -> Scene:
    """Build a Scene from its decoded JSON description

    Args:
        data: Decoded scene object
        name: Fallback scene name

    Returns:
        Scene with a frozen adjacency graph
    """
    if not isinstance(data, dict):
        raise SceneLoadError("Scene must be a JSON object")
    for key in ('waypoints', 'start', 'goal'):
        if key not in data:
            raise SceneLoadError(f"Scene is missing required field '{key}'")

    waypoints = _parse_waypoints(data['waypoints'])

    try:
        obstacles = [obstacle_from_dict(o) for o in data.get('obstacles', [])]
        if 'links' in data:
            positions = {w.id: w.position for w in waypoints}
            adjacency = {int(k): [int(n) for n in v] for k, v in data['links'].items()}
            graph = graph_from_adjacency(positions, adjacency)
        else:
            graph = build_graph(waypoints, line_of_sight_blocker(obstacles))
        start_node = int(data['start'])
        goal_node = int(data['goal'])
    except (KeyError, TypeError, ValueError) as e:
        raise SceneLoadError(f"Invalid scene: {e}") from e

    ga_config = data.get('ga', {})
    if not isinstance(ga_config, dict):
        raise SceneLoadError("'ga' must be an object")

    scene = Scene(
        name=data.get('name', name),
        graph=graph,
        start_node=start_node,
        goal_node=goal_node,
        waypoints=waypoints,
        obstacles=obstacles,
        ga_config=dict(ga_config),
    )
    logger.info("Loaded scene '%s': %s", scene.name, get_graph_stats(graph))
    return scene


def load_scene(path: str) -> Scene:
    """Load a scene JSON file

    Args:
        path: Path to the scene file

    Returns:
        Loaded Scene

    Raises:
        SceneLoadError: unreadable file or invalid scene content
    """
    scene_path = Path(path)
    try:
        with open(scene_path, 'r') as f:
            data = json.load(f)
    except OSError as e:
        raise SceneLoadError(f"Cannot read scene file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SceneLoadError(f"Scene file {path} is not valid JSON: {e}") from e

    return scene_from_dict(data, name=scene_path.stem)
