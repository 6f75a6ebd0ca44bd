"""
Path Services Package
Scene loading, waypoint graph construction and result formatting
"""

from .waypoint_graph import (
    Waypoint, build_graph, graph_from_adjacency, get_graph_stats, connected
)
from .obstacles import BoxObstacle, SphereObstacle, line_of_sight_blocker
from .scene_loader import Scene, SceneLoadError, load_scene
from .path_formatter import PathFormatter

__all__ = [
    'Waypoint',
    'build_graph',
    'graph_from_adjacency',
    'get_graph_stats',
    'connected',
    'BoxObstacle',
    'SphereObstacle',
    'line_of_sight_blocker',
    'Scene',
    'SceneLoadError',
    'load_scene',
    'PathFormatter'
]
