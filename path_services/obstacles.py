#!/usr/bin/env python3
"""
Obstacle Geometry
Line-of-sight tests between waypoints against box and sphere barriers
"""

import logging
from dataclasses import dataclass
from typing import Sequence, List, Callable, Dict, Any

import numpy as np

logger = logging.getLogger(__name__)

# Parallel-to-slab threshold for the box test
_PARALLEL_EPS = 1e-12


@dataclass
class BoxObstacle:
    """Axis-aligned box barrier given by its min and max corners"""
    min_corner: Sequence[float]
    max_corner: Sequence[float]
    name: str = "box"

    def __post_init__(self):
        lo = np.asarray(self.min_corner, dtype=float)
        hi = np.asarray(self.max_corner, dtype=float)
        if lo.shape != (3,) or hi.shape != (3,):
            raise ValueError(f"Box {self.name} corners must be 3D")
        if np.any(lo > hi):
            raise ValueError(f"Box {self.name} min corner exceeds max corner")
        self._lo = lo
        self._hi = hi

    def intersects_segment(self, p1: np.ndarray, p2: np.ndarray) -> bool:
        """Slab test of the closed segment p1-p2 against the box"""
        p1 = np.asarray(p1, dtype=float)
        direction = np.asarray(p2, dtype=float) - p1
        t_min, t_max = 0.0, 1.0

        for axis in range(3):
            if abs(direction[axis]) < _PARALLEL_EPS:
                if p1[axis] < self._lo[axis] or p1[axis] > self._hi[axis]:
                    return False
                continue
            t1 = (self._lo[axis] - p1[axis]) / direction[axis]
            t2 = (self._hi[axis] - p1[axis]) / direction[axis]
            if t1 > t2:
                t1, t2 = t2, t1
            t_min = max(t_min, t1)
            t_max = min(t_max, t2)
            if t_min > t_max:
                return False
        return True


@dataclass
class SphereObstacle:
    """Spherical barrier"""
    center: Sequence[float]
    radius: float
    name: str = "sphere"

    def __post_init__(self):
        center = np.asarray(self.center, dtype=float)
        if center.shape != (3,):
            raise ValueError(f"Sphere {self.name} center must be 3D")
        if self.radius <= 0:
            raise ValueError(f"Sphere {self.name} radius must be positive")
        self._center = center

    def intersects_segment(self, p1: np.ndarray, p2: np.ndarray) -> bool:
        """Closest-point distance of the segment p1-p2 to the center"""
        p1 = np.asarray(p1, dtype=float)
        direction = np.asarray(p2, dtype=float) - p1
        length_sq = float(direction @ direction)
        if length_sq == 0.0:
            closest = p1
        else:
            t = float(np.clip((self._center - p1) @ direction / length_sq, 0.0, 1.0))
            closest = p1 + t * direction
        return float(np.linalg.norm(closest - self._center)) <= self.radius


def line_of_sight_blocker(obstacles: List[Any]) -> Callable[[np.ndarray, np.ndarray], bool]:
    """Build an ``is_blocked(p1, p2)`` predicate over a set of obstacles

    Args:
        obstacles: Objects exposing ``intersects_segment(p1, p2)``

    Returns:
        Predicate that is True when any obstacle blocks the segment
    """
    obstacles = list(obstacles)

    def is_blocked(p1: np.ndarray, p2: np.ndarray) -> bool:
        return any(obstacle.intersects_segment(p1, p2) for obstacle in obstacles)

    return is_blocked


def obstacle_from_dict(data: Dict[str, Any]):
    """Create an obstacle from its scene-file description

    Supported shapes:
        {"type": "box", "min": [x, y, z], "max": [x, y, z]}
        {"type": "sphere", "center": [x, y, z], "radius": r}
    """
    kind = data.get('type')
    name = data.get('name', kind or 'obstacle')
    if kind == 'box':
        return BoxObstacle(data['min'], data['max'], name=name)
    if kind == 'sphere':
        return SphereObstacle(data['center'], float(data['radius']), name=name)
    raise ValueError(f"Unknown obstacle type: {kind!r}")
