#!/usr/bin/env python3
"""
GA Waypoint Distance Caching System
Caches pairwise waypoint distances to accelerate fitness evaluation
"""

import time
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Any, Tuple

import numpy as np
import networkx as nx

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Statistics for cache performance monitoring"""
    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate as percentage"""
        if self.total_requests == 0:
            return 0.0
        return (self.cache_hits / self.total_requests) * 100


def waypoint_position(graph: nx.Graph, node: int) -> np.ndarray:
    """Read a waypoint's 3D position from the graph

    Args:
        graph: Adjacency graph whose nodes carry a 'position' attribute
        node: Waypoint id

    Returns:
        Position as a float numpy array of length 3
    """
    return np.asarray(graph.nodes[node]['position'], dtype=float)


class DistanceCache:
    """Thread-safe LRU cache of Euclidean distances between waypoints"""

    def __init__(self, graph: nx.Graph, max_size: int = 20000, enable_stats: bool = True):
        """Initialize distance cache

        Args:
            graph: Adjacency graph providing waypoint positions
            max_size: Maximum number of waypoint pairs to cache
            enable_stats: Whether to track cache statistics
        """
        self.graph = graph
        self.max_size = max_size
        self.enable_stats = enable_stats

        # OrderedDict gives LRU ordering
        self._cache: OrderedDict[Tuple[int, int], float] = OrderedDict()
        self._lock = threading.RLock()

        self.stats = CacheStats() if enable_stats else None
        self._creation_time = time.time()

    @staticmethod
    def get_pair_key(node_a: int, node_b: int) -> Tuple[int, int]:
        """Order-independent key for a waypoint pair"""
        return (node_a, node_b) if node_a <= node_b else (node_b, node_a)

    def get_distance(self, node_a: int, node_b: int) -> float:
        """Get cached distance between two waypoints or calculate it

        Args:
            node_a: First waypoint id
            node_b: Second waypoint id

        Returns:
            Euclidean distance between the waypoint positions
        """
        if node_a == node_b:
            return 0.0

        key = self.get_pair_key(node_a, node_b)

        with self._lock:
            if self.stats:
                self.stats.total_requests += 1

            if key in self._cache:
                distance = self._cache.pop(key)
                self._cache[key] = distance
                if self.stats:
                    self.stats.cache_hits += 1
                return distance

            if self.stats:
                self.stats.cache_misses += 1

            distance = float(np.linalg.norm(
                waypoint_position(self.graph, node_a) - waypoint_position(self.graph, node_b)
            ))
            self._cache[key] = distance

            if len(self._cache) > self.max_size:
                excess = len(self._cache) - self.max_size
                for _ in range(excess):
                    self._cache.popitem(last=False)

            return distance

    def clear(self):
        """Clear all cached distances"""
        with self._lock:
            self._cache.clear()
            if self.stats:
                self.stats = CacheStats()

    def get_cache_info(self) -> Dict[str, Any]:
        """Get information about cache state and performance"""
        with self._lock:
            cache_size = len(self._cache)

        info = {
            'cache_size': cache_size,
            'max_size': self.max_size,
            'memory_usage_percent': (cache_size / self.max_size) * 100 if self.max_size > 0 else 0,
            'uptime_seconds': time.time() - self._creation_time,
        }

        if self.stats:
            info.update({
                'total_requests': self.stats.total_requests,
                'cache_hits': self.stats.cache_hits,
                'cache_misses': self.stats.cache_misses,
                'hit_rate_percent': self.stats.hit_rate,
            })

        return info

    def log_cache_stats(self, level: int = logging.INFO):
        """Log a one-line summary of cache statistics"""
        info = self.get_cache_info()
        logger.log(level, "Distance cache: %d/%d pairs, %d requests, hit rate %.1f%%",
                   info['cache_size'], info['max_size'],
                   info.get('total_requests', 0), info.get('hit_rate_percent', 0.0))
