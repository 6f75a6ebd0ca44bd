#!/usr/bin/env python3
"""
GA Population Initialization
Creates the starting population with cycle-avoiding random walks
"""

import random
import logging
from typing import List, Optional

import networkx as nx

from .chromosome import PathChromosome
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PopulationInitializer:
    """Creates initial populations of start-anchored random walk paths"""

    def __init__(self, graph: nx.Graph, start_node: int, goal_node: int,
                 rng: Optional[random.Random] = None,
                 max_path_length: Optional[int] = None):
        """Initialize population creator

        Args:
            graph: Adjacency graph of waypoints
            start_node: Starting waypoint for all paths
            goal_node: Goal waypoint that ends a successful walk
            rng: Seeded random source shared with the rest of the search
            max_path_length: Maximum waypoints per walk (None = graph size)
        """
        if max_path_length is not None and max_path_length <= 0:
            raise ConfigurationError(
                f"max_path_length must be positive, got {max_path_length}")

        self.graph = graph
        self.start_node = start_node
        self.goal_node = goal_node
        self.rng = rng or random.Random()
        self.max_path_length = max_path_length or max(graph.number_of_nodes(), 1)

        self._neighbor_cache = {}

        self.validate_endpoints()

    def validate_endpoints(self) -> None:
        """Fail fast when start or goal is not a waypoint of the graph"""
        missing = [name for name, node in (('start', self.start_node), ('goal', self.goal_node))
                   if node not in self.graph]
        if missing:
            raise ConfigurationError(
                f"{' and '.join(missing)} waypoint not in adjacency graph "
                f"(start={self.start_node}, goal={self.goal_node})")

    def _get_neighbors(self, node: int) -> List[int]:
        """Neighbors of a waypoint in deterministic order"""
        if node not in self._neighbor_cache:
            self._neighbor_cache[node] = sorted(self.graph.neighbors(node))
        return self._neighbor_cache[node]

    def create_population(self, size: int) -> List[PathChromosome]:
        """Create initial population of random walk paths

        Args:
            size: Population size

        Returns:
            Exactly ``size`` chromosomes
        """
        if size <= 0:
            raise ConfigurationError(f"Population size must be positive, got {size}")

        population = []
        for _ in range(size):
            chromosome = self.create_random_walk_path()
            chromosome.creation_method = "random_walk"
            chromosome.generation = 0
            population.append(chromosome)

        reached = sum(1 for c in population if c.reaches(self.goal_node))
        logger.debug("Population created: %d/%d paths reach goal %s",
                     reached, size, self.goal_node)
        return population

    def create_random_walk_path(self) -> PathChromosome:
        """Walk from the start, never revisiting a waypoint, until the goal,
        a dead end, or the length cap is reached"""
        current_node = self.start_node
        waypoints = [current_node]
        visited = {current_node}

        while current_node != self.goal_node and len(waypoints) < self.max_path_length:
            unvisited = [n for n in self._get_neighbors(current_node) if n not in visited]

            if not unvisited:
                logger.debug("Dead end at waypoint %s after %d steps",
                             current_node, len(waypoints) - 1)
                break

            current_node = unvisited[self.rng.randrange(len(unvisited))]
            waypoints.append(current_node)
            visited.add(current_node)

        return PathChromosome(waypoints)
