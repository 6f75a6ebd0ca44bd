#!/usr/bin/env python3
"""
Genetic Algorithm Fitness Evaluation System
Scores waypoint paths by length, goal proximity and link validity
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Any, Optional

import networkx as nx

from .chromosome import PathChromosome
from .performance import DistanceCache

logger = logging.getLogger(__name__)

DEFAULT_FITNESS_SCALE = 1.0
DEFAULT_FITNESS_EPSILON = 1e-6


class PathFitnessEvaluator:
    """Fitness evaluation for start-to-goal waypoint paths

    fitness = scale * connectivity / (path_length + goal_distance + epsilon)

    where connectivity is the fraction of consecutive waypoint pairs that are
    graph edges. Shorter, closer-to-goal and more valid paths score higher.
    Paths with fewer than two waypoints score exactly 0.

    The score does not require reaching the goal: a short walk that dead-ends
    near the goal can outscore a longer path that reaches it. Check
    GAResults.reached_goal before treating the best path as complete.
    """

    def __init__(self, graph: nx.Graph, goal_node: int,
                 scale: float = DEFAULT_FITNESS_SCALE,
                 epsilon: float = DEFAULT_FITNESS_EPSILON,
                 distance_cache: Optional[DistanceCache] = None,
                 parallel_workers: int = 0):
        """Initialize fitness evaluator

        Args:
            graph: Adjacency graph with waypoint positions
            goal_node: Goal waypoint id
            scale: Numerator of the reciprocal score
            epsilon: Floor added to the denominator
            distance_cache: Optional shared distance cache
            parallel_workers: Thread count for population evaluation (0 = sequential)
        """
        if scale <= 0:
            raise ValueError("Fitness scale must be positive")
        if epsilon <= 0:
            raise ValueError("Fitness epsilon must be positive")

        self.graph = graph
        self.goal_node = goal_node
        self.scale = scale
        self.epsilon = epsilon
        self.distance_cache = distance_cache or DistanceCache(graph)
        self.parallel_workers = parallel_workers

        # Performance tracking
        self.evaluations = 0
        self.best_fitness = 0.0

    def get_path_length(self, waypoints: List[int]) -> float:
        """Sum of Euclidean distances between consecutive waypoints"""
        return sum(self.distance_cache.get_distance(a, b)
                   for a, b in zip(waypoints[:-1], waypoints[1:]))

    def get_goal_distance(self, waypoints: List[int]) -> float:
        """Euclidean distance from the last waypoint to the goal"""
        if not waypoints:
            return float('inf')
        return self.distance_cache.get_distance(waypoints[-1], self.goal_node)

    def get_connectivity(self, waypoints: List[int]) -> float:
        """Fraction of consecutive pairs that are adjacent in the graph"""
        link_count = len(waypoints) - 1
        if link_count <= 0:
            return 0.0
        valid = sum(1 for a, b in zip(waypoints[:-1], waypoints[1:])
                    if self.graph.has_edge(a, b))
        return valid / link_count

    def calculate_fitness(self, waypoints: List[int]) -> float:
        """Score a raw waypoint sequence"""
        if len(waypoints) < 2:
            return 0.0

        connectivity = self.get_connectivity(waypoints)
        if connectivity == 0.0:
            return 0.0

        denominator = (self.get_path_length(waypoints) +
                       self.get_goal_distance(waypoints) +
                       self.epsilon)
        return self.scale * connectivity / denominator

    def evaluate_chromosome(self, chromosome: PathChromosome) -> float:
        """Evaluate fitness of a single chromosome and cache it on the chromosome

        Args:
            chromosome: Chromosome to evaluate

        Returns:
            Fitness score (>= 0, higher is better)
        """
        fitness = self.calculate_fitness(chromosome.waypoints)
        chromosome.fitness = fitness

        self.evaluations += 1
        if fitness > self.best_fitness:
            self.best_fitness = fitness

        return fitness

    def evaluate_population(self, population: List[PathChromosome]) -> List[float]:
        """Evaluate fitness of entire population

        Args:
            population: Population to evaluate

        Returns:
            List of fitness scores in population order
        """
        if self.parallel_workers and self.parallel_workers > 1 and len(population) > 1:
            with ThreadPoolExecutor(max_workers=self.parallel_workers) as executor:
                fitness_scores = list(executor.map(self.calculate_fitness,
                                                   [c.waypoints for c in population]))
            for chromosome, fitness in zip(population, fitness_scores):
                chromosome.fitness = fitness
            self.evaluations += len(population)
            self.best_fitness = max([self.best_fitness] + fitness_scores)
            return fitness_scores

        return [self.evaluate_chromosome(chromosome) for chromosome in population]

    def get_path_metrics(self, chromosome: PathChromosome) -> Dict[str, Any]:
        """Get the measurable quantities behind a chromosome's fitness"""
        waypoints = chromosome.waypoints
        link_count = max(len(waypoints) - 1, 0)
        connectivity = self.get_connectivity(waypoints)
        return {
            'path_length': self.get_path_length(waypoints) if waypoints else 0.0,
            'goal_distance': self.get_goal_distance(waypoints),
            'connectivity': connectivity,
            'valid_links': int(round(connectivity * link_count)),
            'link_count': link_count,
            'reached_goal': chromosome.reaches(self.goal_node),
            'fitness': self.calculate_fitness(waypoints),
        }
