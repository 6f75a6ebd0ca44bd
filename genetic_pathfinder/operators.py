#!/usr/bin/env python3
"""
Genetic Algorithm Operators
Selection, crossover with link repair, and neighbor mutation for waypoint paths
"""

import random
import logging
from typing import List, Tuple, Optional

import numpy as np
import networkx as nx

from .chromosome import PathChromosome

logger = logging.getLogger(__name__)

SELECTION_METHODS = ('roulette', 'uniform', 'tournament')


class GAOperators:
    """Collection of genetic algorithm operators for waypoint path search"""

    def __init__(self, graph: nx.Graph, rng: Optional[random.Random] = None):
        """Initialize genetic operators

        Args:
            graph: Adjacency graph of waypoints (read only)
            rng: Seeded random source shared with the rest of the search
        """
        self.graph = graph
        self.rng = rng or random.Random()
        self._neighbor_cache = {}

    def _get_neighbors(self, node: int) -> List[int]:
        """Neighbors of a waypoint in deterministic order"""
        if node not in self._neighbor_cache:
            if node in self.graph:
                self._neighbor_cache[node] = sorted(self.graph.neighbors(node))
            else:
                self._neighbor_cache[node] = []
        return self._neighbor_cache[node]

    # =============================================================================
    # SELECTION OPERATORS
    # =============================================================================

    def roulette_wheel_selection(self, population: List[PathChromosome],
                                 pool_size: Optional[int] = None) -> List[PathChromosome]:
        """Build a fitness-proportional mating pool

        Args:
            population: Evaluated population to select from
            pool_size: Number of draws (defaults to population size)

        Returns:
            Mating pool; the same individual may appear several times
        """
        if not population:
            raise ValueError("Population cannot be empty")

        pool_size = len(population) if pool_size is None else pool_size
        fitness = np.array([c.fitness or 0.0 for c in population], dtype=float)
        total = fitness.sum()

        if total <= 0:
            # Degenerate wheel: every individual equally likely
            return [population[self.rng.randrange(len(population))] for _ in range(pool_size)]

        cumulative = np.cumsum(fitness / total)
        pool = []
        for _ in range(pool_size):
            r = self.rng.random()
            index = int(np.searchsorted(cumulative, r, side='left'))
            pool.append(population[min(index, len(population) - 1)])
        return pool

    def uniform_pair_selection(self, population: List[PathChromosome]) -> Tuple[PathChromosome, PathChromosome]:
        """Pick two parents uniformly at random"""
        if not population:
            raise ValueError("Population cannot be empty")
        size = len(population)
        return population[self.rng.randrange(size)], population[self.rng.randrange(size)]

    def tournament_selection(self, population: List[PathChromosome],
                             tournament_size: int = 3) -> PathChromosome:
        """Select individual using tournament selection

        Args:
            population: Population to select from
            tournament_size: Number of individuals in tournament

        Returns:
            Selected chromosome
        """
        if not population:
            raise ValueError("Population cannot be empty")

        tournament_size = max(1, min(tournament_size, len(population)))
        tournament = self.rng.sample(population, tournament_size)
        return max(tournament, key=lambda x: x.fitness or 0)

    def select_parent_pairs(self, population: List[PathChromosome], pair_count: int,
                            method: str = 'roulette',
                            tournament_size: int = 3) -> List[Tuple[PathChromosome, PathChromosome]]:
        """Select parent pairs for one generation of crossover

        Args:
            population: Evaluated population
            pair_count: Number of parent pairs required
            method: 'roulette', 'uniform' or 'tournament'
            tournament_size: Tournament size for 'tournament'

        Returns:
            List of (parent_a, parent_b) tuples
        """
        if method == 'roulette':
            pool = self.roulette_wheel_selection(population, len(population))
            pairs = []
            for i in range(pair_count):
                pairs.append((pool[(2 * i) % len(pool)], pool[(2 * i + 1) % len(pool)]))
            return pairs
        if method == 'uniform':
            return [self.uniform_pair_selection(population) for _ in range(pair_count)]
        if method == 'tournament':
            return [(self.tournament_selection(population, tournament_size),
                     self.tournament_selection(population, tournament_size))
                    for _ in range(pair_count)]
        raise ValueError(f"Unknown selection method: {method}")

    def elitism_selection(self, population: List[PathChromosome],
                          elite_size: int = 2) -> List[PathChromosome]:
        """Copies of the best individuals, best first"""
        if not population or elite_size <= 0:
            return []
        sorted_population = sorted(population, key=lambda x: x.fitness or 0, reverse=True)
        return [c.copy() for c in sorted_population[:elite_size]]

    # =============================================================================
    # CROSSOVER OPERATORS
    # =============================================================================

    def repair_path(self, waypoints: List[int]) -> int:
        """Replace the second waypoint of every non-adjacent pair with a random
        neighbor of the first; links with no candidate stay invalid

        Args:
            waypoints: Waypoint sequence, repaired in place

        Returns:
            Number of links that were repaired
        """
        repaired = 0
        for i in range(len(waypoints) - 1):
            current_node = waypoints[i]
            next_node = waypoints[i + 1]
            if self.graph.has_edge(current_node, next_node):
                continue

            neighbors = self._get_neighbors(current_node)
            if not neighbors:
                logger.debug("No repair candidate for link %s -> %s", current_node, next_node)
                continue

            waypoints[i + 1] = neighbors[self.rng.randrange(len(neighbors))]
            repaired += 1
        return repaired

    def single_point_crossover(self, parent_a: PathChromosome, parent_b: PathChromosome,
                               crossover_point: Optional[int] = None) -> PathChromosome:
        """Splice a prefix of parent A onto a suffix of parent B, then repair

        Args:
            parent_a: Parent providing the prefix and the start waypoint
            parent_b: Parent providing the suffix and the end waypoint
            crossover_point: Cut index (random within the shorter parent if None)

        Returns:
            Child chromosome; empty if either parent is empty
        """
        if not parent_a.waypoints or not parent_b.waypoints:
            logger.debug("Crossover with an empty parent, returning empty child")
            child = PathChromosome()
            child.creation_method = "single_point_crossover"
            child.parent_ids = [id(parent_a), id(parent_b)]
            return child

        shorter = min(len(parent_a.waypoints), len(parent_b.waypoints))
        if crossover_point is None:
            crossover_point = self.rng.randrange(shorter)
        crossover_point = max(0, min(crossover_point, shorter - 1))

        waypoints = parent_a.waypoints[:crossover_point] + parent_b.waypoints[crossover_point:]
        repaired = self.repair_path(waypoints)

        # Fixed endpoints; a single-waypoint child needs room for both
        if len(waypoints) == 1 and parent_a.waypoints[0] != parent_b.waypoints[-1]:
            waypoints.append(parent_b.waypoints[-1])
        waypoints[0] = parent_a.waypoints[0]
        waypoints[-1] = parent_b.waypoints[-1]

        child = PathChromosome(waypoints)
        child.creation_method = "single_point_crossover_repaired" if repaired else "single_point_crossover"
        child.parent_ids = [id(parent_a), id(parent_b)]
        return child

    def crossover(self, parent_a: PathChromosome, parent_b: PathChromosome,
                  crossover_rate: float = 1.0) -> Tuple[PathChromosome, PathChromosome]:
        """Produce two complementary children sharing one cut point

        Args:
            parent_a: First parent
            parent_b: Second parent
            crossover_rate: Probability of performing crossover

        Returns:
            (A-prefix/B-suffix child, B-prefix/A-suffix child)
        """
        if self.rng.random() >= crossover_rate:
            offspring_a = parent_a.copy()
            offspring_b = parent_b.copy()
            offspring_a.creation_method = "crossover_copy"
            offspring_b.creation_method = "crossover_copy"
            return offspring_a, offspring_b

        if not parent_a.waypoints or not parent_b.waypoints:
            return (self.single_point_crossover(parent_a, parent_b),
                    self.single_point_crossover(parent_b, parent_a))

        point = self.rng.randrange(min(len(parent_a.waypoints), len(parent_b.waypoints)))
        return (self.single_point_crossover(parent_a, parent_b, point),
                self.single_point_crossover(parent_b, parent_a, point))

    # =============================================================================
    # MUTATION OPERATORS
    # =============================================================================

    def neighbor_mutation(self, chromosome: PathChromosome,
                          mutation_rate: float = 0.05) -> PathChromosome:
        """Replace interior waypoints with neighbors of their predecessor

        Each interior gene mutates independently with ``mutation_rate``.
        Candidates that are also adjacent to the successor are preferred so the
        outgoing link stays valid. First and last waypoints never change.

        Args:
            chromosome: Chromosome to mutate (left untouched)
            mutation_rate: Per-gene mutation probability

        Returns:
            Mutated copy of the chromosome
        """
        mutated = chromosome.copy()
        waypoints = mutated.waypoints
        changed = False

        for i in range(1, len(waypoints) - 1):
            if self.rng.random() >= mutation_rate:
                continue

            candidates = self._get_neighbors(waypoints[i - 1])
            if not candidates:
                continue

            successor = waypoints[i + 1]
            bridging = [n for n in candidates if self.graph.has_edge(n, successor)]
            pool = bridging or candidates
            new_node = pool[self.rng.randrange(len(pool))]

            if new_node != waypoints[i]:
                waypoints[i] = new_node
                changed = True

        if changed:
            mutated.invalidate_fitness()
            mutated.creation_method = f"{chromosome.creation_method}+neighbor_mutation"
        return mutated
