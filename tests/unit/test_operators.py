#!/usr/bin/env python3
"""
Unit tests for GA Operators
Tests selection, crossover with repair, and neighbor mutation
"""

import unittest
import random
import networkx as nx
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from genetic_pathfinder import GAOperators, PathChromosome, PopulationInitializer


def make_grid_graph(width: int = 4, height: int = 4) -> nx.Graph:
    """Grid graph with node id = y * width + x"""
    graph = nx.Graph()
    for y in range(height):
        for x in range(width):
            graph.add_node(y * width + x, position=(x, y, 0))
    for y in range(height):
        for x in range(width):
            node = y * width + x
            if x < width - 1:
                graph.add_edge(node, node + 1)
            if y < height - 1:
                graph.add_edge(node, node + width)
    return graph


def with_fitness(waypoints, fitness):
    chromosome = PathChromosome(waypoints)
    chromosome.fitness = fitness
    return chromosome


class TestGAOperators(unittest.TestCase):
    """Test GAOperators class functionality"""

    def setUp(self):
        """Set up test fixtures"""
        self.graph = make_grid_graph()
        self.operators = GAOperators(self.graph, random.Random(42))

        initializer = PopulationInitializer(self.graph, 0, 15, random.Random(1))
        self.population = initializer.create_population(20)

    def test_operators_initialization(self):
        operators = GAOperators(self.graph)
        self.assertIs(operators.graph, self.graph)
        self.assertIsInstance(operators.rng, random.Random)

    # =============================================================================
    # SELECTION OPERATOR TESTS
    # =============================================================================

    def test_roulette_prefers_fitter_individuals(self):
        population = [with_fitness([0, 1], 0.9), with_fitness([0, 4], 0.1)]
        pool = self.operators.roulette_wheel_selection(population, pool_size=2000)

        self.assertEqual(len(pool), 2000)
        strong = sum(1 for c in pool if c is population[0])
        self.assertGreater(strong, 1500)

    def test_roulette_never_picks_zero_fitness_when_others_positive(self):
        population = [with_fitness([0], 0.0), with_fitness([0, 1], 1.0), with_fitness([0, 4], 0.0)]
        pool = self.operators.roulette_wheel_selection(population, pool_size=200)
        self.assertTrue(all(c is population[1] for c in pool))

    def test_roulette_zero_total_fitness_falls_back_to_uniform(self):
        population = [with_fitness([0], 0.0) for _ in range(4)]
        pool = self.operators.roulette_wheel_selection(population, pool_size=400)
        self.assertEqual(len(pool), 400)
        picked = {id(c) for c in pool}
        self.assertEqual(picked, {id(c) for c in population})

    def test_roulette_default_pool_size(self):
        pool = self.operators.roulette_wheel_selection(
            [with_fitness([0, 1], 0.5), with_fitness([0, 4], 0.5)])
        self.assertEqual(len(pool), 2)

    def test_selection_on_empty_population(self):
        with self.assertRaises(ValueError):
            self.operators.roulette_wheel_selection([])
        with self.assertRaises(ValueError):
            self.operators.tournament_selection([])
        with self.assertRaises(ValueError):
            self.operators.uniform_pair_selection([])

    def test_tournament_of_whole_population_picks_best(self):
        population = [with_fitness([0, 1], 0.2), with_fitness([0, 4], 0.7), with_fitness([0], 0.0)]
        selected = self.operators.tournament_selection(population, tournament_size=10)
        self.assertIs(selected, population[1])

    def test_select_parent_pairs(self):
        for chromosome in self.population:
            chromosome.fitness = 1.0 / len(chromosome)

        for method in ('roulette', 'uniform', 'tournament'):
            pairs = self.operators.select_parent_pairs(self.population, 7, method=method)
            self.assertEqual(len(pairs), 7)
            for parent_a, parent_b in pairs:
                self.assertIn(parent_a, self.population)
                self.assertIn(parent_b, self.population)

        with self.assertRaises(ValueError):
            self.operators.select_parent_pairs(self.population, 2, method='rank')

    def test_elitism_selection_returns_copies(self):
        population = [with_fitness([0, 1], 0.2), with_fitness([0, 4], 0.7), with_fitness([0], 0.0)]
        elites = self.operators.elitism_selection(population, elite_size=2)

        self.assertEqual([c.fitness for c in elites], [0.7, 0.2])
        self.assertIsNot(elites[0], population[1])
        elites[0].waypoints.append(5)
        self.assertEqual(population[1].waypoints, [0, 4])

        self.assertEqual(self.operators.elitism_selection(population, elite_size=0), [])

    # =============================================================================
    # CROSSOVER OPERATOR TESTS
    # =============================================================================

    def test_repair_path_replaces_non_adjacent_waypoint(self):
        waypoints = [0, 5, 6]
        repaired = self.operators.repair_path(waypoints)

        self.assertGreaterEqual(repaired, 1)
        self.assertIn(waypoints[1], (1, 4))
        self.assertTrue(self.graph.has_edge(waypoints[0], waypoints[1]))

    def test_repair_path_keeps_valid_path(self):
        waypoints = [0, 1, 2, 3]
        self.assertEqual(self.operators.repair_path(waypoints), 0)
        self.assertEqual(waypoints, [0, 1, 2, 3])

    def test_repair_path_leaves_unrepairable_link(self):
        graph = nx.Graph(self.graph)
        graph.add_node(99, position=(9, 9, 0))
        operators = GAOperators(graph, random.Random(0))

        waypoints = [99, 3]
        self.assertEqual(operators.repair_path(waypoints), 0)
        self.assertEqual(waypoints, [99, 3])

    def test_crossover_endpoints(self):
        """Children start at parent A's start and end at parent B's end"""
        for _ in range(50):
            parent_a, parent_b = self.operators.uniform_pair_selection(self.population)
            child_a, child_b = self.operators.crossover(parent_a, parent_b)

            self.assertEqual(child_a.waypoints[0], parent_a.waypoints[0])
            self.assertEqual(child_a.waypoints[-1], parent_b.waypoints[-1])
            self.assertEqual(child_b.waypoints[0], parent_b.waypoints[0])
            self.assertEqual(child_b.waypoints[-1], parent_a.waypoints[-1])

    def test_single_point_crossover_splice(self):
        parent_a = PathChromosome([0, 1, 2, 3, 7])
        parent_b = PathChromosome([0, 4, 5, 6, 7, 11])

        child = self.operators.single_point_crossover(parent_a, parent_b, crossover_point=2)

        self.assertEqual(child.waypoints, [0, 1, 5, 6, 7, 11])
        self.assertEqual(child.parent_ids, [id(parent_a), id(parent_b)])
        self.assertIsNone(child.fitness)
        # 1 -> 5 is a grid edge, so no repair was needed
        self.assertEqual(child.creation_method, "single_point_crossover")

    def test_single_point_crossover_repairs_links(self):
        parent_a = PathChromosome([0, 1, 2, 3])
        parent_b = PathChromosome([0, 4, 8, 12])

        child = self.operators.single_point_crossover(parent_a, parent_b, crossover_point=3)

        self.assertEqual(child.waypoints[0], 0)
        self.assertEqual(child.waypoints[-1], 12)
        self.assertEqual(child.creation_method, "single_point_crossover_repaired")

    def test_single_waypoint_child_keeps_both_endpoints(self):
        """A one-waypoint splice still starts at A's start and ends at B's end"""
        parent_a = PathChromosome([0, 1, 2])
        parent_b = PathChromosome([5])

        child = self.operators.single_point_crossover(parent_a, parent_b)

        self.assertEqual(child.waypoints, [0, 5])

        child_a, child_b = self.operators.crossover(parent_a, parent_b)
        self.assertEqual(child_a.waypoints[0], 0)
        self.assertEqual(child_a.waypoints[-1], 5)
        self.assertEqual(child_b.waypoints[0], 5)
        self.assertEqual(child_b.waypoints[-1], 2)

    def test_single_waypoint_child_with_shared_endpoint(self):
        child = self.operators.single_point_crossover(PathChromosome([5, 6]), PathChromosome([5]))
        self.assertEqual(child.waypoints, [5])

    def test_crossover_with_empty_parent(self):
        empty = PathChromosome()
        parent = PathChromosome([0, 1, 2])

        child = self.operators.single_point_crossover(empty, parent)
        self.assertEqual(child.waypoints, [])

        child_a, child_b = self.operators.crossover(parent, empty)
        self.assertEqual(child_a.waypoints, [])
        self.assertEqual(child_b.waypoints, [])

    def test_crossover_rate_zero_copies_parents(self):
        parent_a = with_fitness([0, 1, 2], 0.5)
        parent_b = with_fitness([0, 4, 8], 0.3)

        child_a, child_b = self.operators.crossover(parent_a, parent_b, crossover_rate=0.0)

        self.assertEqual(child_a, parent_a)
        self.assertEqual(child_b, parent_b)
        self.assertIsNot(child_a, parent_a)
        self.assertEqual(child_a.creation_method, "crossover_copy")

    # =============================================================================
    # MUTATION OPERATOR TESTS
    # =============================================================================

    def test_mutation_keeps_endpoints(self):
        for chromosome in self.population:
            mutated = self.operators.neighbor_mutation(chromosome, mutation_rate=1.0)
            self.assertEqual(len(mutated), len(chromosome))
            self.assertEqual(mutated.waypoints[0], chromosome.waypoints[0])
            self.assertEqual(mutated.waypoints[-1], chromosome.waypoints[-1])

    def test_mutation_keeps_valid_paths_valid(self):
        for chromosome in self.population:
            if len(chromosome) < 2:
                continue
            mutated = self.operators.neighbor_mutation(chromosome, mutation_rate=1.0)
            for a, b in mutated.edges():
                self.assertTrue(self.graph.has_edge(a, b))

    def test_mutation_does_not_modify_input(self):
        original = with_fitness([0, 1, 2, 6, 7], 0.4)
        self.operators.neighbor_mutation(original, mutation_rate=1.0)
        self.assertEqual(original.waypoints, [0, 1, 2, 6, 7])
        self.assertEqual(original.fitness, 0.4)

    def test_zero_mutation_rate(self):
        original = with_fitness([0, 1, 2, 6, 7], 0.4)
        mutated = self.operators.neighbor_mutation(original, mutation_rate=0.0)
        self.assertEqual(mutated.waypoints, original.waypoints)
        self.assertEqual(mutated.fitness, 0.4)

    def test_mutation_changes_interior_gene(self):
        """Grid detour 0-1-5 can become 0-4-5"""
        original = with_fitness([0, 1, 5], 0.1)
        seen = set()
        for _ in range(50):
            mutated = self.operators.neighbor_mutation(original, mutation_rate=1.0)
            seen.add(mutated.waypoints[1])
            if mutated.waypoints != original.waypoints:
                self.assertIsNone(mutated.fitness)
                self.assertIn("neighbor_mutation", mutated.creation_method)
        self.assertEqual(seen, {1, 4})

    def test_mutation_skips_gene_without_neighbors(self):
        graph = nx.Graph(self.graph)
        graph.add_node(99, position=(9, 9, 0))
        operators = GAOperators(graph, random.Random(3))

        original = PathChromosome([99, 5, 6])
        mutated = operators.neighbor_mutation(original, mutation_rate=1.0)
        self.assertEqual(mutated.waypoints, [99, 5, 6])

    def test_mutation_of_short_paths(self):
        for waypoints in ([], [0], [0, 1]):
            mutated = self.operators.neighbor_mutation(PathChromosome(waypoints), mutation_rate=1.0)
            self.assertEqual(mutated.waypoints, waypoints)


if __name__ == '__main__':
    unittest.main()
