#!/usr/bin/env python3
"""
Unit tests for PathFormatter and PathVisualizer
"""

import json
import os
import sys
import tempfile
import unittest

import networkx as nx

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from genetic_pathfinder import (
    GeneticPathOptimizer, GAConfig, PathVisualizer, VisualizationConfig
)
from path_services import PathFormatter, graph_from_adjacency


class FormatterTestCase(unittest.TestCase):
    """Shared search result fixture"""

    @classmethod
    def setUpClass(cls):
        positions = {0: (0, 0), 1: (4, 0), 2: (8, 0), 3: (4, 3)}
        cls.graph = graph_from_adjacency(positions, {0: [1, 3], 1: [2], 3: [2]})
        config = GAConfig(population_size=8, max_generations=15, random_seed=11)
        cls.results = GeneticPathOptimizer(cls.graph, config).find_path(0, 2)


class TestPathFormatter(FormatterTestCase):
    """Test result formatting"""

    def setUp(self):
        self.formatter = PathFormatter()

    def test_format_path(self):
        self.assertEqual(self.formatter.format_path([0, 3, 5]), "0 -> 3 -> 5")
        self.assertEqual(self.formatter.format_path([4]), "4")
        self.assertEqual(self.formatter.format_path([]), "(empty path)")

    def test_format_result_dict(self):
        data = self.formatter.format_result_dict(self.results, 0, 2)

        self.assertEqual(data['path'], self.results.best_path)
        self.assertEqual(data['start_node'], 0)
        self.assertEqual(data['goal_node'], 2)
        self.assertEqual(data['fitness'], self.results.best_fitness)
        self.assertEqual(data['final_state'], self.results.final_state.value)
        self.assertEqual(len(data['fitness_history']), self.results.total_generations)
        json.dumps(data)

    def test_format_result_dict_describes_best_chromosome(self):
        data = self.formatter.format_result_dict(self.results)

        self.assertEqual(data['path'], self.results.best_path)
        self.assertEqual(data['creation_method'], self.results.best_chromosome.creation_method)
        self.assertEqual(data['path_stats']['waypoint_count'], len(self.results.best_path))

    def test_format_result_cli(self):
        text = self.formatter.format_result_cli(self.results, 0, 2)
        self.assertIn("Path Search Results", text)
        self.assertIn(self.formatter.format_path(self.results.best_path), text)
        self.assertIn("Request:         0 -> 2", text)
        self.assertIn("=" * 50, text)

    def test_format_result_cli_without_results(self):
        self.assertIn("No path data", self.formatter.format_result_cli(None))

    def test_save_result_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'result.json')
            self.assertEqual(self.formatter.save_result_json(self.results, path, 0, 2), path)
            with open(path) as f:
                exported = json.load(f)

        self.assertEqual(exported['format_version'], '1.0')
        self.assertEqual(exported['result']['path'], self.results.best_path)
        self.assertIn('export_timestamp', exported)


class TestPathVisualizer(FormatterTestCase):
    """Test plot generation"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.visualizer = PathVisualizer(VisualizationConfig(output_dir=self.tmpdir.name,
                                                             timestamp_files=False))

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_save_path_plot(self):
        path = self.visualizer.save_path_plot(self.graph, self.results.best_path, 0, 2)
        self.assertTrue(os.path.exists(path))
        self.assertTrue(path.endswith('best_path.png'))

    def test_save_path_plot_with_empty_path(self):
        path = self.visualizer.save_path_plot(self.graph, [], goal_node=2, filename='empty')
        self.assertTrue(os.path.exists(path))

    def test_save_fitness_plot(self):
        path = self.visualizer.save_fitness_plot(self.results)
        self.assertTrue(os.path.exists(path))
        self.assertTrue(path.endswith('fitness_evolution.png'))

    def test_output_directory_created(self):
        nested = os.path.join(self.tmpdir.name, 'a', 'b')
        PathVisualizer(VisualizationConfig(output_dir=nested))
        self.assertTrue(os.path.isdir(nested))


if __name__ == '__main__':
    unittest.main()
