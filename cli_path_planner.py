#!/usr/bin/env python3
"""
Command Line Path Planner
Runs the genetic path search on a waypoint scene file
"""

import argparse
import json
import logging
import os
import sys
from typing import Dict, Any, List, Optional

from genetic_pathfinder import (
    GeneticPathOptimizer, GAConfig, GAResults, ConfigurationError,
    PathVisualizer, VisualizationConfig, SELECTION_METHODS, setup_logging
)
from path_services import PathFormatter, Scene, SceneLoadError, load_scene, get_graph_stats

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2


class CLIPathPlanner:
    """Command line front end around the genetic path optimizer"""

    def __init__(self, scene: Scene, config: GAConfig):
        self.scene = scene
        self.config = config
        self.formatter = PathFormatter()

    def show_scene_summary(self):
        """Print the scene and search request"""
        stats = get_graph_stats(self.scene.graph)
        print(f"🗺️  Scene '{self.scene.name}':")
        print(f"   Waypoints: {stats.get('waypoints', 0)}, links: {stats.get('links', 0)}, "
              f"components: {stats.get('components', 0)}")
        print(f"   Obstacles: {len(self.scene.obstacles)}")
        print(f"   Request: {self.scene.start_node} -> {self.scene.goal_node}")

    def run(self) -> GAResults:
        """Run the search for the scene's start and goal"""
        optimizer = GeneticPathOptimizer(self.scene.graph, self.config)
        return optimizer.find_path(self.scene.start_node, self.scene.goal_node)

    def display_results(self, results: GAResults):
        print()
        print(self.formatter.format_result_cli(results, self.scene.start_node, self.scene.goal_node))
        if not results.reached_goal:
            print("⚠️ Best path does not reach the goal "
                  "(goal may be unreachable from the start)")

    def save_plots(self, results: GAResults, output_dir: str) -> List[str]:
        """Save path and fitness plots into output_dir"""
        visualizer = PathVisualizer(VisualizationConfig(output_dir=output_dir))
        return [
            visualizer.save_path_plot(self.scene.graph, results.best_path,
                                      self.scene.start_node, self.scene.goal_node,
                                      title=f"Best Path - {self.scene.name}"),
            visualizer.save_fitness_plot(results),
        ]

    def save_json(self, results: GAResults, filepath: str) -> str:
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return self.formatter.save_result_json(results, filepath,
                                               self.scene.start_node, self.scene.goal_node)


def build_config(scene: Scene, args: argparse.Namespace) -> GAConfig:
    """Merge defaults, the scene's GA block, a config file and CLI flags

    Later sources override earlier ones.
    """
    values: Dict[str, Any] = dict(scene.ga_config)

    if args.config:
        try:
            with open(args.config, 'r') as f:
                file_values = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read GA config {args.config}: {e}") from e
        if not isinstance(file_values, dict):
            raise ConfigurationError(f"GA config {args.config} must contain a JSON object")
        values.update(file_values.get('ga', file_values))

    overrides = {
        'population_size': args.population_size,
        'max_generations': args.generations,
        'mutation_rate': args.mutation_rate,
        'elitism_count': args.elitism,
        'stagnation_limit': args.stagnation_limit,
        'random_seed': args.seed,
        'selection_method': args.selection,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    if args.verbose:
        values['verbose'] = True

    try:
        config = GAConfig.from_dict(values)
        config.validate()
    except TypeError as e:
        raise ConfigurationError(f"Invalid GA config: {e}") from e

    logger.debug("GA config: %s", config.to_dict())
    return config


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Genetic Waypoint Path Planner - Command Line Interface',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--scene',
        required=True,
        help='Scene JSON file with waypoints, obstacles, start and goal'
    )

    parser.add_argument(
        '--population-size', '-p',
        type=int,
        help='Number of paths per generation'
    )

    parser.add_argument(
        '--generations', '-g',
        type=int,
        help='Maximum number of generations'
    )

    parser.add_argument(
        '--mutation-rate', '-m',
        type=float,
        help='Per-waypoint mutation probability'
    )

    parser.add_argument(
        '--elitism',
        type=int,
        help='Number of best paths carried into the next generation'
    )

    parser.add_argument(
        '--stagnation-limit',
        type=int,
        help='Stop after this many generations without best-fitness change'
    )

    parser.add_argument(
        '--seed',
        type=int,
        help='Random seed for reproducible runs'
    )

    parser.add_argument(
        '--selection',
        choices=list(SELECTION_METHODS),
        help='Parent selection method'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='JSON file with GA parameters'
    )

    parser.add_argument(
        '--plot',
        metavar='DIR',
        help='Save path and fitness plots into DIR'
    )

    parser.add_argument(
        '--json',
        metavar='FILE',
        help='Write the result as JSON to FILE'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print per-generation progress and debug logging'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = create_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        scene = load_scene(args.scene)
        config = build_config(scene, args)
        planner = CLIPathPlanner(scene, config)
        planner.show_scene_summary()
        results = planner.run()
    except SceneLoadError as e:
        print(f"❌ Scene error: {e}")
        return EXIT_CONFIG_ERROR
    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    planner.display_results(results)

    if args.json:
        json_file = planner.save_json(results, args.json)
        print(f"💾 Result saved to {json_file}")

    if args.plot:
        print("\n📊 Creating plots...")
        for plot_file in planner.save_plots(results, args.plot):
            print(f"   • {plot_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
