#!/usr/bin/env python3
"""
Path Formatter
Formats path search results for CLI display and JSON export
"""

import json
from datetime import datetime
from typing import Dict, List, Any, Optional

from genetic_pathfinder.optimizer import GAResults


class PathFormatter:
    """Formats GA path search results for different presentation contexts"""

    def format_path(self, path: List[int]) -> str:
        """Waypoint sequence as "a -> b -> c"

        Args:
            path: Waypoint ids in order

        Returns:
            Arrow-joined string, or "(empty path)"
        """
        if not path:
            return "(empty path)"
        return " -> ".join(str(node) for node in path)

    def format_result_dict(self, results: GAResults,
                           start_node: Optional[int] = None,
                           goal_node: Optional[int] = None) -> Dict[str, Any]:
        """Plain dictionary view of a search result

        Args:
            results: Search results
            start_node: Requested start waypoint
            goal_node: Requested goal waypoint

        Returns:
            JSON-serializable dictionary
        """
        stats = results.stats or {}
        best = results.best_chromosome.to_path_result(
            goal_node if goal_node is not None else results.best_chromosome.end)
        return {
            'start_node': start_node,
            'goal_node': goal_node,
            'path': best['path'],
            'fitness': results.best_fitness,
            'reached_goal': results.reached_goal,
            'creation_method': best['creation_method'],
            'path_length': stats.get('best_path_length'),
            'goal_distance': stats.get('best_goal_distance'),
            'connectivity': stats.get('best_connectivity'),
            'generation_found': results.generation_found,
            'path_stats': stats.get('best_path_stats'),
            'total_generations': results.total_generations,
            'convergence_reason': results.convergence_reason,
            'final_state': results.final_state.value,
            'total_time_s': results.total_time,
            'fitness_history': list(results.fitness_history),
            'average_fitness_history': list(results.average_fitness_history),
            'total_evaluations': stats.get('total_evaluations'),
        }

    def format_result_cli(self, results: GAResults,
                          start_node: Optional[int] = None,
                          goal_node: Optional[int] = None) -> str:
        """Format search result for CLI output"""
        if results is None:
            return "❌ No path data available"

        data = self.format_result_dict(results, start_node, goal_node)

        lines = []
        lines.append("📊 Path Search Results:")
        lines.append("=" * 50)
        if start_node is not None and goal_node is not None:
            lines.append(f"Request:         {start_node} -> {goal_node}")
        lines.append(f"Path:            {self.format_path(data['path'])}")
        lines.append(f"Waypoints:       {len(data['path'])}")
        lines.append(f"Reached Goal:    {'yes' if data['reached_goal'] else 'no'}")
        if data['path_length'] is not None:
            lines.append(f"Path Length:     {data['path_length']:.2f}")
        if data['goal_distance'] is not None:
            lines.append(f"Goal Distance:   {data['goal_distance']:.2f}")
        if data['connectivity'] is not None:
            lines.append(f"Valid Links:     {data['connectivity'] * 100:.0f}%")
        lines.append(f"Fitness:         {data['fitness']:.6f}")
        lines.append(f"Found At Gen:    {data['generation_found']}")
        lines.append(f"Generations:     {data['total_generations']}")
        lines.append(f"Termination:     {data['convergence_reason']}")
        lines.append(f"Search Time:     {data['total_time_s']:.2f} seconds")
        lines.append("=" * 50)

        return "\n".join(lines)

    def export_result_json(self, results: GAResults,
                           start_node: Optional[int] = None,
                           goal_node: Optional[int] = None) -> str:
        """Export complete search result as JSON"""
        export_data = {
            'result': self.format_result_dict(results, start_node, goal_node),
            'export_timestamp': datetime.now().isoformat(),
            'format_version': '1.0'
        }
        return json.dumps(export_data, indent=2, default=str)

    def save_result_json(self, results: GAResults, filepath: str,
                         start_node: Optional[int] = None,
                         goal_node: Optional[int] = None) -> str:
        """Write the JSON export to a file and return its path"""
        with open(filepath, 'w') as f:
            f.write(self.export_result_json(results, start_node, goal_node))
        return filepath
