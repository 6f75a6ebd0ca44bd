#!/usr/bin/env python3
"""
GA Path Visualization
Saves plots of the waypoint graph, the best path and fitness evolution
"""

import logging
from datetime import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import networkx as nx

from .optimizer import GAResults
from .performance import waypoint_position

logger = logging.getLogger(__name__)


@dataclass
class VisualizationConfig:
    """Configuration for visualization generation"""
    output_dir: str = "ga_visualizations"
    figure_format: str = "png"  # png, pdf, svg
    figure_size: Tuple[int, int] = (12, 9)
    dpi: int = 120
    timestamp_files: bool = True


class PathVisualizer:
    """Renders waypoint graphs, paths and fitness histories to image files"""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        self.config = config or VisualizationConfig()

        self.output_dir = Path(self.config.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.colors = {
            'edge': '#BBBBBB',
            'waypoint': '#45B7D1',
            'path': '#FF6B6B',
            'start': '#2ca02c',
            'goal': '#d62728',
            'best': '#1f77b4',
            'average': '#ff7f0e',
        }

    def save_figure(self, fig: plt.Figure, filename: str) -> str:
        """Save figure and close it

        Args:
            fig: Matplotlib figure to save
            filename: Base filename (without extension)

        Returns:
            Full path to saved file
        """
        if self.config.timestamp_files:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{filename}_{timestamp}"

        filepath = self.output_dir / f"{filename}.{self.config.figure_format}"
        fig.savefig(filepath, dpi=self.config.dpi, bbox_inches='tight', facecolor='white')
        plt.close(fig)

        logger.info("Saved plot %s", filepath)
        return str(filepath)

    def save_path_plot(self, graph: nx.Graph, path: List[int],
                       start_node: Optional[int] = None, goal_node: Optional[int] = None,
                       title: str = "Best Path", filename: str = "best_path") -> str:
        """Plot the graph in the XY plane with a path drawn over it

        Args:
            graph: Adjacency graph with waypoint positions
            path: Waypoint sequence to highlight
            start_node: Start waypoint to mark (defaults to first path waypoint)
            goal_node: Goal waypoint to mark
            title: Plot title
            filename: Base output filename

        Returns:
            Path to saved image
        """
        fig, ax = plt.subplots(figsize=self.config.figure_size)

        for a, b in graph.edges():
            pa, pb = waypoint_position(graph, a), waypoint_position(graph, b)
            ax.plot([pa[0], pb[0]], [pa[1], pb[1]], color=self.colors['edge'],
                    linewidth=0.8, zorder=1)

        xy = [waypoint_position(graph, n) for n in graph.nodes()]
        if xy:
            ax.scatter([p[0] for p in xy], [p[1] for p in xy], s=25,
                       color=self.colors['waypoint'], zorder=2)

        if path:
            points = [waypoint_position(graph, n) for n in path]
            ax.plot([p[0] for p in points], [p[1] for p in points], color=self.colors['path'],
                    linewidth=2.5, marker='o', zorder=3, label=f"path ({len(path)} waypoints)")

        start_node = path[0] if start_node is None and path else start_node
        for node, key, label in ((start_node, 'start', 'Start'), (goal_node, 'goal', 'Goal')):
            if node is not None and node in graph:
                p = waypoint_position(graph, node)
                ax.scatter([p[0]], [p[1]], s=120, color=self.colors[key], marker='*',
                           zorder=4, label=f"{label} ({node})")

        ax.set_title(title)
        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_aspect('equal', adjustable='datalim')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='best')

        return self.save_figure(fig, filename)

    def save_fitness_plot(self, results: GAResults, title: str = "Fitness Evolution",
                          filename: str = "fitness_evolution") -> str:
        """Plot per-generation best and average fitness"""
        fig, ax = plt.subplots(figsize=self.config.figure_size)
        generations = range(len(results.fitness_history))

        ax.plot(generations, results.fitness_history, color=self.colors['best'],
                linewidth=2, label='Best')
        ax.plot(generations, results.average_fitness_history, color=self.colors['average'],
                linewidth=1.5, alpha=0.8, label='Average')
        ax.axvline(results.generation_found, color='gray', linestyle='--', alpha=0.6,
                   label=f"Best found (gen {results.generation_found})")

        ax.set_title(f"{title} ({results.convergence_reason})")
        ax.set_xlabel('Generation')
        ax.set_ylabel('Fitness')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='best')

        return self.save_figure(fig, filename)
