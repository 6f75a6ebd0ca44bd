#!/usr/bin/env python3
"""
Genetic Algorithm Chromosome Class
Implements waypoint-sequence path representation for GA path finding
"""

from typing import List, Optional, Tuple, Dict, Any
import networkx as nx


class PathChromosome:
    """Represents a candidate path as an ordered sequence of waypoint ids"""

    def __init__(self, waypoints: Optional[List[int]] = None):
        """Initialize path chromosome

        Args:
            waypoints: Ordered waypoint ids, first element is the start waypoint
        """
        self.waypoints = list(waypoints) if waypoints else []

        # Cached fitness (higher = better, None = not evaluated)
        self.fitness = None

        # Metadata
        self.generation = 0                # Generation when created
        self.parent_ids = []               # Parent chromosome IDs (for tracking)
        self.creation_method = "unknown"   # How chromosome was created

    def __len__(self) -> int:
        return len(self.waypoints)

    @property
    def start(self) -> Optional[int]:
        """First waypoint of the path"""
        return self.waypoints[0] if self.waypoints else None

    @property
    def end(self) -> Optional[int]:
        """Last waypoint of the path"""
        return self.waypoints[-1] if self.waypoints else None

    def invalidate_fitness(self) -> None:
        """Drop cached fitness after the waypoint sequence changed"""
        self.fitness = None

    def edges(self) -> List[Tuple[int, int]]:
        """Consecutive waypoint pairs of the path"""
        return list(zip(self.waypoints[:-1], self.waypoints[1:]))

    def reaches(self, goal_node: int) -> bool:
        """Whether the path ends at the goal waypoint"""
        return self.end == goal_node

    def count_valid_links(self, graph: nx.Graph) -> int:
        """Count consecutive pairs that are adjacent in the graph"""
        return sum(1 for a, b in self.edges() if graph.has_edge(a, b))

    def is_connected(self, graph: nx.Graph) -> bool:
        """Validate that every consecutive pair is a graph edge"""
        if len(self.waypoints) < 2:
            return False
        return self.count_valid_links(graph) == len(self.waypoints) - 1

    def has_cycle(self) -> bool:
        """Whether any waypoint is visited more than once"""
        return len(set(self.waypoints)) != len(self.waypoints)

    def get_path_stats(self, graph: nx.Graph) -> Dict[str, Any]:
        """Get structural statistics for the path"""
        link_count = max(len(self.waypoints) - 1, 0)
        valid_links = self.count_valid_links(graph)
        return {
            'waypoint_count': len(self.waypoints),
            'link_count': link_count,
            'valid_links': valid_links,
            'invalid_links': link_count - valid_links,
            'is_connected': link_count > 0 and valid_links == link_count,
            'has_cycle': self.has_cycle(),
            'fitness': self.fitness,
        }

    def copy(self) -> 'PathChromosome':
        """Create a deep copy of the chromosome"""
        new_chromosome = PathChromosome(self.waypoints)
        new_chromosome.fitness = self.fitness
        new_chromosome.generation = self.generation
        new_chromosome.parent_ids = self.parent_ids.copy()
        new_chromosome.creation_method = self.creation_method
        return new_chromosome

    def to_path_result(self, goal_node: int) -> Dict[str, Any]:
        """Convert chromosome to the path result format used by formatters"""
        return {
            'path': list(self.waypoints),
            'fitness': self.fitness if self.fitness is not None else 0.0,
            'reached_goal': self.reaches(goal_node),
            'generation': self.generation,
            'creation_method': self.creation_method,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, PathChromosome):
            return NotImplemented
        return self.waypoints == other.waypoints

    __hash__ = None

    def __str__(self) -> str:
        """String representation of chromosome"""
        fitness_str = f"{self.fitness:.6f}" if self.fitness is not None else "None"
        return (f"PathChromosome(waypoints={self.waypoints}, "
                f"fitness={fitness_str}, "
                f"method={self.creation_method})")

    def __repr__(self) -> str:
        return self.__str__()
