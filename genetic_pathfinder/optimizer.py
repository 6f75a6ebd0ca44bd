#!/usr/bin/env python3
"""
Genetic Algorithm Path Optimizer
Generational control loop with elitism and stagnation-based termination
"""

import json
import math
import time
import random
import logging
from dataclasses import dataclass, field, asdict, fields
from enum import Enum
from typing import List, Dict, Any, Optional, Callable

import numpy as np
import networkx as nx

from .chromosome import PathChromosome
from .exceptions import ConfigurationError
from .fitness import PathFitnessEvaluator
from .operators import GAOperators, SELECTION_METHODS
from .performance import DistanceCache
from .population import PopulationInitializer

logger = logging.getLogger(__name__)


class EvolutionState(Enum):
    """States of the evolution loop"""
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    CONVERGED = "converged"
    STAGNATED = "stagnated"
    GENERATION_LIMIT_REACHED = "generation_limit_reached"
    CANCELLED = "cancelled"
    TERMINATED = "terminated"


@dataclass
class GAConfig:
    """Configuration for genetic algorithm"""
    population_size: int = 20
    mutation_rate: float = 0.05
    max_generations: int = 1000
    elitism_count: int = 2
    stagnation_limit: int = 50
    chromosome_length: Optional[int] = None  # Max waypoints per initial walk
    random_seed: Optional[int] = None

    crossover_rate: float = 1.0
    selection_method: str = "roulette"  # roulette, uniform, tournament
    tournament_size: int = 3

    # Fitness scoring
    fitness_scale: float = 1.0
    fitness_epsilon: float = 1e-6
    fitness_tolerance: float = 0.0  # Best-fitness change treated as no change
    target_fitness: Optional[float] = None  # Stop as converged once reached

    parallel_workers: int = 0
    record_population_history: bool = False
    verbose: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError for parameters no search can run with"""
        try:
            self._check_values()
        except TypeError as e:
            raise ConfigurationError(f"GA config value has the wrong type: {e}") from e

    def _check_values(self) -> None:
        if self.population_size <= 0:
            raise ConfigurationError(f"population_size must be positive, got {self.population_size}")
        if self.chromosome_length is not None and self.chromosome_length <= 0:
            raise ConfigurationError(f"chromosome_length must be positive, got {self.chromosome_length}")
        if self.max_generations <= 0:
            raise ConfigurationError(f"max_generations must be positive, got {self.max_generations}")
        if self.stagnation_limit <= 0:
            raise ConfigurationError(f"stagnation_limit must be positive, got {self.stagnation_limit}")
        if self.elitism_count < 0:
            raise ConfigurationError(f"elitism_count must be >= 0, got {self.elitism_count}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigurationError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ConfigurationError(f"crossover_rate must be in [0, 1], got {self.crossover_rate}")
        if self.selection_method not in SELECTION_METHODS:
            raise ConfigurationError(
                f"selection_method must be one of {SELECTION_METHODS}, got {self.selection_method!r}")
        if self.tournament_size <= 0:
            raise ConfigurationError(f"tournament_size must be positive, got {self.tournament_size}")
        if self.fitness_scale <= 0 or self.fitness_epsilon <= 0:
            raise ConfigurationError("fitness_scale and fitness_epsilon must be positive")
        if self.fitness_tolerance < 0:
            raise ConfigurationError(f"fitness_tolerance must be >= 0, got {self.fitness_tolerance}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GAConfig':
        """Create GAConfig from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            logger.warning("Ignoring unknown GA config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in d.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        return asdict(self)


def load_config(path: str) -> GAConfig:
    """Load a GAConfig from a JSON file"""
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigurationError(f"GA config file {path} must contain a JSON object")
    return GAConfig.from_dict(data.get('ga', data))


@dataclass
class GAResults:
    """Results from genetic algorithm path search"""
    best_chromosome: PathChromosome
    best_fitness: float
    generation_found: int
    total_generations: int
    total_time: float
    convergence_reason: str
    final_state: EvolutionState
    reached_goal: bool
    fitness_history: List[float]
    average_fitness_history: List[float]
    stats: Dict[str, Any]
    population_history: List[List[List[int]]] = field(default_factory=list)

    @property
    def best_path(self) -> List[int]:
        return list(self.best_chromosome.waypoints)


class GeneticPathOptimizer:
    """Genetic search for a near-optimal start-to-goal waypoint path"""

    def __init__(self, graph: nx.Graph, config: Optional[GAConfig] = None):
        """Initialize genetic optimizer

        Args:
            graph: Adjacency graph with waypoint positions (never mutated)
            config: GA configuration parameters
        """
        self.graph = graph
        self.config = config or GAConfig()

        # Search components, built per run in _setup_search
        self.rng = None
        self.population_initializer = None
        self.operators = None
        self.fitness_evaluator = None
        self.distance_cache = DistanceCache(graph)

        # Evolution tracking
        self.state = EvolutionState.TERMINATED
        self.generation = 0
        self.previous_best_fitness = None
        self.stagnation_count = 0
        self.fitness_history = []
        self.average_fitness_history = []
        self.population_history = []
        self.best_chromosome = None
        self.best_fitness = 0.0
        self.best_generation = 0
        self.start_time = None

        # Callbacks
        self.generation_callback = None
        self.progress_callback = None

    def _setup_search(self, start_node: int, goal_node: int):
        """Validate inputs and build per-run components"""
        self.config.validate()

        self.rng = random.Random(self.config.random_seed)
        self.population_initializer = PopulationInitializer(
            self.graph, start_node, goal_node, self.rng,
            max_path_length=self.config.chromosome_length
        )
        self.operators = GAOperators(self.graph, self.rng)
        self.fitness_evaluator = PathFitnessEvaluator(
            self.graph, goal_node,
            scale=self.config.fitness_scale,
            epsilon=self.config.fitness_epsilon,
            distance_cache=self.distance_cache,
            parallel_workers=self.config.parallel_workers
        )

        # Reset tracking
        self.generation = 0
        self.previous_best_fitness = None
        self.stagnation_count = 0
        self.fitness_history = []
        self.average_fitness_history = []
        self.population_history = []
        self.best_chromosome = None
        self.best_fitness = 0.0
        self.best_generation = 0

    def find_path(self, start_node: int, goal_node: int,
                  should_stop: Optional[Callable[[], bool]] = None) -> GAResults:
        """Search for a path from start to goal

        Args:
            start_node: Start waypoint id
            goal_node: Goal waypoint id
            should_stop: Optional cancellation check, polled once per generation

        Returns:
            GAResults with the best path found

        Raises:
            ConfigurationError: invalid configuration or unknown start/goal
        """
        self.state = EvolutionState.INITIALIZING
        self._setup_search(start_node, goal_node)

        if self.config.verbose:
            print(f"🧬 Starting GA path search:")
            print(f"   From waypoint {start_node} to waypoint {goal_node}")
            print(f"   Population: {self.config.population_size}")
            print(f"   Max generations: {self.config.max_generations}")

        population = self.population_initializer.create_population(self.config.population_size)

        self.start_time = time.time()
        convergence_reason = None

        for generation in range(self.config.max_generations):
            self.generation = generation
            self.state = EvolutionState.EVALUATING

            fitness_scores = self._evaluate_and_rank(population)
            current_best_fitness = fitness_scores[0]

            if (self.previous_best_fitness is not None and
                    abs(current_best_fitness - self.previous_best_fitness) <= self.config.fitness_tolerance):
                self.stagnation_count += 1
            else:
                self.stagnation_count = 0
            self.previous_best_fitness = current_best_fitness
            self._track_generation(population, fitness_scores)

            if self.generation_callback:
                self.generation_callback(generation, population, fitness_scores)
            if self.progress_callback:
                self.progress_callback((generation + 1) / self.config.max_generations, self.best_fitness)

            convergence_reason = self._check_termination(generation, current_best_fitness, should_stop)
            if convergence_reason:
                break

            population = self._evolve_generation(population)

        total_time = time.time() - self.start_time
        final_state = self.state
        self.state = EvolutionState.TERMINATED

        results = GAResults(
            best_chromosome=self.best_chromosome.copy(),
            best_fitness=self.best_fitness,
            generation_found=self.best_generation,
            total_generations=self.generation + 1,
            total_time=total_time,
            convergence_reason=convergence_reason,
            final_state=final_state,
            reached_goal=self.best_chromosome.reaches(goal_node),
            fitness_history=list(self.fitness_history),
            average_fitness_history=list(self.average_fitness_history),
            stats=self._get_optimization_stats(population),
            population_history=list(self.population_history),
        )
        self.distance_cache.log_cache_stats(logging.DEBUG)

        logger.info("GA search finished after %d generations (%s): best fitness %.6f, "
                    "path %s, reached goal: %s",
                    results.total_generations, convergence_reason, results.best_fitness,
                    results.best_path, results.reached_goal)

        if self.config.verbose:
            print(f"🏁 Search completed:")
            print(f"   Best fitness: {self.best_fitness:.6f}")
            print(f"   Found at generation: {self.best_generation}")
            print(f"   Reached goal: {results.reached_goal}")
            print(f"   Total time: {total_time:.2f}s")
            print(f"   Termination: {convergence_reason}")

        return results

    def _evaluate_and_rank(self, population: List[PathChromosome]) -> List[float]:
        """Evaluate every individual and sort the population best first"""
        self.fitness_evaluator.evaluate_population(population)
        population.sort(key=lambda c: c.fitness, reverse=True)
        return [c.fitness for c in population]

    def _track_generation(self, population: List[PathChromosome], fitness_scores: List[float]):
        """Record history and update the best-of-run copy"""
        current_best_fitness = fitness_scores[0]
        avg_fitness = sum(fitness_scores) / len(fitness_scores)

        self.fitness_history.append(current_best_fitness)
        self.average_fitness_history.append(avg_fitness)
        if self.config.record_population_history:
            self.population_history.append([list(c.waypoints) for c in population])

        if self.best_chromosome is None or current_best_fitness > self.best_fitness:
            self.best_chromosome = population[0].copy()
            self.best_fitness = current_best_fitness
            self.best_generation = self.generation

        logger.debug("Gen %d: best=%.6f avg=%.6f stagnation=%d",
                     self.generation, current_best_fitness, avg_fitness, self.stagnation_count)

        if self.config.verbose:
            print(f"   Gen {self.generation:4d}: Best={current_best_fitness:.6f}, "
                  f"Avg={avg_fitness:.6f}, Len={len(population[0])}")

    def _check_termination(self, generation: int, current_best_fitness: float,
                           should_stop: Optional[Callable[[], bool]]) -> Optional[str]:
        """Return the termination reason or None to keep evolving"""
        if self.config.target_fitness is not None and current_best_fitness >= self.config.target_fitness:
            self.state = EvolutionState.CONVERGED
            return "converged"
        if self.stagnation_count >= self.config.stagnation_limit:
            self.state = EvolutionState.STAGNATED
            logger.info("Stopping due to stagnation (no improvement in best fitness for %d generations)",
                        self.config.stagnation_limit)
            return "stagnation"
        if generation + 1 >= self.config.max_generations:
            self.state = EvolutionState.GENERATION_LIMIT_REACHED
            return "max_generations"
        if should_stop is not None and should_stop():
            self.state = EvolutionState.CANCELLED
            return "cancelled"
        return None

    def _evolve_generation(self, population: List[PathChromosome]) -> List[PathChromosome]:
        """Build the next population from a ranked one"""
        size = self.config.population_size
        next_generation = self.generation + 1

        new_population = self.operators.elitism_selection(population, min(self.config.elitism_count, size))

        needed = size - len(new_population)
        pair_count = math.ceil(needed / 2)
        parent_pairs = self.operators.select_parent_pairs(
            population, pair_count,
            method=self.config.selection_method,
            tournament_size=self.config.tournament_size
        ) if pair_count > 0 else []

        for parent_a, parent_b in parent_pairs:
            offspring = self.operators.crossover(parent_a, parent_b, self.config.crossover_rate)
            for child in offspring:
                if len(new_population) >= size:
                    break
                child = self.operators.neighbor_mutation(child, self.config.mutation_rate)
                child.generation = next_generation
                child.invalidate_fitness()
                new_population.append(child)

        return new_population

    def _get_optimization_stats(self, population: List[PathChromosome]) -> Dict[str, Any]:
        """Get optimization statistics"""
        if not self.fitness_history:
            return {}

        best_metrics = self.fitness_evaluator.get_path_metrics(self.best_chromosome)
        unique_paths = {tuple(c.waypoints) for c in population}
        lengths = np.array([len(c) for c in population], dtype=float)

        return {
            'total_evaluations': self.fitness_evaluator.evaluations,
            'best_fitness_progression': list(self.fitness_history),
            'avg_fitness_progression': list(self.average_fitness_history),
            'fitness_improvement': self.best_fitness - self.fitness_history[0],
            'convergence_generation': self.best_generation,
            'final_stagnation_count': self.stagnation_count,
            'unique_path_ratio': len(unique_paths) / len(population),
            'mean_path_waypoints': float(lengths.mean()),
            'best_path_length': best_metrics['path_length'],
            'best_goal_distance': best_metrics['goal_distance'],
            'best_connectivity': best_metrics['connectivity'],
            'best_path_stats': self.best_chromosome.get_path_stats(self.graph),
            'distance_cache': self.distance_cache.get_cache_info(),
        }

    def set_generation_callback(self, callback: Callable[[int, List[PathChromosome], List[float]], None]):
        """Set callback for each evaluated generation"""
        self.generation_callback = callback

    def set_progress_callback(self, callback: Callable[[float, float], None]):
        """Set callback for progress updates"""
        self.progress_callback = callback
