#!/usr/bin/env python3
"""
Genetic Path Finder Package
Genetic algorithm search for start-to-goal paths over waypoint graphs
"""

# Core components
from .chromosome import PathChromosome
from .population import PopulationInitializer
from .optimizer import (
    GeneticPathOptimizer, GAConfig, GAResults, EvolutionState, load_config
)

# Fitness evaluation
from .fitness import PathFitnessEvaluator

# Performance optimization
from .performance import DistanceCache, CacheStats

# Genetic operators
from .operators import GAOperators, SELECTION_METHODS

# Visualization
from .visualization import PathVisualizer, VisualizationConfig

# Errors and utilities
from .exceptions import ConfigurationError
from .common import setup_logging

__version__ = "1.0.0"

__all__ = [
    # Core
    'PathChromosome',
    'PopulationInitializer',
    'GeneticPathOptimizer',
    'GAConfig',
    'GAResults',
    'EvolutionState',
    'load_config',

    # Fitness
    'PathFitnessEvaluator',

    # Performance
    'DistanceCache',
    'CacheStats',

    # Operators
    'GAOperators',
    'SELECTION_METHODS',

    # Visualization
    'PathVisualizer',
    'VisualizationConfig',

    # Utilities
    'ConfigurationError',
    'setup_logging',
]
