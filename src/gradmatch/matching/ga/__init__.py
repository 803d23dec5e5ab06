"""Public API for the matching genetic-algorithm components."""

from .crossover import Pairing, crossover_factory, partial_match_crossover, rebalance_quotas
from .evaluation import (
    EvaluationReport,
    FitnessBreakdown,
    calculate_fitness,
    evaluate_solution,
    fitness_breakdown,
)
from .genetic import GenerationSummary, GeneticRun, run_genetic_algorithm
from .mutation import swap_assignments, swap_mutation
from .population import (
    Chromosome,
    initial_population,
    random_chromosome,
    random_solution,
    solution_from_mapping,
    sort_population,
)
from .selection import roulette_wheel_selection

__all__ = [
    "Chromosome",
    "EvaluationReport",
    "FitnessBreakdown",
    "GenerationSummary",
    "GeneticRun",
    "Pairing",
    "calculate_fitness",
    "crossover_factory",
    "evaluate_solution",
    "fitness_breakdown",
    "initial_population",
    "partial_match_crossover",
    "random_chromosome",
    "random_solution",
    "rebalance_quotas",
    "roulette_wheel_selection",
    "run_genetic_algorithm",
    "solution_from_mapping",
    "sort_population",
    "swap_assignments",
    "swap_mutation",
]
