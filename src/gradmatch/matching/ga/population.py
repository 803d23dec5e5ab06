"""Chromosomes, random seeding and population ordering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np

from ..models import Assignment, PreferenceModel
from .evaluation import calculate_fitness

__all__ = [
    "Chromosome",
    "random_solution",
    "random_chromosome",
    "initial_population",
    "sort_population",
    "distinct_ratio",
    "solution_from_mapping",
]

logger = logging.getLogger(__name__)


@dataclass
class Chromosome:
    """A full assignment together with its cached fitness.

    ``fitness`` is only meaningful for the ``solution`` it was computed from;
    call :meth:`rescore` after changing the assignment.
    """

    solution: Assignment
    fitness: float = 0.0

    @classmethod
    def scored(
        cls, solution: Assignment, model: PreferenceModel, manager_weighting: Any
    ) -> "Chromosome":
        return cls(solution, calculate_fitness(solution, model, manager_weighting))

    def rescore(self, model: PreferenceModel, manager_weighting: Any) -> "Chromosome":
        self.fitness = calculate_fitness(self.solution, model, manager_weighting)
        return self

    def copy(self) -> "Chromosome":
        return Chromosome(dict(self.solution), self.fitness)

    def key(self) -> tuple[tuple[int, int | None], ...]:
        return tuple(sorted(self.solution.items()))

    def to_dict(self) -> dict[str, Any]:
        return {"solution": dict(self.solution), "fitness": self.fitness}


def _slot_list(model: PreferenceModel) -> list[int]:
    slots: list[int] = []
    for placement in model.placements:
        slots.extend([placement.id] * placement.quota)
    return slots


def random_solution(model: PreferenceModel, rng: np.random.Generator) -> Assignment:
    slots = _slot_list(model)
    shuffled = [slots[idx] for idx in rng.permutation(len(slots))]
    if len(shuffled) < len(model.graduates):
        logger.warning(
            "Only %d placement slots for %d graduates; %d graduate(s) left unassigned",
            len(shuffled),
            len(model.graduates),
            len(model.graduates) - len(shuffled),
        )
    result: Assignment = {}
    for position, graduate in enumerate(model.graduates):
        result[graduate.id] = shuffled[position] if position < len(shuffled) else None
    return result


def random_chromosome(
    model: PreferenceModel, manager_weighting: Any, rng: np.random.Generator
) -> Chromosome:
    return Chromosome.scored(random_solution(model, rng), model, manager_weighting)


def initial_population(
    model: PreferenceModel, size: int, manager_weighting: Any, rng: np.random.Generator
) -> list[Chromosome]:
    if size <= 0:
        raise ValueError("population size must be positive")
    return [random_chromosome(model, manager_weighting, rng) for _ in range(size)]


def sort_population(population: list[Chromosome]) -> list[Chromosome]:
    population.sort(key=lambda chromosome: chromosome.fitness, reverse=True)
    return population


def distinct_ratio(population: list[Chromosome]) -> float:
    if not population:
        return 0.0
    return len({chromosome.key() for chromosome in population}) / len(population)


def solution_from_mapping(payload: Mapping[Any, Any]) -> Assignment:
    """Coerce JSON-style ``{"1": 2}`` mappings into an integer assignment."""
    return {
        int(graduate): (None if placement is None else int(placement))
        for graduate, placement in payload.items()
    }
