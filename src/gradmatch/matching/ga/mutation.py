"""Mutation operator: swap the placements of two graduates."""

from __future__ import annotations

from typing import Any, MutableMapping

import numpy as np

from ..models import PreferenceModel
from .population import Chromosome

__all__ = ["swap_assignments", "swap_mutation"]


def swap_assignments(solution: MutableMapping[int, int | None], key_a: int, key_b: int) -> None:
    solution[key_a], solution[key_b] = solution[key_b], solution[key_a]


def swap_mutation(
    chromosome: Chromosome,
    model: PreferenceModel,
    manager_weighting: Any,
    rng: np.random.Generator,
) -> Chromosome:
    """Swap two randomly chosen graduates' placements in place and re-score.

    Keys are sampled from the assignment itself, so sparse or non-contiguous
    graduate ids are handled. The input chromosome is modified.
    """
    keys = list(chromosome.solution)
    if len(keys) >= 2:
        first, second = rng.integers(0, len(keys), size=2)
        swap_assignments(chromosome.solution, keys[int(first)], keys[int(second)])
    return chromosome.rescore(model, manager_weighting)
