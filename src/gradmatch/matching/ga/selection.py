"""Parent selection for the matching genetic algorithm."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .population import Chromosome

__all__ = ["selection_weights", "roulette_wheel_selection"]

logger = logging.getLogger(__name__)


def selection_weights(population: Sequence[Chromosome]) -> np.ndarray | None:
    """Fitness-proportionate weights, or ``None`` when they are undefined."""
    if not population:
        return None
    fitness = np.asarray([chromosome.fitness for chromosome in population], dtype=float)
    total = fitness.sum()
    if not np.isfinite(total) or total <= 0:
        return None
    return fitness / total


def roulette_wheel_selection(
    population: Sequence[Chromosome], rng: np.random.Generator
) -> Chromosome | None:
    """Return the first chromosome whose cumulative weight exceeds a uniform draw.

    Returns ``None`` for an empty population or a non-positive total fitness,
    where the wheel has no defined slices.
    """
    weights = selection_weights(population)
    if weights is None:
        logger.debug(
            "Roulette selection undefined for %d chromosome(s) with non-positive total fitness",
            len(population),
        )
        return None
    cumulative = np.cumsum(weights)
    draw = rng.random()
    # cumulative weights are not monotonic once some fitness is negative
    hits = np.flatnonzero(cumulative > draw)
    if hits.size:
        idx = int(hits[0])
    else:
        # round-off left the draw above the last cumulative value
        idx = int(np.flatnonzero(weights > 0)[-1])
    return population[idx]
