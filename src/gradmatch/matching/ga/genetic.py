"""Genetic algorithm driver that evolves a population of assignments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import numpy as np

from ...config.schemas import RunConfig
from ..models import PreferenceModel
from .crossover import crossover_factory
from .mutation import swap_mutation
from .population import Chromosome, distinct_ratio, initial_population, sort_population
from .selection import roulette_wheel_selection

__all__ = [
    "GenerationSummary",
    "GeneticRun",
    "ProgressCallback",
    "progress_percent",
    "run_genetic_algorithm",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


@dataclass(frozen=True)
class GenerationSummary:
    generation: int
    best_fitness: float
    average_fitness: float
    diversity: float


@dataclass(frozen=True)
class GeneticRun:
    best: Chromosome
    history: list[GenerationSummary]
    population: list[Chromosome]
    config: RunConfig
    cancelled: bool = False
    diagnostics: Mapping[str, Any] = field(default_factory=dict)


def progress_percent(generation: int, iterations: int) -> int | None:
    """Whole percentage reached at ``generation``, or ``None`` between whole steps."""
    if (generation * 100) % iterations:
        return None
    return generation * 100 // iterations


def _select_pair(
    population: list[Chromosome], rng: np.random.Generator, diagnostics: dict[str, Any]
) -> tuple[Chromosome, Chromosome]:
    chosen = []
    for _ in range(2):
        candidate = roulette_wheel_selection(population, rng)
        if candidate is None:
            diagnostics["degenerate_selections"] = diagnostics.get("degenerate_selections", 0) + 1
            candidate = population[int(rng.integers(0, len(population)))]
        chosen.append(candidate.copy())
    return chosen[0], chosen[1]


def run_genetic_algorithm(
    model: PreferenceModel,
    config: RunConfig | Mapping[str, Any],
    rng: np.random.Generator | None = None,
    *,
    on_progress: ProgressCallback | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> GeneticRun:
    cfg = config if isinstance(config, RunConfig) else RunConfig.model_validate(config)
    rng = rng if rng is not None else np.random.default_rng(cfg.seed)
    weighting = cfg.manager_weighting
    crossover = crossover_factory(cfg.model_dump())

    if not model.is_balanced():
        logger.warning(
            "Total quota %d does not match %d graduates",
            model.total_quota,
            len(model.graduates),
        )

    population = initial_population(model, cfg.population_size, weighting, rng)
    logger.info(
        "Seeded %d random assignments for %d graduates over %d placements",
        len(population),
        len(model.graduates),
        len(model.placements),
        extra={"iterations": cfg.iterations, "manager_weighting": weighting},
    )

    history: list[GenerationSummary] = []
    diagnostics: dict[str, Any] = {}
    cancelled = False

    for generation in range(1, cfg.iterations + 1):
        if should_stop is not None and should_stop():
            logger.info("Search cancelled before generation %d", generation)
            cancelled = True
            break

        sort_population(population)
        next_population = [chromosome.copy() for chromosome in population[: cfg.elite_count]]

        choice_a, choice_b = _select_pair(population, rng, diagnostics)
        while len(next_population) < cfg.population_size:
            if rng.random() < cfg.crossover_prob:
                choice_a, choice_b = crossover(choice_a, choice_b, model, weighting, rng)
            if rng.random() < cfg.mutation_prob:
                choice_a = swap_mutation(choice_a, model, weighting, rng)
                choice_b = swap_mutation(choice_b, model, weighting, rng)
            next_population.append(choice_a.copy())
            next_population.append(choice_b.copy())

        population = next_population[: cfg.population_size]

        fitness = [chromosome.fitness for chromosome in population]
        summary = GenerationSummary(
            generation=generation,
            best_fitness=float(max(fitness)),
            average_fitness=float(np.mean(fitness)),
            diversity=distinct_ratio(population),
        )
        history.append(summary)

        percent = progress_percent(generation, cfg.iterations)
        if percent is not None:
            logger.debug(
                "Generation %d/%d best=%.2f", generation, cfg.iterations, summary.best_fitness
            )
            if on_progress is not None:
                on_progress(percent)

    if diagnostics.get("degenerate_selections"):
        logger.warning(
            "Roulette selection was undefined %d time(s); fell back to uniform draws",
            diagnostics["degenerate_selections"],
        )

    sort_population(population)
    best = population[0]
    logger.info(
        "Genetic search finished with best fitness %.2f",
        best.fitness,
        extra={"generations": len(history), "cancelled": cancelled},
    )
    return GeneticRun(
        best=best,
        history=history,
        population=population,
        config=cfg,
        cancelled=cancelled,
        diagnostics=diagnostics,
    )
