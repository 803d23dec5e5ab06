"""Pydantic schemas for run configuration.

A :class:`RunConfig` is validated once, when a session or CLI run starts, so
the GA operators can trust the values they receive. YAML files under
``configs/`` should validate against it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import (
    DEFAULT_CROSSOVER_PROB,
    DEFAULT_ELITE_COUNT,
    DEFAULT_MANAGER_WEIGHTING,
    DEFAULT_MUTATION_PROB,
    DEFAULT_POPULATION_SIZE,
)

__all__ = ["RunConfig"]


class RunConfig(BaseModel):
    """Parameters of one genetic-algorithm run.

    Attributes
    ----------
    iterations : int
        Number of generations to evolve.
    population_size : int
        Chromosomes kept per generation.
    manager_weighting : int
        Percentage (0-100) of placement-side satisfaction counted in fitness.
    elite_count : int
        Best chromosomes copied unchanged into the next generation.
    crossover_prob, mutation_prob : float
        Bernoulli probabilities applied on every fill trial.
    rebalance_quotas : bool
        Repair quota overruns left by crossover.
    seed : int, optional
        Seed for ``numpy.random.default_rng``; ``None`` draws fresh entropy.
    """

    model_config = ConfigDict(extra="forbid")

    iterations: int = Field(default=100, gt=0, description="Generations to run")
    population_size: int = Field(
        default=DEFAULT_POPULATION_SIZE, gt=0, description="Chromosomes per generation"
    )
    manager_weighting: int = Field(
        default=DEFAULT_MANAGER_WEIGHTING,
        ge=0,
        le=100,
        description="Weight of placement preferences, in percent",
    )
    elite_count: int = Field(
        default=DEFAULT_ELITE_COUNT, ge=0, description="Elites kept per generation"
    )
    crossover_prob: float = Field(default=DEFAULT_CROSSOVER_PROB, ge=0, le=1)
    mutation_prob: float = Field(default=DEFAULT_MUTATION_PROB, ge=0, le=1)
    rebalance_quotas: bool = Field(
        default=False, description="Move graduates out of over-filled placements"
    )
    seed: int | None = Field(default=None, ge=0, description="Random seed")

    @model_validator(mode="after")
    def _elites_fit_population(self) -> "RunConfig":
        if self.elite_count > self.population_size:
            self.elite_count = self.population_size
        return self
