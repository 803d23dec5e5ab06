"""Fitness scoring and human-readable evaluation of assignments."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Mapping

from ...config.constants import MAX_RANK_BONUS, TOP_CHOICES
from ..models import PreferenceModel

__all__ = [
    "FitnessBreakdown",
    "EvaluationReport",
    "fitness_breakdown",
    "placement_scale",
    "calculate_fitness",
    "evaluate_solution",
]


@dataclass(frozen=True)
class FitnessBreakdown:
    graduate: float
    placement: float

    def total(self, manager_weighting: Any = 100) -> float:
        return self.graduate + self.placement * placement_scale(manager_weighting)


def _rank_bonus(rank: int | None) -> int:
    if rank is None:
        return 0
    return MAX_RANK_BONUS - rank


def fitness_breakdown(
    solution: Mapping[int, int | None], model: PreferenceModel
) -> FitnessBreakdown:
    graduate_fitness = 0
    placement_fitness = 0
    for graduate_id, placement_id in solution.items():
        if placement_id is None:
            continue
        if model.graduate(graduate_id) is None or model.placement(placement_id) is None:
            continue
        placement_fitness += _rank_bonus(model.placement_rank(placement_id, graduate_id))
        graduate_fitness += _rank_bonus(model.graduate_rank(graduate_id, placement_id))
    return FitnessBreakdown(float(graduate_fitness), float(placement_fitness))


def placement_scale(manager_weighting: Any) -> float:
    """Factor applied to placement-side fitness.

    Values outside ``[0, 100]`` (or non-numeric ones) leave the placement side
    unscaled; validated configurations never produce them.
    """
    if isinstance(manager_weighting, bool) or not isinstance(manager_weighting, Real):
        return 1.0
    if not math.isfinite(manager_weighting) or not 0 <= manager_weighting <= 100:
        return 1.0
    if manager_weighting == 0:
        return 0.0
    return float(manager_weighting) / 100.0


def calculate_fitness(
    solution: Mapping[int, int | None],
    model: PreferenceModel,
    manager_weighting: Any = 100,
) -> float:
    return fitness_breakdown(solution, model).total(manager_weighting)


@dataclass(frozen=True)
class EvaluationReport:
    graduates_first_choice: int
    graduates_top_choices: int
    placements_first_choice: int
    placements_top_choices: int
    total_graduates: int
    total_placements: int
    top_choices: int = TOP_CHOICES

    def lines(self) -> list[str]:
        return [
            f"Graduates with their first choice: {self.graduates_first_choice}/{self.total_graduates}",
            f"Graduates with one of their top {self.top_choices} choices: "
            f"{self.graduates_top_choices}/{self.total_graduates}",
            f"Managers with their first choice: {self.placements_first_choice}/{self.total_placements}",
            f"Managers with one of their top {self.top_choices} choices: "
            f"{self.placements_top_choices}/{self.total_placements}",
        ]

    def to_dict(self) -> dict[str, int]:
        return {
            "graduates_first_choice": self.graduates_first_choice,
            "graduates_top_choices": self.graduates_top_choices,
            "placements_first_choice": self.placements_first_choice,
            "placements_top_choices": self.placements_top_choices,
            "total_graduates": self.total_graduates,
            "total_placements": self.total_placements,
        }


def evaluate_solution(
    solution: Mapping[int, int | None],
    model: PreferenceModel,
    *,
    top_choices: int = TOP_CHOICES,
) -> EvaluationReport:
    graduates_first = graduates_top = placements_first = placements_top = 0
    for graduate_id, placement_id in solution.items():
        if placement_id is None:
            continue
        graduate = model.graduate(graduate_id)
        placement = model.placement(placement_id)
        if graduate is None or placement is None:
            continue
        if graduate.placement_rankings[:1] == (placement_id,):
            graduates_first += 1
        if placement_id in graduate.placement_rankings[:top_choices]:
            graduates_top += 1
        if placement.graduate_rankings[:1] == (graduate_id,):
            placements_first += 1
        if graduate_id in placement.graduate_rankings[:top_choices]:
            placements_top += 1
    return EvaluationReport(
        graduates_first_choice=graduates_first,
        graduates_top_choices=graduates_top,
        placements_first_choice=placements_first,
        placements_top_choices=placements_top,
        total_graduates=len(model.graduates),
        total_placements=len(model.placements),
        top_choices=top_choices,
    )
