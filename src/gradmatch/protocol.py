"""Messages exchanged between a host application and a matching session.

Field names follow the host's camelCase wire format (``graduatePreferences``,
``populationSize``...) and are available in snake_case on the Python side.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config.constants import DEFAULT_MANAGER_WEIGHTING, DEFAULT_POPULATION_SIZE
from .config.schemas import RunConfig
from .matching.models import GraduatePreference, Placement, PreferenceModel

__all__ = [
    "GraduatePreferenceIn",
    "PlacementIn",
    "InitRequest",
    "RunRequest",
    "EvaluateRequest",
    "ProgressMessage",
    "ResultPayload",
    "ResultMessage",
    "EvaluateMessage",
]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GraduatePreferenceIn(_WireModel):
    id: int
    placement_rankings: list[int] = Field(default_factory=list)

    def to_model(self) -> GraduatePreference:
        return GraduatePreference(self.id, tuple(self.placement_rankings))


class PlacementIn(_WireModel):
    id: int
    quota: int = Field(gt=0)
    graduate_rankings: list[int] = Field(default_factory=list)

    def to_model(self) -> Placement:
        return Placement(self.id, self.quota, tuple(self.graduate_rankings))


class InitRequest(_WireModel):
    graduate_preferences: list[GraduatePreferenceIn]
    placements: list[PlacementIn]

    def to_model(self) -> PreferenceModel:
        return PreferenceModel(
            tuple(g.to_model() for g in self.graduate_preferences),
            tuple(p.to_model() for p in self.placements),
        )


class RunRequest(_WireModel):
    """Start-of-run request; preferences are optional after an ``init``."""

    iterations: int = Field(gt=0)
    population_size: int = Field(default=DEFAULT_POPULATION_SIZE, gt=0)
    manager_weighting: int = Field(default=DEFAULT_MANAGER_WEIGHTING, ge=0, le=100)
    seed: Optional[int] = Field(default=None, ge=0)
    graduate_preferences: Optional[list[GraduatePreferenceIn]] = None
    placements: Optional[list[PlacementIn]] = None

    def init_request(self) -> InitRequest | None:
        if self.graduate_preferences is None or self.placements is None:
            return None
        return InitRequest(
            graduate_preferences=self.graduate_preferences, placements=self.placements
        )

    def run_config(self, base: RunConfig | None = None) -> RunConfig:
        if base is None:
            base = RunConfig(iterations=self.iterations)
        return base.model_copy(
            update={
                "iterations": self.iterations,
                "population_size": self.population_size,
                "manager_weighting": self.manager_weighting,
                "seed": self.seed if self.seed is not None else base.seed,
                "elite_count": min(base.elite_count, self.population_size),
            }
        )


class EvaluateRequest(_WireModel):
    solution: dict[int, Optional[int]]


class ProgressMessage(_WireModel):
    type: Literal["progress"] = "progress"
    payload: int = Field(ge=0, le=100)


class ResultPayload(_WireModel):
    solution: dict[int, Optional[int]]
    fitness: float
    manager_weighting: int
    evaluation: list[str]


class ResultMessage(_WireModel):
    type: Literal["result"] = "result"
    payload: ResultPayload


class EvaluateMessage(_WireModel):
    type: Literal["evaluate"] = "evaluate"
    payload: list[str]
