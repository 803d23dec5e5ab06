"""Immutable preference model shared by every component of a run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

__all__ = [
    "Assignment",
    "GraduatePreference",
    "Placement",
    "PreferenceModel",
]

Assignment = dict[int, Optional[int]]
"""Graduate id -> placement id. ``None`` marks a graduate left without a slot."""


def _rank_index(rankings: Sequence[int]) -> dict[int, int]:
    index: dict[int, int] = {}
    for position, item in enumerate(rankings):
        # first occurrence wins, like a linear index lookup
        index.setdefault(item, position)
    return index


@dataclass(frozen=True)
class GraduatePreference:
    """A graduate and their placements, most preferred first."""

    id: int
    placement_rankings: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(
            self, "placement_rankings", tuple(int(p) for p in self.placement_rankings)
        )

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "placementRankings": list(self.placement_rankings)}


@dataclass(frozen=True)
class Placement:
    """A placement with its capacity and ranked graduates."""

    id: int
    quota: int
    graduate_rankings: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "quota", int(self.quota))
        object.__setattr__(
            self, "graduate_rankings", tuple(int(g) for g in self.graduate_rankings)
        )
        if self.quota <= 0:
            raise ValueError(f"placement {self.id} must have a positive quota")

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "quota": self.quota,
            "graduateRankings": list(self.graduate_rankings),
        }


@dataclass(frozen=True)
class PreferenceModel:
    """Both sides' rankings plus placement quotas, indexed for constant-time lookup.

    The model is never mutated during a run and can be shared read-only
    between independent searches.
    """

    graduates: tuple[GraduatePreference, ...]
    placements: tuple[Placement, ...]
    _graduates_by_id: Mapping[int, GraduatePreference] = field(init=False, repr=False, compare=False)
    _placements_by_id: Mapping[int, Placement] = field(init=False, repr=False, compare=False)
    _graduate_ranks: Mapping[int, Mapping[int, int]] = field(init=False, repr=False, compare=False)
    _placement_ranks: Mapping[int, Mapping[int, int]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        graduates = tuple(self.graduates)
        placements = tuple(self.placements)
        object.__setattr__(self, "graduates", graduates)
        object.__setattr__(self, "placements", placements)

        _reject_duplicates("graduate", (g.id for g in graduates))
        _reject_duplicates("placement", (p.id for p in placements))

        object.__setattr__(self, "_graduates_by_id", {g.id: g for g in graduates})
        object.__setattr__(self, "_placements_by_id", {p.id: p for p in placements})
        object.__setattr__(
            self,
            "_graduate_ranks",
            {g.id: _rank_index(g.placement_rankings) for g in graduates},
        )
        object.__setattr__(
            self,
            "_placement_ranks",
            {p.id: _rank_index(p.graduate_rankings) for p in placements},
        )

    @classmethod
    def from_records(
        cls,
        graduates: Iterable[Mapping[str, object]],
        placements: Iterable[Mapping[str, object]],
    ) -> "PreferenceModel":
        """Build a model from ``{"id", "placementRankings"}`` / ``{"id", "quota", "graduateRankings"}`` dicts."""
        return cls(
            tuple(
                GraduatePreference(rec["id"], rec.get("placementRankings", ()))  # type: ignore[arg-type]
                for rec in graduates
            ),
            tuple(
                Placement(rec["id"], rec["quota"], rec.get("graduateRankings", ()))  # type: ignore[arg-type]
                for rec in placements
            ),
        )

    @property
    def graduate_ids(self) -> list[int]:
        return [g.id for g in self.graduates]

    @property
    def placement_ids(self) -> list[int]:
        return [p.id for p in self.placements]

    @property
    def total_quota(self) -> int:
        return sum(p.quota for p in self.placements)

    def is_balanced(self) -> bool:
        return self.total_quota == len(self.graduates)

    def graduate(self, graduate_id: int) -> GraduatePreference | None:
        return self._graduates_by_id.get(graduate_id)

    def placement(self, placement_id: int) -> Placement | None:
        return self._placements_by_id.get(placement_id)

    def graduate_rank(self, graduate_id: int, placement_id: int) -> int | None:
        """Position of ``placement_id`` in the graduate's list, or ``None``."""
        ranks = self._graduate_ranks.get(graduate_id)
        if ranks is None:
            return None
        return ranks.get(placement_id)

    def placement_rank(self, placement_id: int, graduate_id: int) -> int | None:
        """Position of ``graduate_id`` in the placement's list, or ``None``."""
        ranks = self._placement_ranks.get(placement_id)
        if ranks is None:
            return None
        return ranks.get(graduate_id)

    def quota_violations(self, solution: Mapping[int, int | None]) -> dict[int, int]:
        """Placements holding more graduates than their quota, with the overflow."""
        counts = Counter(p for p in solution.values() if p is not None)
        violations: dict[int, int] = {}
        for placement_id, count in counts.items():
            placement = self.placement(placement_id)
            quota = placement.quota if placement is not None else 0
            if count > quota:
                violations[placement_id] = count - quota
        return violations

    def to_dict(self) -> dict[str, list[dict[str, object]]]:
        return {
            "graduatePreferences": [g.to_dict() for g in self.graduates],
            "placements": [p.to_dict() for p in self.placements],
        }


def _reject_duplicates(kind: str, ids: Iterable[int]) -> None:
    duplicates = sorted(item for item, count in Counter(ids).items() if count > 1)
    if duplicates:
        raise ValueError(f"duplicate {kind} ids: {duplicates}")
