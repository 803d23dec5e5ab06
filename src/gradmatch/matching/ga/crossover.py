"""Partial-match crossover with a repair pass, plus optional quota rebalancing."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Mapping, NamedTuple, Sequence

import numpy as np

from ..models import Assignment, PreferenceModel
from .population import Chromosome

__all__ = [
    "Pairing",
    "partial_match_crossover",
    "rebalance_quotas",
    "crossover_factory",
]

logger = logging.getLogger(__name__)

CrossoverOperator = Callable[
    [Chromosome, Chromosome, PreferenceModel, Any, np.random.Generator],
    tuple[Chromosome, Chromosome],
]


class Pairing(NamedTuple):
    graduate: int | None
    placement: int | None


def _pairs(solution: Mapping[int, int | None]) -> list[Pairing]:
    return [Pairing(graduate, placement) for graduate, placement in solution.items()]


def _build_child(
    own: Sequence[Pairing], other: Sequence[Pairing], start: int, length: int
) -> Assignment | None:
    size = len(own)
    child = [own[(start + offset) % size] for offset in range(length)]
    graduates = {pair.graduate for pair in child}
    placements = {pair.placement for pair in child}

    # the other parent's genes first, then whatever of our own still fits
    for source in (other, own):
        for pair in source:
            if pair.graduate in graduates or pair.placement in placements:
                continue
            child.append(pair)
            graduates.add(pair.graduate)
            placements.add(pair.placement)

    unmatched_graduates = [pair.graduate for pair in own if pair.graduate not in graduates]
    unused_placements = [pair.placement for pair in own if pair.placement not in placements]
    for position, graduate_id in enumerate(unmatched_graduates):
        placement_id = unused_placements[position] if position < len(unused_placements) else None
        child.append(Pairing(graduate_id, placement_id))

    result: Assignment = {}
    for pair in child:
        result[pair.graduate] = pair.placement  # type: ignore[index]
    if any(key is None or value is None for key, value in result.items()):
        return None
    return result


def partial_match_crossover(
    parent_a: Chromosome,
    parent_b: Chromosome,
    model: PreferenceModel,
    manager_weighting: Any,
    rng: np.random.Generator,
) -> tuple[Chromosome, Chromosome]:
    """Recombine two assignments into two children of the same size.

    Each child keeps a wrapped run of ``n // 2`` pairs from its own parent,
    takes non-conflicting pairs from the other parent, then from its own, and
    finally pairs leftover graduates with leftover placements in order. Quotas
    are not re-checked. A child whose repair leaves a hole falls back to its
    own parent's assignment. Parents of different sizes are returned as-is.
    """
    size = len(parent_a.solution)
    if size != len(parent_b.solution):
        return parent_a, parent_b
    if size == 0:
        return parent_a.copy(), parent_b.copy()

    start = int(rng.integers(0, size))
    length = size // 2
    pairs_a = _pairs(parent_a.solution)
    pairs_b = _pairs(parent_b.solution)

    solution_a = _build_child(pairs_a, pairs_b, start, length)
    solution_b = _build_child(pairs_b, pairs_a, start, length)
    if solution_a is None:
        logger.debug("Crossover repair failed; first child falls back to its parent")
        solution_a = dict(parent_a.solution)
    if solution_b is None:
        logger.debug("Crossover repair failed; second child falls back to its parent")
        solution_b = dict(parent_b.solution)

    return (
        Chromosome.scored(solution_a, model, manager_weighting),
        Chromosome.scored(solution_b, model, manager_weighting),
    )


def _rank_or_last(rank: int | None) -> float:
    return float("inf") if rank is None else float(rank)


def _best_free_target(
    graduate_id: int, free: Mapping[int, int], model: PreferenceModel
) -> int | None:
    graduate = model.graduate(graduate_id)
    if graduate is not None:
        for placement_id in graduate.placement_rankings:
            if free.get(placement_id, 0) > 0:
                return placement_id
    candidates = [pid for pid in model.placement_ids if free.get(pid, 0) > 0]
    if not candidates:
        return None
    return max(candidates, key=lambda pid: free[pid])


def rebalance_quotas(solution: Mapping[int, int | None], model: PreferenceModel) -> Assignment:
    """Move graduates out of over-filled placements into ones with spare capacity.

    A placement sheds the graduates it ranks lowest (unranked ones first);
    each moved graduate goes to their highest-ranked placement with room, or
    else to the placement with the most room. Unassigned graduates are placed
    the same way. Graduates stay put when no capacity is left anywhere.
    """
    result: Assignment = dict(solution)
    counts = Counter(pid for pid in result.values() if pid is not None)
    free = {p.id: p.quota - counts.get(p.id, 0) for p in model.placements}

    movers = [gid for gid, pid in result.items() if pid is None]
    for placement_id, overflow in model.quota_violations(result).items():
        holders = [gid for gid, pid in result.items() if pid == placement_id]
        holders.sort(
            key=lambda gid: _rank_or_last(model.placement_rank(placement_id, gid)),
            reverse=True,
        )
        movers.extend(holders[:overflow])

    for graduate_id in movers:
        target = _best_free_target(graduate_id, free, model)
        if target is None:
            logger.debug("No spare capacity left for graduate %s", graduate_id)
            continue
        result[graduate_id] = target
        free[target] -= 1
    return result


def crossover_factory(config: Mapping[str, object] | None = None) -> CrossoverOperator:
    cfg = dict(config or {})
    rebalance = bool(cfg.get("rebalance_quotas", False))

    def wrapped(
        parent_a: Chromosome,
        parent_b: Chromosome,
        model: PreferenceModel,
        manager_weighting: Any,
        rng: np.random.Generator,
    ) -> tuple[Chromosome, Chromosome]:
        child_a, child_b = partial_match_crossover(
            parent_a, parent_b, model, manager_weighting, rng
        )
        if rebalance:
            children = []
            for child in (child_a, child_b):
                if model.quota_violations(child.solution) or None in child.solution.values():
                    child = Chromosome.scored(
                        rebalance_quotas(child.solution, model), model, manager_weighting
                    )
                children.append(child)
            child_a, child_b = children
        return child_a, child_b

    return wrapped
