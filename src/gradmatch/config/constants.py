"""Constants shared by the matching engine and the configuration layer.

Keeping the scoring ceiling and the evolutionary defaults here avoids magic
literals spread across the GA operators.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "MAX_RANK_BONUS",
    "TOP_CHOICES",
    "DEFAULT_POPULATION_SIZE",
    "DEFAULT_ELITE_COUNT",
    "DEFAULT_CROSSOVER_PROB",
    "DEFAULT_MUTATION_PROB",
    "DEFAULT_MANAGER_WEIGHTING",
    "LOG_FILE_NAME",
]


MAX_RANK_BONUS: Final[int] = 10
"""Score awarded for a first-ranked match; each later position scores one less."""

TOP_CHOICES: Final[int] = 2
"""Number of leading rankings counted as a "top choice" in evaluation reports."""

DEFAULT_POPULATION_SIZE: Final[int] = 10
DEFAULT_ELITE_COUNT: Final[int] = 2
DEFAULT_CROSSOVER_PROB: Final[float] = 0.3
DEFAULT_MUTATION_PROB: Final[float] = 0.6
DEFAULT_MANAGER_WEIGHTING: Final[int] = 100

LOG_FILE_NAME: Final[str] = "gradmatch.log"
