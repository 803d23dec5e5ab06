from __future__ import annotations

import numpy as np
import pytest

from gradmatch.config import reset_settings_cache
from gradmatch.matching import GraduatePreference, Placement, PreferenceModel


@pytest.fixture
def small_model() -> PreferenceModel:
    """Three graduates, four slots; the best feasible assignment scores 39."""
    return PreferenceModel(
        (
            GraduatePreference(1, (2, 1, 3)),
            GraduatePreference(2, (1, 2, 3)),
            GraduatePreference(3, (1,)),
        ),
        (
            Placement(1, 1, (3,)),
            Placement(2, 2, ()),
            Placement(3, 1, ()),
        ),
    )


@pytest.fixture
def balanced_model() -> PreferenceModel:
    """Six graduates over placements whose quotas add up to six."""
    return PreferenceModel(
        (
            GraduatePreference(1, (10, 20, 30)),
            GraduatePreference(2, (10, 30, 20)),
            GraduatePreference(3, (20, 10, 30)),
            GraduatePreference(4, (20, 30, 10)),
            GraduatePreference(5, (30, 10, 20)),
            GraduatePreference(6, (30, 20, 10)),
        ),
        (
            Placement(10, 2, (1, 2, 3)),
            Placement(20, 3, (3, 4, 6)),
            Placement(30, 1, (5, 6)),
        ),
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(2024)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()
