"""Tabular input and output helpers."""

from .preferences import (
    PreferenceFileError,
    load_graduate_preferences,
    load_placements,
    load_preference_model,
    read_preference_table,
    solution_table,
)

__all__ = [
    "PreferenceFileError",
    "load_graduate_preferences",
    "load_placements",
    "load_preference_model",
    "read_preference_table",
    "solution_table",
]
