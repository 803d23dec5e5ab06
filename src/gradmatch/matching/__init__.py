"""Preference model and genetic search for graduate placement matching."""

from .models import Assignment, GraduatePreference, Placement, PreferenceModel

__all__ = ["Assignment", "GraduatePreference", "Placement", "PreferenceModel"]
