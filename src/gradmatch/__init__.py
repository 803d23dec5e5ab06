"""gradmatch: genetic matching of graduates to capacity-limited placements.

The package exposes a preference model, a genetic-algorithm search that
blends graduate-side and manager-side satisfaction, and a session object that
speaks the ``init``/``run``/``evaluate`` message protocol used by host
applications.
"""

from .matching import GraduatePreference, Placement, PreferenceModel
from .matching.ga import run_genetic_algorithm
from .session import MatchingSession

__version__ = "0.1.0"

__all__ = [
    "GraduatePreference",
    "Placement",
    "PreferenceModel",
    "MatchingSession",
    "run_genetic_algorithm",
    "__version__",
]
