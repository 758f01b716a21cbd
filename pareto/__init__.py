"""
Pareto module for Pareto Evolve.
Provides multi-objective evaluation, dominance ranking, frontier
management and hypervolume measurement.
"""

from .dominance import DominanceComparator
from .errors import (
    InvalidConfigError,
    InvalidInputError,
    MissingNormalizedObjectivesError,
    NoResultsError,
    ParetoError,
    SolutionNotFoundError,
)
from .frontier import Frontier, FrontierManager
from .hypervolume import HypervolumeCalculator, validate_reference_point
from .interfaces import (
    Candidate,
    Direction,
    DominanceResult,
    FrontierState,
    ObjectiveBounds,
    ObjectiveSpec,
)
from .objectives import EvaluatorConfig, ObjectiveEvaluator
from .schemas import TrialResult
from .tracker import HypervolumeTracker

__all__ = [
    "Candidate",
    "Direction",
    "DominanceResult",
    "FrontierState",
    "ObjectiveBounds",
    "ObjectiveSpec",
    "TrialResult",
    "ObjectiveEvaluator",
    "EvaluatorConfig",
    "DominanceComparator",
    "Frontier",
    "FrontierManager",
    "HypervolumeCalculator",
    "HypervolumeTracker",
    "validate_reference_point",
    "ParetoError",
    "InvalidConfigError",
    "InvalidInputError",
    "MissingNormalizedObjectivesError",
    "NoResultsError",
    "SolutionNotFoundError",
]
