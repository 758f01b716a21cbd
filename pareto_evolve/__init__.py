"""
Pareto Evolve - Multi-objective frontier tracking for prompt optimization.
"""

from pareto import (
    Candidate,
    DominanceComparator,
    Frontier,
    FrontierManager,
    HypervolumeCalculator,
    HypervolumeTracker,
    ObjectiveEvaluator,
    ObjectiveSpec,
)
from pareto_evolve.config import Config, get_config
from pareto_evolve.serializers import dump_frontier, load_frontier

__version__ = "0.1.0"

__all__ = [
    "Candidate",
    "ObjectiveSpec",
    "ObjectiveEvaluator",
    "DominanceComparator",
    "Frontier",
    "FrontierManager",
    "HypervolumeCalculator",
    "HypervolumeTracker",
    "Config",
    "get_config",
    "dump_frontier",
    "load_frontier",
]
