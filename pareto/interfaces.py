"""Pareto Evolve: Core Interface Definitions"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pareto.errors import (
    InvalidConfigError,
    InvalidObjectiveDirectionError,
    MissingObjectiveDirectionError,
)

# Enumerations


class Direction(str, Enum):
    """Optimization direction of a raw objective."""

    MAXIMIZE = "maximize"
    MINIMIZE = "minimize"


class DominanceResult(str, Enum):
    """Outcome of a pairwise dominance test."""

    DOMINATES = "dominates"
    DOMINATED_BY = "dominated_by"
    NON_DOMINATED = "non_dominated"


class FrontierState(str, Enum):
    """Lifecycle; no terminal state."""

    EMPTY = "empty"
    POPULATED = "populated"


# Data Classes


ObjectiveMap = Dict[str, float]
ObjectiveFunction = Callable[[Sequence[Any]], float]


@dataclass(frozen=True)
class Candidate:
    """Evaluated prompt; never mutated once normalized."""

    id: str
    prompt: str = ""
    raw_objectives: ObjectiveMap = field(default_factory=dict)
    normalized_objectives: Optional[ObjectiveMap] = None
    fitness: Optional[float] = None
    generation: int = 0
    parent_ids: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_normalized(self, normalized: Mapping[str, float]) -> "Candidate":
        return replace(self, normalized_objectives=dict(normalized))

    def with_fitness(self, fitness: float) -> "Candidate":
        return replace(self, fitness=fitness)


@dataclass(frozen=True)
class ObjectiveBounds:
    """Population min/max for one objective."""

    minimum: float
    maximum: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum


@dataclass(frozen=True)
class ObjectiveSpec:
    """Ordered objective names plus a direction for each."""

    objectives: List[str]
    directions: Dict[str, Direction]

    @classmethod
    def from_mapping(
        cls, objectives: Sequence[str], directions: Mapping[str, Any]
    ) -> "ObjectiveSpec":
        """Build and validate from plain names and direction strings."""
        if isinstance(objectives, (str, bytes)) or not isinstance(
            objectives, Sequence
        ):
            raise InvalidConfigError(["objectives must be a list of names"])
        if not isinstance(directions, Mapping):
            raise InvalidConfigError(["objective_directions must be a mapping"])
        if not objectives:
            raise InvalidConfigError(["at least one objective is required"])

        missing = [obj for obj in objectives if obj not in directions]
        if missing:
            raise MissingObjectiveDirectionError(missing)

        parsed: Dict[str, Direction] = {}
        invalid: Dict[str, Any] = {}
        for name, value in directions.items():
            try:
                parsed[name] = Direction(value)
            except ValueError:
                invalid[name] = value
        if invalid:
            raise InvalidObjectiveDirectionError(invalid)

        return cls(objectives=list(objectives), directions=parsed)


# Constants

STANDARD_OBJECTIVES = ["accuracy", "latency", "cost", "robustness"]

DEFAULT_OBJECTIVE_DIRECTIONS = {
    "accuracy": Direction.MAXIMIZE,
    "latency": Direction.MINIMIZE,
    "cost": Direction.MINIMIZE,
    "robustness": Direction.MAXIMIZE,
}

DEFAULT_WEIGHTS = {
    "accuracy": 0.5,
    "latency": 0.2,
    "cost": 0.2,
    "robustness": 0.1,
}

DEFAULT_COST_PER_1K_TOKENS = 0.03
DEFAULT_MAX_SIZE = 100
DEFAULT_MAX_ARCHIVE_SIZE = 500
DEFAULT_EPSILON = 0.01
DEFAULT_MARGIN = 0.1
