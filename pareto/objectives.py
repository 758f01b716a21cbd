"""
Objective evaluation for Pareto Evolve.
Measures candidates on several objectives and normalizes them so that
higher is always better.
"""

import asyncio
import logging
import math
import statistics
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from pareto.errors import EvaluationFailedError, InvalidInputError, NoResultsError
from pareto.interfaces import (
    DEFAULT_COST_PER_1K_TOKENS,
    DEFAULT_OBJECTIVE_DIRECTIONS,
    DEFAULT_WEIGHTS,
    STANDARD_OBJECTIVES,
    Candidate,
    Direction,
    ObjectiveBounds,
    ObjectiveFunction,
    ObjectiveMap,
)
from pareto.schemas import TrialResult

logger = logging.getLogger(__name__)

# Bounds assumed for objectives the population statistics do not cover
_DEFAULT_BOUNDS = ObjectiveBounds(minimum=0.0, maximum=1.0)


@dataclass
class EvaluatorConfig:
    """Configuration for objective evaluation"""

    objectives: List[str] = field(default_factory=lambda: list(STANDARD_OBJECTIVES))
    cost_per_1k_tokens: float = DEFAULT_COST_PER_1K_TOKENS
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))


class ObjectiveEvaluator:
    """
    Multi-objective evaluation of trial results.
    Built-in objectives are accuracy, latency, cost and robustness; custom
    objectives can be registered by name.
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        self.config = config or EvaluatorConfig()
        self.custom_objectives: Dict[str, ObjectiveFunction] = {}
        self._builtin: Dict[str, Callable[[List[TrialResult]], float]] = {
            "accuracy": self._measure_accuracy,
            "latency": self._measure_latency,
            "cost": self._measure_cost,
            "robustness": self._measure_robustness,
        }

    def register_objective(self, name: str, fn: ObjectiveFunction) -> None:
        """
        Register a custom objective function.

        Args:
            name: Unique objective name
            fn: Function taking the list of trial results and returning a float
        """
        if not callable(fn):
            raise ValueError(f"Objective function '{name}' must be callable")
        if name in self._builtin:
            raise ValueError(f"Objective '{name}' is built in and cannot be replaced")

        self.custom_objectives[name] = fn
        logger.info(f"Registered custom objective '{name}'")

    def get_registered_objectives(self) -> List[str]:
        return list(self._builtin) + list(self.custom_objectives)

    def evaluate(
        self,
        trial_results: Sequence[Union[TrialResult, Mapping[str, Any]]],
        objectives: Optional[Sequence[str]] = None,
        custom_objectives: Optional[Mapping[str, ObjectiveFunction]] = None,
    ) -> ObjectiveMap:
        """
        Evaluate a candidate's trial results on each requested objective.

        Unknown objective names evaluate to 0.0 with a warning rather than
        failing the whole call.

        Raises:
            InvalidInputError: trial_results is not a sequence of trial records
            NoResultsError: trial_results is empty
            EvaluationFailedError: a custom objective function raised
        """
        trials = self._coerce_trials(trial_results)
        requested = list(objectives) if objectives is not None else self.config.objectives
        customs = {**self.custom_objectives, **(custom_objectives or {})}

        values: ObjectiveMap = {}
        for name in requested:
            values[name] = self._measure(name, trials, customs)

        logger.debug(f"Evaluated {len(trials)} trials: {values}")
        return values

    async def evaluate_population(
        self,
        batches: Mapping[str, Sequence[Union[TrialResult, Mapping[str, Any]]]],
        objectives: Optional[Sequence[str]] = None,
    ) -> Dict[str, ObjectiveMap]:
        """Evaluate many candidates' trial results concurrently.

        Entries that fail are logged and left out of the returned mapping.
        """
        candidate_ids = list(batches)
        logger.info(f"Starting parallel evaluation of {len(candidate_ids)} candidates")

        tasks = [
            asyncio.to_thread(self.evaluate, batches[candidate_id], objectives)
            for candidate_id in candidate_ids
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        evaluated: Dict[str, ObjectiveMap] = {}
        for candidate_id, outcome in zip(candidate_ids, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"Error evaluating candidate {candidate_id}: {outcome}")
                continue
            evaluated[candidate_id] = outcome

        logger.info(
            f"Completed parallel evaluation: {len(evaluated)}/{len(candidate_ids)} succeeded"
        )
        return evaluated

    def _coerce_trials(self, trial_results: Any) -> List[TrialResult]:
        if isinstance(trial_results, (str, bytes, Mapping)) or not isinstance(
            trial_results, Sequence
        ):
            raise InvalidInputError(
                f"expected a sequence of trial records, got {type(trial_results).__name__}"
            )
        if not trial_results:
            raise NoResultsError()

        trials = []
        for index, record in enumerate(trial_results):
            if isinstance(record, TrialResult):
                trials.append(record)
            elif isinstance(record, Mapping):
                try:
                    trials.append(TrialResult.model_validate(dict(record)))
                except ValidationError as e:
                    raise InvalidInputError(f"record {index}: {e}") from e
            else:
                raise InvalidInputError(
                    f"record {index} is a {type(record).__name__}, not a trial record"
                )
        return trials

    def _measure(
        self,
        name: str,
        trials: List[TrialResult],
        customs: Mapping[str, ObjectiveFunction],
    ) -> float:
        if name in self._builtin:
            return self._builtin[name](trials)

        if name in customs:
            try:
                return float(customs[name](trials))
            except Exception as e:
                logger.error(f"Custom objective '{name}' failed: {e}")
                raise EvaluationFailedError(name, str(e)) from e

        logger.warning(f"Unknown objective: {name}, returning 0.0")
        return 0.0

    # Built-in objectives

    def _measure_accuracy(self, trials: List[TrialResult]) -> float:
        """Fraction of successful trials."""
        successes = sum(1 for trial in trials if trial.success)
        return round(successes / max(len(trials), 1), 4)

    def _measure_latency(self, trials: List[TrialResult]) -> float:
        """Mean trial duration in seconds."""
        total_ms = sum(trial.duration_ms for trial in trials)
        avg_ms = total_ms / max(len(trials), 1)
        return round(avg_ms / 1000.0, 4)

    def _measure_cost(self, trials: List[TrialResult]) -> float:
        """Token spend in currency units."""
        total_tokens = sum(
            trial.prompt_tokens + trial.completion_tokens for trial in trials
        )
        return round(total_tokens * self.config.cost_per_1k_tokens / 1000.0, 4)

    def _measure_robustness(self, trials: List[TrialResult]) -> float:
        """
        Consistency of quality scores, exp(-variance).
        A single trial counts as perfectly consistent.
        """
        scores = [trial.quality_score for trial in trials]
        if not scores:
            return 0.0
        if len(scores) == 1:
            return 1.0
        return round(math.exp(-statistics.pvariance(scores)), 4)

    # Normalization

    def calculate_population_stats(
        self, candidates: Sequence[Candidate]
    ) -> Dict[str, ObjectiveBounds]:
        """Min/max of every raw objective across the population."""
        objective_maps = [c.raw_objectives for c in candidates if c.raw_objectives]
        if not objective_maps:
            return {}

        names: List[str] = []
        for objective_map in objective_maps:
            for name in objective_map:
                if name not in names:
                    names.append(name)

        stats = {}
        for name in names:
            values = [objective_map.get(name, 0.0) for objective_map in objective_maps]
            stats[name] = ObjectiveBounds(minimum=min(values), maximum=max(values))
        return stats

    def normalize(
        self,
        raw: Mapping[str, float],
        population_stats: Mapping[str, ObjectiveBounds],
        directions: Optional[Mapping[str, Union[Direction, str]]] = None,
    ) -> ObjectiveMap:
        """
        Min-max scale each objective to [0, 1], inverting minimized ones.

        A degenerate population (max == min) normalizes to exactly 0.5.
        """
        if directions is None:
            directions = DEFAULT_OBJECTIVE_DIRECTIONS

        normalized: ObjectiveMap = {}
        for name, value in raw.items():
            bounds = population_stats.get(name, _DEFAULT_BOUNDS)

            if bounds.maximum > bounds.minimum:
                scaled = (value - bounds.minimum) / bounds.span
                scaled = max(0.0, min(1.0, scaled))
            else:
                scaled = 0.5

            if Direction(directions.get(name, Direction.MAXIMIZE)) is Direction.MINIMIZE:
                scaled = 1.0 - scaled

            normalized[name] = round(scaled, 4)
        return normalized

    def normalize_population(
        self,
        candidates: Sequence[Candidate],
        directions: Optional[Mapping[str, Union[Direction, str]]] = None,
    ) -> List[Candidate]:
        """Return normalized copies of candidates, each with aggregate fitness."""
        stats = self.calculate_population_stats(candidates)
        normalized = []
        for candidate in candidates:
            objectives = self.normalize(candidate.raw_objectives, stats, directions)
            normalized.append(
                candidate.with_normalized(objectives).with_fitness(
                    self.aggregate_fitness(objectives)
                )
            )
        return normalized

    def aggregate_fitness(
        self,
        normalized: Mapping[str, float],
        weights: Optional[Mapping[str, float]] = None,
    ) -> float:
        """Weighted sum of normalized objectives."""
        if weights is None:
            weights = self.config.weights
        total = sum(value * weights.get(name, 0.0) for name, value in normalized.items())
        return round(total, 4)
