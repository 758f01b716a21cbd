"""
Hypervolume indicator for Pareto frontier quality.

The hypervolume is the volume of normalized objective space dominated by
a solution set and bounded below by a reference point. It rewards both
convergence and spread, and it never decreases when a non-dominated
solution is added.

Dispatch by objective count:
- 1 objective: best value minus the reference.
- 2 objectives: sweep line, sorted descending on the first objective.
- 3+ objectives: recursive slicing (WFG style). Each slice of the first
  objective between consecutive distinct values is measured recursively
  over the solutions that reach at least the top of that slice, down to
  the 2-objective sweep.
"""

import logging
import math
import numbers
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pareto.errors import (
    InvalidConfigError,
    MissingReferenceValueError,
    NonNumericReferenceError,
    ParetoError,
)
from pareto.interfaces import DEFAULT_MARGIN, Candidate, Direction

logger = logging.getLogger(__name__)

Point = Tuple[float, ...]


def validate_reference_point(
    reference_point: Any, objectives: Any
) -> Dict[str, float]:
    """
    Check that a reference point covers every objective with finite numbers.

    Returns the reference point with values converted to float.
    """
    if isinstance(objectives, (str, bytes)) or not isinstance(objectives, Sequence):
        raise InvalidConfigError(["objectives must be a list of names"])
    if not objectives:
        raise InvalidConfigError(["at least one objective is required"])
    if not isinstance(reference_point, Mapping):
        raise InvalidConfigError(["reference_point must be a mapping"])

    missing = [obj for obj in objectives if obj not in reference_point]
    if missing:
        raise MissingReferenceValueError(missing)

    invalid = {
        name: value
        for name, value in reference_point.items()
        if not _is_finite_number(value)
    }
    if invalid:
        raise NonNumericReferenceError(invalid)

    return {name: float(value) for name, value in reference_point.items()}


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


class HypervolumeCalculator:
    """Hypervolume, per-solution contribution and generation-over-generation improvement."""

    def calculate(
        self,
        solutions: Sequence[Candidate],
        reference_point: Mapping[str, float],
        objectives: Sequence[str],
    ) -> float:
        """
        Dominated hypervolume of ``solutions``, rounded to 6 decimals.

        Candidates without normalized objectives are skipped; an empty set
        has hypervolume 0.0.

        Raises:
            InvalidConfigError: the reference point or objective list is invalid
        """
        reference = validate_reference_point(reference_point, objectives)

        valid = [s for s in solutions if s.normalized_objectives is not None]
        if len(valid) < len(solutions):
            logger.debug(
                f"Skipping {len(solutions) - len(valid)} solutions without normalized objectives"
            )
        if not valid:
            return 0.0

        points = [
            tuple(s.normalized_objectives.get(obj, 0.0) for obj in objectives)
            for s in valid
        ]
        bounds = tuple(reference[obj] for obj in objectives)

        if len(objectives) == 1:
            volume = self._volume_1d(points, bounds)
        elif len(objectives) == 2:
            volume = self._volume_2d(points, bounds)
        else:
            volume = self._volume_nd(points, bounds)

        return round(volume, 6)

    def _volume_1d(self, points: List[Point], bounds: Point) -> float:
        return max(0.0, max(p[0] for p in points) - bounds[0])

    def _volume_2d(self, points: List[Point], bounds: Point) -> float:
        ref_x, ref_y = bounds
        volume = 0.0
        max_y = ref_y
        for x, y in sorted(points, key=lambda p: -p[0]):
            if y > max_y:
                width = max(0.0, x - ref_x)
                volume += width * (y - max_y)
                max_y = y
        return volume

    def _volume_nd(self, points: List[Point], bounds: Point) -> float:
        if not points:
            return 0.0
        if len(bounds) == 1:
            return self._volume_1d(points, bounds)
        if len(bounds) == 2:
            return self._volume_2d(points, bounds)

        ref_val = bounds[0]
        levels = sorted({p[0] for p in points if p[0] > ref_val})

        volume = 0.0
        previous = ref_val
        for level in levels:
            # Solutions reaching this level cover the whole slice below it
            reaching = [p[1:] for p in points if p[0] >= level]
            volume += (level - previous) * self._volume_nd(reaching, bounds[1:])
            previous = level
        return volume

    def contribution(
        self,
        solutions: Sequence[Candidate],
        reference_point: Mapping[str, float],
        objectives: Sequence[str],
    ) -> Dict[str, float]:
        """
        Hypervolume lost if each solution were removed.

        Advisory only: on any calculation error every solution gets 0.0.
        """
        try:
            total = self.calculate(solutions, reference_point, objectives)
        except ParetoError as e:
            logger.warning(f"Hypervolume contribution unavailable: {e}")
            return {s.id: 0.0 for s in solutions}

        contributions = {}
        for solution in solutions:
            remaining = [s for s in solutions if s.id != solution.id]
            try:
                without = self.calculate(remaining, reference_point, objectives)
            except ParetoError as e:
                logger.warning(f"Could not measure contribution of {solution.id}: {e}")
                contributions[solution.id] = 0.0
                continue
            contributions[solution.id] = round(max(0.0, total - without), 6)
        return contributions

    def auto_reference_point(
        self,
        candidates: Sequence[Candidate],
        objectives: Sequence[str],
        directions: Optional[Mapping[str, Union[Direction, str]]] = None,
        margin: float = DEFAULT_MARGIN,
    ) -> Dict[str, float]:
        """
        Reference point just below the worst observed value of each objective.

        Normalized objectives are all maximized, so ``directions`` does not
        change the result. Values are floored at 0.0.
        """
        valid = [c for c in candidates if c.normalized_objectives is not None]
        if not valid:
            return {obj: 0.0 for obj in objectives}

        reference = {}
        for obj in objectives:
            lowest = min(c.normalized_objectives.get(obj, 0.0) for c in valid)
            reference[obj] = max(0.0, lowest - margin)
        return reference

    def improvement(
        self,
        current: Any,
        previous: Any,
        reference_point: Mapping[str, float],
        objectives: Sequence[str],
    ) -> Tuple[float, float]:
        """
        Ratio of current to previous hypervolume, plus the current value.

        Accepts frontiers or plain solution lists. A previous hypervolume of
        zero gives ``math.inf`` if the current one is positive and 1.0 if it
        is also zero.
        """
        current_hv = self.calculate(_solutions_of(current), reference_point, objectives)
        previous_hv = self.calculate(
            _solutions_of(previous), reference_point, objectives
        )

        if previous_hv > 0.0:
            ratio = round(current_hv / previous_hv, 4)
        elif current_hv > 0.0:
            ratio = math.inf
        else:
            ratio = 1.0

        return ratio, round(current_hv, 6)


def _solutions_of(frontier: Any) -> Sequence[Candidate]:
    return getattr(frontier, "solutions", frontier)
