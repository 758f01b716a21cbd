"""
Pareto frontier management for Pareto Evolve.

The frontier is a bounded set of mutually non-dominated candidates plus a
larger archive of good candidates kept for warm starts. Every operation
returns a new ``Frontier`` value; the one passed in is left untouched.

    manager = FrontierManager()
    frontier = manager.create_frontier(spec, reference_point={"accuracy": 0.0, "latency": 0.0})
    frontier = manager.add_solution(frontier, candidate)
    frontier = manager.update_fronts(frontier)
    best = manager.get_pareto_optimal(frontier)
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from pareto.dominance import DominanceComparator
from pareto.errors import (
    InvalidConfigError,
    MissingNormalizedObjectivesError,
    MissingRequiredOptionError,
    SolutionNotFoundError,
)
from pareto.hypervolume import HypervolumeCalculator, validate_reference_point
from pareto.interfaces import (
    DEFAULT_MARGIN,
    DEFAULT_MAX_ARCHIVE_SIZE,
    DEFAULT_MAX_SIZE,
    Candidate,
    Direction,
    FrontierState,
    ObjectiveSpec,
)
from pareto.logging_config import get_logger
from pareto.schemas import FrontierOptions

logger = get_logger(__name__)


@dataclass(frozen=True)
class Frontier:
    """Non-dominated solution set, archive and bookkeeping for one run."""

    objectives: List[str]
    objective_directions: Dict[str, Direction]
    reference_point: Dict[str, float]
    max_size: int = DEFAULT_MAX_SIZE
    max_archive_size: int = DEFAULT_MAX_ARCHIVE_SIZE
    margin: float = DEFAULT_MARGIN
    solutions: List[Candidate] = field(default_factory=list)
    fronts: Dict[int, List[str]] = field(default_factory=dict)
    archive: List[Candidate] = field(default_factory=list)
    hypervolume: float = 0.0
    generation: int = 0
    state: FrontierState = FrontierState.EMPTY
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def size(self) -> int:
        return len(self.solutions)

    def contains(self, candidate_id: str) -> bool:
        return any(s.id == candidate_id for s in self.solutions)


class FrontierManager:
    """
    Operations over ``Frontier`` values.
    Insertion keeps the solution set non-dominated; trimming keeps it
    bounded and spread out using crowding distance.
    """

    def __init__(
        self,
        comparator: Optional[DominanceComparator] = None,
        hypervolume_calculator: Optional[HypervolumeCalculator] = None,
    ):
        self.comparator = comparator or DominanceComparator()
        self.hypervolume_calculator = hypervolume_calculator or HypervolumeCalculator()

    def create_frontier(
        self,
        objective_spec: ObjectiveSpec,
        reference_point: Mapping[str, float],
        max_size: int = DEFAULT_MAX_SIZE,
        max_archive_size: int = DEFAULT_MAX_ARCHIVE_SIZE,
        margin: float = DEFAULT_MARGIN,
    ) -> Frontier:
        """
        Create an empty frontier for one optimization run.

        ``margin`` is kept for ``auto_reference_point``.

        Raises:
            InvalidConfigError: objectives lack directions, a direction is
                invalid, or the reference point is incomplete or non-numeric
        """
        spec = ObjectiveSpec.from_mapping(
            objective_spec.objectives, objective_spec.directions
        )
        reference = validate_reference_point(reference_point, spec.objectives)

        errors = []
        if max_size < 1:
            errors.append(f"max_size must be positive, got {max_size}")
        if max_archive_size < 1:
            errors.append(f"max_archive_size must be positive, got {max_archive_size}")
        if margin < 0:
            errors.append(f"margin must not be negative, got {margin}")
        if errors:
            raise InvalidConfigError(errors)

        now = datetime.now()
        frontier = Frontier(
            objectives=list(spec.objectives),
            objective_directions=dict(spec.directions),
            reference_point=reference,
            max_size=max_size,
            max_archive_size=max_archive_size,
            margin=margin,
            created_at=now,
            updated_at=now,
        )
        logger.info(
            f"Created frontier over {spec.objectives} "
            f"(max_size={max_size}, max_archive_size={max_archive_size})"
        )
        return frontier

    def from_options(self, options: Mapping[str, Any]) -> Frontier:
        """Create a frontier from the plain option set used in run configuration."""
        try:
            parsed = FrontierOptions.model_validate(dict(options))
        except ValidationError as e:
            details = e.errors()
            for error in details:
                if error["type"] == "missing":
                    raise MissingRequiredOptionError(str(error["loc"][0])) from e
            raise InvalidConfigError(
                [
                    {"loc": list(error["loc"]), "msg": error["msg"]}
                    for error in details
                ]
            ) from e

        spec = ObjectiveSpec.from_mapping(
            parsed.objectives, parsed.objective_directions
        )
        return self.create_frontier(
            spec,
            parsed.reference_point,
            max_size=parsed.max_size,
            max_archive_size=parsed.max_archive_size,
            margin=parsed.margin,
        )

    def add_solution(self, frontier: Frontier, candidate: Candidate) -> Frontier:
        """
        Insert a candidate unless an existing solution dominates it.

        Solutions the candidate dominates are evicted. A dominated candidate
        is not an error: the frontier comes back unchanged. Re-adding an id
        already on the frontier replaces the earlier value.

        Raises:
            MissingNormalizedObjectivesError: the candidate was never normalized
        """
        if candidate.normalized_objectives is None:
            raise MissingNormalizedObjectivesError(candidate.id)

        others = [s for s in frontier.solutions if s.id != candidate.id]
        if any(self.comparator.dominates(existing, candidate) for existing in others):
            logger.candidate_rejected(candidate.id, frontier.size)
            return frontier

        kept = [s for s in others if not self.comparator.dominates(candidate, s)]
        solutions = [candidate] + kept
        logger.candidate_added(candidate.id, len(solutions), len(others) - len(kept))

        updated = self._with_solutions(frontier, solutions, state=FrontierState.POPULATED)

        if updated.size > updated.max_size:
            logger.debug(
                f"Frontier size {updated.size} exceeds max {updated.max_size}, trimming"
            )
            updated = self.trim(updated, updated.max_size)
        return updated

    def remove_solution(self, frontier: Frontier, candidate_id: str) -> Frontier:
        """
        Remove a solution by id.

        Raises:
            SolutionNotFoundError: no solution has that id
        """
        if not frontier.contains(candidate_id):
            raise SolutionNotFoundError(candidate_id)

        solutions = [s for s in frontier.solutions if s.id != candidate_id]
        logger.debug(f"Removed candidate {candidate_id} from frontier")
        return self._with_solutions(frontier, solutions)

    def trim(self, frontier: Frontier, max_size: Optional[int] = None) -> Frontier:
        """
        Keep at most ``max_size`` solutions, preferring the least crowded.

        Boundary solutions (infinite crowding distance) are always kept
        first. The whole solution set is treated as a single front.
        """
        if max_size is None:
            max_size = frontier.max_size
        if frontier.size <= max_size:
            return frontier

        distances = self.comparator.crowding_distance(frontier.solutions)
        # sorted() is stable, so equal distances keep insertion order
        ranked = sorted(
            frontier.solutions,
            key=lambda s: -distances.get(s.id, 0.0),
        )
        trimmed = ranked[: max(max_size, 0)]

        logger.frontier_trimmed(frontier.size, len(trimmed))
        return self._with_solutions(frontier, trimmed)

    def archive_solution(
        self,
        frontier: Frontier,
        candidate: Candidate,
        max_archive_size: Optional[int] = None,
    ) -> Frontier:
        """
        Record a candidate in the archive.

        Already archived ids are ignored. When the archive overflows only the
        highest-fitness members survive, ties broken by id.
        """
        if any(c.id == candidate.id for c in frontier.archive):
            return frontier

        if max_archive_size is None:
            max_archive_size = frontier.max_archive_size

        archive = [candidate] + list(frontier.archive)
        if len(archive) > max_archive_size:
            archive = sorted(archive, key=lambda c: (-(c.fitness or 0.0), c.id))
            archive = archive[: max(max_archive_size, 0)]

        logger.candidate_archived(candidate.id, len(archive))
        return replace(frontier, archive=archive, updated_at=datetime.now())

    def update_fronts(self, frontier: Frontier) -> Frontier:
        """Recompute the front ranking of the current solutions."""
        if not frontier.solutions:
            return replace(frontier, fronts={}, updated_at=datetime.now())

        ranked = self.comparator.fast_non_dominated_sort(frontier.solutions)
        fronts = {rank: [c.id for c in members] for rank, members in ranked.items()}
        return replace(frontier, fronts=fronts, updated_at=datetime.now())

    def advance_generation(self, frontier: Frontier) -> Frontier:
        return replace(
            frontier, generation=frontier.generation + 1, updated_at=datetime.now()
        )

    def get_pareto_optimal(self, frontier: Frontier) -> List[Candidate]:
        """All non-dominated solutions currently on the frontier."""
        return list(frontier.solutions)

    def get_front(self, frontier: Frontier, rank: int) -> List[Candidate]:
        """Solutions in front ``rank`` as of the last ``update_fronts`` call."""
        if not isinstance(rank, int) or rank < 1:
            raise ValueError(f"Front rank must be a positive integer, got {rank!r}")

        by_id = {s.id: s for s in frontier.solutions}
        return [by_id[cid] for cid in frontier.fronts.get(rank, []) if cid in by_id]

    def auto_reference_point(
        self,
        frontier: Frontier,
        candidates: Optional[Sequence[Candidate]] = None,
    ) -> Dict[str, float]:
        """Reference point ``frontier.margin`` below the worst observed values.

        Measured over ``candidates`` when given, otherwise over the
        frontier's own solutions. The result can seed the next run's
        ``create_frontier``.
        """
        pool = frontier.solutions if candidates is None else candidates
        return self.hypervolume_calculator.auto_reference_point(
            pool,
            frontier.objectives,
            frontier.objective_directions,
            margin=frontier.margin,
        )

    def _with_solutions(
        self, frontier: Frontier, solutions: List[Candidate], **changes: Any
    ) -> Frontier:
        hypervolume = self.hypervolume_calculator.calculate(
            solutions, frontier.reference_point, frontier.objectives
        )
        return replace(
            frontier,
            solutions=solutions,
            hypervolume=hypervolume,
            updated_at=datetime.now(),
            **changes,
        )
