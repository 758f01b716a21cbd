"""
Serialization utilities for frontier snapshots.
Handles candidates, frontiers and crowding distances as JSON-safe data so an
archive can seed a later optimization run.
"""

import json
import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Union

from pareto.frontier import Frontier
from pareto.hypervolume import validate_reference_point
from pareto.interfaces import Candidate, FrontierState, ObjectiveSpec
from pareto.schemas import CandidateRecord, FrontierSnapshot


def serialize_candidate(candidate: Candidate) -> Dict[str, Any]:
    """Convert a Candidate to a JSON-safe dict."""
    return CandidateRecord(
        id=candidate.id,
        prompt=candidate.prompt,
        raw_objectives=candidate.raw_objectives,
        normalized_objectives=candidate.normalized_objectives,
        fitness=candidate.fitness,
        generation=candidate.generation,
        parent_ids=candidate.parent_ids,
        metadata=candidate.metadata,
    ).model_dump(mode="json")


def deserialize_candidate(data: Mapping[str, Any]) -> Candidate:
    record = CandidateRecord.model_validate(dict(data))
    return _candidate_from_record(record)


def _candidate_from_record(record: CandidateRecord) -> Candidate:
    return Candidate(
        id=record.id,
        prompt=record.prompt,
        raw_objectives=dict(record.raw_objectives),
        normalized_objectives=(
            dict(record.normalized_objectives)
            if record.normalized_objectives is not None
            else None
        ),
        fitness=record.fitness,
        generation=record.generation,
        parent_ids=list(record.parent_ids),
        metadata=dict(record.metadata),
    )


def serialize_frontier(frontier: Frontier) -> Dict[str, Any]:
    """Convert a Frontier to a JSON-safe dict.

    Args:
        frontier: Frontier value

    Returns:
        Dictionary matching the FrontierSnapshot schema
    """
    snapshot = FrontierSnapshot(
        objectives=frontier.objectives,
        objective_directions={
            name: direction.value
            for name, direction in frontier.objective_directions.items()
        },
        reference_point=frontier.reference_point,
        max_size=frontier.max_size,
        max_archive_size=frontier.max_archive_size,
        margin=frontier.margin,
        solutions=[CandidateRecord(**serialize_candidate(c)) for c in frontier.solutions],
        archive=[CandidateRecord(**serialize_candidate(c)) for c in frontier.archive],
        fronts=frontier.fronts,
        hypervolume=frontier.hypervolume,
        generation=frontier.generation,
        state=frontier.state.value,
        created_at=frontier.created_at,
        updated_at=frontier.updated_at,
    )
    return snapshot.model_dump(mode="json")


def deserialize_frontier(data: Mapping[str, Any]) -> Frontier:
    """Rebuild a Frontier from a snapshot dict.

    Raises:
        pydantic.ValidationError: the snapshot is malformed
        InvalidConfigError: the stored objectives or reference point are invalid
    """
    snapshot = FrontierSnapshot.model_validate(dict(data))
    spec = ObjectiveSpec.from_mapping(
        snapshot.objectives, snapshot.objective_directions
    )
    reference = validate_reference_point(snapshot.reference_point, spec.objectives)

    return Frontier(
        objectives=list(spec.objectives),
        objective_directions=dict(spec.directions),
        reference_point=reference,
        max_size=snapshot.max_size,
        max_archive_size=snapshot.max_archive_size,
        margin=snapshot.margin,
        solutions=[_candidate_from_record(r) for r in snapshot.solutions],
        fronts={rank: list(ids) for rank, ids in snapshot.fronts.items()},
        archive=[_candidate_from_record(r) for r in snapshot.archive],
        hypervolume=snapshot.hypervolume,
        generation=snapshot.generation,
        state=FrontierState(snapshot.state),
        created_at=snapshot.created_at,
        updated_at=snapshot.updated_at,
    )


def serialize_distances(distances: Mapping[str, float]) -> Dict[str, Union[float, str]]:
    """Crowding distances with infinite values rendered as ``"inf"``."""
    return {
        candidate_id: "inf" if math.isinf(distance) else distance
        for candidate_id, distance in distances.items()
    }


def serialize_list(
    items: List[Any], serializer: Callable[[Any], Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Serialize a list of items using the given serializer."""
    return [serializer(item) for item in items]


def dump_frontier(frontier: Frontier, path: Path) -> None:
    """Write a frontier snapshot as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(serialize_frontier(frontier), f, indent=2)


def load_frontier(path: Path) -> Frontier:
    """Read a frontier snapshot written by ``dump_frontier``."""
    with open(path) as f:
        data = json.load(f)
    return deserialize_frontier(data)
