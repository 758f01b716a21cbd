"""
Tests for frontier snapshot serialization.
"""

import json
import math

import pytest
from pydantic import ValidationError

from pareto.errors import InvalidObjectiveDirectionError
from pareto.frontier import FrontierManager
from pareto.interfaces import Candidate, Direction, FrontierState, ObjectiveSpec
from pareto_evolve.serializers import (
    deserialize_candidate,
    deserialize_frontier,
    dump_frontier,
    load_frontier,
    serialize_candidate,
    serialize_distances,
    serialize_frontier,
    serialize_list,
)


class TestSerializers:
    """Test suite for serializer functions"""

    @pytest.fixture
    def manager(self):
        return FrontierManager()

    @pytest.fixture
    def frontier(self, manager):
        """Populated frontier with ranked fronts and an archive"""
        spec = ObjectiveSpec.from_mapping(
            ["accuracy", "latency"], {"accuracy": "maximize", "latency": "minimize"}
        )
        frontier = manager.create_frontier(
            spec, {"accuracy": 0.0, "latency": 0.0}, margin=0.2
        )
        a = Candidate(
            id="a",
            prompt="Be concise.",
            raw_objectives={"accuracy": 0.9, "latency": 2.0},
            normalized_objectives={"accuracy": 1.0, "latency": 0.5},
            fitness=0.6,
            generation=1,
            parent_ids=["seed"],
            metadata={"mutation": "rephrase"},
        )
        b = Candidate(
            id="b",
            normalized_objectives={"accuracy": 0.5, "latency": 1.0},
            fitness=0.45,
        )
        frontier = manager.add_solution(frontier, a)
        frontier = manager.add_solution(frontier, b)
        frontier = manager.archive_solution(frontier, a)
        frontier = manager.advance_generation(frontier)
        return manager.update_fronts(frontier)

    def test_serialize_candidate(self, frontier):
        data = serialize_candidate(frontier.solutions[-1])

        assert data["id"] == "a"
        assert data["prompt"] == "Be concise."
        assert data["parent_ids"] == ["seed"]
        assert data["metadata"] == {"mutation": "rephrase"}
        assert deserialize_candidate(data) == frontier.solutions[-1]

    def test_serialize_unnormalized_candidate(self):
        data = serialize_candidate(Candidate(id="raw", raw_objectives={"cost": 0.1}))
        assert data["normalized_objectives"] is None
        assert deserialize_candidate(data).normalized_objectives is None

    def test_serialize_frontier_is_json_safe(self, frontier):
        data = serialize_frontier(frontier)
        text = json.dumps(data)

        assert data["objective_directions"] == {
            "accuracy": "maximize",
            "latency": "minimize",
        }
        assert data["state"] == "populated"
        assert data["hypervolume"] == 0.75
        assert isinstance(text, str)

    def test_dump_and_load(self, frontier, manager, tmp_path):
        path = tmp_path / "snapshots" / "frontier.json"
        dump_frontier(frontier, path)
        loaded = load_frontier(path)

        assert [s.id for s in loaded.solutions] == [s.id for s in frontier.solutions]
        assert [c.id for c in loaded.archive] == ["a"]
        assert loaded.fronts == frontier.fronts
        assert loaded.hypervolume == frontier.hypervolume
        assert loaded.generation == 1
        assert loaded.margin == 0.2
        assert loaded.state is FrontierState.POPULATED
        assert loaded.objective_directions["latency"] is Direction.MINIMIZE
        assert loaded.created_at == frontier.created_at

        # A loaded frontier keeps working with the manager
        extended = manager.add_solution(
            loaded,
            Candidate(id="c", normalized_objectives={"accuracy": 1.0, "latency": 1.0}),
        )
        assert [s.id for s in extended.solutions] == ["c"]

    def test_deserialize_invalid_direction(self, frontier):
        data = serialize_frontier(frontier)
        data["objective_directions"]["latency"] = "sideways"

        with pytest.raises(InvalidObjectiveDirectionError):
            deserialize_frontier(data)

    def test_deserialize_malformed(self):
        with pytest.raises(ValidationError):
            deserialize_frontier({"objectives": ["x"]})

    def test_serialize_distances(self):
        assert serialize_distances({"a": math.inf, "b": 0.5}) == {"a": "inf", "b": 0.5}

    def test_serialize_list(self, frontier):
        items = serialize_list(frontier.solutions, serialize_candidate)
        assert [item["id"] for item in items] == ["b", "a"]
