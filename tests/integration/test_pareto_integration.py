"""Integration tests running evaluation, frontier updates and tracking together."""

import math

import pytest

from pareto.dominance import DominanceComparator
from pareto.frontier import FrontierManager
from pareto.hypervolume import HypervolumeCalculator
from pareto.interfaces import Candidate, FrontierState
from pareto.objectives import ObjectiveEvaluator
from pareto_evolve.config import Config
from pareto_evolve.serializers import dump_frontier, load_frontier


def _trials(successes, total, duration_ms, tokens, scores):
    return [
        {
            "success": i < successes,
            "duration_ms": duration_ms,
            "prompt_tokens": tokens,
            "completion_tokens": tokens,
            "quality_score": scores[i % len(scores)],
        }
        for i in range(total)
    ]


class TestParetoIntegration:
    """End-to-end optimization loop over several generations."""

    @pytest.fixture
    def config(self):
        return Config()

    @pytest.fixture
    def evaluator(self, config):
        return ObjectiveEvaluator(config.evaluator_config())

    @pytest.fixture
    def batches(self):
        """Trial results for one generation of prompt variants"""
        return {
            "accurate": _trials(9, 10, 3000, 400, [0.9, 0.8]),
            "fast": _trials(6, 10, 500, 100, [0.7, 0.2]),
            "balanced": _trials(8, 10, 1500, 200, [0.8, 0.8]),
            "poor": _trials(3, 10, 4000, 500, [0.1, 0.9]),
            "broken": [],
        }

    async def _evaluate_generation(self, evaluator, batches, generation):
        raw = await evaluator.evaluate_population(batches)
        candidates = [
            Candidate(id=cid, raw_objectives=objectives, generation=generation)
            for cid, objectives in raw.items()
        ]
        return evaluator.normalize_population(candidates)

    @pytest.mark.asyncio
    async def test_generation_loop(self, config, evaluator, batches, tmp_path):
        manager = FrontierManager()
        comparator = DominanceComparator()
        tracker = config.create_tracker()
        frontier = manager.from_options(config.frontier_options())

        candidates = await self._evaluate_generation(evaluator, batches, 1)
        assert {c.id for c in candidates} == {"accurate", "fast", "balanced", "poor"}

        previous_hv = 0.0
        for candidate in candidates:
            frontier = manager.add_solution(frontier, candidate)
            frontier = manager.archive_solution(frontier, candidate)
            assert frontier.hypervolume >= previous_hv
            previous_hv = frontier.hypervolume

        frontier = manager.update_fronts(manager.advance_generation(frontier))

        assert frontier.state is FrontierState.POPULATED
        assert not frontier.contains("poor")
        assert frontier.hypervolume > 0.0
        assert len(frontier.archive) == 4
        for a in frontier.solutions:
            for b in frontier.solutions:
                assert not comparator.dominates(a, b)

        fronts = comparator.fast_non_dominated_sort(candidates)
        assert "poor" not in [c.id for c in fronts[1]]

        assert tracker.update(frontier.hypervolume, frontier.generation) is False

        # Frontiers persist between runs
        path = tmp_path / "frontier.json"
        dump_frontier(frontier, path)
        restored = load_frontier(path)
        assert restored.hypervolume == frontier.hypervolume
        assert {s.id for s in restored.solutions} == {s.id for s in frontier.solutions}

    def test_plateau_saturates(self, config):
        """An unchanged frontier saturates after the configured patience"""
        config.hypervolume.patience = 2
        tracker = config.create_tracker()
        calculator = HypervolumeCalculator()
        reference = {"x": 0.0, "y": 0.0}
        solutions = [
            Candidate(id="a", normalized_objectives={"x": 1.0, "y": 0.5}),
            Candidate(id="b", normalized_objectives={"x": 0.5, "y": 1.0}),
        ]

        hv = calculator.calculate(solutions, reference, ["x", "y"])
        saturated = [tracker.update(hv) for _ in range(3)]

        assert saturated == [False, False, True]

    def test_improvement_between_generations(self):
        manager = FrontierManager()
        calculator = HypervolumeCalculator()
        frontier = manager.from_options(
            {
                "objectives": ["x", "y"],
                "objective_directions": {"x": "maximize", "y": "maximize"},
                "reference_point": {"x": 0.0, "y": 0.0},
            }
        )
        before = manager.add_solution(
            frontier, Candidate(id="a", normalized_objectives={"x": 1.0, "y": 0.5})
        )
        after = manager.add_solution(
            before, Candidate(id="b", normalized_objectives={"x": 0.5, "y": 1.0})
        )

        ratio, current = calculator.improvement(
            after, before, after.reference_point, after.objectives
        )
        assert current == 0.75
        assert ratio == 1.5
        assert calculator.improvement(after, frontier, after.reference_point, after.objectives)[0] == math.inf
