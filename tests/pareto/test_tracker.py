"""
Unit tests for HypervolumeTracker saturation detection.
"""

import logging

import pytest

from pareto.tracker import HypervolumeTracker


class TestHypervolumeTracker:
    """Test suite for HypervolumeTracker class"""

    @pytest.fixture
    def tracker(self):
        return HypervolumeTracker(patience=3, window_size=3)

    def test_first_update(self, tracker):
        assert tracker.update(0.5) is False
        assert tracker.current_hypervolume == 0.5
        assert tracker.recent_improvement is None
        assert tracker.average_improvement_rate == 0.0

    def test_empty_tracker(self, tracker):
        assert tracker.current_hypervolume is None
        assert tracker.recent_improvement is None
        assert tracker.history == []
        assert not tracker.saturated

    def test_saturates_after_patience(self, tracker):
        """A flat hypervolume saturates once patience runs out"""
        results = [tracker.update(0.5) for _ in range(4)]

        assert results == [False, False, False, True]
        assert tracker.saturated
        assert tracker.patience_counter == 3

    def test_improvement_resets_patience(self, tracker):
        tracker.update(0.5)
        tracker.update(0.5)
        tracker.update(0.5)
        assert tracker.patience_counter == 2

        assert tracker.update(0.6) is False
        assert tracker.patience_counter == 0

    def test_steady_growth_never_saturates(self, tracker):
        for step in range(10):
            assert tracker.update(0.1 * (step + 1)) is False
        assert tracker.average_improvement_rate == pytest.approx(0.1)

    def test_relative_improvement(self, tracker):
        tracker.update(0.0)
        tracker.update(0.5)
        tracker.update(1.0)

        records = tracker.history
        assert records[1].relative_improvement == 0.0
        assert records[2].relative_improvement == pytest.approx(1.0)
        assert tracker.recent_improvement == pytest.approx(0.5)

    def test_generations(self, tracker):
        tracker.update(0.1)
        tracker.update(0.2)
        tracker.update(0.3, generation=10)
        tracker.update(0.4)

        assert [r.generation for r in tracker.history] == [1, 2, 10, 11]

    def test_history_is_bounded(self):
        tracker = HypervolumeTracker(max_history=3)
        for step in range(5):
            tracker.update(0.1 * step)

        assert len(tracker.history) == 3
        assert tracker.history[0].generation == 3

    def test_reset(self, tracker):
        for _ in range(4):
            tracker.update(0.5)
        tracker.reset()

        assert tracker.history == []
        assert tracker.patience_counter == 0
        assert not tracker.saturated

    @pytest.mark.parametrize(
        "kwargs", [{"window_size": 0}, {"patience": 0}, {"max_history": 1}]
    )
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            HypervolumeTracker(**kwargs)

    def test_saturation_is_logged(self, tracker, caplog):
        with caplog.at_level(logging.INFO, logger="pareto.tracker"):
            for _ in range(4):
                tracker.update(0.5)

        events = [
            r for r in caplog.records if getattr(r, "event_type", None) == "saturation_detected"
        ]
        assert len(events) == 1
        assert events[0].generation == 4
        assert events[0].hypervolume == 0.5
