"""
Hypervolume saturation tracking.

Records the frontier hypervolume once per generation and reports when it
has stopped growing. A generation counts as improving if any of the
absolute improvement, relative improvement or windowed average
improvement exceeds its threshold; ``patience`` consecutive
non-improving generations mark the frontier as saturated.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, Optional

from pareto.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class HypervolumeRecord:
    """Hypervolume observed for one generation"""

    generation: int
    hypervolume: float
    absolute_improvement: Optional[float] = None
    relative_improvement: Optional[float] = None
    timestamp: datetime = field(default_factory=datetime.now)


class HypervolumeTracker:
    """Detects when the frontier's hypervolume has plateaued."""

    def __init__(
        self,
        absolute_threshold: float = 0.001,
        relative_threshold: float = 0.01,
        average_threshold: float = 0.005,
        window_size: int = 5,
        patience: int = 5,
        max_history: int = 100,
    ):
        if window_size < 1 or patience < 1 or max_history < 2:
            raise ValueError(
                "window_size and patience must be positive and max_history at least 2"
            )

        self.absolute_threshold = absolute_threshold
        self.relative_threshold = relative_threshold
        self.average_threshold = average_threshold
        self.window_size = window_size
        self.patience = patience
        self.max_history = max_history

        self._history: Deque[HypervolumeRecord] = deque(maxlen=max_history)
        self._patience_counter = 0
        self._saturated = False

    @property
    def history(self) -> List[HypervolumeRecord]:
        """Records from oldest to newest."""
        return list(self._history)

    @property
    def saturated(self) -> bool:
        return self._saturated

    @property
    def patience_counter(self) -> int:
        return self._patience_counter

    @property
    def current_hypervolume(self) -> Optional[float]:
        return self._history[-1].hypervolume if self._history else None

    @property
    def recent_improvement(self) -> Optional[float]:
        return self._history[-1].absolute_improvement if self._history else None

    @property
    def average_improvement_rate(self) -> float:
        """Mean absolute improvement over the last ``window_size`` records."""
        if len(self._history) < 2:
            return 0.0

        recent = list(self._history)[-self.window_size :]
        improvements = [
            r.absolute_improvement for r in recent if r.absolute_improvement is not None
        ]
        if not improvements:
            return 0.0
        return sum(improvements) / len(improvements)

    def update(self, hypervolume: float, generation: Optional[int] = None) -> bool:
        """Record a generation's hypervolume and return the saturation flag."""
        if generation is None:
            generation = self._history[-1].generation + 1 if self._history else 1

        record = HypervolumeRecord(generation=generation, hypervolume=float(hypervolume))

        if self._history:
            previous = self._history[-1].hypervolume
            record.absolute_improvement = record.hypervolume - previous
            record.relative_improvement = (
                record.absolute_improvement / previous if previous > 0 else 0.0
            )

        self._history.append(record)

        if record.absolute_improvement is None:
            self._saturated = False
            return self._saturated

        improving = (
            record.absolute_improvement > self.absolute_threshold
            or record.relative_improvement > self.relative_threshold
            or self.average_improvement_rate > self.average_threshold
        )
        self._patience_counter = 0 if improving else self._patience_counter + 1

        was_saturated = self._saturated
        self._saturated = self._patience_counter >= self.patience
        if self._saturated and not was_saturated:
            logger.saturation_detected(generation, record.hypervolume)
        else:
            logger.debug(
                f"Generation {generation}: hv={record.hypervolume:.6f} "
                f"delta={record.absolute_improvement:+.6f} "
                f"patience={self._patience_counter}/{self.patience}"
            )
        return self._saturated

    def reset(self) -> None:
        """Clear history and counters."""
        self._history.clear()
        self._patience_counter = 0
        self._saturated = False
