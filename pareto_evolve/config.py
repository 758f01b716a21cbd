"""
Centralized configuration management for pareto-evolve.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from pareto.interfaces import (
    DEFAULT_COST_PER_1K_TOKENS,
    DEFAULT_MARGIN,
    DEFAULT_MAX_ARCHIVE_SIZE,
    DEFAULT_MAX_SIZE,
    DEFAULT_OBJECTIVE_DIRECTIONS,
    DEFAULT_WEIGHTS,
    STANDARD_OBJECTIVES,
)
from pareto.logging_config import configure_logging
from pareto.objectives import EvaluatorConfig
from pareto.tracker import HypervolumeTracker

logger = logging.getLogger(__name__)


@dataclass
class FrontierSettings:
    """Frontier construction settings."""

    objectives: List[str] = field(default_factory=lambda: list(STANDARD_OBJECTIVES))
    objective_directions: Dict[str, str] = field(
        default_factory=lambda: {
            name: direction.value
            for name, direction in DEFAULT_OBJECTIVE_DIRECTIONS.items()
        }
    )
    # Normalized space: every objective is maximized within [0, 1]
    reference_point: Dict[str, float] = field(
        default_factory=lambda: {name: 0.0 for name in STANDARD_OBJECTIVES}
    )
    max_size: int = DEFAULT_MAX_SIZE
    max_archive_size: int = DEFAULT_MAX_ARCHIVE_SIZE


@dataclass
class EvaluationSettings:
    """Objective evaluation settings."""

    objectives: List[str] = field(default_factory=lambda: list(STANDARD_OBJECTIVES))
    cost_per_1k_tokens: float = DEFAULT_COST_PER_1K_TOKENS
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))


@dataclass
class HypervolumeSettings:
    """Reference point and saturation tracking settings."""

    margin: float = DEFAULT_MARGIN
    absolute_threshold: float = 0.001
    relative_threshold: float = 0.01
    average_threshold: float = 0.005
    window_size: int = 5
    patience: int = 5
    max_history: int = 100


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    json_output: bool = False
    use_colors: bool = True
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    frontier: FrontierSettings = field(default_factory=FrontierSettings)
    evaluation: EvaluationSettings = field(default_factory=EvaluationSettings)
    hypervolume: HypervolumeSettings = field(default_factory=HypervolumeSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    state_dir: str = ".pareto-evolve"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        return cls(
            frontier=FrontierSettings(**data.get("frontier", {})),
            evaluation=EvaluationSettings(**data.get("evaluation", {})),
            hypervolume=HypervolumeSettings(**data.get("hypervolume", {})),
            logging=LoggingSettings(**data.get("logging", {})),
            state_dir=data.get("state_dir", ".pareto-evolve"),
        )

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to file."""
        if path is None:
            path = Path(self.state_dir) / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "Config":
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)

    def frontier_options(self) -> Dict[str, Any]:
        """Option set for ``FrontierManager.from_options``."""
        return {
            "objectives": list(self.frontier.objectives),
            "objective_directions": dict(self.frontier.objective_directions),
            "reference_point": dict(self.frontier.reference_point),
            "max_size": self.frontier.max_size,
            "max_archive_size": self.frontier.max_archive_size,
            "margin": self.hypervolume.margin,
        }

    def evaluator_config(self) -> EvaluatorConfig:
        return EvaluatorConfig(
            objectives=list(self.evaluation.objectives),
            cost_per_1k_tokens=self.evaluation.cost_per_1k_tokens,
            weights=dict(self.evaluation.weights),
        )

    def create_tracker(self) -> HypervolumeTracker:
        settings = self.hypervolume
        return HypervolumeTracker(
            absolute_threshold=settings.absolute_threshold,
            relative_threshold=settings.relative_threshold,
            average_threshold=settings.average_threshold,
            window_size=settings.window_size,
            patience=settings.patience,
            max_history=settings.max_history,
        )

    def apply_logging(self) -> None:
        """Configure the pareto loggers from the logging section."""
        configure_logging(
            level=self.logging.level,
            json_output=self.logging.json_output,
            log_file=Path(self.logging.log_file) if self.logging.log_file else None,
            use_colors=self.logging.use_colors,
        )


def get_config(
    config_path: Optional[Path] = None,
    state_dir: Optional[Path] = None,
) -> Config:
    """Get configuration, loading from file if available.

    Priority:
    1. Explicit config_path
    2. Config in state_dir
    3. Config in current directory
    4. Environment variables
    5. Defaults
    """
    paths_to_try = []

    if config_path:
        paths_to_try.append(config_path)
    if state_dir:
        paths_to_try.append(state_dir / "config.json")
    paths_to_try.extend(
        [
            Path(".pareto-evolve") / "config.json",
            Path("pareto-evolve.json"),
        ]
    )

    for path in paths_to_try:
        if path.exists():
            config = Config.load(path)
            _apply_env_overrides(config)
            return config

    config = Config()
    _apply_env_overrides(config)
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to config."""
    env_mappings: Dict[str, tuple] = {
        "PARETO_EVOLVE_MAX_SIZE": ("frontier", "max_size", int),
        "PARETO_EVOLVE_MAX_ARCHIVE_SIZE": ("frontier", "max_archive_size", int),
        "PARETO_EVOLVE_COST_PER_1K_TOKENS": (
            "evaluation",
            "cost_per_1k_tokens",
            float,
        ),
        "PARETO_EVOLVE_MARGIN": ("hypervolume", "margin", float),
        "PARETO_EVOLVE_PATIENCE": ("hypervolume", "patience", int),
        "PARETO_EVOLVE_LOG_LEVEL": ("logging", "level", str),
        "PARETO_EVOLVE_LOG_JSON": (
            "logging",
            "json_output",
            lambda x: x.lower() == "true",
        ),
        "PARETO_EVOLVE_STATE_DIR": (None, "state_dir", str),
    }

    for env_var, (section, key, converter) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                converted = converter(value)  # type: ignore[operator]
            except (ValueError, TypeError):
                logger.warning(f"Ignoring invalid value for {env_var}: {value!r}")
                continue
            if section:
                setattr(getattr(config, section), key, converted)
            else:
                setattr(config, key, converted)
