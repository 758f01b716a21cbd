"""
Structured logging configuration for Pareto Evolve.
Provides consistent logging across all components with JSON output support.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

_EXTRA_FIELDS = (
    "candidate_id",
    "generation",
    "hypervolume",
    "frontier_size",
    "event_type",
    "removed",
)


class StructuredFormatter(logging.Formatter):
    """JSON-formatted log output for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable log format for console output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        level = record.levelname[:4]

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            level = f"{color}{level}{self.RESET}"

        msg = record.getMessage()

        extras = []
        if hasattr(record, "candidate_id"):
            extras.append(f"candidate={str(record.candidate_id)[:8]}")
        if hasattr(record, "generation"):
            extras.append(f"gen={record.generation}")
        if hasattr(record, "frontier_size"):
            extras.append(f"size={record.frontier_size}")
        if hasattr(record, "hypervolume"):
            extras.append(f"hv={record.hypervolume:.6f}")

        extra_str = f" [{', '.join(extras)}]" if extras else ""

        return f"{ts} {level} {record.name}: {msg}{extra_str}"


class ParetoLogger:
    """Logger for frontier events with structured context."""

    def __init__(self, name: str = "pareto"):
        self.logger = logging.getLogger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        """Set persistent context for all log messages."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context.clear()

    def _log(self, level: int, msg: str, **kwargs) -> None:
        extra = {**self._context, **kwargs}
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg: str, **kwargs) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    # Frontier-specific logging methods
    def candidate_added(
        self, candidate_id: str, frontier_size: int, removed: int
    ) -> None:
        self.debug(
            f"Added candidate {candidate_id} to frontier",
            event_type="candidate_added",
            candidate_id=candidate_id,
            frontier_size=frontier_size,
            removed=removed,
        )

    def candidate_rejected(self, candidate_id: str, frontier_size: int) -> None:
        self.debug(
            f"Candidate {candidate_id} is dominated, not adding to frontier",
            event_type="candidate_rejected",
            candidate_id=candidate_id,
            frontier_size=frontier_size,
        )

    def frontier_trimmed(self, before: int, after: int) -> None:
        self.debug(
            f"Trimmed frontier from {before} to {after} solutions",
            event_type="frontier_trimmed",
            frontier_size=after,
            removed=before - after,
        )

    def candidate_archived(self, candidate_id: str, archive_size: int) -> None:
        self.debug(
            f"Archived candidate {candidate_id} (archive size: {archive_size})",
            event_type="candidate_archived",
            candidate_id=candidate_id,
        )

    def saturation_detected(self, generation: int, hypervolume: float) -> None:
        self.info(
            f"Hypervolume saturated at generation {generation}",
            event_type="saturation_detected",
            generation=generation,
            hypervolume=hypervolume,
        )


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON format for console output
        log_file: Optional file path for log output
        use_colors: Use colors in console output (ignored if json_output=True)
    """
    log_level = getattr(logging, level.upper())

    for name in ["pareto", "pareto_evolve"]:
        logger = logging.getLogger(name)
        logger.setLevel(log_level)
        logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stderr)
        if json_output:
            console_handler.setFormatter(StructuredFormatter())
        else:
            console_handler.setFormatter(HumanFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

        # File output is always JSON for machine parsing
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(StructuredFormatter())
            logger.addHandler(file_handler)


def get_logger(name: str) -> ParetoLogger:
    """Get a structured logger instance."""
    return ParetoLogger(name)
