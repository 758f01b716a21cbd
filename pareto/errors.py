"""
Error types for the Pareto engine.
Hard validation failures are raised as typed errors carrying a stable code.
"""

from typing import Any, Dict, List, Optional


class ParetoError(Exception):
    """Base exception for Pareto engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly error payload."""
        return {
            "error": {
                "code": self.code,
                "message": str(self),
                "details": self.details,
            }
        }


class NoResultsError(ParetoError):
    """Raised when objective evaluation receives no trial results."""

    def __init__(self):
        super().__init__("No trial results to evaluate", "NO_RESULTS")


class InvalidInputError(ParetoError):
    """Raised when trial results are not a well-formed sequence of records."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid trial results: {reason}",
            "INVALID_INPUT",
            {"reason": reason},
        )


class EvaluationFailedError(ParetoError):
    """Raised when a custom objective function fails."""

    def __init__(self, objective: str, reason: str):
        super().__init__(
            f"Failed to evaluate objective '{objective}': {reason}",
            "EVALUATION_FAILED",
            {"objective": objective, "reason": reason},
        )


class MissingNormalizedObjectivesError(ParetoError):
    """Raised when a candidate must be normalized before use."""

    def __init__(self, candidate_id: str):
        super().__init__(
            f"Candidate has no normalized objectives: {candidate_id}",
            "MISSING_NORMALIZED_OBJECTIVES",
            {"candidate_id": candidate_id},
        )


class SolutionNotFoundError(ParetoError):
    """Raised when a solution id is not on the frontier."""

    def __init__(self, candidate_id: str):
        super().__init__(
            f"Solution not found: {candidate_id}",
            "NOT_FOUND",
            {"candidate_id": candidate_id},
        )


class InvalidConfigError(ParetoError):
    """Raised when run configuration is invalid."""

    def __init__(
        self,
        errors: List[Any],
        message: str = "Invalid configuration",
        code: str = "INVALID_CONFIG",
    ):
        super().__init__(message, code, {"errors": errors})
        self.errors = errors


class MissingRequiredOptionError(InvalidConfigError):
    """Raised when a required construction option is absent."""

    def __init__(self, option: str):
        super().__init__(
            [option],
            f"Missing required option: {option}",
            "MISSING_REQUIRED_OPTION",
        )
        self.option = option


class MissingObjectiveDirectionError(InvalidConfigError):
    """Raised when an objective has no direction entry."""

    def __init__(self, objectives: List[str]):
        super().__init__(
            objectives,
            f"Missing direction for objectives: {', '.join(objectives)}",
            "MISSING_OBJECTIVE_DIRECTION",
        )


class InvalidObjectiveDirectionError(InvalidConfigError):
    """Raised when a direction is neither maximize nor minimize."""

    def __init__(self, invalid: Dict[str, Any]):
        super().__init__(
            [{"objective": k, "direction": repr(v)} for k, v in invalid.items()],
            f"Invalid objective directions: {sorted(invalid)}",
            "INVALID_OBJECTIVE_DIRECTION",
        )


class MissingReferenceValueError(InvalidConfigError):
    """Raised when the reference point does not cover every objective."""

    def __init__(self, objectives: List[str]):
        super().__init__(
            objectives,
            f"Reference point missing objectives: {', '.join(objectives)}",
            "MISSING_REFERENCE_VALUE",
        )


class NonNumericReferenceError(InvalidConfigError):
    """Raised when a reference value is not a finite number."""

    def __init__(self, invalid: Dict[str, Any]):
        super().__init__(
            [{"objective": k, "value": repr(v)} for k, v in invalid.items()],
            f"Non-numeric reference values: {sorted(invalid)}",
            "NON_NUMERIC_REFERENCE",
        )
