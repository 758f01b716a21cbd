"""
Pydantic schemas for engine inputs and snapshot outputs.
Provides type validation for trial records and the frontier option set.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pareto.interfaces import (
    DEFAULT_MARGIN,
    DEFAULT_MAX_ARCHIVE_SIZE,
    DEFAULT_MAX_SIZE,
)

# ============= Input Schemas =============


class TrialResult(BaseModel):
    """One measured trial of a candidate prompt."""

    model_config = ConfigDict(extra="allow")

    success: bool = Field(default=False, description="Whether the trial succeeded")
    duration_ms: float = Field(
        default=0.0, ge=0, description="Wall-clock duration in milliseconds"
    )
    prompt_tokens: int = Field(default=0, ge=0, description="Prompt tokens consumed")
    completion_tokens: int = Field(
        default=0, ge=0, description="Completion tokens produced"
    )
    quality_score: float = Field(
        default=0.0, description="Per-trial quality score used for robustness"
    )


class FrontierOptions(BaseModel):
    """Option set accepted when constructing a frontier."""

    objectives: List[str] = Field(
        ..., min_length=1, description="Ordered objective names"
    )
    objective_directions: Dict[str, Any] = Field(
        ..., description="Map of objective name to 'maximize' or 'minimize'"
    )
    reference_point: Dict[str, Any] = Field(
        ..., description="Map of objective name to reference value"
    )
    max_size: int = Field(
        default=DEFAULT_MAX_SIZE, ge=1, description="Maximum frontier size"
    )
    max_archive_size: int = Field(
        default=DEFAULT_MAX_ARCHIVE_SIZE, ge=1, description="Maximum archive size"
    )
    margin: float = Field(
        default=DEFAULT_MARGIN,
        ge=0.0,
        description="Margin below observed minima for automatic reference points",
    )


# ============= Output Schemas =============


class CandidateRecord(BaseModel):
    """Serialized candidate."""

    id: str = Field(..., description="Candidate identifier")
    prompt: str = Field(default="", description="Prompt text")
    raw_objectives: Dict[str, float] = Field(default_factory=dict)
    normalized_objectives: Optional[Dict[str, float]] = Field(default=None)
    fitness: Optional[float] = Field(default=None)
    generation: int = Field(default=0)
    parent_ids: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class FrontierSnapshot(BaseModel):
    """Point-in-time copy of a frontier, used for warm starts."""

    objectives: List[str] = Field(..., description="Ordered objective names")
    objective_directions: Dict[str, str] = Field(..., description="Directions")
    reference_point: Dict[str, float] = Field(..., description="Reference point")
    max_size: int = Field(default=DEFAULT_MAX_SIZE, ge=1)
    max_archive_size: int = Field(default=DEFAULT_MAX_ARCHIVE_SIZE, ge=1)
    margin: float = Field(default=DEFAULT_MARGIN, ge=0.0)
    solutions: List[CandidateRecord] = Field(default_factory=list)
    archive: List[CandidateRecord] = Field(default_factory=list)
    fronts: Dict[int, List[str]] = Field(default_factory=dict)
    hypervolume: float = Field(default=0.0, description="Dominated hypervolume")
    generation: int = Field(default=0)
    state: str = Field(default="empty")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
