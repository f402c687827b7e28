"""Evaluation data models."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class EvaluationStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    NEEDS_REVIEW = "needs-review"
    NOT_APPLICABLE = "not-applicable"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


class Evaluation(BaseModel):
    """One test outcome for one criterion against one subject."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    criterion_id: str = Field(
        validation_alias=AliasChoices("criterion_id", "criterionId", "guidelineId"),
    )
    status: EvaluationStatus
    severity: Optional[Severity] = None
    findings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()


class EvaluationBatch(BaseModel):
    """Evaluations produced by one assessment run."""

    name: str = ""
    evaluations: list[Evaluation] = []
    overall_score: float = Field(
        default=0.0,
        ge=0,
        le=100,
        validation_alias=AliasChoices("overall_score", "overallScore"),
    )
    participant_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("participant_id", "participantId"),
    )
    assistive_technology: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("assistive_technology", "assistiveTechnology"),
    )


def flatten_batches(batches: Iterable[EvaluationBatch]) -> list[Evaluation]:
    """Concatenate the evaluations of several batches, preserving order."""
    return [evaluation for batch in batches for evaluation in batch.evaluations]
