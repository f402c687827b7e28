"""Compliance assessment data models.

Every model here is plain data: engine operations build them fresh on each
call and ``model_dump(mode="json")`` hands them to any renderer.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .evaluation import Evaluation, EvaluationBatch


class Level(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class AssessedLevel(str, Enum):
    NON_COMPLIANT = "non-compliant"
    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def rank(self) -> int:
        return _ASSESSED_RANK[self]


_ASSESSED_RANK = {
    AssessedLevel.NON_COMPLIANT: 0,
    AssessedLevel.A: 1,
    AssessedLevel.AA: 2,
    AssessedLevel.AAA: 3,
}

LEVEL_ORDER: tuple[Level, ...] = (Level.A, Level.AA, Level.AAA)


class Principle(str, Enum):
    PERCEIVABLE = "perceivable"
    OPERABLE = "operable"
    UNDERSTANDABLE = "understandable"
    ROBUST = "robust"


class Impact(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def score(self) -> int:
        return _IMPACT_SCORE[self]


class Effort(str, Enum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"
    EXTENSIVE = "extensive"

    @property
    def score(self) -> int:
        return _EFFORT_SCORE[self]


_IMPACT_SCORE = {Impact.CRITICAL: 4, Impact.HIGH: 3, Impact.MEDIUM: 2, Impact.LOW: 1}
_EFFORT_SCORE = {Effort.MINIMAL: 4, Effort.MODERATE: 3, Effort.SIGNIFICANT: 2, Effort.EXTENSIVE: 1}


class GapStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    NOT_TESTED = "not-tested"


class MilestoneStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DELAYED = "delayed"


class CertificationStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Guideline(BaseModel):
    """A Guideline Registry entry for one success criterion."""

    model_config = ConfigDict(frozen=True)

    id: str
    principle: Principle
    level: Level
    title: str
    description: str = ""
    success_criteria: tuple[str, ...] = ()
    testing_methods: tuple[str, ...] = ()


class LevelDefinition(BaseModel):
    """Cumulative required criteria for one conformance level."""

    model_config = ConfigDict(frozen=True)

    level: Level
    version: str
    pass_percentage: float = 100
    required_criteria: frozenset[str]
    ordered_criteria: tuple[str, ...]


class RemediationPolicy(BaseModel):
    """Criterion sets that pin impact and effort regardless of evaluations."""

    model_config = ConfigDict(frozen=True)

    critical_impact: frozenset[str] = frozenset()
    high_impact: frozenset[str] = frozenset()
    minimal_effort: frozenset[str] = frozenset()
    extensive_effort: frozenset[str] = frozenset()


class ComplianceGap(BaseModel):
    criterion_id: str
    current_status: GapStatus
    required_for_level: Level
    impact: Impact
    effort: Effort
    priority: int
    recommendations: list[str] = []
    resources: list[str] = []


class CompliancePhase(BaseModel):
    id: str
    name: str
    description: str
    criteria: list[str]
    estimated_duration_days: int
    estimated_cost: int
    dependencies: list[str] = []
    deliverables: list[str] = []
    acceptance_criteria: list[str] = []


class ComplianceMilestone(BaseModel):
    id: str
    name: str
    date: datetime
    criteria: list[str]
    status: MilestoneStatus = MilestoneStatus.PENDING


class ComplianceTimeline(BaseModel):
    start_date: datetime
    target_completion_date: datetime
    milestones: list[ComplianceMilestone] = []
    risk_factors: list[str] = []


class BudgetBreakdown(BaseModel):
    audit: int
    remediation: int
    testing: int
    certification: int
    maintenance: int


class ComplianceBudget(BaseModel):
    """Heuristic planning estimates, not measured costs."""

    total_estimate: int
    breakdown: BudgetBreakdown
    contingency: int


class ComplianceRoadmap(BaseModel):
    current_level: AssessedLevel
    target_level: Level
    gaps: list[ComplianceGap] = []
    phases: list[CompliancePhase] = []
    timeline: ComplianceTimeline
    budget: ComplianceBudget


class CertificationEvidence(BaseModel):
    screenshots: list[str] = []
    test_reports: list[str] = []
    code_examples: list[str] = []
    user_testing_results: list[str] = []
    remediation_documentation: list[str] = []
    third_party_validation: list[str] = []


class ComplianceCertification(BaseModel):
    id: str
    subject: str
    compliance_level: AssessedLevel
    wcag_version: str
    certification_date: datetime
    expiration_date: datetime
    audit_results: list[EvaluationBatch] = []
    compliance_score: float
    critical_issues: int
    resolved_issues: list[Evaluation] = []
    pending_issues: list[Evaluation] = []
    certification_body: str
    auditor: str
    evidence: CertificationEvidence = CertificationEvidence()
    status: CertificationStatus
    target_level: Level
