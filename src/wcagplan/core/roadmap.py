"""Remediation roadmap: phases, timeline and budget.

Durations, rates and overheads below are planning heuristics. Any report
that surfaces them should present them as estimates, not measured costs.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..compliance.hierarchy import DEFAULT_VERSION
from ..models.compliance import (
    BudgetBreakdown,
    ComplianceBudget,
    ComplianceGap,
    ComplianceMilestone,
    CompliancePhase,
    ComplianceRoadmap,
    ComplianceTimeline,
    Impact,
    Level,
    MilestoneStatus,
    RemediationPolicy,
)
from ..models.evaluation import Evaluation
from .assessor import assess_level
from .gaps import find_gaps

logger = logging.getLogger(__name__)

PHASE_BUFFER_DAYS = 7

AUDIT_COST = 5000
CERTIFICATION_COST = 2000
# Percentages, applied with floor division
TESTING_PERCENT = 20
MAINTENANCE_PERCENT = 10
CONTINGENCY_PERCENT = 15

RISK_FACTORS: tuple[str, ...] = (
    "Resource availability constraints",
    "Technical complexity underestimation",
    "Third-party dependency delays",
    "Scope creep from additional requirements",
    "Testing and validation bottlenecks",
)

PHASE_TEMPLATES: tuple[dict, ...] = (
    {
        "impacts": {Impact.CRITICAL, Impact.HIGH},
        "id": "phase-1",
        "name": "Critical Issues Resolution",
        "description": "Address critical and high-impact accessibility barriers",
        "min_days": 30,
        "days_per_gap": 3,
        "cost_per_gap": 1500,
        "deliverables": [
            "Critical accessibility issues resolved",
            "Updated accessibility documentation",
            "Testing reports for critical fixes",
        ],
        "acceptance_criteria": [
            "All critical issues pass automated testing",
            "Manual testing confirms fixes",
            "No regression in existing functionality",
        ],
    },
    {
        "impacts": {Impact.MEDIUM},
        "id": "phase-2",
        "name": "Medium Impact Issues",
        "description": "Resolve medium-impact accessibility issues",
        "min_days": 20,
        "days_per_gap": 2,
        "cost_per_gap": 800,
        "deliverables": [
            "Medium-impact issues resolved",
            "User testing with assistive technologies",
            "Compliance testing report",
        ],
        "acceptance_criteria": [
            "All medium-impact issues resolved",
            "User testing validates fixes",
            "Compliance score improvement documented",
        ],
    },
    {
        "impacts": {Impact.LOW},
        "id": "phase-3",
        "name": "Compliance Polish",
        "description": "Address remaining issues and achieve full compliance",
        "min_days": 15,
        "days_per_gap": 1,
        "cost_per_gap": 400,
        "deliverables": [
            "Complete compliance achieved",
            "Final compliance audit",
            "Certification documentation prepared",
        ],
        "acceptance_criteria": [
            "All success criteria met",
            "Third-party audit confirms compliance",
            "Certification ready for submission",
        ],
    },
)


def create_phases(gaps: list[ComplianceGap]) -> list[CompliancePhase]:
    """Group gaps into up to three phases by impact.

    Empty phases are skipped; each phase depends on the one before it.
    """
    phases: list[CompliancePhase] = []

    for template in PHASE_TEMPLATES:
        phase_gaps = [g for g in gaps if g.impact in template["impacts"]]
        if not phase_gaps:
            continue

        count = len(phase_gaps)
        phases.append(CompliancePhase(
            id=template["id"],
            name=template["name"],
            description=template["description"],
            criteria=[g.criterion_id for g in phase_gaps],
            estimated_duration_days=max(template["min_days"], count * template["days_per_gap"]),
            estimated_cost=count * template["cost_per_gap"],
            dependencies=[phases[-1].id] if phases else [],
            deliverables=list(template["deliverables"]),
            acceptance_criteria=list(template["acceptance_criteria"]),
        ))

    return phases


def create_timeline(phases: list[CompliancePhase], now: datetime) -> ComplianceTimeline:
    """Lay phases out back to back from ``now`` with a buffer between them."""
    milestones: list[ComplianceMilestone] = []
    current = now

    for index, phase in enumerate(phases):
        if index > 0:
            current += timedelta(days=PHASE_BUFFER_DAYS)

        phase_start = current
        current += timedelta(days=phase.estimated_duration_days)

        milestones.append(ComplianceMilestone(
            id=f"{phase.id}-start",
            name=f"{phase.name} - Start",
            date=phase_start,
            criteria=list(phase.criteria),
            status=MilestoneStatus.PENDING,
        ))
        milestones.append(ComplianceMilestone(
            id=f"{phase.id}-end",
            name=f"{phase.name} - Complete",
            date=current,
            criteria=list(phase.criteria),
            status=MilestoneStatus.PENDING,
        ))

    return ComplianceTimeline(
        start_date=now,
        target_completion_date=current,
        milestones=milestones,
        risk_factors=list(RISK_FACTORS),
    )


def estimate_budget(phases: list[CompliancePhase]) -> ComplianceBudget:
    remediation = sum(phase.estimated_cost for phase in phases)
    testing = remediation * TESTING_PERCENT // 100
    maintenance = remediation * MAINTENANCE_PERCENT // 100

    subtotal = remediation + AUDIT_COST + testing + CERTIFICATION_COST + maintenance
    contingency = subtotal * CONTINGENCY_PERCENT // 100

    return ComplianceBudget(
        total_estimate=subtotal + contingency,
        breakdown=BudgetBreakdown(
            audit=AUDIT_COST,
            remediation=remediation,
            testing=testing,
            certification=CERTIFICATION_COST,
            maintenance=maintenance,
        ),
        contingency=contingency,
    )


def build_roadmap(
    evaluations: Iterable[Evaluation],
    target_level: Level | str,
    now: datetime,
    version: str = DEFAULT_VERSION,
    policy: Optional[RemediationPolicy] = None,
) -> ComplianceRoadmap:
    """Build the full remediation roadmap towards ``target_level``."""
    evaluations = list(evaluations)
    target = Level(target_level)

    gaps = find_gaps(evaluations, target, version=version, policy=policy)
    phases = create_phases(gaps)
    logger.debug("Roadmap to %s: %d gaps in %d phases", target.value, len(gaps), len(phases))

    return ComplianceRoadmap(
        current_level=assess_level(evaluations, version),
        target_level=target,
        gaps=gaps,
        phases=phases,
        timeline=create_timeline(phases, now),
        budget=estimate_budget(phases),
    )
