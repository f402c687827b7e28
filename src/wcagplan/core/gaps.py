"""Compliance gap analysis.

Produces one gap per criterion the target level requires but the
evaluations do not show as passing, scored by impact and effort so that
cheap, high-value fixes surface first.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..compliance.hierarchy import DEFAULT_VERSION, get_guideline, get_level_definition, load_criteria_tables
from ..models.compliance import ComplianceGap, Effort, GapStatus, Impact, Level, RemediationPolicy
from ..models.evaluation import Evaluation, EvaluationStatus, Severity
from .assessor import group_by_criterion

logger = logging.getLogger(__name__)


def get_criterion_status(evaluations: list[Evaluation]) -> GapStatus:
    if not evaluations:
        return GapStatus.NOT_TESTED
    if any(e.status == EvaluationStatus.FAIL for e in evaluations):
        return GapStatus.FAIL
    return GapStatus.PASS


def _failures(evaluations: list[Evaluation]) -> list[Evaluation]:
    return [e for e in evaluations if e.status == EvaluationStatus.FAIL]


def assess_impact(
    criterion_id: str,
    evaluations: list[Evaluation],
    policy: RemediationPolicy,
) -> Impact:
    """Pinned criteria first, then the worst severity among failures."""
    if criterion_id in policy.critical_impact:
        return Impact.CRITICAL
    if criterion_id in policy.high_impact:
        return Impact.HIGH

    ranked = [e.severity for e in _failures(evaluations) if e.severity is not None]
    if not ranked:
        return Impact.LOW

    worst = max(ranked, key=lambda s: s.rank)
    if worst.rank >= Severity.HIGH.rank:
        return Impact.HIGH
    if worst == Severity.MEDIUM:
        return Impact.MEDIUM
    return Impact.LOW


def estimate_effort(
    criterion_id: str,
    evaluations: list[Evaluation],
    policy: RemediationPolicy,
) -> Effort:
    """Pinned criteria first, then the number of failing evaluations."""
    if criterion_id in policy.minimal_effort:
        return Effort.MINIMAL
    if criterion_id in policy.extensive_effort:
        return Effort.EXTENSIVE

    issue_count = len(_failures(evaluations))
    if issue_count > 10:
        return Effort.EXTENSIVE
    if issue_count > 5:
        return Effort.SIGNIFICANT
    if issue_count > 1:
        return Effort.MODERATE
    return Effort.MINIMAL


def calculate_priority(impact: Impact, effort: Effort) -> int:
    return impact.score * 2 + effort.score


def generate_recommendations(
    criterion_id: str,
    evaluations: list[Evaluation],
    version: str = DEFAULT_VERSION,
) -> list[str]:
    """Registry guidance followed by the failing evaluations' own advice.

    Duplicates are dropped, first occurrence wins.
    """
    recommendations: list[str] = []

    guideline = get_guideline(criterion_id, version)
    if guideline:
        recommendations.append(f"Review WCAG {criterion_id}: {guideline.title}")
        recommendations.extend(f"Ensure {sc}" for sc in guideline.success_criteria)

    for evaluation in _failures(evaluations):
        recommendations.extend(evaluation.recommendations)

    return list(dict.fromkeys(recommendations))


def get_resources(criterion_id: str, version: str = DEFAULT_VERSION) -> list[str]:
    tables = load_criteria_tables(version)
    base = [
        template.format(version=version, criterion=criterion_id)
        for template in tables.base_resources
    ]
    return base + list(tables.criterion_resources.get(criterion_id, ()))


def find_gaps(
    evaluations: Iterable[Evaluation],
    target_level: Level | str,
    version: str = DEFAULT_VERSION,
    policy: Optional[RemediationPolicy] = None,
) -> list[ComplianceGap]:
    """List unmet criteria for ``target_level``, highest priority first.

    Criteria with no evaluations are reported as ``not-tested`` gaps.
    """
    target = Level(target_level)
    if policy is None:
        policy = load_criteria_tables(version).policy

    by_criterion = group_by_criterion(evaluations)
    gaps: list[ComplianceGap] = []

    for criterion_id in get_level_definition(target, version).ordered_criteria:
        criterion_evaluations = by_criterion.get(criterion_id, [])
        status = get_criterion_status(criterion_evaluations)
        if status == GapStatus.PASS:
            continue

        impact = assess_impact(criterion_id, criterion_evaluations, policy)
        effort = estimate_effort(criterion_id, criterion_evaluations, policy)
        gaps.append(ComplianceGap(
            criterion_id=criterion_id,
            current_status=status,
            required_for_level=target,
            impact=impact,
            effort=effort,
            priority=calculate_priority(impact, effort),
            recommendations=generate_recommendations(criterion_id, criterion_evaluations, version),
            resources=get_resources(criterion_id, version),
        ))

    # Stable sort keeps hierarchy order among equal priorities
    gaps.sort(key=lambda g: g.priority, reverse=True)
    logger.debug("Found %d gaps for level %s", len(gaps), target.value)
    return gaps
