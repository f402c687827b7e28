"""Conformance level assessment.

Walks A -> AA -> AAA and stops at the first level whose required criteria
are not all satisfied. Because each level's criteria contain the level
below, the walk never needs to backtrack.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from ..compliance.hierarchy import DEFAULT_VERSION, get_required_criteria
from ..models.compliance import LEVEL_ORDER, AssessedLevel, Level
from ..models.evaluation import Evaluation, EvaluationStatus

logger = logging.getLogger(__name__)


def group_by_criterion(evaluations: Iterable[Evaluation]) -> dict[str, list[Evaluation]]:
    """Index evaluations by criterion id, preserving input order."""
    grouped: dict[str, list[Evaluation]] = defaultdict(list)
    for evaluation in evaluations:
        grouped[evaluation.criterion_id].append(evaluation)
    return dict(grouped)


def is_criterion_satisfied(evaluations: list[Evaluation]) -> bool:
    """A criterion is satisfied only if it was tested and every test passed.

    Untested criteria count as failed.
    """
    if not evaluations:
        return False
    return all(e.status == EvaluationStatus.PASS for e in evaluations)


def assess_level(
    evaluations: Iterable[Evaluation],
    version: str = DEFAULT_VERSION,
) -> AssessedLevel:
    """Determine the highest conformance level the evaluations achieve."""
    by_criterion = group_by_criterion(evaluations)
    achieved = AssessedLevel.NON_COMPLIANT

    for level in LEVEL_ORDER:
        required = get_required_criteria(level, version)
        unsatisfied = [
            c for c in required if not is_criterion_satisfied(by_criterion.get(c, []))
        ]
        if unsatisfied:
            logger.debug(
                "Level %s not met: %d of %d criteria unsatisfied",
                level.value, len(unsatisfied), len(required),
            )
            break
        achieved = AssessedLevel(level.value)

    return achieved


def is_compliant_for_level(
    evaluations: Iterable[Evaluation],
    level: Level | str,
    version: str = DEFAULT_VERSION,
) -> bool:
    """Check whether the assessed level reaches ``level``."""
    assessed = assess_level(evaluations, version)
    return assessed.rank >= AssessedLevel(Level(level).value).rank


def get_pass_rate(evaluations: Iterable[Evaluation]) -> float:
    """Percentage of evaluations that passed, 0 for no evaluations."""
    evaluations = list(evaluations)
    if not evaluations:
        return 0.0
    passed = sum(1 for e in evaluations if e.status == EvaluationStatus.PASS)
    return passed / len(evaluations) * 100
