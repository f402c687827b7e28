"""Compliance certificate generation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..compliance.hierarchy import DEFAULT_VERSION, get_required_criteria
from ..models.compliance import (
    AssessedLevel,
    CertificationEvidence,
    CertificationStatus,
    ComplianceCertification,
    Level,
)
from ..models.evaluation import Evaluation, EvaluationBatch, EvaluationStatus, Severity
from .assessor import assess_level

logger = logging.getLogger(__name__)

DEFAULT_CERTIFYING_BODY = "Independent Accessibility Audit"
VALIDITY_YEARS = 1


def add_years(moment: datetime, years: int) -> datetime:
    """Shift a datetime by whole years; 29 February rolls over to 1 March."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, month=3, day=1)


def certificate_id(now: datetime) -> str:
    """Millisecond id from the issue time; naive datetimes are read as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return f"cert-{int(now.timestamp() * 1000)}"


def calculate_compliance_score(
    evaluations: list[Evaluation],
    target_level: Level | str,
    version: str = DEFAULT_VERSION,
) -> float:
    """Share of the target level's criteria without a failing evaluation.

    Returns 0 when there is nothing to score.
    """
    required = get_required_criteria(target_level, version)
    if not evaluations or not required:
        return 0.0

    failing = {
        e.criterion_id for e in evaluations
        if e.status == EvaluationStatus.FAIL and e.criterion_id in required
    }
    return (len(required) - len(failing)) / len(required) * 100


def generate_certificate(
    evaluations: Iterable[Evaluation],
    subject: str,
    auditor: str,
    certifying_body: str = DEFAULT_CERTIFYING_BODY,
    *,
    now: datetime,
    target_level: Level | str = Level.AA,
    version: str = DEFAULT_VERSION,
    batches: Optional[list[EvaluationBatch]] = None,
) -> ComplianceCertification:
    """Issue a certification record for the assessed evaluations.

    Status is ``rejected`` for a non-compliant result and ``approved``
    otherwise. Issue lists only cover tested criteria.
    """
    evaluations = list(evaluations)
    level = assess_level(evaluations, version)
    violations = [e for e in evaluations if e.status == EvaluationStatus.FAIL]

    certificate = ComplianceCertification(
        id=certificate_id(now),
        subject=subject,
        compliance_level=level,
        wcag_version=version,
        certification_date=now,
        expiration_date=add_years(now, VALIDITY_YEARS),
        audit_results=list(batches or []),
        compliance_score=calculate_compliance_score(evaluations, target_level, version),
        critical_issues=sum(1 for v in violations if v.severity == Severity.CRITICAL),
        resolved_issues=[e for e in evaluations if e.status == EvaluationStatus.PASS],
        pending_issues=violations,
        certification_body=certifying_body,
        auditor=auditor,
        evidence=CertificationEvidence(),
        status=(
            CertificationStatus.REJECTED
            if level == AssessedLevel.NON_COMPLIANT
            else CertificationStatus.APPROVED
        ),
        target_level=Level(target_level),
    )
    logger.debug(
        "Certificate %s for %s: level %s, score %.1f",
        certificate.id, subject, level.value, certificate.compliance_score,
    )
    return certificate
