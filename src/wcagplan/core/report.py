"""Compliance report assembly.

Combines a roadmap and an optional certificate into one plain-data
document for an external renderer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..compliance.hierarchy import DEFAULT_VERSION
from ..models.compliance import ComplianceCertification, ComplianceRoadmap


def build_compliance_report(
    roadmap: ComplianceRoadmap,
    now: datetime,
    certification: Optional[ComplianceCertification] = None,
    version: str = DEFAULT_VERSION,
) -> dict:
    """Build a JSON-ready compliance report.

    Budget figures are planning estimates and are labelled as such.
    """
    return {
        "title": f"WCAG {version} {roadmap.target_level.value} Compliance Report",
        "generatedAt": now.isoformat(),
        "summary": {
            "currentLevel": roadmap.current_level.value,
            "targetLevel": roadmap.target_level.value,
            "totalGaps": len(roadmap.gaps),
            "totalPhases": len(roadmap.phases),
            "targetCompletionDate": roadmap.timeline.target_completion_date.isoformat(),
            "estimatedBudget": roadmap.budget.total_estimate,
            "budgetIsEstimate": True,
        },
        "complianceGaps": [g.model_dump(mode="json") for g in roadmap.gaps],
        "implementationPlan": [p.model_dump(mode="json") for p in roadmap.phases],
        "timeline": roadmap.timeline.model_dump(mode="json"),
        "budget": roadmap.budget.model_dump(mode="json"),
        "certification": certification.model_dump(mode="json") if certification else None,
    }
