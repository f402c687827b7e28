"""Shared fixtures for WCAG Plan tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from wcagplan.compliance.hierarchy import get_level_definition
from wcagplan.models.evaluation import Evaluation


@pytest.fixture
def now() -> datetime:
    """Fixed clock for deterministic dates."""
    return datetime(2025, 3, 10, 9, 30, 0)


@pytest.fixture
def make_evaluation() -> Callable[..., Evaluation]:
    """Factory for single evaluations."""

    def _make(
        criterion_id: str,
        status: str = "pass",
        severity: str | None = "medium",
        findings: list[str] | None = None,
        recommendations: list[str] | None = None,
    ) -> Evaluation:
        return Evaluation(
            criterion_id=criterion_id,
            status=status,
            severity=severity,
            findings=findings or [],
            recommendations=recommendations or [],
        )

    return _make


@pytest.fixture
def passing_evaluations(make_evaluation) -> Callable[[str], list[Evaluation]]:
    """Factory: one passing evaluation per criterion required at a level."""

    def _make(level: str) -> list[Evaluation]:
        return [
            make_evaluation(c)
            for c in get_level_definition(level).ordered_criteria
        ]

    return _make


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create an empty project directory."""
    project = tmp_path / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def initialized_project(tmp_project: Path) -> Path:
    """Create a project with .wcag-plan/config.yaml."""
    cfg_dir = tmp_project / ".wcag-plan"
    cfg_dir.mkdir()
    (cfg_dir / "config.yaml").write_text(
        'project:\n  name: "test-project"\n  subject: "https://example.org"\n\n'
        "wcag:\n  target_level: A\n\n"
        'policy:\n  critical_impact: ["3.1.1"]\n',
        encoding="utf-8",
    )
    return tmp_project


@pytest.fixture
def sample_batches_yaml() -> str:
    """Two evaluation batches as an accessibility runner would emit them."""
    return """\
- name: desktop-run
  overallScore: 72.5
  participantId: p-01
  evaluations:
    - criterionId: "1.1.1"
      status: fail
      severity: critical
      findings:
        - "Image missing alt text"
      recommendations:
        - "Add alt attributes to informative images"
    - criterionId: "1.4.3"
      status: pass
      severity: low
- name: screen-reader-run
  overallScore: 80
  evaluations:
    - guidelineId: "2.1.1"
      status: needs-review
      severity: medium
"""
