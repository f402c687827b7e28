"""Tests for core/gaps.py."""

from __future__ import annotations

from wcagplan.compliance.hierarchy import get_default_policy, get_required_criteria
from wcagplan.core.gaps import (
    assess_impact,
    calculate_priority,
    estimate_effort,
    find_gaps,
    generate_recommendations,
    get_criterion_status,
    get_resources,
)
from wcagplan.models.compliance import Effort, GapStatus, Impact, Level, RemediationPolicy
from wcagplan.models.evaluation import Evaluation


class TestGetCriterionStatus:
    def test_not_tested(self):
        assert get_criterion_status([]) == GapStatus.NOT_TESTED

    def test_any_failure(self, make_evaluation):
        evaluations = [make_evaluation("1.1.1"), make_evaluation("1.1.1", status="fail")]
        assert get_criterion_status(evaluations) == GapStatus.FAIL

    def test_needs_review_counts_as_pass(self, make_evaluation):
        assert get_criterion_status([make_evaluation("1.1.1", status="needs-review")]) == GapStatus.PASS


class TestAssessImpact:
    def test_fixed_critical(self):
        assert assess_impact("1.1.1", [], get_default_policy()) == Impact.CRITICAL

    def test_fixed_high(self):
        assert assess_impact("2.4.2", [], get_default_policy()) == Impact.HIGH

    def test_high_from_critical_severity(self, make_evaluation):
        evaluations = [
            make_evaluation("1.3.2", status="fail", severity="low"),
            make_evaluation("1.3.2", status="fail", severity="critical"),
        ]
        assert assess_impact("1.3.2", evaluations, get_default_policy()) == Impact.HIGH

    def test_medium_from_severity(self, make_evaluation):
        evaluations = [make_evaluation("1.3.2", status="fail", severity="medium")]
        assert assess_impact("1.3.2", evaluations, get_default_policy()) == Impact.MEDIUM

    def test_low_from_severity(self, make_evaluation):
        evaluations = [make_evaluation("1.3.2", status="fail", severity="low")]
        assert assess_impact("1.3.2", evaluations, get_default_policy()) == Impact.LOW

    def test_only_failures_count(self, make_evaluation):
        evaluations = [
            make_evaluation("1.3.2", status="pass", severity="critical"),
            make_evaluation("1.3.2", status="fail", severity="low"),
        ]
        assert assess_impact("1.3.2", evaluations, get_default_policy()) == Impact.LOW

    def test_untested_is_low(self):
        assert assess_impact("1.3.2", [], get_default_policy()) == Impact.LOW

    def test_missing_severity_is_low(self, make_evaluation):
        evaluations = [make_evaluation("1.3.2", status="fail", severity=None)]
        assert assess_impact("1.3.2", evaluations, get_default_policy()) == Impact.LOW

    def test_missing_severity_ignored_beside_ranked(self, make_evaluation):
        evaluations = [
            make_evaluation("1.3.2", status="fail", severity=None),
            make_evaluation("1.3.2", status="fail", severity="medium"),
        ]
        assert assess_impact("1.3.2", evaluations, get_default_policy()) == Impact.MEDIUM


class TestEstimateEffort:
    def _failures(self, make_evaluation, count: int):
        return [make_evaluation("1.3.2", status="fail") for _ in range(count)]

    def test_fixed_minimal(self, make_evaluation):
        assert estimate_effort("3.1.1", self._failures(make_evaluation, 20), get_default_policy()) == Effort.MINIMAL

    def test_fixed_extensive(self):
        assert estimate_effort("1.2.5", [], get_default_policy()) == Effort.EXTENSIVE

    def test_thresholds(self, make_evaluation):
        policy = get_default_policy()
        assert estimate_effort("1.3.2", self._failures(make_evaluation, 0), policy) == Effort.MINIMAL
        assert estimate_effort("1.3.2", self._failures(make_evaluation, 1), policy) == Effort.MINIMAL
        assert estimate_effort("1.3.2", self._failures(make_evaluation, 2), policy) == Effort.MODERATE
        assert estimate_effort("1.3.2", self._failures(make_evaluation, 6), policy) == Effort.SIGNIFICANT
        assert estimate_effort("1.3.2", self._failures(make_evaluation, 11), policy) == Effort.EXTENSIVE

    def test_twelve_failures_is_extensive(self, make_evaluation):
        assert estimate_effort("1.3.2", self._failures(make_evaluation, 12), get_default_policy()) == Effort.EXTENSIVE

    def test_passes_not_counted(self, make_evaluation):
        evaluations = [make_evaluation("1.3.2") for _ in range(12)]
        assert estimate_effort("1.3.2", evaluations, get_default_policy()) == Effort.MINIMAL


class TestCalculatePriority:
    def test_extremes(self):
        assert calculate_priority(Impact.CRITICAL, Effort.MINIMAL) == 12
        assert calculate_priority(Impact.LOW, Effort.EXTENSIVE) == 3

    def test_critical_minimal_outranks_low_extensive(self):
        assert calculate_priority(Impact.CRITICAL, Effort.MINIMAL) > calculate_priority(Impact.LOW, Effort.EXTENSIVE)


class TestGenerateRecommendations:
    def test_registry_text_first(self):
        recs = generate_recommendations("1.1.1", [])
        assert recs[0] == "Review WCAG 1.1.1: Non-text Content"
        assert "Ensure Images have meaningful alt text" in recs

    def test_deduplicated_in_order(self, make_evaluation):
        evaluations = [
            make_evaluation("1.1.1", status="fail", recommendations=["Add alt text", "Ensure Images have meaningful alt text"]),
            make_evaluation("1.1.1", status="fail", recommendations=["Add alt text", "Use aria-label on icon buttons"]),
        ]
        recs = generate_recommendations("1.1.1", evaluations)
        assert len(recs) == len(set(recs))
        assert recs[-2:] == ["Add alt text", "Use aria-label on icon buttons"]

    def test_missing_registry_entry_degrades(self, make_evaluation):
        evaluations = [make_evaluation("1.3.2", status="fail", recommendations=["Fix reading order"])]
        assert generate_recommendations("1.3.2", evaluations) == ["Fix reading order"]

    def test_passing_evaluations_ignored(self, make_evaluation):
        evaluations = [make_evaluation("1.3.2", status="pass", recommendations=["Keep it up"])]
        assert generate_recommendations("1.3.2", evaluations) == []


class TestGetResources:
    def test_base_resources(self):
        assert get_resources("1.3.2") == [
            "WCAG 2.1 Guidelines: 1.3.2",
            "WebAIM Article on 1.3.2",
            "Deque University: 1.3.2",
        ]

    def test_curated_resources_appended(self):
        resources = get_resources("1.4.3")
        assert len(resources) == 6
        assert resources[3] == "Color Contrast Analyzer Tool"


class TestFindGaps:
    def test_single_critical_failure(self, make_evaluation):
        evaluations = [make_evaluation("1.1.1", status="fail", severity="critical")]
        gaps = find_gaps(evaluations, "AA")

        matching = [g for g in gaps if g.criterion_id == "1.1.1"]
        assert len(matching) == 1
        gap = matching[0]
        assert gap.impact == Impact.CRITICAL
        assert gap.current_status == GapStatus.FAIL
        assert gap.required_for_level == Level.AA
        assert gaps[0].criterion_id == "1.1.1"

    def test_empty_input_lists_every_criterion(self):
        gaps = find_gaps([], "AA")
        assert {g.criterion_id for g in gaps} == get_required_criteria("AA")
        assert all(g.current_status == GapStatus.NOT_TESTED for g in gaps)

    def test_all_passing_has_no_gaps(self, passing_evaluations):
        assert find_gaps(passing_evaluations("AA"), "AA") == []

    def test_untested_criterion_is_gap(self, passing_evaluations):
        evaluations = [e for e in passing_evaluations("AA") if e.criterion_id != "3.3.4"]
        gaps = find_gaps(evaluations, "AA")
        assert [g.criterion_id for g in gaps] == ["3.3.4"]
        assert gaps[0].current_status == GapStatus.NOT_TESTED

    def test_sorted_by_priority(self, make_evaluation):
        evaluations = [
            make_evaluation("1.3.2", status="fail", severity="medium"),
            make_evaluation("2.4.4", status="fail", severity="high"),
        ]
        gaps = find_gaps(evaluations, "AAA")
        priorities = [g.priority for g in gaps]
        assert priorities == sorted(priorities, reverse=True)

    def test_equal_priorities_keep_hierarchy_order(self):
        gaps = find_gaps([], "A")
        low_minimal = [g.criterion_id for g in gaps if g.priority == 6]
        assert low_minimal[:3] == ["1.2.1", "1.2.2", "1.3.2"]

    def test_failure_without_severity_lands_in_low_phase(self):
        evaluations = [Evaluation(criterion_id="1.3.2", status="fail")]
        gap = next(g for g in find_gaps(evaluations, "A") if g.criterion_id == "1.3.2")
        assert gap.impact == Impact.LOW
        assert gap.current_status == GapStatus.FAIL

    def test_policy_override(self, make_evaluation):
        policy = RemediationPolicy(critical_impact=frozenset({"3.1.1"}))
        evaluations = [make_evaluation("1.1.1", status="fail", severity="low")]
        gaps = {g.criterion_id: g for g in find_gaps(evaluations, "A", policy=policy)}
        assert gaps["3.1.1"].impact == Impact.CRITICAL
        assert gaps["1.1.1"].impact == Impact.LOW

    def test_idempotent(self, make_evaluation):
        evaluations = [make_evaluation("1.4.3", status="fail", severity="high")]
        assert find_gaps(evaluations, "AA") == find_gaps(evaluations, "AA")
