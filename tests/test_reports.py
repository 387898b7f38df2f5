"""Tests for src/core/reports.py."""

import pytest

from tests.conftest import make_scenario
from src.core.reports import (
    HorizonBand,
    UnsupportedHorizonError,
    evaluation_label,
    generate_report,
    horizon_band,
    plan_phases,
)
from src.core.simulator import project_scenario
from src.models.schemas import ScenarioTier


def _result(adjustments=None, months=6, **kwargs):
    return project_scenario(make_scenario(adjustments=adjustments, months=months, **kwargs))


class TestHorizonBand:
    @pytest.mark.parametrize("months,band", [
        (1, HorizonBand.SHORT),
        (3, HorizonBand.SHORT),
        (4, HorizonBand.MEDIUM),
        (6, HorizonBand.MEDIUM),
        (7, HorizonBand.LONG),
        (12, HorizonBand.LONG),
        (120, HorizonBand.LONG),
    ])
    def test_bands(self, months, band):
        assert horizon_band(months) == band

    @pytest.mark.parametrize("months", [0, -3, 121])
    def test_out_of_range_raises(self, months):
        with pytest.raises(UnsupportedHorizonError) as exc_info:
            horizon_band(months)
        assert exc_info.value.months == months
        assert "between 1 and 120" in str(exc_info.value)

    def test_unsupported_horizon_is_value_error(self):
        assert issubclass(UnsupportedHorizonError, ValueError)


class TestPlanPhases:
    def test_short_is_month_by_month(self):
        assert [p.title for p in plan_phases(3)] == ["Month 1", "Month 2", "Month 3"]

    def test_medium_uses_two_month_phases(self):
        phases = plan_phases(6)
        assert [(p.start_month, p.end_month) for p in phases] == [(1, 2), (3, 4), (5, 6)]
        assert phases[0].title == "Phase 1 (Months 1-2)"

    def test_odd_medium_horizon_ends_with_single_month(self):
        phases = plan_phases(5)
        assert [p.end_month for p in phases] == [2, 4, 5]
        assert phases[-1].title == "Phase 3 (Month 5)"

    def test_long_uses_four_phases(self):
        assert [p.end_month for p in plan_phases(12)] == [3, 6, 9, 12]
        assert [p.end_month for p in plan_phases(7)] == [2, 4, 6, 7]
        assert [p.end_month for p in plan_phases(120)] == [30, 60, 90, 120]

    def test_phases_cover_every_month(self):
        for months in range(1, 121):
            phases = plan_phases(months)
            assert phases[0].start_month == 1
            assert phases[-1].end_month == months
            for prev, nxt in zip(phases, phases[1:]):
                assert nxt.start_month == prev.end_month + 1


class TestEvaluationLabel:
    def test_labels_vary_by_band(self):
        assert evaluation_label(ScenarioTier.VERY_POSITIVE, 6) == "EXCELLENT"
        assert evaluation_label(ScenarioTier.VERY_POSITIVE, 12) == "OUTSTANDING"
        assert evaluation_label(ScenarioTier.NEGATIVE, 3) == "NOT RECOMMENDED"
        assert evaluation_label(ScenarioTier.NEGATIVE, 6) == "RISKY"
        assert evaluation_label(ScenarioTier.NEGATIVE, 12) == "HIGHLY RISKY"

    def test_every_tier_and_band_has_a_label(self):
        for tier in ScenarioTier:
            for months in (2, 5, 24):
                assert evaluation_label(tier, months)


class TestGenerateReport:
    def test_summary_sections(self):
        report = generate_report(ScenarioTier.VERY_POSITIVE, 6, _result({"Comida": -20}))
        assert report.startswith("**FINANCIAL ANALYSIS - 6-MONTH PROJECTION**")
        assert "- Monthly income: $20,000.00 MXN" in report
        assert "- Comida: -20% (-$1,000.00 MXN)" in report
        assert "- Monthly impact: $1,000.00 MXN (improvement)" in report
        assert "**EVALUATION: EXCELLENT**" in report
        assert "**ACTION PLAN:**" in report

    def test_very_positive_milestones_accumulate(self):
        report = generate_report(ScenarioTier.VERY_POSITIVE, 6, _result({"Comida": -20}))
        assert "Accumulated target: $12,000.00 MXN" in report
        assert "Accumulated target: $36,000.00 MXN" in report

    def test_single_month_wording(self):
        report = generate_report(ScenarioTier.VERY_POSITIVE, 1, _result({"Comida": -20}, months=1))
        assert "Over 1 month you will accumulate $6,000.00 MXN" in report
        assert "**Month 1:**" in report

    def test_positive_ramps_improvement(self):
        report = generate_report(ScenarioTier.POSITIVE, 6, _result({"Comida": -10}))
        assert "**IMPLEMENTATION PLAN:**" in report
        assert "Expected monthly improvement: $350.00 MXN" in report
        assert "Expected monthly improvement: $450.00 MXN" in report
        assert "Expected monthly improvement: $500.00 MXN" in report

    def test_slightly_positive_acceleration_plan_only_beyond_short(self):
        short = generate_report(ScenarioTier.SLIGHTLY_POSITIVE, 3, _result({"Comida": -2}, months=3))
        medium = generate_report(ScenarioTier.SLIGHTLY_POSITIVE, 6, _result({"Comida": -2}))
        assert "ACCELERATION PLAN" not in short
        assert "**ACCELERATION PLAN:**" in medium

    def test_negative_long_horizon_shows_yearly_cost(self):
        report = generate_report(ScenarioTier.NEGATIVE, 12, _result({"Comida": 10}, months=12))
        assert "**EVALUATION: HIGHLY RISKY**" in report
        assert "**IF NOTHING CHANGES:**" in report
        assert "- Year 1: $6,000.00 MXN not saved" in report
        assert "(reduction)" in report

    def test_critical_with_negative_balance(self):
        report = generate_report(ScenarioTier.CRITICAL, 6, _result({"Comida": 150}))
        assert "**CRITICAL SITUATION**" in report
        assert "NEGATIVE monthly balance of $2,500.00 MXN" in report
        assert "- New monthly balance: -$2,500.00 MXN" in report
        assert "$-" not in report

    def test_critical_lists_increases_to_reverse(self):
        report = generate_report(ScenarioTier.CRITICAL, 6, _result({"Comida": 20}))
        assert "cut your savings capacity by more than 15%" in report
        assert "**REVERSE THESE INCREASES FIRST:**" in report
        assert "- Comida: +20% (+$1,000.00 MXN)" in report

    @pytest.mark.parametrize("months,expected", [
        (2, {
            ScenarioTier.VERY_POSITIVE: "Keeping this pace for 4 months",
            ScenarioTier.NEUTRAL: "over 2 months.",
            ScenarioTier.NEGATIVE: "**Month 2:**",
            ScenarioTier.CRITICAL: "**Month 2:**",
        }),
        (5, {
            ScenarioTier.VERY_POSITIVE: "Keeping this pace for 10 months",
            ScenarioTier.POSITIVE: "months of expenses",
            ScenarioTier.SLIGHTLY_POSITIVE: "**ACCELERATION PLAN:**",
            ScenarioTier.CRITICAL: "**Phase 3 (Month 5):**",
        }),
        (24, {
            ScenarioTier.VERY_POSITIVE: "Diversified portfolio of",
            ScenarioTier.POSITIVE: "Continuing for two more years",
            ScenarioTier.SLIGHTLY_NEGATIVE: "**LONG-TERM COST:**",
            ScenarioTier.NEGATIVE: "**IF NOTHING CHANGES:**",
        }),
    ])
    def test_every_tier_renders_for_every_band(self, months, expected):
        result = _result({"Comida": -20}, months=months)
        for tier in ScenarioTier:
            report = generate_report(tier, months, result)
            assert f"**EVALUATION: {evaluation_label(tier, months)}**" in report
            if tier in expected:
                assert expected[tier] in report

    @pytest.mark.parametrize("months", [2, 5])
    def test_long_term_sections_only_on_long_horizons(self, months):
        result = _result({"Comida": -20}, months=months)
        reports = "\n".join(generate_report(tier, months, result) for tier in ScenarioTier)
        assert "Diversified portfolio of" not in reports
        assert "Continuing for two more years" not in reports
        assert "LONG-TERM COST" not in reports
        assert "IF NOTHING CHANGES" not in reports

    def test_short_critical_plans_month_by_month(self):
        report = generate_report(ScenarioTier.CRITICAL, 2, _result({"Comida": 150}, months=2))
        assert "**EMERGENCY PLAN:**" in report
        assert "**Month 1:**" in report
        assert "Phase" not in report

    def test_same_tier_differs_between_bands(self):
        short = generate_report(ScenarioTier.VERY_POSITIVE, 3, _result({"Comida": -20}, months=3))
        long = generate_report(ScenarioTier.VERY_POSITIVE, 12, _result({"Comida": -20}, months=12))
        assert "Diversified portfolio of" in long
        assert "Diversified portfolio of" not in short
        assert "Keeping this pace for 6 months" in short

    def test_unsupported_horizon_raises(self):
        with pytest.raises(UnsupportedHorizonError):
            generate_report(ScenarioTier.NEUTRAL, 0, _result())

    def test_horizon_must_match_scenario(self):
        with pytest.raises(ValueError, match="projected over 6 months"):
            generate_report(ScenarioTier.NEUTRAL, 12, _result())
