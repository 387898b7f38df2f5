"""Tests for src/core/simulator.py."""

import pytest
from pydantic import ValidationError

from tests.conftest import make_metrics, make_scenario
from src.core.simulator import (
    analyze_scenario,
    classify_scenario,
    project_scenario,
    scenario_from_metrics,
)
from src.models.schemas import ScenarioTier


class TestProjectScenario:
    def test_food_cut_improves_balance(self):
        result = project_scenario(make_scenario(adjustments={"Comida": -20}))
        assert result.new_expenses == 14000.0
        assert result.current_balance == 5000.0
        assert result.new_balance == 6000.0
        assert result.delta == 1000.0
        assert result.percent_change == pytest.approx(20.0)
        assert result.projected_total == 36000.0

    def test_savings_rates(self):
        result = project_scenario(make_scenario(adjustments={"Comida": -20}))
        assert result.current_savings_rate == pytest.approx(25.0)
        assert result.new_savings_rate == pytest.approx(30.0)

    def test_ignores_categories_missing_from_breakdown(self):
        result = project_scenario(make_scenario(adjustments={"Viajes": -50}))
        assert result.new_expenses == 15000.0
        assert result.delta == 0
        assert result.adjustments == []

    def test_ignores_zero_percent_adjustments(self):
        result = project_scenario(make_scenario(adjustments={"Comida": 0}))
        assert result.adjustments == []

    def test_adjustments_sorted_by_absolute_change(self):
        result = project_scenario(make_scenario(
            adjustments={"Comida": -10, "Vivienda": 5, "Ocio": -40},
            breakdown={"Comida": 5000.0, "Vivienda": 7000.0, "Ocio": 1000.0},
        ))
        assert [a.category for a in result.adjustments] == ["Comida", "Ocio", "Vivienda"]
        assert result.adjustments[0].change == -500.0

    def test_zero_current_balance_gives_zero_percent_change(self):
        result = project_scenario(make_scenario(
            monthly_income=10000.0, current_expenses=10000.0, adjustments={"Comida": -10},
        ))
        assert result.delta == 500.0
        assert result.percent_change == 0.0

    def test_percent_change_uses_absolute_current_balance(self):
        result = project_scenario(make_scenario(
            monthly_income=10000.0, current_expenses=12000.0, adjustments={"Comida": -20},
        ))
        # balance goes from -2000 to -1000
        assert result.delta == 1000.0
        assert result.percent_change == pytest.approx(50.0)


class TestScenarioInput:
    def test_rejects_zero_income(self):
        with pytest.raises(ValidationError):
            make_scenario(monthly_income=0)

    def test_rejects_adjustment_below_minus_100(self):
        with pytest.raises(ValidationError, match="cannot shrink"):
            make_scenario(adjustments={"Comida": -150})

    def test_accepts_full_cut(self):
        result = project_scenario(make_scenario(adjustments={"Comida": -100}))
        assert result.new_expenses == 10000.0

    @pytest.mark.parametrize("months", [0, 121])
    def test_rejects_out_of_range_horizon(self, months):
        with pytest.raises(ValidationError):
            make_scenario(months=months)


class TestClassifyScenario:
    def test_very_positive(self):
        assert classify_scenario(1000, 20.0, 6000, 20000) == ScenarioTier.VERY_POSITIVE

    def test_positive_boundaries_are_inclusive(self):
        assert classify_scenario(1, 15.0, 100, 1000) == ScenarioTier.VERY_POSITIVE
        assert classify_scenario(1, 14.99, 100, 1000) == ScenarioTier.POSITIVE
        assert classify_scenario(1, 5.0, 100, 1000) == ScenarioTier.POSITIVE
        assert classify_scenario(1, 4.99, 100, 1000) == ScenarioTier.SLIGHTLY_POSITIVE

    def test_negative_boundaries_are_inclusive(self):
        assert classify_scenario(-1, -15.0, 100, 1000) == ScenarioTier.CRITICAL
        assert classify_scenario(-1, -14.99, 100, 1000) == ScenarioTier.NEGATIVE
        assert classify_scenario(-1, -5.0, 100, 1000) == ScenarioTier.NEGATIVE
        assert classify_scenario(-1, -4.99, 100, 1000) == ScenarioTier.SLIGHTLY_NEGATIVE

    def test_negative_new_balance_escalates_to_critical(self):
        assert classify_scenario(-100, -2.0, -50, 10000) == ScenarioTier.CRITICAL

    def test_zero_delta_is_neutral(self):
        assert classify_scenario(0, 0.0, 5000, 20000) == ScenarioTier.NEUTRAL

    def test_zero_delta_with_negative_balance_is_neutral(self):
        assert classify_scenario(0, 0.0, -1000, 10000) == ScenarioTier.NEUTRAL

    def test_positive_delta_with_zero_percent_is_slightly_positive(self):
        assert classify_scenario(500, 0.0, 500, 10000) == ScenarioTier.SLIGHTLY_POSITIVE

    def test_income_does_not_change_tier(self):
        for income in (1.0, 10000.0, 1e9):
            assert classify_scenario(-10, -6.0, 100, income) == ScenarioTier.NEGATIVE

    def test_every_input_gets_a_tier(self):
        for delta in (-1000, -1, 0, 1, 1000):
            for pct in (-50.0, -5.0, 0.0, 5.0, 50.0):
                for balance in (-100, 0, 100):
                    assert isinstance(classify_scenario(delta, pct, balance, 1000), ScenarioTier)


class TestAnalyzeScenario:
    def test_food_cut_is_very_positive(self):
        analysis = analyze_scenario(make_scenario(adjustments={"Comida": -20}))
        assert analysis.tier == ScenarioTier.VERY_POSITIVE
        assert "6-MONTH PROJECTION: $36,000.00 MXN" in analysis.report
        assert "EXCELLENT" in analysis.report

    def test_offsetting_adjustments_are_neutral(self):
        analysis = analyze_scenario(make_scenario(
            adjustments={"Comida": -10, "Transporte": 10},
            breakdown={"Comida": 5000.0, "Transporte": 5000.0},
        ))
        assert analysis.result.delta == 0
        assert analysis.tier == ScenarioTier.NEUTRAL
        assert "offset each other" in analysis.report

    def test_offsetting_cents_are_neutral(self):
        analysis = analyze_scenario(make_scenario(
            monthly_income=60000.0,
            current_expenses=4209.38,
            adjustments={"Comida": 10, "Transporte": -10},
            breakdown={"Comida": 8709.27, "Transporte": 8709.27},
        ))
        assert analysis.result.delta == 0
        assert analysis.tier == ScenarioTier.NEUTRAL
        assert "reduce your monthly balance" not in analysis.report

    def test_projected_balance_fed_back_is_neutral(self):
        first = project_scenario(make_scenario(
            monthly_income=60000.0,
            current_expenses=4209.38,
            adjustments={"Comida": -15, "Transporte": 5},
            breakdown={"Comida": 8709.27, "Transporte": 3120.55},
        ))
        again = analyze_scenario(make_scenario(
            monthly_income=60000.0,
            current_expenses=60000.0 - first.new_balance,
            breakdown={},
        ))
        assert again.result.delta == 0
        assert again.tier == ScenarioTier.NEUTRAL

    def test_overspending_without_adjustments_is_neutral(self):
        analysis = analyze_scenario(make_scenario(
            monthly_income=10000.0, current_expenses=11000.0, breakdown={},
        ))
        assert analysis.tier == ScenarioTier.NEUTRAL
        assert "No spending categories were adjusted." in analysis.report

    def test_large_increase_is_critical(self):
        analysis = analyze_scenario(make_scenario(adjustments={"Comida": 150}))
        assert analysis.tier == ScenarioTier.CRITICAL
        assert "NEGATIVE monthly balance of $2,500.00 MXN" in analysis.report

    def test_report_is_never_empty(self):
        for months in (1, 3, 4, 6, 7, 12, 24, 120):
            analysis = analyze_scenario(make_scenario(adjustments={"Comida": -5}, months=months))
            assert analysis.report.strip()


class TestScenarioFromMetrics:
    def test_copies_figures(self):
        metrics = make_metrics()
        scenario = scenario_from_metrics(metrics, {"Comida": -20}, 12)
        assert scenario.monthly_income == 20000.0
        assert scenario.current_expenses == 15000.0
        assert scenario.category_breakdown == metrics.category_breakdown
        assert scenario.projection_months == 12

    def test_zero_income_is_rejected(self):
        with pytest.raises(ValidationError):
            scenario_from_metrics(make_metrics(income=0.0, expenses=100.0), {}, 6)
