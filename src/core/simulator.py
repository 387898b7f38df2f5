"""Local what-if simulator for category spending adjustments.

Projects the monthly balance after a set of percent adjustments, classifies
the outcome into a :class:`ScenarioTier` and renders the advisory report.
Everything here is synchronous and side-effect free.
"""

from src.core.analyzers import percent_of
from src.core.reports import generate_report
from src.models.results import AdjustmentDetail, ScenarioAnalysis, ScenarioResult
from src.models.schemas import Metrics, ScenarioInput, ScenarioTier

# Percent-change thresholds (inclusive) between tiers
MAJOR_CHANGE_PCT = 15.0
MODERATE_CHANGE_PCT = 5.0


def scenario_from_metrics(
    metrics: Metrics,
    adjustments: dict[str, float],
    months: int,
) -> ScenarioInput:
    """Build a :class:`ScenarioInput` from backend metrics."""
    return ScenarioInput(
        monthly_income=metrics.income,
        current_expenses=metrics.expenses,
        category_adjustments=adjustments,
        category_breakdown=metrics.category_breakdown,
        projection_months=months,
    )


def project_scenario(scenario: ScenarioInput) -> ScenarioResult:
    """Apply the category adjustments and compute the projected figures.

    Adjustments for categories missing from the breakdown, and 0% moves,
    are ignored. Amounts are kept to the cent, so adjustments that cancel
    out leave a delta of exactly zero.
    """
    new_expenses = scenario.current_expenses
    details: list[AdjustmentDetail] = []

    for category, pct in scenario.category_adjustments.items():
        current = scenario.category_breakdown.get(category)
        if current is None or pct == 0:
            continue
        change = round(current * pct / 100, 2)
        new_expenses += change
        details.append(AdjustmentDetail(category=category, percent=pct, change=change))

    new_expenses = round(new_expenses, 2)
    income = scenario.monthly_income
    current_balance = income - scenario.current_expenses
    new_balance = income - new_expenses
    delta = round(new_balance - current_balance, 2)
    percent_change = delta / abs(current_balance) * 100 if current_balance != 0 else 0.0

    return ScenarioResult(
        monthly_income=income,
        current_expenses=scenario.current_expenses,
        new_expenses=new_expenses,
        current_balance=current_balance,
        new_balance=new_balance,
        delta=delta,
        percent_change=percent_change,
        projected_total=new_balance * scenario.projection_months,
        projection_months=scenario.projection_months,
        current_savings_rate=percent_of(current_balance, income),
        new_savings_rate=percent_of(new_balance, income),
        adjustments=sorted(details, key=lambda d: abs(d.change), reverse=True),
    )


def classify_scenario(
    delta: float,
    percent_change: float,
    new_balance: float,
    monthly_income: float,
) -> ScenarioTier:
    """Classify a projected change into one of seven tiers.

    Only the change is judged: a zero delta is NEUTRAL even when the balance
    is already negative. A negative new balance escalates any worsening to
    CRITICAL regardless of its size. *monthly_income* does not affect the
    outcome.
    """
    if delta > 0:
        if percent_change >= MAJOR_CHANGE_PCT:
            return ScenarioTier.VERY_POSITIVE
        if percent_change >= MODERATE_CHANGE_PCT:
            return ScenarioTier.POSITIVE
        return ScenarioTier.SLIGHTLY_POSITIVE

    if delta < 0:
        if abs(percent_change) >= MAJOR_CHANGE_PCT or new_balance < 0:
            return ScenarioTier.CRITICAL
        if abs(percent_change) >= MODERATE_CHANGE_PCT:
            return ScenarioTier.NEGATIVE
        return ScenarioTier.SLIGHTLY_NEGATIVE

    return ScenarioTier.NEUTRAL


def analyze_scenario(scenario: ScenarioInput) -> ScenarioAnalysis:
    """Project, classify and render a report for *scenario*."""
    result = project_scenario(scenario)
    tier = classify_scenario(
        result.delta, result.percent_change, result.new_balance, result.monthly_income
    )
    report = generate_report(tier, scenario.projection_months, result)
    return ScenarioAnalysis(result=result, tier=tier, report=report)
