"""Pure analysis functions for fetched finance data.

All functions take already-fetched domain objects and return plain values or
result dataclasses. No I/O, so business logic is testable without mocking.
"""

import math

from src.models.results import TransactionSummary
from src.models.schemas import Metrics, Transaction, TransactionType

_FALLBACK_CATEGORY = "general expenses"

# Filter values the client uses to mean "no category filter"
_ALL_CATEGORIES = {"all", "todas"}


def percent_of(part: float, whole: float) -> float:
    """Return *part* as a percentage of *whole*, or ``0.0`` when *whole* is zero."""
    if whole == 0:
        return 0.0
    return part / whole * 100


def top_category(breakdown: dict[str, float]) -> str:
    """Name of the highest-spend category, or a generic label when empty."""
    if not breakdown:
        return _FALLBACK_CATEGORY
    return max(breakdown.items(), key=lambda item: item[1])[0]


# --- Recommendations ---


def build_recommendations(metrics: Metrics) -> list[str]:
    """Build the three standing recommendations for a set of metrics.

    Always returns exactly three entries, in order: savings rate, category
    concentration, emergency fund.
    """
    recommendations: list[str] = []
    main_category = top_category(metrics.category_breakdown)

    rate = metrics.savings_percent
    if rate < 10:
        recommendations.append(
            f"Increase your savings to 15% by cutting discretionary spending in {main_category}"
        )
    elif rate < 20:
        recommendations.append(
            "Reach the 20% savings goal to strengthen your financial stability"
        )
    else:
        recommendations.append(
            f"Excellent savings rate of {rate:.1f}%. Consider investment options"
        )

    share = percent_of(metrics.category_breakdown.get(main_category, 0.0), metrics.expenses)
    if share > 40:
        recommendations.append(
            f"Optimize spending on {main_category}, which represents {share:.0f}% of your expenses"
        )
    else:
        recommendations.append(
            "Keep the balance across your spending categories; they are well distributed"
        )

    # No monthly spending means there is nothing for the fund to cover
    if metrics.expenses > 0 and metrics.balance < metrics.expenses * 3:
        months_needed = 6 - math.floor(metrics.balance / metrics.expenses)
        recommendations.append(
            f"Strengthen your emergency fund; you are {months_needed} months of expenses "
            "short of a safe cushion"
        )
    else:
        recommendations.append(
            "Your emergency fund is solid. Explore investment options with your bank advisor"
        )

    return recommendations


# --- Transactions ---


def filter_transactions(
    transactions: list[Transaction],
    *,
    category: str | None = None,
    type_: TransactionType | None = None,
    since_date: str | None = None,
    until_date: str | None = None,
) -> list[Transaction]:
    """Filter transactions by category, type and an inclusive date range.

    *category* matches exactly (case-insensitive); ``"all"`` disables it.
    Dates are ISO strings, so lexicographic comparison is chronological.
    """
    wanted = category.lower() if category and category.lower() not in _ALL_CATEGORIES else None
    result: list[Transaction] = []
    for t in transactions:
        if wanted and t.category.lower() != wanted:
            continue
        if type_ is not None and t.type != type_:
            continue
        day = t.date[:10]
        if since_date and day < since_date:
            continue
        if until_date and day > until_date:
            continue
        result.append(t)
    return result


def summarize_transactions(transactions: list[Transaction]) -> TransactionSummary:
    """Total income and expenses and group transactions by date, newest first.

    Transactions without a type count toward neither total.
    """
    summary = TransactionSummary()
    grouped: dict[str, list[Transaction]] = {}
    for t in transactions:
        if t.type == TransactionType.INCOME:
            summary.total_income += t.amount
        elif t.type == TransactionType.EXPENSE:
            summary.total_expenses += t.amount
        grouped.setdefault(t.date[:10], []).append(t)

    summary.by_date = {day: grouped[day] for day in sorted(grouped, reverse=True)}
    summary.total_income = round(summary.total_income, 2)
    summary.total_expenses = round(summary.total_expenses, 2)
    return summary
