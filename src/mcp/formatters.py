"""Markdown formatters for MCP tool responses.

Pure functions that take domain objects and return human-readable Markdown strings.
"""

from __future__ import annotations

from src.core.analyzers import percent_of
from src.models.results import ScenarioAnalysis, TransactionSummary
from src.models.schemas import Metrics, Simulation, Transaction, format_mxn


def format_metrics(metrics: Metrics) -> str:
    lines = [
        "## Financial Summary\n",
        f"**Income:** {format_mxn(metrics.income)}",
        f"**Expenses:** {format_mxn(metrics.expenses)}",
        f"**Balance:** {format_mxn(metrics.balance)}",
        f"**Savings rate:** {metrics.savings_percent:.1f}%",
    ]
    if metrics.trend:
        lines.append(f"**Trend:** {metrics.trend}")
    if metrics.average_daily_spend is not None:
        lines.append(f"**Average daily spend:** {format_mxn(metrics.average_daily_spend)}")

    if metrics.category_breakdown:
        lines.append("\n### Spending by Category")
        ordered = sorted(metrics.category_breakdown.items(), key=lambda item: item[1], reverse=True)
        for name, amount in ordered:
            share = percent_of(amount, metrics.expenses)
            lines.append(f"- **{name}:** {format_mxn(amount)} ({share:.1f}%)")
    return "\n".join(lines)


def format_recommendations(recommendations: list[str], title: str = "Recommendations") -> str:
    if not recommendations:
        return "No recommendations available right now."
    lines = [f"## {title}\n"]
    for i, rec in enumerate(recommendations, 1):
        lines.append(f"{i}. {rec}")
    return "\n".join(lines)


def format_transactions(summary: TransactionSummary, limit: int) -> str:
    """Transactions grouped by day, newest first, capped at *limit* entries."""
    total = sum(len(items) for items in summary.by_date.values())
    if total == 0:
        return "No transactions found matching your criteria."

    shown = min(total, limit)
    lines = [
        f"## Transactions ({shown} of {total} shown)\n",
        f"**Income:** {format_mxn(summary.total_income)} | "
        f"**Expenses:** {format_mxn(summary.total_expenses)} | "
        f"**Net:** {format_mxn(summary.net)}",
    ]

    remaining = limit
    for day, items in summary.by_date.items():
        if remaining == 0:
            break
        lines.append(f"\n### {day}")
        for t in items[:remaining]:
            direction = "IN" if t.is_income else "OUT"
            lines.append(f"- [{direction}] **{format_mxn(t.amount)}** | {t.category} | {t.label}")
        remaining -= min(len(items), remaining)
    return "\n".join(lines)


def format_transaction_created(transaction: Transaction) -> str:
    lines = [
        "Transaction added!\n",
        f"- **Amount:** {format_mxn(transaction.amount)} "
        f"{'income' if transaction.is_income else 'expense'}",
        f"- **Category:** {transaction.category}",
        f"- **Date:** {transaction.date}",
    ]
    note = transaction.description or transaction.concept
    if note:
        lines.append(f"- **Description:** {note}")
    return "\n".join(lines)


def format_simulation(sim: Simulation) -> str:
    """Server-side simulation figures."""
    direction = "better" if sim.difference >= 0 else "worse"
    return "\n".join([
        f"## Simulation ({sim.months} months)\n",
        f"**Monthly income:** {format_mxn(sim.monthly_income)}",
        f"**Expenses:** {format_mxn(sim.current_expenses)} -> {format_mxn(sim.projected_expenses)}",
        f"**Monthly balance:** {format_mxn(sim.current_balance)} -> "
        f"{format_mxn(sim.projected_balance)}",
        f"**Projected total:** {format_mxn(sim.projected_total)}",
        f"**Difference vs. today:** {format_mxn(abs(sim.difference))} {direction}",
    ])


def format_scenario_analysis(analysis: ScenarioAnalysis) -> str:
    tier = analysis.tier.value.replace("_", " ")
    return f"_Outcome: {tier}_\n\n{analysis.report}"
