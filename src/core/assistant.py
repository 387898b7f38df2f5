"""Rule-based financial assistant.

Answers free-text questions by matching keywords (English or Spanish) against
a fixed, ordered list of intents. The first intent whose keywords appear in
the message answers it; intents that need numbers fall back to a hint asking
the user to reload their data when no metrics are available.
"""

from __future__ import annotations

from typing import Callable, Optional

from src.core.analyzers import percent_of, top_category
from src.models.schemas import Metrics, format_mxn

RELOAD_HINT = "I need your financial data to answer that. Please reload your metrics and ask again."


def _mentions(text: str, *keywords: str) -> bool:
    return any(k in text for k in keywords)


# --- Intent handlers ---


def _spending(m: Metrics) -> str:
    main = top_category(m.category_breakdown)
    top_amount = max(m.category_breakdown.values(), default=0.0)
    return (
        f"Your total expenses for the period are {format_mxn(m.expenses)}. "
        f"Your largest spending category is {main} with {format_mxn(top_amount)}.\n\n"
        "Review that category to find savings opportunities."
    )


def _income(m: Metrics) -> str:
    return (
        f"Your total income for the period is {format_mxn(m.income)}. "
        f"With current expenses of {format_mxn(m.expenses)}, "
        f"your balance is {format_mxn(m.balance)}.\n\n"
        f"Your current savings rate is {m.savings_percent:.1f}%."
    )


def _savings(m: Metrics) -> str:
    rate = m.savings_percent
    if rate >= 20:
        return "\n".join([
            f"Excellent financial management. Your savings rate of {rate:.1f}% is above "
            "the recommended average.",
            "",
            "Recommendations:",
            "- Consider moving part of your savings into medium-term investments",
            "- Keep an emergency fund worth 6 months of expenses",
            "- Look at scheduled savings options with your bank advisor",
        ])
    if rate >= 10:
        return "\n".join([
            f"Your savings rate of {rate:.1f}% is acceptable, but it can improve.",
            "",
            "Ways to raise it:",
            "- Set a savings goal of 20% of your income",
            f"- Cut spending on {top_category(m.category_breakdown)} by 10%",
            "- Automate your savings with scheduled transfers",
        ])
    return "\n".join([
        f"Your savings rate of {rate:.1f}% is below the recommended level.",
        "",
        "Priority actions:",
        "- Review fixed expenses and look for cheaper alternatives",
        "- Reduce discretionary spending by 15-20%",
        "- Set a strict monthly budget",
        "- Consider additional sources of income",
    ])


def _categories(m: Metrics) -> str:
    if not m.category_breakdown:
        return "There is no spending by category recorded for this period."
    top3 = sorted(m.category_breakdown.items(), key=lambda item: item[1], reverse=True)[:3]
    lines = ["Your main spending categories are:", ""]
    for i, (name, amount) in enumerate(top3, 1):
        lines.append(f"{i}. {name}: {format_mxn(amount)} ({percent_of(amount, m.expenses):.1f}%)")
    lines.append("")
    lines.append(f"Consider optimizing spending on {top3[0][0]} to improve your balance.")
    return "\n".join(lines)


def _balance(m: Metrics) -> str:
    if m.balance > 0:
        ratio = m.income / max(m.expenses, 1)
        return "\n".join([
            f"Your financial situation is positive with a balance of {format_mxn(m.balance)}.",
            "",
            "Analysis:",
            f"- Trend: {m.trend or 'not available'}",
            f"- Savings rate: {m.savings_percent:.1f}%",
            f"- Income/expense ratio: {ratio:.2f}",
            "",
            "Keep your current habits and look for investment opportunities.",
        ])
    return "\n".join([
        f"Your current balance is negative: {format_mxn(abs(m.balance))}.",
        "",
        "Urgent measures:",
        "- Cut non-essential spending immediately",
        "- Pay down the highest-interest debts first",
        "- Avoid new credit card purchases",
        "- Consider renegotiating pending payments",
        "",
        "Book an appointment with your financial advisor.",
    ])


def _advice(m: Metrics) -> str:
    target = "15" if m.savings_percent < 15 else "20"
    return "\n".join([
        "Based on your financial profile, I recommend:",
        "",
        f"1. **Spending optimization**: Reduce spending on "
        f"{top_category(m.category_breakdown)} by 10-15%.",
        f"2. **Scheduled savings**: Set up automatic transfers of {target}% of your income "
        "to a savings account.",
        f"3. **Emergency fund**: Keep reserves worth 6 months of expenses "
        f"({format_mxn(m.expenses * 6)}).",
        "4. **Monthly review**: Check your financial metrics every month to stay in control.",
    ])


_GENERAL_ADVICE = "\n".join([
    "I need your financial data for personalized recommendations.",
    "",
    "General recommendations:",
    "- Keep a detailed monthly budget",
    "- Save at least 20% of your income",
    "- Avoid high-interest consumer debt",
    "- Review and adjust your spending regularly",
])


def _trend(m: Metrics) -> str:
    trend = m.trend.lower()
    if _mentions(trend, "positiv", "ascend", "upward", "improv"):
        return "\n".join([
            "Your financial trend is positive. Your finances show consistent improvement.",
            "",
            "Favorable signs:",
            "- Growing balance",
            "- Effective spending control",
            f"- Savings rate: {m.savings_percent:.1f}%",
            "",
            "Keep these habits and raise your savings gradually.",
        ])
    return "\n".join([
        "Your current trend needs attention. It is time to adjust your financial strategy.",
        "",
        "Corrective actions:",
        "- Identify unnecessary expenses to drop",
        "- Set spending limits per category",
        "- Look for ways to increase your income",
        "- Track your finances weekly",
    ])


def _budget(m: Metrics) -> str:
    return "\n".join([
        f"Recommended budget based on your income of {format_mxn(m.income)}:",
        "",
        f"- Needs: {format_mxn(m.income * 0.50)} (50%)",
        f"- Wants: {format_mxn(m.income * 0.30)} (30%)",
        f"- Savings and investment: {format_mxn(m.income * 0.20)} (20%)",
        "",
        "The 50/30/20 split is a standard reference. Adjust it to your needs.",
    ])


_GENERAL_BUDGET = "\n".join([
    "An effective budget follows the 50/30/20 rule:",
    "",
    "- 50% for needs (housing, food, utilities)",
    "- 30% for wants (entertainment, restaurants)",
    "- 20% for savings and investments",
    "",
    "Load your data to get a personalized budget.",
])


def _investment(m: Metrics) -> str:
    if m.balance > m.expenses * 3:
        return "\n".join([
            f"With your current balance of {format_mxn(m.balance)}, you are in a position "
            "to consider investing.",
            "",
            "Options by risk profile:",
            "",
            "**Conservative**: CETES, debt funds",
            "**Moderate**: Balanced funds, diversified ETFs",
            "**Aggressive**: Individual stocks, emerging-market funds",
            "",
            "Talk to your bank's investment advisor for a personalized strategy.",
        ])
    return "\n".join([
        "Before investing, build up your emergency fund.",
        "",
        "Recommended steps:",
        f"1. Save 6 months of expenses ({format_mxn(m.expenses * 6)})",
        "2. Pay off high-interest debt",
        "3. Then put 10-15% of your income into investments",
        "",
        "Financial stability should be your priority right now.",
    ])


_DEBT_STRATEGY = "\n".join([
    "Strategy for paying down debt:",
    "",
    "**Avalanche method** (most efficient):",
    "1. Pay the minimum on every debt",
    "2. Put every extra peso toward the highest-interest debt",
    "3. Once it is paid off, move to the next most expensive one",
    "",
    "**Snowball method** (most motivating):",
    "1. Pay off the smallest debt first",
    "2. Roll the freed-up money into the next smallest",
    "",
    "Avoid taking on new debt while you pay these off.",
])

_HELP = "\n".join([
    "I can help you with:",
    "",
    "- Spending and income analysis",
    "- Savings recommendations",
    "- Budget distribution",
    "- Investment strategies",
    "- Debt management",
    "",
    "Please be more specific, for example: \"How much have I spent?\" or \"How can I save more?\"",
])


class _Intent:
    """A keyword rule with its answer, with or without metrics."""

    def __init__(
        self,
        matches: Callable[[str], bool],
        answer: Optional[Callable[[Metrics], str]] = None,
        without_data: str = RELOAD_HINT,
    ):
        self.matches = matches
        self.answer = answer
        self.without_data = without_data

    def respond(self, metrics: Optional[Metrics]) -> str:
        if self.answer is None or metrics is None:
            return self.without_data
        return self.answer(metrics)


# Order matters: "how much have I spent on each category" is a spending
# question, and "savings" wins over "budget".
_INTENTS: list[_Intent] = [
    _Intent(
        lambda t: _mentions(t, "how much", "cuánto", "cuanto")
        and _mentions(t, "spen", "expense", "gasto", "gastado"),
        _spending,
    ),
    _Intent(lambda t: _mentions(t, "income", "earning", "ingreso"), _income),
    _Intent(lambda t: _mentions(t, "saving", "save", "ahorr"), _savings),
    _Intent(
        lambda t: _mentions(t, "categor", "where do i spend", "donde gasto", "dónde gasto",
                            "en qué gasto", "en que gasto"),
        _categories,
    ),
    _Intent(
        lambda t: _mentions(t, "balance", "situation", "how am i doing", "situación",
                            "situacion", "cómo estoy", "como estoy"),
        _balance,
    ),
    _Intent(
        lambda t: _mentions(t, "advice", "recommend", "what should i do", "consejo",
                            "recomendación", "recomendacion", "qué hacer", "que hacer"),
        _advice,
        without_data=_GENERAL_ADVICE,
    ),
    _Intent(
        lambda t: _mentions(t, "trend", "improving", "getting worse", "tendencia",
                            "mejorando", "empeorando"),
        _trend,
    ),
    _Intent(lambda t: _mentions(t, "budget", "presupuesto"), _budget, without_data=_GENERAL_BUDGET),
    _Intent(
        lambda t: _mentions(t, "invest", "inversión", "inversion", "invertir"),
        _investment,
    ),
    _Intent(
        lambda t: _mentions(t, "debt", "loan", "credit", "deuda", "crédito", "credito",
                            "préstamo", "prestamo"),
        without_data=_DEBT_STRATEGY,
    ),
]


def answer_question(message: str, metrics: Optional[Metrics] = None) -> str:
    """Answer a free-text finance question from the user's metrics.

    Always returns a non-empty answer; unmatched questions get the help text.
    """
    text = message.lower()
    for intent in _INTENTS:
        if intent.matches(text):
            return intent.respond(metrics)
    return _HELP
