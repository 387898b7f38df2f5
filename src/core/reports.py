"""Advisory report templates for simulated scenarios.

:func:`generate_report` renders Markdown in two parts: a summary of the
current and projected figures, then a tier-specific evaluation with a phase
plan sized to the horizon. Templates are looked up by tier, evaluation labels
by ``(tier, horizon band)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from src.core.analyzers import percent_of
from src.models.results import ScenarioResult
from src.models.schemas import MAX_HORIZON_MONTHS, ScenarioTier, format_mxn


class UnsupportedHorizonError(ValueError):
    """Raised when a projection horizon is outside the supported range."""

    def __init__(self, months: int):
        self.months = months
        super().__init__(
            f"A {months}-month projection is not supported. "
            f"Use a horizon between 1 and {MAX_HORIZON_MONTHS} months."
        )


class HorizonBand(str, Enum):
    SHORT = "short"    # up to 3 months, month-by-month plan
    MEDIUM = "medium"  # 4-6 months, two-month phases
    LONG = "long"      # 7+ months, four phases


def horizon_band(months: int) -> HorizonBand:
    if months < 1 or months > MAX_HORIZON_MONTHS:
        raise UnsupportedHorizonError(months)
    if months <= 3:
        return HorizonBand.SHORT
    if months <= 6:
        return HorizonBand.MEDIUM
    return HorizonBand.LONG


@dataclass
class Phase:
    """A contiguous block of months in an action plan."""
    title: str
    start_month: int
    end_month: int


def _month_span(start: int, end: int) -> str:
    return f"Month {start}" if start == end else f"Months {start}-{end}"


def _months(count: int) -> str:
    return "1 month" if count == 1 else f"{count} months"


def plan_phases(months: int) -> list[Phase]:
    """Split a horizon into plan phases.

    Short horizons get one phase per month, medium horizons two-month phases,
    long horizons four near-equal phases.
    """
    band = horizon_band(months)
    if band == HorizonBand.SHORT:
        return [Phase(_month_span(m, m), m, m) for m in range(1, months + 1)]

    if band == HorizonBand.MEDIUM:
        bounds = list(range(2, months + 1, 2))
        if bounds[-1] != months:
            bounds.append(months)
    else:
        bounds = [math.ceil(months * i / 4) for i in range(1, 5)]

    phases: list[Phase] = []
    start = 1
    for i, end in enumerate(bounds, start=1):
        phases.append(Phase(f"Phase {i} ({_month_span(start, end)})", start, end))
        start = end + 1
    return phases


# --- Formatting helpers ---


def _signed_mxn(value: float) -> str:
    return f"+{format_mxn(value)}" if value >= 0 else format_mxn(value)


def _bullets(items: list[str]) -> list[str]:
    return [f"- {item}" for item in items]


def _stage(index: int, count: int) -> int:
    """0 for the opening phase, 2 for the closing phase, 1 otherwise."""
    if index == 0:
        return 0
    if index == count - 1:
        return 2
    return 1


def _action_plan(
    heading: str,
    months: int,
    steps: tuple[list[str], list[str], list[str]],
    milestone: Callable[[Phase, int], str] | None = None,
) -> list[str]:
    lines = [f"**{heading}:**"]
    phases = plan_phases(months)
    for i, phase in enumerate(phases):
        lines.append("")
        lines.append(f"**{phase.title}:**")
        stage = _stage(i, len(phases))
        lines.extend(_bullets(steps[stage]))
        if milestone:
            lines.append(f"- {milestone(phase, stage)}")
    return lines


# --- Summary section ---


def _summary(s: ScenarioResult) -> list[str]:
    lines = [
        f"**FINANCIAL ANALYSIS - {s.projection_months}-MONTH PROJECTION**",
        "",
        "**CURRENT SITUATION:**",
        f"- Monthly income: {format_mxn(s.monthly_income)}",
        f"- Current expenses: {format_mxn(s.current_expenses)}",
        f"- Monthly balance: {format_mxn(s.current_balance)}",
        f"- Savings rate: {s.current_savings_rate:.1f}%",
        "",
        "**PROPOSED ADJUSTMENTS:**",
    ]
    if s.adjustments:
        for adj in s.adjustments:
            sign = "+" if adj.percent >= 0 else ""
            lines.append(f"- {adj.category}: {sign}{adj.percent:.0f}% ({_signed_mxn(adj.change)})")
    else:
        lines.append("- No category adjustments")

    if s.delta > 0:
        direction = "improvement"
    elif s.delta < 0:
        direction = "reduction"
    else:
        direction = "no change"

    lines += [
        "",
        "**PROJECTED RESULTS:**",
        f"- New monthly expenses: {format_mxn(s.new_expenses)}",
        f"- New monthly balance: {format_mxn(s.new_balance)}",
        f"- New savings rate: {s.new_savings_rate:.1f}%",
        f"- Monthly impact: {format_mxn(abs(s.delta))} ({direction})",
        f"- Change vs current: {s.percent_change:.1f}%",
    ]
    return lines


def _projection_header(s: ScenarioResult, label: str) -> list[str]:
    return [
        f"**{s.projection_months}-MONTH PROJECTION: {format_mxn(s.projected_total)}**",
        "",
        f"**EVALUATION: {label}**",
        "",
    ]


def _months_of_expenses(amount: float, s: ScenarioResult) -> float:
    return percent_of(amount, s.new_expenses) / 100


# --- Evaluation labels ---

_LABELS: dict[tuple[ScenarioTier, HorizonBand], str] = {
    (ScenarioTier.VERY_POSITIVE, HorizonBand.SHORT): "EXCELLENT",
    (ScenarioTier.VERY_POSITIVE, HorizonBand.MEDIUM): "EXCELLENT",
    (ScenarioTier.VERY_POSITIVE, HorizonBand.LONG): "OUTSTANDING",
    (ScenarioTier.POSITIVE, HorizonBand.SHORT): "VERY GOOD",
    (ScenarioTier.POSITIVE, HorizonBand.MEDIUM): "VERY GOOD",
    (ScenarioTier.POSITIVE, HorizonBand.LONG): "VERY GOOD",
    (ScenarioTier.SLIGHTLY_POSITIVE, HorizonBand.SHORT): "ACCEPTABLE",
    (ScenarioTier.SLIGHTLY_POSITIVE, HorizonBand.MEDIUM): "ACCEPTABLE BUT IMPROVABLE",
    (ScenarioTier.SLIGHTLY_POSITIVE, HorizonBand.LONG): "SOLID START WITH ROOM TO IMPROVE",
    (ScenarioTier.NEUTRAL, HorizonBand.SHORT): "NEUTRAL",
    (ScenarioTier.NEUTRAL, HorizonBand.MEDIUM): "NEUTRAL",
    (ScenarioTier.NEUTRAL, HorizonBand.LONG): "NEUTRAL",
    (ScenarioTier.SLIGHTLY_NEGATIVE, HorizonBand.SHORT): "SLIGHTLY NEGATIVE",
    (ScenarioTier.SLIGHTLY_NEGATIVE, HorizonBand.MEDIUM): "NEEDS ATTENTION",
    (ScenarioTier.SLIGHTLY_NEGATIVE, HorizonBand.LONG): "PROBLEMATIC IN THE LONG RUN",
    (ScenarioTier.NEGATIVE, HorizonBand.SHORT): "NOT RECOMMENDED",
    (ScenarioTier.NEGATIVE, HorizonBand.MEDIUM): "RISKY",
    (ScenarioTier.NEGATIVE, HorizonBand.LONG): "HIGHLY RISKY",
    (ScenarioTier.CRITICAL, HorizonBand.SHORT): "UNSUSTAINABLE",
    (ScenarioTier.CRITICAL, HorizonBand.MEDIUM): "UNSUSTAINABLE",
    (ScenarioTier.CRITICAL, HorizonBand.LONG): "UNSUSTAINABLE",
}


def evaluation_label(tier: ScenarioTier, months: int) -> str:
    return _LABELS[(tier, horizon_band(months))]


# --- Tier templates ---


def _very_positive(s: ScenarioResult, band: HorizonBand) -> list[str]:
    m = s.projection_months
    lines = [
        f"Your adjustments improve your monthly balance by {format_mxn(s.delta)}. "
        f"Over {_months(m)} you will accumulate {format_mxn(s.projected_total)}.",
        "",
        "**WHY IT WORKS:**",
        f"With a savings rate of {s.new_savings_rate:.1f}% you are on track to:",
    ]
    if band == HorizonBand.SHORT:
        lines += _bullets([
            "Build a solid emergency fund in the short term",
            "Meet quarterly financial goals",
            "Keep liquidity for investment opportunities",
        ])
    elif band == HorizonBand.MEDIUM:
        lines += _bullets([
            "Build robust financial stability",
            "Open options for medium-term investments",
            "Pay down high-interest debt early",
        ])
    else:
        lines += _bullets([
            "Change your net-worth position substantially",
            "Gather capital for significant investments",
            "Build wealth you can sustain",
        ])
    lines.append("")
    lines += _action_plan(
        "ACTION PLAN",
        m,
        (
            [
                "Update your budgets with the proposed changes",
                "Set alerts so you do not exceed the new limits",
                "Automate a transfer of the monthly surplus to savings",
            ],
            [
                "Review compliance weekly and fine-tune categories",
                "Send half of the extra savings to your emergency fund",
                "Look for another 5-10% in savings",
            ],
            [
                "Compare results against this projection",
                "Move the surplus into low-risk instruments",
                "Plan your next, larger financial goal",
            ],
        ),
        milestone=lambda p, _: f"Accumulated target: {format_mxn(s.new_balance * p.end_month)}",
    )
    lines += [
        "",
        "**OPPORTUNITIES:**",
        f"- {format_mxn(s.projected_total)} covers "
        f"{_months_of_expenses(s.projected_total, s):.1f} months of your new expenses",
    ]
    if band == HorizonBand.LONG:
        lines += _bullets([
            f"Diversified portfolio of {format_mxn(s.projected_total * 0.7)} "
            f"with a liquid reserve of {format_mxn(s.projected_total * 0.3)}",
            f"Keeping this pace for two years: {format_mxn(s.new_balance * 24)}",
        ])
    else:
        lines.append(
            f"- Keeping this pace for {m * 2} months: {format_mxn(s.projected_total * 2)}"
        )
    return lines


def _positive(s: ScenarioResult, band: HorizonBand) -> list[str]:
    m = s.projection_months
    ramp = (0.7, 0.9, 1.0)
    lines = [
        f"The proposed adjustments improve your monthly balance by {format_mxn(s.delta)}. "
        f"Over {_months(m)} you will accumulate {format_mxn(s.projected_total)}.",
        "",
        "**WHY IT IS VIABLE:**",
        f"With a savings rate of {s.new_savings_rate:.1f}% these changes are:",
    ]
    lines += _bullets([
        "Sustainable without sacrificing quality of life",
        "Enough to build a financial cushion",
        "A base to keep improving gradually",
    ])
    lines.append("")
    lines += _action_plan(
        "IMPLEMENTATION PLAN",
        m,
        (
            [
                "Apply 70% of the proposed adjustments",
                "Track how you adapt to the new limits",
                "Spot small recurring expenses to cut",
            ],
            [
                "Raise implementation to 90%",
                "Automate savings with scheduled transfers",
                "Keep the adjustments that are easiest to sustain",
            ],
            [
                "Reach 100% of the adjustments",
                "Look for an extra 3-5% in optimizations",
                "Decide where the accumulated savings will go",
            ],
        ),
        milestone=lambda _, stage: f"Expected monthly improvement: {format_mxn(s.delta * ramp[stage])}",
    )
    lines += [
        "",
        "**RECOMMENDATIONS:**",
        "- Use the savings to start an emergency fund",
        "- Clear small debts with the surplus",
    ]
    if band != HorizonBand.SHORT:
        lines.append(
            f"- {format_mxn(s.projected_total)} covers "
            f"{_months_of_expenses(s.projected_total, s):.1f} months of expenses"
        )
    if band == HorizonBand.LONG:
        lines.append(f"- Continuing for two more years: {format_mxn(s.new_balance * 24)}")
    return lines


def _slightly_positive(s: ScenarioResult, band: HorizonBand) -> list[str]:
    m = s.projection_months
    boosted_delta = s.delta * 3
    boosted_total = (s.new_balance + s.delta * 2) * m
    lines = [
        f"The adjustments bring a modest improvement of {format_mxn(s.delta)} per month. "
        f"Over {_months(m)} you will accumulate {format_mxn(s.projected_total)}.",
        "",
        "**WHY ONLY ACCEPTABLE:**",
    ]
    lines += _bullets([
        "The adjustments are conservative",
        "The additional savings are small",
        "There is plenty of room to improve",
    ])
    lines += [
        "",
        "**HOW TO BOOST IT:**",
    ]
    lines += _bullets([
        "Reduce 2-3 more categories by 10-15%",
        "Cancel non-essential subscriptions and services",
        "Trim small daily expenses (coffee, snacks, apps)",
        f"Tripling the improvement means {format_mxn(boosted_delta)} per month "
        f"and {format_mxn(boosted_total)} over {_months(m)}",
    ])
    if band != HorizonBand.SHORT:
        lines.append("")
        lines += _action_plan(
            "ACCELERATION PLAN",
            m,
            (
                [
                    "Apply the current adjustments",
                    "Identify additional areas to cut",
                ],
                [
                    "Deepen the adjustments by 10%",
                    "Remove the superfluous expenses you found",
                ],
                [
                    "Optimize every category",
                    "Explore an additional income source",
                ],
            ),
            milestone=lambda p, _: f"Accumulated: {format_mxn(s.new_balance * p.end_month)}",
        )
    lines += [
        "",
        "**WARNING:**",
        "With adjustments this moderate, important goals will take longer. "
        "Be more ambitious if your situation allows it.",
    ]
    return lines


def _neutral(s: ScenarioResult, band: HorizonBand) -> list[str]:
    if s.adjustments:
        lines = [
            "The proposed adjustments offset each other, leaving your monthly balance unchanged.",
            "",
            "**WHAT IS HAPPENING:**",
        ]
        lines += _bullets([
            "Increases in some categories cancel reductions in others",
            "The final balance is the same as today",
        ])
        lines += [
            "",
            "**OPTIONS:**",
            "- **A. Focus on saving:** reduce 2-3 categories without raising others",
            "- **B. Strategic rebalance:** offset essential increases with non-essential cuts",
            "- **C. Conscious status quo:** if your current situation is optimal, keep it",
        ]
    else:
        lines = [
            "No spending categories were adjusted.",
            "",
            "**TO GET USEFUL INSIGHTS:**",
            "1. Adjust at least 2-3 categories",
            "2. Define a goal: save more or rebalance spending",
            "3. Be realistic but ambitious",
            "4. Run the simulation again",
        ]
    lines += [
        "",
        f"Keeping your current balance, you will accumulate {format_mxn(s.projected_total)} "
        f"over {_months(s.projection_months)}.",
    ]
    return lines


def _slightly_negative(s: ScenarioResult, band: HorizonBand) -> list[str]:
    m = s.projection_months
    loss = abs(s.delta)
    lines = [
        f"The proposed adjustments reduce your monthly balance by {format_mxn(loss)}. "
        f"Over {_months(m)} that is {format_mxn(loss * m)} less in savings.",
        "",
        "**WHY IT IS NOT ADVISABLE:**",
        f"Projected savings rate: {s.new_savings_rate:.1f}%",
    ]
    lines += _bullets([
        "Your monthly savings capacity shrinks",
        "Your emergency fund grows more slowly",
        "Financial goals get pushed back",
    ])
    lines.append("")
    lines += _action_plan(
        "CORRECTION PLAN",
        m,
        (
            [
                "Apply only the increases that are truly essential",
                "Pick categories to offset the rest",
            ],
            [
                "Drop non-essential increases",
                "Find cheaper alternatives",
            ],
            [
                "Return to a neutral or positive balance",
                "Recover the savings lost so far",
            ],
        ),
        milestone=lambda p, _: f"Savings lost if unchanged: {format_mxn(loss * p.end_month)}",
    )
    if band == HorizonBand.LONG:
        lines += [
            "",
            "**LONG-TERM COST:**",
            f"- After one year: {format_mxn(loss * 12)} not saved",
            f"- After two years: {format_mxn(loss * 24)} not saved",
            f"- Opportunity cost at 6%: {format_mxn(loss * 24 * 1.06)}",
        ]
    lines += [
        "",
        "**WARNING:**",
        "Bad habits start with small increases that become permanent.",
    ]
    return lines


def _negative(s: ScenarioResult, band: HorizonBand) -> list[str]:
    m = s.projection_months
    loss = abs(s.delta)
    lines = [
        f"The proposed adjustments significantly reduce your monthly balance by {format_mxn(loss)}. "
        f"Over {_months(m)} you lose {format_mxn(loss * m)} of savings capacity.",
        "",
        "**RISK ANALYSIS:**",
        f"- Projected balance: {format_mxn(s.new_balance)} per month",
        f"- Any unexpected expense above {format_mxn(s.new_balance)} becomes a crisis",
        f"- The lost savings equal {_months_of_expenses(loss * m, s):.1f} months of expenses",
        f"- Extra income needed to compensate: {format_mxn(loss)} per month",
        "",
    ]
    lines += _action_plan(
        "RESCUE PLAN",
        m,
        (
            [
                "Do not apply the changes as they are",
                "Review every increase and drop the optional ones",
            ],
            [
                "Keep only the most critical increases",
                "Offset them with cuts in other categories",
                f"Look for {format_mxn(loss * 0.7)} per month in additional income",
            ],
            [
                "Reverse every non-essential change",
                "Return to positive savings growth",
            ],
        ),
    )
    if band == HorizonBand.LONG:
        lines += [
            "",
            "**IF NOTHING CHANGES:**",
            f"- Year 1: {format_mxn(loss * 12)} not saved",
            f"- Year 2: {format_mxn(loss * 24)} not saved",
            f"- Year 3: {format_mxn(loss * 36)} not saved",
        ]
    lines += [
        "",
        "**RECOMMENDATION:** Redesign this simulation before putting it in place.",
    ]
    return lines


def _critical(s: ScenarioResult, band: HorizonBand) -> list[str]:
    m = s.projection_months
    if s.new_balance < 0:
        opening = (
            f"The proposed adjustments produce a NEGATIVE monthly balance of "
            f"{format_mxn(abs(s.new_balance))}: you would spend more than you earn every month. "
            f"Over {_months(m)} the shortfall reaches {format_mxn(abs(s.projected_total))}."
        )
    else:
        opening = (
            "The proposed adjustments cut your savings capacity by more than 15% "
            f"({format_mxn(abs(s.delta))} per month, {format_mxn(abs(s.delta) * m)} over {_months(m)})."
        )
    lines = [
        "**CRITICAL SITUATION**",
        "",
        opening,
        "",
    ]
    increases = [a for a in s.adjustments if a.change > 0]
    if increases:
        lines.append("**REVERSE THESE INCREASES FIRST:**")
        for adj in increases:
            lines.append(f"- {adj.category}: +{adj.percent:.0f}% ({_signed_mxn(adj.change)})")
        lines.append("")
    lines += _action_plan(
        "EMERGENCY PLAN",
        m,
        (
            [
                "Cancel these plans",
                "Talk to your bank advisor",
                "Build a new plan based on reducing spending",
            ],
            [
                "Make structural changes to fixed costs",
                "Avoid new credit card spending",
            ],
            [
                "Rebuild a minimum reserve",
                "Confirm the monthly balance is positive again",
            ],
        ),
    )
    lines += [
        "",
        "**Act now.**",
    ]
    return lines


_Template = Callable[[ScenarioResult, HorizonBand], list[str]]

# Each template branches on the horizon band itself
_TEMPLATES: dict[ScenarioTier, _Template] = {
    ScenarioTier.VERY_POSITIVE: _very_positive,
    ScenarioTier.POSITIVE: _positive,
    ScenarioTier.SLIGHTLY_POSITIVE: _slightly_positive,
    ScenarioTier.NEUTRAL: _neutral,
    ScenarioTier.SLIGHTLY_NEGATIVE: _slightly_negative,
    ScenarioTier.NEGATIVE: _negative,
    ScenarioTier.CRITICAL: _critical,
}


def generate_report(tier: ScenarioTier, horizon: int, scenario: ScenarioResult) -> str:
    """Render the advisory report for a classified scenario.

    Raises :class:`UnsupportedHorizonError` when *horizon* is outside
    ``1..MAX_HORIZON_MONTHS``.
    """
    band = horizon_band(horizon)
    if scenario.projection_months != horizon:
        raise ValueError(
            f"Scenario was projected over {scenario.projection_months} months, not {horizon}"
        )

    lines = _summary(scenario)
    lines.append("")
    lines += _projection_header(scenario, evaluation_label(tier, horizon))
    lines += _TEMPLATES[tier](scenario, band)
    return "\n".join(lines)
