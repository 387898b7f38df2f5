"""Result dataclasses for analyzer and simulator outputs.

These are internal types consumed by formatters and report templates:
lightweight dataclasses rather than Pydantic models since they don't need
validation.
"""

from dataclasses import dataclass, field

from src.models.schemas import ScenarioTier, Transaction


@dataclass
class AdjustmentDetail:
    """One category adjustment applied in a simulation."""
    category: str
    percent: float   # e.g. -20.0 means 20% less
    change: float    # MXN per month (negative = less spending)


@dataclass
class ScenarioResult:
    """Projected monthly figures after applying category adjustments."""
    monthly_income: float
    current_expenses: float
    new_expenses: float
    current_balance: float
    new_balance: float
    delta: float                 # new_balance - current_balance
    percent_change: float        # delta vs |current_balance|, in percent
    projected_total: float       # new_balance * projection_months
    projection_months: int
    current_savings_rate: float  # 0-100, balance / income
    new_savings_rate: float
    adjustments: list[AdjustmentDetail] = field(default_factory=list)


@dataclass
class ScenarioAnalysis:
    """A classified scenario with its rendered advisory report."""
    result: ScenarioResult
    tier: ScenarioTier
    report: str


@dataclass
class TransactionSummary:
    """Totals and date grouping for a list of transactions."""
    total_income: float = 0.0
    total_expenses: float = 0.0
    by_date: dict[str, list[Transaction]] = field(default_factory=dict)  # newest date first

    @property
    def net(self) -> float:
        return self.total_income - self.total_expenses
