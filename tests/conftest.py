"""Shared test fixtures for the finance assistant tests."""

from src.models.schemas import (
    Metrics,
    ProfileType,
    ScenarioInput,
    Transaction,
    TransactionType,
    UserProfile,
)


def make_metrics(
    income: float = 20000.0,
    expenses: float = 15000.0,
    balance: float | None = None,
    savings_percent: float | None = None,
    category_breakdown: dict[str, float] | None = None,
    trend: str = "positiva",
    average_daily_spend: float | None = 500.0,
) -> Metrics:
    if balance is None:
        balance = income - expenses
    if savings_percent is None:
        savings_percent = balance / income * 100 if income else 0.0
    if category_breakdown is None:
        category_breakdown = {"Comida": 5000.0, "Transporte": 3000.0, "Vivienda": 7000.0}
    return Metrics(
        income=income,
        expenses=expenses,
        balance=balance,
        savings_percent=savings_percent,
        category_breakdown=category_breakdown,
        trend=trend,
        average_daily_spend=average_daily_spend,
    )


def make_transaction(
    category: str = "Comida",
    amount: float = 450.0,
    type_: str | None = "gasto",
    date: str = "2025-01-15",
    description: str | None = "Supermercado",
    concept: str | None = None,
) -> Transaction:
    return Transaction(
        date=date,
        category=category,
        amount=amount,
        type=TransactionType(type_) if type_ else None,
        description=description,
        concept=concept,
    )


def make_scenario(
    monthly_income: float = 20000.0,
    current_expenses: float = 15000.0,
    adjustments: dict[str, float] | None = None,
    breakdown: dict[str, float] | None = None,
    months: int = 6,
) -> ScenarioInput:
    return ScenarioInput(
        monthly_income=monthly_income,
        current_expenses=current_expenses,
        category_adjustments=adjustments or {},
        category_breakdown=breakdown if breakdown is not None else {"Comida": 5000.0},
        projection_months=months,
    )


def make_profile(
    username: str = "ana",
    account_type: str = "personal",
    user_id: int | None = 7,
    company_id: str | None = None,
) -> UserProfile:
    return UserProfile(
        username=username,
        email=f"{username}@example.com",
        full_name=username.title(),
        account_type=ProfileType(account_type),
        user_id=user_id,
        company_id=company_id,
    )
