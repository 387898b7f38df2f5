"""Pydantic models for the BanorTech finance backend data types."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- The backend speaks Spanish JSON keys; fields map them via aliases ---

MAX_HORIZON_MONTHS = 120


# --- Enums ---

class ProfileType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "empresa"


class TransactionType(str, Enum):
    EXPENSE = "gasto"
    INCOME = "ingreso"


class ScenarioTier(str, Enum):
    """Severity of a simulated outcome, from best to worst."""
    VERY_POSITIVE = "very_positive"
    POSITIVE = "positive"
    SLIGHTLY_POSITIVE = "slightly_positive"
    NEUTRAL = "neutral"
    SLIGHTLY_NEGATIVE = "slightly_negative"
    NEGATIVE = "negative"
    CRITICAL = "critical"


# --- Response Models ---

class Metrics(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    income: float = Field(alias="ingresos_totales")
    expenses: float = Field(alias="gastos_totales")
    balance: float
    savings_percent: float = Field(alias="ahorro_porcentaje")
    category_breakdown: dict[str, float] = Field(default_factory=dict, alias="gastos_por_categoria")
    trend: str = Field(default="", alias="tendencia")
    average_daily_spend: Optional[float] = Field(None, alias="promedio_gasto_diario")


class Simulation(BaseModel):
    """Server-side simulation result returned by ``POST /simulate``."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    monthly_income: float = Field(alias="ingresos_mensuales")
    current_expenses: float = Field(alias="gastos_actuales")
    projected_expenses: float = Field(alias="gastos_proyectados")
    current_balance: float = Field(alias="balance_mensual_actual")
    projected_balance: float = Field(alias="balance_mensual_proyectado")
    projected_total: float = Field(alias="balance_total_proyectado")
    difference: float = Field(alias="diferencia_vs_actual")
    months: int = Field(alias="meses")
    category_breakdown: dict[str, float] = Field(default_factory=dict, alias="gastos_por_categoria")


class Transaction(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date: str = Field(alias="fecha")
    category: str = Field(alias="categoria")
    amount: float = Field(alias="monto")
    type: Optional[TransactionType] = Field(None, alias="tipo")
    description: Optional[str] = Field(None, alias="descripcion")
    concept: Optional[str] = Field(None, alias="concepto")

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_none(cls, v):
        # The backend accepts free-form types; keep the row, drop the type
        return v if v in [t.value for t in TransactionType] else None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def label(self) -> str:
        return self.description or self.concept or self.category


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    username: str
    email: str
    full_name: str = Field(alias="nombre_completo")
    account_type: ProfileType = Field(alias="tipo_cuenta")
    user_id: Optional[int] = Field(None, alias="id_usuario")
    company_id: Optional[str] = Field(None, alias="empresa_id")

    @property
    def account_id(self) -> str:
        """Identifier the backend expects as ``usuario_id`` for this profile."""
        if self.account_type == ProfileType.PERSONAL:
            return str(self.user_id or 1)
        return self.company_id or "E001"


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: str
    token: str
    profile: UserProfile = Field(alias="perfil")


# --- Input Models for Creating/Updating ---

class RegisterInput(BaseModel):
    """Input for registering a new user with the auth service."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    full_name: str = Field(..., alias="nombre_completo")
    account_type: ProfileType = Field(default=ProfileType.PERSONAL, alias="tipo_cuenta")


class LoginInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    remember_session: bool = Field(default=True, alias="recordar_sesion")


class CreateTransactionInput(BaseModel):
    """Input for recording a new transaction with the backend."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = Field(..., description="Transaction date in ISO format (YYYY-MM-DD)")
    category: str = Field(..., description="Category name", min_length=1)
    amount: float = Field(..., description="Transaction amount in MXN", gt=0)
    type: TransactionType = Field(default=TransactionType.EXPENSE)
    description: Optional[str] = Field(None, max_length=200)

    def to_payload(self, profile: ProfileType) -> dict:
        """Build the request body; business profiles send ``concepto``."""
        payload = {
            "fecha": self.date,
            "categoria": self.category,
            "monto": self.amount,
            "tipo": self.type.value,
        }
        text_key = "descripcion" if profile == ProfileType.PERSONAL else "concepto"
        payload[text_key] = self.description or ""
        return payload


class ScenarioInput(BaseModel):
    """A proposed set of category adjustments to simulate locally."""
    model_config = ConfigDict(extra="forbid")

    monthly_income: float = Field(..., gt=0, description="Current monthly income")
    current_expenses: float = Field(..., ge=0, description="Current total monthly spend")
    category_adjustments: dict[str, float] = Field(
        default_factory=dict, description="Percent change per category (e.g. -20 for 20% less)"
    )
    category_breakdown: dict[str, float] = Field(
        default_factory=dict, description="Current monthly spend per category"
    )
    projection_months: int = Field(default=6, ge=1, le=MAX_HORIZON_MONTHS)

    @field_validator("category_adjustments")
    @classmethod
    def _no_adjustment_below_zero(cls, v: dict[str, float]) -> dict[str, float]:
        for category, pct in v.items():
            if pct < -100:
                raise ValueError(
                    f"Adjustment for '{category}' is {pct}%; a category cannot shrink below -100%"
                )
        return v


# --- MCP Tool Input Models ---


class SimulateScenarioInput(BaseModel):
    """Input for simulating category adjustments against current metrics."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    adjustments: dict[str, float] = Field(
        default_factory=dict,
        description="Category name -> percent change, e.g. {'Comida': -20, 'Transporte': 10}",
    )
    months: int = Field(
        default=6, ge=1, le=MAX_HORIZON_MONTHS, description="Projection horizon in months"
    )


class ChatInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    message: str = Field(..., min_length=1, max_length=1000, description="Question for the assistant")


class AddTransactionInput(BaseModel):
    """Natural language input for recording a transaction."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    amount: float = Field(..., gt=0, description="Amount in MXN")
    category: str = Field(..., description="Category (e.g. 'Comida', 'Ventas')")
    description: Optional[str] = Field(None, max_length=200, description="What it was for")
    type: TransactionType = Field(
        default=TransactionType.EXPENSE, description="'gasto' for expense, 'ingreso' for income"
    )
    date: Optional[str] = Field(None, description="Date (YYYY-MM-DD). Defaults to today.")


class ListTransactionsInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category: Optional[str] = Field(None, description="Filter by category (exact, case-insensitive)")
    type: Optional[TransactionType] = Field(None, description="Only 'gasto' or 'ingreso'")
    since_date: Optional[str] = Field(None, description="Start date (YYYY-MM-DD), inclusive")
    until_date: Optional[str] = Field(None, description="End date (YYYY-MM-DD), inclusive")
    limit: int = Field(default=25, ge=1, le=100, description="Max transactions to show")


# --- Helpers ---

def format_mxn(value: float) -> str:
    """Format an amount as pesos, e.g. ``-$1,250.50 MXN``."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f} MXN"
