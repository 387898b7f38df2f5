"""BanorTech Finance MCP Server.

Exposes the finance backend and the local what-if simulator as MCP tools for
use with Claude Desktop and Claude Code. Provides natural language personal
and business finance analysis.
"""

import os
import sys
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `src` is importable when loaded
# directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from src.core.analyzers import build_recommendations, filter_transactions, summarize_transactions
from src.core.assistant import answer_question
from src.core.auth_client import AUTH_BASE_URL, AuthClient, establish_session
from src.core.finance_client import BASE_URL, FinanceClient
from src.core.resolvers import resolve_adjustments
from src.core.session_store import SessionStore
from src.core.simulator import analyze_scenario, scenario_from_metrics
from src.mcp.error_handling import handle_tool_errors
from src.mcp.formatters import (
    format_metrics,
    format_recommendations,
    format_scenario_analysis,
    format_simulation,
    format_transaction_created,
    format_transactions,
)
from src.models.schemas import (
    AddTransactionInput,
    ChatInput,
    CreateTransactionInput,
    ListTransactionsInput,
    SimulateScenarioInput,
)


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    auth = AuthClient(base_url=os.environ.get("FINANCE_AUTH_URL", AUTH_BASE_URL))
    store = SessionStore(os.environ.get("FINANCE_SESSION_FILE") or None)

    try:
        token, profile = await establish_session(
            auth,
            store,
            username=os.environ.get("FINANCE_USERNAME", ""),
            password=os.environ.get("FINANCE_PASSWORD", ""),
        )
    finally:
        await auth.close()

    client = FinanceClient(
        token=token,
        profile=profile.account_type,
        user_id=profile.account_id,
        base_url=os.environ.get("FINANCE_API_URL", BASE_URL),
    )

    yield {"finance": client}

    await client.close()


mcp = FastMCP("finance_mcp", lifespan=app_lifespan)


# --- Helper to get client from context ---


def _get_deps(ctx) -> FinanceClient:
    return ctx.request_context.lifespan_context["finance"]


# --- Read-Only Tools ---


@mcp.tool(
    name="finance_get_metrics",
    annotations={
        "title": "Financial Summary",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_get_metrics(ctx: Context) -> str:
    """Get income, expenses, balance, savings rate and spending by category."""
    finance = _get_deps(ctx)
    metrics = await finance.get_metrics()
    return format_metrics(metrics)


@mcp.tool(
    name="finance_get_recommendations",
    annotations={
        "title": "Backend Recommendations",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_get_recommendations(ctx: Context) -> str:
    """Get the recommendations computed by the finance backend."""
    finance = _get_deps(ctx)
    recommendations = await finance.get_recommendations()
    return format_recommendations(recommendations)


@mcp.tool(
    name="finance_local_recommendations",
    annotations={
        "title": "Savings and Spending Recommendations",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_local_recommendations(ctx: Context) -> str:
    """Recommendations on savings rate, category concentration and emergency fund."""
    finance = _get_deps(ctx)
    metrics = await finance.get_metrics()
    return format_recommendations(build_recommendations(metrics))


@mcp.tool(
    name="finance_list_transactions",
    annotations={
        "title": "List Transactions",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_list_transactions(params: ListTransactionsInput, ctx: Context) -> str:
    """List transactions grouped by day, optionally filtered by category, type or dates."""
    finance = _get_deps(ctx)
    transactions = await finance.list_transactions()
    filtered = filter_transactions(
        transactions,
        category=params.category,
        type_=params.type,
        since_date=params.since_date,
        until_date=params.until_date,
    )
    return format_transactions(summarize_transactions(filtered), params.limit)


# --- Analysis Tools ---


@mcp.tool(
    name="finance_simulate",
    annotations={
        "title": "What-If Spending Simulation",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_simulate(params: SimulateScenarioInput, ctx: Context) -> str:
    """Simulate percent changes to spending categories and get an advisory report.

    Example: {"adjustments": {"Comida": -20, "Entretenimiento": -30}, "months": 12}
    """
    finance = _get_deps(ctx)
    metrics = await finance.get_metrics()
    adjustments = resolve_adjustments(metrics.category_breakdown, params.adjustments)
    scenario = scenario_from_metrics(metrics, adjustments, params.months)
    return format_scenario_analysis(analyze_scenario(scenario))


@mcp.tool(
    name="finance_server_simulation",
    annotations={
        "title": "Backend Spending Simulation",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_server_simulation(params: SimulateScenarioInput, ctx: Context) -> str:
    """Run the finance backend's own projection for percent changes per category."""
    finance = _get_deps(ctx)
    metrics = await finance.get_metrics()
    adjustments = resolve_adjustments(metrics.category_breakdown, params.adjustments)
    simulation = await finance.run_simulation(adjustments, params.months)
    return format_simulation(simulation)


@mcp.tool(
    name="finance_chat",
    annotations={
        "title": "Ask the Finance Assistant",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_chat(params: ChatInput, ctx: Context) -> str:
    """Ask a question about spending, income, savings, budget, investing or debt."""
    finance = _get_deps(ctx)
    # Without metrics the assistant still answers general questions
    metrics = await finance.try_get_metrics()
    return answer_question(params.message, metrics)


# --- Write Tools ---


@mcp.tool(
    name="finance_add_transaction",
    annotations={
        "title": "Add Transaction",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_add_transaction(params: AddTransactionInput, ctx: Context) -> str:
    """Record an expense or income with the finance backend."""
    finance = _get_deps(ctx)
    transaction = await finance.add_transaction(
        CreateTransactionInput(
            date=params.date or date.today().isoformat(),
            category=params.category,
            amount=params.amount,
            type=params.type,
            description=params.description,
        )
    )
    return format_transaction_created(transaction)


# --- Entry point ---

if __name__ == "__main__":
    mcp.run()
