"""Finance backend API client wrapper.

Async HTTP client for the BanorTech analysis backend. Handles bearer
authentication, error mapping and decoding of the backend's Spanish-keyed
JSON into models.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from src.models.schemas import (
    CreateTransactionInput,
    Metrics,
    ProfileType,
    Simulation,
    Transaction,
)

BASE_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger("finance_mcp")


class FinanceAPIError(Exception):
    """Base exception for finance backend and auth service errors."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Finance API Error [{status_code}]: {detail}")


def error_detail(response: httpx.Response, default: str) -> str:
    """Pull the server's ``message``/``detail`` out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    detail = body.get("message") or body.get("detail")
    # FastAPI validation errors send a list of problems as "detail"
    if isinstance(detail, str) and detail:
        return detail
    return default


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    *,
    params: Optional[dict[str, Any]] = None,
    json_data: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
    error_messages: Optional[dict[int, str]] = None,
) -> dict[str, Any]:
    """Send a request and return the decoded JSON body.

    Non-2xx responses raise :class:`FinanceAPIError` carrying the server's
    message; *error_messages* supplies a fallback per status code when the
    server sends none.
    """
    try:
        response = await client.request(
            method=method,
            url=path,
            params=params,
            json=json_data,
            headers=headers,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        fallback = (error_messages or {}).get(status) or str(e)
        detail = error_detail(e.response, fallback)
        logger.debug("%s %s failed with %s: %s", method, path, status, detail)
        raise FinanceAPIError(status_code=status, detail=detail) from e
    except httpx.TimeoutException as e:
        raise FinanceAPIError(
            status_code=408,
            detail="Request to the finance backend timed out. Please try again.",
        ) from e

    if not response.content:
        return {}
    return response.json()


class FinanceClient:
    """Async client for the finance analysis backend."""

    def __init__(
        self,
        token: str,
        profile: ProfileType = ProfileType.PERSONAL,
        user_id: str = "1",
        base_url: str = BASE_URL,
    ):
        self.token = token
        self.profile = ProfileType(profile)
        self.user_id = user_id
        self.base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=DEFAULT_TIMEOUT,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def _identity(self) -> dict[str, str]:
        return {"perfil": self.profile.value, "usuario_id": self.user_id}

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        return await send_request(self.client, method, path, **kwargs)

    # --- Analysis ---

    async def get_metrics(self) -> Metrics:
        """Get income, expenses, balance and category breakdown for the profile."""
        data = await self._request(
            "GET",
            "/analyze",
            params=self._identity(),
            error_messages={403: "Access denied to this data"},
        )
        return Metrics(**data.get("metricas", {}))

    async def try_get_metrics(self) -> Optional[Metrics]:
        """Like :meth:`get_metrics`, but returns ``None`` when the backend
        errors out or cannot be reached."""
        try:
            return await self.get_metrics()
        except FinanceAPIError as e:
            logger.warning("Metrics unavailable: %s", e.detail)
        except httpx.ConnectError as e:
            logger.warning("Metrics unavailable: cannot connect to %s (%s)", self.base_url, e)
        return None

    async def get_recommendations(self) -> list[str]:
        """Get the server-computed recommendations."""
        data = await self._request("GET", "/recommendations", params=self._identity())
        return list(data.get("recomendaciones", []))

    async def run_simulation(self, adjustments: dict[str, float], months: int) -> Simulation:
        """Run the server-side simulation for percent adjustments per category."""
        body = {**self._identity(), "ajustes": adjustments, "meses_proyeccion": months}
        data = await self._request("POST", "/simulate", json_data=body)
        return Simulation(**data.get("simulacion", {}))

    async def chat(self, message: str) -> str:
        """Ask the backend's assistant a question."""
        body = {**self._identity(), "mensaje": message}
        data = await self._request("POST", "/chat", json_data=body)
        return data.get("respuesta", "")

    # --- Transactions ---

    async def list_transactions(self) -> list[Transaction]:
        """Get the signed-in user's transactions.

        Entries missing a date, category or amount are skipped.
        """
        data = await self._request("GET", "/api/transacciones")
        transactions: list[Transaction] = []
        for item in data.get("transacciones", []):
            try:
                transactions.append(Transaction(**item))
            except ValidationError:
                logger.debug("Skipping malformed transaction: %s", item)
        return transactions

    async def add_transaction(self, input_data: CreateTransactionInput) -> Transaction:
        """Record a new transaction."""
        payload = input_data.to_payload(self.profile)
        await self._request("POST", "/api/transacciones", json_data=payload)
        return Transaction(**payload)
