"""Auth service client.

Registers users, exchanges credentials for a bearer token, checks tokens and
signs out. The auth service runs separately from the analysis backend.
"""

import logging
from typing import Optional

import httpx

from src.core.finance_client import DEFAULT_TIMEOUT, FinanceAPIError, send_request
from src.core.session_store import SessionStore
from src.models.schemas import LoginInput, LoginResponse, RegisterInput, UserProfile

AUTH_BASE_URL = "http://127.0.0.1:8001"

logger = logging.getLogger("finance_mcp")


class AuthClient:
    """Async client for the auth service."""

    def __init__(self, base_url: str = AUTH_BASE_URL):
        self.base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=DEFAULT_TIMEOUT)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @staticmethod
    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def register(self, input_data: RegisterInput) -> UserProfile:
        """Create an account and return its profile."""
        data = await send_request(
            self.client,
            "POST",
            "/register",
            json_data=input_data.model_dump(by_alias=True, mode="json"),
        )
        return UserProfile(**data.get("perfil", {}))

    async def login(self, input_data: LoginInput) -> LoginResponse:
        """Exchange credentials for a token and profile."""
        data = await send_request(
            self.client,
            "POST",
            "/login",
            json_data=input_data.model_dump(by_alias=True),
            error_messages={401: "Invalid credentials"},
        )
        return LoginResponse(**data)

    async def verify_token(self, token: str) -> bool:
        """Return whether *token* is still accepted by the auth service."""
        try:
            response = await self.client.get("/verificar-token", headers=self._bearer(token))
        except httpx.TimeoutException as e:
            raise FinanceAPIError(
                status_code=408,
                detail="Request to the auth service timed out. Please try again.",
            ) from e
        return response.status_code == 200

    async def logout(self, token: str) -> None:
        """Invalidate *token* on the server."""
        await send_request(self.client, "POST", "/logout", headers=self._bearer(token))


async def establish_session(
    auth: AuthClient,
    store: SessionStore,
    username: str = "",
    password: str = "",
) -> tuple[str, UserProfile]:
    """Reuse the saved session if its token still works, else log in.

    A fresh login is saved for next time. Raises ``RuntimeError`` when there
    is neither a usable session nor credentials.
    """
    saved = store.load()
    if saved is not None:
        token, profile = saved
        if await auth.verify_token(token):
            logger.info("Restored session for %s", profile.username)
            return token, profile
        logger.info("Saved session for %s expired", profile.username)
        store.clear()

    if not (username and password):
        raise RuntimeError(
            "No saved session found. Set FINANCE_USERNAME and FINANCE_PASSWORD "
            "to sign in to the finance backend."
        )

    response = await auth.login(LoginInput(username=username, password=password))
    store.save(response.token, response.profile)
    logger.info("Signed in as %s", response.profile.username)
    return response.token, response.profile
