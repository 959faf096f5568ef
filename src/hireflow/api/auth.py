"""
Bearer-token authentication.

Tokens are verified against an external identity provider (Supabase Auth
by default) behind the ``TokenVerifier`` interface, so the provider can be
swapped without touching the routes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from fastapi import Request
from pydantic import BaseModel, Field

from hireflow.errors import AuthError, AuthServiceError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthenticatedUser(BaseModel):
    """Identity attached to an authorized request."""

    id: str
    email: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict, description="Provider payload as returned")


class TokenVerifier(ABC):
    """Abstract bearer-token verifier."""

    @abstractmethod
    async def verify(self, token: str) -> AuthenticatedUser:
        """
        Resolve a token to a user.

        Raises:
            AuthError: If the token is invalid or expired.
            AuthServiceError: If the provider could not be consulted.
        """
        ...

    async def close(self) -> None:
        """Release resources."""
        pass


class SupabaseTokenVerifier(TokenVerifier):
    """Verifies tokens with Supabase Auth's ``GET /auth/v1/user``."""

    def __init__(
        self,
        supabase_url: str,
        service_role_key: str,
        timeout: int = 10,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the verifier.

        Args:
            supabase_url: Project URL, e.g. https://xyz.supabase.co.
            service_role_key: Key sent as the ``apikey`` header.
            timeout: Request timeout in seconds.
            http_client: Pre-built client, mainly for tests.
        """
        self._supabase_url = supabase_url.rstrip("/")
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._client = http_client

        if not self.configured:
            logger.warning("Supabase credentials not configured. Protected routes will not work.")

    @property
    def configured(self) -> bool:
        return bool(self._supabase_url and self._service_role_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def verify(self, token: str) -> AuthenticatedUser:
        if not self.configured:
            raise AuthServiceError("Supabase URL or service role key is not set")

        client = await self._get_client()
        try:
            response = await client.get(
                f"{self._supabase_url}/auth/v1/user",
                headers={
                    "apikey": self._service_role_key,
                    "Authorization": f"Bearer {token}",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Auth provider request failed: {e}")
            raise AuthServiceError(f"Auth provider unreachable: {e}") from e

        if 400 <= response.status_code < 500:
            logger.info(f"Token verification failed: HTTP {response.status_code}")
            raise AuthError("Invalid or expired token")
        if response.status_code != 200:
            raise AuthServiceError(f"Auth provider returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthServiceError(f"Auth provider returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not payload.get("id"):
            raise AuthError("Invalid or expired token")

        return AuthenticatedUser(id=str(payload["id"]), email=payload.get("email"), raw=payload)


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the token out of an Authorization header.

    Raises:
        AuthError: If the header is missing or not a bearer credential.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError("Missing or invalid authorization header")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError("Missing or invalid authorization header")
    return token


async def require_auth(request: Request) -> AuthenticatedUser:
    """
    FastAPI dependency guarding protected routes.

    Runs before the route handler and stores the user on ``request.state.user``.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    verifier: TokenVerifier = request.app.state.container.token_verifier
    user = await verifier.verify(token)
    request.state.user = user
    return user
