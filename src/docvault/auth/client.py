"""HTTP client for the external identity provider (GoTrue-compatible API).

Login uses the authorization code flow with PKCE: the verifier stays in the
caller's session and the provider only ever sees its S256 challenge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
from authlib.common.security import generate_token
from authlib.oauth2.rfc7636 import create_s256_code_challenge

from docvault.exceptions import AuthError, NetworkError

from .settings import IdentitySettings

logger = logging.getLogger(__name__)


@dataclass
class Principal:
    id: str
    email: Optional[str] = None
    claims: dict[str, Any] = field(default_factory=dict)


@dataclass
class TokenSet:
    access_token: str
    refresh_token: Optional[str]
    principal: Optional[Principal]


def _message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        for k in ("error_description", "msg", "message", "error"):
            if body.get(k):
                return str(body[k])
    return f"HTTP {resp.status_code}"


class IdentityClient:
    def __init__(self, settings: IdentitySettings, http: Optional[httpx.AsyncClient] = None):
        settings.ensure_configured()
        self.settings = settings
        self.base_url = settings.url.rstrip("/")  # type: ignore[union-attr]
        self._api_key = settings.public_key.get_secret_value()  # type: ignore[union-attr]
        self._http = http or httpx.AsyncClient(timeout=settings.timeout_seconds)

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {"apikey": self._api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def authorize_url(self, provider: str, redirect_to: str) -> tuple[str, str]:
        """Return ``(url, code_verifier)`` for starting a login."""
        verifier = generate_token(64)
        query = urlencode(
            {
                "provider": provider,
                "redirect_to": redirect_to,
                "code_challenge": create_s256_code_challenge(verifier),
                "code_challenge_method": "s256",
            }
        )
        return f"{self.base_url}/auth/v1/authorize?{query}", verifier

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkError(
                "Could not reach the identity provider. Please try again.", original_error=exc
            ) from exc

    async def exchange_code(self, code: str, code_verifier: str) -> TokenSet:
        resp = await self._send(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "pkce"},
            json={"auth_code": code, "code_verifier": code_verifier},
            headers=self._headers(),
        )
        if resp.status_code >= 400:
            raise AuthError(_message(resp), details={"status": resp.status_code})
        data = resp.json()
        user = data.get("user")
        return TokenSet(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            principal=self._principal(user) if user else None,
        )

    async def get_user(self, access_token: str) -> Optional[Principal]:
        """Resolve a token to a principal; None if the provider rejects it."""
        resp = await self._send("GET", "/auth/v1/user", headers=self._headers(access_token))
        if resp.status_code in (401, 403):
            return None
        if resp.status_code >= 400:
            raise NetworkError(
                "Identity provider returned an error. Please try again.",
                details={"status": resp.status_code},
            )
        return self._principal(resp.json())

    async def sign_out(self, access_token: str) -> None:
        resp = await self._send("POST", "/auth/v1/logout", headers=self._headers(access_token))
        # an already-expired session counts as signed out
        if resp.status_code >= 400 and resp.status_code not in (401, 404):
            raise AuthError(_message(resp), details={"status": resp.status_code})

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _principal(user: dict[str, Any]) -> Principal:
        return Principal(id=str(user["id"]), email=user.get("email"), claims=user)
