from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Request

from docvault.exceptions import UnauthorizedError

from .client import Principal

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
VERIFIER_KEY = "pkce_verifier"


def get_identity(request: Request):
    return request.app.state.identity  # type: ignore[attr-defined]


def access_token_from(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    if "session" in request.scope:
        return request.session.get(ACCESS_TOKEN_KEY)
    return None


async def get_optional_principal(request: Request) -> Optional[Principal]:
    token = access_token_from(request)
    if not token:
        return None
    return await get_identity(request).get_user(token)


async def get_current_principal(
    principal: Annotated[Optional[Principal], Depends(get_optional_principal)],
) -> Principal:
    if principal is None:
        raise UnauthorizedError("Unauthorized")
    return principal


PrincipalDep = Annotated[Principal, Depends(get_current_principal)]
