from __future__ import annotations

import logging
from typing import Annotated, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from docvault.auth.session import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    VERIFIER_KEY,
    access_token_from,
    get_identity,
)
from docvault.exceptions import AppError, ValidationError

ROUTER_PREFIX = "/auth"
ROUTER_TAG = "auth"

logger = logging.getLogger(__name__)

router = APIRouter()


def _safe_next(next_url: Optional[str], default: str) -> str:
    # only same-origin relative paths; anything else could bounce users off-site
    if not next_url or not next_url.startswith("/") or next_url.startswith("//"):
        return default
    return next_url


@router.get("/login/{provider}")
async def login(request: Request, provider: str, next: Annotated[Optional[str], Query()] = None):
    if not provider.isalnum():
        raise ValidationError("Unknown identity provider")
    settings = request.app.state.identity_settings
    callback = str(request.url_for("auth_callback"))
    target = _safe_next(next, settings.default_redirect)
    if target != "/":
        callback = f"{callback}?{urlencode({'next': target})}"
    url, verifier = get_identity(request).authorize_url(provider, callback)
    request.session[VERIFIER_KEY] = verifier
    return RedirectResponse(url, status_code=302)


@router.get("/callback", name="auth_callback")
async def callback(
    request: Request,
    code: Annotated[Optional[str], Query()] = None,
    next: Annotated[Optional[str], Query()] = None,
    error: Annotated[Optional[str], Query()] = None,
):
    settings = request.app.state.identity_settings
    if not code and not error:
        return RedirectResponse("/", status_code=302)

    if code:
        verifier = request.session.pop(VERIFIER_KEY, None)
        if verifier is None:
            logger.warning("Auth callback without a PKCE verifier in session")
        else:
            try:
                tokens = await get_identity(request).exchange_code(code, verifier)
            except AppError as exc:
                # the user lands on the app signed out; nothing else to do here
                logger.error("Failed to exchange auth code: %s", exc.user_message, exc_info=exc.original_error)
            else:
                request.session[ACCESS_TOKEN_KEY] = tokens.access_token
                if tokens.refresh_token:
                    request.session[REFRESH_TOKEN_KEY] = tokens.refresh_token

    target = _safe_next(next, settings.default_redirect)
    if error:
        sep = "&" if "?" in target else "?"
        target = f"{target}{sep}{urlencode({'auth_error': error})}"
    return RedirectResponse(target, status_code=302)


@router.post("/signout")
async def signout(request: Request):
    token = access_token_from(request)
    if token:
        try:
            await get_identity(request).sign_out(token)
        except AppError as exc:
            logger.error("Failed to sign out: %s", exc.user_message)
            return JSONResponse(status_code=400, content={"error": exc.user_message})
    request.session.pop(ACCESS_TOKEN_KEY, None)
    request.session.pop(REFRESH_TOKEN_KEY, None)
    return {"success": True}
