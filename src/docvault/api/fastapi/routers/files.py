from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from docvault.exceptions import NotFoundError, UnauthorizedError
from docvault.storage import FileNotFoundError as StoredFileNotFound
from docvault.storage import get_storage

ROUTER_PREFIX = "/api"
ROUTER_TAG = "files"
INCLUDE_ROUTER_IN_SCHEMA = False

router = APIRouter()


@router.get("/files/{key:path}")
async def serve_signed_file(
    key: str,
    request: Request,
    expires: Annotated[str, Query()] = "",
    signature: Annotated[str, Query()] = "",
    download: Annotated[bool, Query()] = False,
):
    """Serve bytes behind a URL signed by the memory or local backend."""
    storage = get_storage(request)
    verify = getattr(storage, "verify_url", None)
    if verify is None:
        raise NotFoundError("File not found")
    if not verify(key, expires, signature, download):
        raise UnauthorizedError("This link is invalid or has expired")

    try:
        data = await storage.get(key)
        meta = await storage.get_metadata(key)
    except StoredFileNotFound:
        raise NotFoundError("File not found") from None

    headers = {"Cache-Control": "private, no-store"}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="{key.rsplit("/", 1)[-1]}"'
    return Response(
        content=data,
        media_type=meta.get("content_type") or "application/octet-stream",
        headers=headers,
    )
