from __future__ import annotations

from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from docvault.exceptions import FileTooLargeError


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects bodies whose declared Content-Length exceeds ``max_bytes``.

    This is a coarse guard; bodies under it still reach upload validation.
    Refusals carry the same ``FILE_TOO_LARGE`` shape as validation, with
    ``maxBytes`` set to ``file_limit`` (the per-file ceiling) when given.
    """

    def __init__(self, app, max_bytes: int = 1_000_000, file_limit: Optional[int] = None):
        super().__init__(app)
        self.max_bytes = max_bytes
        self.file_limit = file_limit if file_limit is not None else max_bytes

    async def dispatch(self, request, call_next):
        length = request.headers.get("content-length")
        try:
            size = int(length) if length is not None else None
        except ValueError:
            size = None
        if size is not None and size > self.max_bytes:
            err = FileTooLargeError(
                "File is too large.",
                details={"maxBytes": self.file_limit, "actualBytes": size},
            )
            return JSONResponse(status_code=err.status_code, content=err.to_dict())
        return await call_next(request)
