import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from docvault.exceptions import ErrorCode

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred. Please try again."


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"{type(exc).__name__} on {request.url.path} (500): {exc}",
                exc_info=True,
                extra={"error_code": str(ErrorCode.SERVER_ERROR)},
            )
            return JSONResponse(
                status_code=500,
                content={"error": GENERIC_MESSAGE, "code": str(ErrorCode.SERVER_ERROR)},
            )
