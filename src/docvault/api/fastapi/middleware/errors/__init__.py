from .catchall import CatchAllExceptionMiddleware
from .handlers import register_error_handlers

__all__ = ["CatchAllExceptionMiddleware", "register_error_handlers"]
