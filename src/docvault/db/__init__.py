# Public DB API exports
from .settings import DBSettings, get_db_settings
from .engine import DBEngine
from .base import Base, UUIDMixin, CreatedAtMixin
from .repository import Repository
from .health import db_healthcheck
from .integration import attach_db, get_engine, get_session, SessionDep

__all__ = [
    "DBSettings",
    "get_db_settings",
    "DBEngine",
    "Base",
    "UUIDMixin",
    "CreatedAtMixin",
    "Repository",
    "db_healthcheck",
    "attach_db",
    "get_engine",
    "get_session",
    "SessionDep",
]
