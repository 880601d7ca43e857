from __future__ import annotations

import os
import warnings
from enum import StrEnum
from functools import cache


class Env(StrEnum):
    LOCAL = "local"
    DEV   = "dev"
    TEST  = "test"
    PROD  = "prod"


# hosting platforms and CI use their own names for the same stages
ALIASES: dict[str, Env] = {
    "development": Env.DEV,
    "testing": Env.TEST,
    "ci": Env.TEST,
    "staging": Env.TEST,
    "production": Env.PROD,
}


@cache
def get_env() -> Env:
    """
    Resolve the deployment environment from APP_ENV, then DOCVAULT_ENV.

    Unset means LOCAL; an unknown value also means LOCAL, with a warning.
    """
    raw = os.getenv("APP_ENV") or os.getenv("DOCVAULT_ENV")
    if not raw:
        return Env.LOCAL
    value = raw.strip().lower()
    if value in {e.value for e in Env}:
        return Env(value)
    if value in ALIASES:
        return ALIASES[value]
    warnings.warn(f"Unrecognized environment '{raw}', defaulting to 'local'.", RuntimeWarning, stacklevel=2)
    return Env.LOCAL


ENV: Env = get_env()
# fixed at import; startup checks and logging defaults key off it
IS_PROD: bool = ENV is Env.PROD


def pick(*, prod, nonprod):
    """Return ``prod`` in production and ``nonprod`` everywhere else."""
    return prod if get_env() is Env.PROD else nonprod
