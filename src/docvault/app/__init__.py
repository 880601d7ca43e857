from .core.env import ENV, Env, IS_PROD, get_env, pick

CURRENT_ENVIRONMENT = ENV

__all__ = [
    "CURRENT_ENVIRONMENT",
    "ENV",
    "Env",
    "IS_PROD",
    "get_env",
    "pick",
]
