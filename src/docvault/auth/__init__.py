from .client import IdentityClient, Principal, TokenSet
from .session import PrincipalDep, get_current_principal, get_optional_principal
from .settings import IdentitySettings, get_identity_settings

__all__ = [
    "IdentityClient",
    "IdentitySettings",
    "Principal",
    "PrincipalDep",
    "TokenSet",
    "get_current_principal",
    "get_identity_settings",
    "get_optional_principal",
]
