"""OAuth2 credentials and token lifecycle for Reddit sessions."""

from .credentials import (
    Credential,
    ScriptCredential,
    StaticToken,
    WebCredential,
    credential_from_settings,
    parse_credential,
)
from .manager import TokenCallback, TokenManager, TokenState
from .token import Token, TokenGrantResponse, parse_scopes

__all__ = [
    # Credentials
    "Credential",
    "ScriptCredential",
    "StaticToken",
    "WebCredential",
    "credential_from_settings",
    "parse_credential",
    # Tokens
    "Token",
    "TokenCallback",
    "TokenGrantResponse",
    "TokenManager",
    "TokenState",
    "parse_scopes",
]
