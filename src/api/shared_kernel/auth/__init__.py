"""Authentication shared kernel module."""

from shared_kernel.auth.observability import (
    DefaultSessionTokenProbe,
    SessionTokenProbe,
)
from shared_kernel.auth.session_tokens import (
    InvalidSessionError,
    JWTSessionIssuer,
    SessionClaims,
    SessionToken,
)

__all__ = [
    "InvalidSessionError",
    "JWTSessionIssuer",
    "SessionClaims",
    "SessionToken",
    "SessionTokenProbe",
    "DefaultSessionTokenProbe",
]
