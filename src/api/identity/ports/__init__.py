"""Ports (interfaces) for the identity bounded context.

Ports define the contracts for repositories and external services without
specifying implementation details, keeping the application layer
independent of infrastructure.
"""

from identity.ports.exceptions import (
    AuthenticationFailedError,
    DecodeError,
    IdentityProviderError,
    NoRefreshTokenError,
    ProviderError,
    TransportError,
    UserNotFoundError,
)
from identity.ports.provider import IIdentityProviderClient
from identity.ports.repositories import IUserRepository
from identity.ports.session import ISessionIssuer

__all__ = [
    "AuthenticationFailedError",
    "DecodeError",
    "IIdentityProviderClient",
    "ISessionIssuer",
    "IUserRepository",
    "IdentityProviderError",
    "NoRefreshTokenError",
    "ProviderError",
    "TransportError",
    "UserNotFoundError",
]
