"""Domain-Oriented Observability for the identity application layer."""

from identity.application.observability.authentication_service_probe import (
    AuthenticationServiceProbe,
    DefaultAuthenticationServiceProbe,
)

__all__ = [
    "AuthenticationServiceProbe",
    "DefaultAuthenticationServiceProbe",
]
