"""Domain-Oriented Observability for identity infrastructure."""

from identity.infrastructure.observability.provider_probe import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from identity.infrastructure.observability.repository_probe import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultIdentityProviderProbe",
    "DefaultUserRepositoryProbe",
    "IdentityProviderProbe",
    "UserRepositoryProbe",
]
