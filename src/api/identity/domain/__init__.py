"""Domain layer for the identity bounded context."""

from identity.domain.aggregates import User
from identity.domain.value_objects import (
    AuthenticationStep,
    Profile,
    ProfileImage,
    TokenPair,
)

__all__ = [
    "AuthenticationStep",
    "Profile",
    "ProfileImage",
    "TokenPair",
    "User",
]
