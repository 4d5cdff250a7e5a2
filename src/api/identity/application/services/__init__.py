"""Application services for the identity bounded context."""

from identity.application.services.authentication_service import (
    AuthenticationService,
)
from identity.application.services.user_service import UserService

__all__ = ["AuthenticationService", "UserService"]
