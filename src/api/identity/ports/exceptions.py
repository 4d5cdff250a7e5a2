"""Domain exceptions for the identity bounded context.

Provider exceptions describe how a call to the external identity provider
failed. Workflow exceptions are raised by the authentication service and
carry the step that produced the failure.
"""

from __future__ import annotations

from identity.domain.value_objects import AuthenticationStep


class IdentityProviderError(Exception):
    """Base class for failures talking to the identity provider."""

    pass


class TransportError(IdentityProviderError):
    """Raised when the provider could not be reached or timed out."""

    pass


class ProviderError(IdentityProviderError):
    """Raised when the provider answered with a non-success status.

    Carries the status code and the response body verbatim so callers can
    distinguish rejected credentials (4xx) from provider outages (5xx).
    """

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Identity provider returned {status}: {body}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500


class DecodeError(IdentityProviderError):
    """Raised when a provider response did not have the expected shape."""

    pass


class UserNotFoundError(Exception):
    """Raised when a user id does not resolve to a stored user."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class AuthenticationFailedError(Exception):
    """Raised when a step of the authenticate or refresh workflow fails.

    The original exception is available as ``cause`` (and ``__cause__``).
    """

    def __init__(
        self,
        step: AuthenticationStep,
        cause: BaseException | None = None,
        message: str | None = None,
    ):
        self.step = step
        self.cause = cause
        if message is None:
            detail = f": {cause}" if cause is not None else ""
            message = f"Authentication failed at {step.value}{detail}"
        super().__init__(message)


class NoRefreshTokenError(AuthenticationFailedError):
    """Raised when a refresh is requested for a user with no stored refresh token.

    The client must run the full authorization flow again.
    """

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(
            AuthenticationStep.REQUIRE_REFRESH_TOKEN,
            message=f"User {user_id} has no refresh token",
        )
