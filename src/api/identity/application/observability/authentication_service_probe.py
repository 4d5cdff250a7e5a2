"""Protocol for authentication service observability.

Defines the interface for domain probes that capture application-level
domain events for the authenticate and refresh workflows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from identity.domain.value_objects import AuthenticationStep
    from shared_kernel.observability_context import ObservationContext


class AuthenticationServiceProbe(Protocol):
    """Domain probe for authentication service operations."""

    def user_authenticated(self, user_id: int, external_id: str) -> None:
        """Record that an external identity authenticated and got a session."""
        ...

    def session_refreshed(self, user_id: int) -> None:
        """Record that provider tokens were refreshed and a new session issued."""
        ...

    def refresh_token_missing(self, user_id: int) -> None:
        """Record that a refresh was requested for a user with no refresh token."""
        ...

    def step_failed(self, step: AuthenticationStep, error: str) -> None:
        """Record that a workflow step failed."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationServiceProbe:
    """Default implementation of AuthenticationServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultAuthenticationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationServiceProbe(logger=self._logger, context=context)

    def user_authenticated(self, user_id: int, external_id: str) -> None:
        """Record that an external identity authenticated and got a session."""
        self._logger.info(
            "user_authenticated",
            user_id=user_id,
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def session_refreshed(self, user_id: int) -> None:
        """Record that provider tokens were refreshed and a new session issued."""
        self._logger.info(
            "session_refreshed",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def refresh_token_missing(self, user_id: int) -> None:
        """Record that a refresh was requested for a user with no refresh token."""
        self._logger.warning(
            "refresh_token_missing",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def step_failed(self, step: AuthenticationStep, error: str) -> None:
        """Record that a workflow step failed."""
        self._logger.error(
            "authentication_step_failed",
            step=step.value,
            error=error,
            **self._get_context_kwargs(),
        )
