"""Domain probe for identity provider calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IdentityProviderProbe(Protocol):
    """Domain probe for outbound identity provider requests."""

    def request_succeeded(self, operation: str, status: int) -> None:
        """Record a successful provider call."""
        ...

    def request_rejected(self, operation: str, status: int) -> None:
        """Record a non-success response from the provider."""
        ...

    def transport_failed(self, operation: str, error: str) -> None:
        """Record that the provider could not be reached."""
        ...

    def response_malformed(self, operation: str, error: str) -> None:
        """Record that a provider response could not be decoded."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityProviderProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIdentityProviderProbe:
    """Default implementation of IdentityProviderProbe using structlog.

    Response bodies and tokens are never logged.
    """

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
    ) -> DefaultIdentityProviderProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentityProviderProbe(logger=self._logger, context=context)

    def request_succeeded(self, operation: str, status: int) -> None:
        self._logger.debug(
            "identity_provider_request_succeeded",
            operation=operation,
            status=status,
            **self._get_context_kwargs(),
        )

    def request_rejected(self, operation: str, status: int) -> None:
        self._logger.warning(
            "identity_provider_request_rejected",
            operation=operation,
            status=status,
            **self._get_context_kwargs(),
        )

    def transport_failed(self, operation: str, error: str) -> None:
        self._logger.error(
            "identity_provider_transport_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def response_malformed(self, operation: str, error: str) -> None:
        self._logger.error(
            "identity_provider_response_malformed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
