"""Protocol for tagging service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TaggingServiceProbe(Protocol):
    """Domain probe for tagging application service operations."""

    def operation_failed(self, operation: str, user_id: int, error: str) -> None:
        """Record that a tagging use case failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> TaggingServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTaggingServiceProbe:
    """Default implementation of TaggingServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTaggingServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTaggingServiceProbe(logger=self._logger, context=context)

    def operation_failed(self, operation: str, user_id: int, error: str) -> None:
        """Record that a tagging use case failed unexpectedly."""
        self._logger.error(
            "tagging_operation_failed",
            operation=operation,
            owner_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )
