"""Domain probe for session token operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to issuing and verifying sessions.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SessionTokenProbe(Protocol):
    """Domain probe for session token operations."""

    def session_issued(self, user_id: int, expires_at: datetime) -> None:
        """Record that a session token was issued."""
        ...

    def session_rejected(self, reason: str) -> None:
        """Record that a presented session token was rejected."""
        ...

    def with_context(self, context: ObservationContext) -> SessionTokenProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSessionTokenProbe:
    """Default implementation of SessionTokenProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSessionTokenProbe:
        """Create a new probe with observation context bound."""
        return DefaultSessionTokenProbe(logger=self._logger, context=context)

    def session_issued(self, user_id: int, expires_at: datetime) -> None:
        """Record that a session token was issued."""
        self._logger.info(
            "session_issued",
            user_id=user_id,
            expires_at=expires_at.isoformat(),
            **self._get_context_kwargs(),
        )

    def session_rejected(self, reason: str) -> None:
        """Record that a presented session token was rejected."""
        self._logger.warning(
            "session_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )
