"""Session issuance port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.auth.session_tokens import SessionToken


@runtime_checkable
class ISessionIssuer(Protocol):
    """Issues the credential clients present on later requests."""

    def issue(self, user_id: int) -> SessionToken:
        """Issue a session bound to an internal user id."""
        ...
