"""Application-level value objects for the identity context."""

from __future__ import annotations

from dataclasses import dataclass

from identity.domain.aggregates import User
from shared_kernel.auth.session_tokens import SessionToken


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of a successful authenticate or refresh workflow."""

    user: User
    session: SessionToken
