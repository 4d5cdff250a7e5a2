"""Session token issuance and verification.

Session tokens are JWTs signed with the configured key. They carry the
internal user id in ``sub`` and are the credential every authenticated
route accepts as ``Authorization: Bearer <token>``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Callable

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe


@dataclass(frozen=True)
class SessionToken:
    """An issued session credential."""

    token: str
    user_id: int
    expires_at: datetime


@dataclass(frozen=True)
class SessionClaims:
    """Validated session claims."""

    user_id: int
    expires_at: datetime
    token_id: str


class InvalidSessionError(Exception):
    """Raised when a session token is malformed, expired or badly signed."""

    pass


def _utc_now() -> datetime:
    return datetime.now(UTC)


class JWTSessionIssuer:
    """Issues and verifies signed session tokens.

    HMAC algorithms (HS256, default) sign and verify with the same secret.
    Asymmetric algorithms (RS256, ES256) sign with a PEM private key and
    verify with the matching public key.
    """

    def __init__(
        self,
        signing_key: str,
        verification_key: str,
        probe: SessionTokenProbe,
        algorithm: str = "HS256",
        issuer: str = "moodring",
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the session issuer.

        Args:
            signing_key: Secret (HMAC) or PEM private key used to sign.
            verification_key: Secret (HMAC) or PEM public key used to verify.
            probe: Observability probe for logging events.
            algorithm: JWS algorithm.
            issuer: Value of the ``iss`` claim.
            ttl: Lifetime of issued tokens.
            clock: Source of the current time.
        """
        self._signing_key = signing_key
        self._verification_key = verification_key
        self._probe = probe
        self._algorithm = algorithm
        self._issuer = issuer
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: int) -> SessionToken:
        """Issue a session token bound to an internal user id."""
        issued_at = self._clock()
        expires_at = issued_at + self._ttl
        claims = {
            "sub": str(user_id),
            "iss": self._issuer,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(claims, self._signing_key, algorithm=self._algorithm)
        self._probe.session_issued(user_id=user_id, expires_at=expires_at)
        return SessionToken(token=token, user_id=user_id, expires_at=expires_at)

    def verify(self, token: str) -> SessionClaims:
        """Validate a session token and return its claims.

        Raises:
            InvalidSessionError: If the token is invalid, expired, or
                was not issued by this service.
        """
        try:
            claims = jwt.decode(
                token,
                self._verification_key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": False,
                    "verify_iss": True,
                    "verify_exp": True,
                    "verify_iat": True,
                    "require_sub": True,
                    "require_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.session_rejected(reason="Session expired")
            raise InvalidSessionError("Session has expired") from e
        except JWTClaimsError as e:
            self._probe.session_rejected(reason=f"Claims error: {e}")
            raise InvalidSessionError(f"Invalid session claims: {e}") from e
        except JWTError as e:
            self._probe.session_rejected(reason=f"JWT error: {e}")
            raise InvalidSessionError(f"Invalid session token: {e}") from e

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.isdigit():
            self._probe.session_rejected(reason="Malformed sub claim")
            raise InvalidSessionError("Invalid session subject")

        return SessionClaims(
            user_id=int(subject),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=UTC),
            token_id=str(claims.get("jti", "")),
        )
