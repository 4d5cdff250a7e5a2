"""Identity provider port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.value_objects import Profile, TokenPair


@runtime_checkable
class IIdentityProviderClient(Protocol):
    """Client for the external OAuth identity provider.

    All methods raise a subclass of IdentityProviderError on failure:
    TransportError when the provider is unreachable, ProviderError on a
    non-success status, DecodeError on a malformed response.
    """

    async def exchange_code(self, code: str, code_verifier: str) -> TokenPair:
        """Exchange a PKCE authorization code for provider tokens."""
        ...

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """Obtain a fresh access token using a refresh token."""
        ...

    async def fetch_profile(self, access_token: str) -> Profile:
        """Fetch the profile of the identity the access token belongs to."""
        ...
