"""Spotify implementation of IIdentityProviderClient.

Talks to the Spotify Accounts service (PKCE code exchange and refresh)
and the Web API (current user profile) over a shared httpx client.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from identity.domain.value_objects import Profile, ProfileImage, TokenPair
from identity.infrastructure.observability import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from identity.ports.exceptions import DecodeError, ProviderError, TransportError
from identity.ports.provider import IIdentityProviderClient

_PayloadT = TypeVar("_PayloadT", bound=BaseModel)


class _TokenPayload(BaseModel):
    """Token endpoint response body."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str
    scope: str = ""
    expires_in: int
    refresh_token: str | None = None


class _ImagePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str
    height: int | None = None
    width: int | None = None


class _ProfilePayload(BaseModel):
    """``GET /me`` response body."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    display_name: str | None = None
    images: list[_ImagePayload] = Field(default_factory=list)


class SpotifyIdentityClient(IIdentityProviderClient):
    """Identity provider client for Spotify.

    The client owns an ``httpx.AsyncClient`` unless one is injected; call
    :meth:`aclose` on shutdown to release its connections.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        token_url: str = "https://accounts.spotify.com/api/token",
        api_base_url: str = "https://api.spotify.com/v1",
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        probe: IdentityProviderProbe | None = None,
    ):
        """Initialize the client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_uri: Redirect URI the authorization code was issued for
            token_url: Accounts service token endpoint
            api_base_url: Web API base URL
            timeout_seconds: Transport timeout applied to every request
            http_client: Optional pre-built httpx client (tests)
            probe: Optional domain probe for observability
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._token_url = token_url
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_seconds)
        self._http = http_client or httpx.AsyncClient(timeout=self._timeout)
        self._probe = probe or DefaultIdentityProviderProbe()

    async def exchange_code(self, code: str, code_verifier: str) -> TokenPair:
        """Exchange a PKCE authorization code for provider tokens."""
        body = await self._post_token_form(
            "exchange_code",
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
                "client_id": self._client_id,
                "code_verifier": code_verifier,
            },
        )
        return self._decode_tokens("exchange_code", body)

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """Obtain a fresh access token using a refresh token.

        The returned pair carries a refresh token only when the provider
        rotated it.
        """
        body = await self._post_token_form(
            "refresh_token",
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": self._client_id,
            },
        )
        return self._decode_tokens("refresh_token", body)

    async def fetch_profile(self, access_token: str) -> Profile:
        """Fetch the profile of the identity the access token belongs to."""
        body = await self._send(
            "fetch_profile",
            "GET",
            f"{self._api_base_url}/me",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        payload = self._parse("fetch_profile", body, _ProfilePayload)
        return Profile(
            external_id=payload.id,
            email=payload.email,
            display_name=payload.display_name,
            images=tuple(
                ProfileImage(url=image.url, height=image.height, width=image.width)
                for image in payload.images
            ),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def _post_token_form(self, operation: str, form: dict[str, str]) -> str:
        return await self._send(
            operation,
            "POST",
            self._token_url,
            data=form,
            auth=httpx.BasicAuth(self._client_id, self._client_secret),
        )

    async def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> str:
        try:
            response = await self._http.request(
                method, url, timeout=self._timeout, **kwargs
            )
        except httpx.HTTPError as e:
            self._probe.transport_failed(operation, str(e) or type(e).__name__)
            raise TransportError(
                f"Identity provider unreachable during {operation}: {e}"
            ) from e

        if not response.is_success:
            self._probe.request_rejected(operation, response.status_code)
            raise ProviderError(response.status_code, response.text)

        self._probe.request_succeeded(operation, response.status_code)
        return response.text

    def _decode_tokens(self, operation: str, body: str) -> TokenPair:
        payload = self._parse(operation, body, _TokenPayload)
        return TokenPair(
            access_token=payload.access_token,
            token_type=payload.token_type,
            scope=payload.scope,
            expires_in=payload.expires_in,
            refresh_token=payload.refresh_token or None,
        )

    def _parse(self, operation: str, body: str, model: type[_PayloadT]) -> _PayloadT:
        # Invalid JSON also surfaces as ValidationError.
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            self._probe.response_malformed(operation, str(e))
            raise DecodeError(
                f"Unexpected identity provider response during {operation}"
            ) from e
