"""Unit tests for authentication HTTP routes."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from identity.application.services import AuthenticationService, UserService
from identity.application.value_objects import AuthenticationResult
from identity.domain.aggregates import User
from identity.domain.value_objects import AuthenticationStep
from identity.ports.exceptions import (
    AuthenticationFailedError,
    DecodeError,
    NoRefreshTokenError,
    ProviderError,
    TransportError,
    UserNotFoundError,
)
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.settings import ConfigurationError
from shared_kernel.auth import SessionToken
from tests.unit.fakes import FIXED_NOW, InMemoryUserRepository

VERIFIER = "v" * 43


@pytest.fixture
def sample_user() -> User:
    return User(
        id=1,
        external_id="sp_1",
        email="a@b.com",
        display_name=None,
        access_token="access-1",
        refresh_token="refresh-1",
        token_expires_at=FIXED_NOW + timedelta(hours=1),
        profile_image_url=None,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


@pytest.fixture
def sample_result(sample_user: User) -> AuthenticationResult:
    return AuthenticationResult(
        user=sample_user,
        session=SessionToken(
            token="session-token",
            user_id=sample_user.id,
            expires_at=FIXED_NOW + timedelta(hours=1),
        ),
    )


@pytest.fixture
def mock_service() -> AsyncMock:
    """Mock AuthenticationService for testing."""
    return AsyncMock(spec=AuthenticationService)


@pytest.fixture
def mock_user_service() -> AsyncMock:
    """Mock UserService for testing."""
    return AsyncMock(spec=UserService)


@pytest.fixture
def test_client(mock_service: AsyncMock, mock_user_service: AsyncMock) -> TestClient:
    """Create TestClient with the services and caller overridden."""
    from identity.dependencies import get_authentication_service, get_user_service
    from identity.presentation.routes import router
    from infrastructure.authentication_dependencies import get_current_user_id

    app = FastAPI()
    app.dependency_overrides[get_authentication_service] = lambda: mock_service
    app.dependency_overrides[get_user_service] = lambda: mock_user_service
    app.dependency_overrides[get_current_user_id] = lambda: 1
    app.include_router(router)

    return TestClient(app)


def _failure(step: AuthenticationStep, cause: Exception) -> AuthenticationFailedError:
    return AuthenticationFailedError(step, cause)


class TestAuthenticateRoute:
    """Tests for POST /auth/spotify."""

    def test_returns_user_and_session(
        self, test_client, mock_service, sample_result
    ):
        mock_service.authenticate.return_value = sample_result

        response = test_client.post(
            "/auth/spotify", json={"code": "abc", "code_verifier": VERIFIER}
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["access_token"] == "session-token"
        assert body["token_type"] == "bearer"
        assert body["user"]["id"] == 1
        assert body["user"]["external_id"] == "sp_1"
        assert body["user"]["email"] == "a@b.com"
        assert body["user"]["profile_image_url"] is None
        mock_service.authenticate.assert_awaited_once_with("abc", VERIFIER)

    def test_never_exposes_provider_tokens(
        self, test_client, mock_service, sample_result
    ):
        mock_service.authenticate.return_value = sample_result

        response = test_client.post(
            "/auth/spotify", json={"code": "abc", "code_verifier": VERIFIER}
        )

        assert "access-1" not in response.text
        assert "refresh-1" not in response.text

    @pytest.mark.parametrize(
        "payload",
        [
            {"code": "", "code_verifier": VERIFIER},
            {"code": "abc", "code_verifier": "short"},
            {"code": "abc", "code_verifier": "v" * 129},
            {"code_verifier": VERIFIER},
        ],
    )
    def test_rejects_invalid_body(self, test_client, mock_service, payload):
        response = test_client.post("/auth/spotify", json=payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        mock_service.authenticate.assert_not_awaited()

    def test_rejected_code_returns_401(self, test_client, mock_service):
        mock_service.authenticate.side_effect = _failure(
            AuthenticationStep.EXCHANGE_CODE, ProviderError(400, "invalid_grant")
        )

        response = test_client.post(
            "/auth/spotify", json={"code": "bad", "code_verifier": VERIFIER}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize(
        "step, cause",
        [
            (AuthenticationStep.EXCHANGE_CODE, ProviderError(503, "down")),
            (AuthenticationStep.EXCHANGE_CODE, TransportError("timeout")),
            (AuthenticationStep.FETCH_PROFILE, ProviderError(401, "expired")),
            (AuthenticationStep.FETCH_PROFILE, DecodeError("bad body")),
        ],
    )
    def test_provider_failures_return_502(self, test_client, mock_service, step, cause):
        mock_service.authenticate.side_effect = _failure(step, cause)

        response = test_client.post(
            "/auth/spotify", json={"code": "abc", "code_verifier": VERIFIER}
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert step.value in response.json()["detail"]

    def test_database_outage_returns_503(self, test_client, mock_service):
        mock_service.authenticate.side_effect = _failure(
            AuthenticationStep.RESOLVE_IDENTITY, DatabaseConnectionError("down")
        )

        response = test_client.post(
            "/auth/spotify", json={"code": "abc", "code_verifier": VERIFIER}
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_unexpected_failure_returns_500(self, test_client, mock_service):
        mock_service.authenticate.side_effect = _failure(
            AuthenticationStep.ISSUE_SESSION, ValueError("bad key")
        )

        response = test_client.post(
            "/auth/spotify", json={"code": "abc", "code_verifier": VERIFIER}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "bad key" not in response.text


class TestRefreshRoute:
    """Tests for POST /auth/refresh."""

    def test_returns_new_session(self, test_client, mock_service, sample_result):
        mock_service.refresh_session.return_value = sample_result

        response = test_client.post("/auth/refresh")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["access_token"] == "session-token"
        mock_service.refresh_session.assert_awaited_once_with(1)

    def test_missing_refresh_token_returns_409(self, test_client, mock_service):
        mock_service.refresh_session.side_effect = NoRefreshTokenError(1)

        response = test_client.post("/auth/refresh")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_user_returns_404(self, test_client, mock_service):
        mock_service.refresh_session.side_effect = _failure(
            AuthenticationStep.LOAD_USER, UserNotFoundError(1)
        )

        response = test_client.post("/auth/refresh")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_revoked_refresh_token_returns_401(self, test_client, mock_service):
        mock_service.refresh_session.side_effect = _failure(
            AuthenticationStep.REFRESH_TOKEN, ProviderError(400, "invalid_grant")
        )

        response = test_client.post("/auth/refresh")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_requires_session(self, mock_service):
        from identity.dependencies import get_authentication_service
        from identity.presentation.routes import router
        from infrastructure.authentication_dependencies import get_session_issuer
        from shared_kernel.auth import JWTSessionIssuer

        issuer = JWTSessionIssuer(
            signing_key="s" * 32, verification_key="s" * 32, probe=MagicMock()
        )
        app = FastAPI()
        app.dependency_overrides[get_authentication_service] = lambda: mock_service
        app.dependency_overrides[get_session_issuer] = lambda: issuer
        app.include_router(router)

        response = TestClient(app).post("/auth/refresh")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"
        mock_service.refresh_session.assert_not_awaited()


class TestMeRoute:
    """Tests for GET /auth/me."""

    def test_returns_current_user(self, test_client, mock_user_service, sample_user):
        mock_user_service.get_user.return_value = sample_user

        response = test_client.get("/auth/me")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["external_id"] == "sp_1"
        assert "access_token" not in response.json()
        mock_user_service.get_user.assert_awaited_once_with(1)

    def test_unknown_user_returns_404(self, test_client, mock_user_service):
        mock_user_service.get_user.side_effect = UserNotFoundError(1)

        response = test_client.get("/auth/me")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_database_outage_returns_503(self, test_client, mock_user_service):
        mock_user_service.get_user.side_effect = DatabaseConnectionError("down")

        response = test_client.get("/auth/me")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_works_without_provider_credentials(self, mock_session, sample_user):
        """Looking up the caller never builds the Spotify client."""
        from identity.dependencies import get_spotify_client, get_user_repository
        from identity.presentation.routes import router
        from infrastructure.authentication_dependencies import get_current_user_id
        from infrastructure.database.dependencies import get_write_session

        def _unconfigured():
            raise ConfigurationError("SPOTIFY_CLIENT_ID is not set")

        users = InMemoryUserRepository()
        users.users[sample_user.id] = sample_user

        app = FastAPI()
        app.dependency_overrides[get_spotify_client] = _unconfigured
        app.dependency_overrides[get_write_session] = lambda: mock_session
        app.dependency_overrides[get_user_repository] = lambda: users
        app.dependency_overrides[get_current_user_id] = lambda: sample_user.id
        app.include_router(router)

        response = TestClient(app).get("/auth/me")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == sample_user.id
