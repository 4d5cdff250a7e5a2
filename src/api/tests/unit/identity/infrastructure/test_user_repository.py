"""Unit tests for UserRepository.

Statement shape is checked by compiling against the PostgreSQL dialect;
the behaviour against a live database is covered by integration tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from identity.domain.aggregates import User
from identity.domain.value_objects import Profile, ProfileImage, TokenPair
from identity.infrastructure.models import UserModel
from identity.infrastructure.user_repository import (
    UserRepository,
    build_upsert_statement,
)

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
EXPIRES = NOW + timedelta(hours=1)

TOKENS = TokenPair(
    access_token="access-1",
    token_type="Bearer",
    scope="user-read-email",
    expires_in=3600,
    refresh_token="refresh-1",
)


def _model(**overrides) -> UserModel:
    values = dict(
        id=7,
        external_id="sp_1",
        email="a@b.com",
        display_name=None,
        access_token="access-1",
        refresh_token="refresh-1",
        token_expires_at=EXPIRES,
        profile_image_url=None,
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(overrides)
    return UserModel(**values)


def _compile(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def repository(mock_session, probe) -> UserRepository:
    return UserRepository(session=mock_session, probe=probe)


class TestBuildUpsertStatement:
    """Tests for the authentication upsert statement."""

    def test_conflicts_on_external_id(self):
        stmt = build_upsert_statement(
            Profile(external_id="sp_1", email="a@b.com"), TOKENS, EXPIRES, NOW
        )

        sql = _compile(stmt)

        assert "INSERT INTO users" in sql
        assert "ON CONFLICT (external_id) DO UPDATE" in sql
        assert "RETURNING" in sql

    def test_keeps_stored_refresh_token_when_none_supplied(self):
        stmt = build_upsert_statement(
            Profile(external_id="sp_1"), TOKENS, EXPIRES, NOW
        )

        sql = _compile(stmt)

        assert "refresh_token = coalesce(excluded.refresh_token, users.refresh_token)" in sql

    def test_does_not_overwrite_identity_columns(self):
        stmt = build_upsert_statement(
            Profile(external_id="sp_1"), TOKENS, EXPIRES, NOW
        )

        update_clause = _compile(stmt).split("DO UPDATE SET", 1)[1]

        assert "created_at" not in update_clause.split("RETURNING")[0]
        assert "external_id =" not in update_clause
        assert "updated_at = excluded.updated_at" in update_clause

    def test_missing_email_is_stored_empty(self):
        stmt = build_upsert_statement(
            Profile(external_id="sp_1", email=None), TOKENS, EXPIRES, NOW
        )

        params = stmt.compile(dialect=postgresql.dialect()).params

        assert params["email"] == ""
        assert params["profile_image_url"] is None

    def test_uses_first_profile_image(self):
        profile = Profile(
            external_id="sp_1",
            images=(
                ProfileImage(url="https://img/large", height=640, width=640),
                ProfileImage(url="https://img/small"),
            ),
        )

        params = build_upsert_statement(profile, TOKENS, EXPIRES, NOW).compile(
            dialect=postgresql.dialect()
        ).params

        assert params["profile_image_url"] == "https://img/large"
        assert params["created_at"] == NOW
        assert params["updated_at"] == NOW


class TestGetById:
    """Tests for UserRepository.get_by_id."""

    @pytest.mark.asyncio
    async def test_returns_domain_user(self, repository, mock_session, probe):
        result = MagicMock()
        result.scalar_one_or_none.return_value = _model()
        mock_session.execute.return_value = result

        user = await repository.get_by_id(7)

        assert isinstance(user, User)
        assert user.id == 7
        assert user.external_id == "sp_1"
        assert user.refresh_token == "refresh-1"
        probe.user_retrieved.assert_called_once_with(7)

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, repository, mock_session, probe):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute.return_value = result

        assert await repository.get_by_id(99) is None
        probe.user_not_found.assert_called_once_with(99)


class TestGetByExternalId:
    """Tests for UserRepository.get_by_external_id."""

    @pytest.mark.asyncio
    async def test_returns_domain_user(self, repository, mock_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = _model()
        mock_session.execute.return_value = result

        user = await repository.get_by_external_id("sp_1")

        assert user is not None
        assert user.id == 7

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, repository, mock_session, probe):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute.return_value = result

        assert await repository.get_by_external_id("sp_x") is None
        probe.external_id_not_found.assert_called_once_with("sp_x")


class TestUpsertFromAuthentication:
    """Tests for UserRepository.upsert_from_authentication."""

    @pytest.mark.asyncio
    async def test_executes_single_statement_and_maps_row(
        self, repository, mock_session, probe
    ):
        rows = MagicMock()
        rows.one.return_value = _model()
        mock_session.scalars.return_value = rows

        user = await repository.upsert_from_authentication(
            Profile(external_id="sp_1", email="a@b.com"), TOKENS, EXPIRES
        )

        assert user.id == 7
        mock_session.scalars.assert_awaited_once()
        _, kwargs = mock_session.scalars.call_args
        assert kwargs["execution_options"] == {"populate_existing": True}
        probe.user_upserted.assert_called_once_with(7, "sp_1")

    @pytest.mark.asyncio
    async def test_does_not_open_transaction(self, repository, mock_session):
        rows = MagicMock()
        rows.one.return_value = _model()
        mock_session.scalars.return_value = rows

        await repository.upsert_from_authentication(
            Profile(external_id="sp_1"), TOKENS, EXPIRES
        )

        mock_session.begin.assert_not_called()
        mock_session.commit.assert_not_called()


class TestUpdateTokens:
    """Tests for UserRepository.update_tokens."""

    @pytest.mark.asyncio
    async def test_returns_updated_user(self, repository, mock_session, probe):
        rows = MagicMock()
        rows.one_or_none.return_value = _model(access_token="access-2")
        mock_session.scalars.return_value = rows
        refreshed = TokenPair(
            access_token="access-2",
            token_type="Bearer",
            scope="",
            expires_in=3600,
        )

        user = await repository.update_tokens(7, refreshed, EXPIRES)

        assert user is not None
        assert user.access_token == "access-2"
        probe.tokens_updated.assert_called_once_with(7, False)

    @pytest.mark.asyncio
    async def test_statement_coalesces_refresh_token(self, repository, mock_session):
        rows = MagicMock()
        rows.one_or_none.return_value = _model()
        mock_session.scalars.return_value = rows

        await repository.update_tokens(7, TOKENS, EXPIRES)

        stmt = mock_session.scalars.call_args.args[0]
        sql = _compile(stmt)
        assert "UPDATE users SET" in sql
        assert "coalesce(" in sql
        assert "users.refresh_token" in sql

    @pytest.mark.asyncio
    async def test_returns_none_for_unknown_user(
        self, repository, mock_session, probe
    ):
        rows = MagicMock()
        rows.one_or_none.return_value = None
        mock_session.scalars.return_value = rows

        assert await repository.update_tokens(99, TOKENS, EXPIRES) is None
        probe.user_not_found.assert_called_once_with(99)
        probe.tokens_updated.assert_not_called()
