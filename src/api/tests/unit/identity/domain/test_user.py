"""Unit tests for the identity domain."""

from datetime import UTC, datetime, timedelta

from identity.domain.aggregates import User
from identity.domain.value_objects import Profile, ProfileImage, TokenPair

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


def _user(**overrides) -> User:
    fields = dict(
        id=1,
        external_id="sp_1",
        email="a@b.com",
        display_name="A",
        access_token="access",
        refresh_token="refresh",
        token_expires_at=NOW + timedelta(hours=1),
        profile_image_url=None,
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(overrides)
    return User(**fields)


class TestUser:
    """Tests for the User aggregate."""

    def test_equality_is_by_id(self):
        assert _user(email="x@y.z") == _user(email="a@b.com")
        assert _user(id=1) != _user(id=2)

    def test_hashable_by_id(self):
        assert len({_user(), _user(display_name="other")}) == 1

    def test_has_refresh_token(self):
        assert _user().has_refresh_token
        assert not _user(refresh_token=None).has_refresh_token
        assert not _user(refresh_token="").has_refresh_token


class TestTokenPair:
    """Tests for TokenPair."""

    def test_expires_at_is_relative_to_now(self):
        tokens = TokenPair(
            access_token="a", token_type="Bearer", scope="", expires_in=3600
        )
        assert tokens.expires_at(NOW) == NOW + timedelta(hours=1)
        assert tokens.refresh_token is None


class TestProfile:
    """Tests for Profile."""

    def test_first_image_is_canonical(self):
        profile = Profile(
            external_id="sp_1",
            images=(
                ProfileImage(url="https://i.scdn.co/large.jpg", height=640, width=640),
                ProfileImage(url="https://i.scdn.co/small.jpg", height=64, width=64),
            ),
        )
        assert profile.canonical_image_url == "https://i.scdn.co/large.jpg"

    def test_no_images_means_no_canonical_image(self):
        assert Profile(external_id="sp_1").canonical_image_url is None
