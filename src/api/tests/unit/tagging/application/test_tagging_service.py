"""Unit tests for TaggingService.

Uses the in-memory tag store so ownership, ordering and the delete
cascade can be observed across use cases.
"""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import OperationalError

from infrastructure.database.exceptions import DatabaseConnectionError
from tagging.application.observability import TaggingServiceProbe
from tagging.application.services import TaggingService
from tagging.ports.exceptions import (
    DuplicateTagNameError,
    SongTagNotFoundError,
    TagNotFoundError,
)
from tests.unit.fakes import (
    InMemorySongTagRepository,
    InMemoryTagRepository,
    InMemoryTagStore,
)

ALICE = 1
BOB = 2
TRACK = "4uLU6hMCjMI75M1A2tKUQC"


@pytest.fixture
def store() -> InMemoryTagStore:
    return InMemoryTagStore()


@pytest.fixture
def mock_probe():
    return create_autospec(TaggingServiceProbe, instance=True)


@pytest.fixture
def service(store, mock_session, mock_probe) -> TaggingService:
    return TaggingService(
        tag_repository=InMemoryTagRepository(store),
        song_tag_repository=InMemorySongTagRepository(store),
        session=mock_session,
        probe=mock_probe,
    )


class TestTags:
    """Tests for tag management."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, service):
        await service.create_tag(ALICE, "workout", "#ff0000")
        await service.create_tag(ALICE, "Chill")
        await service.create_tag(ALICE, "ambient")

        tags = await service.list_tags(ALICE)

        assert [t.name for t in tags] == ["Chill", "ambient", "workout"]
        assert tags[2].color == "#ff0000"

    @pytest.mark.asyncio
    async def test_create_strips_name(self, service):
        tag = await service.create_tag(ALICE, "  chill ")

        assert tag.name == "chill"

    @pytest.mark.asyncio
    async def test_blank_name_rejected_before_transaction(
        self, service, mock_session
    ):
        with pytest.raises(ValueError):
            await service.create_tag(ALICE, "   ")

        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_name_for_same_user(self, service, mock_probe):
        await service.create_tag(ALICE, "chill")

        with pytest.raises(DuplicateTagNameError):
            await service.create_tag(ALICE, "chill")

        mock_probe.operation_failed.assert_not_called()

    @pytest.mark.asyncio
    async def test_same_name_for_different_users(self, service):
        mine = await service.create_tag(ALICE, "chill")
        theirs = await service.create_tag(BOB, "chill")

        assert mine.id != theirs.id
        assert [t.id for t in await service.list_tags(ALICE)] == [mine.id]
        assert [t.id for t in await service.list_tags(BOB)] == [theirs.id]

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, service):
        await service.create_tag(ALICE, "chill")
        await service.create_tag(ALICE, "Chill")

        assert len(await service.list_tags(ALICE)) == 2

    @pytest.mark.asyncio
    async def test_delete_foreign_tag_reports_not_found(self, service):
        tag = await service.create_tag(ALICE, "chill")

        with pytest.raises(TagNotFoundError):
            await service.delete_tag(BOB, tag.id)

        assert [t.id for t in await service.list_tags(ALICE)] == [tag.id]

    @pytest.mark.asyncio
    async def test_owner_can_delete(self, service):
        tag = await service.create_tag(ALICE, "chill")

        await service.delete_tag(ALICE, tag.id)

        assert await service.list_tags(ALICE) == []

    @pytest.mark.asyncio
    async def test_delete_unknown_tag(self, service):
        with pytest.raises(TagNotFoundError):
            await service.delete_tag(ALICE, 404)

    @pytest.mark.asyncio
    async def test_delete_removes_associations(self, service, store):
        tag = await service.create_tag(ALICE, "chill")
        other = await service.create_tag(ALICE, "focus")
        await service.tag_track(ALICE, TRACK, tag.id)
        await service.tag_track(ALICE, TRACK, other.id)
        await service.tag_track(ALICE, "other-track", tag.id)

        await service.delete_tag(ALICE, tag.id)

        assert [t.id for t in await service.list_track_tags(ALICE, TRACK)] == [
            other.id
        ]
        assert await service.list_track_tags(ALICE, "other-track") == []
        assert all(st.tag_id != tag.id for st in store.song_tags.values())


class TestTrackTags:
    """Tests for track associations."""

    @pytest.mark.asyncio
    async def test_tag_and_list(self, service):
        focus = await service.create_tag(ALICE, "focus")
        chill = await service.create_tag(ALICE, "chill")

        await service.tag_track(ALICE, TRACK, focus.id)
        await service.tag_track(ALICE, TRACK, chill.id)

        tags = await service.list_track_tags(ALICE, TRACK)
        assert [t.name for t in tags] == ["chill", "focus"]

    @pytest.mark.asyncio
    async def test_tagging_twice_returns_same_association(self, service, store):
        tag = await service.create_tag(ALICE, "chill")

        first = await service.tag_track(ALICE, TRACK, tag.id)
        second = await service.tag_track(ALICE, TRACK, tag.id)

        assert first.id == second.id
        assert len(store.song_tags) == 1

    @pytest.mark.asyncio
    async def test_cannot_apply_another_users_tag(self, service, store):
        tag = await service.create_tag(ALICE, "chill")

        with pytest.raises(TagNotFoundError):
            await service.tag_track(BOB, TRACK, tag.id)

        assert store.song_tags == {}

    @pytest.mark.asyncio
    async def test_track_listing_is_per_user(self, service):
        mine = await service.create_tag(ALICE, "chill")
        theirs = await service.create_tag(BOB, "chill")
        await service.tag_track(ALICE, TRACK, mine.id)
        await service.tag_track(BOB, TRACK, theirs.id)

        assert [t.id for t in await service.list_track_tags(ALICE, TRACK)] == [
            mine.id
        ]

    @pytest.mark.asyncio
    async def test_untag(self, service):
        tag = await service.create_tag(ALICE, "chill")
        await service.tag_track(ALICE, TRACK, tag.id)

        await service.untag_track(ALICE, TRACK, tag.id)

        assert await service.list_track_tags(ALICE, TRACK) == []

    @pytest.mark.asyncio
    async def test_untag_missing_association(self, service):
        tag = await service.create_tag(ALICE, "chill")

        with pytest.raises(SongTagNotFoundError):
            await service.untag_track(ALICE, TRACK, tag.id)

    @pytest.mark.asyncio
    async def test_untag_other_users_association(self, service):
        tag = await service.create_tag(ALICE, "chill")
        await service.tag_track(ALICE, TRACK, tag.id)

        with pytest.raises(SongTagNotFoundError):
            await service.untag_track(BOB, TRACK, tag.id)

        assert len(await service.list_track_tags(ALICE, TRACK)) == 1

    @pytest.mark.asyncio
    async def test_blank_track_id_rejected(self, service):
        with pytest.raises(ValueError):
            await service.list_track_tags(ALICE, " ")


class TestTransactions:
    """Tests for transaction handling and failure reporting."""

    @pytest.mark.asyncio
    async def test_each_use_case_opens_a_transaction(self, service, mock_session):
        await service.list_tags(ALICE)
        await service.create_tag(ALICE, "chill")

        assert mock_session.begin.call_count == 2

    @pytest.mark.asyncio
    async def test_connection_failure_is_translated_and_reported(
        self, store, mock_session, mock_probe
    ):
        tags = InMemoryTagRepository(store)
        tags.list_for_user = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("down"))
        )
        service = TaggingService(
            tag_repository=tags,
            song_tag_repository=InMemorySongTagRepository(store),
            session=mock_session,
            probe=mock_probe,
        )

        with pytest.raises(DatabaseConnectionError):
            await service.list_tags(ALICE)

        mock_probe.operation_failed.assert_called_once()
        assert mock_probe.operation_failed.call_args.args[:2] == ("list_tags", ALICE)
