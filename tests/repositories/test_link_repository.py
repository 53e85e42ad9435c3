"""Tests for the link repository."""

import pytest

from snaplink.models.link import ShortLinkCreate
from snaplink.repositories.base import DuplicateEntityError
from snaplink.repositories.link_repository import LinkRepository
from tests.utils import create_test_link, create_test_user, random_url


@pytest.mark.repository
class TestLinkRepository:
    """Test suite for link repository."""

    @pytest.fixture
    def link_repository(self):
        """Return link repository instance."""
        return LinkRepository()

    @pytest.mark.asyncio
    async def test_create_short_link(self, test_db, link_repository):
        """Test link creation."""
        user = await create_test_user(test_db)
        long_url = random_url()

        link = await link_repository.create_short_link(
            db=test_db,
            data=ShortLinkCreate(
                long_url=long_url,
                short_code="testcreate",
                short_url="http://sn.ap/testcreate",
                topic="news",
                created_by=user.id,
            )
        )

        assert link.id is not None
        assert link.long_url == long_url
        assert link.topic == "news"
        assert link.created_by == user.id

        db_link = await link_repository.get_by_short_code(test_db, "testcreate")
        assert db_link is not None
        assert db_link.id == link.id

    @pytest.mark.asyncio
    async def test_create_from_dict(self, test_db, link_repository):
        link = await link_repository.create_short_link(test_db, {
            "long_url": "https://example.com",
            "short_code": "fromdict",
            "short_url": "http://sn.ap/fromdict",
            "topic": "general",
        })
        assert link.short_code == "fromdict"

    @pytest.mark.asyncio
    async def test_create_duplicate_short_code(self, test_db, link_repository):
        """Test duplicate short code handling."""
        await create_test_link(test_db, short_code="duplicate")

        with pytest.raises(DuplicateEntityError) as excinfo:
            await link_repository.create_short_link(
                db=test_db,
                data=ShortLinkCreate(
                    long_url=random_url(),
                    short_code="duplicate",
                    short_url="http://sn.ap/duplicate-2",
                )
            )

        assert excinfo.value.field_name == "short_code"
        assert excinfo.value.value == "duplicate"

    @pytest.mark.asyncio
    async def test_unique_index_is_final_arbiter(self, test_db, link_repository, monkeypatch):
        """A code inserted after the existence check still surfaces as a duplicate."""
        await create_test_link(test_db, short_code="racing")

        async def never_exists(db, short_code):
            return False

        monkeypatch.setattr(link_repository, "check_short_code_exists", never_exists)

        with pytest.raises(DuplicateEntityError):
            await link_repository.create_short_link(test_db, {
                "long_url": random_url(),
                "short_code": "racing",
                "short_url": "http://sn.ap/racing",
            })

    @pytest.mark.asyncio
    async def test_get_by_short_code_missing(self, test_db, link_repository):
        assert await link_repository.get_by_short_code(test_db, "nonexistent") is None

    @pytest.mark.asyncio
    async def test_check_short_code_exists(self, test_db, link_repository):
        await create_test_link(test_db, short_code="exists")

        assert await link_repository.check_short_code_exists(test_db, "exists") is True
        assert await link_repository.check_short_code_exists(test_db, "missing") is False

    @pytest.mark.asyncio
    async def test_get_by_topic(self, test_db, link_repository):
        first = await create_test_link(test_db, topic="sports")
        await create_test_link(test_db, topic="news")
        second = await create_test_link(test_db, topic="sports")

        links = await link_repository.get_by_topic(test_db, "sports")

        assert [link.id for link in links] == [first.id, second.id]
        assert await link_repository.get_by_topic(test_db, "cooking") == []

    @pytest.mark.asyncio
    async def test_get_by_owner(self, test_db, link_repository):
        alice = await create_test_user(test_db)
        bob = await create_test_user(test_db)
        first = await create_test_link(test_db, user=alice)
        await create_test_link(test_db, user=bob)
        second = await create_test_link(test_db, user=alice)

        links = await link_repository.get_by_owner(test_db, alice.id)

        assert [link.id for link in links] == [first.id, second.id]
