"""Tests for the analytics endpoints."""

import pytest

from tests.utils import (
    CHROME_WINDOWS_UA,
    auth_headers,
    create_test_link,
    create_test_user,
    create_test_visit,
)


@pytest.mark.api
class TestAnalyticsAPI:

    @pytest.mark.asyncio
    async def test_link_analytics_after_redirects(self, client, test_db):
        user = await create_test_user(test_db)
        await create_test_link(test_db, short_code="seen", user=user)
        headers = auth_headers(user)

        for ip in ("1.1.1.1", "2.2.2.2"):
            response = await client.get(
                "/seen", headers={**headers, "X-Forwarded-For": ip, "User-Agent": CHROME_WINDOWS_UA}
            )
            assert response.status_code == 302

        response = await client.get("/api/analytics/seen", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["shortCode"] == "seen"
        assert body["totalClicks"] == 2
        assert body["uniqueUsers"] == 2
        assert len(body["clicksByDate"]) == 1
        assert body["clicksByDate"][0]["clicks"] == 2
        assert body["osType"] == [{"osName": "Windows", "totalClicks": 2, "uniqueUsers": 2}]
        assert body["deviceType"] == [{"deviceName": "Desktop", "totalClicks": 2, "uniqueUsers": 2}]

    @pytest.mark.asyncio
    async def test_link_analytics_unknown_code(self, client, test_db):
        user = await create_test_user(test_db)

        response = await client.get("/api/analytics/missing", headers=auth_headers(user))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_topic_analytics(self, client, test_db):
        user = await create_test_user(test_db)
        link = await create_test_link(test_db, short_code="news1", topic="news", user=user)
        await create_test_visit(test_db, link, ip_address="1.1.1.1")

        response = await client.get("/api/analytics/topic/news", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert body["topic"] == "news"
        assert body["totalClicks"] == 1
        assert body["uniqueUsers"] == 1
        assert body["urls"] == [{"shortUrl": "http://sn.ap/news1", "totalClicks": 1, "uniqueUsers": 1}]

    @pytest.mark.asyncio
    async def test_topic_analytics_unknown_topic(self, client, test_db):
        user = await create_test_user(test_db)

        response = await client.get("/api/analytics/topic/nothing", headers=auth_headers(user))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_overall_analytics(self, client, test_db):
        user = await create_test_user(test_db)
        first = await create_test_link(test_db, user=user)
        await create_test_link(test_db, user=user)
        await create_test_visit(test_db, first, ip_address="1.1.1.1")

        response = await client.get("/api/overall/analytics", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert body["totalUrls"] == 2
        assert body["totalClicks"] == 1
        assert body["uniqueUsers"] == 1
        assert body["osType"][0]["osName"] == "Windows"
        assert body["deviceType"][0]["deviceName"] == "Desktop"

    @pytest.mark.asyncio
    async def test_overall_analytics_without_links(self, client, test_db):
        user = await create_test_user(test_db)

        response = await client.get("/api/overall/analytics", headers=auth_headers(user))

        assert response.status_code == 404
