"""
Integration tests for the content collection routes.

Covers:
- CRUD and pagination on every collection
- Newsletter trigger on create and on the first publish of timestamp kinds
- Resource flag transitions
- Resource file validation
- Mutations succeeding when the state lookup or the fan-out fails
"""

from functools import partial

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain import ContentKind
from infrastructure.database.models import UploadedFile
from services.newsletter import NewsletterDispatcher, send_newsletter

API = "/api/v1"
PUBLISHED_AT = "2025-05-20T08:00:00Z"


async def _create(client: AsyncClient, path: str, payload: dict) -> dict:
    response = await client.post(f"{API}{path}", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def _uploaded(db_session: AsyncSession, mime: str = "application/pdf", size: int = 128) -> UploadedFile:
    uploaded = UploadedFile(name="doc", hash=f"h{mime.replace('/', '')}{size}", ext=".pdf", mime=mime, size_bytes=size)
    db_session.add(uploaded)
    await db_session.commit()
    await db_session.refresh(uploaded)
    return uploaded


# ============================================================================
# CRUD
# ============================================================================


class TestContentCrud:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/blogs", "/webinars", "/events", "/jobs", "/resources"])
    async def test_create_get_update_delete(self, async_client: AsyncClient, path):
        created = await _create(async_client, path, {"title": "First"})

        fetched = await async_client.get(f"{API}{path}/{created['id']}")
        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.json()["title"] == "First"

        updated = await async_client.put(f"{API}{path}/{created['id']}", json={"title": "Second"})
        assert updated.status_code == status.HTTP_200_OK
        assert updated.json()["title"] == "Second"

        deleted = await async_client.delete(f"{API}{path}/{created['id']}")
        assert deleted.status_code == status.HTTP_204_NO_CONTENT

        missing = await async_client.get(f"{API}{path}/{created['id']}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_id_is_404(self, async_client: AsyncClient):
        assert (await async_client.get(f"{API}/blogs/nope")).status_code == status.HTTP_404_NOT_FOUND
        assert (await async_client.put(f"{API}/blogs/nope", json={"title": "x"})).status_code == 404

    @pytest.mark.asyncio
    async def test_null_title_is_ignored_on_update(self, async_client: AsyncClient):
        created = await _create(async_client, "/events", {"title": "Summit"})

        response = await async_client.put(f"{API}/events/{created['id']}", json={"title": None, "location": "Chennai"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Summit"
        assert response.json()["location"] == "Chennai"

    @pytest.mark.asyncio
    async def test_list_pagination_and_published_filter(self, async_client: AsyncClient):
        for i in range(3):
            await _create(async_client, "/blogs", {"title": f"Draft {i}"})
        await _create(async_client, "/blogs", {"title": "Live", "published_at": PUBLISHED_AT})

        page = await async_client.get(f"{API}/blogs", params={"page": 1, "page_size": 3})
        body = page.json()
        assert body["total"] == 4
        assert body["pages"] == 2
        assert len(body["items"]) == 3

        live = await async_client.get(f"{API}/blogs", params={"published_only": True})
        assert [item["title"] for item in live.json()["items"]] == ["Live"]

    @pytest.mark.asyncio
    async def test_empty_title_rejected(self, async_client: AsyncClient):
        response = await async_client.post(f"{API}/webinars", json={"title": ""})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# ============================================================================
# Newsletter triggers
# ============================================================================


class TestPublishTriggers:
    @pytest.mark.asyncio
    async def test_create_published_triggers_once(self, async_client: AsyncClient, fanout, task_queue):
        created = await _create(
            async_client, "/webinars",
            {"title": "Live demo", "short_description": "Join us", "published_at": PUBLISHED_AT},
        )
        await task_queue.drain()

        assert len(fanout.calls) == 1
        kind, item = fanout.calls[0]
        assert kind is ContentKind.WEBINAR
        assert item.id == created["id"]
        assert item.short_description == "Join us"

    @pytest.mark.asyncio
    async def test_create_draft_does_not_trigger(self, async_client: AsyncClient, fanout, task_queue):
        await _create(async_client, "/jobs", {"title": "SRE"})
        await task_queue.drain()
        assert fanout.calls == []

    @pytest.mark.asyncio
    async def test_publishing_draft_triggers_only_first_time(
        self, async_client: AsyncClient, fanout, task_queue
    ):
        created = await _create(async_client, "/blogs", {"title": "Roadmap"})
        url = f"{API}/blogs/{created['id']}"

        await async_client.put(url, json={"published_at": PUBLISHED_AT})
        await async_client.put(url, json={"published_at": PUBLISHED_AT})
        await async_client.put(url, json={"excerpt": "Updated excerpt"})
        await task_queue.drain()

        assert len(fanout.calls) == 1
        assert fanout.calls[0][0] is ContentKind.BLOG

    @pytest.mark.asyncio
    async def test_careers_kind_for_jobs(self, async_client: AsyncClient, fanout, task_queue):
        await _create(async_client, "/jobs", {"title": "SRE", "published_at": PUBLISHED_AT})
        await task_queue.drain()
        assert fanout.calls[0][0] is ContentKind.CAREERS

    @pytest.mark.asyncio
    async def test_resource_publish_transitions(self, async_client: AsyncClient, fanout, task_queue):
        created = await _create(async_client, "/resources", {"title": "Datasheet"})
        url = f"{API}/resources/{created['id']}"

        for value in (True, True, False, True):
            response = await async_client.put(url, json={"published": value})
            assert response.json()["published"] is value
        await task_queue.drain()

        assert len(fanout.calls) == 2
        assert all(kind is ContentKind.RESOURCE for kind, _ in fanout.calls)

    @pytest.mark.asyncio
    async def test_update_proceeds_when_state_lookup_fails(
        self, async_client: AsyncClient, db_session: AsyncSession, fanout, task_queue, monkeypatch
    ):
        created = await _create(async_client, "/blogs", {"title": "Roadmap"})
        real_execute = db_session.execute

        async def failing_execute(*args, **kwargs):
            monkeypatch.setattr(db_session, "execute", real_execute)
            await real_execute(text("SELECT no_such_column FROM blogs"))

        monkeypatch.setattr(db_session, "execute", failing_execute)

        response = await async_client.put(f"{API}/blogs/{created['id']}", json={"published_at": PUBLISHED_AT})
        await task_queue.drain()

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["published_at"] is not None
        assert len(fanout.calls) == 1

    @pytest.mark.asyncio
    async def test_failed_fan_out_does_not_affect_create(
        self, async_client: AsyncClient, lifecycle, task_queue, mail_transport
    ):
        class _UnreachableDatabase:
            async def __aenter__(self):
                return self

            async def __aexit__(self, *exc_info):
                return False

            async def execute(self, *args, **kwargs):
                raise OperationalError("SELECT newsletter_subscriptions", {}, Exception("connection refused"))

        lifecycle.fanout = partial(
            send_newsletter,
            dispatcher=NewsletterDispatcher(mail_transport),
            session_factory=_UnreachableDatabase,
        )

        response = await async_client.post(f"{API}/blogs", json={"title": "Launch", "published_at": PUBLISHED_AT})
        await task_queue.drain()

        assert response.status_code == status.HTTP_201_CREATED
        assert task_queue.stats()["failed"] == 1
        assert mail_transport.attempts == []


# ============================================================================
# Resource file validation
# ============================================================================


class TestResourceFileValidation:
    @pytest.mark.asyncio
    async def test_accepts_pdf_upload(self, async_client: AsyncClient, db_session: AsyncSession):
        uploaded = await _uploaded(db_session)

        created = await _create(async_client, "/resources", {"title": "Guide", "file_id": uploaded.id})

        assert created["file_id"] == uploaded.id

    @pytest.mark.asyncio
    async def test_rejects_unknown_file(self, async_client: AsyncClient):
        response = await async_client.post(
            f"{API}/resources",
            json={"title": "Guide", "file_id": "00000000-0000-0000-0000-000000000000"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_rejects_disallowed_type(self, async_client: AsyncClient, db_session: AsyncSession):
        uploaded = await _uploaded(db_session, mime="image/png")

        response = await async_client.post(
            f"{API}/resources", json={"title": "Guide", "file_id": uploaded.id}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "image/png" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_rejects_oversized_file_on_update(self, async_client: AsyncClient, db_session: AsyncSession):
        created = await _create(async_client, "/resources", {"title": "Guide"})
        uploaded = await _uploaded(db_session, size=50 * 1024 * 1024)

        response = await async_client.put(
            f"{API}/resources/{created['id']}", json={"file_id": uploaded.id}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_unknown_resource_is_404_before_file_check(self, async_client: AsyncClient):
        response = await async_client.put(
            f"{API}/resources/00000000-0000-0000-0000-000000000000",
            json={"file_id": "00000000-0000-0000-0000-000000000001"},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
