"""
Integration tests for POST /uploads.
"""

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import UploadedFile

URL = "/api/v1/uploads"


class TestUploadEndpoint:
    @pytest.mark.asyncio
    async def test_upload_stores_file_and_record(
        self, async_client: AsyncClient, db_session: AsyncSession, file_storage
    ):
        payload = b"%PDF-1.4 uploaded"
        response = await async_client.post(
            URL, files={"file": ("Case Study.PDF", payload, "application/pdf")}
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "Case Study.PDF"
        assert data["ext"] == ".pdf"
        assert data["mime"] == "application/pdf"
        assert data["size_bytes"] == len(payload)

        uploaded = await db_session.get(UploadedFile, data["id"])
        assert await file_storage.exists(uploaded.storage_key)

    @pytest.mark.asyncio
    async def test_empty_file_rejected(self, async_client: AsyncClient):
        response = await async_client.post(URL, files={"file": ("empty.csv", b"", "text/csv")})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_uploaded_file_can_back_a_resource(self, async_client: AsyncClient):
        upload = await async_client.post(
            URL, files={"file": ("numbers.csv", b"a,b\n1,2\n", "text/csv")}
        )

        response = await async_client.post(
            "/api/v1/resources",
            json={"title": "Dataset", "file_id": upload.json()["id"], "published": True},
        )

        assert response.status_code == status.HTTP_201_CREATED
