"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from typing import AsyncGenerator, Optional
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from adapters.email import MailTransport, OutgoingEmail, get_mail_transport
from adapters.storage import LocalFileStorage, get_file_storage
from core.domain import ContentItem, ContentKind
from core.errors import UpstreamDeliveryError
from infrastructure.database.connection import get_db
from infrastructure.database.models import Base, NewsletterSubscription, Resource, UploadedFile
from services.content_lifecycle import ContentLifecycle, get_content_lifecycle
from services.notifications import NotificationService, get_notification_service
from services.task_queue import TaskQueue, get_task_queue


# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# Test doubles
# ============================================================================


class FakeMailTransport(MailTransport):
    """Records every message; addresses in ``fail_for`` are rejected."""

    def __init__(self, fail_for: Optional[set[str]] = None):
        self.sent: list[OutgoingEmail] = []
        self.attempts: list[str] = []
        self.fail_for = set(fail_for or ())

    async def send(self, message: OutgoingEmail) -> None:
        self.attempts.append(message.to)
        if message.to in self.fail_for:
            raise UpstreamDeliveryError(message.to, "mailbox unavailable")
        self.sent.append(message)

    def sent_to(self, address: str) -> list[OutgoingEmail]:
        return [m for m in self.sent if m.to == address]


class RecordingFanOut:
    """Stands in for the newsletter fan-out and records each trigger."""

    def __init__(self):
        self.calls: list[tuple[ContentKind, ContentItem]] = []

    async def __call__(self, kind: ContentKind, item: ContentItem):
        self.calls.append((kind, item))
        return None


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Side-effect doubles
# ============================================================================


@pytest.fixture
def mail_transport() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture
def task_queue() -> TaskQueue:
    return TaskQueue()


@pytest.fixture
def file_storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(str(tmp_path / "uploads"))


@pytest.fixture
def fanout() -> RecordingFanOut:
    return RecordingFanOut()


@pytest.fixture
def lifecycle(task_queue: TaskQueue, fanout: RecordingFanOut) -> ContentLifecycle:
    return ContentLifecycle(task_queue, fanout=fanout)


# ============================================================================
# HTTP client
# ============================================================================


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    mail_transport: FakeMailTransport,
    task_queue: TaskQueue,
    file_storage: LocalFileStorage,
    lifecycle: ContentLifecycle,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with all external effects replaced."""
    # Import app here to avoid circular imports
    from main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_transport] = lambda: mail_transport
    app.dependency_overrides[get_task_queue] = lambda: task_queue
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    app.dependency_overrides[get_content_lifecycle] = lambda: lifecycle
    app.dependency_overrides[get_notification_service] = lambda: NotificationService(
        task_queue, mail_transport
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await task_queue.drain(timeout=5)
    app.dependency_overrides.clear()


# ============================================================================
# Data factories
# ============================================================================


@pytest.fixture
def make_subscriber(db_session: AsyncSession):
    """Insert a subscription row."""

    async def _make(
        email: str,
        categories: list,
        subscribed: bool = True,
        name: str = "Reader",
    ) -> NewsletterSubscription:
        row = NewsletterSubscription(
            email=email,
            name=name,
            categories=categories,
            subscribed=subscribed,
        )
        db_session.add(row)
        await db_session.commit()
        await db_session.refresh(row)
        return row

    return _make


@pytest.fixture
def make_resource(db_session: AsyncSession, file_storage: LocalFileStorage):
    """
    Insert a resource, optionally with an uploaded file.

    ``store_bytes=False`` records the upload without writing it to storage.
    """

    async def _make(
        published: bool = True,
        with_file: bool = True,
        store_bytes: bool = True,
        content: bytes = b"%PDF-1.4 test document",
        filename: str = "Product Brochure.pdf",
        mime: Optional[str] = "application/pdf",
        download_count: int = 0,
    ) -> Resource:
        file_id = None
        if with_file:
            file_hash = uuid4().hex
            ext = Path(filename).suffix
            uploaded = UploadedFile(
                name=filename,
                hash=file_hash,
                ext=ext,
                mime=mime,
                size_bytes=len(content),
                provider="local",
            )
            db_session.add(uploaded)
            await db_session.flush()
            file_id = uploaded.id
            if store_bytes:
                await file_storage.save(content, uploaded.storage_key)

        resource = Resource(
            title="Autointelli Brochure",
            description="Everything about the platform.",
            category="brochure",
            published=published,
            download_count=download_count,
            file_id=file_id,
        )
        db_session.add(resource)
        await db_session.commit()
        await db_session.refresh(resource)
        return resource

    return _make
