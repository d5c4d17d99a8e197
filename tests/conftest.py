"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from email.message import EmailMessage

import pytest
from PIL import Image

from portfolio_site.config import Settings
from portfolio_site.containers import AppContainer
from portfolio_site.domain.errors import StoreError
from portfolio_site.domain.photos import StoredBlob
from portfolio_site.services.blob_store import BlobStore
from portfolio_site.services.contact import ContactService, MailTransport
from portfolio_site.services.rate_limit import FixedWindowRateLimiter

VALID_CONTACT = {
    "name": "Al",
    "email": "a@b.com",
    "subject": "Hi",
    "message": "hello!",
}


@dataclass
class InMemoryBlobStore(BlobStore):
    """In-memory blob store for tests."""

    blobs: dict[str, StoredBlob] = field(default_factory=dict)

    async def put(self, key: str, blob: StoredBlob) -> None:
        self.blobs[key] = blob

    async def get(self, key: str) -> StoredBlob | None:
        return self.blobs.get(key)

    async def delete(self, key: str) -> None:
        self.blobs.pop(key, None)


@dataclass
class FailingBlobStore(BlobStore):
    """Blob store whose selected operations always fail."""

    failing: set[str] = field(default_factory=lambda: {"put", "get", "delete"})
    inner: InMemoryBlobStore = field(default_factory=InMemoryBlobStore)

    async def put(self, key: str, blob: StoredBlob) -> None:
        if "put" in self.failing:
            raise StoreError("disk full")
        await self.inner.put(key, blob)

    async def get(self, key: str) -> StoredBlob | None:
        if "get" in self.failing:
            raise StoreError("database locked")
        return await self.inner.get(key)

    async def delete(self, key: str) -> None:
        if "delete" in self.failing:
            raise StoreError("database locked")
        await self.inner.delete(key)


@dataclass
class RecordingMailTransport(MailTransport):
    """Mail transport that keeps every message it is asked to send."""

    sent: list[EmailMessage] = field(default_factory=list)

    async def send(self, message: EmailMessage) -> None:
        self.sent.append(message)


@dataclass
class FailingMailTransport(MailTransport):
    """Mail transport that always fails like an unreachable relay."""

    attempts: int = 0

    async def send(self, message: EmailMessage) -> None:
        self.attempts += 1
        raise ConnectionRefusedError("smtp relay unreachable")


@dataclass
class FakeClock:
    """Manually advanced monotonic clock."""

    now: float = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_image_bytes(
    width: int, height: int, image_format: str = "PNG", mode: str = "RGB"
) -> bytes:
    """Render a solid test image and return its encoded bytes."""
    color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
    buffer = io.BytesIO()
    with Image.new(mode, (width, height), color) as image:
        image.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user="mailer",
        smtp_pass="secret",
        mail_from="Portfolio <noreply@mail.com>",
        mail_to="owner@mail.com",
        cors_origins="http://localhost:3000, https://portfolio.dev",
        environment="test",
    )


@pytest.fixture
def mail_transport() -> RecordingMailTransport:
    return RecordingMailTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(limit=10, window_seconds=60, clock=clock)


@pytest.fixture
def contact_service(
    settings: Settings,
    mail_transport: RecordingMailTransport,
    rate_limiter: FixedWindowRateLimiter,
) -> ContactService:
    return ContactService(
        transport=mail_transport,
        rate_limiter=rate_limiter,
        mail_from=settings.mail_from,
        mail_to=settings.mail_to,
    )


@pytest.fixture
def container(settings: Settings, contact_service: ContactService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        contact_service=contact_service,
        close_resources=close_resources,
    )
