"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from portfolio_site.adapters.contact_client import HttpxContactClient
from portfolio_site.adapters.smtp_mail_transport import SmtpMailTransport
from portfolio_site.adapters.sqlite_blob_store import SqliteBlobStore
from portfolio_site.config import ClientSettings, Settings
from portfolio_site.services.contact import ContactService
from portfolio_site.services.display_handles import DisplayHandleRegistry
from portfolio_site.services.photos import ProfilePhotoController
from portfolio_site.services.rate_limit import FixedWindowRateLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    contact_service: ContactService
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class ClientContainer:
    """Holds the page-side photo pipeline and contact form client."""

    settings: ClientSettings
    photo_controller: ProfilePhotoController
    contact_client: HttpxContactClient
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Building Settings raises pydantic's ValidationError when a required mail
    setting is missing or empty, so no app can be created from a partial
    configuration.
    """
    resolved_settings = settings or Settings()
    transport = SmtpMailTransport(
        host=resolved_settings.smtp_host,
        port=resolved_settings.smtp_port,
        secure=resolved_settings.smtp_secure,
        username=resolved_settings.smtp_user,
        password=resolved_settings.smtp_pass,
        timeout=resolved_settings.smtp_timeout_seconds,
    )
    rate_limiter = FixedWindowRateLimiter(
        limit=resolved_settings.rate_limit_requests,
        window_seconds=resolved_settings.rate_limit_window_seconds,
    )
    contact_service = ContactService(
        transport=transport,
        rate_limiter=rate_limiter,
        mail_from=resolved_settings.mail_from,
        mail_to=resolved_settings.mail_to,
    )

    async def close_resources() -> None:
        """Nothing to release: the SMTP transport connects per message."""
        return None

    return AppContainer(
        settings=resolved_settings,
        contact_service=contact_service,
        close_resources=close_resources,
    )


def build_photo_controller(
    settings: ClientSettings | None = None,
) -> ProfilePhotoController:
    """Create a photo controller backed by the local SQLite blob store."""
    resolved_settings = settings or ClientSettings()
    return ProfilePhotoController(
        store=SqliteBlobStore.create(resolved_settings.photo_store_dir),
        handles=DisplayHandleRegistry(),
        default_image=resolved_settings.default_profile_image,
    )


def build_client_container(settings: ClientSettings | None = None) -> ClientContainer:
    """Create the page-side container for the photo pipeline and contact form."""
    resolved_settings = settings or ClientSettings()
    photo_controller = build_photo_controller(resolved_settings)
    contact_client = HttpxContactClient.create(resolved_settings.contact_api_url)

    async def close_resources() -> None:
        photo_controller.close()
        await contact_client.close()

    return ClientContainer(
        settings=resolved_settings,
        photo_controller=photo_controller,
        contact_client=contact_client,
        close_resources=close_resources,
    )
