"""Tests for container wiring."""

import asyncio

import pytest
from pydantic import ValidationError

from portfolio_site.adapters.smtp_mail_transport import SmtpMailTransport
from portfolio_site.adapters.sqlite_blob_store import SqliteBlobStore
from portfolio_site.config import ClientSettings
from portfolio_site.containers import (
    build_client_container,
    build_container,
    build_photo_controller,
)
from portfolio_site.domain.photos import PhotoStatus
from tests.conftest import make_image_bytes
from tests.test_config import clear_mail_env


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.contact_service is not None
    transport = container.contact_service.transport
    assert isinstance(transport, SmtpMailTransport)
    assert transport.host == "smtp.test"
    assert transport.port == 587
    assert container.contact_service.rate_limiter.limit == 10
    assert container.contact_service.mail_to == "owner@mail.com"
    asyncio.run(container.close_resources())


def test_build_container_refuses_incomplete_configuration(
    monkeypatch, tmp_path
) -> None:
    clear_mail_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SMTP_HOST", "smtp.test")

    with pytest.raises(ValidationError):
        build_container()


def test_build_photo_controller_uses_local_store(tmp_path) -> None:
    settings = ClientSettings(
        photo_store_dir=tmp_path / "photos", default_profile_image="/me.jpg"
    )

    controller = build_photo_controller(settings)

    assert isinstance(controller.store, SqliteBlobStore)
    assert controller.store.path == tmp_path / "photos" / "portfolio-db.sqlite3"
    assert controller.source == "/me.jpg"
    view = asyncio.run(controller.upload(make_image_bytes(900, 600)))
    assert view.status is PhotoStatus.LOADED
    assert controller.store.path.exists()


def test_build_client_container_wires_photo_and_contact(tmp_path) -> None:
    settings = ClientSettings(
        photo_store_dir=tmp_path, contact_api_url="http://api.test/"
    )

    container = build_client_container(settings)

    assert container.contact_client.base_url == "http://api.test"
    asyncio.run(container.photo_controller.upload(make_image_bytes(100, 100)))
    handles = container.photo_controller.handles
    assert handles.live_count == 1
    asyncio.run(container.close_resources())
    assert handles.live_count == 0
