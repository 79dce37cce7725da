"""Tests for container wiring."""

import asyncio

from members_api.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    first = container.member_service_factory()
    second = container.member_service_factory()

    assert first.repository is not second.repository
    assert first.photo_service is second.photo_service
    asyncio.run(container.close_resources())
