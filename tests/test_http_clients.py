"""Tests for HTTP-based adapters."""

import asyncio
import hashlib

import httpx

from members_api.adapters.cloudinary_photo_service import (
    HttpxCloudinaryPhotoService,
    sign_params,
)
from members_api.domain.photos import PhotoUpload


def _service(handler) -> HttpxCloudinaryPhotoService:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxCloudinaryPhotoService(
        cloud_name="demo",
        api_key="key",
        api_secret="secret",
        base_url="https://api.cloudinary.test/v1_1",
        folder="members",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_sign_params_sorts_and_appends_secret() -> None:
    signature = sign_params({"timestamp": "10", "public_id": "abc"}, "secret")

    payload = b"public_id=abc&timestamp=10secret"
    expected = hashlib.sha1(payload).hexdigest()  # noqa: S324
    assert signature == expected


def test_upload_returns_secure_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "secure_url": "https://res.cloudinary.com/demo/members/abc.jpg",
                "public_id": "members/abc",
            },
        )

    service = _service(handler)
    result = asyncio.run(
        service.upload(PhotoUpload("me.jpg", b"jpeg-bytes", "image/jpeg"))
    )

    assert result.error is None
    assert result.url == "https://res.cloudinary.com/demo/members/abc.jpg"
    assert result.public_id == "members/abc"
    assert seen[0].url.path == "/v1_1/demo/image/upload"
    body = seen[0].read()
    assert b"jpeg-bytes" in body
    assert b"c_fill,g_face,h_500,w_500" in body
    assert b'name="signature"' in body


def test_upload_error_message_passed_through() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "Invalid image file"}})

    service = _service(handler)
    result = asyncio.run(service.upload(PhotoUpload("bad.txt", b"nope")))

    assert result.error == "Invalid image file"
    assert result.url is None


def test_upload_transport_failure_becomes_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = _service(handler)
    result = asyncio.run(service.upload(PhotoUpload("me.jpg", b"jpeg-bytes")))

    assert result.error == "connection refused"


def test_delete_success_and_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1_1/demo/image/destroy"
        if b"public_id=missing" in request.read():
            return httpx.Response(500, json={"error": {"message": "Server error"}})
        return httpx.Response(200, json={"result": "ok"})

    service = _service(handler)

    ok = asyncio.run(service.delete("members/abc"))
    failed = asyncio.run(service.delete("missing"))

    assert ok.error is None
    assert failed.error == "Server error"


def test_upload_without_public_id_is_an_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"secure_url": "https://res/abc.jpg"})

    service = _service(handler)
    result = asyncio.run(service.upload(PhotoUpload("me.jpg", b"jpeg-bytes")))

    assert result.error == "Photo service response is missing the image url or id"
    assert result.url is None
