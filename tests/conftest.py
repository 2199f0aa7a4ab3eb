import pytest

from .helpers import Router, encrypt_payload


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def metadata_payload() -> dict:
    return {
        "title": "Rick Astley - Never Gonna Give You Up",
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        "duration": 213,
        "key": "k-123",
    }


@pytest.fixture
def savetube_routes(router: Router, metadata_payload: dict) -> Router:
    """Happy-path media CDN provider"""
    router.add("media.savetube.me", "/api/random-cdn", {"status": True, "data": {"cdn": "cdn1.savetube.test"}})
    router.add(
        "cdn1.savetube.test",
        "/v2/info",
        {"status": True, "data": {"data": encrypt_payload(metadata_payload)}},
    )
    router.add(
        "cdn1.savetube.test",
        "/download",
        {"status": True, "data": {"data": {"downloadUrl": "https://cdn1.savetube.test/file.mp3"}}},
    )
    return router
