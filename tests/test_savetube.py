import json

import httpx
import pytest

from ytplay.config.settings import SaveTubeConfig
from ytplay.core.exceptions import (
    CryptoFailure,
    FailedLink,
    MissingKey,
    UpstreamInvalidResponse,
    UpstreamRequestError,
)
from ytplay.models.internal import DecryptedMetadata, VideoRef
from ytplay.services.savetube import SaveTubeClient

VIDEO = VideoRef(video_id="dQw4w9WgXcQ", url="https://youtu.be/dQw4w9WgXcQ")


def make_client(router) -> SaveTubeClient:
    return SaveTubeClient(settings=SaveTubeConfig(), timeout=5, transport=router.transport())


@pytest.mark.asyncio
async def test_fetch_metadata_decrypts_info(savetube_routes, metadata_payload):
    async with make_client(savetube_routes) as client:
        cdn, metadata = await client.fetch_metadata(VIDEO)

    assert cdn == "cdn1.savetube.test"
    assert metadata == DecryptedMetadata(**metadata_payload)

    info_request = savetube_routes.calls[1]
    assert info_request.method == "POST"
    assert json.loads(info_request.content) == {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}
    assert info_request.headers["origin"] == "https://yt.savetube.me"
    assert info_request.headers["user-agent"] == "Postify/1.0.0"


@pytest.mark.parametrize("body", [
    {"data": {"cdn": "cdn1.savetube.test"}},
    {"status": False, "data": {"cdn": "cdn1.savetube.test"}},
    {"status": "true", "data": {"cdn": "cdn1.savetube.test"}},
    {"status": True, "data": "cdn1.savetube.test"},
    {"status": True, "data": {"cdn": 42}},
])
@pytest.mark.asyncio
async def test_get_cdn_rejects_malformed_responses(router, body):
    router.add("media.savetube.me", "/api/random-cdn", body)
    async with make_client(router) as client:
        with pytest.raises(UpstreamInvalidResponse):
            await client.get_cdn()


@pytest.mark.asyncio
async def test_non_json_body_is_invalid_response(router):
    router.add("media.savetube.me", "/api/random-cdn", lambda request: httpx.Response(502, text="Bad Gateway"))
    async with make_client(router) as client:
        with pytest.raises(UpstreamInvalidResponse):
            await client.get_cdn()


@pytest.mark.asyncio
async def test_transport_error_is_request_error(router):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    router.add("media.savetube.me", "/api/random-cdn", handler)
    async with make_client(router) as client:
        with pytest.raises(UpstreamRequestError):
            await client.get_cdn()


@pytest.mark.asyncio
async def test_info_with_garbage_payload_is_crypto_failure(savetube_routes):
    savetube_routes.add("cdn1.savetube.test", "/v2/info", {"status": True, "data": {"data": "%%%"}})
    async with make_client(savetube_routes) as client:
        with pytest.raises(CryptoFailure):
            await client.fetch_metadata(VIDEO)


@pytest.mark.asyncio
async def test_info_without_nested_data_is_invalid(savetube_routes):
    savetube_routes.add("cdn1.savetube.test", "/v2/info", {"status": True, "data": {}})
    async with make_client(savetube_routes) as client:
        with pytest.raises(UpstreamInvalidResponse):
            await client.fetch_metadata(VIDEO)


@pytest.mark.asyncio
async def test_audio_link_posts_fixed_marker_and_key(savetube_routes, metadata_payload):
    metadata = DecryptedMetadata(**metadata_payload)
    async with make_client(savetube_routes) as client:
        url = await client.audio_link("cdn1.savetube.test", VIDEO, metadata)

    assert url == "https://cdn1.savetube.test/file.mp3"
    assert json.loads(savetube_routes.calls[-1].content) == {
        "id": "dQw4w9WgXcQ",
        "downloadType": "audio",
        "quality": "128",
        "key": "k-123",
    }


@pytest.mark.asyncio
async def test_audio_link_requires_key(savetube_routes):
    async with make_client(savetube_routes) as client:
        with pytest.raises(MissingKey):
            await client.audio_link("cdn1.savetube.test", VIDEO, DecryptedMetadata(title="x"))
    assert savetube_routes.calls == []


@pytest.mark.asyncio
async def test_audio_link_missing_url_is_failed_link(savetube_routes, metadata_payload):
    savetube_routes.add("cdn1.savetube.test", "/download", {"status": True, "data": {}})
    async with make_client(savetube_routes) as client:
        with pytest.raises(FailedLink):
            await client.audio_link("cdn1.savetube.test", VIDEO, DecryptedMetadata(**metadata_payload))


@pytest.mark.asyncio
async def test_audio_link_reads_nested_download_url(router, metadata_payload):
    router.add(
        "cdn1.savetube.test",
        "/download",
        {"status": True, "data": {"data": {"downloadUrl": "https://cdn1/x.mp3"}}},
    )
    async with make_client(router) as client:
        url = await client.audio_link("cdn1.savetube.test", VIDEO, DecryptedMetadata(**metadata_payload))
    assert url == "https://cdn1/x.mp3"


@pytest.mark.asyncio
async def test_audio_link_falls_back_to_flat_download_url(router, metadata_payload):
    router.add("cdn1.savetube.test", "/download", {"status": True, "data": {"downloadUrl": "https://cdn1/flat.mp3"}})
    async with make_client(router) as client:
        url = await client.audio_link("cdn1.savetube.test", VIDEO, DecryptedMetadata(**metadata_payload))
    assert url == "https://cdn1/flat.mp3"


@pytest.mark.asyncio
async def test_audio_link_empty_nested_data_is_failed_link(router, metadata_payload):
    router.add("cdn1.savetube.test", "/download", {"status": True, "data": {"data": {"downloadUrl": ""}}})
    async with make_client(router) as client:
        with pytest.raises(FailedLink):
            await client.audio_link("cdn1.savetube.test", VIDEO, DecryptedMetadata(**metadata_payload))
