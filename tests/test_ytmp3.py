import httpx
import pytest

from ytplay.config.settings import Ytmp3Config
from ytplay.core.exceptions import (
    ConversionError,
    ConversionTimeout,
    NoURLAtCompletion,
    UpstreamInvalidResponse,
)
from ytplay.services.ytmp3 import Ytmp3Client

CONVERT_URL = "https://conv.ymcdn.test/api/v1/convert?sig=abc"
PROGRESS_URL = "https://conv.ymcdn.test/api/v1/progress?id=42"


class Sleeper:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def make_client(router, sleeper=None) -> Ytmp3Client:
    return Ytmp3Client(
        settings=Ytmp3Config(),
        timeout=5,
        transport=router.transport(),
        sleep=sleeper or Sleeper(),
    )


def converter_routes(router, convert_body, progress_bodies=()):
    router.add("d.ymcdn.org", "/api/v1/init", {"convertURL": CONVERT_URL})
    router.add("conv.ymcdn.test", "/api/v1/convert", convert_body)

    bodies = iter(progress_bodies)
    router.add("conv.ymcdn.test", "/api/v1/progress", lambda request: httpx.Response(200, json=next(bodies)))
    return router


def polls(router) -> int:
    return router.paths().count("/api/v1/progress")


@pytest.mark.asyncio
async def test_trigger_with_direct_download_skips_polling(router):
    converter_routes(router, {"downloadURL": "https://dl.test/video.mp4"})

    async with make_client(router) as client:
        url = await client.convert("dQw4w9WgXcQ")

    assert url == "https://dl.test/video.mp4"
    assert polls(router) == 0

    init_request, trigger_request = router.calls
    assert init_request.url.params["p"] == "y"
    assert init_request.url.params["23"] == "1llum1n471"
    assert "_" in init_request.url.params
    assert init_request.headers["referer"] == "https://id.ytmp3.mobi/"
    assert trigger_request.url.params["sig"] == "abc"
    assert trigger_request.url.params["v"] == "dQw4w9WgXcQ"
    assert trigger_request.url.params["f"] == "mp4"
    assert trigger_request.url.params["_"] != init_request.url.params["_"]


@pytest.mark.asyncio
async def test_poll_stops_at_completion_sentinel(router):
    sleeper = Sleeper()
    converter_routes(router, {"progressURL": PROGRESS_URL}, [
        {"progress": 1},
        {"progress": 2, "error": ""},
        {"progress": 3, "downloadURL": "https://dl.test/done.mp4"},
        {"progress": 3, "downloadURL": "https://dl.test/too-late.mp4"},
    ])

    async with make_client(router, sleeper) as client:
        url = await client.convert("dQw4w9WgXcQ")

    assert url == "https://dl.test/done.mp4"
    assert polls(router) == 3
    assert sleeper.delays == [1.5, 1.5]


@pytest.mark.asyncio
async def test_progress_is_compared_literally(router):
    converter_routes(router, {"progressURL": PROGRESS_URL}, [
        {"progress": 4, "downloadURL": "https://dl.test/nope.mp4"},
        {"progress": "3", "downloadURL": "https://dl.test/nope.mp4"},
        {"progress": 3.0, "downloadURL": "https://dl.test/done.mp4"},
    ])

    async with make_client(router) as client:
        assert await client.convert("dQw4w9WgXcQ") == "https://dl.test/done.mp4"
    assert polls(router) == 3


@pytest.mark.asyncio
async def test_poll_times_out_after_exactly_ten_polls(router):
    sleeper = Sleeper()
    converter_routes(router, {"progressURL": PROGRESS_URL}, [{"progress": 1}] * 20)

    async with make_client(router, sleeper) as client:
        with pytest.raises(ConversionTimeout):
            await client.convert("dQw4w9WgXcQ")

    assert polls(router) == 10
    assert len(sleeper.delays) == 9


@pytest.mark.asyncio
async def test_poll_error_message_fails_immediately(router):
    converter_routes(router, {"progressURL": PROGRESS_URL}, [
        {"progress": 1},
        {"progress": 0, "error": "video too long"},
    ])

    async with make_client(router) as client:
        with pytest.raises(ConversionError, match="video too long"):
            await client.convert("dQw4w9WgXcQ")
    assert polls(router) == 2


@pytest.mark.asyncio
async def test_completion_without_url_fails(router):
    converter_routes(router, {"progressURL": PROGRESS_URL}, [{"progress": 3}])

    async with make_client(router) as client:
        with pytest.raises(NoURLAtCompletion):
            await client.convert("dQw4w9WgXcQ")


@pytest.mark.asyncio
async def test_init_without_convert_url_fails(router):
    router.add("d.ymcdn.org", "/api/v1/init", {"error": 1})

    async with make_client(router) as client:
        with pytest.raises(UpstreamInvalidResponse, match="convertURL"):
            await client.convert("dQw4w9WgXcQ")
    assert len(router.calls) == 1


@pytest.mark.asyncio
async def test_trigger_without_progress_url_fails(router):
    converter_routes(router, {"error": 0})

    async with make_client(router) as client:
        with pytest.raises(UpstreamInvalidResponse, match="progressURL"):
            await client.convert("dQw4w9WgXcQ")
