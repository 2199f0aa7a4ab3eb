import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx

from ytplay.config.settings import Ytmp3Config, config
from ytplay.core.exceptions import (
    ConversionError,
    ConversionTimeout,
    NoURLAtCompletion,
    UpstreamInvalidResponse,
)
from ytplay.utils.http_client import JsonHttpClient

logger = logging.getLogger(__name__)


def cache_buster() -> str:
    return f"{random.random():f}"


class Ytmp3Client:
    """
    Convert/poll/download workflow of the ytmp3 converter.
    Init -> trigger -> poll until the progress sentinel or the attempt limit.
    """

    def __init__(
        self,
        settings: Ytmp3Config = config.ytmp3,
        timeout: float = config.http.timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self.sleep = sleep
        self.http = JsonHttpClient(
            headers={"Referer": settings.referer},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "Ytmp3Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.http.aclose()

    async def convert(self, video_id: str) -> str:
        convert_url = await self.init()
        res = await self.trigger(convert_url, video_id)

        download_url = res.get("downloadURL")
        if isinstance(download_url, str) and download_url:
            return download_url

        progress_url = res.get("progressURL")
        if not isinstance(progress_url, str) or not progress_url:
            raise UpstreamInvalidResponse("failed to get progressURL")

        return await self.poll(progress_url)

    async def init(self) -> str:
        params = {**self.settings.init_params, "_": cache_buster()}
        res = await self.http.get(self.settings.init_url, params=params)

        convert_url = res.get("convertURL")
        if not isinstance(convert_url, str) or not convert_url:
            raise UpstreamInvalidResponse("failed to get convertURL")
        return convert_url

    async def trigger(self, convert_url: str, video_id: str) -> Dict[str, Any]:
        query = urlencode({
            "v": video_id,
            "f": self.settings.target_format,
            "_": cache_buster(),
        })
        separator = "&" if "?" in convert_url else "?"
        return await self.http.get(f"{convert_url}{separator}{query}")

    async def poll(self, progress_url: str) -> str:
        attempts = self.settings.poll_attempts
        for attempt in range(1, attempts + 1):
            res = await self.http.get(progress_url)

            progress = res.get("progress")
            if _is_number(progress) and progress == self.settings.completion_progress:
                download_url = res.get("downloadURL")
                if not isinstance(download_url, str) or not download_url:
                    raise NoURLAtCompletion("progress complete but no url")
                logger.debug(f"Conversion finished after {attempt} poll(s)")
                return download_url

            message = res.get("error")
            if isinstance(message, str) and message:
                raise ConversionError(f"ytmp3 error: {message}")

            if attempt < attempts:
                await self.sleep(self.settings.poll_interval)

        raise ConversionTimeout(f"conversion not finished after {attempts} polls")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
