import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from ytplay.config.settings import SearchConfig, config
from ytplay.core.exceptions import VideoNotFound
from ytplay.models.internal import VideoRef
from ytplay.utils.locale import safe_url_for_log

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERNS = [
    re.compile(r"youtube\.com/watch\?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/v/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
]

SEARCH_VIDEO_ID = re.compile(r'"videoId":"([a-zA-Z0-9_-]{11})"')


def extract_video_id(link: str) -> Optional[str]:
    """Extract the 11-character video id, first matching pattern wins"""
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(link)
        if match:
            return match.group(1)
    return None


def is_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


class VideoResolver:
    """Turn a free-text query or URL into a video reference"""

    def __init__(
        self,
        settings: SearchConfig = config.search,
        timeout: float = config.http.timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.timeout = timeout
        self.transport = transport

    async def resolve(self, query: str) -> VideoRef:
        if is_url(query) and self.settings.url_marker in query:
            video_id = extract_video_id(query)
            if not video_id:
                raise VideoNotFound(f"no video id in {safe_url_for_log(query)}")
            return VideoRef(video_id=video_id, url=query)

        video_id = await self.search(query)
        return VideoRef(video_id=video_id, url=f"{self.settings.watch_url}{video_id}")

    async def search(self, query: str) -> str:
        """Scrape the search results page for the first video id"""
        headers = {"User-Agent": self.settings.user_agent}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                resp = await client.get(
                    self.settings.results_url,
                    params={"search_query": query},
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.warning(f"Search request failed: {e}")
            raise VideoNotFound(str(e)) from e

        match = SEARCH_VIDEO_ID.search(resp.text)
        if not match:
            raise VideoNotFound("no video found")

        logger.debug(f"Search '{query}' resolved to {match.group(1)}")
        return match.group(1)
