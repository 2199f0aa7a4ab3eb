import logging
from typing import Any, Dict, Optional

import httpx

from ytplay.config.settings import SaveTubeConfig, config
from ytplay.core.exceptions import FailedLink, MissingKey, UpstreamInvalidResponse
from ytplay.models.internal import DecryptedMetadata, VideoRef
from ytplay.utils.crypto import decrypt_payload
from ytplay.utils.http_client import JsonHttpClient

logger = logging.getLogger(__name__)


class SaveTubeClient:
    """Media CDN provider: random CDN, encrypted info and audio links"""

    def __init__(
        self,
        settings: SaveTubeConfig = config.savetube,
        watch_url: str = config.search.watch_url,
        timeout: float = config.http.timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.watch_url = watch_url
        self.http = JsonHttpClient(
            headers=settings.headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SaveTubeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.http.aclose()

    async def get_cdn(self) -> str:
        res = await self.http.get(self.settings.base_url + self.settings.cdn_path)

        if res.get("status") is not True:
            raise UpstreamInvalidResponse("failed to get CDN")

        data = res.get("data")
        if not isinstance(data, dict):
            raise UpstreamInvalidResponse("invalid CDN response format")

        cdn = data.get("cdn")
        if not isinstance(cdn, str) or not cdn:
            raise UpstreamInvalidResponse("invalid CDN string")
        return cdn

    async def fetch_info(self, cdn: str, video: VideoRef) -> DecryptedMetadata:
        res = await self.http.post(
            f"https://{cdn}{self.settings.info_path}",
            {"url": f"{self.watch_url}{video.video_id}"},
        )

        data = res.get("data")
        if not isinstance(data, dict):
            raise UpstreamInvalidResponse("invalid info response")

        encrypted = data.get("data")
        if not isinstance(encrypted, str):
            raise UpstreamInvalidResponse("invalid info data")

        decrypted = decrypt_payload(encrypted, self.settings.secret_key)
        return DecryptedMetadata(**_metadata_fields(decrypted))

    async def fetch_metadata(self, video: VideoRef) -> tuple[str, DecryptedMetadata]:
        """Select a CDN and decrypt the info payload for a video"""
        cdn = await self.get_cdn()
        logger.debug(f"Using CDN {cdn} for {video.video_id}")
        return cdn, await self.fetch_info(cdn, video)

    async def audio_link(self, cdn: str, video: VideoRef, metadata: DecryptedMetadata) -> str:
        if not metadata.key:
            raise MissingKey("missing key in decrypted data")

        res = await self.http.post(
            f"https://{cdn}{self.settings.download_path}",
            {
                "id": video.video_id,
                "downloadType": "audio",
                "quality": self.settings.audio_quality,
                "key": metadata.key,
            },
        )

        url = _download_url(res)
        if not isinstance(url, str) or not url:
            raise FailedLink("failed to get mp3 link")
        return url


def _metadata_fields(decrypted: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only usable metadata values from the decrypted payload"""
    fields: Dict[str, Any] = {}
    for name in ("title", "thumbnail", "key"):
        value = decrypted.get(name)
        if isinstance(value, str):
            fields[name] = value
    duration = decrypted.get("duration")
    if isinstance(duration, (int, float, str)) and not isinstance(duration, bool):
        fields["duration"] = duration
    return fields


def _download_url(res: Dict[str, Any]) -> Optional[str]:
    """Link lives at data.data.downloadUrl; some CDNs answer with data.downloadUrl"""
    data = res.get("data")
    if not isinstance(data, dict):
        return None
    nested = data.get("data")
    if isinstance(nested, dict) and nested.get("downloadUrl"):
        return nested.get("downloadUrl")
    return data.get("downloadUrl")
