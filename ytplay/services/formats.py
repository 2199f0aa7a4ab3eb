from abc import ABC, abstractmethod
from typing import Dict, Optional

import httpx

from ytplay.config.settings import Config, config
from ytplay.models.internal import DownloadResult, MediaFormat, VideoRef
from ytplay.services.savetube import SaveTubeClient
from ytplay.services.ytmp3 import Ytmp3Client


class FormatStrategy(ABC):
    """Resolve a download link for one media format"""
    format: MediaFormat

    def __init__(self, settings: Config = config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def savetube(self) -> SaveTubeClient:
        return SaveTubeClient(
            settings=self.settings.savetube,
            watch_url=self.settings.search.watch_url,
            timeout=self.settings.http.timeout,
            transport=self.transport,
        )

    @abstractmethod
    async def resolve(self, video: VideoRef) -> DownloadResult:
        ...


class AudioStrategy(FormatStrategy):
    """128 kbps audio from the media CDN"""
    format = MediaFormat.AUDIO

    async def resolve(self, video: VideoRef) -> DownloadResult:
        async with self.savetube() as client:
            cdn, metadata = await client.fetch_metadata(video)
            url = await client.audio_link(cdn, video, metadata)

        return DownloadResult(
            format=self.format,
            download_url=url,
            metadata=metadata,
            video_id=video.video_id,
        )


class VideoStrategy(FormatStrategy):
    """480p mp4 through the ytmp3 converter, metadata from the media CDN"""
    format = MediaFormat.VIDEO

    def ytmp3(self) -> Ytmp3Client:
        return Ytmp3Client(
            settings=self.settings.ytmp3,
            timeout=self.settings.http.timeout,
            transport=self.transport,
        )

    async def resolve(self, video: VideoRef) -> DownloadResult:
        async with self.savetube() as client:
            _, metadata = await client.fetch_metadata(video)

        async with self.ytmp3() as converter:
            url = await converter.convert(video.video_id)

        return DownloadResult(
            format=self.format,
            download_url=url,
            metadata=metadata,
            video_id=video.video_id,
        )


def default_strategies(
    settings: Config = config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[MediaFormat, FormatStrategy]:
    return {
        MediaFormat.AUDIO: AudioStrategy(settings, transport),
        MediaFormat.VIDEO: VideoStrategy(settings, transport),
    }
