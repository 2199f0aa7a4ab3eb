import asyncio
import logging
from typing import Dict, List, Optional, Tuple, Union

from ytplay.config.settings import config
from ytplay.core.exceptions import ResolutionFailed, UpstreamError
from ytplay.models.internal import DownloadResult, MediaFormat, VideoRef
from ytplay.models.response import PlayData, PlayMetadata, PlayResponse
from ytplay.services.formats import FormatStrategy, default_strategies
from ytplay.services.resolver import VideoResolver
from ytplay.utils.locale import safe_query_for_log

logger = logging.getLogger(__name__)

Outcome = Tuple[MediaFormat, Union[DownloadResult, UpstreamError]]


class PlayService:
    """Search a video and resolve audio and video links side by side"""

    def __init__(
        self,
        resolver: Optional[VideoResolver] = None,
        strategies: Optional[Dict[MediaFormat, FormatStrategy]] = None,
        creator: str = config.api.creator,
    ):
        self.resolver = resolver or VideoResolver()
        self.strategies = strategies or default_strategies()
        self.creator = creator

    async def play(self, query: str) -> PlayResponse:
        video = await self.resolver.resolve(query)
        logger.info(f"Resolved '{safe_query_for_log(query)}' to {video.video_id}")
        return await self.collect(video)

    async def collect(self, video: VideoRef) -> PlayResponse:
        """
        Run every format strategy concurrently and wait for all of them.
        A failing strategy never cancels the others.
        """
        outcomes: List[Outcome] = await asyncio.gather(
            *(self._run(fmt, strategy, video) for fmt, strategy in self.strategies.items())
        )

        results: Dict[MediaFormat, DownloadResult] = {}
        reasons: List[str] = []
        for fmt, outcome in outcomes:
            if isinstance(outcome, DownloadResult):
                results[fmt] = outcome
            else:
                reasons.append(f"{fmt.value}: {outcome}")

        if not results:
            raise ResolutionFailed(reasons)

        return self.build_response(results)

    async def _run(self, fmt: MediaFormat, strategy: FormatStrategy, video: VideoRef) -> Outcome:
        try:
            return fmt, await strategy.resolve(video)
        except UpstreamError as e:
            logger.warning(f"{fmt.value} resolution failed for {video.video_id}: {e}")
            return fmt, e

    def build_response(self, results: Dict[MediaFormat, DownloadResult]) -> PlayResponse:
        source = results.get(MediaFormat.VIDEO) or results[MediaFormat.AUDIO]
        meta = source.metadata

        audio = results.get(MediaFormat.AUDIO)
        video_result = results.get(MediaFormat.VIDEO)

        return PlayResponse(
            creator=self.creator,
            data=PlayData(
                dl_mp3=audio.download_url if audio else None,
                dl_mp4=video_result.download_url if video_result else None,
                metadata=PlayMetadata(
                    title=meta.title,
                    thumbnail=meta.thumbnail,
                    duration=meta.duration,
                    id=source.video_id,
                ),
            ),
        )
