from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ytplay.core.exceptions import PlayError, QueryRequired
from ytplay.core.logging import log_debug, log_error, log_info
from ytplay.i18n import i18n
from ytplay.infra.rate_limit import rate_limiter
from ytplay.models.response import ErrorResponse, PlayResponse
from ytplay.services.play import PlayService
from ytplay.utils.locale import get_locale, safe_query_for_log

router = APIRouter()


def get_play_service() -> PlayService:
    return PlayService()


@router.get(
    "/play",
    response_model=PlayResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(rate_limiter)],
)
async def play(
    request: Request,
    query: Optional[str] = Query(None, description="Search query or YouTube URL"),
    service: PlayService = Depends(get_play_service),
):
    """Search a YouTube video and return its MP3 and 480p MP4 download links."""

    _ = i18n.translator(get_locale(request.headers.get("accept-language")))

    if not query:
        raise QueryRequired()

    log_info(request, _("log.play_request", query=safe_query_for_log(query)))

    try:
        response = await service.play(query)
    except PlayError as e:
        log_error(request, _("log.play_failed", reason=str(e)))
        raise

    log_debug(request, f"Metadata for {response.data.metadata.id}: title={response.data.metadata.title!r}")
    log_info(
        request,
        _(
            "log.play_resolved",
            video_id=response.data.metadata.id,
            mp3=response.data.dl_mp3 is not None,
            mp4=response.data.dl_mp4 is not None,
        ),
    )
    return response
