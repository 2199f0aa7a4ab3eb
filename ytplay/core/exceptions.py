from typing import Any, Dict, List, Optional


class PlayError(Exception):
    """Base error rendered as the JSON error envelope"""
    status_code = 500
    message_key = "error.internal"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None, **params: Any):
        super().__init__(message or self.message_key)
        self.message = message
        self.params = params


class QueryRequired(PlayError):
    status_code = 400
    message_key = "error.query_required"


class VideoNotFound(PlayError):
    status_code = 404
    message_key = "error.video_not_found"


class ResolutionFailed(PlayError):
    """Every format resolution failed"""
    status_code = 500
    message_key = "error.resolution_failed"

    def __init__(self, reasons: List[str]):
        self.reasons = reasons
        joined = "; ".join(reasons)
        super().__init__(joined, reasons=joined)


class IpBanned(PlayError):
    status_code = 403
    message_key = "error.ip_banned"


class RateLimitExceeded(PlayError):
    status_code = 429
    message_key = "error.rate_limit"

    def __init__(self, max_requests: int, window_seconds: int, retry_after: int):
        super().__init__(
            f"exceeded_{max_requests}_per_{window_seconds}s",
            max=max_requests,
            seconds=window_seconds,
        )
        self.headers = {"Retry-After": str(retry_after)}


class UpstreamError(PlayError):
    """A single format resolution failed against a third-party service"""
    status_code = 502
    message_key = "error.upstream"


class UpstreamRequestError(UpstreamError):
    pass


class UpstreamInvalidResponse(UpstreamError):
    pass


class MissingKey(UpstreamInvalidResponse):
    pass


class FailedLink(UpstreamInvalidResponse):
    pass


class NoURLAtCompletion(UpstreamInvalidResponse):
    pass


class CryptoFailure(UpstreamError):
    pass


class InvalidPadding(CryptoFailure):
    pass


class ConversionError(UpstreamError):
    """Converter reported an error message while polling"""


class ConversionTimeout(UpstreamError):
    status_code = 504
