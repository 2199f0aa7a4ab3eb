from .exceptions import PlayError, ResolutionFailed, UpstreamError, VideoNotFound

__all__ = ["PlayError", "ResolutionFailed", "UpstreamError", "VideoNotFound"]
