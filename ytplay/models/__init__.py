from .internal import DecryptedMetadata, DownloadResult, MediaFormat, VideoRef
from .response import ErrorResponse, PlayData, PlayMetadata, PlayResponse

__all__ = [
    "DecryptedMetadata",
    "DownloadResult",
    "ErrorResponse",
    "MediaFormat",
    "PlayData",
    "PlayMetadata",
    "PlayResponse",
    "VideoRef",
]
