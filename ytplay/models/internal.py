from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class MediaFormat(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"

    @property
    def response_key(self) -> str:
        return "dl_mp3" if self is MediaFormat.AUDIO else "dl_mp4"


class VideoRef(BaseModel):
    """Resolved video (separated from HTTP concerns)"""
    model_config = ConfigDict(frozen=True)

    video_id: str
    url: str


class DecryptedMetadata(BaseModel):
    """Decrypted info payload"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[Union[int, float, str]] = None
    key: Optional[str] = None


class DownloadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: MediaFormat
    download_url: str
    metadata: DecryptedMetadata
    video_id: str
