from typing import Optional, Union

from pydantic import BaseModel


class PlayMetadata(BaseModel):
    """Metadata surfaced with the download links"""
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[Union[int, float, str]] = None
    id: str


class PlayData(BaseModel):
    dl_mp3: Optional[str] = None
    dl_mp4: Optional[str] = None
    metadata: PlayMetadata


class PlayResponse(BaseModel):
    """Play endpoint response"""
    success: bool = True
    creator: str
    data: PlayData


class ErrorResponse(BaseModel):
    """Error envelope"""
    success: bool = False
    creator: str
    statusCode: int
    error: str
