from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class RemoteVideoReference:
    """
    A video that lives on the external platform.
    Immutable once resolved; never persisted.
    """
    video_id: str
    url: str
    title: str


@dataclass(frozen=True)
class ProviderVideo:
    """
    Provider metadata shaped like a catalog video so listings can mix both.
    """
    youtube_video_id: str
    title: str = ""
    description: str = ""
    thumbnail_url: str = ""
    channel_id: str = ""


@dataclass
class ProviderSearchPage:
    videos: List[ProviderVideo] = field(default_factory=list)
    next_page_token: Optional[str] = None
    prev_page_token: Optional[str] = None


@dataclass(frozen=True)
class TrackSource:
    """
    A directly downloadable elementary stream (video-only or audio-only).
    """
    url: str
    format_id: str = ""
    ext: str = ""
    http_headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TrackSources:
    video: TrackSource
    audio: TrackSource
