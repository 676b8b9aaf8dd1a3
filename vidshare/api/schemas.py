from datetime import datetime
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from vidshare.core.common.enums import ProcessingStatus
from vidshare.features.youtube.domain.models import ProviderVideo


class ApiModel(BaseModel):
    """JSON bodies use camelCase; Python code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Users ---

class UserOut(ApiModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Categories ---

class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=50, description="Display name of the category.")
    icon: Optional[str] = Field(None, max_length=50, description="Icon identifier used by the frontend.")


class CategoryOut(ApiModel):
    id: UUID
    name: str
    icon: Optional[str] = None


# --- Channels ---

class ChannelCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100, description="Channel name.")
    description: Optional[str] = Field(None, description="Free-form channel description.")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL.")
    banner_url: Optional[str] = Field(None, description="Banner image URL.")


class ChannelUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    banner_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        if value is None:
            raise ValueError("name cannot be null")
        return value


class ChannelOut(ApiModel):
    id: UUID
    name: str
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    banner_url: Optional[str] = None
    owner_user_id: str
    subscriber_count: int = 0
    created_at: Optional[datetime] = None


class SubscriptionOut(ApiModel):
    channel_id: str
    subscribed: bool


# --- Videos ---

class VideoUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None

    # Omitted fields stay untouched; an explicit null would hit a NOT NULL column.
    @field_validator("title", "is_public")
    @classmethod
    def required_columns_not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class VideoOut(ApiModel):
    """
    A local video or a provider video. Provider items carry only the
    metadata the provider returned plus their youtube_video_id.
    """
    id: str
    source: Literal["local", "youtube"] = "local"
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    channel_id: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    view_count: int = 0
    like_count: int = 0
    is_public: bool = True
    video_url: Optional[str] = None
    processed_urls: Optional[Dict[str, str]] = None
    processing_status: Optional[ProcessingStatus] = None
    youtube_video_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def of(cls, video) -> "VideoOut":
        if isinstance(video, ProviderVideo):
            return cls(
                id=video.youtube_video_id,
                source="youtube",
                title=video.title,
                description=video.description,
                thumbnail_url=video.thumbnail_url,
                channel_id=video.channel_id,
                youtube_video_id=video.youtube_video_id,
            )
        return cls(
            id=str(video.id),
            title=video.title,
            description=video.description,
            thumbnail_url=video.thumbnail_url,
            duration=video.duration,
            channel_id=str(video.channel_id),
            category_id=str(video.category_id) if video.category_id else None,
            tags=video.tags or [],
            view_count=video.view_count or 0,
            like_count=video.like_count or 0,
            is_public=video.is_public,
            video_url=video.video_url,
            processed_urls=video.processed_urls,
            processing_status=video.processing_status,
            created_at=video.created_at,
        )


class BrowseOut(ApiModel):
    videos: List[VideoOut]
    next_page_token: Optional[str] = None
    prev_page_token: Optional[str] = None


class LikeRequest(ApiModel):
    is_like: bool = Field(True, description="True for a like, false for a dislike.")


class LikeOut(ApiModel):
    like_count: int


class WatchRequest(ApiModel):
    watch_time: int = Field(0, ge=0, description="Seconds watched.")


class HistoryEntryOut(ApiModel):
    video: VideoOut
    watch_time: int
    last_watched_at: Optional[datetime] = None
