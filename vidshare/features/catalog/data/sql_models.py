import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, JSON, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from vidshare.core.database.base import Base
from vidshare.core.common.enums import ProcessingStatus
from vidshare.core.jobs.models import JobModel  # noqa: F401 (target of VideoModel.jobs)

def utc_now():
    return datetime.now(timezone.utc)

class UserModel(Base):
    """
    Identity record. Rows are upserted from whatever the auth layer asserts;
    this service never stores credentials.
    """
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    channels = relationship("ChannelModel", back_populates="owner", cascade="all, delete-orphan")

class ChannelModel(Base):
    __tablename__ = "channels"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)
    banner_url = Column(String, nullable=True)
    owner_user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subscriber_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    owner = relationship("UserModel", back_populates="channels")
    videos = relationship("VideoModel", back_populates="channel", cascade="all, delete-orphan")
    subscriptions = relationship("SubscriptionModel", back_populates="channel", cascade="all, delete-orphan")

class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    icon = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    videos = relationship("VideoModel", back_populates="category")

class VideoModel(Base):
    __tablename__ = "videos"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    duration = Column(Integer, nullable=True) # in seconds
    channel_id = Column(UUID(as_uuid=True), ForeignKey("channels.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id"), nullable=True, index=True)
    tags = Column(JSON, default=list)
    view_count = Column(Integer, default=0, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False)

    # Media store reference of the uploaded original, e.g. "/uploads/ab/abcd.mp4"
    video_url = Column(String, nullable=True)
    # Quality label -> media store reference, e.g. {"720p": "/renditions/..."}
    processed_urls = Column(JSON, nullable=True)
    processing_status = Column(SQLEnum(ProcessingStatus), default=ProcessingStatus.PENDING, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    channel = relationship("ChannelModel", back_populates="videos")
    category = relationship("CategoryModel", back_populates="videos")
    likes = relationship("VideoLikeModel", back_populates="video", cascade="all, delete-orphan")
    watch_history = relationship("WatchHistoryModel", back_populates="video", cascade="all, delete-orphan")

    # Linked to vidshare/core/jobs/models.py
    jobs = relationship("JobModel", back_populates="video", cascade="all, delete-orphan")

class SubscriptionModel(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (UniqueConstraint("user_id", "channel_id", name="uq_subscription_user_channel"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    channel_id = Column(UUID(as_uuid=True), ForeignKey("channels.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    channel = relationship("ChannelModel", back_populates="subscriptions")

class WatchHistoryModel(Base):
    __tablename__ = "watch_history"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    watch_time = Column(Integer, default=0, nullable=False) # seconds watched
    last_watched_at = Column(DateTime(timezone=True), default=utc_now)

    video = relationship("VideoModel", back_populates="watch_history")

class VideoLikeModel(Base):
    __tablename__ = "video_likes"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_video_like_user_video"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    is_like = Column(Boolean, nullable=False) # true for like, false for dislike
    created_at = Column(DateTime(timezone=True), default=utc_now)

    video = relationship("VideoModel", back_populates="likes")
