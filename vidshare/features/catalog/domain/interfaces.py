from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from .models import Page, WatchEntry


class ICatalogRepository(ABC):
    """
    Contract for catalog persistence.
    Returns detached ORM rows; callers must not rely on lazy relationships.
    """

    # --- Users ---
    @abstractmethod
    def upsert_user(self, user_id: str, **profile):
        """Creates the user or refreshes the given profile fields."""
        pass

    @abstractmethod
    def get_user(self, user_id: str):
        pass

    # --- Channels ---
    @abstractmethod
    def create_channel(self, data: dict):
        pass

    @abstractmethod
    def get_channel(self, channel_id: UUID):
        pass

    @abstractmethod
    def list_channels(self) -> list:
        """All channels, newest first."""
        pass

    @abstractmethod
    def list_featured_channels(self, limit: int) -> list:
        """Channels ordered by subscriber count."""
        pass

    @abstractmethod
    def update_channel(self, channel_id: UUID, updates: dict):
        """Returns the updated row, or None if it does not exist."""
        pass

    @abstractmethod
    def delete_channel(self, channel_id: UUID) -> List[str]:
        """
        Deletes the channel and (by cascade) its videos.
        Returns the media store references the deleted videos pointed to.
        """
        pass

    # --- Videos ---
    @abstractmethod
    def create_video(self, data: dict):
        pass

    @abstractmethod
    def get_video(self, video_id: UUID):
        pass

    @abstractmethod
    def list_videos(self, page: Page) -> list:
        pass

    @abstractmethod
    def list_trending_videos(self, page: Page) -> list:
        pass

    @abstractmethod
    def list_liked_videos(self, page: Page) -> list:
        pass

    @abstractmethod
    def list_videos_by_channel(self, channel_id: UUID, page: Page) -> list:
        pass

    @abstractmethod
    def list_videos_by_category(self, category_id: UUID, page: Page) -> list:
        pass

    @abstractmethod
    def search_videos(self, query: str, page: Page) -> list:
        """Case-insensitive match on title or description, public videos only."""
        pass

    @abstractmethod
    def update_video(self, video_id: UUID, updates: dict):
        pass

    @abstractmethod
    def delete_video(self, video_id: UUID) -> List[str]:
        """Deletes the row and returns the media store references it held."""
        pass

    @abstractmethod
    def increment_view_count(self, video_id: UUID) -> None:
        pass

    # --- Likes ---
    @abstractmethod
    def increment_like_count(self, video_id: UUID) -> int:
        pass

    @abstractmethod
    def set_like(self, user_id: str, video_id: UUID, is_like: bool) -> int:
        """Records one like/dislike per user and returns the recomputed like count."""
        pass

    # --- Subscriptions ---
    @abstractmethod
    def add_subscription(self, user_id: str, channel_id: UUID) -> bool:
        """Returns False if the user was already subscribed."""
        pass

    @abstractmethod
    def remove_subscription(self, user_id: str, channel_id: UUID) -> bool:
        pass

    @abstractmethod
    def list_subscribed_channels(self, user_id: str) -> list:
        pass

    # --- Watch history ---
    @abstractmethod
    def record_watch(self, user_id: str, video_id: UUID, watch_time: int) -> None:
        pass

    @abstractmethod
    def list_history(self, user_id: str, page: Page) -> List[WatchEntry]:
        pass

    # --- Categories ---
    @abstractmethod
    def create_category(self, data: dict):
        pass

    @abstractmethod
    def list_categories(self) -> list:
        pass

    @abstractmethod
    def get_category(self, category_id: UUID):
        pass
