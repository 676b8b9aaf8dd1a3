import logging
from typing import BinaryIO, List, Optional, Union
from uuid import UUID

from vidshare.features.media_store.data.local_fs import media_store as default_media_store
from vidshare.features.media_store.domain.interfaces import IMediaStore
from vidshare.features.youtube.domain.interfaces import IVideoProvider
from vidshare.features.youtube.domain.models import ProviderVideo
from vidshare.features.youtube.service.api import youtube
from ..data.repository import SqlCatalogRepo
from ..domain.errors import NotFoundError, PermissionDeniedError
from ..domain.interfaces import ICatalogRepository
from ..domain.models import BrowseResult, Page, VideoFilter, WatchEntry, parse_uuid

logger = logging.getLogger(__name__)

FEATURED_CHANNEL_LIMIT = 10


class CatalogService:
    """
    Facade for the Catalog Feature.
    Owns the ownership rules (only a channel's owner may change the channel
    or its videos) and blends provider results into local listings.
    """

    def __init__(
        self,
        repo: Optional[ICatalogRepository] = None,
        provider: Optional[IVideoProvider] = None,
        store: Optional[IMediaStore] = None,
    ):
        self.repo = repo or SqlCatalogRepo()
        self.provider = provider or youtube
        self.store = store or default_media_store

    # --- Lookups that raise ---

    def _require_channel(self, channel_id):
        channel_uuid = parse_uuid(channel_id)
        channel = self.repo.get_channel(channel_uuid) if channel_uuid else None
        if channel is None:
            raise NotFoundError("Channel", channel_id)
        return channel

    def _require_video(self, video_id):
        video_uuid = parse_uuid(video_id)
        video = self.repo.get_video(video_uuid) if video_uuid else None
        if video is None:
            raise NotFoundError("Video", video_id)
        return video

    def _require_owner(self, actor_id: str, channel) -> None:
        if channel.owner_user_id != actor_id:
            logger.warning(f"User {actor_id} tried to modify channel {channel.id} owned by {channel.owner_user_id}")
            raise PermissionDeniedError(f"Channel {channel.id} is not owned by the caller")

    def _discard_refs(self, refs: List[str]) -> None:
        for ref in refs:
            if not self.store.delete(ref):
                logger.warning(f"Stored file already gone: {ref}")

    # --- Users ---

    def upsert_user(self, user_id: str, **profile):
        return self.repo.upsert_user(user_id, **profile)

    def get_user(self, user_id: str):
        user = self.repo.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    # --- Channels ---

    def create_channel(self, actor_id: str, data: dict):
        channel = self.repo.create_channel({**data, "owner_user_id": actor_id})
        logger.info(f"Channel {channel.id} created by {actor_id}")
        return channel

    def get_channel(self, channel_id):
        return self._require_channel(channel_id)

    def list_channels(self) -> list:
        return self.repo.list_channels()

    def list_featured_channels(self) -> list:
        return self.repo.list_featured_channels(FEATURED_CHANNEL_LIMIT)

    def update_channel(self, actor_id: str, channel_id, updates: dict):
        channel = self._require_channel(channel_id)
        self._require_owner(actor_id, channel)
        return self.repo.update_channel(channel.id, updates)

    def delete_channel(self, actor_id: str, channel_id) -> None:
        channel = self._require_channel(channel_id)
        self._require_owner(actor_id, channel)
        self._discard_refs(self.repo.delete_channel(channel.id))
        logger.info(f"Channel {channel.id} deleted by {actor_id}")

    # --- Videos ---

    def _check_category(self, category_id) -> Optional[UUID]:
        if category_id is None:
            return None
        category_uuid = parse_uuid(category_id)
        if category_uuid is None or self.repo.get_category(category_uuid) is None:
            raise NotFoundError("Category", category_id)
        return category_uuid

    def publish_upload(self, actor_id: str, data: dict, stream: BinaryIO, filename: str):
        """
        Stores an uploaded file and creates its video row.
        Ownership is checked before anything touches the disk; the stored
        file is removed again if the row cannot be created.
        """
        channel = self._require_channel(data.get("channel_id"))
        self._require_owner(actor_id, channel)
        category_id = self._check_category(data.get("category_id"))

        reference = self.store.save_upload(stream, filename)
        try:
            video = self.repo.create_video({
                **data,
                "channel_id": channel.id,
                "category_id": category_id,
                "video_url": reference,
            })
        except Exception:
            self.store.delete(reference)
            raise

        logger.info(f"Video {video.id} uploaded to channel {channel.id} ({reference})")
        return video

    def get_video(self, video_id):
        return self._require_video(video_id)

    def find_local_video(self, video_id):
        """Like get_video, but returns None instead of raising."""
        video_uuid = parse_uuid(video_id)
        return self.repo.get_video(video_uuid) if video_uuid else None

    def view_video(self, video_id) -> Union[object, ProviderVideo]:
        """
        Detail lookup for the watch page: a local video (its view counted),
        else the provider's metadata for the same id.
        """
        video = self.find_local_video(video_id)
        if video is not None:
            self.repo.increment_view_count(video.id)
            return self.repo.get_video(video.id)

        remote = self.provider.get_video(str(video_id))
        if remote is None:
            raise NotFoundError("Video", video_id)
        return remote

    def update_video(self, actor_id: str, video_id, updates: dict):
        video = self._require_video(video_id)
        self._require_owner(actor_id, self._require_channel(video.channel_id))
        if "category_id" in updates:
            updates = {**updates, "category_id": self._check_category(updates["category_id"])}
        return self.repo.update_video(video.id, updates)

    def delete_video(self, actor_id: str, video_id) -> None:
        video = self._require_video(video_id)
        self._require_owner(actor_id, self._require_channel(video.channel_id))
        self._discard_refs(self.repo.delete_video(video.id))
        logger.info(f"Video {video.id} deleted by {actor_id}")

    def list_trending_videos(self, page: Page) -> list:
        return self.repo.list_trending_videos(page)

    def list_liked_videos(self, page: Page) -> list:
        return self.repo.list_liked_videos(page)

    def browse_videos(self, page: Page, video_filter: VideoFilter) -> BrowseResult:
        """
        The /api/videos listing.
        A search returns local matches followed by the provider's page for the
        same query; the page tokens are the provider's. Other selectors are
        purely local.
        """
        if video_filter.search:
            local = self.repo.search_videos(video_filter.search, page)
            remote = self.provider.search_videos(video_filter.search, page.limit, video_filter.page_token)
            return BrowseResult(
                videos=[*local, *remote.videos],
                next_page_token=remote.next_page_token,
                prev_page_token=remote.prev_page_token,
            )

        if video_filter.channel_id:
            channel_uuid = parse_uuid(video_filter.channel_id)
            videos = self.repo.list_videos_by_channel(channel_uuid, page) if channel_uuid else []
        elif video_filter.category_id:
            category_uuid = parse_uuid(video_filter.category_id)
            videos = self.repo.list_videos_by_category(category_uuid, page) if category_uuid else []
        else:
            videos = self.repo.list_videos(page)
        return BrowseResult(videos=videos)

    # --- Likes ---

    def like_video(self, video_id, actor_id: Optional[str] = None, is_like: bool = True) -> int:
        video = self._require_video(video_id)
        if actor_id is None:
            return self.repo.increment_like_count(video.id)
        return self.repo.set_like(actor_id, video.id, is_like)

    # --- Subscriptions ---

    def subscribe(self, actor_id: str, channel_id) -> bool:
        channel = self._require_channel(channel_id)
        return self.repo.add_subscription(actor_id, channel.id)

    def unsubscribe(self, actor_id: str, channel_id) -> bool:
        channel = self._require_channel(channel_id)
        return self.repo.remove_subscription(actor_id, channel.id)

    def list_subscriptions(self, actor_id: str) -> list:
        return self.repo.list_subscribed_channels(actor_id)

    # --- Watch history ---

    def record_watch(self, actor_id: str, video_id, watch_time: int = 0) -> None:
        if watch_time < 0:
            raise ValueError(f"watch_time cannot be negative: {watch_time}")
        video = self._require_video(video_id)
        self.repo.record_watch(actor_id, video.id, watch_time)

    def list_history(self, actor_id: str, page: Page) -> List[WatchEntry]:
        return self.repo.list_history(actor_id, page)

    # --- Categories ---

    def create_category(self, data: dict):
        return self.repo.create_category(data)

    def list_categories(self) -> list:
        return self.repo.list_categories()

    def get_category(self, category_id):
        category_uuid = parse_uuid(category_id)
        category = self.repo.get_category(category_uuid) if category_uuid else None
        if category is None:
            raise NotFoundError("Category", category_id)
        return category


# Singleton Instance for easy import
catalog = CatalogService()
