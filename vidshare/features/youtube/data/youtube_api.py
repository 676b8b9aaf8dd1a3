import logging
from typing import List, Optional

import httpx

from vidshare.core.config.settings import settings
from ..domain.interfaces import IVideoProvider
from ..domain.models import ProviderSearchPage, ProviderVideo, RemoteVideoReference

logger = logging.getLogger(__name__)


class YouTubeDataClient(IVideoProvider):
    """
    Concrete IVideoProvider backed by the YouTube Data API v3.

    Every public method swallows transport and API errors after logging them:
    the platform integration is optional and must never take down a local
    listing or lookup.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = settings.YOUTUBE_API_KEY if api_key is None else api_key
        self.client = httpx.Client(
            base_url=base_url or settings.YOUTUBE_API_URL,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get(self, endpoint: str, params: dict) -> dict:
        params = {key: value for key, value in params.items() if value is not None}
        params["key"] = self.api_key
        response = self.client.get(endpoint, params=params)
        response.raise_for_status()
        return response.json()

    def _find_channel_id(self, query: str) -> Optional[str]:
        data = self._get("/search", {"part": "snippet", "q": query, "type": "channel"})
        items = data.get("items") or []
        if not items:
            return None
        return (items[0].get("snippet") or {}).get("channelId")

    def _list_details(self, video_ids: List[str]) -> List[ProviderVideo]:
        if not video_ids:
            return []
        data = self._get("/videos", {"part": "snippet,contentDetails", "id": ",".join(video_ids)})
        return [self._to_provider_video(item) for item in data.get("items") or []]

    @staticmethod
    def _to_provider_video(item: dict) -> ProviderVideo:
        snippet = item.get("snippet") or {}
        thumbnails = snippet.get("thumbnails") or {}
        return ProviderVideo(
            youtube_video_id=item.get("id") or "",
            title=snippet.get("title") or "",
            description=snippet.get("description") or "",
            thumbnail_url=(thumbnails.get("high") or {}).get("url") or "",
            channel_id=snippet.get("channelId") or "",
        )

    def get_video(self, video_id: str) -> Optional[ProviderVideo]:
        if not self.enabled:
            logger.debug("YouTube lookup skipped: no API key configured")
            return None
        try:
            videos = self._list_details([video_id])
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching YouTube video {video_id}: {e}")
            return None
        return videos[0] if videos else None

    def resolve(self, video_id: str) -> Optional[RemoteVideoReference]:
        video = self.get_video(video_id)
        if video is None or not video.youtube_video_id:
            return None
        return RemoteVideoReference(
            video_id=video.youtube_video_id,
            url=settings.YOUTUBE_WATCH_URL.format(video_id=video.youtube_video_id),
            title=video.title,
        )

    def search_videos(self, query: str, max_results: int, page_token: Optional[str] = None) -> ProviderSearchPage:
        """
        Searches the newest uploads of the channel that best matches the query.
        """
        if not self.enabled:
            logger.debug("YouTube search skipped: no API key configured")
            return ProviderSearchPage()
        try:
            channel_id = self._find_channel_id(query)
            if not channel_id:
                return ProviderSearchPage()

            data = self._get("/search", {
                "part": "snippet",
                "channelId": channel_id,
                "maxResults": max_results,
                "order": "date",
                "type": "video",
                "pageToken": page_token,
            })
            video_ids = [
                (item.get("id") or {}).get("videoId")
                for item in data.get("items") or []
            ]
            videos = self._list_details([vid for vid in video_ids if vid])

            return ProviderSearchPage(
                videos=videos,
                next_page_token=data.get("nextPageToken") or None,
                prev_page_token=data.get("prevPageToken") or None,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error searching YouTube videos for '{query}': {e}")
            return ProviderSearchPage()
