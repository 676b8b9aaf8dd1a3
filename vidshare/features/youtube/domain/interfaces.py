from abc import ABC, abstractmethod
from typing import Optional
from .models import ProviderSearchPage, ProviderVideo, RemoteVideoReference, TrackSources


class IVideoProvider(ABC):
    """
    Contract for the external video platform's metadata API.
    Implementations never raise for lookup failures; they log and return
    an empty result so callers can fall back to local data.
    """

    @abstractmethod
    def get_video(self, video_id: str) -> Optional[ProviderVideo]:
        pass

    @abstractmethod
    def resolve(self, video_id: str) -> Optional[RemoteVideoReference]:
        """Returns a playable reference for the id, or None if it does not exist."""
        pass

    @abstractmethod
    def search_videos(self, query: str, max_results: int, page_token: Optional[str] = None) -> ProviderSearchPage:
        pass


class IStreamLocator(ABC):
    """
    Contract for turning a watch URL into direct stream URLs.
    """

    @abstractmethod
    def locate_tracks(self, watch_url: str) -> TrackSources:
        """
        Picks the best video-only and best audio-only streams.

        Raises:
            RuntimeError: If the page cannot be read or lacks separate tracks.
        """
        pass
