from abc import ABC, abstractmethod
from pathlib import Path
from vidshare.core.shared_types import MediaFile
from vidshare.features.youtube.domain.models import TrackSource


class ITrackFetcher(ABC):
    """
    Contract for transferring one remote elementary stream to disk.
    """

    @abstractmethod
    async def fetch(self, track: TrackSource, destination: Path) -> int:
        """
        Streams the track into `destination`.

        Returns:
            Number of bytes written.

        Raises:
            RuntimeError: If the transfer does not complete.
        """
        pass


class IMultiplexer(ABC):
    """
    Contract for joining a video-only and an audio-only file.
    Abstracts away the underlying tool (FFmpeg) from the pipeline.
    """

    @abstractmethod
    def multiplex(self, video_track: MediaFile, audio_track: MediaFile, output: MediaFile) -> None:
        """
        Copies the video stream as-is, transcodes audio to AAC, writes MP4.

        Raises:
            FileNotFoundError: If an input track does not exist.
            RuntimeError: If the underlying process fails.
        """
        pass
