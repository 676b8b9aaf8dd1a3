from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Tuple


class IMediaStore(ABC):
    """
    Contract for the on-disk media store.
    Files are addressed by opaque references ("/uploads/ab/ab12....mp4") that
    are safe to persist in the database and hand to clients.
    """

    @abstractmethod
    def save_upload(self, stream: BinaryIO, original_filename: str) -> str:
        """
        Copies the stream into the uploads area.
        Returns: the stored reference.
        """
        pass

    @abstractmethod
    def resolve(self, reference: str) -> Path:
        """
        Maps a stored reference to an absolute path inside the store.
        Raises ValueError for references that escape the store root.
        """
        pass

    @abstractmethod
    def allocate_rendition(self, video_key: str, label: str) -> Tuple[str, Path]:
        """Returns (reference, absolute_path) for a derived artifact."""
        pass

    @abstractmethod
    def delete(self, reference: str) -> bool:
        pass
