from abc import ABC, abstractmethod
from .models import TranscodeRequest

class IRenditionEncoder(ABC):
    """
    Contract for the transcoding engine.
    """

    @abstractmethod
    def encode(self, request: TranscodeRequest) -> None:
        """
        Renders the source video at the requested rendition height.

        Raises:
            RuntimeError: If the underlying encoder fails.
        """
        pass
