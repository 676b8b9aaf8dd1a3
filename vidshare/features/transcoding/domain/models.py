from dataclasses import dataclass
from typing import Iterable, List
from vidshare.core.shared_types import MediaFile

@dataclass(frozen=True)
class Rendition:
    """
    One output quality, labelled the way players show it ("720p").
    """
    height: int

    def __post_init__(self):
        if self.height <= 0 or self.height % 2:
            raise ValueError(f"Rendition height must be a positive even number, got {self.height}")

    @property
    def label(self) -> str:
        return f"{self.height}p"

def renditions_for(heights: Iterable[int]) -> List[Rendition]:
    """Deduplicated renditions, lowest quality first."""
    return [Rendition(h) for h in sorted(set(int(h) for h in heights))]

@dataclass(frozen=True)
class TranscodeRequest:
    source_video: MediaFile
    output_video: MediaFile
    rendition: Rendition

    def __post_init__(self):
        if not self.source_video.exists():
            raise FileNotFoundError(f"Source video missing: {self.source_video.path}")
