import logging
import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from vidshare.core.shared_types import MediaFile
from vidshare.features.youtube.domain.models import RemoteVideoReference

logger = logging.getLogger(__name__)

# Characters that are illegal in filenames on at least one major platform.
FORBIDDEN_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')
# Internal paths only ever see these characters, whatever the caller sent.
UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9_-]")

DOWNLOAD_EXTENSION = ".mp4"
FALLBACK_DOWNLOAD_STEM = "video"


def sanitize_filename(title: str) -> str:
    """Strips \\ / : * ? " < > | and leaves everything else untouched."""
    return FORBIDDEN_FILENAME_CHARS.sub("", title)


def download_name(title: Optional[str]) -> str:
    stem = sanitize_filename(title or "")
    if not stem.strip():
        stem = FALLBACK_DOWNLOAD_STEM
    return f"{stem}{DOWNLOAD_EXTENSION}"


# --- Where a video's bytes live (closed set) ---

@dataclass(frozen=True)
class LocalVideoSource:
    """An uploaded file already sitting in the media store."""
    path: Path
    title: str


@dataclass(frozen=True)
class RemoteVideoSource:
    """A video that only exists on the external platform."""
    reference: RemoteVideoReference


VideoSource = Union[LocalVideoSource, RemoteVideoSource]


class RemuxStatus(str, Enum):
    FETCHING = "fetching"
    MULTIPLEXING = "multiplexing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RemuxJob:
    """
    One download request's scratch state.
    Owned by the pipeline invocation that allocated it; its three files live
    in the work directory under a job-unique prefix and are removed by
    release(), which is safe to call any number of times.
    """
    video_id: str
    reference: RemoteVideoReference
    video_track: MediaFile
    audio_track: MediaFile
    output: MediaFile
    job_key: str
    status: RemuxStatus = RemuxStatus.FETCHING
    _released: bool = field(default=False, repr=False)

    @classmethod
    def allocate(cls, video_id: str, reference: RemoteVideoReference, work_dir: Path) -> "RemuxJob":
        stem = UNSAFE_PATH_CHARS.sub("", video_id)[:64] or "remote"
        job_key = f"{stem}_{uuid.uuid4().hex[:12]}"
        work_dir.mkdir(parents=True, exist_ok=True)
        return cls(
            video_id=video_id,
            reference=reference,
            video_track=MediaFile(work_dir / f"{job_key}_video.track"),
            audio_track=MediaFile(work_dir / f"{job_key}_audio.track"),
            output=MediaFile(work_dir / f"{job_key}_output{DOWNLOAD_EXTENSION}"),
            job_key=job_key,
        )

    @property
    def temp_files(self) -> Tuple[MediaFile, MediaFile, MediaFile]:
        return self.video_track, self.audio_track, self.output

    def advance(self, status: RemuxStatus) -> None:
        logger.info(f"[{self.job_key}] {self.status.value} -> {status.value}")
        self.status = status

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        removed = [f.path.name for f in self.temp_files if f.discard()]
        logger.info(f"[{self.job_key}] Released job ({self.status.value}); removed {removed or 'nothing'}")


@dataclass
class DeliverableFile:
    """
    The file handed to the HTTP layer.
    close() must be called once the response is over; it runs the owner's
    cleanup exactly once. Local uploads have no cleanup.
    """
    path: Path
    download_name: str
    media_type: str = "video/mp4"
    on_close: Optional[Callable[[], None]] = field(default=None, repr=False)
    _closed: bool = field(default=False, repr=False)

    @property
    def is_temporary(self) -> bool:
        return self.on_close is not None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.on_close is not None:
            self.on_close()
