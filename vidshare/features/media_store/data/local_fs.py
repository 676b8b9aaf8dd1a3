import logging
import mimetypes
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Optional, Tuple
from vidshare.core.config.settings import settings
from ..domain.interfaces import IMediaStore
from ..domain.models import MediaKind

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "uploads"
RENDITIONS_PREFIX = "renditions"
DEFAULT_VIDEO_EXTENSION = ".mp4"


class LocalMediaStore(IMediaStore):
    """
    Stores files below a single root:
        {root}/uploads/{first_2_chars}/{hex}.ext
        {root}/renditions/{video_key}/{label}.mp4
    The two-character sharding keeps directory sizes bounded.
    """

    def __init__(self, root: Optional[Path] = None, chunk_bytes: Optional[int] = None):
        self.root = Path(root or settings.DATA_DIR).resolve()
        self.chunk_bytes = chunk_bytes or settings.DOWNLOAD_CHUNK_BYTES

    def save_upload(self, stream: BinaryIO, original_filename: str) -> str:
        extension = Path(original_filename or "").suffix.lower() or DEFAULT_VIDEO_EXTENSION
        name = uuid.uuid4().hex
        reference = f"/{UPLOADS_PREFIX}/{name[:2]}/{name}{extension}"
        destination = self.resolve(reference)
        destination.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(destination, "wb") as out:
                shutil.copyfileobj(stream, out, self.chunk_bytes)
        except Exception:
            destination.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload '{original_filename}' as {reference} ({destination.stat().st_size} bytes)")
        return reference

    def resolve(self, reference: str) -> Path:
        candidate = (self.root / reference.lstrip("/")).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            raise ValueError(f"Reference escapes media store: {reference}")
        return candidate

    def allocate_rendition(self, video_key: str, label: str) -> Tuple[str, Path]:
        reference = f"/{RENDITIONS_PREFIX}/{video_key}/{label}.mp4"
        path = self.resolve(reference)
        path.parent.mkdir(parents=True, exist_ok=True)
        return reference, path

    def delete(self, reference: str) -> bool:
        try:
            path = self.resolve(reference)
        except ValueError:
            logger.warning(f"Refusing to delete outside media store: {reference}")
            return False
        if not path.is_file():
            return False
        path.unlink()
        return True

    @staticmethod
    def determine_media_kind(filename: str, content_type: Optional[str] = None) -> MediaKind:
        mime = mimetypes.guess_type(filename or "")[0] or content_type
        if not mime:
            return MediaKind.UNKNOWN

        if mime.startswith("video"):
            return MediaKind.VIDEO
        if mime.startswith("audio"):
            return MediaKind.AUDIO
        if mime.startswith("image"):
            return MediaKind.IMAGE

        return MediaKind.UNKNOWN


# Singleton Instance for easy import
media_store = LocalMediaStore()
