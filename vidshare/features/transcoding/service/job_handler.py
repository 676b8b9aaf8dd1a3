import logging
from uuid import UUID

from vidshare.core.common.enums import ProcessingStatus
from vidshare.core.config.settings import settings
from vidshare.core.database.connection import SessionLocal
from vidshare.core.shared_types import MediaFile
from vidshare.features.catalog.data.sql_models import VideoModel
from vidshare.features.media_store.data.local_fs import media_store

from ..data.ffmpeg_adapter import FFmpegRenditionAdapter
from ..domain.interfaces import IRenditionEncoder
from ..domain.models import TranscodeRequest, renditions_for

logger = logging.getLogger(__name__)

class TranscodeHandler:
    """
    Worker for JobType.TRANSCODE.
    """

    def __init__(self, encoder: IRenditionEncoder = None, store=None):
        self.encoder = encoder or FFmpegRenditionAdapter()
        self.store = store or media_store

    def handle(self, video_id: UUID, params: dict) -> dict:
        renditions = renditions_for(params.get("heights") or settings.TRANSCODE_HEIGHTS)

        logger.info(f"Transcoding Video {video_id} to {[r.label for r in renditions]}")

        with SessionLocal() as db:
            # 1. Get Original Upload
            video = db.get(VideoModel, video_id)
            if not video:
                raise ValueError(f"Video {video_id} not found")
            if not video.video_url:
                raise ValueError(f"Video {video_id} has no stored upload to transcode")

            source = MediaFile(self.store.resolve(video.video_url))

            video.processing_status = ProcessingStatus.PROCESSING
            db.commit()

            # 2. Render each quality into the media store
            processed = {}
            try:
                for rendition in renditions:
                    reference, path = self.store.allocate_rendition(video.id.hex, rendition.label)
                    output = MediaFile(path)
                    try:
                        self.encoder.encode(TranscodeRequest(
                            source_video=source,
                            output_video=output,
                            rendition=rendition
                        ))
                    except Exception:
                        output.discard()
                        raise
                    processed[rendition.label] = reference
            except Exception:
                for reference in processed.values():
                    self.store.delete(reference)
                video.processing_status = ProcessingStatus.FAILED
                db.commit()
                raise

            # 3. Publish renditions on the video
            video.processed_urls = processed
            video.processing_status = ProcessingStatus.COMPLETED
            db.commit()

            logger.info(f"Video {video_id} transcoded: {processed}")

            return {"processed_urls": processed}
