import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vidshare.api.responses import DeliverableResponse
from vidshare.features.downloads.domain.errors import DownloadFailedError, ProcessingFailedError, VideoNotFoundError
from vidshare.features.downloads.service.pipeline import RemuxPipeline, remux_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["downloads"])


def get_remux_pipeline() -> RemuxPipeline:
    return remux_pipeline


@router.get(
    "/{video_id}/download",
    description="Download a video as a single MP4 file",
    response_description="The MP4 file as an attachment",
)
async def download_video(video_id: str, pipeline: RemuxPipeline = Depends(get_remux_pipeline)):
    try:
        deliverable = await pipeline.produce_download(video_id)
    except VideoNotFoundError:
        return JSONResponse(status_code=404, content={"message": "Video not found"})
    except ProcessingFailedError as e:
        logger.error(f"Download of video {video_id} failed during {e.step}")
        return JSONResponse(status_code=500, content={"message": "Failed to process video"})
    except DownloadFailedError as e:
        logger.error(f"Download of video {video_id} failed during {e.step}")
        return JSONResponse(status_code=500, content={"message": "Failed to download video"})

    return DeliverableResponse(deliverable)
