import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, Response, UploadFile

from vidshare.api.deps import get_current_user_id, require_user_id
from vidshare.api.schemas import BrowseOut, LikeOut, LikeRequest, VideoOut, VideoUpdate, WatchRequest
from vidshare.core.config.settings import settings
from vidshare.core.jobs.manager import job_manager
from vidshare.core.jobs.types import JobType
from vidshare.features.catalog.domain.models import MAX_PAGE_SIZE, Page, VideoFilter
from vidshare.features.catalog.service.api import catalog
from vidshare.features.media_store.data.local_fs import LocalMediaStore
from vidshare.features.media_store.domain.models import MediaKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["videos"])


def _page(limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE), offset: int = Query(0, ge=0)) -> Page:
    return Page(limit=limit, offset=offset)


def _split_tags(tags: Optional[str]) -> List[str]:
    return [t.strip() for t in (tags or "").split(",") if t.strip()]


@router.get("", response_model=BrowseOut)
def browse_videos(
    page: Page = Depends(_page),
    channel_id: Optional[str] = Query(None, alias="channelId"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    search: Optional[str] = Query(None),
    page_token: Optional[str] = Query(None, alias="pageToken"),
):
    result = catalog.browse_videos(page, VideoFilter(
        search=search or None,
        channel_id=channel_id,
        category_id=category_id,
        page_token=page_token,
    ))
    return BrowseOut(
        videos=[VideoOut.of(v) for v in result.videos],
        next_page_token=result.next_page_token,
        prev_page_token=result.prev_page_token,
    )


@router.get("/trending", response_model=List[VideoOut])
def list_trending_videos(page: Page = Depends(_page)):
    return [VideoOut.of(v) for v in catalog.list_trending_videos(page)]


@router.get("/liked", response_model=List[VideoOut])
def list_liked_videos(page: Page = Depends(_page)):
    return [VideoOut.of(v) for v in catalog.list_liked_videos(page)]


@router.get("/{video_id}", response_model=VideoOut)
def get_video(video_id: str):
    return VideoOut.of(catalog.view_video(video_id))


@router.post("", response_model=VideoOut, status_code=201)
def upload_video(
    background_tasks: BackgroundTasks,
    video: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=200),
    channel_id: str = Form(..., alias="channelId"),
    description: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    thumbnail_url: Optional[str] = Form(None, alias="thumbnailUrl"),
    tags: Optional[str] = Form(None),
    user_id: str = Depends(require_user_id),
):
    if LocalMediaStore.determine_media_kind(video.filename, video.content_type) != MediaKind.VIDEO:
        raise HTTPException(status_code=400, detail="Only video files are allowed")

    created = catalog.publish_upload(user_id, {
        "title": title,
        "description": description,
        "channel_id": channel_id,
        "category_id": category_id or None,
        "thumbnail_url": thumbnail_url,
        "tags": _split_tags(tags),
    }, video.file, video.filename)

    if settings.TRANSCODE_ON_UPLOAD:
        job_id = job_manager.submit_job(created.id, JobType.TRANSCODE)
        background_tasks.add_task(job_manager.run_job, job_id)

    return VideoOut.of(created)


@router.patch("/{video_id}", response_model=VideoOut)
def update_video(video_id: str, body: VideoUpdate, user_id: str = Depends(require_user_id)):
    return VideoOut.of(catalog.update_video(user_id, video_id, body.model_dump(exclude_unset=True)))


@router.delete("/{video_id}", status_code=204)
def delete_video(video_id: str, user_id: str = Depends(require_user_id)):
    catalog.delete_video(user_id, video_id)
    return Response(status_code=204)


@router.post("/{video_id}/like", response_model=LikeOut)
def like_video(
    video_id: str,
    body: Optional[LikeRequest] = None,
    user_id: Optional[str] = Depends(get_current_user_id),
):
    is_like = body.is_like if body is not None else True
    return LikeOut(like_count=catalog.like_video(video_id, actor_id=user_id, is_like=is_like))


@router.post("/{video_id}/watch", status_code=204)
def record_watch(video_id: str, body: WatchRequest, user_id: str = Depends(require_user_id)):
    catalog.record_watch(user_id, video_id, body.watch_time)
    return Response(status_code=204)
