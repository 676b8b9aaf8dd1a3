from typing import List

from fastapi import APIRouter, Depends, Query

from vidshare.api.deps import require_user_id
from vidshare.api.schemas import ChannelOut, HistoryEntryOut, UserOut, VideoOut
from vidshare.features.catalog.domain.models import MAX_PAGE_SIZE, Page
from vidshare.features.catalog.service.api import catalog

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/auth/user", response_model=UserOut)
def get_current_user(user_id: str = Depends(require_user_id)):
    return catalog.get_user(user_id)


@router.get("/subscriptions", response_model=List[ChannelOut])
def list_subscriptions(user_id: str = Depends(require_user_id)):
    return catalog.list_subscriptions(user_id)


@router.get("/history", response_model=List[HistoryEntryOut])
def list_history(
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(require_user_id),
):
    entries = catalog.list_history(user_id, Page(limit=limit, offset=offset))
    return [
        HistoryEntryOut(
            video=VideoOut.of(entry.video),
            watch_time=entry.watch_time,
            last_watched_at=entry.last_watched_at,
        )
        for entry in entries
    ]
