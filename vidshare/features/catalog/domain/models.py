from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def parse_uuid(value) -> Optional[UUID]:
    """
    Catalog ids are UUIDs, but the HTTP layer also receives provider ids
    (e.g. YouTube's 11-character ids) in the same slot. Anything that is not
    a UUID simply cannot name a local row.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Page:
    """
    Value Object for offset/limit pagination.
    """
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0

    def __post_init__(self):
        if self.limit < 1 or self.limit > MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset cannot be negative: {self.offset}")


@dataclass(frozen=True)
class VideoFilter:
    """
    What the video listing endpoint was asked for. At most one of the
    selectors is honoured, in the order search > channel > category.
    """
    search: Optional[str] = None
    channel_id: Optional[str] = None
    category_id: Optional[str] = None
    page_token: Optional[str] = None


@dataclass
class BrowseResult:
    """
    A page of videos. Local rows come first; provider items (if any) follow.
    Page tokens are the provider's and only advance the provider half.
    """
    videos: List[Any] = field(default_factory=list)
    next_page_token: Optional[str] = None
    prev_page_token: Optional[str] = None


@dataclass(frozen=True)
class WatchEntry:
    video: Any
    watch_time: int
    last_watched_at: datetime
