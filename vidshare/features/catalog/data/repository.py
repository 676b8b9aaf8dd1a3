from typing import List, Optional
from uuid import UUID
from sqlalchemy import desc, asc, case, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from vidshare.core.database.connection import SessionLocal
from .sql_models import (
    CategoryModel, ChannelModel, SubscriptionModel, UserModel, VideoLikeModel, VideoModel, WatchHistoryModel,
    utc_now,
)
from ..domain.interfaces import ICatalogRepository
from ..domain.models import Page, WatchEntry

USER_PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def _stored_refs(video: VideoModel) -> List[str]:
    refs = [video.video_url] if video.video_url else []
    refs.extend((video.processed_urls or {}).values())
    return refs


class SqlCatalogRepo(ICatalogRepository):

    # --- Users ---

    def upsert_user(self, user_id: str, **profile) -> UserModel:
        with SessionLocal() as db:
            user = db.get(UserModel, user_id)
            if user is None:
                user = UserModel(id=user_id)
                db.add(user)
            for key in USER_PROFILE_FIELDS:
                if profile.get(key) is not None:
                    setattr(user, key, profile[key])
            db.commit()
            db.refresh(user)
            return user

    def get_user(self, user_id: str) -> Optional[UserModel]:
        with SessionLocal() as db:
            return db.get(UserModel, user_id)

    # --- Channels ---

    def create_channel(self, data: dict) -> ChannelModel:
        with SessionLocal() as db:
            channel = ChannelModel(**data)
            db.add(channel)
            db.commit()
            db.refresh(channel)
            return channel

    def get_channel(self, channel_id: UUID) -> Optional[ChannelModel]:
        with SessionLocal() as db:
            return db.get(ChannelModel, channel_id)

    def list_channels(self) -> List[ChannelModel]:
        with SessionLocal() as db:
            return db.query(ChannelModel).order_by(desc(ChannelModel.created_at)).all()

    def list_featured_channels(self, limit: int) -> List[ChannelModel]:
        with SessionLocal() as db:
            return (
                db.query(ChannelModel)
                .order_by(desc(ChannelModel.subscriber_count), desc(ChannelModel.created_at))
                .limit(limit)
                .all()
            )

    def update_channel(self, channel_id: UUID, updates: dict) -> Optional[ChannelModel]:
        with SessionLocal() as db:
            channel = db.get(ChannelModel, channel_id)
            if channel is None:
                return None
            for key, value in updates.items():
                setattr(channel, key, value)
            db.commit()
            db.refresh(channel)
            return channel

    def delete_channel(self, channel_id: UUID) -> List[str]:
        with SessionLocal() as db:
            channel = db.get(ChannelModel, channel_id)
            if channel is None:
                return []
            refs = [ref for video in channel.videos for ref in _stored_refs(video)]
            db.delete(channel)
            db.commit()
            return refs

    # --- Videos ---

    def create_video(self, data: dict) -> VideoModel:
        with SessionLocal() as db:
            try:
                video = VideoModel(**data)
                db.add(video)
                db.commit()
                db.refresh(video)
                return video
            except Exception as e:
                db.rollback()
                raise e

    def get_video(self, video_id: UUID) -> Optional[VideoModel]:
        with SessionLocal() as db:
            return db.get(VideoModel, video_id)

    def _public_videos(self, db):
        return db.query(VideoModel).filter(VideoModel.is_public.is_(True))

    def list_videos(self, page: Page) -> List[VideoModel]:
        with SessionLocal() as db:
            return (
                self._public_videos(db)
                .order_by(desc(VideoModel.created_at))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )

    def list_trending_videos(self, page: Page) -> List[VideoModel]:
        with SessionLocal() as db:
            return (
                self._public_videos(db)
                .order_by(desc(VideoModel.view_count), desc(VideoModel.created_at))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )

    def list_liked_videos(self, page: Page) -> List[VideoModel]:
        with SessionLocal() as db:
            return (
                self._public_videos(db)
                .filter(VideoModel.like_count > 0)
                .order_by(desc(VideoModel.like_count))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )

    def list_videos_by_channel(self, channel_id: UUID, page: Page) -> List[VideoModel]:
        with SessionLocal() as db:
            return (
                self._public_videos(db)
                .filter(VideoModel.channel_id == channel_id)
                .order_by(desc(VideoModel.created_at))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )

    def list_videos_by_category(self, category_id: UUID, page: Page) -> List[VideoModel]:
        with SessionLocal() as db:
            return (
                self._public_videos(db)
                .filter(VideoModel.category_id == category_id)
                .order_by(desc(VideoModel.created_at))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )

    def search_videos(self, query: str, page: Page) -> List[VideoModel]:
        pattern = f"%{query}%"
        with SessionLocal() as db:
            return (
                self._public_videos(db)
                .filter(or_(VideoModel.title.ilike(pattern), VideoModel.description.ilike(pattern)))
                .order_by(desc(VideoModel.created_at))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )

    def update_video(self, video_id: UUID, updates: dict) -> Optional[VideoModel]:
        with SessionLocal() as db:
            video = db.get(VideoModel, video_id)
            if video is None:
                return None
            for key, value in updates.items():
                setattr(video, key, value)
            db.commit()
            db.refresh(video)
            return video

    def delete_video(self, video_id: UUID) -> List[str]:
        with SessionLocal() as db:
            video = db.get(VideoModel, video_id)
            if video is None:
                return []
            refs = _stored_refs(video)
            db.delete(video)
            db.commit()
            return refs

    def increment_view_count(self, video_id: UUID) -> None:
        with SessionLocal() as db:
            db.query(VideoModel).filter(VideoModel.id == video_id).update(
                {VideoModel.view_count: VideoModel.view_count + 1},
                synchronize_session=False,
            )
            db.commit()

    # --- Likes ---

    def _bump_like_count(self, db, video_id: UUID, delta: int) -> int:
        if delta:
            bumped = VideoModel.like_count + delta
            db.query(VideoModel).filter(VideoModel.id == video_id).update(
                {VideoModel.like_count: case((bumped < 0, 0), else_=bumped)},
                synchronize_session=False,
            )
        db.commit()
        return db.query(VideoModel.like_count).filter(VideoModel.id == video_id).scalar() or 0

    def increment_like_count(self, video_id: UUID) -> int:
        with SessionLocal() as db:
            return self._bump_like_count(db, video_id, 1)

    def set_like(self, user_id: str, video_id: UUID, is_like: bool) -> int:
        """
        Adjusts like_count by the change this user's vote causes, so counts
        from anonymous likes are preserved.
        """
        with SessionLocal() as db:
            existing = (
                db.query(VideoLikeModel)
                .filter(VideoLikeModel.user_id == user_id, VideoLikeModel.video_id == video_id)
                .first()
            )
            was_like = existing is not None and existing.is_like
            if existing is None:
                db.add(VideoLikeModel(user_id=user_id, video_id=video_id, is_like=is_like))
            else:
                existing.is_like = is_like
            db.flush()
            return self._bump_like_count(db, video_id, int(is_like) - int(was_like))

    # --- Subscriptions ---

    def _bump_subscriber_count(self, db, channel_id: UUID, delta: int) -> None:
        bumped = ChannelModel.subscriber_count + delta
        db.query(ChannelModel).filter(ChannelModel.id == channel_id).update(
            {ChannelModel.subscriber_count: case((bumped < 0, 0), else_=bumped)},
            synchronize_session=False,
        )

    def add_subscription(self, user_id: str, channel_id: UUID) -> bool:
        with SessionLocal() as db:
            exists = (
                db.query(SubscriptionModel)
                .filter(SubscriptionModel.user_id == user_id, SubscriptionModel.channel_id == channel_id)
                .first()
            )
            if exists:
                return False
            db.add(SubscriptionModel(user_id=user_id, channel_id=channel_id))
            try:
                db.flush()
            except IntegrityError:
                # A concurrent request subscribed first
                db.rollback()
                return False
            self._bump_subscriber_count(db, channel_id, 1)
            db.commit()
            return True

    def remove_subscription(self, user_id: str, channel_id: UUID) -> bool:
        with SessionLocal() as db:
            removed = (
                db.query(SubscriptionModel)
                .filter(SubscriptionModel.user_id == user_id, SubscriptionModel.channel_id == channel_id)
                .delete(synchronize_session=False)
            )
            if not removed:
                return False
            self._bump_subscriber_count(db, channel_id, -1)
            db.commit()
            return True

    def list_subscribed_channels(self, user_id: str) -> List[ChannelModel]:
        with SessionLocal() as db:
            return (
                db.query(ChannelModel)
                .join(SubscriptionModel, SubscriptionModel.channel_id == ChannelModel.id)
                .filter(SubscriptionModel.user_id == user_id)
                .order_by(desc(SubscriptionModel.created_at))
                .all()
            )

    # --- Watch history ---

    def record_watch(self, user_id: str, video_id: UUID, watch_time: int) -> None:
        with SessionLocal() as db:
            entry = (
                db.query(WatchHistoryModel)
                .filter(WatchHistoryModel.user_id == user_id, WatchHistoryModel.video_id == video_id)
                .first()
            )
            if entry is None:
                entry = WatchHistoryModel(user_id=user_id, video_id=video_id)
                db.add(entry)
            entry.watch_time = watch_time
            entry.last_watched_at = utc_now()
            db.commit()

    def list_history(self, user_id: str, page: Page) -> List[WatchEntry]:
        with SessionLocal() as db:
            rows = (
                db.query(WatchHistoryModel)
                .options(joinedload(WatchHistoryModel.video))
                .filter(WatchHistoryModel.user_id == user_id)
                .order_by(desc(WatchHistoryModel.last_watched_at))
                .limit(page.limit)
                .offset(page.offset)
                .all()
            )
            return [WatchEntry(row.video, row.watch_time, row.last_watched_at) for row in rows]

    # --- Categories ---

    def create_category(self, data: dict) -> CategoryModel:
        with SessionLocal() as db:
            category = CategoryModel(**data)
            db.add(category)
            db.commit()
            db.refresh(category)
            return category

    def list_categories(self) -> List[CategoryModel]:
        with SessionLocal() as db:
            return db.query(CategoryModel).order_by(asc(CategoryModel.name)).all()

    def get_category(self, category_id: UUID) -> Optional[CategoryModel]:
        with SessionLocal() as db:
            return db.get(CategoryModel, category_id)
