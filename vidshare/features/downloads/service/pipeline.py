import asyncio
import logging
import mimetypes
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

from vidshare.core.config.settings import settings
from vidshare.features.catalog.service.api import CatalogService, catalog as default_catalog
from vidshare.features.media_store.data.local_fs import media_store as default_media_store
from vidshare.features.media_store.domain.interfaces import IMediaStore
from vidshare.features.youtube.domain.interfaces import IStreamLocator, IVideoProvider
from vidshare.features.youtube.domain.models import RemoteVideoReference
from vidshare.features.youtube.service.api import stream_locator, youtube
from ..data.ffmpeg_adapter import FFmpegMuxAdapter
from ..data.track_fetcher import HttpxTrackFetcher
from ..domain.errors import FetchFailedError, ProcessingFailedError, VideoNotFoundError
from ..domain.interfaces import IMultiplexer, ITrackFetcher
from ..domain.models import (
    DeliverableFile, LocalVideoSource, RemoteVideoSource, RemuxJob, RemuxStatus, VideoSource, download_name,
)

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "video/mp4"


async def _run_blocking(func, *args):
    """
    Runs func in a worker thread. If the caller is cancelled meanwhile, the
    thread is still waited for, so nothing it writes can appear after the
    caller's cleanup has run.
    """
    task = asyncio.ensure_future(asyncio.to_thread(func, *args))
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        await asyncio.wait([task])
        raise


class RemuxPipeline:
    """
    Produces one downloadable MP4 for a video id.

    Local uploads are served as stored. Remote videos go through
    fetch (both tracks, concurrently) -> multiplex -> deliver, with every
    temporary file owned by a RemuxJob whose release() is registered before
    the first byte is written.
    """

    def __init__(
        self,
        catalog: Optional[CatalogService] = None,
        provider: Optional[IVideoProvider] = None,
        locator: Optional[IStreamLocator] = None,
        fetcher: Optional[ITrackFetcher] = None,
        multiplexer: Optional[IMultiplexer] = None,
        store: Optional[IMediaStore] = None,
        work_dir: Optional[Path] = None,
    ):
        self.catalog = catalog or default_catalog
        self.provider = provider or youtube
        self.locator = locator or stream_locator
        self.fetcher = fetcher or HttpxTrackFetcher()
        self.multiplexer = multiplexer or FFmpegMuxAdapter()
        self.store = store or default_media_store
        self.work_dir = Path(work_dir or settings.WORK_DIR)

    async def produce_download(self, video_id: str) -> DeliverableFile:
        """
        Raises:
            VideoNotFoundError: Nothing local or remote matches the id.
            FetchFailedError: A track could not be located or transferred.
            ProcessingFailedError: The multiplex step failed.
        """
        source = await asyncio.to_thread(self.locate_source, video_id)

        if isinstance(source, LocalVideoSource):
            logger.info(f"Serving stored file for video {video_id}")
            media_type, _ = mimetypes.guess_type(source.path.name)
            return DeliverableFile(
                path=source.path,
                download_name=download_name(source.title),
                media_type=media_type or DEFAULT_MEDIA_TYPE,
            )

        return await self._remux(video_id, source.reference)

    def locate_source(self, video_id: str) -> VideoSource:
        """
        A video with a stored upload is always served from the store; the
        provider is asked only when there is none.
        """
        video = self.catalog.find_local_video(video_id)
        if video is not None and video.video_url:
            try:
                path = self.store.resolve(video.video_url)
            except ValueError:
                logger.error(f"Video {video_id} has an invalid stored reference: {video.video_url}")
                raise VideoNotFoundError(video_id)
            if not path.is_file():
                logger.error(f"Stored file for video {video_id} is missing: {video.video_url}")
                raise VideoNotFoundError(video_id)
            return LocalVideoSource(path=path, title=video.title)

        reference = self.provider.resolve(video_id)
        if reference is None:
            logger.info(f"Video {video_id} not found locally or remotely")
            raise VideoNotFoundError(video_id)
        return RemoteVideoSource(reference=reference)

    async def _remux(self, video_id: str, reference: RemoteVideoReference) -> DeliverableFile:
        job = RemuxJob.allocate(video_id, reference, self.work_dir)
        logger.info(f"[{job.job_key}] Remux job started for video {video_id}")

        with ExitStack() as scope:
            scope.callback(job.release)
            try:
                await self._fetch_tracks(job)
                await self._multiplex(job)
            except BaseException:
                job.status = RemuxStatus.FAILED
                raise
            job.advance(RemuxStatus.DONE)
            # Success: the response now owns the cleanup.
            handoff = scope.pop_all()

        return DeliverableFile(
            path=job.output.path,
            download_name=download_name(reference.title),
            on_close=handoff.close,
        )

    async def _fetch_tracks(self, job: RemuxJob) -> None:
        try:
            tracks = await _run_blocking(self.locator.locate_tracks, job.reference.url)
        except Exception as e:
            logger.error(f"[{job.job_key}] Stream lookup failed for video {job.video_id}: {e}")
            raise FetchFailedError(job.video_id, "stream lookup") from e

        # Join point: both transfers settle before anything is decided, so a
        # failed job never deletes a file the other transfer is still writing.
        results = await asyncio.gather(
            self.fetcher.fetch(tracks.video, job.video_track.path),
            self.fetcher.fetch(tracks.audio, job.audio_track.path),
            return_exceptions=True,
        )
        failures = [
            (name, result)
            for name, result in zip(("video track", "audio track"), results)
            if isinstance(result, BaseException)
        ]
        for name, error in failures:
            logger.error(f"[{job.job_key}] Fetching {name} failed for video {job.video_id}: {error}")
        if failures:
            name, error = failures[0]
            raise FetchFailedError(job.video_id, f"{name} fetch") from error

    async def _multiplex(self, job: RemuxJob) -> None:
        job.advance(RemuxStatus.MULTIPLEXING)
        try:
            await _run_blocking(self.multiplexer.multiplex, job.video_track, job.audio_track, job.output)
        except Exception as e:
            logger.error(f"[{job.job_key}] Multiplex failed for video {job.video_id}: {e}")
            raise ProcessingFailedError(job.video_id, "multiplex") from e

        if not job.output.exists():
            logger.error(f"[{job.job_key}] Multiplex reported success but wrote no output")
            raise ProcessingFailedError(job.video_id, "multiplex")


# Singleton Instance for easy import
remux_pipeline = RemuxPipeline()
