import logging
from typing import List, Optional

import yt_dlp

from ..domain.interfaces import IStreamLocator
from ..domain.models import TrackSource, TrackSources

logger = logging.getLogger(__name__)

# Progressive HTTP(S) only; segmented protocols (m3u8, dash) cannot be fetched as one body.
DIRECT_PROTOCOLS = ("http", "https")


def _has(codec: Optional[str]) -> bool:
    return bool(codec) and codec != "none"


def _is_direct(fmt: dict) -> bool:
    return bool(fmt.get("url")) and fmt.get("protocol", "https") in DIRECT_PROTOCOLS


def pick_best_video(formats: List[dict]) -> Optional[dict]:
    candidates = [
        f for f in formats
        if _is_direct(f) and _has(f.get("vcodec")) and not _has(f.get("acodec"))
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda f: (f.get("height") or 0, f.get("fps") or 0, f.get("tbr") or 0))


def pick_best_audio(formats: List[dict]) -> Optional[dict]:
    candidates = [
        f for f in formats
        if _is_direct(f) and _has(f.get("acodec")) and not _has(f.get("vcodec"))
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda f: (f.get("abr") or f.get("tbr") or 0, f.get("asr") or 0))


def _to_track(fmt: dict) -> TrackSource:
    return TrackSource(
        url=fmt["url"],
        format_id=str(fmt.get("format_id") or ""),
        ext=fmt.get("ext") or "",
        http_headers=dict(fmt.get("http_headers") or {}),
    )


class YtDlpStreamLocator(IStreamLocator):
    """
    Concrete IStreamLocator using yt-dlp's extractor (metadata only, no download).
    """

    def __init__(self, ydl_options: Optional[dict] = None):
        self.ydl_options = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "noplaylist": True,
        }
        self.ydl_options.update(ydl_options or {})

    def locate_tracks(self, watch_url: str) -> TrackSources:
        logger.info(f"Locating streams for {watch_url}")
        try:
            with yt_dlp.YoutubeDL(self.ydl_options) as ydl:
                info = ydl.extract_info(watch_url, download=False)
        except yt_dlp.utils.DownloadError as e:
            logger.error(f"yt-dlp could not read {watch_url}: {e}")
            raise RuntimeError(f"Stream lookup failed: {e}") from e

        formats = (info or {}).get("formats") or []
        video = pick_best_video(formats)
        audio = pick_best_audio(formats)
        if video is None or audio is None:
            raise RuntimeError(f"No separate video/audio streams offered for {watch_url}")

        logger.info(f"Selected video format {video.get('format_id')} and audio format {audio.get('format_id')}")
        return TrackSources(video=_to_track(video), audio=_to_track(audio))
