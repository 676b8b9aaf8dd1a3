import logging
from pathlib import Path
from typing import Optional

import aiofiles
import httpx

from vidshare.core.config.settings import settings
from vidshare.features.youtube.domain.models import TrackSource
from ..domain.interfaces import ITrackFetcher

logger = logging.getLogger(__name__)


class HttpxTrackFetcher(ITrackFetcher):
    """
    Streams a track to disk with httpx, chunk by chunk, so memory use does
    not grow with the size of the video.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        chunk_bytes: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.chunk_bytes = chunk_bytes or settings.DOWNLOAD_CHUNK_BYTES
        self.transport = transport

    async def fetch(self, track: TrackSource, destination: Path) -> int:
        written = 0
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                async with client.stream("GET", track.url, headers=track.http_headers) as response:
                    response.raise_for_status()
                    async with aiofiles.open(destination, "wb") as out:
                        async for chunk in response.aiter_bytes(self.chunk_bytes):
                            await out.write(chunk)
                            written += len(chunk)
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} while fetching format {track.format_id}")
            raise RuntimeError(f"Track transfer failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Transfer error while fetching format {track.format_id}: {e}")
            raise RuntimeError(f"Track transfer failed: {e}") from e

        if written == 0:
            raise RuntimeError(f"Track transfer for format {track.format_id} returned no data")

        logger.info(f"Fetched format {track.format_id} into {destination.name} ({written} bytes)")
        return written
