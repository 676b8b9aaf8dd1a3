import asyncio

import httpx
import pytest

from vidshare.features.downloads.data.track_fetcher import HttpxTrackFetcher
from vidshare.features.youtube.domain.models import TrackSource


def _fetcher(handler):
    return HttpxTrackFetcher(chunk_bytes=3, transport=httpx.MockTransport(handler))


def test_fetch_streams_body_to_disk(tmp_path):
    seen = {}

    def handler(request):
        seen["user_agent"] = request.headers.get("user-agent")
        return httpx.Response(200, content=b"0123456789")

    destination = tmp_path / "video.track"
    track = TrackSource(url="https://cdn.test/v", format_id="137", http_headers={"User-Agent": "yt-client"})

    written = asyncio.run(_fetcher(handler).fetch(track, destination))

    assert written == 10
    assert destination.read_bytes() == b"0123456789"
    assert seen["user_agent"] == "yt-client"


def test_fetch_http_error(tmp_path):
    fetcher = _fetcher(lambda request: httpx.Response(403))

    with pytest.raises(RuntimeError, match="HTTP 403"):
        asyncio.run(fetcher.fetch(TrackSource(url="https://cdn.test/v"), tmp_path / "v.track"))


def test_fetch_empty_body(tmp_path):
    fetcher = _fetcher(lambda request: httpx.Response(200, content=b""))

    with pytest.raises(RuntimeError, match="no data"):
        asyncio.run(fetcher.fetch(TrackSource(url="https://cdn.test/v"), tmp_path / "v.track"))


def test_fetch_connection_error(tmp_path):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RuntimeError, match="Track transfer failed"):
        asyncio.run(_fetcher(handler).fetch(TrackSource(url="https://cdn.test/v"), tmp_path / "v.track"))


def test_fetch_writes_through_async_file_io(tmp_path, monkeypatch):
    from vidshare.features.downloads.data import track_fetcher

    opened = []
    real_open = track_fetcher.aiofiles.open

    def recording_open(path, mode="r", **kwargs):
        opened.append((path, mode))
        return real_open(path, mode, **kwargs)

    monkeypatch.setattr(track_fetcher.aiofiles, "open", recording_open)
    destination = tmp_path / "audio.track"
    track = TrackSource(url="https://cdn.test/a", format_id="140")

    asyncio.run(_fetcher(lambda request: httpx.Response(200, content=b"abcdefg")).fetch(track, destination))

    assert opened == [(destination, "wb")]
    assert destination.read_bytes() == b"abcdefg"
