import io
import pytest

from vidshare.core.common.enums import ProcessingStatus
from vidshare.features.catalog.service.api import CatalogService
from vidshare.features.media_store.data.local_fs import LocalMediaStore
from vidshare.features.transcoding.domain.interfaces import IRenditionEncoder
from vidshare.core.shared_types import MediaFile
from vidshare.features.transcoding.domain.models import Rendition, TranscodeRequest, renditions_for
from vidshare.features.transcoding.service.job_handler import TranscodeHandler


class FakeEncoder(IRenditionEncoder):
    def __init__(self, fail_at=None):
        self.fail_at = fail_at
        self.labels = []

    def encode(self, request):
        self.labels.append(request.rendition.label)
        request.output_video.path.write_bytes(b"rendition")
        if request.rendition.height == self.fail_at:
            raise RuntimeError("Transcoding failed")


@pytest.fixture
def store(tmp_path):
    return LocalMediaStore(root=tmp_path / "media")


@pytest.fixture
def video(store):
    service = CatalogService(store=store)
    service.upsert_user("alice")
    channel = service.create_channel("alice", {"name": "Alice"})
    return service.publish_upload(
        "alice", {"title": "Raw", "channel_id": channel.id}, io.BytesIO(b"raw upload"), "raw.mp4"
    )


def test_renditions_are_sorted_and_deduplicated():
    assert [r.label for r in renditions_for([720, 360, 720])] == ["360p", "720p"]


def test_odd_height_rejected():
    with pytest.raises(ValueError):
        Rendition(361)


def test_handler_publishes_renditions(video, store):
    encoder = FakeEncoder()

    result = TranscodeHandler(encoder=encoder, store=store).handle(video.id, {"heights": [720, 360]})

    assert encoder.labels == ["360p", "720p"]
    assert result["processed_urls"] == {
        "360p": f"/renditions/{video.id.hex}/360p.mp4",
        "720p": f"/renditions/{video.id.hex}/720p.mp4",
    }

    refreshed = CatalogService(store=store).get_video(video.id)
    assert refreshed.processing_status == ProcessingStatus.COMPLETED
    assert refreshed.processed_urls == result["processed_urls"]
    assert store.resolve(result["processed_urls"]["720p"]).is_file()


def test_handler_failure_marks_video_failed_and_removes_outputs(video, store):
    encoder = FakeEncoder(fail_at=720)

    with pytest.raises(RuntimeError):
        TranscodeHandler(encoder=encoder, store=store).handle(video.id, {"heights": [360, 720]})

    refreshed = CatalogService(store=store).get_video(video.id)
    assert refreshed.processing_status == ProcessingStatus.FAILED
    assert not refreshed.processed_urls
    assert not list((store.root / "renditions").rglob("*.mp4"))


def test_handler_unknown_video(store):
    import uuid
    with pytest.raises(ValueError):
        TranscodeHandler(encoder=FakeEncoder(), store=store).handle(uuid.uuid4(), {})


def test_request_requires_existing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        TranscodeRequest(MediaFile(tmp_path / "missing.mp4"), MediaFile(tmp_path / "o.mp4"), Rendition(360))
