import io
from concurrent.futures import ThreadPoolExecutor

import pytest

from vidshare.features.catalog.domain.errors import NotFoundError, PermissionDeniedError
from vidshare.features.catalog.domain.models import Page, VideoFilter
from vidshare.features.catalog.service.api import CatalogService
from vidshare.features.media_store.data.local_fs import LocalMediaStore
from vidshare.features.youtube.domain.interfaces import IVideoProvider
from vidshare.features.youtube.domain.models import ProviderSearchPage, ProviderVideo, RemoteVideoReference


class FakeProvider(IVideoProvider):
    def __init__(self):
        self.videos = {}
        self.search_page = ProviderSearchPage()
        self.searches = []

    def get_video(self, video_id):
        return self.videos.get(video_id)

    def resolve(self, video_id):
        video = self.videos.get(video_id)
        if video is None:
            return None
        return RemoteVideoReference(video_id, f"https://www.youtube.com/watch?v={video_id}", video.title)

    def search_videos(self, query, max_results, page_token=None):
        self.searches.append((query, max_results, page_token))
        return self.search_page


@pytest.fixture
def store(tmp_path):
    return LocalMediaStore(root=tmp_path / "media")


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def service(provider, store):
    return CatalogService(provider=provider, store=store)


@pytest.fixture
def channel(service):
    service.upsert_user("alice")
    return service.create_channel("alice", {"name": "Alice Cooks"})


def _upload(service, channel, title="Pasta 101", actor="alice", **extra):
    data = {"title": title, "channel_id": channel.id, **extra}
    return service.publish_upload(actor, data, io.BytesIO(b"fake mp4 bytes"), "pasta.mp4")


# --- Channels ---

def test_channel_mutations_require_owner(service, channel):
    service.upsert_user("mallory")

    with pytest.raises(PermissionDeniedError):
        service.update_channel("mallory", channel.id, {"name": "Hijacked"})
    with pytest.raises(PermissionDeniedError):
        service.delete_channel("mallory", channel.id)

    updated = service.update_channel("alice", channel.id, {"description": "Weeknight dinners"})
    assert updated.description == "Weeknight dinners"
    assert service.get_channel(channel.id).name == "Alice Cooks"


def test_get_channel_with_unknown_or_malformed_id(service):
    with pytest.raises(NotFoundError):
        service.get_channel("not-a-uuid")
    with pytest.raises(NotFoundError):
        service.get_channel("00000000-0000-0000-0000-000000000000")


def test_featured_channels_are_most_subscribed(service, channel):
    other = service.create_channel("alice", {"name": "Alice Travels"})
    for user in ("u1", "u2"):
        service.upsert_user(user)
        service.subscribe(user, other.id)

    featured = service.list_featured_channels()
    assert [c.id for c in featured][:2] == [other.id, channel.id]


def test_delete_channel_removes_videos_and_files(service, channel, store):
    video = _upload(service, channel)
    path = store.resolve(video.video_url)
    assert path.is_file()

    service.delete_channel("alice", channel.id)

    assert not path.exists()
    assert service.find_local_video(video.id) is None


# --- Videos ---

def test_publish_upload_stores_file_and_row(service, channel, store):
    video = _upload(service, channel, tags=["food"])

    assert video.video_url.startswith("/uploads/")
    assert store.resolve(video.video_url).read_bytes() == b"fake mp4 bytes"
    assert video.tags == ["food"]
    assert service.get_video(str(video.id)).title == "Pasta 101"


def test_publish_upload_to_someone_elses_channel_stores_nothing(service, channel, store):
    service.upsert_user("mallory")

    with pytest.raises(PermissionDeniedError):
        _upload(service, channel, actor="mallory")

    assert not list(store.root.rglob("*.mp4"))


def test_publish_upload_with_unknown_category(service, channel):
    with pytest.raises(NotFoundError):
        _upload(service, channel, category_id="00000000-0000-0000-0000-000000000000")


def test_delete_video_removes_stored_file(service, channel, store):
    video = _upload(service, channel)
    path = store.resolve(video.video_url)

    service.delete_video("alice", video.id)

    assert not path.exists()
    with pytest.raises(NotFoundError):
        service.get_video(video.id)


def test_update_video_requires_owner(service, channel):
    video = _upload(service, channel)
    service.upsert_user("mallory")

    with pytest.raises(PermissionDeniedError):
        service.update_video("mallory", video.id, {"title": "Spam"})

    updated = service.update_video("alice", video.id, {"title": "Pasta 102", "is_public": False})
    assert updated.title == "Pasta 102"
    assert updated.is_public is False


def test_private_videos_are_not_listed(service, channel):
    public = _upload(service, channel, title="Public")
    _upload(service, channel, title="Private", is_public=False)

    listed = service.browse_videos(Page(), VideoFilter()).videos
    assert [v.id for v in listed] == [public.id]


def test_view_video_counts_views(service, channel):
    video = _upload(service, channel)

    service.view_video(video.id)
    viewed = service.view_video(str(video.id))

    assert viewed.view_count == 2


def test_view_video_falls_back_to_provider(service, provider):
    provider.videos["dQw4w9WgXcQ"] = ProviderVideo("dQw4w9WgXcQ", title="Remote")

    assert service.view_video("dQw4w9WgXcQ").title == "Remote"
    with pytest.raises(NotFoundError):
        service.view_video("missing0000")


def test_trending_orders_by_views(service, channel):
    quiet = _upload(service, channel, title="Quiet")
    loud = _upload(service, channel, title="Loud")
    for _ in range(3):
        service.view_video(loud.id)
    service.view_video(quiet.id)

    trending = service.list_trending_videos(Page())
    assert [v.id for v in trending] == [loud.id, quiet.id]


def test_browse_by_channel_and_category(service, channel):
    category = service.create_category({"name": "Cooking"})
    tagged = _upload(service, channel, title="Risotto", category_id=str(category.id))
    _upload(service, channel, title="Untagged")
    other_channel = service.create_channel("alice", {"name": "Second"})

    by_category = service.browse_videos(Page(), VideoFilter(category_id=str(category.id))).videos
    assert [v.id for v in by_category] == [tagged.id]

    by_channel = service.browse_videos(Page(), VideoFilter(channel_id=str(other_channel.id))).videos
    assert by_channel == []

    assert service.browse_videos(Page(), VideoFilter(channel_id="garbage")).videos == []


def test_search_merges_local_then_provider(service, channel, provider):
    local = _upload(service, channel, title="Pasta Carbonara")
    _upload(service, channel, title="Sushi")
    remote = ProviderVideo("abcdefghijk", title="Pasta on YouTube")
    provider.search_page = ProviderSearchPage(videos=[remote], next_page_token="NEXT", prev_page_token=None)

    result = service.browse_videos(Page(limit=5), VideoFilter(search="pasta", page_token="CUR"))

    assert result.videos[0].id == local.id
    assert result.videos[1] is remote
    assert len(result.videos) == 2
    assert result.next_page_token == "NEXT"
    assert provider.searches == [("pasta", 5, "CUR")]


def test_page_validation():
    with pytest.raises(ValueError):
        Page(limit=0)
    with pytest.raises(ValueError):
        Page(offset=-1)


# --- Likes ---

def test_anonymous_likes_increment(service, channel):
    video = _upload(service, channel)

    service.like_video(video.id)
    assert service.like_video(video.id) == 2


def test_user_vote_is_counted_once_and_can_flip(service, channel):
    video = _upload(service, channel)
    service.upsert_user("bob")
    service.like_video(video.id)  # anonymous

    assert service.like_video(video.id, actor_id="bob") == 2
    assert service.like_video(video.id, actor_id="bob") == 2
    assert service.like_video(video.id, actor_id="bob", is_like=False) == 1
    assert service.like_video(video.id, actor_id="bob", is_like=False) == 1

    liked = service.list_liked_videos(Page())
    assert [v.id for v in liked] == [video.id]


def test_concurrent_anonymous_likes_are_all_counted(service, channel):
    video = _upload(service, channel)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: service.like_video(video.id), range(24)))

    assert service.get_video(video.id).like_count == 24


# --- Subscriptions ---

def test_subscribe_maintains_subscriber_count(service, channel):
    service.upsert_user("bob")

    assert service.subscribe("bob", channel.id) is True
    assert service.subscribe("bob", channel.id) is False
    assert service.get_channel(channel.id).subscriber_count == 1
    assert [c.id for c in service.list_subscriptions("bob")] == [channel.id]

    assert service.unsubscribe("bob", channel.id) is True
    assert service.get_channel(channel.id).subscriber_count == 0
    assert service.list_subscriptions("bob") == []


def test_concurrent_duplicate_subscribes_count_once(service, channel):
    service.upsert_user("bob")

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: service.subscribe("bob", channel.id), range(8)))

    assert results.count(True) == 1
    assert service.get_channel(channel.id).subscriber_count == 1


# --- Watch history ---

def test_watch_history_upserts_and_orders_newest_first(service, channel):
    first = _upload(service, channel, title="First")
    second = _upload(service, channel, title="Second")
    service.upsert_user("bob")

    service.record_watch("bob", first.id, 10)
    service.record_watch("bob", second.id, 5)
    service.record_watch("bob", first.id, 42)

    history = service.list_history("bob", Page())
    assert [entry.video.id for entry in history] == [first.id, second.id]
    assert history[0].watch_time == 42


def test_negative_watch_time_rejected(service, channel):
    video = _upload(service, channel)
    with pytest.raises(ValueError):
        service.record_watch("alice", video.id, -1)


# --- Categories ---

def test_categories_sorted_by_name(service):
    service.create_category({"name": "Music"})
    service.create_category({"name": "Gaming"})

    assert [c.name for c in service.list_categories()] == ["Gaming", "Music"]
    with pytest.raises(NotFoundError):
        service.get_category("nope")
