import httpx
import pytest

from vidshare.features.youtube.data.youtube_api import YouTubeDataClient

CHANNEL_ID = "UC_food"


def _video_item(video_id, title):
    return {
        "id": video_id,
        "snippet": {
            "title": title,
            "description": f"{title} description",
            "channelId": CHANNEL_ID,
            "thumbnails": {"high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"}},
        },
    }


class FakeYouTubeApi:
    """Answers the three Data API calls the client makes and records them."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"error": {"message": "quota"}})

        params = request.url.params
        if request.url.path.endswith("/videos"):
            ids = params["id"].split(",")
            return httpx.Response(200, json={"items": [_video_item(i, f"Video {i}") for i in ids if i != "missing0000"]})

        if params.get("type") == "channel":
            if params["q"] == "nobody":
                return httpx.Response(200, json={"items": []})
            return httpx.Response(200, json={"items": [{"snippet": {"channelId": CHANNEL_ID}}]})

        return httpx.Response(200, json={
            "items": [{"id": {"videoId": "aaaaaaaaaaa"}}, {"id": {"videoId": "bbbbbbbbbbb"}}],
            "nextPageToken": "NEXT",
        })


@pytest.fixture
def api():
    return FakeYouTubeApi()


@pytest.fixture
def client(api):
    return YouTubeDataClient(
        api_key="test-key",
        base_url="https://youtube.test/v3",
        transport=httpx.MockTransport(api),
    )


def test_get_video_maps_snippet(client, api):
    video = client.get_video("dQw4w9WgXcQ")

    assert video.youtube_video_id == "dQw4w9WgXcQ"
    assert video.title == "Video dQw4w9WgXcQ"
    assert video.thumbnail_url.endswith("/dQw4w9WgXcQ/hqdefault.jpg")
    assert video.channel_id == CHANNEL_ID

    sent = api.requests[0].url.params
    assert sent["key"] == "test-key"
    assert sent["part"] == "snippet,contentDetails"


def test_get_video_absent(client):
    assert client.get_video("missing0000") is None


def test_resolve_builds_watch_url(client):
    reference = client.resolve("dQw4w9WgXcQ")

    assert reference.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert reference.title == "Video dQw4w9WgXcQ"


def test_search_goes_through_the_matching_channel(client, api):
    page = client.search_videos("cooking", max_results=2, page_token="CUR")

    assert [v.youtube_video_id for v in page.videos] == ["aaaaaaaaaaa", "bbbbbbbbbbb"]
    assert page.next_page_token == "NEXT"
    assert page.prev_page_token is None

    listing = api.requests[1].url.params
    assert listing["channelId"] == CHANNEL_ID
    assert listing["order"] == "date"
    assert listing["pageToken"] == "CUR"
    assert listing["maxResults"] == "2"


def test_search_without_matching_channel_is_empty(client):
    page = client.search_videos("nobody", max_results=5)
    assert page.videos == []
    assert page.next_page_token is None


def test_api_errors_are_swallowed():
    client = YouTubeDataClient(
        api_key="test-key",
        base_url="https://youtube.test/v3",
        transport=httpx.MockTransport(FakeYouTubeApi(fail_with=403)),
    )

    assert client.get_video("dQw4w9WgXcQ") is None
    assert client.resolve("dQw4w9WgXcQ") is None
    assert client.search_videos("cooking", max_results=5).videos == []


def test_disabled_without_api_key(api):
    client = YouTubeDataClient(api_key="", transport=httpx.MockTransport(api))

    assert client.enabled is False
    assert client.get_video("dQw4w9WgXcQ") is None
    assert client.search_videos("cooking", 5).videos == []
    assert api.requests == []
