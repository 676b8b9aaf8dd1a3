from ..data.youtube_api import YouTubeDataClient
from ..data.ytdlp_locator import YtDlpStreamLocator

# Singleton Instances for easy import
youtube = YouTubeDataClient()
stream_locator = YtDlpStreamLocator()
