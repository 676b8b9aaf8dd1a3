class DownloadError(Exception):
    """Base class for everything produce_download can raise."""

    def __init__(self, video_id: str, message: str):
        self.video_id = video_id
        super().__init__(message)


class VideoNotFoundError(DownloadError):
    """Neither a stored file nor a remote reference exists for the id."""

    def __init__(self, video_id: str):
        super().__init__(video_id, f"Video not found: {video_id}")


class DownloadFailedError(DownloadError):
    """
    The video exists but could not be produced.
    `step` names the failing stage for server-side logs only.
    """

    def __init__(self, video_id: str, step: str):
        self.step = step
        super().__init__(video_id, f"Download of {video_id} failed during {step}")


class FetchFailedError(DownloadFailedError):
    """Locating or transferring one of the two tracks failed."""


class ProcessingFailedError(DownloadFailedError):
    """The multiplex subprocess failed or produced nothing."""
