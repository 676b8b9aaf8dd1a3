import logging
import re
from urllib.parse import quote

from starlette.responses import FileResponse
from starlette.types import Receive, Scope, Send

from vidshare.features.downloads.domain.models import DeliverableFile

logger = logging.getLogger(__name__)

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def content_disposition(filename: str) -> str:
    """
    attachment; filename="<name>" for ASCII names. Other names get an ASCII
    fallback plus the RFC 5987 filename* form. Control characters become
    spaces so a title can never break the header line.
    """
    filename = CONTROL_CHARS.sub(" ", filename)
    try:
        filename.encode("ascii")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "ignore").decode("ascii").strip() or "video.mp4"
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class DeliverableResponse(FileResponse):
    """
    Streams a DeliverableFile and closes it when the response is over,
    whether the client read everything, disconnected, or the send failed.
    """

    def __init__(self, deliverable: DeliverableFile, **kwargs):
        self.deliverable = deliverable
        super().__init__(deliverable.path, media_type=deliverable.media_type, **kwargs)
        self.headers["content-disposition"] = content_disposition(deliverable.download_name)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            if self.deliverable.is_temporary:
                logger.info(f"Response for {self.deliverable.download_name} finished; releasing temp files")
            self.deliverable.close()
