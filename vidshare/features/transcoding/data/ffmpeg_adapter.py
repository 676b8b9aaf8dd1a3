import subprocess
import logging
from vidshare.core.config.settings import settings
from ..domain.interfaces import IRenditionEncoder
from ..domain.models import TranscodeRequest

logger = logging.getLogger(__name__)

class FFmpegRenditionAdapter(IRenditionEncoder):
    """
    Concrete implementation of IRenditionEncoder using FFmpeg.
    """

    def encode(self, request: TranscodeRequest) -> None:
        request.output_video.ensure_parent_dir()

        # -vf scale=-2:H: Keep aspect ratio, force an even width
        # -c:v libx264 / -preset veryfast: Broad playback support, quick encode
        # -c:a aac: Re-encode audio
        cmd = [
            settings.FFMPEG_BINARY,
            "-y",
            "-i", str(request.source_video.path),
            "-vf", f"scale=-2:{request.rendition.height}",
            "-c:v", "libx264",
            "-preset", "veryfast",
            "-crf", "23",
            "-c:a", "aac",
            "-movflags", "+faststart",
            str(request.output_video.path)
        ]

        logger.info(f"Executing FFmpeg Transcode ({request.rendition.label}): {' '.join(cmd)}")

        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True
            )
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            logger.error(f"FFmpeg Transcode Failed. STDERR: {error_message}")
            raise RuntimeError(f"Transcoding to {request.rendition.label} failed: {error_message}") from e
