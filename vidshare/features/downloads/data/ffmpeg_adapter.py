import subprocess
import logging
from vidshare.core.config.settings import settings
from vidshare.core.shared_types import MediaFile
from ..domain.interfaces import IMultiplexer

logger = logging.getLogger(__name__)

class FFmpegMuxAdapter(IMultiplexer):
    """
    Concrete implementation of IMultiplexer using FFmpeg.
    The video stream is copied bit-for-bit; only audio is re-encoded.
    """

    def __init__(self, timeout_seconds: float = None):
        self.timeout_seconds = timeout_seconds

    def multiplex(self, video_track: MediaFile, audio_track: MediaFile, output: MediaFile) -> None:
        for track in (video_track, audio_track):
            if not track.exists():
                raise FileNotFoundError(f"Track not found: {track.path}")

        output.ensure_parent_dir()

        # -y: Overwrite output files without asking
        # -map 0:v:0 / -map 1:a:0: First video of input 0, first audio of input 1
        # -c:v copy: No video re-encode
        # -c:a aac: Widely compatible audio
        # -movflags +faststart: Moov atom up front so players can start early
        cmd = [
            settings.FFMPEG_BINARY,
            "-y",
            "-i", str(video_track.path),
            "-i", str(audio_track.path),
            "-map", "0:v:0",
            "-map", "1:a:0",
            "-c:v", "copy",
            "-c:a", "aac",
            "-movflags", "+faststart",
            "-f", "mp4",
            str(output.path)
        ]

        logger.info(f"Executing FFmpeg Mux: {' '.join(cmd)}")

        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds
            )
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            logger.error(f"FFmpeg Mux Failed. STDERR: {error_message}")
            raise RuntimeError(f"Multiplexing failed: {error_message}") from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"FFmpeg Mux timed out after {self.timeout_seconds}s")
            raise RuntimeError("Multiplexing timed out") from e
