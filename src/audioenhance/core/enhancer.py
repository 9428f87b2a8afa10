"""Per-track stereo enhancement with ffmpeg."""

from pathlib import Path
from typing import Optional

import structlog

from audioenhance.config import Config
from audioenhance.core.engine import MediaEngine
from audioenhance.errors import ToolInvocationError
from audioenhance.models.result import TrackResult
from audioenhance.models.track import TrackDescriptor
from audioenhance.utils.logger import get_logger
from audioenhance.utils.paths import PathResolver

logger = get_logger(__name__)

# Downmix weights: centre at -3 dB, LFE at half gain, overall 1.5x boost.
FILTER_7_1 = (
    "volume=1.5, pan=stereo"
    "|FL=FL+0.707*FC+0.5*BL+0.3*SL+0.5*LFE"
    "|FR=FR+0.707*FC+0.5*BR+0.3*SR+0.5*LFE"
)
FILTER_DEFAULT = (
    "volume=1.5, pan=stereo"
    "|FL=FL+0.707*FC+0.707*BL+0.5*LFE"
    "|FR=FR+0.707*FC+0.707*BR+0.5*LFE"
)

ENHANCED_TITLE = "2.1 Enhanced"

ENCODER_ARGS = [
    "-acodec",
    "libopus",
    "-b:a",
    "320k",
    "-vbr",
    "on",
    "-compression_level",
    "9",
    "-frame_duration",
    "20",
    "-application",
    "audio",
]


def select_filter_graph(track: TrackDescriptor) -> str:
    """Pick the downmix filter graph for a track's channel layout.

    7.1 layouts (including variants such as "7.1(wide)") get the 7.1
    weighting; everything else, unknown layouts included, gets the
    default rear+centre+LFE weighting.
    """
    if track.is_7_1:
        return FILTER_7_1
    return FILTER_DEFAULT


def build_transcode_args(
    input_path: Path, track: TrackDescriptor, sidecar: Path
) -> list[str]:
    """Build ffmpeg arguments for enhancing one track.

    The output title is always ENHANCED_TITLE, whatever the source title.

    Args:
        input_path: Source container
        track: Track to enhance
        sidecar: Output side-car path

    Returns:
        Argument list without the ffmpeg executable
    """
    return [
        "-i",
        str(input_path),
        "-map",
        f"0:{track.index}",
        "-af",
        select_filter_graph(track),
        *ENCODER_ARGS,
        "-metadata:s:a",
        f"language={track.language}",
        "-metadata:s:a",
        f"title={ENHANCED_TITLE}",
        "-y",
        str(sidecar),
    ]


class TrackEnhancer:
    """Produce the enhanced stereo side-car for a single track."""

    def __init__(
        self,
        engine: MediaEngine,
        config: Config,
        log: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        """Initialize the enhancer.

        Args:
            engine: Media engine used for transcoding
            config: Application configuration
            log: Sink for progress and ffmpeg diagnostics (defaults to module logger)
        """
        self.engine = engine
        self.paths = PathResolver(config.naming)
        self.log = log or logger

    async def enhance(self, input_path: Path, track: TrackDescriptor) -> TrackResult:
        """Enhance one track, skipping the work if its side-car already exists.

        Failures are logged and returned as a "failed" result, never raised,
        so one track cannot abort its siblings. A missing side-car is caught
        later when the remux references it.

        Args:
            input_path: Source container
            track: Track to enhance

        Returns:
            TrackResult describing the outcome
        """
        sidecar = self.paths.sidecar_path(input_path, track.index)
        log = self.log.bind(track_index=track.index, sidecar=str(sidecar))

        if sidecar.exists():
            log.info("Enhanced track already exists, skipping processing")
            return TrackResult(track=track, sidecar=sidecar, status="skipped")

        log.info(
            "Enhancing track",
            layout=track.channel_layout,
            language=track.language,
            downmix="7.1" if track.is_7_1 else "default",
        )

        def _forward(line: str) -> None:
            log.info("ffmpeg output", line=line)

        try:
            returncode = await self.engine.transcode(
                build_transcode_args(input_path, track, sidecar), _forward
            )
        except ToolInvocationError as e:
            log.error("Error starting ffmpeg", error=str(e))
            return TrackResult(track=track, sidecar=sidecar, status="failed", error=str(e))

        if returncode != 0:
            log.error("ffmpeg failed", returncode=returncode)
            return TrackResult(
                track=track,
                sidecar=sidecar,
                status="failed",
                error=f"ffmpeg exited with status {returncode}",
            )

        log.info("Track enhanced")
        return TrackResult(track=track, sidecar=sidecar, status="enhanced")
