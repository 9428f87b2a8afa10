"""Remux original and enhanced audio into the output container."""

import shlex
from pathlib import Path

from audioenhance.config import Config
from audioenhance.core.engine import MediaEngine
from audioenhance.errors import ToolInvocationError
from audioenhance.models.track import TrackDescriptor
from audioenhance.utils.logger import get_logger
from audioenhance.utils.paths import PathResolver

logger = get_logger(__name__)


def build_remux_args(
    input_path: Path, output_path: Path, sidecars: list[Path]
) -> list[str]:
    """Build ffmpeg arguments that interleave original and enhanced audio.

    Input 0 is the original file and input i+1 is the side-car of the track
    at catalog position i. Audio is mapped per track as original then
    enhanced, so the output order is orig0, enh0, orig1, enh1, ...

    Args:
        input_path: Source container
        output_path: Destination container (overwritten)
        sidecars: Side-car paths in catalog order

    Returns:
        Argument list without the ffmpeg executable
    """
    args = ["-i", str(input_path)]
    for sidecar in sidecars:
        args.extend(["-i", str(sidecar)])

    args.extend(["-map", "0:v"])
    # Trailing "?" makes the subtitle mapping optional
    args.extend(["-map", "0:s?"])

    for position in range(len(sidecars)):
        args.extend(["-map", f"0:a:{position}", "-c:a", "copy"])
        args.extend(["-map", f"{position + 1}:a", "-c:a", "copy"])

    args.extend(["-c:v", "copy", "-c:s", "copy", "-y", str(output_path)])
    return args


class RemuxAssembler:
    """Assemble the final container with a single ffmpeg invocation."""

    def __init__(self, engine: MediaEngine, config: Config):
        self.engine = engine
        self.paths = PathResolver(config.naming)

    def assemble(
        self, input_path: Path, output_path: Path, tracks: list[TrackDescriptor]
    ) -> None:
        """Mux video, subtitles, original audio and enhanced audio.

        Args:
            input_path: Source container
            output_path: Destination container
            tracks: Track catalog, in catalog order

        Raises:
            ToolInvocationError: If ffmpeg cannot start or exits non-zero,
                including when a side-car is missing
        """
        sidecars = [self.paths.sidecar_path(input_path, t.index) for t in tracks]
        args = build_remux_args(input_path, output_path, sidecars)

        logger.info(
            "Merging tracks",
            file=str(input_path),
            output=str(output_path),
            command=shlex.join(["ffmpeg", *args]),
        )

        result = self.engine.mux(args)
        if not result.ok:
            missing = [str(s) for s in sidecars if not s.exists()]
            logger.error(
                "ffmpeg merge failed",
                file=str(input_path),
                returncode=result.returncode,
                missing_sidecars=missing,
                stderr=result.output,
            )
            raise ToolInvocationError("ffmpeg", result.returncode, result.output)

        logger.info("Tracks merged", output=str(output_path))
