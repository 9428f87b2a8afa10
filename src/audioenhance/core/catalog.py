"""Audio track discovery using ffprobe."""

from dataclasses import dataclass, field
from pathlib import Path

from audioenhance.core.engine import MediaEngine
from audioenhance.errors import InputNotFoundError, ToolInvocationError
from audioenhance.models.track import TrackDescriptor
from audioenhance.utils.logger import get_logger

logger = get_logger(__name__)

PROBE_ARGS = [
    "-loglevel",
    "error",
    "-select_streams",
    "a",
    "-show_entries",
    "stream=index,channel_layout:stream_tags=language,title",
    "-of",
    "compact=p=0:nk=1",
]

MIN_FIELDS = 3


@dataclass
class ParsedCatalog:
    """Tracks parsed from ffprobe output, plus the lines that were dropped."""

    tracks: list[TrackDescriptor] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)


def parse_catalog(output: str) -> ParsedCatalog:
    """Parse pipe-delimited ffprobe output into track descriptors.

    Each line is "index|layout|language[|title]". Lines with fewer than
    three fields are dropped rather than raised. Order is preserved.

    Args:
        output: Raw ffprobe output

    Returns:
        ParsedCatalog with tracks in emission order
    """
    catalog = ParsedCatalog()

    for line in output.splitlines():
        parts = line.split("|")
        if len(parts) < MIN_FIELDS:
            catalog.dropped.append(line)
            continue

        catalog.tracks.append(
            TrackDescriptor(
                index=parts[0],
                channel_layout=parts[1],
                language=parts[2],
                title=parts[3] if len(parts) > 3 else "",
            )
        )

    return catalog


class TrackCatalogExtractor:
    """Build the ordered track catalog of a container."""

    def __init__(self, engine: MediaEngine):
        self.engine = engine

    def extract(self, file_path: Path) -> list[TrackDescriptor]:
        """Extract audio track descriptors from a video file.

        Args:
            file_path: Path to video file

        Returns:
            Track descriptors in the order ffprobe reported them

        Raises:
            InputNotFoundError: If file doesn't exist
            ToolInvocationError: If ffprobe cannot start or exits non-zero
        """
        if not file_path.exists():
            raise InputNotFoundError(file_path)

        logger.debug("Analyzing audio tracks", file=str(file_path))

        result = self.engine.probe([*PROBE_ARGS, str(file_path)])
        if not result.ok:
            logger.error(
                "ffprobe failed",
                file=str(file_path),
                returncode=result.returncode,
                output=result.output,
            )
            raise ToolInvocationError("ffprobe", result.returncode, result.output)

        catalog = parse_catalog(result.output)

        if catalog.dropped:
            logger.debug(
                "Dropped malformed ffprobe lines",
                file=str(file_path),
                dropped=len(catalog.dropped),
            )

        logger.info(
            "Audio tracks analyzed",
            file=str(file_path),
            track_count=len(catalog.tracks),
            layouts=[t.channel_layout for t in catalog.tracks],
            languages=[t.language for t in catalog.tracks],
        )

        return catalog.tracks
