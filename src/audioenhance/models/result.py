"""Result models for track enhancement and the full pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from audioenhance.models.track import TrackDescriptor


@dataclass
class TrackResult:
    """Outcome of enhancing a single track."""

    track: TrackDescriptor
    sidecar: Path
    status: Literal["enhanced", "skipped", "failed"]
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """Whether a side-car is expected to exist for this track."""
        return self.status in ("enhanced", "skipped")

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.status == "enhanced":
            return f"✓ Track {self.track.index}: {self.sidecar.name}"
        elif self.status == "skipped":
            return f"⊘ Track {self.track.index}: {self.sidecar.name} already exists"
        else:
            return f"✗ Track {self.track.index}: Failed ({self.error})"


@dataclass
class PipelineResult:
    """Outcome of a complete pipeline run.

    A run that produced the output file is successful even when
    cleanup_error is set.
    """

    input_path: Path
    output_path: Path
    tracks: list[TrackResult] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    cleanup_error: Optional[str] = None

    @property
    def failed_tracks(self) -> list[TrackResult]:
        """Track results that did not produce a side-car."""
        return [result for result in self.tracks if not result.succeeded]
