"""Deterministic naming of output and side-car files."""

from pathlib import Path

from audioenhance.config import NamingConfig


def strip_extension(path: Path, extension: str) -> str:
    """Remove extension from the end of path, if present.

    Unlike Path.stem, a path with a different extension is returned whole,
    so "movie.mp4" stays "movie.mp4".
    """
    text = str(path)
    if extension and text.endswith(extension):
        return text[: -len(extension)]
    return text


class PathResolver:
    """Derive output and side-car paths from the input path."""

    def __init__(self, naming: NamingConfig):
        self.naming = naming

    def _base(self, input_path: Path) -> str:
        return strip_extension(input_path, self.naming.input_extension)

    def output_path(self, input_path: Path) -> Path:
        """Path of the remuxed output container."""
        return Path(
            f"{self._base(input_path)}{self.naming.output_suffix}"
            f"{self.naming.input_extension}"
        )

    def sidecar_path(self, input_path: Path, track_index: str) -> Path:
        """Path of the enhanced side-car for a track.

        Args:
            input_path: Source container
            track_index: Stream index of the track, used verbatim

        Returns:
            Side-car path next to the input file
        """
        return Path(
            f"{self._base(input_path)}_track{track_index}"
            f"{self.naming.sidecar_suffix}{self.naming.sidecar_extension}"
        )
