"""Audio track data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackDescriptor:
    """One audio stream discovered in the input container."""

    index: str  # Stream index as reported by ffprobe, kept verbatim
    channel_layout: str  # e.g. "5.1", "7.1(wide)"; empty if unknown
    language: str  # Language tag; may be empty
    title: str = ""  # Track title; empty if absent

    @property
    def is_7_1(self) -> bool:
        """Whether the layout belongs to the 7.1 family."""
        return self.channel_layout.startswith("7.1")
