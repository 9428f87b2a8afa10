"""Data models for audioenhance."""

from audioenhance.models.result import PipelineResult, TrackResult
from audioenhance.models.track import TrackDescriptor

__all__ = ["PipelineResult", "TrackDescriptor", "TrackResult"]
