"""Concurrent fan-out of track enhancement."""

import asyncio
from pathlib import Path

from audioenhance.core.enhancer import TrackEnhancer
from audioenhance.models.result import TrackResult
from audioenhance.models.track import TrackDescriptor
from audioenhance.utils.logger import get_logger

logger = get_logger(__name__)


class EnhancementCoordinator:
    """Run one enhancement task per track and wait for all of them."""

    def __init__(self, enhancer: TrackEnhancer):
        self.enhancer = enhancer

    async def run(
        self, input_path: Path, tracks: list[TrackDescriptor]
    ) -> list[TrackResult]:
        """Enhance every track concurrently.

        All tasks are started together and awaited as a set. A failing task
        never cancels the others; its exception is recorded as that track's
        failed result.

        Args:
            input_path: Source container
            tracks: Track catalog

        Returns:
            One TrackResult per track, in catalog order
        """
        logger.info("Starting track enhancement", file=str(input_path), track_count=len(tracks))

        tasks = [
            asyncio.create_task(self.enhancer.enhance(input_path, track))
            for track in tracks
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[TrackResult] = []
        for track, outcome in zip(tracks, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Track enhancement error",
                    track_index=track.index,
                    error=str(outcome),
                    exc_info=outcome,
                )
                sidecar = self.enhancer.paths.sidecar_path(input_path, track.index)
                results.append(
                    TrackResult(track=track, sidecar=sidecar, status="failed", error=str(outcome))
                )
            else:
                results.append(outcome)

        failed = [r.track.index for r in results if not r.succeeded]
        logger.info(
            "Track enhancement finished",
            file=str(input_path),
            enhanced=sum(1 for r in results if r.status == "enhanced"),
            skipped=sum(1 for r in results if r.status == "skipped"),
            failed=failed,
        )

        return results
