"""Enhancement pipeline orchestrator."""

import time
from pathlib import Path
from typing import Optional

from audioenhance.config import Config
from audioenhance.core.catalog import TrackCatalogExtractor
from audioenhance.core.cleanup import remove_sidecars
from audioenhance.core.coordinator import EnhancementCoordinator
from audioenhance.core.engine import FFmpegEngine, MediaEngine
from audioenhance.core.enhancer import TrackEnhancer
from audioenhance.core.remux import RemuxAssembler
from audioenhance.errors import CleanupError
from audioenhance.models.result import PipelineResult
from audioenhance.utils.logger import get_logger
from audioenhance.utils.paths import PathResolver

logger = get_logger(__name__)


class EnhancementPipeline:
    """Orchestrates the complete audio enhancement pipeline."""

    def __init__(self, config: Config, engine: Optional[MediaEngine] = None):
        """Initialize the pipeline with configuration.

        Args:
            config: Application configuration
            engine: Media engine (defaults to ffmpeg/ffprobe from config)
        """
        self.config = config
        self.engine = engine or FFmpegEngine(
            ffmpeg=config.tools.ffmpeg,
            ffprobe=config.tools.ffprobe,
            timeout_seconds=config.processing.timeout_seconds,
        )
        self.paths = PathResolver(config.naming)
        self.extractor = TrackCatalogExtractor(self.engine)
        self.coordinator = EnhancementCoordinator(TrackEnhancer(self.engine, config))
        self.assembler = RemuxAssembler(self.engine, config)

    async def run(self, input_path: Path) -> PipelineResult:
        """Run a file through the complete pipeline.

        Pipeline steps:
        1. Track discovery (ffprobe)
        2. Concurrent per-track enhancement, joined before continuing
        3. Remux of original and enhanced tracks
        4. Side-car cleanup

        Track failures do not stop the run here; the remux then fails on the
        missing side-car. Side-cars are kept when the remux fails.

        Args:
            input_path: Path to the source container

        Returns:
            PipelineResult; cleanup_error is set if cleanup stopped early

        Raises:
            InputNotFoundError: If the input does not exist
            ToolInvocationError: If ffprobe or the final ffmpeg remux fails
        """
        start_time = time.time()
        output_path = self.paths.output_path(input_path)

        logger.info("Processing file", file=str(input_path), output=str(output_path))

        # Step 1: Track discovery
        tracks = self.extractor.extract(input_path)

        # Step 2: Enhancement
        track_results = await self.coordinator.run(input_path, tracks)
        result = PipelineResult(
            input_path=input_path, output_path=output_path, tracks=track_results
        )

        for failed in result.failed_tracks:
            logger.warning(
                "Track enhancement failed, remux will reference a missing side-car",
                track_index=failed.track.index,
                sidecar=str(failed.sidecar),
                error=failed.error,
            )

        # Step 3: Remux
        self.assembler.assemble(input_path, output_path, tracks)

        # Step 4: Cleanup
        try:
            result.removed = remove_sidecars([r.sidecar for r in track_results])
        except CleanupError as e:
            result.removed = e.removed
            result.cleanup_error = str(e)
            logger.warning(
                "Cleanup stopped early, remaining side-cars left in place",
                file=str(e.path),
                error=e.reason,
            )

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "File processed successfully",
            file=str(input_path),
            output=str(output_path),
            track_count=len(tracks),
            duration_ms=duration_ms,
        )

        return result
