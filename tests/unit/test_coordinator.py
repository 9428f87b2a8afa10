"""Unit tests for the enhancement fan-out coordinator."""

import asyncio

import pytest

from audioenhance.core.coordinator import EnhancementCoordinator
from audioenhance.core.enhancer import TrackEnhancer
from audioenhance.models.result import TrackResult


class TestEnhancementCoordinator:
    """Test EnhancementCoordinator class."""

    @pytest.mark.asyncio
    async def test_runs_every_track(self, engine, config, input_file, sample_tracks):
        """Should enhance every track and keep catalog order."""
        coordinator = EnhancementCoordinator(TrackEnhancer(engine, config))

        results = await coordinator.run(input_file, sample_tracks)

        assert [r.track for r in results] == sample_tracks
        assert all(r.status == "enhanced" for r in results)
        assert len(engine.transcode_calls) == 3

    @pytest.mark.asyncio
    async def test_empty_catalog(self, engine, config, input_file):
        """No tracks means no work and no results."""
        coordinator = EnhancementCoordinator(TrackEnhancer(engine, config))

        assert await coordinator.run(input_file, []) == []
        assert engine.transcode_calls == []

    @pytest.mark.asyncio
    async def test_failed_track_does_not_stop_siblings(
        self, engine, config, input_file, sample_tracks
    ):
        """A failing track should not prevent the others from finishing."""
        engine.fail_streams = {"2"}
        coordinator = EnhancementCoordinator(TrackEnhancer(engine, config))

        results = await coordinator.run(input_file, sample_tracks)

        assert [r.status for r in results] == ["enhanced", "failed", "enhanced"]
        assert results[0].sidecar.exists()
        assert not results[1].sidecar.exists()
        assert results[2].sidecar.exists()

    @pytest.mark.asyncio
    async def test_tracks_run_concurrently(self, config, input_file, sample_tracks):
        """All tasks should be in flight before any of them completes."""
        started = []
        release = asyncio.Event()

        class GatedEnhancer(TrackEnhancer):
            async def enhance(self, input_path, track):
                started.append(track.index)
                if len(started) == len(sample_tracks):
                    release.set()
                await release.wait()
                return TrackResult(
                    track=track,
                    sidecar=self.paths.sidecar_path(input_path, track.index),
                    status="enhanced",
                )

        coordinator = EnhancementCoordinator(GatedEnhancer(None, config))

        results = await asyncio.wait_for(coordinator.run(input_file, sample_tracks), timeout=5)

        assert sorted(started) == ["1", "2", "3"]
        assert [r.track.index for r in results] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_results_follow_catalog_not_completion_order(
        self, config, input_file, sample_tracks
    ):
        """Tracks finishing in reverse order still come back in catalog order."""
        delays = {"1": 0.05, "2": 0.02, "3": 0.0}

        class SlowEnhancer(TrackEnhancer):
            async def enhance(self, input_path, track):
                await asyncio.sleep(delays[track.index])
                return TrackResult(
                    track=track,
                    sidecar=self.paths.sidecar_path(input_path, track.index),
                    status="enhanced",
                )

        results = await EnhancementCoordinator(SlowEnhancer(None, config)).run(
            input_file, sample_tracks
        )

        assert [r.track.index for r in results] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_recorded_per_track(
        self, config, input_file, sample_tracks
    ):
        """An exception escaping a worker becomes that track's failed result."""

        class BrokenEnhancer(TrackEnhancer):
            async def enhance(self, input_path, track):
                if track.index == "1":
                    raise RuntimeError("boom")
                return TrackResult(
                    track=track,
                    sidecar=self.paths.sidecar_path(input_path, track.index),
                    status="enhanced",
                )

        results = await EnhancementCoordinator(BrokenEnhancer(None, config)).run(
            input_file, sample_tracks
        )

        assert [r.status for r in results] == ["failed", "enhanced", "enhanced"]
        assert results[0].error == "boom"
        assert results[0].sidecar == input_file.parent / "movie_track1_enhanced.opus"
