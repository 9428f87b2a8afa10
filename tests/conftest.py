"""Shared pytest fixtures for audioenhance tests."""

from pathlib import Path

import pytest

from audioenhance.config import Config
from audioenhance.core.engine import LineHandler, MediaEngine, ToolResult
from audioenhance.errors import ToolInvocationError
from audioenhance.models.track import TrackDescriptor


class FakeEngine(MediaEngine):
    """In-memory stand-in for ffprobe/ffmpeg.

    transcode writes the side-car named by its last argument unless the
    mapped stream is listed in fail_streams. mux fails, like ffmpeg, when
    any input is missing, and otherwise writes the output file.
    """

    def __init__(self, probe_output: str = "", probe_returncode: int = 0):
        self.probe_output = probe_output
        self.probe_returncode = probe_returncode
        self.fail_streams: set[str] = set()
        self.unstartable_streams: set[str] = set()
        self.mux_returncode = 0
        self.stderr_lines = ["Input #0, matroska,webm", "size=N/A time=00:00:01.00"]
        self.probe_calls: list[list[str]] = []
        self.transcode_calls: list[list[str]] = []
        self.mux_calls: list[list[str]] = []

    def probe(self, args: list[str]) -> ToolResult:
        self.probe_calls.append(args)
        return ToolResult(self.probe_returncode, self.probe_output)

    def mux(self, args: list[str]) -> ToolResult:
        self.mux_calls.append(args)
        inputs = [args[i + 1] for i, arg in enumerate(args) if arg == "-i"]
        for path in inputs:
            if not Path(path).exists():
                return ToolResult(1, f"{path}: No such file or directory")
        if self.mux_returncode != 0:
            return ToolResult(self.mux_returncode, "Conversion failed!")
        Path(args[-1]).write_bytes(b"muxed")
        return ToolResult(0, "")

    async def transcode(self, args: list[str], on_line: LineHandler) -> int:
        self.transcode_calls.append(args)
        stream = args[args.index("-map") + 1].split(":", 1)[1]
        if stream in self.unstartable_streams:
            raise ToolInvocationError("ffmpeg", None, "No such file or directory")
        for line in self.stderr_lines:
            on_line(line)
        if stream in self.fail_streams:
            return 1
        Path(args[-1]).write_bytes(b"opus")
        return 0


@pytest.fixture
def config():
    """Create a default configuration for testing."""
    return Config()


@pytest.fixture
def input_file(tmp_path):
    """Create a placeholder MKV file."""
    file_path = tmp_path / "movie.mkv"
    file_path.write_bytes(b"matroska")
    return file_path


@pytest.fixture
def sample_tracks():
    """Create sample track descriptors for testing."""
    return [
        TrackDescriptor(index="1", channel_layout="5.1", language="eng", title="English"),
        TrackDescriptor(index="2", channel_layout="7.1", language="jpn"),
        TrackDescriptor(index="3", channel_layout="", language=""),
    ]


@pytest.fixture
def probe_output():
    """ffprobe compact output for a 5.1 English and a 7.1 Japanese track."""
    return "1|5.1(side)|eng|Surround\n2|7.1|jpn\n"


@pytest.fixture
def engine(probe_output):
    """Create a fake media engine."""
    return FakeEngine(probe_output=probe_output)


PROGRESS_LINES = 900

# Stand-in ffmpeg that writes ~90 KiB of "\r"-terminated progress, then the output file
PROGRESS_SCRIPT = """#!/bin/sh
i=0
while [ $i -lt {count} ]; do
  printf 'size=%8dkB time=00:00:%02d.00 bitrate= 320.0kbits/s speed=41.2x dup=0 drop=0 frame=%6d\\r' $i $((i % 60)) $i >&2
  i=$((i + 1))
done
for last; do :; done
printf 'opus' > "$last"
exit 0
"""


@pytest.fixture
def progress_ffmpeg(tmp_path):
    """Create an executable that behaves like ffmpeg during a long encode."""
    script = tmp_path / "ffmpeg"
    script.write_text(PROGRESS_SCRIPT.format(count=PROGRESS_LINES))
    script.chmod(0o755)
    return script


@pytest.fixture
def progress_lines():
    """Number of progress lines written by progress_ffmpeg."""
    return PROGRESS_LINES
