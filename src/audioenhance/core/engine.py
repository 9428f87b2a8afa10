"""Media engine invocation (ffprobe / ffmpeg)."""

import asyncio
import contextlib
import re
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from audioenhance.errors import ToolInvocationError
from audioenhance.utils.logger import get_logger

logger = get_logger(__name__)

LineHandler = Callable[[str], None]

LINE_BREAK = re.compile(rb"[\r\n]")
READ_CHUNK_SIZE = 4096


@dataclass
class ToolResult:
    """Exit status and captured diagnostic text of a finished tool run."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class MediaEngine(ABC):
    """Abstract interface to the external inspection, transcode and mux tools.

    Implementations raise ToolInvocationError when a tool cannot be started.
    A non-zero exit is reported through the return value, not raised.
    """

    @abstractmethod
    def probe(self, args: list[str]) -> ToolResult:
        """Run the inspection tool.

        Args:
            args: Arguments after the executable name

        Returns:
            ToolResult with stdout and stderr combined
        """
        pass

    @abstractmethod
    def mux(self, args: list[str]) -> ToolResult:
        """Run the mux tool.

        Args:
            args: Arguments after the executable name

        Returns:
            ToolResult with stderr captured
        """
        pass

    @abstractmethod
    async def transcode(self, args: list[str], on_line: LineHandler) -> int:
        """Run the transcode tool, passing each stderr line to on_line as it arrives.

        Args:
            args: Arguments after the executable name
            on_line: Called once per diagnostic line, without the line ending

        Returns:
            Exit status
        """
        pass


class FFmpegEngine(MediaEngine):
    """MediaEngine backed by ffprobe and ffmpeg subprocesses."""

    def __init__(
        self,
        ffmpeg: str = "ffmpeg",
        ffprobe: str = "ffprobe",
        timeout_seconds: Optional[int] = None,
    ):
        """Initialize the engine.

        Args:
            ffmpeg: ffmpeg executable
            ffprobe: ffprobe executable
            timeout_seconds: Per-invocation timeout, None to wait indefinitely
        """
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.timeout_seconds = timeout_seconds

    def _run(self, cmd: list[str], combine_output: bool) -> ToolResult:
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if combine_output else subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("Tool timeout", tool=cmd[0], timeout=self.timeout_seconds)
            raise ToolInvocationError(
                cmd[0], None, reason=f"timed out after {self.timeout_seconds}s"
            ) from e
        except OSError as e:
            logger.error("Failed to start tool", tool=cmd[0], error=str(e))
            raise ToolInvocationError(cmd[0], None, str(e)) from e

        output = result.stdout if combine_output else result.stderr
        return ToolResult(returncode=result.returncode, output=output or "")

    def probe(self, args: list[str]) -> ToolResult:
        return self._run([self.ffprobe, *args], combine_output=True)

    def mux(self, args: list[str]) -> ToolResult:
        return self._run([self.ffmpeg, *args], combine_output=False)

    async def transcode(self, args: list[str], on_line: LineHandler) -> int:
        try:
            process = await asyncio.create_subprocess_exec(
                self.ffmpeg,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ToolInvocationError(self.ffmpeg, None, str(e)) from e

        async def _pump() -> int:
            assert process.stderr is not None
            # Progress lines end in "\r", so split on both line endings
            pending = b""
            while True:
                chunk = await process.stderr.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                *lines, pending = LINE_BREAK.split(pending + chunk)
                for line in lines:
                    if line:
                        on_line(line.decode(errors="replace"))
            if pending:
                on_line(pending.decode(errors="replace"))
            return await process.wait()

        try:
            return await asyncio.wait_for(_pump(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise ToolInvocationError(
                self.ffmpeg, None, reason=f"timed out after {self.timeout_seconds}s"
            ) from e
        except (OSError, ValueError) as e:
            raise ToolInvocationError(
                self.ffmpeg, None, reason=f"output could not be read: {e}"
            ) from e
        finally:
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()
