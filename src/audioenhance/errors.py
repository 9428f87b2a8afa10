"""Error types raised by the enhancement pipeline."""

from pathlib import Path
from typing import Optional


class EnhanceError(Exception):
    """Base class for all pipeline errors."""


class InputNotFoundError(EnhanceError, FileNotFoundError):
    """Input file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"File not found: {path}")


class ToolInvocationError(EnhanceError):
    """An external tool could not be launched or exited non-zero.

    Attributes:
        tool: Name or path of the tool that failed
        returncode: Exit status, or None if the tool never started
        output: Captured diagnostic output
    """

    def __init__(
        self,
        tool: str,
        returncode: Optional[int],
        output: str = "",
        reason: Optional[str] = None,
    ):
        self.tool = tool
        self.returncode = returncode
        self.output = output

        if reason:
            message = f"{tool} {reason}"
        elif returncode is None:
            message = f"{tool} could not be started"
        else:
            message = f"{tool} failed with exit status {returncode}"
        if output:
            message = f"{message}\nOutput: {output}"
        super().__init__(message)


class CleanupError(EnhanceError):
    """A side-car file could not be deleted.

    Attributes:
        path: The side-car that failed to delete
        removed: Side-cars deleted before the failure
    """

    def __init__(self, path: Path, reason: str, removed: Optional[list[Path]] = None):
        self.path = path
        self.reason = reason
        self.removed = removed or []
        super().__init__(f"Failed to delete temporary file {path}: {reason}")
