"""Removal of enhanced side-car files after a successful remux."""

from pathlib import Path

from audioenhance.errors import CleanupError
from audioenhance.utils.logger import get_logger

logger = get_logger(__name__)


def remove_sidecars(sidecars: list[Path]) -> list[Path]:
    """Delete side-car files in order, stopping at the first failure.

    Files after a failed deletion are left in place.

    Args:
        sidecars: Side-car paths in catalog order

    Returns:
        The deleted paths

    Raises:
        CleanupError: On the first file that cannot be deleted
    """
    removed: list[Path] = []

    for sidecar in sidecars:
        try:
            sidecar.unlink()
        except OSError as e:
            logger.error("Failed to delete temporary file", file=str(sidecar), error=str(e))
            raise CleanupError(sidecar, str(e), removed=removed) from e

        logger.info("Temporary file removed", file=str(sidecar))
        removed.append(sidecar)

    return removed
