"""MetadataProbe interface for container metadata extraction."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class ContainerInfo:
    """Measured container properties of a video file."""

    duration: float
    width: int
    height: int


class MetadataProbe(Protocol):
    """Protocol for reading duration and frame size from a video file.

    Implementations can shell out to ffprobe or read the container
    directly. Frame rate and codec are not part of the contract.
    """

    def probe(self, path: Path, timeout: float) -> ContainerInfo:
        """Read container properties of a file on the host filesystem.

        Args:
            path: Path to the video file.
            timeout: Maximum time to wait, in seconds.

        Returns:
            ContainerInfo for the first video stream.

        Raises:
            AnalysisTimeout: If the probe does not finish within timeout.
            LoadError: If the file cannot be decoded.
            EnvironmentUnsupported: If the probe tool is not available.
        """
        ...
