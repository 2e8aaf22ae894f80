# types.py
from enum import Enum
from typing import Callable, Optional, Union, Protocol
from dataclasses import dataclass
from pathlib import Path
import os

# Type definitions
PathLike = Union[str, os.PathLike, Path]

# (downloaded bytes, total bytes)
DownloadProgress = Callable[[int, int], None]

# (current, latest) -> -1 if current < latest, 0 if equal, 1 if current > latest
VersionComparator = Callable[[str, str], int]


class InstallStage(str, Enum):
    """Stages reported by a package installer."""
    DOWNLOADING_STARTED = "downloading_started"
    DOWNLOADING_PROGRESS = "downloading_progress"
    DOWNLOADING_FINISHED = "downloading_finished"
    DOWNLOADING_ERROR = "downloading_error"
    UNPACKING_STARTED = "unpacking_started"
    UNPACKING_PROGRESS = "unpacking_progress"
    UNPACKING_FINISHED = "unpacking_finished"
    UNPACKING_ERROR = "unpacking_error"


@dataclass(frozen=True)
class InstallerUpdate:
    """A single progress event emitted while a package is installed.

    Attributes:
        stage (InstallStage): What the installer is doing
        current (int): Processed units (bytes or files) so far
        total (int): Total units, 0 when unknown
        message (str): Human-readable description, carries the error text on failures
    """
    stage: InstallStage
    current: int = 0
    total: int = 0
    message: str = ""

    @property
    def progress(self) -> float:
        """Fraction of the stage that is done, 0.0 when the total is unknown."""
        return self.current / self.total if self.total else 0.0


InstallerCallback = Callable[[InstallerUpdate], None]


class ArtifactFetcher(Protocol):
    """Protocol for downloading a remote file."""

    def download_to(self, path: PathLike,
                    progress: Optional[DownloadProgress] = None) -> None: ...


class PackageInstaller(Protocol):
    """Protocol for downloading an archive and unpacking it to a directory."""

    def set_temp_folder(self, path: PathLike) -> "PackageInstaller": ...

    def install(self, destination: PathLike,
                updater: Optional[InstallerCallback] = None) -> None: ...


class PatchEngine(Protocol):
    """Protocol for applying a single binary patch."""

    def patch(self, original: PathLike, patch: PathLike,
              output: PathLike) -> None: ...


FetcherFactory = Callable[[str], ArtifactFetcher]
InstallerFactory = Callable[[str], PackageInstaller]
