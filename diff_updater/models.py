# models.py
"""
Update resolution: the classified difference between the installed version
of a package and the latest one.

Exactly one of four variants describes a resolution:

- `UpToDate`: the installed version is the latest one.
- `Deliverable`: a diff archive from the installed version exists.
- `TooOld`: the installed version is too old to be patched.
- `NotInstalled`: nothing is installed, the full package has to be downloaded.

Only `Deliverable` and `NotInstalled` can be downloaded and installed.
"""

from pathlib import Path
from typing import NoReturn, Optional, Tuple, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from .downloader import Downloader
from .exceptions import AlreadyLatestError, OutdatedError, PathNotSpecifiedError
from .transaction import DiffInstaller
from .types import DownloadProgress, FetcherFactory, InstallerCallback, PathLike


class VersionDiff(BaseModel):
    """Base class of the update resolution variants. Values are immutable."""
    model_config = ConfigDict(frozen=True)

    def _unknown_variant(self) -> NoReturn:
        raise TypeError(f"Unknown version diff variant: {type(self).__name__}")

    def _downloadable(self) -> "Union[Deliverable, NotInstalled]":
        """Return self if it can be downloaded, raise the matching error otherwise."""
        if isinstance(self, UpToDate):
            raise AlreadyLatestError(self.installed_version)
        if isinstance(self, TooOld):
            raise OutdatedError(self.current, self.latest)
        if isinstance(self, (Deliverable, NotInstalled)):
            return self
        self._unknown_variant()

    def size(self) -> Optional[Tuple[int, int]]:
        """Returns (download_size, unpacked_size) pair if it exists in current variant"""
        if isinstance(self, (Deliverable, NotInstalled)):
            return self.download_size, self.unpacked_size
        if isinstance(self, (UpToDate, TooOld)):
            return None
        self._unknown_variant()

    def target_directory(self) -> Optional[Path]:
        """Returns the folder this difference should be installed to, if known"""
        if isinstance(self, (Deliverable, NotInstalled)):
            return self.target_dir
        if isinstance(self, (UpToDate, TooOld)):
            return None
        self._unknown_variant()

    def download(
        self,
        to: PathLike,
        progress: Optional[DownloadProgress] = None,
        fetcher_factory: Optional[FetcherFactory] = None,
    ) -> None:
        """
        Download the archive of this difference.

        Args:
            to: Destination file path
            progress: Callback receiving (downloaded, total) bytes
            fetcher_factory: Builds the fetcher for the archive URL, `Downloader` by default

        Raises:
            AlreadyLatestError: If the installation is up to date
            OutdatedError: If the installed version is too old to be patched
            NetworkError: If the download fails
        """
        diff = self._downloadable()
        fetcher = (fetcher_factory or Downloader)(diff.artifact_url)
        fetcher.download_to(to, progress)

    def install(
        self,
        updater: Optional[InstallerCallback] = None,
        diff_installer: Optional[DiffInstaller] = None,
    ) -> None:
        """
        Install the difference to the embedded target folder.

        Raises:
            PathNotSpecifiedError: If the target folder is unknown
            (plus everything `install_to_with_temp` raises)
        """
        diff = self._downloadable()
        if diff.target_dir is None:
            raise PathNotSpecifiedError()
        diff.install_to_with_temp(diff.target_dir, None, updater, diff_installer)

    def install_to(
        self,
        path: PathLike,
        updater: Optional[InstallerCallback] = None,
        diff_installer: Optional[DiffInstaller] = None,
    ) -> None:
        """Install the difference to `path`, ignoring the embedded target folder."""
        self.install_to_with_temp(path, None, updater, diff_installer)

    def install_to_with_temp(
        self,
        path: PathLike,
        temp_path: Optional[PathLike] = None,
        updater: Optional[InstallerCallback] = None,
        diff_installer: Optional[DiffInstaller] = None,
    ) -> None:
        """
        Install the difference to `path` using `temp_path` as the staging folder.

        Same as `install_to` when `temp_path` is None (system temp folder is used).

        Raises:
            AlreadyLatestError: If the installation is up to date
            OutdatedError: If the installed version is too old to be patched
            TransportError: If the archive can't be downloaded or unpacked
            HdiffPatchError: If a patch can't be applied
            CorruptedInstallationError: If a patched or outdated file can't be removed or renamed
        """
        diff = self._downloadable()
        logger.info(f"Installing {diff.latest} to {path}")
        (diff_installer or DiffInstaller()).run(diff.artifact_url, path, temp_path, updater)


class UpToDate(VersionDiff):
    """The installed version is the latest one."""
    installed_version: str = Field(min_length=1)


class TooOld(VersionDiff):
    """The installed version can't be updated with a diff."""
    current: str = Field(min_length=1)
    latest: str = Field(min_length=1)


class _DownloadableDiff(VersionDiff):
    latest: str = Field(min_length=1)
    artifact_url: str = Field(min_length=1)
    download_size: NonNegativeInt
    unpacked_size: NonNegativeInt

    # None means the diff was resolved without knowing the installation
    # folder, `install` then raises PathNotSpecifiedError
    target_dir: Optional[Path] = None


class Deliverable(_DownloadableDiff):
    """A diff archive between the installed and the latest version exists."""
    current: str = Field(min_length=1)


class NotInstalled(_DownloadableDiff):
    """Nothing is installed yet, the full package has to be downloaded."""
    pass
