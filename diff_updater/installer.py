# installer.py
"""Downloads an update archive and unpacks it into an installation folder."""

import posixpath
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from loguru import logger

from .config import DiffUpdaterConfig
from .downloader import Downloader
from .exceptions import InstallationError, NetworkError
from .packaging import get_package_handler
from .types import (
    FetcherFactory, InstallerCallback, InstallerUpdate, InstallStage, PathLike
)


class Installer:
    """
    Package installer.

    1. Downloads the archive into a staging folder (system temp by default).
    2. Unpacks it over the destination folder, keeping files the archive
       doesn't contain.
    3. Removes the staged archive.

    Every step is reported to the `updater` callback as `InstallerUpdate`
    events. Failures are reported as `*_ERROR` events and raised.
    """

    def __init__(
        self,
        url: str,
        config: Optional[DiffUpdaterConfig] = None,
        fetcher_factory: Optional[FetcherFactory] = None,
    ):
        if not url:
            raise NetworkError("Archive URL is empty")

        self.url = url
        self.config = config or DiffUpdaterConfig()
        self.temp_folder = self.config.temp_dir
        self._fetcher_factory = fetcher_factory or (
            lambda archive_url: Downloader.from_config(archive_url, self.config))

    def set_temp_folder(self, path: PathLike) -> "Installer":
        """Use another staging folder for the downloaded archive."""
        self.temp_folder = Path(path)
        return self

    @property
    def archive_name(self) -> str:
        name = posixpath.basename(unquote(urlparse(self.url).path))
        return name or "package.archive"

    def install(self, destination: PathLike, updater: Optional[InstallerCallback] = None) -> None:
        """
        Download and unpack the archive.

        Args:
            destination: Folder the archive is unpacked to
            updater: Optional callback receiving progress events

        Raises:
            NetworkError: If the archive can't be downloaded
            InstallationError: If the archive can't be unpacked
        """
        def report(update: InstallerUpdate) -> None:
            if updater:
                updater(update)

        destination = Path(destination)
        archive_path = self.temp_folder / self.archive_name

        report(InstallerUpdate(InstallStage.DOWNLOADING_STARTED, message=self.url))
        try:
            self.temp_folder.mkdir(parents=True, exist_ok=True)
            fetcher = self._fetcher_factory(self.url)
            fetcher.download_to(
                archive_path,
                lambda current, total: report(
                    InstallerUpdate(InstallStage.DOWNLOADING_PROGRESS, current, total)),
            )
        except NetworkError as e:
            report(InstallerUpdate(InstallStage.DOWNLOADING_ERROR, message=str(e)))
            raise
        except OSError as e:
            report(InstallerUpdate(InstallStage.DOWNLOADING_ERROR, message=str(e)))
            raise NetworkError(f"Failed to prepare staging folder {self.temp_folder}: {e}") from e
        report(InstallerUpdate(InstallStage.DOWNLOADING_FINISHED, message=str(archive_path)))

        report(InstallerUpdate(InstallStage.UNPACKING_STARTED, message=str(destination)))
        try:
            destination.mkdir(parents=True, exist_ok=True)
            handler = get_package_handler(archive_path)
            handler.extract(
                archive_path,
                destination,
                lambda current, total: report(
                    InstallerUpdate(InstallStage.UNPACKING_PROGRESS, current, total)),
            )
        except InstallationError as e:
            report(InstallerUpdate(InstallStage.UNPACKING_ERROR, message=str(e)))
            raise
        except OSError as e:
            report(InstallerUpdate(InstallStage.UNPACKING_ERROR, message=str(e)))
            raise InstallationError(f"Failed to unpack {archive_path} to {destination}: {e}") from e
        finally:
            archive_path.unlink(missing_ok=True)

        logger.info(f"Unpacked {self.archive_name} to {destination}")
        report(InstallerUpdate(InstallStage.UNPACKING_FINISHED, message=str(destination)))
