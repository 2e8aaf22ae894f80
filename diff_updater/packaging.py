# packaging.py
"""Defines handlers for unpacking downloaded update archives."""

import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Optional

from .exceptions import InstallationError

# (unpacked entries, total entries)
UnpackProgress = Callable[[int, int], None]


class ZipPackageHandler:
    """Handles ZIP archive packages."""

    def extract(
        self,
        archive_path: Path,
        extract_to: Path,
        progress_callback: Optional[UnpackProgress] = None,
    ) -> None:
        """Extracts a ZIP archive, reporting every extracted entry."""
        try:
            with zipfile.ZipFile(archive_path, "r") as zip_ref:
                entries = zip_ref.infolist()
                total = len(entries)
                for i, file_info in enumerate(entries):
                    zip_ref.extract(file_info, extract_to)
                    if progress_callback:
                        progress_callback(i + 1, total)
        except zipfile.BadZipFile as e:
            raise InstallationError(f"Invalid ZIP file: {e}") from e
        except OSError as e:
            raise InstallationError(f"Failed to extract archive: {e}") from e


class TarPackageHandler:
    """Handles tar archives, compressed or not."""

    def extract(
        self,
        archive_path: Path,
        extract_to: Path,
        progress_callback: Optional[UnpackProgress] = None,
    ) -> None:
        """Extracts a tar archive, reporting every extracted member."""
        try:
            with tarfile.open(archive_path, "r:*") as tar:
                members = tar.getmembers()
                total = len(members)
                for i, member in enumerate(members):
                    if hasattr(tarfile, "data_filter"):
                        tar.extract(member, extract_to, filter="data")
                    else:
                        tar.extract(member, extract_to)
                    if progress_callback:
                        progress_callback(i + 1, total)
        except tarfile.TarError as e:
            raise InstallationError(f"Invalid tar archive: {e}") from e
        except OSError as e:
            raise InstallationError(f"Failed to extract archive: {e}") from e


def get_package_handler(archive_path: Path):
    """
    Pick a handler by looking at the archive contents.

    Raises:
        InstallationError: If the archive format isn't supported.
    """
    if zipfile.is_zipfile(archive_path):
        return ZipPackageHandler()
    if tarfile.is_tarfile(archive_path):
        return TarPackageHandler()
    raise InstallationError(f"Unsupported archive format: {archive_path.name}")
