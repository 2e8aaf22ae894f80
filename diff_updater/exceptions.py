#!/usr/bin/env python3
"""
Exception types for the diff updater
"""

from pathlib import Path
from typing import Optional, Union


class UpdaterError(Exception):
    """Base exception for all diff updater errors"""
    pass


class AlreadyLatestError(UpdaterError):
    """Installation is already up to date and doesn't need to be updated"""

    def __init__(self, version: Optional[str] = None):
        self.version = version
        message = "Installation is already up to date"
        if version:
            message += f" ({version})"
        super().__init__(message)


class OutdatedError(UpdaterError):
    """
    Installed version is too old to be updated with a diff.
    Everything has to be downloaded from zero.
    """

    def __init__(self, current: Optional[str] = None, latest: Optional[str] = None):
        self.current = current
        self.latest = latest
        message = "Installed version is too outdated to be patched"
        if current and latest:
            message += f" ({current} -> {latest})"
        super().__init__(message)


class PathNotSpecifiedError(UpdaterError):
    """
    Installation path wasn't specified.

    Happens when `install` is called on a diff that was resolved without
    knowing where the package is installed.
    """

    def __init__(self):
        super().__init__("Installation path wasn't specified")


class TransportError(UpdaterError):
    """Failure reported by the artifact fetcher or the package installer"""
    pass


class NetworkError(TransportError):
    """Exception raised for network-related errors"""
    pass


class InstallationError(TransportError):
    """Exception raised when a downloaded archive can't be unpacked"""
    pass


class PatchError(UpdaterError):
    """Exception raised by a patch engine when a patch can't be applied"""
    pass


class HdiffPatchError(UpdaterError):
    """Failed to apply hdiff patch to one of the installation files"""

    def __init__(self, path: Union[str, Path], detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"Failed to apply hdiff patch to {self.path}: {detail}")


class ManifestError(UpdaterError):
    """A control file contains an entry that can't be parsed"""

    def __init__(self, manifest: Union[str, Path], line_number: int, detail: str):
        self.manifest = Path(manifest)
        self.line_number = line_number
        super().__init__(f"{self.manifest}:{line_number}: {detail}")


class CorruptedInstallationError(UpdaterError):
    """
    A file managed by the diff transaction couldn't be removed or renamed.

    The installation tree may now contain mismatched files and must not be
    used until the transaction is run again.
    """

    def __init__(self, path: Union[str, Path], detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"{detail}: {self.path}")


class ConfigError(UpdaterError):
    """Exception raised when there's a configuration error"""
    pass
