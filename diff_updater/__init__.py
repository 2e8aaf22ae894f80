"""
Diff Updater

Resolves and applies delta updates of a locally installed package.

Given the installed version and the latest release, the difference is
classified as up to date, deliverable as a binary diff, too old to be
patched, or not installed at all. Deliverable and not installed packages can
be downloaded and installed: the archive is unpacked over the installation
folder, hdiff patches listed in `hdifffiles.txt` are applied and files
listed in `deletefiles.txt` are removed.

Features:
- Exhaustive update resolution with immutable values
- Async streaming downloads with progress callbacks
- hdiff patch application via hpatchz
- Resumable patch and cleanup passes driven by on-disk control files
- Usable both as a command-line tool and as a Python library

License: GPL-3.0-or-later
"""

from .exceptions import (
    UpdaterError,
    AlreadyLatestError,
    OutdatedError,
    PathNotSpecifiedError,
    TransportError,
    NetworkError,
    InstallationError,
    PatchError,
    HdiffPatchError,
    ManifestError,
    CorruptedInstallationError,
    ConfigError,
)
from .types import InstallStage, InstallerUpdate, PathLike
from .models import VersionDiff, UpToDate, Deliverable, TooOld, NotInstalled
from .config import DiffUpdaterConfig, load_config
from .downloader import Downloader
from .installer import Installer
from .hpatchz import HPatchZ
from .transaction import DiffInstaller
from .resolver import (
    DiffArchive,
    DiffProvider,
    JsonReleaseSource,
    RemoteRelease,
    resolve_version_diff,
)
from .utils import compare_versions, parse_version
from .logging_config import setup_logging

__version__ = "1.0.0"
__license__ = "GPL-3.0-or-later"

__all__ = [
    # Update resolution
    "VersionDiff",
    "UpToDate",
    "Deliverable",
    "TooOld",
    "NotInstalled",
    "resolve_version_diff",
    "RemoteRelease",
    "DiffArchive",
    "DiffProvider",
    "JsonReleaseSource",
    # Installation
    "DiffInstaller",
    "Installer",
    "Downloader",
    "HPatchZ",
    "InstallStage",
    "InstallerUpdate",
    # Configuration
    "DiffUpdaterConfig",
    "load_config",
    "setup_logging",
    # Exceptions
    "UpdaterError",
    "AlreadyLatestError",
    "OutdatedError",
    "PathNotSpecifiedError",
    "TransportError",
    "NetworkError",
    "InstallationError",
    "PatchError",
    "HdiffPatchError",
    "ManifestError",
    "CorruptedInstallationError",
    "ConfigError",
    # Utility functions
    "compare_versions",
    "parse_version",
    "get_tool_info",
    # Type definitions
    "PathLike",
]


def get_tool_info() -> dict:
    """
    Return metadata about this tool for discovery by tool loaders.

    Returns:
        Dict containing tool metadata including name, version, description,
        available functions, requirements, and platform compatibility.
    """
    return {
        "name": "diff_updater",
        "version": __version__,
        "description": "Delta update resolution and hdiff patch installation",
        "license": __license__,
        "supported": True,
        "platform": ["windows", "linux", "macos"],
        "functions": [
            "resolve_version_diff",
            "download",
            "install",
            "install_to",
            "install_to_with_temp",
            "apply_patches",
            "remove_outdated_files",
            "compare_versions",
            "parse_version",
        ],
        "requirements": [
            "aiohttp",
            "aiofiles",
            "pydantic",
            "tqdm",
            "loguru",
            "hpatchz (external binary)",
        ],
        "capabilities": [
            "update_resolution",
            "async_downloads",
            "hdiff_patching",
            "outdated_file_cleanup",
            "resumable_transactions",
        ],
        "classes": {
            "VersionDiff": "Immutable update resolution (UpToDate, Deliverable, TooOld, NotInstalled)",
            "DiffInstaller": "Install + patch + cleanup transaction",
            "Installer": "Downloads and unpacks update archives",
        },
    }
