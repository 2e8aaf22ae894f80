# resolver.py
"""Builds update resolutions from remote release metadata."""

import asyncio
from pathlib import Path
from typing import List, Optional, Protocol

import aiohttp
from loguru import logger
from pydantic import BaseModel, Field, NonNegativeInt, ValidationError

from .exceptions import NetworkError
from .models import Deliverable, NotInstalled, TooOld, UpToDate, VersionDiff
from .types import PathLike, VersionComparator
from .utils import compare_versions, run_sync


class DiffArchive(BaseModel):
    """A diff archive updating `version` to the release it belongs to."""
    version: str = Field(min_length=1)
    url: str = Field(min_length=1)
    download_size: NonNegativeInt
    unpacked_size: NonNegativeInt


class RemoteRelease(BaseModel):
    """The latest release: the full package and the diffs leading to it."""
    version: str = Field(min_length=1)
    url: str = Field(min_length=1)
    download_size: NonNegativeInt
    unpacked_size: NonNegativeInt
    diffs: List[DiffArchive] = Field(default_factory=list)


class DiffProvider(Protocol):
    """Protocol for objects that know both the installed and the latest version."""

    def try_get_diff(self) -> VersionDiff: ...


def resolve_version_diff(
    installed: Optional[str],
    release: RemoteRelease,
    install_path: Optional[PathLike] = None,
    comparator: VersionComparator = compare_versions,
) -> VersionDiff:
    """
    Classify the difference between the installed version and a release.

    Args:
        installed: Installed version, None if nothing is installed
        release: Latest release metadata
        install_path: Installation folder, embedded into downloadable diffs
        comparator: Version comparison function

    Returns:
        VersionDiff: One of UpToDate, Deliverable, TooOld or NotInstalled
    """
    target_dir = Path(install_path) if install_path is not None else None

    if installed is None:
        logger.debug(f"Nothing installed, full package {release.version} required")
        return NotInstalled(
            latest=release.version,
            artifact_url=release.url,
            download_size=release.download_size,
            unpacked_size=release.unpacked_size,
            target_dir=target_dir,
        )

    if comparator(installed, release.version) >= 0:
        logger.debug(f"Installed version {installed} is the latest one")
        return UpToDate(installed_version=installed)

    for diff in release.diffs:
        if comparator(diff.version, installed) == 0:
            logger.debug(f"Found diff {diff.version} -> {release.version}")
            return Deliverable(
                current=installed,
                latest=release.version,
                artifact_url=diff.url,
                download_size=diff.download_size,
                unpacked_size=diff.unpacked_size,
                target_dir=target_dir,
            )

    logger.debug(f"No diff from {installed} to {release.version}")
    return TooOld(current=installed, latest=release.version)


class JsonReleaseSource:
    """Fetches release metadata from a JSON document."""

    def __init__(self, url: str, timeout: float = 30.0):
        self.url = url
        self.timeout = timeout

    async def fetch(self) -> RemoteRelease:
        """
        Fetch and validate the release document.

        Raises:
            NetworkError: If the document can't be fetched or is invalid.
        """
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url) as response:
                    response.raise_for_status()
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise NetworkError(f"Failed to fetch release info from {self.url}: {e}") from e

        try:
            return RemoteRelease.model_validate(data)
        except ValidationError as e:
            raise NetworkError(f"Invalid release info from {self.url}: {e}") from e

    def get(self) -> RemoteRelease:
        return run_sync(self.fetch)
