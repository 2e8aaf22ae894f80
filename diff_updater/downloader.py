# downloader.py
"""Streams remote artifacts to disk with aiohttp."""

import asyncio
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp
from loguru import logger
from tqdm import tqdm

from .config import DiffUpdaterConfig
from .exceptions import NetworkError
from .types import DownloadProgress, PathLike
from .utils import run_sync


class Downloader:
    """
    Downloads a single URL to a local file.

    The download itself is asynchronous; `download_to` runs it to completion
    on a private event loop so the class can be used from plain synchronous
    code. Progress callbacks are invoked from that loop's thread.
    """

    def __init__(
        self,
        url: str,
        chunk_size: int = 8192,
        timeout: float = 300.0,
        show_progress: bool = False,
    ):
        """
        Initialize the downloader.

        Args:
            url: URL of the file to download
            chunk_size: Size of the chunks read from the response
            timeout: Total timeout of the request in seconds
            show_progress: Draw a tqdm progress bar on the console
        """
        if not url:
            raise NetworkError("Download URL is empty")

        self.url = url
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.show_progress = show_progress

    @classmethod
    def from_config(cls, url: str, config: DiffUpdaterConfig) -> "Downloader":
        return cls(
            url,
            chunk_size=config.chunk_size,
            timeout=config.timeout,
            show_progress=config.show_progress,
        )

    async def fetch(self, path: PathLike, progress: Optional[DownloadProgress] = None) -> Path:
        """
        Download the file asynchronously.

        Args:
            path: Destination file path. Parent folders are created.
            progress: Optional callback receiving (downloaded, total) bytes.
                `total` is 0 when the server doesn't report a content length.

        Returns:
            Path: Path to the downloaded file.

        Raises:
            NetworkError: If the request fails. The partial file is removed.
        """
        path = Path(path)
        logger.info(f"Downloading {self.url} to {path}")

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        downloaded = 0

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url) as response:
                    response.raise_for_status()
                    total_size = int(response.headers.get("content-length", 0))

                    with tqdm(total=total_size or None, unit="B", unit_scale=True,
                              desc=path.name, disable=not self.show_progress) as pbar:
                        async with aiofiles.open(path, "wb") as f:
                            async for chunk in response.content.iter_chunked(self.chunk_size):
                                await f.write(chunk)
                                downloaded += len(chunk)
                                pbar.update(len(chunk))
                                if progress:
                                    progress(downloaded, total_size)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            path.unlink(missing_ok=True)
            raise NetworkError(f"Failed to download file from {self.url}: {e}") from e
        except OSError as e:
            path.unlink(missing_ok=True)
            raise NetworkError(f"Failed to write downloaded file {path}: {e}") from e

        logger.debug(f"Downloaded {downloaded} bytes from {self.url}")
        return path

    def download_to(self, path: PathLike, progress: Optional[DownloadProgress] = None) -> None:
        """
        Download the file, blocking until it's done.

        Safe to call from a coroutine: the download then runs on its own
        event loop in a worker thread, where the progress callback is invoked.

        Args:
            path: Destination file path
            progress: Optional callback receiving (downloaded, total) bytes
        """
        run_sync(lambda: self.fetch(path, progress))
