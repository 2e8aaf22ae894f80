import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from .config import DiffUpdaterConfig, load_config
from .downloader import Downloader
from .exceptions import AlreadyLatestError, ConfigError, OutdatedError, UpdaterError
from .logging_config import setup_logging
from .models import UpToDate, TooOld, VersionDiff
from .resolver import JsonReleaseSource, RemoteRelease, resolve_version_diff
from .transaction import DiffInstaller
from .types import InstallerUpdate, InstallStage

EXIT_OUTDATED = 2


def load_release(source: str, config: DiffUpdaterConfig) -> RemoteRelease:
    """Load release metadata from a URL or a local JSON file."""
    if source.startswith(("http://", "https://")):
        return JsonReleaseSource(source, timeout=config.timeout).get()

    path = Path(source)
    try:
        return RemoteRelease.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read release file {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid release file {path}: {e}") from e


def describe(diff: VersionDiff) -> str:
    if isinstance(diff, UpToDate):
        return f"Already up to date ({diff.installed_version})"
    if isinstance(diff, TooOld):
        return f"Installed version {diff.current} is too old to be updated to {diff.latest}"

    download_size, unpacked_size = diff.size()
    return (f"Update to {diff.latest} available: "
            f"{download_size} bytes to download, {unpacked_size} bytes unpacked")


def print_installer_update(update: InstallerUpdate) -> None:
    if update.stage in (InstallStage.DOWNLOADING_PROGRESS, InstallStage.UNPACKING_PROGRESS):
        return
    print(f"[{update.stage.value}] {update.message}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main entry point for the command-line interface.

    Returns:
        int: Exit code (0 for success, 2 if the installation is too old to be patched,
            1 for any other failure)
    """
    parser = argparse.ArgumentParser(
        description="Diff Updater - Update an installed package with binary diffs"
    )

    parser.add_argument(
        "--release",
        type=str,
        required=True,
        help="URL or path of the release info (JSON)",
    )

    parser.add_argument(
        "--installed",
        type=str,
        help="Installed version, omit for a fresh install",
    )

    parser.add_argument(
        "--install-dir",
        type=str,
        help="Installation folder",
    )

    parser.add_argument(
        "--temp-dir",
        type=str,
        help="Staging folder for downloaded archives",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to the configuration file (JSON)",
    )

    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only check for updates, don't download or install",
    )

    parser.add_argument(
        "--download-only",
        type=str,
        metavar="PATH",
        help="Download the archive to PATH without installing it",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (can be used multiple times)",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.temp_dir:
            config = config.model_copy(update={"temp_dir": Path(args.temp_dir).resolve()})

        setup_logging(config, args.verbose)

        release = load_release(args.release, config)
        diff = resolve_version_diff(args.installed, release, args.install_dir)
        print(describe(diff))

        if args.check_only:
            return EXIT_OUTDATED if isinstance(diff, TooOld) else 0

        if args.download_only:
            diff.download(
                args.download_only,
                fetcher_factory=lambda url: Downloader.from_config(url, config),
            )
            print(f"Archive downloaded to: {args.download_only}")
            return 0

        diff.install(print_installer_update, DiffInstaller(config))
        print("Update installed successfully")
        return 0

    except AlreadyLatestError:
        return 0
    except OutdatedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_OUTDATED
    except UpdaterError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
