# transaction.py
"""Installs a diff archive and applies the changes it describes."""

from pathlib import Path
from typing import Optional

from loguru import logger

from .config import DiffUpdaterConfig
from .exceptions import CorruptedInstallationError, HdiffPatchError, PatchError
from .hpatchz import HPatchZ
from .installer import Installer
from .manifest import DeleteList, HdiffList
from .types import InstallerCallback, InstallerFactory, PatchEngine, PathLike


def _remove_file(path: Path, what: str) -> None:
    try:
        path.unlink()
    except OSError as e:
        logger.critical(f"Failed to remove {what} {path}: {e}")
        raise CorruptedInstallationError(path, f"Failed to remove {what}: {e}") from e


def _rename_file(source: Path, target: Path) -> None:
    try:
        source.replace(target)
    except OSError as e:
        logger.critical(f"Failed to rename {source} to {target}: {e}")
        raise CorruptedInstallationError(target, f"Failed to rename {source.name}: {e}") from e


class DiffInstaller:
    """
    Runs the diff installation transaction over a destination folder.

    1. Downloads and unpacks the archive with the package installer.
    2. Applies every patch listed in `hdifffiles.txt`.
    3. Removes every file listed in `deletefiles.txt`.

    Each list is processed completely before its control file is removed, so
    an interrupted run can be repeated: entries that were already applied no
    longer have a `.hdiff` file next to them and are skipped. The steps are
    not rolled back on failure.
    """

    def __init__(
        self,
        config: Optional[DiffUpdaterConfig] = None,
        installer_factory: Optional[InstallerFactory] = None,
        patch_engine: Optional[PatchEngine] = None,
    ):
        self.config = config or DiffUpdaterConfig()
        self._installer_factory = installer_factory or (
            lambda url: Installer(url, config=self.config))
        self.patch_engine = patch_engine or HPatchZ(self.config.hpatchz_path)

    def run(
        self,
        url: str,
        destination: PathLike,
        temp_folder: Optional[PathLike] = None,
        updater: Optional[InstallerCallback] = None,
    ) -> None:
        """
        Install the archive from `url` into `destination` and apply its changes.

        Args:
            url: URL of the diff or full package archive
            destination: Installation folder
            temp_folder: Staging folder for the archive, system temp when None
            updater: Callback receiving installer progress events

        Raises:
            TransportError: If the archive can't be downloaded or unpacked
            HdiffPatchError: If a patch can't be applied
            ManifestError: If a control file is malformed
            CorruptedInstallationError: If a managed file can't be removed or renamed
        """
        destination = Path(destination)
        logger.info(f"Installing {url} to {destination}")

        installer = self._installer_factory(url)
        if temp_folder is not None:
            installer = installer.set_temp_folder(temp_folder)
        installer.install(destination, updater)

        patched = self.apply_patches(destination)
        removed = self.remove_outdated_files(destination)

        logger.info(f"Installed {url}: {patched} files patched, {removed} files removed")

    def apply_patches(self, destination: PathLike) -> int:
        """
        Apply the hdiff patches listed in the destination folder.

        Returns:
            int: Number of patched files. 0 when there is no patch list.
        """
        hdiff_list = HdiffList(destination, self.config.hdiff_list_name)
        entries = hdiff_list.read()
        if entries is None:
            logger.debug(f"No {hdiff_list.path.name} in {destination}, nothing to patch")
            return 0

        patched = 0
        for entry in entries:
            if self._apply_patch(entry.path):
                patched += 1

        hdiff_list.remove()
        logger.info(f"Applied {patched} of {len(entries)} hdiff patches")
        return patched

    def _apply_patch(self, file: Path) -> bool:
        patch = file.with_name(file.name + ".hdiff")
        output = file.with_name(file.name + ".hdiff_patched")

        if not patch.exists():
            if file.exists():
                logger.warning(f"Patch for {file} is missing, assuming it was already applied")
                return False
            if output.exists():
                # Interrupted after the original file was removed
                logger.warning(f"Finishing interrupted patch of {file}")
                _rename_file(output, file)
                return True
            raise HdiffPatchError(file, "neither the file nor its patch exist")

        if not file.exists():
            if output.exists():
                logger.warning(f"Finishing interrupted patch of {file}")
                _remove_file(patch, "hdiff patch")
                _rename_file(output, file)
                return True
            raise HdiffPatchError(file, "file to patch doesn't exist")

        logger.debug(f"Patching {file}")
        try:
            self.patch_engine.patch(file, patch, output)
        except PatchError as e:
            logger.error(f"Failed to apply hdiff patch to {file}: {e}")
            raise HdiffPatchError(file, str(e)) from e

        _remove_file(file, "patched file")
        _remove_file(patch, "hdiff patch")
        _rename_file(output, file)
        return True

    def remove_outdated_files(self, destination: PathLike) -> int:
        """
        Remove the files listed as outdated in the destination folder.

        Returns:
            int: Number of removed files. 0 when there is no delete list.
        """
        delete_list = DeleteList(destination, self.config.delete_list_name)
        entries = delete_list.read()
        if entries is None:
            logger.debug(f"No {delete_list.path.name} in {destination}, nothing to remove")
            return 0

        removed = 0
        for entry in entries:
            if not entry.path.exists() and not entry.path.is_symlink():
                logger.debug(f"Outdated file already removed: {entry.path}")
                continue
            _remove_file(entry.path, "outdated file")
            removed += 1

        delete_list.remove()
        logger.info(f"Removed {removed} outdated files")
        return removed
