"""
Wrapper over the hpatchz command line tool from HDiffPatch.
"""

import shutil
import subprocess

from loguru import logger

from .exceptions import PatchError
from .types import PathLike


class HPatchZ:
    """Applies hdiff patches by running the hpatchz executable."""

    def __init__(self, executable: str = "hpatchz"):
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def patch(self, original: PathLike, patch: PathLike, output: PathLike) -> None:
        """
        Apply `patch` to `original`, writing the result to `output`.

        An existing `output` is overwritten.

        Raises:
            PatchError: If hpatchz can't be started or exits with an error.
        """
        command = [self.executable, "-f", str(original), str(patch), str(output)]
        logger.debug(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            raise PatchError(f"Failed to run {self.executable}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip() or result.stdout.strip()
            raise PatchError(
                f"{self.executable} exited with code {result.returncode}: {stderr}")
