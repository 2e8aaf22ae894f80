"""
Control files left in the installation folder by a diff archive.

`hdifffiles.txt` lists the files that have to be patched, one JSON record per
line::

    {"remoteName": "Data/StreamingAssets/Audio/1001.pck"}

`deletefiles.txt` lists files removed in the new version, one relative path
per line.

Both files form a work queue on disk: entries are processed in line order and
the file itself is removed only after every entry was handled.
"""

from pathlib import Path, PurePosixPath
from typing import List, NamedTuple, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import CorruptedInstallationError, ManifestError
from .types import PathLike


class HdiffEntry(BaseModel):
    """A single record of the patch list."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    remote_name: str = Field(alias="remoteName", min_length=1)


class ManifestEntry(NamedTuple):
    line_number: int
    path: Path


class ControlFile:
    """Base class for the line-based control files."""

    def __init__(self, root: PathLike, name: str):
        self.root = Path(root)
        self.path = self.root / name

    def exists(self) -> bool:
        return self.path.is_file()

    def parse_line(self, line: str, line_number: int) -> str:
        """Extract the relative file path from a line."""
        return line

    def read(self) -> Optional[List[ManifestEntry]]:
        """
        Read every entry of the file.

        Returns:
            Entries in file order with paths resolved against the root folder,
            or None if the file doesn't exist.

        Raises:
            ManifestError: If a line can't be parsed or points outside the root.
            CorruptedInstallationError: If the file exists but can't be read.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CorruptedInstallationError(self.path, f"Failed to read {self.path.name}: {e}") from e

        try:
            content = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            line_number = raw.count(b"\n", 0, e.start) + 1
            raise self._error(line_number, f"Not valid UTF-8 text: {e.reason}") from e

        entries = []
        for line_number, line in enumerate(content.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue

            relative = self.parse_line(line, line_number)
            entries.append(ManifestEntry(line_number, self._resolve(relative, line_number)))

        logger.debug(f"{self.path.name}: {len(entries)} entries")
        return entries

    def remove(self) -> None:
        """Remove the control file once all of its entries are processed."""
        try:
            self.path.unlink()
        except OSError as e:
            raise CorruptedInstallationError(self.path, f"Failed to remove {self.path.name}: {e}") from e

    def _error(self, line_number: int, detail: str) -> ManifestError:
        error = ManifestError(self.path, line_number, detail)
        logger.critical(str(error))
        return error

    def _resolve(self, relative: str, line_number: int) -> Path:
        pure = PurePosixPath(relative.replace("\\", "/"))
        if pure.is_absolute() or ".." in pure.parts:
            raise self._error(line_number, f"Path escapes the installation folder: {relative}")
        # "." names the installation folder itself
        if not pure.parts:
            raise self._error(line_number, f"Path doesn't name a file: {relative}")
        return self.root.joinpath(*pure.parts)


class HdiffList(ControlFile):
    """`hdifffiles.txt`: files that have a `.hdiff` patch next to them."""

    def __init__(self, root: PathLike, name: str = "hdifffiles.txt"):
        super().__init__(root, name)

    def parse_line(self, line: str, line_number: int) -> str:
        try:
            return HdiffEntry.model_validate_json(line).remote_name
        except ValidationError as e:
            raise self._error(line_number, f"Invalid hdiff record {line!r}: {e}") from e


class DeleteList(ControlFile):
    """`deletefiles.txt`: files that don't exist in the new version anymore."""

    def __init__(self, root: PathLike, name: str = "deletefiles.txt"):
        super().__init__(root, name)
