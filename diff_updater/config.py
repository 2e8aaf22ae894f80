"""Configuration model for the diff updater, validated by Pydantic."""

import json
import tempfile
from pathlib import Path
from typing import Any, Literal, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .types import PathLike

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class DiffUpdaterConfig(BaseModel):
    """Configuration for the diff updater.

    Attributes:
        temp_dir: Staging folder for downloaded archives
        hpatchz_path: Name or path of the hpatchz executable
        chunk_size: Download chunk size in bytes
        timeout: Total download timeout in seconds
        show_progress: Whether to draw a console progress bar while downloading
        hdiff_list_name: Name of the patch list inside the installation folder
        delete_list_name: Name of the outdated files list inside the installation folder
        log_level: Level for the stderr log sink
        log_file: Optional rotating log file
        log_rotation: When the log file is rotated, in loguru terms ("10 MB", "1 day")
        log_retention: How long rotated log files are kept
    """
    temp_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()).resolve())
    hpatchz_path: str = "hpatchz"
    chunk_size: int = Field(default=8192, gt=0)
    timeout: float = Field(default=300.0, gt=0)
    show_progress: bool = False
    hdiff_list_name: str = "hdifffiles.txt"
    delete_list_name: str = "deletefiles.txt"
    log_level: LogLevel = "INFO"
    log_file: Optional[Path] = None
    log_rotation: str = "10 MB"
    log_retention: str = "1 week"

    @field_validator("temp_dir", mode="before")
    @classmethod
    def _ensure_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("hdiff_list_name", "delete_list_name")
    @classmethod
    def _plain_file_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError(f"must be a plain file name, got {v!r}")
        return v


def load_config(path: Optional[PathLike] = None) -> DiffUpdaterConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Path to the JSON file. Defaults are used when None.

    Returns:
        DiffUpdaterConfig: The validated configuration.

    Raises:
        ConfigError: If the file can't be read or contains invalid values.
    """
    if path is None:
        return DiffUpdaterConfig()

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a JSON object")

    try:
        config = DiffUpdaterConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return config
