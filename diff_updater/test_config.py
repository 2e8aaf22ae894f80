import json
import tempfile
import pytest
from pathlib import Path

from .config import DiffUpdaterConfig, load_config
from .exceptions import ConfigError


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults():
    config = load_config()
    assert config.temp_dir == Path(tempfile.gettempdir()).resolve()
    assert config.hpatchz_path == "hpatchz"
    assert config.hdiff_list_name == "hdifffiles.txt"
    assert config.delete_list_name == "deletefiles.txt"


def test_load_from_file(tmp_path):
    path = write_json(tmp_path / "config.json", {
        "temp_dir": str(tmp_path / "staging"),
        "hpatchz_path": "/usr/local/bin/hpatchz",
        "chunk_size": 65536,
        "log_level": "DEBUG",
    })

    config = load_config(path)

    assert config.temp_dir == (tmp_path / "staging").resolve()
    assert config.hpatchz_path == "/usr/local/bin/hpatchz"
    assert config.chunk_size == 65536
    assert config.log_level == "DEBUG"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.json")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_malformed_file(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("data", [
    {"chunk_size": 0},
    {"timeout": -1},
    {"log_level": "LOUD"},
    {"hdiff_list_name": "../hdifffiles.txt"},
    {"delete_list_name": ""},
])
def test_invalid_values(tmp_path, data):
    with pytest.raises(ConfigError):
        load_config(write_json(tmp_path / "config.json", data))


def test_config_model_accepts_strings(tmp_path):
    config = DiffUpdaterConfig(temp_dir=str(tmp_path))
    assert isinstance(config.temp_dir, Path)
