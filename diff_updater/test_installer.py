import shutil
import tarfile
import zipfile
import pytest
from pathlib import Path

from .config import DiffUpdaterConfig
from .exceptions import InstallationError, NetworkError
from .installer import Installer
from .types import InstallStage


class LocalFetcher:
    """Copies a local file instead of downloading it."""

    def __init__(self, source: Path, error=None):
        self.source = source
        self.error = error

    def download_to(self, path, progress=None):
        if self.error:
            raise self.error
        shutil.copyfile(self.source, path)
        size = self.source.stat().st_size
        if progress:
            progress(size // 2, size)
            progress(size, size)


@pytest.fixture
def zip_archive(tmp_path):
    path = tmp_path / "source" / "diff.zip"
    path.parent.mkdir()
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("a.pck", b"new a")
        zf.writestr("Data/b.pck.hdiff", b"patch b")
        zf.writestr("hdifffiles.txt", '{"remoteName": "Data/b.pck"}\n')
    return path


@pytest.fixture
def staging(tmp_path):
    return tmp_path / "staging"


def make_installer(url, archive, staging, error=None):
    return Installer(
        url,
        config=DiffUpdaterConfig(temp_dir=staging),
        fetcher_factory=lambda _: LocalFetcher(archive, error),
    )


def test_install_unpacks_over_destination(tmp_path, zip_archive, staging):
    destination = tmp_path / "game"
    (destination / "Data").mkdir(parents=True)
    (destination / "Data" / "b.pck").write_bytes(b"old b")
    (destination / "a.pck").write_bytes(b"old a")

    make_installer("https://example.com/files/diff.zip", zip_archive, staging).install(destination)

    assert (destination / "a.pck").read_bytes() == b"new a"
    assert (destination / "Data" / "b.pck").read_bytes() == b"old b"
    assert (destination / "Data" / "b.pck.hdiff").read_bytes() == b"patch b"
    assert (destination / "hdifffiles.txt").exists()
    # Staged archive is removed
    assert list(staging.iterdir()) == []


def test_install_reports_progress(tmp_path, zip_archive, staging):
    events = []
    make_installer("https://example.com/diff.zip", zip_archive, staging).install(
        tmp_path / "game", events.append)

    stages = [event.stage for event in events]
    assert stages == [
        InstallStage.DOWNLOADING_STARTED,
        InstallStage.DOWNLOADING_PROGRESS,
        InstallStage.DOWNLOADING_PROGRESS,
        InstallStage.DOWNLOADING_FINISHED,
        InstallStage.UNPACKING_STARTED,
        InstallStage.UNPACKING_PROGRESS,
        InstallStage.UNPACKING_PROGRESS,
        InstallStage.UNPACKING_PROGRESS,
        InstallStage.UNPACKING_FINISHED,
    ]
    assert events[2].progress == 1.0
    assert (events[-2].current, events[-2].total) == (3, 3)


def test_install_tar_archive(tmp_path, staging):
    payload = tmp_path / "payload.txt"
    payload.write_bytes(b"payload")
    archive = tmp_path / "full.tar.gz"
    with tarfile.open(archive, "w:gz") as tar:
        tar.add(payload, arcname="bin/payload.txt")

    make_installer("https://example.com/full.tar.gz", archive, staging).install(tmp_path / "game")

    assert (tmp_path / "game" / "bin" / "payload.txt").read_bytes() == b"payload"


def test_set_temp_folder(tmp_path, zip_archive, staging):
    other = tmp_path / "other-staging"
    installer = make_installer("https://example.com/diff.zip", zip_archive, staging)

    assert installer.set_temp_folder(other) is installer
    installer.install(tmp_path / "game")

    assert installer.temp_folder == other
    assert other.is_dir()
    assert not staging.exists()


def test_download_error(tmp_path, zip_archive, staging):
    events = []
    installer = make_installer("https://example.com/diff.zip", zip_archive, staging,
                               error=NetworkError("connection reset"))

    with pytest.raises(NetworkError):
        installer.install(tmp_path / "game", events.append)

    assert events[-1].stage == InstallStage.DOWNLOADING_ERROR
    assert "connection reset" in events[-1].message
    assert not (tmp_path / "game").exists()


def test_unpacking_error(tmp_path, staging):
    broken = tmp_path / "broken.zip"
    broken.write_bytes(b"this is not an archive")
    events = []

    with pytest.raises(InstallationError):
        make_installer("https://example.com/broken.zip", broken, staging).install(
            tmp_path / "game", events.append)

    assert events[-1].stage == InstallStage.UNPACKING_ERROR
    assert list(staging.iterdir()) == []


@pytest.mark.parametrize("url, name", [
    ("https://example.com/files/game_1.4.0_1.5.0.zip", "game_1.4.0_1.5.0.zip"),
    ("https://example.com/files/a%20b.zip?token=1", "a b.zip"),
    ("https://example.com/", "package.archive"),
])
def test_archive_name(url, name):
    assert Installer(url).archive_name == name


def test_empty_url():
    with pytest.raises(NetworkError):
        Installer("")
