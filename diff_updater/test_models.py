import pytest
from pathlib import Path
from unittest.mock import Mock

from pydantic import ValidationError

from .exceptions import (
    AlreadyLatestError, NetworkError, OutdatedError, PathNotSpecifiedError
)
from .models import Deliverable, NotInstalled, TooOld, UpToDate, VersionDiff


@pytest.fixture
def up_to_date():
    return UpToDate(installed_version="1.5.0")


@pytest.fixture
def too_old():
    return TooOld(current="1.2.0", latest="1.5.0")


@pytest.fixture
def deliverable(tmp_path):
    return Deliverable(
        current="1.4.0",
        latest="1.5.0",
        artifact_url="https://example.com/1.4.0-1.5.0.zip",
        download_size=100,
        unpacked_size=400,
        target_dir=tmp_path / "game",
    )


@pytest.fixture
def not_installed():
    return NotInstalled(
        latest="1.5.0",
        artifact_url="https://example.com/full-1.5.0.zip",
        download_size=1000,
        unpacked_size=4000,
    )


@pytest.fixture
def diff_installer():
    return Mock()


class FakeFetcher:
    instances = []

    def __init__(self, url):
        self.url = url
        self.downloads = []
        FakeFetcher.instances.append(self)

    def download_to(self, path, progress=None):
        self.downloads.append(Path(path))
        if progress:
            progress(10, 10)


@pytest.fixture(autouse=True)
def reset_fetchers():
    FakeFetcher.instances = []


def test_size_of_non_downloadable_variants(up_to_date, too_old):
    assert up_to_date.size() is None
    assert too_old.size() is None


def test_size_of_downloadable_variants(deliverable, not_installed):
    assert deliverable.size() == (100, 400)
    assert not_installed.size() == (1000, 4000)


def test_target_directory(up_to_date, too_old, deliverable, not_installed, tmp_path):
    assert up_to_date.target_directory() is None
    assert too_old.target_directory() is None
    assert deliverable.target_directory() == tmp_path / "game"
    # Known variant, unknown folder
    assert not_installed.target_directory() is None


def test_target_dir_accepts_strings():
    diff = NotInstalled(latest="1.0", artifact_url="https://x/a.zip",
                        download_size=0, unpacked_size=0, target_dir="/opt/game")
    assert diff.target_directory() == Path("/opt/game")


def test_negative_sizes_are_rejected():
    with pytest.raises(ValidationError):
        NotInstalled(latest="1.0", artifact_url="https://x/a.zip",
                     download_size=-1, unpacked_size=0)


def test_resolutions_are_immutable(deliverable):
    with pytest.raises(ValidationError):
        deliverable.latest = "2.0.0"


def test_resolutions_compare_by_value():
    assert UpToDate(installed_version="1.0") == UpToDate(installed_version="1.0")
    assert TooOld(current="1.0", latest="2.0") != TooOld(current="1.1", latest="2.0")


def test_unknown_variant_is_rejected():
    class Unknown(VersionDiff):
        pass

    with pytest.raises(TypeError):
        Unknown().size()
    with pytest.raises(TypeError):
        Unknown().install_to("/tmp/somewhere")


def test_download_up_to_date_fails(up_to_date, tmp_path):
    with pytest.raises(AlreadyLatestError):
        up_to_date.download(tmp_path / "a.zip", fetcher_factory=FakeFetcher)
    assert FakeFetcher.instances == []


def test_download_too_old_fails(too_old, tmp_path):
    with pytest.raises(OutdatedError) as exc_info:
        too_old.download(tmp_path / "a.zip", fetcher_factory=FakeFetcher)
    assert exc_info.value.current == "1.2.0"
    assert exc_info.value.latest == "1.5.0"
    assert FakeFetcher.instances == []


def test_download_delegates_to_fetcher(deliverable, tmp_path):
    progress = Mock()
    deliverable.download(tmp_path / "a.zip", progress, fetcher_factory=FakeFetcher)

    fetcher, = FakeFetcher.instances
    assert fetcher.url == "https://example.com/1.4.0-1.5.0.zip"
    assert fetcher.downloads == [tmp_path / "a.zip"]
    progress.assert_called_once_with(10, 10)


def test_download_propagates_transport_errors(not_installed, tmp_path):
    def failing_factory(url):
        raise NetworkError(f"can't reach {url}")

    with pytest.raises(NetworkError):
        not_installed.download(tmp_path / "a.zip", fetcher_factory=failing_factory)


@pytest.mark.parametrize("method, args", [
    ("install", ()),
    ("install_to", ("/opt/game",)),
    ("install_to_with_temp", ("/opt/game", "/tmp/staging")),
])
def test_install_rejects_non_downloadable(method, args, up_to_date, too_old, diff_installer):
    with pytest.raises(AlreadyLatestError):
        getattr(up_to_date, method)(*args, diff_installer=diff_installer)
    with pytest.raises(OutdatedError):
        getattr(too_old, method)(*args, diff_installer=diff_installer)
    diff_installer.run.assert_not_called()


def test_install_without_target_dir(not_installed, diff_installer, tmp_path):
    with pytest.raises(PathNotSpecifiedError):
        not_installed.install(diff_installer=diff_installer)
    diff_installer.run.assert_not_called()
    assert list(tmp_path.iterdir()) == []


def test_install_uses_embedded_target_dir(deliverable, diff_installer, tmp_path):
    updater = Mock()
    deliverable.install(updater, diff_installer=diff_installer)
    diff_installer.run.assert_called_once_with(
        "https://example.com/1.4.0-1.5.0.zip", tmp_path / "game", None, updater)


def test_install_to_overrides_target_dir(deliverable, diff_installer, tmp_path):
    deliverable.install_to(tmp_path / "other", diff_installer=diff_installer)
    diff_installer.run.assert_called_once_with(
        "https://example.com/1.4.0-1.5.0.zip", tmp_path / "other", None, None)


def test_install_to_with_temp(not_installed, diff_installer, tmp_path):
    not_installed.install_to_with_temp(
        tmp_path / "game", tmp_path / "staging", diff_installer=diff_installer)
    diff_installer.run.assert_called_once_with(
        "https://example.com/full-1.5.0.zip", tmp_path / "game", tmp_path / "staging", None)
