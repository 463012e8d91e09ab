import signal

import pytest

from models.errors import InvalidParameterError, UnsupportedFormatError
from models.pixel import Pixel
from models.raster_image import RasterImage
from repositories.image_repository import ImageRepository


@pytest.fixture
def repository():
    return ImageRepository()


def test_grid_text_layout(repository, sample_image):
    text = repository.to_grid_text(sample_image)
    assert text == "2 2\n255 0 0 0 255 0\n0 0 255 255 255 255\n"
    assert repository.from_grid_text(text) == sample_image


def test_grid_text_accepts_any_whitespace(repository):
    img = repository.from_grid_text("1 2   10 20 30\n\n40 50\t60")
    assert img.size == (1, 2)
    assert img.get_pixel(0, 1) == Pixel(40, 50, 60)


@pytest.mark.parametrize("text", ["", "2 2 1 2 3", "1 1 a b c", "2", "1 1 99999999999 0 0", "1 1 0 -99999999999 0"])
def test_malformed_grid_text(repository, text):
    with pytest.raises(InvalidParameterError):
        repository.from_grid_text(text)


def test_ppm_round_trip(repository, random_image, tmp_path):
    path = tmp_path / "noise.ppm"
    repository.save(random_image, path)
    assert path.read_text().startswith("P3\n7 5\n255\n")
    loaded = repository.load(path)
    assert loaded == random_image
    assert loaded.path == path


def test_ppm_comments_are_ignored(repository):
    text = "P3\n# made by hand\n1 1\n255\n1 2 3 # trailing\n"
    assert repository.from_ppm_text(text).get_pixel(0, 0) == Pixel(1, 2, 3)


def test_ppm_requires_magic(repository):
    with pytest.raises(InvalidParameterError):
        repository.from_ppm_text("P6\n1 1\n255\n1 2 3\n")


def test_ppm_channel_out_of_range(repository):
    with pytest.raises(InvalidParameterError):
        repository.from_ppm_text("P3\n1 1\n255\n99999999999 0 0\n")


def test_ppm_non_ascii_file(repository, tmp_path):
    path = tmp_path / "accent.ppm"
    path.write_bytes(b"P3\n1 1\n255\n1 2 3 # caf\xc3\xa9\n")
    with pytest.raises(InvalidParameterError):
        repository.load(path)


def test_png_round_trip(repository, random_image, tmp_path):
    path = repository.save(random_image, tmp_path / "noise.png")
    assert repository.load(path) == random_image


def test_jpeg_save_and_load(repository, random_image, tmp_path):
    path = repository.save(random_image, tmp_path / "noise", fmt="JPG")
    loaded = repository.load(path)
    assert loaded.size == random_image.size


def test_unsupported_format(repository, sample_image, tmp_path):
    with pytest.raises(UnsupportedFormatError):
        repository.save(sample_image, tmp_path / "out.gif")


def test_save_without_path(repository, sample_image):
    with pytest.raises(InvalidParameterError):
        repository.save(sample_image)


@pytest.mark.parametrize("name", ["missing.ppm", "missing.png"])
def test_missing_file(repository, tmp_path, name):
    with pytest.raises(FileNotFoundError):
        repository.load(tmp_path / name)


def test_iter_dir_skips_bad_and_foreign_files(repository, sample_image, tmp_path):
    repository.save(sample_image, tmp_path / "a.ppm")
    repository.save(sample_image, tmp_path / "b.png")
    (tmp_path / "broken.ppm").write_text("P3\n2 2\n255\n1 2 3\n")
    (tmp_path / "huge.ppm").write_text("P3\n1 1\n255\n99999999999 0 0\n")
    (tmp_path / "latin.ppm").write_bytes(b"P3\n1 1\n255\n1 2 3 # caf\xc3\xa9\n")
    (tmp_path / "notes.txt").write_text("not an image")

    loaded = repository.load_dir(tmp_path)
    assert [img.path.name for img in loaded] == ["a.ppm", "b.png"]
    assert all(img == sample_image for img in loaded)


def test_iter_dir_requires_directory(repository, tmp_path):
    with pytest.raises(NotADirectoryError):
        list(repository.iter_dir(tmp_path / "nope"))


def test_codec_load_restores_alarm_handler(repository, sample_image, tmp_path):
    def marker(signum, frame):
        pass

    path = repository.save(sample_image, tmp_path / "a.png")
    original = signal.signal(signal.SIGALRM, marker)
    try:
        repository.load(path)
        assert signal.getsignal(signal.SIGALRM) is marker
    finally:
        signal.signal(signal.SIGALRM, original)
