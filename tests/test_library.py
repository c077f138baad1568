"""Tests for folder scanning, the JSON library and configuration."""

import logging
from datetime import datetime, timezone

from PIL import ExifTags, Image

from config import AppSettings, setup_logging
from config.logging import PACKAGE_LOGGERS
from core.indexing import PhotoScanner, load_library, read_exif_metadata, save_library
from core.models.domain import Photo, PhotoMetadata


def write_jpeg(path, **tags):
    exif = Image.Exif()
    for tag, value in tags.items():
        exif[getattr(ExifTags.Base, tag)] = value
    Image.new("RGB", (8, 8), color=(200, 120, 40)).save(path, exif=exif)


def test_exif_camera_and_capture_time(tmp_path):
    path = tmp_path / "shot.jpg"
    write_jpeg(path, Make="Canon", Model="Canon EOS R5", DateTime="2021:05:04 10:11:12")
    metadata = read_exif_metadata(path)
    assert metadata.camera == "Canon EOS R5"
    assert metadata.taken_at == datetime(2021, 5, 4, 10, 11, 12)


def test_exif_make_prefixes_model(tmp_path):
    path = tmp_path / "phone.jpg"
    write_jpeg(path, Make="Apple", Model="iPhone 12")
    assert read_exif_metadata(path).camera == "Apple iPhone 12"


def test_scanner_uses_relative_ids(tmp_path):
    (tmp_path / "trip").mkdir()
    write_jpeg(tmp_path / "trip" / "a.jpg", Make="Nikon")
    Image.new("RGB", (4, 4)).save(tmp_path / "b.png")
    (tmp_path / "notes.txt").write_text("not a photo")

    photos = PhotoScanner(tmp_path).scan()
    assert [photo.id for photo in photos] == ["b.png", "trip/a.jpg"]
    assert photos[0].metadata is None
    assert photos[1].metadata.camera == "Nikon"


def test_unreadable_file_has_no_metadata(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not really a jpeg")
    assert read_exif_metadata(path) is None


def test_library_round_trip(tmp_path):
    photos = [
        Photo(
            id="p1",
            filename="sunset.jpg",
            metadata=PhotoMetadata(objects=["sunset"], location="Hawaii", taken_at=datetime(2020, 7, 10), confidence=0.9),
        ),
        Photo(id="p2", filename="scan.png"),
    ]
    target = tmp_path / "nested" / "library.json"
    save_library(photos, target)
    loaded = load_library(target)
    assert [photo.to_dict() for photo in loaded] == [photo.to_dict() for photo in photos]


def test_library_accepts_plain_list(tmp_path):
    target = tmp_path / "library.json"
    target.write_text('[{"id": "x", "filename": "x.jpg", "metadata": {"objects": ["dog"], "takenAt": "2021-03-05T09:00:00"}}]')
    photo = load_library(target)[0]
    assert photo.metadata.objects == ["dog"]
    assert photo.metadata.taken_at == datetime(2021, 3, 5, 9, 0)


def test_utc_capture_time_with_z_suffix():
    metadata = PhotoMetadata.from_dict({"takenAt": "2021-03-05T09:00:00.000Z"})
    assert metadata.taken_at == datetime(2021, 3, 5, 9, 0, tzinfo=timezone.utc)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PHOTOQUERY_PHOTO_LIBRARY", "/tmp/lib.json")
    monkeypatch.setenv("PHOTOQUERY_API_ENABLED", "yes")
    monkeypatch.setenv("PHOTOQUERY_FUZZY_MATCH_THRESHOLD", "0.85")
    settings = AppSettings.from_env()
    assert str(settings.photo_library) == "/tmp/lib.json"
    assert settings.api_enabled is True
    assert settings.search.fuzzy_match_threshold == 0.85
    assert settings.search.debounce_delay == 0.3


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "photoquery.log"
    logger = setup_logging("WARNING", log_file, console=False)
    try:
        logging.getLogger("core.search").debug("indexed %d photos", 3)
        for handler in logger.handlers:
            handler.flush()
        assert "indexed 3 photos" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers:
            handler.close()
        for name in PACKAGE_LOGGERS:
            logging.getLogger(name).handlers = []
            logging.getLogger(name).propagate = True
