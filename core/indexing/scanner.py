# Path: core/indexing/scanner.py
# Purpose: Scan folders for photos and read the EXIF fields used by the search indexes.
# Layer: core/indexing.
# Details: Also loads and saves the JSON photo library consumed by scripts and the API.

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import ExifTags, Image, UnidentifiedImageError

from core.models.domain import Photo, PhotoMetadata

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"}
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


class PhotoScanner:
    """Scan filesystem paths for supported photo files."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def scan(self) -> List[Photo]:
        """Return discovered photos; ids are POSIX paths relative to the scan root."""

        photos: List[Photo] = []
        for path in sorted(self._iter_image_files()):
            photo_id = path.relative_to(self.root).as_posix()
            photos.append(Photo(id=photo_id, filename=path.name, metadata=read_exif_metadata(path), path=path))
        logger.info("Scanned %d photos under %s", len(photos), self.root)
        return photos

    def _iter_image_files(self) -> Iterable[Path]:
        """Yield image files under the root directory."""

        for path in self.root.rglob("*"):
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield path


def read_exif_metadata(path: Path) -> Optional[PhotoMetadata]:
    """Read capture time and camera from EXIF, returning None when the file has neither."""

    try:
        with Image.open(path) as image:
            exif = image.getexif()
    except (OSError, UnidentifiedImageError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None

    make = _clean(exif.get(ExifTags.Base.Make))
    model = _clean(exif.get(ExifTags.Base.Model))
    raw_taken = exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.DateTimeOriginal) or exif.get(ExifTags.Base.DateTime)

    taken_at = None
    if raw_taken:
        try:
            taken_at = datetime.strptime(_clean(raw_taken), EXIF_DATETIME_FORMAT)
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed EXIF timestamp %r in %s", raw_taken, path)

    camera = None
    if make and model:
        camera = model if model.lower().startswith(make.lower()) else f"{make} {model}"
    else:
        camera = make or model

    if camera is None and taken_at is None:
        return None
    return PhotoMetadata(camera=camera, taken_at=taken_at)


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip("\x00 ").strip()
    return text or None


def load_library(path: Path) -> List[Photo]:
    """Load photos from a JSON library file (a list, or an object with a ``photos`` list)."""

    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    items = payload.get("photos", []) if isinstance(payload, dict) else payload
    photos = [Photo.from_dict(item) for item in items]
    logger.info("Loaded %d photos from %s", len(photos), path)
    return photos


def save_library(photos: Iterable[Photo], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"photos": [photo.to_dict() for photo in photos]}
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
    logger.info("Saved %d photos to %s", len(payload["photos"]), path)
