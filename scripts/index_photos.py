# Path: scripts/index_photos.py
# Purpose: CLI tool to scan a photo folder into a JSON photo library.
# Layer: scripts.
# Details: Reads EXIF capture time and camera; optional metadata sidecar merges keywords, objects, and places.

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, setup_logging
from core.indexing import PhotoIndexBuilder, PhotoScanner, save_library
from core.models.domain import PhotoMetadata


def main() -> None:
    """Scan a folder and write the photo library."""

    settings = AppSettings.from_env()
    parser = argparse.ArgumentParser(description="Scan photos into a PhotoQuery library")
    parser.add_argument("--folder", type=Path, default=settings.photo_folder, help="Folder containing photos")
    parser.add_argument("--output", type=Path, default=settings.photo_library, help="Library JSON file to write")
    parser.add_argument(
        "--metadata",
        type=Path,
        default=None,
        help="Optional JSON mapping photo id to metadata (keywords, objects, scenes, people, location)",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args()

    setup_logging(args.log_level, settings.log_file)

    photos = PhotoScanner(args.folder).scan()
    if args.metadata:
        extra = json.loads(args.metadata.read_text(encoding="utf-8"))
        for photo in photos:
            annotations = extra.get(photo.id) or extra.get(photo.filename)
            if not annotations:
                continue
            merged = (photo.metadata.to_dict() if photo.metadata else {}) | {
                key: value for key, value in annotations.items() if value is not None
            }
            photo.metadata = PhotoMetadata.from_dict(merged)

    save_library(photos, args.output)
    index = PhotoIndexBuilder(show_progress=True).build(photos)
    print(
        f"Wrote {len(photos)} photos to {args.output} "
        f"({len(index.keyword_index)} keywords, {len(index.location_index)} locations, "
        f"{len(index.temporal_index)} temporal keys)"
    )


if __name__ == "__main__":
    main()
