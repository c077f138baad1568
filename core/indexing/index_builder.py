# Path: core/indexing/index_builder.py
# Purpose: Build inverted metadata indexes from a photo collection.
# Layer: core/indexing.
# Details: Full rebuild per call; keyword, object, scene, location, people, camera, and temporal postings.

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List

from tqdm import tqdm

from core.models.domain import IndexedPhoto, MetadataEntry, Photo, PhotoIndex
from .fuzzy import FuzzyMatcher

logger = logging.getLogger(__name__)


def add_to_index(index: Dict[str, MetadataEntry], key: str, photo_id: str, confidence: float) -> None:
    """Post ``photo_id`` under the lower-cased ``key``, keeping ids unique and confidence at its max."""

    normalized = key.lower()
    entry = index.get(normalized)
    if entry is None:
        index[normalized] = MetadataEntry(photo_ids=[photo_id], confidence=confidence, frequency=1)
        return
    if photo_id in entry.photo_ids:
        return
    entry.photo_ids.append(photo_id)
    entry.frequency = len(entry.photo_ids)
    entry.confidence = max(entry.confidence, confidence)


def add_to_temporal_index(index: Dict[str, List[str]], key: str, photo_id: str) -> None:
    photo_ids = index.setdefault(key, [])
    if photo_id not in photo_ids:
        photo_ids.append(photo_id)


def searchable_text(photo: Photo) -> str:
    parts = [photo.filename]
    metadata = photo.metadata
    if metadata:
        parts.extend(metadata.keywords)
        parts.extend(metadata.objects)
        parts.extend(metadata.scenes)
        parts.extend(metadata.people)
        if metadata.location:
            parts.append(metadata.location)
        if metadata.camera:
            parts.append(metadata.camera)
    return " ".join(parts).lower()


class PhotoIndexBuilder:
    """Turn photos into a :class:`PhotoIndex` and the fuzzy matchers built over its keys."""

    def __init__(self, fuzzy_threshold: float = 0.7, show_progress: bool = False) -> None:
        self.fuzzy_threshold = fuzzy_threshold
        self.show_progress = show_progress

    def build(self, photos: Iterable[Photo]) -> PhotoIndex:
        """
        Index every photo from scratch.

        External calls:
        - core/indexing/index_builder.py::add_to_index - posts metadata terms into each inverted index.
        - core/indexing/index_builder.py::add_to_temporal_index - posts ``YYYY`` and ``YYYY-MM`` keys.
        """

        index = PhotoIndex()
        for photo in tqdm(list(photos), desc="Indexing photos", unit="photo", disable=not self.show_progress):
            self._index_photo(index, photo)
        return index

    def build_fuzzy(self, index: PhotoIndex) -> Dict[str, FuzzyMatcher]:
        return {
            name: FuzzyMatcher(source.keys(), threshold=self.fuzzy_threshold)
            for name, source in index.fuzzy_sources().items()
        }

    def _index_photo(self, index: PhotoIndex, photo: Photo) -> None:
        if photo.id in index.photos:
            logger.warning("Duplicate photo id %s; keeping the last occurrence", photo.id)
        index.photos[photo.id] = IndexedPhoto(
            photo=photo,
            searchable_text=searchable_text(photo),
            indexed_at=datetime.now(),
        )

        metadata = photo.metadata
        if metadata is None:
            return
        # Photos without a stored confidence are indexed as fully trusted.
        confidence = metadata.confidence if metadata.confidence is not None else 1.0

        for keyword in metadata.keywords:
            add_to_index(index.keyword_index, keyword, photo.id, confidence)
        for obj in metadata.objects:
            add_to_index(index.object_index, obj, photo.id, confidence)
        for scene in metadata.scenes:
            add_to_index(index.scene_index, scene, photo.id, confidence)
        if metadata.location:
            add_to_index(index.location_index, metadata.location, photo.id, confidence)
        for person in metadata.people:
            add_to_index(index.people_index, person, photo.id, confidence)
        if metadata.camera:
            add_to_index(index.camera_index, metadata.camera, photo.id, confidence)
        if metadata.taken_at:
            year = f"{metadata.taken_at.year:04d}"
            add_to_temporal_index(index.temporal_index, year, photo.id)
            add_to_temporal_index(index.temporal_index, f"{year}-{metadata.taken_at.month:02d}", photo.id)
