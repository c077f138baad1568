# Path: core/indexing/__init__.py
# Purpose: Package initializer for indexing utilities.
# Layer: core/indexing.
# Details: Exposes scanning, library persistence, index building, and fuzzy matching helpers.

from .fuzzy import FuzzyMatcher
from .index_builder import PhotoIndexBuilder, add_to_index
from .scanner import PhotoScanner, load_library, read_exif_metadata, save_library

__all__ = [
    "FuzzyMatcher",
    "PhotoIndexBuilder",
    "PhotoScanner",
    "add_to_index",
    "load_library",
    "read_exif_metadata",
    "save_library",
]
