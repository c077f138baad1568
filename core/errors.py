# Path: core/errors.py
# Purpose: Define the exception hierarchy raised by the core layer.
# Layer: core.
# Details: Only invariant violations and superseded calls raise; parse problems are reported in result objects.


class PhotoQueryError(Exception):
    """Base class for all errors raised by the core layer."""


class IndexCorruptionError(PhotoQueryError):
    """Raised when a photo id referenced by an inverted index is missing from the photo map."""

    def __init__(self, photo_id: str) -> None:
        super().__init__(f"Photo {photo_id} not found in index")
        self.photo_id = photo_id


class SearchSupersededError(PhotoQueryError):
    """Raised to a debounced caller whose search was replaced by a newer call."""


class UnknownActionError(PhotoQueryError):
    """Raised when an action name is not present in the action registry."""

    def __init__(self, action_name: str) -> None:
        super().__init__(f"Action '{action_name}' not found")
        self.action_name = action_name


__all__ = ["PhotoQueryError", "IndexCorruptionError", "SearchSupersededError", "UnknownActionError"]
