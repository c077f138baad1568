# Path: core/indexing/fuzzy.py
# Purpose: Approximate term lookup over the keys of an inverted index.
# Layer: core/indexing.
# Details: difflib similarity ratios with a configurable acceptance threshold.

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Iterable, List, Tuple


class FuzzyMatcher:
    """Match a query term against a fixed vocabulary using similarity ratios."""

    def __init__(self, keys: Iterable[str], threshold: float = 0.7) -> None:
        self.keys: List[str] = sorted(set(keys))
        self.threshold = threshold

    def __len__(self) -> int:
        return len(self.keys)

    def search(self, term: str) -> List[Tuple[str, float]]:
        """Return ``(key, ratio)`` pairs with ratio >= threshold, best first, ties by key."""

        term = term.lower()
        matcher = SequenceMatcher(b=term)
        hits: List[Tuple[str, float]] = []
        for key in self.keys:
            matcher.set_seq1(key)
            if matcher.real_quick_ratio() < self.threshold or matcher.quick_ratio() < self.threshold:
                continue
            ratio = matcher.ratio()
            if ratio >= self.threshold:
                hits.append((key, ratio))
        hits.sort(key=lambda hit: (-hit[1], hit[0]))
        return hits
