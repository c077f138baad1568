# Path: core/search/ranking.py
# Purpose: Combine per-criterion matches into ranked, paginated photo lists.
# Layer: core/search.
# Details: AND intersection, heuristic relevance scoring, and stable numpy ordering.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np

from core.models.domain import CriterionMatch, SearchResultPhoto

DEFAULT_BASE_CONFIDENCE = 0.5
BASE_CONFIDENCE_WEIGHT = 0.3
EXACT_MATCH_SCORE = 0.25
FUZZY_MATCH_SCORE = 0.15
MULTI_CRITERIA_BONUS = 0.1
EXTRA_EXACT_BONUS = 0.05


def intersect(matches: Dict[str, CriterionMatch]) -> List[str]:
    """
    Return the ids present in every criterion's set, sorted by id.

    No criteria means no results.
    """

    sets = [match.photo_ids for match in matches.values()]
    if not sets:
        return []
    result = set(sets[0])
    for other in sets[1:]:
        result &= other
    return sorted(result)


def relevance_score(photo_id: str, base_confidence: Optional[float], matches: Dict[str, CriterionMatch]) -> float:
    """Score one photo in [0, 1] from its stored confidence and the quality of each criterion hit."""

    base = DEFAULT_BASE_CONFIDENCE if base_confidence is None else base_confidence
    score = base * BASE_CONFIDENCE_WEIGHT
    criteria = 0
    exact = 0
    for match in matches.values():
        if photo_id not in match.photo_ids:
            continue
        criteria += 1
        if photo_id in match.exact_matches:
            exact += 1
            score += EXACT_MATCH_SCORE
        else:
            score += FUZZY_MATCH_SCORE
    if criteria > 1:
        score += (criteria - 1) * MULTI_CRITERIA_BONUS
    if exact > 1:
        score += (exact - 1) * EXTRA_EXACT_BONUS
    return float(min(max(score, 0.0), 1.0))


def rank(photos: Sequence[SearchResultPhoto], sort_by: str = "relevance", sort_order: str = "desc") -> List[SearchResultPhoto]:
    """
    Order result photos with a stable sort.

    ``photos`` is expected in ascending id order so equal keys keep that order. Photos
    without a capture date sort last when ordering by date.
    """

    if not photos:
        return []
    descending = sort_order != "asc"
    if sort_by == "date":
        keys = np.array([_timestamp(photo) for photo in photos], dtype=np.float64)
    elif sort_by == "name":
        _, keys = np.unique(np.array([photo.photo.filename.lower() for photo in photos]), return_inverse=True)
        keys = keys.astype(np.float64)
    else:
        keys = np.array([photo.relevance_score for photo in photos], dtype=np.float64)
    if descending:
        keys = -keys
    order = np.argsort(keys, kind="stable")
    return [photos[int(position)] for position in order]


def paginate(photos: Sequence[SearchResultPhoto], offset: int = 0, limit: Optional[int] = None) -> List[SearchResultPhoto]:
    offset = max(offset, 0)
    if limit is None:
        return list(photos[offset:])
    return list(photos[offset : offset + max(limit, 0)])


def _timestamp(photo: SearchResultPhoto) -> float:
    metadata = photo.photo.metadata
    if metadata is None or metadata.taken_at is None:
        return float("nan")
    return metadata.taken_at.timestamp()
