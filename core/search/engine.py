# Path: core/search/engine.py
# Purpose: Execute structured photo searches against the in-memory metadata indexes.
# Layer: core/search.
# Details: Exact-then-fuzzy lookups per criterion, AND intersection, scoring, and a trailing debounce.

from __future__ import annotations

import asyncio
import logging
import time
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Set

from config.settings import SearchSettings
from core.errors import IndexCorruptionError, SearchSupersededError
from core.indexing.fuzzy import FuzzyMatcher
from core.indexing.index_builder import PhotoIndexBuilder
from core.models.domain import (
    CriterionMatch,
    MetadataEntry,
    PerformanceMetrics,
    Photo,
    PhotoIndex,
    SearchMetadata,
    SearchOptions,
    SearchResult,
    SearchResultPhoto,
)
from core.models.parameters import DateRange, SearchQuery, TemporalParams
from core.parsing.patterns import MONTH_NUMBERS
from core.parsing.temporal import resolve_relative_period
from .ranking import intersect, paginate, rank, relevance_score

logger = logging.getLogger(__name__)

# Result criterion name -> photo metadata attribute used for highlighting.
_HIGHLIGHT_FIELDS = {
    "objects": "objects",
    "scenes": "scenes",
    "keywords": "keywords",
    "location": "location",
    "people": "people",
    "camera": "camera",
}


class SemanticSearchEngine:
    """Own the photo index and answer :class:`SearchQuery` requests against it."""

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        builder: Optional[PhotoIndexBuilder] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.settings = settings or SearchSettings()
        self.builder = builder or PhotoIndexBuilder(
            fuzzy_threshold=self.settings.fuzzy_match_threshold,
            show_progress=self.settings.show_progress,
        )
        self._today = today or date.today
        self.index = PhotoIndex()
        self.fuzzy: Dict[str, FuzzyMatcher] = {}
        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._pending: Optional[asyncio.Future] = None

    async def index_photos(self, photos: Iterable[Photo]) -> None:
        """Replace the index and fuzzy matchers with ones built from ``photos``."""

        started = time.perf_counter()
        index = self.builder.build(photos)
        fuzzy = self.builder.build_fuzzy(index)
        self.index, self.fuzzy = index, fuzzy
        logger.info("Indexed %d photos in %.1fms", len(index.photos), (time.perf_counter() - started) * 1000)

    def get_index(self) -> PhotoIndex:
        return self.index

    async def search(self, query: SearchQuery, options: Optional[SearchOptions] = None) -> SearchResult:
        return self.run_search(query, options)

    async def execute_search(self, query: SearchQuery, options: Optional[SearchOptions] = None) -> SearchResult:
        """Search immediately, bypassing the debounce timer."""

        return self.run_search(query, options)

    async def search_with_debounce(self, query: SearchQuery, options: Optional[SearchOptions] = None) -> SearchResult:
        """
        Search after ``debounce_delay`` seconds of quiet.

        Each call restarts the timer. Only the latest caller receives a result; callers it
        replaced get :class:`SearchSupersededError`.
        """

        loop = asyncio.get_running_loop()
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        if self._pending is not None and not self._pending.done():
            self._pending.set_exception(SearchSupersededError("Search superseded by a newer request"))

        future: asyncio.Future = loop.create_future()
        self._pending = future
        self._debounce_handle = loop.call_later(self.settings.debounce_delay, self._run_debounced, future, query, options)
        return await future

    def _run_debounced(self, future: asyncio.Future, query: SearchQuery, options: Optional[SearchOptions]) -> None:
        if future.done():
            return
        try:
            future.set_result(self.run_search(query, options))
        except Exception as exc:
            future.set_exception(exc)

    def run_search(self, query: SearchQuery, options: Optional[SearchOptions] = None) -> SearchResult:
        """
        Execute ``query`` synchronously.

        External calls:
        - core/search/ranking.py::intersect - AND-combines the per-criterion photo sets.
        - core/search/ranking.py::relevance_score - scores every surviving photo.
        - core/search/ranking.py::rank - stable ordering before pagination.
        """

        options = options or SearchOptions()
        started = time.perf_counter()
        metrics = PerformanceMetrics()

        lookup_started = time.perf_counter()
        matches = self._collect_matches(query, metrics)
        metrics.index_lookup_time = (time.perf_counter() - lookup_started) * 1000 - metrics.fuzzy_match_time

        photo_ids = intersect(matches)

        sorting_started = time.perf_counter()
        scored: List[SearchResultPhoto] = []
        for photo_id in photo_ids:
            indexed = self.index.photos.get(photo_id)
            if indexed is None:
                raise IndexCorruptionError(photo_id)
            photo = indexed.photo
            confidence = photo.metadata.confidence if photo.metadata else None
            matched = [name for name, match in matches.items() if photo_id in match.photo_ids]
            scored.append(
                SearchResultPhoto(
                    photo=photo,
                    relevance_score=relevance_score(photo_id, confidence, matches),
                    matched_criteria=matched,
                    highlighted_fields=self._highlight(photo, matched, matches),
                )
            )
        ranked = rank(scored, query.sort_by, query.sort_order)
        metrics.sorting_time = (time.perf_counter() - sorting_started) * 1000

        limit = options.limit if options.limit is not None else self.settings.max_results
        page = paginate(ranked, options.offset, limit)
        search_time = (time.perf_counter() - started) * 1000
        if search_time > self.settings.performance_threshold:
            logger.warning("Search took %.1fms (threshold %dms)", search_time, self.settings.performance_threshold)
        logger.debug("Search matched %d photos across %s", len(ranked), list(matches))

        return SearchResult(
            photos=page,
            total_count=len(ranked),
            search_time=search_time,
            query=query,
            search_metadata=SearchMetadata(
                applied_filters=query.copy(),
                matched_criteria=[name for name, match in matches.items() if match.photo_ids],
                performance_metrics=metrics,
            ),
        )

    def _collect_matches(self, query: SearchQuery, metrics: PerformanceMetrics) -> Dict[str, CriterionMatch]:
        """Look up one photo-id set per populated criterion; an empty set still counts as a criterion."""

        fuzzy = query.fuzzy_match
        matches: Dict[str, CriterionMatch] = {}
        if query.semantic.objects:
            matches["objects"] = self._match_terms(query.semantic.objects, self.index.object_index, "objects", fuzzy, metrics)
        if query.semantic.scenes:
            matches["scenes"] = self._match_terms(query.semantic.scenes, self.index.scene_index, "scenes", fuzzy, metrics)
        if query.semantic.keywords:
            matches["keywords"] = self._match_terms(
                query.semantic.keywords, self.index.keyword_index, "keywords", fuzzy, metrics
            )
        if query.spatial.location:
            matches["location"] = self._match_terms(
                [query.spatial.location], self.index.location_index, "locations", fuzzy, metrics
            )
        if query.people.named_people:
            matches["people"] = self._match_terms(
                query.people.named_people, self.index.people_index, "people", fuzzy, metrics
            )
        if query.technical.camera_make or query.technical.camera_model:
            matches["camera"] = self._match_camera(query.technical.camera_make, query.technical.camera_model)
        if _has_temporal(query.temporal):
            ids = self._match_temporal(query.temporal)
            matches["temporal"] = CriterionMatch(photo_ids=set(ids), exact_matches=set(ids))
        return matches

    def _match_terms(
        self,
        terms: List[str],
        index: Dict[str, MetadataEntry],
        fuzzy_name: str,
        fuzzy: bool,
        metrics: PerformanceMetrics,
    ) -> CriterionMatch:
        match = CriterionMatch()
        for term in terms:
            key = term.lower()
            entry = index.get(key)
            if entry is not None:
                match.photo_ids.update(entry.photo_ids)
                match.exact_matches.update(entry.photo_ids)
                match.terms.append(key)
                continue
            matcher = self.fuzzy.get(fuzzy_name)
            if not fuzzy or matcher is None:
                continue
            fuzzy_started = time.perf_counter()
            for candidate, ratio in matcher.search(key):
                logger.debug("Fuzzy %s match %r -> %r (%.2f)", fuzzy_name, key, candidate, ratio)
                match.photo_ids.update(index[candidate].photo_ids)
                match.terms.append(candidate)
            metrics.fuzzy_match_time += (time.perf_counter() - fuzzy_started) * 1000
        return match

    def _match_camera(self, make: Optional[str], model: Optional[str]) -> CriterionMatch:
        needles = [value.lower() for value in (make, model) if value]
        match = CriterionMatch()
        for key, entry in self.index.camera_index.items():
            if all(needle in key for needle in needles):
                match.photo_ids.update(entry.photo_ids)
                match.exact_matches.update(entry.photo_ids)
                match.terms.append(key)
        return match

    def _match_temporal(self, temporal: TemporalParams) -> Set[str]:
        """
        Intersect every temporal constraint present.

        An explicit date range supersedes the month names it was written with; months
        without a year are looked up in the current year.
        """

        constraints: List[Set[str]] = []
        start_month = temporal.start_month or temporal.month
        if temporal.date_range:
            constraints.append(self._ids_in_range(temporal.date_range))
        elif start_month:
            year = temporal.year or self._today().year
            constraints.append(self._month_range_ids(year, start_month, temporal.end_month))
        if temporal.year and (temporal.date_range or not start_month):
            constraints.append(set(self.index.temporal_index.get(f"{temporal.year:04d}", [])))
        if temporal.relative_period:
            period = resolve_relative_period(temporal.relative_period, self._today())
            if period is None:
                logger.info("Unknown relative period %r; ignoring it", temporal.relative_period)
            else:
                constraints.append(self._ids_in_range(period))

        if not constraints:
            return set()
        result = constraints[0]
        for other in constraints[1:]:
            result = result & other
        return result

    def _month_range_ids(self, year: int, start_month: str, end_month: Optional[str]) -> Set[str]:
        start = MONTH_NUMBERS.get(start_month.lower())
        end = MONTH_NUMBERS.get(end_month.lower()) if end_month else start
        if start is None or end is None:
            return set()
        keys = []
        current_year, month = year, start
        # A range such as November..February continues into the following year.
        while True:
            keys.append(f"{current_year:04d}-{month:02d}")
            if month == end:
                break
            month += 1
            if month > 12:
                month, current_year = 1, current_year + 1
        ids: Set[str] = set()
        for key in keys:
            ids.update(self.index.temporal_index.get(key, []))
        return ids

    def _ids_in_range(self, period: DateRange) -> Set[str]:
        ids: Set[str] = set()
        for photo_id, indexed in self.index.photos.items():
            metadata = indexed.photo.metadata
            if metadata and metadata.taken_at and period.contains(_as_date(metadata.taken_at)):
                ids.add(photo_id)
        return ids

    @staticmethod
    def _highlight(photo: Photo, matched: List[str], matches: Dict[str, CriterionMatch]) -> Dict[str, str]:
        metadata = photo.metadata
        if metadata is None:
            return {}
        highlighted: Dict[str, str] = {}
        for name in matched:
            if name == "temporal":
                if metadata.taken_at:
                    highlighted[name] = _as_date(metadata.taken_at).isoformat()
                continue
            attribute = _HIGHLIGHT_FIELDS.get(name)
            value = getattr(metadata, attribute, None) if attribute else None
            values = value if isinstance(value, list) else [value] if value else []
            terms = set(matches[name].terms)
            hits = [item for item in values if item.lower() in terms]
            if hits:
                highlighted[name] = ", ".join(hits)
        return highlighted


def _has_temporal(temporal: TemporalParams) -> bool:
    return any(
        (temporal.year, temporal.month, temporal.start_month, temporal.date_range, temporal.relative_period)
    )


def _as_date(value: datetime) -> date:
    return value.date() if isinstance(value, datetime) else value
