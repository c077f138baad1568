"""Tests for index construction, matching, ranking and the debounced search path."""

import asyncio
from datetime import date, datetime

import pytest

from config.settings import SearchSettings
from core.errors import IndexCorruptionError, SearchSupersededError
from core.indexing.fuzzy import FuzzyMatcher
from core.indexing.index_builder import PhotoIndexBuilder
from core.models.domain import CriterionMatch, MetadataEntry, Photo, PhotoMetadata, SearchOptions, SearchResultPhoto
from core.models.parameters import DateRange, SearchQuery
from core.search.engine import SemanticSearchEngine
from core.search.ranking import intersect, paginate, rank, relevance_score


def run(engine, payload, options=None):
    return asyncio.run(engine.search(SearchQuery.from_dict(payload), options))


def ids(result):
    return [photo.id for photo in result.photos]


def test_index_postings_point_at_indexed_photos(photos):
    index = PhotoIndexBuilder().build(photos)
    assert set(index.photos) == {"p1", "p2", "p3", "p4", "p5"}
    for source in (index.keyword_index, index.object_index, index.scene_index, index.location_index, index.people_index):
        for entry in source.values():
            assert entry.frequency == len(entry.photo_ids)
            assert set(entry.photo_ids) <= set(index.photos)
    assert index.location_index["paris"].photo_ids == ["p2", "p3"]
    assert index.people_index["alice"].frequency == 2
    assert index.people_index["alice"].confidence == 1.0
    assert sorted(index.temporal_index["2020"]) == ["p1", "p3"]
    assert index.temporal_index["2020-07"] == ["p1"]


def test_duplicate_photo_id_keeps_last(photos):
    replacement = Photo(id="p1", filename="other.jpg", metadata=PhotoMetadata(objects=["boat"]))
    index = PhotoIndexBuilder().build(photos + [replacement])
    assert index.photos["p1"].photo.filename == "other.jpg"
    assert "p1" in index.object_index["boat"].photo_ids


def test_exact_object_match(engine):
    result = run(engine, {"semantic": {"objects": ["dog"]}})
    assert ids(result) == ["p2"]
    assert result.photos[0].relevance_score == pytest.approx(0.49)
    assert result.photos[0].matched_criteria == ["objects"]
    assert result.photos[0].highlighted_fields == {"objects": "dog"}


def test_fuzzy_match_scores_lower(engine):
    result = run(engine, {"semantic": {"objects": ["dogs"]}})
    assert ids(result) == ["p2"]
    assert result.photos[0].relevance_score == pytest.approx(0.39)


def test_fuzzy_match_can_be_disabled(engine):
    result = run(engine, {"semantic": {"objects": ["dogs"]}, "fuzzy_match": False})
    assert result.total_count == 0


def test_location_is_case_insensitive(engine):
    result = run(engine, {"spatial": {"location": "PARIS"}})
    assert sorted(ids(result)) == ["p2", "p3"]


def test_criteria_are_intersected(engine):
    result = run(engine, {"semantic": {"objects": ["cat"]}, "spatial": {"location": "Paris"}})
    assert ids(result) == ["p3"]
    # Two exact criteria on a photo without stored confidence.
    assert result.photos[0].relevance_score == pytest.approx(0.8)
    assert result.search_metadata.matched_criteria == ["objects", "location"]


def test_unmatched_criterion_empties_results(engine):
    result = run(engine, {"semantic": {"objects": ["zebra"]}, "spatial": {"location": "Paris"}, "fuzzy_match": False})
    assert result.total_count == 0
    assert result.search_metadata.matched_criteria == ["location"]


def test_no_criteria_returns_nothing(engine):
    result = run(engine, {})
    assert result.total_count == 0
    assert result.photos == []


def test_people_and_camera(engine):
    assert ids(run(engine, {"people": {"named_people": ["Bob"]}})) == ["p3"]
    assert ids(run(engine, {"technical": {"camera_make": "Canon"}})) == ["p1"]
    assert ids(run(engine, {"technical": {"camera_make": "Apple", "camera_model": "iPhone 12"}})) == ["p2"]


def test_keywords_criterion(engine):
    assert ids(run(engine, {"semantic": {"keywords": ["sunset", "beach"]}})) == ["p1"]


def test_year_and_month(engine):
    assert sorted(ids(run(engine, {"temporal": {"year": 2020}}))) == ["p1", "p3"]
    assert ids(run(engine, {"temporal": {"year": 2020, "month": "July"}})) == ["p1"]


def test_month_span_wraps_into_next_year(engine):
    result = run(engine, {"temporal": {"year": 2020, "start_month": "November", "end_month": "February"}})
    assert ids(result) == ["p3"]


def test_date_range_and_relative_period(engine):
    assert sorted(ids(run(engine, {"temporal": {"date_range": {"start": "2020-07-01", "end": "2020-12-31"}}}))) == [
        "p1",
        "p3",
    ]
    # The engine's clock is fixed at 2021-06-15.
    assert sorted(ids(run(engine, {"temporal": {"relative_period": "last_year"}}))) == ["p1", "p2", "p3"]


def test_pagination_and_total_count(engine):
    payload = {"spatial": {"location": "paris"}, "sort_by": "date", "sort_order": "asc"}
    first = run(engine, payload, SearchOptions(limit=1))
    second = run(engine, payload, SearchOptions(limit=1, offset=1))
    assert first.total_count == second.total_count == 2
    assert ids(first) == ["p3"]
    assert ids(second) == ["p2"]


def test_missing_photo_raises_corruption_error(engine):
    engine.index.object_index["ghost"] = MetadataEntry(photo_ids=["missing"], confidence=1.0, frequency=1)
    with pytest.raises(IndexCorruptionError):
        run(engine, {"semantic": {"objects": ["ghost"]}, "fuzzy_match": False})


def test_debounce_supersedes_earlier_calls(engine):
    async def scenario():
        first = asyncio.ensure_future(engine.search_with_debounce(SearchQuery.from_dict({"semantic": {"objects": ["cat"]}})))
        await asyncio.sleep(0)
        second = asyncio.ensure_future(engine.search_with_debounce(SearchQuery.from_dict({"semantic": {"objects": ["dog"]}})))
        return await asyncio.gather(first, second, return_exceptions=True)

    first, second = asyncio.run(scenario())
    assert isinstance(first, SearchSupersededError)
    assert ids(second) == ["p2"]


def test_execute_search_skips_debounce(photos):
    engine = SemanticSearchEngine(SearchSettings(debounce_delay=10.0))
    asyncio.run(engine.index_photos(photos))
    result = asyncio.run(engine.execute_search(SearchQuery.from_dict({"semantic": {"objects": ["cat"]}})))
    assert ids(result) == ["p3"]


def test_relevance_score_bonuses_and_clamp():
    exact = CriterionMatch(photo_ids={"a"}, exact_matches={"a"})
    fuzzy = CriterionMatch(photo_ids={"a"})
    assert relevance_score("a", 1.0, {"x": exact, "y": exact}) == pytest.approx(0.95)
    assert relevance_score("a", None, {"x": exact, "y": fuzzy}) == pytest.approx(0.15 + 0.25 + 0.15 + 0.1)
    assert relevance_score("a", 0.0, {"x": fuzzy}) == pytest.approx(0.15)
    many = {name: exact for name in "wxyz"}
    assert relevance_score("a", 1.0, many) == 1.0


def test_intersect():
    matches = {"x": CriterionMatch(photo_ids={"b", "a", "c"}), "y": CriterionMatch(photo_ids={"c", "a"})}
    assert intersect(matches) == ["a", "c"]
    assert intersect({}) == []


def make_result(photo_id, filename, score, taken_at=None):
    photo = Photo(id=photo_id, filename=filename, metadata=PhotoMetadata(taken_at=taken_at))
    return SearchResultPhoto(photo=photo, relevance_score=score)


def test_rank_is_stable_and_sorts_undated_last():
    photos = [
        make_result("a", "b.jpg", 0.5, datetime(2020, 1, 1)),
        make_result("b", "a.jpg", 0.9),
        make_result("c", "c.jpg", 0.5, datetime(2021, 1, 1)),
    ]
    assert [photo.id for photo in rank(photos)] == ["b", "a", "c"]
    assert [photo.id for photo in rank(photos, "date", "desc")] == ["c", "a", "b"]
    assert [photo.id for photo in rank(photos, "date", "asc")] == ["a", "c", "b"]
    assert [photo.id for photo in rank(photos, "name", "asc")] == ["b", "a", "c"]


def test_paginate():
    photos = [make_result(str(index), f"{index}.jpg", 0.5) for index in range(5)]
    assert [photo.id for photo in paginate(photos, 1, 2)] == ["1", "2"]
    assert [photo.id for photo in paginate(photos, 4)] == ["4"]
    assert paginate(photos, 10, 2) == []


def test_fuzzy_matcher():
    matcher = FuzzyMatcher(["sunset", "mountain", "ocean"])
    hits = matcher.search("sunsett")
    assert hits[0][0] == "sunset"
    assert matcher.search("xyz") == []


def test_date_range_contains():
    period = DateRange(start=date(2020, 1, 1), end=date(2020, 1, 31))
    assert period.contains(date(2020, 1, 31))
    assert not period.contains(date(2020, 2, 1))
