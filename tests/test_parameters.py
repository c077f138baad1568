"""Tests for parameter extraction and the refinement merge."""

from datetime import date

import pytest

from core.models.parameters import DateRange, SearchParameters
from core.parsing.parameter_resolver import ParameterResolver

TODAY = date(2024, 6, 15)


@pytest.fixture
def resolver():
    return ParameterResolver(location_keywords=["paris", "new york", "beach"], today=lambda: TODAY)


def test_objects_scenes_and_location(resolver):
    params = resolver.extract_parameters("show me dogs and cats at the beach in Paris")
    assert params.semantic.objects == ["dogs", "cats"]
    assert params.semantic.scenes == ["beach"]
    assert params.spatial.location == "Paris"


def test_year(resolver):
    params = resolver.extract_parameters("sunset photos from 2019")
    assert params.temporal.year == 2019
    assert params.semantic.objects == ["sunset"]


def test_range_borrows_year_from_other_endpoint(resolver):
    params = resolver.extract_parameters("photos between March and May 2021")
    temporal = params.temporal
    assert temporal.start_month == "March"
    assert temporal.end_month == "May"
    assert temporal.date_range == DateRange(start=date(2021, 3, 1), end=date(2021, 5, 31))


def test_range_without_year_uses_current_year(resolver):
    params = resolver.extract_parameters("photos from June to August")
    assert params.temporal.date_range == DateRange(start=date(2024, 6, 1), end=date(2024, 8, 31))


def test_malformed_date_leaves_temporal_unset(resolver):
    resolution = resolver.resolve("photos from 13/45/2020")
    assert resolution.parameters.temporal.date_range is None
    assert resolution.parameters.temporal.year is None
    assert resolution.malformed == ["13/45/2020"]


def test_numeric_date(resolver):
    params = resolver.extract_parameters("photos from 7/4/2020")
    assert params.temporal.date_range == DateRange(start=date(2020, 7, 4), end=date(2020, 7, 4))


@pytest.mark.parametrize(
    "query, tag",
    [
        ("photos from last month", "last_month"),
        ("photos from last summer", "last_summer"),
        ("pictures from this winter", "this_winter"),
        ("photos from yesterday", "yesterday"),
    ],
)
def test_relative_periods(resolver, query, tag):
    assert resolver.extract_parameters(query).temporal.relative_period == tag


def test_named_people(resolver):
    params = resolver.extract_parameters("photos with Alice and Bob")
    assert params.people.named_people == ["Alice", "Bob"]


def test_people_categories(resolver):
    params = resolver.extract_parameters("family photos with kids")
    assert params.people.people_type == "family"
    assert params.people.age_group == "children"


def test_capitalized_people_category_is_not_a_place(resolver):
    params = resolver.extract_parameters("Family photos from last year")
    assert params.people.people_type == "family"
    assert params.people.named_people == []
    assert params.spatial.location is None
    assert params.temporal.relative_period == "last_year"


def test_uncommon_subject_after_photos_of(resolver):
    params = resolver.extract_parameters("photos of giraffes")
    assert params.semantic.objects == ["giraffes"]


def test_camera_make_and_model(resolver):
    params = resolver.extract_parameters("photos taken with Canon R5")
    assert params.technical.camera_make == "Canon"
    assert params.technical.camera_model == "R5"
    assert params.people.named_people == []


def test_phone_camera_keeps_full_model(resolver):
    params = resolver.extract_parameters("shot on iPhone 12")
    assert params.technical.camera_make == "Apple"
    assert params.technical.camera_model == "iPhone 12"


def test_quoted_location_phrase(resolver):
    params = resolver.extract_parameters("photos from 'New York'")
    assert params.spatial.location == "New York"
    assert params.semantic.objects == []


def test_quoted_phrase_becomes_object(resolver):
    params = resolver.extract_parameters('photos of "sunset over the lake"')
    assert params.semantic.objects == ["sunset over the lake"]


def test_extraction_returns_independent_objects(resolver):
    first = resolver.extract_parameters("dogs")
    first.semantic.objects.append("mutated")
    assert resolver.extract_parameters("dogs").semantic.objects == ["dogs"]


def test_merge_unions_lists_and_overrides_scalars():
    base = SearchParameters.from_dict({"semantic": {"objects": ["dog"]}, "temporal": {"year": 2020}})
    update = SearchParameters.from_dict(
        {"semantic": {"objects": ["dog", "cat"]}, "temporal": {"year": 2021}, "spatial": {"location": "Paris"}}
    )
    merged = base.merged_with(update)
    assert merged.semantic.objects == ["dog", "cat"]
    assert merged.temporal.year == 2021
    assert merged.spatial.location == "Paris"
    assert base.semantic.objects == ["dog"]
    assert base.temporal.year == 2020


def test_merge_keeps_base_scalar_when_update_unset():
    base = SearchParameters.from_dict({"spatial": {"location": "Paris"}})
    merged = base.merged_with(SearchParameters())
    assert merged.spatial.location == "Paris"


def test_to_dict_omits_unset_fields():
    params = SearchParameters.from_dict({"semantic": {"objects": ["dog"]}})
    assert params.to_dict() == {
        "semantic": {"objects": ["dog"]},
        "spatial": {},
        "temporal": {},
        "people": {},
        "technical": {},
    }
    assert params.count_populated() == 1
