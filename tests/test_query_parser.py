"""Tests for validation, refinement suggestions, the search context and agent commands."""

from core.models.query import AgentCommand


def suggestion_types(suggestions):
    return [suggestion.type for suggestion in suggestions]


def test_single_word_query_is_vague(parser):
    result = parser.validate_query("photos")
    assert result.is_valid is False
    assert "no_parameters" in result.issues
    assert "too_vague" in result.issues
    assert "unclear_intent" in result.issues
    assert result.extractable_parameters == 0


def test_specific_query_is_valid(parser):
    result = parser.validate_query("show me sunset photos in Paris from 2020")
    assert result.extractable_parameters == 3
    assert result.issues == []
    assert result.confidence == 1.0
    assert result.is_valid is True


def test_two_parameters_are_not_enough(parser):
    result = parser.validate_query("show me sunset photos in Paris")
    assert result.extractable_parameters == 2
    assert result.is_valid is False


def test_invalid_date_marker_reported(parser):
    result = parser.validate_query("photos invalid_date_format")
    assert "Invalid date format: invalid_date_format" in result.errors
    assert result.is_valid is False


def test_malformed_date_reported(parser):
    result = parser.validate_query("dogs from 13/45/2020")
    assert result.errors == ["Invalid date format: 13/45/2020"]


def test_suggestions_for_vague_query(parser):
    suggestions = parser.suggest_refinements("photos")
    assert suggestion_types(suggestions) == ["add_context", "semantic_refinement"]
    assert suggestions[0].example == 'Instead of "photos", try "sunset photos from beach vacation"'


def test_old_photos_get_temporal_hint(parser):
    assert "temporal_refinement" in suggestion_types(parser.suggest_refinements("old photos"))
    assert "temporal_refinement" not in suggestion_types(parser.suggest_refinements("old photos from 1990"))


def test_content_without_place_gets_spatial_hint(parser):
    assert suggestion_types(parser.suggest_refinements("dogs")) == ["spatial_refinement"]
    assert "spatial_refinement" not in suggestion_types(parser.suggest_refinements("dogs in Paris"))


def test_refinement_narrows_previous_discovery(parser):
    first = parser.process_query("show me dogs")
    assert first.intent.type == "discovery"
    assert first.parameters.semantic.objects == ["dogs"]

    second = parser.process_query("and also cats")
    assert second.intent.type == "refinement"
    assert second.parameters.semantic.objects == ["dogs", "cats"]
    assert parser.get_current_context().semantic.objects == ["dogs", "cats"]


def test_discovery_replaces_context(parser):
    parser.process_query("show me dogs")
    result = parser.process_query("show me beach photos")
    assert result.parameters.semantic.objects == []
    assert parser.get_current_context().semantic.scenes == ["beach"]


def test_filter_applies_once(parser):
    parser.process_query("show me dogs")
    result = parser.process_query("taken in 2020")
    assert result.intent.type == "filter"
    assert result.parameters.semantic.objects == ["dogs"]
    assert result.parameters.temporal.year == 2020
    assert parser.get_current_context().temporal.year is None


def test_context_copy_and_reset(parser):
    parser.process_query("show me dogs")
    snapshot = parser.get_current_context()
    snapshot.semantic.objects.append("cats")
    assert parser.get_current_context().semantic.objects == ["dogs"]
    parser.reset_context()
    assert parser.get_current_context().is_empty()


def test_agent_command_rejects_unknown_parameter(parser):
    result = parser.process_agent_command(AgentCommand(action="search", parameters={"semantic_query": "dogs", "x": 1}))
    assert result.success is False
    assert result.error == "Unknown parameter: x"


def test_agent_command_builds_search_action(parser):
    result = parser.process_agent_command(
        AgentCommand(action="search", parameters={"semantic_query": "dogs in Paris", "limit": 5})
    )
    assert result.success is True
    assert result.structured_data["@type"] == "SearchAction"
    assert result.structured_data["object"]["potentialAction"]["target"] == "/photos/search"
    assert result.parameters.spatial.location == "Paris"
    assert result.search_params == {"semantic_query": "dogs in Paris", "limit": 5}


def test_sunset_photos_from_last_summer(parser):
    entities = [(entity.type, entity.value) for entity in parser.tokenize("sunset photos from last summer").entities]
    assert ("time_period", "last summer") in entities
    assert ("object", "sunset") in entities

    result = parser.process_query("sunset photos from last summer")
    assert result.intent.type == "discovery"
    assert result.parameters.temporal.relative_period == "last_summer"


def test_bare_query_starts_a_session(parser):
    assert parser.process_query("dogs").intent.type == "discovery"
    parser.process_query("and also cats")
    assert parser.get_current_context().semantic.objects == ["dogs", "cats"]
