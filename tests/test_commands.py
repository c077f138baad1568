"""Tests for the action registry, command parsing and the natural-language processor."""

import asyncio

import pytest

from core.commands import (
    ActionParameter,
    ActionRegistry,
    ActionResult,
    CommandParser,
    IntentRecognizer,
    NaturalLanguageProcessor,
    ParameterExtractor,
    build_action,
    build_processor,
)
from core.errors import UnknownActionError
from core.models.commands import PhotoGridState, ProcessingOptions


def echo(params):
    return ActionResult(success=True, data=params)


async def async_echo(params):
    return ActionResult(success=True, data=params)


def boom(params):
    raise RuntimeError("handler exploded")


@pytest.fixture
def registry():
    registry = ActionRegistry(max_history=2)
    registry.register(
        build_action(
            "album.create",
            "Create an album",
            echo,
            {
                "name": ActionParameter(type="string", required=True),
                "private": ActionParameter(type="boolean", default=False),
            },
        )
    )
    registry.register(build_action("photo.search", "Search", async_echo, {"limit": ActionParameter(type="number")}))
    registry.register(build_action("photo.fail", "Always fails", boom))
    return registry


def test_registry_lookup_and_categories(registry):
    assert "album.create" in registry
    assert registry.get_action("missing") is None
    assert set(registry.actions_by_category("photo")) == {"photo.search", "photo.fail"}
    with pytest.raises(UnknownActionError):
        registry.require("missing")
    registry.unregister("photo.fail")
    assert "photo.fail" not in registry


def test_build_action_rejects_unknown_type():
    with pytest.raises(ValueError):
        build_action("x.y", "bad", echo, {"p": ActionParameter(type="date")})


def test_execute_applies_defaults_and_records_history(registry):
    result = asyncio.run(registry.execute("album.create", {"name": "Trip"}))
    assert result.success is True
    assert result.data == {"name": "Trip", "private": False}
    assert result.execution_time is not None
    assert registry.history[-1].action_name == "album.create"


def test_execute_awaits_async_handlers(registry):
    result = asyncio.run(registry.execute("photo.search", {"limit": 3}))
    assert result.data == {"limit": 3}


def test_execute_reports_problems_without_raising(registry):
    missing = asyncio.run(registry.execute("album.create", {}))
    assert missing.success is False
    assert missing.warnings == ["Missing required parameter: name"]

    wrong_type = asyncio.run(registry.execute("photo.search", {"limit": "three"}))
    assert wrong_type.warnings == ["Invalid type for parameter 'limit': expected number"]

    unknown = asyncio.run(registry.execute("nope"))
    assert unknown.error == "Action 'nope' not found"

    failed = asyncio.run(registry.execute("photo.fail"))
    assert failed.success is False
    assert failed.error == "handler exploded"


def test_history_is_bounded(registry):
    for name in ("a", "b", "c"):
        asyncio.run(registry.execute("album.create", {"name": name}))
    assert [record.parameters["name"] for record in registry.history] == ["b", "c"]
    registry.clear_history()
    assert registry.history == []


def test_recognizer_album_create():
    intent = IntentRecognizer().recognize("create album called 'Vacation 2024'")
    assert intent.action == "album.create"
    assert intent.confidence == pytest.approx(0.9)


def test_recognizer_suggests_alternatives_when_unsure():
    intent = IntentRecognizer().recognize("something about my photo")
    assert intent.action == "unknown"
    assert intent.alternative_actions == ["photo.select", "photo.analyze", "photo.search"]


def test_extractor_album_name_prefers_quotes():
    assert ParameterExtractor().extract("create album called 'Vacation 2024'", "album.create") == {"name": "Vacation 2024"}
    assert ParameterExtractor().extract("delete album Travel", "album.delete") == {"name": "Travel"}


def test_extractor_search_keywords_and_query():
    extractor = ParameterExtractor()
    assert extractor.extract("find photos with sunset, beach", "photo.search") == {"keywords": ["sunset", "beach"]}
    assert extractor.extract("show me dogs in Paris", "photo.search") == {"query": "dogs in Paris"}


def test_extractor_photo_reference_and_batch():
    extractor = ParameterExtractor()
    assert extractor.extract("select photo sunset.jpg", "photo.select") == {"photo_id": "sunset.jpg"}
    assert extractor.extract("analyze first 3 photos on page 2", "photo.batchAnalyze") == {
        "position": "first",
        "count": 3,
        "page": 2,
    }


def test_command_parser_blends_confidence(registry):
    parsed = CommandParser(registry).parse("create album called 'Vacation 2024'")
    assert parsed.intent.action == "album.create"
    assert parsed.parameters == {"name": "Vacation 2024"}
    assert parsed.confidence == pytest.approx((0.9 + 0.8) / 2)
    assert parsed.errors == []


def test_command_parser_empty_command():
    parsed = CommandParser().parse("   ")
    assert "Empty command provided" in parsed.errors


@pytest.fixture
def processor(pipeline):
    processor, actions = build_processor(pipeline)
    return processor, actions


def test_help_is_answered_first(processor):
    nl, _ = processor
    result = asyncio.run(nl.process_command("help"))
    assert result.success is True
    assert result.help_response.startswith("Available commands:")


def test_low_confidence_returns_suggestions(processor):
    nl, _ = processor
    result = asyncio.run(nl.process_command("xyzzy"))
    assert result.success is False
    assert result.error == 'Could not understand command: "xyzzy"'
    assert result.suggestions[0] == "select photo [photo-id]"


def test_create_album_command(processor):
    nl, actions = processor
    result = asyncio.run(nl.process_command("create album called 'Vacation 2024'"))
    assert result.success is True
    assert result.executed_action == "album.create"
    assert "Vacation 2024" in actions.albums
    assert nl.context["last_action"] == "album.create"


def test_delete_requires_confirmation(processor):
    nl, actions = processor
    asyncio.run(nl.process_command("create album Travel"))
    pending = asyncio.run(nl.process_command("delete album Travel"))
    assert pending.requires_confirmation is True
    assert pending.success is False
    assert "Travel" in actions.albums

    confirmed = asyncio.run(nl.process_command("delete album Travel", ProcessingOptions(confirmed=True)))
    assert confirmed.success is True
    assert "Travel" not in actions.albums


def test_multi_step_commands_are_split(processor):
    nl, _ = processor
    result = asyncio.run(
        nl.process_command("create album Trip and then select album Trip", ProcessingOptions(allow_multi_step=True))
    )
    assert result.multi_step is True
    assert [step.action for step in result.steps] == ["album.create", "album.select"]
    assert result.steps[0].parameters == {"name": "Trip"}


def test_search_then_select_updates_grid(processor):
    nl, actions = processor
    events = []
    searched = asyncio.run(
        nl.process_command("find photos with sunset, beach", ProcessingOptions(on_progress=events.append))
    )
    assert searched.success is True
    assert actions.state().photo_ids == ["p1"]
    assert [event["status"] for event in events] == ["started", "completed"]

    selected = asyncio.run(nl.process_command("select photo sunset.jpg"))
    assert selected.success is True
    assert actions.state().selected_ids == ["p1"]


def test_contextual_parameters_use_grid_state(registry):
    state = PhotoGridState(photo_ids=["a", "b", "c"], selected_ids=["b"])
    nl = NaturalLanguageProcessor(registry, state_provider=lambda: state)
    assert nl.resolve_contextual_parameters({"position": "last"})["photo_id"] == "c"
    assert nl.resolve_contextual_parameters({"position": "first", "count": 2})["photo_ids"] == ["a", "b"]
    assert nl.resolve_contextual_parameters({"target": "selected"})["photo_ids"] == ["b"]
    assert nl.resolve_contextual_parameters({"query": "dogs"}) == {"query": "dogs"}
