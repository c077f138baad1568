"""Shared fixtures: a small annotated library, an indexed engine and a pipeline over it."""

import asyncio
from datetime import date, datetime

import pytest

from config.settings import ParserSettings, SearchSettings
from core.models.domain import Photo, PhotoMetadata
from core.parsing.query_parser import PhotoDiscoveryQueryParser
from core.search.engine import SemanticSearchEngine
from core.search.pipeline import SearchPipeline

TODAY = date(2021, 6, 15)


def make_photo(photo_id, filename, **metadata):
    return Photo(id=photo_id, filename=filename, metadata=PhotoMetadata(**metadata) if metadata else None)


@pytest.fixture
def photos():
    """Five photos covering every index; p5 has no metadata at all."""
    return [
        make_photo(
            "p1",
            "sunset.jpg",
            keywords=["sunset", "beach", "vacation"],
            objects=["sunset", "ocean"],
            scenes=["beach"],
            location="Hawaii",
            camera="Canon EOS R5",
            taken_at=datetime(2020, 7, 10, 18, 30),
            confidence=0.9,
        ),
        make_photo(
            "p2",
            "dog_park.jpg",
            objects=["dog"],
            scenes=["outdoor"],
            people=["Alice"],
            location="Paris",
            camera="Apple iPhone 12",
            taken_at=datetime(2021, 3, 5, 9, 0),
            confidence=0.8,
        ),
        make_photo(
            "p3",
            "cats.jpg",
            objects=["cat"],
            scenes=["indoor"],
            people=["Alice", "Bob"],
            location="paris",
            taken_at=datetime(2020, 12, 24, 20, 0),
        ),
        make_photo(
            "p4",
            "mountain.jpg",
            objects=["mountain"],
            scenes=["landscape"],
            location="Denver",
            camera="Nikon D850",
            taken_at=datetime(2019, 6, 1, 7, 45),
            confidence=0.7,
        ),
        make_photo("p5", "scan.png"),
    ]


@pytest.fixture
def engine(photos):
    engine = SemanticSearchEngine(SearchSettings(debounce_delay=0.01), today=lambda: TODAY)
    asyncio.run(engine.index_photos(photos))
    return engine


@pytest.fixture
def parser():
    return PhotoDiscoveryQueryParser(ParserSettings())


@pytest.fixture
def pipeline(parser, engine):
    return SearchPipeline(parser, engine)
