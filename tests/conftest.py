# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for location pipeline tests."""

from datetime import datetime
from typing import Callable

import pytest

from location_pipeline.config import DatabaseSettings, get_settings
from location_pipeline.database import (
    LocationStore,
    create_all_tables,
    create_db_engine,
    make_session_factory,
)
from location_pipeline.models import Coordinates, LocationRecord

# Reference points, each inside exactly the region it is named after
OSAKA = Coordinates(34.6937, 135.5023)
TOKYO = Coordinates(35.6762, 139.6503)
FUKUOKA = Coordinates(33.5904, 130.4017)
MIYAKOJIMA = Coordinates(24.8055, 125.2811)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; every test starts from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 25, 10, 15, 0)


@pytest.fixture
def make_location() -> Callable[..., LocationRecord]:
    """Factory for LocationRecord with only the fields a test cares about."""
    counter = {"n": 0}

    def _make(name: str, id: str | None = None, **fields) -> LocationRecord:
        counter["n"] += 1
        return LocationRecord(id=id or f"loc-{counter['n']}", name=name, **fields)

    return _make


@pytest.fixture
def sample_locations() -> list[LocationRecord]:
    """A small corpus with one real duplicate pair and one same-name pair in two cities."""
    return [
        LocationRecord(
            id="loc-1",
            name="Bistro N/N",
            city="Osaka",
            region="Kansai",
            category="restaurant",
            coordinates=OSAKA,
            place_id="ChIJ-bistro",
            description="French bistro near Nakanoshima.",
            rating=4.5,
            image="https://example.com/bistro.jpg",
        ),
        LocationRecord(
            id="loc-2",
            name="ＢＩＳＴＲＯ　Ｎ／Ｎ",
            city="Osaka",
            region="Kansai",
        ),
        LocationRecord(
            id="loc-3",
            name="Ichiran Ramen",
            city="Tokyo",
            region="Kanto",
            coordinates=TOKYO,
            place_id="ChIJ-ichiran-tokyo",
        ),
        LocationRecord(
            id="loc-4",
            name="Ichiran Ramen",
            city="Fukuoka",
            region="Kyushu",
            coordinates=FUKUOKA,
            place_id="ChIJ-ichiran-fukuoka",
        ),
        LocationRecord(
            id="loc-5",
            name="Kinkaku-ji",
            city="Kyoto",
            region="Kansai",
        ),
    ]


@pytest.fixture
def corrupted_location() -> LocationRecord:
    """An Okinawa location whose city was rewritten to the Osaka ward parent."""
    return LocationRecord(
        id="loc-10",
        name="Miyako Blue Cafe",
        city="Osaka",
        region="Okinawa",
        coordinates=MIYAKOJIMA,
        city_original="Miyakojima",
    )


@pytest.fixture
def engine():
    """In-memory SQLite engine with the locations table."""
    engine = create_db_engine(DatabaseSettings(DATABASE_URL="sqlite://"))
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> LocationStore:
    return LocationStore(make_session_factory(engine))
