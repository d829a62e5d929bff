"""Pytest configuration and fixtures for gallery view engine tests."""

from datetime import datetime, timezone

import pytest

from core.models import DirectoryContent, DirectoryEntry, MediaItem


def to_ms(value):
    """Epoch milliseconds for a datetime (ints pass through)."""
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    return int(value)


@pytest.fixture
def make_item():
    """Factory building `MediaItem`s from a path and a datetime or epoch ms."""

    def _make(path, when=0, **kwargs):
        return MediaItem(path=path, creation_date=to_ms(when), **kwargs)

    return _make


@pytest.fixture
def utc_day():
    """Factory for UTC datetimes on 2024-01-01 at a given hour."""

    def _at(hour, minute=0):
        return datetime(2024, 1, 1, hour, minute, tzinfo=timezone.utc)

    return _at


@pytest.fixture
def sample_content(make_item, utc_day):
    """A small listing with locations, faces, keywords and ratings."""
    media = (
        make_item(
            "trip/paris_1.jpg",
            utc_day(9),
            city="Paris",
            rating=5,
            faces=("Alice", "Bob"),
            keywords=("city", "night"),
        ),
        make_item("trip/paris_2.jpg", utc_day(10), city="Paris", rating=3, faces=("Alice",)),
        make_item("trip/beach.jpg", utc_day(12), rating=4, keywords=("sea",)),
        make_item("trip/rome.jpg", utc_day(15), city="Rome", keywords=("city",)),
    )
    directories = (
        DirectoryEntry("2019", to_ms(datetime(2019, 5, 1, tzinfo=timezone.utc))),
        DirectoryEntry("2021", to_ms(datetime(2021, 5, 1, tzinfo=timezone.utc))),
        DirectoryEntry("2020", to_ms(datetime(2020, 5, 1, tzinfo=timezone.utc))),
    )
    return DirectoryContent(media=media, directories=directories)
