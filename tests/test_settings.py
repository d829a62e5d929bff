"""Tests for JSON settings and the gallery configuration."""

import json
from datetime import timezone
from pathlib import Path

import pytest

from core.errors import UnknownFilterTypeError, UnknownSortMethodError
from core.services.sort_service import SortBy, SortingMethod
from infrastructure.settings import GalleryConfig, JsonSettings, load_gallery_config

REPO_ROOT = Path(__file__).resolve().parents[1]


class TestJsonSettings:
    """Dotted-key access to JSON settings."""

    def test_dotted_get(self, tmp_path):
        """Nested keys resolve; missing keys return the default."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"a": {"b": {"c": 3}}}), encoding="utf-8")

        settings = JsonSettings(path)

        assert settings.get("a.b.c") == 3
        assert settings.get("a.x", "fallback") == "fallback"
        assert settings.get("a.b.c.d") is None

    def test_missing_file(self, tmp_path):
        """A missing settings file is an error."""
        with pytest.raises(FileNotFoundError):
            JsonSettings(tmp_path / "nope.json")

    def test_from_dict(self):
        """Settings can be built in memory."""
        assert JsonSettings.from_dict({"x": {"y": 1}}).get("x.y") == 1


class TestLoadGalleryConfig:
    """Typed configuration parsing."""

    def test_shipped_settings(self):
        """The repository's settings.json parses to the defaults."""
        config = load_gallery_config(JsonSettings(REPO_ROOT / "settings.json"))

        assert config == GalleryConfig()

    def test_custom_values(self):
        """Every option is read from its key."""
        settings = JsonSettings.from_dict(
            {
                "gallery": {
                    "default_photo_sorting": {"method": "name", "ascending": False},
                    "default_search_grouping": {"method": "rating"},
                    "enable_directory_sorting_by_date": False,
                    "timezone": "UTC",
                },
                "filters": {"default_slots": ["country", "lens"]},
            }
        )

        config = load_gallery_config(settings)

        assert config.default_photo_sorting == SortingMethod(SortBy.NAME, False)
        assert config.default_search_grouping == SortingMethod(SortBy.RATING)
        assert config.enable_directory_sorting_by_date is False
        assert config.filter_slots == ("country", "lens")
        assert config.tz is timezone.utc
        assert config.sorting_defaults().photo_sorting == SortingMethod(SortBy.NAME, False)

    def test_malformed_values_fall_back(self):
        """Malformed entries keep the defaults."""
        settings = JsonSettings.from_dict(
            {
                "gallery": {
                    "default_photo_sorting": "name",
                    "default_search_sorting": {"method": "name", "ascending": "false"},
                    "enable_directory_sorting_by_date": "false",
                    "timezone": "Mars/Base",
                },
                "filters": {"default_slots": "city"},
            }
        )

        config = load_gallery_config(settings)

        assert config.default_photo_sorting == GalleryConfig().default_photo_sorting
        assert config.filter_slots == GalleryConfig().filter_slots
        assert config.tz is None
        assert config.default_search_sorting == SortingMethod(SortBy.NAME, True)
        assert config.enable_directory_sorting_by_date is True

    def test_unknown_identifiers_raise(self):
        """Unknown sort methods and filter types are rejected."""
        with pytest.raises(UnknownSortMethodError):
            load_gallery_config(
                JsonSettings.from_dict({"gallery": {"default_photo_grouping": {"method": "size"}}})
            )
        with pytest.raises(UnknownFilterTypeError):
            load_gallery_config(JsonSettings.from_dict({"filters": {"default_slots": ["mood"]}}))
