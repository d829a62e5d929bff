"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone, tzinfo
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.filters import DEFAULT_FILTER_SLOTS, get_filter
from core.services.sort_service import SortBy, SortingDefaults, SortingMethod


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonSettings:
        """Build settings from an in-memory mapping."""
        settings = cls.__new__(cls)
        settings._path = None
        settings._data = data
        return settings

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


@dataclass
class GalleryConfig:
    """Typed gallery options read from settings."""

    default_photo_sorting: SortingMethod = SortingMethod(SortBy.DATE)
    default_photo_grouping: SortingMethod = SortingMethod(SortBy.DATE)
    default_search_sorting: SortingMethod = SortingMethod(SortBy.DATE, False)
    default_search_grouping: SortingMethod = SortingMethod(SortBy.DATE, False)
    enable_directory_sorting_by_date: bool = True
    filter_slots: tuple[str, ...] = field(default=DEFAULT_FILTER_SLOTS)
    # zone for date group keys and histogram buckets; None is local time
    tz: tzinfo | None = None

    def sorting_defaults(self) -> SortingDefaults:
        """Defaults resolver built from this config."""
        return SortingDefaults(
            photo_sorting=self.default_photo_sorting,
            photo_grouping=self.default_photo_grouping,
            search_sorting=self.default_search_sorting,
            search_grouping=self.default_search_grouping,
        )


def _parse_sorting(settings: JsonSettings, key: str, default: SortingMethod) -> SortingMethod:
    # Expect a mapping like: {"method": "date", "ascending": false}
    raw = settings.get(key)
    if raw is None:
        return default
    if not isinstance(raw, dict) or "method" not in raw:
        logger.warning("Ignoring malformed sorting setting {}: {!r}", key, raw)
        return default
    return SortingMethod.parse(raw)


def _parse_flag(settings: JsonSettings, key: str, default: bool) -> bool:
    raw = settings.get(key, default)
    if not isinstance(raw, bool):
        logger.warning("Ignoring non-boolean setting {}: {!r}", key, raw)
        return default
    return raw


def _parse_timezone(value: Any) -> tzinfo | None:
    if isinstance(value, str) and value.lower() == "utc":
        return timezone.utc
    if value not in (None, "local"):
        logger.warning("Unknown gallery timezone {!r}, using local time", value)
    return None


def load_gallery_config(settings: JsonSettings) -> GalleryConfig:
    """Read `gallery.*` and `filters.*` keys into a `GalleryConfig`.

    Malformed values fall back to defaults; unknown sort methods or filter
    types raise.
    """
    base = GalleryConfig()

    slots_raw = settings.get("filters.default_slots")
    if isinstance(slots_raw, list) and slots_raw:
        slots = tuple(str(s) for s in slots_raw)
        for s in slots:
            get_filter(s)
    else:
        if slots_raw is not None:
            logger.warning("Ignoring malformed filters.default_slots: {!r}", slots_raw)
        slots = base.filter_slots

    return GalleryConfig(
        default_photo_sorting=_parse_sorting(
            settings, "gallery.default_photo_sorting", base.default_photo_sorting
        ),
        default_photo_grouping=_parse_sorting(
            settings, "gallery.default_photo_grouping", base.default_photo_grouping
        ),
        default_search_sorting=_parse_sorting(
            settings, "gallery.default_search_sorting", base.default_search_sorting
        ),
        default_search_grouping=_parse_sorting(
            settings, "gallery.default_search_grouping", base.default_search_grouping
        ),
        enable_directory_sorting_by_date=_parse_flag(
            settings,
            "gallery.enable_directory_sorting_by_date",
            base.enable_directory_sorting_by_date,
        ),
        filter_slots=slots,
        tz=_parse_timezone(settings.get("gallery.timezone", "local")),
    )
