"""Registry of categorical filter types.

Each entry maps a filter type key to the function that extracts the item's
values for that type. The registry is read-only after import.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from core.errors import UnknownFilterTypeError
from core.models import MediaItem

UNKNOWN_VALUE = "<unknown>"


@dataclass(frozen=True)
class FilterDefinition:
    """How to read one filter type off an item.

    Attributes:
        key: Registry identifier (e.g. "city").
        name: Human readable label.
        extract: Returns the item's values for this type.
        is_array_value: True when an item can carry several values.
    """

    key: str
    name: str
    extract: Callable[[MediaItem], list[str]]
    is_array_value: bool = False


def _single(value: object) -> list[str]:
    if value is None or value == "":
        return [UNKNOWN_VALUE]
    return [str(value)]


def _faces_group(item: MediaItem) -> list[str]:
    if not item.faces:
        return [UNKNOWN_VALUE]
    return [", ".join(sorted(item.faces))]


_DEFINITIONS = (
    FilterDefinition("keywords", "Keywords", lambda m: list(m.keywords or ()), True),
    FilterDefinition("faces", "Faces", lambda m: list(m.faces or ()), True),
    FilterDefinition("faces_groups", "Faces groups", _faces_group),
    FilterDefinition("caption", "Caption", lambda m: _single(m.caption)),
    FilterDefinition("rating", "Rating", lambda m: _single(m.rating)),
    FilterDefinition("camera", "Camera", lambda m: _single(m.camera_model)),
    FilterDefinition("lens", "Lens", lambda m: _single(m.lens)),
    FilterDefinition("city", "City", lambda m: _single(m.city)),
    FilterDefinition("state", "State", lambda m: _single(m.state)),
    FilterDefinition("country", "Country", lambda m: _single(m.country)),
)

FILTERS: Mapping[str, FilterDefinition] = MappingProxyType({d.key: d for d in _DEFINITIONS})

# Slot layout of a freshly created filter state
DEFAULT_FILTER_SLOTS: tuple[str, ...] = ("keywords", "faces", "city", "rating")


def get_filter(filter_type: str) -> FilterDefinition:
    """Return the definition for `filter_type` or raise `UnknownFilterTypeError`."""
    try:
        return FILTERS[filter_type]
    except KeyError:
        raise UnknownFilterTypeError(filter_type) from None


def values_of(filter_type: str, item: MediaItem) -> list[str]:
    """Values of `item` for `filter_type`; empty when a list attribute is absent."""
    return get_filter(filter_type).extract(item)
