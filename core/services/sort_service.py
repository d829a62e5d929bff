"""Sorting and grouping service for gallery listings.

Media is first sorted by the grouping method and cut into contiguous runs of
equal group keys; each run is then sorted by the sorting method. Directories
are sorted on their own. The service holds no state between calls.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
import random
import re
from types import MappingProxyType
from typing import Any

from loguru import logger

from core.errors import UnknownSortMethodError
from core.models import (
    DirectoryContent,
    DirectoryEntry,
    GroupedDirectoryContent,
    MediaGroup,
    MediaItem,
)


class SortBy(str, Enum):
    """Sort and group methods."""

    NAME = "name"
    DATE = "date"
    RATING = "rating"
    PERSON_COUNT = "person_count"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: Any) -> SortBy:
        """Return the member for `value` (case-insensitive) or raise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownSortMethodError(value) from None


@dataclass(frozen=True)
class SortingMethod:
    """A method plus direction."""

    method: SortBy
    ascending: bool = True

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> SortingMethod:
        """Build from a mapping like `{"method": "date", "ascending": false}`.

        A non-boolean `ascending` is ignored with a warning.
        """
        ascending = raw.get("ascending", True)
        if not isinstance(ascending, bool):
            logger.warning("Ignoring non-boolean ascending {!r}, sorting ascending", ascending)
            ascending = True
        return cls(SortBy.parse(raw.get("method")), ascending)


_DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> tuple[Any, ...]:
    """Case-insensitive collation key comparing digit runs numerically."""
    parts: list[tuple[int, int, str]] = []
    for i, chunk in enumerate(_DIGITS.split(name)):
        if i % 2:
            parts.append((0, int(chunk), ""))
        elif chunk:
            parts.append((1, 0, chunk.casefold()))
    # raw name breaks ties between case variants
    return (tuple(parts), name)


_MEDIA_KEYS: Mapping[SortBy, Callable[[MediaItem], Any]] = MappingProxyType(
    {
        SortBy.NAME: lambda m: natural_key(m.name),
        SortBy.DATE: lambda m: m.creation_date,
        SortBy.RATING: lambda m: m.rating or 0,
        SortBy.PERSON_COUNT: lambda m: len(m.faces or ()),
    }
)


def _checked(method: Any) -> SortBy:
    if not isinstance(method, SortBy):
        raise UnknownSortMethodError(method)
    return method


class SortService:
    """Sorts media and directories and groups media for rendering.

    Args:
        enable_directory_sorting_by_date: When False, date sorting orders
            directories by name.
        tz: Timezone used for date group keys. `None` uses local time.
    """

    def __init__(
        self, enable_directory_sorting_by_date: bool = True, tz: tzinfo | None = None
    ) -> None:
        self._dirs_by_date = enable_directory_sorting_by_date
        self._tz = tz

    def sort_media(self, media: Sequence[MediaItem], sorting: SortingMethod) -> list[MediaItem]:
        """Return `media` ordered by `sorting`; the input is left untouched."""
        method = _checked(sorting.method)
        if method is SortBy.RANDOM:
            result = sorted(media, key=lambda m: (m.name.lower(), m.name, m.path))
            random.Random(len(result)).shuffle(result)
        else:
            result = sorted(media, key=_MEDIA_KEYS[method])
        if not sorting.ascending:
            result.reverse()
        return result

    def sort_directories(
        self, directories: Sequence[DirectoryEntry], sorting: SortingMethod
    ) -> list[DirectoryEntry]:
        """Return `directories` ordered by `sorting`.

        Rating and person count do not apply to directories and sort by name.
        Random order starts from the reversed name order, so directories and
        media shuffle differently under the same seed.
        """
        method = _checked(sorting.method)
        if method is SortBy.RANDOM:
            result = sorted(directories, key=lambda d: (d.name.lower(), d.name), reverse=True)
            random.Random(len(result)).shuffle(result)
        elif method is SortBy.DATE and self._dirs_by_date:
            result = sorted(directories, key=lambda d: d.last_modified)
        else:
            result = sorted(directories, key=lambda d: natural_key(d.name))
        if not sorting.ascending:
            result.reverse()
        return result

    def group_key(self, item: MediaItem, method: SortBy) -> str:
        """Key of the group `item` belongs to under `method`."""
        method = _checked(method)
        if method is SortBy.DATE:
            d = datetime.fromtimestamp(item.creation_date / 1000, self._tz)
            return f"{d:%B} {d.day}, {d.year}"
        if method is SortBy.NAME:
            return item.name[:1].upper()
        if method is SortBy.RATING:
            return str(item.rating or 0)
        if method is SortBy.PERSON_COUNT:
            return str(len(item.faces or ()))
        return ""

    def group_media(
        self, media: Sequence[MediaItem], grouping: SortingMethod, sorting: SortingMethod
    ) -> list[MediaGroup]:
        """Split media into groups ordered by `grouping`, each sorted by `sorting`.

        A new group starts whenever the key differs from the previous item's,
        so a key can occur in more than one group.
        """
        runs: list[tuple[str, list[MediaItem]]] = []
        for item in self.sort_media(media, grouping):
            key = self.group_key(item, grouping.method)
            if not runs or runs[-1][0] != key:
                runs.append((key, []))
            runs[-1][1].append(item)
        return [MediaGroup(key, tuple(self.sort_media(items, sorting))) for key, items in runs]

    def apply_sorting(
        self,
        content: DirectoryContent | None,
        sorting: SortingMethod,
        grouping: SortingMethod,
    ) -> GroupedDirectoryContent | None:
        """Sort directories and group media of `content`."""
        _checked(sorting.method)
        _checked(grouping.method)
        if content is None:
            return None
        groups = self.group_media(content.media, grouping, sorting)
        directories = self.sort_directories(content.directories, sorting)
        logger.debug(
            "Sorted {} media into {} groups by {}/{}, {} directories",
            len(content.media),
            len(groups),
            grouping.method.value,
            sorting.method.value,
            len(directories),
        )
        return GroupedDirectoryContent(
            media_groups=tuple(groups),
            directories=tuple(directories),
            meta_files=content.meta_files,
        )


# Marker files that pin the sorting of a directory; the first match wins
SORTING_META_FILES: Mapping[str, SortingMethod] = MappingProxyType(
    {
        ".order_descending_name.pg2conf": SortingMethod(SortBy.NAME, False),
        ".order_ascending_name.pg2conf": SortingMethod(SortBy.NAME, True),
        ".order_descending_date.pg2conf": SortingMethod(SortBy.DATE, False),
        ".order_ascending_date.pg2conf": SortingMethod(SortBy.DATE, True),
        ".order_descending_rating.pg2conf": SortingMethod(SortBy.RATING, False),
        ".order_ascending_rating.pg2conf": SortingMethod(SortBy.RATING, True),
        ".order_random.pg2conf": SortingMethod(SortBy.RANDOM, True),
    }
)


class SortingDefaults:
    """Resolves the default sorting and grouping of a listing."""

    def __init__(
        self,
        photo_sorting: SortingMethod = SortingMethod(SortBy.DATE),
        photo_grouping: SortingMethod = SortingMethod(SortBy.DATE),
        search_sorting: SortingMethod = SortingMethod(SortBy.DATE, False),
        search_grouping: SortingMethod = SortingMethod(SortBy.DATE, False),
    ) -> None:
        self.photo_sorting = photo_sorting
        self.photo_grouping = photo_grouping
        self.search_sorting = search_sorting
        self.search_grouping = search_grouping

    def sorting_for(self, content: DirectoryContent | None) -> SortingMethod:
        """Meta file marker first, then the search or photo default."""
        if content is not None:
            names = {f.name for f in content.meta_files}
            for file_name, sorting in SORTING_META_FILES.items():
                if file_name in names:
                    return sorting
            if content.is_search_result:
                return self.search_sorting
        return self.photo_sorting

    def grouping_for(self, content: DirectoryContent | None) -> SortingMethod:
        """Search or photo grouping default."""
        if content is not None and content.is_search_result:
            return self.search_grouping
        return self.photo_grouping

    def is_default(
        self, content: DirectoryContent | None, sorting: SortingMethod, grouping: SortingMethod
    ) -> bool:
        """True if both `sorting` and `grouping` equal the listing's defaults."""
        return sorting == self.sorting_for(content) and grouping == self.grouping_for(content)
