"""Core domain models for gallery listings, groups and histogram buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from pathlib import PurePosixPath


@dataclass(frozen=True)
class MediaItem:
    """A single photo or video of a directory listing.

    `creation_date` is epoch milliseconds. Multi-valued attributes (`faces`,
    `keywords`) are `None` when the metadata carries no list at all.
    """

    path: str
    creation_date: int
    rating: int | None = None
    faces: tuple[str, ...] | None = None
    keywords: tuple[str, ...] | None = None
    caption: str | None = None
    camera_model: str | None = None
    lens: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None

    @property
    def name(self) -> str:
        """File name portion of the path."""
        return PurePosixPath(self.path).name


@dataclass(frozen=True)
class DirectoryEntry:
    """A sub-directory of a listing. Sortable, never categorically filtered."""

    name: str
    last_modified: int


@dataclass(frozen=True)
class MetaFile:
    """A metadata file shipped alongside the media (e.g. `.pg2conf` markers)."""

    name: str


@dataclass(frozen=True)
class DirectoryContent:
    """One delivery of the content source."""

    media: tuple[MediaItem, ...] = ()
    directories: tuple[DirectoryEntry, ...] = ()
    meta_files: tuple[MetaFile, ...] = ()
    is_search_result: bool = False


@dataclass(frozen=True)
class MediaGroup:
    """A named run of media sharing the same group key."""

    name: str
    media: tuple[MediaItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class GroupedDirectoryContent:
    """Sorted directories plus grouped, sorted media, ready for rendering."""

    media_groups: tuple[MediaGroup, ...]
    directories: tuple[DirectoryEntry, ...]
    meta_files: tuple[MetaFile, ...] = ()


class HistogramResolution(Enum):
    """Calendar granularity a histogram bucket should be labelled with."""

    YEAR = "%Y"
    YEAR_MONTH = "%Y %b"
    WEEKDAY = "%a"
    HOUR = "%H"

    @property
    def pattern(self) -> str:
        """`strftime` pattern for bucket labels."""
        return self.value


@dataclass(frozen=True)
class HistogramBucket:
    """One column of the creation-date histogram (times in epoch ms)."""

    start_time: int
    end_time: int
    resolution: HistogramResolution
    count: int
    max_count: int
    # zone the bucket was floored in; None is local time
    tz: tzinfo | None = field(default=None, compare=False)

    def label(self) -> str:
        """Render `start_time` in the bucket's zone using its resolution."""
        return datetime.fromtimestamp(self.start_time / 1000, self.tz).strftime(
            self.resolution.pattern
        )
