"""Immutable snapshot published by `FilterStateStore` after every change."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import GroupedDirectoryContent, HistogramBucket
from core.services.filter_service import FilterState
from core.services.sort_service import SortingMethod


@dataclass(frozen=True)
class GalleryView:
    """Everything a renderer needs for one gallery view."""

    filter_state: FilterState
    histogram: tuple[HistogramBucket, ...]
    content: GroupedDirectoryContent | None
    sorting: SortingMethod
    grouping: SortingMethod

    @property
    def media_count(self) -> int:
        """Number of media shown across all groups."""
        if self.content is None:
            return 0
        return sum(len(g.media) for g in self.content.media_groups)

    @property
    def show_histogram(self) -> bool:
        """False when the histogram carries no information."""
        return len(self.histogram) > 1
