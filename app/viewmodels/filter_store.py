"""ViewModel holding the filter, sorting and grouping state of a gallery view."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from app.viewmodels.gallery_view import GalleryView
from core.models import DirectoryContent, HistogramBucket
from core.services import filter_service
from core.services.filter_service import FilterState, apply_filters, new_filter_state
from core.services.histogram_service import HistogramService
from core.services.sort_service import SortingMethod, SortService
from infrastructure.settings import GalleryConfig

Subscriber = Callable[[GalleryView], None]

_UNSET = object()


class FilterStateStore:
    """Single source of truth for one gallery view.

    Commands build the complete next `GalleryView` before anything is stored,
    then swap it in and notify subscribers. A command issued by a subscriber
    during notification supersedes the round in progress.
    """

    def __init__(
        self,
        config: GalleryConfig | None = None,
        sorter: SortService | None = None,
        histogram: HistogramService | None = None,
    ) -> None:
        """Create a store.

        Args:
            config: Gallery options (defaults to `GalleryConfig()`).
            sorter: Sort/group service (defaults to one built from `config`).
            histogram: Histogram builder (defaults to one built from `config`).
        """
        self._config = config or GalleryConfig()
        self._sorter = sorter or SortService(
            self._config.enable_directory_sorting_by_date, tz=self._config.tz
        )
        self._histogram_service = histogram or HistogramService(self._config.tz)
        self._defaults = self._config.sorting_defaults()

        self._subscribers: list[Subscriber] = []
        self._version = 0
        self._content: DirectoryContent | None = None
        self._histogram: tuple[HistogramBucket, ...] = ()
        self._filter_state = new_filter_state(self._config.filter_slots)
        self._sorting = self._defaults.sorting_for(None)
        self._grouping = self._defaults.grouping_for(None)
        self._view = self._build_view(
            self._content, self._histogram, self._filter_state, self._sorting, self._grouping
        )[0]

    @property
    def view(self) -> GalleryView:
        """Last published snapshot."""
        return self._view

    @property
    def filter_state(self) -> FilterState:
        """Current filter state."""
        return self._filter_state

    @property
    def content(self) -> DirectoryContent | None:
        """Unfiltered content of the current listing."""
        return self._content

    @property
    def sorting(self) -> SortingMethod:
        """Current sorting method."""
        return self._sorting

    @property
    def grouping(self) -> SortingMethod:
        """Current grouping method."""
        return self._grouping

    def is_default_sorting_and_grouping(self) -> bool:
        """True if the current sorting and grouping are the listing's defaults."""
        return self._defaults.is_default(self._content, self._sorting, self._grouping)

    def subscribe(self, callback: Subscriber, replay: bool = True) -> Callable[[], None]:
        """Register `callback` for new snapshots; returns an unsubscribe function.

        With `replay`, the callback immediately receives the current snapshot.
        """
        self._subscribers.append(callback)
        if replay:
            callback(self._view)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # Commands

    def set_content(self, content: DirectoryContent | None) -> GalleryView:
        """Load a new listing: rebuild the histogram and resolve its default sorting."""
        media = content.media if content is not None else ()
        histogram = tuple(self._histogram_service.build(media))
        logger.info(
            "Content changed: {} media, {} directories",
            len(media),
            len(content.directories) if content is not None else 0,
        )
        return self._commit(
            content=content, histogram=histogram, sorting=self._defaults.sorting_for(content)
        )

    def set_min_date_filter(self, value: int) -> GalleryView:
        """Move the lower date bound."""
        return self._commit(state=filter_service.set_min_date_filter(self._filter_state, value))

    def set_max_date_filter(self, value: int) -> GalleryView:
        """Move the upper date bound."""
        return self._commit(state=filter_service.set_max_date_filter(self._filter_state, value))

    def set_date_filter(self, min_filter: int, max_filter: int) -> GalleryView:
        """Set both date bounds at once."""
        return self._commit(
            state=filter_service.set_date_filter(self._filter_state, min_filter, max_filter)
        )

    def toggle_option(self, slot: int, value: str) -> GalleryView:
        """Flip one option of filter slot `slot`."""
        return self._commit(state=filter_service.toggle_option(self._filter_state, slot, value))

    def select_only(self, slot: int, value: str) -> GalleryView:
        """Select only `value` in slot `slot`, or everything if it already is."""
        return self._commit(state=filter_service.select_only(self._filter_state, slot, value))

    def change_filter_type(self, slot: int, filter_type: str) -> GalleryView:
        """Point filter slot `slot` at `filter_type`."""
        state = filter_service.change_filter_type(self._filter_state, slot, filter_type)
        logger.debug("Filter slot {} -> {}", slot, filter_type)
        return self._commit(state=state)

    def reset_filters(self) -> GalleryView:
        """Clear all selections and the date range."""
        logger.debug("Filters reset")
        return self._commit(state=filter_service.reset_filters(self._filter_state))

    def set_filters_visible(self, visible: bool) -> GalleryView:
        """Show or hide the filters."""
        if self._filter_state.visible == visible:
            return self._view
        return self._commit(state=filter_service.set_filters_visible(self._filter_state, visible))

    def set_sorting(self, sorting: SortingMethod) -> GalleryView:
        """Change the sorting method."""
        logger.debug("Sorting -> {}", sorting)
        return self._commit(sorting=sorting)

    def set_grouping(self, grouping: SortingMethod) -> GalleryView:
        """Change the grouping method."""
        logger.debug("Grouping -> {}", grouping)
        return self._commit(grouping=grouping)

    # Internals

    def _build_view(
        self,
        content: DirectoryContent | None,
        histogram: tuple[HistogramBucket, ...],
        state: FilterState,
        sorting: SortingMethod,
        grouping: SortingMethod,
    ) -> tuple[GalleryView, FilterState]:
        result = apply_filters(content, state)
        grouped = self._sorter.apply_sorting(result.content, sorting, grouping)
        view = GalleryView(
            filter_state=result.state,
            histogram=histogram,
            content=grouped,
            sorting=sorting,
            grouping=grouping,
        )
        return view, result.state

    def _commit(
        self,
        content: object = _UNSET,
        histogram: object = _UNSET,
        state: FilterState | None = None,
        sorting: SortingMethod | None = None,
        grouping: SortingMethod | None = None,
    ) -> GalleryView:
        new_content = self._content if content is _UNSET else content
        new_histogram = self._histogram if histogram is _UNSET else histogram
        new_sorting = sorting or self._sorting
        new_grouping = grouping or self._grouping

        # compute everything first; a failing command leaves the store untouched
        view, new_state = self._build_view(
            new_content, new_histogram, state or self._filter_state, new_sorting, new_grouping
        )

        self._content = new_content
        self._histogram = new_histogram
        self._filter_state = new_state
        self._sorting = new_sorting
        self._grouping = new_grouping
        self._view = view
        self._version += 1

        version = self._version
        for callback in list(self._subscribers):
            if self._version != version:
                logger.debug("Notification round {} superseded", version)
                break
            callback(view)
        return view
