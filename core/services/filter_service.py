"""Filter state reducer for date range and categorical value filters.

Every function here is pure: it takes a `FilterState` (and content) and returns
new objects, never mutating its inputs. `apply_filters` is the reducer run on
each content delivery or filter change; the remaining functions are the state
transitions triggered by filter controls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from loguru import logger

from core.filters import DEFAULT_FILTER_SLOTS, get_filter
from core.models import DirectoryContent, MediaItem

# Padding around the observed date range so boundary items are never excluded
DATE_PADDING_MS = 1000
# Minimum distance between the two date bounds, as a fraction of the range
MIN_DATE_GAP_RATIO = 0.01


@dataclass(frozen=True)
class FilterOption:
    """A value of a filter slot and whether it is currently accepted."""

    value: str
    selected: bool = True


@dataclass(frozen=True)
class SelectedFilter:
    """One filter slot: a filter type plus its known options, in discovery order."""

    filter_type: str
    options: tuple[FilterOption, ...] = ()

    def option(self, value: str) -> FilterOption | None:
        """Return the option for `value`, if it is known."""
        for opt in self.options:
            if opt.value == value:
                return opt
        return None


@dataclass(frozen=True)
class DateFilter:
    """Observed date bounds and the user's chosen bounds (epoch ms).

    `None` marks an unset bound; it snaps to the observed range on the next
    `apply_filters` call.
    """

    min_date: int | None = None
    max_date: int | None = None
    min_filter: int | None = None
    max_filter: int | None = None


@dataclass(frozen=True)
class FilterState:
    """Complete filter state of one gallery view."""

    visible: bool = False
    active: bool = False
    date_filter: DateFilter = field(default_factory=DateFilter)
    selected_filters: tuple[SelectedFilter, ...] = ()
    value_counts: Mapping[str, Mapping[str, int]] = field(default_factory=dict)


@dataclass(frozen=True)
class FilterResult:
    """Output of `apply_filters`."""

    content: DirectoryContent | None
    state: FilterState


def new_filter_state(
    slots: Iterable[str] = DEFAULT_FILTER_SLOTS, visible: bool = False
) -> FilterState:
    """Create a default state with one empty slot per filter type in `slots`."""
    selected = []
    for filter_type in slots:
        get_filter(filter_type)
        selected.append(SelectedFilter(filter_type))
    return FilterState(visible=visible, selected_filters=tuple(selected))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _refresh_date_filter(current: DateFilter, media: Sequence[MediaItem]) -> DateFilter:
    """Re-derive observed bounds from `media` and fit the user bounds into them."""
    if not media:
        return DateFilter()

    lowest = min(m.creation_date for m in media)
    highest = max(m.creation_date for m in media)
    min_date = lowest - lowest % 1000 - DATE_PADDING_MS
    max_date = -(-highest // 1000) * 1000 + DATE_PADDING_MS

    # a bound resting on the previous observed edge follows the new edge
    min_filter = current.min_filter
    if min_filter is None or min_filter == current.min_date:
        min_filter = min_date
    max_filter = current.max_filter
    if max_filter is None or max_filter == current.max_date:
        max_filter = max_date

    min_filter = _clamp(min_filter, min_date, max_date)
    max_filter = _clamp(max_filter, min_date, max_date)
    if min_filter > max_filter:
        logger.debug("Inverted date filter {} > {}, clamping", min_filter, max_filter)
        min_filter = max_filter

    return DateFilter(min_date, max_date, min_filter, max_filter)


def apply_filters(content: DirectoryContent | None, state: FilterState) -> FilterResult:
    """Filter `content` by `state` and return the filtered content with the new state.

    Value counts are taken over the media inside the date range, so a value that
    is deselected keeps its count and stays listed. Values not seen before are
    appended to their slot as selected; values no longer present are pruned.
    An item is dropped when, for any slot, it has values and none of them is
    selected.
    """
    if content is None or (not state.visible and not state.active):
        return FilterResult(content, state)

    media = content.media
    date_filter = _refresh_date_filter(state.date_filter, media)
    if media:
        in_range = [
            m
            for m in media
            if date_filter.min_filter <= m.creation_date <= date_filter.max_filter
        ]
    else:
        in_range = []

    slots = state.selected_filters
    definitions = {sf.filter_type: get_filter(sf.filter_type) for sf in slots}
    counts: dict[str, dict[str, int]] = {t: {} for t in definitions}
    # dicts keep insertion order, so discovered values are appended
    slot_options = [{o.value: o.selected for o in sf.options} for sf in slots]

    kept: list[MediaItem] = []
    for item in in_range:
        values = {t: d.extract(item) for t, d in definitions.items()}
        for t, item_values in values.items():
            type_counts = counts[t]
            for v in item_values:
                type_counts[v] = type_counts.get(v, 0) + 1

        filtered_out = False
        for sf, options in zip(slots, slot_options):
            item_values = values[sf.filter_type]
            for v in item_values:
                options.setdefault(v, True)
            if item_values and not any(options[v] for v in item_values):
                filtered_out = True
        if not filtered_out:
            kept.append(item)

    new_slots = tuple(
        SelectedFilter(
            sf.filter_type,
            tuple(
                FilterOption(v, selected)
                for v, selected in options.items()
                if counts[sf.filter_type].get(v, 0) > 0
            ),
        )
        for sf, options in zip(slots, slot_options)
    )
    active = len(kept) != len(media)
    logger.debug(
        "Filtered {} -> {} items (date range kept {}), active={}",
        len(media),
        len(kept),
        len(in_range),
        active,
    )

    new_state = replace(
        state,
        active=active,
        date_filter=date_filter,
        selected_filters=new_slots,
        value_counts=counts,
    )
    return FilterResult(replace(content, media=tuple(kept)), new_state)


def _slot(state: FilterState, slot: int) -> SelectedFilter:
    if not 0 <= slot < len(state.selected_filters):
        raise IndexError(f"Filter slot out of range: {slot}")
    return state.selected_filters[slot]


def _replace_slot(state: FilterState, slot: int, selected_filter: SelectedFilter) -> FilterState:
    slots = list(state.selected_filters)
    slots[slot] = selected_filter
    return replace(state, selected_filters=tuple(slots))


def toggle_option(state: FilterState, slot: int, value: str) -> FilterState:
    """Flip the selection of `value` in filter slot `slot`."""
    sf = _slot(state, slot)
    if sf.option(value) is None:
        logger.warning("Toggle ignored: {!r} is not an option of {}", value, sf.filter_type)
        return state
    options = tuple(
        FilterOption(o.value, not o.selected) if o.value == value else o for o in sf.options
    )
    return _replace_slot(state, slot, replace(sf, options=options))


def is_only_selected(selected_filter: SelectedFilter, value: str) -> bool:
    """True if `value` is the one and only selected option."""
    selected = [o.value for o in selected_filter.options if o.selected]
    return selected == [value]


def select_only(state: FilterState, slot: int, value: str) -> FilterState:
    """Select exclusively `value`; if it already is the sole selection, select all."""
    sf = _slot(state, slot)
    if is_only_selected(sf, value):
        options = tuple(FilterOption(o.value, True) for o in sf.options)
    else:
        options = tuple(FilterOption(o.value, o.value == value) for o in sf.options)
    return _replace_slot(state, slot, replace(sf, options=options))


def change_filter_type(state: FilterState, slot: int, filter_type: str) -> FilterState:
    """Point slot `slot` at another filter type, discarding its options."""
    get_filter(filter_type)
    _slot(state, slot)
    return _replace_slot(state, slot, SelectedFilter(filter_type))


def _min_gap(date_filter: DateFilter) -> int:
    if date_filter.min_date is None or date_filter.max_date is None:
        return 0
    return int((date_filter.max_date - date_filter.min_date) * MIN_DATE_GAP_RATIO)


def set_min_date_filter(state: FilterState, value: int) -> FilterState:
    """Move the lower date bound, keeping it below the upper one."""
    df = state.date_filter
    min_filter = value
    upper = df.max_filter if df.max_filter is not None else df.max_date
    if upper is not None:
        gap = _min_gap(df)
        if min_filter > upper - gap:
            min_filter = upper - gap
            if df.min_date is not None:
                min_filter = max(min_filter, df.min_date)
    return replace(state, date_filter=replace(df, min_filter=min_filter))


def set_max_date_filter(state: FilterState, value: int) -> FilterState:
    """Move the upper date bound, keeping it above the lower one."""
    df = state.date_filter
    max_filter = value
    lower = df.min_filter if df.min_filter is not None else df.min_date
    if lower is not None:
        gap = _min_gap(df)
        if max_filter < lower + gap:
            max_filter = lower + gap
            if df.max_date is not None:
                max_filter = min(max_filter, df.max_date)
    return replace(state, date_filter=replace(df, max_filter=max_filter))


def set_date_filter(state: FilterState, min_filter: int, max_filter: int) -> FilterState:
    """Set both date bounds; the lower one yields if they are too close."""
    state = replace(state, date_filter=replace(state.date_filter, max_filter=max_filter))
    return set_min_date_filter(state, min_filter)


def reset_filters(state: FilterState) -> FilterState:
    """Clear every slot's options and unset the user date bounds."""
    return replace(
        state,
        date_filter=replace(state.date_filter, min_filter=None, max_filter=None),
        selected_filters=tuple(SelectedFilter(sf.filter_type) for sf in state.selected_filters),
    )


def set_filters_visible(state: FilterState, visible: bool) -> FilterState:
    """Show or hide the filters; hiding inactive filters also resets them."""
    if state.visible == visible:
        return state
    new_state = replace(state, visible=visible)
    if not visible and not state.active:
        new_state = reset_filters(new_state)
    return new_state


def options_by_count(
    selected_filter: SelectedFilter, value_counts: Mapping[str, Mapping[str, int]]
) -> list[FilterOption]:
    """Options of a slot, most frequent value first."""
    counts = value_counts.get(selected_filter.filter_type, {})
    return sorted(selected_filter.options, key=lambda o: -counts.get(o.value, 0))
