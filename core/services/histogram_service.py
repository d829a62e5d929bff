"""Creation-date histogram with an automatically chosen bucket width.

The width is the smallest entry of a fixed ladder (hour up to a century) that
keeps the series at about 25 columns. Year and month widths follow calendar
boundaries; hour and day widths are plain multiples of the width in seconds.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, tzinfo

from loguru import logger

from core.models import HistogramBucket, HistogramResolution, MediaItem

HOUR = 60 * 60
DAY = HOUR * 24
MONTH = DAY * 30
YEAR = DAY * 365

WIDTH_LADDER: tuple[int, ...] = (
    HOUR,
    DAY,
    MONTH,
    YEAR,
    YEAR * 2,
    YEAR * 5,
    YEAR * 10,
    YEAR * 20,
    YEAR * 50,
    YEAR * 100,
)
MAX_BUCKETS = 26


def choose_width(span_seconds: float) -> int:
    """Smallest ladder width that yields fewer than `MAX_BUCKETS` columns."""
    for width in WIDTH_LADDER:
        if span_seconds / width < MAX_BUCKETS:
            return width
    return WIDTH_LADDER[-1]


def resolution_for(width: int) -> HistogramResolution:
    """Label granularity used for buckets of `width` seconds."""
    if width >= YEAR:
        return HistogramResolution.YEAR
    if width == MONTH:
        return HistogramResolution.YEAR_MONTH
    if width == DAY:
        return HistogramResolution.WEEKDAY
    return HistogramResolution.HOUR


class HistogramService:
    """Builds `HistogramBucket` series from media creation dates.

    Args:
        tz: Timezone for calendar flooring. `None` uses local time.
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def build(self, media: Sequence[MediaItem]) -> list[HistogramBucket]:
        """Return contiguous buckets, or `[]` when there is nothing to chart."""
        if len(media) < 2:
            return []

        dates = [m.creation_date for m in media]
        min_date = min(dates)
        span = (max(dates) - min_date) / 1000
        width = choose_width(span)

        counts: list[int] = []
        for ts in dates:
            index = self._index(ts, min_date, width)
            # extend with empty buckets so the series has no gaps
            while len(counts) <= index:
                counts.append(0)
            counts[index] += 1

        if len(counts) <= 1:
            logger.debug("Histogram suppressed: single bucket for {} items", len(media))
            return []

        resolution = resolution_for(width)
        max_count = max(counts)
        logger.debug(
            "Histogram: {} items, width {}s, {} buckets, max {}",
            len(media),
            width,
            len(counts),
            max_count,
        )
        return [
            HistogramBucket(
                start_time=self._bucket_start(i, min_date, width),
                end_time=self._bucket_start(i + 1, min_date, width),
                resolution=resolution,
                count=count,
                max_count=max_count,
                tz=self._tz,
            )
            for i, count in enumerate(counts)
        ]

    def _to_datetime(self, ts: int) -> datetime:
        return datetime.fromtimestamp(ts / 1000, self._tz)

    def _epoch_ms(self, year: int, month: int = 1) -> int:
        return int(datetime(year, month, 1, tzinfo=self._tz).timestamp() * 1000)

    def floor(self, ts: int, width: int) -> int:
        """Start of the calendar or fixed-width period containing `ts`."""
        if width >= YEAR:
            years = width // YEAR
            year = self._to_datetime(ts).year
            return self._epoch_ms(year - year % years)
        if width == MONTH:
            d = self._to_datetime(ts)
            return self._epoch_ms(d.year, d.month)
        return ts - ts % (width * 1000)

    def _index(self, ts: int, anchor_ts: int, width: int) -> int:
        # calendar widths count calendar steps; months and years vary in length
        if width >= YEAR:
            years = width // YEAR
            anchor_year = self._to_datetime(anchor_ts).year
            year = self._to_datetime(ts).year
            return (year - year % years - (anchor_year - anchor_year % years)) // years
        if width == MONTH:
            a = self._to_datetime(anchor_ts)
            d = self._to_datetime(ts)
            return (d.year - a.year) * 12 + (d.month - a.month)
        return (self.floor(ts, width) - self.floor(anchor_ts, width)) // (width * 1000)

    def _bucket_start(self, index: int, anchor_ts: int, width: int) -> int:
        if width >= YEAR:
            years = width // YEAR
            anchor_year = self._to_datetime(anchor_ts).year
            return self._epoch_ms(anchor_year - anchor_year % years + index * years)
        if width == MONTH:
            a = self._to_datetime(anchor_ts)
            months = a.month - 1 + index
            return self._epoch_ms(a.year + months // 12, months % 12 + 1)
        return self.floor(anchor_ts, width) + index * width * 1000
