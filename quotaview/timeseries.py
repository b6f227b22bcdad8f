"""Aligning sparse daily series onto one date axis and fitting it to columns.

Collectors report per-day values with gaps and different start dates. Before
anything is plotted the series are put on a shared axis (optionally with
every calendar day filled in), trimmed to the interesting span, and binned
down to the number of columns the chart has.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from .models import Series

logger = logging.getLogger(__name__)

MAX_GAP_FILL_DAYS = 370


@dataclass(frozen=True)
class AlignedFrame:
    """Series resampled onto ``dates``; ``values[s][i]`` belongs to ``dates[i]``."""

    dates: tuple[str, ...]
    values: tuple[tuple[float, ...], ...]
    labels: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.dates)

    def totals(self) -> list[float]:
        return [sum(col) for col in zip(*self.values)] if self.values else []


def collect_dates(series: Iterable[Series]) -> list[str]:
    return sorted({p.date for s in series for p in s.points})


def fill_date_gaps(dates: Sequence[str], max_span_days: int = MAX_GAP_FILL_DAYS) -> list[str]:
    """Every calendar day from first to last, unless the span is too long to expand."""
    dates = sorted(set(dates))
    if len(dates) < 2:
        return dates
    try:
        first = date.fromisoformat(dates[0])
        last = date.fromisoformat(dates[-1])
        for d in dates[1:-1]:
            date.fromisoformat(d)
    except ValueError:
        logger.debug("gap fill skipped: non-ISO dates in axis")
        return dates

    span = (last - first).days
    if span > max_span_days:
        logger.debug("gap fill skipped: span of %d days", span)
        return dates
    return [(first + timedelta(days=i)).isoformat() for i in range(span + 1)]


def align_series(series: Sequence[Series], dates: Sequence[str]) -> list[list[float]]:
    aligned = []
    for s in series:
        by_date: dict[str, float] = {}
        for p in s.points:
            by_date[p.date] = by_date.get(p.date, 0.0) + p.value
        aligned.append([by_date.get(d, 0.0) for d in dates])
    return aligned


def trim_zero_edges(frame: AlignedFrame, pad: int = 1) -> AlignedFrame | None:
    """Drop all-zero dates at both ends, keeping ``pad`` dates of context.

    Returns None when nothing in the frame is non-zero.
    """
    nonzero = [i for i in range(len(frame.dates)) if any(v[i] != 0 for v in frame.values)]
    if not nonzero:
        return None
    start = max(nonzero[0] - pad, 0)
    end = min(nonzero[-1] + pad, len(frame.dates) - 1)
    return AlignedFrame(
        dates=frame.dates[start:end + 1],
        values=tuple(v[start:end + 1] for v in frame.values),
        labels=frame.labels,
        colors=frame.colors,
    )


def align(series: Sequence[Series], fill_gaps: bool = True, pad: int = 1) -> AlignedFrame | None:
    dates = collect_dates(series)
    if not dates:
        return None
    if fill_gaps:
        dates = fill_date_gaps(dates)
    frame = AlignedFrame(
        dates=tuple(dates),
        values=tuple(tuple(v) for v in align_series(series, dates)),
        labels=tuple(s.label for s in series),
        colors=tuple(s.color for s in series),
    )
    return trim_zero_edges(frame, pad=pad)


def bucket_bounds(count: int, buckets: int) -> list[tuple[int, int]]:
    return [(i * count // buckets, (i + 1) * count // buckets) for i in range(buckets)]


def bin_frame(frame: AlignedFrame, columns: int) -> AlignedFrame:
    """Average contiguous runs of dates so at most ``columns`` remain.

    Each bucket is labelled with its middle date.
    """
    n = len(frame.dates)
    if columns <= 0 or n <= columns:
        return frame

    bounds = bucket_bounds(n, columns)
    dates = tuple(frame.dates[(lo + hi - 1) // 2] for lo, hi in bounds)
    values = tuple(
        tuple(sum(v[lo:hi]) / (hi - lo) for lo, hi in bounds)
        for v in frame.values
    )
    return AlignedFrame(dates=dates, values=values, labels=frame.labels, colors=frame.colors)


def column_ranges(buckets: int, width: int) -> list[tuple[int, int]]:
    """Half-open x ranges, one per bucket.

    Sparse data gets one-column needles at proportional positions instead of
    wide slabs; otherwise the width is split into contiguous ranges that
    cover every column exactly once.
    """
    if buckets <= 0 or width <= 0:
        return []
    if buckets * 2 < width:
        ranges = []
        for i in range(buckets):
            x = (2 * i + 1) * width // (2 * buckets)
            ranges.append((x, x + 1))
        return ranges
    return bucket_bounds(width, buckets)
