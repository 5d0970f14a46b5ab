"""Score statistics and trend over a snapshot history.

Trend definition: in-period snapshots are ordered oldest first and split
into an older half (the first ``n // 2`` records) and a newer half (the
rest). ``delta = mean(newer) - mean(older)``. Lower scores are better, so a
delta below ``-threshold`` is improving and above ``+threshold`` is
worsening; anything in between, or too few records, is stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from mindease.domain.enums import InstrumentId, Trend

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from mindease.domain.instruments import Instrument
    from mindease.domain.value_objects import AssessmentSnapshot

MS_PER_DAY = 24 * 60 * 60 * 1000


@dataclass(frozen=True, slots=True)
class ScoreStatistics:
    """Summary of one instrument's totals within a time window."""

    instrument: InstrumentId
    average: float
    minimum: int
    maximum: int
    trend: Trend
    record_count: int
    period_days: int


def _total_for(snapshot: AssessmentSnapshot, instrument: InstrumentId) -> int:
    if instrument is InstrumentId.PHQ9:
        return snapshot.depression_total
    return snapshot.anxiety_total


def compute_trend(
    totals: Sequence[int], *, threshold: float = 2.0, min_records: int = 3
) -> Trend:
    """Trend of chronologically ordered totals (oldest first).

    Args:
        totals: Total scores, oldest first.
        threshold: Mean change (points) needed to report a direction.
        min_records: Fewer totals than this always yields STABLE.

    Returns:
        Trend direction.
    """
    if len(totals) < max(min_records, 2):
        return Trend.STABLE

    scores = np.asarray(totals, dtype=float)
    split = len(scores) // 2
    delta = float(np.mean(scores[split:]) - np.mean(scores[:split]))

    if delta < -threshold:
        return Trend.IMPROVING
    if delta > threshold:
        return Trend.WORSENING
    return Trend.STABLE


def compute_statistics(
    snapshots: Iterable[AssessmentSnapshot],
    instrument: Instrument,
    *,
    now_ms: float,
    period_days: int = 30,
    trend_threshold: float = 2.0,
    min_records: int = 3,
) -> ScoreStatistics | None:
    """Summarize one instrument's totals over the last ``period_days``.

    Args:
        snapshots: Snapshot history in any order.
        instrument: Instrument to summarize.
        now_ms: Reference time in epoch milliseconds.
        period_days: Window length; older snapshots are ignored.
        trend_threshold: See ``compute_trend``.
        min_records: See ``compute_trend``.

    Returns:
        ScoreStatistics, or None when no snapshot falls in the window.
    """
    cutoff = now_ms - period_days * MS_PER_DAY
    recent = sorted(
        (s for s in snapshots if cutoff <= s.timestamp <= now_ms),
        key=lambda s: s.timestamp,
    )
    if not recent:
        return None

    totals = [_total_for(s, instrument.id) for s in recent]
    scores = np.asarray(totals, dtype=float)

    return ScoreStatistics(
        instrument=instrument.id,
        average=round(float(np.mean(scores)), 1),
        minimum=int(np.min(scores)),
        maximum=int(np.max(scores)),
        trend=compute_trend(totals, threshold=trend_threshold, min_records=min_records),
        record_count=len(recent),
        period_days=period_days,
    )
