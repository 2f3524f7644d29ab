"""
Timestamp helpers: date/time detection, display formatting, epoch conversion, sampling granularity and minute aggregation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from config import SECONDS_PER_DAY, SECONDS_PER_HOUR, SECONDS_PER_MINUTE, settings
from engine.enums import Granularity


def is_datetime_like(ts: Any) -> bool:
    return isinstance(ts, (datetime, date, np.datetime64))


def _as_datetime(ts: Any) -> datetime:
    if isinstance(ts, np.datetime64):
        return ts.astype("datetime64[us]").item()
    if isinstance(ts, datetime):
        return ts
    return datetime(ts.year, ts.month, ts.day)


def format_timestamp(ts: Any) -> str:
    return _as_datetime(ts).strftime(settings.timestamp_format)


def to_epoch(ts: Any) -> float:
    """POSIX seconds for ``ts``; naive datetimes are read as UTC."""
    if not is_datetime_like(ts):
        return float(ts)
    dt = _as_datetime(ts)
    if dt.tzinfo is not None:
        return dt.timestamp()
    return calendar.timegm(dt.timetuple()) + dt.microsecond / 1e6


def from_epoch(seconds: float, tz: Optional[tzinfo] = None) -> datetime:
    """Inverse of ``to_epoch``; naive UTC unless ``tz`` is given."""
    if tz is not None:
        return datetime.fromtimestamp(seconds, tz=tz)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)


def granularity(epochs: Sequence[float]) -> Granularity:
    if len(epochs) < 2:
        return Granularity.ms
    ordered = sorted(epochs)
    gap = round(ordered[-1] - ordered[-2])
    if gap >= SECONDS_PER_DAY:
        return Granularity.day
    if gap >= SECONDS_PER_HOUR:
        return Granularity.hr
    if gap >= SECONDS_PER_MINUTE:
        return Granularity.min
    if gap >= 1:
        return Granularity.sec
    return Granularity.ms


def aggregate_to_minutes(
    epochs: Sequence[float], values: Sequence[float]
) -> Tuple[List[float], List[float]]:
    buckets: Dict[float, float] = {}
    for t, v in zip(epochs, values):
        key = float(int(t // SECONDS_PER_MINUTE) * SECONDS_PER_MINUTE)
        buckets[key] = buckets.get(key, 0.0) + float(v)
    keys = sorted(buckets)
    return keys, [buckets[k] for k in keys]
