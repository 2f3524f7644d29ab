"""
Time-based S-H-ESD front end. The seasonal period is derived from the sampling granularity, second-level data is summed into minutes, long series can be split into piecewise windows, and results can be restricted to the trailing day or hour or to values above a daily-maximum threshold.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from config import SECONDS_PER_DAY, SECONDS_PER_HOUR, settings
from engine.enums import Direction, Granularity, OnlyLast, Threshold
from engine.esd import filters
from engine.esd.windows import AnomalyPoint, detect_windows
from engine.exceptions import InvalidConfiguration, InvalidInput
from engine.timestamps import (
    aggregate_to_minutes,
    from_epoch,
    granularity,
    is_datetime_like,
    to_epoch,
)

log = logging.getLogger(__name__)


def _check_params(max_anoms: float, alpha: float, piecewise_median_period_weeks: int) -> None:
    if max_anoms > settings.ts_max_anoms_limit:
        raise InvalidConfiguration(
            f"max_anoms must be at most {settings.ts_max_anoms_limit:.0%} of the data"
        )
    if max_anoms <= 0:
        raise InvalidConfiguration("max_anoms must be positive")
    if piecewise_median_period_weeks < 2:
        raise InvalidConfiguration("piecewise_median_period_weeks must be at least 2 weeks")
    if not settings.alpha_warn_low <= alpha <= settings.alpha_warn_high:
        log.warning("alpha %.4g is outside the usual range; results may be unreliable", alpha)


def piecewise_windows(
    epochs: Sequence[float], period: int, gran: Granularity, weeks: int
) -> List[List[int]]:
    if gran is Granularity.day:
        obs_in_window = period * weeks + 1
        span = (7 * weeks + 1) * SECONDS_PER_DAY
    else:
        obs_in_window = period * 7 * weeks
        span = 7 * weeks * SECONDS_PER_DAY

    last = epochs[-1]
    windows: List[List[int]] = []
    for j in range(0, len(epochs), obs_in_window):
        start = epochs[j]
        end = min(start + span, last)
        if end - start == span:
            windows.append([i for i, t in enumerate(epochs) if start <= t < end])
        else:
            windows.append([i for i, t in enumerate(epochs) if last - span < t <= last])
    return windows


def detect_ts(
    timestamps: Sequence[Any],
    values: Sequence[Optional[float]],
    max_anoms: Optional[float] = None,
    direction: Union[Direction, str] = Direction.pos,
    alpha: float = 0.05,
    only_last: Optional[Union[OnlyLast, str]] = None,
    threshold: Optional[Union[Threshold, str]] = None,
    e_value: bool = False,
    longterm: bool = False,
    piecewise_median_period_weeks: Optional[int] = None,
    verbose: bool = False,
) -> List[AnomalyPoint]:
    if max_anoms is None:
        max_anoms = settings.ts_default_max_anoms
    if piecewise_median_period_weeks is None:
        piecewise_median_period_weeks = settings.ts_default_piecewise_median_period_weeks
    try:
        direction = Direction(direction)
        only_last = OnlyLast(only_last) if only_last is not None else None
        threshold = Threshold(threshold) if threshold is not None else None
    except ValueError as exc:
        raise InvalidConfiguration(str(exc)) from exc
    _check_params(max_anoms, alpha, piecewise_median_period_weeks)

    if len(timestamps) != len(values):
        raise InvalidInput(f"got {len(timestamps)} timestamps for {len(values)} values")
    if len(timestamps) == 0:
        raise InvalidInput("empty series")

    as_datetime = is_datetime_like(timestamps[0])
    try:
        epochs = [to_epoch(t) for t in timestamps]
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"timestamps must be numeric or date/time values: {exc}") from exc
    vals = [np.nan if v is None else float(v) for v in values]
    originals = dict(zip(epochs, timestamps))

    gran = granularity(epochs)
    if gran is Granularity.ms:
        raise InvalidInput("sub-second granularity is not supported")
    if gran is Granularity.sec:
        epochs, vals = aggregate_to_minutes(epochs, vals)
        gran = Granularity.min
    if gran is Granularity.day and only_last is OnlyLast.hr:
        log.warning("only_last='hr' is not meaningful for daily data, using 'day'")
        only_last = OnlyLast.day

    period = settings.ts_periods[gran.value]

    if longterm:
        windows = piecewise_windows(epochs, period, gran, piecewise_median_period_weeks)
    else:
        windows = [list(range(len(epochs)))]

    anomalies = detect_windows(
        epochs, vals, windows,
        period=period,
        max_anoms=max_anoms,
        alpha=alpha,
        direction=direction,
        e_value=e_value,
        verbose=verbose,
    )

    if only_last is not None:
        span = SECONDS_PER_DAY if only_last is OnlyLast.day else SECONDS_PER_HOUR
        anomalies = filters.since(anomalies, epochs[-1] - span)

    if threshold is not None:
        maxima = filters.periodic_maxima([int(t // SECONDS_PER_DAY) for t in epochs], vals)
        anomalies = filters.above_threshold(anomalies, maxima, threshold)

    if as_datetime:
        # minute buckets from aggregated second data have no input timestamp
        tz = getattr(timestamps[0], "tzinfo", None)
        anomalies = [
            replace(
                a,
                timestamp=originals[a.timestamp]
                if a.timestamp in originals
                else from_epoch(a.timestamp, tz),
            )
            for a in anomalies
        ]
    return anomalies
