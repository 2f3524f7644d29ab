"""
Preprocessing for S-H-ESD: input validation, edge-only missing value handling, seasonal decomposition and reduction to a median-centred residual series plus the expected (trend + seasonal) series.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from engine import stats
from engine.decomposition import decompose
from engine.esd.series import WorkingSeries
from engine.exceptions import InvalidInput
from engine.timestamps import format_timestamp, is_datetime_like, to_epoch

log = logging.getLogger(__name__)

# none, leading, trailing, or leading + trailing
_MAX_MISSING_RUNS = 3


@dataclass(frozen=True)
class Preprocessed:
    residual: WorkingSeries
    expected: List[Tuple[Any, float]]
    magnitude: float


def validate_period(period_length: Any) -> int:
    if period_length is None:
        raise InvalidInput("must supply period length for time series decomposition")
    if isinstance(period_length, bool) or not isinstance(period_length, (int, np.integer)):
        raise InvalidInput(f"period length must be an integer, got {period_length!r}")
    if period_length <= 0:
        raise InvalidInput(f"period length must be positive, got {period_length}")
    return int(period_length)


def _as_values(values: Sequence[Optional[float]]) -> np.ndarray:
    try:
        return np.array([np.nan if v is None else v for v in values], dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"values must be numeric: {exc}") from exc


def _check_ordered(timestamps: Sequence[Any]) -> None:
    try:
        keys = np.array([to_epoch(t) for t in timestamps], dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"timestamps must be numeric or date/time values: {exc}") from exc
    if keys.size > 1 and not np.all(np.diff(keys) > 0):
        raise InvalidInput("timestamps must be strictly increasing without duplicates")


def missing_runs(missing: np.ndarray) -> int:
    """Count maximal runs of the missing flags bracketed by missing sentinels."""
    flags = np.concatenate(([True], np.asarray(missing, dtype=bool), [True]))
    return int(np.count_nonzero(flags[1:] != flags[:-1])) + 1


def preprocess(
    timestamps: Sequence[Any],
    values: Sequence[Optional[float]],
    period_length: Any,
    use_decomp: bool = True,
) -> Preprocessed:
    period = validate_period(period_length)
    if len(timestamps) != len(values):
        raise InvalidInput(
            f"got {len(timestamps)} timestamps for {len(values)} values"
        )

    num_obs = len(values)
    if num_obs < period * 2:
        raise InvalidInput("anomaly detection needs at least 2 periods worth of data")

    arr = _as_values(values)
    _check_ordered(timestamps)

    missing = np.isnan(arr)
    if missing_runs(missing) > _MAX_MISSING_RUNS:
        raise InvalidInput(
            "data contains non-leading NAs; missing values are only allowed "
            "at the start or end of the series"
        )
    if missing.any():
        log.debug("dropping %d leading/trailing missing values", int(missing.sum()))
        keep = ~missing
        arr = arr[keep]
        timestamps = [t for t, k in zip(timestamps, keep) if k]

    ts = list(timestamps)
    as_datetime = bool(ts) and is_datetime_like(ts[0])
    global_median = stats.median(arr) if arr.size else 0.0

    if use_decomp:
        parts = decompose(arr, period)
        residual = arr - parts.seasonal - global_median
        fitted = np.trunc(parts.trend + parts.seasonal)
    else:
        if not np.all(np.isfinite(arr)):
            raise InvalidInput("values must be finite")
        residual = arr - global_median
        fitted = np.full(arr.shape, np.trunc(global_median))

    labels = [format_timestamp(t) for t in ts] if as_datetime else ts
    expected = [(label, float(v)) for label, v in zip(labels, fitted)]
    magnitude = float(np.max(np.abs(arr))) if arr.size else 0.0

    return Preprocessed(
        residual=WorkingSeries.of(ts, residual),
        expected=expected,
        magnitude=magnitude,
    )
