"""
Additive seasonal-trend decomposition (STL with a periodic seasonal window and robust LOESS fitting) used to strip periodic structure before the ESD test.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from statsmodels.tsa.seasonal import STL

from config import settings
from engine.exceptions import DecompositionError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decomposition:
    seasonal: np.ndarray
    trend: np.ndarray
    remainder: np.ndarray


def decompose(values: Sequence[float], period: int) -> Decomposition:
    arr = np.asarray(values, dtype=float)
    if not np.all(np.isfinite(arr)):
        raise DecompositionError("decomposition requires finite values")
    if period < 2:
        raise DecompositionError(f"period must be >= 2, got {period}")
    if arr.size < 2 * period:
        raise DecompositionError(
            f"series of length {arr.size} has fewer than two cycles of period {period}"
        )

    # constant input decomposes exactly; LOESS would only add rounding noise
    if np.all(arr == arr[0]):
        zeros = np.zeros_like(arr)
        return Decomposition(seasonal=zeros, trend=arr.copy(), remainder=zeros.copy())

    seasonal_window = settings.stl_seasonal_window_factor * arr.size + 1
    if seasonal_window % 2 == 0:
        seasonal_window += 1

    log.debug("STL fit: n=%d period=%d seasonal=%d", arr.size, period, seasonal_window)
    res = STL(
        arr,
        period=period,
        seasonal=seasonal_window,
        seasonal_deg=0,
        robust=True,
    ).fit(inner_iter=settings.stl_inner_iter, outer_iter=settings.stl_outer_iter)

    # periodic window: one seasonal value per cycle position
    positions = np.arange(arr.size) % period
    fitted = np.asarray(res.seasonal, dtype=float)
    seasonal = (np.bincount(positions, weights=fitted) / np.bincount(positions))[positions]
    trend = np.asarray(res.trend, dtype=float)

    return Decomposition(
        seasonal=seasonal,
        trend=trend,
        remainder=arr - seasonal - trend,
    )
