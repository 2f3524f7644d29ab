"""
Statistical primitives for the ESD tester: robust and classical location/scale estimators and the Student's t quantile used for critical values.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy import stats


def median(arr: np.ndarray) -> float:
    return float(np.median(arr))


def mad(arr: np.ndarray) -> float:
    # normal-consistent MAD (constant 1.4826)
    return float(stats.median_abs_deviation(arr, scale="normal"))


def mean(arr: np.ndarray) -> float:
    return float(np.mean(arr))


def sd(arr: np.ndarray) -> float:
    if arr.size < 2:
        return 0.0
    return float(np.std(arr, ddof=1))


def location_scale(arr: np.ndarray, use_esd: bool = False) -> Tuple[float, float]:
    """Center and spread of ``arr``.

    The hybrid test uses median/MAD; ``use_esd`` switches to the classical
    mean/standard deviation pair.
    """
    if use_esd:
        return mean(arr), sd(arr)
    return median(arr), mad(arr)


def t_quantile(p: float, df: float) -> float:
    return float(stats.t.ppf(p, df))
