"""
Post-detection filters shared by the time-based and vector front ends: trailing-window restriction and periodic-maximum thresholds.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from engine.enums import Threshold
from engine.esd.windows import AnomalyPoint


def since(anomalies: List[AnomalyPoint], start: float) -> List[AnomalyPoint]:
    return [a for a in anomalies if a.timestamp >= start]


def periodic_maxima(keys: Sequence[int], values: Sequence[float]) -> np.ndarray:
    groups: Dict[int, List[float]] = {}
    for key, v in zip(keys, values):
        if np.isnan(v):
            continue
        groups.setdefault(key, []).append(v)
    return np.array([max(g) for _, g in sorted(groups.items())], dtype=float)


def above_threshold(
    anomalies: List[AnomalyPoint],
    maxima: np.ndarray,
    threshold: Threshold,
) -> List[AnomalyPoint]:
    if not anomalies or maxima.size == 0:
        return anomalies
    cutoff = float(np.quantile(maxima, threshold.quantile()))
    return [a for a in anomalies if a.value >= cutoff]
