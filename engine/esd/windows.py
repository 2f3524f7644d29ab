"""
Windowed S-H-ESD runs for long series: detection is applied per window and the anomalies and expected values are merged by timestamp.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from engine.enums import Direction
from engine.esd.detection import detect_anoms

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnomalyPoint:
    timestamp: Any
    value: float
    expected_value: Optional[float] = None


def trailing_windows(num_obs: int, size: Optional[int]) -> List[range]:
    """Consecutive windows of ``size``; a short tail is replaced by the last full window."""
    if not size or size >= num_obs:
        return [range(num_obs)]
    windows: List[range] = []
    for start in range(0, num_obs, size):
        if start + size <= num_obs:
            windows.append(range(start, start + size))
        else:
            windows.append(range(num_obs - size, num_obs))
    return windows


def detect_windows(
    timestamps: Sequence[float],
    values: Sequence[float],
    windows: Sequence[Sequence[int]],
    period: int,
    max_anoms: float,
    alpha: float,
    direction: Direction,
    e_value: bool = False,
    verbose: bool = False,
) -> List[AnomalyPoint]:
    one_tail, upper_tail = direction.tails()
    found: Dict[float, float] = {}
    expected: Dict[float, float] = {}

    for n, window in enumerate(windows, start=1):
        ts = [timestamps[i] for i in window]
        vals = [values[i] for i in window]
        result = detect_anoms(
            timestamps=ts,
            values=vals,
            k=max_anoms,
            alpha=alpha,
            period_length=period,
            use_decomp=True,
            use_esd=False,
            one_tail=one_tail,
            upper_tail=upper_tail,
            verbose=verbose,
        )
        by_ts = dict(zip(ts, vals))
        for t in result.anomalies:
            found.setdefault(t, float(by_ts[t]))
        for t, v in result.expected:
            expected.setdefault(t, v)
        if len(windows) > 1:
            log.debug("window %d/%d: %d anomalies", n, len(windows), len(result.anomalies))

    return [
        AnomalyPoint(
            timestamp=t,
            value=found[t],
            expected_value=expected.get(t) if e_value else None,
        )
        for t in sorted(found)
    ]
