"""
Top-level S-H-ESD detection: preprocess a seasonal series into a residual, run the iterative ESD test and return the anomalous timestamps together with the expected series.

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

from config import settings
from engine.esd import tester
from engine.esd.preprocess import preprocess
from engine.exceptions import InvalidInput

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EsdResult:
    anomalies: List[Any]
    expected: List[Tuple[Any, float]]


def _rounding_floor(magnitude: float) -> float:
    return settings.esd_degenerate_scale_ulps * float(np.finfo(float).eps) * magnitude


def _split(
    series: Optional[Sequence[Tuple[Any, Optional[float]]]],
    timestamps: Optional[Sequence[Any]],
    values: Optional[Sequence[Optional[float]]],
) -> Tuple[List[Any], List[Optional[float]]]:
    if series is not None:
        try:
            ts = [p[0] for p in series]
            vals = [p[1] for p in series]
        except (TypeError, IndexError) as exc:
            raise InvalidInput("series must be a sequence of (timestamp, value) pairs") from exc
        return ts, vals
    if values is None:
        raise InvalidInput("no series supplied")
    if timestamps is None:
        timestamps = range(len(values))
    return list(timestamps), list(values)


def detect_anoms(
    series: Optional[Sequence[Tuple[Any, Optional[float]]]] = None,
    k: Optional[float] = None,
    alpha: Optional[float] = None,
    period_length: Optional[int] = None,
    use_decomp: bool = True,
    use_esd: bool = False,
    one_tail: bool = True,
    upper_tail: bool = True,
    verbose: bool = False,
    *,
    timestamps: Optional[Sequence[Any]] = None,
    values: Optional[Sequence[Optional[float]]] = None,
) -> EsdResult:
    """Detect anomalies in a seasonal series with S-H-ESD.

    ``series`` is a sequence of ``(timestamp, value)`` pairs; alternatively
    pass ``timestamps`` and ``values`` (``timestamps`` defaults to positions).
    ``k`` bounds the anomalies to ``floor(len * k)`` and ``alpha`` is the
    significance level of the test. Anomalies are returned in the order they
    were removed by the test.
    """
    if k is None:
        k = settings.esd_default_k
    if alpha is None:
        alpha = settings.esd_default_alpha

    ts, vals = _split(series, timestamps, values)
    prepared = preprocess(ts, vals, period_length, use_decomp=use_decomp)

    outcome = tester.run(
        prepared.residual,
        k=k,
        alpha=alpha,
        one_tail=one_tail,
        upper_tail=upper_tail,
        use_esd=use_esd,
        verbose=verbose,
        scale_floor=_rounding_floor(prepared.magnitude),
    )
    if verbose:
        log.info(
            "S-H-ESD confirmed %d of at most %d anomalies",
            outcome.confirmed_count, outcome.max_outliers,
        )

    return EsdResult(anomalies=outcome.anomalies, expected=prepared.expected)
