"""
Vector S-H-ESD front end for series without timestamps. Positions (0-based) stand in for timestamps and the caller supplies the seasonal period.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from config import settings
from engine.enums import Direction, Threshold
from engine.esd import filters
from engine.esd.preprocess import validate_period
from engine.esd.windows import AnomalyPoint, detect_windows, trailing_windows
from engine.exceptions import InvalidConfiguration, InvalidInput

log = logging.getLogger(__name__)


def detect_vec(
    values: Sequence[Optional[float]],
    period: Optional[int] = None,
    max_anoms: Optional[float] = None,
    direction: Union[Direction, str] = Direction.pos,
    alpha: float = 0.05,
    only_last: bool = False,
    threshold: Optional[Union[Threshold, str]] = None,
    e_value: bool = False,
    longterm_period: Optional[int] = None,
    verbose: bool = False,
) -> List[AnomalyPoint]:
    period = validate_period(period)
    if max_anoms is None:
        max_anoms = settings.ts_default_max_anoms
    try:
        direction = Direction(direction)
        threshold = Threshold(threshold) if threshold is not None else None
    except ValueError as exc:
        raise InvalidConfiguration(str(exc)) from exc
    if not 0 < max_anoms <= settings.ts_max_anoms_limit:
        raise InvalidConfiguration(
            f"max_anoms must be in (0, {settings.ts_max_anoms_limit}], got {max_anoms}"
        )
    if longterm_period is not None and longterm_period < 2 * period:
        raise InvalidConfiguration("longterm_period must cover at least two periods")
    if not settings.alpha_warn_low <= alpha <= settings.alpha_warn_high:
        log.warning("alpha %.4g is outside the usual range; results may be unreliable", alpha)

    vals = [np.nan if v is None else float(v) for v in values]
    num_obs = len(vals)
    if num_obs == 0:
        raise InvalidInput("empty series")
    positions = list(range(num_obs))

    anomalies = detect_windows(
        positions, vals, trailing_windows(num_obs, longterm_period),
        period=period,
        max_anoms=max_anoms,
        alpha=alpha,
        direction=direction,
        e_value=e_value,
        verbose=verbose,
    )

    if only_last:
        anomalies = filters.since(anomalies, num_obs - period)

    if threshold is not None:
        maxima = filters.periodic_maxima([i // period for i in positions], vals)
        anomalies = filters.above_threshold(anomalies, maxima, threshold)

    return anomalies
