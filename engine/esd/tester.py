"""
Iterative generalized ESD test over a residual series. Each iteration studentizes the working series against a robust center and scale, removes the most extreme point and compares its statistic with a Bonferroni-adjusted Student's t critical value. The anomaly count is the largest iteration whose statistic exceeded its critical value, so later confirmations also validate earlier removals.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np

from engine import stats
from engine.esd.series import WorkingSeries
from engine.exceptions import InvalidConfiguration

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EsdStep:
    iteration: int
    candidate: Any
    statistic: float
    critical_value: float
    remaining: WorkingSeries

    @property
    def exceeds(self) -> bool:
        return self.statistic > self.critical_value


@dataclass
class EsdOutcome:
    max_outliers: int
    confirmed_count: int = 0
    steps: List[EsdStep] = field(default_factory=list)

    @property
    def anomalies(self) -> List[Any]:
        return [s.candidate for s in self.steps[: self.confirmed_count]]


def max_outliers_for(num_obs: int, k: float) -> int:
    return int(math.floor(num_obs * k))


def deviations(
    values: np.ndarray, center: float, one_tail: bool, upper_tail: bool
) -> np.ndarray:
    if one_tail:
        if upper_tail:
            return values - center
        return center - values
    return np.abs(values - center)


def critical_value(n: int, i: int, alpha: float, one_tail: bool) -> float:
    if one_tail:
        p = 1 - alpha / (n - i + 1)
    else:
        p = 1 - alpha / (2 * (n - i + 1))
    t = stats.t_quantile(p, n - i - 1)
    return t * (n - i) / math.sqrt((n - i - 1 + t ** 2) * (n - i + 1))


def esd_step(
    series: WorkingSeries,
    n: int,
    i: int,
    alpha: float,
    one_tail: bool = True,
    upper_tail: bool = True,
    use_esd: bool = False,
    scale_floor: float = 0.0,
) -> Optional[EsdStep]:
    """Run iteration ``i`` of the test; ``None`` when the scale has collapsed."""
    center, scale = stats.location_scale(series.values, use_esd=use_esd)
    if scale <= scale_floor:
        return None

    ares = deviations(series.values, center, one_tail, upper_tail) / scale
    r = float(np.max(ares))
    # first occurrence in series order
    idx = int(np.flatnonzero(ares == r)[0])

    return EsdStep(
        iteration=i,
        candidate=series.timestamps[idx],
        statistic=r,
        critical_value=critical_value(n, i, alpha, one_tail),
        remaining=series.without(idx),
    )


def run(
    series: WorkingSeries,
    k: float,
    alpha: float,
    one_tail: bool = True,
    upper_tail: bool = True,
    use_esd: bool = False,
    verbose: bool = False,
    scale_floor: float = 0.0,
) -> EsdOutcome:
    if not 0 < k <= 1:
        raise InvalidConfiguration(f"k must be in (0, 1], got {k}")
    if not 0 < alpha < 1:
        raise InvalidConfiguration(f"alpha must be in (0, 1), got {alpha}")

    n = len(series)
    max_outliers = max_outliers_for(n, k)
    if max_outliers == 0:
        raise InvalidConfiguration(
            f"{n} observations with k={k} allow no anomalies; "
            "supply more data or a larger k"
        )

    outcome = EsdOutcome(max_outliers=max_outliers)
    working = series
    level = logging.INFO if verbose else logging.DEBUG
    for i in range(1, max_outliers + 1):
        step = esd_step(
            working, n, i, alpha,
            one_tail=one_tail,
            upper_tail=upper_tail,
            use_esd=use_esd,
            scale_floor=scale_floor,
        )
        if step is None:
            log.log(level, "zero scale at iteration %d/%d, stopping", i, max_outliers)
            break
        outcome.steps.append(step)
        if step.exceeds:
            outcome.confirmed_count = i
        working = step.remaining
        log.log(level, "%d / %d completed (R=%.4f, lambda=%.4f)",
                i, max_outliers, step.statistic, step.critical_value)

    return outcome
