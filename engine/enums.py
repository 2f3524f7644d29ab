"""
Enumerations for test direction, result thresholds, sampling granularity and trailing windows.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class Direction(str, Enum):
    pos = "pos"
    neg = "neg"
    both = "both"

    def tails(self) -> Tuple[bool, bool]:
        """Return ``(one_tail, upper_tail)`` for the ESD tester."""
        if self is Direction.pos:
            return True, True
        if self is Direction.neg:
            return True, False
        return False, True


class Threshold(str, Enum):
    med_max = "med_max"
    p95 = "p95"
    p99 = "p99"

    def quantile(self) -> float:
        if self is Threshold.med_max:
            return 0.5
        if self is Threshold.p95:
            return 0.95
        return 0.99


class Granularity(str, Enum):
    ms = "ms"
    sec = "sec"
    min = "min"
    hr = "hr"
    day = "day"


class OnlyLast(str, Enum):
    day = "day"
    hr = "hr"
