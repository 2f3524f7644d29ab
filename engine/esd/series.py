"""
Working series for the iterative ESD test: an immutable (timestamp, residual) sequence that yields a new, one-shorter series for every removed point.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class WorkingSeries:
    timestamps: Tuple[Any, ...]
    values: np.ndarray

    @classmethod
    def of(cls, timestamps: Sequence[Any], values: Sequence[float]) -> WorkingSeries:
        arr = np.array(values, dtype=float)
        arr.setflags(write=False)
        if len(timestamps) != arr.size:
            raise ValueError("timestamps and values must have the same length")
        return cls(timestamps=tuple(timestamps), values=arr)

    def __len__(self) -> int:
        return len(self.timestamps)

    def without(self, index: int) -> WorkingSeries:
        arr = np.delete(self.values, index)
        arr.setflags(write=False)
        return WorkingSeries(
            timestamps=self.timestamps[:index] + self.timestamps[index + 1:],
            values=arr,
        )
