import os
import sys
from datetime import datetime, timedelta

import numpy as np
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


def seasonal_values(period, cycles, amplitude=10.0, base=50.0, noise=1.0, seed=7):
    """Sine pattern plus bounded uniform noise; ``noise=0`` gives an exact cycle."""
    n = period * cycles
    idx = np.arange(n)
    vals = base + amplitude * np.sin(2 * np.pi * idx / period)
    if noise:
        vals = vals + np.random.default_rng(seed).uniform(-noise, noise, n)
    return vals


@pytest.fixture
def spiky_series():
    vals = seasonal_values(period=12, cycles=14)
    vals[100] += 20.0
    return list(range(len(vals))), vals.tolist()


@pytest.fixture
def hourly_start():
    return datetime(2024, 1, 1)


def hourly(start, count):
    return [start + timedelta(hours=h) for h in range(count)]
