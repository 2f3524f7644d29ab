"""
Test cases for the periodic robust STL decomposition.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import numpy as np
import pytest

from conftest import seasonal_values
from engine.decomposition import decompose
from engine.exceptions import DecompositionError


def test_components_are_additive():
    vals = seasonal_values(period=12, cycles=6)
    parts = decompose(vals, 12)
    assert parts.seasonal.shape == vals.shape
    np.testing.assert_allclose(parts.seasonal + parts.trend + parts.remainder, vals)


def test_periodic_seasonal_repeats_every_cycle():
    vals = seasonal_values(period=12, cycles=6)
    parts = decompose(vals, 12)
    np.testing.assert_array_equal(parts.seasonal[:12], parts.seasonal[12:24])


def test_exact_cycle_leaves_no_remainder():
    vals = seasonal_values(period=12, cycles=4, noise=0.0)
    parts = decompose(vals, 12)
    assert np.max(np.abs(parts.remainder)) < 1e-8


def test_constant_series_decomposes_exactly():
    parts = decompose([3.0] * 24, 6)
    assert not parts.seasonal.any()
    assert not parts.remainder.any()
    assert (parts.trend == 3.0).all()


@pytest.mark.parametrize("bad", [float("inf"), float("nan")])
def test_non_finite_values_fail(bad):
    vals = seasonal_values(period=6, cycles=4)
    vals[5] = bad
    with pytest.raises(DecompositionError):
        decompose(vals, 6)


def test_too_short_for_period_fails():
    with pytest.raises(DecompositionError):
        decompose([1.0, 2.0, 3.0], 2)
