"""
Test cases for end-to-end S-H-ESD detection over seasonal series.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import math

import numpy as np
import pytest

from config import settings
from conftest import hourly, seasonal_values
from engine.esd import detect_anoms
from engine.exceptions import InvalidConfiguration, InvalidInput


def test_single_spike_is_the_only_anomaly(spiky_series):
    ts, vals = spiky_series
    result = detect_anoms(timestamps=ts, values=vals, k=0.10, period_length=12)
    assert result.anomalies == [100]
    assert len(result.expected) == len(vals)


def test_high_level_series_keeps_a_usable_scale():
    vals = seasonal_values(period=12, cycles=14, base=1e11)
    vals[100] += 1000.0
    result = detect_anoms(values=vals.tolist(), k=0.10, period_length=12)
    assert result.anomalies == [100]


def test_accepts_pairs(spiky_series):
    ts, vals = spiky_series
    result = detect_anoms(list(zip(ts, vals)), k=0.10, period_length=12)
    assert result.anomalies == [100]


def test_values_only_uses_positions(spiky_series):
    _, vals = spiky_series
    result = detect_anoms(values=vals, k=0.10, period_length=12)
    assert result.anomalies == [100]


def test_exact_cycle_has_no_anomalies():
    vals = seasonal_values(period=12, cycles=4, noise=0.0)
    result = detect_anoms(values=vals, period_length=12)
    assert result.anomalies == []


@pytest.mark.parametrize("k", [0.05, 0.2, 0.49])
def test_constant_series_has_no_anomalies(k):
    result = detect_anoms(values=[7.0] * 48, k=k, period_length=12)
    assert result.anomalies == []
    assert {v for _, v in result.expected} == {7.0}


def test_missing_period_length_fails(spiky_series):
    ts, vals = spiky_series
    with pytest.raises(InvalidInput):
        detect_anoms(timestamps=ts, values=vals)


def test_short_series_fails():
    vals = seasonal_values(period=12, cycles=2)[:20]
    with pytest.raises(InvalidInput):
        detect_anoms(values=vals, period_length=12)


def test_no_series_fails():
    with pytest.raises(InvalidInput):
        detect_anoms(period_length=12)


def test_zero_budget_fails():
    vals = seasonal_values(period=4, cycles=3)
    with pytest.raises(InvalidConfiguration):
        detect_anoms(values=vals, k=0.05, period_length=4)


def test_anomalies_are_bounded_unique_and_known():
    vals = seasonal_values(period=12, cycles=10, seed=11)
    for i in (15, 40, 41, 77, 110):
        vals[i] += 18.0
    ts = list(range(1000, 1000 + len(vals)))
    k = 0.03
    result = detect_anoms(timestamps=ts, values=vals, k=k, period_length=12)
    assert len(result.anomalies) <= math.floor(len(vals) * k)
    assert len(set(result.anomalies)) == len(result.anomalies)
    assert set(result.anomalies) <= set(ts)


def test_negative_direction_finds_dips():
    vals = seasonal_values(period=12, cycles=14)
    vals[60] -= 20.0
    up = detect_anoms(values=vals, k=0.05, period_length=12)
    down = detect_anoms(values=vals, k=0.05, period_length=12, one_tail=True, upper_tail=False)
    both = detect_anoms(values=vals, k=0.05, period_length=12, one_tail=False)
    assert 60 not in up.anomalies
    assert down.anomalies == [60]
    assert both.anomalies == [60]


def test_classical_esd_mode_finds_spike(spiky_series):
    ts, vals = spiky_series
    result = detect_anoms(timestamps=ts, values=vals, k=0.10, period_length=12, use_esd=True)
    assert result.anomalies == [100]


def test_without_decomposition_still_finds_spike():
    vals = [10.0 + (i % 3) * 0.1 for i in range(60)]
    vals[33] = 40.0
    result = detect_anoms(values=vals, k=0.1, period_length=6, use_decomp=False)
    assert result.anomalies == [33]
    assert {v for _, v in result.expected} == {10.0}


def test_datetime_series_returns_original_timestamps(hourly_start):
    vals = seasonal_values(period=24, cycles=14)
    vals[250] += 20.0
    ts = hourly(hourly_start, len(vals))
    result = detect_anoms(list(zip(ts, vals)), k=0.02, period_length=24)
    assert result.anomalies == [ts[250]]
    assert result.expected[0][0] == "2024-01-01 00:00:00"


def test_identical_inputs_give_identical_outputs(spiky_series):
    ts, vals = spiky_series
    first = detect_anoms(timestamps=ts, values=vals, k=0.2, period_length=12)
    second = detect_anoms(timestamps=ts, values=vals, k=0.2, period_length=12)
    assert first == second


def test_defaults_come_from_settings(monkeypatch, spiky_series):
    ts, vals = spiky_series
    monkeypatch.setattr(settings, "esd_default_k", 0.001)
    with pytest.raises(InvalidConfiguration):
        detect_anoms(timestamps=ts, values=vals, period_length=12)


def test_verbose_logs_progress(caplog, spiky_series):
    ts, vals = spiky_series
    with caplog.at_level("INFO"):
        detect_anoms(timestamps=ts, values=vals, k=0.05, period_length=12, verbose=True)
    assert any("completed" in r.getMessage() for r in caplog.records)
