"""
Test cases for timestamp detection, formatting, granularity and minute aggregation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datetime import date, datetime, timezone

import numpy as np

from engine.enums import Granularity
from engine.timestamps import (
    aggregate_to_minutes,
    format_timestamp,
    from_epoch,
    granularity,
    is_datetime_like,
    to_epoch,
)


def test_is_datetime_like():
    assert is_datetime_like(datetime(2024, 1, 1))
    assert is_datetime_like(date(2024, 1, 1))
    assert is_datetime_like(np.datetime64("2024-01-01T00:00:00"))
    assert not is_datetime_like(1704067200.0)
    assert not is_datetime_like(3)


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 3, 5, 7, 8, 9)) == "2024-03-05 07:08:09"
    assert format_timestamp(np.datetime64("2024-03-05T07:08:09")) == "2024-03-05 07:08:09"
    assert format_timestamp(date(2024, 3, 5)) == "2024-03-05 00:00:00"


def test_epoch_round_trip_treats_naive_as_utc():
    dt = datetime(2024, 1, 1, 12, 30)
    assert to_epoch(dt) == 1704112200.0
    assert to_epoch(dt.replace(tzinfo=timezone.utc)) == 1704112200.0
    assert from_epoch(1704112200.0) == dt
    assert to_epoch(42) == 42.0


def test_from_epoch_keeps_requested_zone():
    aware = from_epoch(1704112200.0, timezone.utc)
    assert aware == datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)
    assert aware.tzinfo is timezone.utc


def test_granularity_uses_last_gap():
    assert granularity([0, 86400, 172800]) is Granularity.day
    assert granularity([0, 3600, 7200]) is Granularity.hr
    assert granularity([0, 60, 120]) is Granularity.min
    assert granularity([0, 1, 2]) is Granularity.sec
    assert granularity([0.0, 0.5, 1.0]) is Granularity.ms
    # only the last two timestamps matter
    assert granularity([0, 86400, 86460]) is Granularity.min


def test_aggregate_to_minutes_sums_buckets():
    epochs = [0, 20, 40, 60, 90, 185]
    values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    keys, sums = aggregate_to_minutes(epochs, values)
    assert keys == [0.0, 60.0, 180.0]
    assert sums == [6.0, 9.0, 6.0]
